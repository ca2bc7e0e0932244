r"""HTTP client for a Prismic-style document API.

This module wraps the two endpoints the page pipeline needs: the API entry
point (to discover the published master ref) and ``/documents/search`` (for
slug lookups and ordered cursor queries). Transport errors, HTTP failures,
and malformed payloads are translated into
:class:`~post_pages.errors.SourceUnavailableError`.

Example
-------
>>> from post_pages.source import PrismicClient, at
>>> client = PrismicClient("https://blog.cdn.prismic.io/api/v2")  # doctest: +SKIP
>>> docs = client.query([at("document.type", "posts")], page_size=2)  # doctest: +SKIP
>>> [doc.uid for doc in docs]  # doctest: +SKIP
['hooks-guide', 'cra-from-scratch']
"""

from __future__ import annotations

import collections.abc as cabc
import logging
import threading
import typing as typ
from http import HTTPStatus

import msgspec
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from post_pages.errors import PostNotFoundError, SourceUnavailableError

from .base import at, encode_orderings, encode_predicates
from .documents import ApiInfo, Document, SearchResponse

logger = logging.getLogger(__name__)

_ACCEPT_HEADER = "application/json"
_T = typ.TypeVar("_T")


def build_session() -> requests.Session:
    """Return a session that retries idempotent reads on transient failures."""
    session = requests.Session()
    retry = Retry(
        total=5,
        read=5,
        connect=3,
        backoff_factor=0.5,
        status_forcelist=(500, 502, 503, 504),
        allowed_methods=("GET", "HEAD"),
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


class PrismicClient:
    """Thin client over the document search API.

    The client is safe to share between threads while it only serves reads:
    the lazily discovered master ref is guarded by a lock and every request
    is an independent GET.
    """

    def __init__(
        self,
        api_endpoint: str,
        *,
        access_token: str | None = None,
        session: requests.Session | None = None,
        timeout: float = 10.0,
    ) -> None:
        """Initialise the client.

        Parameters
        ----------
        api_endpoint : str
            Base URL of the API, e.g. ``https://repo.cdn.prismic.io/api/v2``.
        access_token : str | None, optional
            Token for private repositories; sent as ``access_token``.
        session : requests.Session, optional
            Preconfigured session; defaults to :func:`build_session`.
        timeout : float, optional
            Per-request timeout in seconds. Defaults to ``10.0``.
        """
        self.api_endpoint = api_endpoint.rstrip("/")
        self._access_token = access_token
        self._session = session or build_session()
        self.timeout = timeout
        self._master_ref: str | None = None
        self._ref_lock = threading.Lock()
        self._headers = {"Accept": _ACCEPT_HEADER, "User-Agent": "post-pages/0.1"}

    def master_ref(self) -> str:
        """Return the published content ref, fetching it once per client."""
        with self._ref_lock:
            if self._master_ref is None:
                payload = self._get(self.api_endpoint, {})
                info = self._decode(payload, ApiInfo)
                ref = info.master_ref()
                if not ref:
                    raise SourceUnavailableError(
                        self.api_endpoint, "API did not advertise a master ref"
                    )
                self._master_ref = ref
            return self._master_ref

    def get_by_uid(
        self, document_type: str, uid: str, *, ref: str | None = None
    ) -> Document:
        """Return the ``document_type`` document whose slug is ``uid``.

        When ``ref`` is given (a preview or release ref) the lookup sees that
        content state instead of the published one.
        """
        results = self.query(
            [at(f"my.{document_type}.uid", uid)], page_size=1, ref=ref
        )
        if not results:
            raise PostNotFoundError(uid, ref=ref)
        return results[0]

    def query(
        self,
        predicates: cabc.Sequence[str],
        *,
        orderings: cabc.Sequence[str] = (),
        page_size: int = 20,
        after: str | None = None,
        ref: str | None = None,
    ) -> list[Document]:
        """Run a predicate query and return the first page of results."""
        params: dict[str, str] = {
            "ref": ref or self.master_ref(),
            "q": encode_predicates(predicates),
            "pageSize": str(page_size),
        }
        encoded_orderings = encode_orderings(orderings)
        if encoded_orderings:
            params["orderings"] = encoded_orderings
        if after:
            params["after"] = after
        payload = self._get(f"{self.api_endpoint}/documents/search", params)
        return self._decode(payload, SearchResponse).results

    def close(self) -> None:
        """Release pooled connections held by the session."""
        self._session.close()

    def _get(self, url: str, params: dict[str, str]) -> bytes:
        if self._access_token:
            params = {**params, "access_token": self._access_token}
        logger.debug("GET %s q=%s after=%s", url, params.get("q"), params.get("after"))
        try:
            response = self._session.get(
                url, params=params, headers=self._headers, timeout=self.timeout
            )
        except requests.RequestException as exc:
            raise SourceUnavailableError(self.api_endpoint, str(exc)) from exc

        if response.status_code >= HTTPStatus.BAD_REQUEST:
            snippet = response.text[:200]
            reason = f"HTTP {response.status_code}: {snippet}"
            raise SourceUnavailableError(self.api_endpoint, reason)
        return response.content

    def _decode(self, payload: bytes, kind: type[_T]) -> _T:
        try:
            return msgspec.json.decode(payload, type=kind)
        except msgspec.DecodeError as exc:
            reason = f"malformed {kind.__name__} payload: {exc}"
            raise SourceUnavailableError(self.api_endpoint, reason) from exc


__all__ = ["PrismicClient", "build_session"]
