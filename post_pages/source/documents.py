"""Wire types for the content source's REST payloads."""

from __future__ import annotations

import typing as typ

import msgspec


class Document(msgspec.Struct, frozen=True):
    """A raw document as returned by the source API.

    ``data`` is kept as a plain mapping; the fetcher normalises it into a
    :class:`~post_pages.models.Post`.
    """

    id: str
    type: str = ""
    uid: str | None = None
    first_publication_date: str | None = None
    last_publication_date: str | None = None
    data: dict[str, typ.Any] = msgspec.field(default_factory=dict)


class SearchResponse(msgspec.Struct):
    """One page of results from ``/documents/search``."""

    results: list[Document] = msgspec.field(default_factory=list)
    page: int = 1
    total_pages: int = 1
    next_page: str | None = None


class Ref(msgspec.Struct):
    """A content state (published master or a release/preview) of the repo."""

    id: str
    ref: str
    label: str | None = None
    is_master_ref: bool = msgspec.field(default=False, name="isMasterRef")


class ApiInfo(msgspec.Struct):
    """Subset of the API entry point payload needed to find the master ref."""

    refs: list[Ref] = msgspec.field(default_factory=list)

    def master_ref(self) -> str | None:
        """Return the master ref token, if the payload advertises one."""
        for candidate in self.refs:
            if candidate.is_master_ref:
                return candidate.ref
        return None


__all__ = ["ApiInfo", "Document", "Ref", "SearchResponse"]
