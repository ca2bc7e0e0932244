"""Interface of the content source consumed by the page pipeline.

The pipeline only needs two operations: fetch one document by slug, and run
an ordered predicate query with an optional cursor. Anything satisfying
:class:`ContentSource` can back a build, which keeps tests free of HTTP.

Example
-------
>>> from post_pages.source.base import at, ordering
>>> at("document.type", "posts")
'[at(document.type, "posts")]'
>>> ordering("document.first_publication_date", descending=True)
'document.first_publication_date desc'
"""

from __future__ import annotations

import collections.abc as cabc
import json
import typing as typ

if typ.TYPE_CHECKING:
    from .documents import Document


class ContentSource(typ.Protocol):
    """Read-only access to a remote document store."""

    def get_by_uid(
        self, document_type: str, uid: str, *, ref: str | None = None
    ) -> Document:
        """Return the document of ``document_type`` whose slug is ``uid``.

        Raises
        ------
        PostNotFoundError
            When no document matches.
        SourceUnavailableError
            When the source cannot be reached.
        """
        ...

    def query(
        self,
        predicates: cabc.Sequence[str],
        *,
        orderings: cabc.Sequence[str] = (),
        page_size: int = 20,
        after: str | None = None,
        ref: str | None = None,
    ) -> list[Document]:
        """Return documents matching every predicate, in the requested order.

        ``after`` is a document id; only documents positioned strictly after
        it in the requested order are returned.
        """
        ...


def at(path: str, value: str) -> str:
    """Return an equality predicate on ``path``."""
    return f"[at({path}, {json.dumps(value)})]"


def ordering(field: str, *, descending: bool = False) -> str:
    """Return a single ordering clause."""
    return f"{field} desc" if descending else field


def encode_predicates(predicates: cabc.Sequence[str]) -> str:
    """Join predicates into the bracketed ``q`` parameter format."""
    return "[" + "".join(predicates) + "]"


def encode_orderings(orderings: cabc.Sequence[str]) -> str | None:
    """Join ordering clauses into the bracketed ``orderings`` parameter."""
    if not orderings:
        return None
    return "[" + ",".join(orderings) + "]"


__all__ = [
    "ContentSource",
    "at",
    "encode_orderings",
    "encode_predicates",
    "ordering",
]
