"""Resolve the chronologically previous and next posts.

Both neighbours are found with a cursor query positioned after the current
post: ascending by first publication date for the next post and descending
for the previous one. Posts sharing a publication timestamp keep whatever
order the source returns.
"""

from __future__ import annotations

import logging
import typing as typ
from concurrent.futures import ThreadPoolExecutor

from .fetcher import document_to_sibling
from .source import at, ordering

if typ.TYPE_CHECKING:
    from .models import SiblingRef
    from .source import ContentSource

logger = logging.getLogger(__name__)

PUBLICATION_FIELD = "document.first_publication_date"


class SiblingResolver:
    """Find the posts adjacent to a given post."""

    def __init__(self, source: ContentSource, document_type: str) -> None:
        self.source = source
        self.document_type = document_type

    def resolve(
        self, post_id: str, *, ref: str | None = None
    ) -> tuple[SiblingRef | None, SiblingRef | None]:
        """Return ``(before, after)`` for the post with document id ``post_id``.

        The two queries are independent and run concurrently. A missing
        neighbour is ``None``; source failures propagate.
        """
        with ThreadPoolExecutor(max_workers=2) as executor:
            before = executor.submit(self.previous, post_id, ref=ref)
            after = executor.submit(self.next, post_id, ref=ref)
            return before.result(), after.result()

    def previous(self, post_id: str, *, ref: str | None = None) -> SiblingRef | None:
        """Return the post published immediately before ``post_id``."""
        return self._neighbour(post_id, descending=True, ref=ref)

    def next(self, post_id: str, *, ref: str | None = None) -> SiblingRef | None:
        """Return the post published immediately after ``post_id``."""
        return self._neighbour(post_id, descending=False, ref=ref)

    def _neighbour(
        self, post_id: str, *, descending: bool, ref: str | None
    ) -> SiblingRef | None:
        results = self.source.query(
            [at("document.type", self.document_type)],
            orderings=[ordering(PUBLICATION_FIELD, descending=descending)],
            page_size=1,
            after=post_id,
            ref=ref,
        )
        if not results:
            logger.debug(
                "no %s sibling for %s", "previous" if descending else "next", post_id
            )
            return None
        return document_to_sibling(results[0])


__all__ = ["PUBLICATION_FIELD", "SiblingResolver"]
