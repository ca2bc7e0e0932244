"""Assemble the data a post page needs, for builds and preview requests.

:class:`PageAssembler` is the entry point used by both the static builder and
on-demand rendering. It sequences the post fetch before sibling resolution
(siblings need the resolved document id), estimates reading time, and
attaches the staleness hint.

Example
-------
>>> from post_pages.assembler import PageAssembler
>>> from post_pages.models import PreviewSession
>>> assembler = PageAssembler(source, document_type="posts")  # doctest: +SKIP
>>> props = assembler.get_page_props("hooks-guide")  # doctest: +SKIP
>>> props.revalidate  # doctest: +SKIP
1800
>>> assembler.get_page_props(  # doctest: +SKIP
...     "hooks-guide", preview=PreviewSession(ref="draft-ref")
... ).revalidate is None
True
"""

from __future__ import annotations

import logging
import typing as typ

from ._constants import DEFAULT_DOCUMENT_TYPE, PRERENDER_LIMIT, REVALIDATE_SECONDS
from .fetcher import fetch_post
from .models import PageContext, PageProps
from .paths import enumerate_static_paths
from .reading_time import estimate_read_time
from .siblings import SiblingResolver

if typ.TYPE_CHECKING:
    from .config import SiteConfig
    from .models import PreviewSession, StaticPaths
    from .source import ContentSource

logger = logging.getLogger(__name__)


class PageAssembler:
    """Build :class:`PageProps` for one post page at a time.

    Instances hold only read-only collaborators, so one assembler can serve
    concurrent builds for different slugs.
    """

    def __init__(
        self,
        source: ContentSource,
        *,
        document_type: str = DEFAULT_DOCUMENT_TYPE,
        prerender_limit: int = PRERENDER_LIMIT,
        revalidate_seconds: int = REVALIDATE_SECONDS,
    ) -> None:
        self.source = source
        self.document_type = document_type
        self.prerender_limit = prerender_limit
        self.revalidate_seconds = revalidate_seconds
        self.siblings = SiblingResolver(source, document_type)

    @classmethod
    def from_config(cls, config: SiteConfig, source: ContentSource) -> PageAssembler:
        """Return an assembler configured from ``config``."""
        return cls(
            source,
            document_type=config.source.document_type,
            prerender_limit=config.build.prerender_limit,
            revalidate_seconds=config.build.revalidate_seconds,
        )

    def get_static_paths(self) -> StaticPaths:
        """Return the slugs to render ahead of time."""
        return enumerate_static_paths(
            self.source, self.document_type, limit=self.prerender_limit
        )

    def get_page_props(
        self, slug: str, *, preview: PreviewSession | None = None
    ) -> PageProps:
        """Fetch and package everything the page for ``slug`` renders.

        Parameters
        ----------
        slug : str
            Routing key of the post.
        preview : PreviewSession, optional
            Draft ref to display instead of the published content. Preview
            pages are never cached, so ``revalidate`` is ``None``.

        Raises
        ------
        PostNotFoundError
            When ``slug`` does not exist (a page-level 404).
        SourceUnavailableError
            When the source fails; only this page's build fails.
        """
        post = fetch_post(self.source, self.document_type, slug, preview)
        ref = preview.ref if preview else None
        before, after = self.siblings.resolve(post.id, ref=ref)
        context = PageContext(
            post=post,
            preview=preview is not None,
            before=before,
            after=after,
            read_time=estimate_read_time(post.content),
        )
        revalidate = None if preview else self.revalidate_seconds
        logger.debug("assembled %s (preview=%s)", slug, context.preview)
        return PageProps(context=context, revalidate=revalidate)


__all__ = ["PageAssembler"]
