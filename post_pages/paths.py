"""Choose which post pages are rendered ahead of request time."""

from __future__ import annotations

import logging
import typing as typ

from ._constants import PRERENDER_LIMIT
from .errors import SourceUnavailableError
from .models import StaticPaths
from .source import at

if typ.TYPE_CHECKING:
    from .source import ContentSource

logger = logging.getLogger(__name__)


def enumerate_static_paths(
    source: ContentSource, document_type: str, *, limit: int = PRERENDER_LIMIT
) -> StaticPaths:
    """Return up to ``limit`` slugs to pre-render.

    Every other slug is still servable on demand (``fallback`` is always
    true). An unreachable source yields an empty set instead of failing the
    build.
    """
    if limit <= 0:
        return StaticPaths(slugs=())
    try:
        documents = source.query([at("document.type", document_type)], page_size=limit)
    except SourceUnavailableError as exc:
        logger.warning("path enumeration skipped, all pages render on demand: %s", exc)
        return StaticPaths(slugs=())
    slugs = tuple(doc.uid for doc in documents[:limit] if doc.uid)
    return StaticPaths(slugs=slugs)


__all__ = ["enumerate_static_paths"]
