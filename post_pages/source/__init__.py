"""Content source adapter: interface, wire types, and the HTTP client."""

from .base import ContentSource, at, ordering
from .documents import ApiInfo, Document, Ref, SearchResponse
from .prismic import PrismicClient, build_session

__all__ = [
    "ApiInfo",
    "ContentSource",
    "Document",
    "PrismicClient",
    "Ref",
    "SearchResponse",
    "at",
    "build_session",
    "ordering",
]
