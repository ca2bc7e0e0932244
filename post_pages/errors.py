"""Exception hierarchy for the post page pipeline."""

from __future__ import annotations


class PostPagesError(Exception):
    """Base exception for every post_pages failure."""


class PostNotFoundError(PostPagesError):
    """Raised when no document matches the requested slug.

    Callers surface this as a page-level 404; it is never recovered.
    """

    def __init__(self, slug: str, *, ref: str | None = None) -> None:
        location = f" at ref '{ref}'" if ref else ""
        super().__init__(f"Post '{slug}' not found{location}")
        self.slug = slug
        self.ref = ref


class SourceUnavailableError(PostPagesError):
    """Raised when the content source cannot be reached or answers badly."""

    def __init__(self, endpoint: str, reason: str) -> None:
        super().__init__(f"Content source at {endpoint} is unavailable: {reason}")
        self.endpoint = endpoint
        self.reason = reason


class InvalidSlugError(PostPagesError, ValueError):
    """Raised when a slug cannot be mapped to a page file."""

    def __init__(self, slug: str) -> None:
        super().__init__(f"Slug {slug!r} cannot be written as a page")
        self.slug = slug


class SiteConfigError(PostPagesError, ValueError):
    """Raised when the site configuration is invalid or incomplete."""


__all__ = [
    "InvalidSlugError",
    "PostNotFoundError",
    "PostPagesError",
    "SiteConfigError",
    "SourceUnavailableError",
]
