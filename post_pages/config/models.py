"""Typed dataclasses describing post page site configuration."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

from post_pages._constants import (
    DEFAULT_DOCUMENT_TYPE,
    PREVIEW_EXIT_HREF,
    PRERENDER_LIMIT,
    REVALIDATE_SECONDS,
)
from post_pages.errors import SiteConfigError


@dc.dataclass(frozen=True, slots=True)
class SourceConfig:
    """Connection details for the headless CMS."""

    api_endpoint: str
    access_token: str | None = None
    document_type: str = DEFAULT_DOCUMENT_TYPE
    timeout: float = 10.0


@dc.dataclass(frozen=True, slots=True)
class BuildConfig:
    """Pre-render and regeneration settings."""

    prerender_limit: int = PRERENDER_LIMIT
    revalidate_seconds: int = REVALIDATE_SECONDS
    max_workers: int = 4


@dc.dataclass(frozen=True, slots=True)
class CommentsConfig:
    """Settings for the comment-thread embed attached to each post."""

    repo: str
    issue_term: str = "pathname"
    label: str = "blog-comment"
    theme: str = "github-dark"
    script_src: str = "https://utteranc.es/client.js"


@dc.dataclass(frozen=True, slots=True)
class ThemeConfig:
    """Site-wide presentation settings."""

    site_name: str = "spacetraveling"
    date_format: str = "%d %b %Y"
    pygments_style: str = "monokai"
    preview_exit_href: str = PREVIEW_EXIT_HREF


@dc.dataclass(frozen=True, slots=True)
class SiteConfig:
    """Fully resolved configuration for a post page build."""

    source: SourceConfig
    output_dir: Path = Path("public")
    theme: ThemeConfig = dc.field(default_factory=ThemeConfig)
    build: BuildConfig = dc.field(default_factory=BuildConfig)
    comments: CommentsConfig | None = None

    @property
    def posts_dir(self) -> Path:
        """Return the directory holding rendered post pages."""
        return self.output_dir / "post"


__all__ = [
    "BuildConfig",
    "CommentsConfig",
    "SiteConfig",
    "SiteConfigError",
    "SourceConfig",
    "ThemeConfig",
]
