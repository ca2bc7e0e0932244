"""Load and validate site configuration YAML for post page builds.

This subpackage parses the project's ``site.yaml`` file and produces frozen
dataclasses (:class:`SiteConfig`, :class:`SourceConfig`, etc.) that the
assembler, builder, and CLI consume. The primary entry point is
:func:`load_site_config`.

Examples
--------
>>> from pathlib import Path
>>> from post_pages.config import load_site_config
>>> site = load_site_config(Path("config/site.yaml"))  # doctest: +SKIP
>>> site.source.document_type  # doctest: +SKIP
'posts'
"""

from .loader import ACCESS_TOKEN_ENV, load_site_config
from .models import (
    BuildConfig,
    CommentsConfig,
    SiteConfig,
    SiteConfigError,
    SourceConfig,
    ThemeConfig,
)

__all__ = [
    "ACCESS_TOKEN_ENV",
    "BuildConfig",
    "CommentsConfig",
    "SiteConfig",
    "SiteConfigError",
    "SourceConfig",
    "ThemeConfig",
    "load_site_config",
]
