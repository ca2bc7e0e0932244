"""Load site configuration YAML into typed dataclasses."""

from __future__ import annotations

import os
import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from post_pages.errors import SiteConfigError

from .helpers import (
    _build_build_config,
    _build_comments_config,
    _build_theme_config,
    _optional_str,
    _section,
)
from .models import SiteConfig, SourceConfig

ACCESS_TOKEN_ENV = "PRISMIC_ACCESS_TOKEN"


def load_site_config(path: Path) -> SiteConfig:
    """Load the YAML configuration describing the content source and build.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration file (for example,
        ``config/site.yaml``).

    Returns
    -------
    SiteConfig
        Parsed configuration with source, theme, build, and optional comment
        embed settings.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    SiteConfigError
        If the top-level structure is not a mapping, ``source.api_endpoint``
        is missing, or a numeric setting is invalid.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from post_pages.config import load_site_config
    >>> config = load_site_config(Path("config/site.yaml"))  # doctest: +SKIP
    >>> config.build.revalidate_seconds  # doctest: +SKIP
    1800
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise SiteConfigError(msg)
    raw: dict[str, typ.Any] = dict(loaded)

    site_raw = _section(raw, "site")
    source = _build_source_config(_section(raw, "source"))
    return SiteConfig(
        source=source,
        output_dir=Path(site_raw.get("output_dir", "public")),
        theme=_build_theme_config(site_raw),
        build=_build_build_config(_section(raw, "build")),
        comments=_build_comments_config(_section(raw, "comments")),
    )


def _build_source_config(payload: typ.Mapping[str, typ.Any]) -> SourceConfig:
    """Build the SourceConfig, falling back to the environment for the token."""
    endpoint = _optional_str(payload.get("api_endpoint"))
    if not endpoint:
        msg = "Configuration is missing 'source.api_endpoint'."
        raise SiteConfigError(msg)
    base = SourceConfig(api_endpoint=endpoint)
    token = _optional_str(payload.get("access_token")) or os.getenv(ACCESS_TOKEN_ENV)
    return SourceConfig(
        api_endpoint=endpoint.rstrip("/"),
        access_token=token or None,
        document_type=payload.get("document_type", base.document_type),
        timeout=float(payload.get("timeout", base.timeout)),
    )


__all__ = ["ACCESS_TOKEN_ENV", "load_site_config"]
