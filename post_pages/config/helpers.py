"""Utility helpers shared by the configuration loader."""

from __future__ import annotations

import typing as typ

from post_pages.errors import SiteConfigError

from .models import BuildConfig, CommentsConfig, ThemeConfig


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _section(raw: typ.Mapping[str, typ.Any], name: str) -> typ.Mapping[str, typ.Any]:
    """Return the mapping stored under ``name`` or an empty mapping."""
    value = raw.get(name) or {}
    if not isinstance(value, dict):
        msg = f"Configuration section '{name}' must be a mapping."
        raise SiteConfigError(msg)
    return value


def _non_negative_int(value: object, *, field: str) -> int:
    """Coerce ``value`` into a positive integer or raise ``SiteConfigError``."""
    try:
        number = int(typ.cast("typ.Any", value))
    except (TypeError, ValueError) as exc:
        msg = f"'{field}' must be an integer, got {value!r}."
        raise SiteConfigError(msg) from exc
    if number < 0:
        msg = f"'{field}' must not be negative, got {number}."
        raise SiteConfigError(msg)
    return number


def _build_theme_config(payload: typ.Mapping[str, typ.Any]) -> ThemeConfig:
    """Build a ThemeConfig instance from the ``site`` mapping."""
    base = ThemeConfig()
    return ThemeConfig(
        site_name=payload.get("name", base.site_name),
        date_format=payload.get("date_format", base.date_format),
        pygments_style=payload.get("pygments_style", base.pygments_style),
        preview_exit_href=payload.get("preview_exit_href", base.preview_exit_href),
    )


def _build_build_config(payload: typ.Mapping[str, typ.Any]) -> BuildConfig:
    """Build a BuildConfig from the ``build`` mapping, validating numbers."""
    base = BuildConfig()
    return BuildConfig(
        prerender_limit=_non_negative_int(
            payload.get("prerender_limit", base.prerender_limit),
            field="build.prerender_limit",
        ),
        revalidate_seconds=_non_negative_int(
            payload.get("revalidate_seconds", base.revalidate_seconds),
            field="build.revalidate_seconds",
        ),
        max_workers=max(
            1,
            _non_negative_int(
                payload.get("max_workers", base.max_workers), field="build.max_workers"
            ),
        ),
    )


def _build_comments_config(
    payload: typ.Mapping[str, typ.Any],
) -> CommentsConfig | None:
    """Return the comment embed settings, or None when no repo is configured."""
    repo = _optional_str(payload.get("repo"))
    if not repo:
        return None
    base = CommentsConfig(repo=repo)
    return CommentsConfig(
        repo=repo,
        issue_term=payload.get("issue_term", base.issue_term),
        label=payload.get("label", base.label),
        theme=payload.get("theme", base.theme),
        script_src=payload.get("script_src", base.script_src),
    )


__all__ = [
    "_build_build_config",
    "_build_comments_config",
    "_build_theme_config",
    "_optional_str",
    "_non_negative_int",
    "_section",
]
