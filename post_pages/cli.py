"""Cyclopts CLI entrypoint for building and serving blog post pages.

The ``post-pages`` console script pre-renders the most relevant posts from
the headless CMS, renders any other post on demand (optionally against a
preview ref), lists the pre-render set, and regenerates pages whose
staleness interval has elapsed.

Examples
--------
Pre-render the configured set of posts:

>>> from post_pages.cli import main
>>> main()  # doctest: +SKIP

Render a draft through its preview ref:

>>> from post_pages.cli import app
>>> app(["render", "hooks-guide", "--preview-ref", "abc123"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .builder import StaticSiteBuilder
from .config import load_site_config
from .errors import PostNotFoundError, PostPagesError
from .models import PreviewSession

DEFAULT_CONFIG = Path("config/site.yaml")

app = App(name="post-pages", config=cyclopts.config.Env("INPUT_", command=False))  # type: ignore[unknown-argument]

ConfigOption = typ.Annotated[
    Path, Parameter(help="Path to site config", env_var="INPUT_CONFIG")
]
LogLevelOption = typ.Annotated[
    str, Parameter(help="Logging level", env_var="INPUT_LOG_LEVEL")
]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(), format="%(levelname)s %(name)s: %(message)s"
    )


def _builder(config: Path) -> StaticSiteBuilder:
    return StaticSiteBuilder.from_config(load_site_config(config))


@app.command(help="Pre-render the most relevant posts to static HTML.")
def build(
    *, config: ConfigOption = DEFAULT_CONFIG, log_level: LogLevelOption = "warning"
) -> None:
    """Render every enumerated post and report per-page failures.

    Parameters
    ----------
    config : Path, optional
        Path to the ``site.yaml`` configuration file (overridable via
        ``INPUT_CONFIG``).
    log_level : str, optional
        Logging level for library diagnostics.

    Raises
    ------
    SystemExit
        With status 1 when any page failed to build; the other pages are
        still written.
    """
    _configure_logging(log_level)
    report = _builder(config).build()
    for path in report.written:
        print(f"wrote {_format_path(path)}")
    for slug, reason in sorted(report.failed.items()):
        print(f"failed {slug}: {reason}", file=sys.stderr)
    if not report.ok:
        raise SystemExit(1)


@app.command(help="Render a single post on demand, optionally as a preview.")
def render(
    slug: str,
    *,
    preview_ref: typ.Annotated[
        str | None,
        Parameter(help="Draft ref to preview", env_var="INPUT_PREVIEW_REF"),
    ] = None,
    output: typ.Annotated[
        Path | None, Parameter(help="Write the HTML here instead of stdout")
    ] = None,
    config: ConfigOption = DEFAULT_CONFIG,
    log_level: LogLevelOption = "warning",
) -> None:
    """Render ``slug`` through the loading and rendered states.

    Parameters
    ----------
    slug : str
        Post slug to render.
    preview_ref : str or None, optional
        Ref of an unpublished revision; when set the page shows the draft and
        is never cached.
    output : Path or None, optional
        File receiving the HTML; printed to stdout when omitted.
    config : Path, optional
        Path to the site configuration file.
    log_level : str, optional
        Logging level for library diagnostics.

    Raises
    ------
    SystemExit
        With status 1 when the post does not exist.
    """
    _configure_logging(log_level)
    preview = PreviewSession(ref=preview_ref) if preview_ref else None
    try:
        view = _builder(config).render_on_demand(slug, preview=preview)
    except PostNotFoundError as exc:
        print(f"404: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
    except PostPagesError as exc:
        print(f"error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
    html = view.render()
    if output is None:
        print(html)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(html, encoding="utf-8")
    print(f"wrote {_format_path(output)}")


@app.command(help="List the slugs selected for pre-rendering.")
def paths(
    *, config: ConfigOption = DEFAULT_CONFIG, log_level: LogLevelOption = "warning"
) -> None:
    """Print one pre-render slug per line."""
    _configure_logging(log_level)
    static_paths = _builder(config).assembler.get_static_paths()
    for slug in static_paths.slugs:
        print(f"/post/{slug}")


@app.command(help="Rebuild pages whose staleness interval has elapsed.")
def regenerate(
    *, config: ConfigOption = DEFAULT_CONFIG, log_level: LogLevelOption = "warning"
) -> None:
    """Regenerate stale pages, keeping the old file when a rebuild fails."""
    _configure_logging(log_level)
    report = _builder(config).regenerate_stale()
    for path in report.written:
        print(f"regenerated {_format_path(path)}")
    for slug, reason in sorted(report.failed.items()):
        print(f"failed {slug}: {reason}", file=sys.stderr)
    if not report.ok:
        raise SystemExit(1)


def main() -> None:
    """Invoke the Cyclopts application that powers ``post-pages``."""
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
