"""Static build and background regeneration of post pages.

:class:`StaticSiteBuilder` renders the pre-render set into
``{output_dir}/post/{slug}.html`` alongside a small metadata file recording
when each page was generated and when it becomes stale. Pages outside the
pre-render set are rendered on demand through :meth:`render_on_demand`.

Failures are per artifact: a page whose fetch fails is reported in the
:class:`BuildReport` while every other page is still written.

Example
-------
>>> from pathlib import Path
>>> from post_pages.config import load_site_config
>>> from post_pages.builder import StaticSiteBuilder
>>> config = load_site_config(Path("config/site.yaml"))  # doctest: +SKIP
>>> report = StaticSiteBuilder.from_config(config).build()  # doctest: +SKIP
>>> [path.name for path in report.written]  # doctest: +SKIP
['hooks-guide.html', 'cra-from-scratch.html']
"""

from __future__ import annotations

import dataclasses as dc
import datetime as dt
import json
import logging
import os
import tempfile
import typing as typ
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from urllib.parse import quote, unquote

from ._constants import PAGE_META_TEMPLATE
from .assembler import PageAssembler
from .errors import InvalidSlugError, PostPagesError
from .fetcher import parse_timestamp
from .render_state import PostPageView
from .renderer import PageRenderer
from .source import PrismicClient

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .config import CommentsConfig, SiteConfig
    from .models import PageProps, PreviewSession
    from .source import ContentSource

logger = logging.getLogger(__name__)


@dc.dataclass(slots=True)
class BuildReport:
    """Outcome of a build: written pages and per-slug failures."""

    written: list[Path] = dc.field(default_factory=list)
    failed: dict[str, str] = dc.field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Return True when every page was written."""
        return not self.failed


class StaticSiteBuilder:
    """Render post pages to disk and keep them fresh."""

    def __init__(
        self,
        assembler: PageAssembler,
        renderer: PageRenderer,
        output_dir: Path,
        *,
        comments: CommentsConfig | None = None,
        max_workers: int = 4,
    ) -> None:
        """Initialize the builder.

        Parameters
        ----------
        assembler : PageAssembler
            Produces page data for each slug.
        renderer : PageRenderer
            Turns page data into HTML.
        output_dir : Path
            Directory receiving ``{slug}.html`` and metadata files.
        comments : CommentsConfig, optional
            Comment widget settings passed to each view.
        max_workers : int, optional
            Number of pages built concurrently. Defaults to ``4``.
        """
        self.assembler = assembler
        self.renderer = renderer
        self.output_dir = output_dir
        self.comments = comments
        self.max_workers = max_workers

    @classmethod
    def from_config(
        cls, config: SiteConfig, source: ContentSource | None = None
    ) -> StaticSiteBuilder:
        """Return a builder wired from ``config``, creating an HTTP client if needed."""
        if source is None:
            source = PrismicClient(
                config.source.api_endpoint,
                access_token=config.source.access_token,
                timeout=config.source.timeout,
            )
        renderer = PageRenderer(
            site_name=config.theme.site_name,
            date_format=config.theme.date_format,
            pygments_style=config.theme.pygments_style,
            preview_exit_href=config.theme.preview_exit_href,
        )
        return cls(
            PageAssembler.from_config(config, source),
            renderer,
            config.posts_dir,
            comments=config.comments,
            max_workers=config.build.max_workers,
        )

    def build(self) -> BuildReport:
        """Render every enumerated slug; an empty enumeration is not an error."""
        paths = self.assembler.get_static_paths()
        return self.build_slugs(paths.slugs)

    def build_slugs(self, slugs: cabc.Iterable[str]) -> BuildReport:
        """Render ``slugs`` concurrently, isolating failures per slug."""
        report = BuildReport()
        ordered = list(dict.fromkeys(slugs))
        if not ordered:
            return report
        self.output_dir.mkdir(parents=True, exist_ok=True)
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = {slug: executor.submit(self._build_one, slug) for slug in ordered}
            for slug, future in futures.items():
                try:
                    report.written.append(future.result())
                except (PostPagesError, OSError) as exc:
                    logger.warning("failed to build %s: %s", slug, exc)
                    report.failed[slug] = str(exc)
        return report

    def render_on_demand(
        self, slug: str, *, preview: PreviewSession | None = None
    ) -> PostPageView:
        """Serve a slug that was not pre-rendered.

        The returned view has passed through ``LOADING`` to ``RENDERED``.
        Published pages are written to disk so later requests are served
        statically; preview pages never are.

        Raises
        ------
        PostNotFoundError
            When the slug does not exist.
        """
        view = PostPageView(self.renderer, comments=self.comments)
        props = self.assembler.get_page_props(slug, preview=preview)
        view.resolve(props)
        if props.revalidate is not None:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            self._write(slug, view.render(), props)
        return view

    def is_stale(self, slug: str, *, now: dt.datetime | None = None) -> bool:
        """Return True when the page is missing or past its staleness interval."""
        metadata = self._read_metadata(slug)
        if metadata is None:
            return True
        revalidate_after = parse_timestamp(metadata.get("revalidate_after"))
        if revalidate_after is None:
            return True
        current = now or dt.datetime.now(dt.UTC)
        return current >= revalidate_after

    def regenerate_stale(self, *, now: dt.datetime | None = None) -> BuildReport:
        """Rebuild pages whose staleness interval has elapsed.

        Stale files stay in place until their replacement is written, so a
        failed regeneration keeps serving the previous page.
        """
        slugs = [slug for slug in self.known_slugs() if self.is_stale(slug, now=now)]
        return self.build_slugs(slugs)

    def known_slugs(self) -> list[str]:
        """Return slugs that have a rendered page on disk."""
        if not self.output_dir.exists():
            return []
        return sorted(unquote(path.stem) for path in self.output_dir.glob("*.html"))

    def page_path(self, slug: str) -> Path:
        """Return the output path of the page for ``slug``.

        Slugs are opaque, so every character that is not safe in a file name
        is percent-encoded and the page always lands directly in
        ``output_dir``.

        Raises
        ------
        InvalidSlugError
            When ``slug`` is empty or a relative path component.
        """
        return self.output_dir / f"{_slug_filename(slug)}.html"

    def _build_one(self, slug: str) -> Path:
        props = self.assembler.get_page_props(slug)
        view = PostPageView(self.renderer, props, comments=self.comments)
        return self._write(slug, view.render(), props)

    def _write(self, slug: str, html: str, props: PageProps) -> Path:
        path = self.page_path(slug)
        _replace_file(path, html)
        self._write_metadata(slug, props)
        return path

    def _metadata_path(self, slug: str) -> Path:
        return self.output_dir / PAGE_META_TEMPLATE.format(slug=_slug_filename(slug))

    def _write_metadata(self, slug: str, props: PageProps) -> None:
        """Persist when the page was generated and when it becomes stale."""
        generated_at = dt.datetime.now(dt.UTC)
        revalidate = props.revalidate or 0
        metadata = {
            "slug": slug,
            "generated_at": generated_at.isoformat(),
            "revalidate": revalidate,
            "revalidate_after": (
                generated_at + dt.timedelta(seconds=revalidate)
            ).isoformat(),
        }
        _replace_file(self._metadata_path(slug), json.dumps(metadata))

    def _read_metadata(self, slug: str) -> dict[str, typ.Any] | None:
        path = self._metadata_path(slug)
        if not path.exists():
            return None
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            return None
        return payload if isinstance(payload, dict) else None


def _slug_filename(slug: str) -> str:
    if slug in {"", ".", ".."}:
        raise InvalidSlugError(slug)
    return quote(slug, safe="")


def _replace_file(path: Path, text: str) -> None:
    """Replace ``path`` with ``text`` through a temporary file in the same directory."""
    handle = tempfile.NamedTemporaryFile(  # noqa: SIM115 - closed before os.replace
        mode="w", encoding="utf-8", dir=path.parent, suffix=".tmp", delete=False
    )
    tmp_path = Path(handle.name)
    try:
        with handle:
            handle.write(text)
        os.replace(tmp_path, path)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise


__all__ = ["BuildReport", "StaticSiteBuilder"]
