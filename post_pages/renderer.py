"""Render rich-text sections and full post pages to HTML.

:class:`RichTextRenderer` turns the source's structured text blocks into
HTML, highlighting ``preformatted`` blocks with Pygments.
:class:`PageRenderer` feeds a :class:`~post_pages.models.PageContext` through
the Jinja templates shipped in ``post_pages/templates``.
"""

from __future__ import annotations

import dataclasses as dc
import itertools
import re
import typing as typ
from html import escape
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup
from pygments import highlight
from pygments.formatters.html import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from ._constants import PREVIEW_EXIT_HREF

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    import datetime as dt

    from .models import PageContext, RichTextNode, SiblingRef, TextSpan
    from .render_state import CommentEmbed

HEADING_PATTERN = re.compile(r"^heading([1-6])$")
CODEHILITE_OPEN_TAG = re.compile(r'<div class="codehilite">')
LIST_TAGS = {"list-item": "ul", "o-list-item": "ol"}
SPAN_TAGS = {"strong": "strong", "em": "em"}


@dc.dataclass(frozen=True, slots=True)
class SiblingLink:
    """Navigation link as seen by templates; an empty title hides the link."""

    title: str = ""
    href: str = ""

    @classmethod
    def from_ref(cls, ref: SiblingRef | None) -> SiblingLink:
        """Return the link for ``ref`` or an empty link when it is ``None``."""
        if ref is None:
            return cls()
        return cls(title=ref.title, href=f"/post/{ref.uid}")


class RichTextRenderer:
    """Render structured text blocks with consistent styling."""

    def __init__(self, pygments_style: str = "monokai") -> None:
        self.pygments_style = pygments_style
        self._formatter = HtmlFormatter(style=pygments_style, cssclass="codehilite")

    @property
    def stylesheet(self) -> str:
        """Return the CSS used for highlighted code blocks."""
        return self._formatter.get_style_defs(".codehilite")

    def as_html(self, nodes: cabc.Iterable[RichTextNode]) -> str:
        """Render ``nodes`` in order, grouping consecutive list items."""
        parts: list[str] = []
        for list_tag, group in itertools.groupby(
            nodes, key=lambda node: LIST_TAGS.get(node.type)
        ):
            if list_tag:
                items = "".join(f"<li>{self._inline(node)}</li>" for node in group)
                parts.append(f"<{list_tag}>{items}</{list_tag}>")
                continue
            parts.extend(self._block(node) for node in group)
        return "".join(parts)

    def code_block(self, code: str, language: str | None = None) -> str:
        """Render ``code`` into highlighted HTML tagged with its language.

        Unknown or missing languages fall back to the plain ``text`` lexer.
        """
        lang = language or "text"
        try:
            lexer = get_lexer_by_name(lang)
        except ClassNotFound:
            lexer = get_lexer_by_name("text")
        html = highlight(code, lexer, self._formatter)
        safe_lang = escape(lang, quote=True)
        return CODEHILITE_OPEN_TAG.sub(
            f'<div class="codehilite" data-language="{safe_lang}">', html, 1
        )

    def _block(self, node: RichTextNode) -> str:
        if node.type == "preformatted":
            return self.code_block(node.text, node.label)
        match = HEADING_PATTERN.match(node.type)
        tag = f"h{match.group(1)}" if match else "p"
        return f"<{tag}>{self._inline(node)}</{tag}>"

    def _inline(self, node: RichTextNode) -> str:
        """Escape node text and wrap each styled range in its tags."""
        text = node.text
        spans = [span for span in node.spans if 0 <= span.start < span.end]
        if not spans:
            return escape(text).replace("\n", "<br />")
        bounds = sorted({0, len(text)} | {s.start for s in spans} | {s.end for s in spans})
        out: list[str] = []
        for start, end in itertools.pairwise(bounds):
            if start >= len(text):
                break
            segment = escape(text[start:end]).replace("\n", "<br />")
            active = sorted(
                (s for s in spans if s.start <= start and s.end >= end),
                key=lambda s: (s.start, -s.end),
            )
            for span in reversed(active):
                segment = _wrap(span, segment)
            out.append(segment)
        return "".join(out)


def _wrap(span: TextSpan, inner: str) -> str:
    if span.type == "hyperlink" and span.url:
        href = escape(span.url, quote=True)
        return f'<a href="{href}">{inner}</a>'
    tag = SPAN_TAGS.get(span.type)
    if tag is None:
        return inner
    return f"<{tag}>{inner}</{tag}>"


class PageRenderer:
    """Render post pages and their loading placeholder from Jinja templates."""

    def __init__(
        self,
        *,
        site_name: str = "spacetraveling",
        date_format: str = "%d %b %Y",
        pygments_style: str = "monokai",
        preview_exit_href: str = PREVIEW_EXIT_HREF,
        templates_dir: Path | None = None,
    ) -> None:
        """Initialize the renderer and its Jinja environment.

        Parameters
        ----------
        site_name : str, optional
            Name shown in the page header and title.
        date_format : str, optional
            ``strftime`` pattern for the publication date.
        pygments_style : str, optional
            Pygments style for code blocks.
        preview_exit_href : str, optional
            Route that clears the preview ref.
        templates_dir : Path, optional
            Directory containing Jinja templates; defaults to the package
            templates.
        """
        self.site_name = site_name
        self.date_format = date_format
        self.preview_exit_href = preview_exit_href
        self.rich_text = RichTextRenderer(pygments_style)
        self.templates_dir = templates_dir or Path(__file__).parent / "templates"
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(["html", "xml", "jinja"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render_post(
        self, context: PageContext, *, comments: CommentEmbed | None = None
    ) -> str:
        """Return the full HTML document for ``context``."""
        post = context.post
        sections = [
            {"heading": section.heading, "html": Markup(self.rich_text.as_html(section.body))}
            for section in post.content
        ]
        template = self.env.get_template("post_page.jinja")
        return template.render(
            site_name=self.site_name,
            post=post,
            published=self._format_date(post.first_publication_date),
            read_time=context.read_time,
            sections=sections,
            before=SiblingLink.from_ref(context.before),
            after=SiblingLink.from_ref(context.after),
            preview=context.preview,
            preview_exit_href=self.preview_exit_href,
            comments=comments,
            pygments_css=self.rich_text.stylesheet,
        )

    def render_loading(self) -> str:
        """Return the placeholder shown while an on-demand fetch is pending."""
        template = self.env.get_template("loading.jinja")
        return template.render(site_name=self.site_name)

    def _format_date(self, value: dt.datetime | None) -> str:
        if value is None:
            return ""
        return value.strftime(self.date_format)


__all__ = ["PageRenderer", "RichTextRenderer", "SiblingLink"]
