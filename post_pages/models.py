"""Immutable snapshots passed between the fetch, assembly, and render stages.

Every object here is built once per page build (or preview request) and
discarded after rendering. Nothing is mutated after construction, so builds
for different slugs can run side by side without sharing state.

Example
-------
>>> from post_pages.models import RichTextNode, Section
>>> section = Section(heading="Intro", body=(RichTextNode("paragraph", "Hi"),))
>>> section.plain_text()
'Hi'
"""

from __future__ import annotations

import dataclasses as dc
import datetime as dt  # noqa: TC003 - used for runtime type metadata


@dc.dataclass(frozen=True, slots=True)
class TextSpan:
    """Inline styling applied to ``[start, end)`` of a rich-text node.

    Attributes
    ----------
    start : int
        Offset of the first styled character.
    end : int
        Offset one past the last styled character.
    type : str
        Span kind as delivered by the source (``strong``, ``em``,
        ``hyperlink``, ...).
    url : str | None
        Target URL for hyperlink spans.
    """

    start: int
    end: int
    type: str
    url: str | None = None


@dc.dataclass(frozen=True, slots=True)
class RichTextNode:
    """One styled text block of a section body.

    ``label`` carries the block's custom label; for ``preformatted`` blocks
    it names the code language.
    """

    type: str
    text: str
    spans: tuple[TextSpan, ...] = ()
    label: str | None = None


@dc.dataclass(frozen=True, slots=True)
class Section:
    """A heading plus its rich-text body, in document order."""

    heading: str
    body: tuple[RichTextNode, ...] = ()

    def plain_text(self) -> str:
        """Return the body's node texts flattened with single spaces."""
        return " ".join(node.text for node in self.body)


@dc.dataclass(frozen=True, slots=True)
class Post:
    """A single blog post as fetched from the content source.

    Attributes
    ----------
    id : str
        Source document identifier, used as the cursor in ordered queries.
    uid : str
        Slug used as the routing key.
    first_publication_date : datetime | None
        ``None`` until the post is first published.
    last_publication_date : datetime | None
        Last modification timestamp, when known.
    title : str
        Post title.
    banner_url : str
        URL of the banner image.
    author : str
        Display name of the author.
    content : tuple[Section, ...]
        Ordered content sections.
    """

    id: str
    uid: str
    first_publication_date: dt.datetime | None
    last_publication_date: dt.datetime | None
    title: str
    banner_url: str
    author: str
    content: tuple[Section, ...] = ()


@dc.dataclass(frozen=True, slots=True)
class SiblingRef:
    """Slug and title of a chronologically adjacent post."""

    uid: str
    title: str


@dc.dataclass(frozen=True, slots=True)
class PreviewSession:
    """Explicit preview state: the ref of the draft revision to display."""

    ref: str


@dc.dataclass(frozen=True, slots=True)
class PageContext:
    """View model handed to the render layer."""

    post: Post
    preview: bool
    before: SiblingRef | None
    after: SiblingRef | None
    read_time: int

    @property
    def path(self) -> str:
        """Return the public path of the post page."""
        return f"/post/{self.post.uid}"


@dc.dataclass(frozen=True, slots=True)
class PageProps:
    """Assembled page data plus its staleness hint.

    ``revalidate`` is the number of seconds after which a pre-rendered page
    may be regenerated in the background; ``None`` means the page must never
    be cached (preview requests).
    """

    context: PageContext
    revalidate: int | None


@dc.dataclass(frozen=True, slots=True)
class StaticPaths:
    """Slugs to pre-render; ``fallback`` allows on-demand rendering of others."""

    slugs: tuple[str, ...]
    fallback: bool = True


__all__ = [
    "PageContext",
    "PageProps",
    "Post",
    "PreviewSession",
    "RichTextNode",
    "Section",
    "SiblingRef",
    "StaticPaths",
    "TextSpan",
]
