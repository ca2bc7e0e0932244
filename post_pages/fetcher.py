"""Fetch a single post and normalise the raw document into a ``Post``."""

from __future__ import annotations

import collections.abc as cabc
import datetime as dt
import typing as typ

from .models import Post, RichTextNode, Section, SiblingRef, TextSpan

if typ.TYPE_CHECKING:
    from .models import PreviewSession
    from .source import ContentSource, Document


def fetch_post(
    source: ContentSource,
    document_type: str,
    slug: str,
    preview: PreviewSession | None = None,
) -> Post:
    """Return the post stored under ``slug``.

    When ``preview`` is supplied the lookup targets its ref, so unpublished
    drafts are visible and take precedence over the published revision.

    Raises
    ------
    PostNotFoundError
        When the source has no document for ``slug``.
    SourceUnavailableError
        When the source cannot be reached.
    """
    ref = preview.ref if preview else None
    document = source.get_by_uid(document_type, slug, ref=ref)
    return document_to_post(document)


def document_to_post(document: Document) -> Post:
    """Normalise a raw source document into an immutable :class:`Post`."""
    data = document.data
    banner = data.get("banner")
    return Post(
        id=document.id,
        uid=document.uid or "",
        first_publication_date=parse_timestamp(document.first_publication_date),
        last_publication_date=parse_timestamp(document.last_publication_date),
        title=_text(data.get("title")),
        banner_url=_text(banner.get("url")) if isinstance(banner, dict) else "",
        author=_text(data.get("author")),
        content=tuple(
            _section(item) for item in _items(data.get("content")) if isinstance(item, dict)
        ),
    )


def document_to_sibling(document: Document) -> SiblingRef:
    """Return the slug/title pair used for previous/next navigation."""
    return SiblingRef(uid=document.uid or "", title=_text(document.data.get("title")))


def parse_timestamp(value: dt.datetime | str | None) -> dt.datetime | None:
    """Return a timezone-aware UTC datetime parsed from ``value``, or None."""
    match value:
        case dt.datetime():
            parsed = value
        case str() as text:
            sanitized = text.strip()
            if not sanitized:
                return None
            if sanitized.endswith("Z"):
                sanitized = sanitized[:-1] + "+00:00"
            try:
                parsed = dt.datetime.fromisoformat(sanitized)
            except ValueError:
                return None
        case _:
            return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=dt.UTC)
    return parsed.astimezone(dt.UTC)


def _section(payload: cabc.Mapping[str, typ.Any]) -> Section:
    body = tuple(
        _node(block) for block in _items(payload.get("body")) if isinstance(block, dict)
    )
    return Section(heading=_text(payload.get("heading")), body=body)


def _node(payload: cabc.Mapping[str, typ.Any]) -> RichTextNode:
    spans: list[TextSpan] = []
    for span in _items(payload.get("spans")):
        if not isinstance(span, dict):
            continue
        link = span.get("data")
        url = link.get("url") if isinstance(link, dict) else None
        spans.append(
            TextSpan(
                start=int(span.get("start", 0)),
                end=int(span.get("end", 0)),
                type=str(span.get("type", "")),
                url=url,
            )
        )
    return RichTextNode(
        type=str(payload.get("type") or "paragraph"),
        text=_text(payload.get("text")),
        spans=tuple(spans),
        label=payload.get("label") or None,
    )


def _text(value: object) -> str:
    """Coerce key-text or title-style rich-text fields into a plain string."""
    match value:
        case None:
            return ""
        case str():
            return value
        case list():
            return " ".join(
                str(block.get("text", "")) for block in value if isinstance(block, dict)
            )
        case _:
            return str(value)


def _items(value: object) -> list[typ.Any]:
    return value if isinstance(value, list) else []


__all__ = ["document_to_post", "document_to_sibling", "fetch_post", "parse_timestamp"]
