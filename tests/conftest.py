"""Shared fixtures: an in-memory content source and document factories."""

from __future__ import annotations

import collections.abc as cabc
import re
import typing as typ

import pytest

from post_pages.errors import PostNotFoundError, SourceUnavailableError
from post_pages.source import Document

MASTER_REF = "master"
TYPE_PREDICATE = re.compile(r'^\[at\(document\.type, "(?P<type>[^"]+)"\)\]$')


def make_document(
    uid: str,
    *,
    doc_id: str | None = None,
    published: str | None = "2021-03-01T12:00:00+0000",
    title: str | None = None,
    sections: cabc.Sequence[tuple[str, str]] = (("Intro", "Some words here"),),
    author: str = "Ada Lovelace",
) -> Document:
    """Return a raw post document with one paragraph per section."""
    content = [
        {
            "heading": heading,
            "body": [{"type": "paragraph", "text": text, "spans": []}],
        }
        for heading, text in sections
    ]
    return Document(
        id=doc_id or f"id-{uid}",
        type="posts",
        uid=uid,
        first_publication_date=published,
        last_publication_date=published,
        data={
            "title": title or uid.replace("-", " ").title(),
            "banner": {"url": f"https://images.invalid/{uid}.png"},
            "author": author,
            "content": content,
        },
    )


def words(count: int) -> str:
    """Return ``count`` whitespace-separated words."""
    return " ".join(f"word{i}" for i in range(count))


class FakeSource:
    """In-memory ContentSource keyed by ref, recording every call."""

    def __init__(
        self,
        documents: cabc.Iterable[Document] = (),
        *,
        drafts: cabc.Mapping[str, cabc.Iterable[Document]] | None = None,
    ) -> None:
        self.refs: dict[str, list[Document]] = {MASTER_REF: list(documents)}
        for ref, docs in (drafts or {}).items():
            self.refs[ref] = list(docs)
        self.calls: list[tuple[str, dict[str, typ.Any]]] = []
        self.unavailable = False

    def get_by_uid(
        self, document_type: str, uid: str, *, ref: str | None = None
    ) -> Document:
        self.calls.append(("get_by_uid", {"type": document_type, "uid": uid, "ref": ref}))
        self._check()
        for doc in self._docs(ref):
            if doc.type == document_type and doc.uid == uid:
                return doc
        raise PostNotFoundError(uid, ref=ref)

    def query(
        self,
        predicates: cabc.Sequence[str],
        *,
        orderings: cabc.Sequence[str] = (),
        page_size: int = 20,
        after: str | None = None,
        ref: str | None = None,
    ) -> list[Document]:
        self.calls.append(
            (
                "query",
                {
                    "predicates": list(predicates),
                    "orderings": list(orderings),
                    "page_size": page_size,
                    "after": after,
                    "ref": ref,
                },
            )
        )
        self._check()
        docs = list(self._docs(ref))
        for predicate in predicates:
            match = TYPE_PREDICATE.match(predicate)
            if match:
                docs = [doc for doc in docs if doc.type == match.group("type")]
        for clause in orderings:
            field, _, direction = clause.partition(" ")
            attr = field.removeprefix("document.")
            docs.sort(key=lambda doc: getattr(doc, attr) or "", reverse=direction == "desc")
        if after is not None:
            ids = [doc.id for doc in docs]
            docs = docs[ids.index(after) + 1 :] if after in ids else []
        return docs[:page_size]

    def queries(self) -> list[dict[str, typ.Any]]:
        """Return the keyword payloads of every ``query`` call."""
        return [payload for name, payload in self.calls if name == "query"]

    def _docs(self, ref: str | None) -> list[Document]:
        return self.refs.get(ref or MASTER_REF, [])

    def _check(self) -> None:
        if self.unavailable:
            raise SourceUnavailableError("https://cms.invalid/api/v2", "connection refused")


@pytest.fixture
def timeline() -> list[Document]:
    """Three published posts in chronological order."""
    return [
        make_document("first-post", published="2021-01-10T10:00:00+0000"),
        make_document(
            "hooks-guide",
            published="2021-02-10T10:00:00+0000",
            title="Using React Hooks",
            sections=(("Intro", words(250)),),
        ),
        make_document("latest-post", published="2021-03-10T10:00:00+0000"),
    ]


@pytest.fixture
def fake_source(timeline: list[Document]) -> FakeSource:
    """Return a FakeSource serving the published ``timeline``."""
    return FakeSource(timeline)


@pytest.fixture
def document_factory() -> cabc.Callable[..., Document]:
    """Expose :func:`make_document` to tests."""
    return make_document


@pytest.fixture
def source_factory() -> type[FakeSource]:
    """Expose :class:`FakeSource` for tests that need a custom timeline."""
    return FakeSource


@pytest.fixture
def word_text() -> cabc.Callable[[int], str]:
    """Expose :func:`words` to tests."""
    return words
