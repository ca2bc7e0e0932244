"""Estimate how long a post takes to read.

The estimate walks the sections in document order. After adding each
section's minutes the running total is rounded up, so every section costs at
least one whole minute on top of what came before:

>>> from post_pages.models import RichTextNode, Section
>>> def words(n):
...     return Section("s", (RichTextNode("paragraph", " ".join(["w"] * n)),))
>>> estimate_read_time([words(250)])
2
>>> estimate_read_time([words(10), words(10), words(500)])
5
>>> estimate_read_time([])
0
"""

from __future__ import annotations

import math
import typing as typ

from ._constants import WORDS_PER_MINUTE

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .models import Section


def count_words(text: str) -> int:
    """Return the number of whitespace-delimited words in ``text``."""
    return len(text.split())


def estimate_read_time(
    sections: cabc.Iterable[Section], *, words_per_minute: int = WORDS_PER_MINUTE
) -> int:
    """Return the estimated reading time in whole minutes.

    Parameters
    ----------
    sections : Iterable[Section]
        Post content in document order.
    words_per_minute : int, optional
        Reading rate; defaults to ``200``.

    Returns
    -------
    int
        Running-ceiling total of minutes; ``0`` for content without words.
    """
    total = 0
    for section in sections:
        words = count_words(section.plain_text())
        total = math.ceil(total + words / words_per_minute)
    return total


__all__ = ["count_words", "estimate_read_time"]
