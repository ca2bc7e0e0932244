"""Build blog post pages from a headless CMS.

This package assembles post page data (the post, its previous/next
neighbours, and a reading-time estimate), renders it to static HTML ahead of
time, and serves other posts and draft previews on demand.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.
- ``PageAssembler``: Data-assembly entry point for one post page.

Examples
--------
>>> from post_pages import main
>>> main()  # doctest: +SKIP
"""

from __future__ import annotations

from .assembler import PageAssembler
from .cli import app, main

__all__ = ["PageAssembler", "app", "main"]
