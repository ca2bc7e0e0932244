"""Common literal values used across post_pages.

These constants keep filenames, rates, and intervals centralized so the
assembler, builder, and tests import the same values without drifting.

Examples
--------
>>> from post_pages import _constants
>>> _constants.PAGE_META_TEMPLATE.format(slug="hooks-guide")
'.post-hooks-guide-meta.json'
>>> _constants.REVALIDATE_SECONDS
1800
"""

PAGE_META_TEMPLATE = ".post-{slug}-meta.json"
WORDS_PER_MINUTE = 200
REVALIDATE_SECONDS = 60 * 30
PRERENDER_LIMIT = 2
DEFAULT_DOCUMENT_TYPE = "posts"
PREVIEW_EXIT_HREF = "/api/exit-preview"
