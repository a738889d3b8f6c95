"""Common literal values used across devlog_pages.

These constants keep artifact paths, markers, and default labels centralized
so the merge pipeline, the default blog renderer, and tests can import the
same values without drifting. Intended for internal use within the
devlog_pages package.

Examples
--------
>>> from devlog_pages import _constants
>>> _constants.SUBSECTION_INDEX_TEMPLATE.format(slug="devlog", index="index.html")
'devlog/index.html'
>>> _constants.NAV_CLOSE_MARKER
'</nav>'
"""

INDEX_PATH = "index.html"
SITEMAP_PATH = "sitemap.xml"
HYPERTEXT_SUFFIX = ".html"
SUBSECTION_INDEX_TEMPLATE = "{slug}/{index}"

NAV_CLOSE_MARKER = "</nav>"
URLSET_CLOSE_MARKER = "</urlset>"

DEFAULT_SITE_URL = "https://example.com"

PAGINATION_KEY = "postsPerPage"
SECONDARY_PAGE_LIMIT = 999
DEFAULT_PAGE_SIZE = 10

BACK_LINK_CLASSES = (
    "font-mono text-sm text-accent-blue hover:text-accent-cyan uppercase tracking-wider"
)
