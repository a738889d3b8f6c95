"""Default JSON-blog renderer used by the split-site build.

``BlogRenderer`` satisfies the renderer contract the merge pipeline consumes:
it takes a :class:`~devlog_pages.manifest.ContentSet` plus the directory that
relative post sources are resolved against, and returns a list of
``{"name", "content"}`` dictionaries. Nothing is written to disk.

Output layout
-------------
- ``index.html`` and ``page/<n>/index.html``, paginated by the
  ``postsPerPage`` setting (default 10).
- ``<slug>/index.html`` for every post; the slug comes from the post's
  ``slug`` field or its slugified title. Repeated slugs get ``-2``, ``-3``
  suffixes in manifest order.
- ``sitemap.xml`` and ``robots.txt``.

Example
-------
>>> from pathlib import Path
>>> from devlog_pages.blog import BlogRenderer
>>> from devlog_pages.manifest import load_manifest
>>> content = load_manifest(Path("blog.json"))  # doctest: +SKIP
>>> [f["name"] for f in BlogRenderer()(content, Path("."))][:2]  # doctest: +SKIP
['index.html', 'hello-world/index.html']
"""

from __future__ import annotations

import dataclasses as dc
import datetime as dt
import math
import re
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader
from markdown import Markdown
from pygments.formatters.html import HtmlFormatter

from devlog_pages._constants import (
    BACK_LINK_CLASSES,
    DEFAULT_PAGE_SIZE,
    DEFAULT_SITE_URL,
    PAGINATION_KEY,
)

from .sources import SourceLoader

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from devlog_pages.manifest import ContentSet

MARKUP_TAG = re.compile(r"<[^>]+>")


@dc.dataclass(slots=True)
class PostModel:
    """Structured data passed to the post and index templates."""

    title: str
    slug: str
    description: str
    html: str
    published_at: dt.datetime | None

    @property
    def href(self) -> str:
        return f"/{self.slug}/"


@dc.dataclass(slots=True)
class SiteModel:
    """Site-wide metadata read from the manifest's ``site`` record."""

    title: str = "Blog"
    description: str = ""
    url: str = DEFAULT_SITE_URL
    nav_links: list[dict[str, str]] = dc.field(default_factory=list)


class BlogRenderer:
    """Render a JSON-blog content set into static files held in memory."""

    def __init__(
        self,
        *,
        templates_dir: Path | None = None,
        pygments_style: str = "monokai",
        loader: SourceLoader | None = None,
    ) -> None:
        """Initialize the renderer and its Jinja environment.

        Parameters
        ----------
        templates_dir : Path, optional
            Directory containing ``index.jinja``, ``post.jinja`` and
            ``sitemap.jinja``; defaults to the package templates.
        pygments_style : str, optional
            Pygments style for highlighted code blocks.
        loader : SourceLoader, optional
            Loader for post sources; a fresh one is created per call when
            omitted.
        """
        default_templates = Path(__file__).resolve().parents[1] / "templates"
        self.templates_dir = templates_dir or default_templates
        self.pygments_style = pygments_style
        self._loader = loader
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def __call__(self, content: ContentSet, base_dir: Path) -> list[dict[str, str]]:
        """Render ``content`` and return ``{"name", "content"}`` file records."""
        site = self._site_model(content.extras)
        page_size = _page_size(content.settings.get(PAGINATION_KEY))
        loader = self._loader or SourceLoader()
        try:
            posts = [self._post_model(post, loader, base_dir) for post in content.posts]
        finally:
            if self._loader is None:
                loader.close()
        _dedupe_slugs(posts)
        posts.sort(key=_sort_key, reverse=True)

        generated_at = dt.datetime.now(dt.UTC)
        context = {
            "site": site,
            "generated_at": generated_at,
            "pygments_css": HtmlFormatter(style=self.pygments_style).get_style_defs(
                ".codehilite"
            ),
            "back_link_classes": BACK_LINK_CLASSES,
        }
        files: list[dict[str, str]] = []
        files.extend(self._render_index_pages(posts, page_size, context))
        post_template = self.env.get_template("post.jinja")
        for post in posts:
            html = post_template.render(post=post, **context)
            files.append({"name": f"{post.slug}/index.html", "content": html})
        sitemap = self.env.get_template("sitemap.jinja").render(
            posts=posts, site=site, base_url=site.url.rstrip("/")
        )
        files.append({"name": "sitemap.xml", "content": _ensure_newline(sitemap)})
        robots = f"User-agent: *\nAllow: /\n\nSitemap: {site.url.rstrip('/')}/sitemap.xml\n"
        files.append({"name": "robots.txt", "content": robots})
        return files

    def _render_index_pages(
        self,
        posts: list[PostModel],
        page_size: int,
        context: dict[str, typ.Any],
    ) -> cabc.Iterator[dict[str, str]]:
        """Yield one index page per ``page_size`` posts (at least one page)."""
        template = self.env.get_template("index.jinja")
        total = max(1, math.ceil(len(posts) / page_size))
        for number in range(1, total + 1):
            chunk = posts[(number - 1) * page_size : number * page_size]
            pagination = {
                "number": number,
                "total": total,
                "previous": _page_href(number - 1) if number > 1 else None,
                "next": _page_href(number + 1) if number < total else None,
            }
            html = template.render(posts=chunk, pagination=pagination, **context)
            name = "index.html" if number == 1 else f"page/{number}/index.html"
            yield {"name": name, "content": html}

    def _post_model(
        self,
        post: cabc.Mapping[str, typ.Any],
        loader: SourceLoader,
        base_dir: Path,
    ) -> PostModel:
        title = str(post.get("title") or "Untitled")
        html = render_markdown(loader.load(post, base_dir), self.pygments_style)
        description = str(post.get("description") or excerpt(html))
        return PostModel(
            title=title,
            slug=str(post.get("slug") or "") or slugify(title),
            description=description,
            html=html,
            published_at=_parse_timestamp(post.get("createdAt") or post.get("date")),
        )

    @staticmethod
    def _site_model(extras: cabc.Mapping[str, typ.Any]) -> SiteModel:
        raw = extras.get("site") or {}
        base = SiteModel()
        nav_links = [
            {"label": str(link.get("label", "")), "href": str(link.get("href", "/"))}
            for link in raw.get("navLinks", []) or []
            if isinstance(link, dict)
        ]
        return SiteModel(
            title=str(raw.get("title") or base.title),
            description=str(raw.get("description") or base.description),
            url=str(raw.get("url") or base.url),
            nav_links=nav_links,
        )


def slugify(value: str) -> str:
    """Convert a string into a lowercase hyphen-separated slug."""
    return re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-") or "post"


def render_markdown(text: str, pygments_style: str = "monokai") -> str:
    """Render post markdown with fenced code, tables and Pygments highlighting."""
    if not text.strip():
        return ""
    md = Markdown(
        extensions=["fenced_code", "codehilite", "tables"],
        extension_configs={
            "codehilite": {"guess_lang": False, "pygments_style": pygments_style}
        },
    )
    return md.convert(text)


def excerpt(html: str, limit: int = 200) -> str:
    """Return at most ``limit`` characters of the text in ``html``."""
    words = " ".join(MARKUP_TAG.sub(" ", html).split())
    if len(words) <= limit:
        return words
    return words[:limit].rsplit(" ", 1)[0] + "…"


def _dedupe_slugs(posts: list[PostModel]) -> None:
    """Suffix repeated slugs with ``-2``, ``-3``... in manifest order."""
    taken: set[str] = set()
    for post in posts:
        slug, n = post.slug, 1
        while slug in taken:
            n += 1
            slug = f"{post.slug}-{n}"
        taken.add(slug)
        post.slug = slug


def _page_href(number: int) -> str:
    return "/" if number == 1 else f"/page/{number}/"


def _page_size(value: object) -> int:
    """Return a positive page size from the ``postsPerPage`` setting."""
    if isinstance(value, bool):
        return DEFAULT_PAGE_SIZE
    try:
        size = int(str(value))
    except ValueError:
        return DEFAULT_PAGE_SIZE
    return size if size > 0 else DEFAULT_PAGE_SIZE


def _parse_timestamp(value: object) -> dt.datetime | None:
    """Return a timezone-aware UTC datetime parsed from ``value``, or None."""
    if not isinstance(value, str) or not value.strip():
        return None
    sanitized = value.strip()
    if sanitized.endswith("Z"):
        sanitized = sanitized[:-1] + "+00:00"
    try:
        parsed = dt.datetime.fromisoformat(sanitized)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=dt.UTC)
    return parsed.astimezone(dt.UTC)


def _sort_key(post: PostModel) -> dt.datetime:
    return post.published_at or dt.datetime.min.replace(tzinfo=dt.UTC)


def _ensure_newline(text: str) -> str:
    return text if text.endswith("\n") else f"{text}\n"


__all__ = [
    "BlogRenderer",
    "PostModel",
    "SiteModel",
    "excerpt",
    "render_markdown",
    "slugify",
]
