"""Builders shared by the split-site pipeline tests.

The helpers here build small, hand-written artifact sets that mimic what the
blog renderer emits (a ``<nav>`` block, a "Back to posts" link on post pages,
and a sitemap) so merge, sitemap and rewrite behaviour can be asserted
without rendering real markdown.
"""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

from devlog_pages.config import LinkSwap
from devlog_pages.pipeline import Artifact, ArtifactTable, Origin

if typ.TYPE_CHECKING:
    from pathlib import Path

    from devlog_pages.manifest import ContentSet

BACK_LINK = LinkSwap().markup(new=False)


def page_html(title: str, *, post: bool = False) -> str:
    """Return a minimal page resembling the blog renderer's output."""
    back = f"        {BACK_LINK}\n" if post else ""
    return (
        "<!DOCTYPE html>\n"
        "<html>\n"
        f"  <head><title>{title}</title></head>\n"
        "  <body>\n"
        "      <nav>\n"
        '        <a href="/">Posts</a>\n'
        "      </nav>\n"
        f"{back}"
        f"    <h1>{title}</h1>\n"
        "  </body>\n"
        "</html>\n"
    )


def sitemap_xml(*slugs: str) -> str:
    """Return a sitemap listing the site root and one entry per slug."""
    entries = [
        "  <url>\n    <loc>https://example.com/</loc>\n  </url>",
        *(
            f"  <url>\n    <loc>https://example.com/{slug}/</loc>\n  </url>"
            for slug in slugs
        ),
    ]
    body = "\n".join(entries)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">\n'
        f"{body}\n"
        "</urlset>\n"
    )


def artifacts(origin: Origin, files: cabc.Mapping[str, str | bytes]) -> list[Artifact]:
    """Build origin-tagged artifacts from a ``path -> content`` mapping."""
    return [Artifact(origin, path, content) for path, content in files.items()]


def contents(table: ArtifactTable) -> dict[str, str | bytes]:
    """Return the ``path -> content`` view of ``table``."""
    return {path: artifact.content for path, artifact in table.items()}


def scenario_builds() -> tuple[list[Artifact], list[Artifact]]:
    """Return the two-build scenario: primary ``a`` and secondary ``b``."""
    primary = artifacts(
        Origin.PRIMARY,
        {
            "index.html": page_html("Home"),
            "a/index.html": page_html("Post A", post=True),
            "sitemap.xml": sitemap_xml("a"),
        },
    )
    secondary = artifacts(
        Origin.SECONDARY,
        {
            "index.html": page_html("Home"),
            "b/index.html": page_html("Post B", post=True),
            "sitemap.xml": sitemap_xml("b"),
        },
    )
    return primary, secondary


class RecordingRenderer:
    """Renderer double that records calls and replays canned outputs.

    ``outputs`` maps a post-type key (``"primary"`` or ``"secondary"``) to the
    files returned for that stream; the stream is recognised by whether any
    post carries ``type: ai``.
    """

    def __init__(self, outputs: cabc.Mapping[str, list[dict[str, typ.Any]]]) -> None:
        self.outputs = outputs
        self.calls: list[ContentSet] = []

    def __call__(self, content: ContentSet, base_dir: Path) -> list[dict[str, typ.Any]]:
        self.calls.append(content)
        secondary = any(post.get("type") == "ai" for post in content.posts)
        if not content.posts:
            secondary = len(self.calls) > 1
        return list(self.outputs["secondary" if secondary else "primary"])

