"""Unit tests for the content rewriter and its markup strategies.

The rewriter must add the devlog navigation link to every HTML page, retitle
the devlog index, and swap the "Back to posts" link only on pages whose slug is
exclusive to the secondary build. Rewriting twice must change nothing.
"""

from __future__ import annotations

import pytest
from bs4 import BeautifulSoup

from devlog_pages.config import LayoutConfig, LinkSwap, RewriteConfig, SubsectionConfig
from devlog_pages.pipeline import (
    ArtifactTable,
    ExclusiveSlugs,
    MarkupStrategy,
    Origin,
    StructuralStrategy,
    TextualStrategy,
    merge_artifacts,
    rewrite_content,
)
from tests.helpers import BACK_LINK, artifacts, contents, page_html, scenario_builds

STRATEGIES = [TextualStrategy(), StructuralStrategy()]


def _rewrite(
    table: ArtifactTable, exclusive: ExclusiveSlugs, strategy: MarkupStrategy
) -> ArtifactTable:
    return rewrite_content(
        table,
        exclusive,
        layout=LayoutConfig(),
        subsection=SubsectionConfig(),
        rewrite=RewriteConfig(),
        strategy=strategy,
    )


def _scenario(strategy: MarkupStrategy) -> ArtifactTable:
    primary, secondary = scenario_builds()
    merged = merge_artifacts(primary, secondary, layout=LayoutConfig())
    return _rewrite(merged.table, merged.exclusive, strategy)


def _back_link(html: str) -> tuple[str | None, str]:
    soup = BeautifulSoup(html, "html.parser")
    anchor = soup.find("a", class_="font-mono")
    assert anchor is not None, "expected a back link on the post page"
    return anchor.get("href"), anchor.get_text(strip=True)


@pytest.mark.parametrize("strategy", STRATEGIES)
def test_every_page_gains_devlog_nav_link(strategy: MarkupStrategy) -> None:
    """Each HTML page links to the devlog from its navigation block."""
    table = _scenario(strategy)
    for path in ("index.html", "a/index.html", "b/index.html", "devlog/index.html"):
        soup = BeautifulSoup(table[path].content, "html.parser")
        nav_hrefs = [a.get("href") for a in soup.find("nav").find_all("a")]
        assert nav_hrefs == ["/", "/devlog"], f"{path}: nav links {nav_hrefs!r}"


@pytest.mark.parametrize("strategy", STRATEGIES)
def test_devlog_index_is_retitled(strategy: MarkupStrategy) -> None:
    """Only the subsection root receives the subsection title."""
    table = _scenario(strategy)
    devlog = BeautifulSoup(table["devlog/index.html"].content, "html.parser")
    home = BeautifulSoup(table["index.html"].content, "html.parser")
    assert devlog.title.get_text() == "Devlog - Lord Ajax"
    assert home.title.get_text() == "Home"


@pytest.mark.parametrize("strategy", STRATEGIES)
def test_back_link_rewrite_is_scoped_to_exclusive_pages(
    strategy: MarkupStrategy,
) -> None:
    """The exclusive post links back to the devlog, the primary post does not."""
    table = _scenario(strategy)
    assert _back_link(table["b/index.html"].content) == ("/devlog", "← Back to devlog")
    assert _back_link(table["a/index.html"].content) == ("/", "← Back to posts")


def test_textual_rewrite_output_is_exact() -> None:
    """Textual rewriting reproduces the reference markup byte for byte."""
    table = _scenario(TextualStrategy())
    html = table["b/index.html"].content
    assert (
        '        <a href="/">Posts</a>\n'
        "      "
        '          <a href="/devlog">Devlog</a>\n'
        "      </nav>\n"
    ) in html
    assert LinkSwap().markup(new=True) in html
    assert BACK_LINK not in html


@pytest.mark.parametrize("strategy", STRATEGIES)
def test_rewrite_is_idempotent(strategy: MarkupStrategy) -> None:
    """A second pass over rewritten output changes nothing."""
    primary, secondary = scenario_builds()
    merged = merge_artifacts(primary, secondary, layout=LayoutConfig())
    once = _rewrite(merged.table, merged.exclusive, strategy)
    twice = _rewrite(once, merged.exclusive, strategy)
    assert contents(twice) == contents(once)


@pytest.mark.parametrize("strategy", STRATEGIES)
def test_missing_markers_are_skipped(strategy: MarkupStrategy) -> None:
    """Pages without nav, title, or back link pass through unchanged."""
    bare = "<html><body><p>plain</p></body></html>"
    table = ArtifactTable(
        artifacts(Origin.SECONDARY, {"devlog/index.html": bare, "b/index.html": bare})
    )
    result = _rewrite(table, ExclusiveSlugs({"b": "b/index.html"}), strategy)
    assert contents(result) == contents(table)


def test_non_hypertext_and_binary_artifacts_are_untouched() -> None:
    """Only text artifacts ending in ``.html`` are rewritten."""
    nav = page_html("Feed")
    table = ArtifactTable(
        artifacts(
            Origin.PRIMARY,
            {"feed.xml": nav, "logo.html": b"<nav></nav>", "notes.txt": nav},
        )
    )
    result = _rewrite(table, ExclusiveSlugs(), TextualStrategy())
    assert contents(result) == contents(table)


def test_marker_on_non_exclusive_page_is_not_rewritten() -> None:
    """Pages outside the exclusive set keep their back link even with the marker."""
    table = ArtifactTable(
        artifacts(
            Origin.SECONDARY,
            {
                "c/index.html": page_html("C", post=True),
                "b/extra.html": page_html("Extra", post=True),
            },
        )
    )
    result = _rewrite(table, ExclusiveSlugs({"b": "b/index.html"}), TextualStrategy())
    for path in ("c/index.html", "b/extra.html"):
        assert BACK_LINK in result[path].content, f"{path} should keep its back link"
