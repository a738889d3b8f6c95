"""Unit tests for sitemap reconciliation under both markup strategies."""

from __future__ import annotations

import xml.etree.ElementTree as ET

import pytest

from devlog_pages.config import LayoutConfig, SubsectionConfig
from devlog_pages.pipeline import (
    ExclusiveSlugs,
    MarkupStrategy,
    Origin,
    StructuralStrategy,
    TextualStrategy,
    merge_artifacts,
    reconcile_sitemap,
)
from devlog_pages.pipeline.sitemap import select_entries, subsection_entry
from tests.helpers import artifacts, scenario_builds, sitemap_xml

NS = "{http://www.sitemaps.org/schemas/sitemap/0.9}"


def _locs(xml: str) -> list[str]:
    root = ET.fromstring(xml)
    return [loc.text or "" for loc in root.iter(f"{NS}loc")]


@pytest.mark.parametrize("strategy", [TextualStrategy(), StructuralStrategy()])
def test_scenario_sitemap_gains_subsection_and_exclusive_entries(
    strategy: MarkupStrategy,
) -> None:
    """The primary sitemap gains the devlog root and the exclusive post."""
    primary, secondary = scenario_builds()
    merged = merge_artifacts(primary, secondary, layout=LayoutConfig())
    table = reconcile_sitemap(
        merged.table,
        secondary,
        merged.exclusive,
        layout=LayoutConfig(),
        subsection=SubsectionConfig(),
        strategy=strategy,
    )
    locs = _locs(table["sitemap.xml"].content)
    assert locs == [
        "https://example.com/",
        "https://example.com/a/",
        "https://example.com/devlog/",
        "https://example.com/b/",
    ], f"unexpected sitemap locations {locs!r}"


def test_textual_splice_matches_reference_layout() -> None:
    """Textual splicing indents entries and keeps the closing tag last."""
    primary, secondary = scenario_builds()
    merged = merge_artifacts(primary, secondary, layout=LayoutConfig())
    table = reconcile_sitemap(
        merged.table,
        secondary,
        merged.exclusive,
        layout=LayoutConfig(),
        subsection=SubsectionConfig(),
        strategy=TextualStrategy(),
    )
    content = table["sitemap.xml"].content
    expected_tail = (
        f"{subsection_entry(SubsectionConfig())}\n"
        "  <url>\n    <loc>https://example.com/b/</loc>\n  </url>\n"
        "</urlset>\n"
    )
    assert content.endswith(expected_tail)
    assert content.count("</urlset>") == 1


def test_no_secondary_sitemap_is_byte_identical() -> None:
    """Without a secondary sitemap the primary sitemap is untouched."""
    primary, secondary = scenario_builds()
    secondary = [a for a in secondary if a.path != "sitemap.xml"]
    merged = merge_artifacts(primary, secondary, layout=LayoutConfig())
    table = reconcile_sitemap(
        merged.table,
        secondary,
        merged.exclusive,
        layout=LayoutConfig(),
        subsection=SubsectionConfig(),
        strategy=TextualStrategy(),
    )
    assert table["sitemap.xml"].content == primary[2].content


def test_no_primary_sitemap_is_noop() -> None:
    """Without a primary sitemap nothing is added to the table."""
    secondary = artifacts(Origin.SECONDARY, {"sitemap.xml": sitemap_xml("b")})
    merged = merge_artifacts([], secondary, layout=LayoutConfig())
    del merged.table["sitemap.xml"]
    table = reconcile_sitemap(
        merged.table,
        secondary,
        merged.exclusive,
        layout=LayoutConfig(),
        subsection=SubsectionConfig(),
        strategy=TextualStrategy(),
    )
    assert "sitemap.xml" not in table


def test_missing_closing_tag_leaves_sitemap_unchanged() -> None:
    """A primary sitemap without ``</urlset>`` is skipped, not corrupted."""
    strategy = TextualStrategy()
    broken = "<urlset><url><loc>https://example.com/</loc></url>"
    assert strategy.splice_sitemap_entries(broken, ["<url/>"]) == broken


def test_select_entries_substring_false_positive() -> None:
    """Substring matching also keeps unrelated URLs containing ``/<slug>/``."""
    exclusive = ExclusiveSlugs({"b": "b/index.html"})
    entries = [
        "<url><loc>https://example.com/b/</loc></url>",
        "<url><loc>https://example.com/tags/b/</loc></url>",
        "<url><loc>https://example.com/bb/</loc></url>",
    ]
    kept = select_entries(entries, exclusive)
    assert kept == entries[:2]


def test_subsection_entry_uses_site_url() -> None:
    """The synthesized root entry points at ``<site_url>/<slug>/``."""
    entry = subsection_entry(SubsectionConfig(site_url="https://lordajax.com/"))
    assert "<loc>https://lordajax.com/devlog/</loc>" in entry
    assert "<changefreq>daily</changefreq>" in entry
    assert "<priority>0.9</priority>" in entry


def test_structural_splice_keeps_plain_urlset_unqualified() -> None:
    """A ``<urlset>`` without a namespace gains entries but no ``xmlns``."""
    strategy = StructuralStrategy()
    plain = "<urlset><url><loc>https://example.com/</loc></url></urlset>"
    entries = strategy.extract_sitemap_entries(sitemap_xml("b"))
    merged = strategy.splice_sitemap_entries(plain, entries[1:])

    assert "xmlns" not in merged
    root = ET.fromstring(merged)
    assert [loc.text for loc in root.iter("loc")] == [
        "https://example.com/",
        "https://example.com/b/",
    ]


def test_structural_extract_yields_unqualified_fragments() -> None:
    """Extracted entries look like their textual counterparts."""
    entries = StructuralStrategy().extract_sitemap_entries(sitemap_xml("b"))
    assert entries[1] == "<url>\n    <loc>https://example.com/b/</loc>\n  </url>"


def test_structural_splice_writes_default_namespace_without_prefixes() -> None:
    """A namespaced ``<urlset>`` is written back with its default namespace."""
    merged = StructuralStrategy().splice_sitemap_entries(
        sitemap_xml("a"), ["<url><loc>https://example.com/b/</loc></url>"]
    )
    assert merged.startswith('<?xml version="1.0" encoding="UTF-8"?>\n<urlset xmlns=')
    assert "ns0:" not in merged
    assert _locs(merged)[-1] == "https://example.com/b/"


def test_structural_strategy_leaves_global_prefixes_alone() -> None:
    """Importing the strategies does not register a process-wide prefix."""
    element = ET.Element(f"{NS}urlset")
    assert ET.tostring(element, encoding="unicode").startswith("<ns0:urlset")
