"""Fold the secondary build's sitemap entries into the primary sitemap."""

from __future__ import annotations

import collections.abc as cabc
import logging
import typing as typ

from .models import Artifact, ArtifactTable, ExclusiveSlugs

if typ.TYPE_CHECKING:
    from devlog_pages.config import LayoutConfig, SubsectionConfig

    from .strategies import MarkupStrategy

logger = logging.getLogger(__name__)


def subsection_entry(subsection: SubsectionConfig) -> str:
    """Return the sitemap entry announcing the subsection root."""
    return (
        "  <url>\n"
        f"    <loc>{subsection.url}</loc>\n"
        f"    <changefreq>{subsection.changefreq}</changefreq>\n"
        f"    <priority>{subsection.priority}</priority>\n"
        "  </url>"
    )


def select_entries(
    entries: cabc.Iterable[str], exclusive: ExclusiveSlugs
) -> list[str]:
    """Keep entries whose text contains ``/<slug>/`` for an exclusive slug.

    Matching is plain substring containment, so a slug that appears inside an
    unrelated URL also matches.
    """
    needles = [f"/{slug}/" for slug in exclusive]
    return [entry for entry in entries if any(n in entry for n in needles)]


def reconcile_sitemap(
    table: ArtifactTable,
    secondary: cabc.Sequence[Artifact],
    exclusive: ExclusiveSlugs,
    *,
    layout: LayoutConfig,
    subsection: SubsectionConfig,
    strategy: MarkupStrategy,
) -> ArtifactTable:
    """Return ``table`` with the secondary entries spliced into its sitemap.

    The table is returned untouched when either build lacks a text sitemap.
    """
    path = layout.sitemap_path
    current = table.get(path)
    secondary_sitemap = next(
        (artifact for artifact in secondary if artifact.path == path), None
    )
    if current is None or secondary_sitemap is None:
        logger.debug("skipping sitemap merge: %s missing from a build", path)
        return table
    if not (current.is_text and secondary_sitemap.is_text):
        return table

    entries = strategy.extract_sitemap_entries(
        typ.cast("str", secondary_sitemap.content)
    )
    kept = select_entries(entries, exclusive)
    merged = strategy.splice_sitemap_entries(
        typ.cast("str", current.content), [subsection_entry(subsection), *kept]
    )
    logger.debug("sitemap gained %d subsection entries", len(kept) + 1)

    result = table.copy()
    result.insert(current.with_content(merged))
    return result


__all__ = ["reconcile_sitemap", "select_entries", "subsection_entry"]
