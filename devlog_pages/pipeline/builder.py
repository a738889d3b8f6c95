"""High-level orchestration for the split-site build.

This module wires the pipeline stages together. :class:`SplitSiteBuilder`
loads a blog manifest, partitions its posts into the primary and secondary
streams, renders each stream once, merges the two builds, folds the secondary
sitemap into the primary one, rewrites the merged HTML, and publishes the
result. Every stage before publishing works on in-memory data, so a failure
anywhere aborts the build before the destination is touched.

Example
-------
>>> from pathlib import Path
>>> from devlog_pages.config import load_build_config
>>> from devlog_pages.pipeline import SplitSiteBuilder
>>> builder = SplitSiteBuilder(load_build_config(None))
>>> report = builder.run(manifest_path=Path("blog.json"))  # doctest: +SKIP
>>> report.secondary_posts  # doctest: +SKIP
12
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ

from devlog_pages.blog import BlogRenderer
from devlog_pages.manifest import (
    ContentSet,
    Partition,
    ProvenanceRule,
    load_manifest,
    partition_content,
)

from .invocation import invoke_renderer
from .merge import merge_artifacts
from .models import Artifact, ArtifactTable, ExclusiveSlugs, Origin
from .publisher import publish
from .rewriter import rewrite_content
from .sitemap import reconcile_sitemap
from .strategies import make_strategy

if typ.TYPE_CHECKING:
    from pathlib import Path

    from devlog_pages.config import BuildConfig, SubsectionConfig

    from .invocation import Renderer

logger = logging.getLogger(__name__)


@dc.dataclass(slots=True)
class BuildResult:
    """Everything the in-memory stages produced for one build."""

    partition: Partition
    primary: list[Artifact]
    secondary: list[Artifact]
    table: ArtifactTable
    exclusive: ExclusiveSlugs


@dc.dataclass(slots=True)
class BuildReport:
    """Summary of a published build."""

    primary_posts: int
    secondary_posts: int
    primary_artifacts: int
    secondary_artifacts: int
    exclusive_slugs: list[str]
    files_written: int
    output_dir: Path


class SplitSiteBuilder:
    """Render a manifest twice and publish one merged site."""

    def __init__(self, config: BuildConfig, *, renderer: Renderer | None = None) -> None:
        """Initialize the builder.

        Parameters
        ----------
        config : BuildConfig
            Partitioning, layout, subsection and rewrite settings.
        renderer : Renderer, optional
            Rendering callable invoked once per stream; defaults to
            :class:`~devlog_pages.blog.BlogRenderer`.
        """
        self.config = config
        self.renderer = renderer or BlogRenderer()
        self.strategy = make_strategy(config.rewrite.strategy)
        self.rule = ProvenanceRule(
            field=config.partition.field,
            secondary_value=config.partition.secondary_value,
        )

    def build(self, content: ContentSet, base_dir: Path) -> BuildResult:
        """Run every stage except publishing and return the merged artifacts."""
        config = self.config
        split = partition_content(content, is_secondary=self.rule.matches)
        logger.info(
            "primary posts: %d, secondary posts: %d",
            len(split.primary.posts),
            len(split.secondary.posts),
        )

        primary = invoke_renderer(
            self.renderer, split.primary, base_dir, origin=Origin.PRIMARY
        )
        logger.info("primary build: %d files", len(primary))
        override = {
            config.pagination.key: config.pagination.limit_for(
                len(split.secondary.posts)
            )
        }
        secondary = invoke_renderer(
            self.renderer,
            split.secondary,
            base_dir,
            origin=Origin.SECONDARY,
            settings_override=override,
        )
        logger.info("secondary build: %d files", len(secondary))

        merged = merge_artifacts(primary, secondary, layout=config.layout)
        logger.info(
            "exclusive slugs (%d): %s",
            len(merged.exclusive),
            ", ".join(merged.exclusive),
        )
        subsection = self._resolve_subsection(content)
        table = reconcile_sitemap(
            merged.table,
            secondary,
            merged.exclusive,
            layout=config.layout,
            subsection=subsection,
            strategy=self.strategy,
        )
        table = rewrite_content(
            table,
            merged.exclusive,
            layout=config.layout,
            subsection=subsection,
            rewrite=config.rewrite,
            strategy=self.strategy,
        )
        return BuildResult(
            partition=split,
            primary=primary,
            secondary=secondary,
            table=table,
            exclusive=merged.exclusive,
        )

    def run(
        self, *, manifest_path: Path | None = None, output_dir: Path | None = None
    ) -> BuildReport:
        """Build from the manifest on disk and publish to ``output_dir``.

        Parameters
        ----------
        manifest_path : Path, optional
            Manifest to load; defaults to ``config.manifest``.
        output_dir : Path, optional
            Destination directory; defaults to ``config.output_dir``.

        Returns
        -------
        BuildReport
            Post, artifact, and file counts for the published build.
        """
        manifest = manifest_path or self.config.manifest
        destination = output_dir or self.config.output_dir
        content = load_manifest(manifest)
        result = self.build(content, manifest.resolve().parent)
        written = publish(result.table.values(), destination)
        return BuildReport(
            primary_posts=len(result.partition.primary.posts),
            secondary_posts=len(result.partition.secondary.posts),
            primary_artifacts=len(result.primary),
            secondary_artifacts=len(result.secondary),
            exclusive_slugs=list(result.exclusive),
            files_written=written,
            output_dir=destination,
        )

    def _resolve_subsection(self, content: ContentSet) -> SubsectionConfig:
        """Fill the subsection site URL from the manifest when not configured."""
        subsection = self.config.subsection
        if subsection.site_url:
            return subsection
        site = content.extras.get("site")
        url = site.get("url") if isinstance(site, dict) else None
        if not url:
            return subsection
        return dc.replace(subsection, site_url=str(url))


__all__ = ["BuildReport", "BuildResult", "SplitSiteBuilder"]
