"""Partition, render, merge, rewrite, and publish a split static site."""

from .builder import BuildReport, SplitSiteBuilder
from .invocation import Renderer, RendererOutputError, invoke_renderer
from .merge import merge_artifacts
from .models import Artifact, ArtifactTable, ExclusiveSlugs, MergeResult, Origin
from .publisher import publish
from .rewriter import rewrite_content
from .sitemap import reconcile_sitemap
from .strategies import (
    MarkupStrategy,
    StructuralStrategy,
    TextualStrategy,
    make_strategy,
)

__all__ = [
    "Artifact",
    "ArtifactTable",
    "BuildReport",
    "ExclusiveSlugs",
    "MarkupStrategy",
    "MergeResult",
    "Origin",
    "Renderer",
    "RendererOutputError",
    "SplitSiteBuilder",
    "StructuralStrategy",
    "TextualStrategy",
    "invoke_renderer",
    "make_strategy",
    "merge_artifacts",
    "publish",
    "reconcile_sitemap",
    "rewrite_content",
]
