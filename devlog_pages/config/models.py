"""Typed dataclasses describing the split-site build configuration."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

from devlog_pages._constants import (
    BACK_LINK_CLASSES,
    DEFAULT_SITE_URL,
    HYPERTEXT_SUFFIX,
    INDEX_PATH,
    PAGINATION_KEY,
    SECONDARY_PAGE_LIMIT,
    SITEMAP_PATH,
    SUBSECTION_INDEX_TEMPLATE,
)


class BuildConfigError(ValueError):
    """Raised when the build configuration is invalid or incomplete."""


@dc.dataclass(slots=True)
class PartitionConfig:
    """Which manifest field marks a post as belonging to the secondary stream."""

    field: str = "type"
    secondary_value: str = "ai"


@dc.dataclass(slots=True)
class PaginationConfig:
    """Settings override applied to the secondary renderer invocation."""

    key: str = PAGINATION_KEY
    secondary_limit: int = SECONDARY_PAGE_LIMIT

    def limit_for(self, item_count: int) -> int:
        """Return a page size that keeps ``item_count`` items on a single page."""
        return max(self.secondary_limit, item_count + 1)


@dc.dataclass(slots=True)
class SubsectionConfig:
    """Where and how the secondary stream is published inside the merged site."""

    slug: str = "devlog"
    label: str = "Devlog"
    title: str = "Devlog - Lord Ajax"
    site_url: str | None = None
    changefreq: str = "daily"
    priority: str = "0.9"

    @property
    def href(self) -> str:
        """Site-absolute link to the subsection root, without trailing slash."""
        return f"/{self.slug}"

    @property
    def url(self) -> str:
        """Canonical absolute URL of the subsection root."""
        base = self.site_url or DEFAULT_SITE_URL
        return f"{base.rstrip('/')}/{self.slug}/"


@dc.dataclass(slots=True)
class LayoutConfig:
    """Fixed artifact paths the merge engine keys on."""

    index_path: str = INDEX_PATH
    sitemap_path: str = SITEMAP_PATH
    hypertext_suffix: str = HYPERTEXT_SUFFIX
    slug_extensions: list[str] = dc.field(default_factory=lambda: ["html"])
    subsection_slug: str = "devlog"

    @property
    def subsection_index_path(self) -> str:
        """Path the secondary index is renamed to."""
        return SUBSECTION_INDEX_TEMPLATE.format(
            slug=self.subsection_slug, index=self.index_path
        )


@dc.dataclass(slots=True)
class LinkSwap:
    """An outbound link rewritten on pages that belong to the subsection."""

    old_href: str = "/"
    old_label: str = "← Back to posts"
    new_href: str = "/devlog"
    new_label: str = "← Back to devlog"
    classes: str = BACK_LINK_CLASSES

    def markup(self, *, new: bool) -> str:
        """Return the exact anchor markup for the old or new link."""
        if new:
            href, label = self.new_href, self.new_label
        else:
            href, label = self.old_href, self.old_label
        return f'<a href="{href}" class="{self.classes}">{label}</a>'


@dc.dataclass(slots=True)
class RewriteConfig:
    """Content rewriting choices for merged hypertext artifacts."""

    strategy: str = "textual"
    back_link: LinkSwap = dc.field(default_factory=LinkSwap)


@dc.dataclass(slots=True)
class BuildConfig:
    """Top-level configuration for a split-site build."""

    manifest: Path = Path("blog.json")
    output_dir: Path = Path("build")
    partition: PartitionConfig = dc.field(default_factory=PartitionConfig)
    pagination: PaginationConfig = dc.field(default_factory=PaginationConfig)
    layout: LayoutConfig = dc.field(default_factory=LayoutConfig)
    subsection: SubsectionConfig = dc.field(default_factory=SubsectionConfig)
    rewrite: RewriteConfig = dc.field(default_factory=RewriteConfig)


__all__ = [
    "BuildConfig",
    "BuildConfigError",
    "LayoutConfig",
    "LinkSwap",
    "PaginationConfig",
    "PartitionConfig",
    "RewriteConfig",
    "SubsectionConfig",
]
