"""Load build configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from .helpers import (
    _normalize_extensions,
    _normalize_slug,
    _optional_str,
    _positive_int,
    _section,
    _validate_strategy,
)
from .models import (
    BuildConfig,
    LayoutConfig,
    LinkSwap,
    PaginationConfig,
    PartitionConfig,
    RewriteConfig,
    SubsectionConfig,
)


def load_build_config(path: Path | None) -> BuildConfig:
    """Load the YAML configuration describing a split-site build.

    Parameters
    ----------
    path : Path or None
        Filesystem path to the YAML configuration file. ``None`` returns the
        built-in defaults, which reproduce the homepage/devlog layout.

    Returns
    -------
    BuildConfig
        Parsed configuration with every omitted key filled from defaults.

    Raises
    ------
    FileNotFoundError
        If ``path`` is given but does not exist.
    TypeError
        If the top-level YAML structure is not a mapping.
    BuildConfigError
        If a section or value is present but invalid (for example, an unknown
        rewrite strategy or a non-positive pagination limit).

    Examples
    --------
    >>> from devlog_pages.config import load_build_config
    >>> load_build_config(None).subsection.slug
    'devlog'
    """
    if path is None:
        return build_config_from_mapping({})
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):  # pragma: no cover - config error guard
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    return build_config_from_mapping(loaded)


def build_config_from_mapping(raw: typ.Mapping[str, typ.Any]) -> BuildConfig:
    """Build a BuildConfig from an already parsed mapping."""
    base = BuildConfig()
    subsection = _build_subsection(_section(raw, "subsection"))
    layout = _build_layout(_section(raw, "layout"), subsection_slug=subsection.slug)
    rewrite = _build_rewrite(_section(raw, "rewrite"), subsection=subsection)

    partition_raw = _section(raw, "partition")
    partition = PartitionConfig(
        field=_optional_str(partition_raw.get("field")) or base.partition.field,
        secondary_value=_optional_str(partition_raw.get("secondary_value"))
        or base.partition.secondary_value,
    )

    pagination_raw = _section(raw, "pagination")
    pagination = PaginationConfig(
        key=_optional_str(pagination_raw.get("key")) or base.pagination.key,
        secondary_limit=_positive_int(
            pagination_raw.get("secondary_limit", base.pagination.secondary_limit),
            name="pagination.secondary_limit",
        ),
    )

    manifest = _optional_str(raw.get("manifest"))
    output_dir = _optional_str(raw.get("output_dir"))
    return BuildConfig(
        manifest=Path(manifest) if manifest else base.manifest,
        output_dir=Path(output_dir) if output_dir else base.output_dir,
        partition=partition,
        pagination=pagination,
        layout=layout,
        subsection=subsection,
        rewrite=rewrite,
    )


def _build_subsection(payload: typ.Mapping[str, typ.Any]) -> SubsectionConfig:
    """Build the SubsectionConfig, deriving the title from the label if omitted."""
    base = SubsectionConfig()
    slug = _normalize_slug(payload.get("slug", base.slug))
    label = _optional_str(payload.get("label")) or slug.replace("-", " ").title()
    title = _optional_str(payload.get("title"))
    if title is None:
        title = base.title if "label" not in payload else label
    return SubsectionConfig(
        slug=slug,
        label=label,
        title=title,
        site_url=_optional_str(payload.get("site_url")),
        changefreq=_optional_str(payload.get("changefreq")) or base.changefreq,
        priority=_optional_str(payload.get("priority")) or base.priority,
    )


def _build_layout(
    payload: typ.Mapping[str, typ.Any], *, subsection_slug: str
) -> LayoutConfig:
    """Build the LayoutConfig bound to the configured subsection slug."""
    base = LayoutConfig()
    suffix = _optional_str(payload.get("hypertext_suffix")) or base.hypertext_suffix
    if not suffix.startswith("."):
        suffix = f".{suffix}"
    return LayoutConfig(
        index_path=_optional_str(payload.get("index_path")) or base.index_path,
        sitemap_path=_optional_str(payload.get("sitemap_path")) or base.sitemap_path,
        hypertext_suffix=suffix,
        slug_extensions=_normalize_extensions(payload.get("slug_extensions")),
        subsection_slug=subsection_slug,
    )


def _build_rewrite(
    payload: typ.Mapping[str, typ.Any], *, subsection: SubsectionConfig
) -> RewriteConfig:
    """Build the RewriteConfig, pointing the new back link at the subsection."""
    base = LinkSwap()
    link_raw = _section(payload, "back_link")
    back_link = LinkSwap(
        old_href=_optional_str(link_raw.get("old_href")) or base.old_href,
        old_label=_optional_str(link_raw.get("old_label")) or base.old_label,
        new_href=_optional_str(link_raw.get("new_href")) or subsection.href,
        new_label=_optional_str(link_raw.get("new_label"))
        or f"← Back to {subsection.label.lower()}",
        classes=_optional_str(link_raw.get("classes")) or base.classes,
    )
    return RewriteConfig(
        strategy=_validate_strategy(payload.get("strategy") or RewriteConfig().strategy),
        back_link=back_link,
    )


__all__ = ["build_config_from_mapping", "load_build_config"]
