"""Load and validate the split-site build configuration.

This subpackage parses an optional YAML file describing how a blog manifest is
split into a primary site and a secondary subsection, fills every omitted key
from defaults, and produces typed dataclasses (:class:`BuildConfig`,
:class:`SubsectionConfig`, etc.) that the merge pipeline consumes. The primary
entry point is :func:`load_build_config`.

Examples
--------
>>> from pathlib import Path
>>> from devlog_pages.config import load_build_config
>>> config = load_build_config(Path("config/build.yaml"))  # doctest: +SKIP
>>> config.layout.subsection_index_path  # doctest: +SKIP
'devlog/index.html'
"""

from .loader import build_config_from_mapping, load_build_config
from .models import (
    BuildConfig,
    BuildConfigError,
    LayoutConfig,
    LinkSwap,
    PaginationConfig,
    PartitionConfig,
    RewriteConfig,
    SubsectionConfig,
)

__all__ = [
    "BuildConfig",
    "BuildConfigError",
    "LayoutConfig",
    "LinkSwap",
    "PaginationConfig",
    "PartitionConfig",
    "RewriteConfig",
    "SubsectionConfig",
    "build_config_from_mapping",
    "load_build_config",
]
