"""Union the primary and secondary builds into one artifact table.

Primary artifacts are authoritative: a secondary artifact is kept only when
the artifact already stored at its path is not tagged :attr:`Origin.PRIMARY`.
The secondary index is the single exception and is always moved into the
subsection namespace. Surviving artifacts tagged :attr:`Origin.SECONDARY` that
match ``<slug>/index.<ext>`` mark their slug as exclusive to the secondary
stream.
"""

from __future__ import annotations

import collections.abc as cabc
import re
import typing as typ

from .models import Artifact, ArtifactTable, ExclusiveSlugs, MergeResult, Origin

if typ.TYPE_CHECKING:
    from devlog_pages.config import LayoutConfig


def slug_pattern(extensions: cabc.Iterable[str]) -> re.Pattern[str]:
    """Compile the ``<slug>/index.<ext>`` matcher for ``extensions``."""
    alternatives = "|".join(re.escape(ext) for ext in extensions)
    return re.compile(rf"^(?P<slug>[^/]+)/index\.(?:{alternatives})$")


def match_slug(path: str, pattern: re.Pattern[str]) -> str | None:
    """Return the slug encoded in ``path`` or None when it does not match."""
    match = pattern.match(path)
    return match.group("slug") if match else None


def merge_artifacts(
    primary: cabc.Sequence[Artifact],
    secondary: cabc.Sequence[Artifact],
    *,
    layout: LayoutConfig,
) -> MergeResult:
    """Merge two builds, keeping primary artifacts on path collisions.

    Parameters
    ----------
    primary : Sequence[Artifact]
        Artifacts from the primary invocation.
    secondary : Sequence[Artifact]
        Artifacts from the secondary invocation.
    layout : LayoutConfig
        Supplies the index path, the subsection index path, and the slug
        extensions.

    Returns
    -------
    MergeResult
        The merged table plus the slugs exclusive to the secondary build.
    """
    table = ArtifactTable(primary)
    subsection_index = layout.subsection_index_path
    for artifact in secondary:
        if artifact.path == layout.index_path:
            table.insert(artifact.moved_to(subsection_index))
            continue
        if artifact.path == subsection_index:
            continue
        current = table.get(artifact.path)
        if current is None or current.origin is not Origin.PRIMARY:
            table.insert(artifact)

    pattern = slug_pattern(layout.slug_extensions)
    exclusive = ExclusiveSlugs()
    for path, artifact in table.items():
        if artifact.origin is not Origin.SECONDARY or path == subsection_index:
            continue
        slug = match_slug(path, pattern)
        if slug is not None:
            exclusive.add(slug, path)

    return MergeResult(table=table, exclusive=exclusive)


__all__ = ["match_slug", "merge_artifacts", "slug_pattern"]
