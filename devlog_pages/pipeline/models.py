"""Shared data structures used by the split-site merge pipeline."""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import enum


class Origin(enum.Enum):
    """Which renderer invocation produced an artifact."""

    PRIMARY = "primary"
    SECONDARY = "secondary"


@dc.dataclass(frozen=True, slots=True)
class Artifact:
    """One rendered output file.

    Attributes
    ----------
    origin : Origin
        The renderer invocation the artifact came from.
    path : str
        Normalized relative POSIX path, unique within one invocation.
    content : str or bytes
        Text content, or an opaque binary payload.
    """

    origin: Origin
    path: str
    content: str | bytes

    @property
    def is_text(self) -> bool:
        """Return True when the content is text rather than bytes."""
        return isinstance(self.content, str)

    def with_content(self, content: str | bytes) -> Artifact:
        """Return a copy carrying ``content``."""
        return dc.replace(self, content=content)

    def moved_to(self, path: str) -> Artifact:
        """Return a copy stored under ``path``."""
        return dc.replace(self, path=path)


class ArtifactTable(cabc.MutableMapping[str, Artifact]):
    """Insertion-ordered mapping from artifact path to artifact.

    Later insertions for an existing path replace the stored artifact but keep
    its original position.
    """

    def __init__(self, artifacts: cabc.Iterable[Artifact] = ()) -> None:
        self._entries: dict[str, Artifact] = {}
        for artifact in artifacts:
            self.insert(artifact)

    def insert(self, artifact: Artifact) -> None:
        """Store ``artifact`` under its own path."""
        self._entries[artifact.path] = artifact

    def copy(self) -> ArtifactTable:
        """Return a shallow copy that can be modified independently."""
        return ArtifactTable(self._entries.values())

    def __getitem__(self, path: str) -> Artifact:
        return self._entries[path]

    def __setitem__(self, path: str, artifact: Artifact) -> None:
        if artifact.path != path:
            artifact = artifact.moved_to(path)
        self._entries[path] = artifact

    def __delitem__(self, path: str) -> None:
        del self._entries[path]

    def __iter__(self) -> cabc.Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"ArtifactTable({list(self._entries)!r})"


@dc.dataclass(slots=True)
class ExclusiveSlugs:
    """Slugs of pages rendered only by the secondary invocation.

    Each slug maps to the first artifact path that produced it; later paths
    yielding the same slug do not replace the owner.
    """

    owners: dict[str, str] = dc.field(default_factory=dict)

    def add(self, slug: str, path: str) -> bool:
        """Record ``slug`` for ``path`` unless it is already owned."""
        if slug in self.owners:
            return False
        self.owners[slug] = path
        return True

    def __contains__(self, slug: object) -> bool:
        return slug in self.owners

    def __iter__(self) -> cabc.Iterator[str]:
        return iter(self.owners)

    def __len__(self) -> int:
        return len(self.owners)


@dc.dataclass(slots=True)
class MergeResult:
    """Output of the merge engine."""

    table: ArtifactTable
    exclusive: ExclusiveSlugs


__all__ = ["Artifact", "ArtifactTable", "ExclusiveSlugs", "MergeResult", "Origin"]
