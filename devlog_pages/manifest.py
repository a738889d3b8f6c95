"""Blog manifest loading and provenance-based partitioning.

A manifest is a JSON document holding a ``posts`` array and a ``settings``
record (plus any other keys the renderer understands, such as ``site``). This
module decodes it into an immutable :class:`ContentSet` and splits that set
into the primary and secondary streams with :func:`partition_content`.

Examples
--------
>>> content = ContentSet.from_mapping(
...     {"posts": [{"title": "a"}, {"title": "b", "type": "ai"}], "settings": {}}
... )
>>> split = partition_content(content, is_secondary=ProvenanceRule().matches)
>>> [item["title"] for item in split.secondary.posts]
['b']
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import typing as typ
from pathlib import Path

import msgspec
import msgspec.json as msgspec_json

ContentItem = cabc.Mapping[str, typ.Any]


class ManifestError(ValueError):
    """Raised when a blog manifest cannot be used as a content set."""


@dc.dataclass(frozen=True, slots=True)
class ContentSet:
    """Ordered posts plus the settings passed to a renderer as one unit."""

    posts: tuple[ContentItem, ...] = ()
    settings: cabc.Mapping[str, typ.Any] = dc.field(default_factory=dict)
    extras: cabc.Mapping[str, typ.Any] = dc.field(default_factory=dict)

    @classmethod
    def from_mapping(cls, payload: cabc.Mapping[str, typ.Any]) -> ContentSet:
        """Build a content set from a decoded manifest mapping."""
        posts = payload.get("posts", [])
        if not isinstance(posts, list):
            msg = "Manifest 'posts' must be a list."
            raise ManifestError(msg)
        for index, post in enumerate(posts):
            if not isinstance(post, dict):
                msg = f"Manifest post #{index} must be an object."
                raise ManifestError(msg)
        settings = payload.get("settings") or {}
        if not isinstance(settings, dict):
            msg = "Manifest 'settings' must be an object."
            raise ManifestError(msg)
        site = payload.get("site")
        if site is not None and not isinstance(site, dict):
            msg = "Manifest 'site' must be an object."
            raise ManifestError(msg)
        extras = {
            key: value
            for key, value in payload.items()
            if key not in ("posts", "settings")
        }
        return cls(posts=tuple(posts), settings=dict(settings), extras=extras)

    def with_posts(self, posts: cabc.Iterable[ContentItem]) -> ContentSet:
        """Return a copy holding ``posts`` with the same settings and extras."""
        return dc.replace(self, posts=tuple(posts))

    def with_settings(self, overrides: cabc.Mapping[str, typ.Any]) -> ContentSet:
        """Return a copy whose settings are updated with ``overrides``."""
        if not overrides:
            return self
        return dc.replace(self, settings={**self.settings, **overrides})


@dc.dataclass(frozen=True, slots=True)
class Partition:
    """The two disjoint content sets produced by :func:`partition_content`."""

    primary: ContentSet
    secondary: ContentSet


@dc.dataclass(frozen=True, slots=True)
class ProvenanceRule:
    """Classify a post as secondary when ``field`` equals ``secondary_value``."""

    field: str = "type"
    secondary_value: str = "ai"

    def matches(self, item: ContentItem) -> bool:
        """Return True when ``item`` belongs to the secondary stream."""
        return item.get(self.field) == self.secondary_value


def partition_content(
    content: ContentSet, *, is_secondary: cabc.Callable[[ContentItem], bool]
) -> Partition:
    """Split ``content`` into primary and secondary sets, preserving order."""
    primary: list[ContentItem] = []
    secondary: list[ContentItem] = []
    for item in content.posts:
        (secondary if is_secondary(item) else primary).append(item)
    return Partition(
        primary=content.with_posts(primary),
        secondary=content.with_posts(secondary),
    )


def load_manifest(path: Path) -> ContentSet:
    """Read and decode the JSON manifest at ``path``.

    Raises
    ------
    FileNotFoundError
        If the manifest does not exist.
    ManifestError
        If the document is not valid JSON or lacks a usable ``posts`` list.
    """
    if not path.exists():
        msg = f"Manifest file '{path}' not found."
        raise FileNotFoundError(msg)
    try:
        payload = msgspec_json.decode(path.read_bytes())
    except msgspec.DecodeError as exc:
        msg = f"Manifest '{path}' is not valid JSON: {exc}"
        raise ManifestError(msg) from exc
    if not isinstance(payload, dict):
        msg = f"Manifest '{path}' must contain a JSON object."
        raise ManifestError(msg)
    if "posts" not in payload:
        msg = f"Manifest '{path}' has no 'posts' list."
        raise ManifestError(msg)
    return ContentSet.from_mapping(payload)


__all__ = [
    "ContentItem",
    "ContentSet",
    "ManifestError",
    "Partition",
    "ProvenanceRule",
    "load_manifest",
    "partition_content",
]
