"""Call a renderer for one partition and normalize what it returns."""

from __future__ import annotations

import collections.abc as cabc
import posixpath
import typing as typ

from .models import Artifact, Origin

if typ.TYPE_CHECKING:
    from pathlib import Path

    from devlog_pages.manifest import ContentSet


class RendererOutputError(ValueError):
    """Raised when a renderer returns artifacts that break its contract."""


class Renderer(typ.Protocol):
    """Anything that turns a content set into a list of rendered files."""

    def __call__(
        self, content: ContentSet, base_dir: Path
    ) -> cabc.Iterable[typ.Any]:  # pragma: no cover - protocol
        ...


def invoke_renderer(
    renderer: Renderer,
    content: ContentSet,
    base_dir: Path,
    *,
    origin: Origin,
    settings_override: cabc.Mapping[str, typ.Any] | None = None,
) -> list[Artifact]:
    """Render ``content`` once and return origin-tagged artifacts.

    Parameters
    ----------
    renderer : Renderer
        Rendering callable; exceptions it raises propagate unchanged.
    content : ContentSet
        Posts and settings for this partition.
    base_dir : Path
        Directory the renderer resolves relative post sources against.
    origin : Origin
        Tag stamped on every returned artifact.
    settings_override : Mapping, optional
        Settings merged over ``content.settings`` for this call only.

    Returns
    -------
    list[Artifact]
        Artifacts in renderer order.

    Raises
    ------
    RendererOutputError
        If an item lacks a name or content, a path is empty or escapes the
        output root, or two items share a path.
    """
    effective = content.with_settings(settings_override or {})
    artifacts: list[Artifact] = []
    seen: set[str] = set()
    for item in renderer(effective, base_dir):
        artifact = _coerce_artifact(item, origin)
        if artifact.path in seen:
            msg = f"Renderer emitted '{artifact.path}' more than once."
            raise RendererOutputError(msg)
        seen.add(artifact.path)
        artifacts.append(artifact)
    return artifacts


def normalize_artifact_path(raw: str) -> str:
    """Return ``raw`` as a clean relative POSIX path inside the output root."""
    text = str(raw).replace("\\", "/").lstrip("/")
    normalized = posixpath.normpath(text) if text else ""
    if normalized in ("", ".") or normalized == ".." or normalized.startswith("../"):
        msg = f"Artifact path {raw!r} does not name a file inside the output root."
        raise RendererOutputError(msg)
    return normalized


def _coerce_artifact(item: object, origin: Origin) -> Artifact:
    """Convert one ``{"name", "content"}`` record into an Artifact."""
    if not isinstance(item, cabc.Mapping):
        msg = f"Renderer output {item!r} is not a name/content record."
        raise RendererOutputError(msg)
    record = typ.cast("cabc.Mapping[str, typ.Any]", item)
    name = record.get("name")
    content = record.get("content")
    if name is None:
        msg = f"Renderer output {item!r} has no name."
        raise RendererOutputError(msg)
    if not isinstance(content, str | bytes):
        msg = f"Renderer output '{name}' has no text or bytes content."
        raise RendererOutputError(msg)
    return Artifact(origin, normalize_artifact_path(name), content)


__all__ = [
    "Renderer",
    "RendererOutputError",
    "invoke_renderer",
    "normalize_artifact_path",
]
