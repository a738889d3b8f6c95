"""Utility helpers shared by the build configuration loader."""

from __future__ import annotations

import typing as typ

from .models import BuildConfigError

STRATEGIES = ("structural", "textual")


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _section(raw: typ.Mapping[str, typ.Any], key: str) -> typ.Mapping[str, typ.Any]:
    """Return the mapping stored under ``key``, treating a missing value as empty."""
    value = raw.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        msg = f"Configuration section '{key}' must be a mapping."
        raise BuildConfigError(msg)
    return value


def _positive_int(value: object, *, name: str) -> int:
    """Coerce ``value`` into a positive integer or raise BuildConfigError."""
    if isinstance(value, bool):
        msg = f"'{name}' must be a positive integer, got {value!r}."
        raise BuildConfigError(msg)
    try:
        number = int(str(value).strip())
    except ValueError as exc:
        msg = f"'{name}' must be a positive integer, got {value!r}."
        raise BuildConfigError(msg) from exc
    if number < 1:
        msg = f"'{name}' must be a positive integer, got {value!r}."
        raise BuildConfigError(msg)
    return number


def _normalize_extensions(value: str | list[object] | None) -> list[str]:
    """Normalize slug extensions into a list of bare, lowercase suffixes."""
    if value is None:
        return ["html"]
    if isinstance(value, str):
        segments: list[object] = [value]
    elif isinstance(value, list):
        segments = value
    else:
        msg = "'layout.slug_extensions' must be a string or a list of strings."
        raise BuildConfigError(msg)
    normalized: list[str] = []
    for segment in segments:
        text = str(segment).strip().lstrip(".").lower()
        if text and text not in normalized:
            normalized.append(text)
    if not normalized:
        msg = "'layout.slug_extensions' must name at least one extension."
        raise BuildConfigError(msg)
    return normalized


def _normalize_slug(value: object) -> str:
    """Return a subsection slug stripped of surrounding slashes."""
    text = str(value).strip().strip("/")
    if not text or "/" in text:
        msg = f"'subsection.slug' must be a single path segment, got {value!r}."
        raise BuildConfigError(msg)
    return text


def _validate_strategy(value: object) -> str:
    """Return the rewrite strategy name, rejecting unknown strategies."""
    name = str(value).strip().lower()
    if name not in STRATEGIES:
        known = ", ".join(STRATEGIES)
        msg = f"Unknown rewrite strategy {value!r}. Known strategies: {known}"
        raise BuildConfigError(msg)
    return name


__all__ = [
    "STRATEGIES",
    "_normalize_extensions",
    "_normalize_slug",
    "_optional_str",
    "_positive_int",
    "_section",
    "_validate_strategy",
]
