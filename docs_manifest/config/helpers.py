"""Utility helpers shared by the manifest loader."""

from __future__ import annotations

import typing as typ

from .models import ManifestParseError

if typ.TYPE_CHECKING:
    import collections.abc as cabc


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _require_str(value: object | None, *, key: str) -> str:
    """Return ``value`` as a non-empty string or raise ManifestParseError."""
    text = _optional_str(value)
    if text is None:
        msg = f"'{key}' is required and must be a non-empty string."
        raise ManifestParseError(msg)
    return text


def _as_mapping(value: object | None, *, key: str) -> dict[str, typ.Any]:
    """Return ``value`` as a dict, treating null as empty."""
    match value:
        case None:
            return {}
        case dict():
            return dict(value)
        case _:
            msg = f"'{key}' must be a mapping, got {type(value).__name__}."
            raise ManifestParseError(msg)


def _as_list(value: object | None, *, key: str) -> list[typ.Any]:
    """Return ``value`` as a list, treating null as empty."""
    match value:
        case None:
            return []
        case list() | tuple():
            return list(value)
        case _:
            msg = f"'{key}' must be a list, got {type(value).__name__}."
            raise ManifestParseError(msg)


def _str_tuple(value: object | None, *, key: str) -> tuple[str, ...]:
    """Return a tuple of strings from a list, skipping nulls."""
    return tuple(str(item) for item in _as_list(value, key=key) if item is not None)


def _split_entry(entry: object, *, key: str) -> tuple[str, dict[str, typ.Any]]:
    """Split a ``name`` or ``{name: options}`` list entry into its parts."""
    match entry:
        case str():
            return entry, {}
        case dict() if len(entry) == 1:
            identifier, options = next(iter(entry.items()))
            return str(identifier), _as_mapping(options, key=f"{key}.{identifier}")
        case dict():
            names = ", ".join(str(name) for name in entry)
            msg = f"Each '{key}' entry must name exactly one item, got: {names}."
            raise ManifestParseError(msg)
        case _:
            msg = f"Invalid '{key}' entry: {entry!r}."
            raise ManifestParseError(msg)


def _entries(value: object | None, *, key: str) -> list[tuple[str, dict[str, typ.Any]]]:
    """Normalise a plugin or extension section into ordered ``(name, options)``.

    MkDocs accepts either a list of entries or a mapping of name to options;
    both keep their declared order.
    """
    if isinstance(value, dict):
        return [
            (str(name), _as_mapping(options, key=f"{key}.{name}"))
            for name, options in value.items()
        ]
    return [_split_entry(entry, key=key) for entry in _as_list(value, key=key)]


def _deep_merge(
    base: cabc.Mapping[str, typ.Any], override: cabc.Mapping[str, typ.Any]
) -> dict[str, typ.Any]:
    """Merge ``override`` into ``base`` recursively; override wins on conflicts."""
    merged: dict[str, typ.Any] = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = value
    return merged


__all__ = [
    "_as_list",
    "_as_mapping",
    "_deep_merge",
    "_entries",
    "_optional_str",
    "_require_str",
    "_split_entry",
    "_str_tuple",
]
