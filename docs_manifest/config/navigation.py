"""Navigation tree builders."""

from __future__ import annotations

import typing as typ

from .models import ManifestParseError, NavNode


def _build_nav(payload: object | None) -> tuple[NavNode, ...]:
    """Build the ordered navigation tree from the ``nav`` section."""
    if payload is None:
        return ()
    if not isinstance(payload, list):
        msg = "'nav' must be a list of entries."
        raise ManifestParseError(msg)
    return _build_children(payload, trail=())


def _build_children(entries: list[typ.Any], *, trail: tuple[str, ...]) -> tuple[NavNode, ...]:
    return tuple(_build_node(entry, trail=trail) for entry in entries)


def _build_node(entry: object, *, trail: tuple[str, ...]) -> NavNode:
    """Build one navigation node.

    Entries are either a bare path (``- index.md``) or a single-key mapping
    whose value is a path (leaf) or a list (section).
    """
    where = " > ".join(trail) or "nav"
    match entry:
        case str():
            return NavNode(label=None, path=entry, trail=trail)
        case dict() if len(entry) == 1:
            label, value = next(iter(entry.items()))
            label = str(label)
        case dict():
            msg = f"Navigation entries under '{where}' must have exactly one label."
            raise ManifestParseError(msg)
        case _:
            msg = f"Invalid navigation entry under '{where}': {entry!r}."
            raise ManifestParseError(msg)

    match value:
        case str():
            return NavNode(label=label, path=value, trail=trail)
        case list():
            children = _build_children(value, trail=(*trail, label))
            return NavNode(label=label, children=children, trail=trail)
        case None:
            return NavNode(label=label, trail=trail)
        case _:
            msg = f"Navigation entry '{label}' under '{where}' must be a path or a list."
            raise ManifestParseError(msg)


__all__ = ["_build_nav"]
