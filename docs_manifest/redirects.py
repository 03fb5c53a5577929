"""Maintain the redirect table after pages move.

Moving a page leaves old links behind; the ``redirects`` plugin keeps them
working by mapping each old path to the page's new location. The helpers here
edit that table in place with the round-trip YAML document, so comments and
ordering in the manifest are untouched, and they keep the table flat: every
entry points directly at its final target, never at another redirect.

Example
-------
.. code-block:: python

    from pathlib import Path
    from docs_manifest.redirects import add_redirect

    change = add_redirect(
        Path("mkdocs.yml"), "advanced/s3.md", "deployment/s3.md"
    )
    for source in change.retargeted:
        print(f"{source} now points at {change.new}")
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import logging
import typing as typ

from ruamel.yaml.comments import CommentedMap, CommentedSeq

from ._constants import REDIRECT_MAPS_KEY, REDIRECTS_PLUGIN
from .config.models import ManifestParseError, ManifestReferenceError
from .document import dump_document, load_document

if typ.TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


@dc.dataclass(frozen=True, slots=True)
class RedirectChange:
    """Outcome of recording one redirect."""

    old: str
    new: str
    previous: str | None = None
    retargeted: tuple[str, ...] = ()


def normalize_path(path: str) -> str:
    """Return ``path`` relative to ``docs_dir`` without ``./`` or ``/`` prefixes."""
    text = path.strip()
    while text.startswith(("./", "/")):
        text = text[2:] if text.startswith("./") else text[1:]
    return text


def add_redirect(config_path: Path, old: str, new: str) -> RedirectChange:
    """Record ``old -> new`` in the manifest's redirect table.

    Existing entries that pointed at ``old`` are retargeted to ``new`` so no
    redirect chains form. The ``redirects`` plugin entry is created when the
    manifest does not have one yet.

    Raises
    ------
    ManifestReferenceError
        If ``old`` and ``new`` are the same page, or ``new`` is itself a
        redirect source.
    ManifestParseError
        If the ``plugins`` section has an unexpected shape.
    """
    old = normalize_path(old)
    new = normalize_path(new)
    if not old or not new:
        msg = "Redirect paths must not be empty."
        raise ManifestReferenceError(msg)
    if _target_path(new) == old:
        msg = f"Cannot redirect '{old}' to itself."
        raise ManifestReferenceError(msg)

    document = load_document(config_path)
    table = typ.cast("CommentedMap", _redirect_table(document, create=True))
    target = _target_path(new)
    if target in table:
        msg = (
            f"'{new}' is itself redirected to '{table[target]}'; "
            "redirect to the final page instead."
        )
        raise ManifestReferenceError(msg)

    previous = table.get(old)
    retargeted: list[str] = []
    for source, destination in list(table.items()):
        if _target_path(str(destination)) == old:
            table[source] = _retarget(str(destination), new)
            retargeted.append(str(source))
    table[old] = new

    dump_document(document, config_path)
    logger.debug("recorded redirect %s -> %s (retargeted %s)", old, new, retargeted)
    return RedirectChange(
        old=old,
        new=new,
        previous=str(previous) if previous is not None else None,
        retargeted=tuple(retargeted),
    )


def remove_redirect(config_path: Path, old: str) -> str | None:
    """Remove the redirect for ``old``; return its target, or None if absent."""
    old = normalize_path(old)
    document = load_document(config_path)
    table = _redirect_table(document, create=False)
    if table is None or old not in table:
        return None
    target = str(table.pop(old))
    dump_document(document, config_path)
    return target


def resolve_redirect(redirects: cabc.Mapping[str, str], path: str) -> str:
    """Follow ``redirects`` from ``path`` to the page it finally lands on.

    Raises
    ------
    ManifestReferenceError
        If the redirects form a cycle.
    """
    current = normalize_path(path)
    visited = [current]
    while _target_path(current) in redirects:
        current = redirects[_target_path(current)]
        if current in visited:
            cycle = " -> ".join([*visited, current])
            msg = f"Redirect cycle: {cycle}"
            raise ManifestReferenceError(msg)
        visited.append(current)
    return current


def _target_path(target: str) -> str:
    return target.split("#", 1)[0]


def _retarget(destination: str, new: str) -> str:
    """Point ``destination`` at ``new``, keeping its anchor when ``new`` has none."""
    _, sep, fragment = destination.partition("#")
    if sep and "#" not in new:
        return f"{new}#{fragment}"
    return new


def _redirect_table(document: CommentedMap, *, create: bool) -> CommentedMap | None:
    """Return the ``redirect_maps`` mapping, creating the plugin entry if asked."""
    plugins = document.get("plugins")
    if plugins is None:
        if not create:
            return None
        # Without a plugins section the generator enables search by default.
        plugins = CommentedSeq([_new_plugin_entry(), "search"])
        document["plugins"] = plugins
    options = _plugin_options(plugins, create=create)
    if options is None:
        return None
    table = options.get(REDIRECT_MAPS_KEY)
    if table is None:
        if not create:
            return None
        table = CommentedMap()
        options[REDIRECT_MAPS_KEY] = table
    if not isinstance(table, CommentedMap):
        msg = f"'{REDIRECT_MAPS_KEY}' must be a mapping."
        raise ManifestParseError(msg)
    return table


def _plugin_options(plugins: object, *, create: bool) -> CommentedMap | None:
    """Find (or insert) the redirects plugin options inside ``plugins``."""
    if isinstance(plugins, CommentedMap):
        options = plugins.get(REDIRECTS_PLUGIN)
        if options is None and REDIRECTS_PLUGIN not in plugins and not create:
            return None
        if options is None:
            options = CommentedMap()
            if REDIRECTS_PLUGIN in plugins:
                plugins[REDIRECTS_PLUGIN] = options
            else:
                plugins.insert(0, REDIRECTS_PLUGIN, options)
        return _require_map(options)

    if not isinstance(plugins, CommentedSeq):
        msg = "'plugins' must be a list or a mapping."
        raise ManifestParseError(msg)

    for index, entry in enumerate(plugins):
        if entry == REDIRECTS_PLUGIN:
            if not create:
                return None
            replacement = _new_plugin_entry()
            plugins[index] = replacement
            return typ.cast("CommentedMap", replacement[REDIRECTS_PLUGIN])
        if isinstance(entry, CommentedMap) and REDIRECTS_PLUGIN in entry:
            options = entry[REDIRECTS_PLUGIN]
            if options is None:
                if not create:
                    return None
                options = CommentedMap()
                entry[REDIRECTS_PLUGIN] = options
            return _require_map(options)

    if not create:
        return None
    entry = _new_plugin_entry()
    plugins.insert(0, entry)
    return typ.cast("CommentedMap", entry[REDIRECTS_PLUGIN])


def _new_plugin_entry() -> CommentedMap:
    entry = CommentedMap()
    entry[REDIRECTS_PLUGIN] = CommentedMap()
    return entry


def _require_map(options: object) -> CommentedMap:
    if not isinstance(options, CommentedMap):
        msg = f"'{REDIRECTS_PLUGIN}' plugin options must be a mapping."
        raise ManifestParseError(msg)
    return options


__all__ = [
    "RedirectChange",
    "add_redirect",
    "normalize_path",
    "remove_redirect",
    "resolve_redirect",
]
