"""Lookups against the installed plugin, theme and markdown-extension registry.

The generator discovers plugins and themes through entry points
(``mkdocs.plugins`` and ``mkdocs.themes``) and resolves markdown extensions
through Python-Markdown. :class:`EntryPointRegistry` asks the same sources so
that an identifier accepted here is one the build will accept too.
:class:`StaticRegistry` answers from fixed sets for offline checks.

Examples
--------
>>> from docs_manifest.registry import StaticRegistry
>>> registry = StaticRegistry(plugins={"search"}, themes={"material"})
>>> registry.has_plugin("search")
True
>>> registry.check_extension("toc", {}) is None
True
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import logging
import typing as typ
from importlib import metadata

from markdown import Markdown

logger = logging.getLogger(__name__)

PLUGIN_GROUP = "mkdocs.plugins"
THEME_GROUP = "mkdocs.themes"


class Registry(typ.Protocol):
    """Answer whether identifiers named in a manifest are installed."""

    def has_plugin(self, identifier: str) -> bool: ...

    def has_theme(self, name: str) -> bool: ...

    def check_extension(
        self, identifier: str, options: cabc.Mapping[str, typ.Any]
    ) -> str | None:
        """Return an error message, or None when the extension loads."""
        ...


class EntryPointRegistry:
    """Registry backed by installed entry points and Python-Markdown."""

    def __init__(self) -> None:
        self._plugins = _entry_point_names(PLUGIN_GROUP)
        self._themes = _entry_point_names(THEME_GROUP)
        logger.debug(
            "discovered %d plugins and %d themes", len(self._plugins), len(self._themes)
        )

    def has_plugin(self, identifier: str) -> bool:
        # Plugins may be namespaced as ``theme/plugin``.
        return identifier in self._plugins or identifier.split("/")[-1] in self._plugins

    def has_theme(self, name: str) -> bool:
        return name in self._themes

    def check_extension(
        self, identifier: str, options: cabc.Mapping[str, typ.Any]
    ) -> str | None:
        """Instantiate the extension the way the build will and report failures."""
        try:
            Markdown().build_extension(identifier, _plain(options))
        except (ImportError, AttributeError) as exc:
            logger.debug("extension %s failed to load: %s", identifier, exc)
            return f"unknown markdown extension '{identifier}'"
        except (KeyError, TypeError, ValueError) as exc:
            return f"invalid options for markdown extension '{identifier}': {exc}"
        return None


@dc.dataclass(slots=True)
class StaticRegistry:
    """Registry answering from fixed identifier sets.

    ``extensions`` set to ``None`` accepts every markdown extension.
    """

    plugins: set[str] = dc.field(default_factory=set)
    themes: set[str] = dc.field(default_factory=set)
    extensions: set[str] | None = None

    def has_plugin(self, identifier: str) -> bool:
        return identifier in self.plugins

    def has_theme(self, name: str) -> bool:
        return name in self.themes

    def check_extension(
        self, identifier: str, options: cabc.Mapping[str, typ.Any]
    ) -> str | None:
        if self.extensions is None or identifier in self.extensions:
            return None
        return f"unknown markdown extension '{identifier}'"


def _plain(value: typ.Any) -> typ.Any:
    """Copy frozen option tables back into the dicts and lists extensions expect."""
    if isinstance(value, cabc.Mapping):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [_plain(item) for item in value]
    return value


def _entry_point_names(group: str) -> set[str]:
    return set(metadata.entry_points(group=group).names)


__all__ = [
    "PLUGIN_GROUP",
    "THEME_GROUP",
    "EntryPointRegistry",
    "Registry",
    "StaticRegistry",
]
