"""Typed dataclasses describing a documentation site manifest."""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import types
import typing as typ
from pathlib import Path

from .._constants import REDIRECT_MAPS_KEY, REDIRECTS_PLUGIN


class ManifestError(ValueError):
    """Base class for manifest problems that should abort a build."""


class ManifestParseError(ManifestError):
    """Raised when the manifest is malformed or has the wrong shape."""


class ManifestReferenceError(ManifestError):
    """Raised when a navigation path or redirect target does not resolve."""


class PluginConfigError(ManifestError):
    """Raised when a plugin or extension is configured with unknown options."""


_EXTERNAL_PREFIXES = ("http://", "https://", "mailto:", "//")


def is_external_target(target: str) -> bool:
    """Return True when ``target`` points outside the documentation tree."""
    return target.lower().startswith(_EXTERNAL_PREFIXES)


def freeze_mapping(value: cabc.Mapping[str, typ.Any]) -> cabc.Mapping[str, typ.Any]:
    """Return a read-only copy of ``value``.

    Nested mappings become read-only proxies and lists become tuples, so
    option tables reached through a loaded manifest cannot be edited.
    """
    return types.MappingProxyType({key: _freeze(item) for key, item in value.items()})


def _freeze(value: object) -> typ.Any:
    match value:
        case cabc.Mapping():
            return freeze_mapping(value)
        case list() | tuple():
            return tuple(_freeze(item) for item in value)
        case _:
            return value


def _empty_mapping() -> cabc.Mapping[str, typ.Any]:
    return types.MappingProxyType({})


@dc.dataclass(frozen=True, slots=True)
class SiteMetadata:
    """Site-wide identity and location settings."""

    name: str
    url: str | None = None
    description: str | None = None
    author: str | None = None
    copyright: str | None = None
    repo_url: str | None = None
    repo_name: str | None = None
    edit_uri: str | None = None
    docs_dir: str = "docs"
    site_dir: str = "site"


@dc.dataclass(frozen=True, slots=True)
class PaletteVariant:
    """One colour palette, selected by a ``prefers-color-scheme`` media query."""

    media: str | None = None
    scheme: str | None = None
    primary: str | None = None
    accent: str | None = None
    toggle_icon: str | None = None
    toggle_name: str | None = None


@dc.dataclass(frozen=True, slots=True)
class FontConfig:
    """Text and code fonts; ``enabled`` is False when fonts are turned off."""

    text: str | None = None
    code: str | None = None
    enabled: bool = True


@dc.dataclass(frozen=True, slots=True)
class ThemeConfig:
    """Theme descriptor: name, palette variants, feature flags and icons."""

    name: str
    custom_dir: str | None = None
    favicon: str | None = None
    logo: str | None = None
    language: str | None = None
    font: FontConfig = dc.field(default_factory=FontConfig)
    palette: tuple[PaletteVariant, ...] = ()
    features: tuple[str, ...] = ()
    icons: cabc.Mapping[str, typ.Any] = dc.field(default_factory=_empty_mapping)
    extra: cabc.Mapping[str, typ.Any] = dc.field(default_factory=_empty_mapping)

    def __post_init__(self) -> None:
        object.__setattr__(self, "icons", freeze_mapping(self.icons))
        object.__setattr__(self, "extra", freeze_mapping(self.extra))


@dc.dataclass(frozen=True, slots=True)
class NavNode:
    """A navigation entry: a leaf with a ``path`` or a section with children.

    Attributes
    ----------
    label : str or None
        Display label. Bare ``- page.md`` entries have no label.
    path : str or None
        Document path relative to ``docs_dir`` or an external URL; ``None``
        for sections.
    children : tuple[NavNode, ...]
        Nested entries in display order.
    trail : tuple[str, ...]
        Labels of the enclosing sections, outermost first.
    """

    label: str | None
    path: str | None = None
    children: tuple[NavNode, ...] = ()
    trail: tuple[str, ...] = ()

    @property
    def is_leaf(self) -> bool:
        return self.path is not None

    @property
    def is_external(self) -> bool:
        return self.path is not None and is_external_target(self.path)

    def iter_leaves(self) -> cabc.Iterator[NavNode]:
        """Yield leaves depth-first in display order."""
        if self.is_leaf:
            yield self
            return
        for child in self.children:
            yield from child.iter_leaves()

    def describe(self) -> str:
        """Return a ``Section > Label`` breadcrumb for messages."""
        parts = [*self.trail, self.label or self.path or "?"]
        return " > ".join(parts)


@dc.dataclass(frozen=True, slots=True)
class ExtensionEntry:
    """A markdown extension identifier with its options."""

    identifier: str
    options: cabc.Mapping[str, typ.Any] = dc.field(default_factory=_empty_mapping)

    def __post_init__(self) -> None:
        object.__setattr__(self, "options", freeze_mapping(self.options))


@dc.dataclass(frozen=True, slots=True)
class PluginEntry:
    """A plugin identifier with its options, in execution order."""

    identifier: str
    options: cabc.Mapping[str, typ.Any] = dc.field(default_factory=_empty_mapping)

    def __post_init__(self) -> None:
        object.__setattr__(self, "options", freeze_mapping(self.options))

    @property
    def enabled(self) -> bool:
        return self.options.get("enabled", True) is not False


@dc.dataclass(frozen=True, slots=True)
class HookEntry:
    """A hook script path, relative to the manifest directory."""

    path: str

    def resolve(self, base_dir: Path) -> Path:
        return base_dir / self.path


@dc.dataclass(frozen=True, slots=True)
class ValidationPolicy:
    """Reporting levels for the generator's own link and file checks."""

    omitted_files: str = "info"
    not_found: str = "warn"
    absolute_links: str = "info"
    unrecognized_links: str = "info"
    anchors: str = "info"


@dc.dataclass(frozen=True, slots=True)
class SocialLink:
    """Footer social link rendered by the theme."""

    icon: str
    link: str
    name: str | None = None


@dc.dataclass(frozen=True, slots=True)
class ExtraConfig:
    """Theme ``extra`` values: social links, version provider and the rest."""

    social: tuple[SocialLink, ...] = ()
    version_provider: str | None = None
    values: cabc.Mapping[str, typ.Any] = dc.field(default_factory=_empty_mapping)

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", freeze_mapping(self.values))


@dc.dataclass(frozen=True, slots=True)
class Manifest:
    """A fully loaded site manifest."""

    site: SiteMetadata
    theme: ThemeConfig
    nav: tuple[NavNode, ...] = ()
    markdown_extensions: tuple[ExtensionEntry, ...] = ()
    plugins: tuple[PluginEntry, ...] = ()
    hooks: tuple[HookEntry, ...] = ()
    extra: ExtraConfig = dc.field(default_factory=ExtraConfig)
    extra_css: tuple[str, ...] = ()
    extra_javascript: tuple[str, ...] = ()
    validation: ValidationPolicy = dc.field(default_factory=ValidationPolicy)
    not_in_nav: tuple[str, ...] = ()
    source_path: Path | None = None

    @property
    def base_dir(self) -> Path:
        """Directory that relative paths in the manifest are resolved against."""
        if self.source_path is None:
            return Path.cwd()
        return self.source_path.parent

    @property
    def docs_root(self) -> Path:
        return self.base_dir / self.site.docs_dir

    @property
    def redirects(self) -> dict[str, str]:
        """Return the ``redirects`` plugin table, or an empty mapping."""
        plugin = self.plugin(REDIRECTS_PLUGIN)
        if plugin is None:
            return {}
        table = plugin.options.get(REDIRECT_MAPS_KEY)
        if not isinstance(table, cabc.Mapping):
            return {}
        return {str(old): str(new) for old, new in table.items()}

    def plugin(self, identifier: str) -> PluginEntry | None:
        """Return the first plugin entry with ``identifier``."""
        for entry in self.plugins:
            if entry.identifier == identifier:
                return entry
        return None

    def extension(self, identifier: str) -> ExtensionEntry | None:
        """Return the markdown extension entry with ``identifier``."""
        for entry in self.markdown_extensions:
            if entry.identifier == identifier:
                return entry
        return None

    def nav_leaves(self) -> list[NavNode]:
        """Return every navigation leaf in display order."""
        leaves: list[NavNode] = []
        for node in self.nav:
            leaves.extend(node.iter_leaves())
        return leaves

    def nav_paths(self) -> set[str]:
        """Return the set of local document paths referenced by the nav."""
        return {
            typ.cast("str", leaf.path)
            for leaf in self.nav_leaves()
            if not leaf.is_external
        }


__all__ = [
    "ExtensionEntry",
    "ExtraConfig",
    "FontConfig",
    "HookEntry",
    "Manifest",
    "ManifestError",
    "ManifestParseError",
    "ManifestReferenceError",
    "NavNode",
    "PaletteVariant",
    "PluginConfigError",
    "PluginEntry",
    "SiteMetadata",
    "SocialLink",
    "ThemeConfig",
    "ValidationPolicy",
    "freeze_mapping",
    "is_external_target",
]
