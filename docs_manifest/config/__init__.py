"""Load a documentation site manifest into immutable typed records.

This subpackage parses ``mkdocs.yml`` (following ``INHERIT`` parents and
resolving ``!ENV`` tags), and produces frozen dataclasses (:class:`Manifest`,
:class:`ThemeConfig`, :class:`NavNode`, etc.) that the validators and CLI
consume. The primary entry point is :func:`load_manifest`.

Examples
--------
>>> from pathlib import Path
>>> from docs_manifest.config import load_manifest
>>> manifest = load_manifest(Path("mkdocs.yml"))  # doctest: +SKIP
>>> [leaf.path for leaf in manifest.nav_leaves()][:1]  # doctest: +SKIP
['index.md']
"""

from .loader import load_manifest
from .models import (
    ExtensionEntry,
    ExtraConfig,
    FontConfig,
    HookEntry,
    Manifest,
    ManifestError,
    ManifestParseError,
    ManifestReferenceError,
    NavNode,
    PaletteVariant,
    PluginConfigError,
    PluginEntry,
    SiteMetadata,
    SocialLink,
    ThemeConfig,
    ValidationPolicy,
    is_external_target,
)

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
    "is_external_target",
    "load_manifest",
]
