"""Load a site manifest YAML file into typed dataclasses."""

from __future__ import annotations

import dataclasses as dc
import logging
import os
import typing as typ
from pathlib import Path

from ruamel.yaml import YAML
from ruamel.yaml.constructor import ConstructorError, SafeConstructor
from ruamel.yaml.error import YAMLError
from ruamel.yaml.nodes import ScalarNode, SequenceNode

from .._constants import DEFAULT_DOCS_DIR, DEFAULT_SITE_DIR, VALIDATION_LEVELS
from .helpers import (
    _as_list,
    _as_mapping,
    _deep_merge,
    _entries,
    _optional_str,
    _require_str,
    _str_tuple,
)
from .models import (
    ExtensionEntry,
    ExtraConfig,
    HookEntry,
    Manifest,
    ManifestParseError,
    PluginEntry,
    SiteMetadata,
    SocialLink,
    ValidationPolicy,
)
from .navigation import _build_nav
from .theme import _build_theme_config

logger = logging.getLogger(__name__)

INHERIT_KEY = "INHERIT"


def load_manifest(path: Path) -> Manifest:
    """Load and type the YAML manifest describing a documentation site.

    Parameters
    ----------
    path : Path
        Filesystem path to the manifest (usually ``mkdocs.yml``).

    Returns
    -------
    Manifest
        Immutable manifest records: site metadata, theme, navigation tree,
        markdown extensions, plugins, hooks and validation policy.

    Raises
    ------
    FileNotFoundError
        If the manifest (or a manifest it inherits from) does not exist.
    ManifestParseError
        If the YAML cannot be parsed, contains duplicate keys, or a section
        has the wrong shape.

    Examples
    --------
    >>> from pathlib import Path
    >>> from docs_manifest.config import load_manifest
    >>> manifest = load_manifest(Path("mkdocs.yml"))  # doctest: +SKIP
    >>> manifest.theme.name  # doctest: +SKIP
    'material'
    """
    raw = _load_raw(path, seen=())
    logger.debug("loaded manifest %s with sections %s", path, sorted(raw))
    return _build_manifest(raw, source_path=path)


class _ManifestConstructor(SafeConstructor):
    """Safe constructor for the tags site manifests use.

    ``!ENV`` is resolved from the environment. ``!!python/name:`` and
    ``!relative`` are kept as plain strings so loading never imports code.
    """


def _construct_env(constructor: SafeConstructor, node: typ.Any) -> typ.Any:
    """Resolve ``!ENV NAME`` or ``!ENV [NAME, OTHER, default]``.

    The first variable that is set wins; with a list of two or more items the
    last item is the fallback default.
    """
    if isinstance(node, ScalarNode):
        names = [constructor.construct_scalar(node)]
        default = None
    elif isinstance(node, SequenceNode):
        items = constructor.construct_sequence(node, deep=True)
        if len(items) > 1:
            names, default = items[:-1], items[-1]
        else:
            names, default = items, None
    else:
        raise ConstructorError(
            None,
            None,
            f"expected a scalar or sequence node for !ENV, got {node.id}",
            node.start_mark,
        )
    for name in names:
        value = os.environ.get(str(name))
        if value is not None:
            return _parse_env_value(value)
    return default


def _parse_env_value(value: str) -> typ.Any:
    """Interpret an environment value as a YAML scalar (``true`` -> True)."""
    try:
        parsed = YAML(typ="safe", pure=True).load(value)
    except YAMLError:
        return value
    if isinstance(parsed, (dict, list)):
        return value
    return parsed


def _construct_python_name(
    constructor: SafeConstructor, suffix: str, node: typ.Any
) -> str:
    """Keep ``!!python/name:pkg.func`` as the dotted name; it is never imported."""
    return suffix


def _construct_relative(constructor: SafeConstructor, node: typ.Any) -> str:
    """Keep ``!relative`` (optionally ``!relative $config_dir``) as written."""
    return str(constructor.construct_scalar(node) or "")


_ManifestConstructor.add_constructor("!ENV", _construct_env)
_ManifestConstructor.add_constructor("!relative", _construct_relative)
_ManifestConstructor.add_multi_constructor(
    "tag:yaml.org,2002:python/name:", _construct_python_name
)


def _build_loader() -> YAML:
    loader = YAML(typ="safe")
    loader.version = (1, 2)
    loader.allow_duplicate_keys = False
    loader.Constructor = _ManifestConstructor
    return loader


def _load_raw(path: Path, *, seen: tuple[Path, ...]) -> dict[str, typ.Any]:
    """Read one manifest file, following ``INHERIT`` parents."""
    if not path.exists():
        msg = f"Manifest file '{path}' not found."
        raise FileNotFoundError(msg)
    resolved = path.resolve()
    if resolved in seen:
        chain = " -> ".join(str(item) for item in (*seen, resolved))
        msg = f"Manifest inheritance cycle: {chain}"
        raise ManifestParseError(msg)

    try:
        with path.open("r", encoding="utf-8") as handle:
            loaded = _build_loader().load(handle)
    except YAMLError as exc:
        msg = f"Could not parse manifest '{path}': {exc}"
        raise ManifestParseError(msg) from exc
    if loaded is None:
        loaded = {}
    if not isinstance(loaded, dict):
        msg = f"Top-level YAML structure of '{path}' must be a mapping."
        raise ManifestParseError(msg)

    raw: dict[str, typ.Any] = dict(loaded)
    parent = raw.pop(INHERIT_KEY, None)
    if parent is None:
        return raw
    parent_path = path.parent / str(parent)
    logger.debug("manifest %s inherits from %s", path, parent_path)
    base = _load_raw(parent_path, seen=(*seen, resolved))
    return _deep_merge(base, raw)


def _build_manifest(raw: dict[str, typ.Any], *, source_path: Path | None) -> Manifest:
    """Assemble a Manifest from the merged raw mapping."""
    site = SiteMetadata(
        name=_require_str(raw.get("site_name"), key="site_name"),
        url=_optional_str(raw.get("site_url")),
        description=_optional_str(raw.get("site_description")),
        author=_optional_str(raw.get("site_author")),
        copyright=_optional_str(raw.get("copyright")),
        repo_url=_optional_str(raw.get("repo_url")),
        repo_name=_optional_str(raw.get("repo_name")),
        edit_uri=_optional_str(raw.get("edit_uri")),
        docs_dir=_optional_str(raw.get("docs_dir")) or DEFAULT_DOCS_DIR,
        site_dir=_optional_str(raw.get("site_dir")) or DEFAULT_SITE_DIR,
    )

    extensions = tuple(
        ExtensionEntry(identifier=name, options=options)
        for name, options in _entries(
            raw.get("markdown_extensions"), key="markdown_extensions"
        )
    )
    plugins = tuple(
        PluginEntry(identifier=name, options=options)
        for name, options in _entries(raw.get("plugins"), key="plugins")
    )
    hooks = tuple(
        HookEntry(path=path) for path in _str_tuple(raw.get("hooks"), key="hooks")
    )

    return Manifest(
        site=site,
        theme=_build_theme_config(raw.get("theme")),
        nav=_build_nav(raw.get("nav")),
        markdown_extensions=extensions,
        plugins=plugins,
        hooks=hooks,
        extra=_build_extra(raw.get("extra")),
        extra_css=_str_tuple(raw.get("extra_css"), key="extra_css"),
        extra_javascript=_build_scripts(raw.get("extra_javascript")),
        validation=_build_validation(raw.get("validation")),
        not_in_nav=_build_patterns(raw.get("not_in_nav")),
        source_path=source_path,
    )


def _build_scripts(payload: object | None) -> tuple[str, ...]:
    """Return script paths; entries may be ``{path: ..., defer: ...}`` mappings."""
    scripts: list[str] = []
    for entry in _as_list(payload, key="extra_javascript"):
        if isinstance(entry, dict):
            scripts.append(_require_str(entry.get("path"), key="extra_javascript.path"))
        elif entry is not None:
            scripts.append(str(entry))
    return tuple(scripts)


def _build_patterns(payload: object | None) -> tuple[str, ...]:
    """Split a gitignore-style block into individual patterns."""
    if payload is None:
        return ()
    if isinstance(payload, list):
        lines = [str(item) for item in payload]
    else:
        lines = str(payload).splitlines()
    return tuple(
        line.strip() for line in lines if line.strip() and not line.strip().startswith("#")
    )


def _build_extra(payload: object | None) -> ExtraConfig:
    extra = _as_mapping(payload, key="extra")
    social: list[SocialLink] = []
    for index, entry in enumerate(_as_list(extra.get("social"), key="extra.social")):
        item = _as_mapping(entry, key=f"extra.social[{index}]")
        social.append(
            SocialLink(
                icon=_require_str(item.get("icon"), key=f"extra.social[{index}].icon"),
                link=_require_str(item.get("link"), key=f"extra.social[{index}].link"),
                name=_optional_str(item.get("name")),
            )
        )
    version = _as_mapping(extra.get("version"), key="extra.version")
    values = {key: value for key, value in extra.items() if key not in {"social", "version"}}
    return ExtraConfig(
        social=tuple(social),
        version_provider=_optional_str(version.get("provider")),
        values=values,
    )


def _build_validation(payload: object | None) -> ValidationPolicy:
    """Build the validation policy from flat or ``nav``/``links`` nested forms."""
    validation = _as_mapping(payload, key="validation")
    flat: dict[str, typ.Any] = {}
    for key, value in validation.items():
        if key in {"nav", "links"}:
            flat.update(_as_mapping(value, key=f"validation.{key}"))
        else:
            flat[key] = value

    base = ValidationPolicy()
    levels: dict[str, str] = {}
    for field in dc.fields(ValidationPolicy):
        field_name = field.name
        level = flat.pop(field_name, getattr(base, field_name))
        if level not in VALIDATION_LEVELS:
            allowed = ", ".join(VALIDATION_LEVELS)
            msg = f"'validation.{field_name}' must be one of {allowed}, got {level!r}."
            raise ManifestParseError(msg)
        levels[field_name] = level
    if flat:
        unknown = ", ".join(sorted(flat))
        msg = f"Unknown validation options: {unknown}."
        raise ManifestParseError(msg)
    return ValidationPolicy(**levels)


__all__ = ["load_manifest"]
