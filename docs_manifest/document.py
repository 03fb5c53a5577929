"""Order- and comment-preserving access to the manifest YAML.

The typed loader in :mod:`docs_manifest.config` is read-only. Edits go
through the round-trip document here so that navigation order, plugin order
and comments survive a rewrite.
"""

from __future__ import annotations

import typing as typ

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap
from ruamel.yaml.error import YAMLError

from .config.models import ManifestParseError

if typ.TYPE_CHECKING:
    from pathlib import Path


def _build_roundtrip_yaml() -> YAML:
    yaml = YAML()
    yaml.preserve_quotes = True
    yaml.width = 120
    yaml.indent(mapping=2, sequence=4, offset=2)
    return yaml


def load_document(path: Path) -> CommentedMap:
    """Load the manifest as a round-trip mapping.

    Raises
    ------
    FileNotFoundError
        If ``path`` does not exist.
    ManifestParseError
        If the YAML is malformed or its top level is not a mapping.
    """
    if not path.exists():
        msg = f"Manifest file '{path}' not found."
        raise FileNotFoundError(msg)
    yaml = _build_roundtrip_yaml()
    try:
        with path.open("r", encoding="utf-8") as handle:
            document = yaml.load(handle)
    except YAMLError as exc:
        msg = f"Could not parse manifest '{path}': {exc}"
        raise ManifestParseError(msg) from exc
    if document is None:
        return CommentedMap()
    if not isinstance(document, CommentedMap):
        msg = "Top-level configuration must be a mapping"
        raise ManifestParseError(msg)
    return document


def dump_document(document: CommentedMap, path: Path) -> None:
    """Write ``document`` back to ``path``."""
    yaml = _build_roundtrip_yaml()
    with path.open("w", encoding="utf-8") as handle:
        yaml.dump(document, handle)


def normalize_manifest(path: Path) -> bool:
    """Re-serialize the manifest with the project's indentation settings.

    Returns True when the file content changed.
    """
    before = path.read_text(encoding="utf-8")
    dump_document(load_document(path), path)
    return path.read_text(encoding="utf-8") != before


__all__ = ["dump_document", "load_document", "normalize_manifest"]
