"""Unit tests for loading manifests into typed records."""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from textwrap import dedent

import pytest

from docs_manifest.config import (
    ManifestParseError,
    PaletteVariant,
    PluginEntry,
    load_manifest,
)

if typ.TYPE_CHECKING:
    from pathlib import Path


def _write(path: Path, text: str) -> Path:
    path.write_text(dedent(text).lstrip(), encoding="utf-8")
    return path


def test_load_manifest_builds_typed_records(manifest_path: Path) -> None:
    """Every section of the sample manifest should map onto its record."""
    manifest = load_manifest(manifest_path)

    assert manifest.site.name == "Pixi by prefix.dev"
    assert manifest.site.url == "https://prefix-dev.github.io/pixi"
    assert manifest.site.docs_dir == "docs", "docs_dir should default to 'docs'"
    assert manifest.theme.name == "material"
    assert manifest.theme.font.text == "Red Hat Text"
    assert manifest.theme.features == ("content.code.copy", "navigation.tracking")
    assert manifest.theme.icons == {"edit": "material/pencil"}
    assert manifest.theme.palette[1] == PaletteVariant(
        media="(prefers-color-scheme: dark)",
        scheme="slate",
        primary="prefix",
        accent="prefix",
        toggle_icon="material/brightness-4",
        toggle_name="Switch to system preference",
    )
    assert [entry.identifier for entry in manifest.markdown_extensions] == [
        "admonition",
        "pymdownx.highlight",
        "toc",
    ], "extension order must be preserved"
    assert manifest.extension("toc") is not None
    assert manifest.extension("toc").options == {"toc_depth": 3, "permalink": "#"}
    assert [entry.identifier for entry in manifest.plugins] == [
        "redirects",
        "search",
        "social",
        "mike",
    ], "plugin order must be preserved"
    assert manifest.plugin("mike") is not None
    assert manifest.plugin("mike").options == {}, "null plugin options become {}"
    assert manifest.redirects == {
        "basic_usage.md": "installation.md",
        "tutorials/python.md": "python/tutorial.md",
    }
    assert [hook.path for hook in manifest.hooks] == ["docs/docs_hooks.py"]
    assert manifest.extra.version_provider == "mike"
    assert manifest.extra.social[0].icon == "fontawesome/brands/github"
    assert manifest.validation.omitted_files == "warn"
    assert manifest.not_in_nav == ("partials/",)
    assert manifest.extra_css == ("stylesheets/extra.css",)


def test_navigation_tree_keeps_order_and_trail(manifest_path: Path) -> None:
    """Leaves come back depth-first in display order with their section trail."""
    manifest = load_manifest(manifest_path)

    leaves = manifest.nav_leaves()
    assert [leaf.path for leaf in leaves] == [
        "index.md",
        "installation.md",
        "python/tutorial.md",
        "https://example.invalid/changelog",
    ]
    assert leaves[2].trail == ("Getting Started", "Python")
    assert leaves[2].describe() == "Getting Started > Python > Basic Usage"
    assert leaves[3].is_external, "http links are external nav entries"
    assert manifest.nav_paths() == {"index.md", "installation.md", "python/tutorial.md"}


def test_manifest_records_are_frozen(manifest_path: Path) -> None:
    manifest = load_manifest(manifest_path)
    with pytest.raises(dc.FrozenInstanceError):
        manifest.site = manifest.site  # type: ignore[misc]


def test_option_tables_are_read_only(manifest_path: Path) -> None:
    """Nested plugin, theme and extra tables cannot be edited after loading."""
    manifest = load_manifest(manifest_path)
    redirects = manifest.plugin("redirects")
    assert redirects is not None

    with pytest.raises(TypeError):
        redirects.options["redirect_maps"]["x.md"] = "y.md"  # type: ignore[index]
    with pytest.raises(TypeError):
        redirects.options["enabled"] = False  # type: ignore[index]
    with pytest.raises(TypeError):
        manifest.theme.icons["edit"] = "material/eye"  # type: ignore[index]
    assert "x.md" not in manifest.redirects

    source = {"pipeline": ["stemmer"]}
    entry = PluginEntry(identifier="search", options=source)
    source["pipeline"].append("trimmer")
    assert entry.options["pipeline"] == ("stemmer",), "records copy their options"


def test_missing_manifest_raises_file_not_found(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_manifest(tmp_path / "mkdocs.yml")


def test_duplicate_redirect_keys_are_rejected(tmp_path: Path) -> None:
    """A redirect table with a repeated source is a parse error."""
    path = _write(
        tmp_path / "mkdocs.yml",
        """
        site_name: Docs
        theme: material
        plugins:
          - redirects:
              redirect_maps:
                "old.md": "new.md"
                "old.md": "other.md"
        """,
    )
    with pytest.raises(ManifestParseError, match="duplicate key"):
        load_manifest(path)


def test_malformed_yaml_raises_parse_error(tmp_path: Path) -> None:
    path = _write(tmp_path / "mkdocs.yml", "site_name: [unclosed\n")
    with pytest.raises(ManifestParseError):
        load_manifest(path)


@pytest.mark.parametrize(
    ("text", "fragment"),
    [
        ("theme: material\n", "site_name"),
        ("site_name: Docs\n", "theme"),
        ("site_name: Docs\ntheme:\n  custom_dir: x\n", "theme.name"),
        ("site_name: Docs\ntheme: material\nnav: index.md\n", "nav"),
        (
            "site_name: Docs\ntheme: material\nplugins:\n  - search: {}\n    tags: {}\n",
            "exactly one",
        ),
        (
            "site_name: Docs\ntheme: material\nvalidation:\n  anchors: loud\n",
            "validation.anchors",
        ),
        (
            "site_name: Docs\ntheme: material\nvalidation:\n  bogus: warn\n",
            "Unknown validation",
        ),
    ],
)
def test_shape_errors_name_the_offending_key(
    tmp_path: Path, text: str, fragment: str
) -> None:
    path = _write(tmp_path / "mkdocs.yml", text)
    with pytest.raises(ManifestParseError, match=fragment):
        load_manifest(path)


def test_env_tag_prefers_first_set_variable(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """``!ENV`` resolves the first set variable, else the trailing default."""
    path = _write(
        tmp_path / "mkdocs.yml",
        """
        site_name: Docs
        site_url: !ENV [DOCS_URL, "https://fallback.invalid/"]
        theme: material
        plugins:
          - social:
              enabled: !ENV [DOCS_SOCIAL, false]
        """,
    )
    monkeypatch.delenv("DOCS_URL", raising=False)
    monkeypatch.delenv("DOCS_SOCIAL", raising=False)
    manifest = load_manifest(path)
    assert manifest.site.url == "https://fallback.invalid/"
    assert manifest.plugin("social") is not None
    assert manifest.plugin("social").enabled is False

    monkeypatch.setenv("DOCS_URL", "https://docs.example.invalid/")
    monkeypatch.setenv("DOCS_SOCIAL", "true")
    manifest = load_manifest(path)
    assert manifest.site.url == "https://docs.example.invalid/"
    assert manifest.plugin("social").enabled is True, "env values parse as YAML"


def test_python_name_and_relative_tags_load_as_strings(tmp_path: Path) -> None:
    """Tags the site generator resolves at build time are kept verbatim."""
    path = _write(
        tmp_path / "mkdocs.yml",
        """
        site_name: Docs
        theme: material
        markdown_extensions:
          - pymdownx.superfences:
              custom_fences:
                - name: mermaid
                  class: mermaid
                  format: !!python/name:pymdownx.superfences.fence_code_format
          - pymdownx.snippets:
              base_path: !relative $config_dir
          - pymdownx.magiclink:
              repo_url_shortener: true
              base_path: !relative
        """,
    )
    manifest = load_manifest(path)

    fences = manifest.extension("pymdownx.superfences")
    assert fences is not None
    assert fences.options["custom_fences"][0]["format"] == (
        "pymdownx.superfences.fence_code_format"
    )
    snippets = manifest.extension("pymdownx.snippets")
    assert snippets is not None
    assert snippets.options["base_path"] == "$config_dir"
    magiclink = manifest.extension("pymdownx.magiclink")
    assert magiclink is not None
    assert magiclink.options["base_path"] == ""


def test_inherit_deep_merges_parent(tmp_path: Path) -> None:
    """Child settings override the parent, nested mappings merge."""
    _write(
        tmp_path / "base.yml",
        """
        site_name: Base
        theme:
          name: material
          features:
            - navigation.top
          icon:
            edit: material/pencil
        plugins:
          - search
        """,
    )
    child = _write(
        tmp_path / "mkdocs.yml",
        """
        INHERIT: base.yml
        site_name: Child
        theme:
          icon:
            view: material/eye
        """,
    )
    manifest = load_manifest(child)
    assert manifest.site.name == "Child"
    assert manifest.theme.name == "material", "theme name comes from the parent"
    assert manifest.theme.features == ("navigation.top",)
    assert manifest.theme.icons == {"edit": "material/pencil", "view": "material/eye"}
    assert [entry.identifier for entry in manifest.plugins] == ["search"]


def test_inherit_cycle_is_reported(tmp_path: Path) -> None:
    _write(tmp_path / "a.yml", "INHERIT: mkdocs.yml\nsite_name: A\n")
    path = _write(tmp_path / "mkdocs.yml", "INHERIT: a.yml\nsite_name: B\n")
    with pytest.raises(ManifestParseError, match="cycle"):
        load_manifest(path)


def test_alternative_section_forms(tmp_path: Path) -> None:
    """Bare theme names, mapping plugins, bare nav paths and ``font: false``."""
    path = _write(
        tmp_path / "mkdocs.yml",
        """
        site_name: Docs
        theme:
          name: material
          font: false
          palette:
            scheme: slate
        plugins:
          tags: {}
          search:
            lang: en
        nav:
          - index.md
          - Empty:
        validation:
          nav:
            omitted_files: ignore
          links:
            anchors: warn
        extra_javascript:
          - path: js/extra.js
            defer: true
          - js/other.js
        """,
    )
    manifest = load_manifest(path)
    assert manifest.theme.font.enabled is False
    assert manifest.theme.palette == (PaletteVariant(scheme="slate"),)
    assert [entry.identifier for entry in manifest.plugins] == ["tags", "search"]
    assert manifest.plugin("search").options == {"lang": "en"}
    assert manifest.nav[0].label is None
    assert manifest.nav[0].path == "index.md"
    assert manifest.nav[1].children == (), "a label without entries is an empty section"
    assert manifest.validation.omitted_files == "ignore"
    assert manifest.validation.anchors == "warn"
    assert manifest.extra_javascript == ("js/extra.js", "js/other.js")
