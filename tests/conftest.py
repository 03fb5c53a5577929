"""Shared fixtures: a small documentation tree and its manifest."""

from __future__ import annotations

from pathlib import Path
from textwrap import dedent

import pytest

from docs_manifest.registry import StaticRegistry

SAMPLE_MANIFEST = dedent(
    """
    site_name: "Pixi by prefix.dev"
    site_url: https://prefix-dev.github.io/pixi
    site_description: Pixi Documentation

    theme:
      name: material
      custom_dir: docs/overrides
      favicon: assets/pixi.png
      font:
        text: Red Hat Text
        code: JetBrains Mono
      palette:
        # Palette toggle for automatic mode
        - media: "(prefers-color-scheme)"
          toggle:
            icon: material/brightness-auto
            name: Switch to light mode
        - media: "(prefers-color-scheme: dark)"
          scheme: slate
          primary: prefix
          accent: prefix
          toggle:
            icon: material/brightness-4
            name: Switch to system preference
      icon:
        edit: material/pencil
      features:
        - content.code.copy
        - navigation.tracking

    extra_css:
      - stylesheets/extra.css

    markdown_extensions:
      - admonition
      - pymdownx.highlight:
          anchor_linenums: true
      - toc:
          toc_depth: 3
          permalink: "#"

    extra:
      social:
        - icon: fontawesome/brands/github
          link: https://github.com/prefix-dev
      version:
        provider: mike

    nav:
      - Home: index.md
      - Getting Started:
          - Installation: installation.md
          - Python:
              - Basic Usage: python/tutorial.md
      - Changelog: https://example.invalid/changelog

    hooks:
      - docs/docs_hooks.py

    validation:
      omitted_files: warn

    not_in_nav: |
      partials/

    plugins:
      - redirects:
          redirect_maps:
            "basic_usage.md": "installation.md"
            "tutorials/python.md": "python/tutorial.md"
      - search
      - social
      - mike:
    """
).lstrip()

HOOK_SOURCE = dedent(
    """
    def on_page_markdown(markdown, **kwargs):
        return markdown
    """
).lstrip()


@pytest.fixture
def site_root(tmp_path: Path) -> Path:
    """Create a docs tree matching ``SAMPLE_MANIFEST`` (manifest not written)."""
    docs = tmp_path / "docs"
    for relative in (
        "index.md",
        "installation.md",
        "python/tutorial.md",
        "partials/snippet.md",
    ):
        page = docs / relative
        page.parent.mkdir(parents=True, exist_ok=True)
        page.write_text(f"# {relative}\n", encoding="utf-8")
    (docs / "stylesheets").mkdir()
    (docs / "stylesheets" / "extra.css").write_text("body {}\n", encoding="utf-8")
    (docs / "assets").mkdir()
    (docs / "assets" / "pixi.png").write_bytes(b"\x89PNG")
    (docs / "overrides").mkdir()
    (docs / "docs_hooks.py").write_text(HOOK_SOURCE, encoding="utf-8")
    return tmp_path


@pytest.fixture
def manifest_path(site_root: Path) -> Path:
    """Write ``SAMPLE_MANIFEST`` into the docs tree and return its path."""
    path = site_root / "mkdocs.yml"
    path.write_text(SAMPLE_MANIFEST, encoding="utf-8")
    return path


@pytest.fixture
def registry() -> StaticRegistry:
    """Registry that knows the sample's plugins and theme."""
    return StaticRegistry(
        plugins={"redirects", "search", "social", "mike"},
        themes={"material"},
    )


@pytest.fixture
def sample_manifest() -> str:
    """Return the sample manifest text for tests that edit it before writing."""
    return SAMPLE_MANIFEST
