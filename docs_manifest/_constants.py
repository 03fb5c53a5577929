"""Common literal values used across docs_manifest.

These constants keep file names, plugin identifiers and hook event names in
one place so the loader, validators, CLI and tests agree on them.

Examples
--------
>>> from docs_manifest import _constants
>>> _constants.DEFAULT_CONFIG.name
'mkdocs.yml'
>>> "on_page_markdown" in _constants.HOOK_EVENTS
True
"""

from pathlib import Path

DEFAULT_CONFIG = Path("mkdocs.yml")
DEFAULT_DOCS_DIR = "docs"
DEFAULT_SITE_DIR = "site"

REDIRECTS_PLUGIN = "redirects"
REDIRECT_MAPS_KEY = "redirect_maps"

VALIDATION_LEVELS = ("warn", "info", "ignore")

DOCUMENT_SUFFIXES = (".md", ".markdown")

HOOK_EVENTS = frozenset(
    {
        "on_startup",
        "on_shutdown",
        "on_serve",
        "on_config",
        "on_pre_build",
        "on_files",
        "on_nav",
        "on_env",
        "on_post_build",
        "on_build_error",
        "on_pre_template",
        "on_template_context",
        "on_post_template",
        "on_pre_page",
        "on_page_read_source",
        "on_page_markdown",
        "on_page_content",
        "on_page_context",
        "on_post_page",
    }
)
