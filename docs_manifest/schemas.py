"""Option schemas for the plugins a documentation site commonly configures.

Plugins listed here have their option names checked; any other plugin is
treated as opaque and its options are passed through unchecked.
"""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

from ._constants import REDIRECT_MAPS_KEY, REDIRECTS_PLUGIN

COMMON_OPTIONS = frozenset({"enabled"})

PLUGIN_OPTIONS: dict[str, frozenset[str]] = {
    "search": frozenset(
        {
            "lang",
            "separator",
            "min_search_length",
            "prebuild_index",
            "indexing",
            "pipeline",
            "jieba_dict",
            "jieba_dict_user",
        }
    ),
    REDIRECTS_PLUGIN: frozenset({REDIRECT_MAPS_KEY}),
    "mike": frozenset(
        {
            "alias_type",
            "redirect_template",
            "deploy_prefix",
            "canonical_version",
            "version_selector",
            "css_dir",
            "javascript_dir",
        }
    ),
    "offline": frozenset(),
    "social": frozenset(
        {
            "cache",
            "cache_dir",
            "cards",
            "cards_dir",
            "cards_layout",
            "cards_layout_dir",
            "cards_layout_options",
            "cards_include",
            "cards_exclude",
            "concurrency",
            "debug",
            "debug_on_build",
            "debug_grid",
            "debug_grid_step",
            "debug_color",
            "log",
            "log_level",
        }
    ),
}


def unknown_options(
    identifier: str, options: cabc.Mapping[str, typ.Any]
) -> list[str] | None:
    """Return option names the plugin does not accept.

    Returns ``None`` when there is no schema for ``identifier``.
    """
    allowed = PLUGIN_OPTIONS.get(identifier.split("/")[-1])
    if allowed is None:
        return None
    return sorted(
        str(name) for name in options if name not in allowed and name not in COMMON_OPTIONS
    )


def redirect_map_problems(options: cabc.Mapping[str, typ.Any]) -> list[str]:
    """Check that ``redirect_maps`` is a mapping of path strings to path strings."""
    table = options.get(REDIRECT_MAPS_KEY)
    if table is None:
        return []
    if not isinstance(table, cabc.Mapping):
        return [f"'{REDIRECT_MAPS_KEY}' must be a mapping of old path to new path"]
    problems: list[str] = []
    for old, new in table.items():
        if not isinstance(old, str) or not isinstance(new, str) or not new.strip():
            problems.append(f"redirect {old!r} -> {new!r} must map a path to a path")
    return problems


__all__ = [
    "COMMON_OPTIONS",
    "PLUGIN_OPTIONS",
    "redirect_map_problems",
    "unknown_options",
]
