"""Theme configuration builders."""

from __future__ import annotations

import typing as typ

from .helpers import _as_list, _as_mapping, _optional_str, _str_tuple
from .models import FontConfig, ManifestParseError, PaletteVariant, ThemeConfig

_THEME_KEYS = frozenset(
    {
        "name",
        "custom_dir",
        "favicon",
        "logo",
        "language",
        "font",
        "palette",
        "features",
        "icon",
    }
)


def _build_theme_config(payload: object | None) -> ThemeConfig:
    """Build a ThemeConfig from either a bare theme name or a mapping."""
    match payload:
        case str():
            return ThemeConfig(name=_require_theme_name(payload))
        case None:
            msg = "Manifest requires a 'theme'."
            raise ManifestParseError(msg)
        case dict():
            pass
        case _:
            msg = "'theme' must be a theme name or a mapping."
            raise ManifestParseError(msg)

    name = _require_theme_name(payload.get("name"))
    extra = {key: value for key, value in payload.items() if key not in _THEME_KEYS}
    return ThemeConfig(
        name=name,
        custom_dir=_optional_str(payload.get("custom_dir")),
        favicon=_optional_str(payload.get("favicon")),
        logo=_optional_str(payload.get("logo")),
        language=_optional_str(payload.get("language")),
        font=_build_font(payload.get("font")),
        palette=_build_palette(payload.get("palette")),
        features=_str_tuple(payload.get("features"), key="theme.features"),
        icons=_as_mapping(payload.get("icon"), key="theme.icon"),
        extra=extra,
    )


def _require_theme_name(value: object | None) -> str:
    name = _optional_str(value)
    if name is None:
        msg = "'theme.name' is required."
        raise ManifestParseError(msg)
    return name


def _build_font(payload: object | None) -> FontConfig:
    """Return the font pair; ``font: false`` disables web fonts."""
    if payload is False:
        return FontConfig(enabled=False)
    font = _as_mapping(payload, key="theme.font")
    return FontConfig(
        text=_optional_str(font.get("text")),
        code=_optional_str(font.get("code")),
    )


def _build_palette(payload: object | None) -> tuple[PaletteVariant, ...]:
    """Return palette variants in declared order.

    A single mapping is accepted as a one-variant palette.
    """
    if isinstance(payload, dict):
        entries: list[typ.Any] = [payload]
    else:
        entries = _as_list(payload, key="theme.palette")

    variants: list[PaletteVariant] = []
    for index, entry in enumerate(entries):
        variant = _as_mapping(entry, key=f"theme.palette[{index}]")
        toggle = _as_mapping(variant.get("toggle"), key=f"theme.palette[{index}].toggle")
        variants.append(
            PaletteVariant(
                media=_optional_str(variant.get("media")),
                scheme=_optional_str(variant.get("scheme")),
                primary=_optional_str(variant.get("primary")),
                accent=_optional_str(variant.get("accent")),
                toggle_icon=_optional_str(toggle.get("icon")),
                toggle_name=_optional_str(toggle.get("name")),
            )
        )
    return tuple(variants)


__all__ = ["_build_theme_config"]
