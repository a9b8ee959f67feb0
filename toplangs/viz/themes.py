"""
Card colour themes and colour resolution.

Explicit colour options win over the theme, the theme wins over the default
theme. Colours are accepted as bare hex strings (3, 4, 6 or 8 digits) or as
gradients: ``angle,start,stop[,stop...]`` e.g. ``"90,ff0000,00ff00"``.
"""
import re
from dataclasses import dataclass
from typing import Optional, Union

HEX_COLOR_RE = re.compile(r"^([A-Fa-f0-9]{8}|[A-Fa-f0-9]{6}|[A-Fa-f0-9]{3}|[A-Fa-f0-9]{4})$")

THEMES: dict[str, dict[str, str]] = {
    "default": {
        "title_color": "2f80ed",
        "icon_color": "4c71f2",
        "text_color": "434d58",
        "bg_color": "fffefe",
        "border_color": "e4e2e2",
    },
    "dark": {
        "title_color": "fff",
        "icon_color": "79ff97",
        "text_color": "9f9f9f",
        "bg_color": "151515",
    },
    "radical": {
        "title_color": "fe428e",
        "icon_color": "f8d847",
        "text_color": "a9fef7",
        "bg_color": "141321",
    },
    "merko": {
        "title_color": "abd200",
        "icon_color": "b7d364",
        "text_color": "68b587",
        "bg_color": "0a0f0b",
    },
    "gruvbox": {
        "title_color": "fabd2f",
        "icon_color": "fe8019",
        "text_color": "8ec07c",
        "bg_color": "282828",
    },
    "tokyonight": {
        "title_color": "70a5fd",
        "icon_color": "bf91f3",
        "text_color": "38bdae",
        "bg_color": "1a1b27",
    },
    "onedark": {
        "title_color": "e4bf7a",
        "icon_color": "8eb573",
        "text_color": "df6d74",
        "bg_color": "282c34",
    },
    "github_dark": {
        "title_color": "58a6ff",
        "icon_color": "1f6feb",
        "text_color": "c3d1d9",
        "bg_color": "0d1117",
        "border_color": "30363d",
    },
    "transparent": {
        "title_color": "006aff",
        "icon_color": "0579c3",
        "text_color": "417e87",
        "bg_color": "ffffff00",
    },
}

# bg_color is either a "#rrggbb" string or a gradient: [angle, stop, stop, ...]
BgColor = Union[str, list[str]]


@dataclass
class CardColors:
    title_color: str
    icon_color: str
    text_color: str
    bg_color: BgColor
    border_color: str


def is_valid_hex_color(value: Optional[str]) -> bool:
    return bool(value) and bool(HEX_COLOR_RE.match(value))


def is_valid_gradient(colors: list[str]) -> bool:
    return len(colors) > 2 and all(is_valid_hex_color(c) for c in colors[1:])


def fallback_color(color: Optional[str], fallback: BgColor) -> BgColor:
    """Return ``#color`` when valid, the gradient stops when ``color`` is a
    valid gradient, otherwise ``fallback``."""
    if color:
        gradient = color.split(",")
        if len(gradient) > 1 and is_valid_gradient(gradient):
            return gradient
        if is_valid_hex_color(color):
            return f"#{color}"
    return fallback


def get_card_colors(
    title_color: Optional[str] = None,
    text_color: Optional[str] = None,
    icon_color: Optional[str] = None,
    bg_color: Optional[str] = None,
    border_color: Optional[str] = None,
    theme: Optional[str] = None,
) -> CardColors:
    """Resolve the colours of a card from explicit options and a theme name.

    Unknown theme names fall back to the default theme.
    """
    default_theme = THEMES["default"]
    selected = THEMES.get(theme or "default", default_theme)
    default_border = selected.get("border_color", default_theme["border_color"])

    def pick(explicit: Optional[str], key: str) -> str:
        return fallback_color(
            explicit or selected.get(key),
            f"#{default_theme[key]}",
        )

    bg = fallback_color(
        bg_color or selected.get("bg_color"),
        f"#{default_theme['bg_color']}",
    )

    return CardColors(
        title_color=pick(title_color, "title_color"),
        icon_color=pick(icon_color, "icon_color"),
        text_color=pick(text_color, "text_color"),
        bg_color=bg,
        border_color=fallback_color(border_color, f"#{default_border}"),
    )
