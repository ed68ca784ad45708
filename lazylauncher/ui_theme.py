"""UI theme definitions and selection helpers.

Themes are plain data: named ANSI style tokens consumed by the renderer.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by the launcher renderer."""

    name: str
    reset: str
    panel_border: str
    input_text: str
    input_placeholder: str
    input_cursor: str
    item_primary: str
    item_secondary: str
    item_icon: str
    item_hint: str
    item_focused: str
    divider: str
    menu_border: str
    menu_item: str
    idle_hint: str


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    panel_border="\033[38;5;240m",
    input_text="\033[1;38;5;255m",
    input_placeholder="\033[2;38;5;250m",
    input_cursor="\033[7m",
    item_primary="\033[38;5;252m",
    item_secondary="\033[2;38;5;248m",
    item_icon="\033[38;5;44m",
    item_hint="\033[38;5;244m",
    item_focused="\033[48;5;237m",
    divider="\033[2;38;5;238m",
    menu_border="\033[38;5;81m",
    menu_item="\033[38;5;229m",
    idle_hint="\033[2;38;5;250m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    reset="\033[0m",
    panel_border="\033[38;5;31m",
    input_text="\033[1;38;5;153m",
    input_placeholder="\033[2;38;5;110m",
    input_cursor="\033[7m",
    item_primary="\033[38;5;117m",
    item_secondary="\033[2;38;5;110m",
    item_icon="\033[38;5;45m",
    item_hint="\033[38;5;73m",
    item_focused="\033[48;5;24m",
    divider="\033[2;38;5;31m",
    menu_border="\033[38;5;39m",
    menu_item="\033[38;5;153m",
    idle_hint="\033[2;38;5;110m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reset="",
    panel_border="",
    input_text="",
    input_placeholder="",
    input_cursor="",
    item_primary="",
    item_secondary="",
    item_icon="",
    item_hint="",
    item_focused="",
    divider="",
    menu_border="",
    menu_item="",
    idle_hint="",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Return selectable non-plain theme names."""
    return tuple(sorted(_THEMES.keys()))


def normalize_theme_name(name: str | None) -> str:
    """Return a valid theme name, falling back to default."""
    if not name:
        return DEFAULT_THEME.name
    candidate = str(name).strip().lower()
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Return concrete theme for requested name and color mode."""
    if no_color:
        return PLAIN_THEME
    return _THEMES[normalize_theme_name(name)]


__all__ = [
    "UITheme",
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "available_theme_names",
    "normalize_theme_name",
    "resolve_theme",
]
