"""UI theme definitions and selection helpers.

Themes are ANSI palettes for the change list, status bar and help page.
Category colors follow the usual git convention: staged green, unstaged
yellow, untracked red.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    reverse: str
    reset: str
    header: str
    index: str
    workspace: str
    untracked: str
    visual: str
    line_number: str
    status_message: str
    count: str
    help_heading: str
    help_key: str
    help_dim: str
    help_modal_title: str
    help_modal_border: str

    def category_color(self, category: str) -> str:
        return getattr(self, category, "")


DEFAULT_THEME = UITheme(
    name="default",
    reverse="\033[7m",
    reset="\033[0m",
    header="\033[1;36m",
    index="\033[32m",
    workspace="\033[33m",
    untracked="\033[31m",
    visual="\033[30;46m",
    line_number="\033[2;38;5;250m",
    status_message="\033[1;38;5;214m",
    count="\033[1;38;5;229m",
    help_heading="\033[1;38;5;81m",
    help_key="\033[38;5;229m",
    help_dim="\033[2;38;5;250m",
    help_modal_title="\033[1;38;5;45m",
    help_modal_border="\033[38;5;45m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    reverse="\033[7m",
    reset="\033[0m",
    header="\033[1;38;5;45m",
    index="\033[38;5;84m",
    workspace="\033[38;5;215m",
    untracked="\033[38;5;203m",
    visual="\033[38;5;16;48;5;39m",
    line_number="\033[2;38;5;110m",
    status_message="\033[1;38;5;215m",
    count="\033[1;38;5;153m",
    help_heading="\033[1;38;5;45m",
    help_key="\033[38;5;153m",
    help_dim="\033[2;38;5;110m",
    help_modal_title="\033[1;38;5;39m",
    help_modal_border="\033[38;5;39m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reverse="\033[7m",
    reset="\033[0m",
    header="",
    index="",
    workspace="",
    untracked="",
    visual="",
    line_number="",
    status_message="",
    count="",
    help_heading="",
    help_key="",
    help_dim="",
    help_modal_title="",
    help_modal_border="",
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
