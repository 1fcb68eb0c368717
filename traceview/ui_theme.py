"""UI theme definitions and selection helpers.

Themes are ANSI palettes for trace-tree rows: status dots, compare badges,
and subtree cost badges.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    reset: str
    dim: str
    highlight: str
    tree_marker: str
    tree_dir: str
    tree_file: str
    status_included: str
    status_ignored: str
    status_skipped: str
    status_unknown: str
    badge_only_a: str
    badge_only_b: str
    badge_diff: str
    cost_low: str
    cost_mid: str
    cost_high: str


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    dim="\033[2m",
    highlight="\033[7;1m",
    tree_marker="\033[38;5;44m",
    tree_dir="\033[1;34m",
    tree_file="\033[38;5;252m",
    status_included="\033[38;5;42m",
    status_ignored="\033[38;5;203m",
    status_skipped="\033[38;5;214m",
    status_unknown="\033[38;5;248m",
    badge_only_a="\033[38;5;117m",
    badge_only_b="\033[38;5;141m",
    badge_diff="\033[38;5;221m",
    cost_low="\033[38;5;114m",
    cost_mid="\033[38;5;221m",
    cost_high="\033[38;5;210m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    reset="\033[0m",
    dim="\033[2;38;5;110m",
    highlight="\033[7;1m",
    tree_marker="\033[38;5;39m",
    tree_dir="\033[1;38;5;45m",
    tree_file="\033[38;5;153m",
    status_included="\033[38;5;84m",
    status_ignored="\033[38;5;210m",
    status_skipped="\033[38;5;215m",
    status_unknown="\033[38;5;110m",
    badge_only_a="\033[38;5;45m",
    badge_only_b="\033[38;5;177m",
    badge_diff="\033[38;5;229m",
    cost_low="\033[38;5;79m",
    cost_mid="\033[38;5;229m",
    cost_high="\033[38;5;211m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reset="",
    dim="",
    highlight="",
    tree_marker="",
    tree_dir="",
    tree_file="",
    status_included="",
    status_ignored="",
    status_skipped="",
    status_unknown="",
    badge_only_a="",
    badge_only_b="",
    badge_diff="",
    cost_low="",
    cost_mid="",
    cost_high="",
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
