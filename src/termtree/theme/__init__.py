"""Theme system: palette roles, built-in themes and theme files."""
from __future__ import annotations

from termtree.theme.defaults import BUILTIN_THEMES, DARK_THEME, DEFAULT_THEME, get_default_theme
from termtree.theme.loader import discover_themes, load_theme, theme_from_dict, validate_theme
from termtree.theme.models import ALL_COLOR_KEYS, ThemeColor, ThemeInfo

__all__ = [
    "ALL_COLOR_KEYS",
    "BUILTIN_THEMES",
    "DARK_THEME",
    "DEFAULT_THEME",
    "ThemeColor",
    "ThemeInfo",
    "discover_themes",
    "get_default_theme",
    "load_theme",
    "theme_from_dict",
    "validate_theme",
]
