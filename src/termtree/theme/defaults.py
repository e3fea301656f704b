"""
Built-in themes.

The classic palette reproduces the traditional blue-background look of
dialog-style terminal toolkits; the dark palette suits modern terminals.
"""

from __future__ import annotations

from termtree.theme.models import ThemeColor, ThemeInfo

# ---------------------------------------------------------------------------
# Palettes
# ---------------------------------------------------------------------------

CLASSIC_COLORS: ThemeColor = {
    "background": "blue",
    "shadow": "black",
    "view": "white",
    "primary": "black",
    "secondary": "blue",
    "tertiary": "white",
    "title_primary": "red",
    "title_secondary": "yellow",
    "highlight": "red",
    "highlight_inactive": "blue",
    "highlight_text": "white",
}

DARK_COLORS: ThemeColor = {
    "background": "#1a1b26",
    "shadow": "#000000",
    "view": "#24283b",
    "primary": "#c0caf5",
    "secondary": "#7aa2f7",
    "tertiary": "#565f89",
    "title_primary": "#ff9e64",
    "title_secondary": "#e0af68",
    "highlight": "#7aa2f7",
    "highlight_inactive": "#3b4261",
    "highlight_text": "#1a1b26",
}


DEFAULT_THEME = ThemeInfo(
    name="classic",
    description="Blue desktop with white views",
    author="termtree",
    colors=dict(CLASSIC_COLORS),
)
"""Theme used when no theme file is configured."""

DARK_THEME = ThemeInfo(
    name="dark",
    description="Dark theme inspired by Tokyo Night",
    author="termtree",
    colors=dict(DARK_COLORS),
    shadow=False,
)

BUILTIN_THEMES: dict[str, ThemeInfo] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    DARK_THEME.name: DARK_THEME,
}


def get_default_theme(name: str = "classic") -> ThemeInfo:
    """
    Return a fresh copy of a built-in theme.

    A copy is returned so that callers can mutate it without affecting
    the module-level constant.
    """
    source = BUILTIN_THEMES[name]
    return ThemeInfo(
        name=source.name,
        description=source.description,
        author=source.author,
        colors=dict(source.colors),
        shadow=source.shadow,
        borders=source.borders,
    )
