"""
Theme data models.

A theme maps *palette roles* to concrete colors.  Views draw with role
names (``Style(fg="primary", bg="view")``) and the drawing context swaps
them for the colors of the active theme.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from termtree.style import Effect, Style

# ---------------------------------------------------------------------------
# Palette roles
# ---------------------------------------------------------------------------

# Each role maps to a color string (e.g. ``"#1e1e2e"`` or ``"blue"``).

BACKGROUND_KEYS: list[str] = [
    "background",
    "shadow",
    "view",
]

TEXT_KEYS: list[str] = [
    "primary",
    "secondary",
    "tertiary",
    "title_primary",
    "title_secondary",
]

HIGHLIGHT_KEYS: list[str] = [
    "highlight",
    "highlight_inactive",
    "highlight_text",
]

ALL_COLOR_KEYS: list[str] = BACKGROUND_KEYS + TEXT_KEYS + HIGHLIGHT_KEYS
"""Complete list of recognised palette roles."""


ThemeColor = dict[str, str]
"""A mapping from palette role to color string."""


# ---------------------------------------------------------------------------
# ThemeInfo
# ---------------------------------------------------------------------------

@dataclass
class ThemeInfo:
    """
    Full theme definition including metadata and resolved colors.

    Attributes
    ----------
    name:
        Short identifier for the theme (e.g. ``"classic"``).
    description:
        One-line human-readable description.
    author:
        Theme author name or handle.
    colors:
        Mapping from palette role to color string.
    shadow:
        Whether floating layers should cast a shadow.
    borders:
        Border style used by :meth:`Printer.print_box`; ``"simple"``,
        ``"heavy"`` or ``"none"``.
    """

    name: str = "untitled"
    description: str = ""
    author: str = ""
    colors: ThemeColor = field(default_factory=dict)
    shadow: bool = True
    borders: str = "simple"

    # ------------------------------------------------------------------
    # Convenience accessors
    # ------------------------------------------------------------------

    def get(self, key: str, fallback: str = "default") -> str:
        """Return the color for *key*, or *fallback* if absent."""
        return self.colors.get(key, fallback)

    def __getitem__(self, key: str) -> str:
        return self.colors[key]

    def __contains__(self, key: str) -> bool:
        return key in self.colors

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve_color(self, value: str | None) -> str | None:
        """Swap a palette role for its color; literals pass through."""
        if value is None:
            return None
        return self.colors.get(value, value)

    def resolve(self, style: Style) -> Style:
        """Return *style* with every palette role replaced by its color."""
        return Style(
            fg=self.resolve_color(style.fg),
            bg=self.resolve_color(style.bg),
            effects=style.effects,
        )

    def base_style(self) -> Style:
        """The style a layer's background is filled with."""
        return Style(fg=self.get("primary"), bg=self.get("view"))

    def highlight_style(self, focused: bool = True) -> Style:
        """Style for a selected element, dimmer when *focused* is ``False``."""
        bg = self.get("highlight" if focused else "highlight_inactive")
        return Style(fg=self.get("highlight_text"), bg=bg, effects=Effect.NONE)
