"""
Style model.

A :class:`Style` is a (foreground, background, effects) triple.  Colors
are plain strings in any syntax ``rich`` understands (``"red"``,
``"#ff8800"``, ``"color(12)"``, ``"default"``) or the name of a palette
role (``"primary"``, ``"highlight"``...) that a
:class:`~termtree.theme.ThemeInfo` resolves while drawing.

Styles compose: :meth:`Style.combine` lays a delta over a base so that
nested drawing contexts inherit whatever the delta leaves unset.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from functools import lru_cache, reduce

from rich.color import Color, ColorParseError
from rich.errors import StyleSyntaxError
from rich.style import Style as RichStyle

from termtree.errors import ConfigError
from termtree.logging import get_logger

logger = get_logger("style")


class Effect(enum.Flag):
    """Text effects; combine with ``|``."""

    NONE = 0
    BOLD = enum.auto()
    DIM = enum.auto()
    ITALIC = enum.auto()
    UNDERLINE = enum.auto()
    BLINK = enum.auto()
    REVERSE = enum.auto()
    STRIKE = enum.auto()


_EFFECT_NAMES: dict[str, Effect] = {
    "bold": Effect.BOLD,
    "dim": Effect.DIM,
    "italic": Effect.ITALIC,
    "underline": Effect.UNDERLINE,
    "blink": Effect.BLINK,
    "reverse": Effect.REVERSE,
    "strike": Effect.STRIKE,
}


# ---------------------------------------------------------------------------
# Color helpers
# ---------------------------------------------------------------------------

@lru_cache(maxsize=512)
def is_color(value: str) -> bool:
    """Return ``True`` if *value* is a color literal ``rich`` can parse."""
    try:
        Color.parse(value)
    except ColorParseError:
        return False
    return True


def parse_color(value: str) -> Color:
    """
    Parse a color literal.

    Raises
    ------
    ConfigError
        If *value* is not a valid color.
    """
    try:
        return Color.parse(value)
    except ColorParseError as exc:
        raise ConfigError(f"Invalid color: {value!r}") from exc


# ---------------------------------------------------------------------------
# Style
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Style:
    """
    A resolved or partially-resolved text style.

    Attributes
    ----------
    fg:
        Foreground color or palette role.  ``None`` inherits.
    bg:
        Background color or palette role.  ``None`` inherits.
    effects:
        Effects added on top of the inherited ones.
    """

    fg: str | None = None
    bg: str | None = None
    effects: Effect = Effect.NONE

    @classmethod
    def parse(cls, definition: str) -> Style:
        """
        Parse a ``rich``-style definition such as ``"bold red on blue"``.

        Palette roles are accepted for the colors:
        ``"underline primary on view"``.
        """
        words = definition.split()
        fg: str | None = None
        bg: str | None = None
        effects = Effect.NONE
        on_bg = False
        for word in words:
            lowered = word.lower()
            if lowered == "on":
                on_bg = True
                continue
            if lowered in _EFFECT_NAMES and not on_bg:
                effects |= _EFFECT_NAMES[lowered]
                continue
            if on_bg:
                bg = word
                on_bg = False
            else:
                fg = word
        if on_bg:
            raise ConfigError(f"Missing background color in style {definition!r}")
        return cls(fg=fg, bg=bg, effects=effects)

    def combine(self, delta: Style) -> Style:
        """Return this style with *delta* laid on top."""
        return Style(
            fg=delta.fg if delta.fg is not None else self.fg,
            bg=delta.bg if delta.bg is not None else self.bg,
            effects=self.effects | delta.effects,
        )

    def with_effect(self, effect: Effect) -> Style:
        return Style(self.fg, self.bg, self.effects | effect)

    @property
    def is_plain(self) -> bool:
        return self.fg is None and self.bg is None and not self.effects

    # ------------------------------------------------------------------
    # rich interop
    # ------------------------------------------------------------------

    def to_rich(self) -> RichStyle:
        """
        Convert to a :class:`rich.style.Style`.

        Colors that do not parse (typically unresolved palette roles) are
        left unset.
        """
        return _to_rich(self)

    @classmethod
    def from_rich(cls, style: RichStyle) -> Style:
        effects = Effect.NONE
        for name, effect in _EFFECT_NAMES.items():
            if getattr(style, name, None):
                effects |= effect
        return cls(
            fg=style.color.name if style.color is not None else None,
            bg=style.bgcolor.name if style.bgcolor is not None else None,
            effects=effects,
        )


PLAIN = Style()


def combine_all(*styles: Style) -> Style:
    """Fold a sequence of styles from left to right."""
    return reduce(Style.combine, styles, PLAIN)


@lru_cache(maxsize=1024)
def _to_rich(style: Style) -> RichStyle:
    color = _rich_color(style.fg)
    bgcolor = _rich_color(style.bg)
    try:
        return RichStyle(
            color=color,
            bgcolor=bgcolor,
            bold=Effect.BOLD in style.effects or None,
            dim=Effect.DIM in style.effects or None,
            italic=Effect.ITALIC in style.effects or None,
            underline=Effect.UNDERLINE in style.effects or None,
            blink=Effect.BLINK in style.effects or None,
            reverse=Effect.REVERSE in style.effects or None,
            strike=Effect.STRIKE in style.effects or None,
        )
    except StyleSyntaxError as exc:
        raise ConfigError(f"Cannot convert style {style!r}") from exc


def _rich_color(value: str | None) -> str | None:
    if value is None:
        return None
    if not is_color(value):
        logger.debug("Unresolved color %r ignored", value)
        return None
    return value
