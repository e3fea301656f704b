"""Tests for styles and their rich conversion."""

from __future__ import annotations

import pytest

from termtree.errors import ConfigError
from termtree.style import PLAIN, Effect, Style, combine_all, is_color, parse_color


class TestStyle:
    """Tests for Style composition."""

    def test_combine_overrides_set_colors(self) -> None:
        """Colors set on the overlay replace the base; unset ones are kept."""
        base = Style(fg="red", bg="blue", effects=Effect.BOLD)
        delta = Style(fg="green")

        result = base.combine(delta)

        assert result.fg == "green"
        assert result.bg == "blue"
        assert result.effects == Effect.BOLD

    def test_combine_merges_effects(self) -> None:
        """Effects from both styles are merged."""
        result = Style(effects=Effect.BOLD).combine(Style(effects=Effect.UNDERLINE))
        assert Effect.BOLD in result.effects
        assert Effect.UNDERLINE in result.effects

    def test_combine_all_folds_left_to_right(self) -> None:
        """Later styles win when folding several."""
        result = combine_all(Style(fg="red"), Style(bg="white"), Style(fg="black"))
        assert result == Style(fg="black", bg="white")

    def test_plain(self) -> None:
        """Only a style with no colors and no effects is plain."""
        assert PLAIN.is_plain
        assert not Style(fg="red").is_plain
        assert not PLAIN.with_effect(Effect.DIM).is_plain

    def test_styles_are_hashable(self) -> None:
        """Equal styles hash alike."""
        assert hash(Style(fg="red")) == hash(Style(fg="red"))


class TestStyleParse:
    """Tests for Style.parse."""

    def test_full_definition(self) -> None:
        """Effects, foreground and background parse from one string."""
        style = Style.parse("bold red on blue")
        assert style == Style(fg="red", bg="blue", effects=Effect.BOLD)

    def test_palette_roles_allowed(self) -> None:
        """Palette role names are accepted as colors."""
        style = Style.parse("underline primary on view")
        assert style.fg == "primary"
        assert style.bg == "view"
        assert style.effects == Effect.UNDERLINE

    def test_missing_background_raises(self) -> None:
        """A dangling 'on' raises ConfigError."""
        with pytest.raises(ConfigError):
            Style.parse("red on")


class TestColors:
    """Tests for color validation and rich interop."""

    def test_is_color(self) -> None:
        """Literal colors pass; palette role names do not."""
        assert is_color("red")
        assert is_color("#ff8800")
        assert is_color("color(12)")
        assert is_color("default")
        assert not is_color("primary")

    def test_parse_color_raises_config_error(self) -> None:
        """An unparseable color raises ConfigError."""
        with pytest.raises(ConfigError):
            parse_color("not-a-color")

    def test_to_rich(self) -> None:
        """Colors and effects carry over to a rich Style."""
        rich_style = Style(fg="red", bg="#000000", effects=Effect.BOLD | Effect.ITALIC).to_rich()
        assert rich_style.color is not None
        assert rich_style.color.name == "red"
        assert rich_style.bgcolor is not None
        assert rich_style.bold is True
        assert rich_style.italic is True
        assert rich_style.underline is None

    def test_unresolved_role_dropped_in_rich(self) -> None:
        """An unresolved palette role has no rich color."""
        rich_style = Style(fg="primary").to_rich()
        assert rich_style.color is None

    def test_from_rich_round_trip(self) -> None:
        """A rich Style converts back to the same Style."""
        style = Style(fg="red", bg="blue", effects=Effect.UNDERLINE)
        assert Style.from_rich(style.to_rich()) == style
