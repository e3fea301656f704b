"""Tests for the drawing context."""

from __future__ import annotations

from termtree.geometry import Rect, Vec2
from termtree.printer import Printer
from termtree.style import Effect, Style
from termtree.surface import Surface
from termtree.theme import get_default_theme


def _printer(width: int = 10, height: int = 3) -> tuple[Surface, Printer]:
    surface = Surface((width, height))
    return surface, Printer.for_surface(surface, get_default_theme())


class TestClipping:
    """Writes never escape the clip rectangle."""

    def test_print_inside(self) -> None:
        """print writes at a local position and returns the cells spanned."""
        surface, printer = _printer()
        assert printer.print((1, 0), "abc") == 3
        assert surface.text_lines()[0] == " abc      "

    def test_cropped_child_cannot_write_outside(self) -> None:
        """A windowed printer never writes outside its rectangle."""
        surface, printer = _printer()
        child = printer.windowed(Rect(2, 1, 3, 1))
        child.print((0, 0), "abcdef")
        child.print((0, 1), "zzz")
        assert surface.text_lines() == ["          ", "  abc     ", "          "]

    def test_negative_positions_are_clipped(self) -> None:
        """Text starting left of the origin loses its leading cells."""
        surface, printer = _printer()
        printer.print((-2, 0), "abcd")
        assert surface.text_lines()[0].startswith("cd ")

    def test_wide_char_straddling_clip_is_dropped(self) -> None:
        """A wide character is drawn only if both of its cells fit."""
        surface, printer = _printer(6, 1)
        child = printer.windowed(Rect(0, 0, 3, 1))
        spanned = child.print((0, 0), "a漢x")
        assert spanned == 4
        assert surface.text_lines()[0] == "a漢   "

        surface, printer = _printer(6, 1)
        child = printer.windowed(Rect(0, 0, 2, 1))
        child.print((0, 0), "a漢")
        assert surface.cell(1, 0).char == " "
        assert surface.cell(2, 0).char == " "

    def test_offset_shrinks_size(self) -> None:
        """Offsetting a printer shrinks its usable size."""
        _, printer = _printer()
        assert printer.offset((3, 1)).size == Vec2(7, 2)
        assert printer.offset((20, 0)).size == Vec2(0, 3)

    def test_clip_to_uses_local_coordinates(self) -> None:
        """clip_to takes a rectangle in the printer's own coordinates."""
        surface, printer = _printer()
        shifted = printer.offset((2, 0)).clip_to(Rect(0, 0, 2, 1))
        shifted.print((0, 0), "xyz")
        assert surface.text_lines()[0] == "  xy      "


class TestStyles:
    """Style derivation on printers."""

    def test_with_style_resolves_roles(self) -> None:
        """Palette roles resolve through the theme."""
        surface, printer = _printer()
        printer.with_style(Style(fg="primary", bg="view")).print((0, 0), "a")
        assert surface.cell(0, 0).style == Style(fg="black", bg="white")

    def test_nested_styles_combine(self) -> None:
        """Inner styles override outer ones only where they set a value."""
        surface, printer = _printer()
        outer = printer.with_style(Style(bg="blue"))
        inner = outer.with_style(Style(fg="red")).with_effect(Effect.BOLD)
        inner.print((0, 0), "a")
        outer.print((1, 0), "b")
        assert surface.cell(0, 0).style == Style(fg="red", bg="blue", effects=Effect.BOLD)
        assert surface.cell(1, 0).style == Style(bg="blue")


class TestFocusPath:
    """Focus narrowing through child printers."""

    def test_child_on_focus_path(self) -> None:
        """Only the child on the focus path inherits the rest of the path."""
        _, printer = _printer()
        root = printer.focus((1, 0))
        assert root.on_focus_path
        assert not root.focused

        first = root.child(0, Rect(0, 0, 5, 1))
        second = root.child(1, Rect(0, 1, 5, 1))
        assert first.focus_path is None
        assert second.focus_path == (0,)
        assert second.child(0, Rect(0, 0, 2, 1)).focused

    def test_focus_records_absolute_rect(self) -> None:
        """The focused child's absolute rectangle is recorded in the frame."""
        _, printer = _printer()
        root = printer.focus((1,))
        root.child(1, Rect(2, 1, 4, 1))
        assert root.frame.focus_rect == Rect(2, 1, 4, 1)

    def test_unfocused_printer(self) -> None:
        """Without focus, children have no focus path."""
        _, printer = _printer()
        assert printer.focus(None).child(0, Rect(0, 0, 1, 1)).focus_path is None


class TestShapes:
    """Lines, fills and boxes."""

    def test_fill(self) -> None:
        """fill covers a rectangle with one character."""
        surface, printer = _printer(4, 2)
        printer.fill(Rect(1, 0, 2, 2), "#")
        assert surface.text_lines() == [" ## ", " ## "]

    def test_print_box(self) -> None:
        """print_box draws a frame with corners."""
        surface, printer = _printer(4, 3)
        printer.print_box((0, 0), (4, 3))
        assert surface.text_lines() == ["┌──┐", "│  │", "└──┘"]

    def test_print_box_too_small_draws_nothing(self) -> None:
        """A box narrower than two cells is skipped."""
        surface, printer = _printer(4, 3)
        printer.print_box((0, 0), (1, 3))
        assert surface.text_lines() == ["    ", "    ", "    "]
