"""
In-memory cell grid.

The runtime draws every frame into a :class:`Surface`; the renderer then
compares it with the previously presented frame and forwards only the
changed runs to the backend.  Cells never hold half of a wide character:
writing over either half of a wide character blanks the other half.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from rich.cells import cell_len

from termtree.geometry import Rect, Vec2
from termtree.style import PLAIN, Style

CONTINUATION = ""
"""Character stored in the cell to the right of a wide character."""


@dataclass(frozen=True)
class Cell:
    """A single screen cell."""

    char: str = " "
    style: Style = PLAIN

    @property
    def is_continuation(self) -> bool:
        return self.char == CONTINUATION


BLANK = Cell()


def char_width(char: str) -> int:
    """Cell width of a single grapheme (0, 1 or 2)."""
    return cell_len(char)


class Surface:
    """
    A ``width x height`` grid of :class:`Cell` objects.

    Parameters
    ----------
    size:
        Initial dimensions.
    style:
        Style of blank cells after :meth:`clear`.
    """

    def __init__(self, size: tuple[int, int], style: Style = PLAIN) -> None:
        self._size = Vec2(*size).clamp_zero()
        self._blank = Cell(" ", style)
        self._rows: list[list[Cell]] = self._blank_rows()

    def _blank_rows(self) -> list[list[Cell]]:
        return [[self._blank] * self._size.x for _ in range(self._size.y)]

    # ------------------------------------------------------------------
    # Dimensions
    # ------------------------------------------------------------------

    @property
    def size(self) -> Vec2:
        return self._size

    @property
    def bounds(self) -> Rect:
        return Rect(0, 0, self._size.x, self._size.y)

    def resize(self, size: tuple[int, int]) -> None:
        """Change dimensions; the content is discarded."""
        self._size = Vec2(*size).clamp_zero()
        self._rows = self._blank_rows()

    def clear(self, style: Style | None = None) -> None:
        """Blank every cell, optionally switching the blank style."""
        if style is not None:
            self._blank = Cell(" ", style)
        self._rows = self._blank_rows()

    def copy(self) -> Surface:
        clone = Surface(self._size)
        clone._blank = self._blank
        clone._rows = [list(row) for row in self._rows]
        return clone

    # ------------------------------------------------------------------
    # Cell access
    # ------------------------------------------------------------------

    def cell(self, x: int, y: int) -> Cell:
        return self._rows[y][x]

    def row(self, y: int) -> list[Cell]:
        return list(self._rows[y])

    def put(self, x: int, y: int, char: str, style: Style) -> bool:
        """
        Write one grapheme at absolute ``(x, y)``.

        Returns ``False`` (and writes nothing) when any cell the grapheme
        would cover lies outside the surface.
        """
        width = char_width(char)
        if width == 0:
            return False
        if y < 0 or y >= self._size.y or x < 0 or x + width > self._size.x:
            return False

        row = self._rows[y]
        self._break_wide(row, x)
        if width == 2:
            self._break_wide(row, x + 1)
        row[x] = Cell(char, style)
        if width == 2:
            row[x + 1] = Cell(CONTINUATION, style)
        return True

    def _break_wide(self, row: list[Cell], x: int) -> None:
        """Blank the other half of a wide character that covers column *x*."""
        current = row[x]
        if current.is_continuation and x > 0:
            row[x - 1] = Cell(" ", row[x - 1].style)
        elif char_width(current.char) == 2 and x + 1 < len(row):
            row[x + 1] = Cell(" ", current.style)

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    def text_lines(self) -> list[str]:
        """Return the characters of each row, without styles."""
        return ["".join(c.char for c in row) for row in self._rows]

    def runs(self, y: int) -> Iterator[tuple[int, str, Style]]:
        """
        Yield ``(x, text, style)`` runs of equally-styled cells in row *y*.

        Continuation cells are folded into their wide character.
        """
        row = self._rows[y]
        start = 0
        text: list[str] = []
        style: Style | None = None
        for x, cell in enumerate(row):
            if cell.is_continuation:
                continue
            if style is None or cell.style != style:
                if text and style is not None:
                    yield start, "".join(text), style
                start, text, style = x, [], cell.style
            text.append(cell.char)
        if text and style is not None:
            yield start, "".join(text), style

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Surface):
            return NotImplemented
        return self._size == other._size and self._rows == other._rows

    def __repr__(self) -> str:
        return f"Surface(size={tuple(self._size)})"
