"""
Geometry primitives.

Positions and sizes are measured in character cells.  ``Vec2`` doubles as
a position, a size and a layout constraint; ``Rect`` is an axis-aligned
rectangle used for clipping and placement.
"""

from __future__ import annotations

from typing import NamedTuple


class Vec2(NamedTuple):
    """
    A pair of cell coordinates (or a width/height pair).

    Arithmetic is component-wise.  Comparisons with ``<``/``<=`` use
    tuple ordering, so use :meth:`fits_in` when the component-wise
    partial order is meant.
    """

    x: int = 0
    y: int = 0

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def __add__(self, other: object) -> Vec2:  # type: ignore[override]
        ox, oy = _pair(other)
        return Vec2(self.x + ox, self.y + oy)

    def __sub__(self, other: object) -> Vec2:
        ox, oy = _pair(other)
        return Vec2(self.x - ox, self.y - oy)

    def __mul__(self, factor: int) -> Vec2:  # type: ignore[override]
        return Vec2(self.x * factor, self.y * factor)

    def __floordiv__(self, divisor: int) -> Vec2:
        return Vec2(self.x // divisor, self.y // divisor)

    # ------------------------------------------------------------------
    # Component-wise helpers
    # ------------------------------------------------------------------

    def min(self, other: tuple[int, int]) -> Vec2:
        """Component-wise minimum."""
        return Vec2(min(self.x, other[0]), min(self.y, other[1]))

    def max(self, other: tuple[int, int]) -> Vec2:
        """Component-wise maximum."""
        return Vec2(max(self.x, other[0]), max(self.y, other[1]))

    def clamp_zero(self) -> Vec2:
        """Replace negative components by zero."""
        return Vec2(max(0, self.x), max(0, self.y))

    def fits_in(self, other: tuple[int, int]) -> bool:
        """``True`` if both components are ``<=`` those of *other*."""
        return self.x <= other[0] and self.y <= other[1]

    def get(self, axis: int) -> int:
        """Return the component along *axis* (0 = x, 1 = y)."""
        return self.x if axis == 0 else self.y

    def with_axis(self, axis: int, value: int) -> Vec2:
        """Return a copy with the component along *axis* replaced."""
        if axis == 0:
            return Vec2(value, self.y)
        return Vec2(self.x, value)

    @property
    def area(self) -> int:
        return max(0, self.x) * max(0, self.y)

    @classmethod
    def from_axes(cls, axis: int, main: int, cross: int) -> Vec2:
        """Build a vector from a main-axis and a cross-axis component."""
        if axis == 0:
            return cls(main, cross)
        return cls(cross, main)


ZERO = Vec2(0, 0)
ONE = Vec2(1, 1)


def _pair(value: object) -> tuple[int, int]:
    if isinstance(value, int):
        return value, value
    x, y = value  # type: ignore[misc]
    return x, y


class Rect(NamedTuple):
    """
    Axis-aligned rectangle.

    Attributes
    ----------
    x, y:
        Top-left corner.
    width, height:
        Extent in cells.  A rectangle with a non-positive extent is
        empty.
    """

    x: int
    y: int
    width: int
    height: int

    @classmethod
    def from_size(cls, top_left: tuple[int, int], size: tuple[int, int]) -> Rect:
        return cls(top_left[0], top_left[1], size[0], size[1])

    @property
    def top_left(self) -> Vec2:
        return Vec2(self.x, self.y)

    @property
    def size(self) -> Vec2:
        return Vec2(self.width, self.height)

    @property
    def right(self) -> int:
        """Exclusive right edge."""
        return self.x + self.width

    @property
    def bottom(self) -> int:
        """Exclusive bottom edge."""
        return self.y + self.height

    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def contains(self, pos: tuple[int, int]) -> bool:
        """Whether the cell at *pos* lies inside the rectangle."""
        return self.x <= pos[0] < self.right and self.y <= pos[1] < self.bottom

    def offset(self, delta: tuple[int, int]) -> Rect:
        return Rect(self.x + delta[0], self.y + delta[1], self.width, self.height)

    def intersection(self, other: Rect) -> Rect:
        """
        Return the overlap of two rectangles.

        Disjoint rectangles produce an empty rectangle anchored at the
        clamped corner (its width and/or height is zero).
        """
        left = max(self.x, other.x)
        top = max(self.y, other.y)
        right = min(self.right, other.right)
        bottom = min(self.bottom, other.bottom)
        return Rect(left, top, max(0, right - left), max(0, bottom - top))
