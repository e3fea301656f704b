"""
Linear layout container.

Stacks children along one axis.  Space is handed out in priority order:
each child, in turn, is offered whatever the earlier children left on the
main axis.  Space left after every child got its requirement is shared
among the children in proportion to their weights.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from termtree.geometry import Rect, Vec2
from termtree.layout import Orientation, allocate, weight_distrib
from termtree.view import Direction, View

if TYPE_CHECKING:
    from termtree.printer import Printer


class LinearLayout(View):
    """
    A horizontal or vertical stack of child :class:`View` instances.

    Parameters
    ----------
    orientation:
        Main axis of the stack.
    children:
        Initial children, all with weight 0.

    Example
    -------
    >>> layout = LinearLayout.vertical()
    >>> layout.add_child(TextView("Name:")).add_child(DummyView(), weight=1)
    """

    def __init__(
        self,
        orientation: Orientation = Orientation.VERTICAL,
        children: Sequence[View] | None = None,
    ) -> None:
        self._orientation = orientation
        self._children: list[View] = list(children) if children else []
        self._weights: list[int] = [0] * len(self._children)
        self._rects: list[Rect] = []
        self._focused_index: int | None = None
        self._dirty = True

    @classmethod
    def vertical(cls, children: Sequence[View] | None = None) -> LinearLayout:
        return cls(Orientation.VERTICAL, children)

    @classmethod
    def horizontal(cls, children: Sequence[View] | None = None) -> LinearLayout:
        return cls(Orientation.HORIZONTAL, children)

    @property
    def orientation(self) -> Orientation:
        return self._orientation

    @property
    def _axis(self) -> int:
        return self._orientation.axis

    # ------------------------------------------------------------------
    # Child management
    # ------------------------------------------------------------------

    def children(self) -> Sequence[View]:
        return tuple(self._children)

    def __len__(self) -> int:
        return len(self._children)

    def get_child(self, index: int) -> View:
        return self._children[index]

    def add_child(self, child: View, weight: int = 0) -> LinearLayout:
        """Append a child; returns ``self`` for chaining."""
        self._children.append(child)
        self._weights.append(weight)
        self._dirty = True
        return self

    def insert_child(self, index: int, child: View, weight: int = 0) -> None:
        """Insert a child at *index*."""
        self._children.insert(index, child)
        self._weights.insert(index, weight)
        self._dirty = True

    def remove_child(self, index: int) -> View:
        """Remove and return the child at *index*."""
        self._weights.pop(index)
        child = self._children.pop(index)
        self._dirty = True
        return child

    def find_child_index(self, child: View) -> int | None:
        """Index of *child* (compared by identity), or ``None``."""
        for i, candidate in enumerate(self._children):
            if candidate is child:
                return i
        return None

    def set_weight(self, index: int, weight: int) -> None:
        self._weights[index] = weight
        self._dirty = True

    def clear(self) -> None:
        """Remove all children."""
        self._children.clear()
        self._weights.clear()
        self._rects = []
        self._dirty = True

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def required_size(self, constraint: Vec2) -> Vec2:
        sizes = allocate(self._children, constraint, self._axis)
        main = sum(s.get(self._axis) for s in sizes)
        cross = max((s.get(1 - self._axis) for s in sizes), default=0)
        return Vec2.from_axes(self._axis, main, cross)

    def layout(self, size: Vec2) -> None:
        super().layout(size)
        axis = self._axis
        sizes = allocate(self._children, size, axis)
        extra = size.get(axis) - sum(s.get(axis) for s in sizes)
        bonus = weight_distrib(extra, self._weights)

        self._rects = []
        position = 0
        for child, required, more in zip(self._children, sizes, bonus):
            main = required.get(axis) + more
            child_size = Vec2.from_axes(axis, main, size.get(1 - axis))
            origin = Vec2.from_axes(axis, position, 0)
            self._rects.append(Rect.from_size(origin, child_size))
            child.layout(child_size)
            position += main
        self._dirty = False

    def needs_relayout(self) -> bool:
        return self._dirty or any(c.needs_relayout() for c in self._children)

    def child_rect(self, index: int) -> Rect | None:
        """Placement of the child at *index* from the last layout."""
        if 0 <= index < len(self._rects):
            return self._rects[index]
        return None

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def draw(self, printer: Printer) -> None:
        path = printer.focus_path
        self._focused_index = path[0] if path else None
        for index, (child, rect) in enumerate(zip(self._children, self._rects)):
            if rect.is_empty():
                continue
            child.draw(printer.child(index, rect))

    # ------------------------------------------------------------------
    # Focus
    # ------------------------------------------------------------------

    @property
    def focused_index(self) -> int | None:
        """Index of the child on the focus path as of the last draw."""
        return self._focused_index

    def take_focus(self, direction: Direction) -> bool:
        return any(child.take_focus(direction) for child in self._children)

    def important_area(self, size: Vec2) -> Rect:
        index = self._focused_index
        rect = self.child_rect(index) if index is not None else None
        if rect is None:
            return super().important_area(size)
        inner = self._children[index].important_area(rect.size)
        return inner.offset(rect.top_left)
