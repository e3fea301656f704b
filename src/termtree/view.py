"""
Abstract base class for every node of the view tree.

A view answers size queries, accepts its granted size, draws itself
through a :class:`~termtree.printer.Printer`, reacts to events and says
whether it accepts focus.  Parents hold their children by value and never
expose themselves to them: a child communicates upwards only through the
:class:`~termtree.event.EventResult` it returns.
"""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from termtree.event import IGNORED, Event, EventResult
from termtree.geometry import ONE, ZERO, Rect, Vec2

if TYPE_CHECKING:
    from termtree.printer import Printer


class Direction(enum.Enum):
    """Direction from which focus is requested."""

    FORWARD = "forward"
    BACKWARD = "backward"
    NONE = "none"


# ---------------------------------------------------------------------------
# Selectors
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Selector:
    """
    Identifies views inside a tree.

    Only name selectors exist for now; a view matches when it is a
    :class:`~termtree.wrapper.NamedView` carrying that name.

    Example
    -------
    >>> runtime.call_on_name("status", lambda view: view.set_content("ok"))
    """

    view_name: str

    @classmethod
    def name(cls, name: str) -> Selector:
        return cls(view_name=name)

    def matches(self, view: View) -> bool:
        return view.is_named and getattr(view, "name", None) == self.view_name


AnyCallback = Callable[["View"], Any]


# ---------------------------------------------------------------------------
# View
# ---------------------------------------------------------------------------

class View(ABC):
    """
    Base class for tree nodes.

    Subclasses must implement :meth:`draw`.  Composite views also
    override :meth:`children`, :meth:`required_size`, :meth:`layout` and
    :meth:`take_focus` so that focus paths and layout reach their
    children.
    """

    _size: Vec2 = ZERO
    is_named: bool = False

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def required_size(self, constraint: Vec2) -> Vec2:
        """
        Return the size this view needs within *constraint*.

        Must be a pure function of the content and the constraint, never
        larger than *constraint*, and monotonic: a larger constraint never
        yields a smaller answer.
        """
        return ONE.min(constraint)

    def layout(self, size: Vec2) -> None:
        """Receive the size actually granted for the current cycle."""
        self._size = size

    @property
    def size(self) -> Vec2:
        """Size granted by the last :meth:`layout` call."""
        return self._size

    def needs_relayout(self) -> bool:
        """Whether the view changed since its last layout."""
        return True

    def important_area(self, size: Vec2) -> Rect:
        """Region a scrolling parent should keep visible."""
        return Rect(0, 0, size.x, size.y)

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    @abstractmethod
    def draw(self, printer: Printer) -> None:
        """
        Draw the view.

        Coordinates are local; anything beyond the size granted by the
        last :meth:`layout` call is clipped by *printer*.
        """
        ...

    # ------------------------------------------------------------------
    # Input & focus
    # ------------------------------------------------------------------

    def take_focus(self, direction: Direction) -> bool:
        """
        Return whether the view accepts focus coming from *direction*.

        Composite views return ``True`` when any child accepts.
        """
        return False

    def on_event(self, event: Event) -> EventResult:
        """Handle an event; the default ignores everything."""
        return IGNORED

    # ------------------------------------------------------------------
    # Tree traversal
    # ------------------------------------------------------------------

    def children(self) -> Sequence[View]:
        """Children in focus-traversal order; focus paths index this."""
        return ()

    def call_on_any(self, selector: Selector, callback: AnyCallback) -> None:
        """Run *callback* on every view below (and including) this one matching *selector*."""
        if selector.matches(self):
            callback(self)
        for child in self.children():
            child.call_on_any(selector, callback)
