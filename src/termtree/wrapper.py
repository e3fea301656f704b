"""
Views that wrap a single inner view.

A :class:`ViewWrapper` forwards every :class:`~termtree.view.View` method
to its inner view through ``wrap_*`` hooks; override a hook to change one
behaviour and inherit the rest.  Wrappers are transparent to focus
paths: :meth:`ViewWrapper.children` returns the inner view's children, so
a path indexes straight through the wrapper, and a wrapper around a leaf
is itself the leaf that receives events.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from termtree.event import Event, EventResult
from termtree.geometry import Rect, Vec2
from termtree.view import AnyCallback, Direction, Selector, View

if TYPE_CHECKING:
    from termtree.printer import Printer


class ViewWrapper(View):
    """
    Generic wrapper around a view.

    Parameters
    ----------
    view:
        The wrapped view; the wrapper owns it.
    """

    def __init__(self, view: View) -> None:
        self._view = view

    def get_inner(self) -> View:
        """Return the wrapped view."""
        return self._view

    def set_inner(self, view: View) -> None:
        """Replace the wrapped view."""
        self._view = view

    # ------------------------------------------------------------------
    # Overridable hooks
    # ------------------------------------------------------------------

    def wrap_draw(self, printer: Printer) -> None:
        self._view.draw(printer)

    def wrap_required_size(self, constraint: Vec2) -> Vec2:
        return self._view.required_size(constraint)

    def wrap_layout(self, size: Vec2) -> None:
        self._view.layout(size)

    def wrap_take_focus(self, direction: Direction) -> bool:
        return self._view.take_focus(direction)

    def wrap_on_event(self, event: Event) -> EventResult:
        return self._view.on_event(event)

    def wrap_important_area(self, size: Vec2) -> Rect:
        return self._view.important_area(size)

    def wrap_needs_relayout(self) -> bool:
        return self._view.needs_relayout()

    def wrap_call_on_any(self, selector: Selector, callback: AnyCallback) -> None:
        self._view.call_on_any(selector, callback)

    # ------------------------------------------------------------------
    # View implementation
    # ------------------------------------------------------------------

    def draw(self, printer: Printer) -> None:
        self.wrap_draw(printer)

    def required_size(self, constraint: Vec2) -> Vec2:
        return self.wrap_required_size(constraint)

    def layout(self, size: Vec2) -> None:
        self._size = size
        self.wrap_layout(size)

    def take_focus(self, direction: Direction) -> bool:
        return self.wrap_take_focus(direction)

    def on_event(self, event: Event) -> EventResult:
        return self.wrap_on_event(event)

    def important_area(self, size: Vec2) -> Rect:
        return self.wrap_important_area(size)

    def needs_relayout(self) -> bool:
        return self.wrap_needs_relayout()

    def children(self) -> Sequence[View]:
        return self._view.children()

    def call_on_any(self, selector: Selector, callback: AnyCallback) -> None:
        if selector.matches(self):
            callback(self)
        self.wrap_call_on_any(selector, callback)


class NamedView(ViewWrapper):
    """
    Wrapper giving its inner view a name.

    Name lookups (``Runtime.call_on_name``, ``Runtime.focus_name``) hand
    the *inner* view to the callback.
    """

    is_named = True

    def __init__(self, name: str, view: View) -> None:
        super().__init__(view)
        self.name = name

    def call_on_any(self, selector: Selector, callback: AnyCallback) -> None:
        if selector.matches(self):
            callback(self._view)
        self._view.call_on_any(selector, callback)

    def __repr__(self) -> str:
        return f"NamedView({self.name!r}, {self._view!r})"


def named(name: str, view: View) -> NamedView:
    """Shortcut for ``NamedView(name, view)``."""
    return NamedView(name, view)
