"""
Layer stack.

A :class:`Screen` is an ordered stack of :class:`Layer` objects drawn
bottom to top.  Each layer keeps its own focus path, so pushing a dialog
and popping it again leaves the layer below exactly as it was.

At screen level a focus path starts with the index of the topmost layer
followed by the path inside that layer::

    screen.push_layer(form, fullscreen=True)     # layer 0
    screen.push_layer(dialog)                    # layer 1
    screen.focus_path                            # (1, 0, 2)
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from termtree import focus
from termtree.event import Char, Event, Key, Mouse
from termtree.geometry import Rect
from termtree.logging import get_logger
from termtree.printer import Printer
from termtree.style import Style
from termtree.view import AnyCallback, Direction, Selector, View

logger = get_logger("screen")


@dataclass(eq=False)
class Layer:
    """
    One entry of a screen's stack.

    Attributes
    ----------
    view:
        Root view of the layer; the layer owns it.
    modal:
        Unconsumed events stop here instead of reaching lower layers.
    fullscreen:
        Take the whole terminal instead of floating, centered, at the
        root view's required size.
    dismiss_on:
        Events that pop the layer when the layer does not consume them.
    dismiss_on_any:
        Pop the layer on any unconsumed keyboard or mouse event.
    focus:
        Path of the focused leaf below :attr:`view`, ``()`` when the root
        itself is focused and ``None`` when nothing is.
    focused_view:
        The view :attr:`focus` pointed at when it was last set; used to
        repair the path after the tree changed.
    placement:
        Absolute rectangle assigned by the last layout pass.
    """

    view: View
    modal: bool = True
    fullscreen: bool = False
    dismiss_on: frozenset[Event] = frozenset()
    dismiss_on_any: bool = False
    focus: tuple[int, ...] | None = None
    focused_view: View | None = None
    placement: Rect = Rect(0, 0, 0, 0)

    def should_dismiss(self, event: Event) -> bool:
        if event in self.dismiss_on:
            return True
        return self.dismiss_on_any and isinstance(event, (Char, Key, Mouse))

    def focused_leaf(self) -> View | None:
        if self.focus is None:
            return None
        return focus.resolve(self.view, self.focus)

    def set_focus(self, path: tuple[int, ...] | None) -> None:
        self.focus = path
        self.focused_view = None if path is None else focus.resolve(self.view, path)


class Screen:
    """
    Ordered stack of layers with per-layer focus.

    Parameters
    ----------
    screen_id:
        Identifier assigned by the runtime.
    focus_wrap:
        Whether focus navigation wraps around at either end.
    """

    def __init__(self, screen_id: int = 0, focus_wrap: bool = True) -> None:
        self.screen_id = screen_id
        self.focus_wrap = focus_wrap
        self._layers: list[Layer] = []
        self._dirty = True

    def __repr__(self) -> str:
        return f"Screen(id={self.screen_id}, layers={len(self._layers)})"

    # ------------------------------------------------------------------
    # Stack
    # ------------------------------------------------------------------

    def push_layer(
        self,
        view: View,
        modal: bool = True,
        fullscreen: bool = False,
        dismiss_on: Iterable[Event] = (),
        dismiss_on_any: bool = False,
    ) -> Layer:
        """Push *view* as a new top layer and focus its first focusable leaf."""
        layer = Layer(
            view=view,
            modal=modal,
            fullscreen=fullscreen,
            dismiss_on=frozenset(dismiss_on),
            dismiss_on_any=dismiss_on_any,
        )
        layer.set_focus(focus.next_focus(view, None, Direction.NONE, self.focus_wrap))
        self._layers.append(layer)
        self._dirty = True
        logger.debug("Screen %d: pushed layer %d (%s)", self.screen_id, len(self._layers) - 1, type(view).__name__)
        return layer

    def pop_layer(self) -> View | None:
        """Remove the top layer and return its root view."""
        if not self._layers:
            return None
        layer = self._layers.pop()
        self._dirty = True
        logger.debug("Screen %d: popped layer %d", self.screen_id, len(self._layers))
        return layer.view

    def layers(self) -> tuple[Layer, ...]:
        """Layers from bottom to top."""
        return tuple(self._layers)

    def __len__(self) -> int:
        return len(self._layers)

    @property
    def top(self) -> Layer | None:
        return self._layers[-1] if self._layers else None

    def find_layer_of(self, view: View) -> int | None:
        """Index of the layer containing *view* (by identity)."""
        for index, layer in enumerate(self._layers):
            if focus.path_of(layer.view, view) is not None:
                return index
        return None

    def receivers(self) -> list[Layer]:
        """Layers offered an event, top down, ending at the first modal one."""
        result: list[Layer] = []
        for layer in reversed(self._layers):
            result.append(layer)
            if layer.modal:
                break
        return result

    # ------------------------------------------------------------------
    # Focus
    # ------------------------------------------------------------------

    @property
    def focus_path(self) -> tuple[int, ...]:
        """``(layer, *path)`` of the focused leaf, ``()`` when unfocused."""
        layer = self.top
        if layer is None or layer.focus is None:
            return ()
        return (len(self._layers) - 1,) + layer.focus

    def focused_view(self) -> View | None:
        layer = self.top
        return layer.focused_leaf() if layer is not None else None

    def focus_view(self, path: tuple[int, ...]) -> bool:
        """
        Focus the view at screen-level *path*.

        Only the top layer holds the active focus, so *path* must start
        with its index.  The change happens only if every view along the
        path accepts focus; otherwise nothing changes and ``False`` is
        returned.
        """
        if not path or path[0] != len(self._layers) - 1:
            return False
        layer = self._layers[path[0]]
        inner = tuple(path[1:])
        if not focus.accepts(layer.view, inner):
            logger.debug("Screen %d: refused focus on %s", self.screen_id, path)
            return False
        layer.set_focus(inner)
        return True

    def move_focus(self, direction: Direction) -> bool:
        """Move focus in the top layer; returns whether it changed."""
        layer = self.top
        if layer is None:
            return False
        new = focus.next_focus(layer.view, layer.focus, direction, self.focus_wrap)
        if new == layer.focus:
            return False
        layer.set_focus(new)
        return True

    def focus_selector(self, selector: Selector) -> bool:
        """Focus the first view of the top layer matching *selector*."""
        layer = self.top
        if layer is None:
            return False
        path = focus.find_path(layer.view, selector)
        if path is None:
            return False
        return self.focus_view((len(self._layers) - 1,) + path)

    def call_on(self, selector: Selector, callback: AnyCallback) -> None:
        """Run *callback* on every matching view of every layer."""
        for layer in self._layers:
            layer.view.call_on_any(selector, callback)

    def repair_focus(self) -> None:
        """
        Bring every layer's focus path back in line with its tree.

        A path still pointing at the remembered view is kept.  A view that
        moved is found again by identity.  A view that disappeared is
        replaced by the nearest focusable leaf, or focus is dropped.
        """
        for layer in self._layers:
            self._repair_layer(layer)

    def _repair_layer(self, layer: Layer) -> None:
        old = layer.focus
        if old is None:
            return
        target = layer.focused_view
        if focus.resolve(layer.view, old) is target and focus.accepts(layer.view, old):
            return
        moved = focus.path_of(layer.view, target) if target is not None else None
        if moved is not None and focus.accepts(layer.view, moved):
            layer.set_focus(moved)
        else:
            layer.set_focus(focus.nearest_focus(layer.view, old))
        logger.debug("Screen %d: focus repaired %s -> %s", self.screen_id, old, layer.focus)

    # ------------------------------------------------------------------
    # Layout & drawing
    # ------------------------------------------------------------------

    def needs_relayout(self) -> bool:
        if self._dirty:
            return True
        return any(layer.view.needs_relayout() for layer in self._layers)

    def mark_laid_out(self) -> None:
        self._dirty = False

    def draw(self, printer: Printer) -> None:
        """Draw every layer, bottom to top; only the top layer shows focus."""
        theme = printer.theme
        printer.with_style(Style(bg="background")).clear()
        last = len(self._layers) - 1
        for index, layer in enumerate(self._layers):
            if not layer.fullscreen and theme.shadow:
                self._draw_shadow(printer, layer.placement)
            window = printer.windowed(layer.placement).with_style(theme.base_style())
            window.clear()
            window = window.focus(layer.focus if index == last else None)
            layer.view.draw(window)

    @staticmethod
    def _draw_shadow(printer: Printer, rect: Rect) -> None:
        if rect.is_empty():
            return
        shade = printer.with_style(Style(bg="shadow"))
        shade.fill(Rect(rect.right, rect.y + 1, 1, rect.height))
        shade.fill(Rect(rect.x + 1, rect.bottom, rect.width, 1))
