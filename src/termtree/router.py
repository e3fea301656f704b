"""
Event routing.

The :class:`EventRouter` decides who gets an event and in which order:

1. pre-tree global handlers registered for the event;
2. the focused leaf of the top layer, then of lower layers until the
   first modal one;
3. the top layer's dismiss policy;
4. post-tree global handlers;
5. default actions from the keybindings (focus navigation, quit).

Nothing bubbles to ancestors.  Work that must change the tree is never
done during dispatch: handlers and views hand back callbacks, which are
queued here and run by the runtime through :meth:`EventRouter.drain`.

Example::

    router = EventRouter()
    unsubscribe = router.add_global_callback(Char("q"), lambda rt: rt.quit())
    outcome = router.dispatch(screen, Char("q"))
    router.drain(runtime)
"""

from __future__ import annotations

import enum
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from termtree.event import Callback, Event, EventResult, Mouse
from termtree.geometry import Vec2
from termtree.keybindings import FOCUS_NEXT, FOCUS_PREVIOUS, QUIT, KeybindingsManager, parse_descriptor
from termtree.logging import get_logger
from termtree.printer import FrameInfo
from termtree.view import Direction

if TYPE_CHECKING:
    from termtree.runtime import Runtime
    from termtree.screen import Layer, Screen

logger = get_logger("router")

PRE = "pre"
POST = "post"


class DispatchOutcome(enum.Enum):
    """What happened to a dispatched event."""

    CONSUMED = "consumed"
    """A view in the tree consumed it."""

    HANDLED = "handled"
    """A global handler, the dismiss policy or a default action took it."""

    DROPPED = "dropped"
    """Nobody wanted it; no state changed."""


@dataclass
class _HandlerEntry:
    event: Event
    callback: Callback
    phase: str


class EventRouter:
    """
    Routes events through global handlers and the focused views.

    Parameters
    ----------
    keybindings:
        Source of the default actions.  Defaults to the built-in map.
    """

    def __init__(self, keybindings: KeybindingsManager | None = None) -> None:
        self.keybindings = keybindings or KeybindingsManager()
        self._handlers: list[_HandlerEntry] = []
        self._queue: deque[Callback] = deque()

    # ------------------------------------------------------------------
    # Global handlers
    # ------------------------------------------------------------------

    def add_global_callback(
        self,
        event: Event | str,
        callback: Callback,
        phase: str = PRE,
    ) -> Callable[[], None]:
        """
        Register *callback* for every dispatch of *event*.

        Parameters
        ----------
        event:
            An event value, or a key descriptor such as ``"ctrl+q"``.
        callback:
            Called with the runtime once dispatch has completed.
        phase:
            ``"pre"`` runs before the view tree sees the event and stops
            it there; ``"post"`` runs only if the tree ignored it.

        Returns
        -------
        A function removing this registration.
        """
        if phase not in (PRE, POST):
            raise ValueError(f"Unknown handler phase: {phase!r}")
        if isinstance(event, str):
            event = parse_descriptor(event)
        entry = _HandlerEntry(event=event, callback=callback, phase=phase)
        self._handlers.append(entry)

        def unsubscribe() -> None:
            try:
                self._handlers.remove(entry)
            except ValueError:
                pass

        return unsubscribe

    def clear_global_callbacks(self, event: Event | str | None = None) -> None:
        """Remove the handlers for *event*, or every handler."""
        if event is None:
            self._handlers.clear()
            return
        if isinstance(event, str):
            event = parse_descriptor(event)
        self._handlers = [h for h in self._handlers if h.event != event]

    def has_handlers(self, event: Event, phase: str = PRE) -> bool:
        return any(h.event == event and h.phase == phase for h in self._handlers)

    def _run_handlers(self, event: Event, phase: str) -> bool:
        found = False
        for entry in self._handlers:
            if entry.phase == phase and entry.event == event:
                self._queue.append(entry.callback)
                found = True
        return found

    # ------------------------------------------------------------------
    # Callback queue
    # ------------------------------------------------------------------

    def schedule(self, callback: Callback) -> None:
        """Queue *callback* to run after the current dispatch."""
        self._queue.append(callback)

    @property
    def pending(self) -> int:
        return len(self._queue)

    def drain(self, runtime: Runtime) -> int:
        """
        Run queued callbacks in order, including any they queue.

        Returns the number of callbacks run.
        """
        count = 0
        while self._queue:
            callback = self._queue.popleft()
            callback(runtime)
            count += 1
        return count

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def dispatch(
        self,
        screen: Screen,
        event: Event,
        frame: FrameInfo | None = None,
    ) -> DispatchOutcome:
        """
        Route *event* and return what happened to it.

        Parameters
        ----------
        screen:
            Active screen.
        event:
            The event to deliver.
        frame:
            Record of the last draw pass, used to give mouse events the
            origin of the focused view.
        """
        if self._run_handlers(event, PRE):
            logger.debug("%r handled by pre-tree handler", event)
            return DispatchOutcome.HANDLED

        if self._offer_tree(screen, event, frame):
            logger.debug("%r consumed by view tree", event)
            return DispatchOutcome.CONSUMED

        top = screen.top
        if top is not None and top.should_dismiss(event):
            self._queue.append(lambda runtime: _dismiss(screen, top))
            logger.debug("%r dismisses top layer", event)
            return DispatchOutcome.HANDLED

        if self._run_handlers(event, POST):
            logger.debug("%r handled by post-tree handler", event)
            return DispatchOutcome.HANDLED

        if self._default_action(screen, event):
            return DispatchOutcome.HANDLED

        logger.debug("%r dropped", event)
        return DispatchOutcome.DROPPED

    def _offer_tree(self, screen: Screen, event: Event, frame: FrameInfo | None) -> bool:
        receivers = screen.receivers()
        for depth, layer in enumerate(receivers):
            leaf = layer.focused_leaf()
            if leaf is None:
                continue
            delivered = event
            if isinstance(event, Mouse):
                delivered = event.with_offset(self._mouse_origin(layer, depth == 0, frame))
            result: EventResult = leaf.on_event(delivered)
            if result.is_consumed:
                if result.callback is not None:
                    self._queue.append(result.callback)
                return True
        return False

    @staticmethod
    def _mouse_origin(layer: Layer, is_top: bool, frame: FrameInfo | None) -> Vec2:
        if is_top and frame is not None and frame.focus_rect is not None:
            return frame.focus_rect.top_left
        return layer.placement.top_left

    def _default_action(self, screen: Screen, event: Event) -> bool:
        action = self.keybindings.find_action(event)
        if action == FOCUS_NEXT:
            return screen.move_focus(Direction.FORWARD)
        if action == FOCUS_PREVIOUS:
            return screen.move_focus(Direction.BACKWARD)
        if action == QUIT:
            self._queue.append(lambda runtime: runtime.quit())
            return True
        return False


def _dismiss(screen: Screen, layer: Layer) -> None:
    # Another callback may already have popped it
    if screen.top is layer:
        screen.pop_layer()
