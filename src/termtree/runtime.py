"""
Runtime driver.

The :class:`Runtime` owns the screens, the backend, the callback queue
and the periodic timers, and runs the cooperative loop::

    runtime = Runtime()
    runtime.add_layer(TextView("Hello"))
    runtime.add_global_callback("q", lambda rt: rt.quit())
    runtime.run()

Each :meth:`Runtime.step` polls one event (or a timeout), dispatches it,
runs the callbacks it produced, repairs focus, lays out what changed and
presents the new frame.  Views never change the tree while handling an
event; they return callbacks, and those run here once dispatch is over.
"""

from __future__ import annotations

import itertools
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from termtree.backends import Backend, create_backend
from termtree.config import RuntimeConfig
from termtree.errors import ScreenError
from termtree.event import Callback, Event, Quit, Refresh, Resize
from termtree.geometry import Vec2
from termtree.keybindings import KeybindingsManager
from termtree.layout import LayoutEngine
from termtree.logging import get_logger, setup_logging
from termtree.printer import FrameInfo, Printer
from termtree.renderer import Renderer
from termtree.router import PRE, DispatchOutcome, EventRouter
from termtree.screen import Layer, Screen
from termtree.surface import Surface
from termtree.theme import ThemeInfo, get_default_theme, load_theme
from termtree.view import Selector, View

logger = get_logger("runtime")

Clock = Callable[[], float]


@dataclass
class _Periodic:
    handle: int
    interval: float
    callback: Callback
    due: float


class Runtime:
    """
    Drives a view tree on a backend.

    Parameters
    ----------
    backend:
        Backend to use.  When ``None`` the one named by
        ``config.backend`` is created from the registry.
    config:
        Runtime settings; defaults to :class:`RuntimeConfig` defaults.
    clock:
        Monotonic time source in seconds, injectable for tests.
    theme:
        Palette; defaults to ``config.theme`` or the built-in theme.
    """

    def __init__(
        self,
        backend: Backend | None = None,
        config: RuntimeConfig | None = None,
        clock: Clock = time.monotonic,
        theme: ThemeInfo | None = None,
    ) -> None:
        self.config = config or RuntimeConfig()
        self.backend = backend or create_backend(self.config.backend)
        self.clock = clock
        if theme is None:
            theme = load_theme(self.config.theme) if self.config.theme else get_default_theme()
        self.theme = theme

        keybindings = KeybindingsManager(self.config.keybindings or None)
        self.router = EventRouter(keybindings)
        self.layout_engine = LayoutEngine(strict=self.config.strict_layout)
        self.renderer = Renderer(self.backend)

        self._screens: dict[int, Screen] = {0: Screen(0, self.config.focus_wrap)}
        self._active_screen = 0
        self._screen_ids = itertools.count(1)

        self._pending: deque[Event] = deque()
        self._periodic: dict[int, _Periodic] = {}
        self._periodic_ids = itertools.count(1)

        self._size: Vec2 | None = None
        self._surface = Surface((0, 0))
        self._frame = FrameInfo()
        self._needs_layout = True
        self._running = False
        self.last_outcome: DispatchOutcome | None = None

        if self.config.fps:
            self.add_periodic_callback(self.config.poll_interval, _autorefresh)

    # ------------------------------------------------------------------
    # Screens & layers
    # ------------------------------------------------------------------

    def screen(self) -> Screen:
        """The active screen."""
        return self._screens[self._active_screen]

    @property
    def active_screen_id(self) -> int:
        return self._active_screen

    def screen_ids(self) -> list[int]:
        return sorted(self._screens)

    def add_screen(self) -> int:
        """Create an empty screen and return its id; it is not activated."""
        screen_id = next(self._screen_ids)
        self._screens[screen_id] = Screen(screen_id, self.config.focus_wrap)
        logger.debug("Added screen %d", screen_id)
        return screen_id

    def set_screen(self, screen_id: int) -> None:
        """Make *screen_id* the screen receiving input and drawing."""
        if screen_id not in self._screens:
            raise ScreenError(f"Unknown screen id {screen_id}")
        if screen_id != self._active_screen:
            self._active_screen = screen_id
            self._needs_layout = True
            logger.debug("Switched to screen %d", screen_id)

    def remove_screen(self, screen_id: int) -> None:
        """Delete an inactive screen and its layers."""
        if screen_id not in self._screens:
            raise ScreenError(f"Unknown screen id {screen_id}")
        if screen_id == self._active_screen:
            raise ScreenError(f"Cannot remove the active screen {screen_id}")
        del self._screens[screen_id]
        logger.debug("Removed screen %d", screen_id)

    def add_layer(self, view: View, **options: Any) -> Layer:
        """
        Push *view* as the new top layer of the active screen.

        Keyword options are those of :meth:`Screen.push_layer`
        (``modal``, ``fullscreen``, ``dismiss_on``, ``dismiss_on_any``).
        """
        return self.screen().push_layer(view, **options)

    def add_fullscreen_layer(self, view: View) -> Layer:
        return self.screen().push_layer(view, fullscreen=True)

    def pop_layer(self) -> View | None:
        return self.screen().pop_layer()

    # ------------------------------------------------------------------
    # Global callbacks
    # ------------------------------------------------------------------

    def add_global_callback(
        self,
        event: Event | str,
        callback: Callback,
        phase: str = PRE,
    ) -> Callable[[], None]:
        """
        Run *callback* whenever *event* is dispatched.

        *event* may be a key descriptor such as ``"ctrl+q"``.  Pre-phase
        callbacks take the event before any view; post-phase callbacks
        only get what the views ignored.  Returns an unsubscribe function.
        """
        return self.router.add_global_callback(event, callback, phase)

    def clear_global_callbacks(self, event: Event | str | None = None) -> None:
        self.router.clear_global_callbacks(event)

    def schedule(self, callback: Callback) -> None:
        """Run *callback* during the next callback drain."""
        self.router.schedule(callback)

    # ------------------------------------------------------------------
    # Periodic callbacks
    # ------------------------------------------------------------------

    def add_periodic_callback(self, interval: float, callback: Callback) -> int:
        """
        Run *callback* every *interval* seconds.

        Returns a handle for :meth:`remove_periodic_callback`.
        """
        if interval <= 0:
            raise ValueError(f"Periodic interval must be positive, got {interval!r}")
        handle = next(self._periodic_ids)
        self._periodic[handle] = _Periodic(handle, interval, callback, self.clock() + interval)
        return handle

    def remove_periodic_callback(self, handle: int) -> bool:
        return self._periodic.pop(handle, None) is not None

    def _next_due(self) -> float | None:
        if not self._periodic:
            return None
        return min(p.due for p in self._periodic.values())

    def _fire_due(self) -> int:
        now = self.clock()
        fired = 0
        for periodic in list(self._periodic.values()):
            while periodic.due <= now:
                self.router.schedule(periodic.callback)
                periodic.due += periodic.interval
                fired += 1
        return fired

    def _poll_timeout(self) -> float | None:
        timeout = self.config.poll_timeout
        due = self._next_due()
        if due is not None:
            wait = max(0.0, due - self.clock())
            timeout = wait if timeout is None else min(timeout, wait)
        return timeout

    # ------------------------------------------------------------------
    # Names & focus
    # ------------------------------------------------------------------

    def call_on_name(self, name: str, callback: Callable[[View], Any]) -> Any:
        """
        Run *callback* on the first view named *name* in the active screen.

        Returns the callback's result, or ``None`` if no view has that name.
        """
        results: list[Any] = []

        def visit(view: View) -> None:
            if not results:
                results.append(callback(view))

        self.screen().call_on(Selector.name(name), visit)
        return results[0] if results else None

    def focus_name(self, name: str) -> bool:
        """Focus the view named *name*; returns whether focus moved there."""
        return self.screen().focus_selector(Selector.name(name))

    @property
    def focus_path(self) -> tuple[int, ...]:
        return self.screen().focus_path

    def set_focus_path(self, path: tuple[int, ...]) -> bool:
        return self.screen().focus_view(path)

    # ------------------------------------------------------------------
    # Loop
    # ------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def screen_size(self) -> Vec2 | None:
        return self._size

    @property
    def surface(self) -> Surface:
        """The last frame drawn."""
        return self._surface

    def quit(self) -> None:
        """Queue a :class:`Quit` event; the loop ends once it is dispatched."""
        self._pending.append(Quit())

    def post_event(self, event: Event) -> None:
        """Queue *event* ahead of the backend's input."""
        self._pending.append(event)

    def step(self) -> bool:
        """
        Run one cycle.

        Returns
        -------
        bool
            ``False`` once a :class:`Quit` event has been processed.
        """
        self._ensure_size()

        if self._pending:
            event: Event | None = self._pending.popleft()
        else:
            event = self.backend.poll_event(self._poll_timeout())
        self._fire_due()
        if event is None:
            event = Refresh()

        if isinstance(event, Resize):
            self._resize(event.size)

        self.last_outcome = self.router.dispatch(self.screen(), event, self._frame)
        self.router.drain(self)

        if isinstance(event, Quit):
            logger.debug("Quit event processed")
            self._running = False
            return False

        self.screen().repair_focus()
        self.refresh()
        return True

    def refresh(self) -> None:
        """Lay out if needed, draw the active screen and present it."""
        self._ensure_size()
        screen = self.screen()
        if self._needs_layout or screen.needs_relayout():
            self.layout_engine.layout_screen(screen, self._size)
            self._needs_layout = False

        self._surface.clear()
        printer = Printer.for_surface(self._surface, self.theme)
        self._frame = printer.frame
        screen.draw(printer)
        self.renderer.present(self._surface)

    def run(self) -> None:
        """
        Run until a :class:`Quit` event is processed.

        The backend is always closed on the way out; a
        :class:`~termtree.errors.BackendError` propagates after that.
        """
        if self.config.log_file is not None:
            setup_logging(self.config.log_level, file=self.config.log_file)
        with self.backend:
            self._running = True
            self._size = None
            self.renderer.invalidate()
            logger.debug("Runtime started with %s backend", self.backend.name)
            try:
                self.refresh()
                while self.step():
                    pass
            finally:
                self._running = False
                logger.debug("Runtime stopped")

    def _ensure_size(self) -> None:
        if self._size is None:
            self._resize(self.backend.screen_size())

    def _resize(self, size: Vec2) -> None:
        size = Vec2(*size)
        if size == self._size:
            return
        self._size = size
        self._surface.resize(size)
        self._needs_layout = True
        logger.debug("Screen size is now %s", tuple(size))


def _autorefresh(runtime: Runtime) -> None:
    """Periodic no-op; the timeout itself triggers a redraw."""
