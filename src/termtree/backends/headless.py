"""
In-memory backend.

Keeps a fixed-size :class:`~termtree.surface.Surface` in place of a
terminal and replays a scripted queue of events.  Tests drive the
runtime through it; non-interactive runs (``termtree demo --backend
headless``) use it to render a single frame.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Callable, Iterable

from termtree.backends.base import Backend
from termtree.event import Event, Quit, Resize
from termtree.geometry import Vec2
from termtree.logging import get_logger
from termtree.style import Style
from termtree.surface import Surface, char_width

logger = get_logger("backends.headless")

IdleHook = Callable[[float], None]


class HeadlessBackend(Backend):
    """
    Scripted, size-fixed backend.

    Parameters
    ----------
    size:
        Simulated terminal size.
    events:
        Events returned by :meth:`poll_event`, in order.
    idle:
        Called with the timeout whenever a timed poll finds the script
        empty.  Tests pass a fake clock's ``advance`` here so time moves
        while the runtime "waits".
    quit_when_exhausted:
        Return :class:`Quit` from a blocking poll once the script is
        empty, instead of waiting forever.
    """

    name = "headless"

    def __init__(
        self,
        size: tuple[int, int] = (80, 24),
        events: Iterable[Event] = (),
        idle: IdleHook | None = None,
        quit_when_exhausted: bool = True,
    ) -> None:
        super().__init__()
        self._size = Vec2(*size)
        self._events: deque[Event] = deque(events)
        self.idle = idle
        self.quit_when_exhausted = quit_when_exhausted
        self.surface = Surface(self._size)
        self.flush_count = 0
        self.polls = 0

    # ------------------------------------------------------------------
    # Scripting
    # ------------------------------------------------------------------

    def push_event(self, *events: Event) -> None:
        """Append events to the script."""
        self._events.extend(events)

    @property
    def pending(self) -> int:
        return len(self._events)

    def resize(self, size: tuple[int, int]) -> None:
        """Change the simulated size and queue the matching :class:`Resize`."""
        self._size = Vec2(*size)
        self.surface.resize(self._size)
        self._events.append(Resize(self._size))

    def text_lines(self) -> list[str]:
        """What a user would currently see, one string per row."""
        return self.surface.text_lines()

    # ------------------------------------------------------------------
    # Backend contract
    # ------------------------------------------------------------------

    def poll_event(self, timeout: float | None) -> Event | None:
        self.polls += 1
        if self._events:
            return self._events.popleft()
        if timeout is None:
            if self.quit_when_exhausted:
                logger.debug("Script exhausted; returning Quit")
                return Quit()
            raise RuntimeError("Blocking poll on an empty headless script")
        if self.idle is not None:
            self.idle(timeout)
        return None

    def screen_size(self) -> Vec2:
        return self._size

    def print_at(self, pos: tuple[int, int], text: str, style: Style) -> None:
        x, y = pos
        for char in text:
            width = char_width(char)
            if width == 0:
                continue
            self.surface.put(x, y, char, style)
            x += width

    def clear(self, style: Style) -> None:
        self.surface.clear(style)

    def flush(self) -> None:
        self.flush_count += 1
