"""
Raw POSIX terminal backend.

Puts the controlling terminal into raw mode with :mod:`termios`/:mod:`tty`,
switches to the alternate screen and enables SGR mouse reporting.  Input
bytes are decoded by a :class:`termtree.keys.InputDecoder`, so a sequence
split across reads still arrives as one key.  A change of the terminal size
is noticed on every poll and reported as :class:`Resize`.

Output is buffered between :meth:`AnsiBackend.flush` calls and wrapped in
synchronized-update markers so a frame never appears half drawn.  SGR
codes are produced by :mod:`rich` for the color system the terminal
supports.
"""

from __future__ import annotations

import os
import select
import shutil
import sys
import termios
import time
import tty
from collections import deque
from io import StringIO
from typing import Any, TextIO

from rich.color import ColorSystem
from rich.console import Console

from termtree.backends.base import Backend
from termtree.backends.sequences import (
    ALT_SCREEN_OFF,
    ALT_SCREEN_ON,
    MOUSE_OFF,
    MOUSE_ON,
    RESET,
    SYNC_END,
    SYNC_START,
    clear_screen,
    cursor_position,
    hide_cursor,
    show_cursor,
)
from termtree.errors import BackendError
from termtree.event import Event, Resize
from termtree.geometry import Vec2
from termtree.keys import InputDecoder
from termtree.logging import get_logger
from termtree.style import Style

logger = get_logger("backends.ansi")

_COLOR_SYSTEMS: dict[str, ColorSystem] = {
    "standard": ColorSystem.STANDARD,
    "256": ColorSystem.EIGHT_BIT,
    "truecolor": ColorSystem.TRUECOLOR,
    "windows": ColorSystem.WINDOWS,
}

# Longest single wait, so size changes are noticed while blocking
_RESIZE_CHECK_INTERVAL = 0.1

# How long a lone ESC waits for the rest of a sequence before it counts as
# the Escape key
ESCAPE_DELAY = 0.05


def detect_color_system(output: TextIO) -> ColorSystem | None:
    """Ask rich which color system *output* supports."""
    name = Console(file=output, force_terminal=True).color_system
    return _COLOR_SYSTEMS.get(name) if name else None


class AnsiBackend(Backend):
    """
    Backend for VT100-compatible terminals on POSIX systems.

    Parameters
    ----------
    input_fd:
        File descriptor to read keys from; defaults to stdin.
    output:
        Text stream to write to; defaults to ``sys.stdout``.
    mouse:
        Enable mouse reporting.
    color_system:
        Force a color system name (``"standard"``, ``"256"``,
        ``"truecolor"``) instead of detecting it.
    """

    name = "ansi"

    def __init__(
        self,
        input_fd: int | None = None,
        output: TextIO | None = None,
        mouse: bool = True,
        color_system: str | None = None,
    ) -> None:
        super().__init__()
        self._input_fd = input_fd
        self._output: TextIO = output or sys.stdout
        self.mouse = mouse
        if color_system is not None:
            self.color_system: ColorSystem | None = _COLOR_SYSTEMS[color_system]
        else:
            self.color_system = detect_color_system(self._output)
        self._buffer = StringIO()
        self._pending: deque[Event] = deque()
        self._decoder = InputDecoder()
        self._held_since: float | None = None
        self._saved_attrs: list[Any] | None = None
        self._size: Vec2 | None = None

    @property
    def input_fd(self) -> int:
        return self._input_fd if self._input_fd is not None else sys.stdin.fileno()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def init(self) -> None:
        fd = self.input_fd
        try:
            if os.isatty(fd):
                self._saved_attrs = termios.tcgetattr(fd)
                tty.setraw(fd)
        except (OSError, termios.error) as exc:
            raise BackendError(f"Cannot switch terminal to raw mode: {exc}") from exc

        try:
            self._write(ALT_SCREEN_ON + hide_cursor() + clear_screen())
            if self.mouse:
                self._write(MOUSE_ON)
            self._flush_raw()
            self._size = self._query_size()
        except BaseException:
            # Not active yet, so close() would leave the terminal raw
            self._restore_terminal()
            raise
        self._decoder.reset()
        self._held_since = None
        super().init()
        logger.debug("ANSI backend initialised at %s (colors=%s)", tuple(self._size), self.color_system)

    def close(self) -> None:
        if not self.active:
            return
        super().close()
        try:
            self._buffer = StringIO()
            if self.mouse:
                self._write(MOUSE_OFF)
            self._write(RESET + show_cursor() + ALT_SCREEN_OFF)
            self._flush_raw()
        finally:
            self._restore_terminal()
        logger.debug("ANSI backend closed")

    def _restore_terminal(self) -> None:
        if self._saved_attrs is not None:
            termios.tcsetattr(self.input_fd, termios.TCSADRAIN, self._saved_attrs)
            self._saved_attrs = None

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def poll_event(self, timeout: float | None) -> Event | None:
        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            if self._pending:
                return self._pending.popleft()
            resized = self._check_resize()
            if resized is not None:
                return resized

            now = time.monotonic()
            wait = _RESIZE_CHECK_INTERVAL
            if self._held_since is not None:
                held_for = self._held_since + ESCAPE_DELAY - now
                if held_for <= 0:
                    self._pending.extend(self._decoder.flush())
                    self._held_since = None
                    continue
                wait = min(wait, held_for)
            if deadline is not None:
                wait = min(wait, deadline - now)
                if wait <= 0:
                    return None
            if self._read_ready(wait):
                self._pending.extend(self._decoder.feed(self._read()))
                self._held_since = time.monotonic() if self._decoder.pending else None

    def _read_ready(self, wait: float) -> bool:
        try:
            ready, _, _ = select.select([self.input_fd], [], [], wait)
        except InterruptedError:
            return False
        except (OSError, ValueError) as exc:
            raise BackendError(f"Cannot wait for terminal input: {exc}") from exc
        return bool(ready)

    def _read(self) -> bytes:
        try:
            data = os.read(self.input_fd, 4096)
        except OSError as exc:
            raise BackendError(f"Cannot read terminal input: {exc}") from exc
        if not data:
            raise BackendError("Terminal input closed")
        return data

    def _check_resize(self) -> Resize | None:
        size = self._query_size()
        if size == self._size:
            return None
        self._size = size
        logger.debug("Terminal resized to %s", tuple(size))
        return Resize(size)

    def _query_size(self) -> Vec2:
        try:
            columns, lines = os.get_terminal_size(self._output.fileno())
        except (OSError, ValueError, AttributeError):
            columns, lines = shutil.get_terminal_size()
        return Vec2(columns, lines)

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def screen_size(self) -> Vec2:
        if self._size is None:
            self._size = self._query_size()
        return self._size

    def print_at(self, pos: tuple[int, int], text: str, style: Style) -> None:
        x, y = pos
        self._buffer.write(cursor_position(y + 1, x + 1))
        rich_style = style.to_rich()
        if self.color_system is None or not rich_style:
            self._buffer.write(text)
        else:
            self._buffer.write(rich_style.render(text, color_system=self.color_system))

    def clear(self, style: Style) -> None:
        # Every cell is repainted after a clear, so its style is not needed.
        self._buffer.write(RESET + clear_screen())

    def flush(self) -> None:
        data = self._buffer.getvalue()
        self._buffer = StringIO()
        if not data:
            return
        self._write(SYNC_START + data + SYNC_END)
        self._flush_raw()

    def _write(self, data: str) -> None:
        try:
            self._output.write(data)
        except OSError as exc:
            raise BackendError(f"Cannot write to terminal: {exc}") from exc

    def _flush_raw(self) -> None:
        try:
            self._output.flush()
        except OSError as exc:
            raise BackendError(f"Cannot flush terminal output: {exc}") from exc
