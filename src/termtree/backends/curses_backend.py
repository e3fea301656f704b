"""
Backend built on the standard :mod:`curses` library.

Curses key codes are mapped to semantic events, ``KEY_RESIZE`` becomes
:class:`Resize` and ``KEY_MOUSE`` becomes :class:`Mouse`.  Colors are
downgraded by :mod:`rich` to what the terminal offers, and a color pair
is allocated the first time a (foreground, background) combination is
drawn.
"""

from __future__ import annotations

import curses
from typing import Any

from rich.color import Color, ColorParseError, ColorSystem

from termtree.backends.base import Backend
from termtree.errors import BackendError
from termtree.event import (
    FUNCTION_KEYS,
    KEY_BACKSPACE,
    KEY_BACKTAB,
    KEY_DELETE,
    KEY_DOWN,
    KEY_END,
    KEY_ENTER,
    KEY_ESCAPE,
    KEY_HOME,
    KEY_INSERT,
    KEY_LEFT,
    KEY_PAGE_DOWN,
    KEY_PAGE_UP,
    KEY_RIGHT,
    KEY_TAB,
    KEY_UP,
    Char,
    Event,
    Key,
    Mouse,
    MouseAction,
    MouseButton,
    Resize,
)
from termtree.geometry import Vec2
from termtree.logging import get_logger
from termtree.style import Effect, Style

logger = get_logger("backends.curses")

_KEY_CODES: dict[int, Key] = {
    curses.KEY_UP: KEY_UP,
    curses.KEY_DOWN: KEY_DOWN,
    curses.KEY_LEFT: KEY_LEFT,
    curses.KEY_RIGHT: KEY_RIGHT,
    curses.KEY_HOME: KEY_HOME,
    curses.KEY_END: KEY_END,
    curses.KEY_PPAGE: KEY_PAGE_UP,
    curses.KEY_NPAGE: KEY_PAGE_DOWN,
    curses.KEY_IC: KEY_INSERT,
    curses.KEY_DC: KEY_DELETE,
    curses.KEY_BACKSPACE: KEY_BACKSPACE,
    curses.KEY_ENTER: KEY_ENTER,
    curses.KEY_BTAB: KEY_BACKTAB,
}
_KEY_CODES.update({curses.KEY_F0 + n: FUNCTION_KEYS[n - 1] for n in range(1, 13)})

_CHAR_KEYS: dict[str, Key] = {
    "\n": KEY_ENTER,
    "\r": KEY_ENTER,
    "\t": KEY_TAB,
    "\x1b": KEY_ESCAPE,
    "\x7f": KEY_BACKSPACE,
    "\x08": KEY_BACKSPACE,
}

_ATTRIBUTES: dict[Effect, int] = {
    Effect.BOLD: curses.A_BOLD,
    Effect.DIM: curses.A_DIM,
    Effect.UNDERLINE: curses.A_UNDERLINE,
    Effect.BLINK: curses.A_BLINK,
    Effect.REVERSE: curses.A_REVERSE,
    Effect.ITALIC: getattr(curses, "A_ITALIC", curses.A_NORMAL),
}


def translate_key(code: int | str) -> Event | None:
    """
    Translate one ``get_wch`` result into an event.

    Returns ``None`` for codes with no semantic meaning.
    """
    if isinstance(code, str):
        if code in _CHAR_KEYS:
            return _CHAR_KEYS[code]
        value = ord(code)
        if 1 <= value <= 26:
            return Char(chr(value + 96), ctrl=True)
        return Char(code)
    return _KEY_CODES.get(code)


def translate_mouse(state: tuple[int, int, int, int, int]) -> Mouse | None:
    """Translate a ``curses.getmouse()`` tuple into a :class:`Mouse` event."""
    _, x, y, _, bstate = state
    position = Vec2(x, y)
    checks = (
        (curses.BUTTON1_PRESSED, MouseButton.LEFT, MouseAction.PRESS),
        (curses.BUTTON1_RELEASED, MouseButton.LEFT, MouseAction.RELEASE),
        (curses.BUTTON2_PRESSED, MouseButton.MIDDLE, MouseAction.PRESS),
        (curses.BUTTON2_RELEASED, MouseButton.MIDDLE, MouseAction.RELEASE),
        (curses.BUTTON3_PRESSED, MouseButton.RIGHT, MouseAction.PRESS),
        (curses.BUTTON3_RELEASED, MouseButton.RIGHT, MouseAction.RELEASE),
        (curses.BUTTON4_PRESSED, MouseButton.WHEEL_UP, MouseAction.PRESS),
        (getattr(curses, "BUTTON5_PRESSED", 0), MouseButton.WHEEL_DOWN, MouseAction.PRESS),
        (curses.REPORT_MOUSE_POSITION, MouseButton.NONE, MouseAction.DRAG),
    )
    for mask, button, action in checks:
        if mask and bstate & mask:
            return Mouse(position, button, action)
    return None


class CursesBackend(Backend):
    """
    Backend driving the terminal through :mod:`curses`.

    Parameters
    ----------
    mouse:
        Enable mouse reporting.
    """

    name = "curses"

    def __init__(self, mouse: bool = True) -> None:
        super().__init__()
        self.mouse = mouse
        self._window: Any = None
        self._pairs: dict[tuple[int, int], int] = {}
        self._color_system = ColorSystem.STANDARD

    @property
    def window(self) -> Any:
        if self._window is None:
            raise BackendError("Curses backend used before init()")
        return self._window

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def init(self) -> None:
        try:
            self._window = curses.initscr()
            curses.noecho()
            curses.raw()
            self._window.keypad(True)
            try:
                curses.curs_set(0)
            except curses.error:
                pass
            if curses.has_colors():
                curses.start_color()
                curses.use_default_colors()
                if curses.COLORS >= 256:
                    self._color_system = ColorSystem.EIGHT_BIT
            if self.mouse:
                curses.mousemask(curses.ALL_MOUSE_EVENTS | curses.REPORT_MOUSE_POSITION)
                curses.mouseinterval(0)
        except curses.error as exc:
            self._restore()
            raise BackendError(f"Cannot initialise curses: {exc}") from exc
        super().init()
        logger.debug("Curses backend initialised (%d colors)", getattr(curses, "COLORS", 0))

    def close(self) -> None:
        if not self.active:
            return
        super().close()
        self._restore()
        logger.debug("Curses backend closed")

    def _restore(self) -> None:
        if self._window is None:
            return
        try:
            self._window.keypad(False)
            curses.noraw()
            curses.echo()
            curses.endwin()
        except curses.error as exc:
            logger.debug("Error while restoring terminal: %s", exc)
        self._window = None
        self._pairs.clear()

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def poll_event(self, timeout: float | None) -> Event | None:
        window = self.window
        window.timeout(-1 if timeout is None else max(0, int(timeout * 1000)))
        while True:
            try:
                code = window.get_wch()
            except curses.error:
                # Timeout expired
                return None
            except KeyboardInterrupt:
                return Char("c", ctrl=True)

            if code == curses.KEY_RESIZE:
                curses.update_lines_cols()
                return Resize(self.screen_size())
            if code == curses.KEY_MOUSE:
                try:
                    event = translate_mouse(curses.getmouse())
                except curses.error:
                    event = None
            else:
                event = translate_key(code)
            if event is not None:
                return event
            logger.debug("Ignoring curses key code %r", code)

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def screen_size(self) -> Vec2:
        rows, cols = self.window.getmaxyx()
        return Vec2(cols, rows)

    def print_at(self, pos: tuple[int, int], text: str, style: Style) -> None:
        x, y = pos
        try:
            self.window.addstr(y, x, text, self._attr(style))
        except curses.error:
            # Writing the bottom-right cell moves the cursor off screen
            pass

    def clear(self, style: Style) -> None:
        self.window.bkgdset(" ", self._attr(style))
        self.window.erase()

    def flush(self) -> None:
        self.window.noutrefresh()
        curses.doupdate()

    # ------------------------------------------------------------------
    # Colors
    # ------------------------------------------------------------------

    def _attr(self, style: Style) -> int:
        attr = curses.A_NORMAL
        for effect, flag in _ATTRIBUTES.items():
            if effect in style.effects:
                attr |= flag
        if curses.has_colors():
            attr |= curses.color_pair(self._pair(self._color(style.fg), self._color(style.bg)))
        return attr

    def _color(self, value: str | None) -> int:
        if value is None or value == "default":
            return -1
        try:
            color = Color.parse(value).downgrade(self._color_system)
        except ColorParseError:
            return -1
        number = color.number
        if number is None:
            return -1
        # Bright variants fold onto the base eight on small palettes
        return number if number < curses.COLORS else number % 8

    def _pair(self, fg: int, bg: int) -> int:
        if fg == -1 and bg == -1:
            return 0
        key = (fg, bg)
        pair = self._pairs.get(key)
        if pair is None:
            pair = len(self._pairs) + 1
            if pair >= curses.COLOR_PAIRS:
                logger.debug("Out of color pairs; using default for %s", key)
                return 0
            curses.init_pair(pair, fg, bg)
            self._pairs[key] = pair
        return pair
