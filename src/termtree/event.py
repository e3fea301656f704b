"""
Semantic input events and event results.

Backends translate whatever their terminal library reports into this
closed set of values; views and global handlers never see raw codes.
Every event is a frozen, hashable dataclass so it can key a handler
table::

    runtime.add_global_callback(Char("q"), lambda rt: rt.quit())
    runtime.add_global_callback(KEY_F1, show_help)
"""

from __future__ import annotations

import enum
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Union

from termtree.geometry import Vec2

if TYPE_CHECKING:
    from termtree.runtime import Runtime

Callback = Callable[["Runtime"], None]
"""Deferred work run by the runtime once dispatch has completed."""


# ---------------------------------------------------------------------------
# Keyboard
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Char:
    """
    A printable character, possibly with modifiers.

    ``Ctrl+C`` is ``Char("c", ctrl=True)``.
    """

    char: str
    ctrl: bool = False
    alt: bool = False


@dataclass(frozen=True)
class Key:
    """
    A named, non-printable key.

    Attributes
    ----------
    name:
        Symbolic name (``"enter"``, ``"up"``, ``"f5"``...).
    ctrl, alt, shift:
        Modifier flags.  Back-tab is ``Key("tab", shift=True)``.
    """

    name: str
    ctrl: bool = False
    alt: bool = False
    shift: bool = False


KEY_ENTER = Key("enter")
KEY_TAB = Key("tab")
KEY_BACKTAB = Key("tab", shift=True)
KEY_ESCAPE = Key("escape")
KEY_BACKSPACE = Key("backspace")
KEY_DELETE = Key("delete")
KEY_INSERT = Key("insert")

KEY_UP = Key("up")
KEY_DOWN = Key("down")
KEY_LEFT = Key("left")
KEY_RIGHT = Key("right")

KEY_HOME = Key("home")
KEY_END = Key("end")
KEY_PAGE_UP = Key("page_up")
KEY_PAGE_DOWN = Key("page_down")

FUNCTION_KEYS: tuple[Key, ...] = tuple(Key(f"f{n}") for n in range(1, 13))

NAMED_KEYS: frozenset[str] = frozenset(
    {
        "enter", "tab", "escape", "backspace", "delete", "insert",
        "up", "down", "left", "right", "home", "end", "page_up", "page_down",
    }
    | {key.name for key in FUNCTION_KEYS}
)


# ---------------------------------------------------------------------------
# Mouse
# ---------------------------------------------------------------------------

class MouseButton(enum.Enum):
    LEFT = "left"
    MIDDLE = "middle"
    RIGHT = "right"
    WHEEL_UP = "wheel_up"
    WHEEL_DOWN = "wheel_down"
    NONE = "none"


class MouseAction(enum.Enum):
    PRESS = "press"
    RELEASE = "release"
    DRAG = "drag"


@dataclass(frozen=True)
class Mouse:
    """
    A mouse report.

    Attributes
    ----------
    position:
        Absolute cell position on the screen.
    button:
        Button involved, :attr:`MouseButton.NONE` for plain motion.
    action:
        Press, release or drag.
    offset:
        Absolute origin of the view receiving the event.  The router fills
        this in before delivery.
    """

    position: Vec2
    button: MouseButton = MouseButton.LEFT
    action: MouseAction = MouseAction.PRESS
    offset: Vec2 = field(default=Vec2(0, 0), compare=False)

    def relative_position(self) -> Vec2:
        """Position relative to the receiving view's origin."""
        return self.position - self.offset

    def with_offset(self, offset: Vec2) -> Mouse:
        return replace(self, offset=offset)


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Resize:
    """The terminal now has *size* cells."""

    size: Vec2


@dataclass(frozen=True)
class Refresh:
    """Periodic refresh notification sent when a timeout expires."""


@dataclass(frozen=True)
class Quit:
    """Sentinel ending the runtime loop."""


Event = Union[Char, Key, Mouse, Resize, Refresh, Quit]


# ---------------------------------------------------------------------------
# EventResult
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class EventResult:
    """
    Outcome of offering an event to a view.

    Use the :meth:`ignored` and :meth:`consumed` constructors rather than
    building instances directly.
    """

    is_consumed: bool
    callback: Callback | None = None

    @classmethod
    def ignored(cls) -> EventResult:
        return IGNORED

    @classmethod
    def consumed(cls, callback: Callback | None = None) -> EventResult:
        if callback is None:
            return CONSUMED
        return cls(True, callback)

    @classmethod
    def with_callback(cls, callback: Callback) -> EventResult:
        """Shorthand for ``consumed(callback)``."""
        return cls(True, callback)

    @property
    def is_ignored(self) -> bool:
        return not self.is_consumed

    def process(self, runtime: Runtime) -> None:
        """Run the callback, if any, against *runtime*."""
        if self.callback is not None:
            self.callback(runtime)

    def and_then(self, other: EventResult) -> EventResult:
        """
        Merge two results.

        The merge is consumed if either part is, and both callbacks run in
        order.
        """
        first, second = self.callback, other.callback
        if first is None or second is None:
            callback = first or second
        else:
            def callback(runtime: Runtime) -> None:
                first(runtime)
                second(runtime)
        return EventResult(self.is_consumed or other.is_consumed, callback)


IGNORED = EventResult(False)
CONSUMED = EventResult(True)
