"""
termtree: a terminal view-tree runtime.

Applications build a tree of :class:`View` objects, push it onto the
runtime's layer stack and run the loop; termtree negotiates sizes, draws
through clipped printers, tracks focus and routes input, on whichever
backend is configured.

Example:
    from termtree import Runtime, TextView

    runtime = Runtime()
    runtime.add_layer(TextView("Hello, world"))
    runtime.add_global_callback("q", lambda rt: rt.quit())
    runtime.run()
"""

from __future__ import annotations

from termtree.backends import (
    Backend,
    HeadlessBackend,
    available_backends,
    create_backend,
    register_backend,
)
from termtree.config import RuntimeConfig
from termtree.errors import BackendError, ConfigError, LayoutError, ScreenError, TermtreeError
from termtree.event import (
    KEY_BACKTAB,
    KEY_ENTER,
    KEY_ESCAPE,
    KEY_TAB,
    Callback,
    Char,
    Event,
    EventResult,
    Key,
    Mouse,
    MouseAction,
    MouseButton,
    Quit,
    Refresh,
    Resize,
)
from termtree.geometry import ONE, ZERO, Rect, Vec2
from termtree.keybindings import KeybindingsManager
from termtree.layout import LayoutEngine, Orientation, check_monotonic, strict_layout
from termtree.printer import Printer
from termtree.router import DispatchOutcome, EventRouter
from termtree.runtime import Runtime
from termtree.screen import Layer, Screen
from termtree.style import Effect, Style
from termtree.surface import Cell, Surface
from termtree.theme import ThemeInfo, get_default_theme, load_theme
from termtree.view import Direction, Selector, View
from termtree.views import DummyView, LinearLayout, TextView
from termtree.wrapper import NamedView, ViewWrapper, named

__version__ = "0.1.0"

__all__ = [
    # Core
    "Runtime",
    "RuntimeConfig",
    "Screen",
    "Layer",
    # Views
    "View",
    "ViewWrapper",
    "NamedView",
    "named",
    "TextView",
    "DummyView",
    "LinearLayout",
    "Direction",
    "Selector",
    "Orientation",
    # Events
    "Event",
    "EventResult",
    "Callback",
    "Char",
    "Key",
    "Mouse",
    "MouseAction",
    "MouseButton",
    "Resize",
    "Refresh",
    "Quit",
    "KEY_ENTER",
    "KEY_TAB",
    "KEY_BACKTAB",
    "KEY_ESCAPE",
    "DispatchOutcome",
    "EventRouter",
    "KeybindingsManager",
    # Drawing
    "Printer",
    "Style",
    "Effect",
    "Surface",
    "Cell",
    "ThemeInfo",
    "get_default_theme",
    "load_theme",
    # Geometry & layout
    "Vec2",
    "Rect",
    "ZERO",
    "ONE",
    "LayoutEngine",
    "check_monotonic",
    "strict_layout",
    # Backends
    "Backend",
    "HeadlessBackend",
    "available_backends",
    "create_backend",
    "register_backend",
    # Errors
    "TermtreeError",
    "BackendError",
    "ConfigError",
    "LayoutError",
    "ScreenError",
]
