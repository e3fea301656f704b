"""
Terminal control sequences used by the ANSI backend.

Styling is not here: SGR codes come from :meth:`rich.style.Style.render`.
"""

from __future__ import annotations

ESC = "\033"
CSI = f"{ESC}["
RESET = f"{CSI}0m"

# Synchronized output markers (DEC private mode 2026)
SYNC_START = f"{CSI}?2026h"
SYNC_END = f"{CSI}?2026l"

ALT_SCREEN_ON = f"{CSI}?1049h"
ALT_SCREEN_OFF = f"{CSI}?1049l"

# Button tracking, drag tracking and SGR extended coordinates
MOUSE_ON = f"{CSI}?1000h{CSI}?1002h{CSI}?1006h"
MOUSE_OFF = f"{CSI}?1006l{CSI}?1002l{CSI}?1000l"


def cursor_position(row: int, col: int) -> str:
    """Move cursor to absolute *row*, *col* (1-based)."""
    return f"{CSI}{row};{col}H"


def clear_screen() -> str:
    """Clear the entire screen and move cursor to top-left."""
    return f"{CSI}2J{CSI}H"


def hide_cursor() -> str:
    return f"{CSI}?25l"


def show_cursor() -> str:
    return f"{CSI}?25h"


def set_title(title: str) -> str:
    """Set the terminal window title via OSC 2."""
    return f"{ESC}]2;{title}{ESC}\\"
