"""
Key parsing for terminal input.

Translates raw bytes read from a terminal in raw mode into semantic
:mod:`termtree.event` values.  :func:`parse_input` splits a buffer that
may hold several key presses; :func:`parse_key` decodes one sequence.
:class:`InputDecoder` keeps sequences split across reads together.
"""

from __future__ import annotations

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
)
from termtree.geometry import Vec2

_F = {key.name: key for key in FUNCTION_KEYS}

# ---------------------------------------------------------------------------
# CSI (Control Sequence Introducer) lookup tables
# ---------------------------------------------------------------------------

_CSI_SIMPLE: dict[str, Key] = {
    "A": KEY_UP,
    "B": KEY_DOWN,
    "C": KEY_RIGHT,
    "D": KEY_LEFT,
    "H": KEY_HOME,
    "F": KEY_END,
    "Z": KEY_BACKTAB,
    "P": _F["f1"],
    "Q": _F["f2"],
    "R": _F["f3"],
    "S": _F["f4"],
}

# Sequences of the form CSI <number> ~ (e.g. \x1b[3~  for delete)
_CSI_TILDE: dict[int, Key] = {
    1: KEY_HOME,
    2: KEY_INSERT,
    3: KEY_DELETE,
    4: KEY_END,
    5: KEY_PAGE_UP,
    6: KEY_PAGE_DOWN,
    7: KEY_HOME,
    8: KEY_END,
    11: _F["f1"],
    12: _F["f2"],
    13: _F["f3"],
    14: _F["f4"],
    15: _F["f5"],
    17: _F["f6"],
    18: _F["f7"],
    19: _F["f8"],
    20: _F["f9"],
    21: _F["f10"],
    23: _F["f11"],
    24: _F["f12"],
}

# SS3 sequences (ESC O <letter>)
_SS3: dict[str, Key] = {
    "P": _F["f1"],
    "Q": _F["f2"],
    "R": _F["f3"],
    "S": _F["f4"],
    "A": KEY_UP,
    "B": KEY_DOWN,
    "C": KEY_RIGHT,
    "D": KEY_LEFT,
    "H": KEY_HOME,
    "F": KEY_END,
}


# ---------------------------------------------------------------------------
# Modifier bit handling (xterm-style ;N suffixes)
# ---------------------------------------------------------------------------

def _modifier_flags(code: int) -> tuple[bool, bool, bool]:
    """
    Decode an xterm modifier code into ``(shift, alt, ctrl)`` booleans.

    The modifier value is 1-based: ``value = 1 + (shift) + 2*(alt) + 4*(ctrl)``.
    """
    code -= 1
    return bool(code & 1), bool(code & 2), bool(code & 4)


def _with_modifiers(key: Key, mod: int | None) -> Key:
    if mod is None:
        return key
    shift, alt, ctrl = _modifier_flags(mod)
    return Key(key.name, ctrl=ctrl or key.ctrl, alt=alt or key.alt, shift=shift or key.shift)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def split_complete(data: bytes) -> tuple[list[bytes], bytes]:
    """
    Split *data* into whole key sequences and an incomplete tail.

    The tail is a trailing escape or UTF-8 sequence whose remaining bytes
    have not arrived yet; it is ``b""`` when *data* ends cleanly.
    """
    chunks: list[bytes] = []
    i, n = 0, len(data)
    while i < n:
        byte = data[i]
        end: int | None
        if byte == 0x1B:
            end = _escape_end(data, i)
        elif byte >= 0xC0:
            end = i + _utf8_length(byte)
            if end > n:
                end = None
        else:
            end = i + 1
        if end is None:
            return chunks, data[i:]
        chunks.append(data[i:end])
        i = end
    return chunks, b""


def split_sequences(data: bytes) -> list[bytes]:
    """
    Split a raw input buffer into individual key sequences.

    Escape sequences are kept whole, UTF-8 characters are kept whole and
    every other byte stands alone.  An incomplete trailing sequence is
    returned as the last chunk.
    """
    chunks, tail = split_complete(data)
    if tail:
        chunks.append(tail)
    return chunks


def parse_input(data: bytes) -> list[Event]:
    """Parse a raw buffer into events, dropping unrecognised sequences."""
    return _parse_chunks(split_sequences(data))


def _parse_chunks(chunks: list[bytes]) -> list[Event]:
    events: list[Event] = []
    for chunk in chunks:
        event = parse_key(chunk)
        if event is not None:
            events.append(event)
    return events


class InputDecoder:
    """
    Incremental decoder for input arriving in arbitrary chunks.

    A sequence split across two reads is held back until the rest
    arrives.  A lone trailing ``ESC`` is ambiguous until then, so the
    caller decides when it has waited long enough and calls
    :meth:`flush` to turn the held bytes into events as they are.
    """

    def __init__(self) -> None:
        self._carry = b""

    @property
    def pending(self) -> bytes:
        """Bytes held back for the next :meth:`feed`."""
        return self._carry

    def feed(self, data: bytes) -> list[Event]:
        chunks, self._carry = split_complete(self._carry + data)
        return _parse_chunks(chunks)

    def flush(self) -> list[Event]:
        carry, self._carry = self._carry, b""
        return _parse_chunks(split_sequences(carry))

    def reset(self) -> None:
        self._carry = b""


def parse_key(data: bytes) -> Event | None:
    """
    Parse a single raw key sequence.

    Handles:
    * Printable ASCII and UTF-8 characters
    * Ctrl+letter combinations (bytes 0x01-0x1a)
    * Alt+character (ESC followed by a character)
    * CSI sequences (arrow keys, function keys, home/end, etc.)
    * SS3 sequences (alternate function key encoding)
    * xterm-style modifier suffixes (e.g. ``CSI 1;5C`` for Ctrl+Right)
    * SGR mouse reports (``CSI < b ; x ; y M``)

    Returns ``None`` for sequences that map to no event.
    """
    if not data:
        return None

    # -----------------------------------------------------------------------
    # ESC-prefixed sequences
    # -----------------------------------------------------------------------
    if data[0:1] == b"\x1b":
        if len(data) == 1:
            return KEY_ESCAPE

        second = data[1:2]

        if second == b"[":
            return _parse_csi(data[2:])

        if second == b"O":
            return _SS3.get(data[2:3].decode("ascii", "replace"))

        # Alt + something
        inner = parse_key(data[1:])
        if isinstance(inner, Char):
            return Char(inner.char, ctrl=inner.ctrl, alt=True)
        if isinstance(inner, Key):
            return Key(inner.name, ctrl=inner.ctrl, alt=True, shift=inner.shift)
        return None

    # -----------------------------------------------------------------------
    # Control characters (0x00-0x1f, 0x7f)
    # -----------------------------------------------------------------------
    byte = data[0]

    if byte in (0x0D, 0x0A):
        return KEY_ENTER
    if byte == 0x09:
        return KEY_TAB
    if byte in (0x7F, 0x08):
        return KEY_BACKSPACE
    if byte == 0x00:
        return Char(" ", ctrl=True)
    if 1 <= byte <= 26:
        return Char(chr(byte + 96), ctrl=True)
    if 0x1C <= byte <= 0x1F:
        return Char("\\]^_"[byte - 0x1C], ctrl=True)

    # -----------------------------------------------------------------------
    # Printable characters (possibly multi-byte UTF-8)
    # -----------------------------------------------------------------------
    try:
        ch = data.decode("utf-8")
    except UnicodeDecodeError:
        return None

    if len(ch) == 1 and ch.isprintable():
        return Char(ch)
    return None


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _utf8_length(lead: int) -> int:
    if lead >= 0xF0:
        return 4
    if lead >= 0xE0:
        return 3
    return 2


def _escape_end(data: bytes, start: int) -> int | None:
    """
    Index one past the escape sequence beginning at *start*.

    ``None`` means the sequence is cut short by the end of *data*.
    """
    n = len(data)
    if start + 1 >= n:
        return None
    second = data[start + 1]
    if second == 0x5B:  # '['
        i = start + 2
        while i < n:
            # Final byte of a CSI sequence is in 0x40-0x7e; '<' starts SGR mouse
            if 0x40 <= data[i] <= 0x7E and not (i == start + 2 and data[i] == 0x3C):
                return i + 1
            i += 1
        return None
    if second == 0x4F:  # 'O'
        return start + 3 if start + 3 <= n else None
    if second == 0x1B:
        return start + 1
    if second >= 0xC0:
        end = start + 1 + _utf8_length(second)
        return end if end <= n else None
    return start + 2


def _parse_csi(payload: bytes) -> Event | None:
    """
    Parse the bytes *after* ``ESC [`` in a CSI sequence.

    Supports:
    * Simple final-byte sequences (e.g. ``A`` for Up)
    * ``<number> ~`` sequences (e.g. ``3~`` for Delete)
    * ``1;<mod> <letter>`` modifier sequences (e.g. ``1;5C`` for Ctrl+Right)
    * ``<number>;<mod> ~`` modifier+tilde sequences
    * ``< b ; x ; y M|m`` SGR mouse reports
    """
    try:
        text = payload.decode("ascii")
    except UnicodeDecodeError:
        return None
    if not text:
        return None

    if text.startswith("<"):
        return _parse_sgr_mouse(text[1:])

    if text in _CSI_SIMPLE:
        return _CSI_SIMPLE[text]

    final, inner = text[-1], text[:-1]
    parts = inner.split(";") if inner else []

    if final == "~":
        num = _safe_int(parts[0]) if parts else None
        base = _CSI_TILDE.get(num) if num is not None else None
        if base is None:
            return None
        mod = _safe_int(parts[1]) if len(parts) == 2 else None
        return _with_modifiers(base, mod)

    base = _CSI_SIMPLE.get(final)
    if base is not None and len(parts) == 2:
        return _with_modifiers(base, _safe_int(parts[1]))
    return None


_SGR_BUTTONS: dict[int, MouseButton] = {
    0: MouseButton.LEFT,
    1: MouseButton.MIDDLE,
    2: MouseButton.RIGHT,
    3: MouseButton.NONE,
    64: MouseButton.WHEEL_UP,
    65: MouseButton.WHEEL_DOWN,
}


def _parse_sgr_mouse(text: str) -> Mouse | None:
    final, inner = text[-1:], text[:-1]
    if final not in ("M", "m"):
        return None
    parts = [_safe_int(p) for p in inner.split(";")]
    if len(parts) != 3 or any(p is None for p in parts):
        return None
    code, col, row = parts  # type: ignore[misc]
    drag = bool(code & 32)
    button = _SGR_BUTTONS.get(code & ~(4 | 8 | 16 | 32))
    if button is None:
        return None
    if final == "m":
        action = MouseAction.RELEASE
    elif drag:
        action = MouseAction.DRAG
    else:
        action = MouseAction.PRESS
    # SGR coordinates are 1-based
    return Mouse(position=Vec2(col - 1, row - 1), button=button, action=action)


def _safe_int(s: str) -> int | None:
    """Return ``int(s)`` or ``None`` if *s* is not a valid integer."""
    try:
        return int(s)
    except (ValueError, TypeError):
        return None
