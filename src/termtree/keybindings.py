"""
Keybinding management.

Stores the mapping from logical actions to key descriptors such as
``"ctrl+c"`` or ``"shift+tab"`` and supports user overrides loaded from a
JSON or YAML file.  Descriptors are parsed once into :mod:`termtree.event`
values, so matching an incoming event is a set lookup.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from termtree.errors import ConfigError
from termtree.event import NAMED_KEYS, Char, Event, Key
from termtree.logging import get_logger

logger = get_logger("keybindings")

# ---------------------------------------------------------------------------
# Default keybinding map
# ---------------------------------------------------------------------------

FOCUS_NEXT = "focus_next"
FOCUS_PREVIOUS = "focus_previous"
QUIT = "quit"

DEFAULT_KEYBINDINGS: dict[str, list[str]] = {
    FOCUS_NEXT: ["tab"],
    FOCUS_PREVIOUS: ["shift+tab"],
    QUIT: ["ctrl+c"],
}

_MODIFIERS = ("alt", "ctrl", "shift")
_ALIASES = {
    "esc": "escape",
    "return": "enter",
    "pgup": "page_up",
    "pageup": "page_up",
    "pgdn": "page_down",
    "pagedown": "page_down",
    "del": "delete",
    "ins": "insert",
    "backtab": "shift+tab",
}


# ---------------------------------------------------------------------------
# Descriptor parsing
# ---------------------------------------------------------------------------

def normalise_descriptor(descriptor: str) -> str:
    """
    Normalise a human-readable key descriptor to a canonical form.

    ``"Ctrl+Shift+M"`` -> ``"ctrl+shift+m"``
    """
    text = descriptor.strip()
    if text in ("+", "plus"):
        return "+"
    parts = [p.strip().lower() for p in text.split("+")]
    base = _ALIASES.get(parts[-1], parts[-1])
    if "+" in base:
        # Alias expanded into modifiers (e.g. backtab)
        extra = base.split("+")
        parts = parts[:-1] + extra
        base = extra[-1]
    modifiers = sorted(set(parts[:-1]))
    unknown = [m for m in modifiers if m not in _MODIFIERS]
    if unknown or not base:
        raise ConfigError(f"Invalid key descriptor: {descriptor!r}")
    return "+".join(modifiers + [base])


def parse_descriptor(descriptor: str) -> Event:
    """
    Parse a key descriptor into the event it describes.

    Examples
    --------
    >>> parse_descriptor("ctrl+c")
    Char(char='c', ctrl=True, alt=False)
    >>> parse_descriptor("shift+tab")
    Key(name='tab', ctrl=False, alt=False, shift=True)
    """
    canonical = normalise_descriptor(descriptor)
    if canonical == "+":
        return Char("+")
    *modifiers, base = canonical.split("+")
    ctrl = "ctrl" in modifiers
    alt = "alt" in modifiers
    shift = "shift" in modifiers

    if base in NAMED_KEYS:
        return Key(base, ctrl=ctrl, alt=alt, shift=shift)
    if base == "space":
        return Char(" ", ctrl=ctrl, alt=alt)
    if len(base) == 1:
        char = base.upper() if shift and not ctrl else base
        return Char(char, ctrl=ctrl, alt=alt)
    raise ConfigError(f"Unknown key in descriptor: {descriptor!r}")


def describe_event(event: Event) -> str | None:
    """
    Convert a keyboard event back to a canonical descriptor.

    Returns ``None`` for non-keyboard events.
    """
    if isinstance(event, Key):
        mods = [m for m, on in (("alt", event.alt), ("ctrl", event.ctrl), ("shift", event.shift)) if on]
        return "+".join(mods + [event.name])
    if isinstance(event, Char):
        mods = [m for m, on in (("alt", event.alt), ("ctrl", event.ctrl)) if on]
        base = "space" if event.char == " " else event.char
        return "+".join(mods + [base])
    return None


# ---------------------------------------------------------------------------
# Manager
# ---------------------------------------------------------------------------

class KeybindingsManager:
    """
    Manages the mapping from logical action names to key sequences.

    Parameters
    ----------
    user_overrides:
        Optional mapping of action names to key descriptor lists that
        replace the defaults for those actions.
    """

    def __init__(self, user_overrides: dict[str, list[str]] | None = None) -> None:
        self._bindings: dict[str, list[str]] = dict(DEFAULT_KEYBINDINGS)
        if user_overrides:
            self._bindings.update(user_overrides)

        # Pre-parse all descriptors for fast matching
        self._events: dict[str, frozenset[Event]] = {
            action: frozenset(parse_descriptor(d) for d in descriptors)
            for action, descriptors in self._bindings.items()
        }

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    @classmethod
    def load(cls, config_path: str | Path | None = None) -> KeybindingsManager:
        """
        Load keybindings from a JSON or YAML file.

        Search order when *config_path* is ``None``:

        1. ``~/.config/termtree/keybindings.yaml``
        2. ``~/.config/termtree/keybindings.json``
        3. Defaults only.

        The file should map action names to lists of key descriptors::

            quit: [ctrl+q, f10]
            focus_next: [tab, down]
        """
        if config_path is not None:
            candidates = [Path(config_path)]
        else:
            base = Path.home() / ".config" / "termtree"
            candidates = [base / "keybindings.yaml", base / "keybindings.json"]

        path = next((p for p in candidates if p.is_file()), None)
        if path is None:
            return cls()

        try:
            text = path.read_text(encoding="utf-8")
            raw: Any = json.loads(text) if path.suffix == ".json" else yaml.safe_load(text)
        except (OSError, json.JSONDecodeError, yaml.YAMLError) as exc:
            raise ConfigError(f"Cannot load keybindings from {path}: {exc}") from exc

        return cls(user_overrides=cls._validate_overrides(raw, path))

    @staticmethod
    def _validate_overrides(raw: Any, source: object) -> dict[str, list[str]]:
        if raw is None:
            return {}
        if not isinstance(raw, dict):
            raise ConfigError(f"Keybindings in {source} must be a mapping")
        overrides: dict[str, list[str]] = {}
        for action, val in raw.items():
            if isinstance(val, str):
                val = [val]
            if not isinstance(val, list) or not all(isinstance(v, str) for v in val):
                logger.warning("Ignoring keybinding %r: expected a list of descriptors", action)
                continue
            overrides[str(action)] = val
        return overrides

    # ------------------------------------------------------------------
    # Querying
    # ------------------------------------------------------------------

    def matches(self, key: Event | str, action: str) -> bool:
        """
        Test whether *key* matches any binding for *action*.

        Parameters
        ----------
        key:
            Either an event or a raw key descriptor string (e.g. ``"ctrl+c"``).
        action:
            Logical action name (e.g. ``"quit"``).
        """
        events = self._events.get(action)
        if events is None:
            return False
        if isinstance(key, str):
            key = parse_descriptor(key)
        return key in events

    def events_for(self, action: str) -> frozenset[Event]:
        """Return the parsed events bound to *action*."""
        return self._events.get(action, frozenset())

    def get_keys(self, action: str) -> list[str]:
        """Return all key descriptor strings bound to *action*, as written."""
        return list(self._bindings.get(action, []))

    def actions(self) -> list[str]:
        """Return all registered action names."""
        return list(self._bindings.keys())

    def find_action(self, key: Event | str) -> str | None:
        """
        Find the first action that matches *key*, or ``None``.

        Actions are checked in insertion order.
        """
        for action in self._bindings:
            if self.matches(key, action):
                return action
        return None
