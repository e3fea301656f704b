"""
Exception hierarchy for termtree.

Only :class:`BackendError` is allowed to end a run; the other errors
signal programming or configuration mistakes at the call site.
"""

from __future__ import annotations


class TermtreeError(Exception):
    """Base class for every error raised by termtree."""

    pass


class BackendError(TermtreeError):
    """Raised when a backend fails to read from or write to the terminal."""

    pass


class LayoutError(TermtreeError):
    """
    Raised in strict mode when a view breaks the layout contract.

    Examples are a required size larger than the offered constraint, or a
    layout pass requested before any screen size is known.
    """

    pass


class ScreenError(TermtreeError):
    """Raised for an unknown screen id or when removing the active screen."""

    pass


class ConfigError(TermtreeError):
    """Raised for invalid configuration values, files or backend names."""

    pass
