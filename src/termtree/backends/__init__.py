"""
Terminal backends.

The bundled adapters register themselves here by name; the ``curses``
one is imported only when it is created, since :mod:`curses` is not
available everywhere.
"""

from __future__ import annotations

from typing import Any

from termtree.backends.base import (
    Backend,
    available_backends,
    create_backend,
    register_backend,
    unregister_backend,
)
from termtree.backends.headless import HeadlessBackend


def _ansi(**kwargs: Any) -> Backend:
    from termtree.backends.ansi import AnsiBackend

    return AnsiBackend(**kwargs)


def _curses(**kwargs: Any) -> Backend:
    from termtree.backends.curses_backend import CursesBackend

    return CursesBackend(**kwargs)


register_backend("ansi", _ansi)
register_backend("curses", _curses)
register_backend("headless", HeadlessBackend)

__all__ = [
    "Backend",
    "HeadlessBackend",
    "available_backends",
    "create_backend",
    "register_backend",
    "unregister_backend",
]
