"""
Backend contract and name registry.

A backend turns a real (or simulated) terminal into semantic events and
accepts styled text runs for output.  The runtime talks to nothing else,
so adapters are interchangeable and chosen by name at startup::

    backend = create_backend("ansi")
    with backend:
        backend.print_at((0, 0), "hello", Style(fg="red"))
        backend.flush()
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from types import TracebackType
from typing import Any

from termtree.errors import ConfigError
from termtree.event import Event
from termtree.geometry import Vec2
from termtree.logging import get_logger
from termtree.style import Style

logger = get_logger("backends")


class Backend(ABC):
    """
    Abstract terminal backend.

    Subclasses implement input polling, size reporting and output.  Output
    calls may be buffered until :meth:`flush`.
    """

    name: str = "base"

    def __init__(self) -> None:
        self._active = False

    @property
    def active(self) -> bool:
        """``True`` between :meth:`init` and :meth:`close`."""
        return self._active

    def init(self) -> None:
        """Take over the terminal."""
        self._active = True

    def close(self) -> None:
        """Give the terminal back; safe to call more than once."""
        self._active = False

    def __enter__(self) -> Backend:
        self.init()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    @abstractmethod
    def poll_event(self, timeout: float | None) -> Event | None:
        """
        Wait for the next event.

        Parameters
        ----------
        timeout:
            Seconds to wait; ``None`` blocks until an event arrives.

        Returns
        -------
        The event, or ``None`` when the timeout expired.
        """

    @abstractmethod
    def screen_size(self) -> Vec2:
        """Current terminal size in cells."""

    @abstractmethod
    def print_at(self, pos: tuple[int, int], text: str, style: Style) -> None:
        """Write *text* at absolute *pos* using *style*."""

    @abstractmethod
    def clear(self, style: Style) -> None:
        """Fill the whole terminal with blanks in *style*."""

    def flush(self) -> None:
        """Make buffered output visible."""


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

BackendFactory = Callable[..., Backend]

_REGISTRY: dict[str, BackendFactory] = {}


def register_backend(name: str, factory: BackendFactory) -> None:
    """
    Register a backend factory under *name*.

    Registering an existing name replaces the previous factory.
    """
    if not name:
        raise ValueError("Backend name must not be empty")
    if name in _REGISTRY:
        logger.debug("Overriding backend: %s", name)
    _REGISTRY[name] = factory


def unregister_backend(name: str) -> None:
    _REGISTRY.pop(name, None)


def available_backends() -> list[str]:
    """Registered backend names, sorted."""
    return sorted(_REGISTRY)


def create_backend(name: str, **kwargs: Any) -> Backend:
    """
    Instantiate the backend registered as *name*.

    Raises
    ------
    ConfigError
        If no backend is registered under *name*.
    """
    factory = _REGISTRY.get(name)
    if factory is None:
        raise ConfigError(
            f"Unknown backend {name!r}; available: {', '.join(available_backends()) or 'none'}"
        )
    logger.debug("Creating backend: %s", name)
    return factory(**kwargs)
