"""
Logging utilities for termtree.

All modules log below the ``termtree`` package logger.  While a terminal
backend owns the screen, anything written to stderr corrupts the display,
so :func:`setup_logging` routes records to a file when one is given and
only falls back to a stream when asked to.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TextIO

# Package root logger
_root_logger = logging.getLogger("termtree")
_root_logger.addHandler(logging.NullHandler())

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _coerce_level(level: str | int) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.INFO)
    return level


def setup_logging(
    level: str | int = "INFO",
    format: str | None = None,
    stream: TextIO | None = None,
    file: str | Path | None = None,
) -> None:
    """
    Configure logging for termtree.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL) or int
        format: Custom log format string
        stream: Output stream; defaults to stderr unless *file* is given
        file: Optional file path to write logs

    Example:
        from termtree.logging import setup_logging

        # Keep the terminal clean while the UI runs
        setup_logging("DEBUG", file="termtree.log")
    """
    level = _coerce_level(level)
    _root_logger.setLevel(level)

    remove_handlers()

    formatter = logging.Formatter(format or DEFAULT_FORMAT)

    if file:
        file_handler = logging.FileHandler(file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        _root_logger.addHandler(file_handler)

    if stream is not None or not file:
        stream_handler = logging.StreamHandler(stream or sys.stderr)
        stream_handler.setFormatter(formatter)
        stream_handler.setLevel(level)
        _root_logger.addHandler(stream_handler)


def get_logger(name: str) -> logging.Logger:
    """
    Get a child logger for a submodule.

    Args:
        name: Submodule name (e.g., "router", "backends.ansi")

    Returns:
        Logger instance
    """
    if name.startswith("termtree."):
        return logging.getLogger(name)
    return logging.getLogger(f"termtree.{name}")


def set_level(level: str | int) -> None:
    """Set the log level for termtree."""
    _root_logger.setLevel(_coerce_level(level))


def disable() -> None:
    """Disable all logging for termtree."""
    _root_logger.disabled = True


def enable() -> None:
    """Re-enable logging for termtree."""
    _root_logger.disabled = False


def remove_handlers() -> None:
    """Drop every handler added by :func:`setup_logging`, keeping the NullHandler."""
    for handler in list(_root_logger.handlers):
        if not isinstance(handler, logging.NullHandler):
            _root_logger.removeHandler(handler)
            handler.close()
