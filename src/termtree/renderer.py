"""
Differential frame presenter.

:class:`Renderer` remembers the last :class:`~termtree.surface.Surface`
it presented and, on each :meth:`Renderer.present`, only sends the rows
that changed to the backend.  A full redraw happens on the first frame
and whenever the surface size changes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from termtree.logging import get_logger
from termtree.style import PLAIN
from termtree.surface import Surface

if TYPE_CHECKING:
    from termtree.backends.base import Backend

logger = get_logger("renderer")


class Renderer:
    """
    Sends surfaces to a backend, rewriting only changed rows.

    Parameters
    ----------
    backend:
        Target backend; must already be initialised when
        :meth:`present` is called.
    """

    def __init__(self, backend: Backend) -> None:
        self.backend = backend
        self._previous: Surface | None = None
        self.frames = 0

    @property
    def previous(self) -> Surface | None:
        """Copy of the last presented frame."""
        return self._previous.copy() if self._previous is not None else None

    def present(self, surface: Surface) -> int:
        """
        Present *surface*.

        Returns
        -------
        int
            Number of rows rewritten.
        """
        previous = self._previous
        if previous is None or previous.size != surface.size:
            rows = self._full_render(surface)
        else:
            rows = self._diff_render(previous, surface)

        if rows or previous is None:
            self.backend.flush()
        self._previous = surface.copy()
        self.frames += 1
        return rows

    def invalidate(self) -> None:
        """Force the next frame to be a full redraw."""
        self._previous = None

    # ------------------------------------------------------------------
    # Diff engine
    # ------------------------------------------------------------------

    @staticmethod
    def changed_rows(old: Surface, new: Surface) -> list[int]:
        """Indices of rows that differ between two equally sized surfaces."""
        return [y for y in range(new.size.y) if old.row(y) != new.row(y)]

    def _full_render(self, surface: Surface) -> int:
        logger.debug("Full redraw at %s", tuple(surface.size))
        self.backend.clear(PLAIN)
        for y in range(surface.size.y):
            self._write_row(surface, y)
        return surface.size.y

    def _diff_render(self, old: Surface, new: Surface) -> int:
        rows = self.changed_rows(old, new)
        for y in rows:
            self._write_row(new, y)
        return len(rows)

    def _write_row(self, surface: Surface, y: int) -> None:
        for x, text, style in surface.runs(y):
            self.backend.print_at((x, y), text, style)
