"""
Layout engine.

Layout runs in two interleaved passes.  Constraints flow down through
:meth:`View.required_size` calls and requirements bubble back up as their
return values; final sizes are then pushed root to leaf through
:meth:`View.layout`.  This module owns the screen-level pass
(:class:`LayoutEngine`), the contract checks (:func:`measure`,
:func:`check_monotonic`) and the space-distribution helpers used by
linear containers.
"""

from __future__ import annotations

import contextlib
import contextvars
import enum
from collections.abc import Iterator, Sequence
from typing import TYPE_CHECKING

from termtree.errors import LayoutError
from termtree.geometry import Rect, Vec2
from termtree.logging import get_logger
from termtree.view import View

if TYPE_CHECKING:
    from termtree.screen import Screen

logger = get_logger("layout")

_strict: contextvars.ContextVar[bool] = contextvars.ContextVar("termtree_strict_layout", default=False)


class Orientation(enum.Enum):
    """Main axis of a linear container."""

    HORIZONTAL = 0
    VERTICAL = 1

    @property
    def axis(self) -> int:
        return self.value


# ---------------------------------------------------------------------------
# Contract checks
# ---------------------------------------------------------------------------

def _report(message: str) -> None:
    if _strict.get():
        raise LayoutError(message)
    logger.warning(message)


def measure(view: View, constraint: Vec2, clamp: bool = True) -> Vec2:
    """
    Ask *view* for its required size and check the answer.

    A requirement larger than *constraint* is a layout inconsistency: in
    strict mode it raises :class:`LayoutError`, otherwise it is logged and,
    when *clamp* is set, clamped so siblings are not disturbed.
    """
    required = Vec2(*view.required_size(constraint))
    if required.x < 0 or required.y < 0:
        _report(f"{type(view).__name__} reported negative size {tuple(required)}")
        required = required.clamp_zero()
    if not required.fits_in(constraint):
        _report(
            f"{type(view).__name__} requires {tuple(required)} "
            f"beyond constraint {tuple(constraint)}"
        )
        if clamp:
            required = required.min(constraint)
    return required


def check_monotonic(view: View, smaller: Vec2, larger: Vec2) -> bool:
    """
    Verify the monotonicity law for one pair of constraints.

    Returns ``True`` when ``required_size(smaller) <= required_size(larger)``
    component-wise.  A violation is reported like any other layout
    inconsistency.
    """
    if not smaller.fits_in(larger):
        raise ValueError(f"{tuple(smaller)} is not component-wise <= {tuple(larger)}")
    low = view.required_size(smaller)
    high = view.required_size(larger)
    if Vec2(*low).fits_in(high):
        return True
    _report(
        f"{type(view).__name__} is not monotonic: {tuple(smaller)} -> {tuple(low)} "
        f"but {tuple(larger)} -> {tuple(high)}"
    )
    return False


@contextlib.contextmanager
def strict_layout(enabled: bool = True) -> Iterator[None]:
    """Raise :class:`LayoutError` on inconsistencies inside the block."""
    token = _strict.set(enabled)
    try:
        yield
    finally:
        _strict.reset(token)


# ---------------------------------------------------------------------------
# Space distribution
# ---------------------------------------------------------------------------

def weight_distrib(full: int, weights: Sequence[int]) -> list[int]:
    """
    Split *full* cells into integers proportional to *weights*.

    The parts always sum to *full* when at least one weight is positive;
    rounding remainders go to the earliest parts.  With no positive
    weight every part is zero.
    """
    total = sum(w for w in weights if w > 0)
    if full <= 0 or total == 0:
        return [0] * len(weights)
    parts = [full * max(w, 0) // total for w in weights]
    remainder = full - sum(parts)
    for i, weight in enumerate(weights):
        if remainder == 0:
            break
        if weight > 0:
            parts[i] += 1
            remainder -= 1
    return parts


def allocate(children: Sequence[View], constraint: Vec2, axis: int) -> list[Vec2]:
    """
    Ask *children* for their sizes in priority order.

    Each child is offered the main-axis budget the earlier children left
    over, and the full cross-axis constraint.  The returned requirements
    never exceed what was offered.
    """
    remaining = constraint.get(axis)
    cross = constraint.get(1 - axis)
    sizes: list[Vec2] = []
    for child in children:
        offer = Vec2.from_axes(axis, remaining, cross)
        required = measure(child, offer)
        sizes.append(required)
        remaining -= required.get(axis)
    return sizes


# ---------------------------------------------------------------------------
# Screen-level pass
# ---------------------------------------------------------------------------

class LayoutEngine:
    """
    Lays out every layer of a screen.

    Fullscreen layers receive the whole terminal.  Floating layers
    receive their required size, even when it exceeds the terminal, and
    are centered.

    Parameters
    ----------
    strict:
        Raise :class:`LayoutError` instead of logging inconsistencies.
    """

    def __init__(self, strict: bool = False) -> None:
        self.strict = strict
        self.passes = 0

    def layout_screen(self, screen: Screen, size: Vec2 | None) -> None:
        if size is None:
            with strict_layout(self.strict):
                _report("Layout requested before any screen size was offered")
            return

        with strict_layout(self.strict):
            for layer in screen.layers():
                layer.placement = self.place(layer.view, size, layer.fullscreen)
                layer.view.layout(layer.placement.size)
        screen.mark_laid_out()
        self.passes += 1
        logger.debug("Laid out %d layer(s) at %s", len(screen.layers()), tuple(size))

    def place(self, view: View, size: Vec2, fullscreen: bool) -> Rect:
        """Compute the absolute rectangle of a layer's root view."""
        if fullscreen:
            return Rect(0, 0, size.x, size.y)
        required = measure(view, size, clamp=False)
        origin = ((size - required) // 2).clamp_zero()
        return Rect.from_size(origin, required)
