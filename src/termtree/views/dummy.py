"""Placeholder view that takes no space of its own."""

from __future__ import annotations

from typing import TYPE_CHECKING

from termtree.geometry import ZERO, Vec2
from termtree.view import View

if TYPE_CHECKING:
    from termtree.printer import Printer


class DummyView(View):
    """Requires nothing and draws nothing; stretches when given weight."""

    def required_size(self, constraint: Vec2) -> Vec2:
        return ZERO

    def needs_relayout(self) -> bool:
        return False

    def draw(self, printer: Printer) -> None:
        pass
