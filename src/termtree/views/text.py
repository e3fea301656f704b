"""
Static text view.

Renders one or more lines of text.  Lines are never wrapped: the required
size is the text's extent clamped to the constraint, and anything beyond
the granted size is truncated at draw time.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.cells import cell_len

from termtree.geometry import Vec2
from termtree.style import Style
from termtree.view import View

if TYPE_CHECKING:
    from termtree.printer import Printer


class TextView(View):
    """
    A read-only block of text.

    Parameters
    ----------
    content:
        Text to show; ``"\\n"`` separates lines.
    style:
        Optional style (palette roles allowed) laid over the inherited one.

    Example
    -------
    >>> view = TextView("hello")
    >>> view.required_size(Vec2(10, 10))
    Vec2(x=5, y=1)
    """

    def __init__(self, content: str = "", style: Style | None = None) -> None:
        self._content = ""
        self._lines: list[str] = [""]
        self._extent = Vec2(0, 1)
        self._dirty = True
        self.style = style
        self.set_content(content)

    @property
    def content(self) -> str:
        return self._content

    @content.setter
    def content(self, value: str) -> None:
        self.set_content(value)

    def set_content(self, content: str) -> None:
        """Replace the displayed text."""
        if content == self._content and not self._dirty:
            return
        self._content = content
        self._lines = content.split("\n")
        width = max((cell_len(line) for line in self._lines), default=0)
        self._extent = Vec2(width, len(self._lines))
        self._dirty = True

    def append(self, text: str) -> None:
        self.set_content(self._content + text)

    # ------------------------------------------------------------------
    # View
    # ------------------------------------------------------------------

    def required_size(self, constraint: Vec2) -> Vec2:
        return self._extent.min(constraint)

    def layout(self, size: Vec2) -> None:
        super().layout(size)
        self._dirty = False

    def needs_relayout(self) -> bool:
        return self._dirty

    def draw(self, printer: Printer) -> None:
        if self.style is not None:
            printer = printer.with_style(self.style)
        for row, line in enumerate(self._lines[: printer.size.y]):
            printer.print((0, row), line)

    def __repr__(self) -> str:
        return f"TextView({self._content!r})"
