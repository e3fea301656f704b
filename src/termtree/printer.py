"""
Drawing context.

A :class:`Printer` is an immutable window onto a :class:`Surface`: an
absolute origin, a granted size, a clipping rectangle, the current style
and the remaining focus path.  Views draw in their own local coordinates;
the printer translates to absolute cells and silently drops everything
outside the clip rectangle.  A wide character that straddles the clip
boundary is dropped whole.

Child printers are derived, never mutated, so a nested view cannot leak
its offset, clip or style to a sibling::

    def draw(self, printer):
        printer.print((0, 0), "Title")
        body = printer.offset((0, 1)).with_style(Style(fg="secondary"))
        self.body.draw(body)
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from termtree.geometry import Rect, Vec2
from termtree.style import PLAIN, Effect, Style
from termtree.surface import Surface, char_width
from termtree.theme import DEFAULT_THEME, ThemeInfo

_BOX_CHARS: dict[str, str] = {
    # top-left, top-right, bottom-left, bottom-right, horizontal, vertical
    "simple": "┌┐└┘─│",
    "heavy": "┏┓┗┛━┃",
    "none": "      ",
}


@dataclass
class FrameInfo:
    """
    Facts gathered while drawing one frame.

    The router uses :attr:`focus_rect` to translate mouse positions into
    the focused view's coordinates.
    """

    focus_rect: Rect | None = None


@dataclass(frozen=True)
class Printer:
    """
    Clipped, offset and styled view onto a surface.

    Attributes
    ----------
    surface:
        Target cell grid.
    origin:
        Absolute position of the local ``(0, 0)`` cell.
    size:
        Size granted to the view being drawn.
    clip:
        Absolute rectangle outside of which nothing is written.
    style:
        Resolved style applied to every write.
    theme:
        Palette used to resolve role names in :meth:`with_style`.
    focus_path:
        Remaining focus path below this view, or ``None`` if the view is
        not on the focus path.
    frame:
        Per-frame record shared by every printer of one draw pass.
    """

    surface: Surface
    origin: Vec2 = Vec2(0, 0)
    size: Vec2 = Vec2(0, 0)
    clip: Rect = Rect(0, 0, 0, 0)
    style: Style = PLAIN
    theme: ThemeInfo = field(default_factory=lambda: DEFAULT_THEME)
    focus_path: tuple[int, ...] | None = None
    frame: FrameInfo = field(default_factory=FrameInfo)

    @classmethod
    def for_surface(
        cls,
        surface: Surface,
        theme: ThemeInfo = DEFAULT_THEME,
        style: Style | None = None,
    ) -> Printer:
        """Root printer covering the whole surface."""
        return cls(
            surface=surface,
            size=surface.size,
            clip=surface.bounds,
            theme=theme,
            style=theme.resolve(style) if style is not None else PLAIN,
        )

    # ------------------------------------------------------------------
    # Focus
    # ------------------------------------------------------------------

    @property
    def focused(self) -> bool:
        """``True`` when the view drawn with this printer holds focus."""
        return self.focus_path == ()

    @property
    def on_focus_path(self) -> bool:
        return self.focus_path is not None

    def focus(self, path: tuple[int, ...] | None) -> Printer:
        """Return a printer carrying *path* as remaining focus path."""
        printer = replace(self, focus_path=path)
        printer._record_focus()
        return printer

    def _record_focus(self) -> None:
        if self.focus_path == ():
            self.frame.focus_rect = Rect.from_size(self.origin, self.size)

    # ------------------------------------------------------------------
    # Derivation
    # ------------------------------------------------------------------

    def offset(self, delta: tuple[int, int]) -> Printer:
        """Shift the local origin by *delta*; the size shrinks accordingly."""
        delta = Vec2(*delta)
        return replace(
            self,
            origin=self.origin + delta,
            size=(self.size - delta).clamp_zero(),
        )

    def cropped(self, size: tuple[int, int]) -> Printer:
        """Restrict to the top-left *size* cells."""
        size = Vec2(*size).min(self.size).clamp_zero()
        clip = self.clip.intersection(Rect.from_size(self.origin, size))
        return replace(self, size=size, clip=clip)

    def clip_to(self, rect: Rect) -> Printer:
        """Intersect the clip with *rect*, given in local coordinates."""
        return replace(self, clip=self.clip.intersection(rect.offset(self.origin)))

    def windowed(self, rect: Rect) -> Printer:
        """Offset to ``rect.top_left`` and crop to ``rect.size``."""
        return self.offset(rect.top_left).cropped(rect.size)

    def child(self, index: int, rect: Rect) -> Printer:
        """
        Printer for the child at *index* placed at *rect*.

        Offsets, crops and narrows the focus path: the child stays on the
        focus path only if the path continues through *index*.
        """
        path: tuple[int, ...] | None = None
        if self.focus_path and self.focus_path[0] == index:
            path = self.focus_path[1:]
        printer = replace(self.windowed(rect), focus_path=path)
        printer._record_focus()
        return printer

    def with_style(self, style: Style) -> Printer:
        """Lay *style* (palette roles allowed) over the current style."""
        return replace(self, style=self.style.combine(self.theme.resolve(style)))

    def with_effect(self, effect: Effect) -> Printer:
        return replace(self, style=self.style.with_effect(effect))

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def print(self, pos: tuple[int, int], text: str) -> int:
        """
        Print *text* starting at local *pos*.

        Returns the number of cells the text spans, whether or not they
        were visible.  Newlines are not interpreted.
        """
        x, y = pos
        for char in text:
            width = char_width(char)
            if width == 0:
                continue
            self._put(x, y, char, width)
            x += width
        return x - pos[0]

    def set_cell(self, pos: tuple[int, int], char: str) -> None:
        width = char_width(char)
        if width:
            self._put(pos[0], pos[1], char, width)

    def print_hline(self, pos: tuple[int, int], length: int, char: str = "─") -> None:
        x, y = pos
        for i in range(max(0, length)):
            self.set_cell((x + i, y), char)

    def print_vline(self, pos: tuple[int, int], length: int, char: str = "│") -> None:
        x, y = pos
        for i in range(max(0, length)):
            self.set_cell((x, y + i), char)

    def fill(self, rect: Rect | None = None, char: str = " ") -> None:
        """Fill *rect* (default: the whole granted area) with *char*."""
        rect = rect or Rect(0, 0, self.size.x, self.size.y)
        for y in range(rect.y, rect.bottom):
            self.print_hline((rect.x, y), rect.width, char)

    def clear(self) -> None:
        self.fill()

    def print_box(self, pos: tuple[int, int], size: tuple[int, int]) -> None:
        """Draw a border using the theme's border style."""
        width, height = size
        if width < 2 or height < 2:
            return
        tl, tr, bl, br, h, v = _BOX_CHARS.get(self.theme.borders, _BOX_CHARS["simple"])
        x, y = pos
        right, bottom = x + width - 1, y + height - 1
        self.set_cell((x, y), tl)
        self.set_cell((right, y), tr)
        self.set_cell((x, bottom), bl)
        self.set_cell((right, bottom), br)
        self.print_hline((x + 1, y), width - 2, h)
        self.print_hline((x + 1, bottom), width - 2, h)
        self.print_vline((x, y + 1), height - 2, v)
        self.print_vline((right, y + 1), height - 2, v)

    def _put(self, x: int, y: int, char: str, width: int) -> None:
        ax, ay = self.origin.x + x, self.origin.y + y
        clip = self.clip
        if ay < clip.y or ay >= clip.bottom:
            return
        if ax < clip.x or ax + width > clip.right:
            return
        self.surface.put(ax, ay, char, self.style)
