"""Tests for the differential renderer."""

from __future__ import annotations

from termtree.backends import HeadlessBackend
from termtree.renderer import Renderer
from termtree.style import PLAIN, Style
from termtree.surface import Surface


class RecordingBackend(HeadlessBackend):
    """Headless backend that also records every print_at call."""

    def __init__(self, size: tuple[int, int]) -> None:
        super().__init__(size=size)
        self.writes: list[tuple[tuple[int, int], str]] = []
        self.clears = 0

    def print_at(self, pos, text, style) -> None:
        self.writes.append((tuple(pos), text))
        super().print_at(pos, text, style)

    def clear(self, style) -> None:
        self.clears += 1
        super().clear(style)


def _surface(lines: list[str]) -> Surface:
    surface = Surface((len(lines[0]), len(lines)))
    for y, line in enumerate(lines):
        for x, char in enumerate(line):
            surface.put(x, y, char, PLAIN)
    return surface


class TestRenderer:
    """Tests for Renderer.present."""

    def test_first_frame_is_full(self) -> None:
        """The first frame clears the screen and writes every row."""
        backend = RecordingBackend((3, 2))
        renderer = Renderer(backend)

        rows = renderer.present(_surface(["abc", "def"]))

        assert rows == 2
        assert backend.clears == 1
        assert backend.flush_count == 1
        assert backend.text_lines() == ["abc", "def"]

    def test_only_changed_rows_are_rewritten(self) -> None:
        """Later frames rewrite only the rows that differ."""
        backend = RecordingBackend((3, 3))
        renderer = Renderer(backend)
        renderer.present(_surface(["abc", "def", "ghi"]))
        backend.writes.clear()

        rows = renderer.present(_surface(["abc", "dXf", "ghi"]))

        assert rows == 1
        assert backend.writes == [((0, 1), "dXf")]
        assert backend.clears == 1
        assert backend.text_lines() == ["abc", "dXf", "ghi"]

    def test_style_change_counts_as_change(self) -> None:
        """A style change alone makes a row dirty."""
        backend = RecordingBackend((2, 1))
        renderer = Renderer(backend)
        renderer.present(_surface(["ab"]))
        styled = _surface(["ab"])
        styled.put(0, 0, "a", Style(fg="red"))

        assert renderer.present(styled) == 1

    def test_identical_frame_is_not_flushed(self) -> None:
        """An unchanged frame sends nothing to the backend."""
        backend = RecordingBackend((2, 1))
        renderer = Renderer(backend)
        renderer.present(_surface(["ab"]))
        assert renderer.present(_surface(["ab"])) == 0
        assert backend.flush_count == 1

    def test_size_change_forces_full_redraw(self) -> None:
        """A new surface size triggers a full redraw."""
        backend = RecordingBackend((3, 2))
        renderer = Renderer(backend)
        renderer.present(_surface(["ab"]))
        renderer.present(_surface(["abc", "def"]))
        assert backend.clears == 2

    def test_invalidate(self) -> None:
        """invalidate() forces the next frame to be full."""
        backend = RecordingBackend((2, 1))
        renderer = Renderer(backend)
        renderer.present(_surface(["ab"]))
        renderer.invalidate()
        assert renderer.previous is None
        assert renderer.present(_surface(["ab"])) == 1

    def test_previous_is_a_copy(self) -> None:
        """previous returns a snapshot, not the live surface."""
        renderer = Renderer(RecordingBackend((2, 1)))
        surface = _surface(["ab"])
        renderer.present(surface)
        snapshot = renderer.previous
        surface.put(0, 0, "z", PLAIN)
        assert snapshot is not None
        assert snapshot.text_lines() == ["ab"]
