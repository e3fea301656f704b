"""Shared pytest fixtures for termtree tests."""

from __future__ import annotations

import pytest

from termtree import (
    Direction,
    Event,
    EventResult,
    HeadlessBackend,
    Printer,
    Runtime,
    RuntimeConfig,
    Vec2,
    View,
)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingView(View):
    """
    Leaf view that records what the runtime does to it.

    Accepts focus when *focusable* is set and consumes the events listed
    in *consume*, optionally returning *callback* with them.
    """

    def __init__(
        self,
        label: str = "view",
        size: tuple[int, int] = (4, 1),
        focusable: bool = True,
        consume: tuple[Event, ...] = (),
        callback=None,
    ) -> None:
        self.label = label
        self.fixed = Vec2(*size)
        self.focusable = focusable
        self.consume = consume
        self.callback = callback
        self.events: list[Event] = []
        self.layouts: list[Vec2] = []
        self.draws = 0
        self.drawn_focused = False

    def required_size(self, constraint: Vec2) -> Vec2:
        return self.fixed.min(constraint)

    def layout(self, size: Vec2) -> None:
        super().layout(size)
        self.layouts.append(size)

    def draw(self, printer: Printer) -> None:
        self.draws += 1
        self.drawn_focused = printer.focused
        printer.print((0, 0), self.label)

    def take_focus(self, direction: Direction) -> bool:
        return self.focusable

    def on_event(self, event: Event) -> EventResult:
        self.events.append(event)
        if event in self.consume:
            return EventResult.consumed(self.callback)
        return EventResult.ignored()

    def __repr__(self) -> str:
        return f"RecordingView({self.label!r})"


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def backend(clock: FakeClock) -> HeadlessBackend:
    """Headless 80x24 backend whose idle waits advance the fake clock."""
    return HeadlessBackend(size=(80, 24), idle=clock.advance)


@pytest.fixture
def runtime(backend: HeadlessBackend, clock: FakeClock) -> Runtime:
    return Runtime(backend=backend, config=RuntimeConfig(backend="headless"), clock=clock)


@pytest.fixture
def make_view():
    """Factory for :class:`RecordingView` instances."""
    return RecordingView
