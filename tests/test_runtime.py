"""Tests for the runtime loop."""

from __future__ import annotations

import pytest

from termtree import (
    Char,
    HeadlessBackend,
    Quit,
    Refresh,
    Resize,
    Runtime,
    RuntimeConfig,
    ScreenError,
    TextView,
    Vec2,
)
from termtree.router import DispatchOutcome
from termtree.views import LinearLayout
from termtree.wrapper import named


class TestRendering:
    """Frames reaching the backend."""

    def test_hello_is_centered(self, runtime: Runtime, backend: HeadlessBackend) -> None:
        """A floating text layer is drawn centered and flushed once."""
        runtime.add_layer(TextView("Hello"))
        runtime.refresh()

        assert backend.text_lines()[11][37:42] == "Hello"
        assert backend.flush_count == 1
        assert runtime.screen_size == Vec2(80, 24)

    def test_unchanged_frame_writes_nothing(self, runtime: Runtime, backend: HeadlessBackend) -> None:
        """Refreshing an unchanged screen flushes nothing."""
        runtime.add_layer(TextView("Hello"))
        runtime.refresh()
        runtime.refresh()
        assert backend.flush_count == 1
        assert runtime.renderer.frames == 2

    def test_content_change_is_redrawn(self, runtime: Runtime, backend: HeadlessBackend) -> None:
        """Changed content shows up on the next refresh."""
        text = TextView("Hello")
        runtime.add_fullscreen_layer(text)
        runtime.refresh()
        text.set_content("Bye")
        runtime.refresh()
        assert backend.text_lines()[0].startswith("Bye  ")

    def test_resize_relayouts(self, runtime: Runtime, backend: HeadlessBackend) -> None:
        """A backend resize re-centers floating layers."""
        runtime.add_layer(TextView("Hello"))
        runtime.refresh()
        backend.resize((20, 5))

        assert runtime.step()

        assert runtime.screen_size == Vec2(20, 5)
        assert backend.text_lines()[2][7:12] == "Hello"


class TestLoop:
    """step() and run()."""

    def test_step_dispatches_and_drains(self, runtime: Runtime, backend: HeadlessBackend, make_view) -> None:
        """step dispatches one event and runs the callbacks it produced."""
        calls: list[str] = []
        view = make_view(consume=(Char("x"),), callback=lambda rt: calls.append("x"))
        runtime.add_layer(view)
        backend.push_event(Char("x"))

        assert runtime.step()

        assert runtime.last_outcome is DispatchOutcome.CONSUMED
        assert calls == ["x"]
        assert view.draws == 1

    def test_quit_ends_step(self, runtime: Runtime) -> None:
        """step returns False once quit() has been processed."""
        runtime.quit()
        assert runtime.step() is False

    def test_posted_events_come_first(self, runtime: Runtime, backend: HeadlessBackend) -> None:
        """Posted events are handled before backend input."""
        seen: list[str] = []
        runtime.add_global_callback("a", lambda rt: seen.append("a"))
        runtime.add_global_callback("b", lambda rt: seen.append("b"))
        backend.push_event(Char("a"))
        runtime.post_event(Char("b"))

        runtime.step()
        runtime.step()

        assert seen == ["b", "a"]

    def test_timeout_becomes_refresh(self, runtime: Runtime, make_view) -> None:
        """A poll timeout is delivered as a Refresh event."""
        runtime.config.poll_timeout = 0.5
        view = make_view()
        runtime.add_layer(view)
        runtime.step()
        assert view.events == [Refresh()]

    def test_run_until_script_exhausted(self, backend: HeadlessBackend, clock) -> None:
        """run loops until the headless script ends."""
        running: list[bool] = []
        backend.push_event(Char("x"))
        runtime = Runtime(backend=backend, config=RuntimeConfig(backend="headless"), clock=clock)
        runtime.add_global_callback("x", lambda rt: running.append(rt.is_running))

        runtime.run()

        assert running == [True]
        assert not runtime.is_running
        assert not backend.active

    def test_run_closes_backend_on_error(self, runtime: Runtime, backend: HeadlessBackend) -> None:
        """run closes the backend when a callback raises."""
        def boom(rt: Runtime) -> None:
            raise RuntimeError("boom")

        runtime.add_global_callback("x", boom)
        backend.push_event(Char("x"))

        with pytest.raises(RuntimeError):
            runtime.run()
        assert not backend.active
        assert not runtime.is_running

    def test_resize_event_reaches_views(self, runtime: Runtime, backend: HeadlessBackend, make_view) -> None:
        """A Resize event resizes the runtime and reaches the focused view."""
        view = make_view()
        runtime.add_layer(view)
        runtime.post_event(Resize(Vec2(40, 10)))
        runtime.step()
        assert runtime.screen_size == Vec2(40, 10)
        assert view.events == [Resize(Vec2(40, 10))]


class TestPeriodic:
    """Periodic callbacks driven by the clock."""

    def test_called_once_per_interval(self, runtime: Runtime) -> None:
        """A periodic callback fires once per elapsed interval."""
        ticks: list[int] = []
        runtime.add_periodic_callback(1.0, lambda rt: ticks.append(1))

        runtime.step()
        runtime.step()

        assert len(ticks) == 2

    def test_missed_intervals_catch_up(self, runtime: Runtime, clock) -> None:
        """Each missed interval runs the callback once."""
        ticks: list[int] = []
        runtime.add_periodic_callback(1.0, lambda rt: ticks.append(1))
        clock.advance(3.0)
        runtime.post_event(Refresh())
        runtime.step()
        assert len(ticks) == 3

    def test_remove(self, runtime: Runtime, clock) -> None:
        """A removed periodic callback never fires."""
        ticks: list[int] = []
        handle = runtime.add_periodic_callback(1.0, lambda rt: ticks.append(1))
        assert runtime.remove_periodic_callback(handle)
        assert not runtime.remove_periodic_callback(handle)
        clock.advance(5.0)
        runtime.post_event(Refresh())
        runtime.step()
        assert ticks == []

    def test_interval_must_be_positive(self, runtime: Runtime) -> None:
        """A zero interval is rejected."""
        with pytest.raises(ValueError):
            runtime.add_periodic_callback(0, lambda rt: None)

    def test_fps_registers_refresh_timer(self, backend: HeadlessBackend, clock) -> None:
        """Setting fps bounds the poll wait by the refresh interval."""
        runtime = Runtime(backend=backend, config=RuntimeConfig(backend="headless", fps=10), clock=clock)
        runtime.add_layer(TextView("x"))
        runtime.step()
        assert clock.now == pytest.approx(100.1)


class TestScreens:
    """Multiple screens."""

    def test_add_and_switch(self, runtime: Runtime, backend: HeadlessBackend) -> None:
        """Layers go to the active screen, and switching shows the other screen."""
        runtime.add_layer(TextView("first"))
        second = runtime.add_screen()
        assert runtime.screen_ids() == [0, second]
        assert runtime.active_screen_id == 0

        runtime.set_screen(second)
        runtime.add_layer(TextView("second"))
        runtime.refresh()

        assert "second" in backend.text_lines()[11]
        assert len(runtime.screen()) == 1

    def test_unknown_screen(self, runtime: Runtime) -> None:
        """Unknown screen ids raise ScreenError."""
        with pytest.raises(ScreenError):
            runtime.set_screen(42)
        with pytest.raises(ScreenError):
            runtime.remove_screen(42)

    def test_cannot_remove_active_screen(self, runtime: Runtime) -> None:
        """The active screen cannot be removed; others can."""
        with pytest.raises(ScreenError):
            runtime.remove_screen(0)
        other = runtime.add_screen()
        runtime.remove_screen(other)
        assert runtime.screen_ids() == [0]


class TestNames:
    """Name lookups."""

    def test_call_on_name(self, runtime: Runtime) -> None:
        """call_on_name returns the callback result, or None for no match."""
        runtime.add_layer(LinearLayout.vertical([named("status", TextView("idle"))]))

        result = runtime.call_on_name("status", lambda view: view.content)

        assert result == "idle"
        assert runtime.call_on_name("missing", lambda view: view.content) is None

    def test_focus_name(self, runtime: Runtime, make_view) -> None:
        """focus_name focuses the named view in the top layer."""
        runtime.add_layer(LinearLayout.vertical([make_view("a"), named("target", make_view("b"))]))
        assert runtime.focus_name("target")
        assert runtime.focus_path == (0, 1)
        assert not runtime.focus_name("missing")

    def test_set_focus_path(self, runtime: Runtime, make_view) -> None:
        """A path to an unfocusable view is refused."""
        runtime.add_layer(LinearLayout.vertical([make_view("a"), make_view("b", focusable=False)]))
        assert not runtime.set_focus_path((0, 1))
        assert runtime.focus_path == (0, 0)

    def test_set_focus_path_below_top_layer(self, runtime: Runtime, make_view) -> None:
        """A path into a layer below the top is refused."""
        runtime.add_layer(LinearLayout.vertical([make_view("a"), make_view("b")]))
        runtime.add_layer(make_view("dialog"))
        assert not runtime.set_focus_path((0, 1))
        assert runtime.focus_path == (1,)
        assert runtime.set_focus_path((1,))

    def test_pop_layer(self, runtime: Runtime) -> None:
        """pop_layer returns the popped root, or None when empty."""
        text = TextView("x")
        runtime.add_layer(text)
        assert runtime.pop_layer() is text
        assert runtime.pop_layer() is None


def test_quit_event_from_backend(runtime: Runtime, backend: HeadlessBackend) -> None:
    """A Quit event from the backend ends the loop."""
    backend.push_event(Quit())
    assert runtime.step() is False
