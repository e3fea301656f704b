"""Tests for CLI commands."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from termtree.backends import HeadlessBackend
from termtree.cli import DemoButton, build_demo, main
from termtree.config import RuntimeConfig
from termtree.event import KEY_ENTER, KEY_ESCAPE, Char
from termtree.logging import get_logger
from termtree.router import DispatchOutcome
from termtree.runtime import Runtime


@pytest.fixture
def isolated(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run with an empty working directory and home."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    for name in ("TERMTREE_BACKEND", "TERMTREE_FPS", "TERMTREE_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


class TestMain:
    """Tests for argument handling."""

    def test_no_command_prints_help(self, capsys) -> None:
        """Without a subcommand the usage text is printed."""
        assert main([]) == 0
        assert "usage" in capsys.readouterr().out.lower()

    def test_backends(self, capsys) -> None:
        """The backends command lists the registered backends."""
        assert main(["backends"]) == 0
        out = capsys.readouterr().out
        assert "headless" in out
        assert "ansi" in out

    def test_unknown_backend_is_reported(self, isolated: Path, capsys) -> None:
        """An unknown backend name is reported and exits with 1."""
        assert main(["demo", "--backend", "teletype"]) == 1
        assert "Unknown backend" in capsys.readouterr().out


class TestConfigCommand:
    """Tests for the config subcommands."""

    def test_init_writes_file(self, isolated: Path) -> None:
        """config init writes a file holding the defaults."""
        target = isolated / "out.yaml"
        assert main(["config", "init", "-o", str(target)]) == 0
        assert RuntimeConfig.from_yaml(target) == RuntimeConfig()

    def test_init_refuses_overwrite(self, isolated: Path) -> None:
        """config init leaves an existing file untouched."""
        target = isolated / "out.yaml"
        target.write_text("backend: curses\n")
        assert main(["config", "init", "-o", str(target)]) == 1
        assert target.read_text() == "backend: curses\n"

    def test_show_uses_local_file(self, isolated: Path, capsys) -> None:
        """config show reads termtree.yaml from the working directory."""
        (isolated / "termtree.yaml").write_text("backend: curses\n")
        assert main(["config", "show"]) == 0
        assert "backend: curses" in capsys.readouterr().out

    def test_invalid_config_is_reported(self, isolated: Path, capsys) -> None:
        """An unknown key in the config file is reported as an error."""
        (isolated / "termtree.yaml").write_text("colour: red\n")
        assert main(["config", "show"]) == 1
        assert "colour" in capsys.readouterr().out

    def test_path(self, isolated: Path, capsys) -> None:
        """config path lists the search paths."""
        assert main(["config", "path"]) == 0
        assert "Config file search paths" in capsys.readouterr().out

    def test_missing_subcommand(self, isolated: Path) -> None:
        """config without a subcommand fails."""
        assert main(["config"]) == 1


class TestDemo:
    """Tests for the demo application."""

    def test_headless_demo_prints_frame(self, isolated: Path, capsys) -> None:
        """The headless demo prints its first frame to stdout."""
        assert main(["demo", "--backend", "headless"]) == 0
        out = capsys.readouterr().out
        assert "termtree demo" in out
        assert "< Alpha >" in out

    def test_demo_keeps_logs_off_the_terminal(self, isolated: Path, capsys) -> None:
        """Log records must not be written over the demo's screen."""
        main(["backends"])
        assert main(["demo", "--backend", "headless"]) == 0
        capsys.readouterr()

        handlers = logging.getLogger("termtree").handlers
        assert all(isinstance(handler, logging.NullHandler) for handler in handlers)
        get_logger("layout").warning("layout does not fit")
        assert "layout does not fit" not in capsys.readouterr().err

    def test_button_opens_dismissable_dialog(self, clock) -> None:
        """Enter on a button opens a dialog that Escape dismisses."""
        backend = HeadlessBackend(size=(60, 12))
        runtime = Runtime(backend=backend, config=RuntimeConfig(backend="headless"), clock=clock)
        build_demo(runtime)
        screen = runtime.screen()

        assert isinstance(screen.focused_view(), DemoButton)
        runtime.post_event(KEY_ENTER)
        runtime.step()
        assert runtime.last_outcome is DispatchOutcome.CONSUMED
        assert len(screen) == 2
        assert any("You pressed Alpha" in line for line in backend.text_lines())

        runtime.post_event(KEY_ESCAPE)
        runtime.step()
        assert len(screen) == 1

    def test_q_quits(self, clock) -> None:
        """Pressing q ends the demo loop."""
        runtime = Runtime(backend=HeadlessBackend(), config=RuntimeConfig(backend="headless"), clock=clock)
        build_demo(runtime)
        runtime.post_event(Char("q"))
        runtime.step()
        assert runtime.step() is False
