"""Tests for runtime configuration."""

from __future__ import annotations

from pathlib import Path
from textwrap import dedent

import pytest

from termtree.config import ENV_BACKEND, ENV_FPS, ENV_LOG_LEVEL, RuntimeConfig
from termtree.errors import ConfigError


class TestRuntimeConfig:
    """Tests for RuntimeConfig."""

    def test_defaults(self) -> None:
        """A fresh config uses the ansi backend with no timers or overrides."""
        config = RuntimeConfig()
        assert config.backend == "ansi"
        assert config.fps is None
        assert config.poll_interval is None
        assert config.focus_wrap is True
        assert config.keybindings == {}

    def test_poll_interval(self) -> None:
        """poll_interval is the reciprocal of fps."""
        assert RuntimeConfig(fps=4).poll_interval == 0.25

    def test_validation(self) -> None:
        """Values no runtime can use are rejected at construction."""
        with pytest.raises(ConfigError):
            RuntimeConfig(fps=0)
        with pytest.raises(ConfigError):
            RuntimeConfig(backend="")
        with pytest.raises(ConfigError):
            RuntimeConfig(poll_timeout=-1)
        with pytest.raises(ConfigError):
            RuntimeConfig(log_level="LOUD")


class TestFromDict:
    """Tests for building configs from mappings."""

    def test_from_yaml_string(self) -> None:
        """YAML values are parsed, with single keys wrapped into lists."""
        config = RuntimeConfig.from_yaml_string(dedent("""
            backend: headless
            fps: 10
            focus_wrap: false
            keybindings:
              quit: ctrl+q
              focus_next: [tab, down]
            log_level: debug
        """))

        assert config.backend == "headless"
        assert config.fps == 10.0
        assert config.focus_wrap is False
        assert config.keybindings == {"quit": ["ctrl+q"], "focus_next": ["tab", "down"]}
        assert config.log_level == "DEBUG"

    def test_empty_yaml(self) -> None:
        """An empty document gives the defaults."""
        assert RuntimeConfig.from_yaml_string("") == RuntimeConfig()

    def test_unknown_key(self) -> None:
        """Unknown keys are named in the error."""
        with pytest.raises(ConfigError, match="colour"):
            RuntimeConfig.from_dict({"colour": "red"})

    def test_bad_value(self) -> None:
        """A value of the wrong type raises ConfigError."""
        with pytest.raises(ConfigError):
            RuntimeConfig.from_dict({"fps": "fast"})

    def test_invalid_yaml(self) -> None:
        """Malformed YAML raises ConfigError."""
        with pytest.raises(ConfigError):
            RuntimeConfig.from_yaml_string("backend: [unclosed")

    def test_paths_are_expanded(self) -> None:
        """A leading ~ in a path is expanded."""
        config = RuntimeConfig.from_dict({"theme": "~/themes/x.yaml"})
        assert config.theme is not None
        assert "~" not in str(config.theme)

    def test_to_yaml_round_trip(self) -> None:
        """to_yaml output loads back to an equal config."""
        config = RuntimeConfig(backend="curses", fps=5, keybindings={"quit": ["f10"]})
        assert RuntimeConfig.from_yaml_string(config.to_yaml()) == config


class TestLoading:
    """Tests for file discovery and environment overrides."""

    def test_from_yaml_file(self, tmp_path: Path) -> None:
        """A config file on disk is loaded."""
        path = tmp_path / "termtree.yaml"
        path.write_text("backend: curses\n")
        assert RuntimeConfig.from_yaml(path).backend == "curses"

    def test_from_missing_file(self, tmp_path: Path) -> None:
        """A missing file raises ConfigError."""
        with pytest.raises(ConfigError):
            RuntimeConfig.from_yaml(tmp_path / "absent.yaml")

    def test_find_config_in_cwd(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """termtree.yaml in the start directory is found."""
        monkeypatch.setenv("HOME", str(tmp_path / "home"))
        path = tmp_path / "termtree.yaml"
        path.write_text("backend: headless\n")
        assert RuntimeConfig.find_config(tmp_path) == path

    def test_find_config_none(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """find_config returns None when no file exists."""
        monkeypatch.setenv("HOME", str(tmp_path / "home"))
        assert RuntimeConfig.find_config(tmp_path) is None

    def test_with_env(self) -> None:
        """TERMTREE_* variables override file values."""
        env = {ENV_BACKEND: "headless", ENV_FPS: "30", ENV_LOG_LEVEL: "info"}
        config = RuntimeConfig(backend="ansi").with_env(env)
        assert config.backend == "headless"
        assert config.fps == 30.0
        assert config.log_level == "INFO"

    def test_with_env_ignores_empty(self) -> None:
        """An empty variable does not override anything."""
        config = RuntimeConfig(backend="curses").with_env({ENV_BACKEND: ""})
        assert config.backend == "curses"

    def test_load_applies_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """load() reads the file and then applies the environment."""
        path = tmp_path / "termtree.yaml"
        path.write_text("backend: curses\nfps: 2\n")
        monkeypatch.setenv(ENV_BACKEND, "headless")
        monkeypatch.delenv(ENV_FPS, raising=False)

        config = RuntimeConfig.load(path)

        assert config.backend == "headless"
        assert config.fps == 2.0
