"""
Runtime configuration.

Provides a configuration object that can be loaded from YAML files,
overridden from the environment or constructed programmatically.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from termtree.errors import ConfigError

ENV_BACKEND = "TERMTREE_BACKEND"
ENV_FPS = "TERMTREE_FPS"
ENV_LOG_LEVEL = "TERMTREE_LOG_LEVEL"

CONFIG_FILENAME = "termtree.yaml"


def user_config_path() -> Path:
    """Location of the per-user configuration file."""
    return Path.home() / ".config" / "termtree" / "config.yaml"


@dataclass
class RuntimeConfig:
    """
    Settings of a :class:`~termtree.runtime.Runtime`.

    Example YAML:
        backend: curses
        fps: 10
        focus_wrap: false
        theme: ~/.config/termtree/themes/solarized.yaml
        keybindings:
          quit: [ctrl+q, f10]
        log_level: DEBUG
        log_file: /tmp/termtree.log
    """

    backend: str = "ansi"  # Name in the backend registry
    fps: float | None = None  # Automatic refresh rate, None = off
    poll_timeout: float | None = None  # Longest wait for input, None = block
    focus_wrap: bool = True  # Focus navigation wraps at either end
    strict_layout: bool = False  # Raise LayoutError instead of warning
    theme: Path | None = None  # Theme file, None = built-in classic theme
    keybindings: dict[str, list[str]] = field(default_factory=dict)  # Per-action overrides
    log_level: str = "WARNING"
    log_file: Path | None = None  # Log destination while a terminal backend runs

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Raise :class:`ConfigError` for values no runtime can use."""
        if not self.backend:
            raise ConfigError("backend must not be empty")
        if self.fps is not None and self.fps <= 0:
            raise ConfigError(f"fps must be positive, got {self.fps!r}")
        if self.poll_timeout is not None and self.poll_timeout < 0:
            raise ConfigError(f"poll_timeout must not be negative, got {self.poll_timeout!r}")
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ConfigError(f"Unknown log level {self.log_level!r}")
        if not isinstance(self.keybindings, dict):
            raise ConfigError("keybindings must be a mapping of action to key list")

    @property
    def poll_interval(self) -> float | None:
        """Seconds between automatic refreshes, derived from :attr:`fps`."""
        return 1.0 / self.fps if self.fps else None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RuntimeConfig:
        """Create config from a dictionary."""
        if not isinstance(data, dict):
            raise ConfigError("Configuration must be a mapping")
        unknown = set(data) - {f for f in cls.__dataclass_fields__}
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

        keybindings = {}
        for action, keys in (data.get("keybindings") or {}).items():
            keybindings[str(action)] = [keys] if isinstance(keys, str) else list(keys)

        try:
            return cls(
                backend=str(data.get("backend", "ansi")),
                fps=_optional_float(data.get("fps")),
                poll_timeout=_optional_float(data.get("poll_timeout")),
                focus_wrap=bool(data.get("focus_wrap", True)),
                strict_layout=bool(data.get("strict_layout", False)),
                theme=Path(data["theme"]).expanduser() if data.get("theme") else None,
                keybindings=keybindings,
                log_level=str(data.get("log_level", "WARNING")).upper(),
                log_file=Path(data["log_file"]).expanduser() if data.get("log_file") else None,
            )
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid configuration: {exc}") from exc

    @classmethod
    def from_yaml(cls, path: Path) -> RuntimeConfig:
        """Load config from a YAML file."""
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigError(f"Cannot load configuration from {path}: {exc}") from exc
        return cls.from_dict(data or {})

    @classmethod
    def from_yaml_string(cls, content: str) -> RuntimeConfig:
        """Load config from a YAML string."""
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML configuration: {exc}") from exc
        return cls.from_dict(data or {})

    @classmethod
    def load(cls, path: Path | None = None) -> RuntimeConfig:
        """
        Load the configuration in effect.

        Reads *path*, or the first file :meth:`find_config` finds, or
        starts from defaults; environment overrides are applied last.
        """
        path = path or cls.find_config()
        config = cls.from_yaml(path) if path is not None else cls()
        return config.with_env()

    @staticmethod
    def find_config(cwd: Path | None = None) -> Path | None:
        """Search ``./termtree.yaml`` then the per-user config file."""
        candidates = [(cwd or Path.cwd()) / CONFIG_FILENAME, user_config_path()]
        return next((p for p in candidates if p.is_file()), None)

    def with_env(self, environ: dict[str, str] | None = None) -> RuntimeConfig:
        """Return a copy with ``TERMTREE_*`` environment overrides applied."""
        env = os.environ if environ is None else environ
        data = self.to_dict()
        if env.get(ENV_BACKEND):
            data["backend"] = env[ENV_BACKEND]
        if env.get(ENV_FPS):
            data["fps"] = env[ENV_FPS]
        if env.get(ENV_LOG_LEVEL):
            data["log_level"] = env[ENV_LOG_LEVEL]
        return RuntimeConfig.from_dict(data)

    def to_dict(self) -> dict[str, Any]:
        """Convert config to a dictionary."""
        return {
            "backend": self.backend,
            "fps": self.fps,
            "poll_timeout": self.poll_timeout,
            "focus_wrap": self.focus_wrap,
            "strict_layout": self.strict_layout,
            "theme": str(self.theme) if self.theme else None,
            "keybindings": {action: list(keys) for action, keys in self.keybindings.items()},
            "log_level": self.log_level,
            "log_file": str(self.log_file) if self.log_file else None,
        }

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.to_dict(), sort_keys=False)


def _optional_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    return float(value)
