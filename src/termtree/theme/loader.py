"""Theme loading, validation and discovery."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from termtree.errors import ConfigError
from termtree.style import is_color
from termtree.theme.defaults import get_default_theme
from termtree.theme.models import ALL_COLOR_KEYS, ThemeInfo

_BORDER_STYLES = ("simple", "heavy", "none")


def validate_theme(data: Any) -> list[str]:
    """Validate raw theme data.

    Returns a list of error messages (empty if valid).
    """
    if not isinstance(data, dict):
        return ["Theme must be a mapping"]

    errors: list[str] = []
    variables = data.get("variables", {})
    if not isinstance(variables, dict):
        errors.append("'variables' must be a mapping")
        variables = {}

    for var, value in variables.items():
        if not isinstance(value, str) or not is_color(value):
            errors.append(f"Invalid color for variable '{var}': {value}")

    colors = data.get("colors", {})
    if not isinstance(colors, dict):
        errors.append("'colors' must be a mapping")
        colors = {}

    for key, value in colors.items():
        if key not in ALL_COLOR_KEYS:
            errors.append(f"Unknown palette role: '{key}'")
        if not isinstance(value, str):
            errors.append(f"Color for '{key}' must be a string, got: {type(value).__name__}")
        elif value not in variables and value not in colors and not is_color(value):
            errors.append(f"Invalid color for '{key}': {value}")

    borders = data.get("borders", "simple")
    if borders not in _BORDER_STYLES:
        errors.append(f"'borders' must be one of {', '.join(_BORDER_STYLES)}")
    return errors


def theme_from_dict(data: dict[str, Any], name: str = "untitled") -> ThemeInfo:
    """Build a theme from parsed data, starting from the classic palette.

    A color value may name an entry of ``variables`` or another palette
    role; both are resolved before the theme is returned.
    """
    errors = validate_theme(data)
    if errors:
        raise ConfigError(f"Invalid theme {name!r}: " + "; ".join(errors))

    theme = get_default_theme()
    variables: dict[str, str] = data.get("variables", {})
    raw_colors: dict[str, str] = data.get("colors", {})

    for key, value in raw_colors.items():
        if value in variables:
            theme.colors[key] = variables[value]
        elif value in raw_colors and value != key:
            # Reference to another role, possibly through a variable
            ref = raw_colors[value]
            theme.colors[key] = variables.get(ref, ref)
        else:
            theme.colors[key] = value

    theme.name = data.get("name", name)
    theme.description = data.get("description", "")
    theme.author = data.get("author", "")
    theme.shadow = bool(data.get("shadow", theme.shadow))
    theme.borders = data.get("borders", theme.borders)
    return theme


def load_theme(path: Path) -> ThemeInfo:
    """Load a theme from a JSON or YAML file."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read theme file {path}: {exc}") from exc

    try:
        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(text) or {}
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Cannot parse theme file {path}: {exc}") from exc

    return theme_from_dict(data, name=path.stem)


def discover_themes(
    user_dir: Path | None = None,
    project_dir: Path | None = None,
) -> list[Path]:
    """Discover theme files from standard directories.

    Search paths:
    - ``~/.config/termtree/themes/``
    - ``.termtree/themes/``
    """
    theme_files: list[Path] = []
    dirs = [
        user_dir or (Path.home() / ".config" / "termtree" / "themes"),
        project_dir or (Path.cwd() / ".termtree" / "themes"),
    ]
    for d in dirs:
        if d.is_dir():
            for f in sorted(d.iterdir()):
                if f.is_file() and f.suffix in (".json", ".yaml", ".yml"):
                    theme_files.append(f)
    return theme_files
