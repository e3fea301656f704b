"""
Command-line interface for termtree.
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

from rich.cells import cell_len
from rich.console import Console
from rich.table import Table

from termtree.backends import HeadlessBackend, available_backends, create_backend
from termtree.config import CONFIG_FILENAME, RuntimeConfig, user_config_path
from termtree.errors import TermtreeError
from termtree.event import KEY_ENTER, KEY_ESCAPE, Char, Event, EventResult, Quit
from termtree.geometry import Vec2
from termtree.logging import remove_handlers, setup_logging
from termtree.printer import Printer
from termtree.runtime import Runtime
from termtree.style import Effect
from termtree.view import Direction, View
from termtree.views import DummyView, LinearLayout, TextView
from termtree.wrapper import named

console = Console()

_BACKEND_NOTES = {
    "ansi": "Raw POSIX terminal (termios, SGR mouse)",
    "curses": "Standard library curses",
    "headless": "In-memory grid, scripted input",
}


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="termtree terminal view-tree runtime",
        prog="termtree",
    )

    # Global options
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output (debug logging)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Demo command
    demo_parser = subparsers.add_parser("demo", help="Run the interactive demo")
    demo_parser.add_argument(
        "-b",
        "--backend",
        help="Backend to use (default: from configuration)",
    )

    # Backends command
    subparsers.add_parser("backends", help="List available backends")

    # Config command with subcommands
    config_parser = subparsers.add_parser("config", help="Configuration management")
    config_subparsers = config_parser.add_subparsers(dest="config_command", help="Config commands")
    config_subparsers.add_parser("show", help="Show current configuration")
    config_init_parser = config_subparsers.add_parser("init", help="Initialize a new config file")
    config_init_parser.add_argument(
        "-o",
        "--output",
        default=CONFIG_FILENAME,
        help="Output file path",
    )
    config_subparsers.add_parser("path", help="Show config file paths")

    args = parser.parse_args(argv)

    # Setup logging based on verbosity
    level = "DEBUG" if getattr(args, "verbose", False) else "WARNING"
    if args.command == "demo":
        # The demo owns the terminal; records only go to the configured log file
        remove_handlers()
    else:
        setup_logging(level)

    try:
        if args.command == "demo":
            return cmd_demo(args)
        if args.command == "backends":
            return cmd_backends(args)
        if args.command == "config":
            return cmd_config(args)
    except TermtreeError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        return 1
    parser.print_help()
    return 0


# ---------------------------------------------------------------------------
# demo
# ---------------------------------------------------------------------------

class DemoButton(View):
    """Focusable one-line label that opens a dialog on Enter."""

    def __init__(self, label: str) -> None:
        self.label = label

    def required_size(self, constraint: Vec2) -> Vec2:
        return Vec2(cell_len(f"< {self.label} >"), 1).min(constraint)

    def draw(self, printer: Printer) -> None:
        if printer.focused:
            printer = printer.with_style(printer.theme.highlight_style()).with_effect(Effect.BOLD)
        printer.print((0, 0), f"< {self.label} >")

    def take_focus(self, direction: Direction) -> bool:
        return True

    def on_event(self, event: Event) -> EventResult:
        if event in (KEY_ENTER, Char(" ")):
            return EventResult.consumed(lambda runtime: _open_dialog(runtime, self.label))
        return EventResult.ignored()


def _open_dialog(runtime: Runtime, label: str) -> None:
    body = LinearLayout.vertical()
    body.add_child(TextView(f" You pressed {label}. "))
    body.add_child(TextView(" Esc or Enter closes this. "))
    runtime.add_layer(body, dismiss_on=[KEY_ESCAPE, KEY_ENTER])


def build_demo(runtime: Runtime) -> None:
    """Populate *runtime* with the demo tree."""
    buttons = LinearLayout.horizontal()
    for label in ("Alpha", "Beta", "Gamma"):
        buttons.add_child(DemoButton(label)).add_child(TextView(" "))

    root = LinearLayout.vertical()
    root.add_child(TextView("termtree demo: Tab moves focus, Enter opens a dialog, q quits"))
    root.add_child(TextView(" "))
    root.add_child(buttons)
    root.add_child(DummyView(), weight=1)
    root.add_child(named("clock", TextView("")))
    runtime.add_layer(root, fullscreen=True)

    def tick(rt: Runtime) -> None:
        rt.call_on_name("clock", lambda view: view.set_content(time.strftime("%H:%M:%S")))

    tick(runtime)
    runtime.add_periodic_callback(1.0, tick)
    runtime.add_global_callback(Char("q"), lambda rt: rt.quit())


def cmd_demo(args: argparse.Namespace) -> int:
    """Run the demo; the headless backend renders one frame to stdout."""
    config = RuntimeConfig.load()
    if getattr(args, "verbose", False):
        config.log_level = "DEBUG"
    name = args.backend or config.backend
    if name == "headless":
        backend = HeadlessBackend(size=(60, 12), events=[Quit()])
    else:
        backend = create_backend(name)

    runtime = Runtime(backend=backend, config=config)
    build_demo(runtime)
    runtime.run()

    if isinstance(backend, HeadlessBackend):
        for line in backend.text_lines():
            console.print(line.rstrip(), markup=False, highlight=False)
    return 0


# ---------------------------------------------------------------------------
# backends
# ---------------------------------------------------------------------------

def cmd_backends(args: argparse.Namespace) -> int:
    """List registered backends."""
    table = Table(title="Available Backends")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    for name in available_backends():
        table.add_row(name, _BACKEND_NOTES.get(name, ""))
    console.print(table)
    return 0


# ---------------------------------------------------------------------------
# config
# ---------------------------------------------------------------------------

def cmd_config(args: argparse.Namespace) -> int:
    """Configuration management commands."""
    if args.config_command == "show":
        return _config_show()
    if args.config_command == "init":
        return _config_init(args.output)
    if args.config_command == "path":
        return _config_path()
    console.print("[yellow]Usage: termtree config <show|init|path>[/yellow]")
    return 1


def _config_show() -> int:
    """Show current configuration."""
    path = RuntimeConfig.find_config()
    if path is None:
        console.print("[dim]No config file found. Using defaults.[/dim]")
    else:
        console.print(f"[dim]Loaded from: {path}[/dim]\n")
    config = RuntimeConfig.load(path)

    console.print("[bold]Current Configuration:[/bold]\n")
    console.print(config.to_yaml(), markup=False, highlight=False)
    return 0


def _config_init(output: str) -> int:
    """Initialize a new config file."""
    output_path = Path(output)
    if output_path.exists():
        console.print(f"[red]File already exists: {output_path}[/red]")
        return 1

    output_path.write_text(RuntimeConfig().to_yaml(), encoding="utf-8")
    console.print(f"[green]Created config file: {output_path}[/green]")
    return 0


def _config_path() -> int:
    """Show config file search paths."""
    console.print("[bold]Config file search paths:[/bold]\n")
    paths = [
        ("Current directory", Path.cwd() / CONFIG_FILENAME),
        ("User config", user_config_path()),
    ]
    for name, path in paths:
        exists = "[green]✓[/green]" if path.exists() else "[dim]·[/dim]"
        console.print(f"  {exists} {name}: {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
