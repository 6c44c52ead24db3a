"""Interactive main menu.

The menu only collects a MenuSelection; the chosen command runs after
the menu has returned, through dispatch_selection().
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from mole.cli.commands import analyze, clean, optimize, purge, status
from mole.utils.formatting import console as default_console


class CommandKind(str, Enum):
    """Commands reachable from the menu."""

    CLEAN = "clean"
    ANALYZE = "analyze"
    STATUS = "status"
    PURGE = "purge"
    OPTIMIZE = "optimize"


@dataclass(frozen=True, slots=True)
class MenuItem:
    """One menu entry."""

    kind: CommandKind
    name: str
    description: str
    shortcut: str


@dataclass(frozen=True, slots=True)
class MenuSelection:
    """A command chosen from the menu, with its options.

    Attributes:
        kind: Command to run.
        dry_run: Whether to preview instead of deleting.
        path: Directory for analyze.
        paths: Comma-separated directories for purge.
    """

    kind: CommandKind
    dry_run: bool = False
    path: Path | None = None
    paths: str | None = None


MENU_ITEMS: tuple[MenuItem, ...] = (
    MenuItem(CommandKind.CLEAN, "Clean", "Free up disk space by cleaning caches", "1"),
    MenuItem(CommandKind.ANALYZE, "Analyze", "Explore disk usage", "2"),
    MenuItem(CommandKind.STATUS, "Status", "Monitor system health in real time", "3"),
    MenuItem(CommandKind.PURGE, "Purge", "Clean development project artifacts", "4"),
    MenuItem(CommandKind.OPTIMIZE, "Optimize", "Run system maintenance tasks", "5"),
)

QUIT_KEY = "q"

# Commands that delete files and offer a preview first
_DESTRUCTIVE: frozenset[CommandKind] = frozenset(
    {CommandKind.CLEAN, CommandKind.PURGE, CommandKind.OPTIMIZE}
)


def render_menu() -> Panel:
    """Render the menu entries as a panel."""
    table = Table.grid(padding=(0, 2))
    table.add_column(style="warning")
    table.add_column(style="bold")
    table.add_column(style="muted")
    for item in MENU_ITEMS:
        table.add_row(escape(f"[{item.shortcut}]"), item.name, item.description)
    table.add_row(escape(f"[{QUIT_KEY}]"), "Quit", "")
    return Panel(
        table,
        title="[title]mole[/]",
        subtitle="[muted]Deep clean and optimize your Linux system[/]",
        border_style="border",
    )


def run_menu(console: Console | None = None) -> MenuSelection | None:
    """Show the menu and ask for a command.

    Args:
        console: Console to prompt on.

    Returns:
        The selection, or None if the user quit.
    """
    console = console or default_console
    console.print(render_menu())

    choices = [item.shortcut for item in MENU_ITEMS] + [QUIT_KEY]
    answer = Prompt.ask("Select an action", choices=choices, default=QUIT_KEY, console=console)
    if answer == QUIT_KEY:
        return None

    item = next(item for item in MENU_ITEMS if item.shortcut == answer)
    return _ask_options(item.kind, console)


def _ask_options(kind: CommandKind, console: Console) -> MenuSelection:
    """Ask the follow-up questions for a command."""
    if kind == CommandKind.ANALYZE:
        raw = Prompt.ask("Directory to analyze", default=str(Path.home()), console=console)
        return MenuSelection(kind=kind, path=Path(raw).expanduser())

    paths: str | None = None
    if kind == CommandKind.PURGE:
        raw = Prompt.ask(
            "Directories to scan (comma-separated, empty for configured paths)",
            default="",
            console=console,
        )
        paths = raw.strip() or None

    dry_run = False
    if kind in _DESTRUCTIVE:
        dry_run = Confirm.ask("Preview only (dry run)?", default=True, console=console)

    return MenuSelection(kind=kind, dry_run=dry_run, paths=paths)


def dispatch_selection(selection: MenuSelection) -> None:
    """Run the command described by a menu selection.

    Args:
        selection: Selection returned by run_menu().

    Raises:
        typer.Exit: Propagated from the command (exit code 1 on failures).
    """
    if selection.kind == CommandKind.CLEAN:
        clean.clean(dry_run=selection.dry_run, debug=False)
    elif selection.kind == CommandKind.ANALYZE:
        analyze.analyze(path=selection.path, limit=20)
    elif selection.kind == CommandKind.STATUS:
        status.status()
    elif selection.kind == CommandKind.PURGE:
        purge.purge(paths=selection.paths, dry_run=selection.dry_run, include_recent=False)
    elif selection.kind == CommandKind.OPTIMIZE:
        optimize.optimize(dry_run=selection.dry_run)
