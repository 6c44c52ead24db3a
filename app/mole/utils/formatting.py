"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

from __future__ import annotations

import sys

from rich.console import Console
from rich.table import Table

from mole.core.theme import get_theme

_SIZE_UNITS = ("B", "KiB", "MiB", "GiB", "TiB")


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())


def format_size(size_bytes: int) -> str:
    """Format a byte count using binary units.

    Args:
        size_bytes: Number of bytes (negative values are treated as 0).

    Returns:
        Human-readable size such as "0 B", "512 B", "1.5 KiB" or "2 GiB".
    """
    value = float(max(size_bytes, 0))
    unit = _SIZE_UNITS[0]
    for unit in _SIZE_UNITS:
        if value < 1024 or unit == _SIZE_UNITS[-1]:
            break
        value /= 1024

    if unit == "B":
        return f"{int(value)} B"
    text = f"{value:.1f}".removesuffix(".0")
    return f"{text} {unit}"


def format_percent(value: float) -> str:
    """Format a percentage with usage-level coloring."""
    if value >= 90:
        style = "bar_high"
    elif value >= 70:
        style = "bar_medium"
    else:
        style = "bar_low"
    return f"[{style}]{value:.1f}%[/]"


def create_table(title: str, *columns: str) -> Table:
    """Create a pre-configured table with the shared header and border styles.

    Args:
        title: Table title.
        *columns: Column headers, added in order with default styling.

    Returns:
        Rich Table ready for rows.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
        row_styles=["", "on grey7"],  # Zebra striping for readability
    )
    for column in columns:
        table.add_column(column)
    return table


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")
