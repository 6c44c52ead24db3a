"""Analyze command implementation.

Shows which entries of a directory use the most space.
"""

from pathlib import Path
from typing import Annotated

import typer

from mole.cli.display import print_header
from mole.core.errors import MoleError
from mole.scanners.disk import analyze_directory, total_size
from mole.utils.formatting import (
    console,
    create_table,
    format_percent,
    format_size,
    print_error,
    print_warning,
)

SHARE_BAR_WIDTH = 20


def _share_bar(size: int, total: int) -> str:
    """Render an entry's share of the total as a bar."""
    filled = int(size / total * SHARE_BAR_WIDTH) if total else 0
    return f"[bar_low]{'█' * filled}[/][muted]{'░' * (SHARE_BAR_WIDTH - filled)}[/]"


def analyze(
    path: Annotated[
        Path | None,
        typer.Argument(
            help="Directory to analyze (default: home directory).",
        ),
    ] = None,
    limit: Annotated[
        int,
        typer.Option(
            "--limit",
            "-n",
            min=1,
            help="Number of entries to show.",
        ),
    ] = 20,
) -> None:
    """Analyze disk usage of a directory.

    Lists the largest entries directly inside the directory with their
    share of the total.

    Examples:
        mo analyze                  # Analyze your home directory
        mo analyze /var --limit 10  # Top 10 entries in /var
    """
    target = (path or Path.home()).expanduser().absolute()
    print_header(f"mole analyze {target}")

    try:
        entries = analyze_directory(target)
    except (MoleError, OSError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if not entries:
        print_warning("Directory is empty.")
        return

    total = total_size(entries)
    table = create_table(f"Largest entries in {target}", "Name", "Size", "Share", "")
    for entry in entries[:limit]:
        name = f"[info]{entry.name}/[/]" if entry.is_dir else entry.name
        share = entry.size_bytes / total * 100 if total else 0.0
        table.add_row(
            name,
            f"[size]{format_size(entry.size_bytes)}[/]",
            format_percent(share),
            _share_bar(entry.size_bytes, total),
        )
    console.print(table)

    shown = min(limit, len(entries))
    console.print(
        f"[bold]Total:[/] [success]{format_size(total)}[/] "
        f"[muted]({shown} of {len(entries)} entries shown)[/]"
    )
