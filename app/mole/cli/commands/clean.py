"""Clean command implementation.

Empties user caches and, when running as root, system caches.
"""

from typing import Annotated

import typer

from mole.cli.common import build_runtime
from mole.cli.display import (
    print_dry_run_notice,
    print_header,
    print_outcome,
    print_receipts,
    print_summary,
)
from mole.core.distro import PackageManager, detect_distro
from mole.core.errors import MoleError
from mole.models.scan import CategoryScope, CleanupCategory
from mole.scanners.caches import CacheScanner
from mole.utils.formatting import console, create_table, format_size, print_info, print_warning


def _print_categories(categories: list[CleanupCategory], debug: bool) -> None:
    """Print the cleanup targets found by the scan."""
    columns = ["Category", "Size", "Files"]
    if debug:
        columns.append("Path")
    table = create_table("Cleanup Targets", *columns)
    for category in categories:
        name = category.name
        if category.scope == CategoryScope.SYSTEM:
            name = f"{name} [muted](sudo)[/]"
        row = [name, f"[size]{format_size(category.size_bytes)}[/]", str(category.file_count)]
        if debug:
            row.append(f"[muted]{category.path}[/]")
        table.add_row(*row)
    console.print(table)


def clean(
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-n",
            help="Show what would be deleted without deleting anything.",
        ),
    ] = False,
    debug: Annotated[
        bool,
        typer.Option(
            "--debug",
            help="Show paths and every deleted entry.",
        ),
    ] = False,
) -> None:
    """Clean cache directories to free disk space.

    User caches are always scanned. System caches (package downloads,
    temporary files) are included when running with sudo.

    Examples:
        mo clean --dry-run      # Preview what would be removed
        mo clean                # Remove cached files
        sudo mo clean           # Include system caches
    """
    runtime = build_runtime()
    package_manager = (
        detect_distro().package_manager if runtime.elevated else PackageManager.UNKNOWN
    )

    print_header("mole clean")
    print_info("Scanning cache directories...")

    categories = CacheScanner(runtime.validator, package_manager=package_manager).scan()

    if not categories:
        print_warning("No caches found to clean.")
        return

    _print_categories(categories, debug)
    total = sum(c.size_bytes for c in categories)
    console.print(f"[bold]Total space to free:[/] [success]{format_size(total)}[/]")

    if not runtime.elevated:
        console.print("[muted]Run with sudo to include system caches.[/]")

    freed = 0
    failures = 0
    console.print()
    for category in categories:
        try:
            receipts = runtime.executor.clean_directory_contents(category.path, dry_run=dry_run)
        except (MoleError, OSError) as e:
            failures += 1
            print_outcome(category.name, False, str(e))
            continue

        category_freed = sum(r.bytes_freed for r in receipts if r.success)
        category_failures = sum(1 for r in receipts if r.failed)
        freed += category_freed
        failures += category_failures

        detail = format_size(category_freed)
        if category_failures:
            detail += f", {category_failures} skipped"
        print_outcome(category.name, category_failures == 0, detail)
        if debug:
            print_receipts(receipts)

    if dry_run:
        print_dry_run_notice()
    print_summary(freed, failures, dry_run=dry_run)

    if failures:
        raise typer.Exit(code=1)
