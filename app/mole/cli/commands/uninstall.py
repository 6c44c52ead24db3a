"""Uninstall command implementation.

Removes an application through its package manager, then cleans up the
configuration, cache and data files it left behind.
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
from mole.core.errors import MoleError
from mole.maintenance.uninstall import requires_root, uninstall_app
from mole.models.scan import InstalledApp
from mole.scanners.apps import AppScanner
from mole.utils.formatting import (
    console,
    create_table,
    format_size,
    print_error,
    print_info,
    print_warning,
)


def _print_apps(apps: list[InstalledApp]) -> None:
    """Print installed applications as a table."""
    table = create_table("Installed Applications", "Name", "Type", "Version", "Size")
    for app in apps:
        size = format_size(app.size_bytes) if app.size_bytes is not None else "-"
        table.add_row(
            app.label,
            f"[muted]{app.app_type.value}[/]",
            f"[muted]{app.version or '-'}[/]",
            f"[size]{size}[/]",
        )
    console.print(table)
    console.print(f"[bold]{len(apps)}[/] applications installed")


def uninstall(
    name: Annotated[
        str | None,
        typer.Argument(
            help="Package name, flatpak ID or application name to remove.",
        ),
    ] = None,
    list_only: Annotated[
        bool,
        typer.Option(
            "--list",
            "-l",
            help="List installed applications and exit.",
        ),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-n",
            help="Show what would be removed without changing anything.",
        ),
    ] = False,
    keep_leftovers: Annotated[
        bool,
        typer.Option(
            "--keep-leftovers",
            help="Do not remove configuration, cache and data files.",
        ),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Skip confirmation prompt and proceed.",
        ),
    ] = False,
) -> None:
    """Uninstall an application and remove its leftover files.

    Examples:
        mo uninstall --list             # List installed applications
        mo uninstall firefox --dry-run  # Preview removal
        sudo mo uninstall vlc           # Remove a deb package and leftovers
    """
    runtime = build_runtime()
    scanner = AppScanner()

    print_header("mole uninstall")

    if list_only or name is None:
        try:
            apps = scanner.scan()
        except MoleError as e:
            print_error(str(e))
            raise typer.Exit(code=1) from e
        if not apps:
            print_warning("No installed applications found.")
            return
        _print_apps(apps)
        return

    try:
        app = scanner.find(name)
    except MoleError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if app is None:
        print_error(f"Application not found: {name}")
        raise typer.Exit(code=1)

    if requires_root(app) and not runtime.elevated and not dry_run:
        print_error(f"Removing {app.app_type.value} packages requires sudo.")
        raise typer.Exit(code=1)

    console.print(f"Uninstalling [bold]{app.label}[/] [muted]({app.app_type.value})[/]")
    if not dry_run and not yes and not typer.confirm(f"Remove {app.label}?", default=False):
        print_info("Aborted.")
        raise typer.Exit(code=0)

    report = uninstall_app(
        app,
        runtime.executor,
        dry_run=dry_run,
        remove_leftovers=not keep_leftovers,
    )

    print_outcome(app.label, report.removed, report.message)
    if report.leftovers:
        console.print(f"  [info]→[/] Found {len(report.leftovers)} leftover locations")
        print_receipts(report.leftovers)
    elif not keep_leftovers and report.removed:
        console.print("  [muted]No leftovers found.[/]")

    failures = sum(1 for r in report.leftovers if r.failed) + (0 if report.removed else 1)
    if dry_run:
        print_dry_run_notice()
    print_summary(report.bytes_freed, failures, dry_run=dry_run)

    if report.has_failures:
        raise typer.Exit(code=1)
