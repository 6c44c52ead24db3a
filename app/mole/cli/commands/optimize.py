"""Optimize command implementation.

Runs system maintenance tasks such as cache rebuilds and journal vacuuming.
"""

from typing import Annotated

import typer

from mole.cli.common import build_runtime
from mole.cli.display import DRY_MARK, print_header, print_outcome
from mole.core.distro import PackageManager, detect_distro
from mole.maintenance.tasks import build_tasks, run_tasks
from mole.utils.formatting import console, print_warning


def optimize(
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-n",
            help="List the tasks without running them.",
        ),
    ] = False,
) -> None:
    """Run system optimization tasks.

    Without sudo only user-level tasks run (thumbnail cache, font cache).
    With sudo, package cache cleaning, orphan removal and journal
    vacuuming are added.

    Examples:
        mo optimize --dry-run   # Show the task list
        sudo mo optimize        # Run all tasks
    """
    runtime = build_runtime()
    package_manager = (
        detect_distro().package_manager if runtime.elevated else PackageManager.UNKNOWN
    )
    tasks = build_tasks(runtime.executor, runtime.config, package_manager)

    print_header("mole optimize")

    if not tasks:
        print_warning("No optimization tasks available.")
        console.print("[muted]Run with sudo for system-level optimizations.[/]")
        return

    console.print("[bold]Optimization tasks:[/]")
    for task in tasks:
        marker = " [muted](sudo)[/]" if task.requires_root else ""
        console.print(f"  {DRY_MARK} [bold]{task.name}[/]{marker}")
        console.print(f"    [muted]{task.description}[/]")
    console.print()

    results = run_tasks(tasks, dry_run=dry_run)
    for result in results:
        print_outcome(result.name, result.success, result.message)

    failures = sum(1 for r in results if r.failed)
    console.print()
    if dry_run:
        console.print("[warning][DRY RUN] No changes were made.[/]")
    elif failures:
        console.print(f"[error]{failures} task(s) failed[/]")
    else:
        console.print("[success]System optimization completed.[/]")

    if not runtime.elevated:
        console.print("[muted]Tip: run with sudo for additional optimizations.[/]")

    if failures:
        raise typer.Exit(code=1)
