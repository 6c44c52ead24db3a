"""Purge command implementation.

Finds and removes build artifacts in project directories.
"""

from pathlib import Path
from typing import Annotated

import typer

from mole.cli.common import build_runtime
from mole.cli.display import (
    print_dry_run_notice,
    print_header,
    print_outcome,
    print_summary,
)
from mole.models.scan import FoundArtifact
from mole.scanners.artifacts import ArtifactScanner
from mole.utils.formatting import console, create_table, format_size, print_info, print_warning


def parse_paths(value: str | None) -> list[Path] | None:
    """Split a comma-separated path list.

    Args:
        value: Raw option value, e.g. ``"~/code,~/work"``.

    Returns:
        Expanded absolute paths, relative ones taken from the current
        directory, or None if no value was given.
    """
    if value is None:
        return None
    parts = [part.strip() for part in value.split(",")]
    return [Path(part).expanduser().absolute() for part in parts if part]


def _format_age(days: int) -> str:
    """Format an artifact age."""
    if days == 0:
        return "Today"
    if days == 1:
        return "1 day"
    return f"{days} days"


def _print_artifacts(artifacts: list[FoundArtifact], skip_recent_days: int) -> None:
    """Print found artifacts, marking the selected ones."""
    table = create_table("Build Artifacts", "", "Project", "Type", "Size", "Age")
    for artifact in artifacts:
        marker = "[selected]●[/]" if artifact.selected else "[muted]○[/]"
        age_style = "warning" if artifact.age_days <= skip_recent_days else "muted"
        table.add_row(
            marker,
            f"[bold]{artifact.project_name}[/]",
            f"[muted]{artifact.artifact_type}[/]",
            f"[size]{format_size(artifact.size_bytes)}[/]",
            f"[{age_style}]{_format_age(artifact.age_days)}[/]",
        )
    console.print(table)


def purge(
    paths: Annotated[
        str | None,
        typer.Option(
            "--paths",
            "-p",
            help="Comma-separated directories to scan (default: configured project paths).",
        ),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-n",
            help="Show what would be deleted without deleting anything.",
        ),
    ] = False,
    include_recent: Annotated[
        bool,
        typer.Option(
            "--all",
            "-a",
            help="Also remove recently modified artifacts.",
        ),
    ] = False,
) -> None:
    """Remove build artifacts such as node_modules and target directories.

    Artifacts modified within the configured number of days are listed
    but only removed with --all.

    Examples:
        mo purge --dry-run              # Preview artifacts in project paths
        mo purge --paths ~/code,~/work  # Scan specific directories
        mo purge --all                  # Include recent artifacts
    """
    runtime = build_runtime()
    config = runtime.config
    roots = parse_paths(paths) or config.expanded_project_paths()

    print_header("mole purge")
    print_info("Scanning for build artifacts...")

    artifacts = ArtifactScanner(config.skip_recent_days).scan(roots)
    if not artifacts:
        print_warning("No build artifacts found.")
        return

    _print_artifacts(artifacts, config.skip_recent_days)

    selected = [a for a in artifacts if a.selected or include_recent]
    selected_size = sum(a.size_bytes for a in selected)
    console.print(
        f"[bold]Selected:[/] {len(selected)} artifacts, [success]{format_size(selected_size)}[/]"
    )

    if not selected:
        print_info("Nothing selected. Use --all to include recent artifacts.")
        return

    console.print()
    receipts = runtime.executor.delete_many((a.path for a in selected), dry_run=dry_run)
    for artifact, receipt in zip(selected, receipts, strict=True):
        label = f"{artifact.project_name} [muted]{artifact.artifact_type}[/]"
        if receipt.success:
            print_outcome(label, True, format_size(receipt.bytes_freed))
        else:
            print_outcome(label, False, receipt.error or "failed")

    freed = sum(r.bytes_freed for r in receipts if r.success)
    failures = sum(1 for r in receipts if r.failed)

    if dry_run:
        print_dry_run_notice()
    print_summary(freed, failures, dry_run=dry_run)

    if failures:
        raise typer.Exit(code=1)
