"""Shared Rich display functions for deletion results.

Provides the per-item outcome lines and the freed-space summary printed
by the clean, purge and uninstall commands.
"""

from collections.abc import Iterable

from rich.rule import Rule

from mole.safety.models import DeletionReceipt
from mole.utils.formatting import console, format_size

OK_MARK = "[success]✓[/]"
FAIL_MARK = "[error]✗[/]"
DRY_MARK = "[info]→[/]"


def print_header(title: str) -> None:
    """Print a command header with a rule underneath."""
    console.print(f"[title]{title}[/]")
    console.print(Rule(style="border"))


def print_outcome(label: str, success: bool, detail: str = "") -> None:
    """Print one ✓/✗ outcome line.

    Args:
        label: What was processed.
        success: Whether it succeeded.
        detail: Optional size or error text.
    """
    mark = OK_MARK if success else FAIL_MARK
    suffix = f" [muted]{detail}[/]" if detail else ""
    console.print(f"  {mark} {label}{suffix}")


def print_receipts(receipts: Iterable[DeletionReceipt], *, indent: str = "    ") -> None:
    """Print one line per deletion receipt.

    Args:
        receipts: Receipts to print.
        indent: Prefix for every line.
    """
    for receipt in receipts:
        if receipt.success:
            mark = DRY_MARK if receipt.dry_run else OK_MARK
            verb = "Would remove" if receipt.dry_run else "Removed"
            size = format_size(receipt.bytes_freed)
            console.print(f"{indent}{mark} {verb} {receipt.path} [size]({size})[/]")
        else:
            console.print(f"{indent}{FAIL_MARK} {receipt.path}: [error]{receipt.error}[/]")


def print_dry_run_notice() -> None:
    """Print the notice closing a dry run."""
    console.print()
    console.print("[warning][DRY RUN] No files were deleted.[/]")


def print_summary(freed: int, failures: int = 0, *, dry_run: bool = False) -> None:
    """Print the freed-space total and failure count.

    Args:
        freed: Bytes freed (or that would be freed).
        failures: Number of failed items.
        dry_run: Whether nothing was deleted.
    """
    console.print()
    console.print(Rule(style="border"))
    label = "Space that would be freed" if dry_run else "Space freed"
    console.print(f"[bold]{label}:[/] [success]{format_size(freed)}[/]")
    if failures:
        console.print(f"[error]{failures} item(s) failed[/]")
