"""Application removal.

Uninstalls an application through its package manager and then removes
its leftover files through the deletion executor.
"""

import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

from mole.models.scan import AppType, InstalledApp
from mole.safety.executor import DeletionExecutor
from mole.safety.models import DeletionReceipt
from mole.scanners.apps import find_leftovers
from mole.utils.shell import CommandRunner, format_command, run_command

logger = logging.getLogger(__name__)

# Timeout for package manager operations (5 minutes)
_REMOVE_TIMEOUT: float = 300.0


def removal_command(app: InstalledApp) -> list[str]:
    """Build the command that uninstalls an application.

    Args:
        app: Application to remove.

    Returns:
        Argument list for the owning package manager.
    """
    if app.app_type == AppType.DEB:
        return ["apt-get", "remove", "-y", app.name]
    if app.app_type == AppType.SNAP:
        return ["snap", "remove", app.name]
    return ["flatpak", "uninstall", "-y", app.name]


def requires_root(app: InstalledApp) -> bool:
    """Check whether removing an application needs superuser rights."""
    return app.app_type in (AppType.DEB, AppType.SNAP)


@dataclass(frozen=True, slots=True)
class UninstallReport:
    """Outcome of removing one application.

    Attributes:
        app: The application.
        removed: Whether the package manager removal succeeded (or would run).
        message: Status or error text from the package manager step.
        dry_run: Whether nothing was actually changed.
        leftovers: One receipt per leftover deletion attempt.
    """

    app: InstalledApp
    removed: bool
    message: str = ""
    dry_run: bool = False
    leftovers: list[DeletionReceipt] = field(default_factory=list)

    @property
    def bytes_freed(self) -> int:
        """Bytes freed by the package removal and leftover cleanup."""
        freed = sum(r.bytes_freed for r in self.leftovers if r.success)
        if self.removed and self.app.size_bytes:
            freed += self.app.size_bytes
        return freed

    @property
    def has_failures(self) -> bool:
        """Check whether any step failed."""
        return not self.removed or any(r.failed for r in self.leftovers)


def uninstall_app(
    app: InstalledApp,
    executor: DeletionExecutor,
    *,
    runner: CommandRunner | None = None,
    dry_run: bool = False,
    remove_leftovers: bool = True,
    home: Path | None = None,
) -> UninstallReport:
    """Remove an application and, optionally, its leftovers.

    Leftovers are only removed after the package removal succeeded, and
    every leftover goes through the executor, so protected locations are
    refused.

    Args:
        app: Application to remove.
        executor: Executor used for leftover deletion.
        runner: Callable executing commands. Defaults to run_command with
            a five minute timeout.
        dry_run: If True, report what would happen without changing anything.
        remove_leftovers: Whether to search for and delete leftover files.
        home: Home directory for the leftover search.

    Returns:
        UninstallReport with the outcome of each step.
    """
    command = removal_command(app)
    command_line = format_command(command)

    if dry_run:
        removed = True
        message = f"would run: {command_line}"
    else:
        removed, message = _run_removal(command, runner)

    receipts: list[DeletionReceipt] = []
    if remove_leftovers and removed:
        leftovers = find_leftovers(app, executor.validator, home=home)
        logger.debug("Found %d leftovers for %s", len(leftovers), app.name)
        receipts = executor.delete_many((leftover.path for leftover in leftovers), dry_run=dry_run)

    return UninstallReport(
        app=app,
        removed=removed,
        message=message,
        dry_run=dry_run,
        leftovers=receipts,
    )


def _run_removal(command: list[str], runner: CommandRunner | None) -> tuple[bool, str]:
    """Run a removal command and describe the outcome."""
    try:
        if runner is None:
            result = run_command(command, timeout=_REMOVE_TIMEOUT)
        else:
            result = runner(command)
    except (OSError, subprocess.SubprocessError) as e:
        logger.warning("Removal command %s could not start: %s", command[0], e)
        return False, str(e)

    if not result.success:
        message = result.stderr.strip() or f"exit code {result.returncode}"
        logger.warning("%s failed: %s", format_command(command), message)
        return False, message
    return True, "removed"
