"""System optimization tasks.

Each task is either an external command or an in-process action. Tasks
run independently: one failing task never stops the others.
"""

import logging
import subprocess
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path

from mole.core.config import MoleConfig
from mole.core.distro import PackageManager
from mole.core.errors import CommandFailedError, MoleError
from mole.safety.executor import DeletionExecutor
from mole.utils.formatting import format_size
from mole.utils.shell import CommandRunner, command_exists, format_command, run_command

logger = logging.getLogger(__name__)

# Action callables receive the dry-run flag and return a status message
TaskAction = Callable[[bool], str]


@dataclass(frozen=True, slots=True)
class OptimizeTask:
    """A single optimization step.

    Attributes:
        name: Short task name.
        description: One-line explanation shown before running.
        command: External command to run, or None for an action task.
        action: In-process action, or None for a command task.
        requires_root: Whether the task needs superuser rights.
    """

    name: str
    description: str
    command: tuple[str, ...] | None = None
    action: TaskAction | None = None
    requires_root: bool = False

    def __post_init__(self) -> None:
        """Validate that exactly one of command and action is set."""
        if (self.command is None) == (self.action is None):
            msg = f"Task {self.name!r} needs exactly one of command or action"
            raise ValueError(msg)
        if self.command is not None and not self.command:
            msg = f"Task {self.name!r} has an empty command"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class TaskResult:
    """Outcome of running one task.

    Attributes:
        name: Task name.
        success: Whether the task completed.
        message: Status or error text.
        dry_run: Whether the task was only simulated.
    """

    name: str
    success: bool
    message: str = ""
    dry_run: bool = False

    @property
    def failed(self) -> bool:
        """Check if the task failed."""
        return not self.success


def clear_thumbnails_action(executor: DeletionExecutor, home: Path) -> TaskAction:
    """Create an action emptying the thumbnail cache through the executor.

    Args:
        executor: Executor performing validated deletions.
        home: Home directory holding ``.cache/thumbnails``.

    Returns:
        Action callable for an OptimizeTask.
    """
    thumbnails = home / ".cache" / "thumbnails"

    def clear(dry_run: bool) -> str:
        receipts = executor.clean_directory_contents(thumbnails, dry_run=dry_run)
        failures = [r for r in receipts if r.failed]
        if failures:
            raise CommandFailedError(
                "clear thumbnails", f"{len(failures)} entries could not be removed"
            )
        freed = sum(r.bytes_freed for r in receipts)
        verb = "would free" if dry_run else "freed"
        return f"{verb} {format_size(freed)}"

    return clear


def build_tasks(
    executor: DeletionExecutor,
    config: MoleConfig,
    package_manager: PackageManager,
    *,
    home: Path | None = None,
    exists: Callable[[str], bool] = command_exists,
) -> list[OptimizeTask]:
    """Assemble the optimization tasks available on this system.

    Root-only tasks are included only when the executor runs elevated.
    Command tasks whose binary is missing are left out.

    Args:
        executor: Executor for in-process deletions.
        config: User configuration (journal size limit).
        package_manager: Detected package manager.
        home: Home directory. Defaults to the current user's.
        exists: Callable checking whether a command is installed.

    Returns:
        Tasks in execution order.
    """
    tasks = [
        OptimizeTask(
            name="Clear thumbnail cache",
            description="Remove cached thumbnails",
            action=clear_thumbnails_action(executor, home or Path.home()),
        ),
        OptimizeTask(
            name="Update font cache",
            description="Rebuild font cache",
            command=("fc-cache", "-f"),
        ),
    ]

    if package_manager.clean_command is not None:
        tasks.append(
            OptimizeTask(
                name=f"Clear {package_manager.value} cache",
                description="Remove downloaded package files",
                command=tuple(package_manager.clean_command),
                requires_root=True,
            )
        )
    if package_manager.autoremove_command is not None:
        tasks.append(
            OptimizeTask(
                name="Remove orphan packages",
                description="Remove unused dependencies",
                command=tuple(package_manager.autoremove_command),
                requires_root=True,
            )
        )
    tasks.append(
        OptimizeTask(
            name="Vacuum journal logs",
            description=f"Limit journal size to {config.journal_max_size}",
            command=("journalctl", f"--vacuum-size={config.journal_max_size}"),
            requires_root=True,
        )
    )

    available: list[OptimizeTask] = []
    for task in tasks:
        if task.requires_root and not executor.elevated:
            continue
        if task.command is not None and not exists(task.command[0]):
            logger.debug("Skipping %s: %s not installed", task.name, task.command[0])
            continue
        available.append(task)
    return available


def run_task(
    task: OptimizeTask,
    runner: CommandRunner = run_command,
    dry_run: bool = False,
) -> TaskResult:
    """Run one task, capturing any failure in the result.

    Args:
        task: Task to run.
        runner: Callable executing external commands.
        dry_run: If True, commands are not run and actions only simulate.

    Returns:
        TaskResult describing the outcome.
    """
    if task.command is not None:
        command_line = format_command(task.command)
        if dry_run:
            return TaskResult(task.name, True, f"would run: {command_line}", dry_run=True)
        try:
            result = runner(list(task.command))
        except (OSError, subprocess.SubprocessError) as e:
            logger.warning("Task %s could not start: %s", task.name, e)
            return TaskResult(task.name, False, str(e))
        if not result.success:
            message = result.stderr.strip() or f"exit code {result.returncode}"
            logger.warning("Task %s failed: %s", task.name, message)
            return TaskResult(task.name, False, message)
        return TaskResult(task.name, True, "done")

    action = task.action
    if action is None:
        return TaskResult(task.name, False, "task has nothing to run")
    try:
        message = action(dry_run)
    except (MoleError, OSError) as e:
        logger.warning("Task %s failed: %s", task.name, e)
        return TaskResult(task.name, False, str(e), dry_run=dry_run)
    return TaskResult(task.name, True, message, dry_run=dry_run)


def run_tasks(
    tasks: Iterable[OptimizeTask],
    runner: CommandRunner = run_command,
    dry_run: bool = False,
) -> list[TaskResult]:
    """Run tasks in order; each failure is isolated to its own result."""
    return [run_task(task, runner, dry_run) for task in tasks]
