"""System maintenance tasks for mole."""

from mole.maintenance.tasks import (
    OptimizeTask,
    TaskResult,
    build_tasks,
    run_task,
    run_tasks,
)
from mole.maintenance.uninstall import UninstallReport, uninstall_app

__all__ = [
    "OptimizeTask",
    "TaskResult",
    "UninstallReport",
    "build_tasks",
    "run_task",
    "run_tasks",
    "uninstall_app",
]
