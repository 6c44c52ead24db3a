"""Subprocess helpers.

Package managers and maintenance tools are run with captured output and a
C locale, so that parsers never see translated headers or decimal commas.
Nothing here goes through a shell.
"""

import os
import shlex
import shutil
import subprocess
from collections.abc import Callable, Sequence
from dataclasses import dataclass

DEFAULT_TIMEOUT = 60.0


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Outcome of a finished command.

    Attributes:
        stdout: Captured standard output.
        stderr: Captured standard error.
        returncode: Exit status.
    """

    stdout: str
    stderr: str
    returncode: int

    @property
    def success(self) -> bool:
        """Whether the command exited with status 0."""
        return self.returncode == 0


# Anything that runs an argument list and reports the outcome.
CommandRunner = Callable[[list[str]], CommandResult]


def _neutral_env() -> dict[str, str]:
    """Current environment with messages and number formats forced to C."""
    return {**os.environ, "LC_ALL": "C", "LANG": "C"}


def run_command(args: Sequence[str], *, timeout: float | None = DEFAULT_TIMEOUT) -> CommandResult:
    """Run a command and capture its output.

    A non-zero exit status is not an error here; callers inspect
    ``CommandResult.success``.

    Args:
        args: Program and arguments.
        timeout: Seconds to wait before giving up. None waits forever.

    Returns:
        CommandResult with decoded output.

    Raises:
        FileNotFoundError: If the program is not installed.
        subprocess.TimeoutExpired: If the command outlives the timeout.
    """
    completed = subprocess.run(
        list(args),
        capture_output=True,
        text=True,
        check=False,
        timeout=timeout,
        env=_neutral_env(),
    )
    return CommandResult(
        stdout=completed.stdout,
        stderr=completed.stderr,
        returncode=completed.returncode,
    )


def format_command(args: Sequence[str]) -> str:
    """Render an argument list the way a user would type it."""
    return shlex.join(args)


def command_exists(name: str) -> bool:
    """Check whether a program is on PATH."""
    return shutil.which(name) is not None


def is_root() -> bool:
    """Check if the current process runs with superuser rights.

    Only the CLI layer should call this; everything below receives the
    privilege level as an explicit ``elevated`` argument.

    Returns:
        True if the effective user id is 0.
    """
    return os.geteuid() == 0
