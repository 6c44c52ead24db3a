"""Utility modules for mole.

This module exports commonly used utility functions.
"""

from mole.utils.formatting import (
    console,
    create_table,
    err_console,
    format_percent,
    format_size,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from mole.utils.shell import (
    CommandResult,
    command_exists,
    format_command,
    is_root,
    run_command,
)

__all__ = [
    "CommandResult",
    "command_exists",
    "console",
    "create_table",
    "err_console",
    "format_command",
    "format_percent",
    "format_size",
    "is_root",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "run_command",
]
