"""CLI commands for mole.

This package contains all subcommand implementations.
"""

from mole.cli.commands import analyze, clean, optimize, purge, status, uninstall

__all__ = ["analyze", "clean", "optimize", "purge", "status", "uninstall"]
