"""CLI package for mole.

This package contains the Typer application and all subcommands.
"""

from mole.cli.main import app

__all__ = ["app"]
