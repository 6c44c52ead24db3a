"""Main CLI application entry point.

Defines the Typer application, global options and logging setup.
"""

import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from mole import __version__
from mole.cli.commands import analyze, clean, optimize, purge, status, uninstall
from mole.cli.menu import dispatch_selection, run_menu
from mole.utils.formatting import err_console

# Create main Typer app
app = typer.Typer(
    name="mo",
    help="Deep clean and optimize your Linux system.",
    invoke_without_command=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"mole version {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Route log records to stderr through Rich.

    Args:
        verbose: Show debug messages.
        quiet: Show errors only. Ignored when verbose is set.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=verbose, markup=False)],
        force=True,
    )


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-essential output.",
        ),
    ] = False,
) -> None:
    """mole - Deep clean and optimize your Linux system.

    Every deletion is checked against protected system paths and your
    whitelist (~/.config/mole/whitelist). Run without a command to open
    the interactive menu.
    """
    configure_logging(verbose=verbose, quiet=quiet)

    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet

    if ctx.invoked_subcommand is None:
        selection = run_menu()
        if selection is not None:
            dispatch_selection(selection)


# Register commands
app.command(name="clean")(clean.clean)
app.command(name="analyze")(analyze.analyze)
app.command(name="status")(status.status)
app.command(name="purge")(purge.purge)
app.command(name="optimize")(optimize.optimize)
app.command(name="uninstall")(uninstall.uninstall)


if __name__ == "__main__":
    app()
