"""Status command implementation.

Shows a live system resource dashboard.
"""

from typing import Annotated

import typer

from mole.monitor.dashboard import DEFAULT_INTERVAL, StatusMonitor


def status(
    interval: Annotated[
        float,
        typer.Option(
            "--interval",
            "-i",
            min=0.1,
            help="Seconds between refreshes.",
        ),
    ] = DEFAULT_INTERVAL,
) -> None:
    """Show live CPU, memory, disk and network usage.

    Press Ctrl+C to exit.

    Examples:
        mo status               # Refresh every second
        mo status --interval 5  # Refresh every five seconds
    """
    StatusMonitor(interval=interval).run()
