"""Live status dashboard.

Renders a SystemSnapshot into a Rich panel and refreshes it on a fixed
interval until interrupted.
"""

import logging
import signal
import time
from collections.abc import Callable
from types import FrameType

from rich.console import Console, Group
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from mole.monitor.snapshot import SystemSnapshot, collect_snapshot, format_uptime
from mole.utils.formatting import console as default_console
from mole.utils.formatting import format_size

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 1.0

BAR_WIDTH = 20


def usage_bar(percent: float, width: int = BAR_WIDTH) -> Text:
    """Render a usage bar colored by load level.

    Args:
        percent: Usage from 0 to 100 (clamped).
        width: Number of bar cells.

    Returns:
        Styled Text of filled and empty cells.
    """
    percent = min(max(percent, 0.0), 100.0)
    filled = int(percent / 100 * width)
    if percent > 90:
        style = "bar_high"
    elif percent > 70:
        style = "bar_medium"
    else:
        style = "bar_low"
    return Text("█" * filled + "░" * (width - filled), style=style)


def render_snapshot(snapshot: SystemSnapshot) -> Panel:
    """Render a snapshot as a Rich panel.

    Args:
        snapshot: Snapshot to render.

    Returns:
        Panel with resource tables.
    """
    resources = Table.grid(padding=(0, 2))
    resources.add_column(style="bold")
    resources.add_column()
    resources.add_column(justify="right")
    resources.add_column(style="muted")

    resources.add_row("CPU", usage_bar(snapshot.cpu_percent), f"{snapshot.cpu_percent:5.1f}%", "")
    load1, load5, load15 = snapshot.load_average
    resources.add_row("Load", "", "", f"{load1:.2f} / {load5:.2f} / {load15:.2f}")
    resources.add_row(
        "Memory",
        usage_bar(snapshot.memory_percent),
        f"{snapshot.memory_percent:5.1f}%",
        f"{format_size(snapshot.memory_used)} / {format_size(snapshot.memory_total)}",
    )
    for disk in snapshot.disks:
        resources.add_row(
            disk.mount_point,
            usage_bar(disk.percent),
            f"{disk.percent:5.1f}%",
            f"{format_size(disk.used_bytes)} / {format_size(disk.total_bytes)}",
        )
    resources.add_row(
        "Network",
        "",
        "",
        f"↓ {format_size(snapshot.net_received)}  ↑ {format_size(snapshot.net_sent)}",
    )

    processes = Table(header_style="bold_header", border_style="border", box=None)
    processes.add_column("Top Processes")
    processes.add_column("PID", justify="right", style="muted")
    processes.add_column("CPU%", justify="right")
    processes.add_column("Memory", justify="right", style="size")
    for proc in snapshot.top_processes:
        processes.add_row(
            proc.name[:20],
            str(proc.pid),
            f"{proc.cpu_percent:.1f}",
            format_size(proc.memory_bytes),
        )

    footer = Text(
        f"Uptime {format_uptime(snapshot.uptime_seconds)}  |  Press Ctrl+C to exit",
        style="muted",
    )

    return Panel(
        Group(resources, Text(""), processes, Text(""), footer),
        title=f"[title]mole status[/] [muted]{snapshot.hostname}[/]",
        subtitle=f"[muted]{snapshot.os_name}[/]",
        border_style="border",
    )


class StatusMonitor:
    """Refreshes the status panel until asked to stop.

    The loop checks a stop flag at the top of every iteration. SIGINT and
    SIGTERM set the flag while ``run`` is active; previous handlers are
    restored afterwards.

    Args:
        collect: Callable producing a snapshot.
        interval: Seconds between refreshes.
        console: Console to render on.
        sleep: Sleep function between refreshes.
    """

    def __init__(
        self,
        collect: Callable[[], SystemSnapshot] = collect_snapshot,
        *,
        interval: float = DEFAULT_INTERVAL,
        console: Console | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if interval <= 0:
            msg = f"interval must be positive, got {interval}"
            raise ValueError(msg)
        self._collect = collect
        self._interval = interval
        self._console = console or default_console
        self._sleep = sleep
        self._stop_requested = False

    @property
    def stop_requested(self) -> bool:
        """Whether the monitor was asked to stop."""
        return self._stop_requested

    def request_stop(self) -> None:
        """Ask the refresh loop to stop before its next iteration."""
        self._stop_requested = True

    def _handle_signal(self, signum: int, frame: FrameType | None) -> None:
        logger.debug("Received signal %d, stopping monitor", signum)
        self.request_stop()

    def run(self, iterations: int | None = None) -> int:
        """Run the refresh loop.

        Args:
            iterations: Stop after this many refreshes. None runs until a
                stop is requested.

        Returns:
            Number of refreshes performed.
        """
        previous = {
            signum: signal.signal(signum, self._handle_signal)
            for signum in (signal.SIGINT, signal.SIGTERM)
        }
        count = 0
        try:
            with Live(
                render_snapshot(self._collect()),
                console=self._console,
                refresh_per_second=4,
                transient=False,
            ) as live:
                count = 1
                while not self._stop_requested:
                    if iterations is not None and count >= iterations:
                        break
                    self._sleep(self._interval)
                    if self._stop_requested:
                        break
                    live.update(render_snapshot(self._collect()))
                    count += 1
        finally:
            for signum, handler in previous.items():
                signal.signal(signum, handler)
        return count
