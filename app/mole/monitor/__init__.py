"""System status monitoring for mole."""

from mole.monitor.dashboard import StatusMonitor, render_snapshot
from mole.monitor.snapshot import SystemSnapshot, collect_snapshot

__all__ = [
    "StatusMonitor",
    "SystemSnapshot",
    "collect_snapshot",
    "render_snapshot",
]
