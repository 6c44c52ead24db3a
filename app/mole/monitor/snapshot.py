"""System telemetry snapshot.

Collects CPU, memory, disk, network and process figures through psutil.
"""

import logging
import os
import platform
import socket
import time
from dataclasses import dataclass, field

import psutil

logger = logging.getLogger(__name__)

TOP_PROCESS_COUNT = 5


@dataclass(frozen=True, slots=True)
class DiskUsage:
    """Usage of one mounted filesystem."""

    mount_point: str
    used_bytes: int
    total_bytes: int
    percent: float


@dataclass(frozen=True, slots=True)
class ProcessInfo:
    """CPU and memory use of one process."""

    pid: int
    name: str
    cpu_percent: float
    memory_bytes: int


@dataclass(frozen=True, slots=True)
class SystemSnapshot:
    """Point-in-time view of system resources.

    Attributes:
        hostname: Host name.
        os_name: Operating system description.
        uptime_seconds: Seconds since boot.
        load_average: 1, 5 and 15 minute load averages.
        cpu_percent: Overall CPU utilisation.
        memory_used: Used memory in bytes.
        memory_total: Total memory in bytes.
        memory_percent: Memory utilisation.
        disks: Usage for ``/`` and ``/home*`` mounts.
        net_received: Total bytes received since boot.
        net_sent: Total bytes sent since boot.
        top_processes: Busiest processes by CPU.
    """

    hostname: str
    os_name: str
    uptime_seconds: int
    load_average: tuple[float, float, float]
    cpu_percent: float
    memory_used: int
    memory_total: int
    memory_percent: float
    disks: list[DiskUsage] = field(default_factory=list)
    net_received: int = 0
    net_sent: int = 0
    top_processes: list[ProcessInfo] = field(default_factory=list)


def format_uptime(seconds: int) -> str:
    """Format an uptime as ``Xd Yh Zm``."""
    days, remainder = divmod(max(seconds, 0), 86400)
    hours, remainder = divmod(remainder, 3600)
    return f"{days}d {hours}h {remainder // 60}m"


def _is_monitored_mount(mount_point: str) -> bool:
    """Check whether a mount point is shown on the dashboard."""
    return mount_point == "/" or mount_point.startswith("/home")


def collect_disks() -> list[DiskUsage]:
    """Collect usage for the root and home filesystems."""
    disks: list[DiskUsage] = []
    for partition in psutil.disk_partitions(all=False):
        if not _is_monitored_mount(partition.mountpoint):
            continue
        try:
            usage = psutil.disk_usage(partition.mountpoint)
        except OSError as e:
            logger.debug("Cannot read usage for %s: %s", partition.mountpoint, e)
            continue
        disks.append(
            DiskUsage(
                mount_point=partition.mountpoint,
                used_bytes=usage.used,
                total_bytes=usage.total,
                percent=usage.percent,
            )
        )
    return disks


def collect_top_processes(count: int = TOP_PROCESS_COUNT) -> list[ProcessInfo]:
    """Collect the busiest processes by CPU usage.

    Args:
        count: Number of processes to return.

    Returns:
        Processes sorted by CPU usage, highest first.
    """
    processes: list[ProcessInfo] = []
    for proc in psutil.process_iter(["pid", "name", "cpu_percent", "memory_info"]):
        info = proc.info
        memory = info.get("memory_info")
        processes.append(
            ProcessInfo(
                pid=info.get("pid") or proc.pid,
                name=info.get("name") or "?",
                cpu_percent=info.get("cpu_percent") or 0.0,
                memory_bytes=memory.rss if memory is not None else 0,
            )
        )
    processes.sort(key=lambda p: p.cpu_percent, reverse=True)
    return processes[:count]


def collect_snapshot() -> SystemSnapshot:
    """Collect a full system snapshot.

    Returns:
        SystemSnapshot with current figures.
    """
    memory = psutil.virtual_memory()
    net = psutil.net_io_counters()
    load = os.getloadavg()

    return SystemSnapshot(
        hostname=socket.gethostname(),
        os_name=f"{platform.system()} {platform.release()}",
        uptime_seconds=int(time.time() - psutil.boot_time()),
        load_average=(load[0], load[1], load[2]),
        cpu_percent=psutil.cpu_percent(interval=None),
        memory_used=memory.used,
        memory_total=memory.total,
        memory_percent=memory.percent,
        disks=collect_disks(),
        net_received=net.bytes_recv if net is not None else 0,
        net_sent=net.bytes_sent if net is not None else 0,
        top_processes=collect_top_processes(),
    )
