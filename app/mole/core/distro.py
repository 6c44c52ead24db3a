"""Linux distribution and package manager detection.

Reads ``/etc/os-release`` to identify the distribution and maps it to the
package manager used for cache cleaning and orphan removal.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from mole.utils.shell import command_exists

logger = logging.getLogger(__name__)

OS_RELEASE_PATH = Path("/etc/os-release")


class Distro(Enum):
    """Supported Linux distributions."""

    UBUNTU = "ubuntu"
    DEBIAN = "debian"
    POP = "pop"
    FEDORA = "fedora"
    CENTOS = "centos"
    RHEL = "rhel"
    ARCH = "arch"
    MANJARO = "manjaro"
    OPENSUSE = "opensuse"
    ALPINE = "alpine"
    GENTOO = "gentoo"
    UNKNOWN = "unknown"


class PackageManager(Enum):
    """System package managers mole knows how to drive."""

    APT = "apt"
    DNF = "dnf"
    YUM = "yum"
    PACMAN = "pacman"
    ZYPPER = "zypper"
    APK = "apk"
    PORTAGE = "portage"
    UNKNOWN = "unknown"

    @property
    def clean_command(self) -> list[str] | None:
        """Command that empties the package download cache, if any."""
        return _CLEAN_COMMANDS.get(self)

    @property
    def autoremove_command(self) -> list[str] | None:
        """Command that removes orphaned dependencies, if any."""
        return _AUTOREMOVE_COMMANDS.get(self)

    @property
    def cache_paths(self) -> tuple[str, ...]:
        """Directories holding downloaded packages."""
        return _CACHE_PATHS.get(self, ())


_CLEAN_COMMANDS: dict[PackageManager, list[str]] = {
    PackageManager.APT: ["apt-get", "clean"],
    PackageManager.DNF: ["dnf", "clean", "all"],
    PackageManager.YUM: ["yum", "clean", "all"],
    PackageManager.PACMAN: ["pacman", "-Sc", "--noconfirm"],
    PackageManager.ZYPPER: ["zypper", "clean", "--all"],
    PackageManager.APK: ["apk", "cache", "clean"],
}

# pacman has no autoremove; orphan removal needs a shell pipeline
_AUTOREMOVE_COMMANDS: dict[PackageManager, list[str]] = {
    PackageManager.APT: ["apt-get", "autoremove", "-y"],
    PackageManager.DNF: ["dnf", "autoremove", "-y"],
    PackageManager.YUM: ["yum", "autoremove", "-y"],
    PackageManager.PORTAGE: ["emerge", "--depclean"],
}

_CACHE_PATHS: dict[PackageManager, tuple[str, ...]] = {
    PackageManager.APT: ("/var/cache/apt/archives",),
    PackageManager.DNF: ("/var/cache/dnf",),
    PackageManager.YUM: ("/var/cache/yum",),
    PackageManager.PACMAN: ("/var/cache/pacman/pkg",),
    PackageManager.ZYPPER: ("/var/cache/zypp",),
    PackageManager.APK: ("/var/cache/apk",),
    PackageManager.PORTAGE: ("/var/cache/distfiles",),
}

_DISTRO_IDS: dict[str, Distro] = {
    "ubuntu": Distro.UBUNTU,
    "debian": Distro.DEBIAN,
    "pop": Distro.POP,
    "fedora": Distro.FEDORA,
    "centos": Distro.CENTOS,
    "rhel": Distro.RHEL,
    "arch": Distro.ARCH,
    "manjaro": Distro.MANJARO,
    "opensuse": Distro.OPENSUSE,
    "opensuse-leap": Distro.OPENSUSE,
    "opensuse-tumbleweed": Distro.OPENSUSE,
    "alpine": Distro.ALPINE,
    "gentoo": Distro.GENTOO,
}

_DISTRO_MANAGERS: dict[Distro, PackageManager] = {
    Distro.UBUNTU: PackageManager.APT,
    Distro.DEBIAN: PackageManager.APT,
    Distro.POP: PackageManager.APT,
    Distro.FEDORA: PackageManager.DNF,
    Distro.ARCH: PackageManager.PACMAN,
    Distro.MANJARO: PackageManager.PACMAN,
    Distro.OPENSUSE: PackageManager.ZYPPER,
    Distro.ALPINE: PackageManager.APK,
    Distro.GENTOO: PackageManager.PORTAGE,
}

# Probed in order when the distribution is not recognised
_FALLBACK_COMMANDS: tuple[tuple[str, PackageManager], ...] = (
    ("apt-get", PackageManager.APT),
    ("dnf", PackageManager.DNF),
    ("yum", PackageManager.YUM),
    ("pacman", PackageManager.PACMAN),
    ("zypper", PackageManager.ZYPPER),
    ("apk", PackageManager.APK),
)


@dataclass(frozen=True, slots=True)
class DistroInfo:
    """Detected distribution details.

    Attributes:
        distro: Distribution family.
        name: Human-readable name (``PRETTY_NAME`` or ``NAME``).
        version: ``VERSION_ID`` if present.
        package_manager: Package manager for this system.
        has_snap: Whether the snap CLI is installed.
        has_flatpak: Whether the flatpak CLI is installed.
    """

    distro: Distro
    name: str
    version: str | None
    package_manager: PackageManager
    has_snap: bool = False
    has_flatpak: bool = False


def parse_os_release(content: str) -> dict[str, str]:
    """Parse ``os-release`` content into a key/value mapping.

    Args:
        content: File content in ``KEY=value`` format.

    Returns:
        Mapping with surrounding quotes stripped from values.
    """
    values: dict[str, str] = {}
    for line in content.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        values[key.strip()] = value.strip().strip("\"'")
    return values


def distro_from_os_release(values: dict[str, str]) -> Distro:
    """Map parsed ``os-release`` values to a Distro."""
    return _DISTRO_IDS.get(values.get("ID", "").lower(), Distro.UNKNOWN)


def detect_package_manager(distro: Distro) -> PackageManager:
    """Pick the package manager for a distribution.

    RHEL and CentOS use dnf when it is installed, yum otherwise. Unknown
    distributions are probed for known package manager binaries.

    Args:
        distro: Detected distribution.

    Returns:
        PackageManager, UNKNOWN if nothing matched.
    """
    if distro in (Distro.CENTOS, Distro.RHEL):
        return PackageManager.DNF if command_exists("dnf") else PackageManager.YUM

    manager = _DISTRO_MANAGERS.get(distro)
    if manager is not None:
        return manager

    for command, fallback in _FALLBACK_COMMANDS:
        if command_exists(command):
            return fallback
    return PackageManager.UNKNOWN


def detect_distro(os_release: Path = OS_RELEASE_PATH) -> DistroInfo:
    """Detect the running distribution.

    Args:
        os_release: Path to the os-release file.

    Returns:
        DistroInfo describing the system. An unreadable os-release file
        yields an UNKNOWN distribution named "Linux".
    """
    try:
        values = parse_os_release(os_release.read_text(encoding="utf-8"))
    except OSError as e:
        logger.debug("Cannot read %s: %s", os_release, e)
        values = {}

    distro = distro_from_os_release(values)
    name = values.get("PRETTY_NAME") or values.get("NAME") or "Linux"

    return DistroInfo(
        distro=distro,
        name=name,
        version=values.get("VERSION_ID"),
        package_manager=detect_package_manager(distro),
        has_snap=command_exists("snap"),
        has_flatpak=command_exists("flatpak"),
    )
