"""Installed application scanner.

Lists applications installed through dpkg, snap and flatpak, and finds
files they leave behind in configuration, cache and data directories.
"""

import logging
import os
from collections.abc import Callable
from pathlib import Path

from mole.core.errors import CommandFailedError
from mole.models.scan import AppType, InstalledApp, LeftoverFile, LeftoverType
from mole.safety.sizing import size_of
from mole.safety.validator import PathValidator
from mole.utils.shell import CommandRunner, command_exists, run_command

logger = logging.getLogger(__name__)

# dpkg-query format string: Package, Version, Installed-Size (KB)
_DPKG_FORMAT = "${Package}\\t${Version}\\t${Installed-Size}\\n"

# Notes values that indicate runtime/infrastructure snaps
_RUNTIME_NOTES: frozenset[str] = frozenset({"base", "core", "snapd"})

# Exact snap names that are always runtime infrastructure
_RUNTIME_NAMES: frozenset[str] = frozenset({"snapd", "bare"})

# Search terms shorter than this only match whole entry names
_MIN_SUBSTRING_LENGTH = 4

SYSTEM_LEFTOVER_LOCATIONS: tuple[tuple[str, LeftoverType], ...] = (
    ("/etc", LeftoverType.CONFIG),
    ("/var/cache", LeftoverType.CACHE),
    ("/var/lib", LeftoverType.DATA),
    ("/usr/share/applications", LeftoverType.DESKTOP),
)


def leftover_locations(home: Path) -> list[tuple[Path, LeftoverType]]:
    """List directories searched for leftovers.

    Args:
        home: User home directory.

    Returns:
        List of (directory, leftover type), user locations first.
    """
    locations = [
        (home / ".config", LeftoverType.CONFIG),
        (home / ".cache", LeftoverType.CACHE),
        (home / ".local" / "share", LeftoverType.DATA),
        (home / ".var" / "app", LeftoverType.DATA),
        (home / ".local" / "share" / "applications", LeftoverType.DESKTOP),
        (home / ".config" / "autostart", LeftoverType.AUTOSTART),
    ]
    locations.extend((Path(path), kind) for path, kind in SYSTEM_LEFTOVER_LOCATIONS)
    return locations


def normalize_app_name(name: str) -> str:
    """Normalize a name for fuzzy matching.

    Lowercases and removes dashes, underscores, spaces and a trailing
    ``.desktop`` suffix.
    """
    normalized = name.lower().removesuffix(".desktop")
    for char in ("-", "_", " "):
        normalized = normalized.replace(char, "")
    return normalized


def search_terms(app: InstalledApp) -> set[str]:
    """Build normalized search terms for an application.

    Flatpak IDs contribute both the full ID and their last component
    (``org.mozilla.firefox`` also searches for ``firefox``).
    """
    terms = {normalize_app_name(app.name)}
    if app.display_name:
        terms.add(normalize_app_name(app.display_name))
    if app.app_type == AppType.FLATPAK and "." in app.name:
        terms.add(normalize_app_name(app.name.rsplit(".", 1)[-1]))
    return {term for term in terms if term}


def _matches(entry_name: str, terms: set[str]) -> bool:
    """Check whether a directory entry name belongs to an application."""
    normalized = normalize_app_name(entry_name)
    for term in terms:
        if normalized == term:
            return True
        if len(term) >= _MIN_SUBSTRING_LENGTH and term in normalized:
            return True
    return False


class AppScanner:
    """Scanner for installed applications.

    Args:
        runner: Callable executing commands. Defaults to run_command.
        exists: Callable checking whether a command is installed.
    """

    def __init__(
        self,
        runner: CommandRunner = run_command,
        exists: Callable[[str], bool] = command_exists,
    ) -> None:
        self._run = runner
        self._exists = exists

    def scan(self) -> list[InstalledApp]:
        """Scan every available package source.

        A failing source is logged and skipped.

        Returns:
            Installed applications sorted by name (case-insensitive).

        Raises:
            CommandFailedError: If every available source failed.
        """
        sources: list[tuple[str, Callable[[], list[InstalledApp]]]] = [
            ("dpkg-query", self.scan_dpkg),
            ("snap", self.scan_snap),
            ("flatpak", self.scan_flatpak),
        ]

        apps: list[InstalledApp] = []
        attempted = 0
        errors: list[CommandFailedError] = []
        for command, scan_source in sources:
            if not self._exists(command):
                continue
            attempted += 1
            try:
                apps.extend(scan_source())
            except CommandFailedError as e:
                logger.warning("%s", e)
                errors.append(e)

        if attempted and len(errors) == attempted:
            raise errors[0]

        apps.sort(key=lambda a: a.label.lower())
        return apps

    def scan_dpkg(self) -> list[InstalledApp]:
        """List packages installed through dpkg."""
        result = self._run(["dpkg-query", "-W", "-f", _DPKG_FORMAT])
        if not result.success:
            raise CommandFailedError("dpkg-query", result.stderr.strip() or "unknown error")

        apps: list[InstalledApp] = []
        for line in result.stdout.splitlines():
            parts = line.split("\t")
            if len(parts) < 2 or not parts[0].strip():
                logger.debug("Skipping malformed dpkg line: %r", line[:100])
                continue
            size_bytes: int | None = None
            if len(parts) >= 3 and parts[2].strip().isdigit():
                # dpkg-query reports size in KB
                size_bytes = int(parts[2].strip()) * 1024
            apps.append(
                InstalledApp(
                    name=parts[0].strip(),
                    app_type=AppType.DEB,
                    version=parts[1].strip() or None,
                    size_bytes=size_bytes,
                )
            )
        return apps

    def scan_snap(self) -> list[InstalledApp]:
        """List user-facing snaps, skipping bases and runtimes."""
        result = self._run(["snap", "list"])
        if not result.success:
            raise CommandFailedError("snap list", result.stderr.strip() or "unknown error")

        apps: list[InstalledApp] = []
        # Skip header line ("Name  Version  Rev  Tracking  Publisher  Notes")
        for line in result.stdout.splitlines()[1:]:
            parts = line.split()
            if len(parts) < 2:
                continue
            name = parts[0]
            notes = parts[5] if len(parts) >= 6 else "-"
            if _is_runtime_snap(name, notes):
                continue
            apps.append(InstalledApp(name=name, app_type=AppType.SNAP, version=parts[1]))
        return apps

    def scan_flatpak(self) -> list[InstalledApp]:
        """List installed flatpak applications."""
        result = self._run(
            ["flatpak", "list", "--app", "--columns=application,name,version"],
        )
        if not result.success:
            raise CommandFailedError("flatpak list", result.stderr.strip() or "unknown error")

        apps: list[InstalledApp] = []
        for line in result.stdout.splitlines():
            parts = [part.strip() for part in line.split("\t")]
            if not parts or not parts[0]:
                continue
            apps.append(
                InstalledApp(
                    name=parts[0],
                    app_type=AppType.FLATPAK,
                    display_name=parts[1] if len(parts) > 1 and parts[1] else None,
                    version=parts[2] if len(parts) > 2 and parts[2] else None,
                )
            )
        return apps

    def find(self, name: str) -> InstalledApp | None:
        """Find an installed application by name (case-insensitive).

        Args:
            name: Package name, flatpak ID or display name.

        Returns:
            The first matching application, or None.
        """
        wanted = name.lower()
        for app in self.scan():
            if wanted in (app.name.lower(), app.label.lower()):
                return app
        return None


def _is_runtime_snap(name: str, notes: str) -> bool:
    """Check whether a snap is a runtime/infrastructure snap."""
    if notes in _RUNTIME_NOTES or name in _RUNTIME_NAMES:
        return True
    if name.startswith("core"):
        return True
    return name.startswith("gnome-") and name.endswith("-platform")


def find_leftovers(
    app: InstalledApp,
    validator: PathValidator,
    *,
    home: Path | None = None,
) -> list[LeftoverFile]:
    """Find files an application leaves behind.

    Only the first level of each location is searched. Entries the
    validator refuses (protected system paths, whitelisted paths) are not
    reported.

    Args:
        app: Application to search for.
        validator: Validator filtering out protected entries.
        home: Home directory. Defaults to the current user's.

    Returns:
        Leftover files, largest first.
    """
    terms = search_terms(app)
    leftovers: list[LeftoverFile] = []
    seen: set[Path] = set()

    for location, kind in leftover_locations(home or Path.home()):
        try:
            with os.scandir(location) as entries:
                names = sorted(entry.name for entry in entries)
        except OSError:
            continue

        for entry_name in names:
            if not _matches(entry_name, terms):
                continue
            path = location / entry_name
            if path in seen:
                continue
            verdict = validator.validate(path)
            if verdict.is_refusal:
                logger.debug("Ignoring protected leftover %s: %s", path, verdict.reason)
                continue
            seen.add(path)
            leftovers.append(LeftoverFile(path=path, leftover_type=kind, size_bytes=size_of(path)))

    leftovers.sort(key=lambda leftover: leftover.size_bytes, reverse=True)
    return leftovers
