"""Cache directory scanner.

Finds user and system cache directories that can be emptied and measures
how much space they hold.
"""

import logging
from pathlib import Path

from mole.core.distro import PackageManager
from mole.models.scan import CategoryScope, CleanupCategory
from mole.safety.sizing import count_files, size_of
from mole.safety.validator import PathValidator

logger = logging.getLogger(__name__)

# (display name, path relative to the home directory)
USER_CACHE_TARGETS: tuple[tuple[str, str], ...] = (
    ("User Cache", ".cache"),
    ("Thumbnails", ".cache/thumbnails"),
    ("Trash", ".local/share/Trash"),
    ("Pip Cache", ".cache/pip"),
    ("NPM Cache", ".npm/_cacache"),
    ("Yarn Cache", ".cache/yarn"),
    ("Firefox Cache", ".cache/mozilla/firefox"),
    ("Chrome Cache", ".cache/google-chrome"),
    ("Chromium Cache", ".cache/chromium"),
)

SYSTEM_CACHE_TARGETS: tuple[tuple[str, str], ...] = (
    ("APT Lists", "/var/lib/apt/lists"),
    ("Journal Logs", "/var/log/journal"),
    ("System Logs", "/var/log"),
    ("Temp Files", "/tmp"),
    ("Var Temp Files", "/var/tmp"),
)


class CacheScanner:
    """Scanner for cache directories.

    User caches are always scanned. System caches are scanned only when
    running elevated. Directories the validator refuses are left out, and a
    category nested inside another found category is dropped so its bytes
    are not counted twice.

    Args:
        validator: Validator used to drop protected directories.
        home: Home directory for user caches. Defaults to the current user's.
        package_manager: Package manager whose cache paths are included in
            the system categories.
    """

    def __init__(
        self,
        validator: PathValidator,
        *,
        home: Path | None = None,
        package_manager: PackageManager = PackageManager.UNKNOWN,
    ) -> None:
        self._validator = validator
        self._home = home or Path.home()
        self._package_manager = package_manager

    def targets(self) -> list[tuple[str, Path, CategoryScope]]:
        """List candidate cache locations for the current privilege level.

        Returns:
            List of (name, path, scope) tuples, user targets first.
        """
        targets = [
            (name, self._home / relative, CategoryScope.USER)
            for name, relative in USER_CACHE_TARGETS
        ]
        if self._validator.elevated:
            targets.extend(
                (f"{self._package_manager.value.upper()} Cache", Path(path), CategoryScope.SYSTEM)
                for path in self._package_manager.cache_paths
            )
            targets.extend(
                (name, Path(path), CategoryScope.SYSTEM) for name, path in SYSTEM_CACHE_TARGETS
            )
        return targets

    def scan(self) -> list[CleanupCategory]:
        """Scan all cache targets.

        Returns:
            Categories with a non-zero size, largest first.
        """
        found: list[CleanupCategory] = []
        for name, path, scope in self.targets():
            if not path.is_dir():
                continue

            verdict = self._validator.validate(path)
            if verdict.is_refusal or verdict.is_symlink:
                logger.debug("Skipping cache target %s: %s", path, verdict.reason or "symlink")
                continue

            size = size_of(path)
            if size == 0:
                continue

            found.append(
                CleanupCategory(
                    name=name,
                    path=path,
                    scope=scope,
                    size_bytes=size,
                    file_count=count_files(path),
                )
            )

        categories = _drop_nested(found)
        categories.sort(key=lambda c: c.size_bytes, reverse=True)
        return categories


def _drop_nested(categories: list[CleanupCategory]) -> list[CleanupCategory]:
    """Remove categories located inside another category's directory."""
    return [
        category
        for category in categories
        if not any(
            other is not category and category.path.is_relative_to(other.path)
            for other in categories
        )
    ]
