"""Scan result models.

This module defines the immutable records produced by the scan drivers:
cleanup categories, build artifacts, disk usage entries, installed
applications and their leftover files.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class CategoryScope(Enum):
    """Who owns a cleanup category."""

    USER = "user"
    SYSTEM = "system"


@dataclass(frozen=True, slots=True)
class CleanupCategory:
    """A cache location whose contents can be cleared.

    Attributes:
        name: Display name (e.g. "Pip Cache").
        path: Directory whose children are deleted; the directory stays.
        scope: USER or SYSTEM (system categories need superuser rights).
        size_bytes: Current size of the directory contents.
        file_count: Number of regular files inside.
    """

    name: str
    path: Path
    scope: CategoryScope
    size_bytes: int = 0
    file_count: int = 0

    def __post_init__(self) -> None:
        """Validate category data after initialization."""
        if not self.name:
            msg = "Category name cannot be empty"
            raise ValueError(msg)
        if self.size_bytes < 0:
            msg = f"size_bytes must be non-negative, got {self.size_bytes}"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class ArtifactPattern:
    """How to recognise one kind of build artifact.

    Attributes:
        name: Display name (e.g. "Node.js").
        dir_name: Directory name to look for.
        marker_files: Files that must exist next to the directory. Empty
            means the directory name alone is enough.
    """

    name: str
    dir_name: str
    marker_files: tuple[str, ...] = ()

    def matches(self, directory: Path) -> bool:
        """Check whether a directory is an artifact of this kind.

        Args:
            directory: Candidate directory.

        Returns:
            True if the name matches and a marker exists in its parent.
        """
        if directory.name != self.dir_name:
            return False
        if not self.marker_files:
            return True
        return any((directory.parent / marker).exists() for marker in self.marker_files)


@dataclass(frozen=True, slots=True)
class FoundArtifact:
    """A build artifact directory found inside a project.

    Attributes:
        project_name: Name of the directory containing the artifact.
        artifact_type: Pattern name that matched.
        path: Absolute path of the artifact directory.
        size_bytes: Recursive size.
        age_days: Days since last modification.
        selected: Whether the artifact is preselected for removal.
    """

    project_name: str
    artifact_type: str
    path: Path
    size_bytes: int
    age_days: int
    selected: bool


@dataclass(frozen=True, slots=True)
class DirEntry:
    """One immediate child of an analyzed directory.

    Attributes:
        path: Absolute path of the entry.
        size_bytes: Recursive size (0 for symlinks).
        is_dir: Whether the entry is a real directory.
    """

    path: Path
    size_bytes: int
    is_dir: bool

    @property
    def name(self) -> str:
        """Entry file name."""
        return self.path.name


class AppType(Enum):
    """How an application was installed."""

    DEB = "deb"
    SNAP = "snap"
    FLATPAK = "flatpak"


class LeftoverType(Enum):
    """Kind of file an application leaves behind."""

    CONFIG = "config"
    CACHE = "cache"
    DATA = "data"
    DESKTOP = "desktop"
    AUTOSTART = "autostart"


@dataclass(frozen=True, slots=True)
class LeftoverFile:
    """A file or directory left behind by an application.

    Attributes:
        path: Absolute path of the leftover.
        leftover_type: Kind of leftover.
        size_bytes: Recursive size.
    """

    path: Path
    leftover_type: LeftoverType
    size_bytes: int


@dataclass(frozen=True, slots=True)
class InstalledApp:
    """An application installed through a package manager.

    Attributes:
        name: Package or application identifier used for removal.
        app_type: Installing package manager.
        version: Installed version, if known.
        size_bytes: Installed size, if known.
        display_name: Human-readable name (flatpak), defaults to ``name``.
    """

    name: str
    app_type: AppType
    version: str | None = None
    size_bytes: int | None = None
    display_name: str | None = None

    def __post_init__(self) -> None:
        """Validate app data after initialization."""
        if not self.name:
            msg = "App name cannot be empty"
            raise ValueError(msg)

    @property
    def label(self) -> str:
        """Name shown to the user."""
        return self.display_name or self.name
