"""Disk usage analyzer."""

import logging
import os
from pathlib import Path

from mole.core.errors import InvalidPathError, PathNotFoundError
from mole.models.scan import DirEntry
from mole.safety.sizing import size_of

logger = logging.getLogger(__name__)


def analyze_directory(path: str | Path, limit: int | None = None) -> list[DirEntry]:
    """Measure the immediate children of a directory.

    Args:
        path: Directory to analyze.
        limit: Maximum number of entries to return (largest first).

    Returns:
        Entries sorted by size descending, then by name.

    Raises:
        PathNotFoundError: If the path does not exist.
        InvalidPathError: If the path is not a directory.
        OSError: If the directory cannot be listed.
    """
    root = Path(path).expanduser()
    if not root.exists():
        raise PathNotFoundError(str(root))
    if not root.is_dir():
        raise InvalidPathError(str(root), "not a directory")

    entries: list[DirEntry] = []
    with os.scandir(root) as children:
        for child in children:
            try:
                is_dir = child.is_dir(follow_symlinks=False)
            except OSError as e:
                logger.debug("Cannot stat %s: %s", child.path, e)
                continue
            entries.append(
                DirEntry(path=Path(child.path), size_bytes=size_of(child.path), is_dir=is_dir)
            )

    entries.sort(key=lambda e: (-e.size_bytes, e.name))
    if limit is not None:
        entries = entries[:limit]
    return entries


def total_size(entries: list[DirEntry]) -> int:
    """Sum entry sizes."""
    return sum(entry.size_bytes for entry in entries)
