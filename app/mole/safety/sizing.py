"""Disk usage accounting.

Sizes are computed without following symlinks: only regular files
contribute their length. Missing paths count as zero and unreadable
entries are skipped so one permission error does not hide the rest of a
tree.
"""

import logging
import os
import stat
from collections.abc import Iterator
from pathlib import Path

logger = logging.getLogger(__name__)


def _iter_files(path: str | Path) -> Iterator[os.stat_result]:
    """Yield lstat results for every regular file under a path.

    Args:
        path: File or directory to walk.

    Yields:
        Stat results of regular files. Nothing for missing paths and symlinks.
    """
    try:
        root_stat = os.lstat(path)
    except OSError:
        return

    if stat.S_ISREG(root_stat.st_mode):
        yield root_stat
        return
    if not stat.S_ISDIR(root_stat.st_mode):
        return

    pending = [os.fspath(path)]
    while pending:
        current = pending.pop()
        try:
            with os.scandir(current) as entries:
                for entry in entries:
                    try:
                        if entry.is_dir(follow_symlinks=False):
                            pending.append(entry.path)
                        elif entry.is_file(follow_symlinks=False):
                            yield entry.stat(follow_symlinks=False)
                    except OSError as e:
                        logger.debug("Skipping unreadable entry %s: %s", entry.path, e)
        except OSError as e:
            logger.debug("Skipping unreadable directory %s: %s", current, e)


def size_of(path: str | Path) -> int:
    """Recursively sum regular-file sizes under a path.

    Args:
        path: File or directory to measure.

    Returns:
        Total size in bytes. 0 for missing paths and symlinks.
    """
    return sum(st.st_size for st in _iter_files(path))


def count_files(path: str | Path) -> int:
    """Count regular files under a path without following symlinks.

    Args:
        path: File or directory to count.

    Returns:
        Number of regular files. 0 for missing paths.
    """
    return sum(1 for _ in _iter_files(path))
