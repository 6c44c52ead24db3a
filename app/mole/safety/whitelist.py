"""User whitelist of paths that must never be deleted.

The whitelist is a plain-text file with one path per line. Blank lines
and lines starting with ``#`` are ignored, and a leading ``~`` is expanded
to the invoking user's home directory. Loading never fails: a missing or
unreadable file yields an empty whitelist.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from mole.core.paths import get_whitelist_path

logger = logging.getLogger(__name__)

COMMENT_MARKER = "#"


@dataclass(frozen=True, slots=True)
class Whitelist:
    """Immutable set of user-protected paths.

    Attributes:
        entries: Absolute paths, in file order.
    """

    entries: tuple[Path, ...] = ()

    def __len__(self) -> int:
        return len(self.entries)

    def __bool__(self) -> bool:
        return bool(self.entries)

    def contains(self, path: str | Path) -> bool:
        """Check if a path equals or descends from any whitelist entry.

        Matching is component-wise, so ``/data/keep`` protects
        ``/data/keep/file`` but not ``/data/keeper``.

        Args:
            path: Absolute path to check.

        Returns:
            True if the path is protected by the whitelist.
        """
        candidate = Path(path)
        return any(candidate.is_relative_to(entry) for entry in self.entries)


def expand_entry(entry: str) -> Path | None:
    """Expand a single whitelist entry to an absolute path.

    Args:
        entry: Raw entry, possibly starting with ``~``.

    Returns:
        The absolute path, or None if the entry is not absolute after expansion.
    """
    if entry == "~":
        expanded = Path.home()
    elif entry.startswith("~/"):
        expanded = Path.home() / entry[2:]
    else:
        expanded = Path(entry)

    if not expanded.is_absolute():
        logger.warning("Ignoring non-absolute whitelist entry: %s", entry)
        return None
    return expanded


def parse_whitelist(text: str) -> list[Path]:
    """Parse whitelist file content into absolute paths.

    Args:
        text: Whitelist file content.

    Returns:
        List of expanded absolute paths in file order.
    """
    paths: list[Path] = []
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith(COMMENT_MARKER):
            continue
        expanded = expand_entry(line)
        if expanded is not None:
            paths.append(expanded)
    return paths


def load_whitelist(path: Path | None = None, extra: Iterable[str] = ()) -> Whitelist:
    """Load the user whitelist.

    Args:
        path: Whitelist file to read. If None, uses the default location.
        extra: Additional entries (e.g. from config.toml), appended after
            the file's entries.

    Returns:
        Whitelist instance. Empty if the file is missing or unreadable.
    """
    whitelist_path = path or get_whitelist_path()

    entries: list[Path] = []
    try:
        entries.extend(parse_whitelist(whitelist_path.read_text(encoding="utf-8")))
    except FileNotFoundError:
        logger.debug("No whitelist file at %s", whitelist_path)
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Cannot read whitelist %s: %s", whitelist_path, e)

    for entry in extra:
        expanded = expand_entry(entry.strip())
        if expanded is not None:
            entries.append(expanded)

    return Whitelist(entries=tuple(dict.fromkeys(entries)))
