"""Path validation gate for every deletion.

The validator classifies a path into exactly one verdict, checking in
strict order:

1. Empty, relative, or control-character paths are invalid.
2. Any ``..`` component is invalid (textual check, before touching disk).
3. System prefixes are blocked, except known-safe package caches.
4. User-whitelisted paths are blocked.
5. Symlinks are reported with their raw target (not validated here).
6. Caution locations (exact match) need acknowledgment.
7. Everything else is safe.

Every check after the traversal test uses the normalized path, so a
trailing slash cannot make lstat follow a symlink.

Only metadata is read (lstat/readlink). The privileged variant also
resolves the full path once to catch links that land in a blocked prefix.
"""

import logging
import os
import posixpath
import stat
from pathlib import Path

from mole.safety.models import PathVerdict
from mole.safety.protected import DEFAULT_PROTECTED_PATHS, ProtectedPathSet
from mole.safety.whitelist import Whitelist

logger = logging.getLogger(__name__)

# Deletions at or above this size trigger an advisory warning.
LARGE_DELETION_THRESHOLD = 1024 * 1024 * 1024  # 1 GiB


def contains_dangerous_chars(path: str | Path) -> bool:
    """Check a path for control characters (including NUL and newlines).

    Args:
        path: Path to inspect.

    Returns:
        True if any character is a control character.
    """
    text = os.fspath(path)
    return any(ord(c) < 0x20 or ord(c) == 0x7F for c in text)


def has_traversal(path: str) -> bool:
    """Check if any textual component of a path is ``..``."""
    return ".." in path.split("/")


def normalize(path: str) -> str:
    """Collapse repeated separators and ``.`` components of an absolute path.

    This is purely textual; it never resolves ``..`` or symlinks, so it
    must only be applied after the traversal check.

    Args:
        path: Absolute path without ``..`` components.

    Returns:
        Normalized absolute path.
    """
    parts = [part for part in path.split("/") if part not in ("", ".")]
    return "/" + "/".join(parts)


def resolve_link_target(link: str | Path, target: str) -> str:
    """Resolve a symlink target one hop, textually.

    Relative targets are joined onto the link's parent directory. Nothing
    on disk is followed, so chains and cycles cannot cause extra work.

    Args:
        link: Path of the symlink itself.
        target: Raw target as returned by readlink.

    Returns:
        Absolute, normalized target path.
    """
    parent = posixpath.dirname(os.fspath(link))
    return posixpath.normpath(posixpath.join(parent, target))


class PathValidator:
    """Classifies paths against the protection tables and user whitelist.

    Instances are immutable after construction and hold no per-call state,
    so one validator can be shared by every caller in a run.

    Args:
        whitelist: User-protected paths. Defaults to an empty whitelist.
        protected: Protection tables. Defaults to the built-in tables.
        large_deletion_threshold: Size in bytes from which a deletion is
            considered large.
        elevated: Whether deletions run with superuser rights. Elevated
            validators resolve links before approving a path.
    """

    def __init__(
        self,
        whitelist: Whitelist | None = None,
        *,
        protected: ProtectedPathSet = DEFAULT_PROTECTED_PATHS,
        large_deletion_threshold: int = LARGE_DELETION_THRESHOLD,
        elevated: bool = False,
    ) -> None:
        self._whitelist = whitelist or Whitelist()
        self._protected = protected
        self._threshold = large_deletion_threshold
        self._elevated = elevated

    @property
    def whitelist(self) -> Whitelist:
        """User whitelist consulted by this validator."""
        return self._whitelist

    @property
    def elevated(self) -> bool:
        """Whether this validator guards privileged deletions."""
        return self._elevated

    @property
    def large_deletion_threshold(self) -> int:
        """Size in bytes from which a deletion is considered large."""
        return self._threshold

    def validate(self, path: str | Path) -> PathVerdict:
        """Classify a path before deletion.

        Args:
            path: Absolute path to classify.

        Returns:
            PathVerdict describing whether and how the path may be deleted.
        """
        text = os.fspath(path)

        if not text:
            return PathVerdict.invalid("empty path")
        if not text.startswith("/"):
            return PathVerdict.invalid("path must be absolute")
        if contains_dangerous_chars(text):
            return PathVerdict.invalid("path contains control characters")
        if has_traversal(text):
            return PathVerdict.invalid("path traversal detected")

        normalized = normalize(text)

        blocked_by = self._protected.blocking_prefix(normalized)
        if blocked_by is not None:
            return PathVerdict.blocked(f"system path protected: {blocked_by}")

        if self._whitelist.contains(normalized):
            return PathVerdict.blocked("path is whitelisted by user")

        target = self._read_symlink(normalized)
        if target is not None:
            return PathVerdict.symlink(target)

        caution = self._protected.caution_match(normalized)
        if caution is not None:
            return PathVerdict.caution(f"deleting {caution} requires confirmation")

        return PathVerdict.safe()

    def validate_for_privileged_operation(self, path: str | Path) -> PathVerdict:
        """Classify a path for deletion with superuser rights.

        Runs :meth:`validate` and, for safe paths, re-checks the fully
        resolved path against the blocked prefixes. This catches paths
        whose parent directories are links into protected trees.

        Args:
            path: Absolute path to classify.

        Returns:
            PathVerdict; BLOCKED if the resolved path is protected.
        """
        verdict = self.validate(path)
        if not verdict.is_safe:
            return verdict

        resolved = os.path.realpath(path)
        if self._protected.blocking_prefix(normalize(resolved)) is not None:
            return PathVerdict.blocked(f"symlink resolves to protected path: {resolved}")

        return verdict

    def validate_for_deletion(self, path: str | Path) -> PathVerdict:
        """Classify a path using the checks that match this validator's privilege.

        Args:
            path: Absolute path to classify.

        Returns:
            The privileged verdict when elevated, the plain verdict otherwise.
        """
        if self._elevated:
            return self.validate_for_privileged_operation(path)
        return self.validate(path)

    def is_large_deletion(self, size: int) -> bool:
        """Check if a deletion size reaches the large-deletion threshold.

        Args:
            size: Size in bytes.

        Returns:
            True if size is at or above the threshold.
        """
        return size >= self._threshold

    @staticmethod
    def _read_symlink(path: str) -> str | None:
        """Return the raw target if the path itself is a symlink."""
        try:
            if not stat.S_ISLNK(os.lstat(path).st_mode):
                return None
            return os.readlink(path)
        except OSError:
            return None
