"""Protected filesystem paths that should never (or only carefully) be deleted.

This module defines the static protection tables used by the path
validator: system prefixes that are always blocked, locations that need
an explicit warning, and a short list of package-cache locations that sit
under a blocked prefix but are known to be safe to clean.
"""

from dataclasses import dataclass

# Critical system paths (prefix-matched, except "/" which matches exactly).
BLOCKED_PATHS: tuple[str, ...] = (
    # Root filesystem
    "/",
    # Core system directories
    "/bin",
    "/boot",
    "/dev",
    "/etc",
    "/lib",
    "/lib32",
    "/lib64",
    "/libx32",
    "/proc",
    "/root",
    "/run",
    "/sbin",
    "/srv",
    "/sys",
    "/usr",
    "/var",
    # Package-manager and logging state
    "/var/lib",
    "/var/log",
    "/var/run",
    # Snap runtime
    "/snap/core",
    "/snap/snapd",
)

# Paths that may be deleted only with an explicit warning (exact match).
CAUTION_PATHS: tuple[str, ...] = (
    "/opt",
    "/home",
    "/tmp",
    "/var/tmp",
    "/var/cache",
)

# Package caches nested inside blocked prefixes that remain deletable.
SAFE_CACHE_EXCEPTIONS: tuple[str, ...] = (
    "/var/cache/apt/archives",
    "/var/cache/apt/pkgcache.bin",
    "/var/cache/apt/srcpkgcache.bin",
    "/var/cache/pacman/pkg",
    "/var/cache/dnf",
    "/var/cache/yum",
)

ROOT = "/"


def is_under(path: str, prefix: str) -> bool:
    """Check if a normalized path equals or descends from a prefix.

    The root prefix only matches the root itself; otherwise every
    absolute path would count as a descendant.

    Args:
        path: Normalized absolute path.
        prefix: Normalized absolute prefix.

    Returns:
        True if path is prefix or lies below it.
    """
    if prefix == ROOT:
        return path == ROOT
    return path == prefix or path.startswith(prefix + "/")


@dataclass(frozen=True, slots=True)
class ProtectedPathSet:
    """Immutable protection tables consulted by the validator.

    Attributes:
        blocked: Prefixes that are never deletable.
        caution: Exact locations that require acknowledgment.
        safe_cache_exceptions: Locations carved out of the blocked prefixes.
    """

    blocked: tuple[str, ...] = BLOCKED_PATHS
    caution: tuple[str, ...] = CAUTION_PATHS
    safe_cache_exceptions: tuple[str, ...] = SAFE_CACHE_EXCEPTIONS

    def __post_init__(self) -> None:
        """Validate the tables after initialization."""
        for entry in (*self.blocked, *self.caution, *self.safe_cache_exceptions):
            if not entry.startswith("/"):
                msg = f"Protected path must be absolute: {entry!r}"
                raise ValueError(msg)

        overlap = set(self.blocked) & set(self.caution)
        if overlap:
            msg = f"Paths cannot be both blocked and caution: {sorted(overlap)}"
            raise ValueError(msg)

        for exception in self.safe_cache_exceptions:
            if not any(is_under(exception, prefix) for prefix in self.blocked):
                msg = f"Safe cache exception is not inside a blocked prefix: {exception}"
                raise ValueError(msg)

    def is_safe_cache(self, path: str) -> bool:
        """Check if a path lies inside a known-safe package cache."""
        return any(is_under(path, exception) for exception in self.safe_cache_exceptions)

    def blocking_prefix(self, path: str) -> str | None:
        """Return the first blocked prefix covering a path.

        Paths inside a safe cache exception are never blocked.

        Args:
            path: Normalized absolute path.

        Returns:
            The matching blocked prefix, or None if the path is not blocked.
        """
        if self.is_safe_cache(path):
            return None

        for prefix in self.blocked:
            if is_under(path, prefix):
                return prefix

        return None

    def caution_match(self, path: str) -> str | None:
        """Return the caution entry equal to a path, if any."""
        for entry in self.caution:
            if path == entry:
                return entry
        return None


# Default tables, built once at import.
DEFAULT_PROTECTED_PATHS = ProtectedPathSet()
