"""Data models for path classification and deletion outcomes.

This module defines the verdict returned by the path validator and the
receipt produced for every deletion attempt.
"""

from dataclasses import dataclass
from enum import Enum


class VerdictKind(str, Enum):
    """Classification of a path before deletion.

    Attributes:
        SAFE: Path may be deleted without further checks.
        BLOCKED: Path must never be deleted (system path or user whitelist).
        CAUTION: Path may be deleted, but the user should be warned first.
        SYMLINK: Path is a symbolic link; its target was read, not validated.
        INVALID: Path is malformed (empty, relative, traversal).
    """

    SAFE = "safe"
    BLOCKED = "blocked"
    CAUTION = "caution"
    SYMLINK = "symlink"
    INVALID = "invalid"


@dataclass(frozen=True, slots=True)
class PathVerdict:
    """Result of classifying a single path.

    Exactly one kind holds per verdict. BLOCKED, CAUTION and INVALID carry a
    reason, SYMLINK carries the raw link target, SAFE carries nothing.
    Use the factory classmethods rather than the constructor.

    Attributes:
        kind: The verdict kind.
        reason: Human-readable explanation (BLOCKED, CAUTION, INVALID).
        target: Raw symlink target as returned by readlink (SYMLINK).
    """

    kind: VerdictKind
    reason: str | None = None
    target: str | None = None

    def __post_init__(self) -> None:
        """Validate that the payload matches the verdict kind."""
        if self.kind == VerdictKind.SYMLINK:
            if self.target is None:
                msg = "Symlink verdict requires a target"
                raise ValueError(msg)
            if self.reason is not None:
                msg = "Symlink verdict cannot carry a reason"
                raise ValueError(msg)
            return

        if self.target is not None:
            msg = f"{self.kind.value} verdict cannot carry a target"
            raise ValueError(msg)

        if self.kind == VerdictKind.SAFE:
            if self.reason is not None:
                msg = "Safe verdict cannot carry a reason"
                raise ValueError(msg)
        elif not self.reason:
            msg = f"{self.kind.value} verdict requires a reason"
            raise ValueError(msg)

    @classmethod
    def safe(cls) -> "PathVerdict":
        return cls(VerdictKind.SAFE)

    @classmethod
    def blocked(cls, reason: str) -> "PathVerdict":
        return cls(VerdictKind.BLOCKED, reason=reason)

    @classmethod
    def caution(cls, reason: str) -> "PathVerdict":
        return cls(VerdictKind.CAUTION, reason=reason)

    @classmethod
    def symlink(cls, target: str) -> "PathVerdict":
        return cls(VerdictKind.SYMLINK, target=target)

    @classmethod
    def invalid(cls, reason: str) -> "PathVerdict":
        return cls(VerdictKind.INVALID, reason=reason)

    @property
    def is_safe(self) -> bool:
        """Check if the path is safe to delete."""
        return self.kind == VerdictKind.SAFE

    @property
    def is_blocked(self) -> bool:
        """Check if the path is protected."""
        return self.kind == VerdictKind.BLOCKED

    @property
    def is_caution(self) -> bool:
        """Check if the path needs a warning before deletion."""
        return self.kind == VerdictKind.CAUTION

    @property
    def is_symlink(self) -> bool:
        """Check if the path is a symbolic link."""
        return self.kind == VerdictKind.SYMLINK

    @property
    def is_invalid(self) -> bool:
        """Check if the path is malformed."""
        return self.kind == VerdictKind.INVALID

    @property
    def is_refusal(self) -> bool:
        """Check if the verdict forbids deletion outright."""
        return self.kind in (VerdictKind.BLOCKED, VerdictKind.INVALID)


@dataclass(frozen=True, slots=True)
class DeletionReceipt:
    """Result of a single deletion attempt (real or simulated).

    Attributes:
        path: Absolute path that was operated on.
        success: Whether the operation completed successfully.
        bytes_freed: Bytes freed (or that would be freed in dry-run).
        error: Error message if the operation failed, None otherwise.
        dry_run: Whether this was a dry-run (no actual deletion).
    """

    path: str
    success: bool
    bytes_freed: int = 0
    error: str | None = None
    dry_run: bool = False

    def __post_init__(self) -> None:
        """Validate receipt data after initialization."""
        if self.bytes_freed < 0:
            msg = f"bytes_freed cannot be negative, got {self.bytes_freed}"
            raise ValueError(msg)

    @property
    def failed(self) -> bool:
        """Check if the deletion failed."""
        return not self.success
