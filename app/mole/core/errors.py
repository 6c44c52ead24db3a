"""Exception hierarchy for mole.

Every error the deletion core raises on purpose derives from MoleError so
callers can branch between reporting a single failed item and aborting.
Plain OSError from the filesystem is never wrapped, except for permission
denials during deletion, which get their own type so the UI can suggest
running with sudo.
"""


class MoleError(Exception):
    """Base exception for all mole errors."""


class BlockedPathError(MoleError):
    """Raised when a path is refused by the protection policy.

    Attributes:
        path: The refused path.
        reason: Why the path is protected.
    """

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Protected path cannot be deleted: {path} ({reason})")


class InvalidPathError(MoleError):
    """Raised when a path is malformed (empty, relative, traversal)."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid path {path!r}: {reason}")


class DeletionPermissionError(MoleError):
    """Raised when the operating system denies a deletion."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Permission denied: {path} (try again with sudo)")


class PathNotFoundError(MoleError):
    """Raised when a path that must exist does not."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Path not found: {path}")


class ConfigError(MoleError):
    """Raised when the configuration cannot be written."""


class CommandFailedError(MoleError):
    """Raised when a shelled-out maintenance command fails."""

    def __init__(self, command: str, message: str) -> None:
        self.command = command
        self.message = message
        super().__init__(f"Command failed: {command} - {message}")
