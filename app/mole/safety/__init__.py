"""Path-safety layer gating every deletion.

This module provides path classification against protected system
locations and the user whitelist, symlink-safe size accounting, and the
deletion executor that ties them together.
"""

from mole.safety.executor import DeletionExecutor
from mole.safety.models import DeletionReceipt, PathVerdict, VerdictKind
from mole.safety.protected import (
    BLOCKED_PATHS,
    CAUTION_PATHS,
    DEFAULT_PROTECTED_PATHS,
    SAFE_CACHE_EXCEPTIONS,
    ProtectedPathSet,
)
from mole.safety.sizing import count_files, size_of
from mole.safety.validator import LARGE_DELETION_THRESHOLD, PathValidator
from mole.safety.whitelist import Whitelist, load_whitelist

__all__ = [
    "BLOCKED_PATHS",
    "CAUTION_PATHS",
    "DEFAULT_PROTECTED_PATHS",
    "LARGE_DELETION_THRESHOLD",
    "SAFE_CACHE_EXCEPTIONS",
    "DeletionExecutor",
    "DeletionReceipt",
    "PathValidator",
    "PathVerdict",
    "ProtectedPathSet",
    "VerdictKind",
    "Whitelist",
    "count_files",
    "load_whitelist",
    "size_of",
]
