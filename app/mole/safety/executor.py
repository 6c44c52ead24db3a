"""Deletion executor.

Handles validated deletion of files and directories with dry-run support,
size accounting, and typed errors for policy refusals. This is a
non-interactive primitive: confirmation prompts belong to the caller.
"""

import logging
import os
import shutil
import stat
from collections.abc import Iterable
from pathlib import Path

from mole.core.errors import (
    BlockedPathError,
    DeletionPermissionError,
    InvalidPathError,
    MoleError,
)
from mole.safety.models import DeletionReceipt, PathVerdict
from mole.safety.sizing import size_of
from mole.safety.validator import PathValidator, normalize, resolve_link_target
from mole.safety.whitelist import Whitelist
from mole.utils.formatting import format_size

logger = logging.getLogger(__name__)


class DeletionExecutor:
    """Deletes paths after they pass the validator.

    Args:
        validator: Validator gating every deletion. If None, one is built
            from ``whitelist`` and ``elevated``.
        whitelist: Whitelist for the default validator.
        elevated: Whether deletions run with superuser rights (default
            validator only; an explicit validator carries its own flag).
    """

    def __init__(
        self,
        validator: PathValidator | None = None,
        *,
        whitelist: Whitelist | None = None,
        elevated: bool = False,
    ) -> None:
        self._validator = validator or PathValidator(whitelist, elevated=elevated)

    @property
    def validator(self) -> PathValidator:
        """Validator used for every deletion."""
        return self._validator

    @property
    def elevated(self) -> bool:
        """Whether deletions run with superuser rights."""
        return self._validator.elevated

    def delete(self, path: str | Path, dry_run: bool = False) -> int:
        """Validate and delete a single path.

        Args:
            path: Absolute path to delete.
            dry_run: If True, compute the size but do not touch the filesystem.

        Returns:
            Bytes freed (or that would be freed in dry-run mode).

        Raises:
            BlockedPathError: If the path (or, when elevated, its link
                target) is protected.
            InvalidPathError: If the path is malformed.
            DeletionPermissionError: If the OS denies the deletion.
            OSError: For any other filesystem failure.
        """
        verdict = self._validator.validate_for_deletion(os.fspath(path))
        if verdict.is_invalid:
            raise InvalidPathError(os.fspath(path), verdict.reason or "invalid")
        # A trailing slash would make lstat and rmtree follow a symlink
        path_str = normalize(os.fspath(path))
        self._enforce(path_str, verdict)

        try:
            mode = os.lstat(path_str).st_mode
        except FileNotFoundError:
            logger.debug("Nothing to delete at %s", path_str)
            return 0

        size = size_of(path_str)

        if self._validator.is_large_deletion(size):
            logger.warning(
                "Large deletion: %s (%s). Proceeding with caution.",
                path_str,
                format_size(size),
            )

        if dry_run:
            logger.info("Dry-run: would delete %s (%s)", path_str, format_size(size))
            return size

        try:
            # Directories (but not symlinks to directories)
            if stat.S_ISDIR(mode):
                shutil.rmtree(path_str)
            else:
                os.unlink(path_str)
        except PermissionError as e:
            raise DeletionPermissionError(path_str) from e

        logger.debug("Deleted %s (%s)", path_str, format_size(size))
        return size

    def delete_many(
        self,
        paths: Iterable[str | Path],
        dry_run: bool = False,
    ) -> list[DeletionReceipt]:
        """Delete multiple paths, isolating failures per path.

        Args:
            paths: Absolute paths to delete.
            dry_run: If True, simulate every deletion.

        Returns:
            List of DeletionReceipt, one per input path.
        """
        return [self._attempt(os.fspath(path), dry_run) for path in paths]

    def clean_directory_contents(
        self,
        path: str | Path,
        dry_run: bool = False,
    ) -> list[DeletionReceipt]:
        """Delete the immediate children of a directory, keeping the directory.

        Each child is validated and deleted independently. Refused children
        are skipped and reported; failures never stop the remaining children.

        Args:
            path: Directory whose contents should be removed.
            dry_run: If True, simulate every deletion.

        Returns:
            List of DeletionReceipt, one per child. Empty if the directory is
            missing or is itself a symlink.

        Raises:
            BlockedPathError: If the directory itself is protected.
            InvalidPathError: If the directory path is malformed.
            OSError: If the directory cannot be listed at all.
        """
        verdict = self._validator.validate(os.fspath(path))
        if verdict.is_refusal:
            self._enforce(os.fspath(path), verdict)

        path_str = normalize(os.fspath(path))
        if verdict.is_symlink:
            logger.warning("Not cleaning %s: it is a symlink to %s", path_str, verdict.target)
            return []
        if not os.path.isdir(path_str):
            return []

        receipts: list[DeletionReceipt] = []
        for child in sorted(os.listdir(path_str)):
            child_path = os.path.join(path_str, child)
            child_verdict = self._validator.validate(child_path)

            if child_verdict.is_refusal:
                logger.debug("Skipping %s: %s", child_path, child_verdict.reason)
                receipts.append(
                    DeletionReceipt(
                        path=child_path,
                        success=False,
                        error=child_verdict.reason,
                        dry_run=dry_run,
                    )
                )
                continue

            if child_verdict.is_symlink and child_verdict.target is not None:
                target = resolve_link_target(child_path, child_verdict.target)
                if self._validator.validate(target).is_blocked:
                    logger.debug("Skipping symlink to protected path: %s", child_path)
                    receipts.append(
                        DeletionReceipt(
                            path=child_path,
                            success=False,
                            error=f"symlink target is protected: {target}",
                            dry_run=dry_run,
                        )
                    )
                    continue

            receipts.append(self._attempt(child_path, dry_run))

        return receipts

    def _attempt(self, path: str, dry_run: bool) -> DeletionReceipt:
        """Delete a path and capture the outcome as a receipt."""
        try:
            freed = self.delete(path, dry_run=dry_run)
        except (MoleError, OSError) as e:
            logger.debug("Deletion failed for %s: %s", path, e)
            return DeletionReceipt(path=path, success=False, error=str(e), dry_run=dry_run)
        return DeletionReceipt(path=path, success=True, bytes_freed=freed, dry_run=dry_run)

    def _enforce(self, path: str, verdict: PathVerdict) -> None:
        """Turn a verdict into an error or a warning.

        Raises:
            BlockedPathError: For BLOCKED verdicts, and for symlinks whose
                target is blocked when running elevated.
            InvalidPathError: For INVALID verdicts.
        """
        if verdict.is_blocked:
            raise BlockedPathError(path, verdict.reason or "protected")
        if verdict.is_invalid:
            raise InvalidPathError(path, verdict.reason or "invalid")
        if verdict.is_caution:
            logger.warning("Caution: %s - %s", path, verdict.reason)
        elif verdict.is_symlink and verdict.target is not None and self.elevated:
            target = resolve_link_target(path, verdict.target)
            target_verdict = self._validator.validate(target)
            if target_verdict.is_blocked:
                raise BlockedPathError(path, f"symlink target blocked: {target_verdict.reason}")
