"""Shared setup for CLI commands.

This module builds the objects every destructive command needs from the
user configuration: the whitelist, the validator and the executor. It is
the only place that asks the operating system for the privilege level.
"""

import logging
from dataclasses import dataclass

from mole.core.config import MoleConfig, load_config
from mole.safety.executor import DeletionExecutor
from mole.safety.validator import PathValidator
from mole.safety.whitelist import load_whitelist
from mole.utils.shell import is_root

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Runtime:
    """Per-invocation objects shared by commands.

    Attributes:
        config: Loaded user configuration.
        executor: Deletion executor (its validator carries the whitelist).
    """

    config: MoleConfig
    executor: DeletionExecutor

    @property
    def validator(self) -> PathValidator:
        """Validator gating every deletion."""
        return self.executor.validator

    @property
    def elevated(self) -> bool:
        """Whether mole runs with superuser rights."""
        return self.executor.elevated


def build_runtime(config: MoleConfig | None = None) -> Runtime:
    """Load configuration and whitelist and build the executor.

    Args:
        config: Preloaded configuration. If None, it is loaded from disk.

    Returns:
        Runtime for the current invocation.
    """
    config = config or load_config()
    whitelist = load_whitelist(extra=config.whitelist)
    elevated = is_root()
    logger.debug("Loaded %d whitelist entries (elevated=%s)", len(whitelist), elevated)

    validator = PathValidator(whitelist, elevated=elevated)
    return Runtime(config=config, executor=DeletionExecutor(validator))
