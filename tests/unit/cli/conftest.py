"""Fixtures shared by the CLI command tests."""

import logging
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from mole.cli.common import Runtime
from mole.core.config import MoleConfig
from mole.safety.executor import DeletionExecutor
from mole.safety.validator import PathValidator
from mole.safety.whitelist import Whitelist


@pytest.fixture
def make_runtime() -> Callable[..., Runtime]:
    """Build a Runtime without touching the real configuration or euid."""

    def factory(
        *,
        elevated: bool = False,
        whitelist: tuple[Path, ...] = (),
        config: MoleConfig | None = None,
    ) -> Runtime:
        validator = PathValidator(Whitelist(whitelist), elevated=elevated)
        return Runtime(config=config or MoleConfig(), executor=DeletionExecutor(validator))

    return factory


@pytest.fixture(autouse=True)
def restore_root_logger() -> Iterator[None]:
    """Undo the root logger changes made by configure_logging."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
