"""Unit tests for the main CLI application.

Tests for global options, logging setup and the menu fallback.
"""

import logging
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from mole.cli.common import build_runtime
from mole.cli.main import app, configure_logging
from mole.cli.menu import CommandKind, MenuSelection
from mole.core.config import MoleConfig
from typer.testing import CliRunner

runner = CliRunner()


class TestGlobalOptions:
    """Tests for the application callback."""

    def test_help_lists_commands(self) -> None:
        """--help shows every subcommand."""
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        for command in ("clean", "analyze", "status", "purge", "optimize", "uninstall"):
            assert command in result.output

    def test_version(self) -> None:
        """--version prints the version and exits."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert "mole version 0.1.0" in result.output

    def test_without_command_opens_menu(self) -> None:
        """Running without a subcommand shows the menu."""
        with (
            patch("mole.cli.main.run_menu", return_value=None) as mock_menu,
            patch("mole.cli.main.dispatch_selection") as mock_dispatch,
        ):
            result = runner.invoke(app, [])

        assert result.exit_code == 0
        mock_menu.assert_called_once()
        mock_dispatch.assert_not_called()

    def test_menu_selection_is_dispatched(self) -> None:
        """The chosen menu entry runs after the menu returns."""
        selection = MenuSelection(kind=CommandKind.CLEAN, dry_run=True)
        with (
            patch("mole.cli.main.run_menu", return_value=selection),
            patch("mole.cli.main.dispatch_selection") as mock_dispatch,
        ):
            result = runner.invoke(app, [])

        assert result.exit_code == 0
        mock_dispatch.assert_called_once_with(selection)


class TestConfigureLogging:
    """Tests for configure_logging function."""

    @pytest.mark.parametrize(
        ("verbose", "quiet", "level"),
        [
            (False, False, logging.WARNING),
            (True, False, logging.DEBUG),
            (False, True, logging.ERROR),
            (True, True, logging.DEBUG),
        ],
    )
    def test_levels(self, verbose: bool, quiet: bool, level: int) -> None:
        """Verbose wins over quiet; the default shows warnings."""
        configure_logging(verbose=verbose, quiet=quiet)

        assert logging.getLogger().level == level


class TestBuildRuntime:
    """Tests for build_runtime function."""

    @patch("mole.cli.common.is_root", return_value=True)
    def test_privilege_comes_from_euid(self, mock_root: MagicMock) -> None:
        """The executor is elevated when running as root."""
        runtime = build_runtime(MoleConfig())

        assert runtime.elevated
        assert runtime.validator is runtime.executor.validator

    @patch("mole.cli.common.is_root", return_value=False)
    def test_config_whitelist_is_applied(self, mock_root: MagicMock, workdir: Path) -> None:
        """Whitelist entries from the config file protect their paths."""
        keep = workdir / "keep"
        runtime = build_runtime(MoleConfig(whitelist=[str(keep)]))

        assert not runtime.elevated
        assert runtime.validator.validate(keep).is_blocked
