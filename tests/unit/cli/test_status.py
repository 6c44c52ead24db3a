"""Unit tests for status command."""

from unittest.mock import MagicMock, patch

from mole.cli.main import app
from mole.monitor.dashboard import DEFAULT_INTERVAL
from typer.testing import CliRunner

runner = CliRunner()


class TestStatusCommand:
    """Tests for mo status command."""

    @patch("mole.cli.commands.status.StatusMonitor")
    def test_default_interval(self, mock_monitor: MagicMock) -> None:
        """The dashboard refreshes at the default interval."""
        result = runner.invoke(app, ["status"])

        assert result.exit_code == 0
        mock_monitor.assert_called_once_with(interval=DEFAULT_INTERVAL)
        mock_monitor.return_value.run.assert_called_once()

    @patch("mole.cli.commands.status.StatusMonitor")
    def test_custom_interval(self, mock_monitor: MagicMock) -> None:
        """--interval is passed to the monitor."""
        result = runner.invoke(app, ["status", "--interval", "2.5"])

        assert result.exit_code == 0
        mock_monitor.assert_called_once_with(interval=2.5)

    @patch("mole.cli.commands.status.StatusMonitor")
    def test_rejects_tiny_interval(self, mock_monitor: MagicMock) -> None:
        """Intervals below 0.1 seconds are a usage error."""
        result = runner.invoke(app, ["status", "-i", "0"])

        assert result.exit_code == 2
        mock_monitor.assert_not_called()
