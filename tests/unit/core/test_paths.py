"""Unit tests for user file locations."""

from pathlib import Path

import pytest
from mole.core.paths import (
    APP_NAME,
    get_config_dir,
    get_config_path,
    get_theme_path,
    get_whitelist_path,
)


class TestConfigDir:
    """Tests for get_config_dir function."""

    def test_default(self, isolated_home: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Falls back to ~/.config when XDG_CONFIG_HOME is unset."""
        monkeypatch.delenv("XDG_CONFIG_HOME")

        assert get_config_dir() == isolated_home / ".config" / APP_NAME

    def test_respects_xdg_config_home(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """An absolute XDG_CONFIG_HOME wins."""
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))

        assert get_config_dir() == tmp_path / "cfg" / "mole"

    @pytest.mark.parametrize("value", ["", "relative/cfg"])
    def test_ignores_empty_or_relative(
        self, value: str, isolated_home: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Empty and relative values count as unset."""
        monkeypatch.setenv("XDG_CONFIG_HOME", value)

        assert get_config_dir() == isolated_home / ".config" / APP_NAME


class TestConfigFiles:
    """Tests for files inside the config directory."""

    def test_config_path(self) -> None:
        """The settings file is config.toml."""
        assert get_config_path() == get_config_dir() / "config.toml"

    def test_whitelist_path(self) -> None:
        """The whitelist file has no extension."""
        assert get_whitelist_path() == get_config_dir() / "whitelist"

    def test_theme_path(self) -> None:
        """The theme override lives next to the config."""
        assert get_theme_path() == get_config_dir() / "theme.toml"
