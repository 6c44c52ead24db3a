"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from pathlib import Path

import pytest
from mole.safety.validator import PathValidator
from mole.safety.whitelist import Whitelist


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point HOME and XDG_CONFIG_HOME at a per-test temporary tree.

    Keeps tests away from the real user configuration and from /root,
    which is a protected path when tests run as root.
    """
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    return home


@pytest.fixture
def workdir(tmp_path: Path) -> Path:
    """Scratch directory for files that tests create and delete."""
    path = tmp_path / "work"
    path.mkdir()
    return path


@pytest.fixture
def validator() -> PathValidator:
    """Unprivileged validator with an empty whitelist."""
    return PathValidator(Whitelist(()))


@pytest.fixture
def mock_dpkg_output() -> str:
    """Sample dpkg-query output for testing."""
    return """firefox\t128.0\t204800
neovim\t0.9.5\t51200
libgtk-3-0\t3.24.41\t10240
curl\t8.5.0\t512"""


@pytest.fixture
def mock_snap_output() -> str:
    """Sample snap list output for testing."""
    return """Name      Version    Rev    Tracking       Publisher   Notes
core22    20240111   1122   latest/stable  canonical✓  base
firefox   128.0      4173   latest/stable  mozilla✓    -
snapd     2.61.3     21184  latest/stable  canonical✓  snapd
spotify   1.2.31     75     latest/stable  spotify✓    -"""


@pytest.fixture
def mock_flatpak_output() -> str:
    """Sample flatpak list output for testing."""
    return """com.spotify.Client\tSpotify\t1.2.31.1205
org.mozilla.firefox\tFirefox\t128.0
org.gnome.Calculator\tCalculator\t46.1"""
