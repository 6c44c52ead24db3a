"""Locations of mole's user files.

Everything mole reads from the user lives in one XDG config directory,
``$XDG_CONFIG_HOME/mole`` (``~/.config/mole`` by default):

- ``config.toml``: settings, see mole.core.config
- ``whitelist``: paths that must never be deleted
- ``theme.toml``: color overrides for the bundled theme
"""

import os
from pathlib import Path

APP_NAME = "mole"

CONFIG_FILE = "config.toml"
WHITELIST_FILE = "whitelist"
THEME_FILE = "theme.toml"


def get_config_dir() -> Path:
    """Get mole's configuration directory.

    ``XDG_CONFIG_HOME`` is ignored when empty or relative, as the XDG Base
    Directory rules require.

    Returns:
        Path to ``$XDG_CONFIG_HOME/mole`` or ``~/.config/mole``.
    """
    base = os.environ.get("XDG_CONFIG_HOME", "")
    if not os.path.isabs(base):
        return Path.home() / ".config" / APP_NAME
    return Path(base) / APP_NAME


def get_config_path() -> Path:
    """Path of the settings file."""
    return get_config_dir() / CONFIG_FILE


def get_whitelist_path() -> Path:
    """Get the user whitelist file path.

    The whitelist holds one protected path per line. Paths listed there
    are never deleted, even when they would otherwise be safe.

    Returns:
        Path to ``~/.config/mole/whitelist``.
    """
    return get_config_dir() / WHITELIST_FILE


def get_theme_path() -> Path:
    """Path of the user's color overrides."""
    return get_config_dir() / THEME_FILE
