"""User configuration for mole.

This module provides the configuration model and I/O functions for
``~/.config/mole/config.toml``. A missing or broken file never stops the
tool: defaults are used and a warning is logged.
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from mole.core.errors import ConfigError
from mole.core.paths import get_config_path

logger = logging.getLogger(__name__)

DEFAULT_PROJECT_PATHS: tuple[str, ...] = (
    "~/Projects",
    "~/Development",
    "~/dev",
    "~/code",
    "~/GitHub",
)


class MoleConfig(BaseModel):
    """Configuration for mole.

    Attributes:
        whitelist: Extra protected paths, merged after the whitelist file.
        project_paths: Directories scanned by ``mo purge``.
        skip_recent_days: Artifacts modified within this many days are not
            preselected for removal.
        journal_max_size: Target size for ``journalctl --vacuum-size``.
    """

    model_config = ConfigDict(extra="forbid")

    whitelist: Annotated[
        list[str],
        Field(description="Paths that must never be deleted"),
    ] = []
    project_paths: Annotated[
        list[str],
        Field(description="Directories to scan for build artifacts"),
    ] = list(DEFAULT_PROJECT_PATHS)
    skip_recent_days: Annotated[
        int,
        Field(ge=0, description="Skip artifacts newer than this many days"),
    ] = 7
    journal_max_size: Annotated[
        str,
        Field(pattern=r"^\d+[KMGT]?$", description="Journal size to keep, e.g. 100M"),
    ] = "100M"

    def expanded_project_paths(self) -> list[Path]:
        """Get project paths as absolute paths with ``~`` expanded."""
        return [Path(p).expanduser().absolute() for p in self.project_paths]


def load_config(path: Path | None = None) -> MoleConfig:
    """Load configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated MoleConfig, or defaults if the file is missing or invalid.
    """
    config_path = path or get_config_path()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        logger.debug("No config file at %s, using defaults", config_path)
        return MoleConfig()
    except tomllib.TOMLDecodeError as e:
        logger.warning("Invalid TOML in %s, using defaults: %s", config_path, e)
        return MoleConfig()
    except OSError as e:
        logger.warning("Failed to read %s, using defaults: %s", config_path, e)
        return MoleConfig()

    try:
        return MoleConfig.model_validate(data)
    except ValidationError as e:
        logger.warning("Invalid config content in %s, using defaults: %s", config_path, e)
        return MoleConfig()


def save_config(config: MoleConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The MoleConfig object to save.
        path: Path to save the config. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()

    tmp_path: Path | None = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(config.model_dump(), f)
        # os.replace() is atomic on POSIX
        os.replace(tmp_path, config_path)
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path
