"""Color theme for mole's terminal output.

The bundled ``mole/data/theme.toml`` defines every color. A user file at
``~/.config/mole/theme.toml`` may override any subset of them; invalid
overrides are reported and the defaults are used instead, so a broken
theme never stops a cleanup.
"""

import functools
import logging
import re
import tomllib
from importlib import resources
from pathlib import Path
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, ValidationError
from rich.theme import Theme

from mole.core.paths import get_theme_path

logger = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r"#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})")


def _check_hex(value: str) -> str:
    """Accept ``#RGB`` and ``#RRGGBB`` colors, ignoring surrounding blanks."""
    color = value.strip()
    if not _HEX_COLOR.fullmatch(color):
        msg = f"expected #RGB or #RRGGBB, got {value!r}"
        raise ValueError(msg)
    return color


HexColor = Annotated[str, AfterValidator(_check_hex)]


class ThemeColors(BaseModel):
    """Every color mole uses, as hex codes."""

    model_config = ConfigDict(extra="forbid", strict=True)

    text: HexColor = "#ffffff"
    muted: HexColor = "#b2bec3"
    header: HexColor = "#0ec1c8"
    border: HexColor = "#29526d"

    success: HexColor = "#03b971"
    warning: HexColor = "#f5b332"
    error: HexColor = "#f53263"
    info: HexColor = "#0ec1c8"

    # Sizes and path verdicts
    size: HexColor = "#faf870"
    selected: HexColor = "#03b971"
    caution: HexColor = "#f5b332"
    blocked: HexColor = "#f53263"

    # Usage bars in the status dashboard
    bar_low: HexColor = "#03b971"
    bar_medium: HexColor = "#faf870"
    bar_high: HexColor = "#f53263"


# Rich style name -> (color field, extra attributes)
STYLE_MAP: dict[str, tuple[str, str]] = {
    "text": ("text", ""),
    "muted": ("muted", ""),
    "dim": ("muted", ""),
    "header": ("header", ""),
    "bold_header": ("header", "bold"),
    "title": ("header", "bold"),
    "border": ("border", ""),
    "success": ("success", ""),
    "warning": ("warning", ""),
    "error": ("error", "bold"),
    "info": ("info", ""),
    "size": ("size", ""),
    "selected": ("selected", ""),
    "caution": ("caution", ""),
    "blocked": ("blocked", "bold"),
    "bar_low": ("bar_low", ""),
    "bar_medium": ("bar_medium", ""),
    "bar_high": ("bar_high", ""),
}


def get_bundled_theme_path() -> Path:
    """Path of the theme file shipped inside the package."""
    return Path(str(resources.files("mole.data").joinpath("theme.toml")))


def read_color_table(path: Path) -> dict[str, str] | None:
    """Read the ``[colors]`` table of a theme file.

    Non-string values are dropped; validation happens in ThemeColors.

    Args:
        path: Theme file to read.

    Returns:
        Color names mapped to their raw values, or None if the file is
        missing, unreadable or not a valid theme file.
    """
    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return None
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring theme file %s: %s", path, e)
        return None

    table = data.get("colors", {})
    if not isinstance(table, dict):
        logger.warning("Ignoring theme file %s: [colors] must be a table", path)
        return None
    return {str(k): v for k, v in table.items() if isinstance(v, str)}


def load_theme(user_path: Path | None = None) -> ThemeColors:
    """Merge the bundled colors with the user's overrides.

    Args:
        user_path: Override file. If None, uses ``~/.config/mole/theme.toml``.

    Returns:
        Validated colors; the defaults if the merged result is invalid.
    """
    colors = read_color_table(get_bundled_theme_path())
    if colors is None:
        logger.error("Bundled theme is missing, using built-in colors")
        colors = {}

    overrides = read_color_table(user_path or get_theme_path())
    if overrides:
        logger.debug("Applying %d theme overrides", len(overrides))
        colors = {**colors, **overrides}

    try:
        return ThemeColors.model_validate(colors)
    except ValidationError as e:
        logger.warning("Invalid theme colors, using defaults: %s", e)
        return ThemeColors()


def get_rich_theme(colors: ThemeColors | None = None) -> Theme:
    """Build the Rich theme for a set of colors.

    Args:
        colors: Colors to use. If None, they are loaded from disk.

    Returns:
        Theme defining every style name in STYLE_MAP.
    """
    colors = colors or load_theme()
    styles: dict[str, str] = {}
    for name, (field, attributes) in STYLE_MAP.items():
        color = getattr(colors, field)
        styles[name] = f"{attributes} {color}".strip()
    return Theme(styles)


@functools.cache
def get_theme() -> Theme:
    """Get the Rich theme, loading it on first use."""
    return get_rich_theme()
