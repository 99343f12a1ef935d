"""Console colors for snapvers.

The bundled ``data/theme.toml`` holds the defaults; any subset of its
``[colors]`` table can be overridden in ~/.config/snapvers/theme.toml.
"""

import logging
import tomllib
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from rich.theme import Theme

from snapvers.core.paths import get_config_dir

logger = logging.getLogger(__name__)

HexColor = Annotated[str, Field(pattern=r"^#([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")]


class ThemeColors(BaseModel):
    """Hex colors (#RGB or #RRGGBB) for the console styles."""

    model_config = ConfigDict(extra="forbid")

    header: HexColor = "#69B9A1"
    border: HexColor = "#29526d"
    muted: HexColor = "#b2bec3"
    success: HexColor = "#03b971"
    error: HexColor = "#f53263"
    info: HexColor = "#0ec1c8"
    snapshot: HexColor = "#0e8ac8"
    live: HexColor = "#c1ff62"
    deleted: HexColor = "#f53263"
    phantom: HexColor = "#d44ebc"


def get_user_theme_path() -> Path:
    """Path of the optional user theme override."""
    return get_config_dir() / "theme.toml"


def _read_colors(path: Path) -> dict[str, object]:
    """Read the ``[colors]`` table of a theme file; missing or broken files give {}."""
    try:
        with open(path, "rb") as f:
            colors = tomllib.load(f).get("colors", {})
    except FileNotFoundError:
        return {}
    except (tomllib.TOMLDecodeError, OSError) as e:
        logger.warning("Ignoring theme file %s: %s", path, e)
        return {}
    if not isinstance(colors, dict):
        logger.warning("Ignoring theme file %s: [colors] is not a table", path)
        return {}
    return colors


def load_theme() -> ThemeColors:
    """Load the bundled colors with the user's overrides applied.

    An invalid override falls back to the defaults.
    """
    bundled = resources.files("snapvers.data").joinpath("theme.toml")
    colors = {**_read_colors(Path(str(bundled))), **_read_colors(get_user_theme_path())}
    try:
        return ThemeColors.model_validate(colors)
    except ValidationError as e:
        logger.warning("Invalid theme colors, using defaults: %s", e)
        return ThemeColors()


def get_rich_theme(colors: ThemeColors) -> Theme:
    """Map theme colors to the Rich styles used by the CLI."""
    return Theme(
        {
            "success": colors.success,
            "error": f"bold {colors.error}",
            "info": colors.info,
            "border": colors.border,
            "bold_header": f"bold {colors.header}",
            "dim": colors.muted,
            "snapshot": colors.snapshot,
            "live": f"bold {colors.live}",
            "deleted": colors.deleted,
            "phantom": f"italic {colors.phantom}",
        }
    )


@lru_cache(maxsize=1)
def get_theme() -> Theme:
    """Rich theme for the shared consoles, loaded once."""
    return get_rich_theme(load_theme())
