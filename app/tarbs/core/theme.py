"""Color palette for tarbs console output.

The bundled ``data/theme.toml`` defines every color. A ``[colors]`` table
in ``~/.config/tarbs/theme.toml`` may override any subset of them.
"""

import logging
import tomllib
from functools import cache
from importlib import resources
from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, StringConstraints
from pydantic import ValidationError as PydanticValidationError
from rich.theme import Theme

from tarbs.core.paths import get_config_dir

logger = logging.getLogger(__name__)

HexColor = Annotated[
    str,
    StringConstraints(strip_whitespace=True, pattern=r"^#(?:[0-9a-fA-F]{3}){1,2}$"),
]

# Styles rendered bold on top of their palette color.
BOLD_STYLES = frozenset({"error", "step"})


class Palette(BaseModel):
    """Colors used by the console helpers and result tables (#RGB or #RRGGBB)."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    header: HexColor = "#69B9A1"
    border: HexColor = "#29526d"
    muted: HexColor = "#b2bec3"
    info: HexColor = "#0ec1c8"
    step: HexColor = "#b76ee8"
    success: HexColor = "#03b971"
    skipped: HexColor = "#636e72"
    warning: HexColor = "#f5b332"
    error: HexColor = "#f53263"


def _read_colors(text: str, source: str) -> dict[str, object]:
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        logger.warning("Ignoring theme %s: %s", source, e)
        return {}
    colors = data.get("colors", {})
    if not isinstance(colors, dict):
        logger.warning("Ignoring theme %s: [colors] is not a table", source)
        return {}
    return colors


def load_palette(user_path: Path | None = None) -> Palette:
    """Load the bundled palette merged with the user's overrides.

    An unreadable or invalid user file is logged and the bundled colors
    are used instead.

    Args:
        user_path: Override file, defaults to ``~/.config/tarbs/theme.toml``.
    """
    bundled = resources.files("tarbs.data").joinpath("theme.toml").read_text(encoding="utf-8")
    colors = _read_colors(bundled, "data/theme.toml")

    path = user_path or get_config_dir() / "theme.toml"
    try:
        overrides = _read_colors(path.read_text(encoding="utf-8"), str(path))
    except FileNotFoundError:
        overrides = {}
    except OSError as e:
        logger.warning("Cannot read theme %s: %s", path, e)
        overrides = {}

    try:
        return Palette.model_validate({**colors, **overrides})
    except PydanticValidationError as e:
        logger.warning("Invalid theme %s, using defaults: %s", path, e)
        return Palette()


def build_rich_theme(palette: Palette) -> Theme:
    """Map a palette onto the Rich styles used in markup."""
    styles = {
        name: f"bold {color}" if name in BOLD_STYLES else color
        for name, color in palette.model_dump().items()
    }
    styles["bold_header"] = f"bold {palette.header}"
    return Theme(styles)


@cache
def get_theme() -> Theme:
    """Return the Rich theme, loading the palette on first use."""
    return build_rich_theme(load_palette())
