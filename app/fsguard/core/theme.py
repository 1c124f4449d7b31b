"""Console theme for fsguard.

The palette maps guard outcomes to colors: removed entries, moved files and
kept (protected or skipped) entries each get their own style. Users may
override any color in theme.toml under a [colors] table:

    [colors]
    removed = "#ff5555"
    kept = "#50fa7b"
"""

import logging
import re
import sys
import tomllib
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from rich.theme import Theme

from fsguard.core.paths import get_theme_path

logger = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r"#(?:[0-9a-fA-F]{3}){1,2}")

# Styles rendered bold on top of their palette color
_BOLD_STYLES = frozenset({"error", "header"})


class ThemeColors(BaseModel):
    """Palette used by the CLI. Every value is a #RGB or #RRGGBB hex code."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    text: str = "#ffffff"
    muted: str = "#b2bec3"
    header: str = "#69B9A1"
    border: str = "#29526d"

    success: str = "#03b971"
    warning: str = "#f5b332"
    error: str = "#f53263"
    info: str = "#0ec1c8"

    # Guard outcomes
    removed: str = "#f53263"
    moved: str = "#0e8ac8"
    kept: str = "#c1ff62"

    @field_validator("*", mode="before")
    @classmethod
    def validate_hex_color(cls, value: object) -> str:
        if not isinstance(value, str) or not _HEX_COLOR.fullmatch(value.strip()):
            msg = f"expected a #RGB or #RRGGBB hex color, got {value!r}"
            raise ValueError(msg)
        return value.strip()


def read_theme_overrides(path: Path) -> dict[str, object]:
    """Read the [colors] table of a theme file.

    A missing file yields no overrides. A file that cannot be parsed is
    reported on stderr and also yields no overrides.

    Args:
        path: Theme file to read.

    Returns:
        Raw color overrides, unvalidated.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return {}
    except (tomllib.TOMLDecodeError, OSError) as e:
        logger.warning("Ignoring theme file %s: %s", path, e)
        print(f"Warning: Ignoring theme file {path}: {e}", file=sys.stderr)
        return {}

    colors = data.get("colors", {})
    if not isinstance(colors, dict):
        logger.warning("Ignoring theme file %s: [colors] is not a table", path)
        return {}
    return colors


def load_theme(path: Path | None = None) -> ThemeColors:
    """Build the palette from the defaults and the user's overrides.

    Invalid overrides discard the whole file rather than half-applying it.

    Args:
        path: Theme file to read. If None, uses the default theme path.

    Returns:
        The effective ThemeColors.
    """
    overrides = read_theme_overrides(path or get_theme_path())
    if not overrides:
        return ThemeColors()

    try:
        return ThemeColors.model_validate(overrides)
    except ValidationError as e:
        logger.warning("Invalid theme colors, using defaults: %s", e)
        print(f"Warning: Invalid theme colors, using defaults: {e}", file=sys.stderr)
        return ThemeColors()


def get_rich_theme(colors: ThemeColors | None = None) -> Theme:
    """Turn a palette into Rich styles, one per palette entry."""
    colors = colors or load_theme()
    styles = {
        name: f"bold {color}" if name in _BOLD_STYLES else color
        for name, color in colors.model_dump().items()
    }
    styles["bold_header"] = f"bold {colors.header}"
    return Theme(styles)


_cached_theme: Theme | None = None


def get_theme() -> Theme:
    """Return the process-wide Rich theme, building it on first use."""
    global _cached_theme
    if _cached_theme is None:
        _cached_theme = get_rich_theme()
    return _cached_theme


def reload_theme() -> Theme:
    """Rebuild the process-wide Rich theme from the theme file."""
    global _cached_theme
    _cached_theme = get_rich_theme()
    return _cached_theme
