"""Policy configuration file I/O.

The configuration file is a small TOML document in the per-user config
directory with three optional lists:

    allowed_paths = ["~/projects", "~/tmp"]
    additional_protected_paths = ["~/projects/keep-me"]
    additional_protected_patterns = ["^\\.terraform$"]

The lists are validated with Pydantic. Regular expressions are compiled
later, when the policy is built, and a bad pattern fails that build.
"""

import logging
import os
import sys
import tomllib
from pathlib import Path
from typing import Annotated, Any

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from fsguard.core.paths import get_config_path

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigParseError(ConfigError):
    """Raised when the configuration file is not valid TOML."""


class ConfigValidationError(ConfigError):
    """Raised when the configuration content doesn't match the schema."""


class PolicyConfigError(ConfigError):
    """Raised when a configured protected pattern is not a valid regex."""


class GuardSettings(BaseModel):
    """User-editable policy settings.

    Attributes:
        allowed_paths: Roots under which mutation is permitted. None means
            "not configured" and selects the built-in defaults; an empty
            list rejects every mutation.
        additional_protected_paths: Paths added to the fixed protected set.
        additional_protected_patterns: Regex sources added to the fixed
            protected name patterns.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    allowed_paths: Annotated[
        list[str] | None,
        Field(description="Roots where deletion and moves are permitted"),
    ] = None
    additional_protected_paths: Annotated[
        list[str],
        Field(default_factory=list, description="Extra protected paths"),
    ]
    additional_protected_patterns: Annotated[
        list[str],
        Field(default_factory=list, description="Extra protected name regexes"),
    ]


def read_settings(path: Path | None = None) -> GuardSettings:
    """Read and validate settings from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated GuardSettings. A missing file yields default settings.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigValidationError: If the content doesn't match the schema.
        ConfigError: If the file exists but cannot be read.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        logger.debug("No config file at %s, using defaults", config_path)
        return GuardSettings()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config {config_path}: {e}") from e

    try:
        return GuardSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid config content in {config_path}: {e}") from e


def load_settings(path: Path | None = None) -> GuardSettings:
    """Load settings, falling back to defaults when the file is unusable.

    Unreadable or malformed files are reported as warnings (log and stderr)
    and never abort startup.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        GuardSettings from the file, or defaults.
    """
    try:
        return read_settings(path)
    except ConfigError as e:
        logger.warning("Ignoring configuration, using defaults: %s", e)
        print(f"Warning: {e}; using default settings", file=sys.stderr)
        return GuardSettings()


def create_default_config(
    allowed_paths: list[str],
    path: Path | None = None,
    *,
    force: bool = False,
) -> Path:
    """Write a starter configuration file.

    The file is written atomically via a temporary file and os.replace().

    Args:
        allowed_paths: Allow-list roots to write into the file.
        path: Destination path. If None, uses the default config path.
        force: Overwrite an existing file.

    Returns:
        Path where the configuration was written.

    Raises:
        ConfigError: If the file exists (without force) or cannot be written.
    """
    from tempfile import NamedTemporaryFile

    config_path = path or get_config_path()
    if config_path.exists() and not force:
        raise ConfigError(f"Config already exists: {config_path}")

    data: dict[str, Any] = {
        "allowed_paths": allowed_paths,
        "additional_protected_paths": [],
        "additional_protected_patterns": [],
    }

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
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    logger.info("Wrote default config to %s", config_path)
    return config_path
