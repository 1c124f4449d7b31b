"""Unit tests for policy configuration file I/O.

Tests for reading, validating and writing the TOML settings file.
"""

import tomllib
from pathlib import Path
from unittest.mock import patch

import pytest
from fsguard.core.config import (
    ConfigError,
    ConfigParseError,
    ConfigValidationError,
    GuardSettings,
    create_default_config,
    load_settings,
    read_settings,
)


class TestGuardSettings:
    """Tests for the GuardSettings model."""

    def test_defaults(self) -> None:
        """Unset allowed_paths is None, extras are empty."""
        settings = GuardSettings()
        assert settings.allowed_paths is None
        assert settings.additional_protected_paths == []
        assert settings.additional_protected_patterns == []

    def test_unknown_keys_rejected(self) -> None:
        """Typos in key names are errors, not silently ignored."""
        with pytest.raises(ValueError):
            GuardSettings.model_validate({"allowed_path": ["/tmp"]})


class TestReadSettings:
    """Tests for read_settings."""

    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        """A missing file is not an error."""
        assert read_settings(tmp_path / "config.toml") == GuardSettings()

    def test_reads_lists(self, tmp_path: Path) -> None:
        """All three lists are read."""
        config_file = tmp_path / "config.toml"
        config_file.write_text(
            'allowed_paths = ["~/projects"]\n'
            'additional_protected_paths = ["~/projects/keep"]\n'
            "additional_protected_patterns = ['^\\.terraform$']\n"
        )

        settings = read_settings(config_file)

        assert settings.allowed_paths == ["~/projects"]
        assert settings.additional_protected_paths == ["~/projects/keep"]
        assert settings.additional_protected_patterns == ["^\\.terraform$"]

    def test_empty_allowed_paths_preserved(self, tmp_path: Path) -> None:
        """An explicit empty list stays empty."""
        config_file = tmp_path / "config.toml"
        config_file.write_text("allowed_paths = []\n")

        assert read_settings(config_file).allowed_paths == []

    def test_invalid_toml(self, tmp_path: Path) -> None:
        """Bad TOML raises ConfigParseError."""
        config_file = tmp_path / "config.toml"
        config_file.write_text("allowed_paths = [")

        with pytest.raises(ConfigParseError, match="Invalid TOML"):
            read_settings(config_file)

    def test_wrong_type(self, tmp_path: Path) -> None:
        """A non-list value raises ConfigValidationError."""
        config_file = tmp_path / "config.toml"
        config_file.write_text('allowed_paths = "~/projects"\n')

        with pytest.raises(ConfigValidationError):
            read_settings(config_file)


class TestLoadSettings:
    """Tests for load_settings."""

    def test_malformed_file_warns_and_defaults(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """A broken file never aborts: defaults are returned with a warning."""
        config_file = tmp_path / "config.toml"
        config_file.write_text("not = [valid")

        settings = load_settings(config_file)

        assert settings == GuardSettings()
        assert "using default settings" in capsys.readouterr().err

    def test_valid_file(self, tmp_path: Path) -> None:
        """A valid file is returned unchanged."""
        config_file = tmp_path / "config.toml"
        config_file.write_text('allowed_paths = ["/srv"]\n')

        assert load_settings(config_file).allowed_paths == ["/srv"]


class TestCreateDefaultConfig:
    """Tests for create_default_config."""

    def test_writes_toml(self, tmp_path: Path) -> None:
        """The starter file round-trips through read_settings."""
        config_file = tmp_path / "sub" / "config.toml"

        result = create_default_config(["/home/u/projects"], config_file)

        assert result == config_file
        with open(config_file, "rb") as f:
            data = tomllib.load(f)
        assert data["allowed_paths"] == ["/home/u/projects"]
        assert read_settings(config_file).allowed_paths == ["/home/u/projects"]

    def test_refuses_to_overwrite(self, tmp_path: Path) -> None:
        """An existing file is kept unless force is given."""
        config_file = tmp_path / "config.toml"
        config_file.write_text("allowed_paths = []\n")

        with pytest.raises(ConfigError, match="already exists"):
            create_default_config(["/a"], config_file)
        assert config_file.read_text() == "allowed_paths = []\n"

    def test_force_overwrites(self, tmp_path: Path) -> None:
        """force replaces the existing file."""
        config_file = tmp_path / "config.toml"
        config_file.write_text("allowed_paths = []\n")

        create_default_config(["/a"], config_file, force=True)

        assert read_settings(config_file).allowed_paths == ["/a"]

    def test_write_failure_cleans_up(self, tmp_path: Path) -> None:
        """A failed replace leaves no temporary file behind."""
        config_file = tmp_path / "config.toml"

        with (
            patch("fsguard.core.config.os.replace", side_effect=OSError("disk full")),
            pytest.raises(ConfigError, match="disk full"),
        ):
            create_default_config(["/a"], config_file)

        assert list(tmp_path.iterdir()) == []
