"""Unit tests for organize CLI commands.

Tests for `fsguard organize move`, `rename` and `by-type`.
"""

import json
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest
from fsguard.cli.main import app
from fsguard.safety.policy import PathPolicy
from typer.testing import CliRunner

runner = CliRunner()


@pytest.fixture(autouse=True)
def use_policy(policy: PathPolicy) -> Iterator[None]:
    """Route the organize commands to the sandbox policy."""
    with patch("fsguard.cli.commands.organize.require_policy", return_value=policy):
        yield


class TestMoveCommand:
    """Tests for fsguard organize move."""

    def test_moves(self, sandbox: Path) -> None:
        """The file ends up at the destination."""
        src = sandbox / "a.txt"
        src.write_text("x")
        dst = sandbox / "archive" / "a.txt"

        result = runner.invoke(app, ["organize", "move", str(src), str(dst)])

        assert result.exit_code == 0
        assert dst.exists()

    def test_outside_scope(self, sandbox: Path, tmp_path: Path) -> None:
        """Moving out of the allowed paths exits 1."""
        src = sandbox / "a.txt"
        src.write_text("x")

        result = runner.invoke(
            app, ["organize", "move", "--json", str(src), str(tmp_path / "a.txt")]
        )

        assert result.exit_code == 1
        assert json.loads(result.stdout)["reason"] == "outside_allowed_scope"
        assert src.exists()


class TestRenameCommand:
    """Tests for fsguard organize rename."""

    def test_preview_by_default(self, sandbox: Path) -> None:
        """Without --apply nothing is renamed."""
        (sandbox / "IMG_1.jpg").write_text("1")

        result = runner.invoke(
            app, ["organize", "rename", "--json", str(sandbox), "^IMG_", "photo_"]
        )

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["dry_run"] is True
        assert data["moved"][0]["destination"] == str(sandbox / "photo_1.jpg")
        assert (sandbox / "IMG_1.jpg").exists()

    def test_apply(self, sandbox: Path) -> None:
        """--apply performs the renames."""
        (sandbox / "IMG_1.jpg").write_text("1")

        result = runner.invoke(
            app, ["organize", "rename", "--apply", str(sandbox), "^IMG_", "photo_"]
        )

        assert result.exit_code == 0
        assert (sandbox / "photo_1.jpg").exists()

    def test_invalid_replacement_exits_1(self, sandbox: Path) -> None:
        """A bad replacement template is an error, not a crash."""
        (sandbox / "a.txt").write_text("1")

        result = runner.invoke(app, ["organize", "rename", "--apply", str(sandbox), "a", r"\9"])

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Invalid replacement" in result.output
        assert (sandbox / "a.txt").exists()


class TestByTypeCommand:
    """Tests for fsguard organize by-type."""

    def test_by_extension(self, sandbox: Path) -> None:
        """Files are sorted into extension buckets and the source removed."""
        source = sandbox / "inbox"
        source.mkdir()
        (source / "a.txt").write_text("1")
        dest = sandbox / "sorted"

        result = runner.invoke(app, ["organize", "by-type", "--json", str(source), str(dest)])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["cleanup"]["removed"] == [str(source)]
        assert (dest / "TXT" / "a.txt").exists()

    def test_by_size_preview(self, sandbox: Path) -> None:
        """--by size --preview plans moves into size buckets."""
        source = sandbox / "inbox"
        source.mkdir()
        (source / "a.bin").write_bytes(b"\0" * 10)
        dest = sandbox / "sorted"

        result = runner.invoke(
            app,
            ["organize", "by-type", "--by", "size", "--preview", "--json", str(source), str(dest)],
        )

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["moved"][0]["destination"] == str(dest / "tiny" / "a.bin")
        assert (source / "a.bin").exists()
