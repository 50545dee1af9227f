"""Tests for the nameguard CLI."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from nameguard import __version__
from nameguard.cli.main import app

runner = CliRunner()


@pytest.fixture()
def pattern_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "IgnoreTranslation"
    directory.mkdir()
    (directory / "rules.txt").write_text(
        "# reference rules\n"
        "ItemList/*/Item*\n"
        "FriendList/*Item*\n",
        encoding="utf-8",
    )
    return directory


class TestVersion:
    """Tests for the --version flag."""

    def test_version_long_flag(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"nameguard v{__version__}" in result.output

    def test_version_short_flag(self) -> None:
        result = runner.invoke(app, ["-v"])
        assert result.exit_code == 0
        assert f"nameguard v{__version__}" in result.output


class TestHelp:
    """Tests for the --help flag."""

    def test_help_exit_code(self) -> None:
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0

    def test_help_lists_commands(self) -> None:
        result = runner.invoke(app, ["--help"])
        for cmd in ["check", "validate", "tree", "patterns", "watch"]:
            assert cmd in result.output, f"Command '{cmd}' not found in --help output"


class TestLogLevel:
    def test_unknown_level(self, pattern_dir: Path) -> None:
        result = runner.invoke(app, ["--log-level", "loud", "patterns", "--dir", str(pattern_dir)])
        assert result.exit_code == 1
        assert "Unknown log level" in result.output

    def test_debug_level_accepted(self, pattern_dir: Path) -> None:
        result = runner.invoke(app, ["--log-level", "debug", "patterns", "--dir", str(pattern_dir)])
        assert result.exit_code == 0


class TestCheck:
    """Tests for the check command."""

    def test_ignored_path(self, pattern_dir: Path) -> None:
        result = runner.invoke(app, ["check", "ItemList/ii/Item", "--dir", str(pattern_dir)])
        assert result.exit_code == 0
        assert "not ignored" not in result.output
        assert "ignored" in result.output

    def test_not_ignored_path(self, pattern_dir: Path) -> None:
        result = runner.invoke(app, ["check", "ItemList/Item", "--dir", str(pattern_dir)])
        assert result.exit_code == 1
        assert "not ignored" in result.output

    def test_case_insensitive(self, pattern_dir: Path) -> None:
        result = runner.invoke(app, ["check", "friendlist/ITEM", "--dir", str(pattern_dir)])
        assert result.exit_code == 0

    def test_with_file_option(self, pattern_dir: Path) -> None:
        rules = pattern_dir / "rules.txt"
        result = runner.invoke(app, ["check", "FriendList/1Item", "--file", str(rules)])
        assert result.exit_code == 0

    def test_missing_file(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["check", "A/B", "--file", str(tmp_path / "nope.txt")])
        assert result.exit_code == 1
        assert "Not a file" in result.output

    def test_default_directory_missing(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(app, ["check", "A/B"])
        assert result.exit_code == 1
        assert "No pattern directory" in result.output
        assert not (tmp_path / "IgnoreTranslation").exists()

    def test_default_directory(self, pattern_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(pattern_dir.parent)
        result = runner.invoke(app, ["check", "FriendList/Item"])
        assert result.exit_code == 0


class TestValidate:
    """Tests for the validate command."""

    def test_all_valid(self, pattern_dir: Path) -> None:
        result = runner.invoke(app, ["validate", str(pattern_dir / "rules.txt")])
        assert result.exit_code == 0
        assert "2 pattern(s) valid" in result.output

    def test_reports_rejected_lines(self, tmp_path: Path) -> None:
        rules = tmp_path / "bad.txt"
        rules.write_text("Item\nItem**\n*\n", encoding="utf-8")
        result = runner.invoke(app, ["validate", str(rules)])
        assert result.exit_code == 1
        assert "Rejected patterns" in result.output
        assert "Item**" in result.output
        assert "2 rejected line(s)" in result.output

    def test_unreadable_file(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["validate", str(tmp_path / "missing.txt")])
        assert result.exit_code == 1
        assert "Cannot read" in result.output
        assert "1 unreadable file(s)" in result.output


class TestTree:
    def test_renders_nodes(self, pattern_dir: Path) -> None:
        result = runner.invoke(app, ["tree", "--dir", str(pattern_dir)])
        assert result.exit_code == 0
        assert "5 nodes, 2 leaves" in result.output
        assert "ItemList" in result.output
        assert "FriendList" in result.output
        assert "(leaf)" in result.output


class TestPatterns:
    def test_lists_effective_rules(self, pattern_dir: Path) -> None:
        (pattern_dir / "more.txt").write_text("ItemList/*/Item*\nBad**\n", encoding="utf-8")
        result = runner.invoke(app, ["--log-level", "error", "patterns", "--dir", str(pattern_dir)])
        assert result.exit_code == 0
        lines = [line for line in result.output.splitlines() if line.strip()]
        assert lines == ["ItemList/*/Item*", "FriendList/*Item*"]


class TestWatch:
    def test_watch_runs_loop(self, pattern_dir: Path) -> None:
        with patch("asyncio.run") as mock_run:
            result = runner.invoke(app, ["watch", "--dir", str(pattern_dir)])
        assert result.exit_code == 0
        assert "Watching" in result.output
        assert "2 pattern(s) loaded" in result.output
        mock_run.assert_called_once()
        mock_run.call_args[0][0].close()

    def test_watch_keyboard_interrupt(self, pattern_dir: Path) -> None:
        def _interrupt(coro):
            coro.close()
            raise KeyboardInterrupt

        with patch("asyncio.run", side_effect=_interrupt):
            result = runner.invoke(app, ["watch", "--dir", str(pattern_dir)])
        assert result.exit_code == 0
        assert "Watch stopped" in result.output
