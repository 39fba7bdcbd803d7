"""Tests for the hubtools command line."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from hubtools import __version__
from hubtools.cli import main

_ENV_VARS = (
    "GITHUB_PERSONAL_ACCESS_TOKEN",
    "GITHUB_HOST",
    "HUBTOOLS_TOOLSETS",
    "HUBTOOLS_READ_ONLY",
    "HUBTOOLS_DYNAMIC_TOOLSETS",
    "HUBTOOLS_HOST",
    "HUBTOOLS_TOKEN",
)


@pytest.fixture
def runner(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> CliRunner:
    """A runner in an empty directory, with no GitHub settings in the environment."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    return CliRunner()


def test_version(runner: CliRunner) -> None:
    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_help_lists_commands(runner: CliRunner) -> None:
    result = runner.invoke(main, ["--help"])
    assert result.exit_code == 0
    assert "stdio" in result.output
    assert "tools" in result.output


class TestToolsCommand:
    def test_json(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["--toolsets", "users", "tools", "--json"])
        assert result.exit_code == 0, result.output

        rows = json.loads(result.output)
        users = [row for row in rows if row["toolset"] == "users"]
        assert users == [{"toolset": "users", "tool": "search_users", "access": "read", "enabled": True}]
        assert all(not row["enabled"] for row in rows if row["toolset"] != "users")

    def test_read_only_hides_write_tools(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["--read-only", "tools", "--json"])
        assert result.exit_code == 0, result.output
        assert {row["access"] for row in json.loads(result.output)} == {"read"}

    def test_table(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["tools"])
        assert result.exit_code == 0, result.output
        assert "search_users" in result.output

    def test_unknown_toolset(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["--toolsets", "wiki", "tools"])
        assert result.exit_code == 1
        assert "toolset wiki does not exist" in result.output

    def test_config_file(self, runner: CliRunner, tmp_path: Path) -> None:
        config = tmp_path / "hubtools.yaml"
        config.write_text("toolsets: [issues]\n")
        result = runner.invoke(main, ["--config", str(config), "tools", "--json"])
        assert result.exit_code == 0, result.output
        enabled = {row["toolset"] for row in json.loads(result.output) if row["enabled"]}
        assert enabled == {"issues"}


class TestStdioCommand:
    def test_requires_token(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["stdio"])
        assert result.exit_code == 1
        assert "GITHUB_PERSONAL_ACCESS_TOKEN not set" in result.output

    def test_missing_config_file(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["--config", "missing.yaml", "stdio"])
        assert result.exit_code == 1
        assert "does not exist" in result.output
