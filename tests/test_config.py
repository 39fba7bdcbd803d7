"""Tests for configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from hubtools.config import HubToolsConfig, load_config
from hubtools.errors import ConfigurationError


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run each test from an empty directory with an empty home."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


class TestDefaults:
    def test_no_file_no_env(self) -> None:
        config = load_config(environ={})
        assert config == HubToolsConfig()
        assert config.toolsets == ("all",)
        assert config.read_only is False
        assert config.log_level == "WARNING"

    def test_token_hidden_from_repr(self) -> None:
        assert "secret" not in repr(HubToolsConfig(token="secret"))


class TestConfigFile:
    """YAML config files."""

    def test_project_file(self, isolated_cwd: Path) -> None:
        _write(isolated_cwd / ".hubtools" / "config.yaml", "toolsets: [repos, issues]\nread_only: true\n")
        config = load_config(environ={})
        assert config.toolsets == ("repos", "issues")
        assert config.read_only is True

    def test_project_file_wins_over_user_file(self, isolated_cwd: Path) -> None:
        _write(isolated_cwd / "home" / ".hubtools" / "config.yaml", "log_level: DEBUG\n")
        _write(isolated_cwd / ".hubtools" / "config.yaml", "log_level: INFO\n")
        assert load_config(environ={}).log_level == "INFO"

    def test_user_file(self, isolated_cwd: Path) -> None:
        _write(isolated_cwd / "home" / ".hubtools" / "config.yaml", "dynamic_toolsets: yes\n")
        assert load_config(environ={}).dynamic_toolsets is True

    def test_explicit_path(self, isolated_cwd: Path) -> None:
        path = _write(isolated_cwd / "custom.yaml", "toolsets: repos,users\nhost: https://ghe.example.com\n")
        config = load_config(path, environ={})
        assert config.toolsets == ("repos", "users")
        assert config.host == "https://ghe.example.com"

    def test_explicit_path_missing(self, isolated_cwd: Path) -> None:
        with pytest.raises(ConfigurationError, match="does not exist"):
            load_config(isolated_cwd / "missing.yaml", environ={})

    def test_unknown_key(self, isolated_cwd: Path) -> None:
        path = _write(isolated_cwd / "c.yaml", "toolsets: [repos]\nverbose: true\n")
        with pytest.raises(ConfigurationError, match="unknown configuration keys: verbose"):
            load_config(path, environ={})

    def test_not_a_mapping(self, isolated_cwd: Path) -> None:
        path = _write(isolated_cwd / "c.yaml", "- repos\n- issues\n")
        with pytest.raises(ConfigurationError, match="must contain a mapping"):
            load_config(path, environ={})

    def test_invalid_yaml(self, isolated_cwd: Path) -> None:
        path = _write(isolated_cwd / "c.yaml", "toolsets: [repos\n")
        with pytest.raises(ConfigurationError, match="could not read config file"):
            load_config(path, environ={})

    def test_bad_boolean(self, isolated_cwd: Path) -> None:
        path = _write(isolated_cwd / "c.yaml", "read_only: maybe\n")
        with pytest.raises(ConfigurationError, match="read_only must be a boolean"):
            load_config(path, environ={})

    def test_empty_file(self, isolated_cwd: Path) -> None:
        path = _write(isolated_cwd / "c.yaml", "")
        assert load_config(path, environ={}) == HubToolsConfig()


class TestEnvironment:
    """Environment overrides."""

    def test_github_env(self) -> None:
        config = load_config(
            environ={"GITHUB_PERSONAL_ACCESS_TOKEN": "ghp_x", "GITHUB_HOST": "https://acme.ghe.com"}
        )
        assert config.token == "ghp_x"
        assert config.host == "https://acme.ghe.com"

    def test_prefixed_env(self) -> None:
        config = load_config(
            environ={"HUBTOOLS_TOOLSETS": "repos, issues", "HUBTOOLS_READ_ONLY": "true", "HUBTOOLS_LOG_LEVEL": "INFO"}
        )
        assert config.toolsets == ("repos", "issues")
        assert config.read_only is True
        assert config.log_level == "INFO"

    def test_env_wins_over_file(self, isolated_cwd: Path) -> None:
        _write(isolated_cwd / ".hubtools" / "config.yaml", "read_only: true\n")
        assert load_config(environ={"HUBTOOLS_READ_ONLY": "0"}).read_only is False


class TestOverrides:
    def test_none_values_ignored(self) -> None:
        config = HubToolsConfig(read_only=True).with_overrides(read_only=None, toolsets=None)
        assert config.read_only is True
        assert config.toolsets == ("all",)

    def test_toolsets_string_split(self) -> None:
        config = HubToolsConfig().with_overrides(toolsets="repos,pull_requests")
        assert config.toolsets == ("repos", "pull_requests")

    def test_startup_toolsets(self) -> None:
        assert HubToolsConfig().startup_toolsets() == ["all"]
        assert HubToolsConfig(dynamic_toolsets=True).startup_toolsets() == []
        config = HubToolsConfig(dynamic_toolsets=True, toolsets=("all", "repos"))
        assert config.startup_toolsets() == ["repos"]
