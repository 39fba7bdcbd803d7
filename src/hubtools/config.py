"""hubtools configuration management.

Loads configuration from .hubtools/config.yaml with defaults. Every
setting can be overridden via environment variables (HUBTOOLS_*), and
the command line overrides both.

Config locations (in priority order):
1. Explicit path passed to load_config()
2. .hubtools/config.yaml (project-local)
3. ~/.hubtools/config.yaml (user-global)
4. Built-in defaults

Example config.yaml:

    toolsets: [repos, issues]
    read_only: true
    log_level: INFO
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

import yaml

from hubtools.errors import ConfigurationError
from hubtools.params import parse_comma_separated_list
from hubtools.toolsets.toolset import ALL_TOOLSETS

logger = logging.getLogger(__name__)

ENV_PREFIX = "HUBTOOLS_"
TOKEN_ENV = "GITHUB_PERSONAL_ACCESS_TOKEN"
HOST_ENV = "GITHUB_HOST"

DEFAULT_TOOLSETS = (ALL_TOOLSETS,)


@dataclass(frozen=True)
class HubToolsConfig:
    """Root configuration for hubtools."""

    host: str = ""
    """GitHub host; empty means github.com. GHEC (*.ghe.com) and GHES URLs are accepted."""

    token: str = field(default="", repr=False)
    """Personal access token used for every API call."""

    toolsets: tuple[str, ...] = DEFAULT_TOOLSETS
    """Toolsets enabled at startup; "all" enables every toolset."""

    dynamic_toolsets: bool = False
    """Expose the dynamic toolset so the agent can enable toolsets at runtime."""

    read_only: bool = False
    """Only expose read tools."""

    log_file: str | None = None
    """Also write logs to this file."""

    log_level: str = "WARNING"
    """Log level for the stderr handler."""

    enable_command_logging: bool = False
    """Log every tool call's arguments and result at INFO."""

    export_translations: bool = False
    """Write every tool description key to hubtools.json at startup."""

    def with_overrides(self, **overrides: Any) -> HubToolsConfig:
        """Return a copy with the non-None overrides applied.

        CLI options that were not given arrive as None and leave the
        loaded value in place.
        """
        changes = {k: v for k, v in overrides.items() if v is not None}
        if "toolsets" in changes:
            changes["toolsets"] = _as_toolsets(changes["toolsets"])
        return replace(self, **changes)

    def startup_toolsets(self) -> list[str]:
        """Toolset names to enable at startup.

        With dynamic toolsets on, "all" is dropped so the agent starts
        small and enables toolsets itself.
        """
        if self.dynamic_toolsets:
            return [name for name in self.toolsets if name != ALL_TOOLSETS]
        return list(self.toolsets)


_FIELD_NAMES = {f.name for f in fields(HubToolsConfig)}
_BOOL_FIELDS = {"dynamic_toolsets", "read_only", "enable_command_logging", "export_translations"}


def _as_toolsets(value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        return tuple(parse_comma_separated_list(value))
    if isinstance(value, (list, tuple)):
        return tuple(str(v).strip() for v in value if str(v).strip())
    raise ConfigurationError(f"toolsets must be a list or a comma separated string, got {value!r}")


def _as_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ("true", "1", "yes", "false", "0", "no"):
        return value.lower() in ("true", "1", "yes")
    raise ConfigurationError(f"{key} must be a boolean, got {value!r}")


def _coerce(data: Mapping[str, Any]) -> dict[str, Any]:
    unknown = sorted(set(data) - _FIELD_NAMES)
    if unknown:
        raise ConfigurationError(f"unknown configuration keys: {', '.join(unknown)}")

    result: dict[str, Any] = {}
    for key, value in data.items():
        if key == "toolsets":
            result[key] = _as_toolsets(value)
        elif key in _BOOL_FIELDS:
            result[key] = _as_bool(key, value)
        elif value is None:
            result[key] = None if key == "log_file" else ""
        else:
            result[key] = str(value)
    return result


def _read_config_file(path: Path) -> dict[str, Any]:
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"could not read config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"config file {path} must contain a mapping")
    logger.debug("Loaded config from %s", path)
    return data


def _env_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    """Collect HUBTOOLS_<FIELD> variables plus the GitHub token and host.

    Examples:
        HUBTOOLS_TOOLSETS=repos,issues
        HUBTOOLS_READ_ONLY=true
        GITHUB_PERSONAL_ACCESS_TOKEN=ghp_...
    """
    overrides: dict[str, Any] = {}
    if TOKEN_ENV in environ:
        overrides["token"] = environ[TOKEN_ENV]
    if HOST_ENV in environ:
        overrides["host"] = environ[HOST_ENV]

    for name in _FIELD_NAMES:
        key = ENV_PREFIX + name.upper()
        if key in environ:
            overrides[name] = environ[key]
    return overrides


def load_config(
    path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> HubToolsConfig:
    """Load configuration from file with defaults and env overrides.

    Priority (highest to lowest):
    1. Environment variables (HUBTOOLS_*, GITHUB_PERSONAL_ACCESS_TOKEN, GITHUB_HOST)
    2. Explicit path if provided
    3. .hubtools/config.yaml (project-local)
    4. ~/.hubtools/config.yaml (user-global)
    5. Built-in defaults

    Args:
        path: Optional explicit config file path; must exist.
        environ: Environment to read overrides from (default: os.environ).

    Returns:
        Merged HubToolsConfig instance.

    Raises:
        ConfigurationError: Unreadable file, unknown key or bad value
    """
    environ = os.environ if environ is None else environ

    config_dict: dict[str, Any] = {}
    if path is not None:
        path = Path(path)
        if not path.exists():
            raise ConfigurationError(f"config file {path} does not exist")
        config_dict.update(_read_config_file(path))
    else:
        for config_path in (Path(".hubtools/config.yaml"), Path.home() / ".hubtools" / "config.yaml"):
            if config_path.exists():
                config_dict.update(_read_config_file(config_path))
                break  # Use first found config

    config_dict.update(_env_overrides(environ))
    return HubToolsConfig(**_coerce(config_dict))
