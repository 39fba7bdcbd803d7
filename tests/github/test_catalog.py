"""Tests for the GitHub toolset catalog."""

from __future__ import annotations

import pytest

from hubtools.errors import ConfigurationError
from hubtools.github.catalog import (
    CONTEXT_TOOLSET,
    build_toolsets,
    init_context_toolset,
    init_dynamic_toolset,
    init_toolsets,
)
from hubtools.github.client import GitHubClient

CATALOG = [
    "repos",
    "issues",
    "users",
    "pull_requests",
    "code_security",
    "secret_protection",
    "notifications",
    "experiments",
]


@pytest.fixture
def client() -> GitHubClient:
    return GitHubClient()


def test_catalog_order(client: GitHubClient) -> None:
    assert [ts.name for ts in build_toolsets(client)] == CATALOG


def test_tool_names_unique(client: GitHubClient) -> None:
    names = [name for ts in build_toolsets(client) for name in ts.tool_names()]
    assert len(names) == len(set(names))


def test_notification_tools(client: GitHubClient) -> None:
    notifications = {ts.name: ts for ts in build_toolsets(client)}["notifications"]
    assert [tool.name for tool in notifications.read_tools] == ["get_notifications", "get_notification_thread"]
    assert [tool.name for tool in notifications.write_tools] == [
        "mark_notification_read",
        "mark_notification_done",
        "mark_all_notifications_read",
    ]


def test_repository_git_tools(client: GitHubClient) -> None:
    repos = {ts.name: ts for ts in build_toolsets(client)}["repos"]
    assert {"list_tags", "get_tag"} <= {tool.name for tool in repos.read_tools}
    assert {"push_files", "delete_file"} <= {tool.name for tool in repos.write_tools}


def test_every_toolset_has_description(client: GitHubClient) -> None:
    assert all(ts.description for ts in build_toolsets(client))


def test_init_all(client: GitHubClient) -> None:
    group = init_toolsets(client, ["all"])
    assert group.names() == CATALOG
    assert all(ts.enabled for ts in group)
    assert "create_issue" in [tool.name for tool in group.get_active_tools()]


def test_init_subset(client: GitHubClient) -> None:
    group = init_toolsets(client, ["issues"])
    assert group.is_enabled("issues")
    assert not group.is_enabled("repos")


def test_init_read_only(client: GitHubClient) -> None:
    group = init_toolsets(client, ["all"], read_only=True)
    assert all(tool.read_only for tool in group.get_active_tools())
    assert "get_issue" in [tool.name for tool in group.get_active_tools()]


def test_init_unknown_toolset(client: GitHubClient) -> None:
    with pytest.raises(ConfigurationError, match="toolset wiki does not exist"):
        init_toolsets(client, ["repos", "wiki"])


def test_experiments_enables_to_nothing(client: GitHubClient) -> None:
    group = init_toolsets(client, ["experiments"])
    assert group.is_enabled("experiments")
    assert group.get_active_tools() == []


def test_context_toolset(client: GitHubClient) -> None:
    ts = init_context_toolset(client)
    assert ts.name == CONTEXT_TOOLSET
    assert ts.enabled
    assert [tool.name for tool in ts.get_active_tools()] == ["get_me"]


def test_dynamic_toolset_enum_covers_catalog(client: GitHubClient, registrar) -> None:
    group = init_toolsets(client, [])
    ts = init_dynamic_toolset(group, registrar)
    schema = ts.read_tools[-1].tool.input_schema
    assert schema["properties"]["toolset"]["enum"] == CATALOG
    assert "dynamic" not in group
