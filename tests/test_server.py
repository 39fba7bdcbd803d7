"""Tests for the MCP session layer."""

from __future__ import annotations

import json
import logging

import httpx
import pytest
from mcp import types

from hubtools.config import HubToolsConfig
from hubtools.errors import ConfigurationError, ToolErrorCode
from hubtools.github.client import GitHubClient
from hubtools.server import ToolSession, create_server, to_call_result, to_mcp_tool
from hubtools.toolsets.types import ToolResult


@pytest.fixture
def client() -> GitHubClient:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/user":
            return httpx.Response(200, json={"login": "octocat", "id": 1})
        return httpx.Response(404, json={"message": "Not Found"})

    return GitHubClient(token="t", transport=httpx.MockTransport(handler))


def _names(hub) -> set[str]:
    return {tool.name for tool in hub.session.tools()}


# =============================================================================
# ToolSession
# =============================================================================


class TestToolSession:
    def test_register_and_get(self, make_tool) -> None:
        session = ToolSession()
        tool = make_tool("get_issue")
        session.register_tools([tool])

        assert "get_issue" in session
        assert session.get("get_issue") is tool
        assert session.pop_list_changed() is True
        assert session.pop_list_changed() is False

    def test_duplicate_registration_is_ignored(self, make_tool) -> None:
        session = ToolSession()
        first = make_tool("get_issue")
        session.register_tools([first])
        session.pop_list_changed()

        session.register_tools([make_tool("get_issue")])
        assert session.get("get_issue") is first
        assert session.pop_list_changed() is False

    @pytest.mark.asyncio
    async def test_call_unknown_tool(self) -> None:
        result = await ToolSession().call("nope", {})

        assert result.is_error
        assert result.error.code == ToolErrorCode.NOT_FOUND
        assert "Tool nope not found" in result.text

    @pytest.mark.asyncio
    async def test_call_dispatches(self, make_tool) -> None:
        session = ToolSession()
        session.register_tools([make_tool("echo")])
        result = await session.call("echo", {"x": 1})
        assert json.loads(result.text) == {"tool": "echo", "args": {"x": 1}}

    @pytest.mark.asyncio
    async def test_command_logging(self, make_tool, caplog) -> None:
        session = ToolSession(command_logging=True)
        session.register_tools([make_tool("echo")])
        with caplog.at_level(logging.INFO, logger="hubtools.server"):
            await session.call("echo", {"x": 1})
        assert "Calling echo with {'x': 1}" in caplog.text


# =============================================================================
# Conversion
# =============================================================================


class TestConversion:
    def test_to_mcp_tool(self, make_tool) -> None:
        tool = to_mcp_tool(make_tool("get_issue").tool)

        assert isinstance(tool, types.Tool)
        assert tool.name == "get_issue"
        assert tool.inputSchema["type"] == "object"
        assert tool.annotations.readOnlyHint is True

    def test_to_call_result(self) -> None:
        result = to_call_result(ToolResult.failure("boom"))
        assert result.isError is True
        assert result.content[0].text == "boom"


# =============================================================================
# create_server
# =============================================================================


class TestCreateServer:
    def test_all_toolsets(self, client: GitHubClient) -> None:
        hub = create_server(HubToolsConfig(token="t"), client=client)
        names = _names(hub)

        assert {"get_me", "get_issue", "create_issue", "merge_pull_request"} <= names
        assert "enable_toolset" not in names
        assert hub.session.pop_list_changed() is False

    def test_read_only(self, client: GitHubClient) -> None:
        hub = create_server(HubToolsConfig(token="t", read_only=True), client=client)
        assert all(tool.read_only for tool in hub.session.tools())

    def test_subset(self, client: GitHubClient) -> None:
        hub = create_server(HubToolsConfig(token="t", toolsets=("users",)), client=client)
        assert _names(hub) == {"search_users", "get_me"}

    def test_unknown_toolset(self, client: GitHubClient) -> None:
        with pytest.raises(ConfigurationError):
            create_server(HubToolsConfig(token="t", toolsets=("wiki",)), client=client)

    def test_dynamic_starts_small(self, client: GitHubClient) -> None:
        hub = create_server(HubToolsConfig(token="t", dynamic_toolsets=True), client=client)
        assert _names(hub) == {"get_me", "list_available_toolsets", "get_toolset_tools", "enable_toolset"}

    @pytest.mark.asyncio
    async def test_enable_toolset_grows_session(self, client: GitHubClient) -> None:
        hub = create_server(HubToolsConfig(token="t", dynamic_toolsets=True), client=client)

        result = await hub.session.call("enable_toolset", {"toolset": "issues"})
        assert result.text == "Toolset issues enabled"
        assert "get_issue" in hub.session
        assert hub.session.pop_list_changed() is True

        again = await hub.session.call("enable_toolset", {"toolset": "issues"})
        assert again.text == "Toolset issues is already enabled"
        assert hub.session.pop_list_changed() is False

    @pytest.mark.asyncio
    async def test_get_me_through_session(self, client: GitHubClient) -> None:
        hub = create_server(HubToolsConfig(token="t", toolsets=()), client=client)
        result = await hub.session.call("get_me", {})
        assert json.loads(result.text) == {"login": "octocat", "id": 1}
        await client.close()

    @pytest.mark.asyncio
    async def test_list_tools_handler(self, client: GitHubClient) -> None:
        hub = create_server(HubToolsConfig(token="t", toolsets=("users",)), client=client)
        handler = hub.server.request_handlers[types.ListToolsRequest]

        response = await handler(types.ListToolsRequest(method="tools/list"))
        assert {tool.name for tool in response.root.tools} == {"search_users", "get_me"}
