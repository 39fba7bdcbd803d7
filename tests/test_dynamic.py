"""Tests for runtime toolset enablement."""

from __future__ import annotations

import json
import threading

import pytest

from hubtools.errors import ToolErrorCode, ToolsetNotFoundError
from hubtools.toolsets import DYNAMIC_TOOLSET, DynamicToolsetController, ToolRegistrar, Toolset, ToolsetGroup


@pytest.fixture
def group(make_tool) -> ToolsetGroup:
    group = ToolsetGroup()
    group.add_toolset(
        Toolset("repos", "Repository tools")
        .add_read_tools(make_tool("get_file_contents"))
        .add_write_tools(make_tool("create_branch", read_only=False))
    )
    group.add_toolset(Toolset("issues", "Issue tools").add_read_tools(make_tool("get_issue")))
    return group


@pytest.fixture
def controller(group: ToolsetGroup, registrar) -> DynamicToolsetController:
    return DynamicToolsetController(group, registrar)


def test_fake_registrar_satisfies_protocol(registrar) -> None:
    assert isinstance(registrar, ToolRegistrar)


# =============================================================================
# Operations
# =============================================================================


class TestController:
    """list / get / enable against a live group."""

    def test_list_available_toolsets(self, controller: DynamicToolsetController, group: ToolsetGroup) -> None:
        group.enable_toolset("issues")
        assert controller.list_available_toolsets() == [
            {"name": "repos", "description": "Repository tools", "can_enable": "true", "currently_enabled": "false"},
            {"name": "issues", "description": "Issue tools", "can_enable": "true", "currently_enabled": "true"},
        ]

    def test_get_toolset_tools(self, controller: DynamicToolsetController) -> None:
        assert controller.get_toolset_tools("repos") == [
            {"name": "get_file_contents", "description": "get_file_contents description", "can_enable": "true", "toolset": "repos"},
            {"name": "create_branch", "description": "create_branch description", "can_enable": "true", "toolset": "repos"},
        ]

    def test_get_toolset_tools_read_only(self, make_tool, registrar) -> None:
        group = ToolsetGroup(read_only=True)
        group.add_toolset(
            Toolset("repos", "Repository tools")
            .add_read_tools(make_tool("get_file_contents"))
            .add_write_tools(make_tool("create_branch", read_only=False))
        )
        tools = DynamicToolsetController(group, registrar).get_toolset_tools("repos")
        assert [t["name"] for t in tools] == ["get_file_contents"]

    def test_get_toolset_tools_not_found(self, controller: DynamicToolsetController) -> None:
        with pytest.raises(ToolsetNotFoundError):
            controller.get_toolset_tools("nope")

    def test_enable_toolset(self, controller: DynamicToolsetController, group: ToolsetGroup, registrar) -> None:
        assert controller.enable_toolset("repos") == "Toolset repos enabled"
        assert group.is_enabled("repos")
        assert registrar.names == ["get_file_contents", "create_branch"]

    def test_enable_toolset_already_enabled(self, controller: DynamicToolsetController, registrar) -> None:
        controller.enable_toolset("repos")
        assert controller.enable_toolset("repos") == "Toolset repos is already enabled"
        assert len(registrar.calls) == 1

    def test_enable_toolset_not_found(self, controller: DynamicToolsetController, group: ToolsetGroup, registrar) -> None:
        with pytest.raises(ToolsetNotFoundError, match="Toolset nope not found"):
            controller.enable_toolset("nope")
        assert registrar.calls == []
        assert not any(ts.enabled for ts in group)

    def test_concurrent_enable_registers_once(self, controller: DynamicToolsetController, registrar) -> None:
        results: list[str] = []
        threads = [threading.Thread(target=lambda: results.append(controller.enable_toolset("issues"))) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(registrar.calls) == 1
        assert results.count("Toolset issues enabled") == 1


# =============================================================================
# Meta-tools
# =============================================================================


class TestMetaTools:
    """The dynamic toolset and its three tools."""

    def test_toolset_shape(self, controller: DynamicToolsetController) -> None:
        ts = controller.toolset()
        assert ts.name == DYNAMIC_TOOLSET
        assert ts.enabled
        assert ts.tool_names() == ["list_available_toolsets", "get_toolset_tools", "enable_toolset"]
        assert all(tool.read_only for tool in ts.read_tools)

    def test_toolset_enum_lists_group(self, controller: DynamicToolsetController) -> None:
        ts = controller.toolset()
        enable = next(tool for tool in ts.read_tools if tool.name == "enable_toolset")
        schema = enable.tool.input_schema
        assert schema["properties"]["toolset"]["enum"] == ["repos", "issues"]
        assert schema["required"] == ["toolset"]

    def test_translated_description(self, group: ToolsetGroup, registrar) -> None:
        def t(key: str, default: str) -> str:
            return "custom" if key == "TOOL_ENABLE_TOOLSET_DESCRIPTION" else default

        tool = DynamicToolsetController(group, registrar, t).enable_toolset_tool()
        assert tool.tool.description == "custom"

    @pytest.mark.asyncio
    async def test_list_tool(self, controller: DynamicToolsetController) -> None:
        result = await controller.list_available_toolsets_tool()({})
        assert not result.is_error
        assert [ts["name"] for ts in json.loads(result.text)] == ["repos", "issues"]

    @pytest.mark.asyncio
    async def test_enable_tool(self, controller: DynamicToolsetController, registrar) -> None:
        result = await controller.enable_toolset_tool()({"toolset": "issues"})
        assert result.text == "Toolset issues enabled"
        assert registrar.names == ["get_issue"]

    @pytest.mark.asyncio
    async def test_enable_tool_unknown_toolset(self, controller: DynamicToolsetController) -> None:
        result = await controller.enable_toolset_tool()({"toolset": "nope"})
        assert result.is_error
        assert result.error.code == ToolErrorCode.NOT_FOUND
        assert "Toolset nope not found" in result.text

    @pytest.mark.asyncio
    async def test_get_tool_missing_argument(self, controller: DynamicToolsetController) -> None:
        result = await controller.get_toolset_tools_tool()({})
        assert result.is_error
        assert result.error.code == ToolErrorCode.VALIDATION
        assert "missing required parameter: toolset" in result.text
