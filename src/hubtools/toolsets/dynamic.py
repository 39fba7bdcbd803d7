"""Runtime toolset enablement.

With dynamic toolsets on, the server starts with only the context and
dynamic toolsets active. The agent discovers the rest through three
meta-tools and enables what it needs:

- list_available_toolsets: every registered toolset and whether it is on
- get_toolset_tools: the tools a toolset would add
- enable_toolset: turn a toolset on and push its tools into the session

Enabling is one-way. There is no tool that disables a toolset.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from hubtools import params
from hubtools.toolsets.toolset import Toolset, ToolsetGroup
from hubtools.toolsets.types import (
    Property,
    ServerTool,
    ToolAnnotations,
    ToolDescriptor,
    ToolResult,
)
from hubtools.translations import Translator, null_translator

logger = logging.getLogger(__name__)

DYNAMIC_TOOLSET = "dynamic"


@runtime_checkable
class ToolRegistrar(Protocol):
    """Anything that can start exposing tools to a live session."""

    def register_tools(self, tools: Sequence[ServerTool]) -> None:
        """Make tools dispatchable. Must not block on I/O."""
        ...


class DynamicToolsetController:
    """Lists, inspects and enables toolsets of a group at runtime.

    The lock covers the check, the enable and the registration, so a group
    shared between sessions never registers a toolset's tools twice.

    Example:
        >>> controller = DynamicToolsetController(group, session)
        >>> controller.enable_toolset("issues")
        'Toolset issues enabled'
    """

    def __init__(
        self,
        group: ToolsetGroup,
        registrar: ToolRegistrar,
        t: Translator = null_translator,
    ) -> None:
        self.group = group
        self.registrar = registrar
        self.t = t
        self._lock = threading.Lock()

    def list_available_toolsets(self) -> list[dict[str, str]]:
        return [
            {
                "name": ts.name,
                "description": ts.description,
                "can_enable": "true",
                "currently_enabled": "true" if ts.enabled else "false",
            }
            for ts in self.group
        ]

    def get_toolset_tools(self, name: str) -> list[dict[str, str]]:
        """Describe the tools a toolset offers.

        Raises:
            ToolsetNotFoundError: No toolset with that name
        """
        toolset = self.group.get_toolset(name)
        return [
            {
                "name": tool.name,
                "description": tool.tool.description,
                "can_enable": "true",
                "toolset": name,
            }
            for tool in toolset.get_available_tools()
        ]

    def enable_toolset(self, name: str) -> str:
        """Enable a toolset and register its active tools with the session.

        Raises:
            ToolsetNotFoundError: No toolset with that name; nothing changes
        """
        with self._lock:
            toolset = self.group.get_toolset(name)
            if toolset.enabled:
                return f"Toolset {name} is already enabled"
            toolset.enable()
            tools = toolset.get_active_tools()
            self.registrar.register_tools(tools)
        logger.info("Enabled toolset %s (%d tools)", name, len(tools))
        return f"Toolset {name} enabled"

    # =========================================================================
    # Meta-tools
    # =========================================================================

    def _toolset_property(self, description: str) -> Property:
        return Property.string(description, required=True, enum=self.group.names())

    def list_available_toolsets_tool(self) -> ServerTool:
        t = self.t

        async def handler(args: dict[str, Any]) -> ToolResult:
            return ToolResult.json(self.list_available_toolsets())

        return ServerTool(
            ToolDescriptor.create(
                "list_available_toolsets",
                t(
                    "TOOL_LIST_AVAILABLE_TOOLSETS_DESCRIPTION",
                    "List all available toolsets this GitHub MCP server can offer, providing the "
                    "enabled status of each. Use this when a task could be achieved with a GitHub "
                    "tool and the currently available tools aren't enough. Call get_toolset_tools "
                    "with these toolset names to discover specific tools you can call",
                ),
                ToolAnnotations(
                    title=t("TOOL_LIST_AVAILABLE_TOOLSETS_USER_TITLE", "List available toolsets"),
                    read_only_hint=True,
                ),
            ),
            handler,
        )

    def get_toolset_tools_tool(self) -> ServerTool:
        t = self.t

        async def handler(args: dict[str, Any]) -> ToolResult:
            name = params.required(args, "toolset", str)
            return ToolResult.json(self.get_toolset_tools(name))

        return ServerTool(
            ToolDescriptor.create(
                "get_toolset_tools",
                t(
                    "TOOL_GET_TOOLSET_TOOLS_DESCRIPTION",
                    "Lists all the capabilities that are enabled with the specified toolset, use "
                    "this to get clarity on whether enabling a toolset would help you to complete a task",
                ),
                ToolAnnotations(
                    title=t("TOOL_GET_TOOLSET_TOOLS_USER_TITLE", "List all tools in a toolset"),
                    read_only_hint=True,
                ),
                toolset=self._toolset_property("The name of the toolset you want to get the tools for"),
            ),
            handler,
        )

    def enable_toolset_tool(self) -> ServerTool:
        t = self.t

        async def handler(args: dict[str, Any]) -> ToolResult:
            name = params.required(args, "toolset", str)
            return ToolResult.success(self.enable_toolset(name))

        return ServerTool(
            ToolDescriptor.create(
                "enable_toolset",
                t(
                    "TOOL_ENABLE_TOOLSET_DESCRIPTION",
                    "Enable one of the sets of tools the GitHub MCP server provides, use "
                    "get_toolset_tools and list_available_toolsets first to see what this will enable",
                ),
                # Does not modify GitHub data
                ToolAnnotations(
                    title=t("TOOL_ENABLE_TOOLSET_USER_TITLE", "Enable a toolset"),
                    read_only_hint=True,
                ),
                toolset=self._toolset_property("The name of the toolset to enable"),
            ),
            handler,
        )

    def toolset(self) -> Toolset:
        """Build the enabled "dynamic" toolset holding the three meta-tools.

        Call after every other toolset is registered, so the toolset enum
        lists them all. The dynamic toolset itself is not added to the group.
        """
        ts = Toolset(
            DYNAMIC_TOOLSET,
            "Discover GitHub MCP tools that can help achieve tasks by enabling additional sets of tools, "
            "you can control the enablement of any toolset to access its tools when this toolset is enabled.",
        )
        ts.add_read_tools(
            self.list_available_toolsets_tool(),
            self.get_toolset_tools_tool(),
            self.enable_toolset_tool(),
        )
        ts.enable()
        return ts
