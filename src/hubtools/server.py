"""MCP server for hubtools.

Bridges the toolset registry to an MCP session over stdio. The session
layer holds the set of dispatchable tools; toolsets push tools into it at
startup, and the dynamic toolset pushes more while the session runs. When
the set grows, the client is sent a tools/list_changed notification.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal
import sys
import threading
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from mcp import types
from mcp.server.lowlevel import NotificationOptions, Server
from mcp.server.stdio import stdio_server

from hubtools import __version__
from hubtools.config import HubToolsConfig
from hubtools.errors import ToolError, ToolErrorCode, format_error_for_model
from hubtools.formatting import preview
from hubtools.github.catalog import init_context_toolset, init_dynamic_toolset, init_toolsets
from hubtools.github.client import GitHubClient
from hubtools.instructions import HUBTOOLS_INSTRUCTIONS
from hubtools.toolsets.toolset import ToolsetGroup
from hubtools.toolsets.types import ServerTool, ToolDescriptor, ToolResult
from hubtools.translations import Translator, null_translator

logger = logging.getLogger(__name__)

SERVER_NAME = "hubtools"


class ToolSession:
    """The set of tools a live MCP session can dispatch.

    Implements ToolRegistrar. Registration is synchronous and only ever
    grows the set; a tool is dispatchable as soon as register_tools()
    returns.
    """

    def __init__(self, *, command_logging: bool = False) -> None:
        self.command_logging = command_logging
        self._tools: dict[str, ServerTool] = {}
        self._list_changed = False
        self._lock = threading.Lock()

    def register_tools(self, tools: Sequence[ServerTool]) -> None:
        with self._lock:
            added = 0
            for tool in tools:
                if tool.name not in self._tools:
                    self._tools[tool.name] = tool
                    added += 1
            if added:
                self._list_changed = True
        logger.debug("Registered %d tools (%d total)", added, len(self._tools))

    def tools(self) -> list[ServerTool]:
        with self._lock:
            return list(self._tools.values())

    def get(self, name: str) -> ServerTool | None:
        with self._lock:
            return self._tools.get(name)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._tools

    def pop_list_changed(self) -> bool:
        """Return whether the tool set grew since the last call, and reset."""
        with self._lock:
            changed, self._list_changed = self._list_changed, False
            return changed

    async def call(self, name: str, arguments: Mapping[str, Any] | None = None) -> ToolResult:
        """Dispatch a tool call by name.

        Unknown names yield an error result rather than an exception.
        """
        tool = self.get(name)
        if tool is None:
            error = ToolError(
                code=ToolErrorCode.NOT_FOUND,
                message=f"Tool {name} not found",
                recoverable=True,
                suggested_fix="Only tools in the current tool list can be called.",
            )
            return ToolResult(text=format_error_for_model(error), is_error=True, error=error)

        if self.command_logging:
            logger.info("Calling %s with %s", name, dict(arguments or {}))
        result = await tool(arguments)
        if self.command_logging:
            logger.info("%s returned%s: %s", name, " error" if result.is_error else "", preview(result.text))
        return result


def to_mcp_tool(tool: ToolDescriptor) -> types.Tool:
    return types.Tool(
        name=tool.name,
        description=tool.description,
        inputSchema=dict(tool.input_schema),
        annotations=types.ToolAnnotations(**tool.annotations.to_dict()),
    )


def to_call_result(result: ToolResult) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=result.text)],
        isError=result.is_error,
    )


@dataclass(slots=True)
class HubToolsServer:
    """A configured MCP server and the objects behind it."""

    server: Server
    session: ToolSession
    group: ToolsetGroup
    client: GitHubClient
    config: HubToolsConfig


def create_server(
    config: HubToolsConfig,
    client: GitHubClient | None = None,
    t: Translator = null_translator,
) -> HubToolsServer:
    """Create the MCP server with the configured toolsets registered.

    Args:
        config: Startup configuration
        client: GitHub client override, used by tests
        t: Translator for tool descriptions

    Returns:
        Configured HubToolsServer

    Raises:
        ConfigurationError: Unknown toolset name or invalid host
    """
    if client is None:
        client = GitHubClient(token=config.token, host=config.host)

    group = init_toolsets(client, config.startup_toolsets(), read_only=config.read_only, t=t)
    session = ToolSession(command_logging=config.enable_command_logging)

    group.register_tools(session)
    session.register_tools(init_context_toolset(client, t).get_active_tools())
    if config.dynamic_toolsets:
        session.register_tools(init_dynamic_toolset(group, session, t).get_active_tools())
    # The client fetches the initial list itself
    session.pop_list_changed()

    server: Server = Server(SERVER_NAME, version=__version__, instructions=HUBTOOLS_INSTRUCTIONS)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [to_mcp_tool(tool.tool) for tool in session.tools()]

    # Arguments are decoded by each handler, not by the SDK's schema check
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict[str, Any]) -> types.CallToolResult:
        result = await session.call(name, arguments)
        if session.pop_list_changed():
            await server.request_context.session.send_tool_list_changed()
        return to_call_result(result)

    logger.info(
        "Created server with %d tools (toolsets: %s, dynamic: %s, read-only: %s)",
        len(session.tools()),
        ", ".join(ts.name for ts in group if ts.enabled) or "none",
        config.dynamic_toolsets,
        config.read_only,
    )
    return HubToolsServer(server=server, session=session, group=group, client=client, config=config)


async def _serve_stdio(hub: HubToolsServer) -> None:
    async with stdio_server() as (read_stream, write_stream):
        await hub.server.run(
            read_stream,
            write_stream,
            hub.server.create_initialization_options(NotificationOptions(tools_changed=True)),
        )


async def run_stdio_server(hub: HubToolsServer) -> None:
    """Run the server on stdio with graceful shutdown support.

    Returns when the client disconnects or on SIGINT/SIGTERM.
    """
    shutdown_event = asyncio.Event()
    loop = asyncio.get_running_loop()

    def request_shutdown() -> None:
        logger.info("Shutting down server...")
        shutdown_event.set()

    # Unix only
    if sys.platform != "win32":
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, request_shutdown)

    try:
        server_task = asyncio.create_task(_serve_stdio(hub))
        shutdown_task = asyncio.create_task(shutdown_event.wait())

        done, pending = await asyncio.wait(
            [server_task, shutdown_task],
            return_when=asyncio.FIRST_COMPLETED,
        )

        for task in pending:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

        if server_task in done:
            # Propagate transport failures
            server_task.result()
    finally:
        if sys.platform != "win32":
            for sig in (signal.SIGINT, signal.SIGTERM):
                loop.remove_signal_handler(sig)
        await hub.client.close()
