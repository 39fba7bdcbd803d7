"""Toolset and ToolsetGroup registry.

A Toolset is a named bundle of read tools and write tools that is enabled
as a unit. A ToolsetGroup holds every toolset in the process and carries
the global read-only flag.

Toolsets are populated at startup, before the group is handed to the
session layer. After that the only state change is a toolset moving from
disabled to enabled; nothing disables a toolset or removes a tool.

Example:
    >>> repos = Toolset("repos", "GitHub Repository related tools")
    >>> repos.add_read_tools(get_file_contents).add_write_tools(create_branch)
    >>> group = ToolsetGroup(read_only=False)
    >>> group.add_toolset(repos)
    >>> group.enable_toolsets(["repos"])
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from hubtools.errors import ConfigurationError, ToolsetNotFoundError
from hubtools.toolsets.types import ServerTool

if TYPE_CHECKING:
    from hubtools.toolsets.dynamic import ToolRegistrar

logger = logging.getLogger(__name__)

ALL_TOOLSETS = "all"
"""Pseudo-toolset name that enables every registered toolset."""


class Toolset:
    """A named bundle of tools enabled as a unit.

    Tools are added before the toolset joins a group; once registered,
    its name and tool list are fixed.

    Attributes:
        description: Shown to the agent by list_available_toolsets
        read_tools: Tools annotated read-only, in registration order
        write_tools: Tools that mutate remote state, in registration order
    """

    __slots__ = ("_name", "description", "read_tools", "write_tools", "_enabled", "_read_only", "_registered")

    def __init__(self, name: str, description: str) -> None:
        self._name = name
        self.description = description
        self.read_tools: list[ServerTool] = []
        self.write_tools: list[ServerTool] = []
        self._enabled = False
        self._read_only = False
        self._registered = False

    def __repr__(self) -> str:
        return f"Toolset(name={self._name!r}, enabled={self._enabled}, tools={len(self.tool_names())})"

    @property
    def name(self) -> str:
        """Unique toolset name within its group."""
        return self._name

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def read_only(self) -> bool:
        return self._read_only

    def enable(self) -> bool:
        """Enable the toolset.

        Returns:
            True if newly enabled, False if it already was
        """
        if self._enabled:
            return False
        self._enabled = True
        return True

    def set_read_only(self) -> None:
        self._read_only = True

    def add_read_tools(self, *tools: ServerTool) -> Toolset:
        """Append read tools. Each must be annotated read-only."""
        for tool in tools:
            if not tool.read_only:
                raise ConfigurationError(f"tool ({tool.name}) must be annotated as read-only")
        self._check_new_names(tools)
        self.read_tools.extend(tools)
        return self

    def add_write_tools(self, *tools: ServerTool) -> Toolset:
        """Append write tools. None may be annotated read-only.

        In a read-only group the tools are still recorded, but they are
        never returned by get_active_tools() or get_available_tools().
        """
        for tool in tools:
            if tool.read_only:
                raise ConfigurationError(f"tool ({tool.name}) is incorrectly annotated as read-only")
        self._check_new_names(tools)
        self.write_tools.extend(tools)
        return self

    def _check_new_names(self, tools: Sequence[ServerTool]) -> None:
        if self._registered:
            raise ConfigurationError(f"toolset {self._name} is already registered; add tools before registering it")
        seen = set(self.tool_names())
        for tool in tools:
            if tool.name in seen:
                raise ConfigurationError(f"tool {tool.name} is already registered in toolset {self.name}")
            seen.add(tool.name)

    def tool_names(self) -> list[str]:
        return [t.name for t in self.read_tools] + [t.name for t in self.write_tools]

    def get_active_tools(self) -> list[ServerTool]:
        """Tools the session should expose right now.

        Empty when disabled; read tools only in a read-only group.
        """
        if not self._enabled:
            return []
        return self.get_available_tools()

    def get_available_tools(self) -> list[ServerTool]:
        """The toolset's catalog regardless of enablement, for introspection."""
        if self._read_only:
            return list(self.read_tools)
        return [*self.read_tools, *self.write_tools]


@dataclass(slots=True)
class ToolsetGroup:
    """Every toolset in the process, keyed by name.

    Attributes:
        read_only: When set, write tools are never exposed by any toolset
    """

    read_only: bool = False
    _toolsets: dict[str, Toolset] = field(default_factory=dict, init=False, repr=False)
    _tool_owners: dict[str, str] = field(default_factory=dict, init=False, repr=False)

    def add_toolset(self, toolset: Toolset) -> Toolset:
        """Register a toolset under its name.

        Raises:
            ConfigurationError: Name already registered, or one of its tools
                is already registered by another toolset
        """
        if toolset.name in self._toolsets:
            raise ConfigurationError(f"toolset {toolset.name} is already registered")
        for tool_name in toolset.tool_names():
            owner = self._tool_owners.get(tool_name)
            if owner is not None:
                raise ConfigurationError(
                    f"tool {tool_name} in toolset {toolset.name} is already registered by toolset {owner}"
                )

        if self.read_only:
            toolset.set_read_only()
        toolset._registered = True
        self._toolsets[toolset.name] = toolset
        for tool_name in toolset.tool_names():
            self._tool_owners[tool_name] = toolset.name
        return toolset

    def get_toolset(self, name: str) -> Toolset:
        try:
            return self._toolsets[name]
        except KeyError:
            raise ToolsetNotFoundError(name) from None

    def is_enabled(self, name: str) -> bool:
        toolset = self._toolsets.get(name)
        return toolset is not None and toolset.enabled

    def enable_toolset(self, name: str) -> bool:
        """Enable one toolset.

        Returns:
            True if newly enabled, False if it already was

        Raises:
            ToolsetNotFoundError: No toolset with that name
        """
        newly = self.get_toolset(name).enable()
        if newly:
            logger.debug("Enabled toolset %s", name)
        return newly

    def enable_toolsets(self, names: Iterable[str]) -> None:
        """Enable the named toolsets, or every registered one for "all".

        Names are validated before anything changes, so an unknown name
        leaves every toolset as it was.

        Raises:
            ConfigurationError: A name (other than "all") is not registered
        """
        names = list(names)
        unknown = [n for n in names if n != ALL_TOOLSETS and n not in self._toolsets]
        if unknown:
            raise ConfigurationError(f"toolset {unknown[0]} does not exist")

        if ALL_TOOLSETS in names:
            names = list(self._toolsets)
        for name in names:
            self.enable_toolset(name)

    def get_active_tools(self) -> list[ServerTool]:
        """Active tools across the group, in registration order."""
        return [tool for ts in self._toolsets.values() for tool in ts.get_active_tools()]

    def register_tools(self, registrar: ToolRegistrar) -> None:
        """Push every currently active tool into a registrar."""
        tools = self.get_active_tools()
        if tools:
            registrar.register_tools(tools)

    def names(self) -> list[str]:
        return list(self._toolsets)

    def __contains__(self, name: object) -> bool:
        return name in self._toolsets

    def __iter__(self) -> Iterator[Toolset]:
        return iter(list(self._toolsets.values()))

    def __len__(self) -> int:
        return len(self._toolsets)
