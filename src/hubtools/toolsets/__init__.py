"""Toolset registry and runtime enablement.

Example:
    >>> from hubtools.toolsets import Toolset, ToolsetGroup, DynamicToolsetController
    >>>
    >>> group = ToolsetGroup(read_only=False)
    >>> group.add_toolset(Toolset("issues", "GitHub Issues related tools"))
    >>> controller = DynamicToolsetController(group, session)
    >>> controller.enable_toolset("issues")
    'Toolset issues enabled'
"""

from hubtools.toolsets.dynamic import (
    DYNAMIC_TOOLSET,
    DynamicToolsetController,
    ToolRegistrar,
)
from hubtools.toolsets.toolset import ALL_TOOLSETS, Toolset, ToolsetGroup
from hubtools.toolsets.types import (
    Property,
    ServerTool,
    ToolAnnotations,
    ToolDescriptor,
    ToolResult,
)

__all__ = [
    # Registry
    "ALL_TOOLSETS",
    "Toolset",
    "ToolsetGroup",
    # Runtime enablement
    "DYNAMIC_TOOLSET",
    "DynamicToolsetController",
    "ToolRegistrar",
    # Tool types
    "Property",
    "ServerTool",
    "ToolAnnotations",
    "ToolDescriptor",
    "ToolResult",
]
