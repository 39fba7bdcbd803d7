"""Tool descriptors, results and the ServerTool pairing.

A ToolDescriptor is what the agent sees: name, description, JSON Schema
for the arguments and behavior hints. A ServerTool pairs a descriptor with
the async handler that runs when the agent calls it.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from hubtools.errors import (
    CollaboratorError,
    InvocationError,
    ToolError,
    format_error_for_model,
)
from hubtools.formatting import mcp_json

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Property:
    """One argument in a tool's input schema."""

    type: str
    description: str
    required: bool = False
    enum: tuple[str, ...] | None = None
    items: Mapping[str, Any] | None = None
    default: Any = None
    minimum: int | None = None
    maximum: int | None = None

    @classmethod
    def string(
        cls,
        description: str,
        *,
        required: bool = False,
        enum: tuple[str, ...] | list[str] | None = None,
        default: str | None = None,
    ) -> Property:
        return cls(
            "string",
            description,
            required=required,
            enum=tuple(enum) if enum is not None else None,
            default=default,
        )

    @classmethod
    def number(
        cls,
        description: str,
        *,
        required: bool = False,
        minimum: int | None = None,
        maximum: int | None = None,
    ) -> Property:
        return cls("number", description, required=required, minimum=minimum, maximum=maximum)

    @classmethod
    def boolean(cls, description: str, *, required: bool = False) -> Property:
        return cls("boolean", description, required=required)

    @classmethod
    def string_array(cls, description: str, *, required: bool = False) -> Property:
        return cls("array", description, required=required, items={"type": "string"})

    def to_schema(self) -> dict[str, Any]:
        schema: dict[str, Any] = {"type": self.type, "description": self.description}
        if self.enum is not None:
            schema["enum"] = list(self.enum)
        if self.items is not None:
            schema["items"] = dict(self.items)
        if self.default is not None:
            schema["default"] = self.default
        if self.minimum is not None:
            schema["minimum"] = self.minimum
        if self.maximum is not None:
            schema["maximum"] = self.maximum
        return schema


@dataclass(frozen=True, slots=True)
class ToolAnnotations:
    """Behavior hints shown to the agent alongside a tool."""

    title: str
    read_only_hint: bool = False
    destructive_hint: bool | None = None
    idempotent_hint: bool | None = None
    open_world_hint: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        data = {
            "title": self.title,
            "readOnlyHint": self.read_only_hint,
            "destructiveHint": self.destructive_hint,
            "idempotentHint": self.idempotent_hint,
            "openWorldHint": self.open_world_hint,
        }
        return {k: v for k, v in data.items() if v is not None}


@dataclass(frozen=True, slots=True)
class ToolDescriptor:
    """The agent-facing definition of a tool.

    Attributes:
        name: Unique tool name, process-wide
        description: What the tool does, shown to the agent
        input_schema: JSON Schema object for the arguments
        annotations: Behavior hints
    """

    name: str
    description: str
    input_schema: Mapping[str, Any]
    annotations: ToolAnnotations

    @classmethod
    def create(
        cls,
        name: str,
        description: str,
        annotations: ToolAnnotations,
        /,
        **properties: Property,
    ) -> ToolDescriptor:
        """Build a descriptor from keyword Property definitions.

        The descriptor fields are positional-only, so tools may declare
        arguments called ``name``, ``description`` or ``annotations``.

        Example:
            >>> ToolDescriptor.create(
            ...     "get_issue",
            ...     "Get details of a specific issue",
            ...     ToolAnnotations(title="Get issue", read_only_hint=True),
            ...     owner=Property.string("Repository owner", required=True),
            ... )
        """
        schema = {
            "type": "object",
            "properties": {key: prop.to_schema() for key, prop in properties.items()},
            "required": [key for key, prop in properties.items() if prop.required],
        }
        return cls(name=name, description=description, input_schema=schema, annotations=annotations)

    @property
    def read_only(self) -> bool:
        return self.annotations.read_only_hint

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": dict(self.input_schema),
            "annotations": self.annotations.to_dict(),
        }


@dataclass(frozen=True, slots=True)
class ToolResult:
    """Outcome of a tool call: a text payload, or a tool-error payload."""

    text: str
    is_error: bool = False
    error: ToolError | None = field(default=None, compare=False)

    @classmethod
    def success(cls, text: str) -> ToolResult:
        return cls(text=text)

    @classmethod
    def json(cls, data: Any) -> ToolResult:
        return cls(text=mcp_json(data))

    @classmethod
    def failure(cls, message: str) -> ToolResult:
        return cls(text=message, is_error=True)

    @classmethod
    def from_exception(cls, e: Exception, tool_name: str) -> ToolResult:
        error = ToolError.from_exception(e, tool_name)
        return cls(text=format_error_for_model(error), is_error=True, error=error)


Handler = Callable[[dict[str, Any]], Awaitable[ToolResult]]


@dataclass(frozen=True, slots=True)
class ServerTool:
    """A ToolDescriptor paired with its invocation handler.

    Calling a ServerTool runs the handler and resolves invocation and
    collaborator failures into an error ToolResult, so argument problems
    and remote API failures never escape as exceptions.
    """

    tool: ToolDescriptor
    handler: Handler

    @property
    def name(self) -> str:
        return self.tool.name

    @property
    def read_only(self) -> bool:
        return self.tool.read_only

    async def __call__(self, arguments: Mapping[str, Any] | None = None) -> ToolResult:
        args = dict(arguments or {})
        try:
            return await self.handler(args)
        except (InvocationError, CollaboratorError) as e:
            logger.debug("Tool %s failed: %s", self.name, e)
            return ToolResult.from_exception(e, self.name)
