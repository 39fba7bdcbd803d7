"""Error types and structured tool errors.

Three kinds of failure exist:

- ConfigurationError: bad startup configuration (unknown or duplicate
  toolset, mis-annotated tool). Fatal, aborts startup.
- InvocationError: bad arguments or an unknown toolset named at runtime.
  Reported to the agent as a tool-error result; the session continues.
- CollaboratorError: the remote API call behind a tool failed. Reported as
  a tool-error result carrying the remote message. Never retried.

ToolError turns any of these into a categorized payload with a recovery
hint the model can act on.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class HubToolsError(Exception):
    """Base class for all hubtools errors."""


class ConfigurationError(HubToolsError):
    """Startup configuration is invalid."""


class InvocationError(HubToolsError):
    """A tool call cannot proceed with the arguments it was given."""


class ParameterError(InvocationError, ValueError):
    """An argument failed extraction.

    Attributes:
        key: Name of the offending argument
    """

    def __init__(self, key: str, message: str) -> None:
        super().__init__(message)
        self.key = key


class MissingParameterError(ParameterError):
    """A required argument is absent."""

    def __init__(self, key: str) -> None:
        super().__init__(key, f"missing required parameter: {key}")


class WrongTypeError(ParameterError):
    """An argument is present but has the wrong type."""

    def __init__(self, key: str, expected: str, actual: str) -> None:
        super().__init__(key, f"parameter {key} is not of type {expected}, is {actual}")
        self.expected = expected
        self.actual = actual


class EmptyValueError(ParameterError):
    """A required string argument is the empty string."""

    def __init__(self, key: str) -> None:
        super().__init__(key, f"parameter {key} must not be empty")


class ToolsetNotFoundError(InvocationError, LookupError):
    """A toolset name is not registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Toolset {name} not found")
        self.name = name


class CollaboratorError(HubToolsError):
    """A collaborator (remote API, transport) failed.

    Attributes:
        status_code: HTTP status when the failure came from a response
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ToolErrorCode(Enum):
    """Categorized tool error codes."""

    VALIDATION = "validation"
    """Bad arguments (missing, wrong type, empty)."""

    NOT_FOUND = "not_found"
    """Toolset, tool, or remote resource not found."""

    PERMISSION = "permission"
    """Remote API refused the credentials."""

    RATE_LIMIT = "rate_limit"
    """Remote API rate limit exceeded."""

    NETWORK = "network"
    """Remote API could not be reached."""

    EXECUTION = "execution"
    """Any other failure while running the tool."""


@dataclass(frozen=True, slots=True)
class ToolError:
    """Structured tool execution error with a recovery hint.

    Attributes:
        code: Categorized error code.
        message: Human-readable error message.
        recoverable: Whether the agent can fix this by changing its call.
        suggested_fix: Specific suggestion for fixing the error.
        details: Additional error context.
    """

    code: ToolErrorCode
    message: str
    recoverable: bool
    suggested_fix: str | None = None
    details: dict | None = None

    @classmethod
    def from_exception(cls, e: Exception, tool_name: str) -> ToolError:
        """Create ToolError from an exception raised inside a tool.

        Args:
            e: The exception that occurred
            tool_name: Name of the tool that failed

        Returns:
            ToolError with categorization and hints
        """
        if isinstance(e, ParameterError):
            return cls(
                code=ToolErrorCode.VALIDATION,
                message=str(e),
                recoverable=True,
                suggested_fix=(
                    f"Invalid arguments for {tool_name}. Check the tool's input schema "
                    f"and resend '{e.key}' with the expected type."
                ),
                details={"parameter": e.key},
            )

        if isinstance(e, ToolsetNotFoundError):
            return cls(
                code=ToolErrorCode.NOT_FOUND,
                message=str(e),
                recoverable=True,
                suggested_fix="Call list_available_toolsets to see the registered toolset names.",
                details={"toolset": e.name},
            )

        if isinstance(e, CollaboratorError):
            return _from_collaborator_error(e, tool_name)

        return cls(
            code=ToolErrorCode.EXECUTION,
            message=str(e),
            recoverable=False,
            details={"exception_type": type(e).__name__},
        )


def _from_collaborator_error(e: CollaboratorError, tool_name: str) -> ToolError:
    status = e.status_code
    message = str(e)
    details = {"status_code": status} if status is not None else None

    if status is None:
        return ToolError(
            code=ToolErrorCode.NETWORK,
            message=message,
            recoverable=False,
            suggested_fix="The remote API could not be reached.",
        )
    if status == 404:
        return ToolError(
            code=ToolErrorCode.NOT_FOUND,
            message=message,
            recoverable=True,
            suggested_fix="Check owner, repository and number arguments; the resource does not exist or is not visible.",
            details=details,
        )
    if status == 429 or (status == 403 and "rate limit" in message.lower()):
        return ToolError(
            code=ToolErrorCode.RATE_LIMIT,
            message=message,
            recoverable=False,
            details=details,
        )
    if status in (401, 403):
        return ToolError(
            code=ToolErrorCode.PERMISSION,
            message=message,
            recoverable=False,
            suggested_fix="The configured token lacks access to this resource.",
            details=details,
        )
    if status == 422:
        return ToolError(
            code=ToolErrorCode.VALIDATION,
            message=message,
            recoverable=True,
            suggested_fix=f"The remote API rejected the arguments sent by {tool_name}.",
            details=details,
        )
    return ToolError(
        code=ToolErrorCode.EXECUTION,
        message=message,
        recoverable=False,
        details=details,
    )


def format_error_for_model(error: ToolError) -> str:
    """Render a ToolError as tool-result text.

    The first line is the bare message, so a client that shows one line
    still shows what went wrong. The second line tags the error code and
    any details; a hint line follows when there is a suggested fix.
    """
    tag = f"[{error.code.value}]"
    if error.details:
        tag += " " + " ".join(f"{key}={value}" for key, value in error.details.items())

    lines = [error.message, tag]
    if error.suggested_fix:
        lines.append(f"Hint: {error.suggested_fix}")
    if not error.recoverable:
        lines.append("Changing the arguments will not fix this.")
    return "\n".join(lines)
