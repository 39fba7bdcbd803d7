"""Typed parameter extraction for tool handlers.

Tool arguments arrive as an untyped JSON object. Every handler decodes
them through these functions before touching a collaborator, so the
meaning of "required", "optional" and "default" is the same for every
tool.

- required(): absent -> MissingParameterError, wrong type ->
  WrongTypeError, "" for strings -> EmptyValueError
- optional(): absent -> zero value of the type
- optional_with_default(): absent -> caller's default

Only an absent key counts as absent. An explicit zero, False or "" is a
value and is returned as such.

All functions are pure. Failures raise ParameterError subclasses, which
ServerTool turns into a tool-error result.

Example:
    >>> required({"issue_number": 42.0}, "issue_number", int)
    42
    >>> pagination({})
    PaginationParams(page=1, per_page=30)
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, TypeVar

from hubtools.errors import EmptyValueError, MissingParameterError, WrongTypeError
from hubtools.toolsets.types import Property

T = TypeVar("T")

DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 30
MAX_PER_PAGE = 100

_TYPE_NAMES: dict[type, str] = {
    str: "string",
    int: "number",
    float: "number",
    bool: "boolean",
    list: "array",
    dict: "object",
}


def _json_type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    return type(value).__name__


def _to_int(key: str, value: Any) -> int:
    # bool is an int subclass; JSON true is never a number
    if isinstance(value, bool):
        raise WrongTypeError(key, "number", "boolean")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise WrongTypeError(key, "number", str(value))
        return int(value)
    raise WrongTypeError(key, "number", _json_type_name(value))


def _convert(key: str, value: Any, type_: type[T]) -> T:
    if type_ is int:
        return _to_int(key, value)  # type: ignore[return-value]
    if type_ is float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise WrongTypeError(key, "number", _json_type_name(value))
        return float(value)  # type: ignore[return-value]
    if type_ is bool:
        if not isinstance(value, bool):
            raise WrongTypeError(key, "boolean", _json_type_name(value))
        return value  # type: ignore[return-value]
    if type_ is str:
        if not isinstance(value, str):
            raise WrongTypeError(key, "string", _json_type_name(value))
        return value  # type: ignore[return-value]
    if type_ is list:
        if not isinstance(value, (list, tuple)):
            raise WrongTypeError(key, "array", _json_type_name(value))
        return list(value)  # type: ignore[return-value]
    if type_ is dict:
        if not isinstance(value, Mapping):
            raise WrongTypeError(key, "object", _json_type_name(value))
        return dict(value)  # type: ignore[return-value]
    raise TypeError(f"unsupported parameter type: {type_!r}")


def required(args: Mapping[str, Any], key: str, type_: type[T]) -> T:
    """Extract a required argument of the given type.

    Raises:
        MissingParameterError: key is absent
        WrongTypeError: value is not of type_
        EmptyValueError: type_ is str and the value is ""
    """
    if type_ not in _TYPE_NAMES:
        raise TypeError(f"unsupported parameter type: {type_!r}")
    if key not in args:
        raise MissingParameterError(key)
    value = _convert(key, args[key], type_)
    if type_ is str and value == "":
        raise EmptyValueError(key)
    return value


def optional(args: Mapping[str, Any], key: str, type_: type[T]) -> T:
    """Extract an optional argument, returning the type's zero value if absent."""
    if type_ not in _TYPE_NAMES:
        raise TypeError(f"unsupported parameter type: {type_!r}")
    if key not in args:
        return type_()
    return _convert(key, args[key], type_)


def optional_with_default(args: Mapping[str, Any], key: str, type_: type[T], default: T) -> T:
    """Extract an optional argument, returning default if absent."""
    if key not in args:
        return default
    return optional(args, key, type_)


def required_int(args: Mapping[str, Any], key: str) -> int:
    """Extract a required integer; JSON numbers arriving as floats are truncated."""
    if key not in args:
        raise MissingParameterError(key)
    return _to_int(key, args[key])


def optional_int(args: Mapping[str, Any], key: str) -> int:
    if key not in args:
        return 0
    return _to_int(key, args[key])


def optional_int_with_default(args: Mapping[str, Any], key: str, default: int) -> int:
    if key not in args:
        return default
    return _to_int(key, args[key])


def optional_bool(args: Mapping[str, Any], key: str) -> bool:
    return optional(args, key, bool)


def optional_string_array(args: Mapping[str, Any], key: str) -> list[str]:
    """Extract an optional array of strings; absent yields an empty list.

    Raises:
        WrongTypeError: value is not an array, or an element is not a string
    """
    if key not in args:
        return []
    value = args[key]
    if not isinstance(value, (list, tuple)):
        raise WrongTypeError(key, "array", _json_type_name(value))
    for element in value:
        if not isinstance(element, str):
            raise WrongTypeError(key, "array of strings", f"array containing {_json_type_name(element)}")
    return list(value)


def parse_comma_separated_list(text: str) -> list[str]:
    """Split "a, b,,c" into ["a", "b", "c"]."""
    return [part.strip() for part in text.split(",") if part.strip()]


def optional_comma_separated_list(args: Mapping[str, Any], key: str) -> list[str]:
    """Extract an optional comma separated string as a list of items."""
    return parse_comma_separated_list(optional(args, key, str))


@dataclass(frozen=True, slots=True)
class PaginationParams:
    """Page number and page size for list-style tools."""

    page: int = DEFAULT_PAGE
    per_page: int = DEFAULT_PER_PAGE

    def as_query(self) -> dict[str, int]:
        """Render as REST query parameters."""
        return {"page": self.page, "per_page": self.per_page}


def pagination(args: Mapping[str, Any]) -> PaginationParams:
    """Extract page and perPage, defaulting to page 1 of 30."""
    return PaginationParams(
        page=optional_int_with_default(args, "page", DEFAULT_PAGE),
        per_page=optional_int_with_default(args, "perPage", DEFAULT_PER_PAGE),
    )


def with_pagination() -> dict[str, Property]:
    """Schema properties for page/perPage, shared by every list-style tool."""
    return {
        "page": Property.number("Page number for pagination (min 1)", minimum=1),
        "perPage": Property.number(
            f"Results per page for pagination (min 1, max {MAX_PER_PAGE})",
            minimum=1,
            maximum=MAX_PER_PAGE,
        ),
    }
