"""JSON helpers for tool payloads."""

from __future__ import annotations

import json
from typing import Any


def mcp_json(data: Any, pretty: bool = False) -> str:
    """Serialize a tool payload to JSON.

    Compact by default; all modes use default=str to handle datetimes,
    enums and the like.
    """
    if pretty:
        return json.dumps(data, indent=2, default=str)
    return json.dumps(data, separators=(",", ":"), default=str)


def preview(text: str | None, limit: int = 200) -> str:
    """Single-line preview of a tool result for the command log.

    Runs of whitespace, newlines included, collapse to one space. Text
    longer than limit is cut and tagged with how much was dropped.
    """
    flat = " ".join((text or "").split())
    if len(flat) <= limit:
        return flat
    return f"{flat[:limit]}... (+{len(flat) - limit} chars)"


def omit_empty(d: dict) -> dict:
    """Remove keys whose value is None, empty string or an empty container."""
    return {k: v for k, v in d.items() if v not in (None, [], {}, "", ())}
