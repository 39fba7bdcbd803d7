"""Notification tools for the authenticated user."""

from __future__ import annotations

from datetime import datetime
from typing import Any
from urllib.parse import quote

from hubtools import params
from hubtools.errors import ParameterError
from hubtools.github.client import GitHubClient
from hubtools.github.common import pick
from hubtools.toolsets.types import (
    Property,
    ServerTool,
    ToolAnnotations,
    ToolDescriptor,
    ToolResult,
)
from hubtools.translations import Translator, null_translator

THREAD_ID = Property.string("The ID of the notification thread", required=True)


def _notification_summary(n: dict[str, Any]) -> dict[str, Any]:
    summary = pick(n, ("id", "reason", "unread", "updated_at", "last_read_at"))
    summary["repository"] = (n.get("repository") or {}).get("full_name")
    summary["subject"] = pick(n.get("subject"), ("title", "type", "url"))
    return summary


def _thread_path(thread_id: str) -> str:
    return f"/notifications/threads/{quote(thread_id, safe='')}"


def _optional_timestamp(args: dict[str, Any], key: str) -> str | None:
    """Extract an optional ISO 8601 timestamp, passed through unchanged."""
    value = params.optional(args, key, str)
    if not value:
        return None
    try:
        datetime.fromisoformat(value)
    except ValueError:
        raise ParameterError(key, f"invalid {key} time format, should be RFC3339/ISO8601: {value}") from None
    return value


def get_notifications(client: GitHubClient, t: Translator = null_translator) -> ServerTool:
    async def handler(args: dict[str, Any]) -> ToolResult:
        query: dict[str, Any] = {
            "all": "true" if params.optional_with_default(args, "all", bool, False) else "",
            "participating": "true" if params.optional_with_default(args, "participating", bool, False) else "",
            "since": _optional_timestamp(args, "since"),
            "before": _optional_timestamp(args, "before"),
            **params.pagination(args).as_query(),
        }
        notifications = await client.get("/notifications", params=query)
        return ToolResult.json([_notification_summary(n) for n in notifications])

    return ServerTool(
        ToolDescriptor.create(
            "get_notifications",
            t("TOOL_GET_NOTIFICATIONS_DESCRIPTION", "Get notifications for the authenticated GitHub user"),
            ToolAnnotations(
                title=t("TOOL_GET_NOTIFICATIONS_USER_TITLE", "Get notifications"),
                read_only_hint=True,
            ),
            all=Property.boolean("If true, show notifications marked as read. Default: false"),
            participating=Property.boolean(
                "If true, only shows notifications in which the user is directly participating or "
                "mentioned. Default: false"
            ),
            since=Property.string("Only show notifications updated after the given time (ISO 8601 format)"),
            before=Property.string("Only show notifications updated before the given time (ISO 8601 format)"),
            **params.with_pagination(),
        ),
        handler,
    )


def get_notification_thread(client: GitHubClient, t: Translator = null_translator) -> ServerTool:
    async def handler(args: dict[str, Any]) -> ToolResult:
        thread = await client.get(_thread_path(params.required(args, "threadID", str)))
        return ToolResult.json(_notification_summary(thread))

    return ServerTool(
        ToolDescriptor.create(
            "get_notification_thread",
            t("TOOL_GET_NOTIFICATION_THREAD_DESCRIPTION", "Get a specific notification thread"),
            ToolAnnotations(
                title=t("TOOL_GET_NOTIFICATION_THREAD_USER_TITLE", "Get notification thread"),
                read_only_hint=True,
            ),
            threadID=THREAD_ID,
        ),
        handler,
    )


def mark_notification_read(client: GitHubClient, t: Translator = null_translator) -> ServerTool:
    async def handler(args: dict[str, Any]) -> ToolResult:
        await client.patch(_thread_path(params.required(args, "threadID", str)))
        return ToolResult.success("Notification marked as read")

    return ServerTool(
        ToolDescriptor.create(
            "mark_notification_read",
            t("TOOL_MARK_NOTIFICATION_READ_DESCRIPTION", "Mark a notification as read"),
            ToolAnnotations(
                title=t("TOOL_MARK_NOTIFICATION_READ_USER_TITLE", "Mark notification as read"),
                read_only_hint=False,
            ),
            threadID=THREAD_ID,
        ),
        handler,
    )


def mark_notification_done(client: GitHubClient, t: Translator = null_translator) -> ServerTool:
    async def handler(args: dict[str, Any]) -> ToolResult:
        thread_id = params.required(args, "threadID", str)
        if not thread_id.isdigit():
            return ToolResult.failure("Invalid threadID: must be a numeric value")
        await client.delete(_thread_path(thread_id))
        return ToolResult.success("Notification marked as done")

    return ServerTool(
        ToolDescriptor.create(
            "mark_notification_done",
            t("TOOL_MARK_NOTIFICATION_DONE_DESCRIPTION", "Mark a notification as done"),
            ToolAnnotations(
                title=t("TOOL_MARK_NOTIFICATION_DONE_USER_TITLE", "Mark notification as done"),
                read_only_hint=False,
            ),
            threadID=THREAD_ID,
        ),
        handler,
    )


def mark_all_notifications_read(client: GitHubClient, t: Translator = null_translator) -> ServerTool:
    async def handler(args: dict[str, Any]) -> ToolResult:
        last_read_at = _optional_timestamp(args, "lastReadAt")
        await client.put("/notifications", json={"last_read_at": last_read_at} if last_read_at else {})
        return ToolResult.success("All notifications marked as read")

    return ServerTool(
        ToolDescriptor.create(
            "mark_all_notifications_read",
            t("TOOL_MARK_ALL_NOTIFICATIONS_READ_DESCRIPTION", "Mark all notifications as read"),
            ToolAnnotations(
                title=t("TOOL_MARK_ALL_NOTIFICATIONS_READ_USER_TITLE", "Mark all notifications as read"),
                read_only_hint=False,
            ),
            lastReadAt=Property.string(
                "Describes the last point that notifications were checked (optional). Default: Now"
            ),
        ),
        handler,
    )
