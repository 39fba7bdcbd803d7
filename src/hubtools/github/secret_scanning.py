"""Secret scanning alert tools."""

from __future__ import annotations

from typing import Any

from hubtools import params
from hubtools.github.client import GitHubClient
from hubtools.github.common import OWNER, REPO, owner_repo, pick, repo_path
from hubtools.toolsets.types import (
    Property,
    ServerTool,
    ToolAnnotations,
    ToolDescriptor,
    ToolResult,
)
from hubtools.translations import Translator, null_translator

_ALERT_FIELDS = (
    "number",
    "state",
    "secret_type",
    "secret_type_display_name",
    "resolution",
    "resolved_at",
    "html_url",
    "created_at",
    "updated_at",
)


def get_secret_scanning_alert(client: GitHubClient, t: Translator = null_translator) -> ServerTool:
    async def handler(args: dict[str, Any]) -> ToolResult:
        owner, repo = owner_repo(args)
        number = params.required_int(args, "alertNumber")
        alert = await client.get(repo_path(owner, repo, "secret-scanning", "alerts", number))
        return ToolResult.json(pick(alert, _ALERT_FIELDS))

    return ServerTool(
        ToolDescriptor.create(
            "get_secret_scanning_alert",
            t(
                "TOOL_GET_SECRET_SCANNING_ALERT_DESCRIPTION",
                "Get details of a specific secret scanning alert in a GitHub repository.",
            ),
            ToolAnnotations(
                title=t("TOOL_GET_SECRET_SCANNING_ALERT_USER_TITLE", "Get secret scanning alert"),
                read_only_hint=True,
            ),
            owner=OWNER,
            repo=REPO,
            alertNumber=Property.number("The number of the alert.", required=True),
        ),
        handler,
    )


def list_secret_scanning_alerts(client: GitHubClient, t: Translator = null_translator) -> ServerTool:
    async def handler(args: dict[str, Any]) -> ToolResult:
        owner, repo = owner_repo(args)
        query = {
            "state": params.optional(args, "state", str),
            "secret_type": ",".join(params.optional_comma_separated_list(args, "secret_type")),
            "resolution": params.optional(args, "resolution", str),
        }
        alerts = await client.get(repo_path(owner, repo, "secret-scanning", "alerts"), params=query)
        return ToolResult.json([pick(a, _ALERT_FIELDS) for a in alerts])

    return ServerTool(
        ToolDescriptor.create(
            "list_secret_scanning_alerts",
            t(
                "TOOL_LIST_SECRET_SCANNING_ALERTS_DESCRIPTION",
                "List secret scanning alerts in a GitHub repository.",
            ),
            ToolAnnotations(
                title=t("TOOL_LIST_SECRET_SCANNING_ALERTS_USER_TITLE", "List secret scanning alerts"),
                read_only_hint=True,
            ),
            owner=OWNER,
            repo=REPO,
            state=Property.string("Filter by state", enum=["open", "resolved"]),
            secret_type=Property.string(
                "A comma-separated list of secret types to return. All default secret patterns are "
                "returned. To return generic patterns, pass the token name(s) in the parameter."
            ),
            resolution=Property.string(
                "Filter by resolution",
                enum=["false_positive", "wont_fix", "revoked", "pattern_edited", "pattern_deleted", "used_in_tests"],
            ),
        ),
        handler,
    )
