"""Code scanning alert tools."""

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


def _alert_summary(alert: dict[str, Any]) -> dict[str, Any]:
    summary = pick(alert, ("number", "state", "html_url", "created_at", "updated_at", "dismissed_reason"))
    summary["rule"] = pick(alert.get("rule"), ("id", "name", "severity", "security_severity_level", "description"))
    summary["tool"] = pick(alert.get("tool"), ("name", "version"))
    instance = alert.get("most_recent_instance") or {}
    if instance:
        summary["most_recent_instance"] = {
            "ref": instance.get("ref"),
            "state": instance.get("state"),
            "location": pick(instance.get("location"), ("path", "start_line", "end_line")),
        }
    return summary


def get_code_scanning_alert(client: GitHubClient, t: Translator = null_translator) -> ServerTool:
    async def handler(args: dict[str, Any]) -> ToolResult:
        owner, repo = owner_repo(args)
        number = params.required_int(args, "alertNumber")
        alert = await client.get(repo_path(owner, repo, "code-scanning", "alerts", number))
        return ToolResult.json(_alert_summary(alert))

    return ServerTool(
        ToolDescriptor.create(
            "get_code_scanning_alert",
            t(
                "TOOL_GET_CODE_SCANNING_ALERT_DESCRIPTION",
                "Get details of a specific code scanning alert in a GitHub repository.",
            ),
            ToolAnnotations(
                title=t("TOOL_GET_CODE_SCANNING_ALERT_USER_TITLE", "Get code scanning alert"),
                read_only_hint=True,
            ),
            owner=OWNER,
            repo=REPO,
            alertNumber=Property.number("The number of the alert.", required=True),
        ),
        handler,
    )


def list_code_scanning_alerts(client: GitHubClient, t: Translator = null_translator) -> ServerTool:
    async def handler(args: dict[str, Any]) -> ToolResult:
        owner, repo = owner_repo(args)
        query = {
            "ref": params.optional(args, "ref", str),
            "state": params.optional_with_default(args, "state", str, "open"),
            "severity": params.optional(args, "severity", str),
            "tool_name": params.optional(args, "tool_name", str),
        }
        alerts = await client.get(repo_path(owner, repo, "code-scanning", "alerts"), params=query)
        return ToolResult.json([_alert_summary(a) for a in alerts])

    return ServerTool(
        ToolDescriptor.create(
            "list_code_scanning_alerts",
            t("TOOL_LIST_CODE_SCANNING_ALERTS_DESCRIPTION", "List code scanning alerts in a GitHub repository."),
            ToolAnnotations(
                title=t("TOOL_LIST_CODE_SCANNING_ALERTS_USER_TITLE", "List code scanning alerts"),
                read_only_hint=True,
            ),
            owner=OWNER,
            repo=REPO,
            ref=Property.string("The Git reference for the results you want to list."),
            state=Property.string(
                "Filter code scanning alerts by state. Defaults to open",
                enum=["open", "closed", "dismissed", "fixed"],
                default="open",
            ),
            severity=Property.string(
                "Filter code scanning alerts by severity",
                enum=["critical", "high", "medium", "low", "warning", "note", "error"],
            ),
            tool_name=Property.string("The name of the tool used for code scanning."),
        ),
        handler,
    )
