"""User search."""

from __future__ import annotations

from typing import Any

from hubtools import params
from hubtools.github.client import GitHubClient
from hubtools.github.common import user_summary
from hubtools.toolsets.types import (
    Property,
    ServerTool,
    ToolAnnotations,
    ToolDescriptor,
    ToolResult,
)
from hubtools.translations import Translator, null_translator


def search_users(client: GitHubClient, t: Translator = null_translator) -> ServerTool:
    async def handler(args: dict[str, Any]) -> ToolResult:
        query = params.required(args, "q", str)
        sort = params.optional(args, "sort", str)
        order = params.optional(args, "order", str)
        page = params.pagination(args)
        result = await client.get(
            "/search/users",
            params={"q": query, "sort": sort, "order": order, **page.as_query()},
        )
        return ToolResult.json(
            {
                "total_count": result.get("total_count", 0),
                "incomplete_results": result.get("incomplete_results", False),
                "items": [user_summary(item) for item in result.get("items", [])],
            }
        )

    return ServerTool(
        ToolDescriptor.create(
            "search_users",
            t("TOOL_SEARCH_USERS_DESCRIPTION", "Search for GitHub users"),
            ToolAnnotations(title=t("TOOL_SEARCH_USERS_USER_TITLE", "Search users"), read_only_hint=True),
            q=Property.string("Search query using GitHub users search syntax", required=True),
            sort=Property.string("Sort field by category", enum=["followers", "repositories", "joined"]),
            order=Property.string("Sort order", enum=["asc", "desc"]),
            **params.with_pagination(),
        ),
        handler,
    )
