"""Tools describing the GitHub context the agent operates in."""

from __future__ import annotations

from typing import Any

from hubtools import params
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

_USER_FIELDS = (
    "login",
    "id",
    "name",
    "email",
    "company",
    "blog",
    "location",
    "bio",
    "html_url",
    "avatar_url",
    "type",
    "public_repos",
    "followers",
    "following",
    "created_at",
)


def get_me(client: GitHubClient, t: Translator = null_translator) -> ServerTool:
    async def handler(args: dict[str, Any]) -> ToolResult:
        # Validated for type only; the reason is informational
        params.optional(args, "reason", str)
        user = await client.get("/user")
        return ToolResult.json(pick(user, _USER_FIELDS))

    return ServerTool(
        ToolDescriptor.create(
            "get_me",
            t(
                "TOOL_GET_ME_DESCRIPTION",
                'Get details of the authenticated GitHub user. Use this when a request include "me", "my"...',
            ),
            ToolAnnotations(title=t("TOOL_GET_ME_USER_TITLE", "Get my user profile"), read_only_hint=True),
            reason=Property.string("Optional: the reason for requesting the user information"),
        ),
        handler,
    )
