"""Issue tools: read, search, list, comment, create and update."""

from __future__ import annotations

from typing import Any

from hubtools import params
from hubtools.github.client import GitHubClient
from hubtools.github.common import OWNER, REPO, owner_repo, pick, repo_path, user_summary
from hubtools.toolsets.types import (
    Property,
    ServerTool,
    ToolAnnotations,
    ToolDescriptor,
    ToolResult,
)
from hubtools.translations import Translator, null_translator

_ISSUE_FIELDS = (
    "number",
    "title",
    "state",
    "state_reason",
    "body",
    "html_url",
    "comments",
    "created_at",
    "updated_at",
    "closed_at",
)

_SEARCH_SORTS = (
    "comments",
    "reactions",
    "reactions-+1",
    "reactions--1",
    "reactions-smile",
    "reactions-thinking_face",
    "reactions-heart",
    "reactions-tada",
    "interactions",
    "created",
    "updated",
)

ISSUE_NUMBER = Property.number("The number of the issue", required=True)


def issue_summary(issue: dict[str, Any]) -> dict[str, Any]:
    summary = pick(issue, _ISSUE_FIELDS)
    summary["user"] = user_summary(issue.get("user"))
    summary["labels"] = [label.get("name") for label in issue.get("labels", []) if isinstance(label, dict)]
    summary["assignees"] = [a.get("login") for a in issue.get("assignees") or []]
    if issue.get("milestone"):
        summary["milestone"] = pick(issue["milestone"], ("number", "title"))
    if issue.get("pull_request"):
        summary["is_pull_request"] = True
    return summary


def _comment_summary(comment: dict[str, Any]) -> dict[str, Any]:
    summary = pick(comment, ("id", "body", "html_url", "created_at", "updated_at"))
    summary["user"] = user_summary(comment.get("user"))
    return summary


# =============================================================================
# Read tools
# =============================================================================


def get_issue(client: GitHubClient, t: Translator = null_translator) -> ServerTool:
    async def handler(args: dict[str, Any]) -> ToolResult:
        owner, repo = owner_repo(args)
        number = params.required_int(args, "issue_number")
        issue = await client.get(repo_path(owner, repo, "issues", number))
        return ToolResult.json(issue_summary(issue))

    return ServerTool(
        ToolDescriptor.create(
            "get_issue",
            t("TOOL_GET_ISSUE_DESCRIPTION", "Get details of a specific issue in a GitHub repository."),
            ToolAnnotations(title=t("TOOL_GET_ISSUE_USER_TITLE", "Get issue details"), read_only_hint=True),
            owner=OWNER,
            repo=REPO,
            issue_number=ISSUE_NUMBER,
        ),
        handler,
    )


def search_issues(client: GitHubClient, t: Translator = null_translator) -> ServerTool:
    async def handler(args: dict[str, Any]) -> ToolResult:
        query = params.required(args, "q", str)
        sort = params.optional(args, "sort", str)
        order = params.optional(args, "order", str)
        page = params.pagination(args)
        result = await client.get(
            "/search/issues",
            params={"q": query, "sort": sort, "order": order, **page.as_query()},
        )
        return ToolResult.json(
            {
                "total_count": result.get("total_count", 0),
                "incomplete_results": result.get("incomplete_results", False),
                "items": [issue_summary(item) for item in result.get("items", [])],
            }
        )

    return ServerTool(
        ToolDescriptor.create(
            "search_issues",
            t("TOOL_SEARCH_ISSUES_DESCRIPTION", "Search for issues in GitHub repositories."),
            ToolAnnotations(title=t("TOOL_SEARCH_ISSUES_USER_TITLE", "Search issues"), read_only_hint=True),
            q=Property.string("Search query using GitHub issues search syntax", required=True),
            sort=Property.string(
                "Sort field by number of matches of categories, defaults to best match",
                enum=_SEARCH_SORTS,
            ),
            order=Property.string("Sort order", enum=["asc", "desc"]),
            **params.with_pagination(),
        ),
        handler,
    )


def list_issues(client: GitHubClient, t: Translator = null_translator) -> ServerTool:
    async def handler(args: dict[str, Any]) -> ToolResult:
        owner, repo = owner_repo(args)
        labels = params.optional_string_array(args, "labels")
        query = {
            "state": params.optional(args, "state", str),
            "labels": ",".join(labels),
            "sort": params.optional(args, "sort", str),
            "direction": params.optional(args, "direction", str),
            "since": params.optional(args, "since", str),
            **params.pagination(args).as_query(),
        }
        issues = await client.get(repo_path(owner, repo, "issues"), params=query)
        return ToolResult.json([issue_summary(issue) for issue in issues])

    return ServerTool(
        ToolDescriptor.create(
            "list_issues",
            t("TOOL_LIST_ISSUES_DESCRIPTION", "List issues in a GitHub repository."),
            ToolAnnotations(title=t("TOOL_LIST_ISSUES_USER_TITLE", "List issues"), read_only_hint=True),
            owner=OWNER,
            repo=REPO,
            state=Property.string("Filter by state", enum=["open", "closed", "all"]),
            labels=Property.string_array("Filter by labels"),
            sort=Property.string("Sort order", enum=["created", "updated", "comments"]),
            direction=Property.string("Sort direction", enum=["asc", "desc"]),
            since=Property.string("Filter by date (ISO 8601 timestamp)"),
            **params.with_pagination(),
        ),
        handler,
    )


def get_issue_comments(client: GitHubClient, t: Translator = null_translator) -> ServerTool:
    async def handler(args: dict[str, Any]) -> ToolResult:
        owner, repo = owner_repo(args)
        number = params.required_int(args, "issue_number")
        page = params.pagination(args)
        comments = await client.get(repo_path(owner, repo, "issues", number, "comments"), params=page.as_query())
        return ToolResult.json([_comment_summary(c) for c in comments])

    return ServerTool(
        ToolDescriptor.create(
            "get_issue_comments",
            t("TOOL_GET_ISSUE_COMMENTS_DESCRIPTION", "Get comments for a specific issue in a GitHub repository."),
            ToolAnnotations(
                title=t("TOOL_GET_ISSUE_COMMENTS_USER_TITLE", "Get issue comments"),
                read_only_hint=True,
            ),
            owner=OWNER,
            repo=REPO,
            issue_number=ISSUE_NUMBER,
            **params.with_pagination(),
        ),
        handler,
    )


# =============================================================================
# Write tools
# =============================================================================


def add_issue_comment(client: GitHubClient, t: Translator = null_translator) -> ServerTool:
    async def handler(args: dict[str, Any]) -> ToolResult:
        owner, repo = owner_repo(args)
        number = params.required_int(args, "issue_number")
        body = params.required(args, "body", str)
        comment = await client.post(repo_path(owner, repo, "issues", number, "comments"), json={"body": body})
        return ToolResult.json(_comment_summary(comment))

    return ServerTool(
        ToolDescriptor.create(
            "add_issue_comment",
            t(
                "TOOL_ADD_ISSUE_COMMENT_DESCRIPTION",
                "Add a comment to a specific issue in a GitHub repository.",
            ),
            ToolAnnotations(
                title=t("TOOL_ADD_ISSUE_COMMENT_USER_TITLE", "Add comment to issue"),
                read_only_hint=False,
            ),
            owner=OWNER,
            repo=REPO,
            issue_number=Property.number("Issue number to comment on", required=True),
            body=Property.string("Comment content", required=True),
        ),
        handler,
    )


def create_issue(client: GitHubClient, t: Translator = null_translator) -> ServerTool:
    async def handler(args: dict[str, Any]) -> ToolResult:
        owner, repo = owner_repo(args)
        body: dict[str, Any] = {
            "title": params.required(args, "title", str),
            "body": params.optional(args, "body", str),
            "assignees": params.optional_string_array(args, "assignees"),
            "labels": params.optional_string_array(args, "labels"),
        }
        milestone = params.optional_int(args, "milestone")
        if milestone:
            body["milestone"] = milestone
        issue = await client.post(repo_path(owner, repo, "issues"), json=body)
        return ToolResult.json(issue_summary(issue))

    return ServerTool(
        ToolDescriptor.create(
            "create_issue",
            t("TOOL_CREATE_ISSUE_DESCRIPTION", "Create a new issue in a GitHub repository."),
            ToolAnnotations(title=t("TOOL_CREATE_ISSUE_USER_TITLE", "Open new issue"), read_only_hint=False),
            owner=OWNER,
            repo=REPO,
            title=Property.string("Issue title", required=True),
            body=Property.string("Issue body content"),
            assignees=Property.string_array("Usernames to assign to this issue"),
            labels=Property.string_array("Labels to apply to this issue"),
            milestone=Property.number("Milestone number"),
        ),
        handler,
    )


def update_issue(client: GitHubClient, t: Translator = null_translator) -> ServerTool:
    async def handler(args: dict[str, Any]) -> ToolResult:
        owner, repo = owner_repo(args)
        number = params.required_int(args, "issue_number")

        # Only fields the caller set are sent
        body: dict[str, Any] = {}
        for key in ("title", "body", "state"):
            value = params.optional(args, key, str)
            if value:
                body[key] = value
        for key in ("labels", "assignees"):
            values = params.optional_string_array(args, key)
            if values:
                body[key] = values
        milestone = params.optional_int(args, "milestone")
        if milestone:
            body["milestone"] = milestone

        issue = await client.patch(repo_path(owner, repo, "issues", number), json=body)
        return ToolResult.json(issue_summary(issue))

    return ServerTool(
        ToolDescriptor.create(
            "update_issue",
            t("TOOL_UPDATE_ISSUE_DESCRIPTION", "Update an existing issue in a GitHub repository."),
            ToolAnnotations(title=t("TOOL_UPDATE_ISSUE_USER_TITLE", "Edit issue"), read_only_hint=False),
            owner=OWNER,
            repo=REPO,
            issue_number=Property.number("Issue number to update", required=True),
            title=Property.string("New title"),
            body=Property.string("New description"),
            state=Property.string("New state", enum=["open", "closed"]),
            labels=Property.string_array("New labels"),
            assignees=Property.string_array("New assignees"),
            milestone=Property.number("New milestone number"),
        ),
        handler,
    )
