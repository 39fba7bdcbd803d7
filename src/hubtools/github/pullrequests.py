"""Pull request tools."""

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

_PR_FIELDS = (
    "number",
    "title",
    "state",
    "draft",
    "merged",
    "mergeable",
    "mergeable_state",
    "body",
    "html_url",
    "created_at",
    "updated_at",
    "closed_at",
    "merged_at",
    "additions",
    "deletions",
    "changed_files",
)

PULL_NUMBER = Property.number("Pull request number", required=True)


def _pr_summary(pr: dict[str, Any]) -> dict[str, Any]:
    summary = pick(pr, _PR_FIELDS)
    summary["user"] = user_summary(pr.get("user"))
    for side in ("head", "base"):
        ref = pr.get(side)
        if ref:
            summary[side] = pick(ref, ("ref", "sha", "label"))
    return summary


# =============================================================================
# Read tools
# =============================================================================


def get_pull_request(client: GitHubClient, t: Translator = null_translator) -> ServerTool:
    async def handler(args: dict[str, Any]) -> ToolResult:
        owner, repo = owner_repo(args)
        number = params.required_int(args, "pullNumber")
        pr = await client.get(repo_path(owner, repo, "pulls", number))
        return ToolResult.json(_pr_summary(pr))

    return ServerTool(
        ToolDescriptor.create(
            "get_pull_request",
            t("TOOL_GET_PULL_REQUEST_DESCRIPTION", "Get details of a specific pull request in a GitHub repository."),
            ToolAnnotations(
                title=t("TOOL_GET_PULL_REQUEST_USER_TITLE", "Get pull request details"),
                read_only_hint=True,
            ),
            owner=OWNER,
            repo=REPO,
            pullNumber=PULL_NUMBER,
        ),
        handler,
    )


def list_pull_requests(client: GitHubClient, t: Translator = null_translator) -> ServerTool:
    async def handler(args: dict[str, Any]) -> ToolResult:
        owner, repo = owner_repo(args)
        query = {
            "state": params.optional(args, "state", str),
            "head": params.optional(args, "head", str),
            "base": params.optional(args, "base", str),
            "sort": params.optional(args, "sort", str),
            "direction": params.optional(args, "direction", str),
            **params.pagination(args).as_query(),
        }
        prs = await client.get(repo_path(owner, repo, "pulls"), params=query)
        return ToolResult.json([_pr_summary(pr) for pr in prs])

    return ServerTool(
        ToolDescriptor.create(
            "list_pull_requests",
            t("TOOL_LIST_PULL_REQUESTS_DESCRIPTION", "List pull requests in a GitHub repository."),
            ToolAnnotations(
                title=t("TOOL_LIST_PULL_REQUESTS_USER_TITLE", "List pull requests"),
                read_only_hint=True,
            ),
            owner=OWNER,
            repo=REPO,
            state=Property.string("Filter by state", enum=["open", "closed", "all"]),
            head=Property.string("Filter by head user/org and branch"),
            base=Property.string("Filter by base branch"),
            sort=Property.string("Sort by", enum=["created", "updated", "popularity", "long-running"]),
            direction=Property.string("Sort direction", enum=["asc", "desc"]),
            **params.with_pagination(),
        ),
        handler,
    )


def get_pull_request_files(client: GitHubClient, t: Translator = null_translator) -> ServerTool:
    async def handler(args: dict[str, Any]) -> ToolResult:
        owner, repo = owner_repo(args)
        number = params.required_int(args, "pullNumber")
        page = params.pagination(args)
        files = await client.get(repo_path(owner, repo, "pulls", number, "files"), params=page.as_query())
        return ToolResult.json(
            [pick(f, ("filename", "status", "additions", "deletions", "changes", "patch")) for f in files]
        )

    return ServerTool(
        ToolDescriptor.create(
            "get_pull_request_files",
            t("TOOL_GET_PULL_REQUEST_FILES_DESCRIPTION", "Get the files changed in a specific pull request."),
            ToolAnnotations(
                title=t("TOOL_GET_PULL_REQUEST_FILES_USER_TITLE", "Get pull request files"),
                read_only_hint=True,
            ),
            owner=OWNER,
            repo=REPO,
            pullNumber=PULL_NUMBER,
            **params.with_pagination(),
        ),
        handler,
    )


def get_pull_request_status(client: GitHubClient, t: Translator = null_translator) -> ServerTool:
    async def handler(args: dict[str, Any]) -> ToolResult:
        owner, repo = owner_repo(args)
        number = params.required_int(args, "pullNumber")
        pr = await client.get(repo_path(owner, repo, "pulls", number))
        head_sha = (pr.get("head") or {}).get("sha")
        status = await client.get(repo_path(owner, repo, "commits", head_sha, "status"))
        return ToolResult.json(
            {
                "state": status.get("state"),
                "sha": status.get("sha"),
                "total_count": status.get("total_count", 0),
                "statuses": [
                    pick(s, ("context", "state", "description", "target_url")) for s in status.get("statuses", [])
                ],
            }
        )

    return ServerTool(
        ToolDescriptor.create(
            "get_pull_request_status",
            t("TOOL_GET_PULL_REQUEST_STATUS_DESCRIPTION", "Get the status of a specific pull request."),
            ToolAnnotations(
                title=t("TOOL_GET_PULL_REQUEST_STATUS_USER_TITLE", "Get pull request status checks"),
                read_only_hint=True,
            ),
            owner=OWNER,
            repo=REPO,
            pullNumber=PULL_NUMBER,
        ),
        handler,
    )


def get_pull_request_comments(client: GitHubClient, t: Translator = null_translator) -> ServerTool:
    async def handler(args: dict[str, Any]) -> ToolResult:
        owner, repo = owner_repo(args)
        number = params.required_int(args, "pullNumber")
        page = params.pagination(args)
        comments = await client.get(repo_path(owner, repo, "pulls", number, "comments"), params=page.as_query())
        return ToolResult.json(
            [
                {
                    **pick(c, ("id", "path", "line", "side", "body", "html_url", "created_at", "in_reply_to_id")),
                    "user": user_summary(c.get("user")),
                }
                for c in comments
            ]
        )

    return ServerTool(
        ToolDescriptor.create(
            "get_pull_request_comments",
            t("TOOL_GET_PULL_REQUEST_COMMENTS_DESCRIPTION", "Get comments for a specific pull request."),
            ToolAnnotations(
                title=t("TOOL_GET_PULL_REQUEST_COMMENTS_USER_TITLE", "Get pull request comments"),
                read_only_hint=True,
            ),
            owner=OWNER,
            repo=REPO,
            pullNumber=PULL_NUMBER,
            **params.with_pagination(),
        ),
        handler,
    )


def get_pull_request_reviews(client: GitHubClient, t: Translator = null_translator) -> ServerTool:
    async def handler(args: dict[str, Any]) -> ToolResult:
        owner, repo = owner_repo(args)
        number = params.required_int(args, "pullNumber")
        page = params.pagination(args)
        reviews = await client.get(repo_path(owner, repo, "pulls", number, "reviews"), params=page.as_query())
        return ToolResult.json(
            [
                {
                    **pick(r, ("id", "state", "body", "commit_id", "html_url", "submitted_at")),
                    "user": user_summary(r.get("user")),
                }
                for r in reviews
            ]
        )

    return ServerTool(
        ToolDescriptor.create(
            "get_pull_request_reviews",
            t("TOOL_GET_PULL_REQUEST_REVIEWS_DESCRIPTION", "Get reviews for a specific pull request."),
            ToolAnnotations(
                title=t("TOOL_GET_PULL_REQUEST_REVIEWS_USER_TITLE", "Get pull request reviews"),
                read_only_hint=True,
            ),
            owner=OWNER,
            repo=REPO,
            pullNumber=PULL_NUMBER,
            **params.with_pagination(),
        ),
        handler,
    )


# =============================================================================
# Write tools
# =============================================================================


def create_pull_request(client: GitHubClient, t: Translator = null_translator) -> ServerTool:
    async def handler(args: dict[str, Any]) -> ToolResult:
        owner, repo = owner_repo(args)
        body: dict[str, Any] = {
            "title": params.required(args, "title", str),
            "head": params.required(args, "head", str),
            "base": params.required(args, "base", str),
            "body": params.optional(args, "body", str),
            "draft": params.optional_bool(args, "draft"),
        }
        if "maintainer_can_modify" in args:
            body["maintainer_can_modify"] = params.optional_bool(args, "maintainer_can_modify")
        pr = await client.post(repo_path(owner, repo, "pulls"), json=body)
        return ToolResult.json(_pr_summary(pr))

    return ServerTool(
        ToolDescriptor.create(
            "create_pull_request",
            t("TOOL_CREATE_PULL_REQUEST_DESCRIPTION", "Create a new pull request in a GitHub repository."),
            ToolAnnotations(
                title=t("TOOL_CREATE_PULL_REQUEST_USER_TITLE", "Open new pull request"),
                read_only_hint=False,
            ),
            owner=OWNER,
            repo=REPO,
            title=Property.string("PR title", required=True),
            body=Property.string("PR description"),
            head=Property.string("Branch containing changes", required=True),
            base=Property.string("Branch to merge into", required=True),
            draft=Property.boolean("Create as draft PR"),
            maintainer_can_modify=Property.boolean("Allow maintainer edits"),
        ),
        handler,
    )


def update_pull_request(client: GitHubClient, t: Translator = null_translator) -> ServerTool:
    async def handler(args: dict[str, Any]) -> ToolResult:
        owner, repo = owner_repo(args)
        number = params.required_int(args, "pullNumber")
        body: dict[str, Any] = {}
        for key in ("title", "body", "state", "base"):
            value = params.optional(args, key, str)
            if value:
                body[key] = value
        if "maintainer_can_modify" in args:
            body["maintainer_can_modify"] = params.optional_bool(args, "maintainer_can_modify")
        if not body:
            return ToolResult.failure("No update parameters provided.")
        pr = await client.patch(repo_path(owner, repo, "pulls", number), json=body)
        return ToolResult.json(_pr_summary(pr))

    return ServerTool(
        ToolDescriptor.create(
            "update_pull_request",
            t("TOOL_UPDATE_PULL_REQUEST_DESCRIPTION", "Update an existing pull request in a GitHub repository."),
            ToolAnnotations(
                title=t("TOOL_UPDATE_PULL_REQUEST_USER_TITLE", "Edit pull request"),
                read_only_hint=False,
            ),
            owner=OWNER,
            repo=REPO,
            pullNumber=Property.number("Pull request number to update", required=True),
            title=Property.string("New title"),
            body=Property.string("New description"),
            state=Property.string("New state", enum=["open", "closed"]),
            base=Property.string("New base branch name"),
            maintainer_can_modify=Property.boolean("Allow maintainer edits"),
        ),
        handler,
    )


def merge_pull_request(client: GitHubClient, t: Translator = null_translator) -> ServerTool:
    async def handler(args: dict[str, Any]) -> ToolResult:
        owner, repo = owner_repo(args)
        number = params.required_int(args, "pullNumber")
        body = {
            "commit_title": params.optional(args, "commit_title", str),
            "commit_message": params.optional(args, "commit_message", str),
            "merge_method": params.optional(args, "merge_method", str),
        }
        result = await client.put(
            repo_path(owner, repo, "pulls", number, "merge"),
            json={k: v for k, v in body.items() if v},
        )
        return ToolResult.json(pick(result, ("sha", "merged", "message")))

    return ServerTool(
        ToolDescriptor.create(
            "merge_pull_request",
            t("TOOL_MERGE_PULL_REQUEST_DESCRIPTION", "Merge a pull request in a GitHub repository."),
            ToolAnnotations(
                title=t("TOOL_MERGE_PULL_REQUEST_USER_TITLE", "Merge pull request"),
                read_only_hint=False,
            ),
            owner=OWNER,
            repo=REPO,
            pullNumber=PULL_NUMBER,
            commit_title=Property.string("Title for merge commit"),
            commit_message=Property.string("Extra detail for merge commit"),
            merge_method=Property.string("Merge method", enum=["merge", "squash", "rebase"]),
        ),
        handler,
    )


def update_pull_request_branch(client: GitHubClient, t: Translator = null_translator) -> ServerTool:
    async def handler(args: dict[str, Any]) -> ToolResult:
        owner, repo = owner_repo(args)
        number = params.required_int(args, "pullNumber")
        expected = params.optional(args, "expectedHeadSha", str)
        result = await client.put(
            repo_path(owner, repo, "pulls", number, "update-branch"),
            json={"expected_head_sha": expected} if expected else None,
        )
        return ToolResult.json(pick(result, ("message", "url")))

    return ServerTool(
        ToolDescriptor.create(
            "update_pull_request_branch",
            t(
                "TOOL_UPDATE_PULL_REQUEST_BRANCH_DESCRIPTION",
                "Update the branch of a pull request with the latest changes from the base branch.",
            ),
            ToolAnnotations(
                title=t("TOOL_UPDATE_PULL_REQUEST_BRANCH_USER_TITLE", "Update pull request branch"),
                read_only_hint=False,
            ),
            owner=OWNER,
            repo=REPO,
            pullNumber=PULL_NUMBER,
            expectedHeadSha=Property.string("The expected SHA of the pull request's HEAD ref"),
        ),
        handler,
    )
