"""Repository tools: search, contents, commits, branches, tags and forks."""

from __future__ import annotations

import base64
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

_REPO_FIELDS = (
    "id",
    "name",
    "full_name",
    "description",
    "html_url",
    "language",
    "stargazers_count",
    "forks_count",
    "open_issues_count",
    "default_branch",
    "private",
    "archived",
    "topics",
    "updated_at",
)
_CONTENT_FIELDS = ("type", "name", "path", "sha", "size", "url", "html_url", "git_url", "download_url")


def _repo_summary(repo: dict[str, Any]) -> dict[str, Any]:
    summary = pick(repo, _REPO_FIELDS)
    owner = user_summary(repo.get("owner"))
    if owner:
        summary["owner"] = owner
    return summary


def _commit_summary(commit: dict[str, Any]) -> dict[str, Any]:
    detail = commit.get("commit") or {}
    summary = pick(commit, ("sha", "node_id", "html_url"))
    summary["commit"] = {
        "message": detail.get("message"),
        "author": pick(detail.get("author"), ("name", "email", "date")),
        "committer": pick(detail.get("committer"), ("name", "email", "date")),
    }
    for role in ("author", "committer"):
        user = user_summary(commit.get(role))
        if user:
            summary[role] = user
    return summary


# =============================================================================
# Read tools
# =============================================================================


def search_repositories(client: GitHubClient, t: Translator = null_translator) -> ServerTool:
    async def handler(args: dict[str, Any]) -> ToolResult:
        query = params.required(args, "query", str)
        page = params.pagination(args)
        result = await client.get("/search/repositories", params={"q": query, **page.as_query()})
        return ToolResult.json(
            {
                "total_count": result.get("total_count", 0),
                "incomplete_results": result.get("incomplete_results", False),
                "items": [_repo_summary(item) for item in result.get("items", [])],
            }
        )

    return ServerTool(
        ToolDescriptor.create(
            "search_repositories",
            t("TOOL_SEARCH_REPOSITORIES_DESCRIPTION", "Search for GitHub repositories"),
            ToolAnnotations(
                title=t("TOOL_SEARCH_REPOSITORIES_USER_TITLE", "Search repositories"),
                read_only_hint=True,
            ),
            query=Property.string("Search query", required=True),
            **params.with_pagination(),
        ),
        handler,
    )


def get_file_contents(client: GitHubClient, t: Translator = null_translator) -> ServerTool:
    async def handler(args: dict[str, Any]) -> ToolResult:
        owner, repo = owner_repo(args)
        path = params.required(args, "path", str)
        branch = params.optional(args, "branch", str)
        contents = await client.get(
            repo_path(owner, repo, "contents", path.lstrip("/")),
            params={"ref": branch},
        )
        if isinstance(contents, list):
            return ToolResult.json([pick(item, _CONTENT_FIELDS) for item in contents])

        summary = pick(contents, _CONTENT_FIELDS)
        if contents.get("encoding") == "base64" and contents.get("content"):
            raw = base64.b64decode(contents["content"])
            try:
                summary["content"] = raw.decode("utf-8")
            except UnicodeDecodeError:
                summary["content"] = contents["content"]
                summary["encoding"] = "base64"
        return ToolResult.json(summary)

    return ServerTool(
        ToolDescriptor.create(
            "get_file_contents",
            t(
                "TOOL_GET_FILE_CONTENTS_DESCRIPTION",
                "Get the contents of a file or directory from a GitHub repository",
            ),
            ToolAnnotations(
                title=t("TOOL_GET_FILE_CONTENTS_USER_TITLE", "Get file or directory contents"),
                read_only_hint=True,
            ),
            owner=OWNER,
            repo=REPO,
            path=Property.string("Path to file/directory", required=True),
            branch=Property.string("Branch to get contents from"),
        ),
        handler,
    )


def list_commits(client: GitHubClient, t: Translator = null_translator) -> ServerTool:
    async def handler(args: dict[str, Any]) -> ToolResult:
        owner, repo = owner_repo(args)
        sha = params.optional(args, "sha", str)
        page = params.pagination(args)
        commits = await client.get(repo_path(owner, repo, "commits"), params={"sha": sha, **page.as_query()})
        return ToolResult.json([_commit_summary(c) for c in commits])

    return ServerTool(
        ToolDescriptor.create(
            "list_commits",
            t("TOOL_LIST_COMMITS_DESCRIPTION", "Get list of commits of a branch in a GitHub repository"),
            ToolAnnotations(title=t("TOOL_LIST_COMMITS_USER_TITLE", "List commits"), read_only_hint=True),
            owner=OWNER,
            repo=REPO,
            sha=Property.string("SHA or Branch name"),
            **params.with_pagination(),
        ),
        handler,
    )


def get_commit(client: GitHubClient, t: Translator = null_translator) -> ServerTool:
    async def handler(args: dict[str, Any]) -> ToolResult:
        owner, repo = owner_repo(args)
        sha = params.required(args, "sha", str)
        commit = await client.get(repo_path(owner, repo, "commits", sha))
        summary = _commit_summary(commit)
        if commit.get("stats"):
            summary["stats"] = commit["stats"]
        summary["files"] = [
            pick(f, ("filename", "status", "additions", "deletions", "changes")) for f in commit.get("files", [])
        ]
        return ToolResult.json(summary)

    return ServerTool(
        ToolDescriptor.create(
            "get_commit",
            t("TOOL_GET_COMMITS_DESCRIPTION", "Get details for a commit from a GitHub repository"),
            ToolAnnotations(title=t("TOOL_GET_COMMITS_USER_TITLE", "Get commit details"), read_only_hint=True),
            owner=OWNER,
            repo=REPO,
            sha=Property.string("Commit SHA, branch name, or tag name", required=True),
        ),
        handler,
    )


def list_branches(client: GitHubClient, t: Translator = null_translator) -> ServerTool:
    async def handler(args: dict[str, Any]) -> ToolResult:
        owner, repo = owner_repo(args)
        page = params.pagination(args)
        branches = await client.get(repo_path(owner, repo, "branches"), params=page.as_query())
        return ToolResult.json(
            [
                {
                    "name": b.get("name"),
                    "sha": (b.get("commit") or {}).get("sha"),
                    "protected": b.get("protected", False),
                }
                for b in branches
            ]
        )

    return ServerTool(
        ToolDescriptor.create(
            "list_branches",
            t("TOOL_LIST_BRANCHES_DESCRIPTION", "List branches in a GitHub repository"),
            ToolAnnotations(title=t("TOOL_LIST_BRANCHES_USER_TITLE", "List branches"), read_only_hint=True),
            owner=OWNER,
            repo=REPO,
            **params.with_pagination(),
        ),
        handler,
    )


def list_tags(client: GitHubClient, t: Translator = null_translator) -> ServerTool:
    async def handler(args: dict[str, Any]) -> ToolResult:
        owner, repo = owner_repo(args)
        page = params.pagination(args)
        tags = await client.get(repo_path(owner, repo, "tags"), params=page.as_query())
        return ToolResult.json(
            [
                {
                    **pick(tag, ("name", "zipball_url", "tarball_url")),
                    "commit": pick(tag.get("commit"), ("sha", "url")),
                }
                for tag in tags
            ]
        )

    return ServerTool(
        ToolDescriptor.create(
            "list_tags",
            t("TOOL_LIST_TAGS_DESCRIPTION", "List git tags in a GitHub repository"),
            ToolAnnotations(title=t("TOOL_LIST_TAGS_USER_TITLE", "List tags"), read_only_hint=True),
            owner=OWNER,
            repo=REPO,
            **params.with_pagination(),
        ),
        handler,
    )


def get_tag(client: GitHubClient, t: Translator = null_translator) -> ServerTool:
    async def handler(args: dict[str, Any]) -> ToolResult:
        owner, repo = owner_repo(args)
        tag = params.required(args, "tag", str)
        # Annotated tags only; the ref points at the tag object
        ref = await client.get(repo_path(owner, repo, "git", "ref", "tags", tag))
        tag_object = await client.get(repo_path(owner, repo, "git", "tags", ref["object"]["sha"]))
        return ToolResult.json(
            {
                **pick(tag_object, ("tag", "sha", "url", "message")),
                "tagger": pick(tag_object.get("tagger"), ("name", "email", "date")),
                "object": pick(tag_object.get("object"), ("type", "sha", "url")),
            }
        )

    return ServerTool(
        ToolDescriptor.create(
            "get_tag",
            t("TOOL_GET_TAG_DESCRIPTION", "Get details about a specific git tag in a GitHub repository"),
            ToolAnnotations(title=t("TOOL_GET_TAG_USER_TITLE", "Get tag details"), read_only_hint=True),
            owner=OWNER,
            repo=REPO,
            tag=Property.string("Tag name", required=True),
        ),
        handler,
    )


def search_code(client: GitHubClient, t: Translator = null_translator) -> ServerTool:
    async def handler(args: dict[str, Any]) -> ToolResult:
        query = params.required(args, "q", str)
        sort = params.optional(args, "sort", str)
        order = params.optional(args, "order", str)
        page = params.pagination(args)
        result = await client.get(
            "/search/code",
            params={"q": query, "sort": sort, "order": order, **page.as_query()},
        )
        return ToolResult.json(
            {
                "total_count": result.get("total_count", 0),
                "items": [
                    {
                        **pick(item, ("name", "path", "sha", "html_url")),
                        "repository": (item.get("repository") or {}).get("full_name"),
                    }
                    for item in result.get("items", [])
                ],
            }
        )

    return ServerTool(
        ToolDescriptor.create(
            "search_code",
            t("TOOL_SEARCH_CODE_DESCRIPTION", "Search for code across GitHub repositories"),
            ToolAnnotations(title=t("TOOL_SEARCH_CODE_USER_TITLE", "Search code"), read_only_hint=True),
            q=Property.string("Search query using GitHub code search syntax", required=True),
            sort=Property.string("Sort field ('indexed' only)"),
            order=Property.string("Sort order", enum=["asc", "desc"]),
            **params.with_pagination(),
        ),
        handler,
    )


# =============================================================================
# Write tools
# =============================================================================


def create_or_update_file(client: GitHubClient, t: Translator = null_translator) -> ServerTool:
    async def handler(args: dict[str, Any]) -> ToolResult:
        owner, repo = owner_repo(args)
        path = params.required(args, "path", str)
        content = params.required(args, "content", str)
        message = params.required(args, "message", str)
        branch = params.required(args, "branch", str)
        sha = params.optional(args, "sha", str)

        body: dict[str, Any] = {
            "message": message,
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
            "branch": branch,
        }
        if sha:
            body["sha"] = sha
        result = await client.put(repo_path(owner, repo, "contents", path.lstrip("/")), json=body)
        return ToolResult.json(
            {
                "content": pick(result.get("content"), _CONTENT_FIELDS),
                "commit": pick(result.get("commit"), ("sha", "html_url", "message")),
            }
        )

    return ServerTool(
        ToolDescriptor.create(
            "create_or_update_file",
            t(
                "TOOL_CREATE_OR_UPDATE_FILE_DESCRIPTION",
                "Create or update a single file in a GitHub repository. If updating, "
                "you must provide the SHA of the file you want to update.",
            ),
            ToolAnnotations(
                title=t("TOOL_CREATE_OR_UPDATE_FILE_USER_TITLE", "Create or update file"),
                read_only_hint=False,
            ),
            owner=OWNER,
            repo=REPO,
            path=Property.string("Path where to create/update the file", required=True),
            content=Property.string("Content of the file", required=True),
            message=Property.string("Commit message", required=True),
            branch=Property.string("Branch to create/update the file in", required=True),
            sha=Property.string("SHA of file being replaced (for updates)"),
        ),
        handler,
    )


def create_repository(client: GitHubClient, t: Translator = null_translator) -> ServerTool:
    async def handler(args: dict[str, Any]) -> ToolResult:
        name = params.required(args, "name", str)
        body = {
            "name": name,
            "description": params.optional(args, "description", str),
            "private": params.optional_bool(args, "private"),
            "auto_init": params.optional_bool(args, "autoInit"),
        }
        repo = await client.post("/user/repos", json=body)
        return ToolResult.json(_repo_summary(repo))

    return ServerTool(
        ToolDescriptor.create(
            "create_repository",
            t("TOOL_CREATE_REPOSITORY_DESCRIPTION", "Create a new GitHub repository in your account"),
            ToolAnnotations(
                title=t("TOOL_CREATE_REPOSITORY_USER_TITLE", "Create repository"),
                read_only_hint=False,
            ),
            name=Property.string("Repository name", required=True),
            description=Property.string("Repository description"),
            private=Property.boolean("Whether repo should be private"),
            autoInit=Property.boolean("Initialize with README"),
        ),
        handler,
    )


def fork_repository(client: GitHubClient, t: Translator = null_translator) -> ServerTool:
    async def handler(args: dict[str, Any]) -> ToolResult:
        owner, repo = owner_repo(args)
        organization = params.optional(args, "organization", str)
        body = {"organization": organization} if organization else None
        fork = await client.post(repo_path(owner, repo, "forks"), json=body)
        return ToolResult.json(_repo_summary(fork))

    return ServerTool(
        ToolDescriptor.create(
            "fork_repository",
            t("TOOL_FORK_REPOSITORY_DESCRIPTION", "Fork a GitHub repository to your account or specified organization"),
            ToolAnnotations(
                title=t("TOOL_FORK_REPOSITORY_USER_TITLE", "Fork repository"),
                read_only_hint=False,
            ),
            owner=OWNER,
            repo=REPO,
            organization=Property.string("Organization to fork to"),
        ),
        handler,
    )


def create_branch(client: GitHubClient, t: Translator = null_translator) -> ServerTool:
    async def handler(args: dict[str, Any]) -> ToolResult:
        owner, repo = owner_repo(args)
        branch = params.required(args, "branch", str)
        from_branch = params.optional(args, "from_branch", str)

        if not from_branch:
            repository = await client.get(repo_path(owner, repo))
            from_branch = repository["default_branch"]

        ref = await client.get(repo_path(owner, repo, "git", "ref", "heads", from_branch))
        created = await client.post(
            repo_path(owner, repo, "git", "refs"),
            json={"ref": f"refs/heads/{branch}", "sha": ref["object"]["sha"]},
        )
        return ToolResult.json(
            {
                "ref": created.get("ref"),
                "url": created.get("url"),
                "sha": (created.get("object") or {}).get("sha"),
            }
        )

    return ServerTool(
        ToolDescriptor.create(
            "create_branch",
            t("TOOL_CREATE_BRANCH_DESCRIPTION", "Create a new branch in a GitHub repository"),
            ToolAnnotations(title=t("TOOL_CREATE_BRANCH_USER_TITLE", "Create branch"), read_only_hint=False),
            owner=OWNER,
            repo=REPO,
            branch=Property.string("Name for new branch", required=True),
            from_branch=Property.string("Source branch (defaults to repo default)"),
        ),
        handler,
    )


async def _commit_tree_entries(
    client: GitHubClient,
    owner: str,
    repo: str,
    branch: str,
    message: str,
    entries: list[dict[str, Any]],
) -> tuple[dict[str, Any], dict[str, Any]]:
    """Commit tree entries on top of a branch head and move the branch.

    Returns:
        The updated ref and the new commit
    """
    ref = await client.get(repo_path(owner, repo, "git", "ref", "heads", branch))
    base = await client.get(repo_path(owner, repo, "git", "commits", ref["object"]["sha"]))
    tree = await client.post(
        repo_path(owner, repo, "git", "trees"),
        json={"base_tree": base["tree"]["sha"], "tree": entries},
    )
    commit = await client.post(
        repo_path(owner, repo, "git", "commits"),
        json={"message": message, "tree": tree["sha"], "parents": [base["sha"]]},
    )
    updated = await client.patch(
        repo_path(owner, repo, "git", "refs", "heads", branch),
        json={"sha": commit["sha"], "force": False},
    )
    return updated, commit


def push_files(client: GitHubClient, t: Translator = null_translator) -> ServerTool:
    async def handler(args: dict[str, Any]) -> ToolResult:
        owner, repo = owner_repo(args)
        branch = params.required(args, "branch", str)
        message = params.required(args, "message", str)

        files = args.get("files")
        if not isinstance(files, list) or not all(isinstance(f, dict) for f in files):
            return ToolResult.failure("files parameter must be an array of objects with path and content")
        entries = []
        for f in files:
            path = f.get("path")
            if not isinstance(path, str) or not path:
                return ToolResult.failure("each file must have a path")
            content = f.get("content")
            if not isinstance(content, str):
                return ToolResult.failure("each file must have content")
            entries.append({"path": path, "mode": "100644", "type": "blob", "content": content})

        ref, commit = await _commit_tree_entries(client, owner, repo, branch, message, entries)
        return ToolResult.json(
            {
                "ref": ref.get("ref"),
                "url": ref.get("url"),
                "sha": (ref.get("object") or {}).get("sha"),
                "message": commit.get("message"),
            }
        )

    return ServerTool(
        ToolDescriptor.create(
            "push_files",
            t("TOOL_PUSH_FILES_DESCRIPTION", "Push multiple files to a GitHub repository in a single commit"),
            ToolAnnotations(title=t("TOOL_PUSH_FILES_USER_TITLE", "Push files to repository"), read_only_hint=False),
            owner=OWNER,
            repo=REPO,
            branch=Property.string("Branch to push to", required=True),
            files=Property(
                "array",
                "Array of file objects to push, each object with path (string) and content (string)",
                required=True,
                items={
                    "type": "object",
                    "properties": {
                        "path": {"type": "string", "description": "path to the file"},
                        "content": {"type": "string", "description": "file content"},
                    },
                    "required": ["path", "content"],
                    "additionalProperties": False,
                },
            ),
            message=Property.string("Commit message", required=True),
        ),
        handler,
    )


def delete_file(client: GitHubClient, t: Translator = null_translator) -> ServerTool:
    async def handler(args: dict[str, Any]) -> ToolResult:
        owner, repo = owner_repo(args)
        path = params.required(args, "path", str)
        message = params.required(args, "message", str)
        branch = params.required(args, "branch", str)

        # A null blob sha removes the path from the new tree
        entry = {"path": path.lstrip("/"), "mode": "100644", "type": "blob", "sha": None}
        _, commit = await _commit_tree_entries(client, owner, repo, branch, message, [entry])
        return ToolResult.json(
            {
                "commit": pick(commit, ("sha", "html_url", "message")),
                "content": None,
            }
        )

    return ServerTool(
        ToolDescriptor.create(
            "delete_file",
            t("TOOL_DELETE_FILE_DESCRIPTION", "Delete a file from a GitHub repository"),
            ToolAnnotations(
                title=t("TOOL_DELETE_FILE_USER_TITLE", "Delete file"),
                read_only_hint=False,
                destructive_hint=True,
            ),
            owner=OWNER,
            repo=REPO,
            path=Property.string("Path to the file to delete", required=True),
            message=Property.string("Commit message", required=True),
            branch=Property.string("Branch to delete the file from", required=True),
        ),
        handler,
    )
