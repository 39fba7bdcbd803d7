"""The GitHub toolset catalog.

init_toolsets() registers every GitHub toolset into one group and enables
the configured subset. The context toolset (who am I) and the dynamic
toolset (enable more at runtime) sit outside the group and are always on.
"""

from __future__ import annotations

from collections.abc import Iterable

from hubtools.github import (
    code_scanning,
    context,
    issues,
    notifications,
    pullrequests,
    repositories,
    secret_scanning,
    users,
)
from hubtools.github.client import GitHubClient
from hubtools.toolsets.dynamic import DynamicToolsetController, ToolRegistrar
from hubtools.toolsets.toolset import Toolset, ToolsetGroup
from hubtools.translations import Translator, null_translator

CONTEXT_TOOLSET = "context"


def build_toolsets(client: GitHubClient, t: Translator = null_translator) -> list[Toolset]:
    """Every GitHub toolset, disabled, in catalog order."""
    repos = (
        Toolset("repos", "GitHub Repository related tools")
        .add_read_tools(
            repositories.search_repositories(client, t),
            repositories.get_file_contents(client, t),
            repositories.list_commits(client, t),
            repositories.search_code(client, t),
            repositories.get_commit(client, t),
            repositories.list_branches(client, t),
            repositories.list_tags(client, t),
            repositories.get_tag(client, t),
        )
        .add_write_tools(
            repositories.create_or_update_file(client, t),
            repositories.create_repository(client, t),
            repositories.fork_repository(client, t),
            repositories.create_branch(client, t),
            repositories.push_files(client, t),
            repositories.delete_file(client, t),
        )
    )
    issue_tools = (
        Toolset("issues", "GitHub Issues related tools")
        .add_read_tools(
            issues.get_issue(client, t),
            issues.search_issues(client, t),
            issues.list_issues(client, t),
            issues.get_issue_comments(client, t),
        )
        .add_write_tools(
            issues.create_issue(client, t),
            issues.add_issue_comment(client, t),
            issues.update_issue(client, t),
        )
    )
    user_tools = Toolset("users", "GitHub User related tools").add_read_tools(
        users.search_users(client, t),
    )
    pull_requests = (
        Toolset("pull_requests", "GitHub Pull Request related tools")
        .add_read_tools(
            pullrequests.get_pull_request(client, t),
            pullrequests.list_pull_requests(client, t),
            pullrequests.get_pull_request_files(client, t),
            pullrequests.get_pull_request_status(client, t),
            pullrequests.get_pull_request_comments(client, t),
            pullrequests.get_pull_request_reviews(client, t),
        )
        .add_write_tools(
            pullrequests.merge_pull_request(client, t),
            pullrequests.update_pull_request_branch(client, t),
            pullrequests.create_pull_request(client, t),
            pullrequests.update_pull_request(client, t),
        )
    )
    code_security = Toolset(
        "code_security", "Code security related tools, such as GitHub Code Scanning"
    ).add_read_tools(
        code_scanning.get_code_scanning_alert(client, t),
        code_scanning.list_code_scanning_alerts(client, t),
    )
    secret_protection = Toolset(
        "secret_protection", "Secret protection related tools, such as GitHub Secret Scanning"
    ).add_read_tools(
        secret_scanning.get_secret_scanning_alert(client, t),
        secret_scanning.list_secret_scanning_alerts(client, t),
    )
    notification_tools = (
        Toolset("notifications", "GitHub Notifications related tools")
        .add_read_tools(
            notifications.get_notifications(client, t),
            notifications.get_notification_thread(client, t),
        )
        .add_write_tools(
            notifications.mark_notification_read(client, t),
            notifications.mark_notification_done(client, t),
            notifications.mark_all_notifications_read(client, t),
        )
    )
    # Always registered so enabling it by name never fails
    experiments = Toolset("experiments", "Experimental features that are not considered stable yet")

    return [
        repos,
        issue_tools,
        user_tools,
        pull_requests,
        code_security,
        secret_protection,
        notification_tools,
        experiments,
    ]


def init_toolsets(
    client: GitHubClient,
    enabled: Iterable[str],
    read_only: bool = False,
    t: Translator = null_translator,
) -> ToolsetGroup:
    """Register the catalog and enable the named toolsets.

    Raises:
        ConfigurationError: An enabled name is not in the catalog
    """
    group = ToolsetGroup(read_only=read_only)
    for toolset in build_toolsets(client, t):
        group.add_toolset(toolset)
    group.enable_toolsets(enabled)
    return group


def init_context_toolset(client: GitHubClient, t: Translator = null_translator) -> Toolset:
    toolset = Toolset(
        CONTEXT_TOOLSET,
        "Tools that provide context about the current user and GitHub context you are operating in",
    ).add_read_tools(context.get_me(client, t))
    toolset.enable()
    return toolset


def init_dynamic_toolset(
    group: ToolsetGroup,
    registrar: ToolRegistrar,
    t: Translator = null_translator,
) -> Toolset:
    """Build the dynamic toolset; call after the group is fully populated."""
    return DynamicToolsetController(group, registrar, t).toolset()
