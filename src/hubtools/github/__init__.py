"""GitHub REST client and the tools built on it."""

from hubtools.github.client import GitHubAPIError, GitHubClient, resolve_api_base

__all__ = ["GitHubAPIError", "GitHubClient", "resolve_api_base"]
