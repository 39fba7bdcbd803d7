"""Helpers shared by the GitHub tool modules."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any
from urllib.parse import quote

from hubtools import params
from hubtools.toolsets.types import Property

OWNER = Property.string("Repository owner (username or organization)", required=True)
REPO = Property.string("Repository name", required=True)


def owner_repo(args: Mapping[str, Any]) -> tuple[str, str]:
    """Extract the required owner and repo arguments."""
    return params.required(args, "owner", str), params.required(args, "repo", str)


def repo_path(owner: str, repo: str, *parts: str | int) -> str:
    """Build /repos/<owner>/<repo>/<parts...> with each segment quoted."""
    segments = [quote(owner, safe=""), quote(repo, safe="")]
    segments.extend(quote(str(p), safe="/") for p in parts)
    return "/repos/" + "/".join(segments)


def pick(data: Mapping[str, Any] | None, keys: Iterable[str]) -> dict[str, Any]:
    """Keep only the listed keys that have a non-None value."""
    if not data:
        return {}
    return {k: data[k] for k in keys if data.get(k) is not None}


def user_summary(user: Mapping[str, Any] | None) -> dict[str, Any] | None:
    if not user:
        return None
    return pick(user, ("login", "id", "html_url", "avatar_url", "type"))
