"""Asynchronous GitHub REST client.

A thin wrapper over httpx.AsyncClient: base URL resolution for
github.com, GitHub Enterprise Cloud and GitHub Enterprise Server, auth
headers, JSON decoding, and mapping of error responses to GitHubAPIError.
No retries, no caching.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlsplit

import httpx

from hubtools import __version__
from hubtools.errors import CollaboratorError, ConfigurationError
from hubtools.formatting import omit_empty

logger = logging.getLogger(__name__)

DOTCOM_API_BASE = "https://api.github.com"
API_VERSION = "2022-11-28"


class GitHubAPIError(CollaboratorError):
    """A GitHub API request failed.

    Attributes:
        status_code: HTTP status, or None when no response was received
    """


def resolve_api_base(host: str | None) -> str:
    """Resolve the REST API base URL for a GitHub host.

    - "" or any *github.com host -> https://api.github.com
    - *.ghe.com (Enterprise Cloud) -> https://api.<host>, HTTPS only
    - anything else (Enterprise Server) -> <scheme>://<host>/api/v3

    Raises:
        ConfigurationError: Host has no scheme, or is a plain-HTTP GHEC host
    """
    if not host:
        return DOTCOM_API_BASE

    parts = urlsplit(host)
    if not parts.scheme or not parts.hostname:
        raise ConfigurationError(f"host must have a scheme (http or https): {host}")

    hostname = parts.hostname
    if hostname.endswith("github.com"):
        return DOTCOM_API_BASE
    if hostname.endswith("ghe.com"):
        if parts.scheme == "http":
            raise ConfigurationError("GHEC URL must be HTTPS")
        return f"https://api.{hostname}"
    return f"{parts.scheme}://{hostname}/api/v3"


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(data, dict) and data.get("message"):
        message = str(data["message"])
        errors = data.get("errors")
        if errors:
            message = f"{message}: {errors}"
        return message
    return response.text or response.reason_phrase


class GitHubClient:
    """Async GitHub REST client.

    Example:
        >>> async with GitHubClient(token="ghp_...") as client:
        ...     me = await client.get("/user")
    """

    def __init__(
        self,
        token: str = "",
        host: str = "",
        *,
        user_agent: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 30.0,
    ) -> None:
        """Initialize the client.

        Args:
            token: GitHub personal access token; sent as a Bearer token
            host: GitHub host (see resolve_api_base)
            user_agent: User-Agent header (default: hubtools/<version>)
            transport: httpx transport override, used by tests
            timeout: Request timeout in seconds
        """
        self.base_url = resolve_api_base(host)
        self.user_agent = user_agent or f"hubtools/{__version__}"
        self._token = token
        self._transport = transport
        self._timeout = timeout
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            headers = {
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": API_VERSION,
                "User-Agent": self.user_agent,
            }
            if self._token:
                headers["Authorization"] = f"Bearer {self._token}"

            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=headers,
                timeout=httpx.Timeout(self._timeout, connect=10.0),
                transport=self._transport,
            )
        return self._client

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        """Send a request and decode the JSON response.

        Query parameters with empty values are dropped. An empty response
        body decodes to None.

        Raises:
            GitHubAPIError: Transport failure or a non-2xx response
        """
        client = await self._get_client()
        query = omit_empty(params) if params else None
        try:
            response = await client.request(method, path, params=query, json=json)
        except httpx.RequestError as e:
            logger.warning("GitHub request %s %s failed: %s", method, path, e)
            raise GitHubAPIError(f"{method} {path} failed: {e}") from e

        if response.is_error:
            message = _error_message(response)
            logger.debug("GitHub %s %s returned %d: %s", method, path, response.status_code, message)
            raise GitHubAPIError(
                f"{method} {path} returned {response.status_code}: {message}",
                status_code=response.status_code,
            )

        if not response.content:
            return None
        return response.json()

    async def get(self, path: str, *, params: dict[str, Any] | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, *, json: dict[str, Any] | None = None) -> Any:
        return await self.request("POST", path, json=json)

    async def patch(self, path: str, *, json: dict[str, Any] | None = None) -> Any:
        return await self.request("PATCH", path, json=json)

    async def put(self, path: str, *, json: dict[str, Any] | None = None) -> Any:
        return await self.request("PUT", path, json=json)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
