"""Pytest fixtures for hubtools tests."""

from __future__ import annotations

import json
from collections.abc import Callable, Sequence
from typing import Any

import httpx
import pytest

from hubtools.github.client import GitHubClient
from hubtools.toolsets.types import ServerTool, ToolAnnotations, ToolDescriptor, ToolResult


class FakeRegistrar:
    """Records every register_tools() call."""

    def __init__(self) -> None:
        self.calls: list[list[ServerTool]] = []

    def register_tools(self, tools: Sequence[ServerTool]) -> None:
        self.calls.append(list(tools))

    @property
    def names(self) -> list[str]:
        return [tool.name for call in self.calls for tool in call]


class RecordingTransport:
    """httpx transport that answers from a route table and records requests.

    Routes map "METHOD /path" to (status, json body). Unrouted requests get
    a 404 with a GitHub-style message.
    """

    def __init__(self, routes: dict[str, tuple[int, Any]] | None = None) -> None:
        self.routes = dict(routes or {})
        self.requests: list[httpx.Request] = []
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = f"{request.method} {request.url.path}"
        if key not in self.routes:
            return httpx.Response(404, json={"message": "Not Found"})
        status, body = self.routes[key]
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)


@pytest.fixture
def make_tool() -> Callable[..., ServerTool]:
    """Factory for ServerTools that echo their arguments."""

    def _make(name: str, read_only: bool = True, description: str = "") -> ServerTool:
        async def handler(args: dict[str, Any]) -> ToolResult:
            return ToolResult.json({"tool": name, "args": args})

        return ServerTool(
            ToolDescriptor.create(
                name,
                description or f"{name} description",
                ToolAnnotations(title=name, read_only_hint=read_only),
            ),
            handler,
        )

    return _make


@pytest.fixture
def registrar() -> FakeRegistrar:
    return FakeRegistrar()


@pytest.fixture
def github() -> Callable[..., tuple[GitHubClient, RecordingTransport]]:
    """Factory for a GitHubClient wired to a RecordingTransport."""

    def _make(routes: dict[str, tuple[int, Any]] | None = None, **kwargs: Any) -> tuple[GitHubClient, RecordingTransport]:
        recorder = RecordingTransport(routes)
        client = GitHubClient(token=kwargs.pop("token", "test-token"), transport=recorder.transport, **kwargs)
        return client, recorder

    return _make
