"""Shared pytest fixtures."""

from collections.abc import AsyncIterator
from typing import Any

import httpx
import pytest

from outlook_mcp.graph.credentials import CredentialHolder
from outlook_mcp.graph.outlook_client import OutlookClient, outlook_client
from outlook_mcp.tools.dispatch import DispatchAdapter

BASE_URL = "https://graph.test/v1.0"


def graph_message(**overrides: Any) -> dict[str, Any]:
    """A Graph ``message`` resource as returned by ``GET /me/messages``."""
    message: dict[str, Any] = {
        "id": "M1",
        "subject": "Q2 budget review",
        "from": {"emailAddress": {"name": "Alice", "address": "a@x.com"}},
        "receivedDateTime": "2026-02-27T09:00:00Z",
        "bodyPreview": "Please review the attached budget...",
        "isRead": False,
        "hasAttachments": True,
        "importance": "high",
    }
    message.update(overrides)
    return message


class GraphStub:
    """httpx MockTransport handler that records requests and replays queued responses.

    With nothing queued it answers 200 with an empty message list.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._queue: list[tuple[int, Any]] = []

    def queue(self, status: int, body: Any = None) -> None:
        self._queue.append((status, body))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status, body = self._queue.pop(0) if self._queue else (200, {"value": []})
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def credentials() -> CredentialHolder:
    return CredentialHolder()


@pytest.fixture
def graph() -> GraphStub:
    return GraphStub()


@pytest.fixture
async def client(credentials: CredentialHolder, graph: GraphStub) -> AsyncIterator[OutlookClient]:
    async with outlook_client(
        credentials, base_url=BASE_URL, transport=httpx.MockTransport(graph)
    ) as c:
        yield c


@pytest.fixture
def adapter(client: OutlookClient, credentials: CredentialHolder) -> DispatchAdapter:
    return DispatchAdapter(client, credentials)
