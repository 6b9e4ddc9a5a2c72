"""Outlook client — wraps the Microsoft Graph mail endpoints behind a typed async API."""

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from enum import Enum
from typing import Any
from urllib.parse import quote

import httpx

from outlook_mcp.graph.credentials import CredentialHolder
from outlook_mcp.graph.types import DEFAULT_ORDER_BY, EmailDetail, EmailSummary, ListQuery

logger = logging.getLogger(__name__)

GRAPH_API_BASE_URL = "https://graph.microsoft.com/v1.0"
GRAPH_EXPLORER_URL = "https://developer.microsoft.com/en-us/graph/graph-explorer"


class ErrorKind(str, Enum):
    """How an outbound call failed, classified once at the client boundary."""

    MISSING_CREDENTIAL = "MissingCredential"
    INVALID_CREDENTIAL = "InvalidCredential"
    NOT_FOUND = "NotFound"
    UPSTREAM_ERROR = "UpstreamError"


class GraphError(Exception):
    """Raised when a Graph mail call cannot be made or is rejected."""

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message


_MISSING_TOKEN_MESSAGE = (
    "Access token is required. Please obtain an access token from "
    f"Microsoft Graph Explorer: {GRAPH_EXPLORER_URL}"
)
_INVALID_TOKEN_MESSAGE = (
    "Invalid or expired access token. Please obtain a new token from "
    f"Microsoft Graph Explorer: {GRAPH_EXPLORER_URL}"
)


class OutlookClient:
    """Thin async wrapper around the Graph ``/me/messages`` endpoints.

    Every call reads the token from the shared CredentialHolder at the
    moment it builds its headers, sends exactly one request and never
    retries. Use the `outlook_client()` context manager to construct and
    tear down the underlying HTTP client.
    """

    def __init__(
        self,
        credentials: CredentialHolder,
        http: httpx.AsyncClient,
        base_url: str = GRAPH_API_BASE_URL,
    ) -> None:
        self._credentials = credentials
        self._http = http
        self._base_url = base_url.rstrip("/")

    # ── Public API ─────────────────────────────────────────────────────────────

    async def list_emails(self, query: ListQuery | None = None) -> list[EmailSummary]:
        """Return one page of messages, newest first unless told otherwise."""
        query = query or ListQuery()
        data = await self._request(
            "GET", "/me/messages", action="list emails", params=query.to_params()
        )
        return [EmailSummary.from_graph(m) for m in data.get("value", [])]

    async def search_emails(self, search_query: str, top: int = 10) -> list[EmailSummary]:
        """Free-text search. Same request as list_emails with ``search`` set."""
        return await self.list_emails(
            ListQuery(search=search_query, top=top, order_by=DEFAULT_ORDER_BY)
        )

    async def get_email(self, message_id: str) -> EmailDetail:
        """Return a single message with its body."""
        data = await self._request(
            "GET",
            _message_path(message_id),
            action="get email",
            not_found_id=message_id,
        )
        return EmailDetail.from_graph(data)

    async def mark_as_read(self, message_id: str, is_read: bool = True) -> None:
        """Set the read flag; only ``isRead`` is sent in the PATCH body."""
        await self._request(
            "PATCH",
            _message_path(message_id),
            action="mark email as read",
            json={"isRead": is_read},
        )
        logger.debug("Marked message %s isRead=%s", message_id, is_read)

    async def delete_email(self, message_id: str) -> None:
        await self._request("DELETE", _message_path(message_id), action="delete email")
        logger.debug("Deleted message %s", message_id)

    # ── Internal helpers ───────────────────────────────────────────────────────

    def _headers(self) -> dict[str, str]:
        token = self._credentials.current_token()
        if not token:
            raise GraphError(ErrorKind.MISSING_CREDENTIAL, _MISSING_TOKEN_MESSAGE)
        return {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }

    async def _request(
        self,
        method: str,
        path: str,
        *,
        action: str,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
        not_found_id: str | None = None,
    ) -> dict[str, Any]:
        """Send one Graph request and return the decoded JSON body.

        Raises GraphError classified as MissingCredential (no request is
        sent), InvalidCredential (401), NotFound (404, only when
        ``not_found_id`` is given) or UpstreamError (anything else).
        """
        headers = self._headers()
        url = f"{self._base_url}{path}"
        logger.debug("Graph → %s %s %s", method, path, params or "")
        try:
            response = await self._http.request(
                method, url, headers=headers, params=params, json=json
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            if status == 401:
                raise GraphError(ErrorKind.INVALID_CREDENTIAL, _INVALID_TOKEN_MESSAGE) from exc
            if status == 404 and not_found_id is not None:
                raise GraphError(
                    ErrorKind.NOT_FOUND, f"Email with ID {not_found_id} not found."
                ) from exc
            raise GraphError(
                ErrorKind.UPSTREAM_ERROR,
                f"Failed to {action}: {_upstream_message(exc.response)}",
            ) from exc
        except httpx.HTTPError as exc:
            raise GraphError(ErrorKind.UPSTREAM_ERROR, f"Failed to {action}: {exc}") from exc

        # PATCH and DELETE may answer 204 with no body
        if not response.content:
            return {}
        try:
            data = response.json()
        except ValueError as exc:
            raise GraphError(
                ErrorKind.UPSTREAM_ERROR, f"Failed to {action}: response was not JSON"
            ) from exc
        return data if isinstance(data, dict) else {}


def _message_path(message_id: str) -> str:
    """Path of a single message; the id is percent-encoded as one segment."""
    return f"/me/messages/{quote(message_id, safe='')}"


def _upstream_message(response: httpx.Response) -> str:
    """Pull Graph's ``error.message`` out of a failed response, if present."""
    fallback = f"Request failed with status code {response.status_code}"
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return fallback


@asynccontextmanager
async def outlook_client(
    credentials: CredentialHolder,
    *,
    base_url: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AsyncIterator[OutlookClient]:
    """Async context manager that yields an OutlookClient over a pooled httpx client.

    Args:
        credentials: Holder shared with every other client in the process.
        base_url: Graph root. Falls back to GRAPH_API_BASE_URL env var.
        transport: Optional httpx transport (tests pass a MockTransport).

    Example::

        async with outlook_client(CredentialHolder()) as client:
            emails = await client.list_emails()
    """
    root = base_url or os.environ.get("GRAPH_API_BASE_URL", GRAPH_API_BASE_URL)
    async with httpx.AsyncClient(transport=transport) as http:
        logger.info("Outlook client ready (%s)", root)
        yield OutlookClient(credentials, http, base_url=root)
