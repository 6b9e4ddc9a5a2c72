"""Dispatch adapter — routes a tool call to the Outlook client and classifies the outcome.

Both front-ends call `DispatchAdapter.dispatch()` and render the returned
`Success` / `Failure` in their own envelope; neither re-interprets errors.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from outlook_mcp.graph.credentials import CredentialHolder
from outlook_mcp.graph.outlook_client import ErrorKind, GraphError, OutlookClient
from outlook_mcp.graph.types import DEFAULT_ORDER_BY, DEFAULT_TOP, ListQuery
from outlook_mcp.tools.contract import TOOLS_BY_NAME, ToolSpec

logger = logging.getLogger(__name__)

AUTH_REQUIRED_MESSAGE = (
    "Please set a valid Microsoft Graph API access token first "
    "using the set_access_token tool."
)


class FailureKind(str, Enum):
    """User-facing failure categories, shared by every front-end."""

    INVALID_PARAMS = "InvalidParams"
    UNKNOWN_METHOD = "UnknownMethod"
    AUTH_REQUIRED = "AuthRequired"
    NOT_FOUND = "NotFound"
    UPSTREAM_ERROR = "UpstreamError"
    INTERNAL_ERROR = "InternalError"


@dataclass(frozen=True)
class Success:
    payload: Any


@dataclass(frozen=True)
class Failure:
    """A classified failure.

    ``cause`` keeps the client-side ErrorKind for diagnostics; callers only
    ever see ``kind`` and ``message``.
    """

    kind: FailureKind
    message: str
    cause: ErrorKind | None = None


ToolCallResult = Success | Failure

_GRAPH_KIND_TO_FAILURE: dict[ErrorKind, FailureKind] = {
    ErrorKind.MISSING_CREDENTIAL: FailureKind.AUTH_REQUIRED,
    ErrorKind.INVALID_CREDENTIAL: FailureKind.AUTH_REQUIRED,
    ErrorKind.NOT_FOUND: FailureKind.NOT_FOUND,
    ErrorKind.UPSTREAM_ERROR: FailureKind.UPSTREAM_ERROR,
}

_Handler = Callable[[dict[str, Any]], Awaitable[Any]]


class DispatchAdapter:
    """Validates, defaults and executes the six email tools."""

    def __init__(self, client: OutlookClient, credentials: CredentialHolder) -> None:
        self._client = client
        self._credentials = credentials
        self._handlers: dict[str, _Handler] = {
            "set_access_token": self._set_access_token,
            "list_emails": self._list_emails,
            "get_email": self._get_email,
            "search_emails": self._search_emails,
            "mark_as_read": self._mark_as_read,
            "delete_email": self._delete_email,
        }

    async def dispatch(self, name: Any, params: Any = None) -> ToolCallResult:
        """Run tool ``name`` with ``params``. Never raises.

        ``name`` comes straight off the wire, so anything that is not a
        known tool name (None, a number) is an unknown method.
        """
        key = name if isinstance(name, str) else ""
        tool = TOOLS_BY_NAME.get(key)
        handler = self._handlers.get(key)
        if tool is None or handler is None:
            logger.warning("Unknown method requested: %r", name)
            shown = "" if name is None else str(name)
            return Failure(FailureKind.UNKNOWN_METHOD, f"Unknown method: {shown}")

        checked = _check_params(tool, params)
        if isinstance(checked, Failure):
            logger.warning("Rejected %s: %s", name, checked.message)
            return checked

        try:
            payload = await handler(checked)
        except GraphError as exc:
            failure_kind = _GRAPH_KIND_TO_FAILURE.get(exc.kind, FailureKind.INTERNAL_ERROR)
            logger.warning("%s failed (%s): %s", name, exc.kind.value, exc.message)
            if failure_kind is FailureKind.AUTH_REQUIRED:
                return Failure(failure_kind, AUTH_REQUIRED_MESSAGE, cause=exc.kind)
            return Failure(failure_kind, exc.message, cause=exc.kind)
        except Exception as exc:  # noqa: BLE001
            logger.error("%s raised unexpectedly: %s", name, exc, exc_info=True)
            return Failure(FailureKind.INTERNAL_ERROR, str(exc))
        return Success(payload)

    # ── Handlers ───────────────────────────────────────────────────────────────

    async def _set_access_token(self, args: dict[str, Any]) -> str:
        self._credentials.set_token(args["access_token"])
        return "Access token has been set successfully."

    async def _list_emails(self, args: dict[str, Any]) -> list[dict[str, Any]]:
        query = ListQuery(
            top=int(args["top"] or DEFAULT_TOP),
            skip=int(args["skip"]) if args.get("skip") else None,
            filter=args.get("filter"),
            order_by=args["orderBy"] or DEFAULT_ORDER_BY,
            search=args.get("search"),
        )
        emails = await self._client.list_emails(query)
        return [e.to_payload() for e in emails]

    async def _get_email(self, args: dict[str, Any]) -> dict[str, Any]:
        email = await self._client.get_email(args["message_id"])
        return email.to_payload()

    async def _search_emails(self, args: dict[str, Any]) -> list[dict[str, Any]]:
        emails = await self._client.search_emails(
            args["query"], int(args["top"] or DEFAULT_TOP)
        )
        return [e.to_payload() for e in emails]

    async def _mark_as_read(self, args: dict[str, Any]) -> str:
        message_id = args["message_id"]
        is_read = args["is_read"] is not False
        await self._client.mark_as_read(message_id, is_read)
        return f"Email {message_id} has been marked as {'read' if is_read else 'unread'}."

    async def _delete_email(self, args: dict[str, Any]) -> str:
        message_id = args["message_id"]
        await self._client.delete_email(message_id)
        return f"Email {message_id} has been deleted."


def _check_params(tool: ToolSpec, params: Any) -> dict[str, Any] | Failure:
    """Validate ``params`` against ``tool`` and return a copy with defaults filled.

    Missing means absent, None or the empty string. Unknown keys are
    dropped.
    """
    if params is None:
        params = {}
    if not isinstance(params, dict):
        return Failure(FailureKind.INVALID_PARAMS, "Params must be an object")

    args: dict[str, Any] = {}
    for param in tool.params:
        value = params.get(param.name)
        if value is None or value == "":
            if param.required:
                return Failure(FailureKind.INVALID_PARAMS, param.missing_message)
            args[param.name] = param.default
            continue
        if not param.type_matches(value):
            return Failure(
                FailureKind.INVALID_PARAMS,
                f"Parameter '{param.name}' must be a {param.type}",
            )
        args[param.name] = value
    return args
