"""HTTP front-end — JSON-RPC-style ``/rpc`` endpoint, SSE heartbeat and health check."""

import asyncio
import json
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel

from outlook_mcp.config import DEFAULT_HEARTBEAT_SECONDS, ServerConfig
from outlook_mcp.graph.credentials import CredentialHolder
from outlook_mcp.graph.outlook_client import outlook_client
from outlook_mcp.tools.dispatch import DispatchAdapter, Failure, FailureKind

logger = logging.getLogger(__name__)

SERVICE_NAME = "outlook-mcp-http"

#: Failure kind → HTTP status; anything unlisted is a 500.
STATUS_CODES: dict[FailureKind, int] = {
    FailureKind.INVALID_PARAMS: 400,
    FailureKind.AUTH_REQUIRED: 401,
    FailureKind.UNKNOWN_METHOD: 404,
}


class RpcRequest(BaseModel):
    """Body of ``POST /rpc``. Both fields are checked by the dispatcher, not here."""

    method: Any = None
    params: Any = None


def _sse(data: dict[str, Any]) -> str:
    return f"data: {json.dumps(data)}\n\n"


def _utc_timestamp() -> str:
    """ISO-8601 UTC with millisecond precision and a ``Z`` suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


async def heartbeat_events(
    is_disconnected: Callable[[], Awaitable[bool]],
    interval: float = DEFAULT_HEARTBEAT_SECONDS,
) -> AsyncIterator[str]:
    """Yield a connected event, then one heartbeat per ``interval`` until disconnect.

    The loop also ends when the streaming task is cancelled, which is how
    Starlette reports a dropped connection.
    """
    yield _sse({"connected": True})
    try:
        while True:
            await asyncio.sleep(interval)
            if await is_disconnected():
                break
            yield _sse({"heartbeat": _utc_timestamp()})
    finally:
        logger.debug("SSE client disconnected; heartbeat stopped")


def create_app(
    adapter: DispatchAdapter | None = None,
    config: ServerConfig | None = None,
) -> FastAPI:
    """Build the FastAPI app.

    When ``adapter`` is None the app creates its own CredentialHolder and
    Outlook client for the lifetime of the server.
    """
    config = config or ServerConfig()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if adapter is not None:
            yield
            return
        credentials = CredentialHolder()
        async with outlook_client(credentials, base_url=config.graph_base_url) as client:
            app.state.adapter = DispatchAdapter(client, credentials)
            yield

    app = FastAPI(title="Outlook MCP HTTP", lifespan=lifespan)
    app.state.adapter = adapter
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok", "service": SERVICE_NAME}

    @app.post("/rpc")
    async def rpc(request: Request) -> JSONResponse:
        raw = await request.body()
        try:
            payload = json.loads(raw) if raw.strip() else {}
        except ValueError:
            return JSONResponse(status_code=400, content={"error": "Request body must be valid JSON"})
        if not isinstance(payload, dict):
            return JSONResponse(status_code=400, content={"error": "Request body must be a JSON object"})

        body = RpcRequest.model_validate(payload)
        outcome = await request.app.state.adapter.dispatch(body.method, body.params)
        if isinstance(outcome, Failure):
            status = STATUS_CODES.get(outcome.kind, 500)
            return JSONResponse(status_code=status, content={"error": outcome.message})
        return JSONResponse(content={"result": outcome.payload})

    @app.get("/sse")
    async def sse(request: Request) -> StreamingResponse:
        logger.info("SSE client connected")
        return StreamingResponse(
            heartbeat_events(request.is_disconnected, config.heartbeat_seconds),
            media_type="text/event-stream",
            headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
        )

    return app
