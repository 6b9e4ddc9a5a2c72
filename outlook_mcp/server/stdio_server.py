"""MCP stdio front-end — advertises the tool catalog and serves tool calls.

``tools/call`` is registered as a raw request handler so that a failed call
reaches the client as a JSON-RPC error carrying its own code, not as an
``isError`` tool result.
"""

import json
import logging

from mcp import types
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError

from outlook_mcp.config import ServerConfig
from outlook_mcp.graph.credentials import CredentialHolder
from outlook_mcp.graph.outlook_client import outlook_client
from outlook_mcp.tools.contract import mcp_tools
from outlook_mcp.tools.dispatch import DispatchAdapter, Failure, FailureKind, ToolCallResult

logger = logging.getLogger(__name__)

SERVER_NAME = "outlook-mcp"
SERVER_VERSION = "1.0.0"

#: Failure kind → JSON-RPC error code; anything unlisted is INTERNAL_ERROR.
ERROR_CODES: dict[FailureKind, int] = {
    FailureKind.INVALID_PARAMS: types.INVALID_PARAMS,
    FailureKind.AUTH_REQUIRED: types.INVALID_PARAMS,
    FailureKind.UNKNOWN_METHOD: types.METHOD_NOT_FOUND,
}


def render_result(outcome: ToolCallResult) -> list[types.TextContent]:
    """Render a dispatch outcome as MCP content, raising McpError on failure."""
    if isinstance(outcome, Failure):
        code = ERROR_CODES.get(outcome.kind, types.INTERNAL_ERROR)
        raise McpError(types.ErrorData(code=code, message=outcome.message))

    payload = outcome.payload
    text = payload if isinstance(payload, str) else json.dumps(payload, indent=2)
    return [types.TextContent(type="text", text=text)]


def build_server(adapter: DispatchAdapter) -> Server:
    """Return a low-level MCP Server wired to ``adapter``."""
    server: Server = Server(SERVER_NAME, version=SERVER_VERSION)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return mcp_tools()

    async def handle_call_tool(req: types.CallToolRequest) -> types.ServerResult:
        name = req.params.name
        logger.info("Tool call: %s", name)
        outcome = await adapter.dispatch(name, req.params.arguments or {})
        content = render_result(outcome)
        return types.ServerResult(types.CallToolResult(content=content, isError=False))

    server.request_handlers[types.CallToolRequest] = handle_call_tool
    return server


async def run_stdio(config: ServerConfig) -> None:
    """Serve MCP over stdin/stdout until the client closes the stream."""
    credentials = CredentialHolder()
    async with outlook_client(credentials, base_url=config.graph_base_url) as client:
        server = build_server(DispatchAdapter(client, credentials))
        async with stdio_server() as (read_stream, write_stream):
            logger.info("Outlook MCP server running on stdio")
            await server.run(read_stream, write_stream, server.create_initialization_options())
