"""CLI entry point — runs the Outlook tools over MCP stdio or HTTP."""

import logging

import anyio
import click
import uvicorn
from dotenv import load_dotenv
from rich.console import Console

from outlook_mcp.config import ServerConfig
from outlook_mcp.server.http_server import create_app
from outlook_mcp.server.stdio_server import run_stdio

logger = logging.getLogger(__name__)
# stdout carries the MCP stream; everything human-readable goes to stderr
console = Console(stderr=True)


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Outlook email tools for MCP clients and HTTP callers."""
    load_dotenv()
    config = ServerConfig.from_env()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    ctx.obj = config


@cli.command()
@click.pass_obj
def stdio(config: ServerConfig) -> None:
    """Serve the tools over MCP stdio."""
    try:
        anyio.run(run_stdio, config)
    except KeyboardInterrupt:
        logger.info("Interrupted — goodbye")


@cli.command()
@click.option("--host", default=None, help="Bind address (default: $HOST or 0.0.0.0).")
@click.option("--port", type=int, default=None, help="Listen port (default: $PORT or 3000).")
@click.pass_obj
def http(config: ServerConfig, host: str | None, port: int | None) -> None:
    """Serve the tools over HTTP (/rpc, /sse, /health)."""
    if host:
        config.host = host
    if port:
        config.port = port

    base = f"http://localhost:{config.port}"
    console.print(f"Outlook MCP HTTP server running on [bold]{base}[/bold]")
    console.print(f"RPC endpoint: {base}/rpc")
    console.print(f"SSE endpoint: {base}/sse")
    uvicorn.run(
        create_app(config=config),
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
    )
