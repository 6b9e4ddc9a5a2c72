"""Runtime settings read from the environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from outlook_mcp.graph.outlook_client import GRAPH_API_BASE_URL

logger = logging.getLogger(__name__)

DEFAULT_PORT = 3000
DEFAULT_HEARTBEAT_SECONDS = 30.0
# Level names both logging and uvicorn accept
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def _env_number(name: str, default: float) -> float:
    """Read a numeric env var. Falls back to `default` on parse error."""
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Invalid %s %r; defaulting to %s", name, raw, default)
        return default


def _env_log_level(name: str, default: str) -> str:
    """Read a log level name. Falls back to `default` if it is not in LOG_LEVELS."""
    raw = os.environ.get(name, default).strip().upper()
    if raw not in LOG_LEVELS:
        logger.warning("Invalid %s %r; defaulting to %s", name, raw, default)
        return default
    return raw


@dataclass
class ServerConfig:
    """Settings shared by the stdio and HTTP entry points."""

    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    graph_base_url: str = GRAPH_API_BASE_URL
    heartbeat_seconds: float = DEFAULT_HEARTBEAT_SECONDS
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> ServerConfig:
        """Build ServerConfig from environment variables."""
        return cls(
            host=os.environ.get("HOST", "0.0.0.0"),
            port=int(_env_number("PORT", DEFAULT_PORT)),
            graph_base_url=os.environ.get("GRAPH_API_BASE_URL", GRAPH_API_BASE_URL),
            heartbeat_seconds=_env_number("SSE_HEARTBEAT_SECONDS", DEFAULT_HEARTBEAT_SECONDS),
            log_level=_env_log_level("LOG_LEVEL", "INFO"),
        )
