"""Tests for the CLI entry point — servers are patched out, CliRunner used throughout."""

from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner, Result

from outlook_mcp.cli.main import cli
from outlook_mcp.config import ServerConfig


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("PORT", "HOST", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


def _invoke(*args: str) -> tuple[Result, MagicMock, MagicMock]:
    runner = CliRunner()
    with patch("outlook_mcp.cli.main.load_dotenv"), patch(
        "outlook_mcp.cli.main.uvicorn"
    ) as uvicorn, patch("outlook_mcp.cli.main.anyio") as anyio:
        result = runner.invoke(cli, list(args))
    return result, uvicorn, anyio


class TestStdioCommand:
    def test_runs_stdio_server(self) -> None:
        result, uvicorn, anyio = _invoke("stdio")
        assert result.exit_code == 0, result.output
        anyio.run.assert_called_once()
        run_fn, config = anyio.run.call_args.args
        assert run_fn.__name__ == "run_stdio"
        assert isinstance(config, ServerConfig)
        uvicorn.run.assert_not_called()


class TestHttpCommand:
    def test_default_port(self) -> None:
        result, uvicorn, _ = _invoke("http")
        assert result.exit_code == 0, result.output
        assert uvicorn.run.call_args.kwargs["port"] == 3000

    def test_port_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PORT", "4100")
        result, uvicorn, _ = _invoke("http")
        assert uvicorn.run.call_args.kwargs["port"] == 4100

    def test_options_override_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PORT", "4100")
        result, uvicorn, _ = _invoke("http", "--port", "5000", "--host", "127.0.0.1")
        assert uvicorn.run.call_args.kwargs["port"] == 5000
        assert uvicorn.run.call_args.kwargs["host"] == "127.0.0.1"


class TestLogLevel:
    def test_unknown_log_level_does_not_crash(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "verbose")
        result, uvicorn, _ = _invoke("http")
        assert result.exit_code == 0, result.output
        assert uvicorn.run.call_args.kwargs["log_level"] == "info"
