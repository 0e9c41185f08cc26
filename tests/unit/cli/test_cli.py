"""Tests for the gemproxy command line."""

import importlib
from pathlib import Path
from typing import Any

import pytest
from fastapi import FastAPI
from typer.testing import CliRunner

from gemproxy import __version__
from gemproxy.cli.main import app


pytestmark = [pytest.mark.unit, pytest.mark.usefixtures("isolated_env")]

runner = CliRunner()


@pytest.fixture
def captured_run(monkeypatch: pytest.MonkeyPatch) -> dict[str, Any]:
    """Capture uvicorn.run and setup_logging instead of starting a server."""
    captured: dict[str, Any] = {}

    def fake_run(app: FastAPI, **kwargs: Any) -> None:
        captured["app"] = app
        captured.update(kwargs)

    def fake_setup_logging(**kwargs: Any) -> None:
        captured["logging"] = kwargs

    serve_module = importlib.import_module("gemproxy.cli.commands.serve")
    monkeypatch.setattr(serve_module.uvicorn, "run", fake_run)
    monkeypatch.setattr(serve_module, "setup_logging", fake_setup_logging)
    return captured


def test_version() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_serve_defaults(captured_run: dict[str, Any]) -> None:
    result = runner.invoke(app, ["serve"])

    assert result.exit_code == 0, result.output
    assert captured_run["host"] == "127.0.0.1"
    assert captured_run["port"] == 8000
    assert captured_run["log_config"] is None
    assert isinstance(captured_run["app"], FastAPI)
    assert captured_run["logging"]["level"] == "INFO"
    assert captured_run["logging"]["log_file"].name == "gemproxy-http.log"
    assert "gemini-2.5-pro" in result.output


def test_serve_options(captured_run: dict[str, Any]) -> None:
    result = runner.invoke(
        app,
        [
            "serve",
            "--host",
            "0.0.0.0",
            "--port",
            "9123",
            "--model",
            "flash",
            "--log-level",
            "debug",
            "--log-file",
            "",
        ],
    )

    assert result.exit_code == 0, result.output
    assert captured_run["host"] == "0.0.0.0"
    assert captured_run["port"] == 9123
    settings = captured_run["app"].state.settings
    assert settings.backend.model == "flash"
    assert settings.logging.level == "DEBUG"
    assert captured_run["logging"]["log_file"] is None
    assert "http://localhost:9123" in result.output


def test_serve_with_config_file(
    isolated_env: Path, captured_run: dict[str, Any]
) -> None:
    config = isolated_env / "gemproxy.toml"
    config.write_text("[server]\nport = 9555\n")

    result = runner.invoke(app, ["--config", str(config), "serve"])

    assert result.exit_code == 0, result.output
    assert captured_run["port"] == 9555


def test_serve_rejects_invalid_port(captured_run: dict[str, Any]) -> None:
    result = runner.invoke(app, ["serve", "--port", "70000"])
    assert result.exit_code != 0
    assert "app" not in captured_run


def test_serve_reports_configuration_errors(
    isolated_env: Path, captured_run: dict[str, Any]
) -> None:
    config = isolated_env / "broken.toml"
    config.write_text("[server\n")

    result = runner.invoke(app, ["--config", str(config), "serve"])

    assert result.exit_code == 1
    assert "Configuration error" in result.output
    assert "app" not in captured_run
