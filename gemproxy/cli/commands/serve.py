"""Serve command: load settings, configure logging and run uvicorn."""

from pathlib import Path
from typing import Annotated

import typer
import uvicorn
from click import get_current_context

from gemproxy.cli.helpers import bold, code, get_rich_toolkit
from gemproxy.config.settings import ConfigurationError, Settings
from gemproxy.core.logging import get_logger, setup_logging


def get_config_path_from_context() -> Path | None:
    """Get config path from typer context if available."""
    try:
        ctx = get_current_context()
        if ctx and ctx.obj and "config_path" in ctx.obj:
            config_path = ctx.obj["config_path"]
            return config_path if config_path is None else Path(config_path)
    except RuntimeError:
        pass
    return None


def validate_port(value: int | None) -> int | None:
    if value is not None and not 1 <= value <= 65535:
        raise typer.BadParameter("Port must be between 1 and 65535")
    return value


def validate_log_level(value: str | None) -> str | None:
    if value is None:
        return None
    upper = value.upper()
    if upper not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        raise typer.BadParameter(
            "Log level must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL"
        )
    return upper


def _print_banner(settings: Settings, resolved_model: str) -> None:
    toolkit = get_rich_toolkit()
    toolkit.print_title("gemproxy HTTP server", tag="server")
    toolkit.print(
        f"OpenAI-compatible API at {code(settings.server.display_address)}",
        tag="server",
    )
    toolkit.print(
        f"Model: {bold(settings.backend.model)} -> {bold(resolved_model)}",
        tag="model",
    )
    if settings.logging.file:
        toolkit.print(f"Log file: {settings.logging.file}", tag="config")
    toolkit.print_line()


def _run_local_server(settings: Settings) -> None:
    """Run the server locally."""
    from gemproxy.api.app import create_app

    logger = get_logger(__name__)
    app = create_app(settings)
    _print_banner(settings, app.state.chat_service.model_resolver(settings.backend.model))

    logger.debug(
        "server_starting",
        host=settings.server.host,
        port=settings.server.port,
    )
    uvicorn.run(
        app,
        host=settings.server.host,
        port=settings.server.port,
        log_config=None,
        access_log=False,
    )


def serve(
    host: Annotated[
        str | None, typer.Option("--host", help="Host to bind the server to")
    ] = None,
    port: Annotated[
        int | None,
        typer.Option("--port", "-p", help="Port to run the server on", callback=validate_port),
    ] = None,
    model: Annotated[
        str | None,
        typer.Option("--model", "-m", help="Backend model name or alias (auto, pro, flash, flash-lite)"),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="Console log level", callback=validate_log_level),
    ] = None,
    log_file: Annotated[
        str | None,
        typer.Option("--log-file", help="Append-only detailed log file"),
    ] = None,
) -> None:
    """Run the OpenAI-compatible HTTP server."""
    toolkit = get_rich_toolkit()
    cli_context = {
        "host": host,
        "port": port,
        "model": model,
        "log_level": log_level,
        "log_file": log_file,
    }

    try:
        settings = Settings.from_config(
            config_path=get_config_path_from_context(), cli_context=cli_context
        )
    except ConfigurationError as e:
        toolkit.print(f"Configuration error: {e}", tag="error")
        raise typer.Exit(1) from e

    log_path = Path(settings.logging.file).resolve() if settings.logging.file else None
    setup_logging(
        level=settings.logging.level,
        log_file=log_path,
        console=settings.logging.console,
        colors=settings.logging.colors,
    )

    _run_local_server(settings)
