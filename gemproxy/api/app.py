"""FastAPI application factory for the gemproxy HTTP server."""

import asyncio
import threading
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from gemproxy import __version__
from gemproxy.api.middleware import (
    CORSMiddleware,
    RequestIDMiddleware,
    setup_error_handlers,
)
from gemproxy.api.routes import chat_router
from gemproxy.config.settings import Settings, get_settings
from gemproxy.core.interfaces import ContentGenerator, ModelResolver
from gemproxy.core.logging import get_logger
from gemproxy.core.shutdown import ShutdownCoordinator
from gemproxy.services.chat_completion import ChatCompletionService
from gemproxy.services.genai_backend import create_content_generator
from gemproxy.services.model_alias import resolve_model


logger = get_logger(__name__)


def _install_shutdown_coordinator(app: FastAPI, settings: Settings) -> None:
    if not settings.server.install_signal_handlers:
        logger.debug("signal_handlers_disabled", category="lifecycle")
        return
    if threading.current_thread() is not threading.main_thread():
        logger.warning(
            "signal_handlers_skipped",
            reason="not running on the main thread",
            category="lifecycle",
        )
        return

    coordinator = ShutdownCoordinator(
        interval=settings.server.signal_reassert_interval,
        stdin_interrupt=settings.server.stdin_interrupt,
    )
    coordinator.start(asyncio.get_running_loop())
    app.state.shutdown_coordinator = coordinator


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings: Settings = app.state.settings
    service: ChatCompletionService = app.state.chat_service

    if service.content_generator is None:
        service.content_generator = create_content_generator(settings.backend)

    resolved_model = service.model_resolver(service.model)
    logger.info(
        "server_started",
        address=settings.server.display_address,
        model=service.model,
        resolved_model=resolved_model,
        backend_ready=service.content_generator is not None,
        category="lifecycle",
        detail={
            "host": settings.server.host,
            "port": settings.server.port,
            "version": __version__,
        },
    )

    _install_shutdown_coordinator(app, settings)

    yield

    coordinator: ShutdownCoordinator | None = getattr(
        app.state, "shutdown_coordinator", None
    )
    if coordinator is not None:
        coordinator.stop()
    logger.info("server_stopped", category="lifecycle")


def create_app(
    settings: Settings | None = None,
    content_generator: ContentGenerator | None = None,
    model_resolver: ModelResolver | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to use; defaults to the process-wide settings
        content_generator: Backend to use; built from settings at startup if omitted
        model_resolver: Model alias resolver; defaults to the built-in alias table
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title="gemproxy",
        description="OpenAI-compatible chat completions backed by a generative-content backend",
        version=__version__,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    app.state.settings = settings
    app.state.chat_service = ChatCompletionService(
        content_generator,
        model=settings.backend.model,
        caller_tag=settings.backend.caller_tag,
        model_resolver=model_resolver or resolve_model,
    )

    # Last added runs outermost: CORS wraps everything, including preflight.
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(CORSMiddleware)

    setup_error_handlers(app)
    app.include_router(chat_router)

    return app
