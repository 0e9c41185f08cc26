"""Error handlers rendering failures as ``{"error": {"message": ...}}``."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from gemproxy.core.errors import GemProxyError, NotFoundError
from gemproxy.core.logging import get_logger

from .cors import CORS_HEADERS
from .request_id import REQUEST_ID_HEADER


logger = get_logger(__name__)


def _fallback_headers(request: Request) -> dict[str, str]:
    # The catch-all handler answers from outside the header-stamping middleware.
    headers = dict(CORS_HEADERS)
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        headers[REQUEST_ID_HEADER] = request_id
    return headers


def setup_error_handlers(app: FastAPI) -> None:
    """Setup error handlers for the FastAPI application.

    Args:
        app: FastAPI application instance
    """

    @app.exception_handler(GemProxyError)
    async def gemproxy_error_handler(
        request: Request, exc: GemProxyError
    ) -> JSONResponse:
        log_func = logger.debug if exc.status_code < 500 else logger.warning
        log_func(
            "error_response",
            request_id=getattr(request.state, "request_id", None),
            error_type=exc.error_type,
            status_code=exc.status_code,
            path=request.url.path,
            detail=exc.details or None,
        )
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        # Unknown paths and unsupported methods are both reported as 404.
        if exc.status_code in (404, 405):
            error: GemProxyError = NotFoundError()
        else:
            error = GemProxyError(str(exc.detail), status_code=exc.status_code)
        return JSONResponse(
            status_code=error.status_code,
            content=error.to_body(),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        logger.error(
            "unhandled_exception",
            request_id=getattr(request.state, "request_id", None),
            method=request.method,
            path=request.url.path,
            error=str(exc),
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content=GemProxyError(str(exc) or "Internal server error").to_body(),
            headers=_fallback_headers(request),
        )

    logger.debug("error_handlers_setup_completed")
