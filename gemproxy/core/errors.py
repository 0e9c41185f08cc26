"""Exception hierarchy for the gemproxy HTTP server."""

from typing import Any

from gemproxy.models.openai import ErrorBody


class GemProxyError(Exception):
    """Base exception for errors surfaced to HTTP clients."""

    def __init__(
        self,
        message: str,
        error_type: str = "internal_server_error",
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.status_code = status_code
        self.details = details or {}

    def to_body(self) -> ErrorBody:
        """Render the client-facing JSON error body."""
        return {"error": {"message": self.message}}


class InvalidRequestError(GemProxyError):
    """Malformed or schema-invalid request body (400)."""

    def __init__(
        self, message: str = "Invalid JSON body", details: dict[str, Any] | None = None
    ) -> None:
        super().__init__(
            message=message,
            error_type="invalid_request_error",
            status_code=400,
            details=details,
        )


class BackendUnavailableError(GemProxyError):
    """Content generator was never initialized (500)."""

    def __init__(self, message: str = "Content generator not initialized") -> None:
        super().__init__(
            message=message, error_type="backend_unavailable_error", status_code=500
        )


class GenerationError(GemProxyError):
    """The upstream backend raised while generating (500)."""

    def __init__(self, message: str = "Unknown error occurred") -> None:
        super().__init__(message=message, error_type="generation_error", status_code=500)


class NotFoundError(GemProxyError):
    """Unknown path or method (404)."""

    def __init__(self, message: str = "Not found") -> None:
        super().__init__(message=message, error_type="not_found_error", status_code=404)
