"""ASGI middleware and exception handlers."""

from .cors import CORSMiddleware
from .errors import setup_error_handlers
from .request_id import REQUEST_ID_HEADER, RequestIDMiddleware


__all__ = [
    "CORSMiddleware",
    "REQUEST_ID_HEADER",
    "RequestIDMiddleware",
    "setup_error_handlers",
]
