"""Structured logging with a console summary sink and a detailed file sink.

Every event goes to both sinks. The console sink renders one line per event
and drops the bulky ``detail`` payload and tracebacks; the file sink is opened
in append mode and writes one JSON document per event, including ``detail``
and formatted stack traces.
"""

import logging
import sys
from pathlib import Path
from typing import Any

import structlog
from structlog.typing import EventDict, WrappedLogger


CONSOLE_HANDLER_NAME = "gemproxy.summary"
FILE_HANDLER_NAME = "gemproxy.detail"

# Keys that only belong in the detailed sink.
DETAIL_ONLY_KEYS = ("detail", "exc_info", "stack_info", "exception")

_NOISY_LOGGERS = ("httpx", "httpcore", "google_genai", "urllib3")


def drop_detail_fields(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Strip detail-only keys so the console line stays a summary."""
    for key in DETAIL_ONLY_KEYS:
        event_dict.pop(key, None)
    return event_dict


def _shared_processors() -> list[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]


def _console_handler(level: int, colors: bool) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(CONSOLE_HANDLER_NAME)
    handler.setLevel(level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_shared_processors(),
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                drop_detail_fields,
                structlog.dev.ConsoleRenderer(colors=colors),
            ],
        )
    )
    return handler


def _file_handler(path: Path) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, mode="a", encoding="utf-8")
    handler.set_name(FILE_HANDLER_NAME)
    # The detailed sink records everything, regardless of console verbosity.
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_shared_processors(),
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.dict_tracebacks,
                structlog.processors.JSONRenderer(default=str),
            ],
        )
    )
    return handler


def setup_logging(
    level: str = "INFO",
    log_file: str | Path | None = None,
    console: bool = True,
    colors: bool | None = None,
) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        level: Minimum level for the console summary sink
        log_file: Path of the append-only detailed sink, or None to disable it
        console: Whether to emit the console summary sink at all
        colors: Force colored console output; defaults to stderr being a TTY
    """
    console_level = getattr(logging, level.upper(), logging.INFO)
    if colors is None:
        colors = sys.stderr.isatty()

    handlers: list[logging.Handler] = []
    if console:
        handlers.append(_console_handler(console_level, colors))
    if log_file:
        handlers.append(_file_handler(Path(log_file)))

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
        existing.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(logging.DEBUG if log_file else console_level)

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers = []
        uvicorn_logger.propagate = True
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            *_shared_processors(),
            structlog.processors.StackInfoRenderer(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


def flush_logging() -> None:
    """Flush every root handler; used right before a hard process exit."""
    for handler in logging.getLogger().handlers:
        try:
            handler.flush()
        except (OSError, ValueError):
            continue


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger bound to ``name``."""
    return structlog.get_logger(name)  # type: ignore[no-any-return]
