"""Structured logging configuration using structlog.

The API logs to stdout. The generate_file script passes stderr so log lines
do not break its progress line on stdout.
"""

import logging
import sys
from contextvars import ContextVar
from typing import Any, TextIO
from uuid import uuid4

import structlog

from filegen.config import get_settings

# Context variable for request correlation ID
request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)


def add_request_id(
    _logger: logging.Logger,
    _method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Add request ID to log entries if available."""
    request_id = request_id_ctx.get()
    if request_id:
        event_dict["request_id"] = request_id
    return event_dict


def _renderer(json_logs: bool, colors: bool) -> list[structlog.typing.Processor]:
    if json_logs:
        # Log aggregation friendly
        return [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    return [structlog.dev.ConsoleRenderer(colors=colors)]


def configure_logging(
    stream: TextIO | None = None,
    json_logs: bool | None = None,
) -> None:
    """Configure structured logging.

    Safe to call more than once; the last call wins.

    Args:
        stream: Destination for log lines (default: stdout)
        json_logs: Force JSON output; by default JSON is used outside
            development
    """
    settings = get_settings()
    stream = stream or sys.stdout
    if json_logs is None:
        json_logs = not settings.is_development

    log_level = getattr(logging, settings.log_level, logging.INFO)
    colors = hasattr(stream, "isatty") and stream.isatty()

    processors: list[structlog.typing.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        add_request_id,
        *_renderer(json_logs, colors),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=stream,
        level=log_level,
        force=True,
    )

    logging.getLogger("uvicorn").setLevel(log_level)
    logging.getLogger("uvicorn.access").setLevel(log_level)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


def generate_request_id() -> str:
    """Generate a new request correlation ID."""
    return str(uuid4())[:8]
