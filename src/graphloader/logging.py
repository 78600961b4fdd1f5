"""
Centralized logging configuration using structlog
"""

import base64
import logging
import secrets
import sys
import time
from contextvars import ContextVar
from typing import Any

import structlog

# Context variable for query tracking
query_id_ctx: ContextVar[str | None] = ContextVar("query_id", default=None)


class QueryContextFilter:
    """Add query context to log records."""

    def __call__(self, logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        """Add query context to the event dict."""
        # Required by the structlog processor interface
        _ = logger, method_name

        query_id = query_id_ctx.get()
        if query_id:
            event_dict["query_id"] = query_id

        return event_dict


def configure_logging(debug: bool = False, log_level: str | None = None) -> None:
    """Configure structlog with appropriate processors and formatters.

    Args:
        debug: If True, use human-readable console output. If False, use JSON.
        log_level: Explicit level name. Defaults to DEBUG in debug mode, INFO otherwise.
    """

    if log_level is not None:
        level = logging.getLevelName(log_level.upper())
    else:
        level = logging.DEBUG if debug else logging.INFO

    # Log lines go to stderr so query output on stdout stays machine readable
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(message)s",
        force=True,
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        QueryContextFilter(),
        structlog.processors.TimeStamper(fmt="ISO", utc=True),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if debug:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


def generate_query_id() -> str:
    """Generate a compact query ID from a microsecond timestamp and random bytes.

    Format: 14-character URL-safe base64 string (e.g., 'AAYjx2Lk9a3Xbw')
    """
    timestamp_us = int(time.time() * 1_000_000)
    random_bytes = secrets.token_bytes(2)

    combined_bytes = timestamp_us.to_bytes(8, byteorder="big") + random_bytes

    return base64.urlsafe_b64encode(combined_bytes).decode("ascii").rstrip("=")


def set_query_context(query_id: str | None = None) -> str:
    """Set the query context variable.

    Args:
        query_id: Query ID to set (generates one if None)

    Returns:
        The query ID now in context
    """
    if query_id is None:
        query_id = generate_query_id()

    query_id_ctx.set(query_id)
    return query_id


def clear_query_context() -> None:
    """Clear the query context variable."""
    query_id_ctx.set(None)
