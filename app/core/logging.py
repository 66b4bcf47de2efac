"""
Structured logging with JSON formatting and correlation ID support.

Log calls can carry domain context through ``extra``, e.g.::

    logger.info("Stat incremented", extra={"match_id": match.id, "stat": "points"})

The JSON formatter emits those keys under ``context``; the colored console
formatter appends them as ``key=value`` pairs.
"""
import logging
import json
import sys
from datetime import datetime, timezone
from typing import Any
from contextvars import ContextVar

# Correlation ID of the request being served, shared across the application
correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")

# Attributes every LogRecord carries; anything else came in through ``extra``
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "taskName"}


def _context_of(record: logging.LogRecord) -> dict[str, Any]:
    return {k: v for k, v in record.__dict__.items() if k not in _RESERVED_ATTRS}


class JSONFormatter(logging.Formatter):
    """
    JSON log formatter for structured logging.

    Fields: timestamp (UTC, ISO 8601), level, logger, message, correlation_id,
    plus ``exception`` and ``context`` when present.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "correlation_id": correlation_id_var.get(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        context = _context_of(record)
        if context:
            log_data["context"] = context

        return json.dumps(log_data, default=str)


class ColoredFormatter(logging.Formatter):
    """Human-readable colored console output for development."""

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        level_color = self.COLORS.get(record.levelname, "")
        parts = [f"{level_color}[{record.levelname}]{self.RESET} {record.name}: {record.getMessage()}"]

        context = _context_of(record)
        if context:
            parts.append(" ".join(f"{k}={v}" for k, v in context.items()))

        correlation_id = correlation_id_var.get()
        if correlation_id:
            parts.append(f"correlation_id={correlation_id}")

        message = " | ".join(parts)
        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)
        return message


def configure_logging(
    level: str = "INFO",
    json_output: bool = True,
    handler: logging.Handler | None = None,
) -> None:
    """
    Configure the root logger.

    Args:
        level: Logging level name
        json_output: JSON formatter if True, colored console formatter otherwise
        handler: Optional custom handler (defaults to a stdout StreamHandler)
    """
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    log_level = getattr(logging, level.upper(), logging.INFO)
    root_logger.setLevel(log_level)

    if handler is None:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(log_level)

    handler.setFormatter(JSONFormatter() if json_output else ColoredFormatter())
    root_logger.addHandler(handler)

    # Reduce noise from third-party loggers
    for noisy in ("httpx", "httpcore", "uvicorn.access", "sqlalchemy.engine"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance (typically ``get_logger(__name__)``)."""
    return logging.getLogger(name)


def set_correlation_id(correlation_id: str) -> Any:
    """Set the correlation ID; returns the token for ``clear_correlation_id``."""
    return correlation_id_var.set(correlation_id)


def get_correlation_id() -> str:
    """Current correlation ID, or empty string outside a request."""
    return correlation_id_var.get()


def clear_correlation_id(token: Any) -> None:
    """Reset the correlation ID using the token from ``set_correlation_id``."""
    correlation_id_var.reset(token)
