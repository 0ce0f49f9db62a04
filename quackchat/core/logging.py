"""Logging configuration."""

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

from quackchat.core.config import Settings
from quackchat.core.security import redact_secrets

_RESERVED_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "message",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "thread",
        "threadName",
        "taskName",
        "exc_info",
        "exc_text",
        "stack_info",
        "request_id",
    }
)


class RequestIDFilter(logging.Filter):
    """Filter to inject request ID into log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Add request ID to log record if available.

        Args:
            record: Log record to modify

        Returns:
            True to allow the record to be logged
        """
        # Import here to avoid circular dependency
        from quackchat.api.middleware.request_id import get_request_id

        if not hasattr(record, "request_id"):
            request_id = get_request_id()
            record.request_id = request_id if request_id else None

        return True


class SecretRedactionFilter(logging.Filter):
    """Filter that masks API keys in messages and string extras."""

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Redact secrets from the rendered message and string extra fields.

        Args:
            record: Log record to modify

        Returns:
            True to allow the record to be logged
        """
        record.msg = redact_secrets(record.getMessage())
        record.args = ()

        for key, value in list(record.__dict__.items()):
            if key not in _RESERVED_ATTRS and isinstance(value, str):
                setattr(record, key, redact_secrets(value))

        return True


class JSONFormatter(logging.Formatter):
    """JSON log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record as JSON.

        Args:
            record: Log record to format

        Returns:
            JSON formatted log string
        """
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if hasattr(record, "request_id") and record.request_id:
            log_data["request_id"] = record.request_id

        if record.exc_info:
            log_data["exception"] = redact_secrets(self.formatException(record.exc_info))

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = value

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable text formatter."""

    def __init__(self) -> None:
        """Initialize text formatter."""
        fmt = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        super().__init__(fmt=fmt, datefmt="%Y-%m-%d %H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record with request ID if available.

        Args:
            record: Log record to format

        Returns:
            Formatted log string
        """
        if hasattr(record, "request_id") and record.request_id:
            original_msg = record.getMessage()
            record.msg = f"[{record.request_id}] {original_msg}"
            record.args = ()

        return super().format(record)


def setup_logging(settings: Settings) -> None:
    """
    Configure application logging.

    Args:
        settings: Application settings
    """
    level = getattr(logging, settings.log_level.upper())
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.addFilter(RequestIDFilter())
    console_handler.addFilter(SecretRedactionFilter())

    formatter: logging.Formatter
    if settings.log_format == "json":
        formatter = JSONFormatter()
    else:
        formatter = TextFormatter()

    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    # httpx logs full request URLs, which carry the Gemini key
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
