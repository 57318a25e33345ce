"""Structured logging for batch observability.

Provides context-aware logging with automatic batch/page tagging.
"""

import json
import logging
import sys
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any

# Context variables for automatic tagging
_batch_id: ContextVar[str | None] = ContextVar("batch_id", default=None)
_page: ContextVar[str | None] = ContextVar("page", default=None)

# Attributes every LogRecord carries; anything else came in through ``extra=``
_RESERVED_ATTRS = frozenset(vars(logging.makeLogRecord({})).keys()) | {"message", "asctime"}


def set_context(batch_id: str | None = None, page: str | None = None) -> None:
    """Set logging context variables."""
    if batch_id is not None:
        _batch_id.set(batch_id)
    if page is not None:
        _page.set(page)


def clear_context() -> None:
    """Clear all logging context variables."""
    _batch_id.set(None)
    _page.set(None)


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if batch_id := _batch_id.get():
            log_data["batch_id"] = batch_id
        if page := _page.get():
            log_data["page"] = page

        # Fields passed through ``extra=``
        data = {k: v for k, v in vars(record).items() if k not in _RESERVED_ATTRS and k != "extra_data"}
        if hasattr(record, "extra_data"):
            data.update(record.extra_data)
        if data:
            log_data["data"] = data

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class StructuredLogger:
    """Logger with structured output and context awareness."""

    def __init__(self, name: str, level: int = logging.INFO):
        self._logger = logging.getLogger(name)
        self._logger.setLevel(level)

    def _log(
        self,
        level: int,
        msg: str,
        *args: Any,
        extra_data: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> None:
        extra = kwargs.pop("extra", {})
        if extra_data:
            extra["extra_data"] = extra_data
        self._logger.log(level, msg, *args, extra=extra, **kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.INFO, msg, *args, **kwargs)

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.ERROR, msg, *args, **kwargs)

    def page_started(self, page_name: str, attempt: int = 1, **extra: Any) -> None:
        """Log page processing started."""
        self.info(
            f"Page {page_name} started (attempt {attempt})",
            extra_data={"page_name": page_name, "attempt": attempt, **extra},
        )

    def page_completed(self, page_name: str, word_count: int, **extra: Any) -> None:
        """Log page processing completed."""
        self.info(
            f"Page {page_name} completed",
            extra_data={"page_name": page_name, "word_count": word_count, **extra},
        )

    def page_failed(self, page_name: str, error: str, category: str, **extra: Any) -> None:
        """Log page processing failed."""
        self.error(
            f"Page {page_name} failed: {error}",
            extra_data={"page_name": page_name, "error": error, "category": category, **extra},
        )


# Global logger cache
_loggers: dict[str, StructuredLogger] = {}


def get_logger(name: str) -> StructuredLogger:
    """Get or create a structured logger.

    Args:
        name: Logger name

    Returns:
        StructuredLogger instance
    """
    if name not in _loggers:
        _loggers[name] = StructuredLogger(name)
    return _loggers[name]


def configure_logging(level: str = "INFO") -> None:
    """Install the JSON formatter on the root ``seodesc`` logger.

    Called once from the application lifespan; idempotent.
    """
    root = logging.getLogger("seodesc")
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    if not any(isinstance(h.formatter, StructuredFormatter) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(StructuredFormatter())
        root.addHandler(handler)
    root.propagate = False
