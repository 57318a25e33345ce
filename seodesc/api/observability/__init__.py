"""Observability module for batch monitoring.

This module provides:
- Structured JSON logging with batch/page context
"""

from .logger import (
    StructuredFormatter,
    StructuredLogger,
    clear_context,
    configure_logging,
    get_logger,
    set_context,
)

__all__ = [
    "StructuredFormatter",
    "StructuredLogger",
    "clear_context",
    "configure_logging",
    "get_logger",
    "set_context",
]
