"""Core contract module for the SEO description generator.

This module provides:
- Settings: runtime configuration loaded once at start-up
- Error classification: ErrorCategory and the ServiceError hierarchy
"""

from .config import Settings, load_settings, resolve_language
from .errors import (
    ErrorCategory,
    NoResultsError,
    ProviderAuthenticationError,
    ProviderError,
    ProviderNotConfiguredError,
    ProviderRateLimitError,
    ProviderTimeoutError,
    RequestRateLimitError,
    ServiceError,
    TaskTimeoutError,
    ValidationError,
)

__all__ = [
    "Settings",
    "load_settings",
    "resolve_language",
    "ErrorCategory",
    "ServiceError",
    "ValidationError",
    "ProviderNotConfiguredError",
    "ProviderError",
    "ProviderTimeoutError",
    "ProviderRateLimitError",
    "ProviderAuthenticationError",
    "NoResultsError",
    "TaskTimeoutError",
    "RequestRateLimitError",
]
