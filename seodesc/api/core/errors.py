"""Error classification for the description pipeline.

ErrorCategory determines retry behavior:
- RETRYABLE: Temporary failures, can retry with same parameters
- NON_RETRYABLE: Permanent failures, no retry will help
- VALIDATION_FAIL: Caller input or provider output failed validation
"""

from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Classification of errors for retry decisions."""

    RETRYABLE = "retryable"
    NON_RETRYABLE = "non_retryable"
    VALIDATION_FAIL = "validation_fail"


class ServiceError(Exception):
    """Base class for every error raised by the pipeline."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.NON_RETRYABLE,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.category = category
        self.details = details or {}

    def is_retryable(self) -> bool:
        """Check if this error allows retry."""
        return self.category == ErrorCategory.RETRYABLE

    def to_dict(self) -> dict[str, Any]:
        """Serialize for structured logs."""
        return {
            "type": type(self).__name__,
            "message": self.message,
            "category": self.category.value,
            **self.details,
        }

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(cat={self.category.value}, msg={self.message!r})>"


class ValidationError(ServiceError):
    """Caller input is malformed or out of bounds."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, ErrorCategory.VALIDATION_FAIL, {"field": field} if field else None)
        self.field = field


class ProviderNotConfiguredError(ServiceError):
    """Credentials for a requested capability are missing."""

    def __init__(
        self,
        message: str,
        provider: str,
        missing_config: list[str] | None = None,
    ) -> None:
        super().__init__(message, ErrorCategory.NON_RETRYABLE, {"provider": provider})
        self.provider = provider
        self.missing_config = missing_config or []


class ProviderError(ServiceError):
    """A remote provider returned an error or a malformed payload."""

    def __init__(
        self,
        message: str,
        provider: str,
        status_code: int | None = None,
        category: ErrorCategory = ErrorCategory.RETRYABLE,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message,
            category,
            {"provider": provider, "status_code": status_code, **(details or {})},
        )
        self.provider = provider
        self.status_code = status_code


class ProviderTimeoutError(ProviderError):
    """A network call exceeded its deadline (retryable)."""

    def __init__(self, message: str, provider: str, timeout_seconds: float | None = None) -> None:
        super().__init__(message, provider, category=ErrorCategory.RETRYABLE)
        self.timeout_seconds = timeout_seconds


class ProviderRateLimitError(ProviderError):
    """The provider answered 429."""

    def __init__(self, message: str, provider: str, retry_after: int | None = None) -> None:
        super().__init__(message, provider, status_code=429, category=ErrorCategory.RETRYABLE)
        self.retry_after = retry_after


class ProviderAuthenticationError(ProviderError):
    """Credentials were rejected (401/403)."""

    def __init__(self, message: str, provider: str, status_code: int = 401) -> None:
        super().__init__(message, provider, status_code=status_code, category=ErrorCategory.NON_RETRYABLE)


class NoResultsError(ProviderError):
    """The provider answered but returned no task or result payload."""

    def __init__(self, message: str, provider: str) -> None:
        super().__init__(message, provider, category=ErrorCategory.NON_RETRYABLE)


class TaskTimeoutError(ProviderError):
    """A polled provider task did not complete within the attempt budget."""

    def __init__(self, message: str, provider: str, task_id: str, attempts: int) -> None:
        super().__init__(
            message,
            provider,
            category=ErrorCategory.RETRYABLE,
            details={"task_id": task_id, "attempts": attempts},
        )
        self.task_id = task_id
        self.attempts = attempts


class RequestRateLimitError(ServiceError):
    """A client exceeded the inbound request budget."""

    def __init__(self, message: str, retry_after: int) -> None:
        super().__init__(message, ErrorCategory.RETRYABLE, {"retry_after": retry_after})
        self.retry_after = retry_after
