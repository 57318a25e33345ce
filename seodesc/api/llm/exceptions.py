"""LLM exception definitions.

Every generation failure is a ProviderError, so the orchestrator treats it
like any other upstream failure.
"""

from typing import Any

from seodesc.api.core.errors import ErrorCategory, ProviderError


class LLMError(ProviderError):
    """Base class for LLM API call failures."""

    def __init__(
        self,
        message: str,
        provider: str,
        category: ErrorCategory = ErrorCategory.RETRYABLE,
        model: str | None = None,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message,
            provider,
            status_code=status_code,
            category=category,
            details={"model": model, **(details or {})},
        )
        self.model = model

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self.message!r}, category={self.category.value}, "
            f"provider={self.provider!r}, model={self.model!r})"
        )


class LLMTimeoutError(LLMError):
    """Request exceeded its deadline."""

    def __init__(
        self,
        message: str,
        provider: str,
        model: str | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        super().__init__(message, provider, ErrorCategory.RETRYABLE, model)
        self.timeout_seconds = timeout_seconds


class LLMRateLimitError(LLMError):
    """Provider answered 429."""

    def __init__(self, message: str, provider: str, model: str | None = None) -> None:
        super().__init__(message, provider, ErrorCategory.RETRYABLE, model, status_code=429)


class LLMAuthenticationError(LLMError):
    """API key rejected."""

    def __init__(self, message: str, provider: str, model: str | None = None) -> None:
        super().__init__(message, provider, ErrorCategory.NON_RETRYABLE, model, status_code=401)


class LLMInvalidRequestError(LLMError):
    """Provider rejected the request as malformed."""

    def __init__(
        self,
        message: str,
        provider: str,
        model: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, provider, ErrorCategory.NON_RETRYABLE, model, status_code=400, details=details)


class LLMContentFilterError(LLMError):
    """Output blocked by the provider's safety filter."""

    def __init__(self, message: str, provider: str, model: str | None = None) -> None:
        super().__init__(message, provider, ErrorCategory.NON_RETRYABLE, model)


class LLMServiceUnavailableError(LLMError):
    """Provider-side 5xx."""

    def __init__(self, message: str, provider: str, model: str | None = None, status_code: int | None = 503) -> None:
        super().__init__(message, provider, ErrorCategory.RETRYABLE, model, status_code=status_code)


class LLMEmptyResponseError(LLMError):
    """Provider answered but no text could be extracted."""

    def __init__(self, message: str, provider: str, model: str | None = None) -> None:
        super().__init__(message, provider, ErrorCategory.RETRYABLE, model)
