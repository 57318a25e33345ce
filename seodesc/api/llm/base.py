"""LLM common interface

Abstract base class every generation provider implements.
No fallback: a client never switches to another model or provider on its own.
"""

import logging
from abc import ABC, abstractmethod

from .schemas import LLMCallMetadata, LLMMessage, LLMRequestConfig, LLMResponse, RetryConfig

logger = logging.getLogger(__name__)


class LLMInterface(ABC):
    """Provider-neutral text generation.

    Design rules:
    - No fallback to a different model/provider
    - Same-request retries only, bounded and logged
    - Errors normalized to LLMError subclasses
    """

    @property
    @abstractmethod
    def provider_name(self) -> str: ...

    @property
    @abstractmethod
    def model(self) -> str: ...

    @abstractmethod
    async def generate(
        self,
        messages: list[dict[str, str]] | list[LLMMessage],
        system_prompt: str,
        config: LLMRequestConfig | None = None,
        metadata: LLMCallMetadata | None = None,
    ) -> LLMResponse:
        """Generate text.

        Args:
            messages: Conversation (role/content dicts or LLMMessage)
            system_prompt: System instruction
            config: Sampling options
            metadata: Tracing information

        Returns:
            LLMResponse: generated text plus usage when the provider reports it

        Raises:
            LLMError: any provider failure, already classified
        """
        ...

    def _normalize_messages(self, messages: list[dict[str, str]] | list[LLMMessage]) -> list[dict[str, str]]:
        normalized = []
        for msg in messages:
            if isinstance(msg, LLMMessage):
                normalized.append({"role": msg.role, "content": msg.content})
            else:
                normalized.append(msg)
        return normalized

    def _get_retry_config(self) -> RetryConfig:
        return RetryConfig(max_attempts=self.max_retries)

    @property
    def max_retries(self) -> int:
        return getattr(self, "_max_retries", 2)

    def _log_request(self, model: str, metadata: LLMCallMetadata | None) -> None:
        logger.info(
            "LLM request",
            extra={
                "provider": self.provider_name,
                "model": model,
                **(metadata.as_log_fields() if metadata else {}),
            },
        )

    def _log_response(self, response: LLMResponse, metadata: LLMCallMetadata | None) -> None:
        logger.info(
            "LLM response",
            extra={
                "provider": self.provider_name,
                "model": response.model,
                "input_tokens": response.token_usage.input if response.token_usage else None,
                "output_tokens": response.token_usage.output if response.token_usage else None,
                "latency_ms": response.latency_ms,
                **(metadata.as_log_fields() if metadata else {}),
            },
        )

    def _log_error(self, error: Exception, metadata: LLMCallMetadata | None) -> None:
        from .exceptions import LLMError

        logger.error(
            "LLM error",
            extra={
                "provider": self.provider_name,
                "error_type": type(error).__name__,
                "error_message": str(error),
                "error_info": error.to_dict() if isinstance(error, LLMError) else {},
                **(metadata.as_log_fields() if metadata else {}),
            },
        )


def provider_for_model(model: str) -> str:
    """Map a model identifier to its provider name.

    ``gemini-*`` models go to Gemini; everything else to OpenAI.
    """
    return "gemini" if model.lower().startswith("gemini") else "openai"
