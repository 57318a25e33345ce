"""OpenAI API client.

No fallback: never switches to another model/provider.
Same-request retries only, bounded by ``max_retries`` and logged.
"""

import logging
import time

from openai import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    AsyncOpenAI,
    AuthenticationError,
    BadRequestError,
    RateLimitError,
)

from seodesc.api.core.errors import ErrorCategory, ProviderNotConfiguredError

from .base import LLMInterface
from .exceptions import (
    LLMAuthenticationError,
    LLMError,
    LLMInvalidRequestError,
    LLMRateLimitError,
    LLMServiceUnavailableError,
    LLMTimeoutError,
)
from .schemas import LLMCallMetadata, LLMMessage, LLMRequestConfig, LLMResponse, TokenUsage

logger = logging.getLogger(__name__)


class OpenAIClient(LLMInterface):
    """OpenAI chat completions client.

    Supported models: gpt-4o, gpt-4o-mini, gpt-4-turbo, gpt-4, gpt-3.5-turbo
    """

    PROVIDER = "openai"
    DEFAULT_MODEL = "gpt-4o"
    MAX_RETRIES = 2

    def __init__(
        self,
        api_key: str | None,
        model: str | None = None,
        max_retries: int | None = None,
    ) -> None:
        """
        Args:
            api_key: OpenAI API key (injected from Settings)
            model: Model identifier
            max_retries: Attempts per generate() call

        Raises:
            ProviderNotConfiguredError: api_key is empty
        """
        if not api_key:
            raise ProviderNotConfiguredError(
                "OpenAI API key is not configured",
                provider=self.PROVIDER,
                missing_config=["OPENAI_API_KEY"],
            )

        self.client = AsyncOpenAI(api_key=api_key)
        self._model = model or self.DEFAULT_MODEL
        self._max_retries = max_retries or self.MAX_RETRIES

    @property
    def provider_name(self) -> str:
        return self.PROVIDER

    @property
    def model(self) -> str:
        return self._model

    async def generate(
        self,
        messages: list[dict[str, str]] | list[LLMMessage],
        system_prompt: str,
        config: LLMRequestConfig | None = None,
        metadata: LLMCallMetadata | None = None,
    ) -> LLMResponse:
        """Run a chat completion.

        Raises:
            LLMError: classified API failure
        """
        config = config or LLMRequestConfig()
        full_messages = [{"role": "system", "content": system_prompt}, *self._normalize_messages(messages)]

        extra_params: dict[str, float] = {}
        if config.top_p is not None:
            extra_params["top_p"] = config.top_p
        if config.presence_penalty is not None:
            extra_params["presence_penalty"] = config.presence_penalty
        if config.frequency_penalty is not None:
            extra_params["frequency_penalty"] = config.frequency_penalty

        self._log_request(self._model, metadata)

        for attempt in range(1, self._max_retries + 1):
            start_time = time.monotonic()
            try:
                logger.info(
                    "OpenAI API call: model=%s, attempt=%d/%d",
                    self._model,
                    attempt,
                    self._max_retries,
                )

                response = await self.client.chat.completions.create(
                    model=self._model,
                    messages=full_messages,  # type: ignore[arg-type]
                    temperature=config.temperature,
                    max_tokens=config.max_tokens,
                    **extra_params,  # type: ignore[arg-type]
                )

                if not response.choices:
                    raise LLMServiceUnavailableError(
                        "OpenAI API returned no choices",
                        provider=self.PROVIDER,
                        model=self._model,
                        status_code=None,
                    )
                choice = response.choices[0]
                usage = response.usage
                token_usage = (
                    TokenUsage(input=usage.prompt_tokens or 0, output=usage.completion_tokens or 0)
                    if usage
                    else None
                )

                llm_response = LLMResponse(
                    content=choice.message.content or "",
                    token_usage=token_usage,
                    model=response.model or self._model,
                    finish_reason=choice.finish_reason,
                    provider=self.PROVIDER,
                    latency_ms=(time.monotonic() - start_time) * 1000,
                )
                self._log_response(llm_response, metadata)
                return llm_response

            except APITimeoutError as e:
                error: LLMError = LLMTimeoutError(
                    f"OpenAI API timed out: {e}",
                    provider=self.PROVIDER,
                    model=self._model,
                )
            except RateLimitError as e:
                error = LLMRateLimitError(
                    f"OpenAI API rate limit exceeded: {e}",
                    provider=self.PROVIDER,
                    model=self._model,
                )
            except APIConnectionError as e:
                error = LLMServiceUnavailableError(
                    f"OpenAI API connection failed: {e}",
                    provider=self.PROVIDER,
                    model=self._model,
                    status_code=None,
                )
            except AuthenticationError as e:
                error = LLMAuthenticationError(
                    "Invalid OpenAI API key. Please check your credentials.",
                    provider=self.PROVIDER,
                    model=self._model,
                )
                self._log_error(e, metadata)
                raise error from e
            except BadRequestError as e:
                error = LLMInvalidRequestError(
                    f"OpenAI API bad request: {e}",
                    provider=self.PROVIDER,
                    model=self._model,
                )
                self._log_error(e, metadata)
                raise error from e
            except APIStatusError as e:
                if e.status_code < 500:
                    self._log_error(e, metadata)
                    raise LLMError(
                        f"OpenAI API error: {e.status_code} - {e.message}",
                        provider=self.PROVIDER,
                        model=self._model,
                        status_code=e.status_code,
                        category=ErrorCategory.NON_RETRYABLE,
                    ) from e
                error = LLMServiceUnavailableError(
                    f"OpenAI server error: {e}",
                    provider=self.PROVIDER,
                    model=self._model,
                    status_code=e.status_code,
                )
            except LLMServiceUnavailableError as e:
                error = e

            logger.warning(
                "OpenAI API retryable error: model=%s, attempt=%d/%d, error=%s",
                self._model,
                attempt,
                self._max_retries,
                error.message,
            )
            if attempt == self._max_retries:
                self._log_error(error, metadata)
                raise error

        raise LLMServiceUnavailableError(
            f"OpenAI API failed after {self._max_retries} attempts",
            provider=self.PROVIDER,
            model=self._model,
        )
