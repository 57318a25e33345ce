"""Gemini API client

LLM client on the Google Gemini API (google-genai SDK).

No fallback:
- never switches to another model
- same-request retries only, bounded and logged
"""

import asyncio
import logging
import time
from typing import Any

from google import genai
from google.genai import types

from seodesc.api.core.errors import ProviderError, ProviderNotConfiguredError

from .base import LLMInterface
from .exceptions import (
    LLMAuthenticationError,
    LLMContentFilterError,
    LLMEmptyResponseError,
    LLMError,
    LLMInvalidRequestError,
    LLMRateLimitError,
    LLMServiceUnavailableError,
    LLMTimeoutError,
)
from .response_shapes import extract_candidate_text
from .schemas import LLMCallMetadata, LLMMessage, LLMRequestConfig, LLMResponse, TokenUsage

logger = logging.getLogger(__name__)


class GeminiClient(LLMInterface):
    """Gemini API client

    Supported models:
    - gemini-2.5-pro
    - gemini-2.5-flash
    - gemini-1.5-pro
    - gemini-1.5-flash
    """

    PROVIDER_NAME = "gemini"

    AVAILABLE_MODELS = [
        "gemini-2.5-pro",
        "gemini-2.5-flash",
        "gemini-1.5-pro",
        "gemini-1.5-flash",
    ]

    DEFAULT_MODEL = "gemini-2.5-flash"

    # Sampling defaults applied when the request leaves them unset
    DEFAULT_TOP_P = 0.8
    DEFAULT_TOP_K = 40

    def __init__(
        self,
        api_key: str | None,
        model: str | None = None,
        max_retries: int = 2,
        timeout: float = 120.0,
        retry_base_delay: float = 1.0,
    ) -> None:
        """
        Args:
            api_key: Gemini API key (injected from Settings)
            model: Model identifier
            max_retries: Attempts per generate() call
            timeout: Per-attempt timeout in seconds
            retry_base_delay: First backoff delay in seconds

        Raises:
            ProviderNotConfiguredError: api_key is empty
        """
        if not api_key:
            raise ProviderNotConfiguredError(
                "Gemini API key is not configured",
                provider=self.PROVIDER_NAME,
                missing_config=["GEMINI_API_KEY"],
            )

        self._model = model or self.DEFAULT_MODEL
        if self._model not in self.AVAILABLE_MODELS:
            logger.warning(f"Model {self._model} is not in the known models list. Available: {self.AVAILABLE_MODELS}")

        self._max_retries = max_retries
        self._timeout = timeout
        self._retry_base_delay = retry_base_delay
        self._client = genai.Client(api_key=api_key)

    @property
    def provider_name(self) -> str:
        return self.PROVIDER_NAME

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
        """Generate text.

        Raises:
            LLMError: classified API failure
            ProviderError: response carried no usable text
        """
        config = config or LLMRequestConfig()
        metadata = metadata or LLMCallMetadata()

        self._log_request(self._model, metadata)
        start_time = time.time()

        try:
            contents = self._build_contents(self._normalize_messages(messages))
            generation_config = self._build_generation_config(config, system_instruction=system_prompt or None)

            response = await self._call_with_retry(contents, generation_config, metadata)
            latency_ms = (time.time() - start_time) * 1000

            llm_response = self._parse_response(response, latency_ms)
            self._log_response(llm_response, metadata)
            return llm_response

        except ProviderError:
            raise
        except Exception as e:
            self._log_error(e, metadata)
            raise self._convert_exception(e) from e

    def _build_contents(self, messages: list[dict[str, str]]) -> list[types.Content]:
        contents = []
        for msg in messages:
            role = msg["role"]
            if role == "system":
                # system goes through system_instruction
                continue
            gemini_role = "model" if role == "assistant" else "user"
            contents.append(types.Content(role=gemini_role, parts=[types.Part(text=msg["content"])]))
        return contents

    def _build_generation_config(
        self,
        config: LLMRequestConfig,
        system_instruction: str | None = None,
    ) -> types.GenerateContentConfig:
        kwargs: dict[str, Any] = {
            "temperature": config.temperature,
            "max_output_tokens": config.max_tokens,
            "top_p": config.top_p if config.top_p is not None else self.DEFAULT_TOP_P,
            "top_k": config.top_k if config.top_k is not None else self.DEFAULT_TOP_K,
        }
        if system_instruction:
            kwargs["system_instruction"] = system_instruction
        return types.GenerateContentConfig(**kwargs)

    async def _call_with_retry(
        self,
        contents: list[types.Content],
        generation_config: types.GenerateContentConfig,
        metadata: LLMCallMetadata,
    ) -> Any:
        """Call the API with same-request retries."""
        retry_config = self._get_retry_config()
        last_error: LLMError | None = None

        for attempt in range(1, retry_config.max_attempts + 1):
            try:
                logger.debug(
                    f"API call attempt {attempt}/{retry_config.max_attempts}",
                    extra={"provider": self.PROVIDER_NAME, "model": self._model, "attempt": attempt},
                )
                return await asyncio.wait_for(
                    asyncio.to_thread(
                        self._client.models.generate_content,
                        model=self._model,
                        contents=contents,
                        config=generation_config,
                    ),
                    timeout=self._timeout,
                )

            except TimeoutError:
                last_error = LLMTimeoutError(
                    f"Request timed out after {self._timeout}s",
                    provider=self.PROVIDER_NAME,
                    model=self._model,
                    timeout_seconds=self._timeout,
                )
                logger.warning(
                    f"Timeout on attempt {attempt}",
                    extra={"provider": self.PROVIDER_NAME, "attempt": attempt},
                )

            except Exception as e:
                converted = self._convert_exception(e)
                last_error = converted
                if not converted.is_retryable():
                    raise converted from e
                logger.warning(
                    f"Error on attempt {attempt}: {e}",
                    extra={"provider": self.PROVIDER_NAME, "attempt": attempt},
                )

            if attempt < retry_config.max_attempts:
                delay = min(
                    self._retry_base_delay * (retry_config.exponential_base ** (attempt - 1)),
                    retry_config.max_delay,
                )
                logger.info(f"Retrying in {delay:.1f}s", extra={"provider": self.PROVIDER_NAME, "delay": delay})
                await asyncio.sleep(delay)

        if last_error:
            raise last_error
        raise LLMServiceUnavailableError("All retry attempts failed", provider=self.PROVIDER_NAME, model=self._model)

    def _parse_response(self, response: Any, latency_ms: float) -> LLMResponse:
        """Normalize an SDK response (or raw payload dict)."""
        if isinstance(response, dict):
            payload = response
        else:
            payload = response.model_dump(mode="json", exclude_none=True)

        try:
            text = extract_candidate_text(payload)
        except ProviderError as e:
            raise LLMEmptyResponseError(e.message, provider=self.PROVIDER_NAME, model=self._model) from e

        finish_reason = None
        candidates = payload.get("candidates") or []
        if candidates:
            finish_reason = candidates[0].get("finish_reason") or candidates[0].get("finishReason")
            if finish_reason == "SAFETY":
                raise LLMContentFilterError(
                    "Content blocked by Gemini safety filter",
                    provider=self.PROVIDER_NAME,
                    model=self._model,
                )

        usage = payload.get("usage_metadata") or payload.get("usageMetadata") or {}
        prompt_tokens = usage.get("prompt_token_count") or usage.get("promptTokenCount")
        output_tokens = usage.get("candidates_token_count") or usage.get("candidatesTokenCount")
        token_usage = (
            TokenUsage(input=prompt_tokens, output=output_tokens) if prompt_tokens and output_tokens else None
        )

        return LLMResponse(
            content=text,
            token_usage=token_usage,
            model=self._model,
            finish_reason=str(finish_reason) if finish_reason else None,
            provider=self.PROVIDER_NAME,
            latency_ms=latency_ms,
        )

    def _convert_exception(self, e: Exception) -> LLMError:
        """Classify an SDK exception."""
        if isinstance(e, LLMError):
            return e

        error_msg = str(e)
        lowered = error_msg.lower()
        status = getattr(e, "code", None)

        if status in (401, 403) or "401" in error_msg or "api key not valid" in lowered:
            return LLMAuthenticationError(
                "Invalid Gemini API key. Please check your credentials.",
                provider=self.PROVIDER_NAME,
                model=self._model,
            )
        if status == 429 or "429" in error_msg or "rate limit" in lowered or "resource_exhausted" in lowered:
            return LLMRateLimitError(
                f"Gemini API rate limit exceeded. {error_msg}",
                provider=self.PROVIDER_NAME,
                model=self._model,
            )
        if status == 400 or "400" in error_msg or "invalid" in lowered:
            return LLMInvalidRequestError(
                f"Invalid request: {error_msg}",
                provider=self.PROVIDER_NAME,
                model=self._model,
                details={"original_error": type(e).__name__},
            )
        if "safety" in lowered or "blocked" in lowered:
            return LLMContentFilterError(
                f"Content blocked: {error_msg}",
                provider=self.PROVIDER_NAME,
                model=self._model,
            )
        if "timeout" in lowered:
            return LLMTimeoutError(f"Timeout: {error_msg}", provider=self.PROVIDER_NAME, model=self._model)

        return LLMServiceUnavailableError(
            f"Gemini API Error: {error_msg}",
            provider=self.PROVIDER_NAME,
            model=self._model,
            status_code=status if isinstance(status, int) else None,
        )
