"""LLM client module

Provides the provider-neutral interface, the OpenAI and Gemini clients,
token estimation and the per-batch usage ledger.

Usage:
    from seodesc.api.llm import OpenAIClient

    client = OpenAIClient(api_key=settings.openai_api_key, model="gpt-4o")
    response = await client.generate(
        messages=[{"role": "user", "content": "Hello"}],
        system_prompt="You are a helpful assistant.",
    )
"""

from .base import LLMInterface, provider_for_model
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
from .gemini import GeminiClient
from .openai import OpenAIClient
from .schemas import (
    LLMCallMetadata,
    LLMMessage,
    LLMRequestConfig,
    LLMResponse,
    RetryConfig,
    TokenUsage,
)
from .tokens import CostBreakdown, TokenEstimate, TokenEstimator
from .usage import UsageLedger, UsageRecord, UsageSummary

__all__ = [
    # Base
    "LLMInterface",
    "provider_for_model",
    # Clients
    "GeminiClient",
    "OpenAIClient",
    # Schemas
    "LLMResponse",
    "LLMMessage",
    "LLMRequestConfig",
    "LLMCallMetadata",
    "TokenUsage",
    "RetryConfig",
    # Accounting
    "TokenEstimator",
    "TokenEstimate",
    "CostBreakdown",
    "UsageLedger",
    "UsageRecord",
    "UsageSummary",
    # Exceptions
    "LLMError",
    "LLMTimeoutError",
    "LLMRateLimitError",
    "LLMAuthenticationError",
    "LLMInvalidRequestError",
    "LLMContentFilterError",
    "LLMServiceUnavailableError",
    "LLMEmptyResponseError",
]
