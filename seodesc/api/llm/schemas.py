"""LLM schemas

Provider-neutral request/response models shared by every client.
"""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class TokenUsage(BaseModel):
    """Token counts reported by a provider"""

    model_config = ConfigDict(frozen=True)

    input: int = Field(..., ge=0, description="Prompt tokens")
    output: int = Field(..., ge=0, description="Completion tokens")

    @property
    def total(self) -> int:
        return self.input + self.output


class LLMResponse(BaseModel):
    """Normalized generation result.

    ``token_usage`` is None when the provider did not report usage; callers
    fall back to local estimates in that case.
    """

    model_config = ConfigDict(frozen=True)

    content: str = Field(..., description="Generated text")
    token_usage: TokenUsage | None = Field(default=None, description="Provider-reported usage")
    model: str = Field(..., description="Model that served the request")
    finish_reason: str | None = Field(default=None)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    provider: str = Field(..., description="Provider name")
    latency_ms: float | None = Field(default=None, ge=0)


class LLMMessage(BaseModel):
    """One conversation message"""

    model_config = ConfigDict(frozen=True)

    role: str = Field(..., pattern="^(system|user|assistant)$")
    content: str
    name: str | None = None


class LLMRequestConfig(BaseModel):
    """Sampling options for a single generate() call"""

    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=800, ge=1, le=128000)
    top_p: float | None = Field(default=None, ge=0.0, le=1.0)
    top_k: int | None = Field(default=None, ge=1)
    presence_penalty: float | None = Field(default=None, ge=-2.0, le=2.0)
    frequency_penalty: float | None = Field(default=None, ge=-2.0, le=2.0)


class RetryConfig(BaseModel):
    """Transport-level retry policy inside a client"""

    max_attempts: int = Field(default=2, ge=1, le=10)
    base_delay: float = Field(default=1.0, ge=0.0, le=60.0)
    max_delay: float = Field(default=30.0, ge=0.0, le=300.0)
    exponential_base: float = Field(default=2.0, ge=1.0, le=10.0)


class LLMCallMetadata(BaseModel):
    """Tracing information attached to a call (logs only)"""

    batch_id: str | None = None
    page_name: str | None = None
    purpose: str = "description"
    attempt: int = Field(default=1, ge=1)

    def as_log_fields(self) -> dict[str, Any]:
        return {
            "batch_id": self.batch_id,
            "page_name": self.page_name,
            "purpose": self.purpose,
            "attempt": self.attempt,
        }
