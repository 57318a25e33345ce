"""Shared schemas for worker helpers.

- Quality validation results
- Generation context and results
"""

from pydantic import BaseModel, Field

from seodesc.api.schemas.common import CamelModel
from seodesc.api.tools.schemas import SearchVolumeRecord


class QualityResult(BaseModel):
    """Quality validation result."""

    is_acceptable: bool
    word_count: int = 0
    issues: list[str] = Field(default_factory=list)


class GenerationContext(BaseModel):
    """Everything one description prompt is built from.

    ``length_feedback`` carries corrections from earlier attempts, newest
    first; competitor insights are never rewritten.
    """

    page_name: str
    language: str = "English"
    competitor_insights: str | None = None
    search_volume: SearchVolumeRecord | None = None
    length_feedback: list[str] = Field(default_factory=list)
    attempt: int = 1

    def add_length_feedback(self, message: str) -> None:
        self.length_feedback.insert(0, message)

    @property
    def length_feedback_text(self) -> str | None:
        return "\n".join(self.length_feedback) if self.length_feedback else None


class GenerationUsage(CamelModel):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0
    cost: float = 0.0


class GenerationResult(CamelModel):
    """One generated description.

    ``word_count`` and ``is_valid_length`` are recomputed by the retry loop
    from ``description``.
    """

    page_name: str
    description: str
    word_count: int = 0
    is_valid_length: bool = False
    usage: GenerationUsage = Field(default_factory=GenerationUsage)
