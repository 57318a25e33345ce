"""Worker helpers: word counting, length validation, generation retry loop."""

from seodesc.worker.helpers.content_metrics import count_words
from seodesc.worker.helpers.quality_retry_loop import GenerationRetryLoop, RetryLoopResult, RetryState
from seodesc.worker.helpers.quality_validator import WordCountValidator
from seodesc.worker.helpers.schemas import (
    GenerationContext,
    GenerationResult,
    GenerationUsage,
    QualityResult,
)

__all__ = [
    "count_words",
    "GenerationRetryLoop",
    "RetryLoopResult",
    "RetryState",
    "WordCountValidator",
    "GenerationContext",
    "GenerationResult",
    "GenerationUsage",
    "QualityResult",
]
