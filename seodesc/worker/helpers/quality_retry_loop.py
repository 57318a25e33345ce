"""Length-checked retry loop for description generation.

GenerationRetryLoop runs a generator until its output satisfies the word
count constraint or the attempt budget is spent:
- each attempt's word count is recomputed from the returned text
- a violation adds corrective feedback to the context for the next attempt
- an error before the final attempt is logged and retried
- an error on the final attempt propagates
- when every attempt violates the constraint the last result is returned
"""

import logging
from collections.abc import Awaitable, Callable
from enum import Enum

from pydantic import BaseModel

from seodesc.worker.helpers.quality_validator import WordCountValidator
from seodesc.worker.helpers.schemas import GenerationContext, GenerationResult, QualityResult

logger = logging.getLogger(__name__)


class RetryState(str, Enum):
    ATTEMPTING = "attempting"
    SATISFIED = "satisfied"
    EXHAUSTED_RETURNING_BEST = "exhausted_returning_best"


class RetryLoopResult(BaseModel):
    """Retry loop result."""

    state: RetryState
    result: GenerationResult
    quality: QualityResult
    attempts: int


class GenerationRetryLoop:
    """Word-count constrained retry loop."""

    def __init__(self, validator: WordCountValidator, max_retries: int = 3):
        """
        Args:
            validator: Length validator
            max_retries: Total attempts (>= 1)
        """
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        self.validator = validator
        self.max_retries = max_retries

    async def execute(
        self,
        generate: Callable[[GenerationContext], Awaitable[GenerationResult]],
        context: GenerationContext,
    ) -> RetryLoopResult:
        """Run ``generate`` until the length constraint holds.

        Raises:
            Exception: whatever the final attempt raised
        """
        for attempt in range(1, self.max_retries + 1):
            is_final_attempt = attempt == self.max_retries
            logger.info(
                f"Generation attempt {attempt}/{self.max_retries} for {context.page_name}",
                extra={"state": RetryState.ATTEMPTING.value, "attempt": attempt},
            )

            context.attempt = attempt
            try:
                raw = await generate(context)
            except Exception as e:
                if is_final_attempt:
                    raise
                logger.warning(
                    f"Attempt {attempt} failed, retrying",
                    extra={"page_name": context.page_name, "error": str(e)},
                )
                continue

            quality = self.validator.validate(raw.description)
            result = raw.model_copy(
                update={"word_count": quality.word_count, "is_valid_length": quality.is_acceptable}
            )

            if quality.is_acceptable:
                return RetryLoopResult(
                    state=RetryState.SATISFIED,
                    result=result,
                    quality=quality,
                    attempts=attempt,
                )

            if is_final_attempt:
                logger.warning(
                    f"Failed to achieve valid word count after {self.max_retries} attempts",
                    extra={"page_name": context.page_name, "word_count": quality.word_count},
                )
                return RetryLoopResult(
                    state=RetryState.EXHAUSTED_RETURNING_BEST,
                    result=result,
                    quality=quality,
                    attempts=attempt,
                )

            feedback = self.validator.feedback(quality)
            if feedback:
                context.add_length_feedback(feedback)
            logger.warning(
                f"Length retry {attempt}/{self.max_retries}: {quality.issues}",
                extra={"page_name": context.page_name, "word_count": quality.word_count},
            )

        raise RuntimeError(f"Retry loop for {context.page_name} ended without a result")
