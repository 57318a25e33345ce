"""Token counting and cost estimation.

Exact counts come from tiktoken where it knows the model; other models
(Gemini, unreleased OpenAI ids) use a ``ceil(len / 4)`` character heuristic.
"""

import logging
import math
from typing import Any

import tiktoken
from pydantic import BaseModel

from seodesc.api.constants import DEFAULT_COST_RATES, DESCRIPTION_MAX_TOKENS

logger = logging.getLogger(__name__)

# Chat-format overheads used by OpenAI's accounting convention
TOKENS_PER_MESSAGE = 4
TOKENS_PER_NAME = -1
REPLY_PRIMING_TOKENS = 2

# Heuristic pre-flight ratio of expected output to prompt size
OUTPUT_TO_PROMPT_RATIO = 0.8


class CostBreakdown(BaseModel):
    input_cost: float
    output_cost: float
    total_cost: float


class TokenEstimate(BaseModel):
    prompt_tokens: int
    estimated_output_tokens: int
    total_estimated_tokens: int
    estimated_cost: CostBreakdown


class TokenEstimator:
    """Per-model token counter and cost calculator.

    Example:
        >>> estimator = TokenEstimator("gemini-2.5-flash")
        >>> estimator.count_tokens("abcdefgh")
        2
    """

    def __init__(self, model: str, pricing: dict[str, dict[str, float]] | None = None) -> None:
        self.model = model
        self.pricing = pricing if pricing is not None else DEFAULT_COST_RATES
        self._encoding: Any = None
        self._encoding_loaded = False

    def _get_encoding(self) -> Any:
        if not self._encoding_loaded:
            self._encoding_loaded = True
            try:
                self._encoding = tiktoken.encoding_for_model(self.model)
            except KeyError:
                logger.debug("No tiktoken encoding for model, using heuristic", extra={"model": self.model})
            except Exception as e:
                # Encoding files are fetched lazily and may be unreachable
                logger.warning(
                    "tiktoken encoding unavailable, using heuristic",
                    extra={"model": self.model, "error": str(e)},
                )
        return self._encoding

    def count_tokens(self, text: str) -> int:
        """Count tokens in text; never raises."""
        if not text:
            return 0
        encoding = self._get_encoding()
        if encoding is not None:
            try:
                return len(encoding.encode(text))
            except Exception as e:
                logger.warning("Token encoding failed, using heuristic", extra={"error": str(e)})
        return math.ceil(len(text) / 4)

    def count_structured_tokens(self, messages: list[dict[str, str]]) -> int:
        """Approximate tokens for a chat message list.

        Follows OpenAI's published chat accounting; other providers count
        differently, so treat the result as an estimate.
        """
        total = 0
        for message in messages:
            total += TOKENS_PER_MESSAGE
            for key in ("role", "content", "name"):
                value = message.get(key)
                if value:
                    total += self.count_tokens(value)
            if message.get("name"):
                total += TOKENS_PER_NAME
        return total + REPLY_PRIMING_TOKENS

    def calculate_cost(self, input_tokens: int, output_tokens: int) -> CostBreakdown:
        """Cost in USD for the given token counts; zero for unpriced models."""
        rates = self.pricing.get(self.model)
        if rates is None:
            logger.warning("No pricing for model, cost reported as zero", extra={"model": self.model})
            return CostBreakdown(input_cost=0.0, output_cost=0.0, total_cost=0.0)

        input_cost = (input_tokens / 1000) * rates["input"]
        output_cost = (output_tokens / 1000) * rates["output"]
        return CostBreakdown(
            input_cost=round(input_cost, 6),
            output_cost=round(output_cost, 6),
            total_cost=round(input_cost + output_cost, 6),
        )

    def estimate_request_tokens(
        self,
        prompt: str | list[dict[str, str]],
        max_completion_tokens: int = DESCRIPTION_MAX_TOKENS,
    ) -> TokenEstimate:
        """Pre-flight estimate for logging; never used for billing."""
        if isinstance(prompt, str):
            prompt_tokens = self.count_tokens(prompt)
        else:
            prompt_tokens = self.count_structured_tokens(prompt)
        estimated_output = min(max_completion_tokens, math.floor(prompt_tokens * OUTPUT_TO_PROMPT_RATIO))
        return TokenEstimate(
            prompt_tokens=prompt_tokens,
            estimated_output_tokens=estimated_output,
            total_estimated_tokens=prompt_tokens + estimated_output,
            estimated_cost=self.calculate_cost(prompt_tokens, estimated_output),
        )
