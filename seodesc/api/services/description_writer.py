"""Description writer service

Renders the brand prompts, calls the configured LLM, and records every
call (successful or length-violating) in the batch's usage ledger.

Flow per description:
1. Render system + description prompts from the prompt pack
2. Log the pre-flight token estimate
3. Call the LLM
4. Fall back to local token counts when the provider reports none
5. Record usage and cost in the ledger
"""

import logging

from seodesc.api.constants import (
    ANALYSIS_MAX_TOKENS,
    ANALYSIS_TEMPERATURE,
    DESCRIPTION_MAX_TOKENS,
    DESCRIPTION_TEMPERATURE,
)
from seodesc.api.core.errors import ProviderError
from seodesc.api.llm import (
    CostBreakdown,
    LLMCallMetadata,
    LLMEmptyResponseError,
    LLMInterface,
    LLMRequestConfig,
    LLMResponse,
    TokenEstimator,
    UsageLedger,
)
from seodesc.api.prompts import DEFAULT_PACK, PromptPack, brand_slots
from seodesc.api.tools.schemas import CompetitorContent
from seodesc.worker.helpers.content_metrics import count_words
from seodesc.worker.helpers.schemas import GenerationContext, GenerationResult, GenerationUsage

logger = logging.getLogger(__name__)

DESCRIPTION_CONFIG = LLMRequestConfig(
    temperature=DESCRIPTION_TEMPERATURE,
    max_tokens=DESCRIPTION_MAX_TOKENS,
    presence_penalty=0.1,
    frequency_penalty=0.1,
)
ANALYSIS_CONFIG = LLMRequestConfig(temperature=ANALYSIS_TEMPERATURE, max_tokens=ANALYSIS_MAX_TOKENS)


class DescriptionWriter:
    """Generates descriptions and competitor insights with one LLM."""

    def __init__(
        self,
        llm: LLMInterface,
        ledger: UsageLedger,
        pricing: dict[str, dict[str, float]] | None = None,
        min_words: int = 350,
        max_words: int = 500,
        prompts: PromptPack = DEFAULT_PACK,
        batch_id: str | None = None,
    ) -> None:
        self.llm = llm
        self.ledger = ledger
        self.estimator = TokenEstimator(llm.model, pricing)
        self.min_words = min_words
        self.max_words = max_words
        self.prompts = prompts
        self.batch_id = batch_id

    def build_messages(self, context: GenerationContext) -> tuple[str, list[dict[str, str]]]:
        """Render ``(system_prompt, messages)`` for a description request."""
        system_prompt = self.prompts.render_prompt(
            "system",
            **brand_slots(),
            language=context.language,
            minWords=self.min_words,
            maxWords=self.max_words,
        )

        volume = context.search_volume
        has_volume = volume is not None and volume.search_volume > 0
        user_prompt = self.prompts.render_prompt(
            "description",
            pageName=context.page_name,
            minWords=self.min_words,
            maxWords=self.max_words,
            lengthFeedback=context.length_feedback_text,
            searchVolume=f"{volume.search_volume:,}" if has_volume else None,
            competition=volume.competition if has_volume else None,
            cpc=f"{volume.cpc:.2f}" if has_volume else None,
            competitorInsights=context.competitor_insights,
        )
        return system_prompt, [{"role": "user", "content": user_prompt}]

    async def generate_description(self, context: GenerationContext) -> GenerationResult:
        """Generate one description attempt.

        Raises:
            ProviderError: LLM failure or empty output
        """
        system_prompt, messages = self.build_messages(context)
        description, usage = await self._call(
            system_prompt,
            messages,
            DESCRIPTION_CONFIG,
            LLMCallMetadata(
                batch_id=self.batch_id,
                page_name=context.page_name,
                purpose="description",
                attempt=context.attempt,
            ),
            ledger_metadata={"pageName": context.page_name, "language": context.language, "type": "description"},
        )
        word_count = count_words(description)
        is_valid_length = self.min_words <= word_count <= self.max_words
        logger.info(
            "Description generated",
            extra={
                "page_name": context.page_name,
                "word_count": word_count,
                "is_valid_length": is_valid_length,
                "tokens": usage.total_tokens,
                "cost": usage.cost,
            },
        )
        return GenerationResult(
            page_name=context.page_name,
            description=description,
            word_count=word_count,
            is_valid_length=is_valid_length,
            usage=usage,
        )

    async def analyze_competitor_content(self, keyword: str, contents: list[CompetitorContent]) -> str | None:
        """Summarize competitor pages into insights for the description prompt.

        Returns None when there is nothing to analyze or the LLM call fails.
        """
        if not contents:
            return None

        blocks = "\n\n".join(
            f"=== Competitor {i}: {c.domain} ===\n"
            f"Page Title: {c.title}\n"
            f"Meta Description: {c.meta_description}\n"
            f"Content (plain text): {c.content}"
            for i, c in enumerate(contents, start=1)
        )
        prompt = self.prompts.render_prompt("competitor_analysis", keyword=keyword, competitorBlocks=blocks)

        try:
            insights, usage = await self._call(
                "You are an SEO analyst.",
                [{"role": "user", "content": prompt}],
                ANALYSIS_CONFIG,
                LLMCallMetadata(batch_id=self.batch_id, page_name=keyword, purpose="competitor_analysis"),
                ledger_metadata={"type": "competitor_analysis", "keyword": keyword},
            )
        except ProviderError as e:
            logger.error(
                "Failed to analyze competitor content",
                extra={"keyword": keyword, "error": e.to_dict()},
            )
            return None

        logger.info(
            "Competitor analysis completed",
            extra={"keyword": keyword, "competitor_count": len(contents), "tokens_used": usage.total_tokens},
        )
        return insights

    async def _call(
        self,
        system_prompt: str,
        messages: list[dict[str, str]],
        config: LLMRequestConfig,
        metadata: LLMCallMetadata,
        ledger_metadata: dict[str, str],
    ) -> tuple[str, GenerationUsage]:
        full_messages = [{"role": "system", "content": system_prompt}, *messages]
        estimation = self.estimator.estimate_request_tokens(full_messages, config.max_tokens)
        logger.info("Token estimation", extra={"purpose": metadata.purpose, **estimation.model_dump()})

        response = await self.llm.generate(messages, system_prompt, config, metadata)
        text = response.content.strip()
        if not text:
            raise LLMEmptyResponseError(
                "No text content returned by the model",
                provider=self.llm.provider_name,
                model=self.llm.model,
            )

        usage, cost = self._usage_for(response, estimation.prompt_tokens, text)
        self.ledger.add_request(
            usage.prompt_tokens,
            usage.completion_tokens,
            cost,
            {**ledger_metadata, "model": self.llm.model},
        )
        return text, usage

    def _usage_for(
        self, response: LLMResponse, estimated_prompt_tokens: int, text: str
    ) -> tuple[GenerationUsage, CostBreakdown]:
        if response.token_usage is not None:
            prompt_tokens = response.token_usage.input
            completion_tokens = response.token_usage.output
        else:
            prompt_tokens = estimated_prompt_tokens
            completion_tokens = self.estimator.count_tokens(text)
        cost = self.estimator.calculate_cost(prompt_tokens, completion_tokens)
        usage = GenerationUsage(
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            total_tokens=prompt_tokens + completion_tokens,
            cost=cost.total_cost,
        )
        return usage, cost
