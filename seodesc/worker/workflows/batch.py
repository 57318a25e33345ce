"""Batch orchestrator

Drives a batch of 1-10 pages through the description pipeline:

1. Validate the page count
2. Start a fresh usage ledger
3. Process pages in consecutive concurrency groups
4. Per page, run the optional sub-fetches (search volume, competitor
   analysis) concurrently, then the length-checked generation loop
5. Return one PageResult per page in input order, plus the ledger summary

A page failure is reported inline and never affects sibling pages.
"""

import logging
import uuid
from collections.abc import Awaitable
from typing import Any

from seodesc.api.constants import DEFAULT_BRAND_DOMAIN, MAX_PAGES_PER_BATCH
from seodesc.api.core.config import resolve_language
from seodesc.api.core.errors import ServiceError, ValidationError
from seodesc.api.llm import LLMInterface, UsageLedger
from seodesc.api.observability import get_logger, set_context
from seodesc.api.services.competitor_analysis import CompetitorAnalysis, CompetitorAnalyzer, ranks_in_top
from seodesc.api.services.description_writer import DescriptionWriter
from seodesc.api.tools import DataForSEOClient, SearchVolumeRecord
from seodesc.worker.helpers import GenerationContext, GenerationRetryLoop, WordCountValidator
from seodesc.worker.workflows.parallel import run_in_groups, run_named
from seodesc.worker.workflows.schemas import BatchOptions, BatchResult, PageRequest, PageResult

logger = logging.getLogger(__name__)
batch_logger = get_logger(__name__)

SEARCH_VOLUME_TASK = "search_volume"
COMPETITOR_TASK = "competitor_analysis"


class BatchOrchestrator:
    """Concurrent multi-page description pipeline.

    Args:
        llm: Generation client for this batch's model
        dataforseo: Search volume client (None when not configured)
        competitor_analyzer: Competitor chain (None when not configured)
        pricing: Per-model cost table
        max_concurrent: Concurrency group size
        generation_max_retries: Attempts per page in the length loop
        min_words / max_words: Brand length constraint
        brand_domain: Own domain for the top-results signal
    """

    def __init__(
        self,
        llm: LLMInterface,
        dataforseo: DataForSEOClient | None = None,
        competitor_analyzer: CompetitorAnalyzer | None = None,
        pricing: dict[str, dict[str, float]] | None = None,
        max_concurrent: int = 3,
        generation_max_retries: int = 3,
        min_words: int = 350,
        max_words: int = 500,
        brand_domain: str = DEFAULT_BRAND_DOMAIN,
    ) -> None:
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be at least 1")
        self.llm = llm
        self.dataforseo = dataforseo
        self.competitor_analyzer = competitor_analyzer
        self.pricing = pricing
        self.max_concurrent = max_concurrent
        self.generation_max_retries = generation_max_retries
        self.min_words = min_words
        self.max_words = max_words
        self.brand_domain = brand_domain

    @staticmethod
    def validate_pages(pages: list[str]) -> list[str]:
        """
        Raises:
            ValidationError: empty list, more than 10 pages, or a blank name
        """
        if not pages:
            raise ValidationError("Please provide an array of page names", field="pages")
        if len(pages) > MAX_PAGES_PER_BATCH:
            raise ValidationError(f"Maximum {MAX_PAGES_PER_BATCH} pages per request", field="pages")
        if any(not isinstance(page, str) or not page.strip() for page in pages):
            raise ValidationError("Page names must be non-empty strings", field="pages")
        return pages

    async def process_batch(
        self,
        pages: list[str] | None = None,
        options: BatchOptions | None = None,
    ) -> BatchResult:
        """Process every page and return results in input order.

        Args:
            pages: Page names; ``options.pages`` when omitted
            options: Batch options (defaults apply when omitted)

        Raises:
            ValidationError: page list out of bounds (nothing is processed)
        """
        options = options or BatchOptions()
        if pages is None:
            pages = options.pages
        self.validate_pages(pages)

        batch_id = uuid.uuid4().hex[:12]
        set_context(batch_id=batch_id)

        # One ledger per batch
        ledger = UsageLedger()
        ledger.reset()

        writer = DescriptionWriter(
            self.llm,
            ledger,
            pricing=self.pricing,
            min_words=self.min_words,
            max_words=self.max_words,
            batch_id=batch_id,
        )
        language_code, language_name = resolve_language(options.language)
        requests = [PageRequest(name=page, location=options.location, language=language_code) for page in pages]

        batch_logger.info(
            "Processing SEO description batch",
            extra_data={
                "page_count": len(pages),
                "language": language_name,
                "include_search_volume": options.include_search_volume,
                "include_competitor_analysis": options.include_competitor_analysis,
                "model": self.llm.model,
                "provider": self.llm.provider_name,
            },
        )

        def log_group(index: int, group: list[PageRequest]) -> None:
            batch_logger.info(
                f"Processing group {index + 1}",
                extra_data={"pages": [request.name for request in group]},
            )

        settled = await run_in_groups(
            requests,
            lambda request: self._run_page(request, options, writer, language_name),
            self.max_concurrent,
            on_group_start=log_group,
        )

        results = [
            outcome if isinstance(outcome, PageResult) else self._failed(request.name, outcome)
            for request, outcome in zip(requests, settled, strict=True)
        ]
        summary = ledger.get_summary()

        batch_logger.info(
            "Generation completed",
            extra_data={
                "success_count": sum(1 for r in results if r.success),
                "failure_count": sum(1 for r in results if not r.success),
                "total_cost": summary.total_cost,
            },
        )
        return BatchResult(results=results, summary=summary)

    async def _run_page(
        self,
        request: PageRequest,
        options: BatchOptions,
        writer: DescriptionWriter,
        language_name: str,
    ) -> PageResult:
        """Failure boundary around one page."""
        set_context(page=request.name)
        try:
            return await self._process_page(request, options, writer, language_name)
        except Exception as e:
            category = e.category.value if isinstance(e, ServiceError) else "unexpected"
            batch_logger.page_failed(request.name, str(e), category)
            return self._failed(request.name, e)

    async def _process_page(
        self,
        request: PageRequest,
        options: BatchOptions,
        writer: DescriptionWriter,
        language_name: str,
    ) -> PageResult:
        batch_logger.page_started(request.name)

        subtasks: dict[str, Awaitable[Any]] = {}
        if options.include_search_volume:
            if self.dataforseo is not None:
                subtasks[SEARCH_VOLUME_TASK] = self.dataforseo.get_search_volume(
                    [request.name], request.location, request.language
                )
            else:
                logger.warning("Search volume requested but DataForSEO not configured", extra={"page": request.name})

        if options.include_competitor_analysis:
            if self.competitor_analyzer is not None:
                subtasks[COMPETITOR_TASK] = self.competitor_analyzer.analyze(
                    request.name, request.location, request.language, writer
                )
            else:
                logger.warning(
                    "Competitor analysis requested but required services not configured",
                    extra={"page": request.name},
                )

        outcomes = await run_named(subtasks)

        volume: SearchVolumeRecord | None = None
        if SEARCH_VOLUME_TASK in outcomes:
            outcome = outcomes[SEARCH_VOLUME_TASK]
            if outcome.ok and outcome.value:
                volume = outcome.value[0]
            elif not outcome.ok:
                logger.warning(
                    "Failed to get search volume",
                    extra={"page": request.name, "error": str(outcome.error)},
                )

        analysis: CompetitorAnalysis | None = None
        if COMPETITOR_TASK in outcomes:
            outcome = outcomes[COMPETITOR_TASK]
            if outcome.ok:
                analysis = outcome.value
            else:
                logger.warning(
                    "Failed to analyze competitors",
                    extra={"page": request.name, "error": str(outcome.error)},
                )

        domains = analysis.competitor_domains if analysis else []
        insights = analysis.insights if analysis else None

        context = GenerationContext(
            page_name=request.name,
            language=language_name,
            competitor_insights=insights,
            search_volume=volume,
        )
        loop = GenerationRetryLoop(WordCountValidator(self.min_words, self.max_words), self.generation_max_retries)
        loop_result = await loop.execute(writer.generate_description, context)
        generated = loop_result.result

        batch_logger.page_completed(
            request.name,
            generated.word_count,
            attempts=loop_result.attempts,
            state=loop_result.state.value,
        )
        return PageResult(
            page_name=request.name,
            success=True,
            description=generated.description,
            word_count=generated.word_count,
            is_valid_length=generated.is_valid_length,
            search_volume=volume.search_volume if volume else None,
            usage=generated.usage,
            has_competitor_insights=bool(insights),
            competitor_domains=domains,
            seatpick_top3=ranks_in_top(domains, self.brand_domain),
        )

    @staticmethod
    def _failed(page_name: str, error: BaseException) -> PageResult:
        message = error.message if isinstance(error, ServiceError) else str(error) or type(error).__name__
        return PageResult(page_name=page_name, success=False, error=message)
