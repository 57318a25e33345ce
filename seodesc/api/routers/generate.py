"""Description generation router."""

import logging

from fastapi import APIRouter, Depends

from seodesc.api.routers.dependencies import get_container
from seodesc.api.schemas.requests import GenerateRequest, GenerateResponse, GenerateSummary
from seodesc.api.services.container import ServiceContainer
from seodesc.worker.workflows import BatchOptions, BatchOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter(tags=["generate"])


@router.post("/generate", response_model=GenerateResponse, response_model_exclude_none=True)
async def generate_descriptions(
    body: GenerateRequest,
    container: ServiceContainer = Depends(get_container),
) -> GenerateResponse:
    """Generate descriptions for 1-10 pages.

    Always 200 once the provider check and validation pass; inspect
    ``results[].success`` for per-page outcomes.

    Raises:
        ProviderNotConfiguredError: requested model's provider has no key (503)
        ValidationError: page list out of bounds (400)
    """
    settings = container.settings
    llm = container.get_llm(body.model)

    options = BatchOptions(
        pages=body.pages,
        location=body.location or settings.default_location,
        language=body.language or settings.default_language,
        include_search_volume=body.include_search_volume,
        include_competitor_analysis=body.include_competitor_analysis,
        model=llm.model,
    )
    orchestrator = BatchOrchestrator(
        llm,
        dataforseo=container.dataforseo,
        competitor_analyzer=container.competitor_analyzer(),
        pricing=settings.pricing,
        max_concurrent=settings.max_concurrent,
        generation_max_retries=settings.generation_max_retries,
        min_words=settings.brand_min_words,
        max_words=settings.brand_max_words,
        brand_domain=settings.brand_domain,
    )

    batch = await orchestrator.process_batch(options=options)
    return GenerateResponse(
        results=batch.results,
        summary=GenerateSummary(
            total_pages=len(body.pages),
            successful_generations=batch.successful,
            usage=batch.summary,
        ),
    )
