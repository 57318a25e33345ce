"""Competitor analysis router."""

import logging

from fastapi import APIRouter, Depends

from seodesc.api.core.config import resolve_language
from seodesc.api.core.errors import ValidationError
from seodesc.api.llm import UsageLedger
from seodesc.api.routers.dependencies import get_container
from seodesc.api.schemas.requests import AnalyzeCompetitorsRequest, AnalyzeCompetitorsResponse, CompetitorAnalysisData
from seodesc.api.services.competitor_analysis import CompetitorAnalyzer
from seodesc.api.services.container import ServiceContainer
from seodesc.api.services.description_writer import DescriptionWriter

logger = logging.getLogger(__name__)

router = APIRouter(tags=["competitors"])


@router.post("/analyze-competitors", response_model=AnalyzeCompetitorsResponse)
async def analyze_competitors(
    body: AnalyzeCompetitorsRequest,
    container: ServiceContainer = Depends(get_container),
) -> AnalyzeCompetitorsResponse:
    """SERP top results for one keyword, summarized into insights."""
    dataforseo = container.require_dataforseo()
    llm = container.get_llm(body.model)

    keyword = body.keyword.strip()
    if not keyword:
        raise ValidationError("Please provide a keyword", field="keyword")

    settings = container.settings
    language_code, _ = resolve_language(body.language, settings.default_language)
    logger.info("Analyzing competitors", extra={"keyword": keyword})

    analyzer = CompetitorAnalyzer(dataforseo, container.fetcher, settings.competitor_limit)
    writer = DescriptionWriter(llm, UsageLedger(), pricing=settings.pricing)
    analysis = await analyzer.analyze(
        keyword,
        body.location or settings.default_location,
        language_code,
        writer,
    )

    return AnalyzeCompetitorsResponse(
        data=CompetitorAnalysisData(
            keyword=keyword,
            total_results=analysis.total_results,
            competitors_analyzed=analysis.competitors_analyzed,
            insights=analysis.insights,
        )
    )
