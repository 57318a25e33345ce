"""HTTP request and response bodies (camelCase on the wire)."""

from datetime import datetime
from typing import Literal

from pydantic import Field

from seodesc.api.llm.usage import UsageSummary
from seodesc.api.schemas.common import CamelModel
from seodesc.api.tools.schemas import SearchVolumeRecord
from seodesc.worker.workflows.schemas import PageResult

# =============================================================================
# Requests
# =============================================================================


class GenerateRequest(CamelModel):
    """Bounds on ``pages`` are enforced by the orchestrator, after the
    provider check, so an unconfigured provider reports 503 first."""

    pages: list[str] = Field(default_factory=list)
    location: int | None = None
    language: str | None = None
    include_competitor_analysis: bool = False
    include_search_volume: bool = True
    model: str | None = None


class SearchVolumeRequest(CamelModel):
    keywords: list[str] = Field(default_factory=list)
    location: int | None = None
    language: str | None = None


class AnalyzeCompetitorsRequest(CamelModel):
    keyword: str = ""
    location: int | None = None
    language: str | None = None
    model: str | None = None


# =============================================================================
# Responses
# =============================================================================


class GenerateSummary(CamelModel):
    total_pages: int
    successful_generations: int
    usage: UsageSummary


class GenerateResponse(CamelModel):
    success: bool = True
    results: list[PageResult]
    summary: GenerateSummary


class SearchVolumeResponse(CamelModel):
    success: bool = True
    data: list[SearchVolumeRecord]


class CompetitorAnalysisData(CamelModel):
    keyword: str
    total_results: int
    competitors_analyzed: int
    insights: str | None = None


class AnalyzeCompetitorsResponse(CamelModel):
    success: bool = True
    data: CompetitorAnalysisData


class ServiceFlags(CamelModel):
    data_for_seo: bool = Field(alias="dataForSEO")
    open_ai: bool = Field(alias="openAI")
    gemini: bool


class HealthResponse(CamelModel):
    status: Literal["ok", "partial", "degraded"]
    timestamp: datetime
    services: ServiceFlags
    message: str
    environment: str


class ErrorResponse(CamelModel):
    error: str
    message: str | None = None
