"""Batch workflow schemas."""

from pydantic import ConfigDict, Field

from seodesc.api.llm.usage import UsageSummary
from seodesc.api.schemas.common import CamelModel
from seodesc.worker.helpers.schemas import GenerationUsage


class PageRequest(CamelModel):
    """One page of a batch, built from the batch's shared location/language."""

    model_config = ConfigDict(frozen=True)

    name: str
    location: int
    language: str


class BatchOptions(CamelModel):
    """One batch request: the page list plus options shared by every page."""

    pages: list[str] = Field(default_factory=list)
    location: int = 2840
    language: str = "en"
    include_search_volume: bool = True
    include_competitor_analysis: bool = False
    model: str = "gpt-4o"


class PageResult(CamelModel):
    """Final per-page outcome; exactly one per requested page."""

    page_name: str
    success: bool
    description: str | None = None
    word_count: int | None = None
    is_valid_length: bool | None = None
    search_volume: int | None = None
    usage: GenerationUsage | None = None
    has_competitor_insights: bool | None = None
    competitor_domains: list[str] | None = None
    seatpick_top3: bool | None = Field(default=None, alias="seatpickTop3")
    error: str | None = None


class BatchResult(CamelModel):
    results: list[PageResult]
    summary: UsageSummary

    @property
    def successful(self) -> int:
        return sum(1 for result in self.results if result.success)
