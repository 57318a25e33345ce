"""DataForSEO and competitor content schemas."""

from pydantic import Field

from seodesc.api.schemas.common import CamelModel


class MonthlySearch(CamelModel):
    year: int
    month: int
    volume: int = Field(default=0, ge=0)


class SearchVolumeRecord(CamelModel):
    """Search volume for one requested keyword, keyed by the caller's spelling."""

    keyword: str
    search_volume: int = Field(default=0, ge=0)
    competition: str = "Unknown"
    cpc: float = Field(default=0.0, ge=0)
    monthly_searches: list[MonthlySearch] = Field(default_factory=list)

    @classmethod
    def empty(cls, keyword: str) -> "SearchVolumeRecord":
        return cls(keyword=keyword)


class OrganicEntry(CamelModel):
    position: int
    title: str = ""
    description: str = ""
    url: str
    domain: str = ""
    breadcrumb: str | None = None
    is_featured: bool = False


class SerpResult(CamelModel):
    keyword: str
    total_results: int = 0
    organic_results: list[OrganicEntry] = Field(default_factory=list)


class CompetitorContent(CamelModel):
    url: str
    domain: str = ""
    title: str = ""
    meta_description: str = ""
    content: str = ""
    content_length: int = 0


class CompetitorFetchBatch(CamelModel):
    """Outcome of fetching a list of competitor URLs.

    ``entries`` holds one item per attempted URL (placeholders included);
    ``usable`` is the subset with enough text to send to the generator.
    """

    requested: int
    entries: list[CompetitorContent] = Field(default_factory=list)
    min_chars: int = 100

    @property
    def usable(self) -> list[CompetitorContent]:
        return [entry for entry in self.entries if entry.content_length >= self.min_chars]

    @property
    def failed(self) -> int:
        return sum(1 for entry in self.entries if entry.content_length == 0)
