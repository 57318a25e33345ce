"""External data tools: DataForSEO and competitor page fetching."""

from .fetch import CompetitorContentFetcher, domain_of, extract_page_content, is_safe_url
from .schemas import (
    CompetitorContent,
    CompetitorFetchBatch,
    MonthlySearch,
    OrganicEntry,
    SearchVolumeRecord,
    SerpResult,
)
from .search import DataForSEOClient

__all__ = [
    "DataForSEOClient",
    "CompetitorContentFetcher",
    "domain_of",
    "extract_page_content",
    "is_safe_url",
    "CompetitorContent",
    "CompetitorFetchBatch",
    "MonthlySearch",
    "OrganicEntry",
    "SearchVolumeRecord",
    "SerpResult",
]
