"""Competitor analysis chain

SERP lookup -> top-N URLs -> page fetch -> insight summarization.
"""

import logging

from pydantic import Field

from seodesc.api.schemas.common import CamelModel
from seodesc.api.tools import CompetitorContentFetcher, DataForSEOClient, domain_of

from .description_writer import DescriptionWriter

logger = logging.getLogger(__name__)


class CompetitorAnalysis(CamelModel):
    keyword: str
    total_results: int = 0
    competitor_domains: list[str] = Field(default_factory=list)
    competitors_analyzed: int = 0
    insights: str | None = None


def ranks_in_top(domains: list[str], brand_domain: str) -> bool:
    """True if any domain contains the brand domain (case-insensitive).

    Example:
        >>> ranks_in_top(["SeatPick.com", "stubhub.com"], "seatpick.com")
        True
    """
    brand = brand_domain.lower()
    return any(brand in domain.lower() for domain in domains)


class CompetitorAnalyzer:
    """Runs the competitor chain for one keyword."""

    def __init__(
        self,
        dataforseo: DataForSEOClient,
        fetcher: CompetitorContentFetcher,
        limit: int = 3,
    ) -> None:
        self.dataforseo = dataforseo
        self.fetcher = fetcher
        self.limit = limit

    async def analyze(
        self,
        keyword: str,
        location: int,
        language_code: str,
        writer: DescriptionWriter,
    ) -> CompetitorAnalysis:
        """Analyze the top-ranking pages for ``keyword``.

        Failures after the SERP lookup keep the SERP domains with no insights.

        Raises:
            ProviderError: SERP lookup failed
        """
        serp = await self.dataforseo.get_serp_results(keyword, location, language_code)
        top = serp.organic_results[: self.limit]
        urls = [entry.url for entry in top]
        domains = [domain_of(entry.url) or entry.domain.lower().removeprefix("www.") for entry in top]

        try:
            fetched = await self.fetcher.fetch_many(urls, self.limit)
            usable = fetched.usable
            insights = await writer.analyze_competitor_content(keyword, usable)
        except Exception as e:
            # SERP domains still drive the ranking signal
            logger.warning(
                "Competitor content step failed, keeping SERP domains",
                exc_info=True,
                extra={"keyword": keyword, "domains": domains, "error": str(e)},
            )
            return CompetitorAnalysis(keyword=keyword, total_results=serp.total_results, competitor_domains=domains)

        logger.info(
            "Competitor analysis chain finished",
            extra={
                "keyword": keyword,
                "domains": domains,
                "attempted": fetched.requested,
                "usable": len(usable),
                "has_insights": insights is not None,
            },
        )
        return CompetitorAnalysis(
            keyword=keyword,
            total_results=serp.total_results,
            competitor_domains=domains,
            competitors_analyzed=len(usable),
            insights=insights,
        )
