"""Batch orchestrator tests."""

import json

import httpx
import pytest

from seodesc.api.core.errors import ValidationError
from seodesc.api.llm import TokenUsage
from seodesc.api.services import CompetitorAnalyzer
from seodesc.api.tools import CompetitorContentFetcher, DataForSEOClient
from seodesc.worker.workflows import BatchOptions, BatchOrchestrator

PAGE_HTML = "<html><body><main>" + "Supporters sing all match long at the ground. " * 10 + "</main></body></html>"


def page_of(messages) -> str:
    """Page name quoted in the description prompt."""
    content = messages[0]["content"]
    return content.split('"')[1]


def dataforseo_handler(volumes: dict[str, int], serp_urls: list[str]):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/search_volume/live"):
            task = json.loads(request.content)[0]
            result = [
                {"keyword": k, "search_volume": volumes[k], "competition": "HIGH", "cpc": 1.25}
                for k in task["keywords"]
                if k in volumes
            ]
            body = {"status_code": 20000, "tasks": [{"status_code": 20000, "result": result}]}
            return httpx.Response(200, json=body)
        if request.url.path.endswith("/organic/live/advanced"):
            items = [{"type": "organic", "rank_absolute": i, "url": u} for i, u in enumerate(serp_urls, start=1)]
            body = {"status_code": 20000, "tasks": [{"status_code": 20000, "result": [{"items": items}]}]}
            return httpx.Response(200, json=body)
        return httpx.Response(200, html=PAGE_HTML)

    return handler


class TestValidation:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("pages", [[], [f"page {i}" for i in range(11)], ["ok", "  "]])
    async def test_rejected_before_processing(self, fake_llm, pages):
        llm = fake_llm(reply="unused")

        with pytest.raises(ValidationError):
            await BatchOrchestrator(llm).process_batch(pages, BatchOptions())
        assert llm.calls == []

    @pytest.mark.asyncio
    async def test_ten_pages_accepted(self, fake_llm, words):
        llm = fake_llm(reply=words(400))
        pages = [f"page {i}" for i in range(10)]

        result = await BatchOrchestrator(llm).process_batch(pages, BatchOptions(include_search_volume=False))

        assert len(result.results) == 10

    @pytest.mark.asyncio
    async def test_pages_read_from_options(self, fake_llm, words):
        llm = fake_llm(reply=words(400))
        options = BatchOptions(pages=["Arsenal tickets", "Coldplay tickets"], include_search_volume=False)

        result = await BatchOrchestrator(llm).process_batch(options=options)

        assert [r.page_name for r in result.results] == ["Arsenal tickets", "Coldplay tickets"]

    @pytest.mark.asyncio
    async def test_options_pages_validated(self, fake_llm):
        llm = fake_llm(reply="unused")

        with pytest.raises(ValidationError):
            await BatchOrchestrator(llm).process_batch(options=BatchOptions())
        assert llm.calls == []


class TestProcessBatch:
    @pytest.mark.asyncio
    async def test_results_in_input_order_with_bounded_concurrency(self, fake_llm, words):
        llm = fake_llm(reply=words(400), delay=0.01, usage=TokenUsage(input=100, output=500))
        pages = [f"Event {i}" for i in range(7)]

        result = await BatchOrchestrator(llm, max_concurrent=3).process_batch(
            pages, BatchOptions(include_search_volume=False)
        )

        assert [r.page_name for r in result.results] == pages
        assert all(r.success and r.is_valid_length for r in result.results)
        assert llm.max_in_flight <= 3
        assert llm.max_in_flight > 1
        assert result.summary.request_count == 7
        assert result.summary.total_tokens == 7 * 600
        assert result.successful == 7

    @pytest.mark.asyncio
    async def test_partial_failure_isolated(self, fake_llm, words):
        """Page 3 fails on every attempt; the other pages still succeed."""

        def reply(messages, metadata):
            if page_of(messages) == "Page 3":
                raise RuntimeError("generator exploded")
            return words(400)

        llm = fake_llm(reply=reply)
        pages = [f"Page {i}" for i in range(1, 6)]

        result = await BatchOrchestrator(llm, generation_max_retries=3).process_batch(
            pages, BatchOptions(include_search_volume=False)
        )

        assert len(result.results) == 5
        assert [r.success for r in result.results] == [True, True, False, True, True]
        failed = result.results[2]
        assert failed.page_name == "Page 3"
        assert failed.error == "generator exploded"
        assert failed.description is None
        page3_calls = [c for c in llm.calls if page_of(c["messages"]) == "Page 3"]
        assert len(page3_calls) == 3

    @pytest.mark.asyncio
    async def test_length_violation_is_soft(self, fake_llm, words):
        llm = fake_llm(reply=words(120))

        result = await BatchOrchestrator(llm, generation_max_retries=3).process_batch(
            ["Short page"], BatchOptions(include_search_volume=False)
        )

        page = result.results[0]
        assert page.success
        assert page.word_count == 120
        assert page.is_valid_length is False
        assert len(llm.calls) == 3
        assert result.summary.request_count == 3

    @pytest.mark.asyncio
    async def test_search_volume_enrichment(self, fake_llm, words, mock_transport):
        transport = mock_transport(dataforseo_handler({"arsenal tickets": 50000}, []))
        dataforseo = DataForSEOClient("login", "password", transport=transport)
        llm = fake_llm(reply=words(400))

        result = await BatchOrchestrator(llm, dataforseo=dataforseo).process_batch(
            ["Arsenal tickets"], BatchOptions(include_search_volume=True)
        )

        page = result.results[0]
        assert page.search_volume == 50000
        assert "about 50,000 monthly searches (competition: HIGH, CPC: $1.25)" in llm.calls[0]["messages"][0]["content"]

    @pytest.mark.asyncio
    async def test_search_volume_failure_is_not_fatal(self, fake_llm, words, mock_transport):
        transport = mock_transport(lambda request: httpx.Response(500, json={"status_message": "down"}))
        dataforseo = DataForSEOClient("login", "password", transport=transport)

        result = await BatchOrchestrator(fake_llm(reply=words(400)), dataforseo=dataforseo).process_batch(
            ["Arsenal tickets"], BatchOptions(include_search_volume=True)
        )

        assert result.results[0].success
        assert result.results[0].search_volume is None

    @pytest.mark.asyncio
    async def test_unconfigured_subfetches_skipped(self, fake_llm, words):
        result = await BatchOrchestrator(fake_llm(reply=words(400))).process_batch(
            ["Arsenal tickets"],
            BatchOptions(include_search_volume=True, include_competitor_analysis=True),
        )

        page = result.results[0]
        assert page.success
        assert page.search_volume is None
        assert page.has_competitor_insights is False
        assert page.seatpick_top3 is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("serp_urls", "expected"),
        [
            (["https://www.stubhub.com/a", "https://www.seatpick.com/a", "https://viagogo.com/a"], True),
            (["https://www.stubhub.com/a", "https://viagogo.com/a", "https://ticketmaster.com/a"], False),
        ],
    )
    async def test_competitor_analysis_and_top3_signal(self, fake_llm, words, mock_transport, serp_urls, expected):
        transport = mock_transport(dataforseo_handler({}, serp_urls))
        dataforseo = DataForSEOClient("login", "password", transport=transport)
        analyzer = CompetitorAnalyzer(dataforseo, CompetitorContentFetcher(stagger=0.0, transport=transport))

        def reply(messages, metadata):
            if metadata.purpose == "competitor_analysis":
                return "- Competitors all list seating plans"
            return words(400)

        llm = fake_llm(reply=reply)
        result = await BatchOrchestrator(llm, dataforseo=dataforseo, competitor_analyzer=analyzer).process_batch(
            ["Arsenal tickets"],
            BatchOptions(include_search_volume=False, include_competitor_analysis=True),
        )

        page = result.results[0]
        assert page.has_competitor_insights
        assert page.seatpick_top3 is expected
        assert len(page.competitor_domains) == 3
        assert result.summary.request_count == 2
        description_call = next(c for c in llm.calls if c["metadata"].purpose == "description")
        assert "- Competitors all list seating plans" in description_call["messages"][0]["content"]

    @pytest.mark.asyncio
    async def test_top3_signal_survives_summary_failure(self, fake_llm, words, mock_transport):
        serp_urls = ["https://www.seatpick.com/a", "https://www.stubhub.com/a"]
        transport = mock_transport(dataforseo_handler({}, serp_urls))
        dataforseo = DataForSEOClient("login", "password", transport=transport)
        analyzer = CompetitorAnalyzer(dataforseo, CompetitorContentFetcher(stagger=0.0, transport=transport))

        def reply(messages, metadata):
            if metadata.purpose == "competitor_analysis":
                raise RuntimeError("connection reset")
            return words(400)

        result = await BatchOrchestrator(
            fake_llm(reply=reply), dataforseo=dataforseo, competitor_analyzer=analyzer
        ).process_batch(["Arsenal tickets"], BatchOptions(include_search_volume=False, include_competitor_analysis=True))

        page = result.results[0]
        assert page.success
        assert page.seatpick_top3 is True
        assert page.competitor_domains == ["seatpick.com", "stubhub.com"]
        assert not page.has_competitor_insights

    @pytest.mark.asyncio
    async def test_camel_case_result(self, fake_llm, words):
        result = await BatchOrchestrator(fake_llm(reply=words(400))).process_batch(
            ["Arsenal tickets"], BatchOptions(include_search_volume=False)
        )

        data = result.results[0].to_json_dict()
        assert data["pageName"] == "Arsenal tickets"
        assert data["isValidLength"] is True
        assert data["seatpickTop3"] is False
        assert "error" not in data
