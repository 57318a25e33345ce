"""HTTP surface tests (FastAPI TestClient, providers faked)."""

import json
import logging

import httpx
import pytest
from fastapi.testclient import TestClient

from seodesc.api.core.config import Settings
from seodesc.api.main import create_app
from seodesc.api.services import ServiceContainer

PAGE_HTML = "<html><body><main>" + "The crowd roars as the teams walk out. " * 10 + "</main></body></html>"


def provider_handler(request: httpx.Request) -> httpx.Response:
    if request.url.path.endswith("/search_volume/live"):
        keywords = json.loads(request.content)[0]["keywords"]
        result = [{"keyword": k, "search_volume": 50000, "competition": "HIGH", "cpc": 1.25} for k in keywords[:1]]
        return httpx.Response(200, json={"status_code": 20000, "tasks": [{"status_code": 20000, "result": result}]})
    if request.url.path.endswith("/organic/live/advanced"):
        items = [
            {"type": "organic", "rank_absolute": 1, "url": "https://www.stubhub.com/arsenal"},
            {"type": "organic", "rank_absolute": 2, "url": "https://seatpick.com/arsenal"},
        ]
        result = [{"se_results_count": 5000, "items": items}]
        return httpx.Response(200, json={"status_code": 20000, "tasks": [{"status_code": 20000, "result": result}]})
    return httpx.Response(200, html=PAGE_HTML)


@pytest.fixture
def make_client(settings, fake_llm, words):
    """TestClient over a container with a scripted LLM and mocked HTTP."""

    def build(app_settings: Settings | None = None, handler=provider_handler, register: bool = True):
        container = ServiceContainer(app_settings or settings, http_transport=httpx.MockTransport(handler))
        if register:

            def reply(messages, metadata):
                if metadata.purpose == "competitor_analysis":
                    return "- Competitors cover seating plans"
                return words(400)

            container.register_llm("gpt-4o", fake_llm(reply=reply))
        return TestClient(create_app(container=container))

    return build


class TestHealth:
    def test_ok(self, make_client):
        response = make_client().get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["services"] == {"dataForSEO": True, "openAI": True, "gemini": True}
        assert body["environment"] == "test"
        assert "timestamp" in body

    def test_partial(self, make_client):
        body = make_client(Settings(openai_api_key="sk-test")).get("/health").json()

        assert body["status"] == "partial"
        assert body["message"] == "AI services available, some features may be limited"

    def test_degraded(self, make_client):
        body = make_client(Settings(), register=False).get("/health").json()

        assert body["status"] == "degraded"
        assert body["services"] == {"dataForSEO": False, "openAI": False, "gemini": False}

    def test_api_prefix(self, make_client):
        assert make_client().get("/api/health").status_code == 200


class TestGenerate:
    def test_success(self, make_client):
        response = make_client().post("/generate", json={"pages": ["Arsenal tickets", "Coldplay tickets"]})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert [r["pageName"] for r in body["results"]] == ["Arsenal tickets", "Coldplay tickets"]
        first = body["results"][0]
        assert first["success"] is True
        assert first["wordCount"] == 400
        assert first["isValidLength"] is True
        assert first["searchVolume"] == 50000
        assert "error" not in first
        assert body["summary"]["totalPages"] == 2
        assert body["summary"]["successfulGenerations"] == 2
        assert body["summary"]["usage"]["requestCount"] == 2

    def test_competitor_analysis(self, make_client):
        response = make_client().post(
            "/generate",
            json={"pages": ["Arsenal tickets"], "includeSearchVolume": False, "includeCompetitorAnalysis": True},
        )

        result = response.json()["results"][0]
        assert result["hasCompetitorInsights"] is True
        assert result["competitorDomains"] == ["stubhub.com", "seatpick.com"]
        assert result["seatpickTop3"] is True

    def test_provider_not_configured(self, make_client):
        response = make_client(Settings(), register=False).post("/generate", json={"pages": ["Arsenal tickets"]})

        assert response.status_code == 503
        assert response.json()["error"] == "OpenAI API key not configured"

    def test_gemini_not_configured(self, make_client):
        response = make_client(Settings(openai_api_key="sk-test"), register=False).post(
            "/generate", json={"pages": ["Arsenal tickets"], "model": "gemini-2.5-flash"}
        )

        assert response.status_code == 503
        assert response.json()["error"] == "Gemini API key not configured"

    @pytest.mark.parametrize("pages", [[], [f"page {i}" for i in range(11)]])
    def test_page_bounds(self, make_client, pages):
        response = make_client().post("/generate", json={"pages": pages})

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request"

    def test_malformed_body(self, make_client):
        response = make_client().post("/generate", json={"pages": "Arsenal tickets"})

        assert response.status_code == 400

    def test_api_prefix(self, make_client):
        response = make_client().post("/api/generate", json={"pages": ["Arsenal tickets"], "includeSearchVolume": False})
        assert response.status_code == 200


class TestSearchVolume:
    def test_success(self, make_client):
        response = make_client().post("/search-volume", json={"keywords": ["Arsenal Tickets", "Unknown"]})

        assert response.status_code == 200
        data = response.json()["data"]
        assert [d["keyword"] for d in data] == ["Arsenal Tickets", "Unknown"]
        assert data[0]["searchVolume"] == 50000
        assert data[1]["searchVolume"] == 0

    def test_empty_keywords(self, make_client):
        response = make_client().post("/search-volume", json={"keywords": []})

        assert response.status_code == 400
        assert response.json()["message"] == "Please provide an array of keywords"

    def test_not_configured(self, make_client):
        response = make_client(Settings(openai_api_key="sk-test")).post("/search-volume", json={"keywords": ["a"]})

        assert response.status_code == 503

    def test_upstream_failure(self, make_client):
        client = make_client(handler=lambda request: httpx.Response(500, json={"status_message": "Internal Error"}))

        response = client.post("/search-volume", json={"keywords": ["a"]})

        assert response.status_code == 500
        assert "Internal Error" in response.json()["message"]


class TestAnalyzeCompetitors:
    def test_success(self, make_client):
        response = make_client().post("/analyze-competitors", json={"keyword": "arsenal tickets"})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data == {
            "keyword": "arsenal tickets",
            "totalResults": 5000,
            "competitorsAnalyzed": 2,
            "insights": "- Competitors cover seating plans",
        }

    def test_missing_keyword(self, make_client):
        response = make_client().post("/analyze-competitors", json={"keyword": "  "})

        assert response.status_code == 400


class TestRateLimit:
    def test_api_prefix_limited_per_client(self, make_client, settings):
        client = make_client(settings.model_copy(update={"rate_limit_max": 2}))

        assert client.get("/api/health").status_code == 200
        assert client.get("/api/health").status_code == 200
        response = client.get("/api/health")

        assert response.status_code == 429
        assert response.json()["error"] == "Too many requests"
        assert int(response.headers["retry-after"]) > 0

    def test_root_paths_not_limited(self, make_client, settings):
        client = make_client(settings.model_copy(update={"rate_limit_max": 1}))

        statuses = [client.get("/health").status_code for _ in range(3)]

        assert statuses == [200, 200, 200]


def test_lifespan_configures_logging(settings):
    seodesc_logger = logging.getLogger("seodesc")
    handlers = list(seodesc_logger.handlers)
    try:
        with TestClient(create_app(settings=settings)) as client:
            assert client.get("/health").json()["status"] == "ok"
        assert any(h not in handlers for h in seodesc_logger.handlers)
    finally:
        seodesc_logger.handlers = handlers
        seodesc_logger.propagate = True
