"""Fixtures for LLM client tests."""

from unittest.mock import MagicMock, patch

import pytest

from seodesc.api.llm import GeminiClient, OpenAIClient


@pytest.fixture
def openai_client() -> OpenAIClient:
    return OpenAIClient(api_key="sk-test", model="gpt-4o", max_retries=3)


@pytest.fixture
def openai_response() -> MagicMock:
    """Chat completion with one choice and usage."""
    response = MagicMock()
    response.choices = [MagicMock(message=MagicMock(content="Generated content"), finish_reason="stop")]
    response.usage = MagicMock(prompt_tokens=100, completion_tokens=50)
    response.model = "gpt-4o"
    return response


@pytest.fixture
def mock_genai():
    """Patch the google-genai module used by the Gemini client."""
    with patch("seodesc.api.llm.gemini.genai") as genai_module:
        yield genai_module


@pytest.fixture
def gemini_client(mock_genai) -> GeminiClient:
    return GeminiClient(api_key="gm-test", model="gemini-2.5-flash", max_retries=3, retry_base_delay=0.0)


@pytest.fixture
def gemini_payload() -> dict:
    """generateContent payload in the documented parts layout."""
    return {
        "candidates": [
            {
                "content": {"role": "model", "parts": [{"text": "Hello "}, {"text": "fans"}]},
                "finish_reason": "STOP",
            }
        ],
        "usage_metadata": {"prompt_token_count": 12, "candidates_token_count": 34},
    }
