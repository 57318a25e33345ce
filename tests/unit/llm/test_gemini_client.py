"""Gemini client unit tests."""

import pytest

from seodesc.api.core.errors import ErrorCategory, ProviderError, ProviderNotConfiguredError
from seodesc.api.llm import (
    GeminiClient,
    LLMAuthenticationError,
    LLMContentFilterError,
    LLMEmptyResponseError,
    LLMRateLimitError,
    LLMRequestConfig,
)


class TestGeminiClientInit:
    def test_requires_api_key(self, mock_genai):
        with pytest.raises(ProviderNotConfiguredError):
            GeminiClient(api_key="")

    def test_client_created_with_key(self, mock_genai):
        client = GeminiClient(api_key="gm-test")
        assert client.model == "gemini-2.5-flash"
        assert client.provider_name == "gemini"
        mock_genai.Client.assert_called_once_with(api_key="gm-test")


class TestGeminiClientGenerate:
    @pytest.mark.asyncio
    async def test_generate_parts_payload(self, gemini_client, mock_genai, gemini_payload):
        generate_content = mock_genai.Client.return_value.models.generate_content
        generate_content.return_value = gemini_payload

        result = await gemini_client.generate(
            [{"role": "user", "content": "Write"}],
            "System rules",
            LLMRequestConfig(temperature=0.3, max_tokens=400),
        )

        assert result.content == "Hello fans"
        assert result.token_usage.input == 12
        assert result.token_usage.output == 34
        assert result.finish_reason == "STOP"

        config = generate_content.call_args.kwargs["config"]
        assert config.temperature == 0.3
        assert config.max_output_tokens == 400
        assert config.top_p == 0.8
        assert config.top_k == 40

    @pytest.mark.asyncio
    async def test_missing_usage_metadata(self, gemini_client, mock_genai):
        mock_genai.Client.return_value.models.generate_content.return_value = {
            "candidates": [{"content": {"text": "plain text"}}]
        }

        result = await gemini_client.generate([{"role": "user", "content": "Write"}], "sys")

        assert result.content == "plain text"
        assert result.token_usage is None

    @pytest.mark.asyncio
    async def test_no_candidates_is_provider_error(self, gemini_client, mock_genai):
        mock_genai.Client.return_value.models.generate_content.return_value = {"candidates": []}

        with pytest.raises(LLMEmptyResponseError) as exc_info:
            await gemini_client.generate([{"role": "user", "content": "Write"}], "sys")

        assert isinstance(exc_info.value, ProviderError)
        assert "No candidates" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_safety_finish_reason(self, gemini_client, mock_genai):
        mock_genai.Client.return_value.models.generate_content.return_value = {
            "candidates": [{"content": {"parts": [{"text": "partial"}]}, "finish_reason": "SAFETY"}]
        }

        with pytest.raises(LLMContentFilterError):
            await gemini_client.generate([{"role": "user", "content": "Write"}], "sys")

    @pytest.mark.asyncio
    async def test_rate_limit_retried(self, gemini_client, mock_genai, gemini_payload):
        generate_content = mock_genai.Client.return_value.models.generate_content
        generate_content.side_effect = [Exception("429 RESOURCE_EXHAUSTED"), gemini_payload]

        result = await gemini_client.generate([{"role": "user", "content": "Write"}], "sys")

        assert result.content == "Hello fans"
        assert generate_content.call_count == 2

    @pytest.mark.asyncio
    async def test_rate_limit_exhausted(self, gemini_client, mock_genai):
        generate_content = mock_genai.Client.return_value.models.generate_content
        generate_content.side_effect = Exception("429 RESOURCE_EXHAUSTED")

        with pytest.raises(LLMRateLimitError) as exc_info:
            await gemini_client.generate([{"role": "user", "content": "Write"}], "sys")

        assert exc_info.value.category == ErrorCategory.RETRYABLE
        assert generate_content.call_count == 3

    @pytest.mark.asyncio
    async def test_auth_error_not_retried(self, gemini_client, mock_genai):
        generate_content = mock_genai.Client.return_value.models.generate_content
        generate_content.side_effect = Exception("API key not valid. Please pass a valid API key.")

        with pytest.raises(LLMAuthenticationError):
            await gemini_client.generate([{"role": "user", "content": "Write"}], "sys")

        assert generate_content.call_count == 1
