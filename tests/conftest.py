"""Pytest configuration and fixtures for tests."""

import asyncio
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from seodesc.api.core.config import Settings  # noqa: E402
from seodesc.api.llm import LLMInterface, LLMResponse, TokenUsage  # noqa: E402


def make_words(count: int, word: str = "word") -> str:
    return " ".join([word] * count)


class FakeLLM(LLMInterface):
    """Scripted LLM client.

    ``reply`` may be:
    - a string returned on every call
    - a list consumed one item per call (Exception items are raised)
    - a callable ``(messages, metadata) -> str`` that may raise
    """

    def __init__(
        self,
        reply: Any = "",
        model: str = "gemini-2.5-flash",
        delay: float = 0.0,
        usage: TokenUsage | None = None,
    ) -> None:
        self.reply = reply
        self._model = model
        self.delay = delay
        self.usage = usage
        self.calls: list[dict[str, Any]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    @property
    def provider_name(self) -> str:
        return "fake"

    @property
    def model(self) -> str:
        return self._model

    async def generate(self, messages, system_prompt, config=None, metadata=None) -> LLMResponse:
        self.calls.append(
            {"messages": messages, "system_prompt": system_prompt, "config": config, "metadata": metadata}
        )
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            content = self._next(messages, metadata)
        finally:
            self.in_flight -= 1
        return LLMResponse(content=content, token_usage=self.usage, model=self._model, provider="fake")

    def _next(self, messages, metadata) -> str:
        if callable(self.reply):
            return self.reply(messages, metadata)
        if isinstance(self.reply, list):
            item = self.reply.pop(0)
            if isinstance(item, BaseException):
                raise item
            return item
        return self.reply


@pytest.fixture
def words() -> Callable[..., str]:
    """Build a text of exactly ``count`` words."""
    return make_words


@pytest.fixture
def fake_llm() -> Callable[..., FakeLLM]:
    """Factory for scripted LLM clients."""
    return FakeLLM


@pytest.fixture
def settings() -> Settings:
    """Fully configured settings with zero delays."""
    return Settings(
        openai_api_key="sk-test",
        gemini_api_key="gm-test",
        dataforseo_login="login",
        dataforseo_password="password",
        search_volume_poll_base_delay=0.0,
        search_volume_poll_step=0.0,
        content_fetch_stagger=0.0,
        environment="test",
    )


@pytest.fixture
def dataforseo_body() -> Callable[..., dict[str, Any]]:
    """Build a DataForSEO response envelope around ``result``."""

    def build(result: Any, task_status: int = 20000, task_id: str = "task-1") -> dict[str, Any]:
        return {
            "status_code": 20000,
            "status_message": "Ok.",
            "tasks_count": 1,
            "tasks": [
                {
                    "id": task_id,
                    "status_code": task_status,
                    "status_message": "Ok." if task_status == 20000 else "Task In Queue.",
                    "result": result,
                }
            ],
        }

    return build


@pytest.fixture
def mock_transport() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.MockTransport]:
    """Wrap a handler in ``httpx.MockTransport`` and record requests."""

    def build(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.MockTransport:
        def recording(request: httpx.Request) -> httpx.Response:
            transport.requests.append(request)
            return handler(request)

        transport = httpx.MockTransport(recording)
        transport.requests = []  # type: ignore[attr-defined]
        return transport

    return build
