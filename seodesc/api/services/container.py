"""Service container

Long-lived collaborators built once from Settings at start-up and handed
to request handlers; nothing here reads the environment.
"""

import logging

import httpx

from seodesc.api.core.config import Settings
from seodesc.api.core.errors import ProviderNotConfiguredError
from seodesc.api.core.rate_limit import RateLimiter
from seodesc.api.llm import GeminiClient, LLMInterface, OpenAIClient, provider_for_model
from seodesc.api.tools import CompetitorContentFetcher, DataForSEOClient

from .competitor_analysis import CompetitorAnalyzer

logger = logging.getLogger(__name__)


class ServiceContainer:
    """Holds provider clients for the lifetime of the process.

    Args:
        settings: Application settings
        http_transport: httpx transport shared by DataForSEO and page
            fetches (tests inject ``httpx.MockTransport``)
    """

    def __init__(self, settings: Settings, http_transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.settings = settings
        self._llm_clients: dict[str, LLMInterface] = {}

        self.dataforseo: DataForSEOClient | None = None
        if settings.has_dataforseo:
            self.dataforseo = DataForSEOClient(
                login=settings.dataforseo_login,
                password=settings.dataforseo_password,
                base_url=settings.dataforseo_base_url,
                mode=settings.search_volume_mode,
                poll_attempts=settings.search_volume_poll_attempts,
                poll_base_delay=settings.search_volume_poll_base_delay,
                poll_step=settings.search_volume_poll_step,
                transport=http_transport,
            )

        self.fetcher = CompetitorContentFetcher(
            timeout=settings.content_fetch_timeout,
            stagger=settings.content_fetch_stagger,
            max_chars=settings.content_max_chars,
            min_chars=settings.content_min_chars,
            transport=http_transport,
        )

        self.rate_limiter = RateLimiter(settings.rate_limit_max, settings.rate_limit_window_seconds)

        logger.info("Service container initialized", extra=self.service_status())

    def service_status(self) -> dict[str, bool]:
        return {
            "openai": self.settings.has_openai,
            "gemini": self.settings.has_gemini,
            "dataforseo": self.dataforseo is not None,
        }

    def register_llm(self, model: str, client: LLMInterface) -> None:
        """Install a client for ``model`` (tests and custom providers)."""
        self._llm_clients[model] = client

    def get_llm(self, model: str | None = None) -> LLMInterface:
        """LLM client for ``model``, created once per model.

        Raises:
            ProviderNotConfiguredError: the model's provider has no API key
        """
        model = model or self.settings.default_model
        if model in self._llm_clients:
            return self._llm_clients[model]

        provider = provider_for_model(model)
        client: LLMInterface
        if provider == "gemini":
            if not self.settings.has_gemini:
                raise ProviderNotConfiguredError(
                    "Gemini API key not configured",
                    provider="gemini",
                    missing_config=["GEMINI_API_KEY"],
                )
            client = GeminiClient(
                api_key=self.settings.gemini_api_key,
                model=model,
                max_retries=self.settings.llm_max_retries,
            )
        else:
            if not self.settings.has_openai:
                raise ProviderNotConfiguredError(
                    "OpenAI API key not configured",
                    provider="openai",
                    missing_config=["OPENAI_API_KEY"],
                )
            client = OpenAIClient(
                api_key=self.settings.openai_api_key,
                model=model,
                max_retries=self.settings.llm_max_retries,
            )

        self._llm_clients[model] = client
        return client

    def require_dataforseo(self) -> DataForSEOClient:
        """
        Raises:
            ProviderNotConfiguredError: DataForSEO credentials missing
        """
        if self.dataforseo is None:
            raise ProviderNotConfiguredError(
                "DataForSEO credentials not configured",
                provider="dataforseo",
                missing_config=["DATAFORSEO_LOGIN", "DATAFORSEO_PASSWORD"],
            )
        return self.dataforseo

    def competitor_analyzer(self) -> CompetitorAnalyzer | None:
        if self.dataforseo is None:
            return None
        return CompetitorAnalyzer(self.dataforseo, self.fetcher, self.settings.competitor_limit)
