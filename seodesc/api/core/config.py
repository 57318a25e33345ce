"""Application settings.

Settings are read from the environment (and .env) exactly once, at process
start, and handed to the service container by constructor injection.
"""

import json
import logging
import os
from collections.abc import Mapping
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, model_validator

from seodesc.api.constants import (
    DEFAULT_BRAND_DOMAIN,
    DEFAULT_COST_RATES,
    DEFAULT_MAX_WORDS,
    DEFAULT_MIN_WORDS,
    LANGUAGE_CODES,
    PLACEHOLDER_CREDENTIALS,
)

logger = logging.getLogger(__name__)


class Settings(BaseModel):
    """Runtime configuration for the whole service."""

    model_config = ConfigDict(frozen=True)

    # Generation providers
    openai_api_key: str | None = None
    gemini_api_key: str | None = None
    default_model: str = "gpt-4o"
    llm_max_retries: int = Field(default=2, ge=1, le=10)

    # DataForSEO
    dataforseo_login: str | None = None
    dataforseo_password: str | None = None
    dataforseo_base_url: str = "https://api.dataforseo.com"
    default_location: int = 2840
    default_language: str = "en"
    search_volume_mode: Literal["live", "task"] = "live"
    search_volume_poll_attempts: int = Field(default=5, ge=1, le=10)
    search_volume_poll_base_delay: float = Field(default=5.0, ge=0.0)
    search_volume_poll_step: float = Field(default=3.0, ge=0.0)

    # Batch processing
    max_concurrent: int = Field(default=3, ge=1)
    competitor_limit: int = Field(default=3, ge=1)
    generation_max_retries: int = Field(default=3, ge=1)

    # Competitor content fetch
    content_fetch_timeout: float = Field(default=10.0, gt=0.0)
    content_fetch_stagger: float = Field(default=1.0, ge=0.0)
    content_max_chars: int = Field(default=3000, ge=1)
    content_min_chars: int = Field(default=100, ge=0)

    # Brand
    brand_min_words: int = Field(default=DEFAULT_MIN_WORDS, ge=1)
    brand_max_words: int = Field(default=DEFAULT_MAX_WORDS, ge=1)
    brand_domain: str = DEFAULT_BRAND_DOMAIN

    # Cost rates per 1K tokens
    pricing: dict[str, dict[str, float]] = Field(default_factory=lambda: dict(DEFAULT_COST_RATES))

    # Inbound rate limit for the /api prefix
    rate_limit_max: int = Field(default=100, ge=1)
    rate_limit_window_seconds: float = Field(default=900.0, gt=0.0)

    log_level: str = "INFO"
    environment: str = "development"

    @model_validator(mode="after")
    def _check_bounds(self) -> "Settings":
        if self.brand_min_words > self.brand_max_words:
            raise ValueError("brand_min_words must not exceed brand_max_words")
        return self

    @property
    def has_openai(self) -> bool:
        return _is_configured(self.openai_api_key)

    @property
    def has_gemini(self) -> bool:
        return _is_configured(self.gemini_api_key)

    @property
    def has_dataforseo(self) -> bool:
        return _is_configured(self.dataforseo_login) and _is_configured(self.dataforseo_password)


def _is_configured(value: str | None) -> bool:
    return bool(value) and value not in PLACEHOLDER_CREDENTIALS


def resolve_language(language: str | None, default: str = "en") -> tuple[str, str]:
    """Split a language given as code or name into ``(code, name)``.

    Example:
        >>> resolve_language("English")
        ('en', 'English')
        >>> resolve_language("de")
        ('de', 'German')
    """
    if not language:
        language = default
    lowered = language.strip().lower()
    if lowered in LANGUAGE_CODES:
        return LANGUAGE_CODES[lowered], language.strip()
    for name, code in LANGUAGE_CODES.items():
        if code == lowered:
            return code, name.capitalize()
    # Unknown names pass through untouched
    return lowered, language.strip()


def _load_pricing(raw: str | None) -> dict[str, dict[str, float]]:
    pricing = dict(DEFAULT_COST_RATES)
    if not raw:
        return pricing
    try:
        overrides = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"MODEL_PRICING_JSON is not valid JSON: {e}") from e
    for model, rates in overrides.items():
        pricing[model] = {"input": float(rates["input"]), "output": float(rates["output"])}
    return pricing


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from the environment.

    Args:
        environ: Mapping to read instead of ``os.environ`` (tests)

    Returns:
        Settings: immutable configuration
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    def get(name: str) -> str | None:
        value = environ.get(name)
        return value if value not in (None, "") else None

    values: dict[str, object] = {
        "openai_api_key": get("OPENAI_API_KEY"),
        "gemini_api_key": get("GEMINI_API_KEY"),
        "dataforseo_login": get("DATAFORSEO_LOGIN"),
        "dataforseo_password": get("DATAFORSEO_PASSWORD"),
        "pricing": _load_pricing(get("MODEL_PRICING_JSON")),
    }

    optional = {
        "default_model": "DEFAULT_MODEL",
        "llm_max_retries": "LLM_MAX_RETRIES",
        "dataforseo_base_url": "DATAFORSEO_BASE_URL",
        "default_location": "DEFAULT_LOCATION_CODE",
        "default_language": "DEFAULT_LANGUAGE",
        "search_volume_mode": "SEARCH_VOLUME_MODE",
        "search_volume_poll_attempts": "SEARCH_VOLUME_POLL_ATTEMPTS",
        "search_volume_poll_base_delay": "SEARCH_VOLUME_POLL_BASE_DELAY",
        "search_volume_poll_step": "SEARCH_VOLUME_POLL_STEP",
        "max_concurrent": "MAX_CONCURRENT_PAGES",
        "competitor_limit": "COMPETITOR_ANALYSIS_LIMIT",
        "generation_max_retries": "GENERATION_MAX_RETRIES",
        "content_fetch_timeout": "CONTENT_FETCH_TIMEOUT",
        "content_fetch_stagger": "CONTENT_FETCH_STAGGER",
        "content_max_chars": "CONTENT_MAX_CHARS",
        "content_min_chars": "CONTENT_MIN_CHARS",
        "brand_min_words": "BRAND_MIN_WORDS",
        "brand_max_words": "BRAND_MAX_WORDS",
        "brand_domain": "BRAND_DOMAIN",
        "rate_limit_max": "RATE_LIMIT_MAX",
        "rate_limit_window_seconds": "RATE_LIMIT_WINDOW_SECONDS",
        "log_level": "LOG_LEVEL",
        "environment": "ENVIRONMENT",
    }
    for field_name, env_name in optional.items():
        value = get(env_name)
        if value is not None:
            values[field_name] = value

    settings = Settings.model_validate(values)
    logger.info(
        "Settings loaded",
        extra={
            "openai": settings.has_openai,
            "gemini": settings.has_gemini,
            "dataforseo": settings.has_dataforseo,
            "search_volume_mode": settings.search_volume_mode,
        },
    )
    return settings
