"""Health check router.

Reports which providers are configured; no outbound calls are made.
"""

import logging
from datetime import UTC, datetime

from fastapi import APIRouter, Depends

from seodesc.api.routers.dependencies import get_container
from seodesc.api.schemas.requests import HealthResponse, ServiceFlags
from seodesc.api.services.container import ServiceContainer

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(container: ServiceContainer = Depends(get_container)) -> HealthResponse:
    """Service availability.

    - ok: an LLM provider and DataForSEO are configured
    - partial: an LLM provider only
    - degraded: no LLM provider
    """
    services = container.service_status()
    has_ai = services["openai"] or services["gemini"]
    fully_functional = has_ai and services["dataforseo"]

    if fully_functional:
        status, message = "ok", "All services operational"
    elif has_ai:
        status, message = "partial", "AI services available, some features may be limited"
    else:
        status, message = "degraded", "No AI services configured. Please check environment variables."

    return HealthResponse(
        status=status,
        timestamp=datetime.now(UTC),
        services=ServiceFlags(
            data_for_seo=services["dataforseo"],
            open_ai=services["openai"],
            gemini=services["gemini"],
        ),
        message=message,
        environment=container.settings.environment,
    )
