"""Search volume router."""

import logging

from fastapi import APIRouter, Depends

from seodesc.api.core.config import resolve_language
from seodesc.api.core.errors import ValidationError
from seodesc.api.routers.dependencies import get_container
from seodesc.api.schemas.requests import SearchVolumeRequest, SearchVolumeResponse
from seodesc.api.services.container import ServiceContainer

logger = logging.getLogger(__name__)

router = APIRouter(tags=["keywords"])


@router.post("/search-volume", response_model=SearchVolumeResponse)
async def get_search_volume(
    body: SearchVolumeRequest,
    container: ServiceContainer = Depends(get_container),
) -> SearchVolumeResponse:
    """Search volume for each keyword, in request order."""
    dataforseo = container.require_dataforseo()

    if not body.keywords:
        raise ValidationError("Please provide an array of keywords", field="keywords")

    settings = container.settings
    language_code, _ = resolve_language(body.language, settings.default_language)
    logger.info("Getting search volume data", extra={"keyword_count": len(body.keywords)})

    data = await dataforseo.get_search_volume(
        body.keywords,
        body.location or settings.default_location,
        language_code,
    )
    return SearchVolumeResponse(data=data)
