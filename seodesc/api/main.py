"""SEO Description Generator - API Server

FastAPI application exposing batch description generation, search volume
lookup and competitor analysis.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from seodesc import __version__
from seodesc.api.core.config import Settings, load_settings
from seodesc.api.core.errors import (
    ProviderNotConfiguredError,
    RequestRateLimitError,
    ServiceError,
    ValidationError,
)
from seodesc.api.observability import configure_logging
from seodesc.api.routers import competitors, generate, health, search_volume
from seodesc.api.routers.dependencies import enforce_rate_limit
from seodesc.api.schemas.requests import ErrorResponse
from seodesc.api.services.container import ServiceContainer

logger = logging.getLogger(__name__)


def _error(status_code: int, error: str, message: str | None = None) -> JSONResponse:
    body = ErrorResponse(error=error, message=message)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def create_app(settings: Settings | None = None, container: ServiceContainer | None = None) -> FastAPI:
    """Application factory.

    Args:
        settings: Preloaded settings; read from the environment at start-up when omitted
        container: Prebuilt service container (tests inject fakes through it)
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        if getattr(app.state, "container", None) is None:
            app.state.container = ServiceContainer(settings or load_settings())
        active: ServiceContainer = app.state.container
        configure_logging(active.settings.log_level)

        logger.info("SEO Description Generator - API Server Starting")
        logger.info(
            "Configured services",
            extra={"services": active.service_status(), "environment": active.settings.environment},
        )

        yield

        logger.info("API Server shutting down...")

    app = FastAPI(
        title="SEO Description Generator API",
        description="Batch SEO page description generation with keyword and competitor research",
        version=__version__,
        lifespan=lifespan,
    )
    if container is None and settings is not None:
        container = ServiceContainer(settings)
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    for module in (health, generate, search_volume, competitors):
        app.include_router(module.router)
        # Legacy prefix kept for clients of the previous deployment, rate limited per client
        app.include_router(
            module.router,
            prefix="/api",
            include_in_schema=False,
            dependencies=[Depends(enforce_rate_limit)],
        )

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
        logger.warning("Rejected request", extra={"path": request.url.path, "reason": exc.message})
        return _error(400, "Invalid request", exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        first = exc.errors()[0] if exc.errors() else {}
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else first.get("msg")
        return _error(400, "Invalid request", message)

    @app.exception_handler(ProviderNotConfiguredError)
    async def not_configured_handler(request: Request, exc: ProviderNotConfiguredError) -> JSONResponse:
        logger.warning(
            "Provider not configured",
            extra={"path": request.url.path, "provider": exc.provider},
        )
        return _error(503, exc.message)

    @app.exception_handler(RequestRateLimitError)
    async def rate_limit_handler(request: Request, exc: RequestRateLimitError) -> JSONResponse:
        response = _error(429, "Too many requests", exc.message)
        response.headers["Retry-After"] = str(exc.retry_after)
        return response

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
        logger.error("Request failed", extra={"path": request.url.path, "error": exc.to_dict()})
        return _error(500, "Request failed", exc.message)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            f"Unhandled exception: {exc}",
            exc_info=True,
            extra={"path": request.url.path, "method": request.method},
        )
        return _error(500, "Internal server error", str(exc))

    return app


app = create_app()
