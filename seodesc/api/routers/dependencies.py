"""Router dependencies."""

from fastapi import Request

from seodesc.api.services.container import ServiceContainer


def get_container(request: Request) -> ServiceContainer:
    """Service container created by the application lifespan."""
    container: ServiceContainer = request.app.state.container
    return container


async def enforce_rate_limit(request: Request) -> None:
    """Count the request against the caller's window.

    Raises:
        RequestRateLimitError: budget for this client is spent
    """
    client = request.client.host if request.client else "unknown"
    get_container(request).rate_limiter.hit(client)
