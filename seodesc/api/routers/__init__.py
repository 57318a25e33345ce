"""HTTP routers."""

from . import competitors, generate, health, search_volume

__all__ = ["competitors", "generate", "health", "search_volume"]
