"""API routes package."""

from .health_routes import router as health_router
from .resolve_routes import router as resolve_router, get_cache_service, get_resolver, get_search_client
from .prefetch_routes import router as prefetch_router, get_prefetch_service

__all__ = [
    "health_router",
    "resolve_router",
    "prefetch_router",
    "get_cache_service",
    "get_resolver",
    "get_search_client",
    "get_prefetch_service",
]
