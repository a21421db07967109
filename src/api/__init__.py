"""API 엔드포인트 패키지 - export only."""

from .routes import (
    health_router,
    resolve_router,
    prefetch_router,
    get_cache_service,
    get_resolver,
    get_search_client,
    get_prefetch_service,
)

__all__ = [
    "health_router",
    "resolve_router",
    "prefetch_router",
    "get_cache_service",
    "get_resolver",
    "get_search_client",
    "get_prefetch_service",
]
