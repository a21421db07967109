"""Services implementation package.

ContextPrefetchService depends on the engine layer; import it from
``src.services.impl.context_prefetch_service`` directly.
"""

from .cache_service import CacheService
from .http_client import SharedHttpClient, get_shared_http_client, shutdown_shared_http_client
from .search_api_client import SearchApiClient, SearchCallResult, SearchParams

__all__ = [
    "CacheService",
    "SharedHttpClient",
    "get_shared_http_client",
    "shutdown_shared_http_client",
    "SearchApiClient",
    "SearchCallResult",
    "SearchParams",
]
