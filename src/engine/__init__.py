"""Engine Layer - Property Token Resolution

This module provides the core engine layer, implementing:
- PropertyResolver: cache-first resolution entry point (ctx → domain → slug → name → live)
- pick_best_property: candidate ranking with hard-mismatch filtering
- validate_cached_token: re-validation of cached token records
- ResolutionResult: Standardized result format
- CacheAdapter: typed records over the cache service
- DeferredWriter: fire-and-forget cache writes
"""

from .cache_adapter import CacheAdapter
from .cache_keys import TokenCacheKeys, context_key
from .deferred import DeferredWriter, get_deferred_writer
from .picker import PickResult, build_candidate_summary, pick_best_property
from .resolver import PropertyResolver, ResolveQuery
from .result import CacheDetail, ResolutionResult, ResolutionStatus
from .validator import Invalid, Valid, validate_cached_token

__all__ = [
    "PropertyResolver",
    "ResolveQuery",
    "ResolutionResult",
    "ResolutionStatus",
    "CacheDetail",
    "CacheAdapter",
    "TokenCacheKeys",
    "context_key",
    "DeferredWriter",
    "get_deferred_writer",
    "PickResult",
    "pick_best_property",
    "build_candidate_summary",
    "Valid",
    "Invalid",
    "validate_cached_token",
]
