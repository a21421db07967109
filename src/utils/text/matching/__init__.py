"""Matching package: signals, location handling, scoring."""

from .location import LocationStrip, extract_core_tokens, strip_trailing_location_suffix
from .scoring import (
    MatchDetails,
    compute_confidence,
    compute_domain_boost,
    domains_equivalent,
    score_name_match,
)
from .signals import (
    KeySignals,
    TypeSignals,
    extract_brands,
    extract_key_signals,
    extract_type_groups,
)

__all__ = [
    "LocationStrip",
    "extract_core_tokens",
    "strip_trailing_location_suffix",
    "MatchDetails",
    "compute_confidence",
    "compute_domain_boost",
    "domains_equivalent",
    "score_name_match",
    "KeySignals",
    "TypeSignals",
    "extract_brands",
    "extract_key_signals",
    "extract_type_groups",
]
