"""Token Validator - re-check a cached token record against the current query.

Cached records are never trusted blindly: the current query (location suffix
stripped against the record's city/country) is rescored against the record's
property name. The domain tier is held to a stricter bar because one domain can
front several sister properties.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Union

from src.schemas.property_schema import TokenRecord
from src.utils.text.matching import (
    compute_confidence,
    domains_equivalent,
    score_name_match,
    strip_trailing_location_suffix,
)
from src.utils.url_utils import get_host_no_www

SOURCE_HIT_DOMAIN = "hit-domain"

DOMAIN_HIT_MIN_SCORE = 0.70
MIN_CONFIDENCE = 0.55


@dataclass(frozen=True)
class Valid:
    updates: dict[str, Any]
    confidence: float
    base_score: float


@dataclass(frozen=True)
class Invalid:
    reason: str
    confidence: float = 0.0
    base_score: float = 0.0
    details: Optional[dict[str, Any]] = field(default=None, compare=False)


ValidationOutcome = Union[Valid, Invalid]


def validate_cached_token(
    query: str,
    official_domain: Optional[str],
    record: TokenRecord,
    source: str,
) -> ValidationOutcome:
    candidate_name = record.property_name or ""
    if not candidate_name:
        return Invalid("missing_property_name")

    link_host = record.link_host or get_host_no_www(record.link)

    strip = strip_trailing_location_suffix(query, record.city, record.country)
    scored = score_name_match(strip.stripped, candidate_name, record.city, record.country)

    details = scored.to_dict()
    details.update(
        query_original=query,
        query_for_score=strip.stripped,
        location_suffix_stripped=strip.was_stripped,
    )

    domain_equal = bool(official_domain) and domains_equivalent(link_host, official_domain)
    domain_match = domain_equal and scored.core_overlap_any
    base_score = scored.base_score
    confidence = compute_confidence(domain_match, base_score, scored.hard_mismatch)

    if scored.hard_mismatch:
        return Invalid("hard_mismatch", confidence, base_score, details)

    if source == SOURCE_HIT_DOMAIN:
        if base_score < DOMAIN_HIT_MIN_SCORE:
            return Invalid(f"domain_hit_but_name_too_low:{base_score:.3f}", confidence, base_score, details)
        if not scored.core_overlap_any:
            return Invalid("domain_hit_without_core_overlap", confidence, base_score, details)
    elif confidence < MIN_CONFIDENCE:
        return Invalid(f"confidence_too_low:{confidence:.3f}", confidence, base_score, details)

    return Valid(
        updates={
            "link_host": link_host,
            "name_score": base_score,
            "confidence": confidence,
            "domain_match": domain_match,
            "core_overlap_any": scored.core_overlap_any,
            "match_details": details,
            "official_domain": official_domain or None,
        },
        confidence=confidence,
        base_score=base_score,
    )
