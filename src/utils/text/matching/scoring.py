"""Name scoring engine and confidence model for lodging candidates.

``score_name_match`` is pure and deterministic; it never raises on empty input.
Hard mismatches (brand, key-group conflict) are computed independently of the soft
score and always override it in the picker and validator.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Optional

from src.utils.text.normalize import normalize, tokenize_for_match, tokenize_raw
from src.utils.text.matching.location import extract_core_tokens
from src.utils.text.matching.signals import (
    extract_brands,
    extract_key_signals,
    extract_type_groups,
    is_brand_mismatch,
    is_key_conflict,
    key_group_boost,
    type_adjustment,
)

CONTAINS_BOOST = 0.25
CONTAINS_MIN_LENGTH = 6
CONTAINS_MIN_RAW_TOKENS = 2

MIN_SCORE_FOR_DOMAIN_BOOST = 0.55
DOMAIN_BOOST_FACTOR = 0.9
DOMAIN_BOOST_CAP = 0.7

MAX_CONFIDENCE = 0.95
DOMAIN_CONFIDENCE_MIN_SCORE = 0.65
DOMAIN_CONFIDENCE_BONUS = 0.15


@dataclass(frozen=True)
class MatchDetails:
    """(query, candidate) 한 쌍의 전체 점수 내역."""

    query_brands: frozenset[str]
    candidate_brands: frozenset[str]
    brand_mismatch: bool

    query_key_strong: frozenset[str]
    query_key_weak: frozenset[str]
    candidate_key_strong: frozenset[str]
    candidate_key_weak: frozenset[str]
    key_overlap_any: frozenset[str]
    key_overlap_strong: frozenset[str]
    key_group_boost: float
    key_conflict: bool

    query_types: frozenset[str]
    candidate_types: frozenset[str]
    type_overlap: frozenset[str]
    type_boost: float
    type_penalty: float

    coverage: float
    contains_boost: float

    query_core_tokens: tuple[str, ...]
    candidate_core_tokens: tuple[str, ...]
    core_overlap_any: bool
    only_location_overlap: bool

    base_score: float
    hard_mismatch: bool

    def to_dict(self) -> dict[str, Any]:
        """JSON 직렬화 가능한 dict (set -> 정렬된 list)."""
        out: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, frozenset):
                value = sorted(value)
            elif isinstance(value, tuple):
                value = list(value)
            out[f.name] = value
        return out


def score_name_match(
    query: Optional[str],
    candidate: Optional[str],
    city: Optional[str] = None,
    country: Optional[str] = None,
) -> MatchDetails:
    """Score a (location-stripped) query against a candidate name.

    ``city``/``country`` are the candidate's; they only affect core-identity tokens.
    """
    q_norm = normalize(query)
    c_norm = normalize(candidate)

    # 1) brand
    q_brands = extract_brands(q_norm)
    c_brands = extract_brands(c_norm)
    brand_mismatch = is_brand_mismatch(q_brands, c_brands)

    # 2) key groups: conflict on strong only, boost on strong+weak
    q_key = extract_key_signals(q_norm)
    c_key = extract_key_signals(c_norm)
    key_conflict = is_key_conflict(q_key, c_key)
    key_boost, key_overlap_any = key_group_boost(q_key, c_key)

    # 3) token coverage
    q_tokens = tokenize_for_match(query)
    c_tokens = set(tokenize_for_match(candidate))
    hits = sum(1 for t in q_tokens if t in c_tokens)
    coverage = hits / len(q_tokens) if q_tokens else 0.0

    # 4) contains (candidate raw token count, not stopword-filtered)
    q_contains_c = (
        c_norm in q_norm
        and len(c_norm) >= CONTAINS_MIN_LENGTH
        and len(tokenize_raw(candidate)) >= CONTAINS_MIN_RAW_TOKENS
    )
    c_contains_q = q_norm in c_norm and len(q_norm) >= CONTAINS_MIN_LENGTH
    contains_boost = CONTAINS_BOOST if (q_contains_c or c_contains_q) else 0.0

    # 5) core identity
    q_core = extract_core_tokens(query, city, country)
    c_core = extract_core_tokens(candidate, city, country)
    core_overlap_any = bool(set(q_core) & set(c_core))
    only_location_overlap = hits > 0 and not core_overlap_any

    # 6) accommodation type
    q_types = extract_type_groups(q_norm)
    c_types = extract_type_groups(c_norm)
    type_overlap, type_boost, type_penalty = type_adjustment(q_types, c_types)

    base_score = max(0.0, coverage + contains_boost + key_boost + type_boost - type_penalty)

    return MatchDetails(
        query_brands=q_brands,
        candidate_brands=c_brands,
        brand_mismatch=brand_mismatch,
        query_key_strong=q_key.strong,
        query_key_weak=q_key.weak,
        candidate_key_strong=c_key.strong,
        candidate_key_weak=c_key.weak,
        key_overlap_any=key_overlap_any,
        key_overlap_strong=q_key.strong & c_key.strong,
        key_group_boost=key_boost,
        key_conflict=key_conflict,
        query_types=q_types.groups,
        candidate_types=c_types.groups,
        type_overlap=type_overlap,
        type_boost=type_boost,
        type_penalty=type_penalty,
        coverage=coverage,
        contains_boost=contains_boost,
        query_core_tokens=tuple(q_core),
        candidate_core_tokens=tuple(c_core),
        core_overlap_any=core_overlap_any,
        only_location_overlap=only_location_overlap,
        base_score=base_score,
        hard_mismatch=brand_mismatch or key_conflict,
    )


def compute_confidence(domain_match_eligible: bool, base_score: float, hard_mismatch: bool) -> float:
    if hard_mismatch:
        return 0.0
    conf = min(MAX_CONFIDENCE, base_score)
    if domain_match_eligible and base_score >= DOMAIN_CONFIDENCE_MIN_SCORE:
        conf = min(MAX_CONFIDENCE, conf + DOMAIN_CONFIDENCE_BONUS)
    return max(0.0, min(MAX_CONFIDENCE, conf))


def compute_domain_boost(domain_match_eligible: bool, base_score: float) -> float:
    if not domain_match_eligible or base_score < MIN_SCORE_FOR_DOMAIN_BOOST:
        return 0.0
    return min(DOMAIN_BOOST_CAP, DOMAIN_BOOST_FACTOR * base_score)


def _strip_www(host: Optional[str]) -> str:
    h = (host or "").strip().lower()
    return h[4:] if h.startswith("www.") else h


def domains_equivalent(a: Optional[str], b: Optional[str]) -> bool:
    """같은 도메인이거나 한쪽이 다른 쪽의 서브도메인."""
    da = _strip_www(a)
    db = _strip_www(b)
    if not da or not db:
        return False
    return da == db or da.endswith("." + db) or db.endswith("." + da)
