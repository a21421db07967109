"""Property Picker - choose the best candidate from an upstream result list.

Every candidate is scored against the query after stripping a trailing
location suffix that matches *that* candidate's city/country. Hard mismatches
are recorded as skipped diagnostics and never ranked. An optional ``alt_query``
(e.g. derived from a listing URL slug) may only raise the effective base score.
Ranking uses ``final_score = effective_base + domain_boost``; the first
candidate seen keeps a tie.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from src.schemas.property_schema import Candidate
from src.utils.text.matching import (
    compute_confidence,
    compute_domain_boost,
    domains_equivalent,
    score_name_match,
    strip_trailing_location_suffix,
)
from src.utils.url_utils import get_host_no_www

SUMMARY_LIMIT = 5


@dataclass
class PickResult:
    best: Optional[Candidate] = None
    best_score: float = -1.0
    best_name_score: float = 0.0
    best_domain_match: bool = False
    best_link_host: str = ""
    confidence: float = 0.0
    match_details: Optional[dict[str, Any]] = None
    all_candidates: list[dict[str, Any]] = field(default_factory=list)

    @property
    def hard_mismatch(self) -> bool:
        return bool(self.match_details and self.match_details.get("hard_mismatch"))

    @property
    def core_overlap_any(self) -> bool:
        return bool(self.match_details and self.match_details.get("core_overlap_any"))


def _skip_reason(details) -> str:
    if details.brand_mismatch:
        return "brand_mismatch"
    if details.key_conflict:
        return "key_conflict"
    return "hard_mismatch"


def pick_best_property(
    candidates: Sequence[Candidate],
    query: str,
    official_domain: Optional[str],
    alt_query: Optional[str] = None,
) -> PickResult:
    result = PickResult()
    if not candidates:
        return result

    alt_query = (alt_query or "").strip() or None

    for cand in candidates:
        strip = strip_trailing_location_suffix(query, cand.city, cand.country)
        main = score_name_match(strip.stripped, cand.name, cand.city, cand.country)

        details = main.to_dict()
        details.update(
            query_original=query,
            query_for_score=strip.stripped,
            location_suffix_stripped=strip.was_stripped,
            stripped_suffix=strip.stripped_suffix or None,
        )

        link_host = get_host_no_www(cand.link)
        domain_equal = bool(official_domain) and domains_equivalent(link_host, official_domain)
        domain_match = domain_equal and main.core_overlap_any

        if main.hard_mismatch:
            result.all_candidates.append({
                "name": cand.name,
                "city": cand.city,
                "skipped": True,
                "reason": _skip_reason(main),
                "details": details,
            })
            continue

        base_score = main.base_score
        alt_used = False
        alt_base_score = None
        if alt_query:
            alt = score_name_match(alt_query, cand.name, cand.city, cand.country)
            alt_base_score = alt.base_score
            if not alt.hard_mismatch and alt.base_score > base_score:
                base_score = alt.base_score
                alt_used = True

        details.update(
            alt_query=alt_query,
            alt_used=alt_used,
            alt_base_score=alt_base_score,
            main_base_score=main.base_score,
            effective_base_score=base_score,
        )

        domain_boost = compute_domain_boost(domain_match, base_score)
        final_score = base_score + domain_boost
        confidence = compute_confidence(domain_match, base_score, main.hard_mismatch)

        result.all_candidates.append({
            "name": cand.name,
            "city": cand.city,
            "skipped": False,
            "base_score": base_score,
            "main_base_score": main.base_score,
            "alt_base_score": alt_base_score,
            "alt_used": alt_used,
            "domain_match": domain_match,
            "domain_boost": domain_boost,
            "final_score": final_score,
            "confidence": confidence,
            "location_suffix_stripped": strip.was_stripped,
            "details": details,
        })

        if final_score > result.best_score:
            result.best = cand
            result.best_score = final_score
            result.best_name_score = base_score
            result.best_domain_match = domain_match
            result.best_link_host = link_host
            result.confidence = confidence
            result.match_details = details

    return result


def build_candidate_summary(
    all_candidates: Sequence[dict[str, Any]],
    limit: int = SUMMARY_LIMIT,
) -> list[dict[str, Any]]:
    """불확실 매칭 UI용 후보 요약 (토큰/점수 내역 제외, 최종 점수 내림차순)"""
    ranked = [c for c in all_candidates if not c.get("skipped")]
    ranked.sort(key=lambda c: c.get("final_score", 0.0), reverse=True)
    return [
        {
            "name": c.get("name"),
            "city": c.get("city"),
            "score": round(float(c.get("final_score", 0.0)), 3),
            "confidence": round(float(c.get("confidence", 0.0)), 3),
            "domain_match": bool(c.get("domain_match")),
        }
        for c in ranked[:limit]
    ]
