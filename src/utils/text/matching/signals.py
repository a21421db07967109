"""Signal extraction for lodging-name matching.

Three independent signals are read off a name, each driven by a YAML rule table
under ``src/resources/matching``:

- brands: chain brand ids (phrase patterns, word boundaries)
- key groups: location disambiguators (airport / station / center / waterfront)
- accommodation types: apartment / hostel / guesthouse (strong) and hotel-like (weak)

Patterns are compiled once and memoized; extraction itself is pure.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Optional

from src.utils.resource_loader import (
    load_accommodation_type_rules,
    load_brand_rules,
    load_key_group_rules,
)
from src.utils.text.normalize import normalize

STRONG = "strong"
WEAK = "weak"


def pattern_to_regex(pattern: str) -> re.Pattern:
    """'best western' -> \\bbest\\s+western\\b (case-insensitive)."""
    words = normalize(pattern).split()
    body = r"\s+".join(re.escape(w) for w in words)
    return re.compile(rf"\b{body}\b", re.IGNORECASE)


def _compile_all(patterns) -> tuple[re.Pattern, ...]:
    return tuple(pattern_to_regex(p) for p in (patterns or []) if normalize(str(p)))


@lru_cache(maxsize=1)
def _brand_matchers() -> tuple[tuple[str, tuple[re.Pattern, ...]], ...]:
    return tuple(
        (str(rule["id"]), _compile_all(rule.get("patterns")))
        for rule in load_brand_rules()
    )


@lru_cache(maxsize=1)
def _key_group_matchers() -> tuple[tuple[str, tuple[re.Pattern, ...], tuple[re.Pattern, ...]], ...]:
    rules = load_key_group_rules()
    return tuple(
        (str(g["id"]), _compile_all(g.get("strong")), _compile_all(g.get("weak")))
        for g in rules["groups"]
    )


@lru_cache(maxsize=1)
def _type_matchers() -> tuple[tuple[str, str, tuple[re.Pattern, ...]], ...]:
    rules = load_accommodation_type_rules()
    return tuple(
        (str(g["id"]), str(g.get("strength", WEAK)), _compile_all(g.get("patterns")))
        for g in rules["groups"]
    )


def _any_match(matchers: tuple[re.Pattern, ...], text: str) -> bool:
    return any(rx.search(text) for rx in matchers)


# ---------------------------------------------------------------------------
# Brands
# ---------------------------------------------------------------------------


def extract_brands(name: Optional[str]) -> frozenset[str]:
    """이름에서 브랜드 id 집합을 추출합니다. 여러 패턴이 같은 id로 모입니다."""
    text = normalize(name)
    if not text:
        return frozenset()
    return frozenset(bid for bid, matchers in _brand_matchers() if _any_match(matchers, text))


def is_brand_mismatch(query_brands: frozenset[str], candidate_brands: frozenset[str]) -> bool:
    return bool(query_brands) and not (query_brands & candidate_brands)


# ---------------------------------------------------------------------------
# Key groups
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class KeySignals:
    strong: frozenset[str] = frozenset()
    weak: frozenset[str] = frozenset()

    @property
    def any(self) -> frozenset[str]:
        return self.strong | self.weak


def extract_key_signals(name: Optional[str]) -> KeySignals:
    """그룹마다 strong 또는 weak 중 하나로만 분류합니다 (strong 우선)."""
    text = normalize(name)
    if not text:
        return KeySignals()

    strong: set[str] = set()
    weak: set[str] = set()
    for gid, strong_rx, weak_rx in _key_group_matchers():
        if _any_match(strong_rx, text):
            strong.add(gid)
        elif _any_match(weak_rx, text):
            weak.add(gid)
    return KeySignals(frozenset(strong), frozenset(weak))


def is_key_conflict(query: KeySignals, candidate: KeySignals) -> bool:
    return bool(query.strong) and bool(candidate.strong) and not (query.strong & candidate.strong)


def key_group_boost(query: KeySignals, candidate: KeySignals) -> tuple[float, frozenset[str]]:
    """(boost, union overlap) 반환. 양쪽 모두 strong이면 강한 가점."""
    cfg = load_key_group_rules()["boost"]
    strong_boost = float(cfg.get("strong", 0.12))
    weak_boost = float(cfg.get("weak", 0.06))
    cap = float(cfg.get("cap", 0.24))

    overlap = query.any & candidate.any
    boost = 0.0
    for gid in overlap:
        both_strong = gid in query.strong and gid in candidate.strong
        boost += strong_boost if both_strong else weak_boost
    return min(cap, boost), overlap


# ---------------------------------------------------------------------------
# Accommodation types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TypeSignals:
    groups: frozenset[str] = frozenset()
    strengths: dict[str, str] = field(default_factory=dict)

    @property
    def has_strong(self) -> bool:
        return any(self.strengths.get(g) == STRONG for g in self.groups)


def extract_type_groups(name: Optional[str]) -> TypeSignals:
    text = normalize(name)
    if not text:
        return TypeSignals()

    strengths: dict[str, str] = {}
    for gid, strength, matchers in _type_matchers():
        if _any_match(matchers, text):
            strengths[gid] = strength
    return TypeSignals(frozenset(strengths), strengths)


def type_adjustment(query: TypeSignals, candidate: TypeSignals) -> tuple[frozenset[str], float, float]:
    """(overlap, boost, penalty) 반환.

    유형이 한쪽에만 없으면 감점하지 않습니다. 유형 신호는 절대 hard mismatch가 아닙니다.
    """
    rules = load_accommodation_type_rules()
    match_boost = float(rules["boost"].get("match", 0.05))
    strong_penalty = float(rules["penalty"].get("strong", 0.18))
    weak_penalty = float(rules["penalty"].get("weak", 0.10))
    cap = float(rules["penalty"].get("cap", 0.20))

    if not query.groups or not candidate.groups:
        return frozenset(), 0.0, 0.0

    overlap = query.groups & candidate.groups
    if overlap:
        return overlap, min(cap, match_boost), 0.0

    if query.has_strong and candidate.has_strong:
        penalty = strong_penalty
    elif query.has_strong or candidate.has_strong:
        penalty = weak_penalty
    else:
        penalty = 0.0
    return overlap, 0.0, min(cap, penalty)
