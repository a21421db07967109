"""Location-aware helpers: trailing city/country suffix stripping and core identity tokens."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from src.utils.resource_loader import load_matching_vocabulary
from src.utils.text.normalize import tokenize_for_match

# Suffix after the last comma or dash ("Alda Hotel, Reykjavik", "Alda - Reykjavik City Centre")
_SUFFIX_RE = re.compile(r"[,\-–—]\s*([^,\-–—]+)$")


@dataclass(frozen=True)
class LocationStrip:
    stripped: str
    was_stripped: bool = False
    stripped_suffix: str = ""


def _qualifiers() -> frozenset[str]:
    return load_matching_vocabulary()["location_qualifiers"]


def strip_trailing_location_suffix(
    query: Optional[str],
    city: Optional[str],
    country: Optional[str],
) -> LocationStrip:
    """후보의 도시/국가와 일치하는 꼬리 접미사를 제거합니다.

    접미사의 모든 토큰이 도시(우선) 또는 국가 토큰이거나 위치 수식어여야 하고,
    최소 하나는 실제 도시/국가 토큰이어야 합니다. ("New York"이 "York"으로 잘리지 않음)
    """
    original = (query or "").strip()
    if not original or (not city and not country):
        return LocationStrip(original)

    m = _SUFFIX_RE.search(original)
    if not m:
        return LocationStrip(original)

    suffix = m.group(1).strip()
    suffix_tokens = tokenize_for_match(suffix)
    if not suffix_tokens:
        return LocationStrip(original)

    qualifiers = _qualifiers()
    for location in (city, country):
        if not location:
            continue
        location_tokens = set(tokenize_for_match(location))
        if not location_tokens:
            continue

        has_location_token = False
        all_match = True
        for tok in suffix_tokens:
            if tok in location_tokens:
                has_location_token = True
            elif tok not in qualifiers:
                all_match = False
                break

        if all_match and has_location_token:
            stripped = original[: m.start()].strip()
            return LocationStrip(stripped, True, suffix)

    return LocationStrip(original)


def extract_core_tokens(name: Optional[str], city: Optional[str], country: Optional[str]) -> list[str]:
    """매칭 토큰에서 도시/국가 토큰과 위치 수식어를 뺀 '정체성' 토큰."""
    excluded = set(_qualifiers())
    excluded.update(tokenize_for_match(city))
    excluded.update(tokenize_for_match(country))
    return [t for t in tokenize_for_match(name) if t not in excluded]
