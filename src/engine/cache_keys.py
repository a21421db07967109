"""Cache key schemas for token and search-context records.

- ``tok:{region}:n:{normalized name}``     name tier
- ``tok:{region}:d:{official domain}``     domain tier
- ``tok:{region}:b:{cc}:{booking slug}``  listing-slug tier (``cc`` omitted when unknown)
- ``ctx:{context id}``                     prefetched candidate list
"""

from dataclasses import dataclass
from typing import Optional

from src.utils.text.normalize import normalize_key


@dataclass(frozen=True)
class TokenCacheKeys:
    name: str
    domain: Optional[str] = None
    slug: Optional[str] = None

    @classmethod
    def build(
        cls,
        region: str,
        hotel_name: str,
        official_domain: Optional[str] = None,
        booking_slug: Optional[str] = None,
        booking_cc: Optional[str] = None,
    ) -> "TokenCacheKeys":
        region = (region or "").strip().lower()
        slug_id = None
        if booking_slug:
            slug_id = f"{booking_cc.lower()}:{booking_slug.lower()}" if booking_cc else booking_slug.lower()
        return cls(
            name=f"tok:{region}:n:{normalize_key(hotel_name)}",
            domain=f"tok:{region}:d:{official_domain.lower()}" if official_domain else None,
            slug=f"tok:{region}:b:{slug_id}" if slug_id else None,
        )


def context_key(context_id: str) -> str:
    return f"ctx:{context_id}"
