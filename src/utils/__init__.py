"""Utilities package

- hash_utils: 해시 / 컨텍스트 ID
- url_utils: 호스트 / Booking 슬러그
- query_params: 언어 / 통화 / 날짜 정규화
- text/: 이름 정규화 및 매칭
"""

# Hash utilities
from .hash_utils import hash_string, compute_context_id

# URL utilities
from .url_utils import get_host_no_www, extract_booking_listing, slug_to_query

# Request parameter utilities
from .query_params import (
    TravelHl,
    is_iso_date,
    nights_between,
    normalize_currency,
    normalize_hl,
    normalize_travel_hl,
)

__all__ = [
    # hash
    "hash_string",
    "compute_context_id",
    # url
    "get_host_no_www",
    "extract_booking_listing",
    "slug_to_query",
    # params
    "TravelHl",
    "is_iso_date",
    "nights_between",
    "normalize_currency",
    "normalize_hl",
    "normalize_travel_hl",
]
