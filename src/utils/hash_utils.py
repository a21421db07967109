"""해싱 유틸리티"""
import hashlib
from typing import Optional

from src.utils.text.normalize import normalize_key

CONTEXT_ID_LENGTH = 16


def hash_string(text: str) -> str:
    """
    문자열을 MD5 해시로 변환

    Args:
        text: 해시할 문자열

    Returns:
        MD5 해시 문자열
    """
    return hashlib.md5(text.encode()).hexdigest()


def compute_context_id(
    gl: str,
    hl_key: str,
    query: str,
    check_in: Optional[str],
    check_out: Optional[str],
    adults: Optional[int],
    currency: Optional[str],
) -> str:
    """
    검색 컨텍스트 ID 생성

    같은 (지역, 언어, 호텔명, 날짜, 인원, 통화) 조합은 항상 같은 ID가 됩니다.
    prefetch 단계와 resolve 단계가 이 값을 공유합니다.

    Args:
        gl: 지역 코드
        hl_key: normalize_travel_hl()의 hl_key
        query: 호텔명
        check_in: 체크인 (YYYY-MM-DD)
        check_out: 체크아웃 (YYYY-MM-DD)
        adults: 성인 수
        currency: 통화 코드

    Returns:
        16자리 hex 문자열
    """
    base = "|".join([
        (gl or "").lower(),
        hl_key or "default",
        normalize_key(query),
        check_in or "",
        check_out or "",
        str(adults or ""),
        (currency or "").upper(),
    ])
    return hash_string(base)[:CONTEXT_ID_LENGTH]
