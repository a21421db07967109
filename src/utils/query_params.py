"""요청 파라미터 정규화 (언어/통화/날짜)"""
import re
from dataclasses import dataclass
from datetime import date
from typing import Optional

from src.utils.resource_loader import load_travel_params

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_CURRENCY_RE = re.compile(r"^[A-Z]{3}$")


@dataclass(frozen=True)
class TravelHl:
    """Google Travel용 hl 정규화 결과

    Attributes:
        normalized: 정규화된 언어 코드 ("" 가능)
        sent: 실제 전송할 값 (지원하지 않으면 None)
        key: 캐시/컨텍스트 키용 안정 값
    """
    normalized: str
    sent: Optional[str]
    key: str


def is_iso_date(value: Optional[str]) -> bool:
    """YYYY-MM-DD 형식 여부"""
    return isinstance(value, str) and bool(_ISO_DATE_RE.match(value))


def nights_between(check_in: str, check_out: str) -> Optional[int]:
    """두 ISO 날짜 사이의 박 수 (파싱 실패 시 None)"""
    try:
        a = date.fromisoformat(check_in)
        b = date.fromisoformat(check_out)
    except (TypeError, ValueError):
        return None
    return (b - a).days


def normalize_currency(raw: Optional[str]) -> Optional[str]:
    """통화 기호/코드를 ISO 4217 코드로 변환 (알 수 없으면 None)"""
    if not raw:
        return None

    s = raw.strip().upper()
    if _CURRENCY_RE.match(s):
        return s

    return load_travel_params()["currency_symbols"].get(raw.strip())


def normalize_hl(hl: Optional[str]) -> str:
    """
    언어 코드 표기 정규화

    - "EN" -> "en"
    - "en_us" -> "en-US"
    - "sr-latn" -> "sr-Latn"
    - "ES-419" -> "es-419"
    """
    raw = (hl or "").strip()
    if not raw:
        return ""

    s = raw.replace("_", "-")

    if re.fullmatch(r"[a-zA-Z]{2,3}", s):
        return s.lower()

    m = re.fullmatch(r"([a-zA-Z]{2,3})-([a-zA-Z]{2})", s)
    if m:
        return f"{m.group(1).lower()}-{m.group(2).upper()}"

    m = re.fullmatch(r"([a-zA-Z]{2,3})-([a-zA-Z]{4})", s)
    if m:
        script = m.group(2)
        return f"{m.group(1).lower()}-{script[0].upper()}{script[1:].lower()}"

    m = re.fullmatch(r"([a-zA-Z]{2,3})-(\d{3})", s)
    if m:
        return f"{m.group(1).lower()}-{m.group(2)}"

    return s


def normalize_travel_hl(raw_hl: Optional[str]) -> TravelHl:
    """Google Travel 지원 목록 기준 hl 정규화

    지원하지 않는 언어는 전송하지 않고(SearchApi 기본값 사용) 키에는 raw: 접두사로 남깁니다.
    """
    n = normalize_hl(raw_hl)

    # "en"은 Travel 목록에 없음 (en-US / en-GB만 존재)
    if n == "en":
        n = "en-US"

    sent = n if n in load_travel_params()["supported_hl"] else None
    if sent:
        key = sent
    elif n:
        key = f"raw:{n}"
    else:
        key = "default"

    return TravelHl(normalized=n, sent=sent, key=key)
