"""URL 파싱 유틸리티"""
import re
from typing import Optional
from urllib.parse import urlparse, unquote

# /hotel/{cc}/{slug}.html 또는 /hotel/{cc}/{slug}.{lang}.html
_BOOKING_PATH_RE = re.compile(r"^/hotel/([a-z]{2})/([^/.]+)(?:\.[a-z\-]+)?\.html?$", re.IGNORECASE)


def get_host_no_www(url: Optional[str]) -> str:
    """
    URL의 호스트명 (소문자, www. 제거)

    Examples:
        >>> get_host_no_www("https://www.aldahotel.is/rooms")
        'aldahotel.is'
        >>> get_host_no_www("invalid")
        ''

    Args:
        url: 절대 URL

    Returns:
        호스트명 또는 빈 문자열
    """
    if not url:
        return ""

    try:
        host = urlparse(url.strip()).hostname or ""
    except ValueError:
        return ""

    host = host.lower()
    if host.startswith("www."):
        host = host[4:]
    return host


def extract_booking_listing(url: Optional[str]) -> Optional[tuple[str, str]]:
    """
    Booking.com 숙소 URL에서 (국가 코드, 슬러그) 추출

    같은 슬러그가 국가별로 다른 숙소일 수 있으므로 국가 코드도 함께 반환합니다.

    Examples:
        >>> extract_booking_listing("https://www.booking.com/hotel/is/alda.en-gb.html?aid=1")
        ('is', 'alda')
        >>> extract_booking_listing("https://www.booking.com/searchresults.html")
        None

    Args:
        url: Booking.com URL

    Returns:
        (국가 코드, 슬러그) 소문자 튜플 또는 None
    """
    if not url:
        return None

    try:
        parsed = urlparse(url.strip())
    except ValueError:
        return None

    host = (parsed.hostname or "").lower()
    if not (host == "booking.com" or host.endswith(".booking.com")):
        return None

    match = _BOOKING_PATH_RE.match(unquote(parsed.path or ""))
    if not match:
        return None

    slug = match.group(2).strip().lower()
    if not slug:
        return None
    return match.group(1).lower(), slug


def slug_to_query(slug: Optional[str]) -> str:
    """슬러그를 검색어 형태로 변환 ('alda-hotel-reykjavik' -> 'alda hotel reykjavik')"""
    if not slug:
        return ""
    return re.sub(r"\s+", " ", slug.replace("-", " ").replace("_", " ")).strip()
