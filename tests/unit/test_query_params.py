"""요청 파라미터 정규화 테스트"""
import pytest

from src.utils.query_params import (
    is_iso_date,
    nights_between,
    normalize_currency,
    normalize_hl,
    normalize_travel_hl,
)


class TestNormalizeHl:
    """언어 코드 정규화"""

    @pytest.mark.parametrize("raw,expected", [
        ("EN", "en"),
        ("en_us", "en-US"),
        ("sr-latn", "sr-Latn"),
        ("ES-419", "es-419"),
        ("  ", ""),
        (None, ""),
    ])
    def test_normalize_hl(self, raw, expected):
        assert normalize_hl(raw) == expected

    def test_travel_hl_supported(self):
        hl = normalize_travel_hl("ko")
        assert hl.sent == "ko"
        assert hl.key == "ko"

    def test_travel_hl_plain_english(self):
        """'en'은 en-US로 보냄"""
        hl = normalize_travel_hl("en")
        assert hl.sent == "en-US"

    def test_travel_hl_norwegian(self):
        assert normalize_travel_hl("NO").sent == "no"

    def test_travel_hl_unsupported(self):
        hl = normalize_travel_hl("xx")
        assert hl.sent is None
        assert hl.key == "raw:xx"

    def test_travel_hl_missing(self):
        hl = normalize_travel_hl(None)
        assert hl.sent is None
        assert hl.key == "default"


class TestNormalizeCurrency:
    @pytest.mark.parametrize("raw,expected", [
        ("usd", "USD"),
        (" EUR ", "EUR"),
        ("€", "EUR"),
        ("₩", "KRW"),
        ("??", None),
        (None, None),
    ])
    def test_normalize_currency(self, raw, expected):
        assert normalize_currency(raw) == expected


class TestDates:
    def test_is_iso_date(self):
        assert is_iso_date("2026-11-01")
        assert not is_iso_date("2026/11/01")
        assert not is_iso_date(None)

    def test_nights_between(self):
        assert nights_between("2026-11-01", "2026-11-03") == 2
        assert nights_between("2026-11-03", "2026-11-01") == -2
        assert nights_between("2026-02-30", "2026-03-01") is None
