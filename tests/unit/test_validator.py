"""캐시 토큰 재검증 테스트"""
import pytest

from src.engine import Invalid, Valid, validate_cached_token
from src.schemas.property_schema import TokenRecord


class TestValidateCachedToken:
    """validate_cached_token 테스트"""

    def test_domain_hit_valid(self, alda_record):
        out = validate_cached_token(
            "Alda Hotel Reykjavík", "aldahotel.is", TokenRecord(**alda_record), "hit-domain"
        )

        assert isinstance(out, Valid)
        assert out.confidence == pytest.approx(0.95)
        assert out.base_score == pytest.approx(0.80)
        assert out.updates["domain_match"] is True
        assert out.updates["official_domain"] == "aldahotel.is"
        assert out.updates["match_details"]["query_original"] == "Alda Hotel Reykjavík"

    def test_domain_hit_name_too_low(self, alda_record):
        """같은 도메인의 다른 숙소 (자매 호텔)"""
        out = validate_cached_token(
            "Completely Different Hostel", "aldahotel.is", TokenRecord(**alda_record), "hit-domain"
        )

        assert isinstance(out, Invalid)
        assert out.reason == "domain_hit_but_name_too_low:0.000"

    def test_domain_hit_without_core_overlap(self):
        record = TokenRecord(
            property_token="tok-rvk",
            property_name="Reykjavik Hotel",
            city="Reykjavík",
            country="Iceland",
            link="https://www.rvkhotel.is/",
        )
        out = validate_cached_token("Reykjavik Hotel", "rvkhotel.is", record, "hit-domain")

        assert isinstance(out, Invalid)
        assert out.reason == "domain_hit_without_core_overlap"
        assert out.base_score >= 0.70

    def test_hard_mismatch(self, alda_record):
        out = validate_cached_token(
            "Hilton Reykjavik Nordica", "aldahotel.is", TokenRecord(**alda_record), "hit-domain"
        )

        assert isinstance(out, Invalid)
        assert out.reason == "hard_mismatch"
        assert out.confidence == 0.0

    def test_name_hit_confidence_too_low(self):
        record = TokenRecord(
            property_token="tok-hilton",
            property_name="Hilton Reykjavik Nordica",
            city="Reykjavík",
            country="Iceland",
        )
        out = validate_cached_token("Alda Hotel Reykjavík", None, record, "hit-name")

        assert isinstance(out, Invalid)
        assert out.reason == "confidence_too_low:0.500"

    def test_name_hit_valid_without_domain(self, alda_record):
        out = validate_cached_token("Alda Hotel Reykjavík", None, TokenRecord(**alda_record), "hit-name")

        assert isinstance(out, Valid)
        assert out.confidence == pytest.approx(0.80)
        assert out.updates["domain_match"] is False
        assert out.updates["official_domain"] is None

    def test_missing_property_name(self):
        out = validate_cached_token("Alda Hotel", None, TokenRecord(property_token="tok-x"), "hit-name")

        assert isinstance(out, Invalid)
        assert out.reason == "missing_property_name"

    def test_link_host_derived_from_link(self, alda_record):
        raw = dict(alda_record, link_host="")
        out = validate_cached_token("Alda Hotel Reykjavík", "aldahotel.is", TokenRecord(**raw), "hit-booking")

        assert isinstance(out, Valid)
        assert out.updates["link_host"] == "aldahotel.is"
