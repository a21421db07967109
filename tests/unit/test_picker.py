"""후보 선택(picker) 테스트"""
import pytest

from src.engine import build_candidate_summary, pick_best_property
from src.schemas.property_schema import Candidate


def _cands(raw):
    return [Candidate.model_validate(c) for c in raw]


class TestPickBestProperty:
    """pick_best_property 테스트"""

    def test_empty(self):
        picked = pick_best_property([], "Alda Hotel", None)
        assert picked.best is None
        assert picked.best_score == -1.0
        assert picked.all_candidates == []

    def test_name_only(self, alda_candidates):
        picked = pick_best_property(_cands(alda_candidates), "Alda Hotel Reykjavík", None)

        assert picked.best.property_token == "tok-alda"
        assert picked.best_score == pytest.approx(0.80)
        assert picked.confidence == pytest.approx(0.80)
        assert not picked.best_domain_match
        assert picked.core_overlap_any

    def test_official_domain(self, alda_candidates):
        picked = pick_best_property(_cands(alda_candidates), "Alda Hotel Reykjavík", "aldahotel.is")

        assert picked.best.property_token == "tok-alda"
        assert picked.best_domain_match
        assert picked.best_link_host == "aldahotel.is"
        assert picked.best_score == pytest.approx(1.50)
        assert picked.confidence == pytest.approx(0.95)

    def test_domain_without_core_overlap_is_not_domain_match(self):
        """도메인이 같아도 정체성 토큰이 겹치지 않으면 도메인 매칭 아님"""
        cands = _cands([{
            "name": "Hotel A Reykjavík",
            "city": "Reykjavík",
            "country": "Iceland",
            "link": "https://www.aldahotel.is/",
            "property_token": "tok-a",
        }])
        picked = pick_best_property(cands, "Alda Hotel Reykjavík", "aldahotel.is")

        assert picked.best.property_token == "tok-a"
        assert not picked.best_domain_match
        assert picked.confidence == pytest.approx(0.55)

    def test_hard_mismatch_skipped(self, alda_candidates):
        picked = pick_best_property(_cands(alda_candidates), "Hilton Reykjavik Nordica", None)

        assert picked.best.property_token == "tok-hilton"
        assert not picked.hard_mismatch

        skipped = [c for c in picked.all_candidates if c["skipped"]]
        assert {c["name"] for c in skipped} == {"Alda Hotel", "Hotel A Reykjavík"}
        assert all(c["reason"] == "brand_mismatch" for c in skipped)

    def test_all_hard_mismatch(self):
        cands = _cands([{"name": "Alda Hotel", "property_token": "tok-alda"}])
        picked = pick_best_property(cands, "Hilton Reykjavik Nordica", None)

        assert picked.best is None
        assert picked.all_candidates[0]["skipped"]

    def test_tie_keeps_first(self):
        cands = _cands([
            {"name": "Alda Hotel", "property_token": "tok-1"},
            {"name": "Alda Hotel", "property_token": "tok-2"},
        ])
        picked = pick_best_property(cands, "Alda Hotel", None)
        assert picked.best.property_token == "tok-1"

    def test_location_suffix_stripped_per_candidate(self):
        cands = _cands([{
            "name": "Alda Hotel",
            "city": "Reykjavík",
            "country": "Iceland",
            "property_token": "tok-alda",
        }])
        picked = pick_best_property(cands, "Alda Hotel, Reykjavík", None)

        assert picked.match_details["location_suffix_stripped"]
        assert picked.match_details["query_for_score"] == "Alda Hotel"
        assert picked.confidence == pytest.approx(0.95)


class TestAltQuery:
    """슬러그 기반 보조 질의 테스트"""

    def test_alt_query_raises_score(self):
        cands = _cands([{
            "name": "Alda Hotel",
            "city": "Reykjavík",
            "country": "Iceland",
            "property_token": "tok-alda",
        }])
        picked = pick_best_property(cands, "The Reykjavik Place", None, alt_query="alda hotel")

        assert picked.best.property_token == "tok-alda"
        assert picked.match_details["alt_used"] is True
        assert picked.match_details["main_base_score"] == 0.0
        assert picked.best_name_score == pytest.approx(1.30)

    def test_alt_query_never_lowers_score(self, alda_candidates):
        picked = pick_best_property(
            _cands(alda_candidates), "Alda Hotel Reykjavík", None, alt_query="something else"
        )

        assert picked.best.property_token == "tok-alda"
        assert picked.match_details["alt_used"] is False
        assert picked.best_name_score == pytest.approx(0.80)

    def test_blank_alt_query_ignored(self, alda_candidates):
        picked = pick_best_property(_cands(alda_candidates), "Alda Hotel Reykjavík", None, alt_query="  ")
        assert picked.match_details["alt_query"] is None


class TestCandidateSummary:
    """후보 요약 테스트"""

    def test_sorted_and_redacted(self, alda_candidates):
        picked = pick_best_property(_cands(alda_candidates), "Alda Hotel Reykjavík", None)
        summary = build_candidate_summary(picked.all_candidates)

        assert [s["name"] for s in summary][0] == "Alda Hotel"
        assert summary == sorted(summary, key=lambda s: s["score"], reverse=True)
        for s in summary:
            assert set(s) == {"name", "city", "score", "confidence", "domain_match"}

    def test_skipped_excluded_and_limited(self):
        all_candidates = [{"name": f"H{i}", "final_score": i / 10, "confidence": 0.5} for i in range(8)]
        all_candidates.append({"name": "skip", "skipped": True, "reason": "brand_mismatch"})

        summary = build_candidate_summary(all_candidates, limit=5)

        assert len(summary) == 5
        assert summary[0]["name"] == "H7"
        assert "skip" not in [s["name"] for s in summary]
