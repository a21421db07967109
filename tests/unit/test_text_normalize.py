"""이름 정규화/토큰화 테스트"""
from src.utils.text import (
    normalize,
    normalize_key,
    strip_diacritics,
    tokenize_for_match,
    tokenize_raw,
)


class TestNormalize:
    """정규화 테스트"""

    def test_strip_diacritics(self):
        assert strip_diacritics("Reykjavík") == "Reykjavik"
        assert strip_diacritics("Hôtel Café") == "Hotel Cafe"

    def test_normalize_collapses_separators(self):
        assert normalize("Hôtel  Le-Marais!") == "hotel le marais"
        assert normalize("alda_hotel") == "alda hotel"

    def test_normalize_keeps_cjk(self):
        """결합 문자가 없는 CJK 문자는 그대로 유지"""
        assert normalize("東京ホテル") == "東京ホテル"

    def test_kana_voiced_marks_kept(self):
        """탁점/반탁점은 발음 부호가 아니므로 유지 (バス != ハス)"""
        assert strip_diacritics("バス") == "バス"
        assert normalize("ドーミーイン") == "ドーミーイン"
        assert normalize("パレスホテル") == "パレスホテル"
        assert normalize("バス") != normalize("ハス")

    def test_hangul_syllables_kept(self):
        """한글 음절은 자모로 분해되지 않음"""
        assert strip_diacritics("신라호텔") == "신라호텔"
        assert normalize("롯데 호텔 서울") == "롯데 호텔 서울"

    def test_latin_marks_on_mixed_text(self):
        assert normalize("Hôtel 東京 Café") == "hotel 東京 cafe"

    def test_normalize_empty(self):
        assert normalize(None) == ""
        assert normalize("") == ""
        assert normalize("   ") == ""


class TestTokenize:
    """토큰화 테스트"""

    def test_tokenize_raw_drops_single_chars(self):
        assert tokenize_raw("A Hotel by the Sea") == ["hotel", "by", "the", "sea"]

    def test_tokenize_for_match_drops_stopwords(self):
        assert tokenize_for_match("A Hotel by the Sea") == ["sea"]
        assert tokenize_for_match("Alda Hotel Reykjavík") == ["alda", "reykjavik"]

    def test_tokenize_for_match_all_stopwords(self):
        assert tokenize_for_match("The Hotel") == []


class TestNormalizeKey:
    """캐시 키 형태 테스트"""

    def test_normalize_key(self):
        assert normalize_key("Alda Hotel, Reykjavík") == "alda-hotel-reykjavik"

    def test_normalize_key_max_length(self):
        key = normalize_key("word " * 100)
        assert len(key) == 120
