"""Name normalization and tokenization for lodging-name matching."""

from __future__ import annotations

import re
import unicodedata
from typing import Optional

from src.utils.resource_loader import load_matching_vocabulary

# Unicode-aware: \w covers letters/digits of every script; "_" is treated as a separator.
_NON_WORD_RUN = re.compile(r"[\W_]+", re.UNICODE)

MAX_KEY_LENGTH = 120

# Combining Diacritical Marks (+ Extended, Supplement, for Symbols, Half Marks)
_COMBINING_DIACRITIC_RANGES = (
    (0x0300, 0x036F),
    (0x1AB0, 0x1AFF),
    (0x1DC0, 0x1DFF),
    (0x20D0, 0x20FF),
    (0xFE20, 0xFE2F),
)


def _is_latin_diacritic(ch: str) -> bool:
    cp = ord(ch)
    return any(lo <= cp <= hi for lo, hi in _COMBINING_DIACRITIC_RANGES)


def strip_diacritics(text: Optional[str]) -> str:
    """라틴 계열 결합 발음 부호만 제거합니다.

    예: 'Reykjavík' -> 'Reykjavik'. 가나의 탁점(バ)이나 한글 음절은
    NFC 재조합으로 원래 형태 그대로 유지됩니다.
    """
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFD", str(text))
    stripped = "".join(ch for ch in decomposed if not _is_latin_diacritic(ch))
    return unicodedata.normalize("NFC", stripped)


def normalize(text: Optional[str]) -> str:
    """악센트 제거 + 소문자 + 비문자/비숫자 구간을 공백 하나로 축약."""
    if not text:
        return ""
    s = strip_diacritics(text).lower()
    return _NON_WORD_RUN.sub(" ", s).strip()


def tokenize_raw(text: Optional[str]) -> list[str]:
    """정규화된 문자열의 토큰 (길이 1 초과)."""
    return [t for t in normalize(text).split() if len(t) > 1]


def tokenize_for_match(text: Optional[str]) -> list[str]:
    """매칭용 토큰: tokenize_raw에서 불용어 제거."""
    stopwords = load_matching_vocabulary()["stopwords"]
    return [t for t in tokenize_raw(text) if t not in stopwords]


def normalize_key(text: Optional[str]) -> str:
    """캐시 키용 형태: 공백 -> '-', 최대 120자."""
    return normalize(text).replace(" ", "-")[:MAX_KEY_LENGTH]
