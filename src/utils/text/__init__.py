"""Text utilities for lodging-name matching.

- normalize: diacritics / tokenization / cache-key form
- matching/: signals, location suffix handling, scoring
"""

from .normalize import normalize, normalize_key, strip_diacritics, tokenize_for_match, tokenize_raw

__all__ = [
    "normalize",
    "normalize_key",
    "strip_diacritics",
    "tokenize_for_match",
    "tokenize_raw",
]
