"""
Key Normalizer: canonical partition keys for prefix-trie bucketing.

Steps (order matters for cross-implementation determinism):
1. Lowercase
2. Unicode NFD, then drop Combining Diacritical Marks (U+0300-U+036F)
3. Each whitespace run -> "+"

    normalize_key("Ño  Año")  == "no+ano"
"""

from __future__ import annotations

import re
import unicodedata

_COMBINING_MARKS = re.compile("[\u0300-\u036f]")
_WHITESPACE = re.compile(r"\s+")

WORD_SEPARATOR = "+"


def normalize_key(value: str) -> str:
    """Canonical key for value. Idempotent."""
    decomposed = unicodedata.normalize("NFD", value.lower())
    return _WHITESPACE.sub(WORD_SEPARATOR, _COMBINING_MARKS.sub("", decomposed))
