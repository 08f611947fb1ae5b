"""
Unit Tests: Key Normalizer

Tests:
    - Lowercasing and whitespace folding
    - Diacritic stripping (precomposed and combining forms)
    - Idempotence
"""

import pytest

from bucketizer.strategies.normalizer import normalize_key


class TestNormalizeKey:
    """Tests for normalize_key."""

    def test_lowercases(self):
        assert normalize_key("JOHN") == "john"

    def test_whitespace_runs_become_plus(self):
        assert normalize_key("John  Doe") == "john+doe"
        assert normalize_key("a\t\nb c") == "a+b+c"

    def test_precomposed_and_combining_forms_agree(self):
        """n + combining tilde and precomposed n-tilde fold to the same bare letter."""
        assert normalize_key("\u006e\u0303") == "n"
        assert normalize_key("\u00f1") == "n"
        assert normalize_key("\u00d1and\u00fa") == "nandu"

    def test_lone_combining_mark_is_dropped(self):
        assert normalize_key("\u0303\u0237") == "\u0237"

    def test_empty_string(self):
        assert normalize_key("") == ""

    @pytest.mark.parametrize("value", [
        "John Doe",
        "  \u00d1and\u00fa  \u00c4rger ",
        "\u0303\u0237",
        "\u0130stanbul",
        "Stra\u00dfe",
        "\ufb01 ligature",
        "already+normal",
    ])
    def test_idempotent(self, value):
        once = normalize_key(value)
        assert normalize_key(once) == once
