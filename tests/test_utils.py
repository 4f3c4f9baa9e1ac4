#!/usr/bin/env python3
"""
Tests for glyph text utilities and the error taxonomy.
"""

import pytest

from src.phonology.errors import FeaturalizerError, DuplicateBaseError, NoBaseCharacterError
from src.phonology.utils import (
    EJECTIVE_MARK,
    normalize_glyphs,
    string_to_codepoints,
    describe_glyph,
    strip_comment,
)


class TestNormalizeGlyphs:
    """Test glyph normalization."""

    @pytest.mark.parametrize("text", ["p\u0027", "p\u2019", "p\u02bc"])
    def test_ejective_marks_unified(self, text):
        assert normalize_glyphs(text) == "p" + EJECTIVE_MARK

    def test_nfd(self):
        assert normalize_glyphs("\u00e7") == "c\u0327"

    def test_nfc(self):
        """Angstrom sign is a singleton decomposition of \u00c5."""
        assert normalize_glyphs("\u212b", "NFC") == "\u00c5"

    def test_mark_order_kept(self):
        """Whole-string NFD would move U+0325 (class 220) before U+0303 (class 230)."""
        assert normalize_glyphs("a\u0303\u0325") == "a\u0303\u0325"
        assert normalize_glyphs("\u00e3\u0325") == "a\u0303\u0325"

    def test_no_unicode_form(self):
        assert normalize_glyphs("\u00e7", None) == "\u00e7"

    def test_empty(self):
        assert normalize_glyphs("") == ""


class TestCodepoints:
    """Test codepoint rendering."""

    def test_string_to_codepoints(self):
        assert string_to_codepoints("b\u0325") == ["0062", "0325"]

    def test_astral(self):
        assert string_to_codepoints("\U0001D400") == ["1D400"]

    def test_describe_glyph(self):
        assert describe_glyph("b\u0325") == "b\u0325 (U+0062 U+0325)"


class TestStripComment:
    """Test comment removal."""

    @pytest.mark.parametrize("line,expected", [
        ("= p : -voice # plosive", "= p : -voice "),
        ("# whole line", ""),
        ("= p : -voice", "= p : -voice"),
    ])
    def test_strip(self, line, expected):
        assert strip_comment(line) == expected

    def test_custom_marker(self):
        assert strip_comment("= p : -voice ; plosive", ";") == "= p : -voice "


class TestErrors:
    """Test error messages and line annotation."""

    def test_line_annotation(self):
        error = DuplicateBaseError("Duplicate base character: p")
        error.at_line(12, "= p : *labial")
        assert str(error) == "Duplicate base character: p (line 12: = p : *labial)"

    def test_first_location_wins(self):
        error = FeaturalizerError("boom").at_line(3, "a").at_line(7, "b")
        assert error.line_number == 3

    def test_segment_context(self):
        error = NoBaseCharacterError("ⁿ")
        assert str(error) == "No base character found in segment 'ⁿ'"
        assert error.line_number is None
