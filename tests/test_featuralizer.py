#!/usr/bin/env python3
"""
Tests for the Featuralizer

Rule application, ambiguity detection, multi-unit folding and the
normalization check.
"""

import itertools

import pytest

from src.phonology import featuralize, load_ruleset
from src.phonology.config import FeaturalizerConfig
from src.phonology.errors import (
    AmbiguousRuleError,
    IncompleteBundleError,
    RulesetNotReadyError,
    UndefinedDiacriticError,
    UnknownBaseCharacterError,
    UnrecognizedGlyphError,
)
from src.phonology.featuralization import (
    DiagnosticKind,
    DiagnosticsCollector,
    Featuralizer,
    fold,
    fold_bundles,
    feature_sequences,
)
from src.phonology.ruleset import Ruleset
from src.phonology.segment_parser import UnitSegment

RING_BELOW = "\u0325"
TILDE = "\u0303"
TILDE_BELOW = "\u0330"
ASPIRATED = "\u02b0"
LABIALIZED = "\u02b7"

# Tilde (combining class 230) is defined before ring below (class 220),
# the reverse of the order whole-string NFD would put them in.
MIXED_CLASS_RULES = (
    "__meta default - : syllabic anterior distributed high back round labiodental\n"
    "__meta alias vowel : +syllabic -consonantal -labial -coronal +dorsal -obstruent +voice -nasal\n"
    "= a : *vowel\n"
    "= i : *vowel +high -back\n"
    "= n : +consonantal -labial +coronal +anterior -dorsal +nasal -obstruent +voice\n"
    "= d : +consonantal -labial +coronal +anterior -dorsal -nasal +obstruent +voice\n"
    "^= \u25cc" + TILDE + " +syllabic : +nasal\n"
    "^= \u25cc" + RING_BELOW + " +nasal : -voice\n"
    "^= \u25cc" + TILDE_BELOW + " +voice : -obstruent\n"
    "=> " + ASPIRATED + " -voice : +obstruent\n"
    "=> " + LABIALIZED + " +dorsal : +high\n"
)

# every order of the combining marks on every base, with and without suffixes
MIXED_CLASS_SPELLINGS = [
    base + "".join(marks) + "".join(suffixes)
    for base in ("a", "i", "n", "d")
    for marks in itertools.permutations((TILDE, RING_BELOW, TILDE_BELOW))
    for suffixes in [()] + list(itertools.permutations((ASPIRATED, LABIALIZED)))
]


@pytest.fixture
def mixed_featuralizer(schema):
    return Featuralizer(load_ruleset(MIXED_CLASS_RULES, schema))


class TestRuleApplication:
    """Test base lookup and diacritic patches."""

    def test_base_only(self, featuralizer, p_bundle):
        result = featuralizer.featuralize("p")
        assert result.bundle == p_bundle
        assert result.diagnostics == []
        assert not result.is_multi_unit

    def test_devoiced_b_equals_p(self, featuralizer, p_bundle):
        result = featuralizer.featuralize("b" + RING_BELOW)
        assert result.bundle == p_bundle

    def test_non_matching_rule_leaves_bundle(self, featuralizer, ruleset):
        """Ring below only matches +voice; t is already voiceless."""
        result = featuralizer.featuralize("t" + RING_BELOW)
        assert result.bundle == ruleset.base_characters["t"].features

    def test_precomposed_nasal_vowel(self, featuralizer, ruleset):
        result = featuralizer.featuralize("\u00e3")
        expected = dict(ruleset.base_characters["a"].features, nasal="+")
        assert result.bundle == expected

    def test_one_of_several_rules(self, featuralizer):
        """b is +voice -nasal, so only the first creaky rule matches."""
        bundle = featuralizer.featuralize("b" + TILDE_BELOW).bundle
        assert bundle["obstruent"] == "-"
        assert bundle["voice"] == "+"

    def test_prefixal(self, featuralizer):
        bundle = featuralizer.featuralize("ⁿd").bundle
        assert bundle["nasal"] == "+"
        assert bundle["anterior"] == "+"

    def test_suffixal_reaches_child_feature(self, featuralizer):
        bundle = featuralizer.featuralize("pʷ").bundle
        assert bundle["round"] == "+"

    def test_suffixal_no_match(self, featuralizer, ruleset):
        bundle = featuralizer.featuralize("aʷ").bundle
        assert bundle == ruleset.base_characters["a"].features

    def test_module_function(self, ruleset, p_bundle):
        bundle, diagnostics = featuralize(ruleset, "b" + RING_BELOW)
        assert bundle == p_bundle
        assert diagnostics == []


class TestFeaturalizationErrors:
    """Test per-segment failures."""

    def test_ambiguous_rule(self, featuralizer):
        """m is +voice and +nasal, so both creaky rules match."""
        with pytest.raises(AmbiguousRuleError) as exc_info:
            featuralizer.featuralize("m" + TILDE_BELOW)
        message = str(exc_info.value)
        assert "2 matching rules" in message
        assert "line 21" in message
        assert "line 22" in message
        assert exc_info.value.glyphs == "m" + TILDE_BELOW

    def test_unknown_base(self, featuralizer):
        with pytest.raises(UnknownBaseCharacterError):
            featuralizer.featuralize_unit(UnitSegment(base="q"), "q")

    def test_undefined_diacritic(self, featuralizer):
        with pytest.raises(UndefinedDiacriticError, match="combining"):
            featuralizer.featuralize_unit(UnitSegment(base="p", combining=["\u0334"]), "p\u0334")

    def test_unrecognized_glyph(self, featuralizer):
        with pytest.raises(UnrecognizedGlyphError):
            featuralizer.featuralize("pʲ")

    def test_patch_breaking_bundle(self, schema, rules_text):
        """coronal is top-level, so the rule loads, but +coronal needs anterior at runtime."""
        ruleset = load_ruleset(rules_text + "=> ʲ : +coronal\n", schema)
        featuralizer = Featuralizer(ruleset)
        with pytest.raises(IncompleteBundleError, match="runtime error"):
            featuralizer.featuralize("pʲ")

    def test_loading_ruleset(self, schema):
        with pytest.raises(RulesetNotReadyError):
            Featuralizer(Ruleset(schema))


class TestMultiUnit:
    """Test folding of multi-unit segments."""

    def test_diphthong(self, featuralizer):
        result = featuralizer.featuralize("ai")
        assert result.is_multi_unit
        assert len(result.unit_bundles) == 2
        assert result.bundle["high"] == "->+"
        assert result.bundle["back"] == "+>-"
        assert result.bundle["syllabic"] == "+"

    def test_fold_collapses_adjacent_repeats(self):
        assert fold({"high": ["-", "-", "+", "+", "-"]}) == {"high": ["-", "+", "-"]}

    def test_feature_sequences(self):
        sequences = feature_sequences([{"voice": "+", "round": "-"}, {"voice": "-"}])
        assert sequences == {"voice": ["+", "-"], "round": ["-"]}

    def test_fold_bundles(self):
        folded = fold_bundles([{"voice": "+", "nasal": "-"}, {"voice": "-", "nasal": "-"}])
        assert folded.to_string() == "voice:+>- nasal:-"


class TestNormalizationCheck:
    """Test canonical-order diagnostics."""

    def test_canonical_order_silent(self, featuralizer):
        result = featuralizer.featuralize("b" + RING_BELOW + TILDE_BELOW)
        assert result.diagnostics == []

    def test_non_canonical_order(self, featuralizer):
        """ⁿ was defined after ʷ, so pⁿʷ is non-canonical but means the same."""
        result = featuralizer.featuralize("pⁿʷ")
        assert [d.kind for d in result.diagnostics] == [DiagnosticKind.NON_CANONICAL_ORDER]
        assert result.diagnostics[0].canonical == "pʷⁿ"
        assert not result.diagnostics[0].is_severe
        assert result.bundle["nasal"] == "+"
        assert result.bundle["round"] == "+"

    def test_normalization_changes_features(self, featuralizer):
        """Creaky before devoicing keeps b's creak; the canonical order loses it."""
        result = featuralizer.featuralize("b" + TILDE_BELOW + RING_BELOW)
        assert [d.kind for d in result.diagnostics] == [
            DiagnosticKind.NON_CANONICAL_ORDER,
            DiagnosticKind.NORMALIZATION_CHANGES_FEATURES,
        ]
        assert result.diagnostics[1].is_severe
        assert result.bundle["voice"] == "-"
        assert result.bundle["obstruent"] == "-"

    def test_normalization_failed(self, featuralizer):
        """Canonically, nasalization comes first and makes creak ambiguous."""
        result = featuralizer.featuralize("a" + TILDE_BELOW + TILDE)
        kinds = [d.kind for d in result.diagnostics]
        assert kinds == [DiagnosticKind.NON_CANONICAL_ORDER, DiagnosticKind.NORMALIZATION_FAILED]
        assert result.bundle["nasal"] == "+"

    def test_collector_accumulates(self, featuralizer):
        collector = DiagnosticsCollector()
        first = featuralizer.featuralize("pⁿʷ", collector)
        second = featuralizer.featuralize("b" + TILDE_BELOW + RING_BELOW, collector)
        assert len(first.diagnostics) == 1
        assert len(second.diagnostics) == 2
        assert len(collector) == 3
        assert collector.has_severe

    def test_check_disabled(self, schema, rules_text):
        config = FeaturalizerConfig(check_normalization=False)
        featuralizer = Featuralizer(load_ruleset(rules_text, schema, config))
        assert featuralizer.featuralize("pⁿʷ").diagnostics == []


class TestMixedCombiningClasses:
    """Test diacritics whose Unicode combining classes disagree with rules-file order."""

    def test_written_order_kept(self, mixed_featuralizer):
        """Nasalized, then devoiced: canonical, and the devoicing applies."""
        result = mixed_featuralizer.featuralize("a" + TILDE + RING_BELOW)
        assert result.diagnostics == []
        assert result.bundle["nasal"] == "+"
        assert result.bundle["voice"] == "-"

    def test_reversed_order_reported(self, mixed_featuralizer):
        """Ring below first finds no +nasal to devoice."""
        result = mixed_featuralizer.featuralize("a" + RING_BELOW + TILDE)
        assert [d.kind for d in result.diagnostics] == [
            DiagnosticKind.NON_CANONICAL_ORDER,
            DiagnosticKind.NORMALIZATION_CHANGES_FEATURES,
        ]
        assert result.diagnostics[0].canonical == "a" + TILDE + RING_BELOW
        assert result.bundle["voice"] == "+"

    def test_precomposed_base_keeps_order(self, mixed_featuralizer):
        """U+00E3 decomposes to a + tilde, still ahead of the ring below."""
        result = mixed_featuralizer.featuralize("\u00e3" + RING_BELOW)
        assert result.diagnostics == []
        assert result.bundle["voice"] == "-"

    @pytest.mark.parametrize("glyphs", MIXED_CLASS_SPELLINGS)
    def test_canonical_form_agrees_or_warns(self, mixed_featuralizer, glyphs):
        """Featuralizing the canonical form gives the same bundle, or a severe diagnostic says otherwise."""
        result = mixed_featuralizer.featuralize(glyphs)
        canonical = result.diagnostics[0].canonical if result.diagnostics else glyphs
        canonical_result = mixed_featuralizer.featuralize(canonical)

        assert canonical_result.diagnostics == []
        changed = canonical_result.bundle != result.bundle
        assert changed == any(d.is_severe for d in result.diagnostics)
