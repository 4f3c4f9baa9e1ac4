#!/usr/bin/env python3
"""
Featuralizer

Turns glyph strings into feature bundles using a READY ruleset.

Per unit segment:
1. Start from the base character's bundle
2. Apply diacritics class by class: prefixal, then combining, then suffixal
3. For each diacritic, test every rule's match against the working bundle:
   - no match:        bundle unchanged
   - one match:       patch applied
   - several matches: AmbiguousRuleError (rule order never matters)

Afterwards the segment is compared with its canonical form (diacritics
sorted into rules-file order). A non-canonical spelling is reported, and so
is a canonical form that featuralizes differently. Neither ever raises.

Usage:
    featuralizer = Featuralizer(ruleset)
    result = featuralizer.featuralize("b̥")
    print(result.bundle.to_string())
"""

from typing import List, Optional, Tuple
from logging import getLogger

from src.phonology.errors import (
    FeaturalizerError,
    UnknownBaseCharacterError,
    UndefinedDiacriticError,
    AmbiguousRuleError,
)
from src.phonology.feature_schema import FeatureBundle
from src.phonology.ruleset import Ruleset, MODIFIER_CLASS_ORDER
from src.phonology.segment_parser import Segment, SegmentParser, UnitSegment
from .diagnostics import DiagnosticsCollector
from .folding import fold_bundles
from .types import Diagnostic, DiagnosticKind, FeaturalizationResult

logger = getLogger(__name__)


class Featuralizer:
    """
    Featuralization service bound to one ruleset.

    Holds no per-call state, so one instance can featuralize segments
    from several threads at once.
    """

    def __init__(self, ruleset: Ruleset):
        """
        Args:
            ruleset: Compiled ruleset; must be READY

        Raises:
            RulesetNotReadyError: ruleset is still loading
        """
        ruleset.require_ready()
        self.ruleset = ruleset
        self.schema = ruleset.schema
        self.parser = SegmentParser(ruleset)
        self.orders = {klass: ruleset.order(klass) for klass in MODIFIER_CLASS_ORDER}

    def featuralize(
        self,
        glyphs: str,
        collector: Optional[DiagnosticsCollector] = None,
    ) -> FeaturalizationResult:
        """
        Featuralize one glyph string.

        Args:
            glyphs: Segment text, e.g. "tʰ" or "ai"
            collector: Receives diagnostics; a fresh one is used if omitted

        Returns:
            FeaturalizationResult with per-unit and final bundles

        Raises:
            SegmentError: tokenization or rule application failed
            BundleError: a patch produced an invalid bundle
        """
        collector = collector if collector is not None else DiagnosticsCollector()
        seen = len(collector)

        segment = self.parser.parse(glyphs)
        unit_bundles = self.featuralize_segment(segment)

        if self.ruleset.config.check_normalization:
            self.check_normalization(segment, unit_bundles, collector)

        bundle = unit_bundles[0] if segment.is_single else fold_bundles(unit_bundles)

        return FeaturalizationResult(
            glyphs=glyphs,
            segment=segment,
            unit_bundles=unit_bundles,
            bundle=bundle,
            diagnostics=collector.diagnostics[seen:],
        )

    def featuralize_segment(self, segment: Segment) -> List[FeatureBundle]:
        """One bundle per unit segment, in order."""
        return [self.featuralize_unit(unit, segment.glyphs) for unit in segment.units]

    def featuralize_unit(self, unit: UnitSegment, glyphs: str) -> FeatureBundle:
        """
        Featuralize one base character and its diacritics.

        Args:
            unit: Unit segment to featuralize
            glyphs: Full input string, for error messages
        """
        base = self.ruleset.get_base(unit.base)
        if base is None:
            raise UnknownBaseCharacterError(glyphs, unit.base)

        bundle = FeatureBundle(base.features)

        for klass in MODIFIER_CLASS_ORDER:
            for glyph in unit.modifiers(klass):
                modifier = self.ruleset.get_modifier(klass, glyph)
                if modifier is None:
                    raise UndefinedDiacriticError(glyphs, glyph, klass.value)

                matches = modifier.matching_rules(bundle)
                if len(matches) > 1:
                    raise AmbiguousRuleError(glyphs, glyph, [rule.describe() for rule in matches])
                if not matches:
                    logger.debug(f"{klass.value} '{glyph}' in '{glyphs}': no rule matches")
                    continue

                rule = matches[0]
                logger.debug(f"{klass.value} '{glyph}' in '{glyphs}': applying {rule.describe()}")
                bundle = self.schema.apply_patch(bundle, rule.patch, f"{klass.value} {glyph} in '{glyphs}'")

        return bundle

    def check_normalization(
        self,
        segment: Segment,
        unit_bundles: List[FeatureBundle],
        collector: DiagnosticsCollector,
    ) -> None:
        """
        Compare a segment with its canonically ordered form.

        Reports into `collector`; never raises.
        """
        canonical = segment.canonical(self.orders)
        written, normalized = segment.render(), canonical.render()
        if written == normalized:
            return

        collector.add(Diagnostic(
            kind=DiagnosticKind.NON_CANONICAL_ORDER,
            glyphs=segment.glyphs,
            canonical=normalized,
            message=f"Segment '{written}' is not in canonical order; normalized form is '{normalized}'",
        ))

        try:
            canonical_bundles = self.featuralize_segment(canonical)
        except FeaturalizerError as e:
            collector.add(Diagnostic(
                kind=DiagnosticKind.NORMALIZATION_FAILED,
                glyphs=segment.glyphs,
                canonical=normalized,
                message=f"Normalized form '{normalized}' of '{written}' cannot be featuralized: {e}",
            ))
            return

        if canonical_bundles != unit_bundles:
            collector.add(Diagnostic(
                kind=DiagnosticKind.NORMALIZATION_CHANGES_FEATURES,
                glyphs=segment.glyphs,
                canonical=normalized,
                message=(
                    f"Normalization affects featuralization: '{written}' and '{normalized}' "
                    f"yield different bundles"
                ),
            ))


def featuralize(ruleset: Ruleset, glyphs: str) -> Tuple[FeatureBundle, List[Diagnostic]]:
    """
    Featuralize one glyph string.

    Returns:
        (final feature bundle, diagnostics)
    """
    result = Featuralizer(ruleset).featuralize(glyphs)
    return result.bundle, result.diagnostics
