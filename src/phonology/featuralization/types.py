#!/usr/bin/env python3
"""
Featuralization Data Types

Results and diagnostics returned by the featuralizer.
"""

from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict

from src.phonology.feature_schema import FeatureBundle
from src.phonology.segment_parser import Segment


class DiagnosticKind(str, Enum):
    """What the normalization check found."""
    NON_CANONICAL_ORDER = "non_canonical_order"                        # diacritics not in canonical order
    NORMALIZATION_CHANGES_FEATURES = "normalization_changes_features"  # reordering changes the bundle
    NORMALIZATION_FAILED = "normalization_failed"                      # canonical form can't be featuralized


class Diagnostic(BaseModel):
    """Non-fatal finding about one segment."""

    kind: DiagnosticKind = Field(..., description="Diagnostic category")
    glyphs: str = Field(..., description="Input glyph string the diagnostic is about")
    message: str = Field(..., description="Human-readable explanation")
    canonical: Optional[str] = Field(default=None, description="Canonically ordered glyph string, if relevant")

    model_config = ConfigDict(extra="forbid", frozen=True)

    @property
    def is_severe(self) -> bool:
        """True when normalization is not feature-preserving."""
        return self.kind is not DiagnosticKind.NON_CANONICAL_ORDER

    def __str__(self) -> str:
        return self.message


class FeaturalizationResult(BaseModel):
    """
    Featuralization of one glyph string.

    `bundle` is the unit's bundle for single-unit segments, and the folded
    aggregate of `unit_bundles` for multi-unit ones.
    """

    glyphs: str = Field(..., description="Input glyph string")
    segment: Segment = Field(..., description="Tokenized segment")
    unit_bundles: List[FeatureBundle] = Field(..., description="One bundle per unit segment, in order")
    bundle: FeatureBundle = Field(..., description="Final bundle for the whole segment")
    diagnostics: List[Diagnostic] = Field(default_factory=list, description="Normalization diagnostics")

    model_config = ConfigDict(extra="forbid")

    @property
    def is_multi_unit(self) -> bool:
        return len(self.unit_bundles) > 1


# === TYPE ALIASES ===

DiagnosticList = List[Diagnostic]
"""Type alias: List of Diagnostic objects for function signatures"""
