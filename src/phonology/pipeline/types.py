#!/usr/bin/env python3
"""
Batch Pipeline Data Types

Per-segment outcomes and the batch report built from them.
"""

from typing import Dict, List, Optional, Tuple
from pydantic import BaseModel, Field, ConfigDict

from src.phonology.feature_schema import FeatureBundle
from src.phonology.featuralization import Diagnostic


class SegmentOutcome(BaseModel):
    """Featuralization outcome for one input segment: a bundle or an error."""

    index: int = Field(..., ge=0, description="Position of the segment in the input list")
    glyphs: str = Field(..., description="Input glyph string")
    bundle: Optional[FeatureBundle] = Field(default=None, description="Final bundle, None on failure")
    unit_bundles: List[FeatureBundle] = Field(default_factory=list, description="Per-unit bundles")
    error: Optional[str] = Field(default=None, description="Error message if featuralization failed")
    error_type: Optional[str] = Field(default=None, description="Error class name if featuralization failed")
    diagnostics: List[Diagnostic] = Field(default_factory=list, description="Normalization diagnostics")

    model_config = ConfigDict(extra="forbid")

    @property
    def ok(self) -> bool:
        return self.error is None


class BatchReport(BaseModel):
    """Featuralization of a whole segment list, in input order."""

    outcomes: List[SegmentOutcome] = Field(default_factory=list, description="One outcome per segment")

    model_config = ConfigDict(extra="forbid")

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.ok)

    @property
    def failed(self) -> int:
        return self.total - self.succeeded

    @property
    def success_rate(self) -> float:
        """Percentage of segments featuralized without error."""
        if self.total == 0:
            return 0.0
        return (self.succeeded / self.total) * 100

    @property
    def diagnostics(self) -> List[Diagnostic]:
        return [d for outcome in self.outcomes for d in outcome.diagnostics]

    @property
    def errors(self) -> List[SegmentOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]

    def get(self, glyphs: str) -> Optional[SegmentOutcome]:
        return next((outcome for outcome in self.outcomes if outcome.glyphs == glyphs), None)

    def identical_featuralizations(self) -> List[List[str]]:
        """
        Groups of distinct segments that featuralize to the same bundle.

        Usually a sign of a missing feature distinction in the rules.
        """
        groups: Dict[Tuple[Tuple[Tuple[str, str], ...], ...], List[str]] = {}
        for outcome in self.outcomes:
            if outcome.ok:
                key = tuple(tuple(sorted(bundle.items())) for bundle in outcome.unit_bundles)
                groups.setdefault(key, []).append(outcome.glyphs)
        return [glyphs for glyphs in groups.values() if len(glyphs) > 1]

    def to_text(self) -> str:
        """One `glyphs<TAB>bundle` (or `glyphs<TAB>ERROR: message`) line per segment."""
        lines = []
        for outcome in self.outcomes:
            if outcome.ok:
                lines.append(f"{outcome.glyphs}\t{outcome.bundle.to_string()}")
            else:
                lines.append(f"{outcome.glyphs}\tERROR: {outcome.error}")
        return "\n".join(lines)
