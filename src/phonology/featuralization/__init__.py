"""
Featuralization Package

Applies base-character bundles and diacritic rules to tokenized segments.

Usage:
    from src.phonology.featuralization import Featuralizer

    result = Featuralizer(ruleset).featuralize("b̥")
    print(result.bundle.to_string())
    for diagnostic in result.diagnostics:
        print(diagnostic.message)
"""

from .featuralizer import Featuralizer, featuralize
from .diagnostics import DiagnosticsCollector
from .folding import fold, fold_bundles, feature_sequences, CONTOUR_SEPARATOR
from .types import Diagnostic, DiagnosticKind, DiagnosticList, FeaturalizationResult

__all__ = [
    "Featuralizer",
    "featuralize",
    "DiagnosticsCollector",
    "fold",
    "fold_bundles",
    "feature_sequences",
    "CONTOUR_SEPARATOR",
    "Diagnostic",
    "DiagnosticKind",
    "DiagnosticList",
    "FeaturalizationResult",
]
