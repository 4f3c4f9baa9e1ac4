"""
Feature folding across unit segments.

Only the naive aggregation is done: each feature's values are listed in
unit order and adjacent repeats are collapsed (PHOIBLE does nothing more).
A diphthong /ai/ folds to high:->+ while unchanged features stay single.

Assumes binary features.
"""

from itertools import groupby
from typing import Dict, List, Mapping, Sequence

from src.phonology.feature_schema import FeatureBundle

CONTOUR_SEPARATOR = ">"


def feature_sequences(bundles: Sequence[Mapping[str, str]]) -> Dict[str, List[str]]:
    """Per feature, its value in each unit bundle that has it, in order."""
    sequences: Dict[str, List[str]] = {}
    for bundle in bundles:
        for name, value in bundle.items():
            sequences.setdefault(name, []).append(value)
    return sequences


def fold(sequences: Mapping[str, Sequence[str]]) -> Dict[str, List[str]]:
    """Collapse adjacent identical values; the input is not modified."""
    return {name: [value for value, _ in groupby(values)] for name, values in sequences.items()}


def fold_bundles(bundles: Sequence[Mapping[str, str]], separator: str = CONTOUR_SEPARATOR) -> FeatureBundle:
    """Fold unit bundles into one bundle whose values are contours like '->+'."""
    folded = fold(feature_sequences(bundles))
    return FeatureBundle((name, separator.join(values)) for name, values in folded.items())
