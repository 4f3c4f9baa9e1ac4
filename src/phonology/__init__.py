"""
Phonology Package

Featuralization of phonetic transcriptions: a rules file describing base
characters and diacritics is compiled against a feature schema, and glyph
strings are turned into feature bundles.

Usage:
    from src.phonology import load_schema, load_ruleset, featuralize

    schema = load_schema(tree)
    ruleset = load_ruleset(rules_text, schema)
    bundle, diagnostics = featuralize(ruleset, "b̥")
    print(bundle.to_string())
"""

from .config import FeaturalizerConfig
from .feature_schema import FeatureSchema, FeatureBundle, load_schema
from .ruleset import Ruleset, load_ruleset
from .featuralization import Featuralizer, Diagnostic, featuralize
from .pipeline import FeaturalizationPipeline, featuralize_batch

__all__ = [
    'FeaturalizerConfig',
    'FeatureSchema',
    'FeatureBundle',
    'load_schema',
    'Ruleset',
    'load_ruleset',
    'Featuralizer',
    'Diagnostic',
    'featuralize',
    'FeaturalizationPipeline',
    'featuralize_batch',
]

__version__ = '0.1.0'
