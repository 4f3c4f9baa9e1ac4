"""
Feature Schema Package

Tree of dependent phonological features and the bundle checks built on it.

Usage:
    from src.phonology.feature_schema import FeatureSchema, FeatureBundle

    schema = FeatureSchema.load(tree)
    schema.validate_bundle(FeatureBundle({"consonantal": "+", "fortis": "+"}))
"""

from .feature_schema import FeatureSchema, load_schema, BINARY_VALUES
from .types import FeatureNode, FeatureBundle, FeatureValue, SchemaTree, ParentLink

__all__ = [
    "FeatureSchema",
    "load_schema",
    "BINARY_VALUES",
    "FeatureNode",
    "FeatureBundle",
    "FeatureValue",
    "SchemaTree",
    "ParentLink",
]
