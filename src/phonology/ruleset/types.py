#!/usr/bin/env python3
"""
Ruleset Data Types

Pydantic models for the tables a rules file compiles into: base characters,
modifiers (diacritics) and their (match, patch) rules.

A glyph is one or more codepoints. /kp/ could be read as a base plus a
suffixal modifier, but it is simpler to define it as one base glyph that
happens to have two codepoints.

Modifier classes follow written position relative to the base:
- prefixal:  ʰt   (before the base)
- combining: t̪    (stacked on the base)
- suffixal:  tʰ   (after the base)
"""

from enum import Enum
from typing import Dict, Tuple
from pydantic import BaseModel, Field, ConfigDict

from src.phonology.feature_schema import FeatureBundle


class ModifierClass(str, Enum):
    """Written position of a diacritic; also its featuralization order."""
    PREFIXAL = "prefixal"
    COMBINING = "combining"
    SUFFIXAL = "suffixal"


# Featuralization applies diacritic classes in this order
MODIFIER_CLASS_ORDER: Tuple[ModifierClass, ...] = (
    ModifierClass.PREFIXAL,
    ModifierClass.COMBINING,
    ModifierClass.SUFFIXAL,
)


class RulesetState(str, Enum):
    LOADING = "loading"  # tables mutable, order maps undefined
    READY = "ready"      # tables frozen, order maps computed


class BaseCharacter(BaseModel):
    """A glyph denoting a complete segment, with a comprehensive feature bundle."""

    glyph: str = Field(..., min_length=1, description="Base glyph as used for lookup", examples=["p", "kp", "ʃ"])
    features: FeatureBundle = Field(..., description="Comprehensive feature bundle")
    line_number: int = Field(default=0, ge=0, description="Defining line in the rules file (0 if unknown)")

    model_config = ConfigDict(extra="forbid", frozen=True)


class ModifierRule(BaseModel):
    """
    One (match, patch) pair of a diacritic.

    The rule matches when every pair in `match` holds in the working bundle;
    `patch` then overrides the bundle. Rules of one diacritic are unordered,
    so at most one may match at a time.
    """

    match: FeatureBundle = Field(default_factory=FeatureBundle, description="Partial bundle tested against the segment")
    patch: FeatureBundle = Field(..., description="Partial bundle merged over the segment when matched")
    line_number: int = Field(default=0, ge=0, description="Defining line in the rules file (0 if unknown)")

    model_config = ConfigDict(extra="forbid", frozen=True)

    def matches(self, bundle: Dict[str, str]) -> bool:
        return self.match.matches(bundle)

    def describe(self) -> str:
        location = f" (line {self.line_number})" if self.line_number else ""
        return f"{self.match.to_string() or '(any)'} : {self.patch.to_string()}{location}"


class Modifier(BaseModel):
    """A diacritic glyph with its class and accumulated rules."""

    glyph: str = Field(..., min_length=1, description="Diacritic glyph without placeholder", examples=["̥", "ʰ"])
    klass: ModifierClass = Field(..., description="Prefixal, combining or suffixal")
    rules: Tuple[ModifierRule, ...] = Field(default=(), description="Rules in definition order")

    model_config = ConfigDict(extra="forbid", frozen=True)

    def with_rule(self, rule: ModifierRule) -> "Modifier":
        return self.model_copy(update={"rules": self.rules + (rule,)})

    def matching_rules(self, bundle: Dict[str, str]) -> Tuple[ModifierRule, ...]:
        return tuple(rule for rule in self.rules if rule.matches(bundle))
