"""
Ruleset Package

Compiles rules-language text into base-character and diacritic tables.

Usage:
    from src.phonology.ruleset import load_ruleset, ModifierClass

    ruleset = load_ruleset(rules_text, schema)
    ruleset.base_characters["p"].features
"""

from .compiler import RuleCompiler, load_ruleset
from .ruleset import Ruleset, ModifierTables
from .types import (
    BaseCharacter,
    Modifier,
    ModifierClass,
    ModifierRule,
    RulesetState,
    MODIFIER_CLASS_ORDER,
)

__all__ = [
    "RuleCompiler",
    "load_ruleset",
    "Ruleset",
    "ModifierTables",
    "BaseCharacter",
    "Modifier",
    "ModifierClass",
    "ModifierRule",
    "RulesetState",
    "MODIFIER_CLASS_ORDER",
]
