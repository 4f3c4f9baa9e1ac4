#!/usr/bin/env python3
"""
Ruleset

Compiled tables of one rules file: defaults, aliases, base characters and
the three modifier tables. A ruleset is built in the LOADING state by the
RuleCompiler and frozen into the READY state; only a READY ruleset can be
used for featuralization.

Freezing computes, per modifier class, the canonical normalization order:
each glyph's position in first-definition order.
"""

from types import MappingProxyType
from typing import Dict, FrozenSet, Mapping, Optional
from logging import getLogger

from src.phonology.config import FeaturalizerConfig, DEFAULT_CONFIG
from src.phonology.errors import DuplicateBaseError, RulesetNotReadyError
from src.phonology.feature_schema import FeatureSchema, FeatureBundle
from .types import (
    BaseCharacter,
    Modifier,
    ModifierClass,
    ModifierRule,
    RulesetState,
    MODIFIER_CLASS_ORDER,
)

logger = getLogger(__name__)


class ModifierTables:
    """The prefixal, combining and suffixal modifier tables, keyed by glyph."""

    def __init__(self):
        self.prefixal: Mapping[str, Modifier] = {}
        self.combining: Mapping[str, Modifier] = {}
        self.suffixal: Mapping[str, Modifier] = {}

    def table(self, klass: ModifierClass) -> Mapping[str, Modifier]:
        if klass is ModifierClass.PREFIXAL:
            return self.prefixal
        if klass is ModifierClass.COMBINING:
            return self.combining
        if klass is ModifierClass.SUFFIXAL:
            return self.suffixal
        raise ValueError(f"Unknown modifier class: {klass!r}")

    def freeze(self) -> None:
        self.prefixal = MappingProxyType(dict(self.prefixal))
        self.combining = MappingProxyType(dict(self.combining))
        self.suffixal = MappingProxyType(dict(self.suffixal))

    def __len__(self) -> int:
        return len(self.prefixal) + len(self.combining) + len(self.suffixal)


class Ruleset:
    """
    Tables compiled from a rules file.

    Usage:
        ruleset = load_ruleset(rules_text, schema)
        ruleset.base_characters["p"].features
        ruleset.modifiers.table(ModifierClass.COMBINING)["̥"].rules
    """

    def __init__(self, schema: FeatureSchema, config: Optional[FeaturalizerConfig] = None):
        self.schema = schema
        self.config = config or DEFAULT_CONFIG
        self.state = RulesetState.LOADING

        self.defaults: FeatureBundle = FeatureBundle()
        self.aliases: Dict[str, FeatureBundle] = {}
        self.base_characters: Mapping[str, BaseCharacter] = {}
        self.modifiers = ModifierTables()

        self._order: Dict[ModifierClass, Mapping[str, int]] = {}
        self._glyph_sets: Dict[Optional[ModifierClass], FrozenSet[str]] = {}

    # === LOADING ===

    def _check_loading(self) -> None:
        if self.state is not RulesetState.LOADING:
            raise RuntimeError("Ruleset is frozen")

    def add_base(self, base: BaseCharacter) -> None:
        self._check_loading()
        if base.glyph in self.base_characters:
            raise DuplicateBaseError(f"Duplicate base character: {base.glyph}")
        self.base_characters[base.glyph] = base

    def add_modifier_rule(self, glyph: str, klass: ModifierClass, rule: ModifierRule) -> Modifier:
        """Append a rule to a diacritic, creating the diacritic on first definition."""
        self._check_loading()
        table = self.modifiers.table(klass)
        modifier = table.get(glyph) or Modifier(glyph=glyph, klass=klass)
        table[glyph] = modifier.with_rule(rule)
        return table[glyph]

    def freeze(self) -> "Ruleset":
        """Freeze the tables and compute the canonical diacritic order."""
        self._check_loading()

        self.base_characters = MappingProxyType(dict(self.base_characters))
        self.aliases = MappingProxyType(dict(self.aliases))
        self.modifiers.freeze()

        for klass in MODIFIER_CLASS_ORDER:
            table = self.modifiers.table(klass)
            self._order[klass] = MappingProxyType({glyph: i for i, glyph in enumerate(table)})
            self._glyph_sets[klass] = frozenset(table)
        self._glyph_sets[None] = frozenset(self.base_characters)

        self.state = RulesetState.READY
        logger.info(
            f"Ruleset ready: {len(self.base_characters)} bases, "
            f"{len(self.modifiers.prefixal)} prefixal / {len(self.modifiers.combining)} combining / "
            f"{len(self.modifiers.suffixal)} suffixal modifiers, "
            f"{len(self.aliases)} aliases, {len(self.defaults)} defaults"
        )
        return self

    # === READY ===

    @property
    def is_ready(self) -> bool:
        return self.state is RulesetState.READY

    def require_ready(self) -> None:
        if not self.is_ready:
            raise RulesetNotReadyError("Ruleset is still loading; featuralization requires a frozen ruleset")

    def order(self, klass: ModifierClass) -> Mapping[str, int]:
        """Canonical position of each glyph of a modifier class."""
        self.require_ready()
        return self._order[klass]

    def base_glyphs(self) -> FrozenSet[str]:
        self.require_ready()
        return self._glyph_sets[None]

    def modifier_glyphs(self, klass: ModifierClass) -> FrozenSet[str]:
        self.require_ready()
        return self._glyph_sets[klass]

    def get_base(self, glyph: str) -> Optional[BaseCharacter]:
        return self.base_characters.get(glyph)

    def get_modifier(self, klass: ModifierClass, glyph: str) -> Optional[Modifier]:
        return self.modifiers.table(klass).get(glyph)

    def __repr__(self) -> str:
        return (
            f"Ruleset(state={self.state.value}, bases={len(self.base_characters)}, "
            f"modifiers={len(self.modifiers)})"
        )
