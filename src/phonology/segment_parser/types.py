#!/usr/bin/env python3
"""
Segment Parser Data Types

A Segment is one input glyph string broken into unit segments: a base
character with the diacritics attached to it, grouped by class.

    "ʰtʷ"  ->  [UnitSegment(base="t", prefixal=["ʰ"], suffixal=["ʷ"])]
    "ai"   ->  [UnitSegment(base="a"), UnitSegment(base="i")]
"""

from typing import List, Mapping
from pydantic import BaseModel, Field, ConfigDict

from src.phonology.ruleset import ModifierClass, MODIFIER_CLASS_ORDER


class UnitSegment(BaseModel):
    """
    One base character plus its prefixal, combining and suffixal diacritics.

    Each diacritic list keeps tokenization order and holds a glyph at most
    once.
    """

    base: str = Field(..., min_length=1, description="Base character glyph", examples=["t", "kp"])
    prefixal: List[str] = Field(default_factory=list, description="Prefixal diacritics, written before the base")
    combining: List[str] = Field(default_factory=list, description="Combining diacritics, stacked on the base")
    suffixal: List[str] = Field(default_factory=list, description="Suffixal diacritics, written after the base")

    model_config = ConfigDict(extra="forbid")

    def modifiers(self, klass: ModifierClass) -> List[str]:
        if klass is ModifierClass.PREFIXAL:
            return self.prefixal
        if klass is ModifierClass.COMBINING:
            return self.combining
        return self.suffixal

    def add_modifier(self, klass: ModifierClass, glyph: str) -> None:
        glyphs = self.modifiers(klass)
        if glyph not in glyphs:
            glyphs.append(glyph)

    def render(self) -> str:
        """Glyph string in written order: prefixes, base, combining, suffixes."""
        return "".join(self.prefixal) + self.base + "".join(self.combining) + "".join(self.suffixal)

    def canonical(self, orders: Mapping[ModifierClass, Mapping[str, int]]) -> "UnitSegment":
        """Copy with every diacritic list sorted into canonical order."""
        sorted_lists = {
            klass.value: sorted(self.modifiers(klass), key=lambda glyph: orders[klass][glyph])
            for klass in MODIFIER_CLASS_ORDER
        }
        return UnitSegment(base=self.base, **sorted_lists)


class Segment(BaseModel):
    """An input glyph string as a sequence of unit segments."""

    glyphs: str = Field(..., description="Input glyph string as given", examples=["tʰ", "b̥", "ai"])
    units: List[UnitSegment] = Field(default_factory=list, description="Unit segments in written order")
    prefix_queue: List[str] = Field(
        default_factory=list,
        description="Prefixal diacritics read before any base character, awaiting attachment",
    )

    model_config = ConfigDict(extra="forbid")

    @property
    def is_single(self) -> bool:
        return len(self.units) == 1

    def render(self) -> str:
        return "".join(unit.render() for unit in self.units)

    def canonical(self, orders: Mapping[ModifierClass, Mapping[str, int]]) -> "Segment":
        """Copy with each unit's diacritics in canonical order."""
        return Segment(glyphs=self.glyphs, units=[unit.canonical(orders) for unit in self.units])


# === TYPE ALIASES ===

UnitSegmentList = List[UnitSegment]
"""Type alias: List of UnitSegment objects for function signatures"""
