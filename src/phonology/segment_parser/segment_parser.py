#!/usr/bin/env python3
"""
Segment Parser

Splits a raw glyph string into unit segments by greedy longest match
against the glyph inventories of a ruleset.

Phases (left to right, no backtracking across phases):
1. prefixal diacritics, queued until a base is read
2. repeated until the string is consumed:
   base characters -> combining diacritics -> suffixal diacritics
   (diacritics attach to the most recent base)

A round that consumes nothing means an unrecognized glyph.

Usage:
    parser = SegmentParser(ruleset)
    segment = parser.parse("tʰ")
    segment.units[0].suffixal   # ["ʰ"]
"""

from typing import AbstractSet, List, Optional, Tuple
from logging import getLogger

from src.phonology.errors import UnrecognizedGlyphError, NoBaseCharacterError
from src.phonology.ruleset import Ruleset, ModifierClass
from src.phonology.utils import normalize_glyphs, string_to_codepoints
from .types import Segment, UnitSegment

logger = getLogger(__name__)


def greedy_match(
    text: str,
    glyphs: AbstractSet[str],
    max_length: Optional[int] = None,
) -> Tuple[List[str], str]:
    """
    Consume a maximal run of glyphs from the start of `text`.

    At each position the longest glyph of the set starting there wins;
    scanning stops at the first position where none does.

    Args:
        text: String to scan
        glyphs: Glyph inventory (members may be several codepoints)
        max_length: Length of the longest glyph, if already known

    Returns:
        (matched glyphs in order, unconsumed remainder)

    Example:
        >>> greedy_match("tsa", {"ts", "t", "s"})
        (['ts'], 'a')
    """
    if max_length is None:
        max_length = max((len(glyph) for glyph in glyphs), default=0)

    matched: List[str] = []
    position = 0
    while position < len(text):
        for length in range(min(max_length, len(text) - position), 0, -1):
            candidate = text[position:position + length]
            if candidate in glyphs:
                matched.append(candidate)
                position += length
                break
        else:
            break

    return matched, text[position:]


class SegmentParser:
    """
    Greedy tokenizer bound to the glyph inventories of a READY ruleset.

    Stateless between calls; one parser can serve any number of segments
    (and threads).
    """

    def __init__(self, ruleset: Ruleset):
        ruleset.require_ready()
        self.unicode_form = ruleset.config.unicode_form
        self.base_glyphs = ruleset.base_glyphs()
        self.modifier_glyphs = {klass: ruleset.modifier_glyphs(klass) for klass in ModifierClass}
        self._max_lengths = {
            klass: max((len(glyph) for glyph in glyphs), default=0)
            for klass, glyphs in self.modifier_glyphs.items()
        }
        self._max_base_length = max((len(glyph) for glyph in self.base_glyphs), default=0)

    def _consume(self, text: str, klass: ModifierClass) -> Tuple[List[str], str]:
        return greedy_match(text, self.modifier_glyphs[klass], self._max_lengths[klass])

    def parse(self, glyphs: str) -> Segment:
        """
        Tokenize one glyph string.

        Args:
            glyphs: Raw segment text, e.g. "ⁿdʒʷ"

        Returns:
            Segment with at least one unit

        Raises:
            UnrecognizedGlyphError: part of the string matches no inventory
            NoBaseCharacterError: the string holds no base character
        """
        text = normalize_glyphs(glyphs.strip(), self.unicode_form)

        prefixes, rest = self._consume(text, ModifierClass.PREFIXAL)
        segment = Segment(glyphs=glyphs, prefix_queue=prefixes)

        while rest:
            length_before = len(rest)

            bases, rest = greedy_match(rest, self.base_glyphs, self._max_base_length)
            for base in bases:
                unit = UnitSegment(base=base)
                for prefix in segment.prefix_queue:
                    unit.add_modifier(ModifierClass.PREFIXAL, prefix)
                segment.prefix_queue = []
                segment.units.append(unit)

            if segment.units:
                unit = segment.units[-1]
                for klass in (ModifierClass.COMBINING, ModifierClass.SUFFIXAL):
                    matched, rest = self._consume(rest, klass)
                    for glyph in matched:
                        unit.add_modifier(klass, glyph)

            if len(rest) == length_before:
                raise UnrecognizedGlyphError(glyphs, rest, string_to_codepoints(rest))

        if not segment.units:
            raise NoBaseCharacterError(glyphs)

        logger.debug(f"Parsed '{glyphs}' into {len(segment.units)} unit(s): {segment.render()}")
        return segment


def parse_segment(ruleset: Ruleset, glyphs: str) -> Segment:
    """Tokenize one glyph string against a ruleset."""
    return SegmentParser(ruleset).parse(glyphs)
