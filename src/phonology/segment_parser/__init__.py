"""
Segment Parser Package

Greedy longest-match tokenization of glyph strings into unit segments.

Usage:
    from src.phonology.segment_parser import SegmentParser

    segment = SegmentParser(ruleset).parse("tʰ")
    for unit in segment.units:
        print(unit.base, unit.suffixal)
"""

from .segment_parser import SegmentParser, greedy_match, parse_segment
from .types import Segment, UnitSegment, UnitSegmentList

__all__ = [
    "SegmentParser",
    "greedy_match",
    "parse_segment",
    "Segment",
    "UnitSegment",
    "UnitSegmentList",
]
