"""
Phonology Utils Package

Glyph text helpers shared by the rules compiler and the segment parser.
"""

from .glyphs import (
    normalize_glyphs,
    string_to_codepoints,
    describe_glyph,
    strip_comment,
    EJECTIVE_MARK,
    WRONG_EJECTIVE_MARKS,
)

__all__ = [
    'normalize_glyphs',
    'string_to_codepoints',
    'describe_glyph',
    'strip_comment',
    'EJECTIVE_MARK',
    'WRONG_EJECTIVE_MARKS',
]
