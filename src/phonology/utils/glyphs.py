"""
Glyph Text Utilities

Helpers shared by the rules compiler and the segment parser so that a glyph
written in a rules file and the same glyph typed in an input segment compare
equal.

The issues:
    Precomposed vs decomposed spellings: "ç" (U+00E7) vs "c" + U+0327.
    Mark order: whole-string NFD sorts combining marks by combining class
    (U+0303 is 230, U+0325 is 220), which would lose the written diacritic
    order. Characters are therefore normalized one at a time.
    Ejective marks typed as quotes: U+2019 (') or U+0027 (') instead of the
    IPA modifier letter apostrophe U+02BC (ʼ).

Example:
    >>> normalize_glyphs("pʼ") == normalize_glyphs("p'")
    True
"""

import unicodedata
from typing import List, Optional


EJECTIVE_MARK = '\u02BC'  # U+02BC ʼ (modifier letter apostrophe)
WRONG_EJECTIVE_MARKS = {
    '\u2019',  # U+2019 ' (right single quotation mark)
    '\u0027',  # U+0027 ' (ASCII apostrophe)
}


def normalize_glyphs(text: str, form: Optional[str] = "NFD") -> str:
    """
    Normalize a glyph string for table lookup.

    Each character is normalized on its own, so "ã" still decomposes to
    "a" + U+0303 but marks are never reordered across characters.

    Args:
        text: Glyph or segment text
        form: Unicode normalization form, or None to skip it

    Returns:
        Text with each character in the requested Unicode form and
        ejective marks unified
    """
    if not text:
        return text

    result = text
    for wrong_mark in WRONG_EJECTIVE_MARKS:
        result = result.replace(wrong_mark, EJECTIVE_MARK)

    if form is not None:
        result = "".join(unicodedata.normalize(form, char) for char in result)

    return result


def string_to_codepoints(text: str) -> List[str]:
    """
    List the codepoints of a string as zero-padded uppercase hex.

    Example:
        >>> string_to_codepoints("b̥")
        ['0062', '0325']
    """
    return [f"{ord(char):04X}" for char in text]


def describe_glyph(text: str) -> str:
    """Render a glyph with its codepoints, e.g. "b̥ (U+0062 U+0325)"."""
    codepoints = " ".join(f"U+{cp}" for cp in string_to_codepoints(text))
    return f"{text} ({codepoints})"


def strip_comment(line: str, marker: str = "#") -> str:
    """Drop everything from the comment marker to end of line."""
    index = line.find(marker)
    if index == -1:
        return line
    return line[:index]
