"""
Featuralizer Error Taxonomy

Every failure raised by the schema, the rules compiler, the segment parser
and the featuralizer derives from FeaturalizerError, so callers can catch
the whole family at a batch boundary while still telling the kinds apart.

Load-time errors (schema, ruleset) abort the run. Segment errors are
per-input and are isolated by the batch driver.
"""

from typing import List, Optional


class FeaturalizerError(Exception):
    """Base class for all featuralizer errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
        self.line_number: Optional[int] = None
        self.line: Optional[str] = None

    def at_line(self, line_number: int, line: str) -> "FeaturalizerError":
        """
        Attach rules-file location to this error.

        The first location wins: nested handlers never overwrite it.
        """
        if self.line_number is None:
            self.line_number = line_number
            self.line = line
        return self

    def __str__(self) -> str:
        if self.line_number is None:
            return self.message
        return f"{self.message} (line {self.line_number}: {self.line})"


class SchemaError(FeaturalizerError):
    """Ambiguous or malformed feature schema."""


class RulesetNotReadyError(FeaturalizerError):
    """Featuralization attempted before the ruleset was frozen."""


# === BUNDLE VALIDATION ===

class BundleError(FeaturalizerError):
    """A feature bundle does not fit the schema."""


class IncompleteBundleError(BundleError):
    """A reachable feature has no value in a bundle that must be comprehensive."""


class InvalidValueError(BundleError):
    """A bundle asserts a value the feature does not permit."""


class UnreachableFeatureError(InvalidValueError):
    """A bundle asserts a feature its own choices make unreachable."""


class MissingBaseValueError(BundleError):
    """A patch touches a feature the working bundle has no value for."""


class UnreachablePatchError(FeaturalizerError):
    """A modifier rule patches a feature its match does not make reachable."""


# === RULES FILE ===

class RulesetError(FeaturalizerError):
    """Malformed rules-file content."""


class DuplicateBaseError(RulesetError):
    pass


class UnknownFeatureError(RulesetError):
    pass


class InvalidFeatureValueError(RulesetError):
    pass


class UnknownAliasError(RulesetError):
    pass


class UnknownDirectiveError(RulesetError):
    pass


class MalformedDirectiveError(RulesetError):
    pass


class UnsupportedDirectiveError(RulesetError):
    """Directive is part of the rules language but not implemented."""


# === SEGMENTS ===

class SegmentError(FeaturalizerError):
    """Tokenization or featuralization failure for one input segment."""

    def __init__(self, message: str, glyphs: str):
        super().__init__(f"{message} in segment '{glyphs}'")
        self.glyphs = glyphs


class UnrecognizedGlyphError(SegmentError):
    def __init__(self, glyphs: str, remainder: str, codepoints: List[str]):
        super().__init__(
            f"Unrecognized glyph at '{remainder}' ({' '.join('U+' + c for c in codepoints)})",
            glyphs,
        )
        self.remainder = remainder


class NoBaseCharacterError(SegmentError):
    def __init__(self, glyphs: str):
        super().__init__("No base character found", glyphs)


class UnknownBaseCharacterError(SegmentError):
    def __init__(self, glyphs: str, base: str):
        super().__init__(f"Unknown base character '{base}'", glyphs)
        self.base = base


class UndefinedDiacriticError(SegmentError):
    def __init__(self, glyphs: str, diacritic: str, klass: str):
        super().__init__(f"Undefined {klass} diacritic '{diacritic}'", glyphs)
        self.diacritic = diacritic


class AmbiguousRuleError(SegmentError):
    def __init__(self, glyphs: str, diacritic: str, matches: List[str]):
        super().__init__(
            f"Diacritic '{diacritic}' has {len(matches)} matching rules [{'; '.join(matches)}]",
            glyphs,
        )
        self.diacritic = diacritic
