"""
Featuralizer configuration.

Rules-language syntax markers and featuralization switches. The defaults
describe the rules language as documented; a config is only needed to
read files written with different markers.
"""

from typing import Dict, Optional, Literal
from pydantic import BaseModel, Field, ConfigDict


class FeaturalizerConfig(BaseModel):
    """Configuration for rules compilation and featuralization."""

    comment_marker: str = Field(default="#", min_length=1, description="Starts a comment running to end of line")
    meta_keyword: str = Field(default="__meta", min_length=1, description="Command keyword of meta directives")
    alias_sigil: str = Field(default="*", min_length=1, description="Prefix marking an alias reference in a feature list")
    assignment_separator: str = Field(default=":", min_length=1, description="Separates glyph/match tokens from feature tokens")
    null_base_placeholder: str = Field(
        default="◌",
        description="Dotted circle written under combining diacritics; stripped from modifier glyphs",
    )
    value_synonyms: Dict[str, str] = Field(
        default_factory=lambda: {"true": "+", "false": "-", "null": "0"},
        description="Long-form value spellings accepted in name:value tokens",
    )
    unicode_form: Optional[Literal["NFC", "NFD", "NFKC", "NFKD"]] = Field(
        default="NFD",
        description=(
            "Unicode normalization applied character by character to rule glyphs and input segments, "
            "keeping the written order of diacritics (None disables)"
        ),
    )
    check_normalization: bool = Field(
        default=True,
        description="Compare each segment with its canonically ordered form and warn on mismatch",
    )

    model_config = ConfigDict(extra="forbid", frozen=True)


DEFAULT_CONFIG = FeaturalizerConfig()
