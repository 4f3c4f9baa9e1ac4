#!/usr/bin/env python3
"""
Feature Schema Data Types

Pydantic models for the feature-dependency tree, plus the FeatureBundle
mapping that every other component passes around.

A feature is a node with a name and a map from value labels to child
features. Children are only meaningful when the parent holds the gating
value. PHOIBLE's "Hayes-Prime" model, for example, makes fortis a child of
consonantal:+ :

    {
        "name": "consonantal",
        "values": {
            "+": [{"name": "fortis", "values": {"+": [], "-": []}}],
            "-": []
        }
    }

Top-level nodes sit under an implicit root.
"""

from typing import Dict, Iterable, List, Tuple, Union
from pydantic import BaseModel, Field, ConfigDict
from pydantic_core import core_schema


class FeatureNode(BaseModel):
    """
    One node of the feature schema tree.

    Values are keys of `values`; each maps to the ordered list of child
    features gated by that value (empty for leaves).
    """

    name: str = Field(
        ...,
        min_length=1,
        description="Feature name, unique across the whole schema",
        examples=["consonantal", "fortis", "anterior"]
    )

    values: Dict[str, List["FeatureNode"]] = Field(
        ...,
        description="Permitted value labels mapped to the child features they gate",
        examples=[{"+": [], "-": []}]
    )

    model_config = ConfigDict(extra="forbid")

    @property
    def labels(self) -> List[str]:
        """Permitted value labels in declaration order."""
        return list(self.values.keys())

    def permits(self, value: str) -> bool:
        return value in self.values

    def children(self, value: str) -> List["FeatureNode"]:
        """Child features gated by `value` (empty if none or unknown)."""
        return self.values.get(value, [])


FeatureNode.model_rebuild()


class FeatureBundle(dict):
    """
    Insertion-ordered mapping from feature name to value label.

    Serialized form is space-joined `name:value` pairs in insertion order:

        >>> FeatureBundle([("voice", "-"), ("nasal", "-")]).to_string()
        'voice:- nasal:-'
    """

    PAIR_SEPARATOR = ":"

    def __init__(self, items: Union[Iterable[Tuple[str, str]], Dict[str, str], None] = None):
        super().__init__(items or ())

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type, handler):
        # Validate as a plain str->str dict, then rewrap so models keep the type
        return core_schema.no_info_after_validator_function(cls, handler.generate_schema(Dict[str, str]))

    def matches(self, other: Dict[str, str]) -> bool:
        """True if every feature:value pair of self also holds in `other`."""
        return all(other.get(name) == value for name, value in self.items())

    def merged(self, patch: Dict[str, str]) -> "FeatureBundle":
        """New bundle with `patch` overriding self; new keys go last."""
        result = FeatureBundle(self)
        result.update(patch)
        return result

    def to_string(self) -> str:
        return " ".join(f"{name}{self.PAIR_SEPARATOR}{value}" for name, value in self.items())

    @classmethod
    def from_string(cls, text: str) -> "FeatureBundle":
        """
        Parse the output of to_string().

        Values may themselves contain the separator (only the first one
        splits), so folded contours like `high:->+` survive.
        """
        pairs = []
        for token in text.split():
            name, sep, value = token.partition(cls.PAIR_SEPARATOR)
            if not sep or not name or not value:
                raise ValueError(f"Invalid feature pair: {token!r}")
            pairs.append((name, value))
        return cls(pairs)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"FeatureBundle({self.to_string()!r})"


class FeatureValue(BaseModel):
    """A (feature, value) pair resolved against the schema."""

    feature: str = Field(..., description="Feature name")
    value: str = Field(..., description="Value label permitted by the feature")

    model_config = ConfigDict(extra="forbid", frozen=True)


# === TYPE ALIASES ===

SchemaTree = List[FeatureNode]
"""Type alias: top-level feature nodes under the implicit root"""

ParentLink = Tuple[str, str]
"""Type alias: (parent feature name, value label gating the child)"""
