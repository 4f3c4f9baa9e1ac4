#!/usr/bin/env python3
"""
Feature Schema Service

Loads a tree of dependent phonological features and checks feature bundles
and modifier rules against it.

Features:
- Structural validation of the schema tree (names, values, binary children)
- Name and parent indexes for every feature
- Comprehensiveness check for base-character bundles
- Consistency check for partial bundles (aliases, defaults)
- Reachability check for modifier rules
- Patch application with re-validation

Usage:
    schema = FeatureSchema.load([
        {"name": "consonantal", "values": {
            "+": [{"name": "fortis", "values": {"+": [], "-": []}}],
            "-": [],
        }},
    ])
    schema.validate_bundle(FeatureBundle({"consonantal": "+", "fortis": "+"}))
"""

from typing import Any, Dict, Iterable, List, Optional, Sequence, Set, Union
from logging import getLogger

from pydantic import TypeAdapter, ValidationError

from src.phonology.errors import (
    SchemaError,
    IncompleteBundleError,
    InvalidValueError,
    UnreachableFeatureError,
    MissingBaseValueError,
    UnreachablePatchError,
    UnknownFeatureError,
)
from .types import FeatureNode, FeatureBundle, FeatureValue, ParentLink, SchemaTree

logger = getLogger(__name__)

BINARY_VALUES = frozenset({"+", "-"})

_tree_adapter = TypeAdapter(List[FeatureNode])


def _context(label: Optional[str]) -> str:
    return f" ({label})" if label else ""


class FeatureSchema:
    """
    A validated feature-dependency tree.

    Every feature name is unique across the tree. A feature gated by value
    `v` of parent `p` only exists in a bundle where `p` holds `v`; features
    directly under the implicit root always exist.

    Non-top-level features must be binary ("+" and "-").
    """

    def __init__(self, top_level: SchemaTree):
        """
        Build indexes over an already parsed tree.

        Use FeatureSchema.load() for raw input; it runs the structural checks.

        Args:
            top_level: Top-level feature nodes
        """
        self.top_level: List[FeatureNode] = list(top_level)
        self.features_by_name: Dict[str, FeatureNode] = {}
        self.features_by_parent: Dict[str, ParentLink] = {}

        for node in self.top_level:
            self._index(node, parent=None)

        self.root_names: Set[str] = {node.name for node in self.top_level}
        logger.info(
            f"Feature schema loaded: {len(self.features_by_name)} features, "
            f"{len(self.top_level)} top-level"
        )

    @classmethod
    def load(cls, tree: Sequence[Union[Dict[str, Any], FeatureNode]]) -> "FeatureSchema":
        """
        Load a schema from its tree description.

        Args:
            tree: List of top-level nodes, each `{name, values: {label: [child, ...]}}`

        Returns:
            FeatureSchema

        Raises:
            SchemaError: missing name/values, non-binary child feature, repeated name
        """
        try:
            nodes = _tree_adapter.validate_python(list(tree))
        except ValidationError as e:
            raise SchemaError(f"Malformed feature schema: {e}") from e

        for node in nodes:
            cls._check_binary(node, top_level=True)

        return cls(nodes)

    @classmethod
    def from_json(cls, text: Union[str, bytes]) -> "FeatureSchema":
        """Load a schema from JSON text holding the top-level node list."""
        try:
            nodes = _tree_adapter.validate_json(text)
        except ValidationError as e:
            raise SchemaError(f"Malformed feature schema: {e}") from e

        for node in nodes:
            cls._check_binary(node, top_level=True)

        return cls(nodes)

    @classmethod
    def _check_binary(cls, node: FeatureNode, top_level: bool) -> None:
        if not top_level and set(node.values) != BINARY_VALUES:
            raise SchemaError(f"Non-binary feature: {node.name} has values {node.labels}")
        for children in node.values.values():
            for child in children:
                cls._check_binary(child, top_level=False)

    def _index(self, node: FeatureNode, parent: Optional[ParentLink]) -> None:
        if node.name in self.features_by_name:
            raise SchemaError(f"Ambiguous feature name: {node.name}")
        self.features_by_name[node.name] = node
        if parent is not None:
            self.features_by_parent[node.name] = parent

        for value, children in node.values.items():
            for child in children:
                self._index(child, parent=(node.name, value))

    # === LOOKUPS ===

    def __contains__(self, name: str) -> bool:
        return name in self.features_by_name

    def get(self, name: str) -> FeatureNode:
        """Get a feature by name."""
        node = self.features_by_name.get(name)
        if node is None:
            raise UnknownFeatureError(f"Nonexistent feature: {name}")
        return node

    def get_parent(self, name: str) -> Optional[ParentLink]:
        """(parent name, gating value) of a feature; None for top-level features."""
        self.get(name)
        return self.features_by_parent.get(name)

    def resolve(self, name: str, value: str) -> FeatureValue:
        """Check a single feature:value pair against the schema."""
        node = self.get(name)
        if not node.permits(value):
            raise InvalidValueError(
                f"Feature {name} doesn't have value {value} (permitted: {' '.join(node.labels)})"
            )
        return FeatureValue(feature=name, value=value)

    def bundle_to_values(self, bundle: Dict[str, str]) -> List[FeatureValue]:
        return [self.resolve(name, value) for name, value in bundle.items()]

    # === BUNDLE CHECKS ===

    def reachable_features(self, bundle: Dict[str, str]) -> Set[str]:
        """
        Names of every feature reachable under the bundle's own choices.

        Walks from the top level; a feature's children are followed only
        through the value the bundle gives it.
        """
        reachable: Set[str] = set()
        stack: List[FeatureNode] = list(self.top_level)
        while stack:
            node = stack.pop()
            reachable.add(node.name)
            value = bundle.get(node.name)
            if value is not None:
                stack.extend(node.children(value))
        return reachable

    def validate_bundle(self, bundle: Dict[str, str], context: Optional[str] = None) -> None:
        """
        Ensure a bundle is comprehensive.

        Every top-level feature needs a value, as does every child of a
        value the bundle chooses, recursively. With Hayes-Prime, a bundle
        needs ±coronal, and if coronal is + it needs ±anterior, ±distributed
        and ±strident as well. Features the bundle's choices make
        unreachable must be absent.

        Args:
            bundle: Bundle to check
            context: Label for error messages (glyph, alias name, ...)

        Raises:
            IncompleteBundleError: a reachable feature has no value
            InvalidValueError: a value is not permitted on its feature
            UnreachableFeatureError: a feature is present but unreachable
        """
        visited: Set[str] = set()
        stack: List[FeatureNode] = list(reversed(self.top_level))
        while stack:
            node = stack.pop()
            visited.add(node.name)
            value = bundle.get(node.name)
            if value is None:
                raise IncompleteBundleError(f"Invalid bundle: missing {node.name}{_context(context)}")
            if not node.permits(value):
                raise InvalidValueError(
                    f"Invalid bundle: value {value} not possible on feature {node.name}{_context(context)}"
                )
            stack.extend(reversed(node.children(value)))

        for name in bundle:
            if name in visited:
                continue
            if name not in self.features_by_name:
                raise UnknownFeatureError(f"Invalid bundle: nonexistent feature {name}{_context(context)}")
            parent, gate = self.features_by_parent[name]
            raise UnreachableFeatureError(
                f"Invalid bundle: {name} is not reachable, it requires {parent}:{gate}{_context(context)}"
            )

    def validate_partial(self, bundle: Dict[str, str], context: Optional[str] = None) -> None:
        """
        Check a bundle that need not be comprehensive (alias, defaults).

        Every pair must exist in the schema, and a feature may not appear
        together with a parent value that excludes it.
        """
        for name, value in bundle.items():
            try:
                self.resolve(name, value)
            except (UnknownFeatureError, InvalidValueError) as e:
                e.message = f"{e.message}{_context(context)}"
                raise

            link = self.features_by_parent.get(name)
            if link is None:
                continue
            parent, gate = link
            if parent in bundle and bundle[parent] != gate:
                raise UnreachableFeatureError(
                    f"Inconsistent bundle: {name} requires {parent}:{gate} "
                    f"but bundle has {parent}:{bundle[parent]}{_context(context)}"
                )

    def prune_unreachable(self, bundle: Dict[str, str], keep: Iterable[str] = ()) -> FeatureBundle:
        """
        Drop features the bundle's own choices make unreachable.

        Names in `keep` are never dropped, so validating the result still
        reports them if they are unreachable.
        """
        reachable = self.reachable_features(bundle)
        protected = set(keep)
        return FeatureBundle(
            (name, value) for name, value in bundle.items()
            if name in reachable or name in protected
        )

    # === MODIFIER RULES ===

    def validate_modifier_rule(
        self,
        match: Dict[str, str],
        patch: Dict[str, str],
        context: Optional[str] = None,
    ) -> None:
        """
        Ensure a modifier rule's match makes every patched feature reachable.

        With Hayes-Prime, a patch setting +anterior needs +coronal in the
        match, since ±anterior only exists under +coronal. A patched feature
        is reachable if one of these holds:
        - it is a top-level feature                    (root -> +long)
        - the match sets the same feature              (-labiodental -> +labiodental)
        - the match sets a sibling under the same gate (+anterior -> +distributed)
        - the match sets its parent to the gating value (+coronal -> +anterior)

        Raises:
            UnreachablePatchError: a patched feature is not reachable
        """
        self.bundle_to_values(match)
        self.bundle_to_values(patch)

        match_parents = {
            self.features_by_parent[name] for name in match if name in self.features_by_parent
        }

        for name in patch:
            if name in self.root_names or name in match:
                continue
            link = self.features_by_parent[name]
            if link in match_parents:
                continue
            parent, gate = link
            if match.get(parent) == gate:
                continue
            raise UnreachablePatchError(
                f"Invalid rule {FeatureBundle(match)} : {FeatureBundle(patch)}{_context(context)}: "
                f"{name} needs {parent}:{gate} in the match"
            )

    def apply_patch(
        self,
        bundle: Dict[str, str],
        patch: Dict[str, str],
        context: Optional[str] = None,
    ) -> FeatureBundle:
        """
        Return a new bundle with `patch` overriding `bundle`.

        Children left unreachable by a changed parent value are dropped.
        The result is validated for comprehensiveness, so a badly written
        rule fails here even if it slipped past load-time checks.

        Raises:
            MissingBaseValueError: patch sets a feature the bundle lacks
            BundleError: result is not a comprehensive bundle
        """
        for name in patch:
            if name not in bundle:
                raise MissingBaseValueError(
                    f"Couldn't find {name} in bundle while applying patch{_context(context)}"
                )

        result = self.prune_unreachable(FeatureBundle(bundle).merged(patch), keep=patch.keys())
        self.validate_bundle(result, f"runtime error{', ' + context if context else ''}")
        return result


def load_schema(tree: Sequence[Union[Dict[str, Any], FeatureNode]]) -> FeatureSchema:
    """Load a feature schema from its tree description."""
    return FeatureSchema.load(tree)
