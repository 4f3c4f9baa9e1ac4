#!/usr/bin/env python3
"""
Rules Compiler

Interprets the line-oriented rules language into a Ruleset.

Directives (symbol / word form):
    __meta default <value> : <feature>...
    __meta alias <name> : <feature-token>...
    __meta setalias ...                          (recognized, ignored)
    __meta block ...                             (unsupported)
    =  / base    <glyph> : <feature-token>...
    *= / derive  <glyph> <glyph> : ...           (unsupported)
    ^= / combin  <glyph> <match-token>... : <patch-token>...
    => / suffix  <glyph> <match-token>... : <patch-token>...
    <= / prefix  <glyph> <match-token>... : <patch-token>...

Feature tokens:
    *labial          alias reference
    +voice / -voice  shorthand: one-character value label, then the name
    voice:false      explicit name:value (true/false/null mean +/-/0)

Meta directives are hoisted: they run in a first pass so every base and
modifier line sees the complete default and alias tables.

Usage:
    ruleset = load_ruleset(rules_text, schema)
"""

from typing import Callable, Dict, Iterator, List, NamedTuple, Optional, Tuple
from logging import getLogger

from src.phonology.config import FeaturalizerConfig, DEFAULT_CONFIG
from src.phonology.errors import (
    FeaturalizerError,
    UnknownFeatureError,
    InvalidFeatureValueError,
    UnknownAliasError,
    UnknownDirectiveError,
    MalformedDirectiveError,
    UnsupportedDirectiveError,
)
from src.phonology.feature_schema import FeatureSchema, FeatureBundle
from src.phonology.utils import describe_glyph, normalize_glyphs, strip_comment
from .ruleset import Ruleset
from .types import BaseCharacter, ModifierClass, ModifierRule

logger = getLogger(__name__)

BASE_COMMANDS = ("=", "base")
DERIVED_BASE_COMMANDS = ("*=", "derive")
MODIFIER_COMMANDS = {
    "^=": ModifierClass.COMBINING,
    "combin": ModifierClass.COMBINING,
    "=>": ModifierClass.SUFFIXAL,
    "suffix": ModifierClass.SUFFIXAL,
    "<=": ModifierClass.PREFIXAL,
    "prefix": ModifierClass.PREFIXAL,
}

META_DEFAULT = "default"
META_ALIAS = "alias"
META_SETALIAS = "setalias"
META_BLOCK = "block"


class RulesLine(NamedTuple):
    """One non-blank rules line, comment stripped and split on whitespace."""
    number: int
    text: str
    tokens: List[str]


class RuleCompiler:
    """
    Compiles rules text into a frozen Ruleset.

    One compiler instance compiles one rules text; errors carry the
    offending line number and text.
    """

    def __init__(self, schema: FeatureSchema, config: Optional[FeaturalizerConfig] = None):
        self.schema = schema
        self.config = config or DEFAULT_CONFIG
        self.ruleset = Ruleset(schema, self.config)
        self._line_number = 0

        self._meta_handlers: Dict[str, Callable[[List[str]], None]] = {
            META_DEFAULT: self._parse_meta_default,
            META_ALIAS: self._parse_meta_alias,
            META_SETALIAS: self._parse_meta_setalias,
            META_BLOCK: self._parse_meta_block,
        }

    def compile(self, text: str) -> Ruleset:
        """
        Compile rules text.

        Args:
            text: Full rules-file content

        Returns:
            Ruleset in the READY state

        Raises:
            FeaturalizerError: any malformed line; aborts the whole load
        """
        lines = list(self._split_lines(text))
        meta = self.config.meta_keyword

        # hoisted metas
        for line in lines:
            if line.tokens[0] == meta:
                self._run(line, self._parse_meta)

        for line in lines:
            if line.tokens[0] != meta:
                self._run(line, self._parse_command)

        return self.ruleset.freeze()

    def _split_lines(self, text: str) -> Iterator[RulesLine]:
        for number, raw in enumerate(text.splitlines(), start=1):
            tokens = strip_comment(raw, self.config.comment_marker).split()
            if tokens:
                yield RulesLine(number, raw.strip(), tokens)

    def _run(self, line: RulesLine, handler: Callable[[List[str]], None]) -> None:
        logger.debug(f"Line {line.number}: {line.text}")
        self._line_number = line.number
        try:
            handler(line.tokens)
        except FeaturalizerError as e:
            e.at_line(line.number, line.text)
            raise

    def _parse_command(self, tokens: List[str]) -> None:
        command, args = tokens[0], tokens[1:]
        if command in BASE_COMMANDS:
            self._parse_base(args)
        elif command in DERIVED_BASE_COMMANDS:
            raise UnsupportedDirectiveError(f"Derived base definitions ({command}) are not supported")
        elif command in MODIFIER_COMMANDS:
            self._parse_modifier(args, MODIFIER_COMMANDS[command])
        else:
            raise UnknownDirectiveError(f"Unknown command {command}")

    def _split_assignment(self, args: List[str], directive: str) -> Tuple[List[str], List[str]]:
        separator = self.config.assignment_separator
        if separator not in args:
            raise MalformedDirectiveError(f"Invalid {directive} definition: missing '{separator}'")
        index = args.index(separator)
        return args[:index], args[index + 1:]

    # === META DIRECTIVES ===

    def _parse_meta(self, tokens: List[str]) -> None:
        if len(tokens) < 2:
            raise MalformedDirectiveError("Meta directive without a command")
        handler = self._meta_handlers.get(tokens[1])
        if handler is None:
            raise UnknownDirectiveError(f"Unknown meta command {tokens[1]}")
        handler(tokens[2:])

    def _parse_meta_default(self, args: List[str]) -> None:
        before, features = self._split_assignment(args, "default")
        if len(before) != 1 or not features:
            raise MalformedDirectiveError("Invalid default definition: expected '<value> : <feature>...'")
        value = self._parse_value(before[0])

        for name in features:
            self._check_pair(name, value)
            self.ruleset.defaults[name] = value
        # checked after every line so the error points at the line that broke the table
        self.schema.validate_partial(self.ruleset.defaults, "defaults")

    def _parse_meta_alias(self, args: List[str]) -> None:
        before, tokens = self._split_assignment(args, "alias")
        if len(before) != 1 or not tokens:
            raise MalformedDirectiveError("Invalid alias definition: expected '<name> : <feature-token>...'")
        name = self._strip_sigil(before[0])

        bundle = self.parse_feature_list(tokens)
        # aliases need not be comprehensive - a 'coronal' alias that leaves anterior unset is fine
        self.schema.validate_partial(bundle, f"alias {name}")

        if name in self.ruleset.aliases:
            logger.warning(f"Alias '{name}' redeclared; the later definition replaces the earlier one")
        self.ruleset.aliases[name] = bundle

    def _parse_meta_setalias(self, args: List[str]) -> None:
        logger.warning(f"setalias is not supported; ignoring: {' '.join(args)}")

    def _parse_meta_block(self, args: List[str]) -> None:
        raise UnsupportedDirectiveError("block isn't supported yet - use alias")

    # === BASES AND MODIFIERS ===

    def _parse_base(self, args: List[str]) -> None:
        before, tokens = self._split_assignment(args, "base")
        if len(before) != 1:
            raise MalformedDirectiveError("Invalid base definition: expected '<glyph> : <feature-token>...'")
        glyph = normalize_glyphs(before[0], self.config.unicode_form)

        explicit = self.parse_feature_list(tokens)
        bundle = FeatureBundle(explicit)
        for name, value in self.ruleset.defaults.items():
            bundle.setdefault(name, value)
        # defaults under a branch this base doesn't take are dropped; explicit ones are kept for validation
        bundle = self.schema.prune_unreachable(bundle, keep=explicit.keys())
        self.schema.validate_bundle(bundle, f"base {glyph}")

        self.ruleset.add_base(BaseCharacter(glyph=glyph, features=bundle, line_number=self._line_number))

    def _parse_modifier(self, args: List[str], klass: ModifierClass) -> None:
        before, tokens = self._split_assignment(args, klass.value)
        if not before:
            raise MalformedDirectiveError(f"Invalid {klass.value} definition: missing glyph")
        glyph = before[0].replace(self.config.null_base_placeholder, "")
        glyph = normalize_glyphs(glyph, self.config.unicode_form)
        if not glyph:
            raise MalformedDirectiveError(f"Invalid {klass.value} definition: empty glyph")

        match = self.parse_feature_list(before[1:])
        patch = self.parse_feature_list(tokens)
        if not patch:
            raise MalformedDirectiveError(f"Invalid {klass.value} definition for {glyph}: empty patch")

        context = f"{klass.value} {describe_glyph(glyph)}"
        self.schema.validate_partial(match, context)
        self.schema.validate_modifier_rule(match, patch, context)

        rule = ModifierRule(match=match, patch=patch, line_number=self._line_number)
        modifier = self.ruleset.add_modifier_rule(glyph, klass, rule)
        logger.debug(f"{context}: rule {len(modifier.rules)}: {rule.describe()}")

    # === FEATURE TOKENS ===

    def parse_feature_list(self, tokens: List[str]) -> FeatureBundle:
        """Merge feature tokens left to right; later tokens win."""
        bundle = FeatureBundle()
        sigil = self.config.alias_sigil
        for token in tokens:
            if token.startswith(sigil):
                name = token[len(sigil):]
                alias = self.ruleset.aliases.get(name)
                if alias is None:
                    raise UnknownAliasError(f"Undefined alias: {name}")
                bundle.update(alias)
            else:
                bundle.update(self.parse_feature(token))
        return bundle

    def parse_feature(self, token: str) -> FeatureBundle:
        """Parse one assignment: `-anterior` or `anterior:false`."""
        separator = self.config.assignment_separator
        if separator in token:
            name, value = token.split(separator, 1)
            if not name or not value or separator in value:
                raise MalformedDirectiveError(f"Invalid feature assignment: {token}")
            value = self._parse_value(value)
        else:
            if len(token) < 2:
                raise MalformedDirectiveError(f"Invalid feature assignment: {token}")
            value, name = token[0], token[1:]

        self._check_pair(name, value)
        return FeatureBundle([(name, value)])

    def _parse_value(self, value: str) -> str:
        return self.config.value_synonyms.get(value, value)

    def _check_pair(self, name: str, value: str) -> None:
        if name not in self.schema:
            raise UnknownFeatureError(f"Nonexistent feature: {name}")
        node = self.schema.get(name)
        if not node.permits(value):
            raise InvalidFeatureValueError(
                f"Feature {name} doesn't have value {value} (permitted: {' '.join(node.labels)})"
            )

    def _strip_sigil(self, name: str) -> str:
        sigil = self.config.alias_sigil
        return name[len(sigil):] if name.startswith(sigil) else name


def load_ruleset(
    text: str,
    schema: FeatureSchema,
    config: Optional[FeaturalizerConfig] = None,
) -> Ruleset:
    """Compile rules text against a schema into a READY ruleset."""
    return RuleCompiler(schema, config).compile(text)
