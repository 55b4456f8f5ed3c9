"""Config types and parsing for data-driven tree construction.

The same JSON/YAML shape is accepted for rules and keys wherever they come
from. Config-driven construction path:
  dict → parse_tree_config() → TreeConfig → load_tree() → MatchTree

Shapes:

| Config dict                                            | Runtime type      |
|--------------------------------------------------------|-------------------|
| {"min", "min_is_excluded", "max", "max_is_excluded"}   | *Interval         |
| {"type", "is_any", "is_inverse", "strings", ...}       | Pattern           |
| {"patterns", "value", "priority"}                      | Rule              |
| {"type", "string" / "integer" / "number"}              | Key               |
| {"types", "rules"}                                     | TreeConfig        |
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from matchtree._interval import IntegerInterval, NumberInterval
from matchtree._pattern import Key, Pattern, Rule
from matchtree._tree import MatchTree
from matchtree._types import (
    DimensionKind,
    MatchTreeError,
    parse_dimension_kind,
)

if TYPE_CHECKING:
    from matchtree._tree import AddRuleOptions

logger = logging.getLogger(__name__)

# Pattern value field per kind (matching the rule JSON encoding)
_VALUE_FIELDS = {
    DimensionKind.STRING: "strings",
    DimensionKind.INTEGER: "integers",
    DimensionKind.INTEGER_INTERVAL: "integer_intervals",
    DimensionKind.NUMBER_INTERVAL: "number_intervals",
}

# Key value field per kind
_KEY_FIELDS = {
    DimensionKind.STRING: "string",
    DimensionKind.INTEGER: "integer",
    DimensionKind.INTEGER_INTERVAL: "integer",
    DimensionKind.NUMBER_INTERVAL: "number",
}


class ConfigParseError(MatchTreeError):
    """Error parsing a config dict into matchtree types."""


@dataclass(frozen=True, slots=True)
class TreeConfig[V]:
    """Dimension kinds plus the rules to load, in insertion order."""

    kinds: tuple[DimensionKind, ...]
    rules: tuple[Rule[V], ...] = ()


# ═══════════════════════════════════════════════════════════════════════════════
# Parsing (dict → types)
# ═══════════════════════════════════════════════════════════════════════════════


def parse_tree_config(data: dict[str, Any]) -> TreeConfig[Any]:
    """Parse a dict into a TreeConfig.

    Raises:
        ConfigParseError: If the dict is malformed.
        UnknownKindError: If a kind name is not recognized.
    """
    _expect_dict(data, "tree config")
    raw_types = data.get("types")
    if raw_types is None:
        msg = "missing required field 'types'"
        raise ConfigParseError(msg)
    _expect_list(raw_types, "'types'")
    kinds = tuple(parse_dimension_kind(t) for t in raw_types)

    raw_rules = data.get("rules", [])
    _expect_list(raw_rules, "'rules'")
    rules = tuple(parse_rule(r) for r in raw_rules)
    return TreeConfig(kinds=kinds, rules=rules)


def parse_rule(data: dict[str, Any]) -> Rule[Any]:
    """Parse a rule dict: {"patterns": [...], "value": ..., "priority": 0}."""
    _expect_dict(data, "rule")
    raw_patterns = data.get("patterns")
    if raw_patterns is None:
        msg = "rule missing required field 'patterns'"
        raise ConfigParseError(msg)
    _expect_list(raw_patterns, "'patterns'")
    if "value" not in data:
        msg = "rule missing required field 'value'"
        raise ConfigParseError(msg)

    priority = data.get("priority", 0)
    if not _is_int(priority):
        msg = f"priority must be an integer, got {type(priority).__name__}"
        raise ConfigParseError(msg)

    patterns = tuple(parse_pattern(p) for p in raw_patterns)
    return Rule(patterns=patterns, value=data["value"], priority=priority)


def parse_pattern(data: dict[str, Any]) -> Pattern:
    """Parse a pattern dict.

    Only the value field belonging to ``type`` may be non-empty; the
    others must be absent, null or empty.
    """
    _expect_dict(data, "pattern")
    kind = _parse_type_field(data, "pattern")
    is_any = _parse_flag(data, "is_any")
    is_inverse = _parse_flag(data, "is_inverse")

    own_field = _VALUE_FIELDS[kind]
    for other_kind, other_field in _VALUE_FIELDS.items():
        if other_kind != kind and data.get(other_field):
            msg = f"field {other_field!r} is not valid for pattern type {kind.value}"
            raise ConfigParseError(msg)

    raw_values = data.get(own_field) or []
    _expect_list(raw_values, repr(own_field))
    values = tuple(_parse_pattern_value(kind, v) for v in raw_values)
    return Pattern(kind=kind, values=values, is_any=is_any, is_inverse=is_inverse)


def parse_key(data: dict[str, Any]) -> Key:
    """Parse a key dict: {"type": "STRING", "string": "x"}."""
    _expect_dict(data, "key")
    kind = _parse_type_field(data, "key")
    field_name = _KEY_FIELDS[kind]
    if field_name not in data:
        msg = f"{kind.value} key missing required field {field_name!r}"
        raise ConfigParseError(msg)
    raw = data[field_name]

    match kind:
        case DimensionKind.STRING:
            if not isinstance(raw, str):
                msg = f"key 'string' must be a string, got {type(raw).__name__}"
                raise ConfigParseError(msg)
            return Key(kind, raw)
        case DimensionKind.INTEGER | DimensionKind.INTEGER_INTERVAL:
            if not _is_int(raw):
                msg = f"key 'integer' must be an integer, got {type(raw).__name__}"
                raise ConfigParseError(msg)
            return Key(kind, raw)
        case _:
            if not _is_number(raw):
                msg = f"key 'number' must be a number, got {type(raw).__name__}"
                raise ConfigParseError(msg)
            return Key(kind, float(raw))


def parse_keys(data: list[dict[str, Any]]) -> list[Key]:
    _expect_list(data, "keys")
    return [parse_key(k) for k in data]


def load_tree(
    config: TreeConfig[Any], options: AddRuleOptions | None = None
) -> MatchTree[Any]:
    """Build a MatchTree from config, inserting rules in order.

    Raises:
        ShapeMismatchError: If a rule does not fit the configured kinds.
    """
    tree: MatchTree[Any] = MatchTree(config.kinds)
    for rule in config.rules:
        tree.add_rule(rule, options)
    logger.debug("loaded %d rule(s) into %r", len(config.rules), tree)
    return tree


# ═══════════════════════════════════════════════════════════════════════════════
# Dumping (types → dict), the inverse of parsing
# ═══════════════════════════════════════════════════════════════════════════════


def dump_pattern(pattern: Pattern) -> dict[str, Any]:
    data: dict[str, Any] = {"type": pattern.kind.value}
    if pattern.is_any:
        data["is_any"] = True
    if pattern.is_inverse:
        data["is_inverse"] = True
    if pattern.values:
        field_name = _VALUE_FIELDS[DimensionKind(pattern.kind)]
        data[field_name] = [_dump_pattern_value(v) for v in pattern.values]
    return data


def dump_rule(rule: Rule[Any]) -> dict[str, Any]:
    return {
        "patterns": [dump_pattern(p) for p in rule.patterns],
        "value": rule.value,
        "priority": rule.priority,
    }


def _dump_pattern_value(value: Any) -> Any:
    match value:
        case IntegerInterval() | NumberInterval():
            return {
                "min": value.min,
                "min_is_excluded": value.min_excluded,
                "max": value.max,
                "max_is_excluded": value.max_excluded,
            }
        case _:
            return value


# ═══════════════════════════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════════════════════════


def _parse_type_field(data: dict[str, Any], what: str) -> DimensionKind:
    raw = data.get("type")
    if raw is None:
        msg = f"{what} missing required field 'type'"
        raise ConfigParseError(msg)
    return parse_dimension_kind(raw)


def _parse_flag(data: dict[str, Any], name: str) -> bool:
    value = data.get(name, False)
    if not isinstance(value, bool):
        msg = f"{name!r} must be a boolean, got {type(value).__name__}"
        raise ConfigParseError(msg)
    return value


def _parse_pattern_value(kind: DimensionKind, raw: Any) -> Any:
    match kind:
        case DimensionKind.STRING:
            if not isinstance(raw, str):
                msg = f"'strings' entries must be strings, got {type(raw).__name__}"
                raise ConfigParseError(msg)
            return raw
        case DimensionKind.INTEGER:
            if not _is_int(raw):
                msg = f"'integers' entries must be integers, got {type(raw).__name__}"
                raise ConfigParseError(msg)
            return raw
        case DimensionKind.INTEGER_INTERVAL:
            return _parse_interval(raw, IntegerInterval, _is_int, "integer")
        case _:
            return _parse_interval(raw, NumberInterval, _is_number, "number")


def _parse_interval(raw: Any, cls: type, check: Any, what: str) -> Any:
    _expect_dict(raw, "interval")
    bounds = {}
    for name in ("min", "max"):
        bound = raw.get(name)
        if bound is not None and not check(bound):
            msg = f"interval {name!r} must be a {what}, got {type(bound).__name__}"
            raise ConfigParseError(msg)
        if bound is not None and cls is NumberInterval:
            bound = float(bound)
        bounds[name] = bound
    return cls(
        min=bounds["min"],
        max=bounds["max"],
        min_excluded=_parse_flag(raw, "min_is_excluded"),
        max_excluded=_parse_flag(raw, "max_is_excluded"),
    )


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _expect_dict(data: Any, what: str) -> None:
    if not isinstance(data, dict):
        msg = f"{what} must be a dict, got {type(data).__name__}"
        raise ConfigParseError(msg)


def _expect_list(data: Any, what: str) -> None:
    if not isinstance(data, list):
        msg = f"{what} must be a list, got {type(data).__name__}"
        raise ConfigParseError(msg)
