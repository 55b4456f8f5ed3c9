"""matchtree — multi-dimensional rule index.

All public types are exported from this module for flat imports:

    from matchtree import MatchTree, DimensionKind, Pattern, Rule, Key
"""

__version__ = "0.1.0"

# Config types — see matchtree._config for details
from matchtree._config import (
    ConfigParseError,
    TreeConfig,
    dump_pattern,
    dump_rule,
    load_tree,
    parse_key,
    parse_keys,
    parse_pattern,
    parse_rule,
    parse_tree_config,
)

# Intervals
from matchtree._interval import EPSILON, IntegerInterval, NumberInterval

# Rules and keys
from matchtree._pattern import Key, Pattern, Rule

# Tree
from matchtree._tree import AddRuleOptions, MatchTree

# Kinds and errors
from matchtree._types import (
    DimensionKind,
    MatchTreeError,
    ShapeMismatchError,
    UnknownKindError,
    parse_kind,
)

__all__ = [
    # Kinds and errors
    "DimensionKind",
    "parse_kind",
    "MatchTreeError",
    "ShapeMismatchError",
    "UnknownKindError",
    # Intervals
    "EPSILON",
    "IntegerInterval",
    "NumberInterval",
    # Rules and keys
    "Pattern",
    "Rule",
    "Key",
    # Tree
    "MatchTree",
    "AddRuleOptions",
    # Config
    "TreeConfig",
    "ConfigParseError",
    "parse_tree_config",
    "parse_rule",
    "parse_pattern",
    "parse_key",
    "parse_keys",
    "load_tree",
    "dump_pattern",
    "dump_rule",
]
