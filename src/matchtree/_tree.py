"""MatchTree — multi-dimensional rule index.

Rules are inserted dimension by dimension into a shared-prefix tree. At
search time every branch admitting the key is followed, so a key may reach
many terminals; their results are merged, ordered by priority (descending)
then insertion order, and de-duplicated by rule.

The tree is a plain mutable structure. Build it first and then share it
read-only, or serialize add_rule/search calls externally.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from matchtree._node import (
    AnyBranch,
    ExactBranch,
    InverseBranch,
    MatchResult,
    TerminalNode,
    find_children,
    get_or_insert_child,
    iter_children,
    new_node,
)
from matchtree._pattern import canonicalize
from matchtree._types import DimensionKind, ShapeMismatchError, parse_dimension_kind

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from matchtree._node import Branch, Node
    from matchtree._pattern import Key, Pattern, Rule

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AddRuleOptions:
    """Per-call insertion options.

    treat_empty_pattern_as_any: a pattern with no flags and no values
    matches every key instead of none.
    """

    treat_empty_pattern_as_any: bool = False


_DEFAULT_OPTIONS = AddRuleOptions()


class MatchTree[V]:
    """Index of rules over a fixed sequence of dimension kinds.

    Example::

        tree = MatchTree([DimensionKind.STRING, DimensionKind.INTEGER])
        tree.add_rule(Rule((Pattern.of(STRING, "x"), Pattern.of(INTEGER, 1)), "A"))
        tree.search([Key.string("x"), Key.integer(1)])  # ["A"]

    Raises:
        UnknownKindError: If any kind is not a valid dimension kind.
    """

    __slots__ = ("_default_options", "_kinds", "_root", "_values")

    def __init__(
        self,
        kinds: Iterable[DimensionKind | str],
        *,
        default_options: AddRuleOptions | None = None,
    ) -> None:
        self._kinds: tuple[DimensionKind, ...] = tuple(
            parse_dimension_kind(k) for k in kinds
        )
        self._values: list[V] = []
        self._root: Node | None = None
        self._default_options = default_options or _DEFAULT_OPTIONS
        logger.debug("created match tree over %s", [k.value for k in self._kinds])

    @property
    def kinds(self) -> tuple[DimensionKind, ...]:
        return self._kinds

    @property
    def values(self) -> tuple[V, ...]:
        """Values of every inserted rule, in insertion order."""
        return tuple(self._values)

    @property
    def rule_count(self) -> int:
        return len(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        kinds = ", ".join(k.value for k in self._kinds)
        return f"MatchTree([{kinds}], rules={len(self._values)})"

    # ── Insertion ──────────────────────────────────────────────────────────

    def add_rule(self, rule: Rule[V], options: AddRuleOptions | None = None) -> int:
        """Insert a rule and return its value index.

        A pattern listing several values expands into one tree path per
        value (cartesian product across dimensions). All paths carry the
        same value index; search collapses them back into one result.

        Raises:
            ShapeMismatchError: If the patterns do not line up with the
                tree's kinds. The tree is left unchanged.
        """
        self._check_shape("patterns", [p.kind for p in rule.patterns])
        opts = options or self._default_options

        value_index = len(self._values)
        self._values.append(rule.value)

        patterns = tuple(
            canonicalize(p, empty_as_any=opts.treat_empty_pattern_as_any)
            for p in rule.patterns
        )
        paths = self._insert(patterns, value_index, rule.priority)
        logger.debug(
            "added rule %d (priority=%d) along %d path(s)",
            value_index,
            rule.priority,
            paths,
        )
        return value_index

    def _insert(
        self, patterns: tuple[Pattern, ...], value_index: int, priority: int
    ) -> int:
        """Materialize every path of the expanded rule. Returns the path count."""
        if self._root is None:
            first = self._kinds[0] if self._kinds else DimensionKind.NONE
            self._root = new_node(first)
        return self._walk(self._root, patterns, 0, value_index, priority)

    def _walk(
        self,
        node: Node,
        patterns: tuple[Pattern, ...],
        depth: int,
        value_index: int,
        priority: int,
    ) -> int:
        if depth == len(patterns):
            _as_terminal(node).add_result(value_index, priority)
            return 1

        child_kind = (
            self._kinds[depth + 1] if depth + 1 < len(self._kinds) else DimensionKind.NONE
        )
        paths = 0
        for branch in _branches(patterns[depth]):
            child = get_or_insert_child(node, branch, child_kind)
            paths += self._walk(child, patterns, depth + 1, value_index, priority)
        return paths

    # ── Lookup ─────────────────────────────────────────────────────────────

    def search(self, keys: Sequence[Key]) -> list[V]:
        """Return the values of every rule matching ``keys``.

        Ordered by priority (highest first), then insertion order. Each rule
        contributes at most once. No match returns an empty list.

        Raises:
            ShapeMismatchError: If the keys do not line up with the tree's kinds.
        """
        self._check_shape("keys", [k.kind for k in keys])
        if self._root is None:
            return []

        nodes: list[Node] = [self._root]
        for key in keys:
            nodes = [child for node in nodes for child in find_children(node, key.value)]
            if not nodes:
                return []

        results = [r for node in nodes for r in _as_terminal(node).results]
        values = [self._values[i] for i in _resolve(results)]
        logger.debug(
            "search reached %d terminal(s), %d value(s)", len(nodes), len(values)
        )
        return values

    # ── Introspection ──────────────────────────────────────────────────────

    def node_count(self) -> int:
        """Count distinct nodes reachable from the root (shared ones once)."""
        if self._root is None:
            return 0
        seen: set[int] = set()
        stack: list[Node] = [self._root]
        while stack:
            node = stack.pop()
            if id(node) in seen:
                continue
            seen.add(id(node))
            stack.extend(iter_children(node))
        return len(seen)

    # ── Validation ─────────────────────────────────────────────────────────

    def _check_shape(self, what: str, kinds: Sequence[DimensionKind]) -> None:
        if len(kinds) != len(self._kinds):
            raise ShapeMismatchError(what, len(self._kinds), len(kinds))
        for position, (expected, actual) in enumerate(zip(self._kinds, kinds)):
            if expected != actual:
                raise ShapeMismatchError(what, expected, actual, position)


def _branches(pattern: Pattern) -> list[Branch]:
    """Resolve a canonical pattern into the branches a rule follows."""
    if pattern.is_any:
        return [AnyBranch()]
    if pattern.is_inverse:
        return [InverseBranch(pattern.values)]
    return [ExactBranch(v) for v in pattern.values]


def _as_terminal(node: Node) -> TerminalNode:
    if not isinstance(node, TerminalNode):
        msg = f"expected a terminal node, got {type(node).__name__}"
        raise TypeError(msg)
    return node


def _resolve(results: list[MatchResult]) -> list[int]:
    """Order results by priority then value index and drop repeated rules.

    Repeats of one value index always carry the same priority, so keeping
    the first occurrence after sorting loses nothing.
    """
    results.sort(key=lambda r: (-r.priority, r.value_index))
    ordered: list[int] = []
    last = -1
    for r in results:
        if r.value_index != last:
            ordered.append(r.value_index)
            last = r.value_index
    return ordered
