"""Dimension node algebra.

Nodes form a closed variant. Each non-terminal node routes one dimension
and owns three kinds of children:

- exact children, keyed by a concrete value (STRING, INTEGER) or by an
  interval (INTEGER_INTERVAL, NUMBER_INTERVAL)
- inverse groups, one per distinct exclusion set, each with its own child
- a single wildcard child shared by every ``is_any`` pattern

A TerminalNode ends every path and holds the (value_index, priority)
results attached to it.

Behavior lives in free functions dispatched with match/case rather than in
methods, so the per-kind differences (hash lookup vs. interval scan) sit
side by side.

Inverse groups with identical exclusion sets share one child. Equality is
established by counting: for every excluded element, count the groups that
also exclude it; a group is the same set iff its count and its recorded
size both equal the size of the (duplicate-free) new set.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from matchtree._types import DimensionKind

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from matchtree._interval import Interval
    from matchtree._pattern import KeyValue, PatternValue


# ═══════════════════════════════════════════════════════════════════════════════
# Branches (one resolved pattern element)
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class ExactBranch:
    """Follow the child for one concrete value or interval."""

    value: PatternValue


@dataclass(frozen=True, slots=True)
class InverseBranch:
    """Follow the child shared by every pattern excluding exactly this set.

    ``excluded`` must be duplicate free under the kind's equality.
    """

    excluded: tuple[PatternValue, ...]


@dataclass(frozen=True, slots=True)
class AnyBranch:
    """Follow the wildcard child."""


type Branch = ExactBranch | InverseBranch | AnyBranch


# ═══════════════════════════════════════════════════════════════════════════════
# Nodes
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class MatchResult:
    value_index: int
    priority: int


@dataclass(slots=True, eq=False)
class TerminalNode:
    """Leaf node: the results of every rule path ending here."""

    results: list[MatchResult] = field(default_factory=list)

    def add_result(self, value_index: int, priority: int) -> None:
        self.results.append(MatchResult(value_index, priority))


@dataclass(slots=True, eq=False)
class InverseGroup:
    """A child reached by keys outside an exclusion set of ``size`` elements."""

    child: Node
    size: int


@dataclass(slots=True, eq=False)
class IntervalSlot:
    """Reverse index entry: one excluded interval and the groups excluding it."""

    interval: Interval
    groups: list[int] = field(default_factory=list)


@dataclass(slots=True, eq=False)
class _KeyedNode:
    children: dict[Any, Node] = field(default_factory=dict)
    inverse_groups: list[InverseGroup] = field(default_factory=list)
    inverse_index: dict[Any, list[int]] = field(default_factory=dict)
    any_child: Node | None = None


@dataclass(slots=True, eq=False)
class StringNode(_KeyedNode):
    """Routes a STRING dimension."""


@dataclass(slots=True, eq=False)
class IntegerNode(_KeyedNode):
    """Routes an INTEGER dimension."""


@dataclass(slots=True, eq=False)
class _IntervalNode:
    children: list[tuple[Any, Node]] = field(default_factory=list)
    inverse_groups: list[InverseGroup] = field(default_factory=list)
    inverse_index: list[IntervalSlot] = field(default_factory=list)
    any_child: Node | None = None


@dataclass(slots=True, eq=False)
class IntegerIntervalNode(_IntervalNode):
    """Routes an INTEGER_INTERVAL dimension."""


@dataclass(slots=True, eq=False)
class NumberIntervalNode(_IntervalNode):
    """Routes a NUMBER_INTERVAL dimension."""


type Node = (
    TerminalNode | StringNode | IntegerNode | IntegerIntervalNode | NumberIntervalNode
)

_NODE_TYPES: MappingProxyType[DimensionKind, type[Any]] = MappingProxyType(
    {
        DimensionKind.NONE: TerminalNode,
        DimensionKind.STRING: StringNode,
        DimensionKind.INTEGER: IntegerNode,
        DimensionKind.INTEGER_INTERVAL: IntegerIntervalNode,
        DimensionKind.NUMBER_INTERVAL: NumberIntervalNode,
    }
)


def new_node(kind: DimensionKind) -> Node:
    """Create an empty node routing a dimension of the given kind."""
    return _NODE_TYPES[kind]()


# ═══════════════════════════════════════════════════════════════════════════════
# Insertion
# ═══════════════════════════════════════════════════════════════════════════════


def get_or_insert_child(
    node: Node, branch: Branch, child_kind: DimensionKind
) -> Node:
    """Return the child reached via ``branch``, creating it if needed.

    A newly created child routes ``child_kind`` (NONE for a terminal).

    Raises:
        TypeError: If ``node`` is terminal. Callers never route past the
            last dimension, so this is a programming error.
    """
    if isinstance(node, TerminalNode):
        msg = "terminal nodes have no children"
        raise TypeError(msg)

    match branch:
        case AnyBranch():
            if node.any_child is None:
                node.any_child = new_node(child_kind)
            return node.any_child
        case InverseBranch(excluded=excluded):
            return _get_or_insert_inverse(node, excluded, child_kind)
        case ExactBranch(value=value):
            return _get_or_insert_exact(node, value, child_kind)
        case _:  # pragma: no cover
            msg = f"unknown branch type: {type(branch).__name__}"
            raise TypeError(msg)


def _get_or_insert_exact(
    node: Node, value: PatternValue, child_kind: DimensionKind
) -> Node:
    match node:
        case _KeyedNode(children=children):
            child = children.get(value)
            if child is None:
                child = new_node(child_kind)
                children[value] = child
            return child
        case _IntervalNode(children=children):
            for interval, child in children:
                if interval.equals(value):
                    return child
            child = new_node(child_kind)
            children.append((value, child))
            return child
        case _:  # pragma: no cover
            msg = f"unknown node type: {type(node).__name__}"
            raise TypeError(msg)


def _get_or_insert_inverse(
    node: _KeyedNode | _IntervalNode,
    excluded: tuple[PatternValue, ...],
    child_kind: DimensionKind,
) -> Node:
    size = len(excluded)
    counts = [0] * len(node.inverse_groups)
    for element in excluded:
        for group_index in _groups_indexed_by(node, element):
            counts[group_index] += 1
    for group_index, count in enumerate(counts):
        group = node.inverse_groups[group_index]
        if count == size and group.size == size:
            return group.child

    child = new_node(child_kind)
    new_index = len(node.inverse_groups)
    node.inverse_groups.append(InverseGroup(child=child, size=size))
    for element in excluded:
        _index_slot(node, element).append(new_index)
    return child


def _groups_indexed_by(
    node: _KeyedNode | _IntervalNode, element: PatternValue
) -> Iterable[int]:
    """Groups whose exclusion set holds ``element`` (insertion-time equality)."""
    match node:
        case _KeyedNode(inverse_index=index):
            return index.get(element, ())
        case _IntervalNode(inverse_index=slots):
            for slot in slots:
                if slot.interval.equals(element):
                    return slot.groups
            return ()
        case _:  # pragma: no cover
            msg = f"unknown node type: {type(node).__name__}"
            raise TypeError(msg)


def _index_slot(node: _KeyedNode | _IntervalNode, element: PatternValue) -> list[int]:
    match node:
        case _KeyedNode(inverse_index=index):
            return index.setdefault(element, [])
        case _IntervalNode(inverse_index=slots):
            for slot in slots:
                if slot.interval.equals(element):
                    return slot.groups
            slot = IntervalSlot(interval=element)  # type: ignore[arg-type]
            slots.append(slot)
            return slot.groups
        case _:  # pragma: no cover
            msg = f"unknown node type: {type(node).__name__}"
            raise TypeError(msg)


# ═══════════════════════════════════════════════════════════════════════════════
# Lookup
# ═══════════════════════════════════════════════════════════════════════════════


def find_children(node: Node, key: KeyValue) -> Iterator[Node]:
    """Yield every child whose branch admits ``key``.

    Order: exact matches, then each non-excluding inverse group in creation
    order, then the wildcard child.

    Raises:
        TypeError: If ``node`` is terminal.
    """
    match node:
        case _KeyedNode(children=children):
            child = children.get(key)
            if child is not None:
                yield child
        case _IntervalNode(children=children):
            for interval, child in children:
                if interval.contains(key):
                    yield child
        case _:
            msg = f"cannot search children of {type(node).__name__}"
            raise TypeError(msg)

    if node.inverse_groups:
        excluding = set(_groups_excluding(node, key))
        for group_index, group in enumerate(node.inverse_groups):
            if group_index not in excluding:
                yield group.child

    if node.any_child is not None:
        yield node.any_child


def _groups_excluding(
    node: _KeyedNode | _IntervalNode, key: KeyValue
) -> Iterator[int]:
    """Groups whose exclusion set matches ``key`` (lookup-time semantics)."""
    match node:
        case _KeyedNode(inverse_index=index):
            yield from index.get(key, ())
        case _IntervalNode(inverse_index=slots):
            for slot in slots:
                if slot.interval.contains(key):
                    yield from slot.groups


def iter_children(node: Node) -> Iterator[Node]:
    """Yield every direct child of a node (exact, inverse, wildcard)."""
    match node:
        case TerminalNode():
            return
        case _KeyedNode(children=children):
            yield from children.values()
        case _IntervalNode(children=children):
            for _, child in children:
                yield child
    for group in node.inverse_groups:
        yield group.child
    if node.any_child is not None:
        yield node.any_child
