"""Patterns, rules and keys.

A Pattern describes what one dimension of a Rule accepts:

- ``is_any``: every key (wins over ``is_inverse`` when both are set)
- ``is_inverse``: every key not matched by ``values``
- otherwise: exactly the keys matched by ``values``

A Key is the concrete value supplied for one dimension at search time.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from matchtree._interval import IntegerInterval, NumberInterval
from matchtree._types import DimensionKind

type PatternValue = str | int | IntegerInterval | NumberInterval
type KeyValue = str | int | float


@dataclass(frozen=True, slots=True)
class Pattern:
    """One dimension's matching rule within a Rule."""

    kind: DimensionKind
    values: tuple[PatternValue, ...] = ()
    is_any: bool = False
    is_inverse: bool = False

    @classmethod
    def any(cls, kind: DimensionKind) -> Pattern:
        return cls(kind, is_any=True)

    @classmethod
    def of(cls, kind: DimensionKind, *values: PatternValue) -> Pattern:
        return cls(kind, tuple(values))

    @classmethod
    def excluding(cls, kind: DimensionKind, *values: PatternValue) -> Pattern:
        return cls(kind, tuple(values), is_inverse=True)

    @property
    def is_empty(self) -> bool:
        """True when the pattern has no flags and no values."""
        return not (self.is_any or self.is_inverse or self.values)


@dataclass(frozen=True, slots=True)
class Rule[V]:
    """Patterns (one per dimension), the value they map to, and a priority.

    Higher priority values sort first in search results.
    """

    patterns: tuple[Pattern, ...]
    value: V
    priority: int = 0


@dataclass(frozen=True, slots=True)
class Key:
    """A concrete search value for one dimension.

    Interval dimensions take a point: an int for INTEGER_INTERVAL, a float
    for NUMBER_INTERVAL.
    """

    kind: DimensionKind
    value: KeyValue

    @classmethod
    def string(cls, value: str) -> Key:
        return cls(DimensionKind.STRING, value)

    @classmethod
    def integer(cls, value: int) -> Key:
        return cls(DimensionKind.INTEGER, value)

    @classmethod
    def integer_point(cls, value: int) -> Key:
        return cls(DimensionKind.INTEGER_INTERVAL, value)

    @classmethod
    def number(cls, value: float) -> Key:
        return cls(DimensionKind.NUMBER_INTERVAL, value)


def dedup_values(
    kind: DimensionKind, values: tuple[PatternValue, ...]
) -> tuple[PatternValue, ...]:
    """Remove duplicates under the kind's equality, keeping first-seen order."""
    match kind:
        case DimensionKind.STRING | DimensionKind.INTEGER:
            return tuple(dict.fromkeys(values))
        case DimensionKind.INTEGER_INTERVAL | DimensionKind.NUMBER_INTERVAL:
            unique: list[Any] = []
            for v in values:
                if not any(u.equals(v) for u in unique):
                    unique.append(v)
            return tuple(unique)
        case _:
            msg = f"no pattern values for dimension kind {kind}"
            raise TypeError(msg)


def canonicalize(pattern: Pattern, *, empty_as_any: bool = False) -> Pattern:
    """Return a copy of the pattern ready for insertion.

    Values are de-duplicated, ``is_any`` clears ``is_inverse``, and with
    ``empty_as_any`` a structurally empty pattern becomes a wildcard.
    """
    if pattern.is_any:
        return replace(pattern, values=(), is_inverse=False)
    if empty_as_any and pattern.is_empty:
        return replace(pattern, is_any=True)
    return replace(pattern, values=dedup_values(pattern.kind, pattern.values))
