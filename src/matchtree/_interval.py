"""Interval primitives for the interval dimension kinds.

Both interval types are closed, open or half-open. A missing bound means
the interval is unbounded on that side; the exclusion flag of a missing
bound is ignored.

NumberInterval tolerates floating-point noise: two bounds closer than
EPSILON are equal, inclusive bounds admit points up to EPSILON outside the
literal bound, and exclusive bounds reject points within EPSILON of it.
"""

from __future__ import annotations

from dataclasses import dataclass

EPSILON = 1e-10


@dataclass(frozen=True, slots=True)
class IntegerInterval:
    """Interval over integers with optional, independently excluded bounds."""

    min: int | None = None
    max: int | None = None
    min_excluded: bool = False
    max_excluded: bool = False

    def contains(self, x: int) -> bool:
        if self.min is not None:
            if self.min_excluded:
                if x <= self.min:
                    return False
            elif x < self.min:
                return False
        if self.max is not None:
            if self.max_excluded:
                if x >= self.max:
                    return False
            elif x > self.max:
                return False
        return True

    def equals(self, other: IntegerInterval) -> bool:
        """Compare bounds exactly. Flags only count for present bounds."""
        if (self.min is None) != (other.min is None):
            return False
        if (self.max is None) != (other.max is None):
            return False
        if self.min is not None and (
            self.min != other.min or self.min_excluded != other.min_excluded
        ):
            return False
        if self.max is not None and (
            self.max != other.max or self.max_excluded != other.max_excluded
        ):
            return False
        return True


@dataclass(frozen=True, slots=True)
class NumberInterval:
    """Interval over floats, compared with EPSILON tolerance."""

    min: float | None = None
    max: float | None = None
    min_excluded: bool = False
    max_excluded: bool = False

    def contains(self, x: float) -> bool:
        if self.min is not None:
            if self.min_excluded:
                if x <= self.min + EPSILON:
                    return False
            elif x < self.min - EPSILON:
                return False
        if self.max is not None:
            if self.max_excluded:
                if x >= self.max - EPSILON:
                    return False
            elif x > self.max + EPSILON:
                return False
        return True

    def equals(self, other: NumberInterval) -> bool:
        """Compare bounds within EPSILON. Flags only count for present bounds."""
        if (self.min is None) != (other.min is None):
            return False
        if (self.max is None) != (other.max is None):
            return False
        if self.min is not None and (
            abs(self.min - other.min) >= EPSILON  # type: ignore[operator]
            or self.min_excluded != other.min_excluded
        ):
            return False
        if self.max is not None and (
            abs(self.max - other.max) >= EPSILON  # type: ignore[operator]
            or self.max_excluded != other.max_excluded
        ):
            return False
        return True


type Interval = IntegerInterval | NumberInterval
