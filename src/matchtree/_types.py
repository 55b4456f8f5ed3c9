"""Dimension kinds and the error hierarchy for matchtree.

A tree is built over an ordered sequence of DimensionKind values. The
canonical names double as the textual encoding used by the config layer:

    "STRING", "INTEGER", "INTEGER_INTERVAL", "NUMBER_INTERVAL"

"NONE" is reserved for terminal nodes and is never a valid tree dimension.
"""

from __future__ import annotations

from enum import StrEnum


class DimensionKind(StrEnum):
    """The kind of value a dimension matches on."""

    NONE = "NONE"
    STRING = "STRING"
    INTEGER = "INTEGER"
    INTEGER_INTERVAL = "INTEGER_INTERVAL"
    NUMBER_INTERVAL = "NUMBER_INTERVAL"


# Kinds a tree may be built over (everything except the terminal kind).
DIMENSION_KINDS = frozenset(
    {
        DimensionKind.STRING,
        DimensionKind.INTEGER,
        DimensionKind.INTEGER_INTERVAL,
        DimensionKind.NUMBER_INTERVAL,
    }
)


class MatchTreeError(Exception):
    """Base class for all matchtree errors."""


class UnknownKindError(MatchTreeError, ValueError):
    """A dimension kind name was not recognized."""

    def __init__(self, name: object) -> None:
        self.name = name
        known = ", ".join(k.value for k in DimensionKind)
        super().__init__(f"unknown dimension kind: {name!r} (known: {known})")


class ShapeMismatchError(MatchTreeError):
    """Patterns or keys do not line up with the tree's dimensions.

    ``position`` is None for a count mismatch, otherwise the index of the
    first dimension whose kind disagrees.
    """

    def __init__(
        self,
        what: str,
        expected: object,
        actual: object,
        position: int | None = None,
    ) -> None:
        self.what = what
        self.expected = expected
        self.actual = actual
        self.position = position
        if position is None:
            msg = (
                f"unexpected number of {what}; "
                f"expected={expected} actual={actual}"
            )
        else:
            msg = (
                f"unexpected kind in {what} at position {position}; "
                f"expected={expected} actual={actual}"
            )
        super().__init__(msg)


def parse_kind(name: str | DimensionKind) -> DimensionKind:
    """Parse a canonical kind name, including the reserved "NONE".

    Raises:
        UnknownKindError: If the name is not a canonical kind name.
    """
    if isinstance(name, DimensionKind):
        return name
    if not isinstance(name, str):
        raise UnknownKindError(name)
    try:
        return DimensionKind(name)
    except ValueError:
        raise UnknownKindError(name) from None


def parse_dimension_kind(name: str | DimensionKind) -> DimensionKind:
    """Parse a kind that is valid as a tree dimension (rejects "NONE")."""
    kind = parse_kind(name)
    if kind not in DIMENSION_KINDS:
        raise UnknownKindError(name)
    return kind
