"""Dimension enum and per-dimension weights.

Four dimensions contribute to the composite score:
- Trading:   market and trading reputation
- Civic:     participation in governance and problem solving
- Developer: software contribution reputation
- Infra:     infrastructure operation reputation

Weights are integer percentages. Every score, and the composite, is on a
basis-point scale from 0 to 10000.
"""
from __future__ import annotations

from enum import Enum

from sovereign_identity.errors import InvalidScore


class Dimension(str, Enum):
    """The four independently-scored reputation axes, in wire order."""

    TRADING = "trading"
    CIVIC = "civic"
    DEVELOPER = "developer"
    INFRA = "infra"

    @property
    def code(self) -> int:
        """Single-byte code used in the detail record wire layout."""
        return _DIMENSION_CODES[self]

    @classmethod
    def from_code(cls, code: int) -> "Dimension":
        for dimension, candidate in _DIMENSION_CODES.items():
            if candidate == code:
                return dimension
        raise ValueError(f"Unknown dimension code {code!r}")

    @classmethod
    def parse(cls, value: "Dimension | str") -> "Dimension":
        """Accept a Dimension or its name/value (case-insensitive).

        ``"infrastructure"`` is accepted as an alias for ``infra``.
        """
        if isinstance(value, Dimension):
            return value
        normalized = str(value).strip().lower()
        if normalized == "infrastructure":
            normalized = cls.INFRA.value
        try:
            return cls(normalized)
        except ValueError:
            choices = ", ".join(d.value for d in cls)
            raise ValueError(
                f"Unknown dimension {value!r}. Expected one of: {choices}."
            ) from None


_DIMENSION_CODES: dict[Dimension, int] = {
    Dimension.TRADING: 0,
    Dimension.CIVIC: 1,
    Dimension.DEVELOPER: 2,
    Dimension.INFRA: 3,
}

MIN_SCORE: int = 0
MAX_SCORE: int = 10000

# Contribution of each dimension to the composite, in percent.
# Must sum to 100.
DIMENSION_WEIGHTS: dict[Dimension, int] = {
    Dimension.TRADING: 40,
    Dimension.CIVIC: 25,
    Dimension.DEVELOPER: 20,
    Dimension.INFRA: 15,
}

WEIGHT_DENOMINATOR: int = 100


def validate_score(score: object) -> int:
    """Return *score* if it is an int in [MIN_SCORE, MAX_SCORE].

    Booleans are rejected even though they are ints.

    Raises
    ------
    InvalidScore
    """
    if isinstance(score, bool) or not isinstance(score, int):
        raise InvalidScore(score)
    if not MIN_SCORE <= score <= MAX_SCORE:
        raise InvalidScore(score)
    return score


__all__ = [
    "DIMENSION_WEIGHTS",
    "Dimension",
    "MAX_SCORE",
    "MIN_SCORE",
    "WEIGHT_DENOMINATOR",
    "validate_score",
]
