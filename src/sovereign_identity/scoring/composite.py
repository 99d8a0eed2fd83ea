"""Composite calculator — weighted composite score and tier.

The composite is::

    floor(trading * 40 / 100)
    + floor(civic * 25 / 100)
    + floor(developer * 20 / 100)
    + floor(infra * 15 / 100)

Each term is floored individually before summation. Integrators recompute
this independently, so the ordering is part of the contract and only
integer arithmetic is used.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Protocol

from sovereign_identity.scoring.dimensions import (
    DIMENSION_WEIGHTS,
    MAX_SCORE,
    WEIGHT_DENOMINATOR,
    Dimension,
    validate_score,
)
from sovereign_identity.scoring.tier import Tier, derive_tier


@dataclass(frozen=True)
class CompositeResult:
    """Composite score and tier computed from four dimension scores."""

    composite: int
    tier: Tier

    def to_dict(self) -> dict[str, object]:
        return {
            "composite": self.composite,
            "tier": int(self.tier),
            "tier_name": self.tier.display_name,
        }


class ScoredRecord(Protocol):
    trading_score: int
    civic_score: int
    developer_score: int
    infra_score: int
    composite_score: int
    tier: int


def weighted_term(dimension: Dimension, score: int) -> int:
    """One dimension's floored contribution to the composite."""
    return validate_score(score) * DIMENSION_WEIGHTS[dimension] // WEIGHT_DENOMINATOR


def compute_composite(trading: int, civic: int, developer: int, infra: int) -> int:
    """Return the composite score for the four dimension scores.

    Raises
    ------
    InvalidScore
        If any input is not an integer in [0, 10000].
    """
    return (
        weighted_term(Dimension.TRADING, trading)
        + weighted_term(Dimension.CIVIC, civic)
        + weighted_term(Dimension.DEVELOPER, developer)
        + weighted_term(Dimension.INFRA, infra)
    )


def calculate(
    trading: int = 0, civic: int = 0, developer: int = 0, infra: int = 0
) -> CompositeResult:
    """Return the composite and tier for the four dimension scores."""
    composite = compute_composite(trading, civic, developer, infra)
    return CompositeResult(composite=composite, tier=derive_tier(composite))


def calculate_from_mapping(scores: Mapping[Dimension, int]) -> CompositeResult:
    """Like :func:`calculate`, with missing dimensions treated as 0."""
    return calculate(
        trading=scores.get(Dimension.TRADING, 0),
        civic=scores.get(Dimension.CIVIC, 0),
        developer=scores.get(Dimension.DEVELOPER, 0),
        infra=scores.get(Dimension.INFRA, 0),
    )


def verify_record(record: ScoredRecord) -> bool:
    """Check that a record's composite and tier match its dimension scores.

    Returns False (rather than raising) for out-of-range scores.
    """
    try:
        expected = calculate(
            record.trading_score,
            record.civic_score,
            record.developer_score,
            record.infra_score,
        )
    except ValueError:
        return False
    return (
        record.composite_score == expected.composite
        and int(record.tier) == int(expected.tier)
    )


# Composite is bounded by MAX_SCORE; each term is at most its weight's share.
MAX_COMPOSITE: int = compute_composite(MAX_SCORE, MAX_SCORE, MAX_SCORE, MAX_SCORE)

if sum(DIMENSION_WEIGHTS.values()) != WEIGHT_DENOMINATOR or MAX_COMPOSITE != MAX_SCORE:
    raise RuntimeError(
        f"Composite weights are inconsistent: max composite is {MAX_COMPOSITE}, "
        f"expected {MAX_SCORE}"
    )


__all__ = [
    "CompositeResult",
    "MAX_COMPOSITE",
    "calculate",
    "calculate_from_mapping",
    "compute_composite",
    "verify_record",
    "weighted_term",
]
