"""Tier enumeration and tier derivation from composite scores.

Five tiers are defined. Each tier covers a half-open range of composite
scores so that every composite maps to exactly one tier.
"""
from __future__ import annotations

from enum import IntEnum


class Tier(IntEnum):
    """Discrete classification derived from the composite score.

    BRONZE (1):   composite 0 – 1999, also the tier of an absent identity
    SILVER (2):   composite 2000 – 3999
    GOLD (3):     composite 4000 – 5999
    PLATINUM (4): composite 6000 – 7999
    DIAMOND (5):  composite 8000 and above
    """

    BRONZE = 1
    SILVER = 2
    GOLD = 3
    PLATINUM = 4
    DIAMOND = 5

    @property
    def display_name(self) -> str:
        return self.name.capitalize()


# Minimum composite score required to reach each tier.
TIER_THRESHOLDS: dict[Tier, int] = {
    Tier.BRONZE: 0,
    Tier.SILVER: 2000,
    Tier.GOLD: 4000,
    Tier.PLATINUM: 6000,
    Tier.DIAMOND: 8000,
}


def derive_tier(composite_score: int) -> Tier:
    """Map a composite score to a Tier.

    Returns the highest tier whose threshold does not exceed
    *composite_score*. Negative inputs fall through to BRONZE.
    """
    for tier in sorted(TIER_THRESHOLDS, reverse=True):
        if composite_score >= TIER_THRESHOLDS[tier]:
            return tier
    return Tier.BRONZE


def tier_name(tier: int) -> str:
    """Human-readable name for a tier number, ``"Unknown"`` if out of range."""
    try:
        return Tier(tier).display_name
    except ValueError:
        return "Unknown"


def points_to_next_tier(composite_score: int, tier: int) -> int:
    """Composite points still needed to reach the tier above *tier*.

    Returns 0 at the top tier or when the threshold is already met.
    """
    if tier >= Tier.DIAMOND:
        return 0
    next_threshold = TIER_THRESHOLDS[Tier(tier + 1)]
    return max(0, next_threshold - composite_score)


__all__ = [
    "TIER_THRESHOLDS",
    "Tier",
    "derive_tier",
    "points_to_next_tier",
    "tier_name",
]
