"""Composite reputation scoring.

Four dimension scores (0 – 10000 each) are combined into a weighted
composite on the same scale, which maps to one of five tiers
(BRONZE through DIAMOND). Everything here is pure integer arithmetic.
"""
from __future__ import annotations

from sovereign_identity.scoring.composite import (
    MAX_COMPOSITE,
    CompositeResult,
    calculate,
    calculate_from_mapping,
    compute_composite,
    verify_record,
)
from sovereign_identity.scoring.dimensions import (
    DIMENSION_WEIGHTS,
    MAX_SCORE,
    MIN_SCORE,
    Dimension,
    validate_score,
)
from sovereign_identity.scoring.tier import (
    TIER_THRESHOLDS,
    Tier,
    derive_tier,
    points_to_next_tier,
    tier_name,
)

__all__ = [
    "CompositeResult",
    "DIMENSION_WEIGHTS",
    "Dimension",
    "MAX_COMPOSITE",
    "MAX_SCORE",
    "MIN_SCORE",
    "TIER_THRESHOLDS",
    "Tier",
    "calculate",
    "calculate_from_mapping",
    "compute_composite",
    "derive_tier",
    "points_to_next_tier",
    "tier_name",
    "validate_score",
    "verify_record",
]
