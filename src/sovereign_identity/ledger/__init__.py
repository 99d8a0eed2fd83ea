"""Detail ledger: richer per-dimension metrics stored beside an identity.

Quick start
-----------
::

    from sovereign_identity.ledger import DetailLedger, TradingMetrics

    ledger = DetailLedger(store)
    ledger.upsert_detail(
        oracle,
        address,
        Dimension.TRADING,
        TradingMetrics(win_rate_bps=6200, total_trades=140),
    )
"""
from __future__ import annotations

from sovereign_identity.ledger.detail_ledger import DetailLedger
from sovereign_identity.ledger.details import (
    METRIC_SCHEMAS,
    CivicMetrics,
    DetailRecord,
    DeveloperMetrics,
    DimensionMetrics,
    InfraMetrics,
    TradingMetrics,
    parse_metrics,
)

__all__ = [
    "CivicMetrics",
    "DetailLedger",
    "DetailRecord",
    "DeveloperMetrics",
    "DimensionMetrics",
    "InfraMetrics",
    "METRIC_SCHEMAS",
    "TradingMetrics",
    "parse_metrics",
]
