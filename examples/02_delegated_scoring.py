#!/usr/bin/env python3
"""Example: Delegated scoring with detail metrics and persistence

Shows every dimension delegated to a separate authority, detail metrics
recorded beside the coarse scores, and the whole state written to and read
back from a JSON snapshot.

Usage:
    python examples/02_delegated_scoring.py

Requirements:
    pip install sovereign-identity
"""
from __future__ import annotations

import tempfile
from pathlib import Path

from sovereign_identity import (
    Dimension,
    SovereignClient,
    TradingMetrics,
    calculate,
    generate_principal,
)
from sovereign_identity.errors import Unauthorized
from sovereign_identity.store.snapshot import load_snapshot, save_snapshot


def main() -> None:
    client = SovereignClient()
    owner = generate_principal()
    address = client.create_identity(owner)

    # Step 1: One authority per dimension
    authorities = {dimension: generate_principal() for dimension in Dimension}
    for dimension, authority in authorities.items():
        client.set_authority(owner, owner, dimension, authority)

    # Step 2: Each authority writes its own dimension
    submitted = {
        Dimension.TRADING: 8200,
        Dimension.CIVIC: 6400,
        Dimension.DEVELOPER: 9100,
        Dimension.INFRA: 7000,
    }
    for dimension, score in submitted.items():
        record = client.update_score(authorities[dimension], address, dimension, score)
    print(f"Composite: {record.composite_score} ({record.tier.display_name})")

    expected = calculate(**{d.value: s for d, s in submitted.items()})
    assert expected.composite == record.composite_score

    # Step 3: Authorities cannot write dimensions they do not hold
    try:
        client.update_civic_score(authorities[Dimension.TRADING], address, 10000)
    except Unauthorized as exc:
        print(f"Rejected: {exc}")

    # Step 4: Detail metrics
    client.update_trading_details(
        authorities[Dimension.TRADING],
        address,
        TradingMetrics(win_rate_bps=6100, profit_factor_bps=18000, total_trades=412),
    )
    details = client.get_details(owner, Dimension.TRADING)
    print(f"Trading details: {details.metrics.model_dump() if details else None}")

    # Step 5: Persist and reload
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "state.json"
        save_snapshot(client.store, client.ledger, path)
        store, ledger = load_snapshot(path)
        reloaded = SovereignClient(store, ledger)
        print(f"Reloaded tier: {reloaded.get_tier(owner)}")


if __name__ == "__main__":
    main()
