#!/usr/bin/env python3
"""Example: Quickstart

Demonstrates the minimal setup for sovereign-identity: create an identity,
delegate the trading dimension to an oracle, and read the resulting tier.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install sovereign-identity
"""
from __future__ import annotations

import sovereign_identity
from sovereign_identity import SovereignClient, generate_principal


def main() -> None:
    print(f"sovereign-identity version: {sovereign_identity.__version__}")

    client = SovereignClient()
    alice = generate_principal()
    oracle = generate_principal()

    # Step 1: Create an identity
    address = client.create_identity(alice)
    print(f"Identity created at {address.text}")

    # Step 2: Delegate the trading dimension
    client.set_trading_authority(alice, alice, oracle)
    print(f"Trading authority: {oracle.text}")

    # Step 3: The oracle writes a score
    record = client.update_trading_score(oracle, address, 7500)
    print(f"Composite: {record.composite_score}, tier: {record.tier.display_name}")

    # Step 4: Anyone can read; unknown owners read as tier 1
    print(f"Tier of a stranger: {client.get_tier(generate_principal())}")

    print("\nQuickstart complete.")


if __name__ == "__main__":
    main()
