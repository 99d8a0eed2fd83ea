"""HTTP server mode for sovereign-identity.

Provides a lightweight stdlib-based HTTP API over the identity store and
detail ledger without requiring any additional web framework dependencies.
"""
from __future__ import annotations

from sovereign_identity.server.app import SovereignIdentityHandler, create_server, run_server

__all__ = ["SovereignIdentityHandler", "create_server", "run_server"]
