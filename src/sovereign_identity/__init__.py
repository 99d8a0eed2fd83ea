"""sovereign-identity — portable multi-dimensional reputation records.

Each principal owns one identity record carrying four reputation scores
(trading, civic, developer, infra), a weighted composite, and a tier.
The owner delegates each dimension to exactly one authority; only that
authority can write the dimension's score.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
>>> import sovereign_identity
>>> sovereign_identity.__version__
'0.1.0'

Quick start
-----------
::

    from sovereign_identity import SovereignClient, generate_principal

    client = SovereignClient()
    alice, oracle = generate_principal(), generate_principal()

    address = client.create_identity(alice)
    client.set_trading_authority(alice, alice, oracle)
    client.update_trading_score(oracle, address, 7500)

    client.get_tier(alice)             # 2
    client.get_composite_score(alice)  # 3000
"""
from __future__ import annotations

__version__: str = "0.1.0"

# ------------------------------------------------------------------
# Errors
# ------------------------------------------------------------------
from sovereign_identity.errors import (
    AlreadyExists,
    InvalidAuthority,
    InvalidMetrics,
    InvalidScore,
    NotFound,
    OwnerMismatch,
    SovereignError,
    Unauthorized,
    WireFormatError,
)

# ------------------------------------------------------------------
# Principals and addressing
# ------------------------------------------------------------------
from sovereign_identity.addressing import (
    Address,
    derive_address,
    detail_address,
    identity_address,
)
from sovereign_identity.principal import (
    Principal,
    PrincipalKeypair,
    generate_keypair,
    generate_principal,
)

# ------------------------------------------------------------------
# Scoring
# ------------------------------------------------------------------
from sovereign_identity.scoring import (
    DIMENSION_WEIGHTS,
    TIER_THRESHOLDS,
    CompositeResult,
    Dimension,
    Tier,
    calculate,
    compute_composite,
    derive_tier,
    points_to_next_tier,
    tier_name,
    verify_record,
)

# ------------------------------------------------------------------
# Records, store, and ledger
# ------------------------------------------------------------------
from sovereign_identity.records import (
    DefaultIdentity,
    IdentityRecord,
    Scores,
    decode_detail,
    decode_identity,
    encode_detail,
    encode_identity,
)
from sovereign_identity.store import IdentityStore
from sovereign_identity.ledger import (
    CivicMetrics,
    DetailLedger,
    DetailRecord,
    DeveloperMetrics,
    InfraMetrics,
    TradingMetrics,
)
from sovereign_identity.client import SovereignClient
from sovereign_identity.config import SovereignConfig

__all__ = [
    # version
    "__version__",
    # errors
    "AlreadyExists",
    "InvalidAuthority",
    "InvalidMetrics",
    "InvalidScore",
    "NotFound",
    "OwnerMismatch",
    "SovereignError",
    "Unauthorized",
    "WireFormatError",
    # principals and addressing
    "Address",
    "Principal",
    "PrincipalKeypair",
    "derive_address",
    "detail_address",
    "generate_keypair",
    "generate_principal",
    "identity_address",
    # scoring
    "CompositeResult",
    "DIMENSION_WEIGHTS",
    "Dimension",
    "TIER_THRESHOLDS",
    "Tier",
    "calculate",
    "compute_composite",
    "derive_tier",
    "points_to_next_tier",
    "tier_name",
    "verify_record",
    # records
    "DefaultIdentity",
    "IdentityRecord",
    "Scores",
    "decode_detail",
    "decode_identity",
    "encode_detail",
    "encode_identity",
    # store and ledger
    "CivicMetrics",
    "DetailLedger",
    "DetailRecord",
    "DeveloperMetrics",
    "IdentityStore",
    "InfraMetrics",
    "TradingMetrics",
    # client and config
    "SovereignClient",
    "SovereignConfig",
]
