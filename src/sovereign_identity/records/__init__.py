"""Identity and detail record types and their raw byte layout."""
from __future__ import annotations

from sovereign_identity.records.identity import (
    SCHEMA_VERSION,
    DefaultIdentity,
    IdentityRecord,
    Scores,
)
from sovereign_identity.records.wire import (
    IDENTITY_RECORD_SIZE,
    decode_detail,
    decode_identity,
    encode_detail,
    encode_identity,
)

__all__ = [
    "DefaultIdentity",
    "IDENTITY_RECORD_SIZE",
    "IdentityRecord",
    "SCHEMA_VERSION",
    "Scores",
    "decode_detail",
    "decode_identity",
    "encode_detail",
    "encode_identity",
]
