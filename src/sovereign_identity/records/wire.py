"""Raw byte layout of identity and detail records.

Consumers that parse records directly (instead of going through the API)
rely on these offsets. They are fixed for a given schema tag; changing them
requires a new ``version``.

Identity record, little-endian, 188 bytes::

    offset  size  field
         0    32  owner
        32     8  created_at (i64)
        40    32  trading_authority
        72    32  civic_authority
       104    32  developer_authority
       136    32  infra_authority
       168     2  trading_score (u16)
       170     2  civic_score (u16)
       172     2  developer_score (u16)
       174     2  infra_score (u16)
       176     2  composite_score (u16)
       178     1  tier (u8)
       179     8  last_updated (i64)
       187     1  version (u8)

Detail record, little-endian::

    identity (32) | dimension code (u8) | metric fields | last_updated (i64) | version (u8)
"""
from __future__ import annotations

import struct

from sovereign_identity.addressing import Address
from sovereign_identity.errors import WireFormatError
from sovereign_identity.ledger.details import (
    METRIC_SCHEMAS,
    SCHEMA_VERSION as DETAIL_SCHEMA_VERSION,
    DetailRecord,
)
from sovereign_identity.principal import Principal
from sovereign_identity.records.identity import SCHEMA_VERSION, IdentityRecord
from sovereign_identity.scoring.dimensions import Dimension
from sovereign_identity.scoring.tier import Tier

IDENTITY_FORMAT: str = "<32sq32s32s32s32sHHHHHBqB"
IDENTITY_STRUCT = struct.Struct(IDENTITY_FORMAT)
IDENTITY_RECORD_SIZE: int = IDENTITY_STRUCT.size

_DETAIL_HEADER = "<32sB"
_DETAIL_TRAILER = "qB"


def _detail_struct(dimension: Dimension) -> struct.Struct:
    return struct.Struct(
        _DETAIL_HEADER + METRIC_SCHEMAS[dimension].wire_format + _DETAIL_TRAILER
    )


DETAIL_STRUCTS: dict[Dimension, struct.Struct] = {
    dimension: _detail_struct(dimension) for dimension in Dimension
}


# ---------------------------------------------------------------------------
# Identity records
# ---------------------------------------------------------------------------


def encode_identity(record: IdentityRecord) -> bytes:
    """Pack *record* into its fixed-width byte layout."""
    try:
        return IDENTITY_STRUCT.pack(
            record.owner.raw,
            record.created_at,
            record.trading_authority.raw,
            record.civic_authority.raw,
            record.developer_authority.raw,
            record.infra_authority.raw,
            record.trading_score,
            record.civic_score,
            record.developer_score,
            record.infra_score,
            record.composite_score,
            int(record.tier),
            record.last_updated,
            record.version,
        )
    except struct.error as exc:
        raise WireFormatError(f"Cannot encode identity record: {exc}") from exc


def decode_identity(data: bytes) -> IdentityRecord:
    """Unpack an identity record.

    Raises
    ------
    WireFormatError
        On a wrong length, an unknown version tag, or a record whose
        composite/tier does not match its dimension scores.
    """
    if len(data) != IDENTITY_RECORD_SIZE:
        raise WireFormatError(
            f"Identity record must be {IDENTITY_RECORD_SIZE} bytes, got {len(data)}"
        )
    (
        owner,
        created_at,
        trading_authority,
        civic_authority,
        developer_authority,
        infra_authority,
        trading_score,
        civic_score,
        developer_score,
        infra_score,
        composite_score,
        tier,
        last_updated,
        version,
    ) = IDENTITY_STRUCT.unpack(data)

    if version != SCHEMA_VERSION:
        raise WireFormatError(f"Unsupported identity record version {version}")
    if tier not in {t.value for t in Tier}:
        raise WireFormatError(f"Invalid tier {tier} in identity record")

    try:
        return IdentityRecord(
            owner=Principal(owner),
            created_at=created_at,
            trading_authority=Principal(trading_authority),
            civic_authority=Principal(civic_authority),
            developer_authority=Principal(developer_authority),
            infra_authority=Principal(infra_authority),
            trading_score=trading_score,
            civic_score=civic_score,
            developer_score=developer_score,
            infra_score=infra_score,
            composite_score=composite_score,
            tier=Tier(tier),
            last_updated=last_updated,
            version=version,
        )
    except ValueError as exc:
        raise WireFormatError(f"Identity record is internally inconsistent: {exc}") from exc


# ---------------------------------------------------------------------------
# Detail records
# ---------------------------------------------------------------------------


def encode_detail(record: DetailRecord) -> bytes:
    """Pack a detail record into its dimension's byte layout."""
    layout = DETAIL_STRUCTS[record.dimension]
    try:
        return layout.pack(
            record.identity.raw,
            record.dimension.code,
            *record.metrics.values(),
            record.last_updated,
            record.version,
        )
    except struct.error as exc:
        raise WireFormatError(f"Cannot encode detail record: {exc}") from exc


def decode_detail(data: bytes) -> DetailRecord:
    """Unpack a detail record; the dimension is read from the header.

    Raises
    ------
    WireFormatError
        On a truncated buffer, an unknown dimension code or version tag, or
        metric values that fail schema validation.
    """
    if len(data) < 33:
        raise WireFormatError(f"Detail record too short: {len(data)} bytes")
    try:
        dimension = Dimension.from_code(data[32])
    except ValueError as exc:
        raise WireFormatError(str(exc)) from exc

    layout = DETAIL_STRUCTS[dimension]
    if len(data) != layout.size:
        raise WireFormatError(
            f"{dimension.value} detail record must be {layout.size} bytes, got {len(data)}"
        )
    identity, _code, *rest = layout.unpack(data)
    *metric_values, last_updated, version = rest
    if version != DETAIL_SCHEMA_VERSION:
        raise WireFormatError(f"Unsupported detail record version {version}")

    schema = METRIC_SCHEMAS[dimension]
    try:
        metrics = schema.model_validate(dict(zip(schema.model_fields, metric_values)))
    except ValueError as exc:
        raise WireFormatError(f"Invalid {dimension.value} metrics in detail record: {exc}") from exc

    return DetailRecord(
        identity=Address(identity),
        dimension=dimension,
        metrics=metrics,
        last_updated=last_updated,
        version=version,
    )


__all__ = [
    "DETAIL_STRUCTS",
    "IDENTITY_FORMAT",
    "IDENTITY_RECORD_SIZE",
    "decode_detail",
    "decode_identity",
    "encode_detail",
    "encode_identity",
]
