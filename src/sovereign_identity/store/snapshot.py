"""JSON snapshot persistence for an identity store and its detail ledger.

A snapshot stores every record in its raw wire layout, base64-encoded::

    {
      "version": 1,
      "identities": ["<base64 identity record>", ...],
      "details": ["<base64 detail record>", ...]
    }

Loading runs each record back through the wire decoder, so a tampered or
inconsistent record is rejected rather than silently restored.
"""
from __future__ import annotations

import base64
import binascii
import json
import logging
from pathlib import Path

from sovereign_identity.errors import WireFormatError
from sovereign_identity.ledger.detail_ledger import DetailLedger
from sovereign_identity.records.wire import (
    decode_detail,
    decode_identity,
    encode_detail,
    encode_identity,
)
from sovereign_identity.store.identity_store import Clock, IdentityStore

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION: int = 1


def dump_snapshot(store: IdentityStore, ledger: DetailLedger | None = None) -> dict[str, object]:
    """Serialize *store* (and optionally *ledger*) to a JSON-compatible dict."""
    identities = [
        base64.b64encode(encode_identity(record)).decode("ascii")
        for record in store.list_all()
    ]
    details = (
        [base64.b64encode(encode_detail(record)).decode("ascii") for record in ledger.list_all()]
        if ledger is not None
        else []
    )
    return {"version": SNAPSHOT_VERSION, "identities": identities, "details": details}


def restore_snapshot(
    data: dict[str, object], clock: Clock | None = None
) -> tuple[IdentityStore, DetailLedger]:
    """Rebuild a store and ledger from :func:`dump_snapshot` output.

    Raises
    ------
    WireFormatError
        If the snapshot or any record in it cannot be decoded, an owner
        appears twice, or a detail record refers to an absent identity.
    """
    if data.get("version") != SNAPSHOT_VERSION:
        raise WireFormatError(f"Unsupported snapshot version {data.get('version')!r}")

    store = IdentityStore(clock=clock)
    ledger = DetailLedger(store)
    try:
        for encoded in data.get("identities") or []:
            store.restore(decode_identity(base64.b64decode(str(encoded), validate=True)))
        for encoded in data.get("details") or []:
            detail = decode_detail(base64.b64decode(str(encoded), validate=True))
            if detail.identity not in store:
                raise WireFormatError(
                    f"Detail record {detail.address} references unknown identity "
                    f"{detail.identity}"
                )
            ledger.restore(detail)
    except binascii.Error as exc:
        raise WireFormatError(f"Snapshot contains invalid base64: {exc}") from exc
    except WireFormatError:
        raise
    except (ValueError, TypeError) as exc:
        # A duplicated owner surfaces here as AlreadyExists.
        raise WireFormatError(f"Snapshot contains an invalid record: {exc}") from exc
    return store, ledger


def save_snapshot(
    store: IdentityStore, ledger: DetailLedger | None, path: str | Path
) -> None:
    """Write a snapshot of *store* and *ledger* to *path*."""
    data = dump_snapshot(store, ledger)
    Path(path).write_text(json.dumps(data, indent=2), encoding="utf-8")
    logger.debug(
        "Saved snapshot with %d identities and %d details to %s",
        len(data["identities"]),  # type: ignore[arg-type]
        len(data["details"]),  # type: ignore[arg-type]
        path,
    )


def load_snapshot(
    path: str | Path | None, clock: Clock | None = None
) -> tuple[IdentityStore, DetailLedger]:
    """Load a snapshot from *path*.

    A missing path (or ``None``) yields an empty store and ledger.

    Raises
    ------
    WireFormatError
        If the file is not valid JSON or contains undecodable records.
    """
    if path is None or not Path(path).exists():
        store = IdentityStore(clock=clock)
        return store, DetailLedger(store)
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise WireFormatError(f"Snapshot file {str(path)!r} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise WireFormatError(f"Snapshot file {str(path)!r} must contain a JSON object")
    store, ledger = restore_snapshot(data, clock=clock)
    logger.debug("Loaded %d identities and %d details from %s", len(store), len(ledger), path)
    return store, ledger


__all__ = [
    "SNAPSHOT_VERSION",
    "dump_snapshot",
    "load_snapshot",
    "restore_snapshot",
    "save_snapshot",
]
