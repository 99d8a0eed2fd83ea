"""DetailLedger — optional per-dimension detail metrics.

The ledger owns detail records and refers to identities only by address. It
consults the :class:`~sovereign_identity.store.identity_store.IdentityStore`
to authorize a write, but never modifies an identity: a detail write and a
score write are independent operations, even when a caller issues both.
"""
from __future__ import annotations

import logging
from typing import Mapping

from sovereign_identity.addressing import Address, detail_address
from sovereign_identity.errors import NotFound, SovereignError, Unauthorized
from sovereign_identity.ledger.details import DetailRecord, DimensionMetrics, parse_metrics
from sovereign_identity.locks import KeyedLocks
from sovereign_identity.principal import Principal
from sovereign_identity.scoring.dimensions import Dimension
from sovereign_identity.store.identity_store import Clock, IdentityStore

logger = logging.getLogger(__name__)


class DetailLedger:
    """In-memory store of detail records, one per identity per dimension.

    Parameters
    ----------
    store:
        Identity store used to check that an identity exists and to look up
        the dimension's current authority.
    clock:
        Callable returning the current UTC unix time. Defaults to the
        store's clock.
    """

    def __init__(self, store: IdentityStore, clock: Clock | None = None) -> None:
        self._store = store
        self._records: dict[Address, DetailRecord] = {}
        self._locks: KeyedLocks[Address] = KeyedLocks()
        self._clock: Clock = clock if clock is not None else store.clock

    @property
    def store(self) -> IdentityStore:
        return self._store

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def upsert_detail(
        self,
        caller: Principal,
        identity: Address,
        dimension: Dimension,
        metrics: DimensionMetrics | Mapping[str, object],
    ) -> DetailRecord:
        """Create or overwrite the detail record for *identity* in *dimension*.

        Raises
        ------
        NotFound
            If no identity exists at *identity*.
        InvalidMetrics
            If *metrics* does not match the dimension's schema.
        Unauthorized
            If *caller* is not the dimension's current authority.
        """
        address = detail_address(identity, dimension)
        with self._locks.hold(address):
            try:
                record = self._store.get_by_address(identity)
                validated = parse_metrics(dimension, metrics)
                if caller != record.authority_for(dimension):
                    raise Unauthorized(caller, dimension)
            except SovereignError as exc:
                logger.warning(
                    "Rejected %s detail write on %s by %s: %s",
                    dimension.value,
                    identity,
                    caller,
                    exc.code,
                )
                raise
            created = address not in self._records
            detail = DetailRecord(
                identity=identity,
                dimension=dimension,
                metrics=validated,
                last_updated=self._clock(),
            )
            self._records[address] = detail
        logger.info(
            "%s %s details for %s",
            "Created" if created else "Updated",
            dimension.value,
            identity,
        )
        return detail

    def restore(self, record: DetailRecord) -> Address:
        """Insert a previously persisted detail record as-is."""
        address = record.address
        with self._locks.hold(address):
            self._records[address] = record
        return address

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_detail(self, identity: Address, dimension: Dimension) -> DetailRecord:
        """Return the detail record.

        Raises
        ------
        NotFound
            If no detail has been written for this identity and dimension.
        """
        address = detail_address(identity, dimension)
        record = self._records.get(address)
        if record is None:
            raise NotFound(f"{dimension.value.capitalize()} details", address)
        return record

    def find_detail(self, identity: Address, dimension: Dimension) -> DetailRecord | None:
        """Return the detail record, or None."""
        return self._records.get(detail_address(identity, dimension))

    def details_for(self, identity: Address) -> dict[Dimension, DetailRecord]:
        """All detail records written for *identity*, keyed by dimension."""
        found: dict[Dimension, DetailRecord] = {}
        for dimension in Dimension:
            record = self.find_detail(identity, dimension)
            if record is not None:
                found[dimension] = record
        return found

    def list_all(self) -> list[DetailRecord]:
        records = list(self._records.values())
        return sorted(records, key=lambda r: (r.identity.text, r.dimension.code))

    def __len__(self) -> int:
        return len(self._records)


__all__ = ["DetailLedger"]
