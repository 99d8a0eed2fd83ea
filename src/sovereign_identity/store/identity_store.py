"""IdentityStore — the single owner of identity records.

Holds one record per owner, keyed by the owner's derived address. Besides
create and read, the store carries the two mutating protocols on a record:

* the authority registry (:meth:`IdentityStore.set_authority`), writable by
  the record's owner only;
* the score update pipeline (:meth:`IdentityStore.update_score`), writable
  by the dimension's current authority only.

Concurrency
-----------
Each address has its own lock, so writes to different identities never
contend. A lock lives only while a write holds or awaits it. A write builds a complete replacement record and swaps it into the
table in one assignment; reads take no lock and always see either the old or
the new record, never a partial one.
"""
from __future__ import annotations

import datetime
import logging
from typing import Callable, Iterator

from sovereign_identity.addressing import Address, identity_address
from sovereign_identity.errors import (
    AlreadyExists,
    InvalidAuthority,
    NotFound,
    OwnerMismatch,
    SovereignError,
    Unauthorized,
)
from sovereign_identity.locks import KeyedLocks
from sovereign_identity.principal import Principal
from sovereign_identity.records.identity import DefaultIdentity, IdentityRecord
from sovereign_identity.scoring.dimensions import Dimension, validate_score

logger = logging.getLogger(__name__)

Clock = Callable[[], int]


def utc_now() -> int:
    """Current UTC time as integer unix seconds."""
    return int(datetime.datetime.now(datetime.timezone.utc).timestamp())


class IdentityStore:
    """In-memory store of identity records.

    Thread-safe. Mutations on one address are serialized by that address's
    lock; reads never block.

    Parameters
    ----------
    clock:
        Callable returning the current UTC unix time in seconds. Defaults to
        the system clock.

    Example
    -------
    ::

        store = IdentityStore()
        address = store.create(owner)
        store.set_authority(owner, owner, Dimension.TRADING, oracle)
        record = store.update_score(oracle, address, Dimension.TRADING, 7500)
        print(record.composite_score, record.tier)
    """

    def __init__(self, clock: Clock | None = None) -> None:
        self._records: dict[Address, IdentityRecord] = {}
        self._locks: KeyedLocks[Address] = KeyedLocks()
        self._clock: Clock = clock if clock is not None else utc_now

    @property
    def clock(self) -> Clock:
        return self._clock

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, owner: Principal) -> Address:
        """Create the identity for *owner*.

        Returns
        -------
        Address
            The new record's derived address.

        Raises
        ------
        AlreadyExists
            If *owner* already has an identity. Calling twice is an error,
            not a no-op; the existing record is left untouched.
        """
        address = identity_address(owner)
        with self._locks.hold(address):
            if address in self._records:
                logger.warning("Rejected duplicate identity for %s", owner)
                raise AlreadyExists(owner)
            self._records[address] = IdentityRecord.new(owner, self._clock())
        logger.info("Created identity for %s at %s", owner, address)
        return address

    def restore(self, record: IdentityRecord) -> Address:
        """Insert a previously persisted record as-is.

        Used when loading a snapshot.

        Raises
        ------
        AlreadyExists
            If a record already exists for the owner.
        """
        address = identity_address(record.owner)
        with self._locks.hold(address):
            if address in self._records:
                raise AlreadyExists(record.owner)
            self._records[address] = record
        return address

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def read_strict(self, owner: Principal) -> IdentityRecord:
        """Return *owner*'s record.

        Raises
        ------
        NotFound
            If *owner* has no identity.
        """
        return self.get_by_address(identity_address(owner))

    def read_default(self, owner: Principal) -> IdentityRecord | DefaultIdentity:
        """Return *owner*'s record, or the default record if there is none.

        Nothing is created. The default is a :class:`DefaultIdentity`
        (``exists`` is False, tier 1, all scores 0), so it can be told apart
        from a stored tier-1 record.
        """
        record = self._records.get(identity_address(owner))
        if record is None:
            return DefaultIdentity(owner=owner)
        return record

    def get_by_address(self, address: Address) -> IdentityRecord:
        """Return the record at *address*.

        Raises
        ------
        NotFound
        """
        record = self._records.get(address)
        if record is None:
            raise NotFound("Identity", address)
        return record

    def find_by_address(self, address: Address) -> IdentityRecord | None:
        """Return the record at *address*, or None."""
        return self._records.get(address)

    def exists(self, owner: Principal) -> bool:
        return identity_address(owner) in self._records

    def list_all(self) -> list[IdentityRecord]:
        """Return all records sorted by address."""
        records = list(self._records.values())
        return sorted(records, key=lambda r: r.address.text)

    # ------------------------------------------------------------------
    # Authority registry
    # ------------------------------------------------------------------

    def set_authority(
        self,
        caller: Principal,
        owner: Principal,
        dimension: Dimension,
        new_authority: Principal,
    ) -> IdentityRecord:
        """Point *dimension*'s authority at *new_authority*.

        Only the named pointer changes. Scores, composite, tier, and
        ``last_updated`` are left alone.

        Raises
        ------
        NotFound
            If *owner* has no identity.
        OwnerMismatch
            If *caller* is not the record's owner.
        InvalidAuthority
            If *new_authority* is the zero principal.
        """
        address = identity_address(owner)
        with self._locks.hold(address):
            try:
                record = self.get_by_address(address)
                if caller != record.owner:
                    raise OwnerMismatch(caller, record.owner)
                if new_authority.is_zero():
                    raise InvalidAuthority(new_authority)
            except SovereignError as exc:
                logger.warning(
                    "Rejected %s authority change on %s by %s: %s",
                    dimension.value,
                    owner,
                    caller,
                    exc.code,
                )
                raise
            updated = record.with_authority(dimension, new_authority)
            self._records[address] = updated
        logger.info("Set %s authority for %s to %s", dimension.value, owner, new_authority)
        return updated

    # ------------------------------------------------------------------
    # Score update pipeline
    # ------------------------------------------------------------------

    def update_score(
        self,
        caller: Principal,
        identity: Address,
        dimension: Dimension,
        new_score: int,
    ) -> IdentityRecord:
        """Write one dimension score and recompute composite and tier.

        Checks run in order: the record must exist, the score must be in
        range, and the caller must be the dimension's current authority.
        The score, composite, tier, and ``last_updated`` then change together
        in a single commit.

        Raises
        ------
        NotFound
            If no record exists at *identity*.
        InvalidScore
            If *new_score* is not an integer in [0, 10000].
        Unauthorized
            If *caller* is not the current authority for *dimension*.
        """
        with self._locks.hold(identity):
            try:
                record = self.get_by_address(identity)
                validate_score(new_score)
                if caller != record.authority_for(dimension):
                    raise Unauthorized(caller, dimension)
            except SovereignError as exc:
                logger.warning(
                    "Rejected %s score update on %s by %s: %s",
                    dimension.value,
                    identity,
                    caller,
                    exc.code,
                )
                raise
            updated = record.with_score(dimension, new_score, self._clock())
            self._records[identity] = updated
        logger.info(
            "Updated %s score for %s to %d (composite: %d, tier: %d)",
            dimension.value,
            updated.owner,
            new_score,
            updated.composite_score,
            updated.tier,
        )
        return updated

    # ------------------------------------------------------------------
    # Container protocol
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, key: object) -> bool:
        """Support ``owner in store`` and ``address in store``."""
        if isinstance(key, Address):
            return key in self._records
        if isinstance(key, Principal):
            return identity_address(key) in self._records
        return False

    def __iter__(self) -> Iterator[IdentityRecord]:
        return iter(self.list_all())


__all__ = ["IdentityStore", "utc_now"]
