"""SovereignClient — the operation surface applications and authorities use.

Wraps an :class:`IdentityStore` and a :class:`DetailLedger` behind the
operations of the protocol. Principals and addresses may be passed as
objects or as their base58 text, and dimensions as enum members or strings.

Two roles, each with its own operations:

* **owner**: ``create_identity``, ``set_*_authority``
* **dimension authority**: ``update_*_score``, ``update_*_details``

Reads (``get_*``) are open to anyone. The defaulted reads never raise:
an owner with no identity has tier 1 and composite 0.

Example
-------
::

    client = SovereignClient()
    address = client.create_identity(alice)
    client.set_trading_authority(alice, alice, oracle)
    client.update_trading_score(oracle, address, 7500)
    client.get_tier(alice)          # 2
    client.get_tier(nobody)         # 1, nothing is created
"""
from __future__ import annotations

from typing import Mapping, Union

from sovereign_identity.addressing import Address, identity_address
from sovereign_identity.ledger.detail_ledger import DetailLedger
from sovereign_identity.ledger.details import DetailRecord, DimensionMetrics
from sovereign_identity.principal import Principal
from sovereign_identity.records.identity import DefaultIdentity, IdentityRecord, Scores
from sovereign_identity.scoring.dimensions import Dimension
from sovereign_identity.store.identity_store import IdentityStore

PrincipalLike = Union[Principal, str, bytes]
IdentityRef = Union[Address, Principal, str]
DimensionLike = Union[Dimension, str]
MetricsLike = Union[DimensionMetrics, Mapping[str, object]]


class SovereignClient:
    """Protocol operations over an identity store and detail ledger.

    Parameters
    ----------
    store:
        Identity store to operate on. A new in-memory store if omitted.
    ledger:
        Detail ledger bound to *store*. A new ledger if omitted.
    """

    def __init__(
        self,
        store: IdentityStore | None = None,
        ledger: DetailLedger | None = None,
    ) -> None:
        self._store = store if store is not None else IdentityStore()
        if ledger is not None and ledger.store is not self._store:
            raise ValueError("ledger must be bound to the same IdentityStore")
        self._ledger = ledger if ledger is not None else DetailLedger(self._store)

    @property
    def store(self) -> IdentityStore:
        return self._store

    @property
    def ledger(self) -> DetailLedger:
        return self._ledger

    # ------------------------------------------------------------------
    # Argument normalization
    # ------------------------------------------------------------------

    @staticmethod
    def _principal(value: PrincipalLike) -> Principal:
        return Principal.coerce(value)

    @staticmethod
    def _identity(value: IdentityRef) -> Address:
        """Resolve an address, an owner principal, or address text.

        Text is always read as an address; pass a :class:`Principal` to
        target an identity by owner.
        """
        if isinstance(value, Address):
            return value
        if isinstance(value, Principal):
            return identity_address(value)
        return Address.coerce(value)

    # ------------------------------------------------------------------
    # Owner operations
    # ------------------------------------------------------------------

    def create_identity(self, owner: PrincipalLike) -> Address:
        """Create *owner*'s identity. Raises AlreadyExists on a second call."""
        return self._store.create(self._principal(owner))

    def set_authority(
        self,
        caller: PrincipalLike,
        owner: PrincipalLike,
        dimension: DimensionLike,
        new_authority: PrincipalLike,
    ) -> IdentityRecord:
        """Point one dimension's authority at *new_authority* (owner only)."""
        return self._store.set_authority(
            self._principal(caller),
            self._principal(owner),
            Dimension.parse(dimension),
            self._principal(new_authority),
        )

    def set_trading_authority(
        self, caller: PrincipalLike, owner: PrincipalLike, new_authority: PrincipalLike
    ) -> IdentityRecord:
        return self.set_authority(caller, owner, Dimension.TRADING, new_authority)

    def set_civic_authority(
        self, caller: PrincipalLike, owner: PrincipalLike, new_authority: PrincipalLike
    ) -> IdentityRecord:
        return self.set_authority(caller, owner, Dimension.CIVIC, new_authority)

    def set_developer_authority(
        self, caller: PrincipalLike, owner: PrincipalLike, new_authority: PrincipalLike
    ) -> IdentityRecord:
        return self.set_authority(caller, owner, Dimension.DEVELOPER, new_authority)

    def set_infra_authority(
        self, caller: PrincipalLike, owner: PrincipalLike, new_authority: PrincipalLike
    ) -> IdentityRecord:
        return self.set_authority(caller, owner, Dimension.INFRA, new_authority)

    # ------------------------------------------------------------------
    # Authority operations
    # ------------------------------------------------------------------

    def update_score(
        self,
        caller: PrincipalLike,
        identity: IdentityRef,
        dimension: DimensionLike,
        score: int,
    ) -> IdentityRecord:
        """Write one dimension score (dimension authority only)."""
        return self._store.update_score(
            self._principal(caller),
            self._identity(identity),
            Dimension.parse(dimension),
            score,
        )

    def update_trading_score(
        self, caller: PrincipalLike, identity: IdentityRef, score: int
    ) -> IdentityRecord:
        return self.update_score(caller, identity, Dimension.TRADING, score)

    def update_civic_score(
        self, caller: PrincipalLike, identity: IdentityRef, score: int
    ) -> IdentityRecord:
        return self.update_score(caller, identity, Dimension.CIVIC, score)

    def update_developer_score(
        self, caller: PrincipalLike, identity: IdentityRef, score: int
    ) -> IdentityRecord:
        return self.update_score(caller, identity, Dimension.DEVELOPER, score)

    def update_infra_score(
        self, caller: PrincipalLike, identity: IdentityRef, score: int
    ) -> IdentityRecord:
        return self.update_score(caller, identity, Dimension.INFRA, score)

    def update_details(
        self,
        caller: PrincipalLike,
        identity: IdentityRef,
        dimension: DimensionLike,
        metrics: MetricsLike,
    ) -> DetailRecord:
        """Write detail metrics for one dimension (dimension authority only).

        Does not change any score; call :meth:`update_score` as well if the
        coarse score should move.
        """
        return self._ledger.upsert_detail(
            self._principal(caller),
            self._identity(identity),
            Dimension.parse(dimension),
            metrics,
        )

    def update_trading_details(
        self, caller: PrincipalLike, identity: IdentityRef, metrics: MetricsLike
    ) -> DetailRecord:
        return self.update_details(caller, identity, Dimension.TRADING, metrics)

    def update_civic_details(
        self, caller: PrincipalLike, identity: IdentityRef, metrics: MetricsLike
    ) -> DetailRecord:
        return self.update_details(caller, identity, Dimension.CIVIC, metrics)

    def update_developer_details(
        self, caller: PrincipalLike, identity: IdentityRef, metrics: MetricsLike
    ) -> DetailRecord:
        return self.update_details(caller, identity, Dimension.DEVELOPER, metrics)

    def update_infra_details(
        self, caller: PrincipalLike, identity: IdentityRef, metrics: MetricsLike
    ) -> DetailRecord:
        return self.update_details(caller, identity, Dimension.INFRA, metrics)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_identity(self, owner: PrincipalLike) -> IdentityRecord | None:
        """Return *owner*'s record, or None if it does not exist."""
        return self._store.find_by_address(identity_address(self._principal(owner)))

    def get_identity_strict(self, owner: PrincipalLike) -> IdentityRecord:
        """Return *owner*'s record. Raises NotFound if it does not exist."""
        return self._store.read_strict(self._principal(owner))

    def get_identity_or_default(
        self, owner: PrincipalLike
    ) -> IdentityRecord | DefaultIdentity:
        return self._store.read_default(self._principal(owner))

    def has_identity(self, owner: PrincipalLike) -> bool:
        return self._store.exists(self._principal(owner))

    def get_tier(self, owner: PrincipalLike) -> int:
        """Tier (1-5); 1 if *owner* has no identity."""
        return int(self.get_identity_or_default(owner).tier)

    def get_composite_score(self, owner: PrincipalLike) -> int:
        """Composite score (0-10000); 0 if *owner* has no identity."""
        return self.get_identity_or_default(owner).composite_score

    def get_scores(self, owner: PrincipalLike) -> Scores:
        """All scores; zeros and tier 1 if *owner* has no identity."""
        return self.get_identity_or_default(owner).scores

    def get_details(
        self, owner: PrincipalLike, dimension: DimensionLike
    ) -> DetailRecord | None:
        """Detail metrics for *owner* in *dimension*, or None."""
        return self._ledger.find_detail(
            identity_address(self._principal(owner)), Dimension.parse(dimension)
        )


__all__ = ["SovereignClient"]
