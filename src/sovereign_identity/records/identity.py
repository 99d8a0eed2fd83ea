"""Identity record — the canonical per-owner reputation record.

Records are immutable snapshots. The store never mutates a record in place;
every successful write builds a replacement with :meth:`IdentityRecord.with_score`
or :meth:`IdentityRecord.with_authority` and swaps it in whole, so a reader
holding a record always sees one consistent state.
"""
from __future__ import annotations

import datetime
from dataclasses import dataclass, replace

from sovereign_identity.addressing import Address, identity_address
from sovereign_identity.principal import Principal
from sovereign_identity.scoring.composite import calculate, verify_record
from sovereign_identity.scoring.dimensions import Dimension, validate_score
from sovereign_identity.scoring.tier import Tier, points_to_next_tier

SCHEMA_VERSION: int = 1


def _isoformat(timestamp: int) -> str:
    return datetime.datetime.fromtimestamp(timestamp, datetime.timezone.utc).isoformat()


@dataclass(frozen=True)
class Scores:
    """Simplified view of the scores on a record."""

    trading: int
    civic: int
    developer: int
    infra: int
    composite: int
    tier: Tier

    def get(self, dimension: Dimension) -> int:
        return getattr(self, dimension.value)

    def to_dict(self) -> dict[str, object]:
        return {
            "trading": self.trading,
            "civic": self.civic,
            "developer": self.developer,
            "infra": self.infra,
            "composite": self.composite,
            "tier": int(self.tier),
            "tier_name": self.tier.display_name,
        }


@dataclass(frozen=True)
class IdentityRecord:
    """A stored identity.

    Parameters
    ----------
    owner:
        Principal that owns the identity. Set at creation, never changed.
    created_at:
        UTC unix timestamp of creation.
    trading_authority, civic_authority, developer_authority, infra_authority:
        Principal allowed to write each dimension. Default to ``owner``.
    trading_score, civic_score, developer_score, infra_score:
        Dimension scores in [0, 10000].
    composite_score:
        Weighted composite of the four dimension scores.
    tier:
        Tier derived from ``composite_score``.
    last_updated:
        UTC unix timestamp of the latest score write (creation time until
        the first one).
    version:
        Schema tag of the record layout.
    """

    owner: Principal
    created_at: int
    trading_authority: Principal
    civic_authority: Principal
    developer_authority: Principal
    infra_authority: Principal
    trading_score: int = 0
    civic_score: int = 0
    developer_score: int = 0
    infra_score: int = 0
    composite_score: int = 0
    tier: Tier = Tier.BRONZE
    last_updated: int = 0
    version: int = SCHEMA_VERSION

    exists = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "tier", Tier(self.tier))
        if not verify_record(self):
            raise ValueError(
                f"Inconsistent identity record for {self.owner}: composite/tier do "
                "not match the dimension scores"
            )

    @classmethod
    def new(cls, owner: Principal, now: int) -> "IdentityRecord":
        """Build a fully-initialized record with every default in place."""
        return cls(
            owner=owner,
            created_at=now,
            trading_authority=owner,
            civic_authority=owner,
            developer_authority=owner,
            infra_authority=owner,
            trading_score=0,
            civic_score=0,
            developer_score=0,
            infra_score=0,
            composite_score=0,
            tier=Tier.BRONZE,
            last_updated=now,
            version=SCHEMA_VERSION,
        )

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def address(self) -> Address:
        return identity_address(self.owner)

    def authority_for(self, dimension: Dimension) -> Principal:
        return getattr(self, f"{dimension.value}_authority")

    def score_for(self, dimension: Dimension) -> int:
        return getattr(self, f"{dimension.value}_score")

    @property
    def authorities(self) -> dict[Dimension, Principal]:
        return {dimension: self.authority_for(dimension) for dimension in Dimension}

    @property
    def scores(self) -> Scores:
        return Scores(
            trading=self.trading_score,
            civic=self.civic_score,
            developer=self.developer_score,
            infra=self.infra_score,
            composite=self.composite_score,
            tier=Tier(self.tier),
        )

    @property
    def points_to_next_tier(self) -> int:
        return points_to_next_tier(self.composite_score, self.tier)

    # ------------------------------------------------------------------
    # Derivation of replacement records
    # ------------------------------------------------------------------

    def with_score(self, dimension: Dimension, score: int, now: int) -> "IdentityRecord":
        """Return a copy with *score* written and composite, tier, and
        ``last_updated`` recomputed together."""
        validate_score(score)
        current = {d: self.score_for(d) for d in Dimension}
        current[dimension] = score
        result = calculate(
            trading=current[Dimension.TRADING],
            civic=current[Dimension.CIVIC],
            developer=current[Dimension.DEVELOPER],
            infra=current[Dimension.INFRA],
        )
        return replace(
            self,
            **{f"{dimension.value}_score": score},
            composite_score=result.composite,
            tier=result.tier,
            last_updated=now,
        )

    def with_authority(self, dimension: Dimension, authority: Principal) -> "IdentityRecord":
        """Return a copy with one authority pointer replaced and nothing else."""
        return replace(self, **{f"{dimension.value}_authority": authority})

    def to_dict(self) -> dict[str, object]:
        """Serialize to a plain dictionary."""
        return {
            "address": self.address.text,
            "owner": self.owner.text,
            "created_at": _isoformat(self.created_at),
            "authorities": {
                dimension.value: principal.text
                for dimension, principal in self.authorities.items()
            },
            "scores": self.scores.to_dict(),
            "last_updated": _isoformat(self.last_updated),
            "version": self.version,
        }


@dataclass(frozen=True)
class DefaultIdentity:
    """The conceptual record for an owner who has never created an identity.

    Returned by default-valued reads only. It is a distinct type with
    ``exists == False`` so callers that care about real existence can tell it
    apart from a stored tier-1 record. It has no authorities and no
    timestamps.
    """

    owner: Principal
    trading_score: int = 0
    civic_score: int = 0
    developer_score: int = 0
    infra_score: int = 0
    composite_score: int = 0
    tier: Tier = Tier.BRONZE

    exists = False

    @property
    def address(self) -> Address:
        return identity_address(self.owner)

    def score_for(self, dimension: Dimension) -> int:
        return 0

    @property
    def scores(self) -> Scores:
        return Scores(
            trading=0, civic=0, developer=0, infra=0, composite=0, tier=Tier.BRONZE
        )

    @property
    def points_to_next_tier(self) -> int:
        return points_to_next_tier(0, Tier.BRONZE)

    def to_dict(self) -> dict[str, object]:
        return {
            "address": self.address.text,
            "owner": self.owner.text,
            "exists": False,
            "scores": self.scores.to_dict(),
        }


__all__ = ["DefaultIdentity", "IdentityRecord", "SCHEMA_VERSION", "Scores"]
