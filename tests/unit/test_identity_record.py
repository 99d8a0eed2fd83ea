"""Unit tests for sovereign_identity.records.identity."""
from __future__ import annotations

import dataclasses

import pytest

from sovereign_identity.addressing import identity_address
from sovereign_identity.errors import InvalidScore
from sovereign_identity.principal import Principal
from sovereign_identity.records.identity import (
    SCHEMA_VERSION,
    DefaultIdentity,
    IdentityRecord,
)
from sovereign_identity.scoring.dimensions import Dimension
from sovereign_identity.scoring.tier import Tier

NOW = 1_700_000_000


@pytest.fixture()
def owner() -> Principal:
    return Principal(bytes([1]) * 32)


@pytest.fixture()
def oracle() -> Principal:
    return Principal(bytes([9]) * 32)


@pytest.fixture()
def record(owner: Principal) -> IdentityRecord:
    return IdentityRecord.new(owner, NOW)


class TestNew:
    def test_all_authorities_default_to_owner(self, record: IdentityRecord, owner: Principal) -> None:
        assert set(record.authorities.values()) == {owner}

    def test_scores_start_at_zero(self, record: IdentityRecord) -> None:
        assert all(record.score_for(d) == 0 for d in Dimension)
        assert record.composite_score == 0
        assert record.tier == Tier.BRONZE

    def test_timestamps(self, record: IdentityRecord) -> None:
        assert record.created_at == NOW
        assert record.last_updated == NOW

    def test_version(self, record: IdentityRecord) -> None:
        assert record.version == SCHEMA_VERSION

    def test_address(self, record: IdentityRecord, owner: Principal) -> None:
        assert record.address == identity_address(owner)

    def test_exists(self, record: IdentityRecord) -> None:
        assert record.exists is True

    def test_immutable(self, record: IdentityRecord) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.trading_score = 5  # type: ignore[misc]


class TestWithScore:
    def test_recomputes_composite_and_tier(self, record: IdentityRecord) -> None:
        updated = record.with_score(Dimension.TRADING, 7500, NOW + 10)
        assert updated.trading_score == 7500
        assert updated.composite_score == 3000
        assert updated.tier == Tier.SILVER
        assert updated.last_updated == NOW + 10

    def test_previous_record_untouched(self, record: IdentityRecord) -> None:
        record.with_score(Dimension.TRADING, 7500, NOW + 10)
        assert record.trading_score == 0
        assert record.last_updated == NOW

    def test_keeps_other_scores(self, record: IdentityRecord) -> None:
        updated = record.with_score(Dimension.TRADING, 7500, NOW).with_score(
            Dimension.CIVIC, 8000, NOW
        )
        assert updated.trading_score == 7500
        assert updated.composite_score == 5000
        assert updated.tier == Tier.GOLD

    def test_lowering_a_score_can_demote(self, record: IdentityRecord) -> None:
        high = record.with_score(Dimension.TRADING, 10000, NOW)
        low = high.with_score(Dimension.TRADING, 1000, NOW)
        assert high.tier == Tier.GOLD
        assert low.tier == Tier.BRONZE

    def test_rejects_invalid_score(self, record: IdentityRecord) -> None:
        with pytest.raises(InvalidScore):
            record.with_score(Dimension.TRADING, 10001, NOW)


class TestWithAuthority:
    def test_changes_only_the_named_pointer(
        self, record: IdentityRecord, owner: Principal, oracle: Principal
    ) -> None:
        updated = record.with_authority(Dimension.CIVIC, oracle)
        assert updated.civic_authority == oracle
        assert updated.trading_authority == owner
        assert updated.last_updated == record.last_updated
        assert updated.scores == record.scores


class TestToDict:
    def test_fields(self, record: IdentityRecord, owner: Principal) -> None:
        data = record.to_dict()
        assert data["owner"] == owner.text
        assert data["address"] == record.address.text
        assert data["authorities"] == {d.value: owner.text for d in Dimension}
        assert data["scores"]["tier"] == 1  # type: ignore[index]
        assert str(data["created_at"]).startswith("2023-11-14T22:13:20")


class TestDefaultIdentity:
    def test_defaults(self, owner: Principal) -> None:
        default = DefaultIdentity(owner=owner)
        assert default.exists is False
        assert default.tier == Tier.BRONZE
        assert default.composite_score == 0
        assert default.scores.tier == Tier.BRONZE
        assert default.points_to_next_tier == 2000

    def test_distinct_from_stored_tier_one(self, owner: Principal, record: IdentityRecord) -> None:
        default = DefaultIdentity(owner=owner)
        assert default != record
        assert default.scores == record.scores


class TestConsistency:
    def test_mismatched_composite_rejected(self, record: IdentityRecord) -> None:
        with pytest.raises(ValueError, match="Inconsistent"):
            dataclasses.replace(record, trading_score=7500)

    def test_mismatched_tier_rejected(self, record: IdentityRecord) -> None:
        with pytest.raises(ValueError):
            dataclasses.replace(record, tier=Tier.DIAMOND)

    def test_out_of_range_score_rejected(self, owner: Principal) -> None:
        with pytest.raises(ValueError):
            IdentityRecord(
                owner=owner,
                created_at=NOW,
                trading_authority=owner,
                civic_authority=owner,
                developer_authority=owner,
                infra_authority=owner,
                trading_score=20000,
                composite_score=8000,
                tier=Tier.DIAMOND,
            )

    def test_unknown_tier_rejected(self, record: IdentityRecord) -> None:
        with pytest.raises(ValueError):
            dataclasses.replace(record, tier=9)

    def test_int_tier_coerced(self, owner: Principal) -> None:
        built = IdentityRecord(
            owner=owner,
            created_at=NOW,
            trading_authority=owner,
            civic_authority=owner,
            developer_authority=owner,
            infra_authority=owner,
            trading_score=7500,
            composite_score=3000,
            tier=2,  # type: ignore[arg-type]
        )
        assert built.tier is Tier.SILVER
