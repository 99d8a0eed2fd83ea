"""Unit tests for sovereign_identity.client — SovereignClient."""
from __future__ import annotations

import pytest

from sovereign_identity.addressing import identity_address
from sovereign_identity.client import SovereignClient
from sovereign_identity.errors import (
    AlreadyExists,
    InvalidMetrics,
    NotFound,
    OwnerMismatch,
    Unauthorized,
)
from sovereign_identity.ledger.detail_ledger import DetailLedger
from sovereign_identity.ledger.details import CivicMetrics, TradingMetrics
from sovereign_identity.principal import Principal, generate_principal
from sovereign_identity.records.identity import DefaultIdentity
from sovereign_identity.scoring.dimensions import Dimension
from sovereign_identity.scoring.tier import Tier
from sovereign_identity.store.identity_store import IdentityStore


@pytest.fixture()
def client() -> SovereignClient:
    return SovereignClient()


@pytest.fixture()
def alice() -> Principal:
    return generate_principal()


@pytest.fixture()
def oracle() -> Principal:
    return generate_principal()


class TestConstruction:
    def test_defaults_share_store(self, client: SovereignClient) -> None:
        assert client.ledger.store is client.store

    def test_accepts_existing_store(self) -> None:
        store = IdentityStore()
        client = SovereignClient(store)
        assert client.store is store

    def test_rejects_ledger_for_other_store(self) -> None:
        with pytest.raises(ValueError):
            SovereignClient(IdentityStore(), DetailLedger(IdentityStore()))


class TestOwnerOperations:
    def test_create_identity(self, client: SovereignClient, alice: Principal) -> None:
        assert client.create_identity(alice) == identity_address(alice)
        assert client.has_identity(alice)

    def test_create_accepts_text(self, client: SovereignClient, alice: Principal) -> None:
        client.create_identity(alice.text)
        assert client.has_identity(alice)

    def test_create_twice(self, client: SovereignClient, alice: Principal) -> None:
        client.create_identity(alice)
        with pytest.raises(AlreadyExists):
            client.create_identity(alice)

    @pytest.mark.parametrize(
        "method, dimension",
        [
            ("set_trading_authority", Dimension.TRADING),
            ("set_civic_authority", Dimension.CIVIC),
            ("set_developer_authority", Dimension.DEVELOPER),
            ("set_infra_authority", Dimension.INFRA),
        ],
    )
    def test_per_dimension_setters(
        self,
        client: SovereignClient,
        alice: Principal,
        oracle: Principal,
        method: str,
        dimension: Dimension,
    ) -> None:
        client.create_identity(alice)
        record = getattr(client, method)(alice, alice, oracle)
        assert record.authority_for(dimension) == oracle
        others = [d for d in Dimension if d is not dimension]
        assert all(record.authority_for(d) == alice for d in others)

    def test_set_authority_accepts_string_dimension(
        self, client: SovereignClient, alice: Principal, oracle: Principal
    ) -> None:
        client.create_identity(alice)
        record = client.set_authority(alice, alice, "Infrastructure", oracle)
        assert record.infra_authority == oracle

    def test_non_owner(self, client: SovereignClient, alice: Principal, oracle: Principal) -> None:
        client.create_identity(alice)
        with pytest.raises(OwnerMismatch):
            client.set_trading_authority(oracle, alice, oracle)


class TestAuthorityOperations:
    def test_update_by_address(
        self, client: SovereignClient, alice: Principal, oracle: Principal
    ) -> None:
        address = client.create_identity(alice)
        client.set_trading_authority(alice, alice, oracle)
        record = client.update_trading_score(oracle, address, 7500)
        assert record.composite_score == 3000

    def test_update_by_owner_principal(self, client: SovereignClient, alice: Principal) -> None:
        client.create_identity(alice)
        record = client.update_civic_score(alice, alice, 8000)
        assert record.composite_score == 2000

    def test_update_by_address_text(self, client: SovereignClient, alice: Principal) -> None:
        address = client.create_identity(alice)
        record = client.update_developer_score(alice, address.text, 10000)
        assert record.developer_score == 10000

    def test_update_infra(self, client: SovereignClient, alice: Principal) -> None:
        client.create_identity(alice)
        assert client.update_infra_score(alice, alice, 10000).composite_score == 1500

    def test_unauthorized(self, client: SovereignClient, alice: Principal, oracle: Principal) -> None:
        address = client.create_identity(alice)
        with pytest.raises(Unauthorized):
            client.update_score(oracle, address, Dimension.TRADING, 1)

    def test_update_details(
        self, client: SovereignClient, alice: Principal, oracle: Principal
    ) -> None:
        address = client.create_identity(alice)
        client.set_civic_authority(alice, alice, oracle)
        record = client.update_civic_details(
            oracle, address, CivicMetrics(problems_solved=3, directions_proposed=2)
        )
        assert record.metrics.problems_solved == 3  # type: ignore[attr-defined]
        assert client.get_details(alice, "civic") == record

    def test_update_details_leaves_scores(
        self, client: SovereignClient, alice: Principal
    ) -> None:
        client.create_identity(alice)
        client.update_trading_details(alice, alice, {"win_rate_bps": 9000})
        assert client.get_composite_score(alice) == 0

    def test_update_details_wrong_schema(self, client: SovereignClient, alice: Principal) -> None:
        client.create_identity(alice)
        with pytest.raises(InvalidMetrics):
            client.update_infra_details(alice, alice, TradingMetrics())

    def test_developer_details(self, client: SovereignClient, alice: Principal) -> None:
        client.create_identity(alice)
        record = client.update_developer_details(alice, alice, {"repositories": 7})
        assert record.dimension is Dimension.DEVELOPER


class TestReads:
    def test_get_identity_missing_is_none(self, client: SovereignClient, alice: Principal) -> None:
        assert client.get_identity(alice) is None

    def test_get_identity_strict_missing(self, client: SovereignClient, alice: Principal) -> None:
        with pytest.raises(NotFound):
            client.get_identity_strict(alice)

    def test_defaulted_reads_for_unknown_owner(
        self, client: SovereignClient, alice: Principal
    ) -> None:
        assert client.get_tier(alice) == 1
        assert client.get_composite_score(alice) == 0
        assert client.get_scores(alice).tier == Tier.BRONZE
        assert isinstance(client.get_identity_or_default(alice), DefaultIdentity)
        assert not client.has_identity(alice)

    def test_get_tier_after_updates(
        self, client: SovereignClient, alice: Principal, oracle: Principal
    ) -> None:
        address = client.create_identity(alice)
        client.set_trading_authority(alice, alice, oracle)
        client.set_civic_authority(alice, alice, oracle)
        client.update_trading_score(oracle, address, 7500)
        client.update_civic_score(oracle, address, 8000)
        assert client.get_tier(alice) == 3
        assert client.get_composite_score(alice) == 5000

    def test_get_details_missing(self, client: SovereignClient, alice: Principal) -> None:
        client.create_identity(alice)
        assert client.get_details(alice, Dimension.TRADING) is None
