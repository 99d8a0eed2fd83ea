"""Tests for sovereign_identity.server.routes."""
from __future__ import annotations

import pytest

from sovereign_identity.principal import Principal, generate_principal
from sovereign_identity.server import routes


@pytest.fixture(autouse=True)
def reset_server_state() -> None:
    """Reset module-level state before each test."""
    routes.reset_state()


@pytest.fixture()
def alice() -> Principal:
    return generate_principal()


@pytest.fixture()
def oracle() -> Principal:
    return generate_principal()


@pytest.fixture()
def created(alice: Principal) -> Principal:
    status, _ = routes.handle_create_identity({"owner": alice.text})
    assert status == 201
    return alice


class TestHandleCreateIdentity:
    def test_creates_identity(self, alice: Principal) -> None:
        status, data = routes.handle_create_identity({"owner": alice.text})

        assert status == 201
        assert data["owner"] == alice.text
        assert isinstance(data["address"], str)

    def test_rejects_duplicate(self, created: Principal) -> None:
        status, data = routes.handle_create_identity({"owner": created.text})

        assert status == 409
        assert data["code"] == "already_exists"

    def test_rejects_missing_owner(self) -> None:
        status, data = routes.handle_create_identity({})

        assert status == 422
        assert "error" in data

    def test_rejects_malformed_owner(self) -> None:
        status, data = routes.handle_create_identity({"owner": "0OIl"})

        assert status == 422


class TestHandleSetAuthority:
    def test_owner_delegates(self, created: Principal, oracle: Principal) -> None:
        status, data = routes.handle_set_authority(
            created.text, "trading", {"authority": oracle.text}, created.text
        )

        assert status == 200
        assert data["authorities"]["trading"] == oracle.text  # type: ignore[index]
        assert data["authorities"]["civic"] == created.text  # type: ignore[index]

    def test_missing_caller_is_401(self, created: Principal, oracle: Principal) -> None:
        status, data = routes.handle_set_authority(
            created.text, "trading", {"authority": oracle.text}, None
        )

        assert status == 401

    def test_non_owner_is_403(self, created: Principal, oracle: Principal) -> None:
        status, data = routes.handle_set_authority(
            created.text, "trading", {"authority": oracle.text}, oracle.text
        )

        assert status == 403
        assert data["code"] == "owner_mismatch"

    def test_zero_authority_is_422(self, created: Principal) -> None:
        status, data = routes.handle_set_authority(
            created.text, "civic", {"authority": Principal.zero().text}, created.text
        )

        assert status == 422
        assert data["code"] == "invalid_authority"

    def test_unknown_dimension_is_422(self, created: Principal, oracle: Principal) -> None:
        status, _ = routes.handle_set_authority(
            created.text, "creator", {"authority": oracle.text}, created.text
        )

        assert status == 422

    def test_missing_identity_is_404(self, alice: Principal, oracle: Principal) -> None:
        status, data = routes.handle_set_authority(
            alice.text, "trading", {"authority": oracle.text}, alice.text
        )

        assert status == 404
        assert data["code"] == "not_found"


class TestHandleUpdateScore:
    def test_authority_updates(self, created: Principal, oracle: Principal) -> None:
        routes.handle_set_authority(created.text, "trading", {"authority": oracle.text}, created.text)
        status, data = routes.handle_update_score(
            created.text, "trading", {"score": 7500}, oracle.text
        )

        assert status == 200
        assert data["composite_score"] == 3000
        assert data["tier"] == 2
        assert data["tier_name"] == "Silver"

    def test_wrong_authority_is_403(self, created: Principal, oracle: Principal) -> None:
        status, data = routes.handle_update_score(
            created.text, "trading", {"score": 100}, oracle.text
        )

        assert status == 403
        assert data["code"] == "unauthorized"

    def test_out_of_range_is_422(self, created: Principal) -> None:
        status, data = routes.handle_update_score(
            created.text, "trading", {"score": 10001}, created.text
        )

        assert status == 422
        assert data["code"] == "invalid_score"

    def test_non_integer_score_is_422(self, created: Principal) -> None:
        status, _ = routes.handle_update_score(
            created.text, "trading", {"score": "100"}, created.text
        )

        assert status == 422

    def test_missing_caller_is_401(self, created: Principal) -> None:
        status, _ = routes.handle_update_score(created.text, "trading", {"score": 1}, "")

        assert status == 401


class TestHandleDetails:
    def test_update_and_read(self, created: Principal) -> None:
        status, data = routes.handle_update_details(
            created.text, "developer", {"metrics": {"repositories": 4}}, created.text
        )
        assert status == 200
        assert data["metrics"]["repositories"] == 4  # type: ignore[index]

        status, data = routes.handle_get_details(created.text, "developer")
        assert status == 200
        assert data["dimension"] == "developer"

    def test_invalid_metrics_is_422(self, created: Principal) -> None:
        status, data = routes.handle_update_details(
            created.text, "developer", {"metrics": {"stars": 4}}, created.text
        )

        assert status == 422
        assert data["code"] == "invalid_metrics"

    def test_missing_details_is_404(self, created: Principal) -> None:
        status, _ = routes.handle_get_details(created.text, "civic")

        assert status == 404


class TestReads:
    def test_get_identity_missing_is_404(self, alice: Principal) -> None:
        status, _ = routes.handle_get_identity(alice.text)

        assert status == 404

    def test_get_identity(self, created: Principal) -> None:
        status, data = routes.handle_get_identity(created.text)

        assert status == 200
        assert data["owner"] == created.text
        assert data["version"] == 1

    def test_defaulted_reads_never_404(self, alice: Principal) -> None:
        status, scores = routes.handle_get_scores(alice.text)
        assert status == 200
        assert scores["exists"] is False
        assert scores["points_to_next_tier"] == 2000

        status, tier = routes.handle_get_tier(alice.text)
        assert status == 200
        assert tier["tier"] == 1

        status, composite = routes.handle_get_composite(alice.text)
        assert status == 200
        assert composite["composite"] == 0

    def test_reads_do_not_create(self, alice: Principal) -> None:
        routes.handle_get_tier(alice.text)
        _, health = routes.handle_health()

        assert health["identity_count"] == 0
