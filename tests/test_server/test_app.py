"""Tests for sovereign_identity.server.app — HTTP handler integration."""
from __future__ import annotations

import json
import threading
import urllib.error
import urllib.request
from http.server import HTTPServer
from pathlib import Path
from typing import Iterator

import pytest

from sovereign_identity.errors import WireFormatError
from sovereign_identity.principal import Principal, generate_principal
from sovereign_identity.server import routes
from sovereign_identity.server.app import (
    CALLER_HEADER,
    SovereignIdentityHandler,
    _persist,
    create_server,
)
from sovereign_identity.store.identity_store import IdentityStore
from sovereign_identity.store.snapshot import dump_snapshot, load_snapshot


@pytest.fixture(autouse=True)
def reset_server_state() -> None:
    """Reset module-level state before each test."""
    routes.reset_state()


@pytest.fixture()
def store_file(tmp_path: Path) -> Path:
    return tmp_path / "server.json"


@pytest.fixture()
def base_url(store_file: Path) -> Iterator[str]:
    server = create_server(host="127.0.0.1", port=0, store_file=store_file)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{server.server_address[1]}"
    finally:
        server.shutdown()
        server.server_close()


def _request(
    method: str,
    url: str,
    body: dict[str, object] | None = None,
    caller: Principal | None = None,
) -> tuple[int, dict[str, object]]:
    data = json.dumps(body).encode("utf-8") if body is not None else None
    request = urllib.request.Request(url, data=data, method=method)
    request.add_header("Content-Type", "application/json")
    if caller is not None:
        request.add_header(CALLER_HEADER, caller.text)
    try:
        with urllib.request.urlopen(request, timeout=5) as response:
            return response.status, json.loads(response.read())
    except urllib.error.HTTPError as exc:
        return exc.code, json.loads(exc.read())


class TestCreateServer:
    def test_create_server_returns_http_server(self) -> None:
        server = create_server(host="127.0.0.1", port=0)
        try:
            assert isinstance(server, HTTPServer)
        finally:
            server.server_close()

    def test_create_server_uses_correct_handler(self) -> None:
        server = create_server(host="127.0.0.1", port=0)
        try:
            assert server.RequestHandlerClass is SovereignIdentityHandler
        finally:
            server.server_close()

    def test_create_server_rejects_duplicated_identities(self, store_file: Path) -> None:
        store = IdentityStore()
        store.create(generate_principal())
        data = dump_snapshot(store)
        data["identities"] = data["identities"] * 2  # type: ignore[operator]
        store_file.write_text(json.dumps(data), encoding="utf-8")
        with pytest.raises(WireFormatError, match="already exists"):
            create_server(host="127.0.0.1", port=0, store_file=store_file)


class TestHttpRoundTrip:
    def test_health(self, base_url: str) -> None:
        status, data = _request("GET", f"{base_url}/health")
        assert status == 200
        assert data["service"] == "sovereign-identity"

    def test_full_flow(self, base_url: str, store_file: Path) -> None:
        alice, oracle = generate_principal(), generate_principal()

        status, _ = _request("POST", f"{base_url}/identities", {"owner": alice.text})
        assert status == 201

        status, _ = _request(
            "PUT",
            f"{base_url}/identities/{alice.text}/authorities/trading",
            {"authority": oracle.text},
            caller=alice,
        )
        assert status == 200

        status, data = _request(
            "PUT",
            f"{base_url}/identities/{alice.text}/scores/trading",
            {"score": 7500},
            caller=oracle,
        )
        assert status == 200
        assert data["composite_score"] == 3000

        status, data = _request("GET", f"{base_url}/identities/{alice.text}/tier")
        assert status == 200
        assert data["tier"] == 2

        store, _ = load_snapshot(store_file)
        assert store.read_strict(alice).trading_score == 7500

    def test_mutation_without_caller_is_401(self, base_url: str) -> None:
        alice = generate_principal()
        _request("POST", f"{base_url}/identities", {"owner": alice.text})
        status, _ = _request(
            "PUT", f"{base_url}/identities/{alice.text}/scores/trading", {"score": 1}
        )
        assert status == 401

    def test_failed_mutation_not_persisted(self, base_url: str, store_file: Path) -> None:
        alice = generate_principal()
        _request("POST", f"{base_url}/identities", {"owner": alice.text})
        status, _ = _request(
            "PUT",
            f"{base_url}/identities/{alice.text}/scores/trading",
            {"score": 20000},
            caller=alice,
        )
        assert status == 422
        store, _ = load_snapshot(store_file)
        assert store.read_strict(alice).trading_score == 0

    def test_unknown_route_is_404(self, base_url: str) -> None:
        status, data = _request("GET", f"{base_url}/nowhere")
        assert status == 404
        assert "No route" in str(data["detail"])

    def test_invalid_json_is_400(self, base_url: str) -> None:
        request = urllib.request.Request(
            f"{base_url}/identities", data=b"{bad", method="POST"
        )
        with pytest.raises(urllib.error.HTTPError) as exc_info:
            urllib.request.urlopen(request, timeout=5)
        assert exc_info.value.code == 400

    def test_state_reloaded_from_store_file(self, store_file: Path) -> None:
        alice = generate_principal()
        first = create_server(host="127.0.0.1", port=0, store_file=store_file)
        routes.get_client().create_identity(alice)
        _persist()
        first.server_close()

        routes.reset_state()
        second = create_server(host="127.0.0.1", port=0, store_file=store_file)
        try:
            assert routes.get_client().has_identity(alice)
        finally:
            second.server_close()
