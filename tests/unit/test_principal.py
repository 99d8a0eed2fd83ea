"""Unit tests for sovereign_identity.principal."""
from __future__ import annotations

import pytest

from sovereign_identity.addressing import Address
from sovereign_identity.principal import (
    KEY_LENGTH,
    Principal,
    generate_keypair,
    generate_principal,
)


class TestPrincipal:
    def test_requires_32_bytes(self) -> None:
        with pytest.raises(ValueError):
            Principal(b"short")

    def test_requires_bytes(self) -> None:
        with pytest.raises(TypeError):
            Principal("not-bytes")  # type: ignore[arg-type]

    def test_text_round_trip(self) -> None:
        principal = generate_principal()
        assert Principal.from_text(principal.text) == principal

    def test_str_is_text(self) -> None:
        principal = generate_principal()
        assert str(principal) == principal.text

    def test_repr_names_type(self) -> None:
        assert repr(Principal.zero()).startswith("Principal(")

    def test_from_text_wrong_length(self) -> None:
        with pytest.raises(ValueError):
            Principal.from_text("abc")

    def test_from_text_invalid_character(self) -> None:
        with pytest.raises(ValueError):
            Principal.from_text("0" * 44)

    def test_zero(self) -> None:
        assert Principal.zero().is_zero()
        assert not generate_principal().is_zero()
        assert Principal.zero().text == "1" * KEY_LENGTH

    def test_hashable(self) -> None:
        principal = generate_principal()
        assert {principal, Principal(principal.raw)} == {principal}

    def test_not_equal_to_address_with_same_bytes(self) -> None:
        raw = bytes([7]) * 32
        assert Principal(raw) != Address(raw)


class TestCoerce:
    def test_instance_passes_through(self) -> None:
        principal = generate_principal()
        assert Principal.coerce(principal) is principal

    def test_from_text(self) -> None:
        principal = generate_principal()
        assert Principal.coerce(principal.text) == principal

    def test_from_bytes(self) -> None:
        principal = generate_principal()
        assert Principal.coerce(principal.raw) == principal

    def test_rejects_other_types(self) -> None:
        with pytest.raises(TypeError):
            Principal.coerce(42)  # type: ignore[arg-type]


class TestKeypair:
    def test_generates_distinct_principals(self) -> None:
        assert generate_keypair().principal != generate_keypair().principal

    def test_private_key_is_32_bytes(self) -> None:
        assert len(generate_keypair().private_key) == 32

    def test_to_dict(self) -> None:
        keypair = generate_keypair()
        data = keypair.to_dict()
        assert data["principal"] == keypair.principal.text
        assert bytes.fromhex(str(data["private_key_hex"])) == keypair.private_key
