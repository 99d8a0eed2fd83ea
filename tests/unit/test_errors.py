"""Unit tests for sovereign_identity.errors."""
from __future__ import annotations

import pytest

from sovereign_identity.errors import (
    AlreadyExists,
    InvalidAuthority,
    InvalidMetrics,
    InvalidScore,
    NotFound,
    OwnerMismatch,
    SovereignError,
    Unauthorized,
    WireFormatError,
)
from sovereign_identity.principal import Principal
from sovereign_identity.scoring.dimensions import Dimension


class TestHierarchy:
    @pytest.mark.parametrize(
        "error",
        [
            AlreadyExists("owner"),
            NotFound("Identity", "addr"),
            OwnerMismatch("caller", "owner"),
            Unauthorized("caller", Dimension.TRADING),
            InvalidScore(-1),
            InvalidAuthority(Principal.zero()),
            InvalidMetrics("bad"),
            WireFormatError("bad"),
        ],
    )
    def test_all_are_sovereign_errors(self, error: SovereignError) -> None:
        assert isinstance(error, SovereignError)

    def test_builtin_bases(self) -> None:
        assert isinstance(AlreadyExists("x"), ValueError)
        assert isinstance(NotFound("Identity", "x"), KeyError)
        assert isinstance(OwnerMismatch("a", "b"), PermissionError)
        assert isinstance(Unauthorized("a", "trading"), PermissionError)
        assert isinstance(InvalidScore(1.5), ValueError)

    def test_codes_are_distinct(self) -> None:
        codes = {
            cls.code
            for cls in (
                AlreadyExists,
                NotFound,
                OwnerMismatch,
                Unauthorized,
                InvalidScore,
                InvalidAuthority,
                InvalidMetrics,
                WireFormatError,
            )
        }
        assert len(codes) == 8


class TestMessages:
    def test_not_found_str_is_not_quoted(self) -> None:
        message = str(NotFound("Identity", "abc"))
        assert message == "Identity 'abc' not found."

    def test_unauthorized_names_dimension(self) -> None:
        error = Unauthorized("caller", Dimension.CIVIC)
        assert "civic authority" in str(error)
        assert error.dimension is Dimension.CIVIC

    def test_invalid_score_keeps_value(self) -> None:
        error = InvalidScore(10001)
        assert error.score == 10001
        assert "10001" in str(error)

    def test_invalid_authority_mentions_zero_principal(self) -> None:
        assert "zero principal" in str(InvalidAuthority(Principal.zero()))
