"""Route handler functions for the sovereign-identity HTTP server.

Each function accepts parsed request data and returns a tuple of
(status_code, response_dict). The HTTP handler in app.py calls these
functions and serializes the results to JSON.

The caller principal of a mutation is taken from the ``X-Sovereign-Caller``
header by app.py and passed in as ``caller``. Authenticating that header is
the job of whatever sits in front of this server.
"""
from __future__ import annotations

import functools
from typing import Callable

from pydantic import ValidationError

from sovereign_identity import __version__
from sovereign_identity.client import SovereignClient
from sovereign_identity.errors import (
    AlreadyExists,
    InvalidAuthority,
    InvalidMetrics,
    InvalidScore,
    NotFound,
    OwnerMismatch,
    SovereignError,
    Unauthorized,
)
from sovereign_identity.ledger.details import DetailRecord
from sovereign_identity.principal import Principal
from sovereign_identity.records.identity import IdentityRecord
from sovereign_identity.scoring.dimensions import Dimension
from sovereign_identity.server.models import (
    CompositeResponse,
    CreateIdentityRequest,
    CreatedResponse,
    DetailResponse,
    ErrorResponse,
    HealthResponse,
    IdentityResponse,
    ScoresResponse,
    SetAuthorityRequest,
    TierResponse,
    UpdateDetailsRequest,
    UpdateScoreRequest,
)

Response = tuple[int, dict[str, object]]

_ERROR_STATUS: dict[type[SovereignError], tuple[int, str]] = {
    AlreadyExists: (409, "Conflict"),
    NotFound: (404, "Not found"),
    OwnerMismatch: (403, "Forbidden"),
    Unauthorized: (403, "Forbidden"),
    InvalidScore: (422, "Validation error"),
    InvalidAuthority: (422, "Validation error"),
    InvalidMetrics: (422, "Validation error"),
}


# Module-level shared state
_client: SovereignClient = SovereignClient()


def reset_state() -> None:
    """Reset all shared state — used in tests and for clean restarts."""
    global _client
    _client = SovereignClient()


def configure(client: SovereignClient) -> None:
    """Serve *client* instead of the default in-memory one."""
    global _client
    _client = client


def get_client() -> SovereignClient:
    return _client


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _error(status: int, error: str, detail: str, code: str | None = None) -> Response:
    return status, ErrorResponse(error=error, detail=detail, code=code).model_dump()


def _from_exception(exc: SovereignError) -> Response:
    status, error = _ERROR_STATUS.get(type(exc), (400, "Bad request"))
    return _error(status, error, str(exc), exc.code)


class _BadInput(Exception):
    """Malformed path or body value; rendered as a 422."""


class _MissingCaller(Exception):
    """No caller principal supplied on a mutating request."""


def _parse_principal(value: str, label: str) -> Principal:
    try:
        return Principal.from_text(value)
    except ValueError as exc:
        raise _BadInput(f"{label} is not a valid principal: {exc}") from exc


def _parse_dimension(value: str) -> Dimension:
    try:
        return Dimension.parse(value)
    except ValueError as exc:
        raise _BadInput(str(exc)) from exc


def _require_caller(caller: str | None) -> Principal:
    if not caller:
        raise _MissingCaller()
    return _parse_principal(caller, "X-Sovereign-Caller")


def _guarded(func: Callable[..., Response]) -> Callable[..., Response]:
    """Translate domain and input errors raised by *func* into responses."""

    @functools.wraps(func)
    def wrapper(*args: object, **kwargs: object) -> Response:
        try:
            return func(*args, **kwargs)
        except ValidationError as exc:
            return _error(422, "Validation error", str(exc))
        except _BadInput as exc:
            return _error(422, "Validation error", str(exc))
        except _MissingCaller:
            return _error(
                401,
                "Unauthenticated",
                "Mutating requests require an X-Sovereign-Caller header.",
            )
        except SovereignError as exc:
            return _from_exception(exc)

    return wrapper


def _record_to_response(record: IdentityRecord) -> IdentityResponse:
    """Convert an IdentityRecord to an IdentityResponse."""
    data = record.to_dict()
    return IdentityResponse(
        address=record.address.text,
        owner=record.owner.text,
        created_at=str(data["created_at"]),
        authorities=dict(data["authorities"]),  # type: ignore[arg-type]
        scores=dict(data["scores"]),  # type: ignore[arg-type]
        composite_score=record.composite_score,
        tier=int(record.tier),
        tier_name=record.tier.display_name,
        last_updated=str(data["last_updated"]),
        version=record.version,
    )


def _detail_to_response(record: DetailRecord) -> DetailResponse:
    data = record.to_dict()
    return DetailResponse(
        address=record.address.text,
        identity=record.identity.text,
        dimension=record.dimension.value,
        metrics=record.metrics.model_dump(),
        last_updated=str(data["last_updated"]),
        version=record.version,
    )


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------


@_guarded
def handle_create_identity(body: dict[str, object]) -> Response:
    """Handle POST /identities.

    Creation is self-service: no caller header is required.
    """
    request = CreateIdentityRequest.model_validate(body)
    owner = _parse_principal(request.owner, "owner")
    address = _client.create_identity(owner)
    return 201, CreatedResponse(owner=owner.text, address=address.text).model_dump()


@_guarded
def handle_set_authority(
    owner: str, dimension: str, body: dict[str, object], caller: str | None
) -> Response:
    """Handle PUT /identities/{owner}/authorities/{dimension}."""
    caller_principal = _require_caller(caller)
    request = SetAuthorityRequest.model_validate(body)
    record = _client.set_authority(
        caller_principal,
        _parse_principal(owner, "owner"),
        _parse_dimension(dimension),
        _parse_principal(request.authority, "authority"),
    )
    return 200, _record_to_response(record).model_dump()


@_guarded
def handle_update_score(
    owner: str, dimension: str, body: dict[str, object], caller: str | None
) -> Response:
    """Handle PUT /identities/{owner}/scores/{dimension}."""
    caller_principal = _require_caller(caller)
    request = UpdateScoreRequest.model_validate(body)
    record = _client.update_score(
        caller_principal,
        _parse_principal(owner, "owner"),
        _parse_dimension(dimension),
        request.score,
    )
    return 200, _record_to_response(record).model_dump()


@_guarded
def handle_update_details(
    owner: str, dimension: str, body: dict[str, object], caller: str | None
) -> Response:
    """Handle PUT /identities/{owner}/details/{dimension}."""
    caller_principal = _require_caller(caller)
    request = UpdateDetailsRequest.model_validate(body)
    record = _client.update_details(
        caller_principal,
        _parse_principal(owner, "owner"),
        _parse_dimension(dimension),
        request.metrics,
    )
    return 200, _detail_to_response(record).model_dump()


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


@_guarded
def handle_get_identity(owner: str) -> Response:
    """Handle GET /identities/{owner} (strict: 404 when absent)."""
    record = _client.get_identity_strict(_parse_principal(owner, "owner"))
    return 200, _record_to_response(record).model_dump()


@_guarded
def handle_get_scores(owner: str) -> Response:
    """Handle GET /identities/{owner}/scores (defaulted, never 404)."""
    record = _client.get_identity_or_default(_parse_principal(owner, "owner"))
    scores = record.scores
    response = ScoresResponse(
        owner=record.owner.text,
        exists=record.exists,
        trading=scores.trading,
        civic=scores.civic,
        developer=scores.developer,
        infra=scores.infra,
        composite=scores.composite,
        tier=int(scores.tier),
        tier_name=scores.tier.display_name,
        points_to_next_tier=record.points_to_next_tier,
    )
    return 200, response.model_dump()


@_guarded
def handle_get_tier(owner: str) -> Response:
    """Handle GET /identities/{owner}/tier (defaulted, never 404)."""
    record = _client.get_identity_or_default(_parse_principal(owner, "owner"))
    tier = record.scores.tier
    response = TierResponse(
        owner=record.owner.text,
        exists=record.exists,
        tier=int(tier),
        tier_name=tier.display_name,
    )
    return 200, response.model_dump()


@_guarded
def handle_get_composite(owner: str) -> Response:
    """Handle GET /identities/{owner}/composite (defaulted, never 404)."""
    record = _client.get_identity_or_default(_parse_principal(owner, "owner"))
    response = CompositeResponse(
        owner=record.owner.text,
        exists=record.exists,
        composite=record.composite_score,
    )
    return 200, response.model_dump()


@_guarded
def handle_get_details(owner: str, dimension: str) -> Response:
    """Handle GET /identities/{owner}/details/{dimension}."""
    principal = _parse_principal(owner, "owner")
    parsed = _parse_dimension(dimension)
    record = _client.get_details(principal, parsed)
    if record is None:
        return _error(
            404,
            "Not found",
            f"No {parsed.value} details recorded for {principal.text!r}.",
            NotFound.code,
        )
    return 200, _detail_to_response(record).model_dump()


def handle_health() -> Response:
    """Handle GET /health."""
    response = HealthResponse(
        version=__version__,
        identity_count=len(_client.store),
        detail_count=len(_client.ledger),
    )
    return 200, response.model_dump()


__all__ = [
    "configure",
    "get_client",
    "handle_create_identity",
    "handle_get_composite",
    "handle_get_details",
    "handle_get_identity",
    "handle_get_scores",
    "handle_get_tier",
    "handle_health",
    "handle_set_authority",
    "handle_update_details",
    "handle_update_score",
    "reset_state",
]
