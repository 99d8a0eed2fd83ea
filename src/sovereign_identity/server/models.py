"""Pydantic request/response models for the sovereign-identity HTTP server."""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, StrictInt


class CreateIdentityRequest(BaseModel):
    """Request body for POST /identities."""

    owner: str


class SetAuthorityRequest(BaseModel):
    """Request body for PUT /identities/{owner}/authorities/{dimension}."""

    authority: str


class UpdateScoreRequest(BaseModel):
    """Request body for PUT /identities/{owner}/scores/{dimension}."""

    score: StrictInt


class UpdateDetailsRequest(BaseModel):
    """Request body for PUT /identities/{owner}/details/{dimension}."""

    metrics: dict[str, object] = Field(default_factory=dict)


class CreatedResponse(BaseModel):
    """Response body for POST /identities."""

    owner: str
    address: str


class ScoresResponse(BaseModel):
    """Response body for GET /identities/{owner}/scores."""

    owner: str
    exists: bool
    trading: int = 0
    civic: int = 0
    developer: int = 0
    infra: int = 0
    composite: int = 0
    tier: int = 1
    tier_name: str = "Bronze"
    points_to_next_tier: int = 2000


class IdentityResponse(BaseModel):
    """Response body representing a stored identity record."""

    address: str
    owner: str
    created_at: str
    authorities: dict[str, str] = Field(default_factory=dict)
    scores: dict[str, object] = Field(default_factory=dict)
    composite_score: int
    tier: int
    tier_name: str
    last_updated: str
    version: int


class TierResponse(BaseModel):
    """Response body for GET /identities/{owner}/tier."""

    owner: str
    exists: bool
    tier: int
    tier_name: str


class CompositeResponse(BaseModel):
    """Response body for GET /identities/{owner}/composite."""

    owner: str
    exists: bool
    composite: int


class DetailResponse(BaseModel):
    """Response body representing a detail record."""

    address: str
    identity: str
    dimension: str
    metrics: dict[str, int] = Field(default_factory=dict)
    last_updated: str
    version: int


class HealthResponse(BaseModel):
    """Response body for GET /health."""

    status: str = "ok"
    service: str = "sovereign-identity"
    version: str = "0.1.0"
    identity_count: int = 0
    detail_count: int = 0


class ErrorResponse(BaseModel):
    """Standard error response body."""

    error: str
    detail: str = ""
    code: Optional[str] = None


__all__ = [
    "CompositeResponse",
    "CreateIdentityRequest",
    "CreatedResponse",
    "DetailResponse",
    "ErrorResponse",
    "HealthResponse",
    "IdentityResponse",
    "ScoresResponse",
    "SetAuthorityRequest",
    "TierResponse",
    "UpdateDetailsRequest",
    "UpdateScoreRequest",
]
