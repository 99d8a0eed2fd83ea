"""Per-dimension detail metrics and the detail record.

A detail record carries richer metrics alongside a dimension's coarse score.
Each dimension has its own pydantic schema. Field declaration order is the
wire order, and ``wire_format`` gives the matching :mod:`struct` codes.

Metrics are informational only; they never feed the composite score.
"""
from __future__ import annotations

import datetime
from dataclasses import dataclass
from typing import ClassVar, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from sovereign_identity.addressing import Address, detail_address
from sovereign_identity.errors import InvalidMetrics
from sovereign_identity.scoring.dimensions import Dimension

SCHEMA_VERSION: int = 1

U16_MAX = 0xFFFF
U32_MAX = 0xFFFF_FFFF
U64_MAX = 0xFFFF_FFFF_FFFF_FFFF
BPS_MAX = 10000


class DimensionMetrics(BaseModel):
    """Base class for dimension metric schemas."""

    model_config = ConfigDict(extra="forbid", frozen=True, strict=True)

    dimension: ClassVar[Dimension]
    wire_format: ClassVar[str]

    def values(self) -> tuple[int, ...]:
        """Metric values in wire order."""
        return tuple(getattr(self, name) for name in type(self).model_fields)


class TradingMetrics(DimensionMetrics):
    """Trading breakdown.

    ``profit_factor_bps`` spans 0 – 65535 (0.0x – 6.5x); ``total_volume`` is
    denominated in USDC with 6 decimals.
    """

    dimension: ClassVar[Dimension] = Dimension.TRADING
    wire_format: ClassVar[str] = "HHQQH"

    win_rate_bps: int = Field(default=0, ge=0, le=BPS_MAX)
    profit_factor_bps: int = Field(default=0, ge=0, le=U16_MAX)
    total_trades: int = Field(default=0, ge=0, le=U64_MAX)
    total_volume: int = Field(default=0, ge=0, le=U64_MAX)
    max_drawdown_bps: int = Field(default=0, ge=0, le=BPS_MAX)


class CivicMetrics(DimensionMetrics):
    """Civic participation breakdown."""

    dimension: ClassVar[Dimension] = Dimension.CIVIC
    wire_format: ClassVar[str] = "QHQQHH"

    problems_solved: int = Field(default=0, ge=0, le=U64_MAX)
    prediction_accuracy_bps: int = Field(default=0, ge=0, le=BPS_MAX)
    directions_proposed: int = Field(default=0, ge=0, le=U64_MAX)
    directions_won: int = Field(default=0, ge=0, le=U64_MAX)
    current_streak: int = Field(default=0, ge=0, le=U16_MAX)
    community_trust: int = Field(default=0, ge=0, le=BPS_MAX)

    @model_validator(mode="after")
    def _won_within_proposed(self) -> "CivicMetrics":
        if self.directions_won > self.directions_proposed:
            raise ValueError(
                f"directions_won ({self.directions_won}) cannot exceed "
                f"directions_proposed ({self.directions_proposed})"
            )
        return self


class DeveloperMetrics(DimensionMetrics):
    """Software contribution breakdown."""

    dimension: ClassVar[Dimension] = Dimension.DEVELOPER
    wire_format: ClassVar[str] = "IQHI"

    repositories: int = Field(default=0, ge=0, le=U32_MAX)
    merged_contributions: int = Field(default=0, ge=0, le=U64_MAX)
    review_approval_bps: int = Field(default=0, ge=0, le=BPS_MAX)
    active_days: int = Field(default=0, ge=0, le=U32_MAX)


class InfraMetrics(DimensionMetrics):
    """Infrastructure operation breakdown."""

    dimension: ClassVar[Dimension] = Dimension.INFRA
    wire_format: ClassVar[str] = "HIQI"

    uptime_bps: int = Field(default=0, ge=0, le=BPS_MAX)
    nodes_operated: int = Field(default=0, ge=0, le=U32_MAX)
    bytes_served: int = Field(default=0, ge=0, le=U64_MAX)
    incidents: int = Field(default=0, ge=0, le=U32_MAX)


AnyMetrics = Union[TradingMetrics, CivicMetrics, DeveloperMetrics, InfraMetrics]

METRIC_SCHEMAS: dict[Dimension, type[DimensionMetrics]] = {
    Dimension.TRADING: TradingMetrics,
    Dimension.CIVIC: CivicMetrics,
    Dimension.DEVELOPER: DeveloperMetrics,
    Dimension.INFRA: InfraMetrics,
}


def parse_metrics(
    dimension: Dimension, metrics: DimensionMetrics | Mapping[str, object]
) -> DimensionMetrics:
    """Validate *metrics* against *dimension*'s schema.

    Accepts either a metrics model of the right type or a plain mapping.

    Raises
    ------
    InvalidMetrics
        On a schema mismatch, an unknown field, or an out-of-range value.
    """
    schema = METRIC_SCHEMAS[dimension]
    if isinstance(metrics, DimensionMetrics):
        if not isinstance(metrics, schema):
            raise InvalidMetrics(
                f"{type(metrics).__name__} cannot be recorded for the "
                f"{dimension.value} dimension; expected {schema.__name__}."
            )
        return metrics
    try:
        return schema.model_validate(dict(metrics))
    except ValidationError as exc:
        raise InvalidMetrics(
            f"Invalid {dimension.value} metrics: {exc.error_count()} error(s): "
            + "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'metrics'}: {err['msg']}"
                for err in exc.errors()
            )
        ) from exc
    except (TypeError, ValueError) as exc:
        raise InvalidMetrics(f"Invalid {dimension.value} metrics: {exc}") from exc


@dataclass(frozen=True)
class DetailRecord:
    """Detail metrics for one identity in one dimension.

    Parameters
    ----------
    identity:
        Address of the identity these metrics describe. A reference only;
        the ledger never copies identity state.
    dimension:
        Which dimension the metrics belong to.
    metrics:
        Validated metrics for that dimension.
    last_updated:
        UTC unix timestamp of the latest write.
    version:
        Schema tag of the record layout.
    """

    identity: Address
    dimension: Dimension
    metrics: DimensionMetrics
    last_updated: int
    version: int = SCHEMA_VERSION

    @property
    def address(self) -> Address:
        return detail_address(self.identity, self.dimension)

    def to_dict(self) -> dict[str, object]:
        return {
            "address": self.address.text,
            "identity": self.identity.text,
            "dimension": self.dimension.value,
            "metrics": self.metrics.model_dump(),
            "last_updated": datetime.datetime.fromtimestamp(
                self.last_updated, datetime.timezone.utc
            ).isoformat(),
            "version": self.version,
        }


__all__ = [
    "AnyMetrics",
    "CivicMetrics",
    "DetailRecord",
    "DeveloperMetrics",
    "DimensionMetrics",
    "InfraMetrics",
    "METRIC_SCHEMAS",
    "TradingMetrics",
    "parse_metrics",
]
