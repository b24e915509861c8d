"""Tracking snapshot models.

Field names follow the backend response of
``GET /tracking/shipment/{id}/route`` (snake_case), with the milestone
timestamps of ``GET /shipments/{id}`` passed through.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import StrEnum
from typing import Any, ClassVar

from pydantic import AliasChoices, Field, ValidationError, field_validator, model_validator

from pyshiptrack._normalize import safe_float, safe_str
from pyshiptrack.models._base import ShipTrackBaseModel, ShipTrackTimestamp, is_negative
from pyshiptrack.models.geo import Coordinate, NamedPoint

_logger = logging.getLogger(__name__)


class ShipmentStatus(StrEnum):
    """Shipment lifecycle status.

    Values the backend sends that have no mapped member resolve to
    ``UNKNOWN`` instead of raising ``ValueError``.
    """

    UNKNOWN = "unknown"
    PENDING = "pending"
    ASSIGNED = "assigned"
    IN_TRANSIT = "in_transit"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    @classmethod
    def _missing_(cls, value: object) -> ShipmentStatus:
        if isinstance(value, str):
            normalized = value.strip().lower().replace("-", "_").replace(" ", "_")
            for member in cls:
                if member.value == normalized:
                    return member
        return cls.UNKNOWN

    @classmethod
    def parse(cls, value: Any) -> ShipmentStatus:
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.UNKNOWN
        return cls(str(value))


class RouteSample(ShipTrackBaseModel):
    """One reported GPS ping.

    The backend sends samples flat (``{lat, lng, timestamp, speed}``);
    both the flat and the nested ``position`` form are accepted.
    """

    _SENTINEL_RULES: ClassVar[dict[str, Callable[..., bool]]] = {
        "speed": is_negative,
    }

    position: Coordinate
    timestamp: ShipTrackTimestamp = Field(
        default=None,
        validation_alias=AliasChoices("timestamp", "recorded_at", "time"),
    )
    speed: float | None = Field(default=None, validation_alias=AliasChoices("speed", "speed_kmh"))

    @model_validator(mode="before")
    @classmethod
    def _fold_flat_position(cls, values: Any) -> Any:
        if not isinstance(values, dict) or "position" in values:
            return values
        folded = dict(values)
        folded["position"] = {
            key: folded.pop(key) for key in ("lat", "latitude", "lng", "lon", "longitude") if key in folded
        }
        return folded

    @field_validator("speed", mode="before")
    @classmethod
    def _coerce_speed(cls, value: Any) -> float | None:
        return safe_float(value)

    @property
    def lat(self) -> float:
        return self.position.lat

    @property
    def lng(self) -> float:
        return self.position.lng


def _lenient_point(value: Any, model: type[ShipTrackBaseModel], field: str) -> Any:
    """Validate *value* as *model*, returning ``None`` when it is unusable."""
    if value is None or isinstance(value, model):
        return value
    try:
        return model.model_validate(value)
    except ValidationError:
        _logger.debug("Dropping invalid %s: %r", field, value)
        return None


def _fold_flat_endpoints(values: Any) -> Any:
    """Nest ``origin_latitude``-style keys into ``origin``/``destination`` dicts."""
    if not isinstance(values, dict):
        return values
    folded = dict(values)
    for prefix in ("origin", "destination"):
        if folded.get(prefix) is not None:
            continue
        point = {
            field: folded[f"{prefix}_{key}"]
            for key, field in (("latitude", "lat"), ("longitude", "lng"), ("address", "address"))
            if f"{prefix}_{key}" in folded
        }
        if point:
            folded[prefix] = point
    return folded


class ShipmentRecord(ShipTrackBaseModel):
    """Subset of ``GET /shipments/{id}`` consumed by the tracking view."""

    shipment_id: str = Field(default="", validation_alias=AliasChoices("id", "shipment_id"))
    tracking_number: str = ""
    status: ShipmentStatus = ShipmentStatus.UNKNOWN
    created_at: ShipTrackTimestamp = None
    assigned_at: ShipTrackTimestamp = None
    picked_up_at: ShipTrackTimestamp = None
    delivered_at: ShipTrackTimestamp = None
    estimated_distance_km: float | None = Field(
        default=None,
        validation_alias=AliasChoices("estimated_distance_km", "distance_km"),
    )
    estimated_delivery_time_hours: float | None = None
    origin: NamedPoint | None = None
    destination: NamedPoint | None = None
    raw: dict[str, Any] = Field(default_factory=dict)

    @field_validator("shipment_id", "tracking_number", mode="before")
    @classmethod
    def _coerce_ids(cls, value: Any) -> str:
        return safe_str(value) or ""

    @field_validator("status", mode="before")
    @classmethod
    def _coerce_status(cls, value: Any) -> ShipmentStatus:
        return ShipmentStatus.parse(value)

    @model_validator(mode="before")
    @classmethod
    def _fold_endpoints(cls, values: Any) -> Any:
        return _fold_flat_endpoints(values)

    @field_validator("origin", "destination", mode="before")
    @classmethod
    def _lenient_endpoint(cls, value: Any) -> Any:
        return _lenient_point(value, NamedPoint, "endpoint")

    @field_validator("estimated_distance_km", "estimated_delivery_time_hours", mode="before")
    @classmethod
    def _coerce_floats(cls, value: Any) -> float | None:
        return safe_float(value)


class TrackingSnapshot(ShipTrackBaseModel):
    """A complete, externally fetched view of a shipment's tracking state.

    Every refresh produces a new snapshot that replaces the previous one;
    snapshots are never merged. Invalid endpoints or samples do not fail
    parsing: endpoints become ``None`` (reported as insufficient data by
    the route view) and unusable route samples are dropped.
    """

    shipment_id: str = Field(default="", validation_alias=AliasChoices("shipment_id", "id"))
    tracking_number: str = ""
    status: ShipmentStatus = ShipmentStatus.UNKNOWN
    origin: NamedPoint | None = None
    destination: NamedPoint | None = None
    route: tuple[RouteSample, ...] = ()
    current_location: RouteSample | None = None
    created_at: ShipTrackTimestamp = None
    assigned_at: ShipTrackTimestamp = None
    picked_up_at: ShipTrackTimestamp = None
    delivered_at: ShipTrackTimestamp = None
    estimated_distance_km: float | None = None
    estimated_delivery_time_hours: float | None = None
    raw: dict[str, Any] = Field(default_factory=dict)

    @field_validator("shipment_id", "tracking_number", mode="before")
    @classmethod
    def _coerce_ids(cls, value: Any) -> str:
        return safe_str(value) or ""

    @field_validator("status", mode="before")
    @classmethod
    def _coerce_status(cls, value: Any) -> ShipmentStatus:
        return ShipmentStatus.parse(value)

    @model_validator(mode="before")
    @classmethod
    def _fold_endpoints(cls, values: Any) -> Any:
        return _fold_flat_endpoints(values)

    @field_validator("origin", "destination", mode="before")
    @classmethod
    def _lenient_endpoint(cls, value: Any) -> Any:
        return _lenient_point(value, NamedPoint, "endpoint")

    @field_validator("current_location", mode="before")
    @classmethod
    def _lenient_current_location(cls, value: Any) -> Any:
        return _lenient_point(value, RouteSample, "current_location")

    @field_validator("route", mode="before")
    @classmethod
    def _drop_invalid_samples(cls, value: Any) -> Any:
        if not isinstance(value, (list, tuple)):
            return value
        samples: list[Any] = []
        for item in value:
            sample = _lenient_point(item, RouteSample, "route sample")
            if sample is not None:
                samples.append(sample)
        return tuple(samples)

    @field_validator("estimated_distance_km", "estimated_delivery_time_hours", mode="before")
    @classmethod
    def _coerce_floats(cls, value: Any) -> float | None:
        return safe_float(value)

    @property
    def has_endpoints(self) -> bool:
        return self.origin is not None and self.destination is not None

    def with_milestones(self, record: ShipmentRecord) -> TrackingSnapshot:
        """Return a copy with missing milestone and endpoint fields filled from *record*.

        Values already present on the snapshot win; the route payload is
        the fresher of the two.
        """
        update: dict[str, Any] = {}
        for name in (
            "created_at",
            "assigned_at",
            "picked_up_at",
            "delivered_at",
            "estimated_distance_km",
            "estimated_delivery_time_hours",
            "origin",
            "destination",
        ):
            if getattr(self, name) is None and getattr(record, name) is not None:
                update[name] = getattr(record, name)
        if not self.tracking_number and record.tracking_number:
            update["tracking_number"] = record.tracking_number
        if self.status is ShipmentStatus.UNKNOWN and record.status is not ShipmentStatus.UNKNOWN:
            update["status"] = record.status
        if not update:
            return self
        return self.model_copy(update=update)
