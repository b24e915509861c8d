"""Resolve the single best-known current position of a shipment."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict

from pyshiptrack.models.geo import Coordinate
from pyshiptrack.models.tracking import RouteSample, TrackingSnapshot


class PositionSource(StrEnum):
    LIVE = "live"
    ROUTE = "route"


class ResolvedPosition(BaseModel):
    """Where the shipment is believed to be, and how fresh that belief is."""

    model_config = ConfigDict(frozen=True)

    position: Coordinate
    timestamp: datetime | None = None
    speed: float | None = None
    source: PositionSource

    @classmethod
    def from_sample(cls, sample: RouteSample, source: PositionSource) -> ResolvedPosition:
        return cls(position=sample.position, timestamp=sample.timestamp, speed=sample.speed, source=source)

    def age_seconds(self, now: datetime | None = None) -> float | None:
        """Seconds since the sample was recorded, ``None`` without a timestamp."""
        if self.timestamp is None:
            return None
        current = now or datetime.now(UTC)
        return (current - self.timestamp).total_seconds()


def resolve_position(snapshot: TrackingSnapshot | None) -> ResolvedPosition | None:
    """Pick the current position.

    Preference order: the live ``current_location``, then the last route
    sample in supplied order. Returns ``None`` when neither exists; callers
    render a "not yet available" state rather than a default coordinate.
    """
    if snapshot is None:
        return None
    if snapshot.current_location is not None:
        return ResolvedPosition.from_sample(snapshot.current_location, PositionSource.LIVE)
    if snapshot.route:
        return ResolvedPosition.from_sample(snapshot.route[-1], PositionSource.ROUTE)
    return None


def last_speed(snapshot: TrackingSnapshot | None) -> float | None:
    """Most recent known speed in km/h.

    A live location without a speed falls back to the last route sample's
    speed.
    """
    if snapshot is None:
        return None
    if snapshot.current_location is not None and snapshot.current_location.speed is not None:
        return snapshot.current_location.speed
    if snapshot.route:
        return snapshot.route[-1].speed
    return None
