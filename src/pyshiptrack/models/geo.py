"""Geographic value models."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from pydantic import AliasChoices, Field, ValidationError

from pyshiptrack._normalize import safe_finite
from pyshiptrack.models._base import ShipTrackBaseModel


class Coordinate(ShipTrackBaseModel):
    """A WGS84 point.

    ``lat`` must lie in ``[-90, 90]`` and ``lng`` in ``[-180, 180]``;
    non-finite values are rejected.
    """

    lat: float = Field(ge=-90.0, le=90.0, allow_inf_nan=False, validation_alias=AliasChoices("lat", "latitude"))
    lng: float = Field(
        ge=-180.0,
        le=180.0,
        allow_inf_nan=False,
        validation_alias=AliasChoices("lng", "lon", "longitude"),
    )

    @classmethod
    def parse(cls, lat: Any, lng: Any) -> Coordinate | None:
        """Build a coordinate from loose input (numbers or form strings).

        Returns ``None`` instead of raising when either value is missing,
        non-numeric, non-finite or out of range.
        """
        lat_f = safe_finite(lat)
        lng_f = safe_finite(lng)
        if lat_f is None or lng_f is None:
            return None
        try:
            return cls(lat=lat_f, lng=lng_f)
        except ValidationError:
            return None

    def as_tuple(self) -> tuple[float, float]:
        return (self.lat, self.lng)


class NamedPoint(Coordinate):
    """A coordinate with a human-readable address (pickup or delivery point)."""

    address: str = Field(default="", validation_alias=AliasChoices("address", "name"))


class ViewportBounds(ShipTrackBaseModel):
    """Axis-aligned lat/lng box containing every point the map must show."""

    min: Coordinate
    max: Coordinate

    @classmethod
    def from_points(cls, points: Iterable[Coordinate]) -> ViewportBounds | None:
        """Smallest bounds containing *points*, or ``None`` when empty."""
        lats: list[float] = []
        lngs: list[float] = []
        for point in points:
            lats.append(point.lat)
            lngs.append(point.lng)
        if not lats:
            return None
        return cls(
            min=Coordinate(lat=min(lats), lng=min(lngs)),
            max=Coordinate(lat=max(lats), lng=max(lngs)),
        )

    @property
    def center(self) -> Coordinate:
        return Coordinate(lat=(self.min.lat + self.max.lat) / 2, lng=(self.min.lng + self.max.lng) / 2)

    def contains(self, point: Coordinate) -> bool:
        return self.min.lat <= point.lat <= self.max.lat and self.min.lng <= point.lng <= self.max.lng
