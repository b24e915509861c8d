"""Data models for tracking payloads and derived values."""

from pyshiptrack.models._base import ShipTrackBaseModel, ShipTrackTimestamp, parse_timestamp
from pyshiptrack.models.estimate import CostPreview
from pyshiptrack.models.geo import Coordinate, NamedPoint, ViewportBounds
from pyshiptrack.models.tracking import RouteSample, ShipmentRecord, ShipmentStatus, TrackingSnapshot

__all__ = [
    "Coordinate",
    "CostPreview",
    "NamedPoint",
    "RouteSample",
    "ShipTrackBaseModel",
    "ShipTrackTimestamp",
    "ShipmentRecord",
    "ShipmentStatus",
    "TrackingSnapshot",
    "ViewportBounds",
    "parse_timestamp",
]
