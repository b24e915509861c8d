"""Derive renderable route geometry from a tracking snapshot.

The output is technology-neutral: markers, polylines and a viewport that
any :class:`~pyshiptrack.rendering.RenderingSurface` can draw.
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict

from pyshiptrack.display import StatusStyle, badge_label, status_style
from pyshiptrack.models.geo import Coordinate, ViewportBounds
from pyshiptrack.models.tracking import ShipmentStatus, TrackingSnapshot
from pyshiptrack.reconcile import PositionSource, ResolvedPosition, resolve_position

ORIGIN_COLOR = "#10b981"
DESTINATION_COLOR = "#ef4444"
LIVE_COLOR = "#6366f1"
REFERENCE_LINE_COLOR = "#94a3b8"
PATH_LINE_COLOR = "#3b82f6"


class RouteViewState(StrEnum):
    READY = "ready"
    INSUFFICIENT_DATA = "insufficient_data"


class MarkerKind(StrEnum):
    ORIGIN = "origin"
    DESTINATION = "destination"
    LIVE = "live"


class LineKind(StrEnum):
    REFERENCE = "reference"
    PATH = "path"


class Marker(BaseModel):
    """A point marker plus the popup content shown for it."""

    model_config = ConfigDict(frozen=True)

    kind: MarkerKind
    position: Coordinate
    label: str
    color: str
    address: str | None = None
    speed: float | None = None
    timestamp: datetime | None = None


class Polyline(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: LineKind
    points: tuple[Coordinate, ...]
    color: str
    weight: int
    opacity: float
    dashed: bool = False


class RouteView(BaseModel):
    """Everything a surface needs to draw one shipment.

    ``state`` is ``INSUFFICIENT_DATA`` when the origin or destination is
    missing or invalid; markers, lines and bounds are then empty so that
    nothing degenerate is drawn.
    """

    model_config = ConfigDict(frozen=True)

    state: RouteViewState
    status: ShipmentStatus = ShipmentStatus.UNKNOWN
    style: StatusStyle
    badge: str
    markers: tuple[Marker, ...] = ()
    lines: tuple[Polyline, ...] = ()
    bounds: ViewportBounds | None = None
    position: ResolvedPosition | None = None

    @property
    def is_renderable(self) -> bool:
        return self.state is RouteViewState.READY

    def marker(self, kind: MarkerKind) -> Marker | None:
        return next((m for m in self.markers if m.kind is kind), None)

    def line(self, kind: LineKind) -> Polyline | None:
        return next((line for line in self.lines if line.kind is kind), None)


def compute_bounds(snapshot: TrackingSnapshot) -> ViewportBounds | None:
    """Bounds over the endpoints, every route sample and the live location."""
    if snapshot.origin is None or snapshot.destination is None:
        return None
    points: list[Coordinate] = [snapshot.origin, snapshot.destination]
    points.extend(sample.position for sample in snapshot.route)
    if snapshot.current_location is not None:
        points.append(snapshot.current_location.position)
    return ViewportBounds.from_points(points)


def _live_marker(position: ResolvedPosition) -> Marker:
    return Marker(
        kind=MarkerKind.LIVE,
        position=position.position,
        label="DRIVER - LIVE" if position.source is PositionSource.LIVE else "DRIVER - LAST PING",
        color=LIVE_COLOR,
        speed=position.speed,
        timestamp=position.timestamp,
    )


def build_route_view(snapshot: TrackingSnapshot | None) -> RouteView:
    """Turn *snapshot* into markers, lines and a viewport."""
    status = snapshot.status if snapshot is not None else ShipmentStatus.UNKNOWN
    style = status_style(status)
    badge = badge_label(status)

    if snapshot is None or snapshot.origin is None or snapshot.destination is None:
        return RouteView(state=RouteViewState.INSUFFICIENT_DATA, status=status, style=style, badge=badge)

    origin = snapshot.origin
    destination = snapshot.destination
    markers: list[Marker] = [
        Marker(
            kind=MarkerKind.ORIGIN,
            position=Coordinate(lat=origin.lat, lng=origin.lng),
            label="PICKUP",
            color=ORIGIN_COLOR,
            address=origin.address,
        ),
        Marker(
            kind=MarkerKind.DESTINATION,
            position=Coordinate(lat=destination.lat, lng=destination.lng),
            label="DELIVERY",
            color=DESTINATION_COLOR,
            address=destination.address,
        ),
    ]
    lines: list[Polyline] = [
        Polyline(
            kind=LineKind.REFERENCE,
            points=(Coordinate(lat=origin.lat, lng=origin.lng), Coordinate(lat=destination.lat, lng=destination.lng)),
            color=REFERENCE_LINE_COLOR,
            weight=2,
            opacity=0.5,
            dashed=True,
        )
    ]
    if len(snapshot.route) >= 2:
        lines.append(
            Polyline(
                kind=LineKind.PATH,
                points=tuple(sample.position for sample in snapshot.route),
                color=PATH_LINE_COLOR,
                weight=4,
                opacity=0.9,
            )
        )

    position = resolve_position(snapshot)
    if position is not None:
        markers.append(_live_marker(position))

    return RouteView(
        state=RouteViewState.READY,
        status=status,
        style=style,
        badge=badge,
        markers=tuple(markers),
        lines=tuple(lines),
        bounds=compute_bounds(snapshot),
        position=position,
    )
