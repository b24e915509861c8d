from __future__ import annotations

from conftest import make_snapshot

from pyshiptrack.display import status_style
from pyshiptrack.models.geo import Coordinate
from pyshiptrack.models.tracking import ShipmentStatus
from pyshiptrack.route_view import LineKind, MarkerKind, RouteViewState, build_route_view


def test_viewport_covers_endpoints() -> None:
    snap = make_snapshot(
        origin={"lat": -1.0, "lng": 36.0},
        destination={"lat": -1.5, "lng": 36.9},
        route=[],
    )
    view = build_route_view(snap)
    assert view.bounds is not None
    assert view.bounds.min == Coordinate(lat=-1.5, lng=36.0)
    assert view.bounds.max == Coordinate(lat=-1.0, lng=36.9)


def test_viewport_includes_route_and_live_location() -> None:
    snap = make_snapshot(
        origin={"lat": -1.0, "lng": 36.0},
        destination={"lat": -1.5, "lng": 36.9},
        route=[{"lat": -2.0, "lng": 36.5}],
        current_location={"lat": -1.2, "lng": 37.1},
    )
    bounds = build_route_view(snap).bounds
    assert bounds is not None
    assert bounds.min == Coordinate(lat=-2.0, lng=36.0)
    assert bounds.max == Coordinate(lat=-1.0, lng=37.1)


def test_missing_destination_is_insufficient_data() -> None:
    snap = make_snapshot(destination=None)
    view = build_route_view(snap)
    assert view.state is RouteViewState.INSUFFICIENT_DATA
    assert not view.is_renderable
    assert view.markers == ()
    assert view.lines == ()
    assert view.bounds is None


def test_non_finite_origin_is_insufficient_data() -> None:
    view = build_route_view(make_snapshot(origin={"lat": "NaN", "lng": 36.0}))
    assert view.state is RouteViewState.INSUFFICIENT_DATA


def test_no_snapshot() -> None:
    view = build_route_view(None)
    assert view.state is RouteViewState.INSUFFICIENT_DATA
    assert view.status is ShipmentStatus.UNKNOWN


def test_full_view() -> None:
    view = build_route_view(make_snapshot())
    assert view.is_renderable
    assert view.badge == "Live Tracking"

    origin = view.marker(MarkerKind.ORIGIN)
    destination = view.marker(MarkerKind.DESTINATION)
    live = view.marker(MarkerKind.LIVE)
    assert origin is not None and origin.label == "PICKUP"
    assert origin.address == "Tom Mboya Street, CBD, Nairobi"
    assert destination is not None and destination.label == "DELIVERY"
    assert live is not None
    assert live.label == "DRIVER - LAST PING"
    assert live.position == Coordinate(lat=-1.2890, lng=36.8195)
    assert live.speed == 30

    reference = view.line(LineKind.REFERENCE)
    path = view.line(LineKind.PATH)
    assert reference is not None and reference.dashed
    assert len(reference.points) == 2
    assert path is not None and len(path.points) == 2


def test_path_needs_two_samples() -> None:
    view = build_route_view(make_snapshot(route=[{"lat": -1.28, "lng": 36.82}]))
    assert view.line(LineKind.PATH) is None
    assert view.line(LineKind.REFERENCE) is not None
    assert view.marker(MarkerKind.LIVE) is not None


def test_no_live_marker_without_position() -> None:
    view = build_route_view(make_snapshot(route=[]))
    assert view.is_renderable
    assert view.marker(MarkerKind.LIVE) is None
    assert view.position is None


def test_live_marker_from_current_location() -> None:
    view = build_route_view(make_snapshot(current_location={"lat": -1.29, "lng": 36.82}))
    live = view.marker(MarkerKind.LIVE)
    assert live is not None
    assert live.label == "DRIVER - LIVE"


def test_path_keeps_supplied_order() -> None:
    route = [{"lat": -1.3, "lng": 36.3}, {"lat": -1.1, "lng": 36.1}, {"lat": -1.2, "lng": 36.2}]
    path = build_route_view(make_snapshot(route=route)).line(LineKind.PATH)
    assert path is not None
    assert [p.lat for p in path.points] == [-1.3, -1.1, -1.2]


def test_unknown_status_gets_pending_style() -> None:
    view = build_route_view(make_snapshot(status="on_hold"))
    assert view.status is ShipmentStatus.UNKNOWN
    assert view.style == status_style("pending")
    assert view.badge == "Unknown"
