from __future__ import annotations

from datetime import timedelta

from conftest import dt, make_snapshot

from pyshiptrack.models.geo import Coordinate
from pyshiptrack.reconcile import PositionSource, last_speed, resolve_position


def test_live_location_wins() -> None:
    snap = make_snapshot(current_location={"lat": -1.29, "lng": 36.82, "speed": 15, "timestamp": "2026-01-01T10:05:00Z"})
    resolved = resolve_position(snap)
    assert resolved is not None
    assert resolved.source is PositionSource.LIVE
    assert resolved.position == Coordinate(lat=-1.29, lng=36.82)
    assert resolved.speed == 15


def test_last_route_sample_in_supplied_order() -> None:
    # p3 carries the oldest timestamp but is last in supplied order.
    snap = make_snapshot(
        route=[
            {"lat": -1.1, "lng": 36.1, "timestamp": "2026-01-01T10:00:00Z"},
            {"lat": -1.2, "lng": 36.2, "timestamp": "2026-01-01T10:01:00Z"},
            {"lat": -1.3, "lng": 36.3, "timestamp": "2026-01-01T09:00:00Z"},
        ]
    )
    resolved = resolve_position(snap)
    assert resolved is not None
    assert resolved.source is PositionSource.ROUTE
    assert resolved.position == Coordinate(lat=-1.3, lng=36.3)


def test_unavailable_without_samples() -> None:
    assert resolve_position(make_snapshot(route=[])) is None
    assert resolve_position(None) is None


def test_origin_at_zero_zero_is_not_used_as_default() -> None:
    snap = make_snapshot(route=[], origin={"lat": 0, "lng": 0})
    assert resolve_position(snap) is None


def test_age_seconds() -> None:
    snap = make_snapshot(current_location={"lat": 0, "lng": 0, "timestamp": "2026-01-01T10:00:00Z"})
    resolved = resolve_position(snap)
    assert resolved is not None
    assert resolved.age_seconds(dt(0) + timedelta(seconds=90)) == 90
    assert resolve_position(make_snapshot()).age_seconds(dt(5)) is not None  # type: ignore[union-attr]


def test_last_speed_falls_back_to_route() -> None:
    assert last_speed(make_snapshot()) == 30
    assert last_speed(make_snapshot(current_location={"lat": 0, "lng": 0})) == 30
    assert last_speed(make_snapshot(current_location={"lat": 0, "lng": 0, "speed": 55})) == 55
    assert last_speed(make_snapshot(route=[])) is None
    assert last_speed(None) is None
