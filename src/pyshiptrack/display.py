"""Presentation helpers shared by the route view and the timeline.

The status table is fixed; unknown statuses fall back to the ``pending``
style rather than being rejected.
"""

from __future__ import annotations

import dataclasses
import math
from datetime import UTC, datetime
from typing import Any

from pyshiptrack._constants import DEFAULT_FRESH_THRESHOLD
from pyshiptrack.geomath import round_half_up
from pyshiptrack.models.tracking import ShipmentRecord, ShipmentStatus, TrackingSnapshot

EMPTY_VALUE = "-"


@dataclasses.dataclass(frozen=True)
class StatusStyle:
    """Colour theme and progress for one shipment status.

    Class names are Tailwind utility classes; ``bar_color`` is a hex colour
    for surfaces that cannot use classes.
    """

    label: str
    dot: str
    text: str
    background: str
    bar_color: str
    progress: int
    pulse: bool = False


_STATUS_STYLES: dict[ShipmentStatus, StatusStyle] = {
    ShipmentStatus.PENDING: StatusStyle(
        label="Pending",
        dot="bg-amber-400",
        text="text-amber-600",
        background="bg-amber-50",
        bar_color="#f59e0b",
        progress=10,
    ),
    ShipmentStatus.ASSIGNED: StatusStyle(
        label="Assigned",
        dot="bg-blue-500",
        text="text-blue-600",
        background="bg-blue-50",
        bar_color="#3b82f6",
        progress=35,
    ),
    ShipmentStatus.IN_TRANSIT: StatusStyle(
        label="In Transit",
        dot="bg-indigo-500",
        text="text-indigo-600",
        background="bg-indigo-50",
        bar_color="#6366f1",
        progress=70,
        pulse=True,
    ),
    ShipmentStatus.DELIVERED: StatusStyle(
        label="Delivered",
        dot="bg-emerald-500",
        text="text-emerald-600",
        background="bg-emerald-50",
        bar_color="#10b981",
        progress=100,
    ),
    ShipmentStatus.CANCELLED: StatusStyle(
        label="Cancelled",
        dot="bg-red-400",
        text="text-red-600",
        background="bg-red-50",
        bar_color="#ef4444",
        progress=0,
    ),
}


def status_style(status: Any) -> StatusStyle:
    """Style for *status*; anything unmapped gets the pending style."""
    return _STATUS_STYLES.get(ShipmentStatus.parse(status), _STATUS_STYLES[ShipmentStatus.PENDING])


def badge_label(status: Any) -> str:
    """Text of the status badge on the map overlay."""
    parsed = ShipmentStatus.parse(status)
    if parsed is ShipmentStatus.IN_TRANSIT:
        return "Live Tracking"
    return parsed.value.replace("_", " ").title()


def format_time_ago(timestamp: datetime | None, now: datetime | None = None) -> str | None:
    """Relative age such as ``"Just now"``, ``"12m ago"`` or ``"2h 5m ago"``."""
    if timestamp is None:
        return None
    current = now or datetime.now(UTC)
    minutes = math.floor((current - timestamp).total_seconds() / 60)
    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return f"{minutes}m ago"
    return f"{minutes // 60}h {minutes % 60}m ago"


def staleness_label(seconds: int, fresh_threshold: int = DEFAULT_FRESH_THRESHOLD) -> str:
    """Refresh indicator text: ``"Updated"`` while fresh, else ``"Ns ago"``."""
    if seconds < fresh_threshold:
        return "Updated"
    return f"{seconds}s ago"


def short_address(address: str | None) -> str:
    # "Tom Mboya Street, CBD, Nairobi" -> "Tom Mboya Street"
    if not address:
        return EMPTY_VALUE
    return address.split(",")[0].strip()


def format_speed(speed_kmh: float | None) -> str | None:
    if not speed_kmh:
        return None
    return f"{round_half_up(speed_kmh)} km/h"


def format_distance(distance_km: float | None) -> str | None:
    if not distance_km:
        return None
    return f"{distance_km} km"


def format_cost(amount: int | float | None, currency: str = "KSH") -> str:
    if amount is None:
        return EMPTY_VALUE
    return f"{currency} {amount:,}"


def format_eta(shipment: TrackingSnapshot | ShipmentRecord, now: datetime | None = None) -> str:
    """Remaining delivery time such as ``"5 hours"`` or ``"2 days"``.

    The estimate counts ``estimated_delivery_time_hours`` from
    ``created_at`` and never goes below zero. Without an estimate or a
    creation time the result is ``"Calculating..."``.
    """
    if shipment.status is ShipmentStatus.DELIVERED:
        return "Delivered"
    if not shipment.estimated_delivery_time_hours or shipment.created_at is None:
        return "Calculating..."
    current = now or datetime.now(UTC)
    elapsed = (current - shipment.created_at).total_seconds() / 3600
    remaining = max(0.0, shipment.estimated_delivery_time_hours - elapsed)
    if remaining < 1:
        return "Less than 1 hour"
    if remaining < 24:
        return f"{round_half_up(remaining)} hours"
    days = round_half_up(remaining / 24)
    return f"{days} {'day' if days == 1 else 'days'}"
