"""Great-circle distance and tiered cost pricing.

Both functions mirror the backend so a preview shown before submission
matches the value the server derives afterwards. The arithmetic is kept in
the same order as the server's (degrees times pi over 180, then
``atan2``) so results agree bit for bit.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from pyshiptrack._constants import (
    BASE_FEE,
    BEYOND_RATE,
    EARTH_RADIUS_KM,
    FIRST_TIER_KM,
    FIRST_TIER_RATE,
    SECOND_TIER_KM,
    SECOND_TIER_RATE,
    WEIGHT_STEP_KG,
    WEIGHT_STEP_SURCHARGE,
    WEIGHT_THRESHOLD_KG,
)
from pyshiptrack._normalize import safe_finite, safe_positive
from pyshiptrack.models.geo import Coordinate


def _rad(degrees: float) -> float:
    return degrees * math.pi / 180


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (``Math.round``)."""
    return math.floor(value + 0.5)


def distance_km(a: Coordinate, b: Coordinate) -> float:
    """Haversine distance between *a* and *b* in kilometres (R = 6371 km)."""
    d_lat = _rad(b.lat - a.lat)
    d_lng = _rad(b.lng - a.lng)
    h = math.sin(d_lat / 2) ** 2 + math.cos(_rad(a.lat)) * math.cos(_rad(b.lat)) * math.sin(d_lng / 2) ** 2
    # Rounding can push h a hair above 1 for antipodal points.
    h = min(h, 1.0)
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def round_distance(value: Any) -> float | None:
    """Round a distance to two decimals, halves up, as the preview shows it."""
    parsed = safe_finite(value)
    if parsed is None:
        return None
    return float(Decimal(parsed).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def distance_cost(distance: float) -> float:
    """Piecewise-linear distance component of the price."""
    if distance <= FIRST_TIER_KM:
        return distance * FIRST_TIER_RATE
    first_tier = FIRST_TIER_KM * FIRST_TIER_RATE
    if distance <= SECOND_TIER_KM:
        return first_tier + (distance - FIRST_TIER_KM) * SECOND_TIER_RATE
    second_tier = (SECOND_TIER_KM - FIRST_TIER_KM) * SECOND_TIER_RATE
    return first_tier + second_tier + (distance - SECOND_TIER_KM) * BEYOND_RATE


def weight_surcharge(weight: float) -> float:
    """Prorated surcharge for weight above the free threshold."""
    if weight <= WEIGHT_THRESHOLD_KG:
        return 0.0
    return (weight - WEIGHT_THRESHOLD_KG) / WEIGHT_STEP_KG * WEIGHT_STEP_SURCHARGE


def estimate_cost(distance: Any, weight: Any) -> int | None:
    """Total shipment cost in whole currency units.

    Returns ``None`` when either input is missing, non-numeric,
    non-finite or not strictly positive. Never raises for bad input.

    >>> estimate_cost(10, 20)
    700
    >>> estimate_cost(60, 30)
    2620
    """
    d = safe_positive(distance)
    w = safe_positive(weight)
    if d is None or w is None:
        return None
    return round_half_up(BASE_FEE + distance_cost(d) + weight_surcharge(w))
