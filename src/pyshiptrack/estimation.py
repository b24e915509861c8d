"""Live distance and cost preview for the shipment creation form."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from pyshiptrack._constants import MAX_WEIGHT_KG
from pyshiptrack._normalize import safe_float, safe_positive
from pyshiptrack.geomath import distance_km, estimate_cost, round_distance
from pyshiptrack.models.estimate import CostPreview
from pyshiptrack.models.geo import Coordinate

_logger = logging.getLogger(__name__)


def validate_weight(value: Any) -> str | None:
    """Form validation message for a weight input, ``None`` when valid."""
    weight = safe_float(value)
    if weight is None:
        return "Weight is required"
    if weight <= 0:
        return "Weight must be greater than 0"
    if weight > MAX_WEIGHT_KG:
        return "Maximum weight is 10,000 kg"
    return None


def estimate_preview(origin: Coordinate | None, destination: Coordinate | None, weight: Any) -> CostPreview | None:
    """Distance and cost preview, or ``None`` while any input is unusable.

    The cost is computed on the distance as displayed (two decimals), so the
    preview is consistent with the number shown next to it.
    """
    if origin is None or destination is None:
        return None
    distance = round_distance(distance_km(origin, destination))
    weight_kg = safe_positive(weight)
    if distance is None or weight_kg is None:
        return None
    total = estimate_cost(distance, weight_kg)
    if total is None:
        return None
    return CostPreview(distance_km=distance, weight_kg=weight_kg, total_cost=total)


class EstimationEngine:
    """Holds the draft form inputs and recomputes the preview on every change.

    Coordinates arrive as loose form values (strings or numbers); invalid or
    empty values clear the dependent outputs immediately.

    Usage::

        engine = EstimationEngine(on_change=print)
        engine.set_origin("-1.286389", "36.817223")
        engine.set_destination(-1.2921, 36.8219)
        engine.set_weight("25")
        engine.preview  # CostPreview(...)
    """

    def __init__(self, *, on_change: Callable[[CostPreview | None], None] | None = None) -> None:
        self._on_change = on_change
        self._origin: Coordinate | None = None
        self._destination: Coordinate | None = None
        self._weight: Any = None
        self._distance: float | None = None
        self._preview: CostPreview | None = None

    @property
    def origin(self) -> Coordinate | None:
        return self._origin

    @property
    def destination(self) -> Coordinate | None:
        return self._destination

    @property
    def weight(self) -> float | None:
        return safe_positive(self._weight)

    @property
    def weight_error(self) -> str | None:
        return validate_weight(self._weight)

    @property
    def distance_km(self) -> float | None:
        return self._distance

    @property
    def preview(self) -> CostPreview | None:
        return self._preview

    @property
    def total_cost(self) -> int | None:
        return self._preview.total_cost if self._preview is not None else None

    def set_origin(self, lat: Any, lng: Any) -> None:
        self._origin = Coordinate.parse(lat, lng)
        self._recompute()

    def set_destination(self, lat: Any, lng: Any) -> None:
        self._destination = Coordinate.parse(lat, lng)
        self._recompute()

    def set_weight(self, weight: Any) -> None:
        self._weight = weight
        self._recompute()

    def reset(self) -> None:
        self._origin = None
        self._destination = None
        self._weight = None
        self._recompute()

    def _recompute(self) -> None:
        if self._origin is not None and self._destination is not None:
            self._distance = round_distance(distance_km(self._origin, self._destination))
        else:
            self._distance = None
        preview = estimate_preview(self._origin, self._destination, self._weight)
        if preview == self._preview:
            return
        self._preview = preview
        if self._on_change is None:
            return
        try:
            self._on_change(preview)
        except Exception:
            _logger.debug("Estimation listener failed", exc_info=True)
