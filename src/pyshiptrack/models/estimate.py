"""Cost preview model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class CostPreview(BaseModel):
    """Client-side estimate shown while a shipment is being created.

    Parameters
    ----------
    distance_km : float
        Great-circle distance, rounded to two decimals.
    weight_kg : float
        Declared package weight.
    total_cost : int
        Whole currency units; the backend recalculates on submit.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    distance_km: float
    weight_kg: float
    total_cost: int
