"""Map shipment status and milestone timestamps to a progress timeline."""

from __future__ import annotations

import dataclasses
from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict

from pyshiptrack.models.tracking import ShipmentStatus, TrackingSnapshot


class Milestone(StrEnum):
    CREATED = "created"
    ASSIGNED = "assigned"
    IN_TRANSIT = "in_transit"
    DELIVERED = "delivered"


@dataclasses.dataclass(frozen=True)
class _MilestoneRule:
    milestone: Milestone
    label: str
    timestamp_field: str
    active_status: ShipmentStatus | None


# Delivered is terminal and therefore never "active".
_RULES: tuple[_MilestoneRule, ...] = (
    _MilestoneRule(Milestone.CREATED, "Created", "created_at", ShipmentStatus.PENDING),
    _MilestoneRule(Milestone.ASSIGNED, "Assigned", "assigned_at", ShipmentStatus.ASSIGNED),
    _MilestoneRule(Milestone.IN_TRANSIT, "In Transit", "picked_up_at", ShipmentStatus.IN_TRANSIT),
    _MilestoneRule(Milestone.DELIVERED, "Delivered", "delivered_at", None),
)


class TimelineStep(BaseModel):
    model_config = ConfigDict(frozen=True)

    milestone: Milestone
    label: str
    timestamp: datetime | None = None
    completed: bool
    active: bool

    @property
    def pending(self) -> bool:
        return not self.completed and not self.active

    @property
    def indicator(self) -> str:
        if self.completed:
            return "✓"
        if self.active:
            return "→"
        return "·"


def derive_timeline(snapshot: TrackingSnapshot | None) -> tuple[TimelineStep, ...]:
    """Four steps: Created, Assigned, In Transit, Delivered.

    ``completed`` means the milestone timestamp is present; ``active``
    means the current status is the milestone's status. Cancelled
    shipments get no special treatment: the caller shows a separate
    cancelled indicator.
    """
    status = snapshot.status if snapshot is not None else ShipmentStatus.UNKNOWN
    steps: list[TimelineStep] = []
    for rule in _RULES:
        timestamp = getattr(snapshot, rule.timestamp_field) if snapshot is not None else None
        steps.append(
            TimelineStep(
                milestone=rule.milestone,
                label=rule.label,
                timestamp=timestamp,
                completed=timestamp is not None,
                active=rule.active_status is not None and status is rule.active_status,
            )
        )
    return tuple(steps)
