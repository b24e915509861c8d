from __future__ import annotations

import asyncio
import heapq
from datetime import UTC, datetime
from typing import Any

import pytest

from pyshiptrack.models.tracking import TrackingSnapshot


class VirtualTime:
    """Deterministic clock and sleep for scheduler tests.

    ``sleep`` parks the caller until :meth:`advance` moves ``now`` past its
    deadline; no real time passes.
    """

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start
        self._sleepers: list[tuple[float, int, asyncio.Future[None]]] = []
        self._seq = 0

    def clock(self) -> float:
        return self.now

    async def sleep(self, delay: float) -> None:
        future: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._seq += 1
        heapq.heappush(self._sleepers, (self.now + delay, self._seq, future))
        await future

    @property
    def pending(self) -> int:
        return sum(1 for _, _, future in self._sleepers if not future.done())

    async def settle(self, rounds: int = 10) -> None:
        for _ in range(rounds):
            await asyncio.sleep(0)

    async def advance(self, seconds: float) -> None:
        target = self.now + seconds
        await self.settle()
        while self._sleepers and self._sleepers[0][0] <= target:
            when, _, future = heapq.heappop(self._sleepers)
            if future.done():
                continue
            self.now = when
            future.set_result(None)
            await self.settle()
        self.now = target
        await self.settle()


@pytest.fixture
def vt() -> VirtualTime:
    return VirtualTime()


def make_snapshot(**overrides: Any) -> TrackingSnapshot:
    payload: dict[str, Any] = {
        "shipment_id": "42",
        "tracking_number": "TRK-42",
        "status": "in_transit",
        "origin": {"lat": -1.286389, "lng": 36.817223, "address": "Tom Mboya Street, CBD, Nairobi"},
        "destination": {"lat": -1.2921, "lng": 36.8219, "address": "Moi Avenue, Nairobi"},
        "route": [
            {"lat": -1.2870, "lng": 36.8180, "timestamp": "2026-01-01T10:00:00Z", "speed": 20},
            {"lat": -1.2890, "lng": 36.8195, "timestamp": "2026-01-01T10:01:00Z", "speed": 30},
        ],
        "created_at": "2026-01-01T09:00:00Z",
    }
    payload.update(overrides)
    return TrackingSnapshot.model_validate(payload)


@pytest.fixture
def snapshot() -> TrackingSnapshot:
    return make_snapshot()


def dt(minute: int = 0, hour: int = 10) -> datetime:
    return datetime(2026, 1, 1, hour, minute, tzinfo=UTC)
