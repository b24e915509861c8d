"""Per-view owner of the tracked snapshot.

A :class:`TrackingView` holds exactly one :class:`TrackingSnapshot` at a
time and replaces it wholesale on every successful refresh. Fetch failures
go to the error channel and leave the previous snapshot on screen.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable, Collection
from typing import Any, Protocol

from pyshiptrack.config import TrackingConfig
from pyshiptrack.display import staleness_label
from pyshiptrack.models.tracking import ShipmentStatus, TrackingSnapshot
from pyshiptrack.reconcile import ResolvedPosition, resolve_position
from pyshiptrack.rendering import RenderingSurface
from pyshiptrack.route_view import RouteView, build_route_view
from pyshiptrack.scheduler import RefreshScheduler, SleepFunc
from pyshiptrack.timeline import TimelineStep, derive_timeline

_logger = logging.getLogger(__name__)

#: Statuses for which a view with derived auto-refresh keeps polling.
LIVE_STATUSES: frozenset[ShipmentStatus] = frozenset({ShipmentStatus.IN_TRANSIT})
#: The customer tracking page also polls while a driver is assigned.
CUSTOMER_STATUSES: frozenset[ShipmentStatus] = frozenset({ShipmentStatus.ASSIGNED, ShipmentStatus.IN_TRANSIT})


class SnapshotFetcher(Protocol):
    async def fetch(self, shipment_id: str) -> TrackingSnapshot:
        ...


class TrackingView:
    """Tracks one shipment: fetches, schedules refreshes and renders.

    Usage::

        async with TrackingClient(config) as client:
            async with TrackingView(client, "42", config=config) as view:
                ...  # view.route_view, view.timeline, view.staleness_label

    Parameters
    ----------
    fetcher : SnapshotFetcher
        Source of snapshots, usually a :class:`~pyshiptrack.client.TrackingClient`.
    shipment_id : str
        The shipment to track.
    config : TrackingConfig, optional
        Intervals, staleness threshold and ordering mode.
    auto_refresh : bool or None
        ``True``/``False`` fixes periodic refresh on or off. ``None``
        derives it from the status of each new snapshot (see
        *active_statuses*).
    surface : RenderingSurface, optional
        Receives every derived :class:`RouteView`; cleared on unmount.
    on_snapshot, on_error, on_tick
        Listeners for new snapshots, fetch failures and staleness ticks.
    """

    def __init__(
        self,
        fetcher: SnapshotFetcher,
        shipment_id: str,
        *,
        config: TrackingConfig | None = None,
        auto_refresh: bool | None = None,
        active_statuses: Collection[ShipmentStatus] = LIVE_STATUSES,
        surface: RenderingSurface | None = None,
        on_snapshot: Callable[[TrackingSnapshot], None] | None = None,
        on_error: Callable[[Exception], None] | None = None,
        on_tick: Callable[[int], None] | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        self._fetcher = fetcher
        self._shipment_id = str(shipment_id)
        self._config = config or TrackingConfig()
        self._auto_refresh = auto_refresh
        self._active_statuses = frozenset(active_statuses)
        self._surface = surface
        self._on_snapshot = on_snapshot
        self._on_error = on_error
        self._on_tick = on_tick

        self._snapshot: TrackingSnapshot | None = None
        self._route_view: RouteView = build_route_view(None)
        self._last_error: Exception | None = None
        self._issued_seq = 0
        self._applied_seq = 0

        self._scheduler = RefreshScheduler.from_config(
            self._fetch_and_apply,
            self._config,
            auto_refresh=bool(auto_refresh),
            on_tick=self._handle_tick,
            on_error=self._handle_error,
            clock=clock,
            sleep=sleep,
        )

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> TrackingView:
        self.mount()
        await self.refresh()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()

    def mount(self) -> None:
        self._scheduler.mount()

    def unmount(self) -> None:
        """Cancel all timers and in-flight refreshes and clear the surface."""
        if not self._scheduler.mounted:
            return
        self._scheduler.unmount()
        if self._surface is not None:
            self._surface.clear()

    async def aclose(self) -> None:
        mounted = self._scheduler.mounted
        await self._scheduler.aclose()
        if mounted and self._surface is not None:
            self._surface.clear()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def shipment_id(self) -> str:
        return self._shipment_id

    @property
    def scheduler(self) -> RefreshScheduler:
        return self._scheduler

    @property
    def snapshot(self) -> TrackingSnapshot | None:
        return self._snapshot

    @property
    def last_error(self) -> Exception | None:
        """The most recent fetch failure, cleared by the next success."""
        return self._last_error

    @property
    def route_view(self) -> RouteView:
        return self._route_view

    @property
    def position(self) -> ResolvedPosition | None:
        return resolve_position(self._snapshot)

    @property
    def timeline(self) -> tuple[TimelineStep, ...]:
        return derive_timeline(self._snapshot)

    @property
    def staleness_seconds(self) -> int:
        return self._scheduler.seconds_since_refresh

    @property
    def staleness_label(self) -> str:
        return staleness_label(self.staleness_seconds, self._config.fresh_threshold)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def refresh(self) -> None:
        """Manual refresh. Failures go to the error channel, not the caller."""
        await self._scheduler.refresh_now()

    def set_auto_refresh(self, enabled: bool | None) -> None:
        """Fix periodic refresh on or off, or ``None`` to follow the status."""
        self._auto_refresh = enabled
        if enabled is None:
            self._sync_auto_refresh()
        else:
            self._scheduler.set_auto_refresh(enabled)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _fetch_and_apply(self) -> None:
        self._issued_seq += 1
        seq = self._issued_seq
        snapshot = await self._fetcher.fetch(self._shipment_id)
        self._apply(snapshot, seq)

    def _apply(self, snapshot: TrackingSnapshot, seq: int) -> None:
        if self._config.strict_ordering and seq < self._applied_seq:
            _logger.debug(
                "Discarding out-of-order snapshot for %s (seq %d < %d)",
                self._shipment_id,
                seq,
                self._applied_seq,
            )
            return
        self._applied_seq = max(self._applied_seq, seq)
        self._snapshot = snapshot
        self._last_error = None
        self._route_view = build_route_view(snapshot)
        self._sync_auto_refresh()

        if self._surface is not None:
            try:
                self._surface.render(self._route_view)
            except Exception:
                _logger.debug("Rendering surface failed", exc_info=True)
        if self._on_snapshot is not None:
            try:
                self._on_snapshot(snapshot)
            except Exception:
                _logger.debug("Snapshot listener failed", exc_info=True)

    def _sync_auto_refresh(self) -> None:
        if self._auto_refresh is not None or self._snapshot is None:
            return
        self._scheduler.set_auto_refresh(self._snapshot.status in self._active_statuses)

    def _handle_error(self, exc: Exception) -> None:
        self._last_error = exc
        _logger.debug("Refresh of %s failed: %s", self._shipment_id, exc)
        if self._on_error is not None:
            self._on_error(exc)

    def _handle_tick(self, seconds: int) -> None:
        if self._on_tick is not None:
            self._on_tick(seconds)
