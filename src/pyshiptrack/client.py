"""High-level async client for the tracking endpoints."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from pyshiptrack._api import tracking as _tracking_api
from pyshiptrack._transport import JsonTransport
from pyshiptrack.config import TrackingConfig
from pyshiptrack.exceptions import ShipTrackError
from pyshiptrack.models.tracking import ShipmentRecord, TrackingSnapshot

_logger = logging.getLogger(__name__)


class TrackingClient:
    """Async client for the logistics tracking API.

    Satisfies :class:`~pyshiptrack.view.SnapshotFetcher`.

    Usage::

        async with TrackingClient(TrackingConfig.from_env()) as client:
            snapshot = await client.fetch("42")

    Parameters
    ----------
    config : TrackingConfig
        Base URL, token and request timeout.
    session : aiohttp.ClientSession, optional
        Shared session to borrow. When omitted the client creates one on
        enter and closes it on exit.
    include_milestones : bool
        Also fetch the shipment record so the timeline has its milestone
        timestamps.
    """

    def __init__(
        self,
        config: TrackingConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        include_milestones: bool = True,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._include_milestones = include_milestones
        self._transport: JsonTransport | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> TrackingClient:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = JsonTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None

    @property
    def config(self) -> TrackingConfig:
        return self._config

    def _require_transport(self) -> JsonTransport:
        if self._transport is None:
            raise ShipTrackError("Client not initialized. Use 'async with TrackingClient(...) as client:'")
        return self._transport

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------

    async def fetch(self, shipment_id: str) -> TrackingSnapshot:
        """Fetch a complete tracking snapshot for *shipment_id*."""
        return await _tracking_api.fetch_tracking_snapshot(
            self._require_transport(),
            shipment_id,
            include_milestones=self._include_milestones,
        )

    async def get_route(self, shipment_id: str) -> TrackingSnapshot:
        """Fetch only the route payload, without milestone timestamps."""
        return await _tracking_api.fetch_route(self._require_transport(), shipment_id)

    async def get_shipment(self, shipment_id: str) -> ShipmentRecord:
        return await _tracking_api.fetch_shipment(self._require_transport(), shipment_id)

    async def track(self, tracking_number: str) -> TrackingSnapshot:
        """Public lookup: resolve *tracking_number*, then fetch its snapshot."""
        record = await _tracking_api.find_by_tracking_number(self._require_transport(), tracking_number)
        snapshot = await self.get_route(record.shipment_id)
        _logger.debug("Resolved tracking number %s to shipment %s", tracking_number, record.shipment_id)
        return snapshot.with_milestones(record)
