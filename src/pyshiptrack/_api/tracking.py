"""Tracking endpoints.

Endpoints:
  - GET /tracking/shipment/{id}/route   (route, endpoints, live location)
  - GET /shipments/{id}                 (shipment record, milestone timestamps)
  - GET /shipments/public/track         (lookup by tracking number)
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any
from urllib.parse import quote

from pydantic import ValidationError

from pyshiptrack._constants import PUBLIC_TRACK_ENDPOINT, ROUTE_ENDPOINT, SHIPMENT_ENDPOINT
from pyshiptrack._transport import Transport
from pyshiptrack.exceptions import ShipTrackFetchError, ShipTrackNotFoundError
from pyshiptrack.models.tracking import ShipmentRecord, TrackingSnapshot

_logger = logging.getLogger(__name__)


def _require_object(payload: Any, endpoint: str) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise ShipTrackFetchError(
            f"Expected a JSON object from {endpoint}, got {type(payload).__name__}",
            endpoint=endpoint,
        )
    return payload


def _path_id(shipment_id: str | int) -> str:
    text = str(shipment_id).strip()
    if not text:
        raise ValueError("shipment_id must be non-empty")
    return quote(text, safe="")


async def fetch_route(transport: Transport, shipment_id: str | int) -> TrackingSnapshot:
    """Fetch and parse the tracking route payload of one shipment."""
    endpoint = ROUTE_ENDPOINT.format(shipment_id=_path_id(shipment_id))
    payload = dict(_require_object(await transport.get_json(endpoint), endpoint))
    payload.setdefault("shipment_id", str(shipment_id))
    try:
        snapshot = TrackingSnapshot.model_validate(payload)
    except ValidationError as exc:
        raise ShipTrackFetchError(f"Unparseable tracking payload from {endpoint}: {exc}", endpoint=endpoint) from exc
    _logger.debug(
        "Route for %s: status=%s samples=%d live=%s",
        snapshot.shipment_id,
        snapshot.status,
        len(snapshot.route),
        snapshot.current_location is not None,
    )
    return snapshot


async def fetch_shipment(transport: Transport, shipment_id: str | int) -> ShipmentRecord:
    endpoint = SHIPMENT_ENDPOINT.format(shipment_id=_path_id(shipment_id))
    payload = _require_object(await transport.get_json(endpoint), endpoint)
    try:
        return ShipmentRecord.model_validate(payload)
    except ValidationError as exc:
        raise ShipTrackFetchError(f"Unparseable shipment payload from {endpoint}: {exc}", endpoint=endpoint) from exc


async def find_by_tracking_number(transport: Transport, tracking_number: str) -> ShipmentRecord:
    """Resolve a public tracking number to its shipment record.

    Raises
    ------
    ShipTrackNotFoundError
        When the number is unknown (404 or an empty body).
    """
    number = tracking_number.strip()
    if not number:
        raise ValueError("tracking_number must be non-empty")
    payload = await transport.get_json(PUBLIC_TRACK_ENDPOINT, params={"tracking_number": number})
    if not payload:
        raise ShipTrackNotFoundError("Tracking number not found", status_code=404, endpoint=PUBLIC_TRACK_ENDPOINT)
    try:
        record = ShipmentRecord.model_validate(_require_object(payload, PUBLIC_TRACK_ENDPOINT))
    except ValidationError as exc:
        raise ShipTrackFetchError(
            f"Unparseable shipment payload from {PUBLIC_TRACK_ENDPOINT}: {exc}",
            endpoint=PUBLIC_TRACK_ENDPOINT,
        ) from exc
    if not record.shipment_id:
        raise ShipTrackNotFoundError("Tracking number not found", status_code=404, endpoint=PUBLIC_TRACK_ENDPOINT)
    return record


async def fetch_tracking_snapshot(
    transport: Transport,
    shipment_id: str | int,
    *,
    include_milestones: bool = True,
) -> TrackingSnapshot:
    """Fetch the route and, optionally, the shipment record concurrently.

    Milestone timestamps missing from the route payload are filled in from
    the shipment record.
    """
    if not include_milestones:
        return await fetch_route(transport, shipment_id)
    snapshot, record = await asyncio.gather(
        fetch_route(transport, shipment_id),
        fetch_shipment(transport, shipment_id),
    )
    return snapshot.with_milestones(record)
