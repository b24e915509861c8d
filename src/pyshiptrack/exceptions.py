"""Custom exception hierarchy for pyshiptrack."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pyshiptrack.location import LocationErrorReason


class ShipTrackError(Exception):
    """Base exception for all pyshiptrack errors."""


class ShipTrackConfigError(ShipTrackError):
    """Invalid or missing configuration."""


class ShipTrackFetchError(ShipTrackError):
    """Fetching a snapshot or shipment record failed.

    Covers network failures, non-200 responses, invalid JSON and payloads
    that do not parse into a tracking snapshot.  The scheduler forwards
    these to the view's error channel instead of raising them.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class ShipTrackNotFoundError(ShipTrackFetchError):
    """The requested shipment does not exist (HTTP 404)."""


class ShipTrackLocationError(ShipTrackError):
    """Device location request failed.

    ``reason`` is a :class:`~pyshiptrack.location.LocationErrorReason` so
    callers can tell a denied permission apart from a timeout.
    """

    def __init__(self, reason: LocationErrorReason, message: str | None = None) -> None:
        self.reason = reason
        super().__init__(message or reason.message)
