"""Device location requests and the pick-a-point selection state."""

from __future__ import annotations

import asyncio
import logging
from enum import StrEnum
from typing import Protocol

from pyshiptrack._constants import DEFAULT_LOCATION, DEFAULT_LOCATION_TIMEOUT
from pyshiptrack.exceptions import ShipTrackLocationError
from pyshiptrack.models.geo import Coordinate

_logger = logging.getLogger(__name__)


class LocationErrorReason(StrEnum):
    PERMISSION_DENIED = "permission_denied"
    POSITION_UNAVAILABLE = "position_unavailable"
    TIMEOUT = "timeout"
    UNSUPPORTED = "unsupported"
    UNKNOWN = "unknown"

    @property
    def message(self) -> str:
        return _REASON_MESSAGES[self]


_REASON_MESSAGES: dict[LocationErrorReason, str] = {
    LocationErrorReason.PERMISSION_DENIED: "Location access denied. Please enable in browser settings.",
    LocationErrorReason.POSITION_UNAVAILABLE: "Location information unavailable.",
    LocationErrorReason.TIMEOUT: "Location request timed out.",
    LocationErrorReason.UNSUPPORTED: "Geolocation is not supported by your browser",
    LocationErrorReason.UNKNOWN: "An unknown error occurred.",
}


class DeviceLocationProvider(Protocol):
    """Source of the device's current position.

    Implementations raise :class:`ShipTrackLocationError` with a specific
    reason when they can tell why no fix is available.
    """

    async def get_current_position(self) -> Coordinate:
        ...


async def request_device_location(
    provider: DeviceLocationProvider | None,
    *,
    timeout: float = DEFAULT_LOCATION_TIMEOUT,
) -> Coordinate:
    """One-off device location request.

    Raises
    ------
    ShipTrackLocationError
        ``UNSUPPORTED`` without a provider, ``TIMEOUT`` when no fix arrives
        within *timeout* seconds, the provider's own reason when it raises
        one, ``UNKNOWN`` for any other failure.
    """
    if provider is None:
        raise ShipTrackLocationError(LocationErrorReason.UNSUPPORTED)
    try:
        return await asyncio.wait_for(provider.get_current_position(), timeout)
    except ShipTrackLocationError:
        raise
    except TimeoutError as exc:
        raise ShipTrackLocationError(LocationErrorReason.TIMEOUT) from exc
    except Exception as exc:
        _logger.debug("Device location provider failed", exc_info=True)
        raise ShipTrackLocationError(LocationErrorReason.UNKNOWN) from exc


class PickerMode(StrEnum):
    PICKER = "picker"
    VIEWER = "viewer"


class LocationPicker:
    """Selection state behind a map location picker.

    In ``VIEWER`` mode map clicks are ignored; the device location button
    still works when a provider is available.
    """

    def __init__(
        self,
        initial: Coordinate | None = None,
        *,
        mode: PickerMode = PickerMode.PICKER,
        provider: DeviceLocationProvider | None = None,
        timeout: float = DEFAULT_LOCATION_TIMEOUT,
    ) -> None:
        self._selected = initial or Coordinate(lat=DEFAULT_LOCATION[0], lng=DEFAULT_LOCATION[1])
        self._mode = mode
        self._provider = provider
        self._timeout = timeout
        self._error: LocationErrorReason | None = None
        self._locating = False

    @property
    def selected(self) -> Coordinate:
        return self._selected

    @property
    def mode(self) -> PickerMode:
        return self._mode

    @property
    def error(self) -> LocationErrorReason | None:
        return self._error

    @property
    def error_message(self) -> str | None:
        return self._error.message if self._error is not None else None

    @property
    def locating(self) -> bool:
        return self._locating

    def pick(self, lat: float, lng: float) -> bool:
        """Apply a map click. Returns whether the selection changed."""
        if self._mode is not PickerMode.PICKER:
            return False
        coordinate = Coordinate.parse(lat, lng)
        if coordinate is None:
            return False
        self._selected = coordinate
        self._error = None
        return True

    async def use_device_location(self) -> Coordinate | None:
        """Move the selection to the device position.

        On failure the selection is kept and :attr:`error` records why.
        """
        self._locating = True
        self._error = None
        try:
            coordinate = await request_device_location(self._provider, timeout=self._timeout)
        except ShipTrackLocationError as exc:
            self._error = exc.reason
            _logger.debug("Device location unavailable: %s", exc.reason)
            return None
        finally:
            self._locating = False
        self._selected = coordinate
        return coordinate

    def confirm(self) -> Coordinate:
        return self._selected
