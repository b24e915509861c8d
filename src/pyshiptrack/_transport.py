"""HTTP transport returning decoded JSON bodies."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from pyshiptrack._constants import USER_AGENT
from pyshiptrack._redact import redact_for_log
from pyshiptrack.config import TrackingConfig
from pyshiptrack.exceptions import ShipTrackFetchError, ShipTrackNotFoundError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Endpoint functions only need ``get_json``, so tests can pass a plain
    fake instead of an aiohttp-backed :class:`JsonTransport`.
    """

    async def get_json(self, endpoint: str, params: Mapping[str, str] | None = None) -> Any:
        ...


class JsonTransport:
    """GET JSON from the logistics API over a shared aiohttp session."""

    def __init__(self, config: TrackingConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    def _headers(self) -> dict[str, str]:
        headers = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }
        if self._config.api_token:
            headers["authorization"] = f"Bearer {self._config.api_token}"
        return headers

    async def get_json(self, endpoint: str, params: Mapping[str, str] | None = None) -> Any:
        """Fetch *endpoint* (a path starting with ``/``) and decode the body.

        Raises
        ------
        ShipTrackNotFoundError
            On HTTP 404.
        ShipTrackFetchError
            On any other non-200 status, network failure, timeout or a body
            that is not JSON.
        """
        url = f"{self._config.base_url}{endpoint}"
        headers = self._headers()
        _logger.debug("GET %s headers=%s", url, redact_for_log(headers))

        try:
            async with self._http.get(url, headers=headers, params=params, timeout=self._timeout) as resp:
                text = await resp.text()
                if resp.status == 404:
                    raise ShipTrackNotFoundError(
                        "Shipment not found",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
                if resp.status != 200:
                    raise ShipTrackFetchError(
                        f"HTTP {resp.status} from {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except ShipTrackFetchError:
            raise
        except aiohttp.ClientError as exc:
            raise ShipTrackFetchError(f"Request to {endpoint} failed: {exc}", endpoint=endpoint) from exc
        except TimeoutError as exc:
            raise ShipTrackFetchError(
                f"Request to {endpoint} timed out after {self._config.request_timeout}s",
                endpoint=endpoint,
            ) from exc

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise ShipTrackFetchError(f"Invalid JSON from {endpoint}: {text[:200]}", endpoint=endpoint) from exc
