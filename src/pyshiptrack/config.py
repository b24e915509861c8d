"""Client configuration for pyshiptrack."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Callable
from typing import Any

from pyshiptrack._constants import (
    DEFAULT_FRESH_THRESHOLD,
    DEFAULT_LOCATION_TIMEOUT,
    DEFAULT_REFRESH_INTERVAL,
    DEFAULT_TICK_INTERVAL,
)
from pyshiptrack.exceptions import ShipTrackConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class TrackingConfig:
    """Tracking engine configuration.

    Parameters
    ----------
    base_url : str
        Base URL of the logistics API serving the tracking endpoints.
    api_token : str or None
        Bearer token sent as ``Authorization`` header. The session layer
        that obtains it lives outside this package.
    refresh_interval : float
        Seconds between automatic snapshot refreshes. Defaults to 30.
    tick_interval : float
        Seconds between staleness ticker updates. Defaults to 1.
    request_timeout : float
        Total timeout in seconds applied to each HTTP request.
    location_timeout : float
        Seconds to wait for a device location fix.
    strict_ordering : bool
        Discard fetch responses older than the displayed snapshot instead
        of letting the last response to complete win.
    fresh_threshold : int
        Staleness (seconds) below which the indicator reads "Updated".
    """

    base_url: str = "http://localhost:8000"
    api_token: str | None = None
    refresh_interval: float = DEFAULT_REFRESH_INTERVAL
    tick_interval: float = DEFAULT_TICK_INTERVAL
    request_timeout: float = 15.0
    location_timeout: float = DEFAULT_LOCATION_TIMEOUT
    strict_ordering: bool = False
    fresh_threshold: int = DEFAULT_FRESH_THRESHOLD

    def __post_init__(self) -> None:
        if not self.base_url:
            raise ShipTrackConfigError("base_url must be non-empty")
        for name in ("refresh_interval", "tick_interval", "request_timeout", "location_timeout"):
            if getattr(self, name) <= 0:
                raise ShipTrackConfigError(f"{name} must be positive, got {getattr(self, name)}")
        if self.fresh_threshold < 0:
            raise ShipTrackConfigError(f"fresh_threshold must be >= 0, got {self.fresh_threshold}")
        # Endpoint paths always start with "/".
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @classmethod
    def from_env(cls, **overrides: Any) -> TrackingConfig:
        """Create configuration from environment variables.

        Reads ``SHIPTRACK_BASE_URL``, ``SHIPTRACK_API_TOKEN`` and the
        optional numeric/boolean ``SHIPTRACK_*`` variables. Explicit
        keyword arguments override environment values.

        Raises
        ------
        ShipTrackConfigError
            If a numeric variable cannot be parsed.
        """
        env = os.environ

        _ENV_STR_MAP = {
            "SHIPTRACK_BASE_URL": "base_url",
            "SHIPTRACK_API_TOKEN": "api_token",
        }
        _ENV_NUMERIC_MAP: dict[str, tuple[str, Callable[[str], Any]]] = {
            "SHIPTRACK_REFRESH_INTERVAL": ("refresh_interval", float),
            "SHIPTRACK_TICK_INTERVAL": ("tick_interval", float),
            "SHIPTRACK_REQUEST_TIMEOUT": ("request_timeout", float),
            "SHIPTRACK_LOCATION_TIMEOUT": ("location_timeout", float),
            "SHIPTRACK_FRESH_THRESHOLD": ("fresh_threshold", int),
        }

        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        for env_key, (field_name, convert) in _ENV_NUMERIC_MAP.items():
            val = env.get(env_key)
            if val is None or field_name in overrides:
                continue
            try:
                config_kwargs[field_name] = convert(val)
            except ValueError as exc:
                raise ShipTrackConfigError(f"{env_key} must be numeric, got {val!r}") from exc

        if "strict_ordering" not in overrides:
            config_kwargs["strict_ordering"] = _env_bool(env.get("SHIPTRACK_STRICT_ORDERING"), False)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
