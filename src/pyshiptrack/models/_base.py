"""Base model and timestamp handling for tracking payloads.

Every payload model inherits from :class:`ShipTrackBaseModel` which
provides:

* A ``model_validator(mode="before")`` that strips sentinel values
  (``""``, ``"--"``, NaN, ``None``) so the field default is used.
* Automatic stashing of the original payload in ``raw`` for models that
  declare a ``raw`` field.
* Post-construction sentinel normalisation via ``_SENTINEL_RULES``.

Timestamps use :data:`ShipTrackTimestamp`, which accepts ISO-8601
strings, ``datetime`` objects and epoch seconds or milliseconds.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Annotated, Any, ClassVar

from pydantic import BaseModel, BeforeValidator, ConfigDict, model_validator

from pyshiptrack._normalize import normalize_timestamp_seconds, safe_float

# Sentinel strings the backend uses for "not available".
_SENTINELS = frozenset({"", "--", "NaN", "nan"})


def is_negative(value: int | float) -> bool:
    """Return ``True`` when *value* is negative (e.g. ``-1`` sentinel)."""
    return value < 0


def parse_timestamp(value: Any) -> datetime | None:
    """Convert a payload timestamp to a timezone-aware UTC datetime.

    Naive datetimes and naive ISO strings are interpreted as UTC, which is
    what the backend emits. Numeric values are epoch seconds or
    milliseconds.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=UTC)
    if isinstance(value, bool):
        raise ValueError(f"invalid timestamp: {value!r}")
    if isinstance(value, (int, float)):
        seconds = normalize_timestamp_seconds(value)
        return None if seconds is None else datetime.fromtimestamp(seconds, tz=UTC)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if safe_float(text) is not None:
            seconds = normalize_timestamp_seconds(text)
            return None if seconds is None else datetime.fromtimestamp(seconds, tz=UTC)
        parsed = datetime.fromisoformat(text)
        return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=UTC)
    raise ValueError(f"invalid timestamp: {value!r}")


ShipTrackTimestamp = Annotated[datetime | None, BeforeValidator(parse_timestamp)]
"""Annotated type that coerces ISO strings and epoch numbers to UTC datetimes."""


class ShipTrackBaseModel(BaseModel):
    """Base for tracking payload models."""

    _SENTINEL_RULES: ClassVar[dict[str, Callable[..., bool]]] = {}
    """Per-field sentinel predicates.

    After model construction the field is set to ``None`` when
    *predicate(value)* is ``True``.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    @staticmethod
    def _clean_dict(values: dict[str, Any]) -> dict[str, Any]:
        cleaned: dict[str, Any] = {}
        for key, value in values.items():
            if value is None:
                continue
            if isinstance(value, str) and value.strip() in _SENTINELS:
                continue
            if isinstance(value, float) and math.isnan(value):
                continue
            cleaned[key] = value
        return cleaned

    @model_validator(mode="before")
    @classmethod
    def _clean_values(cls, values: Any) -> Any:
        """Strip sentinel values and stash the raw payload."""
        if not isinstance(values, dict):
            return values
        cleaned = ShipTrackBaseModel._clean_dict(values)
        if "raw" in cls.model_fields and "raw" not in values:
            cleaned["raw"] = dict(values)
        return cleaned

    @model_validator(mode="after")
    def _normalise_sentinels(self) -> ShipTrackBaseModel:
        sentinel_rules: dict[str, Callable[..., bool]] = getattr(type(self), "_SENTINEL_RULES", {})
        for field_name, predicate in sentinel_rules.items():
            val = getattr(self, field_name, None)
            if val is not None and predicate(val):
                object.__setattr__(self, field_name, None)
        return self
