"""Normalization helpers.

Centralizes defensive parsing of API payloads and raw form values.
"""

from __future__ import annotations

import math
from typing import Any


def safe_float(value: Any) -> float | None:
    if value is None or value == "" or value == "--":
        return None
    if isinstance(value, str):
        value = value.strip()
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result):
        return None
    return result


def safe_finite(value: Any) -> float | None:
    parsed = safe_float(value)
    if parsed is None or math.isinf(parsed):
        return None
    return parsed


def safe_positive(value: Any) -> float | None:
    """Return *value* as a finite float greater than zero, else ``None``."""
    parsed = safe_finite(value)
    if parsed is None or parsed <= 0:
        return None
    return parsed


def safe_int(value: Any) -> int | None:
    parsed = safe_finite(value)
    if parsed is None:
        return None
    return int(parsed)


def safe_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text if text else None


def normalize_timestamp_seconds(value: Any) -> float | None:
    """Normalize epoch timestamps to seconds.

    - Empty/missing -> None
    - <= 0 -> None
    - Milliseconds (> 1e11) -> seconds
    """

    ts = safe_finite(value)
    if ts is None or ts <= 0:
        return None
    if ts > 1e11:
        ts /= 1000.0
    return ts
