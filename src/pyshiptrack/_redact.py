"""Helpers for safe debug logging.

Request headers carry the bearer token; mask it before logging.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

_SENSITIVE_KEYS: frozenset[str] = frozenset({"authorization", "cookie", "api_token", "token"})


def redact_for_log(value: Any, *, max_string: int = 256, _depth: int = 0) -> Any:
    """Return a copy of *value* with sensitive mapping values masked."""
    if _depth > 10:
        return "<max-depth>"
    if isinstance(value, str):
        if len(value) > max_string:
            return f"{value[:max_string]}…<truncated>"
        return value
    if isinstance(value, Mapping):
        redacted: dict[str, Any] = {}
        for key, item in value.items():
            name = str(key)
            if name.lower() in _SENSITIVE_KEYS:
                redacted[name] = "<redacted>"
            else:
                redacted[name] = redact_for_log(item, max_string=max_string, _depth=_depth + 1)
        return redacted
    if isinstance(value, (list, tuple)):
        return [redact_for_log(item, max_string=max_string, _depth=_depth + 1) for item in value]
    return value
