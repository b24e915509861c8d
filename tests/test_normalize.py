from __future__ import annotations

import pytest

from pyshiptrack._normalize import normalize_timestamp_seconds, safe_finite, safe_float, safe_int, safe_positive, safe_str


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("12.5", 12.5),
        (" 7 ", 7.0),
        (3, 3.0),
        ("", None),
        ("--", None),
        (None, None),
        ("abc", None),
        (float("nan"), None),
        ([1], None),
    ],
)
def test_safe_float(value: object, expected: float | None) -> None:
    assert safe_float(value) == expected


def test_safe_finite_and_positive() -> None:
    assert safe_float("inf") == float("inf")
    assert safe_finite("inf") is None
    assert safe_positive("0") is None
    assert safe_positive("-2") is None
    assert safe_positive("0.5") == 0.5


def test_safe_int_and_str() -> None:
    assert safe_int("4.9") == 4
    assert safe_int("x") is None
    assert safe_str(42) == "42"
    assert safe_str("") is None
    assert safe_str(None) is None


def test_timestamp_millis_normalized_to_seconds() -> None:
    assert normalize_timestamp_seconds(1_767_225_600_000) == 1_767_225_600
    assert normalize_timestamp_seconds(1_767_225_600) == 1_767_225_600
    assert normalize_timestamp_seconds(0) is None
    assert normalize_timestamp_seconds("") is None
