"""Tests for configuration helpers."""

import pytest

from mess_ledger.config import parse_timezone


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (None, "UTC"),
        ("", "UTC"),
        ("  Asia/Dhaka ", "Asia/Dhaka"),
        ("Not/AZone", "UTC"),
    ],
)
def test_parse_timezone(raw: str | None, expected: str) -> None:
    assert parse_timezone(raw) == expected
