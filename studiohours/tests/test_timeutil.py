from __future__ import annotations

import pytest

from studiohours.timeutil import format_hours_label, from_minutes, interval_minutes, to_minutes


@pytest.mark.parametrize(
    "value, expected",
    [
        ("09:00", 540),
        ("18:30", 1110),
        ("00:00", 0),
        ("", 0),
        ("garbage", 0),
    ],
)
def test_to_minutes(value: str, expected: int) -> None:
    assert to_minutes(value) == expected


def test_from_minutes_pads_both_parts() -> None:
    assert from_minutes(545) == "09:05"
    assert from_minutes(0) == "00:00"


def test_interval_minutes_is_never_negative() -> None:
    assert interval_minutes("09:00", "18:00") == 540
    assert interval_minutes("18:00", "09:00") == 0
    assert interval_minutes("12:00", "12:00") == 0
    assert interval_minutes("", "") == 0


@pytest.mark.parametrize(
    "hours, label",
    [
        (8.0, "8h"),
        (0.0, "0h"),
        (7.5, "7h30"),
        (45.25, "45h15"),
        (1 + 5 / 60, "1h05"),
    ],
)
def test_format_hours_label(hours: float, label: str) -> None:
    assert format_hours_label(hours) == label
