"""
Duration + overage hour tests.

Tests:
1-6.   Duration from 24h / 12h / tuple / time inputs, midnight wrap
7-9.   Missing or unreadable times return 0
10-13. Overage hours: ceiling above the 4h base, never negative
14-15. Display helpers
"""

from datetime import time

import pytest

from eventquote.pricing.duration import (
    compute_duration,
    compute_overage_hours,
    format_duration,
    format_time,
    parse_time_of_day,
)


# ============================================================
# Duration
# ============================================================

def test_duration_24h_same_day():
    assert compute_duration("14:00", "18:30") == 4.5


def test_duration_crosses_midnight_with_separate_meridiem():
    """8:00 PM → 2:00 AM next day is 6 hours."""
    assert compute_duration("08:00", "02:00", "PM", "AM") == 6.0


def test_duration_crosses_midnight_24h():
    assert compute_duration("20:00", "02:00") == 6.0


@pytest.mark.parametrize("start,end,expected", [
    ("8:30 PM", "1 AM", 4.5),
    ("8pm", "11:30pm", 3.5),
    ("12:00 AM", "12:00 PM", 12.0),
    ("11:00 a.m.", "3:00 p.m.", 4.0),
    ("20:00:00", "23:00:00", 3.0),
])
def test_duration_12h_forms(start, end, expected):
    assert compute_duration(start, end) == expected


def test_duration_tuple_and_time_inputs():
    assert compute_duration((20, 0), (23, 15)) == 3.25
    assert compute_duration((8, 0, "pm"), (2, 0, "am")) == 6.0
    assert compute_duration(time(18, 0), time(22, 0)) == 4.0


def test_duration_minutes_are_sixtieths():
    assert compute_duration("10:07", "11:00") == pytest.approx(53 / 60)


@pytest.mark.parametrize("start,end", [
    ("", "18:00"),
    ("18:00", ""),
    (None, None),
    ("25:00", "02:00"),
    ("abc", "10:00"),
    ("13:00 PM", "14:00"),
    ("10:75", "11:00"),
    ((), (10, 0)),
])
def test_duration_unreadable_returns_zero(start, end):
    assert compute_duration(start, end) == 0.0


def test_duration_equal_times_is_zero_not_a_day():
    assert compute_duration("20:00", "20:00") == 0.0


def test_parse_time_of_day_meridiem_edges():
    assert parse_time_of_day("12:15", "AM") == 15
    assert parse_time_of_day("12:15", "PM") == 12 * 60 + 15
    assert parse_time_of_day("7", None) == 7 * 60
    assert parse_time_of_day("0:30 PM") is None


# ============================================================
# Overage hours
# ============================================================

@pytest.mark.parametrize("hours,expected", [
    (0, 0),
    (3.5, 0),
    (4, 0),
    (4.0, 0),
    (4.01, 1),
    (4.5, 1),
    (5, 1),
    (6, 2),
    (8, 4),
    (23.5, 20),
])
def test_overage_hours_ceiling(hours, expected):
    assert compute_overage_hours(hours) == expected


def test_overage_never_billed_within_base():
    for tenths in range(0, 41):
        assert compute_overage_hours(tenths / 10.0) == 0


def test_overage_ignores_float_noise():
    assert compute_overage_hours(4 + 1e-9) == 0


@pytest.mark.parametrize("hours", ["abc", -3, None, "", float("nan")])
def test_overage_garbage_is_zero(hours):
    assert compute_overage_hours(hours) == 0


def test_overage_custom_base_and_string_hours():
    assert compute_overage_hours(6, base_hours=5) == 1
    assert compute_overage_hours("6") == 2


# ============================================================
# Display helpers
# ============================================================

def test_format_time_zero_pads():
    assert format_time(20 * 60 + 30) == "20:30"
    assert format_time(5) == "00:05"


def test_format_duration():
    assert format_duration(6.5) == "6 h 30 m"
    assert format_duration(4) == "4 h"
    assert format_duration("abc") == "0 h"
