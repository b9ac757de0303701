"""
Tests for the half-day overlap calculation.
"""
from datetime import time

import pytest

from core.entities import HalfDay
from exceptions.custom_errors import InvalidTimeRangeError
from utils.time_utils import expand_half_day, half_day_overlaps, parse_time, window_duration


def test_windows_from_configuration():
    assert window_duration(HalfDay.MORNING) == 270
    assert window_duration(HalfDay.AFTERNOON) == 240


def test_45_minutes_is_below_availability_threshold():
    """A shift covering 45 minutes of the morning does not count as available."""
    assert half_day_overlaps("07:30", "08:15", 60) == {}


def test_40_minutes_passes_demand_threshold():
    overlaps = half_day_overlaps("13:00", "13:40", 30)
    assert list(overlaps) == [HalfDay.AFTERNOON]
    assert overlaps[HalfDay.AFTERNOON].minutes == 40
    assert overlaps[HalfDay.AFTERNOON].proportion == pytest.approx(40 / 240)


def test_range_spanning_both_windows():
    overlaps = half_day_overlaps("08:00", "16:00", 60)
    assert overlaps[HalfDay.MORNING].minutes == 240
    assert overlaps[HalfDay.AFTERNOON].minutes == 180
    assert overlaps[HalfDay.AFTERNOON].proportion == pytest.approx(0.75)


def test_lunch_break_only_range_is_ignored():
    assert half_day_overlaps("12:00", "13:00", 1) == {}


def test_empty_range_raises():
    with pytest.raises(InvalidTimeRangeError):
        half_day_overlaps("12:00", "08:00", 30)


def test_parse_time_formats():
    assert parse_time("07:30") == time(7, 30)
    assert parse_time("13:05:00") == time(13, 5)
    with pytest.raises(InvalidTimeRangeError):
        parse_time("7h30")


def test_expand_half_day_labels():
    assert expand_half_day("full_day") == [HalfDay.MORNING, HalfDay.AFTERNOON]
    assert expand_half_day("afternoon") == [HalfDay.AFTERNOON]
    with pytest.raises(InvalidTimeRangeError):
        expand_half_day("evening")
