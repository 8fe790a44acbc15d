"""
Tests for time parsing and duration arithmetic.
"""

import pytest
from datetime import datetime, time

import pytz

from core.utils_datetime import (
    MINUTES_PER_DAY,
    coerce_duration,
    compute_end_time,
    crosses_midnight,
    format_hhmm,
    from_minutes,
    localize,
    parse_hhmm,
    to_minutes,
)
from domain.models import Duration


class TestParseHHMM:
    """Tests for "HH:MM" parsing."""

    @pytest.mark.unit
    @pytest.mark.parametrize("value,expected", [
        ("18:00", time(18, 0)),
        ("9:05", time(9, 5)),
        ("09:05:30", time(9, 5)),
        (" 07:45 ", time(7, 45)),
        (time(12, 30, 15), time(12, 30)),
    ])
    def test_valid(self, value, expected):
        assert parse_hhmm(value) == expected

    @pytest.mark.unit
    @pytest.mark.parametrize("value", [None, "", "18", "24:00", "12:60", "ab:cd", "18.30", 1800])
    def test_malformed_returns_none(self, value):
        assert parse_hhmm(value) is None

    @pytest.mark.unit
    def test_minutes_helpers(self):
        assert to_minutes(time(1, 30)) == 90
        assert from_minutes(90) == time(1, 30)
        assert from_minutes(24 * 60 + 15) == time(0, 15)
        assert format_hhmm(time(7, 5)) == "07:05"


class TestCoerceDuration:
    """Tests for duration coercion."""

    @pytest.mark.unit
    def test_accepts_model_mapping_and_json(self):
        expected = Duration(hours=1, minutes=30)
        assert coerce_duration(expected) == expected
        assert coerce_duration({"hours": 1, "minutes": 30}) == expected
        assert coerce_duration('{"hours": 1, "minutes": 30}') == expected

    @pytest.mark.unit
    @pytest.mark.parametrize("value", [
        None,
        {"hours": 1},
        {"minutes": 30},
        {"hours": None, "minutes": 30},
        {"hours": -1, "minutes": 0},
        "not json",
        "[1, 30]",
    ])
    def test_incomplete_or_invalid(self, value):
        assert coerce_duration(value) is None


class TestComputeEndTime:
    """Tests for end time computation."""

    @pytest.mark.unit
    @pytest.mark.parametrize("start,hours,minutes,expected", [
        ("18:00", 1, 30, "19:30"),
        ("18:45", 1, 30, "20:15"),
        ("10:50", 0, 25, "11:15"),
        ("09:00", 0, 0, "09:00"),
        ("23:00", 2, 0, "01:00"),
        ("22:30", 1, 30, "00:00"),
    ])
    def test_end_time(self, start, hours, minutes, expected):
        assert compute_end_time(start, Duration(hours=hours, minutes=minutes)) == expected

    @pytest.mark.unit
    def test_minute_overflow_carries_into_hours(self):
        assert compute_end_time("10:30", {"hours": 0, "minutes": 150}) == "13:00"

    @pytest.mark.unit
    def test_missing_inputs_give_none(self):
        assert compute_end_time(None, Duration(hours=1, minutes=0)) is None
        assert compute_end_time("25:00", Duration(hours=1, minutes=0)) is None
        assert compute_end_time("18:00", None) is None
        assert compute_end_time("18:00", {"hours": 1}) is None


    @pytest.mark.unit
    @pytest.mark.parametrize("hours,minutes", [(0, 1), (0, 45), (0, 150), (1, 30), (2, 0), (3, 59), (23, 59), (25, 0)])
    def test_interval_lasts_exactly_the_duration(self, hours, minutes):
        duration = Duration(hours=hours, minutes=minutes)
        for start_minute in range(MINUTES_PER_DAY):
            start = from_minutes(start_minute)
            end = parse_hhmm(compute_end_time(start, duration))

            elapsed = (to_minutes(end) - to_minutes(start)) % MINUTES_PER_DAY
            assert elapsed == duration.total_minutes % MINUTES_PER_DAY

    @pytest.mark.unit
    def test_deterministic(self):
        duration = Duration(hours=1, minutes=45)
        for start_minute in range(0, MINUTES_PER_DAY, 15):
            start = format_hhmm(from_minutes(start_minute))
            assert compute_end_time(start, duration) == compute_end_time(start, duration)


class TestCrossesMidnight:
    """Tests for midnight detection."""

    @pytest.mark.unit
    def test_crosses(self):
        assert crosses_midnight("23:00", Duration(hours=2, minutes=0))
        assert crosses_midnight("21:00", Duration(hours=3, minutes=1))

    @pytest.mark.unit
    def test_ending_exactly_at_midnight_does_not_cross(self):
        assert not crosses_midnight("22:30", Duration(hours=1, minutes=30))

    @pytest.mark.unit
    def test_unknown_inputs_do_not_cross(self):
        assert not crosses_midnight(None, Duration(hours=1, minutes=0))
        assert not crosses_midnight("23:00", None)


class TestLocalize:
    """Tests for timezone handling."""

    @pytest.mark.unit
    def test_naive_is_taken_as_local(self):
        value = localize(datetime(2025, 3, 14, 18, 0))
        assert value.tzinfo is not None
        assert value.hour == 18

    @pytest.mark.unit
    def test_aware_is_converted(self):
        utc_value = pytz.utc.localize(datetime(2025, 3, 14, 17, 0))
        assert localize(utc_value).hour == 18
