"""Tests for pulseboard.core.window: range resolution and containment."""

from datetime import date, datetime, timedelta, timezone

import pytest

from pulseboard.core.window import (
    InvalidRange,
    Window,
    end_of_day,
    parse_day,
    resolve_window,
    start_of_day,
    trailing_window,
)
from tests.helpers import NOW


class TestParseDay:
    def test_date_only(self):
        assert parse_day("2024-01-05") == date(2024, 1, 5)

    def test_datetime_string(self):
        assert parse_day("2024-01-05T18:30:00") == date(2024, 1, 5)

    def test_offset_converted_to_utc(self):
        assert parse_day("2024-01-05T23:30:00-05:00") == date(2024, 1, 6)

    def test_garbage_raises(self):
        with pytest.raises(InvalidRange):
            parse_day("not-a-date")

    def test_invalid_range_is_value_error(self):
        with pytest.raises(ValueError):
            parse_day("2024-13-40")


class TestResolveWindow:
    def test_explicit_bounds(self):
        w = resolve_window("2024-01-01", "2024-01-07")
        assert w.start == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert w.end == datetime(2024, 1, 7, 23, 59, 59, 999000, tzinfo=timezone.utc)
        assert w.days() == 7

    def test_end_covers_whole_final_day(self):
        w = resolve_window("2024-01-01", "2024-01-07")
        assert w.contains(datetime(2024, 1, 7, 23, 59, 59, tzinfo=timezone.utc))
        assert not w.contains(datetime(2024, 1, 8, tzinfo=timezone.utc))

    def test_missing_bounds_default_to_trailing_days(self):
        w = resolve_window(None, None, now=NOW)
        assert w.start == start_of_day(date(2024, 2, 14))
        assert w.end == end_of_day(date(2024, 3, 15))

    def test_single_bound_falls_back_to_default(self):
        w = resolve_window("2024-01-01", None, now=NOW)
        assert w.end == end_of_day(date(2024, 3, 15))
        assert w.start == start_of_day(date(2024, 2, 14))

    def test_empty_strings_treated_as_missing(self):
        w = resolve_window("", "", now=NOW)
        assert w.end.date() == date(2024, 3, 15)

    def test_custom_default_days(self):
        w = resolve_window(now=NOW, default_days=7)
        assert w.start.date() == date(2024, 3, 8)

    def test_unparseable_raises(self):
        with pytest.raises(InvalidRange):
            resolve_window("yesterday", "2024-01-07")

    def test_inverted_range_passes_through(self):
        w = resolve_window("2024-01-10", "2024-01-01")
        assert w.end < w.start
        assert w.days() == 0


class TestWindow:
    def test_contains_naive_treated_as_utc(self):
        w = Window(datetime(2024, 1, 1, tzinfo=timezone.utc), datetime(2024, 1, 2, tzinfo=timezone.utc))
        assert w.contains(datetime(2024, 1, 1, 12))

    def test_inclusive_end(self):
        end = datetime(2024, 1, 2, tzinfo=timezone.utc)
        w = Window(datetime(2024, 1, 1, tzinfo=timezone.utc), end)
        assert w.contains(end)

    def test_previous_is_adjacent_and_half_open(self):
        current = trailing_window(30, now=NOW)
        prior = current.previous()
        assert prior.end == current.start
        assert prior.span == current.span
        assert not prior.contains(current.start)
        assert current.contains(current.start)

    def test_trailing_window(self):
        w = trailing_window(30, now=NOW)
        assert w.end == NOW
        assert w.start == NOW - timedelta(days=30)

    def test_to_dict(self):
        w = resolve_window("2024-01-01", "2024-01-01")
        assert w.to_dict() == {
            "from": "2024-01-01T00:00:00+00:00",
            "to": "2024-01-01T23:59:59.999000+00:00",
        }
