"""
Unit Tests - Period Resolution
"""
from datetime import date, datetime, timedelta, timezone

import pytest

from seller_dashboard.reporting.errors import InvalidPeriod
from seller_dashboard.reporting.periods import (
    ReportingPeriod,
    get_timezone,
    parse_period,
    resolve_period,
    resolve_range,
)

NOW = datetime(2024, 12, 16, 18, 0, tzinfo=timezone.utc)


class TestResolvePeriod:
    """Tests for resolve_period"""

    @pytest.mark.parametrize(
        "selector,days",
        [("7d", 7), ("30d", 30), ("90d", 90), ("1y", 365)],
    )
    def test_window_length(self, selector, days):
        window = resolve_period(selector, now=NOW)

        assert window.days == days
        assert window.period == selector
        assert (window.last_day - window.first_day).days + 1 == days
        assert (window.prev_last_day - window.prev_first_day).days + 1 == days

    def test_seven_day_window_bounds(self):
        window = resolve_period("7d", now=NOW)

        assert window.start_date == datetime(2024, 12, 10, tzinfo=timezone.utc)
        assert window.end_date.date() == date(2024, 12, 16)
        assert window.end_date >= NOW
        assert window.first_day == date(2024, 12, 10)
        assert window.prev_first_day == date(2024, 12, 3)
        assert window.prev_last_day == date(2024, 12, 9)

    def test_start_truncated_to_midnight(self):
        window = resolve_period("30d", now=NOW)

        assert window.start_date.hour == 0
        assert window.start_date.minute == 0
        assert window.start_date.microsecond == 0
        assert window.prev_start_date.hour == 0

    @pytest.mark.parametrize("selector", [p.value for p in ReportingPeriod])
    def test_windows_do_not_overlap(self, selector):
        window = resolve_period(selector, now=NOW)

        assert window.prev_start_date < window.prev_end_date < window.start_date
        assert window.start_date - window.prev_end_date == timedelta(microseconds=1)
        assert window.start_date - window.prev_start_date == timedelta(days=window.days)

    def test_accepts_enum_member(self):
        assert resolve_period(ReportingPeriod.NINETY_DAYS, now=NOW).days == 90

    @pytest.mark.parametrize("selector", ["", "14d", "7D", "week", "1m"])
    def test_unknown_selector_rejected(self, selector):
        with pytest.raises(InvalidPeriod) as exc_info:
            resolve_period(selector, now=NOW)

        assert exc_info.value.status_code == 400
        assert exc_info.value.details["allowed"] == ["7d", "30d", "90d", "1y"]

    def test_naive_now_is_read_in_zone(self):
        window = resolve_period("7d", now=datetime(2024, 12, 16, 23, 30), tz="Asia/Riyadh")

        assert window.last_day == date(2024, 12, 16)
        assert window.start_date.utcoffset() == timedelta(hours=3)

    def test_day_boundary_follows_zone(self):
        # 22:30 UTC is already the next day in Riyadh
        late = datetime(2024, 12, 16, 22, 30, tzinfo=timezone.utc)

        assert resolve_period("7d", now=late).last_day == date(2024, 12, 16)
        assert resolve_period("7d", now=late, tz="Asia/Riyadh").last_day == date(2024, 12, 17)

    def test_deterministic(self):
        assert resolve_period("30d", now=NOW) == resolve_period("30d", now=NOW)


class TestResolveRange:
    """Tests for resolve_range"""

    def test_inclusive_range(self):
        window = resolve_range(date(2024, 11, 1), date(2024, 11, 30))

        assert window.period == "custom"
        assert window.days == 30
        assert window.prev_first_day == date(2024, 10, 2)
        assert window.prev_last_day == date(2024, 10, 31)

    def test_single_day(self):
        window = resolve_range(date(2024, 11, 1), date(2024, 11, 1))

        assert window.days == 1
        assert window.prev_first_day == window.prev_last_day == date(2024, 10, 31)

    def test_inverted_range_rejected(self):
        with pytest.raises(InvalidPeriod):
            resolve_range(date(2024, 11, 30), date(2024, 11, 1))

    def test_longest_range_accepted(self):
        window = resolve_range(date(2024, 1, 1), date(2024, 12, 30))

        assert window.days == 365

    def test_range_longer_than_a_year_rejected(self):
        with pytest.raises(InvalidPeriod):
            resolve_range(date(2024, 1, 1), date(2024, 12, 31))

    def test_century_range_rejected(self):
        with pytest.raises(InvalidPeriod):
            resolve_range(date(1900, 1, 1), date(2099, 12, 31))

    def test_previous_window_before_first_date_rejected(self):
        with pytest.raises(InvalidPeriod):
            resolve_range(date(1, 1, 5), date(1, 1, 10))

    def test_previous_window_touching_first_date(self):
        window = resolve_range(date(1, 1, 7), date(1, 1, 12))

        assert window.prev_first_day == date.min


class TestHelpers:
    """Tests for period helpers"""

    def test_parse_period(self):
        assert parse_period("1y") is ReportingPeriod.ONE_YEAR
        assert ReportingPeriod.ONE_YEAR.days == 365

    def test_default_timezone_is_utc(self):
        assert get_timezone(None) is timezone.utc
        assert get_timezone("utc") is timezone.utc

    def test_unknown_timezone(self):
        with pytest.raises(ValueError):
            get_timezone("Mars/Olympus")
