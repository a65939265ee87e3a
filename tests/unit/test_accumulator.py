"""
Unit Tests - Metric Accumulation and Growth
"""
from datetime import date, timedelta

import pytest

from seller_dashboard.reporting.accumulator import PeriodTotals, accumulate
from seller_dashboard.reporting.errors import MalformedRecord
from seller_dashboard.reporting.growth import (
    NEW_GROWTH_SENTINEL,
    ChartPoint,
    build_chart_series,
    compute_growth,
    compute_growth_set,
)
from seller_dashboard.reporting.records import DailyMetricRecord

DAY = date(2024, 12, 10)


def record(offset: int = 0, **counters) -> DailyMetricRecord:
    return DailyMetricRecord(date=DAY + timedelta(days=offset), **counters)


class TestAccumulate:
    """Tests for accumulate"""

    def test_empty_input_is_zero(self):
        assert accumulate([]) == PeriodTotals()

    def test_sums_every_counter(self):
        totals = accumulate([
            record(0, views=5, inquiries=1, orders=1, revenue=150050, new_listings=2, unique_customers=1),
            record(1, views=7, inquiries=2, orders=0, revenue=0, new_listings=0, unique_customers=0),
            record(2, views=3, inquiries=0, orders=2, revenue=99950, new_listings=1, unique_customers=2),
        ])

        assert totals == PeriodTotals(
            views=15, inquiries=3, orders=3, revenue=250000, new_listings=3, unique_customers=3,
        )

    def test_order_independent(self):
        records = [record(i, views=i * 3, revenue=i * 101) for i in range(10)]

        assert accumulate(records) == accumulate(reversed(records))

    def test_gaps_do_not_matter(self):
        assert accumulate([record(0, views=4), record(5, views=6)]).views == 10

    def test_negative_counter_rejected(self):
        with pytest.raises(MalformedRecord):
            accumulate([record(0, views=-1)])

    def test_missing_date_rejected(self):
        with pytest.raises(MalformedRecord):
            accumulate([DailyMetricRecord(date=None, views=1)])

    def test_float_revenue_rejected(self):
        with pytest.raises(MalformedRecord):
            accumulate([record(0, revenue=10.5)])


class TestGrowth:
    """Tests for growth computation"""

    @pytest.mark.parametrize(
        "current,previous,expected",
        [
            (0, 0, 0.0),
            (1, 0, NEW_GROWTH_SENTINEL),
            (9999, 0, NEW_GROWTH_SENTINEL),
            (150, 100, 50.0),
            (50, 100, -50.0),
            (0, 100, -100.0),
            (300, 100, 200.0),
        ],
    )
    def test_compute_growth(self, current, previous, expected):
        assert compute_growth(current, previous) == expected

    def test_growth_is_not_rounded(self):
        assert compute_growth(2, 3) == pytest.approx(-33.333333, rel=1e-6)

    def test_growth_set(self):
        growth = compute_growth_set(
            PeriodTotals(views=42, inquiries=5, orders=0, revenue=2000),
            PeriodTotals(views=0, inquiries=10, orders=0, revenue=1000),
        )

        assert growth.views == 100.0
        assert growth.inquiries == -50.0
        assert growth.orders == 0.0
        assert growth.revenue == 100.0


class TestChartSeries:
    """Tests for build_chart_series"""

    def test_zero_filled_and_ascending(self):
        series = build_chart_series(
            [record(3, views=12), record(0, views=5)],
            days=7,
            last_day=DAY + timedelta(days=6),
        )

        assert len(series) == 7
        assert [p.date for p in series] == [DAY + timedelta(days=i) for i in range(7)]
        assert [p.views for p in series] == [5, 0, 0, 12, 0, 0, 0]
        assert series[1] == ChartPoint(date=DAY + timedelta(days=1))

    def test_empty_window(self):
        assert build_chart_series([record(0, views=1)], days=0, last_day=DAY) == []

    def test_records_outside_range_ignored(self):
        series = build_chart_series([record(-1, views=99), record(0, views=1)], days=1, last_day=DAY)

        assert [p.views for p in series] == [1]

    def test_duplicate_days_are_summed(self):
        series = build_chart_series(
            [record(0, views=2, revenue=100), record(0, views=3, revenue=50)],
            days=1,
            last_day=DAY,
        )

        assert series[0].views == 5
        assert series[0].revenue == 150

    def test_series_total_matches_accumulated_total(self):
        records = [record(i, views=i + 1, orders=i % 2) for i in range(30)]
        series = build_chart_series(records, days=30, last_day=DAY + timedelta(days=29))

        assert sum(p.views for p in series) == accumulate(records).views
        assert sum(p.orders for p in series) == accumulate(records).orders
