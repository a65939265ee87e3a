"""
Growth & Series Builder

Period-over-period growth percentages and the zero-filled daily chart
series of the seller dashboard.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, Iterable, List

from seller_dashboard.reporting.accumulator import PeriodTotals, validate_record
from seller_dashboard.reporting.records import DailyMetricRecord

# Metrics compared against the previous window
TRACKED_METRICS = ("views", "inquiries", "orders", "revenue")

# Reported when the previous window had nothing and the current one has
# something. Not a true percentage.
NEW_GROWTH_SENTINEL = 100.0


@dataclass(frozen=True)
class GrowthSet:
    """Signed growth percentage per tracked metric"""
    views: float
    inquiries: float
    orders: float
    revenue: float


@dataclass(frozen=True)
class ChartPoint:
    """Counters of a single calendar day. Revenue in halalas."""
    date: date
    views: int = 0
    inquiries: int = 0
    orders: int = 0
    revenue: int = 0


def compute_growth(current: int, previous: int) -> float:
    """
    Percentage change from ``previous`` to ``current``.

    Zero previous: 100 if current > 0, else 0. Otherwise the unrounded,
    unclamped ``(current - previous) / previous * 100``.
    """
    if previous == 0:
        return NEW_GROWTH_SENTINEL if current > 0 else 0.0
    return (current - previous) / previous * 100


def compute_growth_set(current: PeriodTotals, previous: PeriodTotals) -> GrowthSet:
    """Growth of every tracked metric between two windows."""
    return GrowthSet(**{
        name: compute_growth(getattr(current, name), getattr(previous, name))
        for name in TRACKED_METRICS
    })


def build_chart_series(
    records: Iterable[DailyMetricRecord],
    days: int,
    last_day: date,
) -> List[ChartPoint]:
    """
    One point per calendar day from ``last_day - days + 1`` to ``last_day``.

    Records are matched by calendar day; days without a record are emitted
    with all counters at zero. Records outside the range are ignored.
    """
    if days <= 0:
        return []

    by_day: Dict[date, ChartPoint] = {}
    for record in records:
        validate_record(record)
        seen = by_day.get(record.date)
        if seen is None:
            by_day[record.date] = ChartPoint(
                date=record.date,
                views=record.views,
                inquiries=record.inquiries,
                orders=record.orders,
                revenue=record.revenue,
            )
        else:
            # The store keeps one row per day; tolerate duplicates by summing
            by_day[record.date] = ChartPoint(
                date=record.date,
                views=seen.views + record.views,
                inquiries=seen.inquiries + record.inquiries,
                orders=seen.orders + record.orders,
                revenue=seen.revenue + record.revenue,
            )

    first_day = last_day - timedelta(days=days - 1)
    series = []
    for offset in range(days):
        day = first_day + timedelta(days=offset)
        series.append(by_day.get(day, ChartPoint(date=day)))
    return series
