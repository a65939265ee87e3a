"""
Metric Accumulator

Sum-reduces daily metric records into period totals.
"""

from dataclasses import dataclass
from typing import Iterable

from seller_dashboard.reporting.errors import MalformedRecord
from seller_dashboard.reporting.records import DailyMetricRecord

COUNTER_FIELDS = (
    "views",
    "inquiries",
    "orders",
    "revenue",
    "new_listings",
    "unique_customers",
)


@dataclass(frozen=True)
class PeriodTotals:
    """Totals of every daily counter over a window. Revenue in halalas."""
    views: int = 0
    inquiries: int = 0
    orders: int = 0
    revenue: int = 0
    new_listings: int = 0
    unique_customers: int = 0


def validate_record(record: DailyMetricRecord) -> None:
    """
    Check a record against the store invariants.

    Raises:
        MalformedRecord: On a missing date or a negative / non-integer counter
    """
    if record.date is None:
        raise MalformedRecord("missing date", record)
    for name in COUNTER_FIELDS:
        value = getattr(record, name)
        # bool is an int subclass but never a valid counter
        if not isinstance(value, int) or isinstance(value, bool):
            raise MalformedRecord(f"{name} must be an integer", record)
        if value < 0:
            raise MalformedRecord(f"{name} is negative", record)


def accumulate(records: Iterable[DailyMetricRecord]) -> PeriodTotals:
    """
    Sum each counter across ``records``.

    Order and contiguity of the records do not matter; an empty input gives
    all-zero totals.
    """
    sums = dict.fromkeys(COUNTER_FIELDS, 0)
    for record in records:
        validate_record(record)
        for name in COUNTER_FIELDS:
            sums[name] += getattr(record, name)
    return PeriodTotals(**sums)
