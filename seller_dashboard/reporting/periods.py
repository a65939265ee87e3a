"""
Reporting Period Resolution

Turns a period selector ("7d", "30d", "90d", "1y") or an explicit date range
into absolute window bounds for the current window and the immediately
preceding window of the same length.

All bounds are computed in a single configured time zone. A window of N days
covers N whole calendar days ending today: it starts at 00:00:00 of
(today - N + 1) and ends at 23:59:59.999999 of today. The previous window
covers the N calendar days before that and ends one microsecond before the
current window starts, so the two never overlap.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from enum import Enum
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from seller_dashboard.reporting.errors import InvalidPeriod


class ReportingPeriod(str, Enum):
    """Supported period selectors"""
    SEVEN_DAYS = "7d"
    THIRTY_DAYS = "30d"
    NINETY_DAYS = "90d"
    ONE_YEAR = "1y"

    @property
    def days(self) -> int:
        return _PERIOD_DAYS[self]


_PERIOD_DAYS = {
    ReportingPeriod.SEVEN_DAYS: 7,
    ReportingPeriod.THIRTY_DAYS: 30,
    ReportingPeriod.NINETY_DAYS: 90,
    ReportingPeriod.ONE_YEAR: 365,
}

CUSTOM_PERIOD = "custom"

# Longest window a custom range may cover
MAX_RANGE_DAYS = max(_PERIOD_DAYS.values())

TimeZoneLike = Union[str, tzinfo, None]


@dataclass(frozen=True)
class ReportingWindow:
    """Absolute bounds of a reporting window and its comparison window"""
    period: str
    days: int
    start_date: datetime
    end_date: datetime
    prev_start_date: datetime
    prev_end_date: datetime

    @property
    def first_day(self) -> date:
        return self.start_date.date()

    @property
    def last_day(self) -> date:
        return self.end_date.date()

    @property
    def prev_first_day(self) -> date:
        return self.prev_start_date.date()

    @property
    def prev_last_day(self) -> date:
        return self.prev_end_date.date()


def get_timezone(tz: TimeZoneLike = None) -> tzinfo:
    """Resolve a time zone name or object, defaulting to UTC."""
    if tz is None:
        return timezone.utc
    if isinstance(tz, tzinfo):
        return tz
    if tz.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(tz)
    except ZoneInfoNotFoundError as e:
        raise ValueError(f"Unknown time zone: {tz}") from e


def parse_period(selector: Union[str, ReportingPeriod]) -> ReportingPeriod:
    """
    Validate a period selector.

    Raises:
        InvalidPeriod: If the selector is not one of the supported values
    """
    if isinstance(selector, ReportingPeriod):
        return selector
    try:
        return ReportingPeriod(selector)
    except ValueError:
        raise InvalidPeriod(selector, [p.value for p in ReportingPeriod]) from None


def _local_now(now: Optional[datetime], tz: tzinfo) -> datetime:
    if now is None:
        return datetime.now(tz)
    if now.tzinfo is None:
        return now.replace(tzinfo=tz)
    return now.astimezone(tz)


def _to_local_date(value: Union[date, datetime], tz: tzinfo) -> date:
    if isinstance(value, datetime):
        return _local_now(value, tz).date()
    return value


def _build_window(label: str, first_day: date, last_day: date, tz: tzinfo) -> ReportingWindow:
    days = (last_day - first_day).days + 1
    start = datetime.combine(first_day, time.min, tzinfo=tz)
    end = datetime.combine(last_day, time.max, tzinfo=tz)
    prev_start = datetime.combine(first_day - timedelta(days=days), time.min, tzinfo=tz)
    return ReportingWindow(
        period=label,
        days=days,
        start_date=start,
        end_date=end,
        prev_start_date=prev_start,
        prev_end_date=start - timedelta(microseconds=1),
    )


def resolve_period(
    selector: Union[str, ReportingPeriod],
    now: Optional[datetime] = None,
    tz: TimeZoneLike = None,
) -> ReportingWindow:
    """
    Resolve a period selector into window bounds.

    Args:
        selector: One of "7d", "30d", "90d", "1y"
        now: Reference instant (defaults to the current time); naive values
            are interpreted in ``tz``
        tz: Time zone for calendar-day truncation (defaults to UTC)

    Returns:
        ReportingWindow ending at the end of today

    Raises:
        InvalidPeriod: For an unrecognized selector
    """
    period = parse_period(selector)
    zone = get_timezone(tz)
    today = _local_now(now, zone).date()
    return _build_window(period.value, today - timedelta(days=period.days - 1), today, zone)


def resolve_range(
    start: Union[date, datetime],
    end: Union[date, datetime],
    tz: TimeZoneLike = None,
) -> ReportingWindow:
    """
    Resolve an explicit inclusive date range into window bounds.

    Raises:
        InvalidPeriod: If ``end`` falls before ``start``, the range is longer
            than MAX_RANGE_DAYS, or its previous window would start before
            the first representable date
    """
    zone = get_timezone(tz)
    first_day = _to_local_date(start, zone)
    last_day = _to_local_date(end, zone)
    if last_day < first_day:
        raise InvalidPeriod(f"{first_day.isoformat()}..{last_day.isoformat()}")

    days = (last_day - first_day).days + 1
    if days > MAX_RANGE_DAYS:
        raise InvalidPeriod(
            f"{first_day.isoformat()}..{last_day.isoformat()} longer than {MAX_RANGE_DAYS} days"
        )
    if (first_day - date.min).days < days:
        raise InvalidPeriod(f"{first_day.isoformat()}..{last_day.isoformat()} out of range")
    return _build_window(CUSTOM_PERIOD, first_day, last_day, zone)
