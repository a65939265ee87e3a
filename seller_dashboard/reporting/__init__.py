"""
Seller Reporting Module
"""
from .accumulator import PeriodTotals, accumulate
from .aggregator import DashboardAggregator
from .errors import (
    DataFetchFailure,
    InvalidEvent,
    InvalidPeriod,
    MalformedRecord,
    ReportingError,
    SellerNotFound,
)
from .growth import ChartPoint, build_chart_series, compute_growth, compute_growth_set
from .periods import ReportingPeriod, ReportingWindow, resolve_period, resolve_range
from .records import DailyMetricRecord
from .schemas import DashboardPayload, SellerCounts
from .store import MetricsStore, SqlMetricsStore

__all__ = [
    "PeriodTotals",
    "accumulate",
    "DashboardAggregator",
    "DataFetchFailure",
    "InvalidEvent",
    "InvalidPeriod",
    "MalformedRecord",
    "ReportingError",
    "SellerNotFound",
    "ChartPoint",
    "build_chart_series",
    "compute_growth",
    "compute_growth_set",
    "ReportingPeriod",
    "ReportingWindow",
    "resolve_period",
    "resolve_range",
    "DailyMetricRecord",
    "DashboardPayload",
    "SellerCounts",
    "MetricsStore",
    "SqlMetricsStore",
]
