"""
Seller Dashboard Aggregator

Assembles the seller dashboard from independent read queries:

1. Resolve the reporting window
2. Look up the seller (missing seller fails the request)
3. Fan out the remaining reads concurrently and wait for all of them
4. Accumulate both windows, compute growth and the zero-filled series
5. Shape the response DTO

The aggregator holds no state between requests and never writes. A failed
or timed-out read fails the whole request; retrying is left to the caller.
"""

import asyncio
import time
from datetime import date, datetime
from typing import Any, Awaitable, Dict, List, Optional, Union
import uuid

import structlog

from seller_dashboard.config import ReportingSettings, get_settings
from seller_dashboard.reporting.accumulator import PeriodTotals, accumulate
from seller_dashboard.reporting.errors import DataFetchFailure, ReportingError, SellerNotFound
from seller_dashboard.reporting.growth import (
    ChartPoint,
    GrowthSet,
    build_chart_series,
    compute_growth_set,
)
from seller_dashboard.reporting.periods import (
    ReportingPeriod,
    ReportingWindow,
    resolve_period,
    resolve_range,
)
from seller_dashboard.reporting.records import (
    CountsSnapshot,
    ListingSummary,
    OrderSummary,
    SellerSnapshot,
)
from seller_dashboard.reporting.schemas import (
    ActivityCounts,
    ChartDataPoint,
    CountsSummary,
    DashboardPayload,
    GrowthPercentages,
    InventoryCounts,
    OrderCounts,
    Overview,
    PeriodInfo,
    RecentOrder,
    SellerCounts,
    TopListing,
    halalas_to_sar,
)
from seller_dashboard.reporting.store import MetricsStore

logger = structlog.get_logger(__name__)


def build_payload(
    window: ReportingWindow,
    seller: SellerSnapshot,
    totals: PeriodTotals,
    growth: GrowthSet,
    series: List[ChartPoint],
    top_listings: List[ListingSummary],
    recent_orders: List[OrderSummary],
) -> DashboardPayload:
    """Shape computed values into the dashboard DTO."""
    return DashboardPayload(
        overview=Overview(
            total_views=totals.views,
            total_inquiries=totals.inquiries,
            total_orders=totals.orders,
            total_revenue=halalas_to_sar(totals.revenue),
            total_new_listings=totals.new_listings,
            active_listings=seller.active_listings,
            average_rating=seller.rating,
            total_reviews=seller.review_count,
            total_sales=seller.total_sales,
            is_verified=seller.verified,
        ),
        growth=GrowthPercentages(
            views_growth=growth.views,
            inquiries_growth=growth.inquiries,
            orders_growth=growth.orders,
            revenue_growth=growth.revenue,
        ),
        chart_data=[
            ChartDataPoint(
                date=point.date,
                views=point.views,
                inquiries=point.inquiries,
                orders=point.orders,
                revenue=halalas_to_sar(point.revenue),
            )
            for point in series
        ],
        top_listings=[
            TopListing(
                id=listing.id,
                title=listing.title,
                title_en=listing.localized_title,
                views=listing.view_count,
                price=halalas_to_sar(listing.price),
                image=listing.primary_image_url,
            )
            for listing in top_listings
        ],
        recent_orders=[
            RecentOrder(
                id=order.id,
                order_number=order.order_number,
                buyer_name=order.buyer_name,
                items=order.item_count,
                total=halalas_to_sar(order.total),
                status=order.status,
                created_at=order.created_at,
            )
            for order in recent_orders
        ],
        period=PeriodInfo(
            start_date=window.start_date,
            end_date=window.end_date,
            period=window.period,
        ),
    )


def build_seller_counts(snapshot: CountsSnapshot, recent: PeriodTotals) -> SellerCounts:
    """Bucket raw order statuses and inventory counters into badge counts."""
    by_status = snapshot.orders_by_status
    orders = OrderCounts(
        pending=by_status.get("PENDING", 0),
        processing=by_status.get("CONFIRMED", 0) + by_status.get("PROCESSING", 0),
        ready=by_status.get("READY_TO_SHIP", 0),
        shipped=by_status.get("SHIPPED", 0),
        completed=by_status.get("DELIVERED", 0),
        returns=by_status.get("RETURNED", 0),
        total=sum(by_status.values()),
    )
    inventory = InventoryCounts(
        total=snapshot.total_listings,
        draft=snapshot.draft_listings,
        low_stock=snapshot.low_stock,
        out_of_stock=snapshot.out_of_stock,
        archived=snapshot.archived_listings,
    )
    return SellerCounts(
        orders=orders,
        inventory=inventory,
        activity=ActivityCounts(
            recent_views=recent.views,
            recent_inquiries=recent.inquiries,
            new_customers=recent.unique_customers,
        ),
        summary=CountsSummary(
            active_orders=orders.pending + orders.processing + orders.ready + orders.shipped,
            urgent_actions=orders.pending + inventory.low_stock + inventory.out_of_stock,
            total_products=inventory.total,
        ),
    )


class DashboardAggregator:
    """
    Builds seller dashboard payloads from a MetricsStore.

    Example:
        aggregator = DashboardAggregator(SqlMetricsStore(get_session_factory()))
        payload = await aggregator.build_dashboard(seller_id, "30d")
    """

    def __init__(self, store: MetricsStore, settings: Optional[ReportingSettings] = None):
        self.store = store
        self.settings = settings or get_settings().reporting

    async def _fetch(self, name: str, awaitable: Awaitable[Any]) -> Any:
        """Await one read under the fetch timeout, mapping failures to DataFetchFailure."""
        started = time.perf_counter()
        try:
            result = await asyncio.wait_for(awaitable, timeout=self.settings.fetch_timeout_seconds)
        except ReportingError:
            raise
        except asyncio.TimeoutError as e:
            logger.error("Fetch timed out", fetch=name, timeout=self.settings.fetch_timeout_seconds)
            raise DataFetchFailure(name, "timed out") from e
        except Exception as e:
            logger.error("Fetch failed", fetch=name, error=str(e), error_type=type(e).__name__)
            raise DataFetchFailure(name, str(e) or type(e).__name__) from e

        logger.debug("Fetch completed", fetch=name, duration_ms=round((time.perf_counter() - started) * 1000, 2))
        return result

    async def _fetch_all(self, fetches: Dict[str, Awaitable[Any]]) -> Dict[str, Any]:
        """Run independent reads concurrently; all finish before the first failure is raised."""
        names = list(fetches)
        results = await asyncio.gather(
            *(self._fetch(name, fetches[name]) for name in names),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result
        return dict(zip(names, results))

    async def _get_seller(self, seller_id: uuid.UUID) -> SellerSnapshot:
        seller = await self._fetch("seller", self.store.fetch_seller_snapshot(seller_id))
        if seller is None:
            logger.info("Seller not found", seller_id=str(seller_id))
            raise SellerNotFound(seller_id)
        return seller

    async def _build(
        self,
        seller_id: uuid.UUID,
        window: ReportingWindow,
        include_recent_orders: bool,
    ) -> DashboardPayload:
        started = time.perf_counter()
        seller = await self._get_seller(seller_id)

        fetches = {
            "current_metrics": self.store.fetch_daily_metrics(
                seller_id, window.first_day, window.last_day
            ),
            "previous_metrics": self.store.fetch_daily_metrics(
                seller_id, window.prev_first_day, window.prev_last_day
            ),
            "top_listings": self.store.fetch_top_listings(
                seller_id, self.settings.top_listings_limit
            ),
        }
        if include_recent_orders:
            fetches["recent_orders"] = self.store.fetch_recent_orders(
                seller_id, window.start_date, self.settings.recent_orders_limit
            )
        results = await self._fetch_all(fetches)

        current = accumulate(results["current_metrics"])
        previous = accumulate(results["previous_metrics"])
        payload = build_payload(
            window=window,
            seller=seller,
            totals=current,
            growth=compute_growth_set(current, previous),
            series=build_chart_series(results["current_metrics"], window.days, window.last_day),
            top_listings=results["top_listings"],
            recent_orders=results.get("recent_orders", []),
        )

        logger.info(
            "Dashboard assembled",
            seller_id=str(seller_id),
            period=window.period,
            days=window.days,
            current_records=len(results["current_metrics"]),
            previous_records=len(results["previous_metrics"]),
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        return payload

    async def build_dashboard(
        self,
        seller_id: uuid.UUID,
        period: Union[str, ReportingPeriod] = ReportingPeriod.SEVEN_DAYS,
        now: Optional[datetime] = None,
    ) -> DashboardPayload:
        """
        Dashboard for a period selector, including recent orders.

        Raises:
            InvalidPeriod: Unrecognized selector
            SellerNotFound: Unknown seller
            DataFetchFailure: Any read failed or timed out
        """
        window = resolve_period(period, now=now, tz=self.settings.timezone)
        return await self._build(seller_id, window, include_recent_orders=True)

    async def build_analytics(
        self,
        seller_id: uuid.UUID,
        period: Union[str, ReportingPeriod] = ReportingPeriod.THIRTY_DAYS,
        start: Optional[date] = None,
        end: Optional[date] = None,
        now: Optional[datetime] = None,
    ) -> DashboardPayload:
        """
        Analytics view: an explicit start/end range when both are given,
        otherwise the period selector. Recent orders are not included.
        """
        if start is not None and end is not None:
            window = resolve_range(start, end, tz=self.settings.timezone)
        else:
            window = resolve_period(period, now=now, tz=self.settings.timezone)
        return await self._build(seller_id, window, include_recent_orders=False)

    async def build_counts(self, seller_id: uuid.UUID, now: Optional[datetime] = None) -> SellerCounts:
        """Navigation badge counters with last-7-days activity."""
        await self._get_seller(seller_id)
        window = resolve_period(ReportingPeriod.SEVEN_DAYS, now=now, tz=self.settings.timezone)

        results = await self._fetch_all({
            "counts": self.store.fetch_seller_counts(seller_id, self.settings.low_stock_threshold),
            "recent_metrics": self.store.fetch_daily_metrics(
                seller_id, window.first_day, window.last_day
            ),
        })
        return build_seller_counts(results["counts"], accumulate(results["recent_metrics"]))
