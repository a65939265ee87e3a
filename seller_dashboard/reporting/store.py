"""
Reporting Data Access

Read interface consumed by the dashboard aggregator, and its SQLAlchemy
implementation. Each call opens its own session so calls can be awaited
concurrently; an AsyncSession must never be shared between tasks.
"""

from datetime import date, datetime, timezone
from typing import List, Optional, Protocol
import uuid

import structlog
from sqlalchemy import and_, case, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from seller_dashboard.database.models import (
    Listing,
    ListingStatus,
    Order,
    OrderItem,
    Seller,
    SellerDailyMetric,
)
from seller_dashboard.reporting.records import (
    CountsSnapshot,
    DailyMetricRecord,
    ListingSummary,
    OrderSummary,
    SellerSnapshot,
)

logger = structlog.get_logger(__name__)


class MetricsStore(Protocol):
    """Read contract of the reporting aggregator"""

    async def fetch_seller_snapshot(self, seller_id: uuid.UUID) -> Optional[SellerSnapshot]:
        ...

    async def fetch_daily_metrics(
        self,
        seller_id: uuid.UUID,
        first_day: date,
        last_day: date,
    ) -> List[DailyMetricRecord]:
        """Records with ``first_day <= date <= last_day``."""
        ...

    async def fetch_top_listings(self, seller_id: uuid.UUID, limit: int) -> List[ListingSummary]:
        """Published, active listings ordered by view count, highest first."""
        ...

    async def fetch_recent_orders(
        self,
        seller_id: uuid.UUID,
        since: datetime,
        limit: int,
    ) -> List[OrderSummary]:
        """Orders with the seller's items created at or after ``since``, newest first."""
        ...

    async def fetch_seller_counts(
        self,
        seller_id: uuid.UUID,
        low_stock_threshold: int,
    ) -> CountsSnapshot:
        ...


def _as_naive_utc(value: datetime) -> datetime:
    """Timestamps are stored as naive UTC."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _as_aware_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SqlMetricsStore:
    """
    MetricsStore backed by the marketplace database.

    Example:
        store = SqlMetricsStore(get_session_factory())
        records = await store.fetch_daily_metrics(seller_id, first, last)
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def fetch_seller_snapshot(self, seller_id: uuid.UUID) -> Optional[SellerSnapshot]:
        async with self._session_factory() as session:
            seller = await session.get(Seller, seller_id)
            if seller is None:
                return None

            active_listings = await session.scalar(
                select(func.count(Listing.id)).where(
                    Listing.seller_id == seller_id,
                    Listing.status == ListingStatus.PUBLISHED,
                    Listing.is_active.is_(True),
                )
            )

        return SellerSnapshot(
            id=seller.id,
            business_name=seller.business_name,
            rating=seller.rating or 0.0,
            review_count=seller.review_count or 0,
            total_sales=seller.total_sales or 0,
            verified=bool(seller.verified),
            active_listings=active_listings or 0,
        )

    async def fetch_daily_metrics(
        self,
        seller_id: uuid.UUID,
        first_day: date,
        last_day: date,
    ) -> List[DailyMetricRecord]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(SellerDailyMetric)
                .where(
                    and_(
                        SellerDailyMetric.seller_id == seller_id,
                        SellerDailyMetric.date >= first_day,
                        SellerDailyMetric.date <= last_day,
                    )
                )
                .order_by(SellerDailyMetric.date)
            )
            rows = result.scalars().all()

        logger.debug(
            "Daily metrics fetched",
            seller_id=str(seller_id),
            first_day=first_day.isoformat(),
            last_day=last_day.isoformat(),
            rows=len(rows),
        )
        return [
            DailyMetricRecord(
                date=row.date,
                views=row.views,
                inquiries=row.inquiries,
                orders=row.orders,
                revenue=row.revenue,
                new_listings=row.new_listings,
                unique_customers=row.unique_customers,
            )
            for row in rows
        ]

    async def fetch_top_listings(self, seller_id: uuid.UUID, limit: int) -> List[ListingSummary]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(Listing)
                .options(selectinload(Listing.photos))
                .where(
                    Listing.seller_id == seller_id,
                    Listing.status == ListingStatus.PUBLISHED,
                    Listing.is_active.is_(True),
                )
                .order_by(Listing.view_count.desc(), Listing.id)
                .limit(limit)
            )
            listings = result.scalars().all()

        return [
            ListingSummary(
                id=listing.id,
                title=listing.title_ar,
                localized_title=listing.title_en,
                view_count=listing.view_count or 0,
                price=listing.price_halalas,
                primary_image_url=listing.photos[0].url if listing.photos else None,
            )
            for listing in listings
        ]

    async def fetch_recent_orders(
        self,
        seller_id: uuid.UUID,
        since: datetime,
        limit: int,
    ) -> List[OrderSummary]:
        has_seller_item = Order.items.any(OrderItem.listing.has(Listing.seller_id == seller_id))

        async with self._session_factory() as session:
            result = await session.execute(
                select(Order)
                .options(
                    selectinload(Order.buyer),
                    selectinload(Order.items).selectinload(OrderItem.listing),
                )
                .where(has_seller_item, Order.created_at >= _as_naive_utc(since))
                .order_by(Order.created_at.desc(), Order.id)
                .limit(limit)
            )
            orders = result.scalars().all()

        summaries = []
        for order in orders:
            item_count = sum(
                item.quantity for item in order.items if item.listing.seller_id == seller_id
            )
            buyer = order.buyer
            summaries.append(
                OrderSummary(
                    id=order.id,
                    order_number=order.order_number,
                    buyer_name=(buyer.name or buyer.email) if buyer else "",
                    item_count=item_count,
                    total=order.total,
                    status=order.status.value,
                    created_at=_as_aware_utc(order.created_at),
                )
            )
        return summaries

    async def fetch_seller_counts(
        self,
        seller_id: uuid.UUID,
        low_stock_threshold: int,
    ) -> CountsSnapshot:
        sellable = and_(
            Listing.is_active.is_(True),
            Listing.status == ListingStatus.PUBLISHED,
        )

        async with self._session_factory() as session:
            status_rows = await session.execute(
                select(Order.status, func.count(func.distinct(Order.id)).label("orders"))
                .join(Order.items)
                .join(OrderItem.listing)
                .where(Listing.seller_id == seller_id)
                .group_by(Order.status)
            )
            orders_by_status = {row.status.value: row.orders for row in status_rows}

            inventory = (
                await session.execute(
                    select(
                        func.count(Listing.id).label("total"),
                        func.sum(case((Listing.status == ListingStatus.DRAFT, 1), else_=0)).label("draft"),
                        func.sum(
                            case(
                                (and_(sellable, Listing.quantity > 0, Listing.quantity <= low_stock_threshold), 1),
                                else_=0,
                            )
                        ).label("low_stock"),
                        func.sum(case((and_(sellable, Listing.quantity <= 0), 1), else_=0)).label("out_of_stock"),
                        func.sum(case((Listing.is_active.is_(False), 1), else_=0)).label("archived"),
                    ).where(Listing.seller_id == seller_id)
                )
            ).one()

        return CountsSnapshot(
            orders_by_status=orders_by_status,
            total_listings=inventory.total or 0,
            draft_listings=inventory.draft or 0,
            low_stock=inventory.low_stock or 0,
            out_of_stock=inventory.out_of_stock or 0,
            archived_listings=inventory.archived or 0,
        )
