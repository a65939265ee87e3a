"""
Test Suite Configuration
"""
import asyncio
from datetime import date, datetime, timedelta, timezone
from typing import AsyncGenerator, Dict, List, Optional
import uuid

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from seller_dashboard.config import ReportingSettings, Settings
from seller_dashboard.database.models import (
    Base,
    Listing,
    ListingPhoto,
    ListingStatus,
    Order,
    OrderItem,
    OrderStatus,
    Seller,
    SellerDailyMetric,
    User,
)
from seller_dashboard.reporting.records import (
    CountsSnapshot,
    DailyMetricRecord,
    ListingSummary,
    OrderSummary,
    SellerSnapshot,
)
from seller_dashboard.serving import cache

# Reference instant used across the suite
NOW = datetime(2024, 12, 16, 18, 0, tzinfo=timezone.utc)
TODAY = NOW.date()


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings"""
    return Settings(app_env="testing", debug=True)


@pytest.fixture
def reporting_settings() -> ReportingSettings:
    return ReportingSettings(timezone="UTC", fetch_timeout_seconds=0.5)


# =============================================================================
# DATABASE
# =============================================================================

@pytest.fixture
def database_url(tmp_path) -> str:
    """File database so concurrent sessions see the same data"""
    return f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"


@pytest.fixture
async def test_engine(database_url):
    """Create test database engine"""
    engine = create_async_engine(database_url, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def test_db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session"""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def seeded(session_factory) -> Dict[str, object]:
    """
    One seller with listings, orders and daily metrics, plus a second seller
    sharing an order with the first.
    """
    buyer = User(id=uuid.uuid4(), name="محمد العتيبي", email="buyer@example.sa")
    anonymous_buyer = User(id=uuid.uuid4(), name=None, email="noname@example.sa")

    seller = Seller(
        id=uuid.uuid4(),
        business_name="قطع غيار الرياض",
        business_name_en="Riyadh Parts",
        city="الرياض",
        phone="+966500000001",
        commercial_license="1010101010",
        verified=True,
        rating=4.6,
        review_count=12,
        total_sales=40,
    )
    other_seller = Seller(id=uuid.uuid4(), business_name="جدة أوتو", city="جدة")

    engine_listing = Listing(
        id=uuid.uuid4(), seller_id=seller.id, title_ar="محرك كامري 2018", title_en="2018 Camry Engine",
        sku="SKU-ENGINE", price_halalas=850000, quantity=1,
        status=ListingStatus.PUBLISHED, is_active=True, view_count=300,
    )
    bumper = Listing(
        id=uuid.uuid4(), seller_id=seller.id, title_ar="صدام كورولا", title_en="Corolla Bumper",
        sku="SKU-BUMPER", price_halalas=120050, quantity=0,
        status=ListingStatus.PUBLISHED, is_active=True, view_count=120,
    )
    draft = Listing(
        id=uuid.uuid4(), seller_id=seller.id, title_ar="مسودة", sku="SKU-DRAFT",
        price_halalas=10000, quantity=10, status=ListingStatus.DRAFT, is_active=True, view_count=999,
    )
    archived = Listing(
        id=uuid.uuid4(), seller_id=seller.id, title_ar="قديم", sku="SKU-OLD",
        price_halalas=10000, quantity=3, status=ListingStatus.PUBLISHED, is_active=False, view_count=500,
    )
    other_listing = Listing(
        id=uuid.uuid4(), seller_id=other_seller.id, title_ar="رديتر", sku="SKU-OTHER",
        price_halalas=90000, quantity=4, status=ListingStatus.PUBLISHED, is_active=True, view_count=50,
    )
    photos = [
        ListingPhoto(listing_id=engine_listing.id, url="https://cdn.example.sa/engine-1.jpg", sort_order=1),
        ListingPhoto(listing_id=engine_listing.id, url="https://cdn.example.sa/engine-0.jpg", sort_order=0),
    ]

    naive_now = NOW.replace(tzinfo=None)
    recent_order = Order(
        id=uuid.uuid4(), order_number="ORD-1001", buyer_id=buyer.id, status=OrderStatus.PENDING,
        subtotal=850000, tax_amount=127500, total=977500, created_at=naive_now - timedelta(days=1),
    )
    shared_order = Order(
        id=uuid.uuid4(), order_number="ORD-1002", buyer_id=anonymous_buyer.id, status=OrderStatus.SHIPPED,
        subtotal=330100, tax_amount=49515, total=379615, created_at=naive_now - timedelta(hours=2),
    )
    old_order = Order(
        id=uuid.uuid4(), order_number="ORD-0900", buyer_id=buyer.id, status=OrderStatus.DELIVERED,
        subtotal=120050, tax_amount=18008, total=138058, created_at=naive_now - timedelta(days=20),
    )
    items = [
        OrderItem(order_id=recent_order.id, listing_id=engine_listing.id, quantity=1, unit_price_halalas=850000),
        OrderItem(order_id=shared_order.id, listing_id=bumper.id, quantity=2, unit_price_halalas=120050),
        OrderItem(order_id=shared_order.id, listing_id=other_listing.id, quantity=1, unit_price_halalas=90000),
        OrderItem(order_id=old_order.id, listing_id=bumper.id, quantity=1, unit_price_halalas=120050),
    ]

    metrics = [
        SellerDailyMetric(seller_id=seller.id, date=TODAY - timedelta(days=offset), views=10, inquiries=2,
                          orders=1, revenue=15050, unique_customers=1)
        for offset in range(3)
    ]
    metrics.append(
        SellerDailyMetric(seller_id=seller.id, date=TODAY - timedelta(days=8), views=4, revenue=5000)
    )

    async with session_factory() as session:
        session.add_all([buyer, anonymous_buyer, seller, other_seller])
        await session.flush()
        session.add_all([engine_listing, bumper, draft, archived, other_listing])
        await session.flush()
        session.add_all(photos + [recent_order, shared_order, old_order])
        await session.flush()
        session.add_all(items + metrics)
        await session.commit()

    return {
        "seller_id": seller.id,
        "other_seller_id": other_seller.id,
        "engine_listing_id": engine_listing.id,
        "bumper_id": bumper.id,
        "recent_order_id": recent_order.id,
        "shared_order_id": shared_order.id,
    }


# =============================================================================
# IN-MEMORY STORE
# =============================================================================

class FakeMetricsStore:
    """MetricsStore double with injectable failures and delays"""

    def __init__(
        self,
        seller: Optional[SellerSnapshot] = None,
        metrics: Optional[List[DailyMetricRecord]] = None,
        top_listings: Optional[List[ListingSummary]] = None,
        recent_orders: Optional[List[OrderSummary]] = None,
        counts: Optional[CountsSnapshot] = None,
    ):
        self.seller = seller
        self.metrics = list(metrics or [])
        self.top_listings = list(top_listings or [])
        self.recent_orders = list(recent_orders or [])
        self.counts = counts or CountsSnapshot(orders_by_status={})
        self.failures: Dict[str, BaseException] = {}
        self.delays: Dict[str, float] = {}
        self.calls: List[tuple] = []
        self.completed: List[str] = []

    async def _enter(self, name: str, *args) -> None:
        self.calls.append((name, *args))
        if name in self.delays:
            await asyncio.sleep(self.delays[name])
        if name in self.failures:
            raise self.failures[name]
        self.completed.append(name)

    async def fetch_seller_snapshot(self, seller_id):
        await self._enter("fetch_seller_snapshot", seller_id)
        if self.seller is not None and self.seller.id == seller_id:
            return self.seller
        return None

    async def fetch_daily_metrics(self, seller_id, first_day: date, last_day: date):
        await self._enter("fetch_daily_metrics", first_day, last_day)
        return [record for record in self.metrics if first_day <= record.date <= last_day]

    async def fetch_top_listings(self, seller_id, limit: int):
        await self._enter("fetch_top_listings", limit)
        return self.top_listings[:limit]

    async def fetch_recent_orders(self, seller_id, since: datetime, limit: int):
        await self._enter("fetch_recent_orders", since, limit)
        return [order for order in self.recent_orders if order.created_at >= since][:limit]

    async def fetch_seller_counts(self, seller_id, low_stock_threshold: int):
        await self._enter("fetch_seller_counts", low_stock_threshold)
        return self.counts


@pytest.fixture
def seller_snapshot() -> SellerSnapshot:
    return SellerSnapshot(
        id=uuid.uuid4(),
        business_name="قطع غيار الرياض",
        rating=4.5,
        review_count=8,
        total_sales=25,
        verified=True,
        active_listings=6,
    )


@pytest.fixture
def fake_store(seller_snapshot) -> FakeMetricsStore:
    """Seller S1 with the Dec 10-16 views series and an empty previous week"""
    views = [5, 0, 8, 12, 0, 20, 15]
    metrics = [
        DailyMetricRecord(date=date(2024, 12, 10) + timedelta(days=i), views=v)
        for i, v in enumerate(views)
        if v
    ]
    return FakeMetricsStore(seller=seller_snapshot, metrics=metrics)


@pytest.fixture
def store_factory():
    """Build FakeMetricsStore instances inside tests"""
    return FakeMetricsStore


# =============================================================================
# REDIS
# =============================================================================

class UnreachableRedis:
    """Redis client whose every command fails as if the server went away"""

    def __init__(self):
        self.calls: List[str] = []

    def _fail(self, name: str):
        self.calls.append(name)
        raise RedisConnectionError("redis down")

    async def get(self, key):
        self._fail("get")

    async def set(self, key, value):
        self._fail("set")

    async def setex(self, key, ttl, value):
        self._fail("setex")

    async def delete(self, *keys):
        self._fail("delete")

    async def scan_iter(self, match=None):
        self._fail("scan_iter")
        yield


@pytest.fixture
def unreachable_redis(monkeypatch) -> UnreachableRedis:
    """Install a failing client as the process redis connection"""
    client = UnreachableRedis()
    monkeypatch.setattr(cache, "_redis_client", client)
    return client
