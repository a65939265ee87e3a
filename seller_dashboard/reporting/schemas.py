"""
Reporting Response Models

Output DTOs of the seller reporting API. Field names are snake_case in
Python and camelCase on the wire. Money is carried as integer halalas up to
this layer and converted to SAR here.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

HALALAS_PER_SAR = 100

# SAR amount, exact in Python and a JSON number on the wire
Sar = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


def halalas_to_sar(amount: int) -> Decimal:
    """Convert integer halalas to a 2-place SAR decimal."""
    return (Decimal(amount) / HALALAS_PER_SAR).quantize(Decimal("0.01"))


class CamelModel(BaseModel):
    """Base model serialized with camelCase aliases"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# DASHBOARD
# =============================================================================

class Overview(CamelModel):
    """Current-window totals and seller reputation"""
    total_views: int
    total_inquiries: int
    total_orders: int
    total_revenue: Sar
    total_new_listings: int
    active_listings: int
    average_rating: float
    total_reviews: int
    total_sales: int
    is_verified: bool


class GrowthPercentages(CamelModel):
    """Growth versus the previous window, in percent"""
    views_growth: float
    inquiries_growth: float
    orders_growth: float
    revenue_growth: float


class ChartDataPoint(CamelModel):
    """One calendar day of the chart series"""
    date: date
    views: int
    inquiries: int
    orders: int
    revenue: Sar


class TopListing(CamelModel):
    """Listing ranked by view count"""
    id: UUID
    title: str
    title_en: Optional[str] = None
    views: int
    price: Sar
    image: Optional[str] = None


class RecentOrder(CamelModel):
    """Recent order containing the seller's items"""
    id: UUID
    order_number: str
    buyer_name: str
    items: int
    total: Sar
    status: str
    created_at: datetime


class PeriodInfo(CamelModel):
    """Bounds of the reported window"""
    start_date: datetime
    end_date: datetime
    period: str


class DashboardPayload(CamelModel):
    """Seller dashboard / analytics response"""
    overview: Overview
    growth: GrowthPercentages
    chart_data: List[ChartDataPoint]
    top_listings: List[TopListing]
    recent_orders: List[RecentOrder] = []
    period: PeriodInfo


# =============================================================================
# NAVIGATION COUNTERS
# =============================================================================

class OrderCounts(CamelModel):
    pending: int = 0
    processing: int = 0
    ready: int = 0
    shipped: int = 0
    completed: int = 0
    returns: int = 0
    total: int = 0


class InventoryCounts(CamelModel):
    total: int = 0
    draft: int = 0
    low_stock: int = 0
    out_of_stock: int = 0
    archived: int = 0


class ActivityCounts(CamelModel):
    recent_views: int = 0
    recent_inquiries: int = 0
    new_customers: int = 0


class CountsSummary(CamelModel):
    active_orders: int = 0
    urgent_actions: int = 0
    total_products: int = 0


class SellerCounts(CamelModel):
    """Badge counters of the seller navigation"""
    orders: OrderCounts
    inventory: InventoryCounts
    activity: ActivityCounts
    summary: CountsSummary


class ProfileScore(CamelModel):
    """Profile completion and trust score, both 0-100"""
    profile_completion: int
    trust_score: int
