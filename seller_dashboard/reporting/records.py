"""
Reporting Records

Plain value types exchanged between the metrics store and the aggregator.
They are independent of the ORM so the aggregator can be fed from any
source, including in-memory fakes.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional
import uuid


@dataclass(frozen=True)
class DailyMetricRecord:
    """One seller's counters for one calendar day. Revenue in halalas."""
    date: date
    views: int = 0
    inquiries: int = 0
    orders: int = 0
    revenue: int = 0
    new_listings: int = 0
    unique_customers: int = 0


@dataclass(frozen=True)
class SellerSnapshot:
    """Seller reputation counters shown on the dashboard overview"""
    id: uuid.UUID
    business_name: str
    rating: float = 0.0
    review_count: int = 0
    total_sales: int = 0
    verified: bool = False
    active_listings: int = 0


@dataclass(frozen=True)
class ListingSummary:
    """A listing as ranked by view count. Price in halalas."""
    id: uuid.UUID
    title: str
    view_count: int
    price: int
    localized_title: Optional[str] = None
    primary_image_url: Optional[str] = None


@dataclass(frozen=True)
class OrderSummary:
    """A recent order as seen by one seller. Total in halalas."""
    id: uuid.UUID
    order_number: str
    buyer_name: str
    item_count: int
    total: int
    status: str
    created_at: datetime


@dataclass(frozen=True)
class CountsSnapshot:
    """Raw counters behind the seller navigation badges"""
    orders_by_status: dict
    total_listings: int = 0
    draft_listings: int = 0
    low_stock: int = 0
    out_of_stock: int = 0
    archived_listings: int = 0
