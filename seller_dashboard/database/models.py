"""
Database Models - Marketplace Seller Schema

Relational schema read by the seller reporting layer:

Marketplace Tables:
- User: buyer accounts
- Seller: seller business profile and reputation counters
- Listing / ListingPhoto: automotive-part listings with photos
- Order / OrderItem: buyer orders and their line items

Analytics Tables:
- SellerDailyMetric: one row per (seller, calendar day) of tracked counters,
  incremented by the event tracking write path

Monetary columns are integer halalas (1 SAR = 100 halalas).
"""

from datetime import datetime, date
from enum import Enum
from typing import Optional, List
import uuid

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Enum as SQLEnum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all database models"""
    pass


# =============================================================================
# ENUMERATIONS
# =============================================================================

class SellerStatus(str, Enum):
    """Seller account status"""
    PENDING_REVIEW = "PENDING_REVIEW"
    APPROVED = "APPROVED"
    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"
    REJECTED = "REJECTED"


class BusinessType(str, Enum):
    """Seller business type"""
    INDIVIDUAL = "INDIVIDUAL"
    COMPANY = "COMPANY"
    DEALERSHIP = "DEALERSHIP"
    SCRAPYARD = "SCRAPYARD"


class ListingStatus(str, Enum):
    """Listing lifecycle status"""
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    SOLD = "SOLD"
    SUSPENDED = "SUSPENDED"


class OrderStatus(str, Enum):
    """Order status enumeration"""
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PROCESSING = "PROCESSING"
    READY_TO_SHIP = "READY_TO_SHIP"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"
    RETURNED = "RETURNED"


# =============================================================================
# MARKETPLACE TABLES
# =============================================================================

class User(Base):
    """Buyer account (only the fields the seller views display)"""
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[Optional[str]] = mapped_column(String(200))
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(20))

    created_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now()
    )

    orders: Mapped[List["Order"]] = relationship(back_populates="buyer")


class Seller(Base):
    """
    Seller Profile Table

    Business identity, contact details and reputation counters of a
    marketplace seller. Rating and review count are maintained by the
    review flow; total_sales by order completion.
    """
    __tablename__ = "sellers"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("users.id"), unique=True
    )

    # Business identity
    business_name: Mapped[str] = mapped_column(String(200), nullable=False)
    business_name_en: Mapped[Optional[str]] = mapped_column(String(200))
    business_type: Mapped[BusinessType] = mapped_column(
        SQLEnum(BusinessType), default=BusinessType.INDIVIDUAL
    )
    status: Mapped[SellerStatus] = mapped_column(
        SQLEnum(SellerStatus), default=SellerStatus.PENDING_REVIEW
    )
    commercial_license: Mapped[Optional[str]] = mapped_column(String(50))
    tax_number: Mapped[Optional[str]] = mapped_column(String(50))  # VAT registration

    # Location and contact
    city: Mapped[str] = mapped_column(String(100), nullable=False)
    district: Mapped[Optional[str]] = mapped_column(String(100))
    address: Mapped[Optional[str]] = mapped_column(String(500))
    phone: Mapped[Optional[str]] = mapped_column(String(20))
    whatsapp: Mapped[Optional[str]] = mapped_column(String(20))

    # Storefront
    description: Mapped[Optional[str]] = mapped_column(Text)
    description_en: Mapped[Optional[str]] = mapped_column(Text)
    logo_url: Mapped[Optional[str]] = mapped_column(String(1000))

    # Reputation
    verified: Mapped[bool] = mapped_column(Boolean, default=False)
    verified_at: Mapped[Optional[datetime]] = mapped_column(DateTime)
    rating: Mapped[float] = mapped_column(Float, default=0)
    review_count: Mapped[int] = mapped_column(Integer, default=0)
    total_sales: Mapped[int] = mapped_column(Integer, default=0)

    # Audit
    created_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    listings: Mapped[List["Listing"]] = relationship(back_populates="seller")
    daily_metrics: Mapped[List["SellerDailyMetric"]] = relationship(back_populates="seller")

    __table_args__ = (
        Index("ix_sellers_status", "status"),
        Index("ix_sellers_city", "city"),
    )


class Listing(Base):
    """
    Listing Table

    An automotive part offered by a seller. Price in halalas.
    """
    __tablename__ = "listings"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    seller_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("sellers.id"), nullable=False
    )

    title_ar: Mapped[str] = mapped_column(String(300), nullable=False)
    title_en: Mapped[Optional[str]] = mapped_column(String(300))
    sku: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)

    # Vehicle fitment
    make: Mapped[Optional[str]] = mapped_column(String(100))
    model: Mapped[Optional[str]] = mapped_column(String(100))
    from_year: Mapped[Optional[int]] = mapped_column(Integer)
    to_year: Mapped[Optional[int]] = mapped_column(Integer)

    price_halalas: Mapped[int] = mapped_column(Integer, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, default=0)
    status: Mapped[ListingStatus] = mapped_column(
        SQLEnum(ListingStatus), default=ListingStatus.DRAFT
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    view_count: Mapped[int] = mapped_column(Integer, default=0)

    published_at: Mapped[Optional[datetime]] = mapped_column(DateTime)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    seller: Mapped["Seller"] = relationship(back_populates="listings")
    photos: Mapped[List["ListingPhoto"]] = relationship(
        back_populates="listing", order_by="ListingPhoto.sort_order"
    )
    order_items: Mapped[List["OrderItem"]] = relationship(back_populates="listing")

    __table_args__ = (
        Index("ix_listings_seller", "seller_id"),
        Index("ix_listings_seller_status", "seller_id", "status", "is_active"),
        Index("ix_listings_view_count", "view_count"),
    )


class ListingPhoto(Base):
    """Listing photo, lowest sort_order is the primary image"""
    __tablename__ = "listing_photos"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    listing_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("listings.id"), nullable=False
    )
    url: Mapped[str] = mapped_column(String(1000), nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, default=0)

    listing: Mapped["Listing"] = relationship(back_populates="photos")


class Order(Base):
    """
    Order Table

    A buyer order. An order may contain items from several sellers; seller
    views only count the items whose listing belongs to them.
    """
    __tablename__ = "orders"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    order_number: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    buyer_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id"), nullable=False
    )

    status: Mapped[OrderStatus] = mapped_column(
        SQLEnum(OrderStatus), default=OrderStatus.PENDING
    )

    # Amounts in halalas
    subtotal: Mapped[int] = mapped_column(Integer, nullable=False)
    tax_amount: Mapped[int] = mapped_column(Integer, default=0)  # 15% VAT
    shipping_amount: Mapped[int] = mapped_column(Integer, default=0)
    total: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    buyer: Mapped["User"] = relationship(back_populates="orders")
    items: Mapped[List["OrderItem"]] = relationship(back_populates="order")

    __table_args__ = (
        Index("ix_orders_buyer", "buyer_id"),
        Index("ix_orders_status", "status"),
        Index("ix_orders_created_at", "created_at"),
    )


class OrderItem(Base):
    """Order line item"""
    __tablename__ = "order_items"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    order_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("orders.id"), nullable=False
    )
    listing_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("listings.id"), nullable=False
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price_halalas: Mapped[int] = mapped_column(Integer, nullable=False)

    order: Mapped["Order"] = relationship(back_populates="items")
    listing: Mapped["Listing"] = relationship(back_populates="order_items")

    __table_args__ = (
        Index("ix_order_items_order", "order_id"),
        Index("ix_order_items_listing", "listing_id"),
    )


# =============================================================================
# ANALYTICS TABLES
# =============================================================================

class SellerDailyMetric(Base):
    """
    Seller Daily Metrics Table

    Grain: one row per seller per calendar day. Rows are created and
    incremented atomically by the event tracking path and only read by the
    reporting aggregator.
    """
    __tablename__ = "seller_daily_metrics"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    seller_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("sellers.id"), nullable=False
    )
    date: Mapped[date] = mapped_column(Date, nullable=False)

    # Counters
    views: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    inquiries: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    orders: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    revenue: Mapped[int] = mapped_column(Integer, default=0, nullable=False)  # halalas
    new_listings: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    unique_customers: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), onupdate=func.now()
    )

    seller: Mapped["Seller"] = relationship(back_populates="daily_metrics")

    __table_args__ = (
        UniqueConstraint("seller_id", "date", name="uq_seller_daily_metrics_seller_date"),
        Index("ix_seller_daily_metrics_date", "date"),
    )
