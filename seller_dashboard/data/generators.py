"""
Synthetic Data Generator

Generates realistic marketplace data for development and demos:
- Sellers with Saudi business profiles
- Auto-part listings with fitment and photos
- Buyers, orders and order items (15% VAT, amounts in halalas)
- Seller daily metrics with a weekly pattern (quieter Fridays)

Every generator returns polars DataFrames whose columns match the database
models, so the seed script can insert rows as-is.
"""

from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, List, Optional, Tuple
import uuid

import numpy as np
import polars as pl
import structlog
from faker import Faker

from seller_dashboard.database.models import (
    BusinessType,
    ListingStatus,
    OrderStatus,
    SellerStatus,
)

logger = structlog.get_logger(__name__)


# =============================================================================
# CONFIGURATION
# =============================================================================

VAT_RATE = 0.15
FRIDAY = 4  # date.weekday()
FRIDAY_MULTIPLIER = 0.6

CITIES = ["الرياض", "جدة", "الدمام", "مكة", "المدينة المنورة", "الخبر", "أبها"]

# (Arabic title, English title, make, model, price range in SAR)
PARTS = [
    ("محرك كامري", "Camry Engine", "Toyota", "Camry", (6000, 11000)),
    ("جير أكورد", "Accord Transmission", "Honda", "Accord", (4000, 7000)),
    ("مكينة ألتيما", "Altima Engine", "Nissan", "Altima", (5000, 8000)),
    ("صدام أمامي كورولا", "Corolla Front Bumper", "Toyota", "Corolla", (800, 1600)),
    ("مكيف سوناتا", "Sonata AC Compressor", "Hyundai", "Sonata", (1200, 2400)),
    ("دينمو لكزس", "Lexus Alternator", "Lexus", "ES350", (1500, 2800)),
    ("رديتر باترول", "Patrol Radiator", "Nissan", "Patrol", (900, 1900)),
    ("شمعات تاهو", "Tahoe Headlights", "Chevrolet", "Tahoe", (1100, 2500)),
    ("فحمات فرامل اكسنت", "Accent Brake Pads", "Hyundai", "Accent", (150, 400)),
    ("مساعدات يوكن", "Yukon Shock Absorbers", "GMC", "Yukon", (700, 1500)),
]

LISTING_STATUSES = [
    (ListingStatus.PUBLISHED, 0.75),
    (ListingStatus.DRAFT, 0.12),
    (ListingStatus.SOLD, 0.10),
    (ListingStatus.SUSPENDED, 0.03),
]

ORDER_STATUSES = [
    (OrderStatus.DELIVERED, 0.55),
    (OrderStatus.SHIPPED, 0.12),
    (OrderStatus.READY_TO_SHIP, 0.06),
    (OrderStatus.PROCESSING, 0.06),
    (OrderStatus.CONFIRMED, 0.05),
    (OrderStatus.PENDING, 0.08),
    (OrderStatus.CANCELLED, 0.05),
    (OrderStatus.RETURNED, 0.03),
]


def _pick(rng: np.random.Generator, weighted: List[Tuple[object, float]]):
    values = [value for value, _ in weighted]
    weights = np.array([weight for _, weight in weighted])
    return values[rng.choice(len(values), p=weights / weights.sum())]


# =============================================================================
# GENERATORS
# =============================================================================

class SellerGenerator:
    """Generate seller profiles with varying completeness"""

    def __init__(self, fake: Faker, rng: np.random.Generator):
        self.fake = fake
        self.rng = rng

    def _present(self, probability: float) -> bool:
        """Optional profile fields are left empty for some sellers"""
        return bool(self.rng.random() < probability)

    def generate(self, n: int = 5) -> pl.DataFrame:
        sellers = []
        for _ in range(n):
            verified = bool(self.rng.random() < 0.6)
            sellers.append({
                "id": str(uuid.uuid4()),
                "business_name": self.fake.company(),
                "business_name_en": f"{self.fake.last_name()} Auto Parts" if self._present(0.7) else None,
                "business_type": _pick(self.rng, [
                    (BusinessType.INDIVIDUAL.value, 0.4),
                    (BusinessType.COMPANY.value, 0.3),
                    (BusinessType.DEALERSHIP.value, 0.1),
                    (BusinessType.SCRAPYARD.value, 0.2),
                ]),
                "status": SellerStatus.ACTIVE.value if verified else SellerStatus.APPROVED.value,
                "commercial_license": f"10{self.rng.integers(10**7, 10**8)}" if self._present(0.7) else None,
                "tax_number": f"3{self.rng.integers(10**13, 10**14)}" if self._present(0.5) else None,
                "city": str(self.rng.choice(CITIES)),
                "district": self.fake.street_name() if self._present(0.6) else None,
                "address": self.fake.street_address() if self._present(0.5) else None,
                "phone": f"+9665{self.rng.integers(10**7, 10**8)}" if self._present(0.9) else None,
                "whatsapp": f"+9665{self.rng.integers(10**7, 10**8)}" if self._present(0.5) else None,
                "description": self.fake.paragraph(nb_sentences=2) if self._present(0.6) else None,
                "logo_url": f"https://cdn.example.sa/logos/{uuid.uuid4().hex}.png" if self._present(0.4) else None,
                "verified": verified,
                "rating": round(float(self.rng.uniform(3.5, 5.0)), 1),
                "review_count": int(self.rng.integers(0, 120)),
                "total_sales": int(self.rng.integers(0, 500)),
            })
        return pl.DataFrame(sellers)


class ListingGenerator:
    """Generate auto-part listings for a set of sellers"""

    def __init__(self, rng: np.random.Generator):
        self.rng = rng

    def generate(self, sellers_df: pl.DataFrame, per_seller: int = 10) -> Tuple[pl.DataFrame, pl.DataFrame]:
        """Returns (listings, listing_photos)"""
        listings = []
        photos = []
        for seller_id in sellers_df["id"].to_list():
            for _ in range(per_seller):
                title_ar, title_en, make, model, (low, high) = PARTS[self.rng.integers(len(PARTS))]
                year = int(self.rng.integers(2012, 2023))
                listing_id = str(uuid.uuid4())
                listings.append({
                    "id": listing_id,
                    "seller_id": seller_id,
                    "title_ar": f"{title_ar} {year}",
                    "title_en": f"{year} {title_en}",
                    "sku": f"SKU-{uuid.uuid4().hex[:12].upper()}",
                    "make": make,
                    "model": model,
                    "from_year": year - int(self.rng.integers(0, 3)),
                    "to_year": year + int(self.rng.integers(0, 3)),
                    "price_halalas": int(self.rng.integers(low, high)) * 100,
                    "quantity": int(self.rng.choice([0, 1, 2, 3, 5, 8, 12, 20])),
                    "status": _pick(self.rng, [(s.value, w) for s, w in LISTING_STATUSES]),
                    "is_active": bool(self.rng.random() > 0.05),
                    "view_count": int(self.rng.poisson(150)),
                })
                for sort_order in range(int(self.rng.integers(0, 4))):
                    photos.append({
                        "id": str(uuid.uuid4()),
                        "listing_id": listing_id,
                        "url": f"https://cdn.example.sa/listings/{listing_id}/{sort_order}.jpg",
                        "sort_order": sort_order,
                    })
        return pl.DataFrame(listings), pl.DataFrame(
            photos, schema={"id": pl.Utf8, "listing_id": pl.Utf8, "url": pl.Utf8, "sort_order": pl.Int64}
        )


class OrderGenerator:
    """Generate buyers, orders and order items against published listings"""

    def __init__(self, fake: Faker, rng: np.random.Generator):
        self.fake = fake
        self.rng = rng

    def generate_buyers(self, n: int = 50) -> pl.DataFrame:
        return pl.DataFrame([
            {
                "id": str(uuid.uuid4()),
                "name": self.fake.name(),
                "email": f"buyer{i}.{uuid.uuid4().hex[:6]}@example.sa",
                "phone": f"+9665{self.rng.integers(10**7, 10**8)}",
            }
            for i in range(n)
        ])

    def generate(
        self,
        listings_df: pl.DataFrame,
        buyers_df: pl.DataFrame,
        n: int = 200,
        days: int = 30,
        now: Optional[datetime] = None,
    ) -> Tuple[pl.DataFrame, pl.DataFrame]:
        """Returns (orders, order_items) created over the last ``days`` days"""
        now = now or datetime.now(timezone.utc).replace(tzinfo=None)
        published = listings_df.filter(pl.col("status") == ListingStatus.PUBLISHED.value)
        listing_rows = published.select(["id", "price_halalas"]).to_dicts()
        buyer_ids = buyers_df["id"].to_list()
        if not listing_rows:
            raise ValueError("Orders need at least one published listing")

        orders = []
        items = []
        for _ in range(n):
            order_id = str(uuid.uuid4())
            created_at = now - timedelta(seconds=int(self.rng.integers(0, days * 86400)))

            subtotal = 0
            n_items = min(int(self.rng.choice([1, 2, 3], p=[0.7, 0.2, 0.1])), len(listing_rows))
            for index in self.rng.choice(len(listing_rows), size=n_items, replace=False):
                listing = listing_rows[index]
                quantity = int(self.rng.choice([1, 2], p=[0.85, 0.15]))
                items.append({
                    "id": str(uuid.uuid4()),
                    "order_id": order_id,
                    "listing_id": listing["id"],
                    "quantity": quantity,
                    "unit_price_halalas": listing["price_halalas"],
                })
                subtotal += listing["price_halalas"] * quantity

            tax_amount = round(subtotal * VAT_RATE)
            shipping_amount = int(self.rng.choice([0, 2500, 5000]))
            orders.append({
                "id": order_id,
                "order_number": f"ORD-{created_at:%Y%m%d}-{uuid.uuid4().hex[:6].upper()}",
                "buyer_id": str(self.rng.choice(buyer_ids)),
                "status": _pick(self.rng, [(s.value, w) for s, w in ORDER_STATUSES]),
                "subtotal": subtotal,
                "tax_amount": tax_amount,
                "shipping_amount": shipping_amount,
                "total": subtotal + tax_amount + shipping_amount,
                "created_at": created_at,
            })
        return pl.DataFrame(orders), pl.DataFrame(items)


class DailyMetricsGenerator:
    """Generate one seller_daily_metrics row per seller per day"""

    def __init__(self, rng: np.random.Generator):
        self.rng = rng

    def generate(
        self,
        sellers_df: pl.DataFrame,
        days: int = 30,
        today: Optional[date] = None,
    ) -> pl.DataFrame:
        today = today or datetime.now(timezone.utc).date()
        rows = []
        for seller_id in sellers_df["id"].to_list():
            for offset in range(days):
                day = today - timedelta(days=offset)
                multiplier = FRIDAY_MULTIPLIER if day.weekday() == FRIDAY else 1.0

                views = int(self.rng.integers(15, 40))
                inquiries = int(views * self.rng.uniform(0.1, 0.2))
                orders = int(inquiries * self.rng.uniform(0.2, 0.5))
                avg_order_sar = self.rng.uniform(800, 2300)

                rows.append({
                    "id": str(uuid.uuid4()),
                    "seller_id": seller_id,
                    "date": day,
                    "views": round(views * multiplier),
                    "inquiries": round(inquiries * multiplier),
                    "orders": round(orders * multiplier),
                    "revenue": round(orders * avg_order_sar * 100 * multiplier),
                    "new_listings": int(self.rng.integers(1, 4)) if self.rng.random() < 0.2 else 0,
                    "unique_customers": round(orders * multiplier * self.rng.uniform(0.7, 1.0)),
                })

        return pl.DataFrame(rows).sort(["seller_id", "date"])


# =============================================================================
# MAIN GENERATOR
# =============================================================================

class DataGenerator:
    """Generate a complete, internally consistent marketplace dataset"""

    def __init__(self, seed: int = 42, locale: str = "ar_SA"):
        self.fake = Faker(locale)
        self.fake.seed_instance(seed)
        self.rng = np.random.default_rng(seed)

    def generate_all(
        self,
        n_sellers: int = 5,
        listings_per_seller: int = 10,
        n_buyers: int = 50,
        n_orders: int = 200,
        days: int = 30,
    ) -> Dict[str, pl.DataFrame]:
        """Tables in insertion order, keyed by table name"""
        sellers = SellerGenerator(self.fake, self.rng).generate(n_sellers)
        listings, photos = ListingGenerator(self.rng).generate(sellers, listings_per_seller)
        order_gen = OrderGenerator(self.fake, self.rng)
        buyers = order_gen.generate_buyers(n_buyers)
        orders, order_items = order_gen.generate(listings, buyers, n=n_orders, days=days)
        metrics = DailyMetricsGenerator(self.rng).generate(sellers, days=days)

        data = {
            "users": buyers,
            "sellers": sellers,
            "listings": listings,
            "listing_photos": photos,
            "orders": orders,
            "order_items": order_items,
            "seller_daily_metrics": metrics,
        }
        logger.info("Synthetic dataset generated", **{name: df.height for name, df in data.items()})
        return data

    @staticmethod
    def save(data: Dict[str, pl.DataFrame], output_dir: str) -> None:
        """Write every table as Parquet"""
        path = Path(output_dir)
        path.mkdir(parents=True, exist_ok=True)
        for name, df in data.items():
            df.write_parquet(path / f"{name}.parquet")
            logger.info("Saved table", table=name, rows=df.height, path=str(path))
