"""
Database Seeding

Loads a synthetic marketplace dataset (sellers, listings, buyers, orders and
30 days of seller daily metrics) into the configured database.

Usage:
    python -m seller_dashboard.ingestion.seed_db --sellers 5 --days 30
"""

import argparse
import asyncio
from typing import Any, Dict, List, Type
import uuid

import polars as pl
import structlog
from sqlalchemy import Uuid
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from seller_dashboard.config.logging import configure_logging
from seller_dashboard.data.generators import DataGenerator
from seller_dashboard.database.connection import close_database, get_db, init_database
from seller_dashboard.database.models import (
    Base,
    Listing,
    ListingPhoto,
    Order,
    OrderItem,
    Seller,
    SellerDailyMetric,
    User,
)

logger = structlog.get_logger(__name__)

CHUNK_SIZE = 1000

# Generated table name -> model, in foreign key order
TABLES: Dict[str, Type[Base]] = {
    "users": User,
    "sellers": Seller,
    "listings": Listing,
    "listing_photos": ListingPhoto,
    "orders": Order,
    "order_items": OrderItem,
    "seller_daily_metrics": SellerDailyMetric,
}


def to_records(model: Type[Base], df: pl.DataFrame) -> List[Dict[str, Any]]:
    """DataFrame rows as insert parameters, with UUID columns parsed."""
    uuid_columns = [
        column.name
        for column in model.__table__.columns
        if isinstance(column.type, Uuid) and column.name in df.columns
    ]
    records = df.to_dicts()
    for record in records:
        for name in uuid_columns:
            if record[name] is not None:
                record[name] = uuid.UUID(record[name])
    return records


async def execute_batch_insert(model: Type[Base], records: List[Dict[str, Any]]) -> None:
    """Insert records in chunks, skipping rows that already exist."""
    if not records:
        return

    async with get_db() as db:
        insert = pg_insert if db.get_bind().dialect.name == "postgresql" else sqlite_insert
        for i in range(0, len(records), CHUNK_SIZE):
            chunk = records[i:i + CHUNK_SIZE]
            await db.execute(insert(model).values(chunk).on_conflict_do_nothing())

    logger.info("Inserted records", table=model.__tablename__, rows=len(records))


async def seed(n_sellers: int = 5, days: int = 30, create_tables: bool = False) -> Dict[str, int]:
    """Generate and load a dataset; returns row counts per table."""
    engine = await init_database()
    try:
        if create_tables:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)

        data = DataGenerator().generate_all(n_sellers=n_sellers, days=days)
        for name, model in TABLES.items():
            await execute_batch_insert(model, to_records(model, data[name]))
    finally:
        await close_database()

    return {name: data[name].height for name in TABLES}


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the seller dashboard database")
    parser.add_argument("--sellers", type=int, default=5)
    parser.add_argument("--days", type=int, default=30)
    parser.add_argument("--create-tables", action="store_true", help="Create missing tables first")
    args = parser.parse_args()

    configure_logging()
    counts = asyncio.run(seed(args.sellers, args.days, args.create_tables))
    logger.info("Database seeding completed", **counts)


if __name__ == "__main__":
    main()
