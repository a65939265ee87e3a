"""
Seller Event Tracking

Write path feeding the seller daily metrics table. Every view, inquiry or
order event increments today's row for the seller with a single
INSERT ... ON CONFLICT DO UPDATE, so concurrent events for the same
seller and day are applied atomically by the database instead of through
a read-then-write.
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union
import uuid

import structlog
from sqlalchemy import func
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from seller_dashboard.config import get_settings
from seller_dashboard.database.models import Seller, SellerDailyMetric
from seller_dashboard.reporting.errors import InvalidEvent, SellerNotFound
from seller_dashboard.reporting.periods import get_timezone

logger = structlog.get_logger(__name__)


class EventType(str, Enum):
    """Tracked seller events"""
    VIEW = "view"
    INQUIRY = "inquiry"
    ORDER = "order"


_EVENT_COUNTERS = {
    EventType.VIEW: "views",
    EventType.INQUIRY: "inquiries",
    EventType.ORDER: "orders",
}

_UPSERT_BUILDERS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


def parse_event_type(value: Union[str, EventType]) -> EventType:
    if isinstance(value, EventType):
        return value
    try:
        return EventType(value)
    except ValueError:
        raise InvalidEvent(f"unknown event type {value!r}") from None


def event_increments(
    event_type: Union[str, EventType],
    metadata: Optional[Mapping[str, Any]] = None,
) -> Dict[str, int]:
    """
    Counter increments for one event.

    Order events may carry ``revenue`` (non-negative integer halalas) and
    ``new_customer`` (bool) in their metadata; other metadata is ignored.

    Raises:
        InvalidEvent: Unknown event type or invalid order metadata
    """
    event = parse_event_type(event_type)
    metadata = metadata or {}
    increments = {_EVENT_COUNTERS[event]: 1}

    if event is EventType.ORDER:
        revenue = metadata.get("revenue", 0)
        if isinstance(revenue, bool) or not isinstance(revenue, int) or revenue < 0:
            raise InvalidEvent("revenue must be a non-negative integer amount in halalas")
        if revenue:
            increments["revenue"] = revenue
        if metadata.get("new_customer"):
            increments["unique_customers"] = 1

    return increments


async def record_event(
    session: AsyncSession,
    seller_id: uuid.UUID,
    event_type: Union[str, EventType],
    metadata: Optional[Mapping[str, Any]] = None,
    day: Optional[date] = None,
) -> Dict[str, int]:
    """
    Increment the seller's daily metrics row for ``day`` (default: today in
    the reporting time zone), creating the row on first use.

    Returns:
        The increments applied

    Raises:
        InvalidEvent: Unknown event type or invalid metadata
        SellerNotFound: Unknown seller
    """
    increments = event_increments(event_type, metadata)

    if await session.get(Seller, seller_id) is None:
        raise SellerNotFound(seller_id)

    if day is None:
        day = datetime.now(get_timezone(get_settings().reporting.timezone)).date()

    dialect = session.get_bind().dialect.name
    insert = _UPSERT_BUILDERS.get(dialect)
    if insert is None:
        raise RuntimeError(f"Atomic upsert not supported for dialect {dialect}")

    stmt = insert(SellerDailyMetric).values(
        id=uuid.uuid4(),
        seller_id=seller_id,
        date=day,
        **increments,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[SellerDailyMetric.seller_id, SellerDailyMetric.date],
        set_={
            **{
                name: getattr(SellerDailyMetric, name) + stmt.excluded[name]
                for name in increments
            },
            "updated_at": func.now(),
        },
    )
    await session.execute(stmt)

    logger.debug(
        "Seller event recorded",
        seller_id=str(seller_id),
        event_type=parse_event_type(event_type).value,
        day=day.isoformat(),
        increments=increments,
    )
    return increments
