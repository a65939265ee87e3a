"""
Seller Dashboard Endpoints

REST API backing the seller dashboard: period dashboard, analytics ranges,
navigation badge counts, profile scores and the event tracking write path.
Errors are ReportingError subclasses rendered by the application's
exception handler.
"""

from datetime import date, datetime
from typing import Any, Awaitable, Callable, Dict, Optional, Type, TypeVar
import uuid

from fastapi import APIRouter, Depends, Query, status
from pydantic import Field
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from seller_dashboard.config import get_settings
from seller_dashboard.database.connection import get_db_dependency, get_session_factory
from seller_dashboard.database.models import Seller
from seller_dashboard.reporting import DashboardAggregator, SellerNotFound, SqlMetricsStore
from seller_dashboard.reporting.periods import get_timezone
from seller_dashboard.reporting.schemas import (
    CamelModel,
    DashboardPayload,
    ProfileScore,
    SellerCounts,
)
from seller_dashboard.sellers import profile_completion, trust_score
from seller_dashboard.serving.cache import dashboard_cache, dashboard_cache_key
from seller_dashboard.tracking import record_event

router = APIRouter()
logger = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=CamelModel)


class EventRequest(CamelModel):
    """Tracked event posted by the marketplace front end"""
    event_type: str = Field(..., description="view, inquiry or order")
    metadata: Dict[str, Any] = Field(default_factory=dict)
    day: Optional[date] = Field(default=None, description="Defaults to today")


class EventAccepted(CamelModel):
    """Acknowledgement of a recorded event"""
    success: bool = True
    seller_id: uuid.UUID
    event_type: str
    increments: Dict[str, int]


def get_aggregator() -> DashboardAggregator:
    """Dependency providing an aggregator over the configured database"""
    return DashboardAggregator(SqlMetricsStore(get_session_factory()), get_settings().reporting)


def _today() -> str:
    return datetime.now(get_timezone(get_settings().reporting.timezone)).date().isoformat()


async def _cached(
    key: str,
    model: Type[ModelT],
    compute: Callable[[], Awaitable[ModelT]],
) -> ModelT:
    """Serve a view from the dashboard cache, computing and storing it on a miss."""
    cached = await dashboard_cache.get(key)
    if cached is not None:
        return model.model_validate(cached)

    payload = await compute()
    await dashboard_cache.set(
        key,
        payload.model_dump(mode="json", by_alias=True),
        ttl=get_settings().reporting.dashboard_cache_ttl_seconds,
    )
    return payload


@router.get("/{seller_id}/dashboard", response_model=DashboardPayload)
async def get_dashboard(
    seller_id: uuid.UUID,
    period: str = Query("7d", description="7d, 30d, 90d or 1y"),
    aggregator: DashboardAggregator = Depends(get_aggregator),
) -> DashboardPayload:
    """Overview totals, growth, daily chart, top listings and recent orders."""
    return await _cached(
        dashboard_cache_key(seller_id, "dashboard", period, _today()),
        DashboardPayload,
        lambda: aggregator.build_dashboard(seller_id, period),
    )


@router.get("/{seller_id}/analytics", response_model=DashboardPayload)
async def get_analytics(
    seller_id: uuid.UUID,
    period: str = Query("30d", description="7d, 30d, 90d or 1y"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    aggregator: DashboardAggregator = Depends(get_aggregator),
) -> DashboardPayload:
    """Analytics for a period selector or, when both dates are given, a custom range."""
    if start_date is not None and end_date is not None:
        cache_period = f"{start_date.isoformat()}_{end_date.isoformat()}"
    else:
        cache_period = period

    return await _cached(
        dashboard_cache_key(seller_id, "analytics", cache_period, _today()),
        DashboardPayload,
        lambda: aggregator.build_analytics(seller_id, period, start=start_date, end=end_date),
    )


@router.get("/{seller_id}/counts", response_model=SellerCounts)
async def get_counts(
    seller_id: uuid.UUID,
    aggregator: DashboardAggregator = Depends(get_aggregator),
) -> SellerCounts:
    """Navigation badge counters; never cached."""
    return await aggregator.build_counts(seller_id)


@router.get("/{seller_id}/profile-score", response_model=ProfileScore)
async def get_profile_score(
    seller_id: uuid.UUID,
    db: AsyncSession = Depends(get_db_dependency),
) -> ProfileScore:
    seller = await db.get(Seller, seller_id)
    if seller is None:
        raise SellerNotFound(seller_id)
    return ProfileScore(
        profile_completion=profile_completion(seller),
        trust_score=trust_score(seller),
    )


@router.post(
    "/{seller_id}/events",
    response_model=EventAccepted,
    status_code=status.HTTP_202_ACCEPTED,
)
async def post_event(
    seller_id: uuid.UUID,
    event: EventRequest,
    db: AsyncSession = Depends(get_db_dependency),
) -> EventAccepted:
    """Record a view, inquiry or order and drop the seller's cached views."""
    increments = await record_event(
        db,
        seller_id,
        event.event_type,
        metadata=event.metadata,
        day=event.day,
    )
    await db.commit()
    await dashboard_cache.invalidate_prefix(str(seller_id))

    return EventAccepted(
        seller_id=seller_id,
        event_type=event.event_type,
        increments=increments,
    )
