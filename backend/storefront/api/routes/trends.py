"""Trend Routes — per-marketplace trending products from the hourly cache or demo data.

Invariants:
    - /{source} serves fresh cache rows when any exist, demo records otherwise
    - /all reports null for a source with no fresh cache rows
    - /refresh reseeds every source's cache rows
"""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.api.dependencies import get_current_user
from storefront.config import get_settings
from storefront.core.domain_types import TrendSource
from storefront.core.trend_catalog import DEMO_NOTE, demo_trends
from storefront.infrastructure.database import get_db
from storefront.models.user import User
from storefront.services.trend_cache import TrendCache

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/trends", tags=["trends"])

SOURCE_LIMIT = 20
COMBINED_LIMIT = 10


def get_trend_cache(db: AsyncSession = Depends(get_db)) -> TrendCache:
    return TrendCache(db, ttl_minutes=get_settings().trend_cache_ttl_minutes)


@router.get("/all")
async def all_trends(
    user: User = Depends(get_current_user),
    cache: TrendCache = Depends(get_trend_cache),
):
    combined = {}
    for source in TrendSource:
        rows = await cache.fresh(source, limit=COMBINED_LIMIT)
        combined[source.value] = [r.to_dict() for r in rows] or None
    combined["note"] = DEMO_NOTE
    return combined


@router.post("/refresh")
async def refresh_trends(
    user: User = Depends(get_current_user),
    cache: TrendCache = Depends(get_trend_cache),
):
    counts = await cache.refresh_all()
    return {"message": "Trends refreshed", "refreshed": counts}


@router.get("/{source}")
async def source_trends(
    source: TrendSource,
    category: str | None = Query(None, max_length=100),
    user: User = Depends(get_current_user),
    cache: TrendCache = Depends(get_trend_cache),
):
    rows = await cache.fresh(source, limit=SOURCE_LIMIT, category=category)
    if rows:
        return {"trends": [r.to_dict() for r in rows], "source": "cache"}
    return {
        "trends": demo_trends(source, category),
        "source": "demo",
        "note": DEMO_NOTE,
    }
