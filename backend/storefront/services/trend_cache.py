"""Trend Cache — read fresh trending_products rows and reseed them from the demo catalog.

Invariants:
    - A row counts as fresh while fetched_at > now - ttl
    - Reads are ordered by search_volume descending
    - refresh() replaces a source's rows wholesale (no stale rows survive)
"""

import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.domain_types import TrendSource
from storefront.core.trend_catalog import demo_trends
from storefront.models.trending_product import TrendingProduct

logger = logging.getLogger(__name__)


class TrendCache:

    def __init__(self, db: AsyncSession, ttl_minutes: int = 60):
        self.db = db
        self.ttl = timedelta(minutes=ttl_minutes)

    async def fresh(
        self, source: TrendSource, limit: int = 20, category: str | None = None,
    ) -> list[TrendingProduct]:
        cutoff = datetime.now(timezone.utc) - self.ttl
        query = (
            select(TrendingProduct)
            .where(TrendingProduct.source == source.value)
            .where(TrendingProduct.fetched_at > cutoff)
        )
        if category:
            query = query.where(
                func.lower(TrendingProduct.category) == category.lower(),
            )
        query = query.order_by(TrendingProduct.search_volume.desc()).limit(limit)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def refresh(self, source: TrendSource) -> int:
        await self.db.execute(
            delete(TrendingProduct).where(TrendingProduct.source == source.value),
        )
        now = datetime.now(timezone.utc)
        records = demo_trends(source)
        for record in records:
            self.db.add(TrendingProduct(
                source=record["source"],
                product_name=record["product_name"],
                search_volume=record["search_volume"],
                category=record["category"],
                price_range=record["price_range"],
                fetched_at=now,
            ))
        await self.db.commit()
        return len(records)

    async def refresh_all(self) -> dict[str, int]:
        counts = {}
        for source in TrendSource:
            counts[source.value] = await self.refresh(source)
        logger.info(f"Trend cache refreshed: {counts}")
        return counts
