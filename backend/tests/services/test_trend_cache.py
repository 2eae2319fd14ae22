"""Trend Cache — freshness window, ordering, and reseeding from the demo catalog."""

from datetime import datetime, timedelta, timezone

from storefront.core.domain_types import TrendSource
from storefront.models.trending_product import TrendingProduct
from storefront.services.trend_cache import TrendCache


async def test_empty_cache_has_no_fresh_rows(test_db):
    assert await TrendCache(test_db).fresh(TrendSource.GOOGLE) == []


async def test_refresh_seeds_rows_ordered_by_volume(test_db):
    cache = TrendCache(test_db)
    count = await cache.refresh(TrendSource.SHOPEE)

    rows = await cache.fresh(TrendSource.SHOPEE)
    assert len(rows) == count > 0
    volumes = [r.search_volume for r in rows]
    assert volumes == sorted(volumes, reverse=True)
    assert await cache.fresh(TrendSource.LAZADA) == []


async def test_refresh_replaces_previous_rows(test_db):
    cache = TrendCache(test_db)
    first = await cache.refresh(TrendSource.TIKTOK)
    await cache.refresh(TrendSource.TIKTOK)
    assert len(await cache.fresh(TrendSource.TIKTOK, limit=100)) == first


async def test_stale_rows_are_not_fresh(test_db):
    test_db.add(TrendingProduct(
        source="google", product_name="Old fad", search_volume=1,
        fetched_at=datetime.now(timezone.utc) - timedelta(hours=2),
    ))
    await test_db.commit()
    assert await TrendCache(test_db, ttl_minutes=60).fresh(TrendSource.GOOGLE) == []


async def test_category_filter_and_limit(test_db):
    cache = TrendCache(test_db)
    await cache.refresh(TrendSource.GOOGLE)
    rows = await cache.fresh(TrendSource.GOOGLE, limit=100)
    category = rows[0].category

    filtered = await cache.fresh(TrendSource.GOOGLE, limit=100, category=category.upper())
    assert filtered
    assert all(r.category == category for r in filtered)
    assert len(await cache.fresh(TrendSource.GOOGLE, limit=2)) == 2


async def test_refresh_all_covers_every_source(test_db):
    counts = await TrendCache(test_db).refresh_all()
    assert set(counts) == {s.value for s in TrendSource}
