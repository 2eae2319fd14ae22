"""Trend Routes — demo fallback, cache hits, combined view, and refresh."""


async def test_source_falls_back_to_demo(client, auth_headers):
    res = await client.get("/api/trends/google", headers=auth_headers)
    data = res.json()
    assert data["source"] == "demo"
    assert data["note"]
    assert data["trends"][0]["id"] == "g1"
    assert all(t["source"] == "google" for t in data["trends"])


async def test_demo_category_filter(client, auth_headers):
    res = await client.get("/api/trends/google?category=electronics", headers=auth_headers)
    trends = res.json()["trends"]
    assert trends
    assert all(t["category"] == "Electronics" for t in trends)


async def test_unknown_source_is_validation_error(client, auth_headers):
    res = await client.get("/api/trends/amazon", headers=auth_headers)
    assert res.status_code == 400


async def test_all_is_empty_before_refresh(client, auth_headers):
    res = await client.get("/api/trends/all", headers=auth_headers)
    data = res.json()
    assert data["google"] is None
    assert data["tiktok"] is None
    assert data["note"]


async def test_refresh_then_serve_from_cache(client, auth_headers):
    refreshed = await client.post("/api/trends/refresh", headers=auth_headers)
    counts = refreshed.json()["refreshed"]
    assert set(counts) == {"google", "shopee", "lazada", "tiktok"}

    cached = await client.get("/api/trends/shopee", headers=auth_headers)
    assert cached.json()["source"] == "cache"
    assert len(cached.json()["trends"]) == counts["shopee"]

    combined = await client.get("/api/trends/all", headers=auth_headers)
    assert len(combined.json()["lazada"]) <= 10


async def test_trends_require_auth(client):
    assert (await client.get("/api/trends/google")).status_code == 401
