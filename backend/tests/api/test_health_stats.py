"""Health probes, dashboard stats, and the shared error envelope."""

from decimal import Decimal

from storefront.models.order import Order
from storefront.models.product import Product


async def test_liveness(client):
    res = await client.get("/health")
    assert res.status_code == 200
    assert res.json()["status"] == "ok"
    assert res.json()["service"] == "cj-storefront-api"


async def test_readiness_with_database(client):
    res = await client.get("/health/ready")
    assert res.status_code == 200
    assert res.json()["checks"]["database"] == "healthy"


async def test_unknown_route_uses_error_envelope(client):
    res = await client.get("/api/nowhere")
    assert res.status_code == 404
    assert res.json()["error"]["message"] == "Endpoint not found"


async def test_dashboard_stats(client, auth_headers, seller, test_db):
    test_db.add_all([
        Product(
            user_id=seller.id, name="Lamp",
            cost_price=Decimal("5"), selling_price=Decimal("6.5"),
        ),
        Order(user_id=seller.id, products=[], total_amount=Decimal("12.25"), status="pending"),
        Order(user_id=seller.id, products=[], total_amount=Decimal("7.75"), status="delivered"),
    ])
    await test_db.commit()

    res = await client.get("/api/stats", headers=auth_headers)
    assert res.json() == {
        "totalProducts": 1,
        "totalOrders": 2,
        "pendingOrders": 1,
        "totalRevenue": 20.0,
    }


async def test_dashboard_stats_empty(client, auth_headers):
    res = await client.get("/api/stats", headers=auth_headers)
    assert res.json()["totalRevenue"] == 0.0
    assert res.json()["totalProducts"] == 0
