"""CJ Orders — build createOrder payloads, persist placed orders, sync CJ order state.

Invariants:
    - A placed order is persisted only when CJ answers code == 200
    - Sync matches existing rows by (user_id, cj_order_id); unknown CJ orders are inserted
    - An orderId listed twice in one page is counted once
    - Every CJ status passes through map_cj_order_status() before it reaches the DB

Design Decisions:
    - CJ order rows come in two shapes (nested shippingAddress object or flat
      shippingCustomerName/shippingPhone fields); _customer_fields() reads both
"""

import logging
from decimal import Decimal, InvalidOperation
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.domain_types import OrderStatus, map_cj_order_status
from storefront.core.errors import CJOrderRejectedError
from storefront.models.order import Order
from storefront.schemas.order import OrderCreate

logger = logging.getLogger(__name__)

BALANCE_PAY_TYPE = 3
SYNC_PAGE_SIZE = 50

_COUNTRY_NAMES = {
    "PH": "Philippines",
    "US": "United States",
    "SG": "Singapore",
    "MY": "Malaysia",
    "TH": "Thailand",
    "VN": "Vietnam",
    "ID": "Indonesia",
}


def _amount(value) -> Decimal:
    try:
        return Decimal(str(value)) if value is not None else Decimal("0")
    except InvalidOperation:
        return Decimal("0")


def build_order_payload(body: OrderCreate, default_country_code: str = "PH") -> dict:
    """CJ createOrder body for a single-line order paid from CJ balance."""
    country = (body.country_code or default_country_code).upper()
    return {
        "products": [{
            "productId": body.product_id,
            "variantId": body.variant_id,
            "quantity": body.quantity,
        }],
        "shippingAddress": {
            "fullName": body.customer_name,
            "phone": body.customer_phone,
            "address": body.customer_address,
            "countryCode": country,
            "country": _COUNTRY_NAMES.get(country, country),
        },
        "shippingMethod": body.shipping_method or "standard",
        "payType": BALANCE_PAY_TYPE,
    }


async def record_placed_order(
    db: AsyncSession, user_id: UUID, body: OrderCreate, envelope: dict,
) -> Order:
    """Persist the local copy of an order CJ accepted."""
    if envelope.get("code") != 200:
        raise CJOrderRejectedError(envelope.get("message"))
    data = envelope.get("data") or {}
    order = Order(
        user_id=user_id,
        cj_order_id=data.get("orderId"),
        order_number=data.get("orderNumber") or data.get("orderNum"),
        customer_name=body.customer_name,
        customer_phone=body.customer_phone,
        customer_address=body.customer_address,
        products=[{
            "productId": body.product_id,
            "productName": body.product_name,
            "variantId": body.variant_id,
            "quantity": body.quantity,
        }],
        total_amount=_amount(data.get("orderAmount")),
        status=OrderStatus.PENDING.value,
    )
    db.add(order)
    await db.commit()
    await db.refresh(order)
    logger.info(
        f"Order {order.id} placed with CJ ({order.cj_order_id})",
        extra={"user_id": str(user_id)},
    )
    return order


def _customer_fields(cj_order: dict) -> tuple[str, str, str]:
    address = cj_order.get("shippingAddress")
    if isinstance(address, dict):
        return (
            address.get("fullName") or "",
            address.get("phone") or "",
            address.get("address") or "",
        )
    return (
        cj_order.get("shippingCustomerName") or "",
        cj_order.get("shippingPhone") or "",
        address or "",
    )


async def sync_orders(
    db: AsyncSession, user_id: UUID, envelope: dict,
) -> tuple[int, int]:
    """Upsert the CJ order list into the user's orders. Returns (inserted, updated)."""
    if envelope.get("code") != 200:
        return 0, 0
    cj_orders = (envelope.get("data") or {}).get("list") or []

    inserted = updated = 0
    seen: set[str] = set()
    for cj_order in cj_orders:
        cj_order_id = cj_order.get("orderId")
        if not cj_order_id or cj_order_id in seen:
            continue
        seen.add(cj_order_id)
        status = map_cj_order_status(cj_order.get("orderStatus")).value
        tracking = cj_order.get("trackingNumber") or cj_order.get("trackNumber")

        result = await db.execute(
            select(Order)
            .where(Order.user_id == user_id)
            .where(Order.cj_order_id == cj_order_id)
        )
        existing = result.scalar_one_or_none()
        if existing:
            existing.status = status
            existing.tracking_number = tracking or existing.tracking_number
            updated += 1
            continue

        name, phone, address = _customer_fields(cj_order)
        db.add(Order(
            user_id=user_id,
            cj_order_id=cj_order_id,
            order_number=cj_order.get("orderNumber") or cj_order.get("orderNum"),
            customer_name=name,
            customer_phone=phone,
            customer_address=address,
            products=cj_order.get("products") or cj_order.get("productList") or [],
            total_amount=_amount(cj_order.get("orderAmount")),
            status=status,
            tracking_number=tracking,
        ))
        inserted += 1

    await db.commit()
    logger.info(
        f"CJ order sync: {inserted} new, {updated} updated",
        extra={"user_id": str(user_id)},
    )
    return inserted, updated
