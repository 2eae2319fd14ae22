"""Order Routes — place orders through CJ, sync CJ state, manual status changes, stats.

Invariants:
    - Orders are scoped to the current user
    - status values are always OrderStatus members (invalid input is a 400)
    - create and sync need a connected CJ account
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.api.dependencies import get_current_user, get_token_service
from storefront.config import get_settings
from storefront.core.domain_types import OrderStatus
from storefront.core.errors import ResourceNotFoundError
from storefront.core.pagination import Page
from storefront.core.pricing import money
from storefront.infrastructure.database import get_db
from storefront.models.order import Order
from storefront.models.user import User
from storefront.schemas.order import OrderCreate, OrderStatusUpdate
from storefront.services.cj_orders import (
    SYNC_PAGE_SIZE, build_order_payload, record_placed_order, sync_orders,
)
from storefront.services.cj_token import CJTokenService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/orders", tags=["orders"])


async def get_order_or_404(order_id: UUID, user: User, db: AsyncSession) -> Order:
    result = await db.execute(
        select(Order).where(Order.id == order_id).where(Order.user_id == user.id),
    )
    order = result.scalar_one_or_none()
    if not order:
        raise ResourceNotFoundError("Order", str(order_id))
    return order


async def order_stats(db: AsyncSession, user_id: UUID) -> dict:
    """Counts per status plus revenue across all of the user's orders."""
    columns = [func.count(Order.id).label("total_orders")]
    for order_status in OrderStatus:
        columns.append(
            func.count(case((Order.status == order_status.value, 1)))
            .label(order_status.value),
        )
    columns.append(func.sum(Order.total_amount).label("total_revenue"))
    row = (await db.execute(
        select(*columns).where(Order.user_id == user_id),
    )).one()
    stats = dict(row._mapping)
    stats["total_revenue"] = money(stats["total_revenue"] or 0)
    return stats


@router.get("")
async def list_orders(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100, alias="pageSize"),
    status_filter: OrderStatus | None = Query(None, alias="status"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    pager = Page(page, page_size)
    filters = [Order.user_id == user.id]
    if status_filter:
        filters.append(Order.status == status_filter.value)

    total = await db.scalar(
        select(func.count()).select_from(Order).where(*filters),
    )
    result = await db.execute(
        select(Order)
        .where(*filters)
        .order_by(Order.created_at.desc())
        .limit(pager.page_size)
        .offset(pager.offset)
    )
    orders = [o.to_dict() for o in result.scalars().all()]
    return pager.envelope("orders", orders, total or 0)


@router.get("/meta/stats")
async def get_stats(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return {"stats": await order_stats(db, user.id)}


@router.post("/create", status_code=status.HTTP_201_CREATED)
async def create_order(
    body: OrderCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    tokens: CJTokenService = Depends(get_token_service),
):
    """Place the order with CJ, then keep a local copy."""
    payload = build_order_payload(body, get_settings().default_country_code)
    envelope = await tokens.call(
        user.id, lambda token: tokens.cj.create_order(token, payload),
    )
    order = await record_placed_order(db, user.id, body, envelope)
    return {
        "message": "Order created successfully",
        "order": order.to_dict(),
        "cjOrder": envelope.get("data"),
    }


@router.post("/sync")
async def sync(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    tokens: CJTokenService = Depends(get_token_service),
):
    """Pull the latest CJ orders into the local table."""
    envelope = await tokens.call(
        user.id, lambda token: tokens.cj.list_orders(token, 1, SYNC_PAGE_SIZE),
    )
    inserted, updated = await sync_orders(db, user.id, envelope)
    if not inserted and not updated:
        return {"message": "No orders found", "synced": 0, "updated": 0}
    return {
        "message": f"Synced {inserted} new orders",
        "synced": inserted,
        "updated": updated,
    }


@router.get("/{order_id}")
async def get_order(
    order_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    order = await get_order_or_404(order_id, user, db)
    return {"order": order.to_dict()}


@router.put("/{order_id}/status")
async def update_order_status(
    order_id: UUID,
    body: OrderStatusUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    order = await get_order_or_404(order_id, user, db)
    order.status = body.status.value
    await db.commit()
    await db.refresh(order)
    logger.info(
        f"Order {order.id} set to {order.status}",
        extra={"user_id": str(user.id)},
    )
    return {"message": "Order status updated", "order": order.to_dict()}
