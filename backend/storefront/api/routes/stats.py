"""Dashboard Stats — headline numbers for the seller's home screen."""

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.api.dependencies import get_current_user
from storefront.api.routes.orders import order_stats
from storefront.infrastructure.database import get_db
from storefront.models.product import Product
from storefront.models.user import User

router = APIRouter(prefix="/api/stats", tags=["stats"])


@router.get("")
async def dashboard_stats(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    total_products = await db.scalar(
        select(func.count()).select_from(Product).where(Product.user_id == user.id),
    )
    orders = await order_stats(db, user.id)
    return {
        "totalProducts": total_products or 0,
        "totalOrders": orders["total_orders"],
        "pendingOrders": orders["pending"],
        "totalRevenue": orders["total_revenue"],
    }
