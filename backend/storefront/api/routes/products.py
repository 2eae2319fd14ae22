"""Product Routes — the seller's local listings.

Invariants:
    - Every query is scoped to the current user; other users' rows look like 404s
    - selling_price follows cost and markup unless the caller sets it explicitly
    - Lists are newest first
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy import delete, distinct, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.api.dependencies import get_current_user
from storefront.core.errors import ResourceNotFoundError
from storefront.core.pagination import Page
from storefront.core.pricing import money, selling_price
from storefront.infrastructure.database import get_db
from storefront.models.product import Product
from storefront.models.user import User
from storefront.schemas.product import BulkDeleteRequest, MarkupRequest, ProductUpdate

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/products", tags=["products"])

_PLAIN_FIELDS = ("name", "description", "category", "images", "variants")


async def get_product_or_404(
    product_id: UUID, user: User, db: AsyncSession,
) -> Product:
    result = await db.execute(
        select(Product)
        .where(Product.id == product_id)
        .where(Product.user_id == user.id)
    )
    product = result.scalar_one_or_none()
    if not product:
        raise ResourceNotFoundError("Product", str(product_id))
    return product


@router.get("")
async def list_products(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100, alias="pageSize"),
    category: str | None = Query(None, max_length=100),
    search: str | None = Query(None, max_length=200),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List products with pagination, category filter, and name/description search."""
    pager = Page(page, page_size)
    filters = [Product.user_id == user.id]
    if category:
        filters.append(Product.category == category)
    if search:
        pattern = f"%{search}%"
        filters.append(or_(
            Product.name.ilike(pattern), Product.description.ilike(pattern),
        ))

    total = await db.scalar(
        select(func.count()).select_from(Product).where(*filters),
    )
    result = await db.execute(
        select(Product)
        .where(*filters)
        .order_by(Product.created_at.desc())
        .limit(pager.page_size)
        .offset(pager.offset)
    )
    products = [p.to_dict() for p in result.scalars().all()]
    return pager.envelope("products", products, total or 0)


@router.get("/meta/categories")
async def list_categories(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(distinct(Product.category))
        .where(Product.user_id == user.id)
        .where(Product.category.is_not(None))
        .order_by(Product.category)
    )
    return {"categories": list(result.scalars().all())}


@router.post("/apply-markup")
async def apply_markup(
    body: MarkupRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Re-price every listing of the user with one markup."""
    result = await db.execute(select(Product).where(Product.user_id == user.id))
    products = list(result.scalars().all())
    for product in products:
        product.markup_percentage = body.markup_percentage
        product.selling_price = selling_price(product.cost_price, body.markup_percentage)
    await db.commit()
    markup = money(body.markup_percentage)
    logger.info(
        f"Applied {markup}% markup to {len(products)} products",
        extra={"user_id": str(user.id)},
    )
    return {
        "message": f"Updated {len(products)} products with {markup}% markup",
        "updatedCount": len(products),
        "products": [p.to_dict() for p in products],
    }


@router.post("/bulk-delete")
async def bulk_delete(
    body: BulkDeleteRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        delete(Product)
        .where(Product.id.in_(body.product_ids))
        .where(Product.user_id == user.id)
    )
    await db.commit()
    deleted = result.rowcount or 0
    return {"message": f"Deleted {deleted} products", "deletedCount": deleted}


@router.get("/{product_id}")
async def get_product(
    product_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    product = await get_product_or_404(product_id, user, db)
    return {"product": product.to_dict()}


@router.put("/{product_id}")
async def update_product(
    product_id: UUID,
    body: ProductUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Partial update; nulls and omitted fields keep their stored values."""
    product = await get_product_or_404(product_id, user, db)
    changes = body.model_dump(exclude_unset=True, exclude_none=True)

    for field in _PLAIN_FIELDS:
        if field in changes:
            setattr(product, field, changes[field])
    if "stock_status" in changes:
        product.stock_status = changes["stock_status"].value
    if "cost_price" in changes:
        product.cost_price = changes["cost_price"]
    if "markup_percentage" in changes:
        product.markup_percentage = changes["markup_percentage"]

    if "selling_price" in changes:
        product.selling_price = changes["selling_price"]
    elif "cost_price" in changes or "markup_percentage" in changes:
        product.selling_price = selling_price(
            product.cost_price, product.markup_percentage,
        )

    await db.commit()
    await db.refresh(product)
    return {"message": "Product updated successfully", "product": product.to_dict()}


@router.delete("/{product_id}")
async def delete_product(
    product_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    product = await get_product_or_404(product_id, user, db)
    await db.delete(product)
    await db.commit()
    return {"message": "Product deleted successfully"}
