"""CJ Routes — connect a CJ account, browse the supplier catalog, import products.

Invariants:
    - Catalog, balance, and freight routes need a connected account (CJ_NOT_CONNECTED otherwise)
    - Catalog responses are passed through as the CJ envelope
    - /status never fails because of a rejected token: it reports connected=false
    - Imported products are priced with core.pricing.selling_price
"""

import logging
from decimal import Decimal

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.api.dependencies import get_current_user, get_token_service
from storefront.config import get_settings
from storefront.core.errors import CJAuthenticationError
from storefront.core.pricing import selling_price
from storefront.infrastructure.database import get_db
from storefront.models.product import Product
from storefront.models.user import User
from storefront.schemas.cj import ConnectRequest, FreightRequest, ProductImport
from storefront.services.cj_token import CJTokenService, as_utc

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/cj", tags=["cj"])


@router.post("/connect")
async def connect(
    body: ConnectRequest,
    user: User = Depends(get_current_user),
    tokens: CJTokenService = Depends(get_token_service),
):
    """Store the API key and prove it works by exchanging it for a token."""
    await tokens.save_api_key(user.id, body.api_key)
    await tokens.require_access_token(user.id)
    credential = await tokens.get_credential(user.id)
    expires_at = as_utc(credential.token_expires_at)
    return {
        "message": "CJ account connected successfully",
        "connected": True,
        "tokenExpiresAt": expires_at.isoformat() if expires_at else None,
    }


@router.get("/status")
async def connection_status(
    user: User = Depends(get_current_user),
    tokens: CJTokenService = Depends(get_token_service),
):
    credential = await tokens.get_credential(user.id)
    if credential is None or not credential.api_key:
        return {"connected": False}
    try:
        balance = await tokens.call(user.id, tokens.cj.get_balance)
    except CJAuthenticationError:
        await tokens.invalidate(user.id)
        return {"connected": False, "reason": "token_rejected"}
    return {"connected": True, "balance": balance.get("data")}


@router.get("/products")
async def list_cj_products(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=200, alias="pageSize"),
    keyword: str | None = Query(None, max_length=200),
    category_id: str | None = Query(None, alias="categoryId"),
    user: User = Depends(get_current_user),
    tokens: CJTokenService = Depends(get_token_service),
):
    """Supplier catalog page; keyword switches to search."""
    if keyword:
        return await tokens.call(
            user.id,
            lambda token: tokens.cj.search_products(token, keyword, page, page_size),
        )
    return await tokens.call(
        user.id,
        lambda token: tokens.cj.list_products(
            token, page, page_size, category_id=category_id,
        ),
    )


@router.get("/products/{product_id}")
async def get_cj_product(
    product_id: str,
    user: User = Depends(get_current_user),
    tokens: CJTokenService = Depends(get_token_service),
):
    return await tokens.call(
        user.id, lambda token: tokens.cj.get_product(token, product_id),
    )


@router.get("/categories")
async def get_cj_categories(
    user: User = Depends(get_current_user),
    tokens: CJTokenService = Depends(get_token_service),
):
    return await tokens.call(user.id, tokens.cj.get_categories)


@router.get("/balance")
async def get_cj_balance(
    user: User = Depends(get_current_user),
    tokens: CJTokenService = Depends(get_token_service),
):
    return await tokens.call(user.id, tokens.cj.get_balance)


@router.post("/freight")
async def freight_quote(
    body: FreightRequest,
    user: User = Depends(get_current_user),
    tokens: CJTokenService = Depends(get_token_service),
):
    """Shipping options and prices for one variant to a destination country."""
    country = (body.country_code or get_settings().default_country_code).upper()
    return await tokens.call(
        user.id,
        lambda token: tokens.cj.freight_quote(
            token, body.vid, country,
            quantity=body.quantity,
            start_country_code=body.start_country_code.upper(),
        ),
    )


@router.post("/import", status_code=status.HTTP_201_CREATED)
async def import_product(
    body: ProductImport,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Copy a CJ catalog product into the seller's listings with markup pricing."""
    markup = body.markup_percentage
    if markup is None:
        markup = Decimal(str(get_settings().default_markup_percentage))
    product = Product(
        user_id=user.id,
        cj_product_id=body.cj_product_id,
        name=body.name,
        description=body.description,
        images=body.images,
        cost_price=body.cost_price,
        selling_price=selling_price(body.cost_price, markup),
        markup_percentage=markup,
        category=body.category,
        weight_kg=body.weight_kg,
        variants=body.variants,
    )
    db.add(product)
    await db.commit()
    await db.refresh(product)
    logger.info(
        f"Imported CJ product {body.cj_product_id}",
        extra={"user_id": str(user.id)},
    )
    return {"message": "Product imported successfully", "product": product.to_dict()}
