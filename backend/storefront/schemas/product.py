"""Product Schemas — partial updates and bulk operations on local listings."""

from decimal import Decimal
from uuid import UUID

from pydantic import Field

from storefront.core.domain_types import StockStatus
from storefront.schemas.base import CamelModel


class ProductUpdate(CamelModel):
    """Every field optional; only supplied fields change."""
    name: str | None = Field(None, min_length=1, max_length=500)
    description: str | None = None
    cost_price: Decimal | None = Field(None, gt=0, max_digits=10, decimal_places=2)
    selling_price: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    markup_percentage: Decimal | None = Field(None, ge=0, le=999, max_digits=5, decimal_places=2)
    stock_status: StockStatus | None = None
    category: str | None = Field(None, max_length=100)
    images: list[str] | None = None
    variants: list[dict] | None = None


class MarkupRequest(CamelModel):
    markup_percentage: Decimal = Field(ge=0, le=999, max_digits=5, decimal_places=2)


class BulkDeleteRequest(CamelModel):
    product_ids: list[UUID] = Field(min_length=1, max_length=500)
