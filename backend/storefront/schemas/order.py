"""Order Schemas — order placement and manual status changes."""

from pydantic import Field

from storefront.core.domain_types import OrderStatus
from storefront.schemas.base import CamelModel


class OrderCreate(CamelModel):
    product_id: str = Field(min_length=1, max_length=255)
    product_name: str | None = Field(None, max_length=500)
    variant_id: str | None = Field(None, max_length=255)
    quantity: int = Field(1, ge=1, le=1000)
    customer_name: str = Field(min_length=1, max_length=255)
    customer_phone: str = Field(min_length=1, max_length=50)
    customer_address: str = Field(min_length=1, max_length=2000)
    country_code: str | None = Field(None, min_length=2, max_length=2)
    shipping_method: str | None = Field(None, max_length=100)


class OrderStatusUpdate(CamelModel):
    status: OrderStatus
