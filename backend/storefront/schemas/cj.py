"""CJ Schemas — connect, import, and freight quote bodies."""

from decimal import Decimal

from pydantic import Field

from storefront.schemas.base import CamelModel


class ConnectRequest(CamelModel):
    api_key: str = Field(min_length=1, max_length=500)


class ProductImport(CamelModel):
    """A CJ catalog product the seller wants listed locally."""
    cj_product_id: str = Field(min_length=1, max_length=255)
    name: str = Field(min_length=1, max_length=500)
    description: str | None = None
    images: list[str] = Field(default_factory=list)
    cost_price: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    markup_percentage: Decimal | None = Field(None, ge=0, le=999, max_digits=5, decimal_places=2)
    category: str | None = Field(None, max_length=100)
    weight_kg: Decimal | None = Field(None, ge=0, max_digits=6, decimal_places=2)
    variants: list[dict] = Field(default_factory=list)


class FreightRequest(CamelModel):
    vid: str = Field(min_length=1)
    country_code: str | None = Field(None, min_length=2, max_length=2)
    quantity: int = Field(1, ge=1, le=1000)
    start_country_code: str = Field("CN", min_length=2, max_length=2)
