"""Request Schemas — camelCase aliases, normalisation, and bounds."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from storefront.core.domain_types import OrderStatus, StockStatus
from storefront.schemas.auth import LoginRequest, PasswordChange, RegisterRequest
from storefront.schemas.cj import FreightRequest, ProductImport
from storefront.schemas.order import OrderCreate, OrderStatusUpdate
from storefront.schemas.product import BulkDeleteRequest, MarkupRequest, ProductUpdate


def test_register_normalises_email():
    body = RegisterRequest(email=" Sam@Shop.PH ", password="secret1", fullName="Sam")
    assert body.email == "sam@shop.ph"
    assert body.full_name == "Sam"


@pytest.mark.parametrize("email", ["nobody", "@shop.ph", "sam@"])
def test_register_rejects_bad_email(email):
    with pytest.raises(ValidationError):
        RegisterRequest(email=email, password="secret1")


def test_login_lowercases_email():
    assert LoginRequest(email="A@B.CO", password="x").email == "a@b.co"


def test_password_change_minimum_length():
    with pytest.raises(ValidationError):
        PasswordChange(currentPassword="old-pass", newPassword="123")


def test_snake_case_names_are_accepted_too():
    body = PasswordChange(current_password="old-pass", new_password="new-pass")
    assert body.new_password == "new-pass"


def test_product_import_defaults():
    body = ProductImport(cjProductId="cj-1", name="Lamp", costPrice="9.90")
    assert body.cost_price == Decimal("9.90")
    assert body.markup_percentage is None
    assert body.images == []
    assert body.variants == []


def test_product_import_rejects_too_many_decimals():
    with pytest.raises(ValidationError):
        ProductImport(cjProductId="cj-1", name="Lamp", costPrice="9.999")


def test_freight_defaults():
    body = FreightRequest(vid="v-1")
    assert body.quantity == 1
    assert body.start_country_code == "CN"
    assert body.country_code is None


def test_product_update_tracks_only_supplied_fields():
    body = ProductUpdate(stockStatus="out_of_stock")
    assert body.model_dump(exclude_unset=True) == {"stock_status": StockStatus.OUT_OF_STOCK}


def test_markup_bounds():
    assert MarkupRequest(markupPercentage=0).markup_percentage == 0
    with pytest.raises(ValidationError):
        MarkupRequest(markupPercentage=-1)
    with pytest.raises(ValidationError):
        MarkupRequest(markupPercentage=1000)


@pytest.mark.parametrize("schema, fields", [
    (MarkupRequest, {}),
    (ProductUpdate, {}),
    (ProductImport, {"cjProductId": "cj-1", "name": "Lamp", "costPrice": "9.90"}),
])
def test_markup_is_limited_to_cents(schema, fields):
    assert schema(markupPercentage="12.35", **fields).markup_percentage == Decimal("12.35")
    with pytest.raises(ValidationError):
        schema(markupPercentage="12.345", **fields)


def test_bulk_delete_parses_uuids():
    with pytest.raises(ValidationError):
        BulkDeleteRequest(productIds=["not-a-uuid"])


def test_order_create_strips_whitespace():
    body = OrderCreate(
        productId="p1", customerName="  Ana ", customerPhone="1", customerAddress="x",
    )
    assert body.customer_name == "Ana"
    assert body.quantity == 1


def test_order_status_update_uses_enum():
    assert OrderStatusUpdate(status="cancelled").status is OrderStatus.CANCELLED
    with pytest.raises(ValidationError):
        OrderStatusUpdate(status="CANCELLED")
