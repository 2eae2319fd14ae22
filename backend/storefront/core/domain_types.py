"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId, ProductId, OrderId wrap UUIDs
    - All valid states encoded as Enums — no raw string matching in routes
    - CJ order statuses always pass through map_cj_order_status() before persistence

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", UUID)
ProductId = NewType("ProductId", UUID)
OrderId = NewType("OrderId", UUID)


# ─── Enums ───────────────────────────────────────────────────────

class OrderStatus(str, Enum):
    """Local order lifecycle — maps to DB `orders.status` column."""
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class StockStatus(str, Enum):
    """Listing availability shown on the storefront."""
    IN_STOCK = "in_stock"
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"


class TrendSource(str, Enum):
    """Marketplaces the trends dashboard reports on."""
    GOOGLE = "google"
    SHOPEE = "shopee"
    LAZADA = "lazada"
    TIKTOK = "tiktok"


# CJ reports its own status vocabulary; anything unlisted is in flight.
_CJ_STATUS_MAP: dict[str, OrderStatus] = {
    "CREATED": OrderStatus.PENDING,
    "IN_CART": OrderStatus.PENDING,
    "UNPAID": OrderStatus.PENDING,
    "UNSHIPPED": OrderStatus.PENDING,
    "SHIPPED": OrderStatus.SHIPPED,
    "DELIVERED": OrderStatus.DELIVERED,
    "CANCELLED": OrderStatus.CANCELLED,
}


def map_cj_order_status(raw: str | None) -> OrderStatus:
    """Translate a CJ orderStatus into the local enum."""
    if not raw:
        return OrderStatus.PENDING
    value = raw.strip()
    if value.lower() in {s.value for s in OrderStatus}:
        return OrderStatus(value.lower())
    return _CJ_STATUS_MAP.get(value.upper(), OrderStatus.PROCESSING)
