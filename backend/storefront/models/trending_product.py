"""TrendingProduct ORM — cached trend record for one marketplace source.

Invariants:
    - source is a TrendSource value
    - A row is fresh while fetched_at is within the configured TTL (default 1 hour)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Integer, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from storefront.db.base import Base


class TrendingProduct(Base):
    """Trend cache row."""
    __tablename__ = "trending_products"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    source: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    product_name: Mapped[str] = mapped_column(String(500), nullable=False)
    search_volume: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    price_range: Mapped[str | None] = mapped_column(String(50), nullable=True)
    fetched_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "source": self.source,
            "product_name": self.product_name,
            "search_volume": self.search_volume,
            "category": self.category,
            "price_range": self.price_range,
            "fetched_at": self.fetched_at.isoformat() if self.fetched_at else None,
        }
