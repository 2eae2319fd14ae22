"""CjCredential ORM — one CJDropShipping API key (and cached access token) per user.

Invariants:
    - user_id is unique: at most one credential row per seller
    - access_token and token_expires_at are set together or both NULL
    - Replacing api_key clears the cached token

Design Decisions:
    - Token cached in the row rather than in memory: survives restarts and
      multiple workers without a shared cache
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Text, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from storefront.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CjCredential(Base):
    """Supplier credential and token cache."""
    __tablename__ = "cj_credentials"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, unique=True,
    )
    api_key: Mapped[str | None] = mapped_column(Text, nullable=True)
    access_token: Mapped[str | None] = mapped_column(Text, nullable=True)
    token_expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow,
    )

    user: Mapped["User"] = relationship("User", back_populates="cj_credential")

    def clear_token(self) -> None:
        self.access_token = None
        self.token_expires_at = None
