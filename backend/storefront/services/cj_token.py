"""CJ Token Service — API key storage and lazy access-token lifecycle per user.

Invariants:
    - One CjCredential row per user; saving a key clears the cached token
    - A cached token is used only while token_expires_at is in the future
    - An expired/missing token is exchanged from the stored API key and written back
    - A token CJ rejects is invalidated (key kept) and re-exchanged at most once per call

Design Decisions:
    - Token persisted on the credential row, not in process memory: workers share it
    - No cross-request lock: two concurrent refreshes both succeed and the last write wins
    - Expiry read from accessTokenExpiryDate, then expiresIn seconds, then the configured default
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.errors import CJAuthenticationError, CJNotConnectedError
from storefront.infrastructure.cj_client import ResilientCJClient
from storefront.models.cj_credential import CjCredential

logger = logging.getLogger(__name__)

CJCall = Callable[[str], Awaitable[dict]]


def as_utc(value: datetime | None) -> datetime | None:
    """SQLite hands timestamps back naive; treat those as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def token_expiry(data: dict, now: datetime, default_ttl: timedelta) -> datetime:
    """Work out when an exchanged token stops being valid."""
    raw = data.get("accessTokenExpiryDate")
    if raw:
        try:
            return as_utc(datetime.fromisoformat(str(raw).replace("Z", "+00:00")))
        except ValueError:
            logger.warning(f"Unparseable accessTokenExpiryDate: {raw!r}")
    expires_in = data.get("expiresIn")
    if isinstance(expires_in, (int, float)) and expires_in > 0:
        return now + timedelta(seconds=expires_in)
    return now + default_ttl


class CJTokenService:
    """Credential persistence and token exchange for one request's DB session."""

    def __init__(
        self,
        db: AsyncSession,
        cj: ResilientCJClient,
        default_ttl_days: int = 15,
    ):
        self.db = db
        self.cj = cj
        self.default_ttl = timedelta(days=default_ttl_days)

    async def get_credential(self, user_id: UUID) -> CjCredential | None:
        result = await self.db.execute(
            select(CjCredential).where(CjCredential.user_id == user_id),
        )
        return result.scalar_one_or_none()

    async def save_api_key(self, user_id: UUID, api_key: str) -> CjCredential:
        """Insert or replace the user's API key; any cached token is dropped."""
        credential = await self.get_credential(user_id)
        if credential is None:
            credential = CjCredential(user_id=user_id, api_key=api_key)
            self.db.add(credential)
        else:
            credential.api_key = api_key
            credential.clear_token()
        await self.db.commit()
        logger.info("CJ API key saved", extra={"user_id": str(user_id)})
        return credential

    async def get_access_token(self, user_id: UUID) -> str | None:
        """Cached token if still valid, otherwise a freshly exchanged one. None if no key."""
        token, _ = await self._acquire(user_id)
        return token

    async def require_access_token(self, user_id: UUID) -> str:
        token = await self.get_access_token(user_id)
        if not token:
            raise CJNotConnectedError()
        return token

    async def invalidate(self, user_id: UUID) -> None:
        """Forget the cached token but keep the API key."""
        credential = await self.get_credential(user_id)
        if credential is None or credential.access_token is None:
            return
        credential.clear_token()
        await self.db.commit()
        logger.info("CJ access token invalidated", extra={"user_id": str(user_id)})

    async def call(self, user_id: UUID, fn: CJCall) -> dict:
        """Run a CJ call with the user's token, re-exchanging once if CJ rejects it."""
        token, fresh = await self._acquire(user_id)
        if not token:
            raise CJNotConnectedError()
        try:
            return await fn(token)
        except CJAuthenticationError:
            if fresh:
                raise
            logger.warning(
                "CJ rejected cached token, re-exchanging",
                extra={"user_id": str(user_id)},
            )
            await self.invalidate(user_id)
            return await fn(await self.require_access_token(user_id))

    async def _acquire(self, user_id: UUID) -> tuple[str | None, bool]:
        """Return (token, freshly_exchanged)."""
        credential = await self.get_credential(user_id)
        if credential is None or not credential.api_key:
            return None, False

        now = datetime.now(timezone.utc)
        expires_at = as_utc(credential.token_expires_at)
        if credential.access_token and expires_at and expires_at > now:
            return credential.access_token, False

        envelope = await self.cj.get_access_token(credential.api_key)
        data = envelope.get("data") or {}
        token = data.get("accessToken")
        if envelope.get("code") != 200 or not token:
            logger.error(
                f"CJ token exchange failed: {envelope.get('message')}",
                extra={"user_id": str(user_id), "cj_code": envelope.get("code")},
            )
            raise CJAuthenticationError(
                envelope.get("message") or "could not exchange API key",
            )

        credential.access_token = token
        credential.token_expires_at = token_expiry(data, now, self.default_ttl)
        await self.db.commit()
        logger.info("CJ access token refreshed", extra={"user_id": str(user_id)})
        return token, True
