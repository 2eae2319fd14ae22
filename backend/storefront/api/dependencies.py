"""Request Dependencies — current user from the bearer token, per-request CJ token service.

Invariants:
    - get_current_user raises AuthenticationError (401) for a missing, invalid,
      or expired token and for a token whose user no longer exists
    - get_token_service shares the request's DB session (get_db is cached per request)
"""

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.config import get_settings
from storefront.core.errors import AuthenticationError
from storefront.infrastructure.cj_client import ResilientCJClient, get_cj_client
from storefront.infrastructure.database import get_db
from storefront.infrastructure.security import decode_access_token
from storefront.models.user import User
from storefront.services.cj_token import CJTokenService

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Access token required")
    settings = get_settings()
    user_id = decode_access_token(
        credentials.credentials, settings.jwt_secret, settings.jwt_algorithm,
    )
    user = await db.get(User, user_id)
    if user is None:
        raise AuthenticationError("User not found")
    return user


def get_token_service(
    db: AsyncSession = Depends(get_db),
    cj: ResilientCJClient = Depends(get_cj_client),
) -> CJTokenService:
    return CJTokenService(
        db, cj, default_ttl_days=get_settings().cj_default_token_ttl_days,
    )
