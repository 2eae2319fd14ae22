"""Security — bcrypt password hashing and JWT issue/verify.

Invariants:
    - Plain passwords never leave this module except as bcrypt hashes
    - Tokens carry `sub` (user id as str), `iat` and `exp`; HS256 by default
    - decode_access_token raises AuthenticationError for every failure mode

Design Decisions:
    - passlib bcrypt + PyJWT: same pairing as the user service it replaces
"""

import logging
from datetime import datetime, timedelta, timezone
from uuid import UUID

import jwt
from passlib.hash import bcrypt

from storefront.core.errors import AuthenticationError

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    return bcrypt.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.verify(password, password_hash)
    except ValueError:
        # malformed hash in the row
        logger.warning("Unverifiable password hash encountered")
        return False


def create_access_token(
    user_id: UUID, secret: str, algorithm: str = "HS256", expire_days: int = 7,
) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(days=expire_days)).timestamp()),
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


def decode_access_token(token: str, secret: str, algorithm: str = "HS256") -> UUID:
    """Return the user id a token was issued for."""
    try:
        payload = jwt.decode(token, secret, algorithms=[algorithm])
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token expired")
    except jwt.InvalidTokenError:
        raise AuthenticationError("Invalid token")
    try:
        return UUID(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise AuthenticationError("Invalid token")
