"""Auth Routes — register, login, current user, password change.

Invariants:
    - Login failure message is identical for unknown email and wrong password
    - Responses never include password_hash
    - register/login return {user, token}; the token is a bearer JWT
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.api.dependencies import get_current_user
from storefront.config import get_settings
from storefront.core.errors import ConflictError, InvalidCredentialsError
from storefront.infrastructure.database import get_db
from storefront.infrastructure.security import (
    create_access_token, hash_password, verify_password,
)
from storefront.models.user import User
from storefront.schemas.auth import LoginRequest, PasswordChange, RegisterRequest

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/auth", tags=["auth"])


async def save_new_user(db: AsyncSession, user: User) -> User:
    """Insert a user; losing a registration race on the email index is a 409."""
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("Email already registered", code="EMAIL_TAKEN")
    await db.refresh(user)
    return user


def _issue_token(user: User) -> str:
    settings = get_settings()
    return create_access_token(
        user.id,
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expire_days=settings.jwt_expire_days,
    )


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(body: RegisterRequest, db: AsyncSession = Depends(get_db)):
    """Create a seller account and log it in."""
    existing = await db.execute(select(User.id).where(User.email == body.email))
    if existing.scalar_one_or_none() is not None:
        raise ConflictError("Email already registered", code="EMAIL_TAKEN")

    user = await save_new_user(db, User(
        email=body.email,
        password_hash=hash_password(body.password),
        full_name=body.full_name,
    ))
    logger.info("User registered", extra={"user_id": str(user.id)})
    return {
        "message": "User registered successfully",
        "user": user.to_dict(),
        "token": _issue_token(user),
    }


@router.post("/login")
async def login(body: LoginRequest, db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(User).where(User.email == body.email))
    user = result.scalar_one_or_none()
    if user is None or not verify_password(body.password, user.password_hash):
        raise InvalidCredentialsError()
    return {
        "message": "Login successful",
        "user": user.to_dict(),
        "token": _issue_token(user),
    }


@router.get("/me")
async def me(user: User = Depends(get_current_user)):
    return {"user": user.to_dict()}


@router.put("/password")
async def change_password(
    body: PasswordChange,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if not verify_password(body.current_password, user.password_hash):
        raise InvalidCredentialsError("Current password is incorrect")
    user.password_hash = hash_password(body.new_password)
    await db.commit()
    logger.info("Password changed", extra={"user_id": str(user.id)})
    return {"message": "Password updated successfully"}
