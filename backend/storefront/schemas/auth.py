"""Auth Schemas — registration, login, and password change bodies.

Invariants:
    - Emails are lower-cased before they reach the DB
    - Passwords are at least 6 characters (matches the web Settings form)
"""

from pydantic import Field, field_validator

from storefront.schemas.base import CamelModel

MIN_PASSWORD_LENGTH = 6


def _normalize_email(v: str) -> str:
    v = v.strip().lower()
    if "@" not in v or v.startswith("@") or v.endswith("@"):
        raise ValueError("email must be a valid address")
    return v


class RegisterRequest(CamelModel):
    email: str = Field(max_length=255)
    password: str = Field(min_length=MIN_PASSWORD_LENGTH, max_length=128)
    full_name: str | None = Field(None, max_length=255)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return _normalize_email(v)


class LoginRequest(CamelModel):
    email: str = Field(max_length=255)
    password: str = Field(min_length=1, max_length=128)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class PasswordChange(CamelModel):
    current_password: str = Field(min_length=1, max_length=128)
    new_password: str = Field(min_length=MIN_PASSWORD_LENGTH, max_length=128)
