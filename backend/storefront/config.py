"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded in code paths)
    - get_settings() is cached (lru_cache) — single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all non-secret settings: works out-of-the-box with docker-compose
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://storefront:storefront@db:5432/storefront"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted Postgres hands out postgres:// URLs; asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str):
            for prefix in ("postgresql://", "postgres://"):
                if v.startswith(prefix):
                    return v.replace(prefix, "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 10
    database_max_overflow: int = 5
    database_create_tables: bool = False

    # Auth
    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    jwt_expire_days: int = 7

    # CJDropShipping
    cj_api_base_url: str = "https://developers.cjdropshipping.com/api2.0/v1"
    cj_timeout_seconds: int = 30
    cj_max_retries: int = 3
    cj_base_delay_ms: int = 500
    cj_max_delay_ms: int = 10_000
    cj_default_token_ttl_days: int = 15

    # Storefront defaults
    default_markup_percentage: float = 30.0
    default_country_code: str = "PH"
    trend_cache_ttl_minutes: int = 60

    # API
    frontend_url: str = "http://localhost:5173"
    cors_origins: list[str] = []

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def allowed_origins(self) -> list[str]:
        """frontend_url first, then any extra origins (deduplicated)."""
        origins = [self.frontend_url, *self.cors_origins]
        return list(dict.fromkeys(o for o in origins if o))


@lru_cache
def get_settings() -> Settings:
    return Settings()
