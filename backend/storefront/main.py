"""CJ Storefront API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map StorefrontError → structured JSON responses
    - CORS configured from settings (frontend_url + cors_origins, not hardcoded)
    - Database and CJ client initialized on startup, released on shutdown

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Tables come from alembic; database_create_tables only for throwaway local setups
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront.api.error_handlers import register_error_handlers
from storefront.api.routes import auth, cj, health, orders, products, stats, trends
from storefront.config import get_settings
from storefront.infrastructure.cj_client import close_cj_client, init_cj_client
from storefront.infrastructure.database import init_db
from storefront.infrastructure.observability import log_requests, setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    if settings.database_create_tables:
        await manager.create_all()
    init_cj_client(
        settings.cj_api_base_url,
        timeout_seconds=settings.cj_timeout_seconds,
        max_retries=settings.cj_max_retries,
        base_delay_ms=settings.cj_base_delay_ms,
        max_delay_ms=settings.cj_max_delay_ms,
    )
    logger.info("Storefront API started")
    yield
    logger.info("Storefront API shutting down")
    await close_cj_client()
    await manager.dispose()


app = FastAPI(
    title="CJ Storefront API", version=health.SERVICE_VERSION, lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(log_requests)

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(cj.router)
app.include_router(products.router)
app.include_router(orders.router)
app.include_router(trends.router)
app.include_router(stats.router)

register_error_handlers(app)
