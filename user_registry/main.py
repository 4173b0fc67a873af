"""User Registry API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map UserRegistryError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Logging and database initialized on startup via lifespan context manager

Run with: uvicorn user_registry.main:app
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from user_registry.api.error_handlers import register_error_handlers
from user_registry.api.routes import health, users
from user_registry.config import get_settings
from user_registry.infrastructure.database import init_db
from user_registry.infrastructure.observability import setup_logging

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
    logger.info("User Registry API started")
    yield
    await manager.dispose()
    logger.info("User Registry API shutting down")


app = FastAPI(
    title="User Registry API", version=health.SERVICE_VERSION, lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(users.router)

register_error_handlers(app)
