"""Verification API - FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map VerificationError -> structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database, notifier and event bus initialized on startup via lifespan
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from verification_service.api.dependencies import init_collaborators
from verification_service.api.error_handlers import register_error_handlers
from verification_service.api.routes import health, verification
from verification_service.config import get_settings
from verification_service.infrastructure import database
from verification_service.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    init_collaborators(settings)
    logger.info("Verification API started")
    yield
    if database.db_manager:
        await database.db_manager.dispose()
    logger.info("Verification API shutting down")


app = FastAPI(
    title="Verification API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(verification.router)

register_error_handlers(app)
