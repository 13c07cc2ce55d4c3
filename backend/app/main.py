"""Waitlist Ban Registry API - FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map WaitlistError to structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database pool and ESI client created in the lifespan, closed on shutdown
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.error_handlers import register_error_handlers
from app.api.routes import bans, health
from app.config import get_settings
from app.infrastructure.database import close_db, init_db
from app.infrastructure.esi_client import close_esi, init_esi
from app.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    init_esi(
        base_url=settings.esi_base_url,
        timeout_seconds=settings.esi_timeout_seconds,
        user_agent=settings.esi_user_agent,
    )
    logger.info("Waitlist ban API started")
    yield
    await close_esi()
    await close_db()
    logger.info("Waitlist ban API shut down")


app = FastAPI(
    title="Waitlist Ban Registry API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(bans.router)

register_error_handlers(app)
