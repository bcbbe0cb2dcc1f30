"""FastAPI application factory."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.errors import register_exception_handlers
from src.api.v1.router import api_router
from src.core.config import settings
from src.core.logging import setup_logging
from src.db.session import Database
from src.services.limits import RequestLimiter


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    database: Database = app.state.db
    database.connect()
    logger.info(f"{settings.PROJECT_NAME} starting (env={settings.ENV})")
    try:
        yield
    finally:
        await app.state.limiter.close()
        await database.disconnect()


def create_application(
    database: Database | None = None, limiter: RequestLimiter | None = None
) -> FastAPI:
    """Build the API, optionally around an already constructed database and limiter."""

    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)
    app.state.db = database or Database(settings.DATABASE_URI, echo=settings.DATABASE_ECHO)
    app.state.limiter = limiter or RequestLimiter.from_url(settings.REDIS_URI, settings.limits)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)
    app.include_router(api_router, prefix=f"{settings.API_PREFIX}/v1")

    @app.get("/health", tags=["health"])
    async def health() -> dict:
        return {"status": "ok"}

    return app


app = create_application()

__all__ = ["create_application", "app"]
