"""Courier Assignment Engine — FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from courier_engine.adapters.persistence.database import engine
from courier_engine.infrastructure.api.routes_assignment import router as assignment_router
from courier_engine.infrastructure.api.routes_health import router as health_router
from courier_engine.logging_setup import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    try:
        async with engine.begin():
            pass  # Connection pool warmed up
        logger.info("Database connection established")
    except Exception as e:
        logger.warning("Database not available on startup: %s", e)
    yield
    await engine.dispose()


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(
        title="Courier Assignment Engine",
        description="Rule-based courier resolution, snapshot freezing and guarded overrides",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.include_router(health_router, prefix="/api")
    app.include_router(assignment_router, prefix="/api")

    return app


app = create_app()
