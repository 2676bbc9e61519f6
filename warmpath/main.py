"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from warmpath.api.v1.endpoints import health
from warmpath.api.v1.router import api_router
from warmpath.core.config import settings
from warmpath.core.database import close_database, init_database
from warmpath.utils.logging import get_logger

LOGGER = get_logger(__name__, level=settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    LOGGER.info(
        "Starting application",
        extra={
            "app_name": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment,
        },
    )
    try:
        await init_database(create_tables=settings.environment == "development")
    except Exception as e:
        # Serve anyway; /health reports the database as degraded
        LOGGER.error(f"Database initialization failed: {e}", exc_info=True)

    yield

    await close_database()
    LOGGER.info("Application shutdown complete")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    lifespan=lifespan,
)

app.include_router(health.router, prefix="/health")
app.include_router(api_router, prefix=settings.api_v1_prefix)
