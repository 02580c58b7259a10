"""Application lifecycle management.

Handles startup and shutdown: table creation outside production, and
disposal of the database engine's connection pool on shutdown.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from identity_core.core.config.settings import settings
from identity_core.core.logging import logger
from identity_core.infrastructure.database.async_db import create_async_db_and_tables, engine


def create_lifespan_manager():
    """Create the application lifespan manager.

    Returns:
        AsyncContextManager: The lifespan manager for the FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        if settings.APP_ENV in ("development", "test"):
            await create_async_db_and_tables()
        logger.info("application_startup", env=settings.APP_ENV, version=settings.VERSION)

        yield

        # Shutdown
        await engine.dispose()
        logger.info("application_shutdown", env=settings.APP_ENV)

    return lifespan
