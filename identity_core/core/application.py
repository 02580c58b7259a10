"""Application factory for creating and configuring the FastAPI application."""

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from identity_core.adapters.api.v1 import api_router
from identity_core.core.config.settings import settings
from identity_core.core.handlers import register_exception_handlers
from identity_core.core.lifecycle import create_lifespan_manager


def create_application(with_lifespan: bool = True) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        with_lifespan: Attach the startup/shutdown manager. Tests that override
            every dependency disable it to run without a database.

    Returns:
        FastAPI: The configured FastAPI application instance
    """
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="Authentication and identity service.",
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url=None,
        openapi_url="/openapi.json" if settings.DEBUG else None,
        lifespan=create_lifespan_manager() if with_lifespan else None,
        default_response_class=JSONResponse,
    )

    register_exception_handlers(app)
    app.include_router(api_router, prefix="/api/v1")

    return app
