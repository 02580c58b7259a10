"""
Global exception handlers for the FastAPI application.

Expected failures never reach these handlers: routes translate ``Failure``
outcomes themselves. What arrives here are faults, which are answered with
generic bodies so that no internal detail leaks to clients.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette import status
from structlog import get_logger

from identity_core.core.exceptions import (
    DatabaseError,
    EmailServiceError,
    IdentityCoreError,
    OutcomeError,
)
from identity_core.adapters.api.v1.auth.utils import failure_response

__all__ = [
    "database_error_handler",
    "email_service_error_handler",
    "outcome_error_handler",
    "identity_core_error_handler",
    "register_exception_handlers",
]

logger = get_logger(__name__)


async def database_error_handler(request: Request, exc: DatabaseError) -> JSONResponse:
    """Handles `DatabaseError`, returning a `500 Internal Server Error`.

    The driver error kept on ``__cause__`` is logged by type only.
    """
    logger.critical(
        "A critical database error occurred",
        error_code=exc.code,
        cause=type(exc.__cause__).__name__ if exc.__cause__ else None,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "A database error occurred.", "code": exc.code},
    )


async def email_service_error_handler(request: Request, exc: EmailServiceError) -> JSONResponse:
    """Handles `EmailServiceError`, returning a `503 Service Unavailable`.

    Raised when the email service is misconfigured or a template is broken.
    """
    logger.error(
        "Email service interaction failed",
        error_code=exc.code,
        error_message=exc.message,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "The email service is unavailable.", "code": exc.code},
    )


async def outcome_error_handler(request: Request, exc: OutcomeError) -> JSONResponse:
    """Handles an unwrapped ``Failure`` as if the route had returned it."""
    return failure_response(exc.failure)


async def identity_core_error_handler(request: Request, exc: IdentityCoreError) -> JSONResponse:
    """Handles the base `IdentityCoreError`, returning a `500 Internal Server Error`.

    Fallback for application errors without a more specific handler.
    """
    logger.error(
        "An unhandled application error occurred",
        error_code=exc.code,
        error_message=exc.message,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An unexpected error occurred.", "code": exc.code},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Registers all custom exception handlers with the FastAPI application.

    Starlette resolves handlers along the exception's MRO, so subclasses get
    their specific handler and everything else falls back to the base one.
    """
    app.add_exception_handler(DatabaseError, database_error_handler)
    app.add_exception_handler(EmailServiceError, email_service_error_handler)
    app.add_exception_handler(OutcomeError, outcome_error_handler)
    app.add_exception_handler(IdentityCoreError, identity_core_error_handler)
