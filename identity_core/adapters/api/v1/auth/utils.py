"""Helpers shared by the authentication routes."""

from fastapi.responses import JSONResponse
from starlette import status

from identity_core.domain.errors import ErrorCategory
from identity_core.domain.outcome import Failure

STATUS_BY_CATEGORY = {
    ErrorCategory.VALIDATION: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorCategory.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCategory.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCategory.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorCategory.DEPENDENCY: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def failure_response(failure: Failure) -> JSONResponse:
    """Translate a ``Failure`` into ``{"detail", "code"}`` with its category's status."""
    headers = None
    if failure.kind.category is ErrorCategory.UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=STATUS_BY_CATEGORY[failure.kind.category],
        content={"detail": failure.message, "code": failure.kind.value},
        headers=headers,
    )
