"""Login endpoint.

Thin adapter over ``IAuthenticationOrchestrator.authenticate``: no business
logic lives here. Failures are translated by ``failure_response``.
"""

import structlog
from fastapi import APIRouter, status

from identity_core.adapters.api.v1.auth.schemas import ErrorResponse, LoginRequest, TokenResponse
from identity_core.adapters.api.v1.auth.utils import failure_response
from identity_core.infrastructure.dependency_injection.auth_dependencies import AuthOrchestrator

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post(
    "",
    response_model=TokenResponse,
    status_code=status.HTTP_200_OK,
    summary="Authenticate a user",
    description="Verifies a username or email with a password and issues an access/refresh token pair.",
    responses={
        status.HTTP_401_UNAUTHORIZED: {"model": ErrorResponse},
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
        status.HTTP_503_SERVICE_UNAVAILABLE: {"model": ErrorResponse},
    },
)
async def login_user(payload: LoginRequest, orchestrator: AuthOrchestrator):
    outcome = await orchestrator.authenticate(payload.username_or_email, payload.password)
    if outcome.is_failure:
        return failure_response(outcome)
    return TokenResponse.from_result(outcome.value)
