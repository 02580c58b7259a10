"""Token refresh endpoint."""

from fastapi import APIRouter, status

from identity_core.adapters.api.v1.auth.schemas import ErrorResponse, RefreshRequest, TokenResponse
from identity_core.adapters.api.v1.auth.utils import failure_response
from identity_core.infrastructure.dependency_injection.auth_dependencies import AuthOrchestrator

router = APIRouter()


@router.post(
    "",
    response_model=TokenResponse,
    status_code=status.HTTP_200_OK,
    summary="Rotate a refresh token",
    description=(
        "Exchanges a refresh token for a new token pair. The presented refresh "
        "token is consumed and cannot be used again."
    ),
    responses={status.HTTP_401_UNAUTHORIZED: {"model": ErrorResponse}},
)
async def refresh_tokens(payload: RefreshRequest, orchestrator: AuthOrchestrator):
    outcome = await orchestrator.refresh(payload.refresh_token)
    if outcome.is_failure:
        return failure_response(outcome)
    return TokenResponse.from_result(outcome.value)
