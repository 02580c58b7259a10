"""Resend confirmation email endpoint."""

from fastapi import APIRouter, status

from identity_core.adapters.api.v1.auth.schemas import ErrorResponse, MessageResponse, ResendConfirmationRequest
from identity_core.adapters.api.v1.auth.utils import failure_response
from identity_core.infrastructure.dependency_injection.auth_dependencies import AuthOrchestrator

router = APIRouter()


@router.post(
    "",
    response_model=MessageResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Resend the email confirmation message",
    responses={
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
        status.HTTP_409_CONFLICT: {"model": ErrorResponse},
        status.HTTP_503_SERVICE_UNAVAILABLE: {"model": ErrorResponse},
    },
)
async def resend_confirmation_email(payload: ResendConfirmationRequest, orchestrator: AuthOrchestrator):
    outcome = await orchestrator.send_confirmation_email(str(payload.email))
    if outcome.is_failure:
        return failure_response(outcome)
    return MessageResponse(message="Confirmation email sent.")
