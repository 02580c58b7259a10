"""Email confirmation endpoint.

Consumes a confirmation token. The response carries the confirmed identity
and no tokens.
"""

import structlog
from fastapi import APIRouter, status

from identity_core.adapters.api.v1.auth.schemas import ConfirmEmailRequest, ErrorResponse, UserOut
from identity_core.adapters.api.v1.auth.utils import failure_response
from identity_core.infrastructure.dependency_injection.auth_dependencies import AuthOrchestrator

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post(
    "",
    response_model=UserOut,
    status_code=status.HTTP_200_OK,
    summary="Confirm user email address",
    responses={
        status.HTTP_401_UNAUTHORIZED: {"model": ErrorResponse},
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    },
)
async def confirm_email(payload: ConfirmEmailRequest, orchestrator: AuthOrchestrator):
    outcome = await orchestrator.confirm_email(str(payload.email), payload.token)
    if outcome.is_failure:
        logger.info(
            "Email confirmation failed",
            token_prefix=payload.token[:8],
            code=outcome.kind.value,
        )
        return failure_response(outcome)
    return UserOut.from_result(outcome.value)
