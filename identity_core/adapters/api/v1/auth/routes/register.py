"""Registration endpoint.

Creates a user and issues its first token pair. User creation and token
issuance are one unit of work: if issuance fails, no user is stored.
"""

import structlog
from fastapi import APIRouter, status

from identity_core.adapters.api.v1.auth.schemas import ErrorResponse, RegisterRequest, TokenResponse
from identity_core.adapters.api.v1.auth.utils import failure_response
from identity_core.domain.value_objects.email import mask_email
from identity_core.infrastructure.dependency_injection.auth_dependencies import AuthOrchestrator

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post(
    "",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    responses={
        status.HTTP_409_CONFLICT: {"model": ErrorResponse},
        status.HTTP_422_UNPROCESSABLE_ENTITY: {"model": ErrorResponse},
        status.HTTP_503_SERVICE_UNAVAILABLE: {"model": ErrorResponse},
    },
)
async def register_user(payload: RegisterRequest, orchestrator: AuthOrchestrator):
    """Register a user.

    Returns:
        TokenResponse: The user's first token pair (201).
        ErrorResponse: ``duplicate_email``/``duplicate_username`` (409),
            ``validation_error`` (422) or ``issuance_error`` (503).
    """
    outcome = await orchestrator.register(payload.username, str(payload.email), payload.password)
    if outcome.is_failure:
        return failure_response(outcome)

    logger.info("User registered via API", email=mask_email(str(payload.email)))
    return TokenResponse.from_result(outcome.value)
