"""Dependencies for the authentication API.

Wires the production collaborators into an ``AuthenticationOrchestrator``
per request. The request's ``AsyncSession`` is shared by the credential
store and the transaction coordinator, so writes made by the store inside a
registration scope are committed or rolled back together.

Tests replace any factory below through ``app.dependency_overrides``.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from identity_core.core.config.settings import settings
from identity_core.domain.interfaces import (
    IAuthenticationOrchestrator,
    ICredentialStore,
    INotificationSender,
    ITokenIssuer,
    ITransactionCoordinator,
)
from identity_core.domain.services.authentication import AuthenticationOrchestrator
from identity_core.infrastructure.database.async_db import get_async_db
from identity_core.infrastructure.database.unit_of_work import SqlTransactionCoordinator
from identity_core.infrastructure.redis import get_redis
from identity_core.infrastructure.repositories.credential_store import SqlCredentialStore
from identity_core.infrastructure.services.email.notification_sender import EmailNotificationSender
from identity_core.infrastructure.services.token_issuer import JwtTokenIssuer

# ---------------------------------------------------------------------------
# Type aliases for dependency injection
# ---------------------------------------------------------------------------

AsyncDB = Annotated[AsyncSession, Depends(get_async_db)]
RedisClient = Annotated[Redis, Depends(get_redis)]

# ---------------------------------------------------------------------------
# Infrastructure Layer Dependencies
# ---------------------------------------------------------------------------


def get_credential_store(db: AsyncDB) -> ICredentialStore:
    return SqlCredentialStore(db)


def get_transaction_coordinator(db: AsyncDB) -> ITransactionCoordinator:
    return SqlTransactionCoordinator(db)


def get_token_issuer(redis: RedisClient) -> ITokenIssuer:
    return JwtTokenIssuer(redis)


@lru_cache(maxsize=1)
def get_notification_sender() -> INotificationSender:
    """Process-wide email sender; the SMTP client and templates are reusable."""
    return EmailNotificationSender()


# ---------------------------------------------------------------------------
# Domain Service Dependencies
# ---------------------------------------------------------------------------


def get_authentication_orchestrator(
    credential_store: ICredentialStore = Depends(get_credential_store),
    token_issuer: ITokenIssuer = Depends(get_token_issuer),
    notification_sender: INotificationSender = Depends(get_notification_sender),
    transaction_coordinator: ITransactionCoordinator = Depends(get_transaction_coordinator),
) -> IAuthenticationOrchestrator:
    """Factory that returns the authentication orchestrator.

    FastAPI caches ``get_async_db`` within a request, so both the store and the
    coordinator receive the same session.
    """
    return AuthenticationOrchestrator(
        credential_store=credential_store,
        token_issuer=token_issuer,
        notification_sender=notification_sender,
        transaction_coordinator=transaction_coordinator,
        confirmation_url_base=settings.EMAIL_CONFIRMATION_URL_BASE,
        delivery_failure_policy=settings.EMAIL_CONFIRMATION_DELIVERY_FAILURE_POLICY,
    )


AuthOrchestrator = Annotated[IAuthenticationOrchestrator, Depends(get_authentication_orchestrator)]
