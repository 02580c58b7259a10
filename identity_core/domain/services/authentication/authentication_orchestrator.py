"""Authentication Orchestrator Domain Service.

Coordinates credential verification, token issuance and rotation,
transactional registration and the email-confirmation workflow across the
credential store, the token issuer, the notification sender and the
transaction coordinator.

Every operation composes its collaborator calls as a short-circuiting chain
of ``Outcome`` values: the first ``Failure`` is returned to the caller as is
and no further collaborator is called. Expected failures never cross this
boundary as exceptions; faults raised by collaborators propagate untouched.
"""

from urllib.parse import quote, urlparse

import structlog

from identity_core.core.config.email import DeliveryFailurePolicy
from identity_core.domain.errors import ErrorKind
from identity_core.domain.interfaces import (
    IAuthenticationOrchestrator,
    ICredentialStore,
    INotificationSender,
    ITokenIssuer,
    ITransactionCoordinator,
)
from identity_core.domain.outcome import Failure, Outcome, Success
from identity_core.domain.value_objects.auth_result import AuthResult
from identity_core.domain.value_objects.email import mask_email
from identity_core.domain.value_objects.identity import Credentials
from identity_core.domain.value_objects.token_pair import TokenPair

logger = structlog.get_logger(__name__)

CONFIRMATION_PATH = "/confirm-email"


class AuthenticationOrchestrator(IAuthenticationOrchestrator):
    """Domain service composing the authentication collaborators.

    The orchestrator holds only references to its collaborators and to
    immutable configuration, so a single instance can serve concurrent
    calls. Registration is the only operation that opens a unit of work;
    all other operations rely on the atomicity of individual collaborator
    calls.
    """

    def __init__(
        self,
        credential_store: ICredentialStore,
        token_issuer: ITokenIssuer,
        notification_sender: INotificationSender,
        transaction_coordinator: ITransactionCoordinator,
        confirmation_url_base: str,
        delivery_failure_policy: DeliveryFailurePolicy = DeliveryFailurePolicy.PROPAGATE,
    ):
        """Initialize the orchestrator with its collaborators.

        Args:
            credential_store: Users and their authentication material.
            token_issuer: Mints and rotates token pairs.
            notification_sender: Delivers confirmation emails.
            transaction_coordinator: Runs registration atomically.
            confirmation_url_base: Absolute http(s) URL the confirmation
                link is built on, e.g. ``https://app.example.com``.
            delivery_failure_policy: What ``send_confirmation_email`` does
                when delivery fails.

        Raises:
            ValueError: If ``confirmation_url_base`` is empty or not an
                absolute http(s) URL.
        """
        parsed = urlparse(confirmation_url_base or "")
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("confirmation_url_base must be an absolute http(s) URL")

        self._credential_store = credential_store
        self._token_issuer = token_issuer
        self._notification_sender = notification_sender
        self._transaction_coordinator = transaction_coordinator
        self._confirmation_url_base = confirmation_url_base.rstrip("/")
        self._delivery_failure_policy = DeliveryFailurePolicy(delivery_failure_policy)

    async def authenticate(self, username_or_email: str, password: str) -> Outcome[AuthResult]:
        """Verify credentials and issue a token pair.

        Read only: no unit of work is opened. A store failure skips issuance.

        Returns:
            ``Success(AuthResult)`` carrying the tokens, or the first
            collaborator ``Failure`` unchanged (INVALID_CREDENTIALS,
            USER_NOT_FOUND, ISSUANCE_ERROR...).
        """
        credentials = Credentials(username_or_email=username_or_email, password=password)
        logger.info("Authentication attempt", identifier=credentials.mask_for_logging())

        verified = await self._credential_store.verify_password(
            credentials.username_or_email, credentials.password
        )
        if verified.is_failure:
            logger.info(
                "Authentication rejected",
                identifier=credentials.mask_for_logging(),
                reason=verified.kind.value,
            )
            return verified

        identity = verified.value
        issued = await self._token_issuer.generate(identity.id, identity.email)
        if issued.is_failure:
            logger.warning("Token issuance failed", user_id=identity.id, reason=issued.kind.value)
            return issued

        logger.info("Authentication succeeded", user_id=identity.id)
        return issued.map(AuthResult.from_token_pair)

    async def register(self, username: str, email: str, password: str) -> Outcome[AuthResult]:
        """Create a user and issue its first token pair in one unit of work.

        Creation strictly precedes issuance, which strictly precedes commit.
        If issuance fails the unit of work is rolled back, so the created
        user does not persist. Exceptions and cancellation raised inside the
        unit of work roll it back as well and are re-raised.
        """
        logger.info("Registration attempt", email=mask_email(email))

        async def create_and_issue() -> Outcome[TokenPair]:
            created = await self._credential_store.create(username, email, password)
            if created.is_failure:
                return created
            user = created.value
            return await self._token_issuer.generate(user.id, user.email)

        outcome = await self._transaction_coordinator.run(create_and_issue)
        if outcome.is_failure:
            logger.info(
                "Registration rejected", email=mask_email(email), reason=outcome.kind.value
            )
            return outcome

        logger.info("Registration succeeded", email=mask_email(email))
        return outcome.map(AuthResult.from_token_pair)

    async def refresh(self, refresh_token: str) -> Outcome[AuthResult]:
        """Rotate a refresh token into a new pair. Never touches the store."""
        rotated = await self._token_issuer.rotate(refresh_token)
        if rotated.is_failure:
            logger.info("Token refresh rejected", reason=rotated.kind.value)
            return rotated
        return rotated.map(AuthResult.from_token_pair)

    async def confirm_email(self, email: str, token: str) -> Outcome[AuthResult]:
        """Consume a confirmation token and return the confirmed identity.

        No token pair is issued; the result is the identity projection.
        """
        confirmed = await self._credential_store.confirm_email(email, token)
        if confirmed.is_failure:
            logger.info(
                "Email confirmation rejected",
                email=mask_email(email),
                reason=confirmed.kind.value,
            )
            return confirmed

        logger.info("Email confirmed", user_id=confirmed.value.id)
        return confirmed.map(AuthResult.from_identity)

    async def send_confirmation_email(self, email: str) -> Outcome[None]:
        """Issue a fresh confirmation token and email the confirmation link.

        Steps:
        1. Look the user up by email.
        2. Refuse an already confirmed address (EMAIL_ALREADY_CONFIRMED)
           without calling any other collaborator.
        3. Generate a confirmation token.
        4. Deliver ``{base}/confirm-email?token=...`` to the user.

        A delivery failure is returned under ``DeliveryFailurePolicy.PROPAGATE``
        and only logged under ``DeliveryFailurePolicy.LOG_AND_IGNORE``.
        """
        found = await self._credential_store.find_by_email(email)
        if found.is_failure:
            return found

        identity = found.value
        if identity.email_confirmed:
            logger.info("Confirmation email not sent", user_id=identity.id, reason="already_confirmed")
            return Failure(ErrorKind.EMAIL_ALREADY_CONFIRMED)

        generated = await self._credential_store.generate_confirmation_token(identity.email)
        if generated.is_failure:
            return generated

        link = self.build_confirmation_link(generated.value)
        delivered = await self._notification_sender.send_confirmation_email(
            identity.email, identity.username, link
        )
        if delivered.is_failure:
            if self._delivery_failure_policy is DeliveryFailurePolicy.PROPAGATE:
                logger.error(
                    "Confirmation email delivery failed",
                    user_id=identity.id,
                    email=mask_email(identity.email),
                    reason=delivered.message,
                )
                return delivered
            logger.warning(
                "Confirmation email delivery failed, continuing",
                user_id=identity.id,
                email=mask_email(identity.email),
                reason=delivered.message,
            )

        logger.info("Confirmation email processed", user_id=identity.id)
        return Success(None)

    def build_confirmation_link(self, token: str) -> str:
        return f"{self._confirmation_url_base}{CONFIRMATION_PATH}?token={quote(token, safe='')}"
