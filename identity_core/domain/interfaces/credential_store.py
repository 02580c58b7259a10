"""Credential store interface.

The credential store owns users and their authentication material. It
verifies passwords, creates users, looks them up, and manages single-use
email-confirmation tokens. Every method returns an ``Outcome``; expected
conditions are ``Failure`` values, never exceptions.
"""

from abc import ABC, abstractmethod

from identity_core.domain.outcome import Outcome
from identity_core.domain.value_objects.identity import UserIdentity


class ICredentialStore(ABC):
    """Interface for credential storage and lookup.

    Implementations that write must cooperate with an open unit of work: when
    called inside ``ITransactionCoordinator.run`` they must leave committing
    to the coordinator.
    """

    @abstractmethod
    async def verify_password(
        self, username_or_email: str, password: str
    ) -> Outcome[UserIdentity]:
        """Checks a password against the stored hash.

        Args:
            username_or_email: Either the username or the email of the user.
            password: The plain password supplied by the caller.

        Returns:
            ``Success(UserIdentity)`` when the password matches, otherwise
            ``Failure`` with INVALID_CREDENTIALS or USER_NOT_FOUND.
        """
        raise NotImplementedError

    @abstractmethod
    async def create(self, username: str, email: str, password: str) -> Outcome[UserIdentity]:
        """Creates a new, unconfirmed user.

        Returns:
            ``Success(UserIdentity)`` or ``Failure`` with DUPLICATE_EMAIL,
            DUPLICATE_USERNAME or VALIDATION_ERROR.
        """
        raise NotImplementedError

    @abstractmethod
    async def find_by_email(self, email: str) -> Outcome[UserIdentity]:
        """Looks a user up by email. Fails with USER_NOT_FOUND."""
        raise NotImplementedError

    @abstractmethod
    async def find_by_id(self, user_id: str) -> Outcome[UserIdentity]:
        """Looks a user up by identifier. Fails with USER_NOT_FOUND."""
        raise NotImplementedError

    @abstractmethod
    async def confirm_email(self, email: str, token: str) -> Outcome[UserIdentity]:
        """Consumes a confirmation token and marks the email as confirmed.

        Tokens are single use: a second call with the same token fails.

        Returns:
            ``Success(UserIdentity)`` with ``email_confirmed`` set, or
            ``Failure`` with INVALID_OR_EXPIRED_TOKEN or USER_NOT_FOUND.
        """
        raise NotImplementedError

    @abstractmethod
    async def generate_confirmation_token(self, email: str) -> Outcome[str]:
        """Creates and stores a fresh confirmation token, replacing any
        previous one. Fails with USER_NOT_FOUND."""
        raise NotImplementedError
