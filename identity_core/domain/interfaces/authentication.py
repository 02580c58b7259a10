"""Authentication orchestrator interface.

The five operations exposed to presentation layers. Each returns an
``Outcome`` and never raises for expected failure conditions.
"""

from abc import ABC, abstractmethod

from identity_core.domain.outcome import Outcome
from identity_core.domain.value_objects.auth_result import AuthResult


class IAuthenticationOrchestrator(ABC):
    """Interface for authentication, registration, refresh and email confirmation."""

    @abstractmethod
    async def authenticate(self, username_or_email: str, password: str) -> Outcome[AuthResult]:
        """Verifies credentials and issues a token pair."""
        raise NotImplementedError

    @abstractmethod
    async def register(self, username: str, email: str, password: str) -> Outcome[AuthResult]:
        """Creates a user and issues its first token pair atomically."""
        raise NotImplementedError

    @abstractmethod
    async def refresh(self, refresh_token: str) -> Outcome[AuthResult]:
        """Rotates a refresh token into a new pair."""
        raise NotImplementedError

    @abstractmethod
    async def confirm_email(self, email: str, token: str) -> Outcome[AuthResult]:
        """Consumes a confirmation token and returns the confirmed identity."""
        raise NotImplementedError

    @abstractmethod
    async def send_confirmation_email(self, email: str) -> Outcome[None]:
        """Issues a confirmation token and emails the confirmation link."""
        raise NotImplementedError
