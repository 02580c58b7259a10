"""Token issuer interface."""

from abc import ABC, abstractmethod

from identity_core.domain.outcome import Outcome
from identity_core.domain.value_objects.token_pair import TokenPair


class ITokenIssuer(ABC):
    """Mints and rotates access/refresh token pairs.

    Signing, verification and refresh-token bookkeeping are internal to the
    implementation.
    """

    @abstractmethod
    async def generate(self, user_id: str, email: str) -> Outcome[TokenPair]:
        """Issues a new pair for the given identity.

        Returns:
            ``Success(TokenPair)`` or ``Failure(ISSUANCE_ERROR)``.
        """
        raise NotImplementedError

    @abstractmethod
    async def rotate(self, refresh_token: str) -> Outcome[TokenPair]:
        """Exchanges a refresh token for a new pair, invalidating the old one.

        Returns:
            ``Success(TokenPair)`` or ``Failure`` with EXPIRED_TOKEN,
            REVOKED_TOKEN or MALFORMED_TOKEN.
        """
        raise NotImplementedError
