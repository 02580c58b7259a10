"""The orchestrator's uniform success payload."""

from dataclasses import dataclass, field
from typing import Optional

from identity_core.domain.value_objects.identity import UserIdentity
from identity_core.domain.value_objects.token_pair import TokenPair


@dataclass(frozen=True, slots=True)
class AuthResult:
    """Result of a successful authentication-related operation.

    Built by one of two pure projections. Token-issuing operations use
    ``from_token_pair``; email confirmation issues no token and uses
    ``from_identity``. The two are deliberately not unified.
    """

    access_token: Optional[str] = field(default=None, repr=False)
    refresh_token: Optional[str] = field(default=None, repr=False)
    token_type: Optional[str] = None
    expires_in: Optional[int] = None
    user_id: Optional[str] = None
    username: Optional[str] = None
    email: Optional[str] = None
    email_confirmed: Optional[bool] = None

    @classmethod
    def from_token_pair(cls, pair: TokenPair) -> "AuthResult":
        return cls(
            access_token=pair.access_token,
            refresh_token=pair.refresh_token,
            token_type=pair.token_type,
            expires_in=pair.expires_in,
        )

    @classmethod
    def from_identity(cls, identity: UserIdentity) -> "AuthResult":
        return cls(
            user_id=identity.id,
            username=identity.username,
            email=identity.email,
            email_confirmed=identity.email_confirmed,
        )

    @property
    def has_tokens(self) -> bool:
        return self.access_token is not None
