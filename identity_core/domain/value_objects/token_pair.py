"""Token pair value object."""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True, slots=True)
class TokenPair:
    """An access token plus a refresh token issued together.

    Attributes:
        access_token: Short-lived bearer token.
        refresh_token: Long-lived token that can be rotated into a new pair.
        token_type: Authorization scheme, always ``bearer``.
        expires_in: Access token lifetime in seconds, when known.
    """

    access_token: str = field(repr=False)
    refresh_token: str = field(repr=False)
    token_type: str = "bearer"
    expires_in: Optional[int] = None
