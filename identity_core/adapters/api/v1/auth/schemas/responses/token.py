"""Response Pydantic model for token data."""

from typing import Optional

from pydantic import BaseModel

from identity_core.domain.value_objects.auth_result import AuthResult


class TokenResponse(BaseModel):
    """JWT access & refresh tokens with additional metadata."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: Optional[int] = None  # seconds

    @classmethod
    def from_result(cls, result: AuthResult) -> "TokenResponse":
        return cls(
            access_token=result.access_token,
            refresh_token=result.refresh_token,
            token_type=result.token_type or "bearer",
            expires_in=result.expires_in,
        )
