"""Response Pydantic model for user identity data."""

from pydantic import BaseModel

from identity_core.domain.value_objects.auth_result import AuthResult


class UserOut(BaseModel):
    """Public view of a user; never includes credentials."""

    id: str
    username: str
    email: str
    email_confirmed: bool

    @classmethod
    def from_result(cls, result: AuthResult) -> "UserOut":
        return cls(
            id=result.user_id,
            username=result.username,
            email=result.email,
            email_confirmed=bool(result.email_confirmed),
        )
