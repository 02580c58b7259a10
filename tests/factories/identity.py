"""Factories for generating fake identities and tokens for testing."""

from datetime import datetime, timedelta, timezone
from typing import Optional

from faker import Faker

from identity_core.domain.entities.user import User
from identity_core.domain.value_objects.identity import UserIdentity
from identity_core.domain.value_objects.token_pair import TokenPair

fake = Faker()

# Satisfies every password rule; bcrypt hash of it computed lazily by tests that need one.
strong_password = "Str0ngP@ssw0rd"


def _username() -> str:
    return fake.unique.user_name().lower().replace(".", "_")[:30]


def create_fake_identity(
    id: Optional[str] = None,
    username: Optional[str] = None,
    email: Optional[str] = None,
    email_confirmed: bool = False,
) -> UserIdentity:
    return UserIdentity(
        id=id or fake.uuid4().replace("-", ""),
        username=username or _username(),
        email=email or fake.unique.email().lower(),
        email_confirmed=email_confirmed,
    )


def create_fake_token_pair(access_token: Optional[str] = None, refresh_token: Optional[str] = None) -> TokenPair:
    return TokenPair(
        access_token=access_token or fake.sha256(),
        refresh_token=refresh_token or fake.sha256(),
        token_type="bearer",
        expires_in=900,
    )


def create_fake_user(
    hashed_password: str = "$2b$12$" + "a" * 53,
    email_confirmed: bool = False,
    confirmation_token: Optional[str] = None,
    token_expires_in: timedelta = timedelta(hours=1),
    **overrides,
) -> User:
    """Create a ``User`` row that is never persisted."""
    user = User(
        username=overrides.pop("username", None) or _username(),
        email=overrides.pop("email", None) or fake.unique.email().lower(),
        hashed_password=hashed_password,
        email_confirmed=email_confirmed,
        **overrides,
    )
    if confirmation_token is not None:
        user.email_confirmation_token = confirmation_token
        user.email_confirmation_token_expires_at = datetime.now(timezone.utc) + token_expires_in
    return user
