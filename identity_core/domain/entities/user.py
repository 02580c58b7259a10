import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, text
from sqlmodel import Column, Field, Index, SQLModel, String

from identity_core.domain.value_objects.identity import UserIdentity


def _new_user_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    """Persisted user record owned by the credential store.

    The orchestrator never sees this class; the store projects it into an
    immutable ``UserIdentity`` before returning it.

    Attributes:
        id: Opaque identifier (uuid4 hex), assigned before the first flush.
        username: Unique, lowercase username.
        email: Unique, lowercase email address.
        hashed_password: Bcrypt hash of the password.
        email_confirmed: Whether the user proved control of ``email``.
        email_confirmation_token: Outstanding single-use confirmation token.
        email_confirmation_token_expires_at: Expiry of that token.
        created_at: Creation timestamp.
    """

    __tablename__ = "users"

    id: str = Field(
        default_factory=_new_user_id,
        primary_key=True,
        max_length=32,
        description="Opaque identifier of the user.",
    )
    username: str = Field(
        sa_column=Column(String(30), unique=True, index=True, nullable=False),
        description="Unique, case-insensitive username for login.",
    )
    email: str = Field(
        sa_column=Column(String(254), unique=True, index=True, nullable=False),
        description="Unique, case-insensitive email address.",
    )
    hashed_password: str = Field(max_length=255, description="Bcrypt-hashed password.")
    email_confirmed: bool = Field(default=False)
    email_confirmation_token: Optional[str] = Field(default=None, max_length=64)
    email_confirmation_token_expires_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True),
    )
    created_at: datetime = Field(
        default_factory=_utcnow,
        sa_column=Column(
            DateTime(timezone=True),
            server_default=text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
    )

    __table_args__ = (
        Index("ix_users_username_lower", text("lower(username)")),
        Index("ix_users_email_lower", text("lower(email)")),
        {"extend_existing": True},
    )

    def to_identity(self) -> UserIdentity:
        return UserIdentity(
            id=self.id,
            username=self.username,
            email=self.email,
            email_confirmed=self.email_confirmed,
        )
