"""Request-payload Pydantic models for authentication endpoints.

Only shape is checked here. Username, email and password policies are
enforced by the credential store so that violations come back as
``validation_error`` failures with a meaningful message.
"""

from pydantic import BaseModel, EmailStr, Field


class LoginRequest(BaseModel):
    """Payload expected by ``POST /auth/login``."""

    username_or_email: str = Field(
        ..., min_length=1, max_length=254, examples=["john_doe", "john@example.com"]
    )
    password: str = Field(..., min_length=1, max_length=128, examples=["Str0ngP@ssw0rd"])


class RegisterRequest(BaseModel):
    """Payload expected by ``POST /auth/register``."""

    username: str = Field(..., examples=["john_doe"])
    email: EmailStr = Field(..., examples=["john@example.com"])
    password: str = Field(..., examples=["Str0ngP@ssw0rd"])


class RefreshRequest(BaseModel):
    """Payload expected by ``POST /auth/refresh``."""

    refresh_token: str = Field(..., min_length=1, examples=["eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9..."])


class ConfirmEmailRequest(BaseModel):
    """Payload expected by ``POST /auth/confirm-email``."""

    email: EmailStr = Field(..., examples=["john@example.com"])
    token: str = Field(
        ...,
        min_length=1,
        max_length=128,
        examples=["a1b2c3d4e5f6..."],
        description="Confirmation token received via email",
    )


class ResendConfirmationRequest(BaseModel):
    """Payload expected by ``POST /auth/resend-confirmation``."""

    email: EmailStr = Field(..., examples=["john@example.com"])
