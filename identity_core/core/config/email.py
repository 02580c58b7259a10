"""Email configuration settings.

This module defines the outbound-mail parameters used to deliver confirmation
emails, together with the two confirmation-flow settings the orchestrator
consumes: the public base URL for confirmation links and the policy applied
when delivery fails.
"""

from enum import Enum
from typing import Optional
from urllib.parse import urlparse

from pydantic import EmailStr, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings


class DeliveryFailurePolicy(str, Enum):
    """What ``send_confirmation_email`` does when the notification sender fails."""

    PROPAGATE = "propagate"
    LOG_AND_IGNORE = "log_and_ignore"


class EmailSettings(BaseSettings):
    """Email configuration settings with secure defaults and validation.

    Security considerations:
    - SMTP credentials are handled as SecretStr to prevent logging
    - TLS is enforced by default

    Attributes:
        EMAIL_SMTP_HOST: SMTP server hostname
        EMAIL_SMTP_PORT: SMTP server port (587 for TLS, 465 for SSL)
        EMAIL_FROM_EMAIL: Default sender email address
        EMAIL_TEMPLATES_DIR: Directory containing email templates
        EMAIL_TEST_MODE: Log emails instead of sending them
        EMAIL_CONFIRMATION_URL_BASE: Public base URL for confirmation links
        EMAIL_CONFIRMATION_TOKEN_EXPIRE_HOURS: Lifetime of a confirmation token
        EMAIL_CONFIRMATION_DELIVERY_FAILURE_POLICY: Propagate or ignore send failures
    """

    EMAIL_SMTP_HOST: str = Field(default="localhost", description="SMTP server hostname")
    EMAIL_SMTP_PORT: int = Field(default=587, ge=1, le=65535)
    EMAIL_SMTP_USERNAME: Optional[str] = None
    EMAIL_SMTP_PASSWORD: Optional[SecretStr] = None
    EMAIL_SMTP_USE_TLS: bool = True
    EMAIL_SMTP_USE_SSL: bool = False

    EMAIL_FROM_EMAIL: EmailStr = "noreply@example.com"
    EMAIL_FROM_NAME: str = "Identity"
    EMAIL_TEMPLATES_DIR: str = Field(
        default="identity_core/templates/email",
        description="Directory containing email templates",
    )
    EMAIL_TEST_MODE: bool = Field(
        default=False,
        description="Enable test mode (emails logged instead of sent)",
    )

    EMAIL_CONFIRMATION_URL_BASE: str = Field(
        default="http://localhost:3000",
        description="Base URL that confirmation links are built from",
    )
    EMAIL_CONFIRMATION_TOKEN_EXPIRE_HOURS: int = Field(default=24, ge=1, le=168)
    EMAIL_CONFIRMATION_DELIVERY_FAILURE_POLICY: DeliveryFailurePolicy = DeliveryFailurePolicy.PROPAGATE

    @field_validator("EMAIL_CONFIRMATION_URL_BASE")
    @classmethod
    def validate_confirmation_url_base(cls, value: str) -> str:
        """Requires an absolute http(s) URL and strips the trailing slash."""
        value = value.strip()
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("EMAIL_CONFIRMATION_URL_BASE must be an absolute http(s) URL")
        return value.rstrip("/")

    def validate_smtp_config(self) -> None:
        """Validate SMTP configuration for production use.

        Raises:
            ValueError: If SMTP configuration is invalid or insecure
        """
        if self.EMAIL_TEST_MODE or getattr(self, "APP_ENV", "development") not in {"production", "staging"}:
            return

        if not self.EMAIL_SMTP_USERNAME or not self.EMAIL_SMTP_PASSWORD:
            raise ValueError("EMAIL_SMTP_USERNAME and EMAIL_SMTP_PASSWORD are required in production")

        if not (self.EMAIL_SMTP_USE_TLS or self.EMAIL_SMTP_USE_SSL):
            raise ValueError("Either EMAIL_SMTP_USE_TLS or EMAIL_SMTP_USE_SSL must be enabled")

        if self.EMAIL_SMTP_USE_TLS and self.EMAIL_SMTP_USE_SSL:
            raise ValueError("Cannot enable both EMAIL_SMTP_USE_TLS and EMAIL_SMTP_USE_SSL")
