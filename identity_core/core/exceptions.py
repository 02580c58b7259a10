"""Structured exception hierarchy for faults.

Expected failures (bad credentials, duplicate email, expired token...) are
never raised: they travel as ``Failure`` outcomes (see
``identity_core.domain.outcome``). The exceptions below are reserved for
conditions the callers cannot anticipate, such as a broken database
connection or a missing email template. Each carries a machine-readable
``code`` and a human-readable ``message`` that is safe to log and to return to
clients; wrapped driver errors are kept on ``__cause__`` only.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from identity_core.domain.outcome import Failure

__all__: Final = [
    "IdentityCoreError",
    "ConfigurationError",
    "DatabaseError",
    "TransactionError",
    "EmailServiceError",
    "TemplateRenderError",
    "OutcomeError",
]


class IdentityCoreError(Exception):
    """Base exception class for all custom errors in the application.

    Attributes:
        message (str): A human-readable error message, suitable for logging.
        code (str): A unique, machine-readable error code.
    """

    message: str
    code: str = "generic_error"

    def __init__(self, message: str, code: str = "generic_error"):
        self.message = message
        self.code = code
        Exception.__init__(self, self.message)

    def __str__(self) -> str:
        return self.message


class ConfigurationError(IdentityCoreError):
    """Raised when a component is wired with unusable configuration."""

    def __init__(self, message: str, code: str = "configuration_error"):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Persistence errors (map to 500 Internal Server Error)
# ---------------------------------------------------------------------------


class DatabaseError(IdentityCoreError):
    """Raised for low-level database interaction errors.

    Wraps driver errors so that their detail never reaches the caller.
    """

    def __init__(self, message: str = "A database error occurred.", code: str = "database_error"):
        super().__init__(message, code)


class TransactionError(DatabaseError):
    """Raised when a unit of work is misused, e.g. opened twice on one session."""

    def __init__(self, message: str, code: str = "transaction_error"):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Outbound email errors (map to 503 Service Unavailable)
# ---------------------------------------------------------------------------


class EmailServiceError(IdentityCoreError):
    """Raised when the email service is unusable, e.g. misconfigured SMTP."""

    def __init__(self, message: str, code: str = "email_service_error"):
        super().__init__(message, code)


class TemplateRenderError(EmailServiceError):
    """Raised when an email template is missing or fails to render."""

    def __init__(self, message: str, code: str = "template_render_error"):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Outcome misuse
# ---------------------------------------------------------------------------


class OutcomeError(IdentityCoreError):
    """Raised by ``Failure.unwrap()``; keeps the failure for inspection."""

    def __init__(self, failure: "Failure"):
        self.failure = failure
        super().__init__(failure.message, failure.kind.value)
