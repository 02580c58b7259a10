"""Typed failure kinds carried by ``Failure`` outcomes.

These are NOT exceptions. Collaborators return ``Failure(kind, message)`` for
expected conditions and the orchestrator forwards them untouched. Every kind
belongs to exactly one category, which the HTTP adapter maps to a status code.
"""

from enum import Enum


class ErrorCategory(str, Enum):
    """Coarse classification of failure kinds."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    UNAUTHORIZED = "unauthorized"
    DEPENDENCY = "dependency"


class ErrorKind(str, Enum):
    """Machine-readable failure kinds.

    Error Categories:
        - Validation: VALIDATION_ERROR
        - Not found: USER_NOT_FOUND
        - Conflict: DUPLICATE_EMAIL, DUPLICATE_USERNAME, EMAIL_ALREADY_CONFIRMED
        - Unauthorized: INVALID_CREDENTIALS, INVALID_OR_EXPIRED_TOKEN,
          EXPIRED_TOKEN, REVOKED_TOKEN, MALFORMED_TOKEN
        - Dependency: ISSUANCE_ERROR, DELIVERY_ERROR
    """

    VALIDATION_ERROR = "validation_error"
    USER_NOT_FOUND = "user_not_found"
    DUPLICATE_EMAIL = "duplicate_email"
    DUPLICATE_USERNAME = "duplicate_username"
    EMAIL_ALREADY_CONFIRMED = "email_already_confirmed"
    INVALID_CREDENTIALS = "invalid_credentials"
    INVALID_OR_EXPIRED_TOKEN = "invalid_or_expired_token"
    EXPIRED_TOKEN = "expired_token"
    REVOKED_TOKEN = "revoked_token"
    MALFORMED_TOKEN = "malformed_token"
    ISSUANCE_ERROR = "issuance_error"
    DELIVERY_ERROR = "delivery_error"

    @property
    def category(self) -> ErrorCategory:
        return _CATEGORIES[self]

    @property
    def default_message(self) -> str:
        return _DEFAULT_MESSAGES[self]


_CATEGORIES = {
    ErrorKind.VALIDATION_ERROR: ErrorCategory.VALIDATION,
    ErrorKind.USER_NOT_FOUND: ErrorCategory.NOT_FOUND,
    ErrorKind.DUPLICATE_EMAIL: ErrorCategory.CONFLICT,
    ErrorKind.DUPLICATE_USERNAME: ErrorCategory.CONFLICT,
    ErrorKind.EMAIL_ALREADY_CONFIRMED: ErrorCategory.CONFLICT,
    ErrorKind.INVALID_CREDENTIALS: ErrorCategory.UNAUTHORIZED,
    ErrorKind.INVALID_OR_EXPIRED_TOKEN: ErrorCategory.UNAUTHORIZED,
    ErrorKind.EXPIRED_TOKEN: ErrorCategory.UNAUTHORIZED,
    ErrorKind.REVOKED_TOKEN: ErrorCategory.UNAUTHORIZED,
    ErrorKind.MALFORMED_TOKEN: ErrorCategory.UNAUTHORIZED,
    ErrorKind.ISSUANCE_ERROR: ErrorCategory.DEPENDENCY,
    ErrorKind.DELIVERY_ERROR: ErrorCategory.DEPENDENCY,
}

_DEFAULT_MESSAGES = {
    ErrorKind.VALIDATION_ERROR: "The request is invalid.",
    ErrorKind.USER_NOT_FOUND: "User not found.",
    ErrorKind.DUPLICATE_EMAIL: "Email is already registered.",
    ErrorKind.DUPLICATE_USERNAME: "Username is already taken.",
    ErrorKind.EMAIL_ALREADY_CONFIRMED: "Email is already confirmed.",
    ErrorKind.INVALID_CREDENTIALS: "Invalid username, email or password.",
    ErrorKind.INVALID_OR_EXPIRED_TOKEN: "The confirmation token is invalid or has expired.",
    ErrorKind.EXPIRED_TOKEN: "Token expired.",
    ErrorKind.REVOKED_TOKEN: "Token has been revoked.",
    ErrorKind.MALFORMED_TOKEN: "Malformed token.",
    ErrorKind.ISSUANCE_ERROR: "Tokens could not be issued.",
    ErrorKind.DELIVERY_ERROR: "The email could not be delivered.",
}
