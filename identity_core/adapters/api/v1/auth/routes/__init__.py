"""Subpackage aggregating individual auth route modules."""

__all__ = [
    "confirm_email",
    "login",
    "refresh",
    "register",
    "resend_confirmation",
]
