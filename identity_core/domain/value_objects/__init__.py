"""Domain value objects."""

from .auth_result import AuthResult
from .confirmation_token import ConfirmationToken
from .email import Email
from .identity import Credentials, UserIdentity
from .password import HashedPassword, Password
from .token_pair import TokenPair
from .username import Username

__all__ = [
    "AuthResult",
    "ConfirmationToken",
    "Credentials",
    "Email",
    "HashedPassword",
    "Password",
    "TokenPair",
    "UserIdentity",
    "Username",
]
