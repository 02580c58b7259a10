"""Authentication API schemas package.

Request and response models are split into focused modules and re-exported
here so routes and tests import from one place.
"""

# flake8: noqa: F401 - re-export

from .misc import ErrorResponse, MessageResponse
from .requests import (
    ConfirmEmailRequest,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    ResendConfirmationRequest,
)
from .responses.token import TokenResponse
from .responses.user import UserOut
