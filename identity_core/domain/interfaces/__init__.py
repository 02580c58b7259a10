"""Domain interfaces for dependency inversion.

These interfaces define the contracts the infrastructure layer implements and
the orchestrator consumes:
- Credential store: users and their authentication material
- Token issuer: access/refresh token pairs
- Notification sender: outbound confirmation emails
- Transaction coordinator: atomic units of work
- Authentication orchestrator: the operations exposed to callers
"""

from .authentication import IAuthenticationOrchestrator
from .credential_store import ICredentialStore
from .notification import INotificationSender
from .token_issuer import ITokenIssuer
from .transaction import ITransactionCoordinator, ScopeFn

__all__ = [
    "IAuthenticationOrchestrator",
    "ICredentialStore",
    "INotificationSender",
    "ITokenIssuer",
    "ITransactionCoordinator",
    "ScopeFn",
]
