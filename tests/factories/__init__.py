"""Re-export factories and in-memory collaborators for tests."""

# flake8: noqa: F401 - re-export

from .doubles import InMemoryCredentialStore, RecordingTransactionCoordinator
from .identity import create_fake_identity, create_fake_token_pair, create_fake_user, strong_password

__all__ = [
    "InMemoryCredentialStore",
    "RecordingTransactionCoordinator",
    "create_fake_identity",
    "create_fake_token_pair",
    "create_fake_user",
    "strong_password",
]
