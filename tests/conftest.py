import os

# Settings are read once at import time; pin a test environment first.
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("LOG_JSON", "false")
os.environ.setdefault("BCRYPT_WORK_FACTOR", "4")
os.environ.setdefault("EMAIL_CONFIRMATION_URL_BASE", "https://app.example.com")

import pytest  # noqa: E402

from tests.factories import InMemoryCredentialStore, RecordingTransactionCoordinator  # noqa: E402


@pytest.fixture
def credential_store() -> InMemoryCredentialStore:
    return InMemoryCredentialStore()


@pytest.fixture
def transaction_coordinator(credential_store) -> RecordingTransactionCoordinator:
    return RecordingTransactionCoordinator(credential_store)
