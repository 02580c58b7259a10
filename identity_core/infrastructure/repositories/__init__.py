from .credential_store import SqlCredentialStore

__all__ = ["SqlCredentialStore"]
