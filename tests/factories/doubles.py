"""In-memory collaborators.

``InMemoryCredentialStore`` keeps users in a dict and can snapshot/restore
its state, which ``RecordingTransactionCoordinator`` uses to emulate commit
and rollback.
"""

import copy
import secrets
import uuid
from typing import Any, Dict, List, Optional, Tuple

from identity_core.domain.errors import ErrorKind
from identity_core.domain.interfaces import ICredentialStore, ITransactionCoordinator
from identity_core.domain.outcome import Failure, Outcome, Success
from identity_core.domain.value_objects.identity import UserIdentity


class InMemoryCredentialStore(ICredentialStore):
    def __init__(self):
        self.users: Dict[str, Dict[str, Any]] = {}
        self.calls: List[Tuple[str, tuple]] = []

    def add_user(
        self,
        username: str,
        email: str,
        password: str,
        email_confirmed: bool = False,
        user_id: Optional[str] = None,
    ) -> UserIdentity:
        user_id = user_id or uuid.uuid4().hex
        self.users[user_id] = {
            "id": user_id,
            "username": username.lower(),
            "email": email.lower(),
            "password": password,
            "email_confirmed": email_confirmed,
            "token": None,
        }
        return self._identity(self.users[user_id])

    def snapshot(self) -> Dict[str, Dict[str, Any]]:
        return copy.deepcopy(self.users)

    def restore(self, state: Dict[str, Dict[str, Any]]) -> None:
        self.users = state

    def called(self, name: str) -> bool:
        return any(call == name for call, _ in self.calls)

    async def verify_password(self, username_or_email: str, password: str) -> Outcome[UserIdentity]:
        self.calls.append(("verify_password", (username_or_email,)))
        user = self._lookup(username_or_email)
        if user is None:
            return Failure(ErrorKind.USER_NOT_FOUND)
        if not secrets.compare_digest(user["password"], password):
            return Failure(ErrorKind.INVALID_CREDENTIALS)
        return Success(self._identity(user))

    async def create(self, username: str, email: str, password: str) -> Outcome[UserIdentity]:
        self.calls.append(("create", (username, email)))
        if not username or not email or not password:
            return Failure(ErrorKind.VALIDATION_ERROR)
        if self._by_field("email", email) is not None:
            return Failure(ErrorKind.DUPLICATE_EMAIL)
        if self._by_field("username", username) is not None:
            return Failure(ErrorKind.DUPLICATE_USERNAME)
        return Success(self.add_user(username, email, password))

    async def find_by_email(self, email: str) -> Outcome[UserIdentity]:
        self.calls.append(("find_by_email", (email,)))
        user = self._by_field("email", email)
        if user is None:
            return Failure(ErrorKind.USER_NOT_FOUND)
        return Success(self._identity(user))

    async def find_by_id(self, user_id: str) -> Outcome[UserIdentity]:
        self.calls.append(("find_by_id", (user_id,)))
        user = self.users.get(user_id)
        if user is None:
            return Failure(ErrorKind.USER_NOT_FOUND)
        return Success(self._identity(user))

    async def confirm_email(self, email: str, token: str) -> Outcome[UserIdentity]:
        self.calls.append(("confirm_email", (email,)))
        user = self._by_field("email", email)
        if user is None:
            return Failure(ErrorKind.USER_NOT_FOUND)
        if not user["token"] or not secrets.compare_digest(user["token"], token):
            return Failure(ErrorKind.INVALID_OR_EXPIRED_TOKEN)
        user["token"] = None
        user["email_confirmed"] = True
        return Success(self._identity(user))

    async def generate_confirmation_token(self, email: str) -> Outcome[str]:
        self.calls.append(("generate_confirmation_token", (email,)))
        user = self._by_field("email", email)
        if user is None:
            return Failure(ErrorKind.USER_NOT_FOUND)
        user["token"] = secrets.token_hex(32)
        return Success(user["token"])

    def _lookup(self, username_or_email: str) -> Optional[Dict[str, Any]]:
        field = "email" if "@" in username_or_email else "username"
        return self._by_field(field, username_or_email)

    def _by_field(self, field: str, value: str) -> Optional[Dict[str, Any]]:
        for user in self.users.values():
            if user[field] == (value or "").lower():
                return user
        return None

    @staticmethod
    def _identity(user: Dict[str, Any]) -> UserIdentity:
        return UserIdentity(
            id=user["id"],
            username=user["username"],
            email=user["email"],
            email_confirmed=user["email_confirmed"],
        )


class RecordingTransactionCoordinator(ITransactionCoordinator):
    """Counts commits and rollbacks; rollback restores the store's snapshot."""

    def __init__(self, store: Optional[InMemoryCredentialStore] = None):
        self.store = store
        self.commits = 0
        self.rollbacks = 0
        self.scopes = 0

    async def run(self, scope_fn):
        self.scopes += 1
        snapshot = self.store.snapshot() if self.store is not None else None
        try:
            outcome = await scope_fn()
        except BaseException:
            self._rollback(snapshot)
            raise
        if outcome.is_failure:
            self._rollback(snapshot)
            return outcome
        self.commits += 1
        return outcome

    def _rollback(self, snapshot) -> None:
        self.rollbacks += 1
        if self.store is not None:
            self.store.restore(snapshot)
