"""Credential store backed by SQLAlchemy/SQLModel.

Implements ``ICredentialStore`` over the ``users`` table. Inputs are
validated with the domain value objects before they reach the database, and
lookups are case-insensitive on both username and email.

Writes are flushed. They are committed here only when no unit of work is
open on the session; inside ``SqlTransactionCoordinator.run`` the coordinator
owns the commit. Driver errors are wrapped in ``DatabaseError`` so their
detail never leaves the infrastructure layer.

Bcrypt hashing and verification run in a worker thread.
"""

import asyncio
from datetime import timedelta
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger

from identity_core.core.config.settings import settings
from identity_core.core.exceptions import DatabaseError
from identity_core.domain.entities.user import User
from identity_core.domain.errors import ErrorKind
from identity_core.domain.interfaces.credential_store import ICredentialStore
from identity_core.domain.outcome import Failure, Outcome, Success
from identity_core.domain.value_objects.confirmation_token import ConfirmationToken
from identity_core.domain.value_objects.email import Email, mask_email
from identity_core.domain.value_objects.identity import UserIdentity
from identity_core.domain.value_objects.password import HashedPassword, Password
from identity_core.domain.value_objects.username import Username
from identity_core.infrastructure.database.unit_of_work import in_unit_of_work

logger = get_logger(__name__)


class SqlCredentialStore(ICredentialStore):
    """SQL implementation of the credential store.

    Args:
        db_session: The request's ``AsyncSession``, shared with the
            transaction coordinator.
        confirmation_token_ttl: Lifetime of newly generated confirmation
            tokens. Defaults to ``EMAIL_CONFIRMATION_TOKEN_EXPIRE_HOURS``.
    """

    def __init__(self, db_session: AsyncSession, confirmation_token_ttl: Optional[timedelta] = None):
        self.db_session = db_session
        self.confirmation_token_ttl = confirmation_token_ttl or timedelta(
            hours=settings.EMAIL_CONFIRMATION_TOKEN_EXPIRE_HOURS
        )

    async def verify_password(self, username_or_email: str, password: str) -> Outcome[UserIdentity]:
        if "@" in (username_or_email or ""):
            user = await self._get_by_email(username_or_email)
        else:
            user = await self._get_by_username(username_or_email)
        if user is None:
            return Failure(ErrorKind.USER_NOT_FOUND)

        try:
            hashed = HashedPassword(user.hashed_password)
        except ValueError:
            logger.error("Stored password hash is malformed", user_id=user.id)
            return Failure(ErrorKind.INVALID_CREDENTIALS)

        if not await asyncio.to_thread(hashed.matches, password or ""):
            logger.debug("Password mismatch", user_id=user.id)
            return Failure(ErrorKind.INVALID_CREDENTIALS)
        return Success(user.to_identity())

    async def create(self, username: str, email: str, password: str) -> Outcome[UserIdentity]:
        try:
            username_vo = Username(username)
            email_vo = Email(email)
            password_vo = Password(password)
        except (ValueError, TypeError) as e:
            return Failure(ErrorKind.VALIDATION_ERROR, str(e))

        if await self._get_by_email(email_vo.value) is not None:
            return Failure(ErrorKind.DUPLICATE_EMAIL)
        if await self._get_by_username(username_vo.value) is not None:
            return Failure(ErrorKind.DUPLICATE_USERNAME)

        hashed = await asyncio.to_thread(password_vo.to_hashed)
        user = User(username=username_vo.value, email=email_vo.value, hashed_password=hashed.value)
        try:
            # Savepoint keeps the session usable to classify a lost race.
            async with self.db_session.begin_nested():
                self.db_session.add(user)
                await self.db_session.flush()
        except IntegrityError as e:
            kind = await self._duplicate_kind(username_vo.value, email_vo.value, e)
            logger.info(
                "Unique constraint hit on create",
                email=email_vo.mask_for_logging(),
                kind=kind.value,
            )
            await self._rollback_if_owned()
            return Failure(kind)
        except SQLAlchemyError as e:
            raise DatabaseError() from e
        await self._commit_if_owned()

        logger.info(
            "User created",
            user_id=user.id,
            username=username_vo.mask_for_logging(),
            email=email_vo.mask_for_logging(),
        )
        return Success(user.to_identity())

    async def find_by_email(self, email: str) -> Outcome[UserIdentity]:
        user = await self._get_by_email(email)
        if user is None:
            return Failure(ErrorKind.USER_NOT_FOUND)
        return Success(user.to_identity())

    async def find_by_id(self, user_id: str) -> Outcome[UserIdentity]:
        try:
            user = await self.db_session.get(User, user_id)
        except SQLAlchemyError as e:
            raise DatabaseError() from e
        if user is None:
            return Failure(ErrorKind.USER_NOT_FOUND)
        return Success(user.to_identity())

    async def confirm_email(self, email: str, token: str) -> Outcome[UserIdentity]:
        """Consume ``token`` and mark the user's email as confirmed.

        A missing, expired or mismatching token, including one that was
        already consumed, yields INVALID_OR_EXPIRED_TOKEN.
        """
        user = await self._get_by_email(email)
        if user is None:
            return Failure(ErrorKind.USER_NOT_FOUND)

        if not user.email_confirmation_token or user.email_confirmation_token_expires_at is None:
            return Failure(ErrorKind.INVALID_OR_EXPIRED_TOKEN)
        stored = ConfirmationToken(
            value=user.email_confirmation_token,
            expires_at=user.email_confirmation_token_expires_at,
        )
        if not stored.matches(token):
            logger.info("Confirmation token rejected", user_id=user.id)
            return Failure(ErrorKind.INVALID_OR_EXPIRED_TOKEN)

        user.email_confirmed = True
        user.email_confirmation_token = None
        user.email_confirmation_token_expires_at = None
        await self._persist(user)
        logger.info("Email confirmation recorded", user_id=user.id)
        return Success(user.to_identity())

    async def generate_confirmation_token(self, email: str) -> Outcome[str]:
        user = await self._get_by_email(email)
        if user is None:
            return Failure(ErrorKind.USER_NOT_FOUND)

        token = ConfirmationToken.generate(self.confirmation_token_ttl)
        user.email_confirmation_token = token.value
        user.email_confirmation_token_expires_at = token.expires_at
        await self._persist(user)
        logger.debug(
            "Confirmation token generated",
            user_id=user.id,
            token=token.mask_for_logging(),
        )
        return Success(token.value)

    async def _get_by_email(self, email: str) -> Optional[User]:
        if not email or not email.strip():
            return None
        statement = select(User).where(func.lower(User.email) == email.strip().lower())
        user = await self._first(statement)
        logger.debug("User lookup by email", email=mask_email(email), found=user is not None)
        return user

    async def _get_by_username(self, username: str) -> Optional[User]:
        if not username or not username.strip():
            return None
        statement = select(User).where(func.lower(User.username) == username.strip().lower())
        return await self._first(statement)

    async def _duplicate_kind(self, username: str, email: str, error: IntegrityError) -> ErrorKind:
        """Tell which unique key a concurrent registration took first."""
        if await self._get_by_email(email) is not None:
            return ErrorKind.DUPLICATE_EMAIL
        if await self._get_by_username(username) is not None:
            return ErrorKind.DUPLICATE_USERNAME
        if "username" in str(error.orig).lower():
            return ErrorKind.DUPLICATE_USERNAME
        return ErrorKind.DUPLICATE_EMAIL

    async def _first(self, statement) -> Optional[User]:
        try:
            result = await self.db_session.execute(statement)
        except SQLAlchemyError as e:
            logger.error("User lookup failed", error_type=type(e).__name__)
            raise DatabaseError() from e
        return result.scalars().first()

    async def _persist(self, user: User) -> None:
        self.db_session.add(user)
        try:
            await self.db_session.flush()
        except SQLAlchemyError as e:
            raise DatabaseError() from e
        await self._commit_if_owned()

    async def _commit_if_owned(self) -> None:
        if in_unit_of_work(self.db_session):
            return
        try:
            await self.db_session.commit()
        except SQLAlchemyError as e:
            await self.db_session.rollback()
            raise DatabaseError() from e

    async def _rollback_if_owned(self) -> None:
        if not in_unit_of_work(self.db_session):
            await self.db_session.rollback()
