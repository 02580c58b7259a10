"""SQL unit of work.

``SqlTransactionCoordinator`` runs a scope function against the request's
``AsyncSession`` and commits only when the scope returns a ``Success``.
Every other exit (a ``Failure``, an exception, cancellation) rolls the
session back before the result reaches the caller.

While a scope is open the session is flagged through ``session.info`` so
that the credential store flushes its writes without committing them.
"""

from enum import Enum

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from identity_core.core.exceptions import DatabaseError, TransactionError
from identity_core.domain.interfaces.transaction import ITransactionCoordinator, ScopeFn, T
from identity_core.domain.outcome import Outcome

logger = structlog.get_logger(__name__)

UNIT_OF_WORK_KEY = "identity_core.unit_of_work"


class ScopeState(str, Enum):
    OPEN = "open"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


def in_unit_of_work(session: AsyncSession) -> bool:
    """True while a ``SqlTransactionCoordinator`` scope is open on ``session``."""
    return bool(session.info.get(UNIT_OF_WORK_KEY))


class SqlTransactionCoordinator(ITransactionCoordinator):
    """Transaction coordinator over one SQLAlchemy ``AsyncSession``.

    Only one scope may be open on a session at a time; opening a nested one
    raises ``TransactionError``.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def run(self, scope_fn: ScopeFn[T]) -> Outcome[T]:
        if in_unit_of_work(self._session):
            raise TransactionError("A unit of work is already open on this session.")

        self._session.info[UNIT_OF_WORK_KEY] = True
        state = ScopeState.OPEN
        logger.debug("Unit of work opened", state=state.value)
        try:
            try:
                outcome = await scope_fn()
            except BaseException:
                # Includes asyncio.CancelledError: roll back, then re-raise.
                state = await self._rollback(reason="exception")
                raise

            if outcome.is_failure:
                state = await self._rollback(reason=outcome.kind.value)
                return outcome

            try:
                await self._session.commit()
            except SQLAlchemyError as e:
                state = await self._rollback(reason="commit_failed")
                raise DatabaseError() from e
            state = ScopeState.COMMITTED
            logger.debug("Unit of work committed", state=state.value)
            return outcome
        finally:
            self._session.info.pop(UNIT_OF_WORK_KEY, None)

    async def _rollback(self, reason: str) -> ScopeState:
        await self._session.rollback()
        logger.info("Unit of work rolled back", state=ScopeState.ROLLED_BACK.value, reason=reason)
        return ScopeState.ROLLED_BACK
