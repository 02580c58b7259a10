"""Transaction coordinator interface."""

from abc import ABC, abstractmethod
from typing import Awaitable, Callable, TypeVar

from identity_core.domain.outcome import Outcome

T = TypeVar("T")

ScopeFn = Callable[[], Awaitable[Outcome[T]]]


class ITransactionCoordinator(ABC):
    """Runs a unit of work atomically.

    The unit of work is a coroutine function rather than explicit
    begin/commit/rollback calls, so that every exit path is covered.
    """

    @abstractmethod
    async def run(self, scope_fn: ScopeFn[T]) -> Outcome[T]:
        """Runs ``scope_fn`` inside a transaction.

        Commits if and only if ``scope_fn`` returns a ``Success``. A
        ``Failure`` is rolled back and returned. Exceptions, including
        ``asyncio.CancelledError``, are rolled back and re-raised.
        """
        raise NotImplementedError
