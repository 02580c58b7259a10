"""Outcome type for railway-oriented composition.

Every collaborator call and every orchestrator operation returns an
``Outcome``: either ``Success(value)`` or ``Failure(kind, message)``.
``Success(None)`` is the variant for operations without a payload.

Usage:
    outcome = await store.find_by_email(email)
    if outcome.is_failure:
        return outcome
    identity = outcome.value

or with structural pattern matching:
    match outcome:
        case Success(value=identity):
            ...
        case Failure(kind=ErrorKind.USER_NOT_FOUND):
            ...
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, NoReturn, TypeVar, Union

from identity_core.core.exceptions import OutcomeError
from identity_core.domain.errors import ErrorKind

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True, slots=True)
class Success(Generic[T]):
    """A successful outcome carrying ``value``."""

    value: T = None

    @property
    def is_success(self) -> bool:
        return True

    @property
    def is_failure(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def map(self, fn: Callable[[T], U]) -> "Success[U]":
        """Apply a pure projection to the carried value."""
        return Success(fn(self.value))


@dataclass(frozen=True, slots=True)
class Failure:
    """A typed failure. ``message`` defaults to the kind's default message."""

    kind: ErrorKind
    message: str = ""

    def __post_init__(self) -> None:
        if not self.message:
            object.__setattr__(self, "message", self.kind.default_message)

    @property
    def is_success(self) -> bool:
        return False

    @property
    def is_failure(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        raise OutcomeError(self)

    def map(self, fn: Callable[[Any], Any]) -> "Failure":
        """Failures pass through projections untouched."""
        return self


Outcome = Union[Success[T], Failure]
