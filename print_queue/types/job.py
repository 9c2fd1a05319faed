"""
Job-related type definitions for internal use.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

from print_queue.constants import Outcome
from print_queue.exceptions import NotFoundOrInvalidStateError

T = TypeVar("T")


@dataclass(frozen=True)
class QueueResult(Generic[T]):
    """
    Tagged result of a queue operation.

    SUCCESS carries a value, EMPTY means there was nothing to do (no
    pending job to claim), NOT_FOUND means the target job does not exist
    in the required state for the caller's tenant. Failures are raised.
    """

    outcome: Outcome
    value: T | None = None
    detail: str | None = None

    @classmethod
    def success(cls, value: T) -> "QueueResult[T]":
        return cls(Outcome.SUCCESS, value)

    @classmethod
    def empty(cls) -> "QueueResult[T]":
        return cls(Outcome.EMPTY)

    @classmethod
    def not_found(cls, detail: str = "Job not found") -> "QueueResult[T]":
        return cls(Outcome.NOT_FOUND, detail=detail)

    @property
    def is_success(self) -> bool:
        return self.outcome == Outcome.SUCCESS

    @property
    def is_empty(self) -> bool:
        return self.outcome == Outcome.EMPTY

    def unwrap(self) -> T | None:
        """
        Return the value, or None for EMPTY.

        Raises:
            NotFoundOrInvalidStateError: If the outcome is NOT_FOUND.
        """
        if self.outcome == Outcome.NOT_FOUND:
            raise NotFoundOrInvalidStateError(self.detail or "Job not found")
        return self.value
