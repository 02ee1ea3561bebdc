"""Result type for explicit success/failure handling.

Operations that can legitimately fail return ``Ok(value)`` or
``Err(error)`` instead of raising, so callers have to look at the outcome.

Usage:
------
    result = machine.try_transition(GamePhase.RESULTS)
    if result.is_err():
        logger.warning(result.error)
    else:
        phase = result.unwrap()
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")  # Success value type
E = TypeVar("E")  # Error type


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Represents a successful operation result."""

    value: T

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        """Get the success value."""
        return self.value

    @property
    def error(self) -> None:
        """Ok has no error, returns None."""
        return None


@dataclass(frozen=True)
class Err(Generic[E]):
    """Represents a failed operation result."""

    error: E

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> T:
        """Raises ValueError since Err has no success value."""
        raise ValueError(f"Called unwrap on Err: {self.error}")


# Result is a union of Ok and Err
Result = Union[Ok[T], Err[E]]
