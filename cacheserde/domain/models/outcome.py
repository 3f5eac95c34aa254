"""Two-variant outcome type for fallible operations.

A wrapped operation that can fail without raising returns ``Ok(value)`` or
``Err(error)``. Only the ``Ok`` payload is ever persisted to the cache; the
``Err`` payload does not need to be serializable.

Usage:
    async def fetch(user_id: int) -> Outcome[dict, str]:
        if user_id < 0:
            return Err("negative id")
        return Ok({"id": user_id})
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Success variant carrying the cacheable payload."""
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False


@dataclass(frozen=True)
class Err(Generic[E]):
    """Failure variant. Never written to or read from the cache."""
    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True


Outcome = Union[Ok[T], Err[E]]
