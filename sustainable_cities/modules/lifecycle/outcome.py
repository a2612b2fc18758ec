"""
Typed results for lifecycle operations.

Services return an ``Outcome`` instead of raising, so every caller sees
the same error taxonomy. Routers turn a failed outcome into an HTTP error
with ``unwrap``.
"""
import enum
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from fastapi import HTTPException

T = TypeVar("T")


class ErrorKind(str, enum.Enum):
    FORBIDDEN = "forbidden"
    INVALID_STATE = "invalid_state"
    CONFLICT = "conflict"
    VALIDATION_ERROR = "validation_error"
    # Absent, or outside the caller's read scope; the two are not distinguished
    NOT_FOUND = "not_found"
    INVALID_CODE = "invalid_code"
    EXPIRED = "expired"
    EMAIL_MISMATCH = "email_mismatch"
    ALREADY_USED = "already_used"


HTTP_STATUS = {
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.INVALID_STATE: 409,
    ErrorKind.CONFLICT: 409,
    ErrorKind.VALIDATION_ERROR: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INVALID_CODE: 400,
    ErrorKind.EXPIRED: 410,
    ErrorKind.EMAIL_MISMATCH: 400,
    ErrorKind.ALREADY_USED: 409,
}


@dataclass(frozen=True)
class Outcome(Generic[T]):
    value: Optional[T] = None
    error: Optional[ErrorKind] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T = None) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: ErrorKind, message: str) -> "Outcome[T]":
        return cls(error=error, message=message)


def unwrap(outcome: Outcome[T]) -> T:
    """Return the value of a successful outcome or raise the matching HTTP error."""
    if outcome.ok:
        return outcome.value
    raise HTTPException(
        status_code=HTTP_STATUS[outcome.error],
        detail={"code": outcome.error.value, "message": outcome.message},
    )
