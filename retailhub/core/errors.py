"""
Result kinds returned by the service layer.

Services report expected failures (missing rows, duplicates, bad input,
insufficient stock) as a ServiceResult instead of raising. Only the HTTP
layer turns a result into a transport response.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar('T')


class ErrorKind(str, Enum):
    NOT_FOUND = 'not_found'
    CONFLICT = 'conflict'
    INVALID = 'invalid'
    UNAVAILABLE = 'unavailable'
    INTERNAL = 'internal'

    @property
    def http_status(self) -> int:
        return _HTTP_STATUS[self]


_HTTP_STATUS = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.INVALID: 422,
    ErrorKind.UNAVAILABLE: 409,
    ErrorKind.INTERNAL: 500,
}


@dataclass
class ServiceResult(Generic[T]):
    """Outcome of a service operation.

    Attributes:
        ok: True if the operation succeeded
        value: success value, when ok
        error: failure kind, when not ok
        error_detail: human readable message, when not ok
    """

    ok: bool
    value: Optional[T] = None
    error: Optional[ErrorKind] = None
    error_detail: Optional[str] = None


def service_ok(value: T = None) -> ServiceResult[T]:
    return ServiceResult(ok=True, value=value)


def service_err(error: ErrorKind, error_detail: str = '') -> ServiceResult:
    return ServiceResult(ok=False, error=error, error_detail=error_detail or error.value)


class IntegrityConflict(Exception):
    """Raised by the persistence gateway when a unique or foreign key constraint rejects a write."""

    def __init__(self, message: str, constraint: str | None = None):
        super().__init__(message)
        self.constraint = constraint
