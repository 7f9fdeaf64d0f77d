"""Error kinds shared by the booking store, the lifecycle and the UI."""
from enum import Enum
from typing import Any, Optional

from pymongo.errors import (
    AutoReconnect,
    ConnectionFailure,
    NetworkTimeout,
    OperationFailure,
    PyMongoError,
    ServerSelectionTimeoutError,
)


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    CONFLICT = "conflict"
    BACKEND_UNAVAILABLE = "backend_unavailable"
    NOT_FOUND = "not_found"
    TIMEOUT = "timeout"


class BookingError(Exception):
    kind = None

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class ValidationError(BookingError):
    kind = ErrorKind.VALIDATION


class ConflictError(BookingError):
    kind = ErrorKind.CONFLICT

    def __init__(self, message, conflicting_booking):
        super().__init__(message)
        self.conflicting_booking = conflicting_booking

    @property
    def status(self):
        return self.conflicting_booking.status


class BackendUnavailable(BookingError):
    kind = ErrorKind.BACKEND_UNAVAILABLE

    def __init__(self, message, cause=None):
        super().__init__(message)
        self.cause = cause


class NotFoundError(BookingError):
    kind = ErrorKind.NOT_FOUND


class SubmissionTimeout(BookingError):
    kind = ErrorKind.TIMEOUT


# Mongo error codes that mean "not allowed" rather than "broken query"
PERMISSION_ERROR_CODES = {13, 18}

OFFLINE_ERRORS = (ServerSelectionTimeoutError, ConnectionFailure, AutoReconnect, NetworkTimeout)


def classify_backend_error(error: PyMongoError) -> Optional[BackendUnavailable]:
    """Map a pymongo error to BackendUnavailable, or None if it must propagate."""
    if isinstance(error, OFFLINE_ERRORS):
        return BackendUnavailable(f"MongoDB offline: {error}", cause=error)
    if isinstance(error, OperationFailure) and error.code in PERMISSION_ERROR_CODES:
        return BackendUnavailable(f"MongoDB permission denied: {error}", cause=error)
    return None


class Result:
    """Outcome of a user-facing action: a value or a typed error."""

    def __init__(self, value: Any = None, error: Optional[BookingError] = None):
        self.value = value
        self.error = error

    @classmethod
    def success(cls, value=None):
        return cls(value=value)

    @classmethod
    def failure(cls, error: BookingError):
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> Optional[ErrorKind]:
        return self.error.kind if self.error else None

    @property
    def message(self) -> Optional[str]:
        return self.error.message if self.error else None

    def __repr__(self):
        if self.ok:
            return f"Result.success({self.value!r})"
        return f"Result.failure({self.kind.value}: {self.message})"
