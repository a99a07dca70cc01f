"""
Error kinds raised by the time ledger, payroll and advance operations.

Every error is an ``HTTPException`` so CRUD code can raise it directly and
endpoints can let it propagate. Validation and state conflicts are detected
before any mutation; not-found and missing-dependency errors end the request.
"""

from fastapi import HTTPException, status


class CoreError(HTTPException):
    """Base class for all domain errors."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Request could not be processed"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(status_code=self.status_code, detail=self.message)

    @property
    def error(self) -> str:
        """Name of the error as exposed to API clients."""
        return type(self).__name__


# Error kinds

class ValidationError(CoreError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"


class StateConflict(CoreError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Operation conflicts with the current state"


class NotFound(CoreError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class DependencyMissing(CoreError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Referenced resource not found"


# Validation

class MissingReason(ValidationError):
    default_message = "A valid reason is required to start a temporary exit"


class InvalidMonth(ValidationError):
    default_message = "Month must be an English month name or a number from 1 to 12"


class InvalidTimestamp(ValidationError):
    default_message = "Timestamp is out of order for this attendance entry"


# State conflicts

class AlreadyCheckedIn(StateConflict):
    default_message = "Attendance already recorded and checked-in for today"


class EntryAlreadyExists(StateConflict):
    default_message = "An attendance entry already exists for this staff member and date"


class NotCheckedIn(StateConflict):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Attendance entry has no check-in"


class AlreadyCheckedOut(StateConflict):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Already checked out"


class ExitAlreadyOpen(StateConflict):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "An exit is already ongoing. End it before starting a new one"


class ExitStillOpen(StateConflict):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "An exit is still ongoing. End it before checking out"


class ExitAlreadyClosed(StateConflict):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Temporary exit already ended"


class PayrollAlreadyPaid(StateConflict):
    default_message = "Payroll record is already paid and can no longer change"


class ConcurrentUpdate(StateConflict):
    default_message = "Record was modified by another request, retry with fresh state"


# Not found

class EntryNotFound(NotFound):
    default_message = "Attendance record not found"


class ExitNotFound(NotFound):
    default_message = "Temporary exit not found"


class RecordNotFound(NotFound):
    default_message = "Payroll record not found"


class AdvanceNotFound(NotFound):
    default_message = "Advance payment not found"


# Missing dependencies

class StaffNotFound(DependencyMissing):
    default_message = "Staff member not found"
