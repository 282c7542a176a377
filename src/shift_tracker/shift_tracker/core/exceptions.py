from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations.

    ``str(err)`` is a short message that can be shown to the user as-is.
    """

    code = "domain_error"
    default_message = "The action could not be completed"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "validation_error"
    default_message = "Invalid input"


class DuplicateActiveShiftError(DomainError):
    code = "duplicate_active_shift"
    default_message = "This employee already has an active shift"


class NoActiveShiftError(DomainError):
    code = "no_active_shift"
    default_message = "This employee has no active shift"


class ShiftNotFoundError(DomainError):
    code = "shift_not_found"
    default_message = "Shift not found"


class AlreadyClosedError(DomainError):
    code = "already_closed"
    default_message = "This shift has already been closed"


class NetworkFailureError(DomainError):
    """Raised when any store operation fails (connection, driver, timeout)."""

    code = "network_failure"
    default_message = "Could not reach the data store. Please try again."


class AuthFailureError(DomainError):
    code = "auth_failure"
    default_message = "Invalid username or password"


class ActionInProgressError(DomainError):
    code = "action_in_progress"
    default_message = "Another action is still in progress"


class MalformedRecordError(DomainError):
    """Raised when a store record cannot be coerced into a domain entity."""

    code = "malformed_record"
    default_message = "Stored record is malformed"
