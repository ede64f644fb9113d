"""Domain errors raised by the scheduling, booking, check-in and wellness flows.

Every ``DomainError`` is a recoverable, caller-visible failure with a stable
code and message. ``InvariantViolation`` is different: it means an atomicity
guarantee broke and is never shown to users as a normal failure.
"""

from enum import Enum


class ErrorCode(str, Enum):
    NOT_FOUND = "NOT_FOUND"
    INVALID_PATTERN = "INVALID_PATTERN"
    INSTANCE_PAST = "INSTANCE_PAST"
    INSTANCE_INACTIVE = "INSTANCE_INACTIVE"
    ALREADY_REGISTERED = "ALREADY_REGISTERED"
    CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"
    NOT_OWNER = "NOT_OWNER"
    ALREADY_CANCELLED = "ALREADY_CANCELLED"
    ALREADY_ATTENDED = "ALREADY_ATTENDED"
    PRE_ASSESSMENT_MISSING = "PRE_ASSESSMENT_MISSING"
    ALREADY_COMPLETED = "ALREADY_COMPLETED"
    INVALID_METRIC = "INVALID_METRIC"
    INCOMPLETE_ASSESSMENTS = "INCOMPLETE_ASSESSMENTS"
    INVALID_CAPACITY = "INVALID_CAPACITY"
    INSTANCE_HAS_REGISTRATIONS = "INSTANCE_HAS_REGISTRATIONS"
    EVENT_IN_PAST = "EVENT_IN_PAST"


class DomainError(Exception):
    """Base domain error with code, user-safe message and HTTP status."""

    code: ErrorCode
    message: str = "Domain error"
    status_code: int = 409

    def __init__(self, message: str | None = None, details: str | None = None) -> None:
        if message is not None:
            self.message = message
        self.details = details
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class NotFound(DomainError):
    code = ErrorCode.NOT_FOUND
    status_code = 404

    def __init__(self, resource: str, ident: object | None = None) -> None:
        super().__init__(f"{resource} not found")
        self.resource = resource
        self.ident = ident


class InvalidPattern(DomainError):
    code = ErrorCode.INVALID_PATTERN
    message = "Invalid recurrence rule"
    status_code = 422

    def __init__(self, reason: str) -> None:
        super().__init__(f"Invalid recurrence rule: {reason}")
        self.reason = reason


class InstancePast(DomainError):
    code = ErrorCode.INSTANCE_PAST
    message = "This session has already taken place"


class InstanceInactive(DomainError):
    code = ErrorCode.INSTANCE_INACTIVE
    message = "This session is no longer available"


class AlreadyRegistered(DomainError):
    code = ErrorCode.ALREADY_REGISTERED
    message = "You already have a ticket for this session"


class CapacityExceeded(DomainError):
    code = ErrorCode.CAPACITY_EXCEEDED
    message = "This session is full"


class NotOwner(DomainError):
    code = ErrorCode.NOT_OWNER
    message = "This registration belongs to another user"
    status_code = 403


class AlreadyCancelled(DomainError):
    code = ErrorCode.ALREADY_CANCELLED
    message = "This registration was already cancelled"


class AlreadyAttended(DomainError):
    code = ErrorCode.ALREADY_ATTENDED
    message = "Attendance was already recorded"


class PreAssessmentMissing(DomainError):
    code = ErrorCode.PRE_ASSESSMENT_MISSING
    message = "The PRE questionnaire has not been completed"


class AlreadyCompleted(DomainError):
    code = ErrorCode.ALREADY_COMPLETED
    message = "This questionnaire was already completed"


class InvalidMetric(DomainError):
    code = ErrorCode.INVALID_METRIC
    message = "Metrics must be integers between 1 and 10"
    status_code = 422


class IncompleteAssessments(DomainError):
    code = ErrorCode.INCOMPLETE_ASSESSMENTS
    message = "Both questionnaires must be completed"


class InvalidCapacity(DomainError):
    code = ErrorCode.INVALID_CAPACITY
    message = "Capacity must be at least 1 and not below confirmed seats"
    status_code = 422


class InstanceHasRegistrations(DomainError):
    code = ErrorCode.INSTANCE_HAS_REGISTRATIONS
    message = "This session still has registrations"


class EventInPast(DomainError):
    code = ErrorCode.EVENT_IN_PAST
    message = "Cannot create events in the past"
    status_code = 422


class InvariantViolation(RuntimeError):
    """A token collision or a ledger counter outside [0, capacity]."""
