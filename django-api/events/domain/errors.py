"""Domain error codes for the events module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    REGISTRATION_NOT_FOUND = "REGISTRATION_NOT_FOUND"
    NOTIFICATION_NOT_FOUND = "NOTIFICATION_NOT_FOUND"
    ORGANIZER_NOT_FOUND = "ORGANIZER_NOT_FOUND"
    ORGANIZER_NOT_APPROVED = "ORGANIZER_NOT_APPROVED"
    FORBIDDEN = "FORBIDDEN"
    CONFLICT = "CONFLICT"
    ALREADY_REGISTERED = "ALREADY_REGISTERED"
    CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"
    TOO_LATE = "TOO_LATE"
    EVENT_LOCKED = "EVENT_LOCKED"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    INVALID_ID = "INVALID_ID"
    INVALID_TICKET = "INVALID_TICKET"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class NotFoundError(DomainError):
    """Raised when a requested entity is absent."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.EVENT_NOT_FOUND) -> None:
        super().__init__(code=code, message=message)


class ForbiddenError(DomainError):
    """Raised on ownership or role violations."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.FORBIDDEN) -> None:
        super().__init__(code=code, message=message)


class ConflictError(DomainError):
    """Raised when the target is already in the requested or an incompatible state."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.CONFLICT) -> None:
        super().__init__(code=code, message=message)


class CapacityExceededError(DomainError):
    """Raised when an event has no seats left."""

    def __init__(self) -> None:
        super().__init__(code=ErrorCode.CAPACITY_EXCEEDED, message="Tickets sold out")


class TooLateError(DomainError):
    """Raised when an operation falls outside its allowed time window."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.TOO_LATE) -> None:
        super().__init__(code=code, message=message)


class ValidationFailedError(DomainError):
    """Raised when input violates a domain rule (e.g. date ordering)."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.VALIDATION_FAILED) -> None:
        super().__init__(code=code, message=message)


class EventNotFoundError(NotFoundError):
    """Raised when an event is not found."""

    def __init__(self, event_id: str, message: str = "Event not found") -> None:
        super().__init__(message, code=ErrorCode.EVENT_NOT_FOUND)
        self.event_id = event_id


class RegistrationNotFoundError(NotFoundError):
    """Raised when a registration is not found."""

    def __init__(self, registration_id: str) -> None:
        super().__init__("Registration not found", code=ErrorCode.REGISTRATION_NOT_FOUND)
        self.registration_id = registration_id


class NotificationNotFoundError(NotFoundError):
    def __init__(self) -> None:
        super().__init__("Notification not found", code=ErrorCode.NOTIFICATION_NOT_FOUND)


class OrganizerNotFoundError(NotFoundError):
    def __init__(self) -> None:
        super().__init__("Organizer not found", code=ErrorCode.ORGANIZER_NOT_FOUND)


class AlreadyRegisteredError(ConflictError):
    """Raised when the user already holds an active registration for the event."""

    def __init__(self) -> None:
        super().__init__(
            "You have already registered for this event",
            code=ErrorCode.ALREADY_REGISTERED,
        )


class ModificationLockedError(TooLateError):
    """Raised when an organizer touches an event inside the modification lock window."""

    def __init__(self, action: str = "modified") -> None:
        super().__init__(
            f"Event cannot be {action} within 24 hours of start time",
            code=ErrorCode.EVENT_LOCKED,
        )


class InvalidIdError(ValidationFailedError):
    """Raised when an ID is not a valid UUID."""

    def __init__(self, kind: str = "event") -> None:
        super().__init__(f"Invalid {kind} ID format", code=ErrorCode.INVALID_ID)
