"""Availability and lock policy.

Pure decision functions over an event, a caller and the current time. They
never touch storage and are evaluated fresh on every call, so every time
window and capacity rule of the platform lives here and nowhere else.

| Action               | Guard                                                       |
|----------------------|-------------------------------------------------------------|
| publish              | owner, not cancelled, start_date > now                      |
| update/delete/cancel | admin, or owner with start_date - now >= lock window        |
| register             | published, seat available, start_date > now, not registered |
| cancel registration  | registration owner, start_date - now >= lock window         |
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

from events.domain.errors import (
    AlreadyRegisteredError,
    CapacityExceededError,
    ConflictError,
    DomainError,
    EventNotFoundError,
    ForbiddenError,
    ModificationLockedError,
    TooLateError,
)
from events.domain.models import Event, Registration
from events.domain.value_objects import EventStatus, Principal

MODIFICATION_LOCK_WINDOW = timedelta(hours=24)


@dataclass(frozen=True)
class Decision:
    """Outcome of a policy check. Carries the error to raise when denied."""

    allowed: bool
    error: DomainError | None = None

    def __bool__(self) -> bool:
        return self.allowed

    def enforce(self) -> None:
        if not self.allowed:
            raise self.error


ALLOW = Decision(allowed=True)


def deny(error: DomainError) -> Decision:
    return Decision(allowed=False, error=error)


def in_lock_window(event: Event, now: datetime, window: timedelta = MODIFICATION_LOCK_WINDOW) -> bool:
    return event.time_until_start(now) < window


def can_publish(event: Event, principal: Principal, now: datetime) -> Decision:
    if not event.is_owned_by(principal):
        return deny(ForbiddenError("You do not own this event"))
    if event.status is EventStatus.CANCELLED:
        return deny(ConflictError("A cancelled event cannot be published"))
    if event.start_date <= now:
        return deny(TooLateError("You cannot publish an event that already started"))
    return ALLOW


def can_unpublish(event: Event, principal: Principal) -> Decision:
    if not event.is_owned_by(principal):
        return deny(ForbiddenError("You do not own this event"))
    if event.status is EventStatus.CANCELLED:
        return deny(ConflictError("A cancelled event cannot be moved to draft"))
    return ALLOW


def can_modify(
    event: Event,
    principal: Principal,
    now: datetime,
    action: str = "modified",
    window: timedelta = MODIFICATION_LOCK_WINDOW,
) -> Decision:
    """Guard for update, delete and cancel. Admins bypass the lock window."""
    if principal.is_admin:
        return ALLOW
    if not event.is_owned_by(principal):
        return deny(ForbiddenError("Not authorized to change this event"))
    if in_lock_window(event, now, window):
        return deny(ModificationLockedError(action))
    return ALLOW


def can_register(
    event: Event | None,
    existing: Registration | None,
    now: datetime,
) -> Decision:
    """Registration guard.

    The checks run in a fixed order so callers always see the same error for
    the same state: availability, duplicate, capacity, then timing.
    """
    if event is None or event.status is not EventStatus.PUBLISHED:
        event_id = str(event.id) if event is not None else ""
        return deny(EventNotFoundError(event_id, "Event not available for registration"))
    if existing is not None and existing.is_active:
        return deny(AlreadyRegisteredError())
    if not event.has_seat_available:
        return deny(CapacityExceededError())
    if event.start_date <= now:
        return deny(TooLateError("Event has already started"))
    return ALLOW


def can_cancel_registration(
    registration: Registration,
    event: Event,
    principal: Principal,
    now: datetime,
    window: timedelta = MODIFICATION_LOCK_WINDOW,
) -> Decision:
    if registration.user_id != principal.id:
        return deny(ForbiddenError("You cannot cancel this registration"))
    if in_lock_window(event, now, window):
        return deny(TooLateError("Cannot cancel within 24 hours of event start"))
    return ALLOW
