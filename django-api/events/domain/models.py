"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in events/models.py (persistence layer).
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any
from uuid import UUID

from events.domain.value_objects import (
    Capacity,
    EventId,
    EventStatus,
    LocationType,
    Media,
    OrganizerStatus,
    Principal,
    RegistrationId,
    RegistrationStatus,
    Severity,
)


@dataclass(frozen=True)
class Event:
    """Domain representation of an Event.

    ``status`` is the stored intent (draft, published or cancelled). The
    temporal states live and ended are never stored; use
    :meth:`effective_status` to read them.
    """

    id: EventId
    organizer_id: UUID
    title: str
    short_description: str
    description: str
    category: str
    tags: tuple[str, ...]
    location_type: LocationType
    location_address: str
    event_url: str
    start_date: datetime
    end_date: datetime
    status: EventStatus
    ticket_limit: Capacity
    total_views: int
    total_registrations: int
    is_featured: bool
    created_at: datetime
    updated_at: datetime
    banner: Media | None = None
    gallery: tuple[Media, ...] = ()

    def effective_status(self, now: datetime) -> EventStatus:
        if self.status is EventStatus.CANCELLED:
            return EventStatus.CANCELLED
        if self.start_date <= now <= self.end_date:
            return EventStatus.LIVE
        if now > self.end_date:
            return EventStatus.ENDED
        return self.status

    def is_owned_by(self, principal: Principal) -> bool:
        return self.organizer_id == principal.id

    def time_until_start(self, now: datetime) -> timedelta:
        return self.start_date - now

    @property
    def has_seat_available(self) -> bool:
        return self.ticket_limit.admits(self.total_registrations)

    @property
    def media(self) -> tuple[Media, ...]:
        """All media objects owned by this event."""
        if self.banner is None:
            return self.gallery
        return (self.banner, *self.gallery)


@dataclass(frozen=True)
class EventDraft:
    """Field values for a new event, before it has an identity."""

    organizer_id: UUID
    title: str
    start_date: datetime
    end_date: datetime
    location_type: LocationType
    short_description: str = ""
    description: str = ""
    category: str = ""
    tags: tuple[str, ...] = ()
    location_address: str = ""
    event_url: str = ""
    status: EventStatus = EventStatus.DRAFT
    ticket_limit: Capacity = Capacity(0)
    banner: Media | None = None
    gallery: tuple[Media, ...] = ()


@dataclass(frozen=True)
class Registration:
    """Domain representation of a user's seat at an event."""

    id: RegistrationId
    event_id: EventId
    user_id: UUID
    status: RegistrationStatus
    qr_code: str
    created_at: datetime
    updated_at: datetime

    @property
    def is_active(self) -> bool:
        return self.status is RegistrationStatus.REGISTERED


@dataclass(frozen=True)
class Bookmark:
    id: UUID
    user_id: UUID
    event_id: EventId
    created_at: datetime


@dataclass(frozen=True)
class Notice:
    """An outgoing in-app notification."""

    recipient_id: UUID
    title: str
    message: str
    severity: Severity = Severity.INFO


@dataclass(frozen=True)
class Notification:
    """A delivered in-app notification."""

    id: UUID
    recipient_id: UUID
    title: str
    message: str
    severity: Severity
    read: bool
    created_at: datetime


@dataclass(frozen=True)
class AuditEntry:
    """A record of an administrative action."""

    actor_id: UUID
    action: str
    module: str
    metadata: dict[str, Any] = field(default_factory=dict)
    event_id: UUID | None = None
    organizer_id: UUID | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class Organizer:
    """An organizer's business profile and moderation state.

    ``id`` is the organizer's principal ID.
    """

    id: UUID
    business_name: str
    business_email: str
    status: OrganizerStatus
    admin_notes: str
    created_at: datetime
    updated_at: datetime

    @property
    def is_approved(self) -> bool:
        return self.status is OrganizerStatus.APPROVED
