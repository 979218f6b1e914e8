"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, BinaryIO
from uuid import UUID

from events.domain import (
    AuditEntry,
    Bookmark,
    Event,
    EventDraft,
    EventId,
    EventStatus,
    LocationType,
    Media,
    Notice,
    Notification,
    Organizer,
    OrganizerStatus,
    Registration,
    RegistrationId,
)


@dataclass(frozen=True)
class EventFilters:
    """Public discovery filters.

    ``starts_between`` is an inclusive window; an open end means no upper bound.
    """

    category: str | None = None
    location_type: LocationType | None = None
    starts_between: tuple[datetime, datetime | None] | None = None
    query: str | None = None


class EventStore(ABC):
    """Interface for event persistence operations."""

    @abstractmethod
    def create_event(self, draft: EventDraft, now: datetime) -> Event:
        ...

    @abstractmethod
    def get_event(self, event_id: EventId) -> Event | None:
        """Return an event by ID, or None if not found."""
        ...

    @abstractmethod
    def update_event(self, event_id: EventId, changes: Mapping[str, Any]) -> Event:
        """Apply field changes and return the updated event.

        Raises:
            ValidationFailedError: If a new ticket limit is below the seats
                already taken at write time.
        """
        ...

    @abstractmethod
    def set_status(self, event_id: EventId, status: EventStatus) -> Event:
        ...

    @abstractmethod
    def set_featured(self, event_id: EventId, featured: bool) -> Event:
        ...

    @abstractmethod
    def delete_event(self, event_id: EventId) -> None:
        """Delete an event together with its registrations, bookmarks and views."""
        ...

    @abstractmethod
    def list_published(
        self, filters: EventFilters, now: datetime, offset: int, limit: int
    ) -> tuple[list[Event], int]:
        """Return one page of published, not yet ended events ordered by
        start_date ascending, and the total match count."""
        ...

    @abstractmethod
    def trending(self, now: datetime, limit: int) -> list[Event]:
        """Return published events ordered by views + 5 * registrations."""
        ...

    @abstractmethod
    def featured(self, now: datetime) -> list[Event]:
        ...

    @abstractmethod
    def related(self, event: Event, now: datetime, limit: int) -> list[Event]:
        """Published events sharing category, a tag or the location type."""
        ...

    @abstractmethod
    def list_by_organizer(self, organizer_id: UUID) -> list[Event]:
        ...

    @abstractmethod
    def get_many(self, event_ids: list[EventId]) -> dict[EventId, Event]:
        ...

    @abstractmethod
    def claim_seat(self, event_id: EventId, now: datetime) -> bool:
        """Atomically take one seat.

        Increments total_registrations only if the event is published, has not
        started and is below its ticket limit. Returns False when nothing was
        updated.
        """
        ...

    @abstractmethod
    def release_seat(self, event_id: EventId) -> None:
        """Atomically give one seat back, never going below zero."""
        ...

    @abstractmethod
    def reset_registrations(self, event_id: EventId) -> None:
        ...

    @abstractmethod
    def record_view(self, event_id: EventId, viewer_id: UUID | None, now: datetime) -> None:
        """Store a view row and atomically increment total_views."""
        ...

    @abstractmethod
    def daily_views(self, event_id: EventId, since: datetime) -> list[tuple[date, int]]:
        ...

    @abstractmethod
    def totals(self) -> dict[str, int]:
        """Platform-wide counts: events and views."""
        ...


class RegistrationStore(ABC):
    """Interface for registration persistence operations."""

    @abstractmethod
    def get(self, registration_id: RegistrationId) -> Registration | None:
        ...

    @abstractmethod
    def find_for(self, event_id: EventId, user_id: UUID) -> Registration | None:
        """Return the registration for (event, user) in any status."""
        ...

    @abstractmethod
    def create(self, event_id: EventId, user_id: UUID, qr_code: str, now: datetime) -> Registration:
        """Create an active registration.

        Raises:
            AlreadyRegisteredError: If a registration for (event, user) exists.
        """
        ...

    @abstractmethod
    def delete(self, registration_id: RegistrationId) -> None:
        ...

    @abstractmethod
    def mark_cancelled(self, registration_id: RegistrationId, now: datetime) -> bool:
        """Move an active registration to cancelled. Returns False if it was
        not active."""
        ...

    @abstractmethod
    def cancel_all_for_event(self, event_id: EventId, now: datetime) -> list[UUID]:
        """Cancel every active registration and return the affected user IDs."""
        ...

    @abstractmethod
    def list_for_user(self, user_id: UUID, active_only: bool = True) -> list[Registration]:
        ...

    @abstractmethod
    def list_for_event(self, event_id: EventId, active_only: bool = True) -> list[Registration]:
        ...

    @abstractmethod
    def daily_counts(self, since: datetime, event_id: EventId | None = None) -> list[tuple[date, int]]:
        ...

    @abstractmethod
    def totals(self) -> dict[str, int]:
        """Platform-wide counts: all and active registrations."""
        ...


class BookmarkStore(ABC):
    @abstractmethod
    def find(self, user_id: UUID, event_id: EventId) -> Bookmark | None:
        ...

    @abstractmethod
    def add(self, user_id: UUID, event_id: EventId, now: datetime) -> Bookmark:
        ...

    @abstractmethod
    def remove(self, bookmark_id: UUID) -> None:
        ...

    @abstractmethod
    def list_for_user(self, user_id: UUID) -> list[Bookmark]:
        ...


class NotificationStore(ABC):
    @abstractmethod
    def add(self, notice: Notice) -> Notification:
        ...

    @abstractmethod
    def list_for(self, recipient_id: UUID) -> list[Notification]:
        ...

    @abstractmethod
    def mark_read(self, notification_id: UUID, recipient_id: UUID) -> Notification | None:
        ...

    @abstractmethod
    def mark_all_read(self, recipient_id: UUID) -> int:
        ...

    @abstractmethod
    def delete(self, notification_id: UUID, recipient_id: UUID) -> bool:
        ...


class AuditStore(ABC):
    @abstractmethod
    def add(self, entry: AuditEntry) -> None:
        ...

    @abstractmethod
    def recent(self, limit: int) -> list[AuditEntry]:
        ...


class OrganizerStore(ABC):
    """Interface for organizer profile persistence."""

    @abstractmethod
    def get(self, organizer_id: UUID) -> Organizer | None:
        ...

    @abstractmethod
    def create(self, organizer_id: UUID, business_name: str, business_email: str, now: datetime) -> Organizer:
        """Create a pending profile.

        Raises:
            ConflictError: If the organizer already has a profile.
        """
        ...

    @abstractmethod
    def set_status(
        self, organizer_id: UUID, status: OrganizerStatus, admin_notes: str, now: datetime
    ) -> Organizer:
        ...

    @abstractmethod
    def list_organizers(self, status: OrganizerStatus | None = None) -> list[Organizer]:
        ...


class MediaStore(ABC):
    """Interface for the media storage collaborator."""

    @abstractmethod
    def upload(self, content: BinaryIO, folder: str) -> Media:
        ...

    @abstractmethod
    def delete(self, public_id: str) -> None:
        ...
