from events.domain.models import (
    AuditEntry,
    Bookmark,
    Event,
    EventDraft,
    Notice,
    Notification,
    Organizer,
    Registration,
)
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
    Role,
    Severity,
)

__all__ = [
    "AuditEntry",
    "Bookmark",
    "Event",
    "EventDraft",
    "Notice",
    "Notification",
    "Organizer",
    "Registration",
    "Capacity",
    "EventId",
    "EventStatus",
    "LocationType",
    "Media",
    "OrganizerStatus",
    "Principal",
    "RegistrationId",
    "RegistrationStatus",
    "Role",
    "Severity",
]
