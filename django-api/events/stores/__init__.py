from events.stores.django_store import (
    DjangoAuditStore,
    DjangoBookmarkStore,
    DjangoEventStore,
    DjangoNotificationStore,
    DjangoOrganizerStore,
    DjangoRegistrationStore,
)
from events.stores.interfaces import (
    AuditStore,
    BookmarkStore,
    EventFilters,
    EventStore,
    MediaStore,
    NotificationStore,
    OrganizerStore,
    RegistrationStore,
)
from events.stores.media import DjangoMediaStore, release_media

__all__ = [
    "AuditStore",
    "BookmarkStore",
    "EventFilters",
    "EventStore",
    "MediaStore",
    "NotificationStore",
    "OrganizerStore",
    "RegistrationStore",
    "DjangoAuditStore",
    "DjangoBookmarkStore",
    "DjangoEventStore",
    "DjangoMediaStore",
    "DjangoNotificationStore",
    "DjangoOrganizerStore",
    "DjangoRegistrationStore",
    "release_media",
]
