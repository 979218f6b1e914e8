"""Service wiring for the HTTP handlers."""

from events.services import (
    AnalyticsService,
    BookmarkService,
    EventService,
    FanOut,
    NotificationService,
    OrganizerService,
    RegistrationService,
)
from events.stores import (
    DjangoAuditStore,
    DjangoBookmarkStore,
    DjangoEventStore,
    DjangoMediaStore,
    DjangoNotificationStore,
    DjangoOrganizerStore,
    DjangoRegistrationStore,
)


def get_fanout() -> FanOut:
    return FanOut(DjangoNotificationStore(), DjangoAuditStore())


def get_event_service() -> EventService:
    return EventService(
        DjangoEventStore(),
        DjangoRegistrationStore(),
        DjangoMediaStore(),
        get_fanout(),
        DjangoOrganizerStore(),
    )


def get_registration_service() -> RegistrationService:
    return RegistrationService(DjangoEventStore(), DjangoRegistrationStore(), get_fanout())


def get_organizer_service() -> OrganizerService:
    return OrganizerService(DjangoOrganizerStore(), get_fanout())


def get_bookmark_service() -> BookmarkService:
    return BookmarkService(DjangoEventStore(), DjangoBookmarkStore())


def get_notification_service() -> NotificationService:
    return NotificationService(DjangoNotificationStore(), DjangoAuditStore())


def get_analytics_service() -> AnalyticsService:
    return AnalyticsService(DjangoEventStore(), DjangoRegistrationStore())
