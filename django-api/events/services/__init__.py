from events.services.analytics_service import AnalyticsService
from events.services.bookmark_service import BookmarkService
from events.services.event_service import EventService
from events.services.fanout import FanOut
from events.services.notification_service import NotificationService
from events.services.organizer_service import OrganizerService
from events.services.registration_service import RegistrationService

__all__ = [
    "AnalyticsService",
    "BookmarkService",
    "EventService",
    "FanOut",
    "NotificationService",
    "OrganizerService",
    "RegistrationService",
]
