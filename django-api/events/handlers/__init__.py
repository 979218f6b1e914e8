from events.handlers.views import (
    AdminEventFeatureView,
    AdminEventRemoveView,
    AdminEventView,
    AdminOrganizerApproveView,
    AdminOrganizerBlockView,
    AdminOrganizerDetailView,
    AdminOrganizerListView,
    AdminOrganizerRejectView,
    AdminOrganizerUnblockView,
    AuditLogView,
    BookmarkToggleView,
    DailyRegistrationsView,
    EventAnalyticsView,
    EventCancelView,
    EventDetailView,
    EventDuplicateView,
    EventListView,
    EventPublishView,
    EventRegistrationExportView,
    EventRegistrationListView,
    EventRegistrationPdfView,
    EventRegistrationView,
    EventUnpublishView,
    FeaturedEventsView,
    MyBookmarksView,
    MyRegistrationsView,
    NotificationDetailView,
    NotificationListView,
    NotificationReadAllView,
    NotificationReadView,
    OrganizerEventDetailView,
    OrganizerEventListView,
    OrganizerProfileView,
    PlatformStatsView,
    RegistrationCancelView,
    RelatedEventsView,
    TicketVerifyView,
    TrendingEventsView,
)

__all__ = [
    "AdminEventFeatureView",
    "AdminEventRemoveView",
    "AdminEventView",
    "AdminOrganizerApproveView",
    "AdminOrganizerBlockView",
    "AdminOrganizerDetailView",
    "AdminOrganizerListView",
    "AdminOrganizerRejectView",
    "AdminOrganizerUnblockView",
    "AuditLogView",
    "BookmarkToggleView",
    "DailyRegistrationsView",
    "EventAnalyticsView",
    "EventCancelView",
    "EventDetailView",
    "EventDuplicateView",
    "EventListView",
    "EventPublishView",
    "EventRegistrationExportView",
    "EventRegistrationListView",
    "EventRegistrationPdfView",
    "EventRegistrationView",
    "EventUnpublishView",
    "FeaturedEventsView",
    "MyBookmarksView",
    "MyRegistrationsView",
    "NotificationDetailView",
    "NotificationListView",
    "NotificationReadAllView",
    "NotificationReadView",
    "OrganizerEventDetailView",
    "OrganizerEventListView",
    "OrganizerProfileView",
    "PlatformStatsView",
    "RegistrationCancelView",
    "RelatedEventsView",
    "TicketVerifyView",
    "TrendingEventsView",
]
