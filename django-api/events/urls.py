from django.urls import path

from events.handlers import (
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

urlpatterns = [
    # Public discovery
    path("events", EventListView.as_view(), name="event-list"),
    path("events/trending", TrendingEventsView.as_view(), name="event-trending"),
    path("events/featured", FeaturedEventsView.as_view(), name="event-featured"),
    path("events/<str:event_id>", EventDetailView.as_view(), name="event-detail"),
    path("events/<str:event_id>/related", RelatedEventsView.as_view(), name="event-related"),
    # Attendee
    path("events/<str:event_id>/register", EventRegistrationView.as_view(), name="event-register"),
    path("events/<str:event_id>/bookmark", BookmarkToggleView.as_view(), name="event-bookmark"),
    path(
        "registrations/<str:registration_id>/cancel",
        RegistrationCancelView.as_view(),
        name="registration-cancel",
    ),
    path("me/registrations", MyRegistrationsView.as_view(), name="my-registrations"),
    path("me/bookmarks", MyBookmarksView.as_view(), name="my-bookmarks"),
    path("me/notifications", NotificationListView.as_view(), name="notification-list"),
    path("me/notifications/read-all", NotificationReadAllView.as_view(), name="notification-read-all"),
    path(
        "me/notifications/<str:notification_id>",
        NotificationDetailView.as_view(),
        name="notification-detail",
    ),
    path(
        "me/notifications/<str:notification_id>/read",
        NotificationReadView.as_view(),
        name="notification-read",
    ),
    # Organizer
    path("organizer/profile", OrganizerProfileView.as_view(), name="organizer-profile"),
    path("organizer/events", OrganizerEventListView.as_view(), name="organizer-event-list"),
    path("organizer/events/<str:event_id>", OrganizerEventDetailView.as_view(), name="organizer-event-detail"),
    path("organizer/events/<str:event_id>/publish", EventPublishView.as_view(), name="event-publish"),
    path("organizer/events/<str:event_id>/unpublish", EventUnpublishView.as_view(), name="event-unpublish"),
    path("organizer/events/<str:event_id>/cancel", EventCancelView.as_view(), name="event-cancel"),
    path("organizer/events/<str:event_id>/duplicate", EventDuplicateView.as_view(), name="event-duplicate"),
    path(
        "organizer/events/<str:event_id>/registrations",
        EventRegistrationListView.as_view(),
        name="event-registrations",
    ),
    path(
        "organizer/events/<str:event_id>/registrations.csv",
        EventRegistrationExportView.as_view(),
        name="event-registrations-export",
    ),
    path(
        "organizer/events/<str:event_id>/registrations.pdf",
        EventRegistrationPdfView.as_view(),
        name="event-registrations-pdf",
    ),
    path("organizer/events/<str:event_id>/analytics", EventAnalyticsView.as_view(), name="event-analytics"),
    path("tickets/verify", TicketVerifyView.as_view(), name="ticket-verify"),
    # Admin
    path("admin/events/<str:event_id>", AdminEventView.as_view(), name="admin-event-detail"),
    path("admin/events/<str:event_id>/feature", AdminEventFeatureView.as_view(), name="admin-event-feature"),
    path("admin/events/<str:event_id>/remove", AdminEventRemoveView.as_view(), name="admin-event-remove"),
    path("admin/events/<str:event_id>/cancel", EventCancelView.as_view(), name="admin-event-cancel"),
    path("admin/organizers", AdminOrganizerListView.as_view(), name="admin-organizer-list"),
    path("admin/organizers/<str:organizer_id>", AdminOrganizerDetailView.as_view(), name="admin-organizer-detail"),
    path(
        "admin/organizers/<str:organizer_id>/approve",
        AdminOrganizerApproveView.as_view(),
        name="admin-organizer-approve",
    ),
    path(
        "admin/organizers/<str:organizer_id>/reject",
        AdminOrganizerRejectView.as_view(),
        name="admin-organizer-reject",
    ),
    path(
        "admin/organizers/<str:organizer_id>/block",
        AdminOrganizerBlockView.as_view(),
        name="admin-organizer-block",
    ),
    path(
        "admin/organizers/<str:organizer_id>/unblock",
        AdminOrganizerUnblockView.as_view(),
        name="admin-organizer-unblock",
    ),
    path("admin/stats", PlatformStatsView.as_view(), name="admin-stats"),
    path(
        "admin/analytics/daily-registrations",
        DailyRegistrationsView.as_view(),
        name="admin-daily-registrations",
    ),
    path("admin/audit-logs", AuditLogView.as_view(), name="admin-audit-logs"),
]
