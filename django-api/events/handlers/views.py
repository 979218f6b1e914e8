"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Leave domain error mapping to the exception handler
- Never contain business logic
"""

from django.http import HttpResponse
from django.utils import timezone
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from events.cache import cached_listing
from events.domain.errors import ValidationFailedError
from events.handlers import dependencies
from events.handlers.auth import principal_of
from events.handlers.serializers import (
    AuditEntrySerializer,
    BookmarkSerializer,
    DailyCountSerializer,
    DuplicateEventSerializer,
    EventAnalyticsSerializer,
    EventInputSerializer,
    EventSerializer,
    EventUpdateSerializer,
    NotificationSerializer,
    OrganizerApplicationSerializer,
    OrganizerSerializer,
    PlatformStatsSerializer,
    ReasonSerializer,
    RegistrationSerializer,
    RegistrationWithEventSerializer,
    TicketVerifySerializer,
)

MAX_PAGE_SIZE = 100


def _int_param(request: Request, name: str, default: int, maximum: int | None = None) -> int:
    raw = request.query_params.get(name)
    if raw in (None, ""):
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValidationFailedError(f"{name} must be an integer") from exc
    if value < 1:
        raise ValidationFailedError(f"{name} must be positive")
    return min(value, maximum) if maximum else value


def _events(events, now) -> list[dict]:
    return EventSerializer(events, many=True, context={"now": now}).data


def _event(event, now) -> dict:
    return EventSerializer(event, context={"now": now}).data


def _validated(serializer_class, request: Request, partial: bool = False) -> dict:
    serializer = serializer_class(data=request.data, partial=partial)
    serializer.is_valid(raise_exception=True)
    return dict(serializer.validated_data)


# Public discovery


class EventListView(APIView):
    """Handler for GET /api/events"""

    permission_classes = [AllowAny]

    def get(self, request: Request) -> Response:
        params = request.query_params
        page = _int_param(request, "page", 1)
        limit = _int_param(request, "limit", 10, MAX_PAGE_SIZE)

        def build() -> dict:
            now = timezone.now()
            result = dependencies.get_event_service().list_events(
                category=params.get("category"),
                location_type=params.get("location_type"),
                date=params.get("date"),
                query=params.get("q"),
                page=page,
                limit=limit,
                now=now,
            )
            return {
                "events": _events(result.events, now),
                "pagination": {
                    "total": result.total,
                    "page": result.page,
                    "limit": result.limit,
                    "pages": result.total_pages,
                },
            }

        return Response(cached_listing("list", params.dict(), build))


class TrendingEventsView(APIView):
    """Handler for GET /api/events/trending"""

    permission_classes = [AllowAny]

    def get(self, request: Request) -> Response:
        limit = _int_param(request, "limit", 10, MAX_PAGE_SIZE)

        def build() -> list[dict]:
            now = timezone.now()
            return _events(dependencies.get_event_service().trending_events(limit, now), now)

        return Response(cached_listing("trending", {"limit": limit}, build))


class FeaturedEventsView(APIView):
    """Handler for GET /api/events/featured"""

    permission_classes = [AllowAny]

    def get(self, request: Request) -> Response:
        def build() -> list[dict]:
            now = timezone.now()
            return _events(dependencies.get_event_service().featured_events(now), now)

        return Response(cached_listing("featured", {}, build))


class EventDetailView(APIView):
    """Handler for GET /api/events/{event_id}"""

    permission_classes = [AllowAny]

    def get(self, request: Request, event_id: str) -> Response:
        now = timezone.now()
        event = dependencies.get_event_service().get_public_event(event_id, principal_of(request), now)
        return Response(_event(event, now))


class RelatedEventsView(APIView):
    """Handler for GET /api/events/{event_id}/related"""

    permission_classes = [AllowAny]

    def get(self, request: Request, event_id: str) -> Response:
        now = timezone.now()
        limit = _int_param(request, "limit", 5, MAX_PAGE_SIZE)
        events = dependencies.get_event_service().related_events(event_id, limit, now)
        return Response(_events(events, now))


# Attendee


class EventRegistrationView(APIView):
    """Handler for POST /api/events/{event_id}/register"""

    def post(self, request: Request, event_id: str) -> Response:
        registration = dependencies.get_registration_service().register_for_event(event_id, principal_of(request))
        return Response(RegistrationSerializer(registration).data, status=status.HTTP_201_CREATED)


class RegistrationCancelView(APIView):
    """Handler for POST /api/registrations/{registration_id}/cancel"""

    def post(self, request: Request, registration_id: str) -> Response:
        registration = dependencies.get_registration_service().cancel_registration(
            registration_id, principal_of(request)
        )
        return Response(RegistrationSerializer(registration).data)


class MyRegistrationsView(APIView):
    """Handler for GET /api/me/registrations"""

    def get(self, request: Request) -> Response:
        now = timezone.now()
        registrations = dependencies.get_registration_service().my_registrations(principal_of(request))
        return Response(RegistrationWithEventSerializer(registrations, many=True, context={"now": now}).data)


class BookmarkToggleView(APIView):
    """Handler for POST /api/events/{event_id}/bookmark"""

    def post(self, request: Request, event_id: str) -> Response:
        bookmarked = dependencies.get_bookmark_service().toggle_bookmark(event_id, principal_of(request))
        return Response(
            {"bookmarked": bookmarked},
            status=status.HTTP_201_CREATED if bookmarked else status.HTTP_200_OK,
        )


class MyBookmarksView(APIView):
    """Handler for GET /api/me/bookmarks"""

    def get(self, request: Request) -> Response:
        now = timezone.now()
        bookmarks = dependencies.get_bookmark_service().my_bookmarks(principal_of(request))
        return Response(BookmarkSerializer(bookmarks, many=True, context={"now": now}).data)


class NotificationListView(APIView):
    """Handler for GET /api/me/notifications"""

    def get(self, request: Request) -> Response:
        notifications = dependencies.get_notification_service().inbox(principal_of(request))
        return Response(NotificationSerializer(notifications, many=True).data)


class NotificationReadAllView(APIView):
    """Handler for POST /api/me/notifications/read-all"""

    def post(self, request: Request) -> Response:
        updated = dependencies.get_notification_service().mark_all_read(principal_of(request))
        return Response({"updated": updated})


class NotificationReadView(APIView):
    """Handler for POST /api/me/notifications/{notification_id}/read"""

    def post(self, request: Request, notification_id: str) -> Response:
        notification = dependencies.get_notification_service().mark_read(notification_id, principal_of(request))
        return Response(NotificationSerializer(notification).data)


class NotificationDetailView(APIView):
    """Handler for DELETE /api/me/notifications/{notification_id}"""

    def delete(self, request: Request, notification_id: str) -> Response:
        dependencies.get_notification_service().delete(notification_id, principal_of(request))
        return Response(status=status.HTTP_204_NO_CONTENT)


# Organizer


class OrganizerProfileView(APIView):
    """Handler for GET/POST /api/organizer/profile"""

    def get(self, request: Request) -> Response:
        organizer = dependencies.get_organizer_service().my_profile(principal_of(request))
        return Response(OrganizerSerializer(organizer).data)

    def post(self, request: Request) -> Response:
        data = _validated(OrganizerApplicationSerializer, request)
        organizer = dependencies.get_organizer_service().apply(
            principal_of(request), data["business_name"], data["business_email"]
        )
        return Response(OrganizerSerializer(organizer).data, status=status.HTTP_201_CREATED)


class OrganizerEventListView(APIView):
    """Handler for GET/POST /api/organizer/events"""

    def get(self, request: Request) -> Response:
        now = timezone.now()
        events = dependencies.get_event_service().organizer_events(principal_of(request))
        return Response(_events(events, now))

    def post(self, request: Request) -> Response:
        now = timezone.now()
        data = _validated(EventInputSerializer, request)
        event = dependencies.get_event_service().create_event(
            principal_of(request),
            data,
            banner=request.FILES.get("banner"),
            gallery=request.FILES.getlist("gallery"),
            now=now,
        )
        return Response(_event(event, now), status=status.HTTP_201_CREATED)


class OrganizerEventDetailView(APIView):
    """Handler for GET/PATCH/DELETE /api/organizer/events/{event_id}"""

    def get(self, request: Request, event_id: str) -> Response:
        event = dependencies.get_event_service().get_event(event_id, principal_of(request))
        return Response(_event(event, timezone.now()))

    def patch(self, request: Request, event_id: str) -> Response:
        now = timezone.now()
        changes = _validated(EventUpdateSerializer, request, partial=True)
        replace_gallery = changes.pop("replace_gallery", False)
        remove_gallery_ids = changes.pop("remove_gallery_public_ids", [])
        event = dependencies.get_event_service().update_event(
            event_id,
            principal_of(request),
            changes,
            banner=request.FILES.get("banner"),
            gallery=request.FILES.getlist("gallery"),
            replace_gallery=replace_gallery,
            remove_gallery_ids=remove_gallery_ids,
            now=now,
        )
        return Response(_event(event, now))

    def delete(self, request: Request, event_id: str) -> Response:
        dependencies.get_event_service().delete_event(event_id, principal_of(request))
        return Response(status=status.HTTP_204_NO_CONTENT)


class EventPublishView(APIView):
    """Handler for POST /api/organizer/events/{event_id}/publish"""

    def post(self, request: Request, event_id: str) -> Response:
        now = timezone.now()
        event = dependencies.get_event_service().publish_event(event_id, principal_of(request), now)
        return Response(_event(event, now))


class EventUnpublishView(APIView):
    """Handler for POST /api/organizer/events/{event_id}/unpublish"""

    def post(self, request: Request, event_id: str) -> Response:
        event = dependencies.get_event_service().unpublish_event(event_id, principal_of(request))
        return Response(_event(event, timezone.now()))


class EventCancelView(APIView):
    """Handler for POST /api/organizer/events/{event_id}/cancel and its admin twin"""

    def post(self, request: Request, event_id: str) -> Response:
        now = timezone.now()
        reason = _validated(ReasonSerializer, request)["reason"]
        event = dependencies.get_event_service().cancel_event(event_id, principal_of(request), reason, now)
        return Response(_event(event, now))


class EventDuplicateView(APIView):
    """Handler for POST /api/organizer/events/{event_id}/duplicate"""

    def post(self, request: Request, event_id: str) -> Response:
        now = timezone.now()
        dates = _validated(DuplicateEventSerializer, request)
        event = dependencies.get_event_service().duplicate_event(
            event_id,
            principal_of(request),
            start_date=dates.get("start_date"),
            end_date=dates.get("end_date"),
            now=now,
        )
        return Response(_event(event, now), status=status.HTTP_201_CREATED)


class EventRegistrationListView(APIView):
    """Handler for GET /api/organizer/events/{event_id}/registrations"""

    def get(self, request: Request, event_id: str) -> Response:
        registrations = dependencies.get_registration_service().event_registrations(event_id, principal_of(request))
        return Response(RegistrationSerializer(registrations, many=True).data)


class EventRegistrationExportView(APIView):
    """Handler for GET /api/organizer/events/{event_id}/registrations.csv"""

    def get(self, request: Request, event_id: str) -> HttpResponse:
        content = dependencies.get_registration_service().export_registrations_csv(event_id, principal_of(request))
        response = HttpResponse(content, content_type="text/csv")
        response["Content-Disposition"] = f'attachment; filename="registrations-{event_id}.csv"'
        return response


class EventRegistrationPdfView(APIView):
    """Handler for GET /api/organizer/events/{event_id}/registrations.pdf"""

    def get(self, request: Request, event_id: str) -> HttpResponse:
        content = dependencies.get_registration_service().export_registrations_pdf(event_id, principal_of(request))
        response = HttpResponse(content, content_type="application/pdf")
        response["Content-Disposition"] = f'attachment; filename="registrations-{event_id}.pdf"'
        return response


class EventAnalyticsView(APIView):
    """Handler for GET /api/organizer/events/{event_id}/analytics"""

    def get(self, request: Request, event_id: str) -> Response:
        analytics = dependencies.get_analytics_service().event_analytics(event_id, principal_of(request))
        return Response(EventAnalyticsSerializer(analytics).data)


class TicketVerifyView(APIView):
    """Handler for POST /api/tickets/verify"""

    def post(self, request: Request) -> Response:
        token = _validated(TicketVerifySerializer, request)["token"]
        result = dependencies.get_registration_service().verify_ticket(token, principal_of(request))
        return Response(RegistrationWithEventSerializer(result, context={"now": timezone.now()}).data)


# Admin


class AdminEventView(APIView):
    """Handler for DELETE /api/admin/events/{event_id}"""

    def delete(self, request: Request, event_id: str) -> Response:
        dependencies.get_event_service().delete_event(event_id, principal_of(request))
        return Response(status=status.HTTP_204_NO_CONTENT)


class AdminEventFeatureView(APIView):
    """Handler for POST/DELETE /api/admin/events/{event_id}/feature"""

    def post(self, request: Request, event_id: str) -> Response:
        event = dependencies.get_event_service().set_featured(event_id, principal_of(request), True)
        return Response(_event(event, timezone.now()))

    def delete(self, request: Request, event_id: str) -> Response:
        event = dependencies.get_event_service().set_featured(event_id, principal_of(request), False)
        return Response(_event(event, timezone.now()))


class AdminEventRemoveView(APIView):
    """Handler for POST /api/admin/events/{event_id}/remove"""

    def post(self, request: Request, event_id: str) -> Response:
        reason = _validated(ReasonSerializer, request)["reason"]
        dependencies.get_event_service().remove_event(event_id, principal_of(request), reason)
        return Response(status=status.HTTP_204_NO_CONTENT)


class AdminOrganizerListView(APIView):
    """Handler for GET /api/admin/organizers"""

    def get(self, request: Request) -> Response:
        organizers = dependencies.get_organizer_service().list_organizers(
            principal_of(request), request.query_params.get("status")
        )
        return Response(OrganizerSerializer(organizers, many=True).data)


class AdminOrganizerDetailView(APIView):
    """Handler for GET /api/admin/organizers/{organizer_id}"""

    def get(self, request: Request, organizer_id: str) -> Response:
        organizer = dependencies.get_organizer_service().get_organizer(organizer_id, principal_of(request))
        return Response(OrganizerSerializer(organizer).data)


class AdminOrganizerApproveView(APIView):
    """Handler for POST /api/admin/organizers/{organizer_id}/approve"""

    def post(self, request: Request, organizer_id: str) -> Response:
        organizer = dependencies.get_organizer_service().approve(organizer_id, principal_of(request))
        return Response(OrganizerSerializer(organizer).data)


class AdminOrganizerRejectView(APIView):
    """Handler for POST /api/admin/organizers/{organizer_id}/reject"""

    def post(self, request: Request, organizer_id: str) -> Response:
        reason = _validated(ReasonSerializer, request)["reason"]
        organizer = dependencies.get_organizer_service().reject(organizer_id, principal_of(request), reason)
        return Response(OrganizerSerializer(organizer).data)


class AdminOrganizerBlockView(APIView):
    """Handler for POST /api/admin/organizers/{organizer_id}/block"""

    def post(self, request: Request, organizer_id: str) -> Response:
        reason = _validated(ReasonSerializer, request)["reason"]
        organizer = dependencies.get_organizer_service().block(organizer_id, principal_of(request), reason)
        return Response(OrganizerSerializer(organizer).data)


class AdminOrganizerUnblockView(APIView):
    """Handler for POST /api/admin/organizers/{organizer_id}/unblock"""

    def post(self, request: Request, organizer_id: str) -> Response:
        organizer = dependencies.get_organizer_service().unblock(organizer_id, principal_of(request))
        return Response(OrganizerSerializer(organizer).data)


class PlatformStatsView(APIView):
    """Handler for GET /api/admin/stats"""

    def get(self, request: Request) -> Response:
        stats = dependencies.get_analytics_service().platform_stats(principal_of(request))
        return Response(PlatformStatsSerializer(stats).data)


class DailyRegistrationsView(APIView):
    """Handler for GET /api/admin/analytics/daily-registrations"""

    def get(self, request: Request) -> Response:
        days = _int_param(request, "days", 30)
        counts = dependencies.get_analytics_service().daily_registrations(principal_of(request), days)
        return Response(DailyCountSerializer(counts, many=True).data)


class AuditLogView(APIView):
    """Handler for GET /api/admin/audit-logs"""

    def get(self, request: Request) -> Response:
        limit = _int_param(request, "limit", 100, 500)
        entries = dependencies.get_notification_service().audit_log(principal_of(request), limit)
        return Response(AuditEntrySerializer(entries, many=True).data)
