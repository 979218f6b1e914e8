"""Serializers for transforming domain models to API responses.

Output serializers read domain dataclasses. Input serializers only check
request shape; business rules stay in the services.
"""

from django.utils import timezone
from rest_framework import serializers

from events.services.tickets import ticket_qr_data_uri


class CommaSeparatedListField(serializers.Field):
    """Accept either a JSON list or a comma separated string (multipart forms)."""

    def to_internal_value(self, data):
        if isinstance(data, str):
            items = data.split(",")
        elif isinstance(data, (list, tuple)):
            items = data
        else:
            raise serializers.ValidationError("Expected a list or a comma separated string.")
        return [str(item).strip() for item in items if str(item).strip()]

    def to_representation(self, value):
        return list(value)


class MediaSerializer(serializers.Serializer):
    url = serializers.CharField()
    public_id = serializers.CharField()


class EventSerializer(serializers.Serializer):
    """Serializer for the Event domain model.

    ``status`` is the effective status at ``context["now"]``, so live and
    ended events are reported as such.
    """

    id = serializers.CharField()
    organizer_id = serializers.UUIDField()
    title = serializers.CharField()
    short_description = serializers.CharField()
    description = serializers.CharField()
    category = serializers.CharField()
    tags = serializers.ListField(child=serializers.CharField())
    location_type = serializers.CharField(source="location_type.value")
    location_address = serializers.CharField()
    event_url = serializers.CharField()
    start_date = serializers.DateTimeField()
    end_date = serializers.DateTimeField()
    status = serializers.SerializerMethodField()
    ticket_limit = serializers.IntegerField(source="ticket_limit.value")
    seats_left = serializers.SerializerMethodField()
    total_views = serializers.IntegerField()
    total_registrations = serializers.IntegerField()
    is_featured = serializers.BooleanField()
    banner = MediaSerializer(allow_null=True)
    gallery = MediaSerializer(many=True)
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()

    def get_status(self, event) -> str:
        return event.effective_status(self.context.get("now") or timezone.now()).value

    def get_seats_left(self, event) -> int | None:
        if event.ticket_limit.is_unlimited:
            return None
        return max(event.ticket_limit.value - event.total_registrations, 0)


class RegistrationSerializer(serializers.Serializer):
    id = serializers.CharField()
    event_id = serializers.CharField()
    user_id = serializers.UUIDField()
    status = serializers.CharField(source="status.value")
    qr_code = serializers.CharField()
    qr_image = serializers.SerializerMethodField()
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()

    def get_qr_image(self, registration) -> str:
        return ticket_qr_data_uri(registration.qr_code)


class RegistrationWithEventSerializer(serializers.Serializer):
    registration = RegistrationSerializer()
    event = EventSerializer()


class BookmarkSerializer(serializers.Serializer):
    id = serializers.UUIDField(source="bookmark.id")
    created_at = serializers.DateTimeField(source="bookmark.created_at")
    event = EventSerializer()


class OrganizerSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    business_name = serializers.CharField()
    business_email = serializers.CharField()
    status = serializers.CharField(source="status.value")
    admin_notes = serializers.CharField()
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()


class NotificationSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    title = serializers.CharField()
    message = serializers.CharField()
    severity = serializers.CharField(source="severity.value")
    read = serializers.BooleanField()
    created_at = serializers.DateTimeField()


class AuditEntrySerializer(serializers.Serializer):
    actor_id = serializers.UUIDField()
    action = serializers.CharField()
    module = serializers.CharField()
    metadata = serializers.DictField()
    event_id = serializers.UUIDField(allow_null=True)
    organizer_id = serializers.UUIDField(allow_null=True)
    created_at = serializers.DateTimeField(allow_null=True)


class DailyCountSerializer(serializers.Serializer):
    day = serializers.DateField()
    count = serializers.IntegerField()


class EventAnalyticsSerializer(serializers.Serializer):
    total_views = serializers.IntegerField()
    total_registrations = serializers.IntegerField()
    conversion_rate = serializers.CharField()
    daily_views = DailyCountSerializer(many=True)
    daily_registrations = DailyCountSerializer(many=True)


class PlatformStatsSerializer(serializers.Serializer):
    total_events = serializers.IntegerField()
    total_registrations = serializers.IntegerField()
    active_registrations = serializers.IntegerField()
    total_views = serializers.IntegerField()


# Input


class EventInputSerializer(serializers.Serializer):
    title = serializers.CharField(min_length=3, max_length=255)
    short_description = serializers.CharField(max_length=200, required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True)
    category = serializers.CharField(max_length=100, required=False, allow_blank=True)
    tags = CommaSeparatedListField(required=False)
    location_type = serializers.ChoiceField(choices=["online", "offline"])
    location_address = serializers.CharField(max_length=255, required=False, allow_blank=True)
    event_url = serializers.URLField(required=False, allow_blank=True)
    start_date = serializers.DateTimeField()
    end_date = serializers.DateTimeField()
    ticket_limit = serializers.IntegerField(min_value=0, required=False)
    status = serializers.ChoiceField(choices=["draft", "published"], required=False)


class EventUpdateSerializer(EventInputSerializer):
    """Partial update. Gallery options are popped off before reaching the service."""

    status = None
    replace_gallery = serializers.BooleanField(required=False, default=False)
    remove_gallery_public_ids = CommaSeparatedListField(required=False, default=list)


class DuplicateEventSerializer(serializers.Serializer):
    start_date = serializers.DateTimeField(required=False)
    end_date = serializers.DateTimeField(required=False)


class ReasonSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=500, required=False, allow_blank=True, default="")


class OrganizerApplicationSerializer(serializers.Serializer):
    business_name = serializers.CharField(max_length=255)
    business_email = serializers.EmailField(required=False, allow_blank=True, default="")


class TicketVerifySerializer(serializers.Serializer):
    token = serializers.CharField()
