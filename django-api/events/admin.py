from django.contrib import admin

from events.models import AuditLog, Bookmark, Event, Notification, Organizer, Registration


class RegistrationInline(admin.TabularInline):
    model = Registration
    extra = 0
    fields = ["user_id", "status", "created_at"]
    readonly_fields = ["user_id", "status", "created_at"]


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["title", "organizer_id", "status", "start_date", "total_registrations", "is_featured"]
    list_filter = ["status", "location_type", "is_featured"]
    search_fields = ["title", "category"]
    readonly_fields = ["total_views", "total_registrations"]
    inlines = [RegistrationInline]


@admin.register(Registration)
class RegistrationAdmin(admin.ModelAdmin):
    list_display = ["id", "event", "user_id", "status", "created_at"]
    list_filter = ["status"]
    search_fields = ["event__title"]


@admin.register(Bookmark)
class BookmarkAdmin(admin.ModelAdmin):
    list_display = ["event", "user_id", "created_at"]


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ["title", "recipient_id", "severity", "read", "created_at"]
    list_filter = ["severity", "read"]


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ["action", "module", "actor_id", "event_id", "created_at"]
    list_filter = ["module", "action"]


@admin.register(Organizer)
class OrganizerAdmin(admin.ModelAdmin):
    list_display = ["business_name", "business_email", "status", "created_at"]
    list_filter = ["status"]
    search_fields = ["business_name", "business_email"]
