"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
"""

import uuid

from django.db import models
from django.db.models import F, Q
from django.utils import timezone


class Event(models.Model):
    """Persistence model for events.

    Only the stored intent is kept in ``status``; live and ended are derived
    at read time.
    """

    class Status(models.TextChoices):
        DRAFT = "draft", "Draft"
        PUBLISHED = "published", "Published"
        CANCELLED = "cancelled", "Cancelled"

    class LocationType(models.TextChoices):
        ONLINE = "online", "Online"
        OFFLINE = "offline", "Offline"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    organizer_id = models.UUIDField(db_index=True)
    title = models.CharField(max_length=255)
    short_description = models.CharField(max_length=200, blank=True, default="")
    description = models.TextField(blank=True, default="")
    category = models.CharField(max_length=100, blank=True, default="", db_index=True)
    tags = models.JSONField(default=list, blank=True)
    location_type = models.CharField(max_length=10, choices=LocationType.choices)
    location_address = models.CharField(max_length=255, blank=True, default="")
    event_url = models.URLField(max_length=500, blank=True, default="")
    start_date = models.DateTimeField()
    end_date = models.DateTimeField()
    banner = models.JSONField(blank=True, null=True)
    gallery = models.JSONField(default=list, blank=True)
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.DRAFT)
    ticket_limit = models.PositiveIntegerField(default=0)
    total_views = models.PositiveIntegerField(default=0)
    total_registrations = models.PositiveIntegerField(default=0)
    is_featured = models.BooleanField(default=False)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["-created_at"]),
            models.Index(fields=["status", "start_date"]),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(end_date__gt=F("start_date")),
                name="event_ends_after_start",
            ),
            models.CheckConstraint(
                condition=Q(ticket_limit=0) | Q(total_registrations__lte=F("ticket_limit")),
                name="event_within_ticket_limit",
            ),
        ]

    def __str__(self) -> str:
        return self.title


class Registration(models.Model):
    """Persistence model for a user's registration to an event."""

    class Status(models.TextChoices):
        REGISTERED = "registered", "Registered"
        CANCELLED = "cancelled", "Cancelled"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="registrations")
    user_id = models.UUIDField(db_index=True)
    qr_code = models.TextField()
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.REGISTERED)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(fields=["event", "user_id"], name="unique_registration_per_user"),
        ]
        indexes = [
            models.Index(fields=["event", "status"]),
        ]

    def __str__(self) -> str:
        return f"{self.user_id} @ {self.event_id} ({self.status})"


class Bookmark(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="bookmarks")
    user_id = models.UUIDField(db_index=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(fields=["user_id", "event"], name="unique_bookmark_per_user"),
        ]


class EventView(models.Model):
    """One row per public detail view; user_id is null for guests."""

    id = models.BigAutoField(primary_key=True)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="views")
    user_id = models.UUIDField(null=True, blank=True)
    viewed_at = models.DateTimeField(default=timezone.now)

    class Meta:
        indexes = [
            models.Index(fields=["event", "viewed_at"]),
        ]


class Notification(models.Model):
    """In-app notification delivered to a user, organizer or admin."""

    class Severity(models.TextChoices):
        INFO = "info", "Info"
        SUCCESS = "success", "Success"
        WARNING = "warning", "Warning"
        ERROR = "error", "Error"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    recipient_id = models.UUIDField(db_index=True)
    title = models.CharField(max_length=255)
    message = models.TextField()
    severity = models.CharField(max_length=10, choices=Severity.choices, default=Severity.INFO)
    read = models.BooleanField(default=False)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return self.title


class AuditLog(models.Model):
    """Administrative action history. Event references survive event deletion."""

    id = models.BigAutoField(primary_key=True)
    actor_id = models.UUIDField(db_index=True)
    action = models.CharField(max_length=100)
    module = models.CharField(max_length=50)
    metadata = models.JSONField(default=dict, blank=True)
    event_id = models.UUIDField(null=True, blank=True)
    organizer_id = models.UUIDField(null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.module}:{self.action}"


class Organizer(models.Model):
    """Organizer business profile. The primary key is the organizer's principal ID."""

    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        APPROVED = "approved", "Approved"
        REJECTED = "rejected", "Rejected"
        BLOCKED = "blocked", "Blocked"

    id = models.UUIDField(primary_key=True, editable=False)
    business_name = models.CharField(max_length=255)
    business_email = models.EmailField(blank=True, default="")
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.PENDING, db_index=True)
    admin_notes = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return self.business_name
