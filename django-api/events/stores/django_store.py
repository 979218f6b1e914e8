"""Django ORM implementation of the stores."""

from collections.abc import Mapping
from datetime import date, datetime
from typing import Any
from uuid import UUID

from django.db import IntegrityError, transaction
from django.db.models import Count, F, Q, Sum
from django.db.models.functions import TruncDate

from events import models
from events.domain import (
    AuditEntry,
    Bookmark,
    Capacity,
    Event,
    EventDraft,
    EventId,
    EventStatus,
    LocationType,
    Media,
    Notice,
    Notification,
    Organizer,
    OrganizerStatus,
    Registration,
    RegistrationId,
    RegistrationStatus,
    Severity,
)
from events.domain.errors import AlreadyRegisteredError, ConflictError, ValidationFailedError
from events.stores.interfaces import (
    AuditStore,
    BookmarkStore,
    EventFilters,
    EventStore,
    NotificationStore,
    OrganizerStore,
    RegistrationStore,
)

TRENDING_REGISTRATION_WEIGHT = 5


def _media_to_json(media: Media | None) -> dict[str, str] | None:
    if media is None:
        return None
    return {"url": media.url, "public_id": media.public_id}


def _media_from_json(data: dict[str, str] | None) -> Media | None:
    if not data:
        return None
    return Media(url=data["url"], public_id=data["public_id"])


def _event_to_domain(row: models.Event) -> Event:
    return Event(
        id=EventId(row.id),
        organizer_id=row.organizer_id,
        title=row.title,
        short_description=row.short_description,
        description=row.description,
        category=row.category,
        tags=tuple(row.tags or ()),
        location_type=LocationType(row.location_type),
        location_address=row.location_address,
        event_url=row.event_url,
        start_date=row.start_date,
        end_date=row.end_date,
        status=EventStatus(row.status),
        ticket_limit=Capacity(row.ticket_limit),
        total_views=row.total_views,
        total_registrations=row.total_registrations,
        is_featured=row.is_featured,
        created_at=row.created_at,
        updated_at=row.updated_at,
        banner=_media_from_json(row.banner),
        gallery=tuple(_media_from_json(item) for item in row.gallery or ()),
    )


def _to_columns(changes: Mapping[str, Any]) -> dict[str, Any]:
    """Translate domain values into column values."""
    columns: dict[str, Any] = {}
    for name, value in changes.items():
        if isinstance(value, (LocationType, EventStatus)):
            value = value.value
        elif isinstance(value, Capacity):
            value = value.value
        elif name == "tags":
            value = list(value)
        elif name == "banner":
            value = _media_to_json(value)
        elif name == "gallery":
            value = [_media_to_json(item) for item in value]
        columns[name] = value
    return columns


def _registration_to_domain(row: models.Registration) -> Registration:
    return Registration(
        id=RegistrationId(row.id),
        event_id=EventId(row.event_id),
        user_id=row.user_id,
        status=RegistrationStatus(row.status),
        qr_code=row.qr_code,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _daily(queryset, column: str) -> list[tuple[date, int]]:
    rows = (
        queryset.annotate(day=TruncDate(column))
        .values("day")
        .annotate(count=Count("pk"))
        .order_by("day")
    )
    return [(row["day"], row["count"]) for row in rows]


class DjangoEventStore(EventStore):
    """Relational event store using Django ORM."""

    def _published(self, now: datetime):
        return models.Event.objects.filter(status=models.Event.Status.PUBLISHED, end_date__gte=now)

    def create_event(self, draft: EventDraft, now: datetime) -> Event:
        row = models.Event.objects.create(
            organizer_id=draft.organizer_id,
            title=draft.title,
            short_description=draft.short_description,
            description=draft.description,
            category=draft.category,
            tags=list(draft.tags),
            location_type=draft.location_type.value,
            location_address=draft.location_address,
            event_url=draft.event_url,
            start_date=draft.start_date,
            end_date=draft.end_date,
            banner=_media_to_json(draft.banner),
            gallery=[_media_to_json(item) for item in draft.gallery],
            status=draft.status.value,
            ticket_limit=draft.ticket_limit.value,
            created_at=now,
        )
        return _event_to_domain(row)

    def get_event(self, event_id: EventId) -> Event | None:
        row = models.Event.objects.filter(pk=event_id.value).first()
        return _event_to_domain(row) if row is not None else None

    def update_event(self, event_id: EventId, changes: Mapping[str, Any]) -> Event:
        columns = _to_columns(changes)
        with transaction.atomic():
            row = models.Event.objects.select_for_update().get(pk=event_id.value)
            limit = columns.get("ticket_limit")
            # Checked against the locked row; claim_seat waits on the lock.
            if limit and row.total_registrations > limit:
                raise ValidationFailedError("ticket_limit cannot be lower than current registrations")
            for name, value in columns.items():
                setattr(row, name, value)
            # Only the changed columns are written so concurrent counter updates survive.
            row.save(update_fields=[*columns, "updated_at"])
        return _event_to_domain(row)

    def set_status(self, event_id: EventId, status: EventStatus) -> Event:
        return self.update_event(event_id, {"status": status})

    def set_featured(self, event_id: EventId, featured: bool) -> Event:
        return self.update_event(event_id, {"is_featured": featured})

    def delete_event(self, event_id: EventId) -> None:
        models.Event.objects.filter(pk=event_id.value).delete()

    def list_published(
        self, filters: EventFilters, now: datetime, offset: int, limit: int
    ) -> tuple[list[Event], int]:
        queryset = self._published(now)
        if filters.category:
            queryset = queryset.filter(category=filters.category)
        if filters.location_type is not None:
            queryset = queryset.filter(location_type=filters.location_type.value)
        if filters.starts_between is not None:
            start, end = filters.starts_between
            queryset = queryset.filter(start_date__gte=start)
            if end is not None:
                queryset = queryset.filter(start_date__lte=end)
        if filters.query:
            queryset = queryset.filter(
                Q(title__icontains=filters.query)
                | Q(short_description__icontains=filters.query)
                | Q(description__icontains=filters.query)
            )
        total = queryset.count()
        rows = queryset.order_by("start_date")[offset : offset + limit]
        return [_event_to_domain(row) for row in rows], total

    def trending(self, now: datetime, limit: int) -> list[Event]:
        rows = (
            self._published(now)
            .annotate(score=F("total_views") + F("total_registrations") * TRENDING_REGISTRATION_WEIGHT)
            .order_by("-score", "-created_at")[:limit]
        )
        return [_event_to_domain(row) for row in rows]

    def featured(self, now: datetime) -> list[Event]:
        rows = self._published(now).filter(is_featured=True).order_by("-created_at")
        return [_event_to_domain(row) for row in rows]

    def related(self, event: Event, now: datetime, limit: int) -> list[Event]:
        candidates = self._published(now).exclude(pk=event.id.value).order_by("-created_at")
        same_kind = Q(location_type=event.location_type.value)
        if event.category:
            same_kind |= Q(category=event.category)
        rows = list(candidates.filter(same_kind)[:limit])

        tags = set(event.tags)
        if tags:
            # Tag overlap is checked in Python: JSON containment is not portable across backends.
            shared: list[models.Event] = []
            for row in candidates.exclude(same_kind).iterator():
                if tags.intersection(row.tags or ()):
                    shared.append(row)
                    if len(shared) >= limit:
                        break
            rows = sorted([*rows, *shared], key=lambda row: row.created_at, reverse=True)[:limit]
        return [_event_to_domain(row) for row in rows]

    def list_by_organizer(self, organizer_id: UUID) -> list[Event]:
        rows = models.Event.objects.filter(organizer_id=organizer_id).order_by("-created_at")
        return [_event_to_domain(row) for row in rows]

    def get_many(self, event_ids: list[EventId]) -> dict[EventId, Event]:
        rows = models.Event.objects.filter(pk__in=[event_id.value for event_id in event_ids])
        return {EventId(row.id): _event_to_domain(row) for row in rows}

    def claim_seat(self, event_id: EventId, now: datetime) -> bool:
        updated = (
            models.Event.objects.filter(
                pk=event_id.value,
                status=models.Event.Status.PUBLISHED,
                start_date__gt=now,
            )
            .filter(Q(ticket_limit=0) | Q(total_registrations__lt=F("ticket_limit")))
            .update(total_registrations=F("total_registrations") + 1)
        )
        return updated == 1

    def release_seat(self, event_id: EventId) -> None:
        models.Event.objects.filter(pk=event_id.value, total_registrations__gt=0).update(
            total_registrations=F("total_registrations") - 1
        )

    def reset_registrations(self, event_id: EventId) -> None:
        models.Event.objects.filter(pk=event_id.value).update(total_registrations=0)

    def record_view(self, event_id: EventId, viewer_id: UUID | None, now: datetime) -> None:
        models.EventView.objects.create(event_id=event_id.value, user_id=viewer_id, viewed_at=now)
        models.Event.objects.filter(pk=event_id.value).update(total_views=F("total_views") + 1)

    def daily_views(self, event_id: EventId, since: datetime) -> list[tuple[date, int]]:
        queryset = models.EventView.objects.filter(event_id=event_id.value, viewed_at__gte=since)
        return _daily(queryset, "viewed_at")

    def totals(self) -> dict[str, int]:
        aggregate = models.Event.objects.aggregate(events=Count("pk"), views=Sum("total_views"))
        return {"events": aggregate["events"], "views": aggregate["views"] or 0}


class DjangoRegistrationStore(RegistrationStore):
    """Relational registration store using Django ORM."""

    def get(self, registration_id: RegistrationId) -> Registration | None:
        row = models.Registration.objects.filter(pk=registration_id.value).first()
        return _registration_to_domain(row) if row is not None else None

    def find_for(self, event_id: EventId, user_id: UUID) -> Registration | None:
        row = models.Registration.objects.filter(event_id=event_id.value, user_id=user_id).first()
        return _registration_to_domain(row) if row is not None else None

    def create(self, event_id: EventId, user_id: UUID, qr_code: str, now: datetime) -> Registration:
        try:
            with transaction.atomic():
                row = models.Registration.objects.create(
                    event_id=event_id.value,
                    user_id=user_id,
                    qr_code=qr_code,
                    created_at=now,
                )
        except IntegrityError as exc:
            raise AlreadyRegisteredError() from exc
        return _registration_to_domain(row)

    def delete(self, registration_id: RegistrationId) -> None:
        models.Registration.objects.filter(pk=registration_id.value).delete()

    def mark_cancelled(self, registration_id: RegistrationId, now: datetime) -> bool:
        updated = models.Registration.objects.filter(
            pk=registration_id.value,
            status=models.Registration.Status.REGISTERED,
        ).update(status=models.Registration.Status.CANCELLED, updated_at=now)
        return updated == 1

    def cancel_all_for_event(self, event_id: EventId, now: datetime) -> list[UUID]:
        active = models.Registration.objects.filter(
            event_id=event_id.value,
            status=models.Registration.Status.REGISTERED,
        )
        user_ids = list(active.values_list("user_id", flat=True))
        active.update(status=models.Registration.Status.CANCELLED, updated_at=now)
        return user_ids

    def list_for_user(self, user_id: UUID, active_only: bool = True) -> list[Registration]:
        queryset = models.Registration.objects.filter(user_id=user_id)
        if active_only:
            queryset = queryset.filter(status=models.Registration.Status.REGISTERED)
        return [_registration_to_domain(row) for row in queryset.order_by("-created_at")]

    def list_for_event(self, event_id: EventId, active_only: bool = True) -> list[Registration]:
        queryset = models.Registration.objects.filter(event_id=event_id.value)
        if active_only:
            queryset = queryset.filter(status=models.Registration.Status.REGISTERED)
        return [_registration_to_domain(row) for row in queryset.order_by("-created_at")]

    def daily_counts(self, since: datetime, event_id: EventId | None = None) -> list[tuple[date, int]]:
        queryset = models.Registration.objects.filter(created_at__gte=since)
        if event_id is not None:
            queryset = queryset.filter(event_id=event_id.value)
        return _daily(queryset, "created_at")

    def totals(self) -> dict[str, int]:
        return models.Registration.objects.aggregate(
            registrations=Count("pk"),
            active=Count("pk", filter=Q(status=models.Registration.Status.REGISTERED)),
        )


class DjangoBookmarkStore(BookmarkStore):
    def _to_domain(self, row: models.Bookmark) -> Bookmark:
        return Bookmark(id=row.id, user_id=row.user_id, event_id=EventId(row.event_id), created_at=row.created_at)

    def find(self, user_id: UUID, event_id: EventId) -> Bookmark | None:
        row = models.Bookmark.objects.filter(user_id=user_id, event_id=event_id.value).first()
        return self._to_domain(row) if row is not None else None

    def add(self, user_id: UUID, event_id: EventId, now: datetime) -> Bookmark:
        row, _ = models.Bookmark.objects.get_or_create(
            user_id=user_id,
            event_id=event_id.value,
            defaults={"created_at": now},
        )
        return self._to_domain(row)

    def remove(self, bookmark_id: UUID) -> None:
        models.Bookmark.objects.filter(pk=bookmark_id).delete()

    def list_for_user(self, user_id: UUID) -> list[Bookmark]:
        rows = models.Bookmark.objects.filter(user_id=user_id).order_by("-created_at")
        return [self._to_domain(row) for row in rows]


class DjangoNotificationStore(NotificationStore):
    def _to_domain(self, row: models.Notification) -> Notification:
        return Notification(
            id=row.id,
            recipient_id=row.recipient_id,
            title=row.title,
            message=row.message,
            severity=Severity(row.severity),
            read=row.read,
            created_at=row.created_at,
        )

    def add(self, notice: Notice) -> Notification:
        row = models.Notification.objects.create(
            recipient_id=notice.recipient_id,
            title=notice.title,
            message=notice.message,
            severity=notice.severity.value,
        )
        return self._to_domain(row)

    def list_for(self, recipient_id: UUID) -> list[Notification]:
        rows = models.Notification.objects.filter(recipient_id=recipient_id).order_by("-created_at")
        return [self._to_domain(row) for row in rows]

    def mark_read(self, notification_id: UUID, recipient_id: UUID) -> Notification | None:
        row = models.Notification.objects.filter(pk=notification_id, recipient_id=recipient_id).first()
        if row is None:
            return None
        if not row.read:
            row.read = True
            row.save(update_fields=["read"])
        return self._to_domain(row)

    def mark_all_read(self, recipient_id: UUID) -> int:
        return models.Notification.objects.filter(recipient_id=recipient_id, read=False).update(read=True)

    def delete(self, notification_id: UUID, recipient_id: UUID) -> bool:
        deleted, _ = models.Notification.objects.filter(pk=notification_id, recipient_id=recipient_id).delete()
        return deleted > 0


class DjangoAuditStore(AuditStore):
    def add(self, entry: AuditEntry) -> None:
        models.AuditLog.objects.create(
            actor_id=entry.actor_id,
            action=entry.action,
            module=entry.module,
            metadata=entry.metadata,
            event_id=entry.event_id,
            organizer_id=entry.organizer_id,
        )

    def recent(self, limit: int) -> list[AuditEntry]:
        rows = models.AuditLog.objects.order_by("-created_at")[:limit]
        return [
            AuditEntry(
                actor_id=row.actor_id,
                action=row.action,
                module=row.module,
                metadata=row.metadata,
                event_id=row.event_id,
                organizer_id=row.organizer_id,
                created_at=row.created_at,
            )
            for row in rows
        ]


class DjangoOrganizerStore(OrganizerStore):
    def _to_domain(self, row: models.Organizer) -> Organizer:
        return Organizer(
            id=row.id,
            business_name=row.business_name,
            business_email=row.business_email,
            status=OrganizerStatus(row.status),
            admin_notes=row.admin_notes,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    def get(self, organizer_id: UUID) -> Organizer | None:
        row = models.Organizer.objects.filter(pk=organizer_id).first()
        return self._to_domain(row) if row is not None else None

    def create(self, organizer_id: UUID, business_name: str, business_email: str, now: datetime) -> Organizer:
        try:
            with transaction.atomic():
                row = models.Organizer.objects.create(
                    id=organizer_id,
                    business_name=business_name,
                    business_email=business_email,
                    created_at=now,
                )
        except IntegrityError as exc:
            raise ConflictError("Organizer profile already exists") from exc
        return self._to_domain(row)

    def set_status(
        self, organizer_id: UUID, status: OrganizerStatus, admin_notes: str, now: datetime
    ) -> Organizer:
        models.Organizer.objects.filter(pk=organizer_id).update(
            status=status.value, admin_notes=admin_notes, updated_at=now
        )
        return self._to_domain(models.Organizer.objects.get(pk=organizer_id))

    def list_organizers(self, status: OrganizerStatus | None = None) -> list[Organizer]:
        queryset = models.Organizer.objects.all()
        if status is not None:
            queryset = queryset.filter(status=status.value)
        return [self._to_domain(row) for row in queryset.order_by("-created_at")]
