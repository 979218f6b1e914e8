"""Event service - all business logic lives here.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors
"""

import calendar
import logging
import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Any, BinaryIO

from django.db import transaction
from django.utils import timezone

from events.domain import (
    AuditEntry,
    Capacity,
    Event,
    EventDraft,
    EventId,
    EventStatus,
    LocationType,
    Media,
    Notice,
    Principal,
    Severity,
)
from events.domain import policy
from events.domain.errors import (
    ConflictError,
    ErrorCode,
    EventNotFoundError,
    ForbiddenError,
    InvalidIdError,
    TooLateError,
    ValidationFailedError,
)
from events.services.fanout import FanOut
from events.stores.interfaces import EventFilters, EventStore, MediaStore, OrganizerStore, RegistrationStore
from events.stores.media import release_media

logger = logging.getLogger(__name__)

MAX_GALLERY_IMAGES = 10
UPDATABLE_FIELDS = frozenset(
    {
        "title",
        "short_description",
        "description",
        "category",
        "tags",
        "location_type",
        "location_address",
        "event_url",
        "start_date",
        "end_date",
        "ticket_limit",
    }
)
REQUIRED_FIELDS = ("title", "start_date", "end_date", "location_type")


def parse_event_id(value: str) -> EventId:
    try:
        return EventId.from_string(value)
    except (TypeError, ValueError) as exc:
        raise InvalidIdError("event") from exc


def _choice(enum_cls, value: Any, name: str):
    try:
        return enum_cls(value)
    except ValueError as exc:
        raise ValidationFailedError(f"Invalid {name} '{value}'") from exc


def _coerce(data: Mapping[str, Any]) -> dict[str, Any]:
    """Convert primitive input values into domain values."""
    fields = dict(data)
    if "location_type" in fields:
        fields["location_type"] = _choice(LocationType, fields["location_type"], "location_type")
    if "ticket_limit" in fields:
        try:
            fields["ticket_limit"] = Capacity(int(fields["ticket_limit"] or 0))
        except ValueError as exc:
            raise ValidationFailedError("ticket_limit must be a non-negative integer") from exc
    if "tags" in fields:
        fields["tags"] = tuple(tag for tag in (fields["tags"] or ()) if tag)
    if "status" in fields:
        fields["status"] = _choice(EventStatus, fields["status"], "status")
    return fields


def _check_dates(start_date: datetime, end_date: datetime) -> None:
    if end_date <= start_date:
        raise ValidationFailedError("end_date must be after start_date")


def _add_month(moment: datetime) -> datetime:
    year = moment.year + moment.month // 12
    month = moment.month % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def date_window(name: str, now: datetime) -> tuple[datetime, datetime | None]:
    """Resolve a named discovery window into an inclusive start range."""
    if name == "upcoming":
        return now, None
    if name == "today":
        start = timezone.localtime(now).replace(hour=0, minute=0, second=0, microsecond=0)
        return start, start + timedelta(days=1) - timedelta(microseconds=1)
    if name == "week":
        return now, now + timedelta(days=7)
    if name == "month":
        return now, _add_month(now)
    raise ValidationFailedError(f"Unknown date filter '{name}'")


@dataclass(frozen=True)
class EventPage:
    events: list[Event]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


class EventService:
    """Service for event lifecycle, moderation and discovery."""

    def __init__(
        self,
        events: EventStore,
        registrations: RegistrationStore,
        media: MediaStore,
        fanout: FanOut,
        organizers: OrganizerStore,
    ) -> None:
        self._events = events
        self._registrations = registrations
        self._media = media
        self._fanout = fanout
        self._organizers = organizers

    def _require_approved(self, principal: Principal) -> None:
        """Only approved organizers may add events to the catalog."""
        organizer = self._organizers.get(principal.id)
        if organizer is None or not organizer.is_approved:
            raise ForbiddenError("Organizer is not approved", code=ErrorCode.ORGANIZER_NOT_APPROVED)

    def _get(self, event_id: str) -> Event:
        event = self._events.get_event(parse_event_id(event_id))
        if event is None:
            raise EventNotFoundError(event_id)
        return event

    def _upload(self, files: Iterable[BinaryIO], folder: str) -> list[Media]:
        uploaded: list[Media] = []
        try:
            for content in files:
                uploaded.append(self._media.upload(content, folder))
        except Exception:
            release_media(self._media, uploaded)
            raise
        return uploaded

    def _release(self, event: Event, media: Iterable[Media]) -> None:
        """Delete media unless another event of the same organizer still uses it."""
        media = list(media)
        if not media:
            return
        shared = {
            item.public_id
            for other in self._events.list_by_organizer(event.organizer_id)
            if other.id != event.id
            for item in other.media
        }
        failed = release_media(self._media, (item for item in media if item.public_id not in shared))
        if failed:
            logger.error(
                "Event %s left %d orphaned media object(s): %s",
                event.id,
                len(failed),
                ", ".join(item.public_id for item in failed),
            )

    # Organizer lifecycle

    def create_event(
        self,
        principal: Principal,
        data: Mapping[str, Any],
        banner: BinaryIO | None,
        gallery: Sequence[BinaryIO] = (),
        now: datetime | None = None,
    ) -> Event:
        """Create an event owned by the calling organizer.

        Raises:
            ForbiddenError: If the caller is not an approved organizer.
            ValidationFailedError: On bad dates, a missing banner or too many images.
            TooLateError: If the event is created as published but already started.
        """
        now = now or timezone.now()
        if not principal.is_organizer:
            raise ForbiddenError("Organizer authentication required")
        self._require_approved(principal)

        fields = _coerce(data)
        missing = [name for name in REQUIRED_FIELDS if not fields.get(name)]
        if missing:
            raise ValidationFailedError(f"Missing required field(s): {', '.join(missing)}")
        start_date, end_date = fields["start_date"], fields["end_date"]
        _check_dates(start_date, end_date)

        status = fields.pop("status", EventStatus.DRAFT)
        if status not in (EventStatus.DRAFT, EventStatus.PUBLISHED):
            raise ValidationFailedError("New events can only be draft or published")
        if status is EventStatus.PUBLISHED and start_date <= now:
            raise TooLateError("You cannot publish an event that already started")
        if banner is None:
            raise ValidationFailedError("Banner image is required")
        if len(gallery) > MAX_GALLERY_IMAGES:
            raise ValidationFailedError(f"Gallery max {MAX_GALLERY_IMAGES} images allowed")

        folder = f"events/{principal.id}"
        uploaded_banner = self._upload([banner], f"{folder}/banner")[0]
        try:
            uploaded_gallery = self._upload(gallery, f"{folder}/gallery")
        except Exception:
            release_media(self._media, [uploaded_banner])
            raise

        draft = EventDraft(
            organizer_id=principal.id,
            status=status,
            banner=uploaded_banner,
            gallery=tuple(uploaded_gallery),
            **{name: value for name, value in fields.items() if name in UPDATABLE_FIELDS},
        )
        try:
            event = self._events.create_event(draft, now)
        except Exception:
            release_media(self._media, [uploaded_banner, *uploaded_gallery])
            raise

        logger.info("Event %s created by organizer %s", event.id, principal.id)
        self._fanout.notify(
            Notice(
                principal.id,
                "Event Created",
                f"Your event '{event.title}' has been created successfully.",
                Severity.SUCCESS,
            )
        )
        return event

    def update_event(
        self,
        event_id: str,
        principal: Principal,
        changes: Mapping[str, Any],
        banner: BinaryIO | None = None,
        gallery: Sequence[BinaryIO] = (),
        replace_gallery: bool = False,
        remove_gallery_ids: Iterable[str] = (),
        now: datetime | None = None,
    ) -> Event:
        """Update event fields and media outside the modification lock window.

        Raises:
            EventNotFoundError, ForbiddenError, ModificationLockedError,
            ValidationFailedError
        """
        now = now or timezone.now()
        event = self._get(event_id)
        policy.can_modify(event, principal, now).enforce()

        fields = {name: value for name, value in _coerce(changes).items() if name in UPDATABLE_FIELDS}
        _check_dates(fields.get("start_date", event.start_date), fields.get("end_date", event.end_date))
        if "start_date" in fields and fields["start_date"] <= now:
            raise ValidationFailedError("start_date must be in the future")
        limit = fields.get("ticket_limit")
        if limit is not None and not limit.is_unlimited and limit.value < event.total_registrations:
            raise ValidationFailedError("ticket_limit cannot be lower than current registrations")

        released: list[Media] = []
        kept = list(event.gallery)
        if replace_gallery:
            released.extend(kept)
            kept = []
        remove = set(remove_gallery_ids)
        if remove:
            released.extend(item for item in kept if item.public_id in remove)
            kept = [item for item in kept if item.public_id not in remove]
        if len(kept) + len(gallery) > MAX_GALLERY_IMAGES:
            raise ValidationFailedError(f"Gallery max {MAX_GALLERY_IMAGES} images allowed")

        folder = f"events/{event.organizer_id}"
        added = self._upload(gallery, f"{folder}/gallery")
        uploaded = list(added)
        if banner is not None:
            try:
                fields["banner"] = self._upload([banner], f"{folder}/banner")[0]
            except Exception:
                release_media(self._media, added)
                raise
            uploaded.append(fields["banner"])
            if event.banner is not None:
                released.append(event.banner)
        if replace_gallery or remove or added:
            fields["gallery"] = (*kept, *added)

        try:
            updated = self._events.update_event(event.id, fields)
        except Exception:
            release_media(self._media, uploaded)
            raise
        self._release(updated, released)

        logger.info("Event %s updated by %s", event.id, principal.id)
        self._fanout.notify(
            Notice(event.organizer_id, "Event Updated", f"Your event '{updated.title}' has been updated.")
        )
        return updated

    def publish_event(self, event_id: str, principal: Principal, now: datetime | None = None) -> Event:
        now = now or timezone.now()
        event = self._get(event_id)
        policy.can_publish(event, principal, now).enforce()
        event = self._events.set_status(event.id, EventStatus.PUBLISHED)
        logger.info("Event %s published", event.id)
        self._fanout.notify(
            Notice(
                principal.id,
                "Event Published",
                f"Your event '{event.title}' is now open for registration.",
                Severity.SUCCESS,
            )
        )
        return event

    def unpublish_event(self, event_id: str, principal: Principal) -> Event:
        event = self._get(event_id)
        policy.can_unpublish(event, principal).enforce()
        event = self._events.set_status(event.id, EventStatus.DRAFT)
        logger.info("Event %s moved back to draft", event.id)
        self._fanout.notify(
            Notice(principal.id, "Event Unpublished", f"Your event '{event.title}' has been moved to draft.")
        )
        return event

    def cancel_event(
        self,
        event_id: str,
        principal: Principal,
        reason: str = "",
        now: datetime | None = None,
    ) -> Event:
        """Cancel an event and every active registration on it.

        Raises:
            EventNotFoundError, ForbiddenError, ModificationLockedError
            ConflictError: If the event is already cancelled or has ended.
        """
        now = now or timezone.now()
        event = self._get(event_id)
        policy.can_modify(event, principal, now, action="cancelled").enforce()
        current = event.effective_status(now)
        if current is EventStatus.CANCELLED:
            raise ConflictError("Event is already cancelled")
        if current is EventStatus.ENDED:
            raise ConflictError("An ended event cannot be cancelled")

        with transaction.atomic():
            user_ids = self._registrations.cancel_all_for_event(event.id, now)
            self._events.reset_registrations(event.id)
            event = self._events.set_status(event.id, EventStatus.CANCELLED)

        logger.info("Event %s cancelled by %s, %d registration(s) cancelled", event.id, principal.id, len(user_ids))
        suffix = f" Reason: {reason}" if reason else ""
        self._fanout.notify(
            *(
                Notice(
                    user_id,
                    "Event Cancelled",
                    f"The event '{event.title}' has been cancelled.{suffix}",
                    Severity.WARNING,
                )
                for user_id in user_ids
            )
        )
        if principal.is_admin:
            self._fanout.notify(
                Notice(
                    event.organizer_id,
                    "Event Cancelled by Admin",
                    f"Your event '{event.title}' was cancelled by admin.{suffix}",
                    Severity.WARNING,
                )
            )
            self._fanout.audit(
                AuditEntry(
                    actor_id=principal.id,
                    action="event_cancelled",
                    module="events",
                    metadata={"title": event.title, "reason": reason},
                    event_id=event.id.value,
                    organizer_id=event.organizer_id,
                )
            )
        return event

    def delete_event(self, event_id: str, principal: Principal, now: datetime | None = None) -> None:
        """Delete an event, its registrations and its media.

        Organizers are subject to the modification lock; admins are not.
        """
        now = now or timezone.now()
        event = self._get(event_id)
        policy.can_modify(event, principal, now, action="deleted").enforce()
        if principal.is_admin:
            organizer_notice = Notice(
                event.organizer_id,
                "Event Removed by Admin",
                f"Your event '{event.title}' was removed by admin.",
                Severity.WARNING,
            )
            self._destroy(event, principal, organizer_notice, action="event_deleted")
        else:
            organizer_notice = Notice(
                event.organizer_id, "Event Deleted", f"Your event '{event.title}' has been deleted.", Severity.WARNING
            )
            self._destroy(event, principal, organizer_notice)

    def remove_event(self, event_id: str, principal: Principal, reason: str = "") -> None:
        """Admin moderation removal of an inappropriate event."""
        if not principal.is_admin:
            raise ForbiddenError("Admin access required")
        event = self._get(event_id)
        organizer_notice = Notice(
            event.organizer_id,
            "Event Removed for Policy Violation",
            f"Your event '{event.title}' was removed by admin. Reason: {reason or 'Not specified'}",
            Severity.ERROR,
        )
        self._destroy(
            event,
            principal,
            organizer_notice,
            action="event_removed_inappropriate",
            metadata={"reason": reason},
        )

    def _destroy(
        self,
        event: Event,
        principal: Principal,
        organizer_notice: Notice,
        action: str | None = None,
        metadata: Mapping[str, Any] | None = None,
    ) -> None:
        registrants = [registration.user_id for registration in self._registrations.list_for_event(event.id)]
        with transaction.atomic():
            self._events.delete_event(event.id)
        self._release(event, event.media)

        logger.info("Event %s deleted by %s, %d registrant(s) notified", event.id, principal.id, len(registrants))
        self._fanout.notify(
            *(
                Notice(user_id, "Event Cancelled", f"The event '{event.title}' has been cancelled.", Severity.WARNING)
                for user_id in registrants
            ),
            organizer_notice,
        )
        if action is not None:
            self._fanout.audit(
                AuditEntry(
                    actor_id=principal.id,
                    action=action,
                    module="events",
                    metadata={"title": event.title, **(metadata or {})},
                    event_id=event.id.value,
                    organizer_id=event.organizer_id,
                )
            )

    def duplicate_event(
        self,
        event_id: str,
        principal: Principal,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        now: datetime | None = None,
    ) -> Event:
        """Copy an event as a new draft. Media references are shared, not re-uploaded."""
        now = now or timezone.now()
        event = self._get(event_id)
        if not event.is_owned_by(principal):
            raise ForbiddenError("Not authorized to duplicate this event")
        self._require_approved(principal)
        start_date = start_date or event.start_date
        end_date = end_date or event.end_date
        _check_dates(start_date, end_date)

        copy = self._events.create_event(
            EventDraft(
                organizer_id=event.organizer_id,
                title=f"{event.title} (Copy)",
                start_date=start_date,
                end_date=end_date,
                location_type=event.location_type,
                short_description=event.short_description,
                description=event.description,
                category=event.category,
                tags=event.tags,
                location_address=event.location_address,
                event_url=event.event_url,
                status=EventStatus.DRAFT,
                ticket_limit=event.ticket_limit,
                banner=event.banner,
                gallery=event.gallery,
            ),
            now,
        )
        logger.info("Event %s duplicated as %s", event.id, copy.id)
        self._fanout.notify(
            Notice(
                principal.id,
                "Event Duplicated",
                f"Your event '{event.title}' has been duplicated.",
                Severity.SUCCESS,
            )
        )
        return copy

    def set_featured(self, event_id: str, principal: Principal, featured: bool) -> Event:
        if not principal.is_admin:
            raise ForbiddenError("Admin access required")
        event = self._events.set_featured(self._get(event_id).id, featured)
        self._fanout.audit(
            AuditEntry(
                actor_id=principal.id,
                action="event_featured" if featured else "event_unfeatured",
                module="events",
                metadata={"title": event.title},
                event_id=event.id.value,
            )
        )
        return event

    # Reads

    def get_event(self, event_id: str, principal: Principal) -> Event:
        """Return any event to its owner or an admin."""
        event = self._get(event_id)
        if not (principal.is_admin or event.is_owned_by(principal)):
            raise ForbiddenError("You do not own this event")
        return event

    def organizer_events(self, principal: Principal) -> list[Event]:
        if not principal.is_organizer:
            raise ForbiddenError("Organizer authentication required")
        return self._events.list_by_organizer(principal.id)

    def get_public_event(
        self, event_id: str, viewer: Principal | None = None, now: datetime | None = None
    ) -> Event:
        """Return a published event and count the view."""
        now = now or timezone.now()
        event = self._events.get_event(parse_event_id(event_id))
        if event is None or event.status is not EventStatus.PUBLISHED:
            raise EventNotFoundError(event_id)
        self._events.record_view(event.id, viewer.id if viewer else None, now)
        return replace(event, total_views=event.total_views + 1)

    def list_events(
        self,
        category: str | None = None,
        location_type: str | None = None,
        date: str | None = None,
        query: str | None = None,
        page: int = 1,
        limit: int = 10,
        now: datetime | None = None,
    ) -> EventPage:
        now = now or timezone.now()
        page, limit = max(page, 1), max(limit, 1)
        filters = EventFilters(
            category=category or None,
            location_type=_choice(LocationType, location_type, "location_type") if location_type else None,
            starts_between=date_window(date, now) if date else None,
            query=(query or "").strip() or None,
        )
        events, total = self._events.list_published(filters, now, (page - 1) * limit, limit)
        return EventPage(events=events, total=total, page=page, limit=limit)

    def trending_events(self, limit: int = 10, now: datetime | None = None) -> list[Event]:
        return self._events.trending(now or timezone.now(), max(limit, 1))

    def featured_events(self, now: datetime | None = None) -> list[Event]:
        return self._events.featured(now or timezone.now())

    def related_events(self, event_id: str, limit: int = 5, now: datetime | None = None) -> list[Event]:
        return self._events.related(self._get(event_id), now or timezone.now(), max(limit, 1))
