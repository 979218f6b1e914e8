"""Pytest configuration and shared fixtures."""

import uuid
from datetime import timedelta

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from events import models
from events.domain import Capacity, EventDraft, EventStatus, LocationType, Media, Principal, Role
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
    DjangoNotificationStore,
    DjangoOrganizerStore,
    DjangoRegistrationStore,
)
from events.stores.interfaces import MediaStore


class FakeMediaStore(MediaStore):
    """In-memory media store that can be told to fail."""

    def __init__(self) -> None:
        self.objects: dict[str, str] = {}
        self.deleted: list[str] = []
        self.fail_upload_at: int | None = None
        self.fail_deletes = False
        self._uploads = 0

    def upload(self, content, folder):
        self._uploads += 1
        if self.fail_upload_at is not None and self._uploads >= self.fail_upload_at:
            raise OSError("storage unavailable")
        public_id = f"{folder}/{self._uploads}"
        self.objects[public_id] = getattr(content, "name", "")
        return Media(url=f"https://media.example/{public_id}", public_id=public_id)

    def delete(self, public_id):
        if self.fail_deletes:
            raise OSError("storage unavailable")
        self.objects.pop(public_id, None)
        self.deleted.append(public_id)


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def now():
    return timezone.now().replace(microsecond=0)


def organizer_with_status(status: str) -> Principal:
    principal = Principal(id=uuid.uuid4(), role=Role.ORGANIZER)
    models.Organizer.objects.create(id=principal.id, business_name=f"Org {principal.id.hex[:6]}", status=status)
    return principal


@pytest.fixture
def organizer(db) -> Principal:
    """An approved organizer."""
    return organizer_with_status(models.Organizer.Status.APPROVED)


@pytest.fixture
def other_organizer(db) -> Principal:
    return organizer_with_status(models.Organizer.Status.APPROVED)


@pytest.fixture
def pending_organizer(db) -> Principal:
    return organizer_with_status(models.Organizer.Status.PENDING)


@pytest.fixture
def attendee() -> Principal:
    return Principal(id=uuid.uuid4(), role=Role.USER)


@pytest.fixture
def other_attendee() -> Principal:
    return Principal(id=uuid.uuid4(), role=Role.USER)


@pytest.fixture
def admin() -> Principal:
    return Principal(id=uuid.uuid4(), role=Role.ADMIN)


@pytest.fixture
def authenticate(api_client):
    """Send requests as the given principal, the way the auth gateway does."""

    def _authenticate(principal: Principal) -> APIClient:
        api_client.credentials(
            HTTP_X_PRINCIPAL_ID=str(principal.id),
            HTTP_X_PRINCIPAL_ROLE=principal.role.value,
        )
        return api_client

    return _authenticate


@pytest.fixture
def make_event(organizer, now):
    """Persist an event directly, bypassing service rules."""
    store = DjangoEventStore()

    def _make_event(**overrides):
        start_date = overrides.pop("start_date", now + timedelta(days=7))
        values = {
            "organizer_id": organizer.id,
            "title": "Django Meetup",
            "start_date": start_date,
            "end_date": overrides.pop("end_date", start_date + timedelta(hours=3)),
            "location_type": LocationType.OFFLINE,
            "status": EventStatus.PUBLISHED,
            "banner": Media(url="https://media.example/banner.png", public_id="events/banner.png"),
        }
        values.update(overrides)
        if isinstance(values.get("ticket_limit"), int):
            values["ticket_limit"] = Capacity(values["ticket_limit"])
        is_featured = values.pop("is_featured", False)
        event = store.create_event(EventDraft(**values), now)
        if is_featured:
            event = store.set_featured(event.id, True)
        return event

    return _make_event


@pytest.fixture
def media_store() -> FakeMediaStore:
    return FakeMediaStore()


@pytest.fixture
def fanout() -> FanOut:
    return FanOut(DjangoNotificationStore(), DjangoAuditStore())


@pytest.fixture
def event_service(media_store, fanout) -> EventService:
    return EventService(DjangoEventStore(), DjangoRegistrationStore(), media_store, fanout, DjangoOrganizerStore())


@pytest.fixture
def organizer_service(fanout) -> OrganizerService:
    return OrganizerService(DjangoOrganizerStore(), fanout)


@pytest.fixture
def registration_service(fanout) -> RegistrationService:
    return RegistrationService(DjangoEventStore(), DjangoRegistrationStore(), fanout)


@pytest.fixture
def bookmark_service() -> BookmarkService:
    return BookmarkService(DjangoEventStore(), DjangoBookmarkStore())


@pytest.fixture
def notification_service() -> NotificationService:
    return NotificationService(DjangoNotificationStore(), DjangoAuditStore())


@pytest.fixture
def analytics_service() -> AnalyticsService:
    return AnalyticsService(DjangoEventStore(), DjangoRegistrationStore())
