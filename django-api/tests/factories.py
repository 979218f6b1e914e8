"""Builders for domain objects and store doubles shared by the tests."""

import uuid
from datetime import datetime, timedelta, timezone

from events.domain import Capacity, Event, EventId, EventStatus, LocationType
from events.stores import DjangoEventStore

START = datetime(2031, 3, 10, 18, 0, tzinfo=timezone.utc)


def build_event(**overrides) -> Event:
    values = {
        "id": EventId(uuid.uuid4()),
        "organizer_id": uuid.uuid4(),
        "title": "Data Night",
        "short_description": "",
        "description": "",
        "category": "tech",
        "tags": (),
        "location_type": LocationType.ONLINE,
        "location_address": "",
        "event_url": "",
        "start_date": START,
        "end_date": START + timedelta(hours=2),
        "status": EventStatus.PUBLISHED,
        "ticket_limit": Capacity(0),
        "total_views": 0,
        "total_registrations": 0,
        "is_featured": False,
        "created_at": START - timedelta(days=30),
        "updated_at": START - timedelta(days=30),
    }
    values.update(overrides)
    return Event(**values)


class StaleEventStore(DjangoEventStore):
    """Serves a snapshot taken before a concurrent writer committed."""

    def __init__(self, snapshot) -> None:
        self._snapshot = snapshot
        self.reads = 0

    def get_event(self, event_id):
        self.reads += 1
        if self.reads == 1:
            return self._snapshot
        return super().get_event(event_id)
