from dataclasses import dataclass
from datetime import datetime

from django.utils import timezone

from events.domain import Bookmark, Event, Principal
from events.domain.errors import EventNotFoundError
from events.services.event_service import parse_event_id
from events.stores.interfaces import BookmarkStore, EventStore


@dataclass(frozen=True)
class BookmarkWithEvent:
    bookmark: Bookmark
    event: Event


class BookmarkService:
    """Per-user saved events. A second toggle removes the bookmark."""

    def __init__(self, events: EventStore, bookmarks: BookmarkStore) -> None:
        self._events = events
        self._bookmarks = bookmarks

    def toggle_bookmark(self, event_id: str, principal: Principal, now: datetime | None = None) -> bool:
        """Return True if the event is bookmarked after the call."""
        eid = parse_event_id(event_id)
        if self._events.get_event(eid) is None:
            raise EventNotFoundError(event_id)
        existing = self._bookmarks.find(principal.id, eid)
        if existing is not None:
            self._bookmarks.remove(existing.id)
            return False
        self._bookmarks.add(principal.id, eid, now or timezone.now())
        return True

    def my_bookmarks(self, principal: Principal) -> list[BookmarkWithEvent]:
        bookmarks = self._bookmarks.list_for_user(principal.id)
        events = self._events.get_many([bookmark.event_id for bookmark in bookmarks])
        return [
            BookmarkWithEvent(bookmark, events[bookmark.event_id])
            for bookmark in bookmarks
            if bookmark.event_id in events
        ]
