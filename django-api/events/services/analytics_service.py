"""Organizer and platform analytics."""

from dataclasses import dataclass
from datetime import date, datetime, timedelta

from django.utils import timezone

from events.domain import Principal
from events.domain.errors import EventNotFoundError, ForbiddenError, ValidationFailedError
from events.services.event_service import parse_event_id
from events.stores.interfaces import EventStore, RegistrationStore

ANALYTICS_WINDOW_DAYS = 30
MAX_DAILY_WINDOW_DAYS = 366


@dataclass(frozen=True)
class DailyCount:
    day: date
    count: int


@dataclass(frozen=True)
class EventAnalytics:
    total_views: int
    total_registrations: int
    daily_views: list[DailyCount]
    daily_registrations: list[DailyCount]

    @property
    def conversion_rate(self) -> str:
        if self.total_views == 0:
            return "0%"
        return f"{self.total_registrations / self.total_views * 100:.2f}%"


@dataclass(frozen=True)
class PlatformStats:
    total_events: int
    total_registrations: int
    active_registrations: int
    total_views: int


def fill_days(counts: list[tuple[date, int]], start: date, days: int) -> list[DailyCount]:
    """Expand sparse per-day counts into one entry per day, zero-filled."""
    by_day = dict(counts)
    return [
        DailyCount(day=start + timedelta(days=offset), count=by_day.get(start + timedelta(days=offset), 0))
        for offset in range(days)
    ]


class AnalyticsService:
    def __init__(self, events: EventStore, registrations: RegistrationStore) -> None:
        self._events = events
        self._registrations = registrations

    def event_analytics(self, event_id: str, principal: Principal, now: datetime | None = None) -> EventAnalytics:
        now = now or timezone.now()
        eid = parse_event_id(event_id)
        event = self._events.get_event(eid)
        if event is None:
            raise EventNotFoundError(event_id)
        if not (principal.is_admin or event.is_owned_by(principal)):
            raise ForbiddenError("You do not own this event")

        since = now - timedelta(days=ANALYTICS_WINDOW_DAYS)
        return EventAnalytics(
            total_views=event.total_views,
            total_registrations=event.total_registrations,
            daily_views=[DailyCount(day, count) for day, count in self._events.daily_views(eid, since)],
            daily_registrations=[
                DailyCount(day, count) for day, count in self._registrations.daily_counts(since, event_id=eid)
            ],
        )

    def platform_stats(self, principal: Principal) -> PlatformStats:
        if not principal.is_admin:
            raise ForbiddenError("Admin access required")
        events = self._events.totals()
        registrations = self._registrations.totals()
        return PlatformStats(
            total_events=events["events"],
            total_registrations=registrations["registrations"],
            active_registrations=registrations["active"],
            total_views=events["views"],
        )

    def daily_registrations(
        self, principal: Principal, days: int = ANALYTICS_WINDOW_DAYS, now: datetime | None = None
    ) -> list[DailyCount]:
        if not principal.is_admin:
            raise ForbiddenError("Admin access required")
        if not 1 <= days <= MAX_DAILY_WINDOW_DAYS:
            raise ValidationFailedError(f"days must be between 1 and {MAX_DAILY_WINDOW_DAYS}")
        now = now or timezone.now()
        start = timezone.localtime(now).date() - timedelta(days=days - 1)
        since = timezone.make_aware(datetime.combine(start, datetime.min.time()))
        return fill_days(self._registrations.daily_counts(since), start, days)
