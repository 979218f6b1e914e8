"""Tests for AnalyticsService.

Run with: pytest tests/test_analytics.py -v
"""

from datetime import date, timedelta

import pytest
from django.utils import timezone

from events.domain.errors import ForbiddenError, ValidationFailedError
from events.services.analytics_service import DailyCount, EventAnalytics, fill_days


class TestConversionRate:
    def test_no_views_is_zero(self):
        assert EventAnalytics(0, 3, [], []).conversion_rate == "0%"

    def test_rate_is_formatted_to_two_decimals(self):
        assert EventAnalytics(3, 1, [], []).conversion_rate == "33.33%"


class TestFillDays:
    def test_missing_days_are_zero(self):
        start = date(2031, 5, 1)
        filled = fill_days([(date(2031, 5, 2), 4)], start, 3)
        assert filled == [
            DailyCount(date(2031, 5, 1), 0),
            DailyCount(date(2031, 5, 2), 4),
            DailyCount(date(2031, 5, 3), 0),
        ]


@pytest.mark.django_db
class TestEventAnalytics:
    def test_owner_sees_views_and_registrations(
        self, analytics_service, event_service, registration_service, make_event, organizer, attendee, now
    ):
        event = make_event()
        event_service.get_public_event(str(event.id), attendee, now)
        event_service.get_public_event(str(event.id), None, now)
        registration_service.register_for_event(str(event.id), attendee, now)

        analytics = analytics_service.event_analytics(str(event.id), organizer, now)

        assert analytics.total_views == 2
        assert analytics.total_registrations == 1
        assert analytics.conversion_rate == "50.00%"
        assert sum(item.count for item in analytics.daily_views) == 2
        assert sum(item.count for item in analytics.daily_registrations) == 1

    def test_other_organizer_forbidden(self, analytics_service, make_event, other_organizer, now):
        event = make_event()
        with pytest.raises(ForbiddenError):
            analytics_service.event_analytics(str(event.id), other_organizer, now)


@pytest.mark.django_db
class TestPlatformAnalytics:
    def test_platform_stats(self, analytics_service, registration_service, make_event, admin, attendee, now):
        event = make_event()
        make_event()
        registration = registration_service.register_for_event(str(event.id), attendee, now)
        registration_service.cancel_registration(str(registration.id), attendee, now)

        stats = analytics_service.platform_stats(admin)

        assert stats.total_events == 2
        assert stats.total_registrations == 1
        assert stats.active_registrations == 0
        assert stats.total_views == 0

    def test_platform_stats_admin_only(self, analytics_service, organizer):
        with pytest.raises(ForbiddenError):
            analytics_service.platform_stats(organizer)

    def test_daily_registrations_are_zero_filled(
        self, analytics_service, registration_service, make_event, admin, attendee, now
    ):
        event = make_event()
        registration_service.register_for_event(str(event.id), attendee, now)

        counts = analytics_service.daily_registrations(admin, days=7, now=now)

        assert len(counts) == 7
        assert counts[-1] == DailyCount(timezone.localtime(now).date(), 1)
        assert all(item.count == 0 for item in counts[:-1])
        assert counts[0].day == counts[-1].day - timedelta(days=6)

    @pytest.mark.parametrize("days", [0, 367])
    def test_daily_registrations_window_bounds(self, analytics_service, admin, now, days):
        with pytest.raises(ValidationFailedError):
            analytics_service.daily_registrations(admin, days=days, now=now)
