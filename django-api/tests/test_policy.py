"""Unit tests for the availability and lock policy.

Pure functions, no database.
Run with: pytest tests/test_policy.py -v
"""

import uuid
from datetime import timedelta

import pytest

from events.domain import Capacity, EventStatus, Principal, Registration, RegistrationId, RegistrationStatus, Role
from events.domain import policy
from events.domain.errors import (
    AlreadyRegisteredError,
    CapacityExceededError,
    ConflictError,
    ErrorCode,
    EventNotFoundError,
    ForbiddenError,
    ModificationLockedError,
    TooLateError,
)
from tests.factories import START, build_event


def owner_of(event) -> Principal:
    return Principal(event.organizer_id, Role.ORGANIZER)


def registration_for(event, user_id, status=RegistrationStatus.REGISTERED) -> Registration:
    return Registration(
        id=RegistrationId(uuid.uuid4()),
        event_id=event.id,
        user_id=user_id,
        status=status,
        qr_code="token",
        created_at=START - timedelta(days=5),
        updated_at=START - timedelta(days=5),
    )


class TestDecision:
    def test_allow_is_truthy(self):
        assert policy.ALLOW
        policy.ALLOW.enforce()

    def test_deny_raises_its_error(self):
        decision = policy.deny(ForbiddenError("nope"))
        assert not decision
        with pytest.raises(ForbiddenError):
            decision.enforce()


class TestCanModify:
    """Organizer edits lock 24 hours before start; admins bypass the lock."""

    def test_owner_allowed_outside_window(self):
        event = build_event()
        assert policy.can_modify(event, owner_of(event), START - timedelta(hours=25))

    def test_owner_allowed_exactly_at_window_edge(self):
        event = build_event()
        assert policy.can_modify(event, owner_of(event), START - timedelta(hours=24))

    def test_owner_locked_inside_window(self):
        event = build_event()
        decision = policy.can_modify(event, owner_of(event), START - timedelta(hours=23), action="deleted")
        assert isinstance(decision.error, ModificationLockedError)
        assert "deleted" in decision.error.message

    def test_non_owner_forbidden(self):
        event = build_event()
        stranger = Principal(uuid.uuid4(), Role.ORGANIZER)
        decision = policy.can_modify(event, stranger, START - timedelta(days=10))
        assert isinstance(decision.error, ForbiddenError)

    def test_admin_bypasses_lock(self):
        event = build_event()
        admin = Principal(uuid.uuid4(), Role.ADMIN)
        assert policy.can_modify(event, admin, START - timedelta(hours=1))


class TestCanPublish:
    def test_publish_future_event(self):
        event = build_event(status=EventStatus.DRAFT)
        assert policy.can_publish(event, owner_of(event), START - timedelta(minutes=1))

    def test_publish_at_start_is_too_late(self):
        event = build_event(status=EventStatus.DRAFT)
        assert isinstance(policy.can_publish(event, owner_of(event), START).error, TooLateError)

    def test_publish_cancelled_conflicts(self):
        event = build_event(status=EventStatus.CANCELLED)
        decision = policy.can_publish(event, owner_of(event), START - timedelta(days=2))
        assert isinstance(decision.error, ConflictError)

    def test_publish_by_non_owner_forbidden(self):
        event = build_event(status=EventStatus.DRAFT)
        decision = policy.can_publish(event, Principal(uuid.uuid4(), Role.ORGANIZER), START - timedelta(days=2))
        assert isinstance(decision.error, ForbiddenError)


class TestCanRegister:
    def test_published_future_event_with_seats(self):
        assert policy.can_register(build_event(), None, START - timedelta(hours=1))

    @pytest.mark.parametrize("status", [EventStatus.DRAFT, EventStatus.CANCELLED])
    def test_unpublished_event_not_available(self, status):
        decision = policy.can_register(build_event(status=status), None, START - timedelta(days=1))
        assert isinstance(decision.error, EventNotFoundError)
        assert decision.error.message == "Event not available for registration"

    def test_missing_event_not_available(self):
        assert isinstance(policy.can_register(None, None, START).error, EventNotFoundError)

    def test_active_registration_conflicts(self):
        event = build_event()
        existing = registration_for(event, uuid.uuid4())
        decision = policy.can_register(event, existing, START - timedelta(days=1))
        assert isinstance(decision.error, AlreadyRegisteredError)

    def test_cancelled_registration_does_not_block(self):
        event = build_event()
        existing = registration_for(event, uuid.uuid4(), RegistrationStatus.CANCELLED)
        assert policy.can_register(event, existing, START - timedelta(days=1))

    def test_full_event_is_sold_out(self):
        event = build_event(ticket_limit=Capacity(1), total_registrations=1)
        decision = policy.can_register(event, None, START - timedelta(days=1))
        assert isinstance(decision.error, CapacityExceededError)
        assert decision.error.code is ErrorCode.CAPACITY_EXCEEDED

    def test_registering_exactly_at_start_is_too_late(self):
        decision = policy.can_register(build_event(), None, START)
        assert isinstance(decision.error, TooLateError)

    def test_duplicate_reported_before_capacity(self):
        event = build_event(ticket_limit=Capacity(1), total_registrations=1)
        existing = registration_for(event, uuid.uuid4())
        decision = policy.can_register(event, existing, START + timedelta(hours=1))
        assert isinstance(decision.error, AlreadyRegisteredError)


class TestCanCancelRegistration:
    def test_owner_can_cancel_outside_window(self):
        event = build_event()
        user = Principal(uuid.uuid4(), Role.USER)
        registration = registration_for(event, user.id)
        assert policy.can_cancel_registration(registration, event, user, START - timedelta(hours=25))

    def test_cancel_inside_window_is_too_late(self):
        event = build_event()
        user = Principal(uuid.uuid4(), Role.USER)
        registration = registration_for(event, user.id)
        decision = policy.can_cancel_registration(registration, event, user, START - timedelta(hours=23))
        assert isinstance(decision.error, TooLateError)
        assert decision.error.code is ErrorCode.TOO_LATE

    def test_other_user_cannot_cancel(self):
        event = build_event()
        registration = registration_for(event, uuid.uuid4())
        stranger = Principal(uuid.uuid4(), Role.USER)
        decision = policy.can_cancel_registration(registration, event, stranger, START - timedelta(days=3))
        assert isinstance(decision.error, ForbiddenError)

    def test_lock_window_is_configurable(self):
        event = build_event()
        user = Principal(uuid.uuid4(), Role.USER)
        registration = registration_for(event, user.id)
        now = START - timedelta(hours=2)
        assert policy.can_cancel_registration(registration, event, user, now, window=timedelta(hours=1))
        assert not policy.can_cancel_registration(registration, event, user, now)
