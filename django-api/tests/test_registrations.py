"""Tests for RegistrationService.

Run with: pytest tests/test_registrations.py -v
"""

import csv
import io
from datetime import timedelta

import pytest

from events import models
from events.domain import EventStatus, RegistrationStatus
from events.domain.errors import (
    AlreadyRegisteredError,
    CapacityExceededError,
    ErrorCode,
    EventNotFoundError,
    ForbiddenError,
    InvalidIdError,
    NotFoundError,
    RegistrationNotFoundError,
    TooLateError,
    ValidationFailedError,
)
from events.services import RegistrationService
from events.services.tickets import read_ticket
from events.stores import DjangoEventStore, DjangoRegistrationStore
from tests.factories import StaleEventStore


class BlindRegistrationStore(DjangoRegistrationStore):
    """Never sees existing registrations, like a reader racing a writer."""

    def find_for(self, event_id, user_id):
        return None


def seats_taken(event) -> int:
    return models.Event.objects.get(pk=event.id.value).total_registrations


@pytest.mark.django_db
class TestRegister:
    def test_register_creates_active_registration(self, registration_service, make_event, attendee, now):
        event = make_event()

        registration = registration_service.register_for_event(str(event.id), attendee, now)

        assert registration.status is RegistrationStatus.REGISTERED
        assert registration.user_id == attendee.id
        assert seats_taken(event) == 1
        claims = read_ticket(registration.qr_code)
        assert claims.event_id == event.id
        assert claims.user_id == attendee.id

    def test_register_notifies_after_commit(
        self, registration_service, make_event, attendee, now, django_capture_on_commit_callbacks
    ):
        event = make_event()

        with django_capture_on_commit_callbacks(execute=True):
            registration_service.register_for_event(str(event.id), attendee, now)

        titles = set(models.Notification.objects.filter(recipient_id=attendee.id).values_list("title", flat=True))
        assert titles == {"Registration Successful", "Ticket Generated"}

    def test_register_twice_conflicts(self, registration_service, make_event, attendee, now):
        event = make_event()
        registration_service.register_for_event(str(event.id), attendee, now)

        with pytest.raises(AlreadyRegisteredError):
            registration_service.register_for_event(str(event.id), attendee, now)
        assert seats_taken(event) == 1

    def test_register_when_sold_out(self, registration_service, make_event, attendee, other_attendee, now):
        event = make_event(ticket_limit=1)
        registration_service.register_for_event(str(event.id), attendee, now)

        with pytest.raises(CapacityExceededError):
            registration_service.register_for_event(str(event.id), other_attendee, now)
        assert seats_taken(event) == 1

    def test_last_seat_goes_to_one_caller_only(self, fanout, make_event, attendee, other_attendee, now):
        """Both callers saw a free seat; the conditional claim admits only one."""
        event = make_event(ticket_limit=1)
        snapshot = DjangoEventStore().get_event(event.id)
        RegistrationService(DjangoEventStore(), DjangoRegistrationStore(), fanout).register_for_event(
            str(event.id), attendee, now
        )

        racer = RegistrationService(StaleEventStore(snapshot), DjangoRegistrationStore(), fanout)
        with pytest.raises(CapacityExceededError):
            racer.register_for_event(str(event.id), other_attendee, now)

        assert seats_taken(event) == 1
        assert models.Registration.objects.filter(event_id=event.id.value).count() == 1

    def test_duplicate_insert_rolls_back_claimed_seat(self, fanout, make_event, attendee, now):
        event = make_event()
        RegistrationService(DjangoEventStore(), DjangoRegistrationStore(), fanout).register_for_event(
            str(event.id), attendee, now
        )

        racer = RegistrationService(DjangoEventStore(), BlindRegistrationStore(), fanout)
        with pytest.raises(AlreadyRegisteredError):
            racer.register_for_event(str(event.id), attendee, now)

        assert seats_taken(event) == 1

    def test_register_exactly_at_start_is_too_late(self, registration_service, make_event, attendee, now):
        event = make_event(start_date=now)

        with pytest.raises(TooLateError):
            registration_service.register_for_event(str(event.id), attendee, now)
        assert seats_taken(event) == 0

    def test_register_one_second_before_start_succeeds(self, registration_service, make_event, attendee, now):
        event = make_event(start_date=now + timedelta(seconds=1))

        registration = registration_service.register_for_event(str(event.id), attendee, now)

        assert registration.status is RegistrationStatus.REGISTERED
        assert seats_taken(event) == 1

    @pytest.mark.parametrize("status", [EventStatus.DRAFT, EventStatus.CANCELLED])
    def test_register_for_unpublished_event(self, registration_service, make_event, attendee, now, status):
        event = make_event(status=status)

        with pytest.raises(EventNotFoundError):
            registration_service.register_for_event(str(event.id), attendee, now)

    def test_register_invalid_event_id(self, registration_service, attendee, now):
        with pytest.raises(InvalidIdError):
            registration_service.register_for_event("not-a-uuid", attendee, now)

    def test_reregister_after_cancel_issues_fresh_registration(self, registration_service, make_event, attendee, now):
        event = make_event()
        first = registration_service.register_for_event(str(event.id), attendee, now)
        registration_service.cancel_registration(str(first.id), attendee, now)

        second = registration_service.register_for_event(str(event.id), attendee, now)

        assert second.id != first.id
        assert second.qr_code != first.qr_code
        assert second.is_active
        assert seats_taken(event) == 1


@pytest.mark.django_db
class TestCancelRegistration:
    def test_cancel_releases_seat(self, registration_service, make_event, attendee, now):
        event = make_event(ticket_limit=1)
        registration = registration_service.register_for_event(str(event.id), attendee, now)

        cancelled = registration_service.cancel_registration(str(registration.id), attendee, now)

        assert cancelled.status is RegistrationStatus.CANCELLED
        assert seats_taken(event) == 0

    def test_cancel_stamps_cancel_time(self, registration_service, make_event, attendee, now):
        event = make_event()
        registration = registration_service.register_for_event(str(event.id), attendee, now)
        later = now + timedelta(hours=1)

        registration_service.cancel_registration(str(registration.id), attendee, later)

        assert models.Registration.objects.get(pk=registration.id.value).updated_at == later

    def test_cancel_twice_is_a_noop(self, registration_service, make_event, attendee, now):
        event = make_event()
        registration = registration_service.register_for_event(str(event.id), attendee, now)
        registration_service.cancel_registration(str(registration.id), attendee, now)

        again = registration_service.cancel_registration(str(registration.id), attendee, now)

        assert again.status is RegistrationStatus.CANCELLED
        assert seats_taken(event) == 0

    def test_cancel_inside_lock_window(self, registration_service, make_event, attendee, now):
        event = make_event(start_date=now + timedelta(hours=23))
        registration = registration_service.register_for_event(str(event.id), attendee, now)

        with pytest.raises(TooLateError):
            registration_service.cancel_registration(str(registration.id), attendee, now)
        assert seats_taken(event) == 1

    def test_cancel_someone_elses_registration(self, registration_service, make_event, attendee, other_attendee, now):
        event = make_event()
        registration = registration_service.register_for_event(str(event.id), attendee, now)

        with pytest.raises(ForbiddenError):
            registration_service.cancel_registration(str(registration.id), other_attendee, now)

    def test_cancel_unknown_registration(self, registration_service, attendee, now):
        with pytest.raises(RegistrationNotFoundError):
            registration_service.cancel_registration("00000000-0000-0000-0000-000000000000", attendee, now)

    def test_cancel_invalid_registration_id(self, registration_service, attendee, now):
        with pytest.raises(InvalidIdError):
            registration_service.cancel_registration("abc", attendee, now)

    def test_seat_counter_never_goes_negative(self, make_event):
        event = make_event()
        DjangoEventStore().release_seat(event.id)
        assert seats_taken(event) == 0


@pytest.mark.django_db
class TestRegistrationReads:
    def test_my_registrations_lists_active_only(self, registration_service, make_event, attendee, now):
        kept = make_event(title="Kept")
        dropped = make_event(title="Dropped")
        registration_service.register_for_event(str(kept.id), attendee, now)
        cancelled = registration_service.register_for_event(str(dropped.id), attendee, now)
        registration_service.cancel_registration(str(cancelled.id), attendee, now)

        result = registration_service.my_registrations(attendee)

        assert [item.event.title for item in result] == ["Kept"]

    def test_event_registrations_requires_ownership(
        self, registration_service, make_event, attendee, organizer, other_organizer, now
    ):
        event = make_event()
        registration_service.register_for_event(str(event.id), attendee, now)

        assert len(registration_service.event_registrations(str(event.id), organizer)) == 1
        with pytest.raises(ForbiddenError):
            registration_service.event_registrations(str(event.id), other_organizer)

    def test_export_includes_cancelled_rows(
        self, registration_service, make_event, attendee, other_attendee, organizer, now
    ):
        event = make_event()
        registration_service.register_for_event(str(event.id), attendee, now)
        cancelled = registration_service.register_for_event(str(event.id), other_attendee, now)
        registration_service.cancel_registration(str(cancelled.id), other_attendee, now)

        rows = list(csv.reader(io.StringIO(registration_service.export_registrations_csv(str(event.id), organizer))))

        assert rows[0] == ["registration_id", "user_id", "status", "registration_date"]
        assert sorted(row[2] for row in rows[1:]) == ["cancelled", "registered"]

    def test_pdf_export_is_owner_only(
        self, registration_service, make_event, attendee, organizer, other_organizer, now
    ):
        event = make_event()
        registration_service.register_for_event(str(event.id), attendee, now)

        report = registration_service.export_registrations_pdf(str(event.id), organizer)

        assert report.startswith(b"%PDF-")
        with pytest.raises(ForbiddenError):
            registration_service.export_registrations_pdf(str(event.id), other_organizer)


@pytest.mark.django_db
class TestVerifyTicket:
    def test_organizer_verifies_ticket(self, registration_service, make_event, attendee, organizer, now):
        event = make_event()
        registration = registration_service.register_for_event(str(event.id), attendee, now)

        result = registration_service.verify_ticket(registration.qr_code, organizer)

        assert result.registration.id == registration.id
        assert result.event.id == event.id

    def test_tampered_ticket_rejected(self, registration_service, make_event, attendee, organizer, now):
        event = make_event()
        registration = registration_service.register_for_event(str(event.id), attendee, now)

        with pytest.raises(ValidationFailedError) as excinfo:
            registration_service.verify_ticket(registration.qr_code[:-2] + "xx", organizer)
        assert excinfo.value.code is ErrorCode.INVALID_TICKET

    def test_cancelled_ticket_rejected(self, registration_service, make_event, attendee, organizer, now):
        event = make_event()
        registration = registration_service.register_for_event(str(event.id), attendee, now)
        registration_service.cancel_registration(str(registration.id), attendee, now)

        with pytest.raises(NotFoundError):
            registration_service.verify_ticket(registration.qr_code, organizer)

    def test_superseded_ticket_rejected(self, registration_service, make_event, attendee, organizer, now):
        event = make_event()
        first = registration_service.register_for_event(str(event.id), attendee, now)
        registration_service.cancel_registration(str(first.id), attendee, now)
        registration_service.register_for_event(str(event.id), attendee, now)

        with pytest.raises(NotFoundError):
            registration_service.verify_ticket(first.qr_code, organizer)

    def test_other_organizer_cannot_verify(self, registration_service, make_event, attendee, other_organizer, now):
        event = make_event()
        registration = registration_service.register_for_event(str(event.id), attendee, now)

        with pytest.raises(ForbiddenError):
            registration_service.verify_ticket(registration.qr_code, other_organizer)
