"""Registration ledger.

Keeps at most one active registration per (event, user) and never lets an
event's active registrations exceed its ticket limit. Seats are taken with a
single conditional UPDATE inside the same transaction that writes the
registration, so concurrent registrations at the capacity boundary cannot
both succeed.
"""

import csv
import io
import logging
from dataclasses import dataclass
from datetime import datetime

from django.db import transaction
from django.utils import timezone
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from events.domain import Event, Notice, Principal, Registration, RegistrationId, Severity
from events.domain import policy
from events.domain.errors import (
    CapacityExceededError,
    ErrorCode,
    EventNotFoundError,
    ForbiddenError,
    InvalidIdError,
    NotFoundError,
    RegistrationNotFoundError,
)
from events.services.event_service import parse_event_id
from events.services.fanout import FanOut
from events.services.tickets import issue_ticket, read_ticket
from events.stores.interfaces import EventStore, RegistrationStore

logger = logging.getLogger(__name__)

PDF_MARGIN = 40
PDF_ENTRY_HEIGHT = 40


def parse_registration_id(value: str) -> RegistrationId:
    try:
        return RegistrationId.from_string(value)
    except (TypeError, ValueError) as exc:
        raise InvalidIdError("registration") from exc


@dataclass(frozen=True)
class RegistrationWithEvent:
    registration: Registration
    event: Event


class RegistrationService:
    """Service for registering to and cancelling from events."""

    def __init__(self, events: EventStore, registrations: RegistrationStore, fanout: FanOut) -> None:
        self._events = events
        self._registrations = registrations
        self._fanout = fanout

    def _owned_event(self, event_id: str, principal: Principal) -> Event:
        event = self._events.get_event(parse_event_id(event_id))
        if event is None:
            raise EventNotFoundError(event_id)
        if not (principal.is_admin or event.is_owned_by(principal)):
            raise ForbiddenError("You do not own this event")
        return event

    def register_for_event(
        self, event_id: str, principal: Principal, now: datetime | None = None
    ) -> Registration:
        """Register the caller for a published event.

        Raises:
            EventNotFoundError: If the event is missing or not published.
            AlreadyRegisteredError: If the caller already holds an active registration.
            CapacityExceededError: If the ticket limit is reached.
            TooLateError: If the event has started.
        """
        now = now or timezone.now()
        eid = parse_event_id(event_id)
        event = self._events.get_event(eid)
        existing = self._registrations.find_for(eid, principal.id) if event is not None else None
        policy.can_register(event, existing, now).enforce()

        with transaction.atomic():
            if existing is not None:
                # A cancelled registration still holds the (event, user) slot.
                self._registrations.delete(existing.id)
            if not self._events.claim_seat(eid, now):
                # The event changed after the first check; report why.
                policy.can_register(self._events.get_event(eid), None, now).enforce()
                raise CapacityExceededError()
            registration = self._registrations.create(eid, principal.id, issue_ticket(eid, principal.id, now), now)

        logger.info("User %s registered for event %s (registration %s)", principal.id, eid, registration.id)
        self._fanout.notify(
            Notice(
                principal.id,
                "Registration Successful",
                f"You have successfully registered for {event.title}.",
                Severity.SUCCESS,
            ),
            Notice(principal.id, "Ticket Generated", f"Your ticket (QR code) for {event.title} is ready."),
        )
        return registration

    def cancel_registration(
        self, registration_id: str, principal: Principal, now: datetime | None = None
    ) -> Registration:
        """Cancel the caller's registration. Cancelling twice is a no-op.

        Raises:
            RegistrationNotFoundError: If the registration does not exist.
            ForbiddenError: If the caller does not own the registration.
            TooLateError: Within 24 hours of the event start.
        """
        now = now or timezone.now()
        rid = parse_registration_id(registration_id)
        registration = self._registrations.get(rid)
        if registration is None:
            raise RegistrationNotFoundError(registration_id)
        if not registration.is_active:
            return registration

        event = self._events.get_event(registration.event_id)
        if event is None:
            raise EventNotFoundError(str(registration.event_id))
        policy.can_cancel_registration(registration, event, principal, now).enforce()

        with transaction.atomic():
            cancelled = self._registrations.mark_cancelled(rid, now)
            if cancelled:
                self._events.release_seat(event.id)

        if cancelled:
            logger.info("User %s cancelled registration %s", principal.id, rid)
            self._fanout.notify(
                Notice(
                    principal.id,
                    "Registration Cancelled",
                    f"You have cancelled your registration for {event.title}.",
                    Severity.WARNING,
                )
            )
        return self._registrations.get(rid)

    def my_registrations(self, principal: Principal) -> list[RegistrationWithEvent]:
        registrations = self._registrations.list_for_user(principal.id)
        events = self._events.get_many([registration.event_id for registration in registrations])
        return [
            RegistrationWithEvent(registration, events[registration.event_id])
            for registration in registrations
            if registration.event_id in events
        ]

    def event_registrations(self, event_id: str, principal: Principal) -> list[Registration]:
        event = self._owned_event(event_id, principal)
        return self._registrations.list_for_event(event.id)

    def export_registrations_csv(self, event_id: str, principal: Principal) -> str:
        event = self._owned_event(event_id, principal)
        buffer = io.StringIO()
        writer = csv.writer(buffer)
        writer.writerow(["registration_id", "user_id", "status", "registration_date"])
        for registration in self._registrations.list_for_event(event.id, active_only=False):
            writer.writerow(
                [
                    registration.id,
                    registration.user_id,
                    registration.status.value,
                    registration.created_at.isoformat(),
                ]
            )
        return buffer.getvalue()

    def export_registrations_pdf(self, event_id: str, principal: Principal) -> bytes:
        """Printable registration report for the event owner, all statuses included."""
        event = self._owned_event(event_id, principal)
        registrations = self._registrations.list_for_event(event.id, active_only=False)

        buffer = io.BytesIO()
        pdf = canvas.Canvas(buffer, pagesize=A4)
        pdf.setTitle(f"Registrations - {event.title}")
        width, height = A4
        y = height - PDF_MARGIN
        pdf.setFont("Helvetica-Bold", 18)
        pdf.drawCentredString(width / 2, y, "Event Registration Report")
        y -= 30
        pdf.setFont("Helvetica", 13)
        pdf.drawString(PDF_MARGIN, y, f"Event: {event.title}")
        pdf.drawString(PDF_MARGIN, y - 18, f"Registrations: {len(registrations)}")
        y -= 48

        pdf.setFont("Helvetica", 10)
        for index, registration in enumerate(registrations, start=1):
            if y < PDF_MARGIN + PDF_ENTRY_HEIGHT:
                pdf.showPage()
                pdf.setFont("Helvetica", 10)
                y = height - PDF_MARGIN
            pdf.drawString(PDF_MARGIN, y, f"{index}. {registration.user_id}")
            pdf.drawString(PDF_MARGIN + 12, y - 12, f"Status: {registration.status.value}")
            pdf.drawString(PDF_MARGIN + 12, y - 24, f"Date: {registration.created_at.isoformat()}")
            y -= PDF_ENTRY_HEIGHT
        pdf.save()
        return buffer.getvalue()

    def verify_ticket(self, token: str, principal: Principal) -> RegistrationWithEvent:
        """Resolve a scanned ticket to its active registration.

        Only the event's organizer or an admin may verify tickets.
        """
        claims = read_ticket(token)
        event = self._owned_event(str(claims.event_id), principal)
        registration = self._registrations.find_for(claims.event_id, claims.user_id)
        if registration is None or not registration.is_active or registration.qr_code != token:
            raise NotFoundError("Ticket is not valid for an active registration", code=ErrorCode.REGISTRATION_NOT_FOUND)
        return RegistrationWithEvent(registration, event)
