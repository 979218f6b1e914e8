"""Signed ticket tokens.

A ticket is the string encoded in a registration's QR code. It is signed
with the project SECRET_KEY so a verifier can detect forged or edited
tickets without trusting the client. The QR image itself is rendered with
segno.
"""

import secrets
from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import UUID

import segno
from django.core import signing

from events.domain import EventId
from events.domain.errors import ErrorCode, ValidationFailedError

TICKET_SALT = "events.registration.ticket"
QR_SCALE = 4


@dataclass(frozen=True)
class TicketClaims:
    event_id: EventId
    user_id: UUID
    issued_at: datetime
    nonce: str


def issue_ticket(event_id: EventId, user_id: UUID, now: datetime) -> str:
    payload = {
        "e": str(event_id.value),
        "u": str(user_id),
        "t": int(now.timestamp()),
        "n": secrets.token_urlsafe(12),
    }
    return signing.dumps(payload, salt=TICKET_SALT, compress=True)


def read_ticket(token: str) -> TicketClaims:
    """Verify a ticket token and return its claims.

    Raises:
        ValidationFailedError: If the signature is invalid or the payload is malformed.
    """
    try:
        payload = signing.loads(token, salt=TICKET_SALT)
        return TicketClaims(
            event_id=EventId(UUID(payload["e"])),
            user_id=UUID(payload["u"]),
            issued_at=datetime.fromtimestamp(payload["t"], tz=timezone.utc),
            nonce=payload["n"],
        )
    except (signing.BadSignature, KeyError, TypeError, ValueError) as exc:
        raise ValidationFailedError("Invalid ticket", code=ErrorCode.INVALID_TICKET) from exc


def ticket_qr_data_uri(token: str, scale: int = QR_SCALE) -> str:
    """Render a ticket token as a scannable PNG QR code data URI."""
    return segno.make_qr(token, error="m").png_data_uri(scale=scale)
