"""Organizer profiles and their admin moderation.

An organizer applies with a business profile and starts out pending. Admins
approve, reject, block and unblock them; only approved organizers may create
events. Repeating a transition that is already in effect is a conflict.
"""

import logging
from datetime import datetime
from uuid import UUID

from django.utils import timezone

from events.domain import AuditEntry, Notice, Organizer, OrganizerStatus, Principal, Severity
from events.domain.errors import (
    ConflictError,
    ForbiddenError,
    InvalidIdError,
    OrganizerNotFoundError,
    ValidationFailedError,
)
from events.services.fanout import FanOut
from events.stores.interfaces import OrganizerStore

logger = logging.getLogger(__name__)


def _parse_organizer_id(value: str) -> UUID:
    try:
        return UUID(str(value))
    except ValueError as exc:
        raise InvalidIdError("organizer") from exc


def _require_admin(principal: Principal) -> None:
    if not principal.is_admin:
        raise ForbiddenError("Admin access required")


class OrganizerService:
    """Service for organizer applications and moderation."""

    def __init__(self, organizers: OrganizerStore, fanout: FanOut) -> None:
        self._organizers = organizers
        self._fanout = fanout

    def _get(self, organizer_id: str) -> Organizer:
        organizer = self._organizers.get(_parse_organizer_id(organizer_id))
        if organizer is None:
            raise OrganizerNotFoundError()
        return organizer

    def apply(
        self,
        principal: Principal,
        business_name: str,
        business_email: str = "",
        now: datetime | None = None,
    ) -> Organizer:
        """Submit the caller's organizer profile for review.

        Raises:
            ForbiddenError: If the caller is not an organizer.
            ValidationFailedError: If the business name is blank.
            ConflictError: If the caller already has a profile.
        """
        if not principal.is_organizer:
            raise ForbiddenError("Organizer authentication required")
        business_name = (business_name or "").strip()
        if not business_name:
            raise ValidationFailedError("business_name is required")
        organizer = self._organizers.create(principal.id, business_name, business_email, now or timezone.now())
        logger.info("Organizer %s applied as '%s'", organizer.id, organizer.business_name)
        return organizer

    def my_profile(self, principal: Principal) -> Organizer:
        organizer = self._organizers.get(principal.id)
        if organizer is None:
            raise OrganizerNotFoundError()
        return organizer

    def get_organizer(self, organizer_id: str, principal: Principal) -> Organizer:
        _require_admin(principal)
        return self._get(organizer_id)

    def list_organizers(self, principal: Principal, status: str | None = None) -> list[Organizer]:
        _require_admin(principal)
        if not status:
            return self._organizers.list_organizers()
        try:
            wanted = OrganizerStatus(status)
        except ValueError as exc:
            raise ValidationFailedError(f"Invalid status '{status}'") from exc
        return self._organizers.list_organizers(wanted)

    # Moderation

    def approve(self, organizer_id: str, principal: Principal, now: datetime | None = None) -> Organizer:
        _require_admin(principal)
        organizer = self._get(organizer_id)
        if organizer.status is OrganizerStatus.APPROVED:
            raise ConflictError("Organizer is already approved")
        organizer = self._organizers.set_status(organizer.id, OrganizerStatus.APPROVED, "", now or timezone.now())
        self._announce(
            organizer,
            principal,
            "organizer_approved",
            Notice(
                organizer.id,
                "Organizer Approved",
                "Your organizer account has been approved. You can now create events.",
                Severity.SUCCESS,
            ),
            Notice(
                principal.id,
                "Organizer Approved",
                f"You approved organizer '{organizer.business_name}'.",
                Severity.SUCCESS,
            ),
        )
        return organizer

    def reject(
        self, organizer_id: str, principal: Principal, reason: str, now: datetime | None = None
    ) -> Organizer:
        _require_admin(principal)
        reason = (reason or "").strip()
        if not reason:
            raise ValidationFailedError("Rejection reason is required")
        organizer = self._get(organizer_id)
        if organizer.status is OrganizerStatus.REJECTED:
            raise ConflictError("Organizer is already rejected")
        organizer = self._organizers.set_status(organizer.id, OrganizerStatus.REJECTED, reason, now or timezone.now())
        self._announce(
            organizer,
            principal,
            "organizer_rejected",
            Notice(
                organizer.id,
                "Organizer Application Rejected",
                f"Your organizer application was rejected. Reason: {reason}",
                Severity.ERROR,
            ),
            Notice(
                principal.id,
                "Organizer Rejected",
                f"You rejected organizer '{organizer.business_name}'. Reason: {reason}",
                Severity.ERROR,
            ),
            reason=reason,
        )
        return organizer

    def block(
        self, organizer_id: str, principal: Principal, reason: str = "", now: datetime | None = None
    ) -> Organizer:
        _require_admin(principal)
        organizer = self._get(organizer_id)
        if organizer.status is OrganizerStatus.BLOCKED:
            raise ConflictError("Organizer is already blocked")
        organizer = self._organizers.set_status(organizer.id, OrganizerStatus.BLOCKED, reason, now or timezone.now())
        suffix = f" Reason: {reason}" if reason else ""
        self._announce(
            organizer,
            principal,
            "organizer_blocked",
            Notice(organizer.id, "Organizer Blocked", f"Your organizer account was blocked.{suffix}", Severity.WARNING),
            Notice(
                principal.id,
                "Organizer Blocked",
                f"Organizer '{organizer.business_name}' was blocked.",
                Severity.WARNING,
            ),
            reason=reason,
        )
        return organizer

    def unblock(self, organizer_id: str, principal: Principal, now: datetime | None = None) -> Organizer:
        _require_admin(principal)
        organizer = self._get(organizer_id)
        if organizer.status is not OrganizerStatus.BLOCKED:
            raise ConflictError("Organizer is not blocked")
        organizer = self._organizers.set_status(organizer.id, OrganizerStatus.APPROVED, "", now or timezone.now())
        self._announce(
            organizer,
            principal,
            "organizer_unblocked",
            Notice(organizer.id, "Organizer Unblocked", "Your organizer account was unblocked.", Severity.SUCCESS),
            Notice(
                principal.id,
                "Organizer Unblocked",
                f"Organizer '{organizer.business_name}' was unblocked.",
                Severity.SUCCESS,
            ),
        )
        return organizer

    def _announce(
        self,
        organizer: Organizer,
        admin: Principal,
        action: str,
        *notices: Notice,
        reason: str = "",
    ) -> None:
        logger.info("Organizer %s moved to %s by admin %s", organizer.id, organizer.status.value, admin.id)
        self._fanout.notify(*notices)
        metadata = {"business_name": organizer.business_name}
        if reason:
            metadata["reason"] = reason
        self._fanout.audit(
            AuditEntry(
                actor_id=admin.id,
                action=action,
                module="organizers",
                metadata=metadata,
                organizer_id=organizer.id,
            )
        )
