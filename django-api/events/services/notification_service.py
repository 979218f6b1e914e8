from uuid import UUID

from events.domain import AuditEntry, Notification, Principal
from events.domain.errors import ForbiddenError, InvalidIdError, NotificationNotFoundError
from events.stores.interfaces import AuditStore, NotificationStore


def _parse_notification_id(value: str) -> UUID:
    try:
        return UUID(str(value))
    except ValueError as exc:
        raise InvalidIdError("notification") from exc


class NotificationService:
    """In-app inbox for the calling principal, plus the admin audit trail."""

    def __init__(self, notifications: NotificationStore, audit: AuditStore) -> None:
        self._notifications = notifications
        self._audit = audit

    def inbox(self, principal: Principal) -> list[Notification]:
        return self._notifications.list_for(principal.id)

    def mark_read(self, notification_id: str, principal: Principal) -> Notification:
        notification = self._notifications.mark_read(_parse_notification_id(notification_id), principal.id)
        if notification is None:
            raise NotificationNotFoundError()
        return notification

    def mark_all_read(self, principal: Principal) -> int:
        return self._notifications.mark_all_read(principal.id)

    def delete(self, notification_id: str, principal: Principal) -> None:
        if not self._notifications.delete(_parse_notification_id(notification_id), principal.id):
            raise NotificationNotFoundError()

    def audit_log(self, principal: Principal, limit: int = 100) -> list[AuditEntry]:
        if not principal.is_admin:
            raise ForbiddenError("Admin access required")
        return self._audit.recent(max(limit, 1))
