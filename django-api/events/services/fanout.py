"""Best-effort notification and audit fan-out.

Deliveries are scheduled with ``transaction.on_commit`` so they only run once
the state change that triggered them is durable. A failing delivery is logged
and dropped; it never reaches the caller and never rolls anything back.
"""

import logging
from collections.abc import Callable
from functools import partial

from django.db import transaction

from events.domain import AuditEntry, Notice
from events.stores.interfaces import AuditStore, NotificationStore

logger = logging.getLogger(__name__)


class FanOut:
    def __init__(
        self,
        notifications: NotificationStore,
        audit: AuditStore,
        schedule: Callable[[Callable[[], None]], None] = transaction.on_commit,
    ) -> None:
        self._notifications = notifications
        self._audit = audit
        self._schedule = schedule

    def notify(self, *notices: Notice) -> None:
        for notice in notices:
            self._schedule(partial(self._deliver, "notification", self._notifications.add, notice))

    def audit(self, entry: AuditEntry) -> None:
        self._schedule(partial(self._deliver, "audit entry", self._audit.add, entry))

    @staticmethod
    def _deliver(kind: str, send: Callable[[object], object], payload: object) -> None:
        try:
            send(payload)
        except Exception:
            logger.exception("Failed to deliver %s: %r", kind, payload)
