"""AuditRecorder — best-effort, append-only audit of courier decisions."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from courier_engine.application.ports.audit_repo import AuditRepository
from courier_engine.config import settings
from courier_engine.domain.entities.audit_entry import AssignmentAuditEntry
from courier_engine.domain.entities.snapshot import CourierSnapshot

logger = logging.getLogger(__name__)


class AuditRecorder:
    """Writes one AssignmentAuditEntry per assignment or override.

    A failed write never rolls back the assignment: it is retried and then
    reported as a degraded-mode warning.
    """

    def __init__(self, audit_repo: AuditRepository, attempts: int | None = None):
        self._audit = audit_repo
        self._attempts = max(1, attempts if attempts is not None else settings.audit_retry_attempts)

    async def record(
        self,
        order_id: str,
        previous: CourierSnapshot | None,
        new: CourierSnapshot,
        actor: str,
        reason: str | None = None,
    ) -> AssignmentAuditEntry | None:
        """Append the entry; returns None if every attempt failed."""
        entry = AssignmentAuditEntry(
            order_id=order_id,
            previous=previous,
            new=new,
            actor=actor,
            timestamp=datetime.now(timezone.utc),
            override_reason=reason,
        )

        for attempt in range(1, self._attempts + 1):
            try:
                await self._audit.append(entry)
                logger.debug("Order %s: audit %s written", order_id, entry.action.value)
                return entry
            except Exception as e:
                logger.info(
                    "Order %s: audit write attempt %d/%d failed: %s",
                    order_id, attempt, self._attempts, e,
                )

        logger.warning(
            "DEGRADED: audit trail missing for order %s (%s by %s). "
            "Assignment kept, audit entry must be replayed",
            order_id, entry.describe(), actor,
        )
        return None
