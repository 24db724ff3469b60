"""AssignmentAuditEntry — append-only record of a courier decision."""

from dataclasses import dataclass
from datetime import datetime

from courier_engine.domain.entities.snapshot import CourierSnapshot
from courier_engine.domain.value_objects.enums import AuditAction


@dataclass(frozen=True)
class AssignmentAuditEntry:
    order_id: str
    previous: CourierSnapshot | None
    new: CourierSnapshot
    actor: str
    timestamp: datetime
    override_reason: str | None = None

    @property
    def action(self) -> AuditAction:
        return AuditAction.ASSIGNED if self.previous is None else AuditAction.REASSIGNED

    def describe(self) -> str:
        if self.previous is None:
            return f"Courier assigned: {self.new.carrier_name} ({self.new.carrier_code})"
        return (
            f"Courier reassigned: {self.previous.carrier_code} → "
            f"{self.new.carrier_name} ({self.new.carrier_code})"
        )
