"""CourierSnapshot — the frozen record of which carrier serves an order."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class CourierSnapshot:
    carrier_id: str
    carrier_name: str
    carrier_code: str
    rule_id: str | None  # None = default fallback or manual assignment
    assigned_at: datetime
    reason: str

    @property
    def is_rule_based(self) -> bool:
        return self.rule_id is not None

    def to_dict(self) -> dict:
        return {
            "carrier_id": self.carrier_id,
            "carrier_name": self.carrier_name,
            "carrier_code": self.carrier_code,
            "rule_id": self.rule_id,
            "assigned_at": self.assigned_at.isoformat(),
            "reason": self.reason,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CourierSnapshot":
        return cls(
            carrier_id=data["carrier_id"],
            carrier_name=data["carrier_name"],
            carrier_code=data["carrier_code"],
            rule_id=data.get("rule_id"),
            assigned_at=datetime.fromisoformat(data["assigned_at"]),
            reason=data["reason"],
        )
