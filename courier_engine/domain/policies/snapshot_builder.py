"""SnapshotBuilder — freeze a courier decision into an immutable record."""

from __future__ import annotations

from datetime import datetime, timezone

from courier_engine.domain.entities.carrier import Carrier
from courier_engine.domain.entities.courier_rule import CourierRule
from courier_engine.domain.entities.snapshot import CourierSnapshot

DEFAULT_COURIER_REASON = "default courier, no matching rule"
MANUAL_ASSIGNMENT_REASON = "manually assigned"


def describe_rule(rule: CourierRule, carrier: Carrier) -> str:
    """Justification naming the rule's priority, its bounds and the carrier priority."""
    parts = [f"Rule priority {rule.priority}"]
    if rule.weight is not None:
        parts.append(f"weight {rule.weight.describe('kg')}")
    if rule.order_value is not None:
        parts.append(f"value {rule.order_value.describe(prefix='₹')}")
    parts.append(f"payment {rule.payment_method.value}")
    parts.append(f"courier priority {carrier.priority}")
    return ", ".join(parts)


def build_snapshot(
    carrier: Carrier,
    rule: CourierRule | None,
    reason_detail: str | None = None,
    now: datetime | None = None,
) -> CourierSnapshot:
    """Copy the carrier identity verbatim and stamp the decision.

    The carrier name and code are denormalised on purpose: later edits to
    the Carrier record must not alter history.

    Args:
        carrier: the chosen carrier.
        rule: the matched rule, or None for default / manual assignment.
        reason_detail: extra justification appended to the reason.
        now: assignment timestamp (UTC now when omitted).
    """
    if rule is not None:
        reason = describe_rule(rule, carrier)
    else:
        reason = reason_detail or DEFAULT_COURIER_REASON
        reason_detail = None

    if reason_detail:
        reason = f"{reason}; {reason_detail}"

    return CourierSnapshot(
        carrier_id=carrier.id,
        carrier_name=carrier.name,
        carrier_code=carrier.code,
        rule_id=rule.id if rule is not None else None,
        assigned_at=now or datetime.now(timezone.utc),
        reason=reason,
    )


def build_manual_snapshot(
    carrier: Carrier,
    override_reason: str | None,
    now: datetime | None = None,
) -> CourierSnapshot:
    reason = MANUAL_ASSIGNMENT_REASON
    if override_reason and override_reason.strip():
        reason = f"{MANUAL_ASSIGNMENT_REASON}: {override_reason.strip()}"
    return build_snapshot(carrier, None, reason_detail=reason, now=now)
