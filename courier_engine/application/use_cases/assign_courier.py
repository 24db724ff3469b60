"""AssignCourierUseCase — automatic courier assignment at order creation."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from courier_engine.application.ports.carrier_repo import CarrierRepository
from courier_engine.application.ports.order_repo import OrderRepository
from courier_engine.application.ports.rule_repo import RuleRepository
from courier_engine.application.services.audit_recorder import AuditRecorder
from courier_engine.domain.entities.snapshot import CourierSnapshot
from courier_engine.domain.errors import ConcurrencyConflictError, NoCourierAvailableError
from courier_engine.domain.policies.lifecycle import ensure_assignable
from courier_engine.domain.policies.rule_matching import resolve_carrier
from courier_engine.domain.policies.snapshot_builder import build_snapshot
from courier_engine.domain.value_objects.enums import PaymentMethod
from courier_engine.domain.value_objects.order_facts import OrderFacts

logger = logging.getLogger(__name__)

SYSTEM_ACTOR = "system"


@dataclass(frozen=True)
class AssignmentRequest:
    """Order facts as handed over by the order-creation pipeline."""

    order_id: str
    tenant_id: str
    zone_id: str
    order_weight_kg: float
    order_value: float
    payment_method: str  # raw checkout method, normalised to prepaid / cod
    shipping_pincode: str | None = None

    def to_facts(self) -> OrderFacts:
        return OrderFacts(
            tenant_id=self.tenant_id,
            zone_id=self.zone_id,
            weight_kg=self.order_weight_kg,
            order_value=self.order_value,
            payment_method=PaymentMethod.normalize(self.payment_method),
            pincode=self.shipping_pincode or None,
        )


@dataclass
class AssignmentResult:
    """Summary of one automatic assignment."""

    order_id: str
    snapshot: CourierSnapshot
    fallback_used: bool
    audit_recorded: bool
    trace: tuple[str, ...] = ()
    snapshot_persisted: bool = False


class AssignCourierUseCase:
    """Unassigned → Assigned: resolve, freeze and audit the courier decision."""

    def __init__(
        self,
        carrier_repo: CarrierRepository,
        rule_repo: RuleRepository,
        order_repo: OrderRepository,
        audit_recorder: AuditRecorder,
    ):
        self._carriers = carrier_repo
        self._rules = rule_repo
        self._orders = order_repo
        self._audit = audit_recorder

    async def execute(self, request: AssignmentRequest) -> AssignmentResult:
        """Assign a courier to a freshly created order.

        Pipeline:
        1. Normalise the order facts (payment method → prepaid / cod)
        2. Refuse orders that already carry a courier or are past assignment
        3. Load active rules for (tenant, zone) and the tenant's carriers
        4. Resolve the carrier (rule walk, then default carrier)
        5. Freeze the decision into a CourierSnapshot
        6. Store it on the order when the order row already exists
        7. Record the audit entry (best-effort)

        When the order row does not exist yet, the caller persists the
        returned snapshot as part of creating it.

        Raises:
            NoCourierAvailableError: nothing can ship this order; the
                order-creation pipeline must abort.
            CourierAlreadyAssignedError: the order already has a snapshot;
                later changes go through the override path.
            OverrideNotAllowedError: the order is locked or cancelled.
            ConcurrencyConflictError: another assignment or a status change
                landed between the read and the write.
        """
        order = request.to_facts()
        existing = await self._orders.get_courier_state(order.tenant_id, request.order_id)
        if existing is not None:
            ensure_assignable(existing)

        rules = await self._rules.get_active(order.tenant_id, order.zone_id)
        carriers = await self._carriers.get_by_tenant(order.tenant_id)

        try:
            decision = resolve_carrier(rules, {c.id: c for c in carriers}, order)
        except NoCourierAvailableError:
            logger.error(
                "Order %s: no courier available (tenant=%s, zone=%s, payment=%s, weight=%s)",
                request.order_id, order.tenant_id, order.zone_id,
                order.payment_method.value, order.weight_kg,
            )
            raise

        snapshot = build_snapshot(decision.carrier, decision.rule)
        logger.info(
            "Order %s → Courier %s (rule: %s, reason: %s)",
            request.order_id, snapshot.carrier_code, snapshot.rule_id, snapshot.reason,
        )

        if existing is not None:
            stored = await self._orders.attach_initial_snapshot(
                request.order_id, existing.status, existing.version, snapshot
            )
            if not stored:
                logger.warning(
                    "Order %s: concurrent courier assignment, nothing written", request.order_id
                )
                raise ConcurrencyConflictError(
                    f"Order {request.order_id} changed while assigning its courier"
                )

        entry = await self._audit.record(
            order_id=request.order_id,
            previous=None,
            new=snapshot,
            actor=SYSTEM_ACTOR,
        )

        return AssignmentResult(
            order_id=request.order_id,
            snapshot=snapshot,
            fallback_used=decision.fallback_used,
            audit_recorded=entry is not None,
            trace=decision.trace,
            snapshot_persisted=existing is not None,
        )
