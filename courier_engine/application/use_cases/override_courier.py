"""OverrideCourierUseCase — guarded manual courier reassignment."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from courier_engine.application.ports.carrier_repo import CarrierRepository
from courier_engine.application.ports.order_repo import OrderRepository
from courier_engine.application.services.audit_recorder import AuditRecorder
from courier_engine.domain.entities.snapshot import CourierSnapshot
from courier_engine.domain.errors import (
    CarrierNotFoundError,
    ConcurrencyConflictError,
    OrderNotFoundError,
)
from courier_engine.domain.policies.eligibility import ensure_eligible
from courier_engine.domain.policies.lifecycle import ensure_override_allowed
from courier_engine.domain.policies.snapshot_builder import build_manual_snapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OverrideRequest:
    order_id: str
    tenant_id: str
    new_carrier_id: str
    actor_id: str
    reason: str | None = None


@dataclass
class OverrideResult:
    order_id: str
    previous: CourierSnapshot | None
    snapshot: CourierSnapshot
    audit_recorded: bool


class OverrideCourierUseCase:
    """Assigned / Reassigned → Reassigned, only before the courier is locked."""

    def __init__(
        self,
        order_repo: OrderRepository,
        carrier_repo: CarrierRepository,
        audit_recorder: AuditRecorder,
    ):
        self._orders = order_repo
        self._carriers = carrier_repo
        self._audit = audit_recorder

    async def execute(self, request: OverrideRequest) -> OverrideResult:
        """Replace the order's courier snapshot with a manually chosen carrier.

        No rule matching happens here: the carrier only has to pass the
        eligibility check. The write is a compare-and-swap on the status and
        version that were read, so a concurrent "shipped" transition wins.

        Raises:
            OrderNotFoundError / CarrierNotFoundError: unknown ids.
            OverrideNotAllowedError: courier already locked or never assigned.
            CourierIneligibleError: the carrier cannot serve this order.
            ConcurrencyConflictError: the order changed mid-override; retry.
        """
        order = await self._orders.get_courier_state(request.tenant_id, request.order_id)
        if order is None:
            raise OrderNotFoundError(f"Order {request.order_id} not found")

        ensure_override_allowed(order)

        carrier = await self._carriers.get_by_id(request.tenant_id, request.new_carrier_id)
        if carrier is None:
            raise CarrierNotFoundError(f"Courier {request.new_carrier_id} not found")

        ensure_eligible(carrier, order.to_facts())

        previous = order.snapshot
        snapshot = build_manual_snapshot(carrier, request.reason)

        swapped = await self._orders.compare_and_swap_snapshot(
            order_id=order.order_id,
            expected_status=order.status,
            expected_version=order.version,
            snapshot=snapshot,
        )
        if not swapped:
            logger.warning(
                "Order %s: courier override by %s lost a race (expected status=%s, version=%d)",
                order.order_id, request.actor_id, order.status.value, order.version,
            )
            raise ConcurrencyConflictError(
                f"Order {order.order_id} changed during courier override, please retry"
            )

        logger.info(
            "Order %s: courier %s → %s by %s",
            order.order_id, previous.carrier_code if previous else None,
            snapshot.carrier_code, request.actor_id,
        )

        entry = await self._audit.record(
            order_id=order.order_id,
            previous=previous,
            new=snapshot,
            actor=request.actor_id,
            reason=request.reason,
        )

        return OverrideResult(
            order_id=order.order_id,
            previous=previous,
            snapshot=snapshot,
            audit_recorded=entry is not None,
        )
