"""SQLAlchemy repository implementations."""

from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from courier_engine.adapters.persistence.models import (
    AssignmentAuditModel,
    CarrierModel,
    CourierRuleModel,
    OrderModel,
)
from courier_engine.application.ports.audit_repo import AuditRepository
from courier_engine.application.ports.carrier_repo import CarrierRepository
from courier_engine.application.ports.order_repo import OrderRepository
from courier_engine.application.ports.rule_repo import RuleRepository
from courier_engine.domain.entities.audit_entry import AssignmentAuditEntry
from courier_engine.domain.entities.carrier import Carrier
from courier_engine.domain.entities.courier_rule import CourierRule
from courier_engine.domain.entities.order_courier import OrderCourierState
from courier_engine.domain.entities.snapshot import CourierSnapshot
from courier_engine.domain.errors import UnknownOrderStatusError
from courier_engine.domain.value_objects.bounds import Bounds
from courier_engine.domain.value_objects.enums import (
    OrderStatus,
    PaymentMethod,
    RulePaymentMethod,
)

# ─── Mappers ─────────────────────────────────────────────────────────


def _int_id(value: str) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _carrier_to_domain(m: CarrierModel) -> Carrier:
    return Carrier(
        id=str(m.id),
        tenant_id=m.tenant_id,
        name=m.name,
        code=m.code,
        supports_cod=m.supports_cod,
        max_weight_kg=m.max_weight_kg or 0.0,
        serviceable_zone_ids=frozenset(m.serviceable_zone_ids or ()),
        serviceable_pincodes=frozenset(m.serviceable_pincodes or ()),
        priority=m.priority,
        is_active=m.is_active,
    )


def _rule_to_domain(m: CourierRuleModel) -> CourierRule:
    return CourierRule(
        id=str(m.id),
        tenant_id=m.tenant_id,
        zone_id=m.zone_id,
        payment_method=RulePaymentMethod(m.payment_method),
        carrier_id=str(m.carrier_id),
        weight=Bounds.optional(m.min_weight_kg, m.max_weight_kg),
        order_value=Bounds.optional(m.min_order_value, m.max_order_value),
        priority=m.priority,
        is_active=m.is_active,
        created_seq=m.id,
    )


def _status_to_domain(order_id: str, raw: str) -> OrderStatus:
    try:
        return OrderStatus((raw or "").strip().lower())
    except ValueError:
        raise UnknownOrderStatusError(order_id, raw) from None


def _order_to_domain(m: OrderModel) -> OrderCourierState:
    return OrderCourierState(
        order_id=m.id,
        tenant_id=m.tenant_id,
        zone_id=m.zone_id,
        payment_method=PaymentMethod.normalize(m.payment_method),
        weight_kg=m.weight_kg,
        order_value=m.order_value,
        status=_status_to_domain(m.id, m.status),
        shipping_pincode=m.shipping_pincode,
        snapshot=CourierSnapshot.from_dict(m.courier_snapshot) if m.courier_snapshot else None,
        version=m.version,
        override_count=m.override_count,
    )


# ─── Repositories ────────────────────────────────────────────────────


class SqlCarrierRepository(CarrierRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def get_by_id(self, tenant_id: str, carrier_id: str) -> Carrier | None:
        pk = _int_id(carrier_id)
        if pk is None:
            return None
        m = await self._s.get(CarrierModel, pk)
        if m is None or m.tenant_id != tenant_id:
            return None
        return _carrier_to_domain(m)

    async def get_by_tenant(self, tenant_id: str) -> list[Carrier]:
        result = await self._s.execute(
            select(CarrierModel)
            .where(CarrierModel.tenant_id == tenant_id)
            .order_by(CarrierModel.id)
        )
        return [_carrier_to_domain(m) for m in result.scalars()]


class SqlRuleRepository(RuleRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def get_active(self, tenant_id: str, zone_id: str) -> list[CourierRule]:
        result = await self._s.execute(
            select(CourierRuleModel)
            .where(
                CourierRuleModel.tenant_id == tenant_id,
                CourierRuleModel.zone_id == zone_id,
                CourierRuleModel.is_active.is_(True),
            )
            .order_by(CourierRuleModel.id)
        )
        return [_rule_to_domain(m) for m in result.scalars()]


class SqlOrderRepository(OrderRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def get_courier_state(self, tenant_id: str, order_id: str) -> OrderCourierState | None:
        result = await self._s.execute(
            select(OrderModel).where(
                OrderModel.id == order_id,
                OrderModel.tenant_id == tenant_id,
            )
        )
        m = result.scalar_one_or_none()
        return _order_to_domain(m) if m else None

    async def compare_and_swap_snapshot(
        self,
        order_id: str,
        expected_status: OrderStatus,
        expected_version: int,
        snapshot: CourierSnapshot,
    ) -> bool:
        # Single conditional UPDATE: the status/version guard and the write are atomic
        result = await self._s.execute(
            update(OrderModel)
            .where(
                OrderModel.id == order_id,
                OrderModel.status == expected_status.value,
                OrderModel.version == expected_version,
            )
            .values(
                courier_snapshot=snapshot.to_dict(),
                override_count=OrderModel.override_count + 1,
                version=OrderModel.version + 1,
            )
        )
        await self._s.flush()
        return result.rowcount == 1

    async def attach_initial_snapshot(
        self,
        order_id: str,
        expected_status: OrderStatus,
        expected_version: int,
        snapshot: CourierSnapshot,
    ) -> bool:
        result = await self._s.execute(
            update(OrderModel)
            .where(
                OrderModel.id == order_id,
                OrderModel.status == expected_status.value,
                OrderModel.version == expected_version,
                OrderModel.courier_snapshot.is_(None),
            )
            .values(
                courier_snapshot=snapshot.to_dict(),
                version=OrderModel.version + 1,
            )
        )
        await self._s.flush()
        return result.rowcount == 1


class SqlAuditRepository(AuditRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def append(self, entry: AssignmentAuditEntry) -> None:
        # Nested transaction: a failed audit insert must not poison the order write
        async with self._s.begin_nested():
            self._s.add(
                AssignmentAuditModel(
                    order_id=entry.order_id,
                    action=entry.action.value,
                    previous_snapshot=entry.previous.to_dict() if entry.previous else None,
                    new_snapshot=entry.new.to_dict(),
                    actor=entry.actor,
                    override_reason=entry.override_reason,
                    recorded_at=entry.timestamp,
                )
            )
