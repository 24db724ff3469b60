"""Tests for AssignCourierUseCase with in-memory fakes."""

from __future__ import annotations

import pytest

from courier_engine.application.services.audit_recorder import AuditRecorder
from courier_engine.application.use_cases.assign_courier import (
    AssignCourierUseCase,
    AssignmentRequest,
)
from courier_engine.domain.entities.courier_rule import CourierRule
from courier_engine.domain.entities.order_courier import OrderCourierState
from courier_engine.domain.errors import (
    ConcurrencyConflictError,
    CourierAlreadyAssignedError,
    NoCourierAvailableError,
    OverrideNotAllowedError,
)
from courier_engine.domain.policies.snapshot_builder import build_manual_snapshot
from courier_engine.domain.value_objects.bounds import Bounds
from courier_engine.domain.value_objects.enums import (
    AuditAction,
    OrderStatus,
    PaymentMethod,
    RulePaymentMethod,
)

from fakes import FakeAuditRepo, FakeCarrierRepo, FakeOrderRepo, FakeRuleRepo

TENANT = "store-1"
LOCAL = "zone-local"
REMOTE_B = "zone-remote-b"


def _request(
    order_id="o-1", zone=LOCAL, weight=3.0, value=2500.0, payment="cod", pincode=None
) -> AssignmentRequest:
    return AssignmentRequest(
        order_id=order_id, tenant_id=TENANT, zone_id=zone, order_weight_kg=weight,
        order_value=value, payment_method=payment, shipping_pincode=pincode,
    )


def _cod_rule(rule_id: str, carrier_id: str, priority: int) -> CourierRule:
    return CourierRule(
        id=rule_id, tenant_id=TENANT, zone_id=LOCAL, payment_method=RulePaymentMethod.COD,
        carrier_id=carrier_id, weight=Bounds(0, 30), priority=priority,
    )


def _stored_order(order_id="o-1", status=OrderStatus.CONFIRMED) -> OrderCourierState:
    return OrderCourierState(
        order_id=order_id, tenant_id=TENANT, zone_id=LOCAL, payment_method=PaymentMethod.COD,
        weight_kg=3, order_value=2500, status=status,
    )


def _make_use_case(carriers, rules=None, audit_repo=None, order_repo=None) -> AssignCourierUseCase:
    return AssignCourierUseCase(
        carrier_repo=FakeCarrierRepo(carriers),
        rule_repo=FakeRuleRepo(rules),
        order_repo=order_repo or FakeOrderRepo(),
        audit_recorder=AuditRecorder(audit_repo or FakeAuditRepo(), attempts=2),
    )


@pytest.mark.asyncio
async def test_rule_based_assignment(carrier_x, carrier_y):
    audit = FakeAuditRepo()
    uc = _make_use_case(
        [carrier_x, carrier_y],
        [_cod_rule("A", carrier_x.id, 1), _cod_rule("B", carrier_y.id, 2)],
        audit,
    )
    result = await uc.execute(_request())

    assert result.snapshot.carrier_id == carrier_x.id
    assert result.snapshot.carrier_code == "XP"
    assert result.snapshot.rule_id == "A"
    assert result.fallback_used is False
    assert result.audit_recorded is True


@pytest.mark.asyncio
async def test_exactly_one_audit_entry_per_assignment(carrier_x):
    audit = FakeAuditRepo()
    uc = _make_use_case([carrier_x], [_cod_rule("A", carrier_x.id, 1)], audit)
    result = await uc.execute(_request(order_id="o-42"))

    assert len(audit.entries) == 1
    entry = audit.entries[0]
    assert entry.order_id == "o-42"
    assert entry.previous is None
    assert entry.new == result.snapshot
    assert entry.actor == "system"
    assert entry.action is AuditAction.ASSIGNED


@pytest.mark.asyncio
async def test_default_courier_for_zone_without_rules(carrier_x, carrier_d):
    uc = _make_use_case([carrier_x, carrier_d], [])
    result = await uc.execute(_request(zone=REMOTE_B))

    assert result.snapshot.carrier_id == carrier_d.id
    assert result.snapshot.rule_id is None
    assert "default" in result.snapshot.reason
    assert result.fallback_used is True


@pytest.mark.asyncio
async def test_cod_partial_is_treated_as_cod(carrier_z, carrier_d):
    """carrier_z cannot collect cash, so a partial-COD order must go elsewhere."""
    uc = _make_use_case([carrier_z, carrier_d], [])
    carrier_z.priority = 0
    result = await uc.execute(_request(payment="cod_partial"))
    assert result.snapshot.carrier_id == carrier_d.id


@pytest.mark.asyncio
async def test_stripe_is_treated_as_prepaid(carrier_z):
    rule = CourierRule(
        id="A", tenant_id=TENANT, zone_id=LOCAL, payment_method=RulePaymentMethod.PREPAID,
        carrier_id=carrier_z.id, order_value=Bounds(minimum=10000), priority=1,
    )
    uc = _make_use_case([carrier_z], [rule])
    result = await uc.execute(_request(weight=2, value=15000, payment="stripe"))
    assert result.snapshot.rule_id == "A"


@pytest.mark.asyncio
async def test_no_courier_available_blocks(carrier_x):
    audit = FakeAuditRepo()
    uc = _make_use_case([carrier_x], [], audit)
    with pytest.raises(NoCourierAvailableError):
        await uc.execute(_request(zone=REMOTE_B))
    assert audit.entries == []


@pytest.mark.asyncio
async def test_audit_failure_does_not_roll_back_assignment(carrier_x):
    audit = FakeAuditRepo(failures=5)
    uc = _make_use_case([carrier_x], [_cod_rule("A", carrier_x.id, 1)], audit)
    result = await uc.execute(_request())

    assert result.snapshot.carrier_id == carrier_x.id
    assert result.audit_recorded is False


@pytest.mark.asyncio
async def test_repeated_assignment_is_deterministic(carrier_x, carrier_y, carrier_d):
    rules = [_cod_rule("A", carrier_x.id, 2), _cod_rule("B", carrier_y.id, 2)]
    uc = _make_use_case([carrier_x, carrier_y, carrier_d], rules)
    first = await uc.execute(_request())
    for _ in range(5):
        again = await uc.execute(_request())
        assert (again.snapshot.carrier_id, again.snapshot.rule_id, again.snapshot.reason) == (
            first.snapshot.carrier_id, first.snapshot.rule_id, first.snapshot.reason,
        )


@pytest.mark.asyncio
async def test_order_not_yet_stored_leaves_persistence_to_caller(carrier_x):
    uc = _make_use_case([carrier_x], [_cod_rule("A", carrier_x.id, 1)])
    result = await uc.execute(_request(order_id="o-fresh"))
    assert result.snapshot_persisted is False


@pytest.mark.asyncio
async def test_stored_order_gets_snapshot_written(carrier_x):
    orders = FakeOrderRepo([_stored_order()])
    uc = _make_use_case([carrier_x], [_cod_rule("A", carrier_x.id, 1)], order_repo=orders)
    result = await uc.execute(_request())

    assert result.snapshot_persisted is True
    assert orders.orders["o-1"].snapshot == result.snapshot
    assert orders.orders["o-1"].version == 1
    assert orders.orders["o-1"].override_count == 0


@pytest.mark.asyncio
async def test_second_assignment_of_same_order_rejected(carrier_x, carrier_y):
    audit = FakeAuditRepo()
    orders = FakeOrderRepo([_stored_order()])
    uc = _make_use_case(
        [carrier_x, carrier_y], [_cod_rule("A", carrier_x.id, 1)], audit, orders
    )
    first = await uc.execute(_request())

    with pytest.raises(CourierAlreadyAssignedError):
        await uc.execute(_request())

    assert orders.orders["o-1"].snapshot == first.snapshot
    assigned = [e for e in audit.entries if e.action is AuditAction.ASSIGNED]
    assert len(assigned) == 1
    assert assigned[0].previous is None


@pytest.mark.asyncio
async def test_reassigned_order_is_not_auto_assigned_again(carrier_x, carrier_y):
    stored = _stored_order()
    stored.snapshot = build_manual_snapshot(carrier_y, "customer asked")
    stored.override_count = 1
    audit = FakeAuditRepo()
    uc = _make_use_case(
        [carrier_x, carrier_y], [_cod_rule("A", carrier_x.id, 1)], audit, FakeOrderRepo([stored])
    )
    with pytest.raises(CourierAlreadyAssignedError):
        await uc.execute(_request())
    assert audit.entries == []


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [OrderStatus.SHIPPED, OrderStatus.PROCESSING, OrderStatus.CANCELLED])
async def test_locked_or_cancelled_order_cannot_be_assigned(carrier_x, status):
    audit = FakeAuditRepo()
    uc = _make_use_case(
        [carrier_x], [_cod_rule("A", carrier_x.id, 1)], audit,
        FakeOrderRepo([_stored_order(status=status)]),
    )
    with pytest.raises(OverrideNotAllowedError):
        await uc.execute(_request())
    assert audit.entries == []


@pytest.mark.asyncio
async def test_status_change_during_assignment_is_a_conflict(carrier_x):
    audit = FakeAuditRepo()
    orders = FakeOrderRepo([_stored_order()])
    orders.status_change_before_write = OrderStatus.PROCESSING
    uc = _make_use_case([carrier_x], [_cod_rule("A", carrier_x.id, 1)], audit, orders)

    with pytest.raises(ConcurrencyConflictError):
        await uc.execute(_request())
    assert orders.orders["o-1"].snapshot is None
    assert audit.entries == []
