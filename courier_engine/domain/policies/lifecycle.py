"""Courier assignment lifecycle guards.

Unassigned → Assigned (automatic, at order creation)
Assigned / Reassigned → Reassigned (manual override, before "processing")
→ Locked (implicit once the order reaches "processing" or later)
"""

from __future__ import annotations

from courier_engine.domain.entities.order_courier import OrderCourierState
from courier_engine.domain.errors import CourierAlreadyAssignedError, OverrideNotAllowedError
from courier_engine.domain.value_objects.enums import AssignmentState, OrderStatus


def assignment_state(order: OrderCourierState) -> AssignmentState:
    if order.status.is_courier_locked:
        return AssignmentState.LOCKED
    if order.snapshot is None:
        return AssignmentState.UNASSIGNED
    if order.override_count > 0:
        return AssignmentState.REASSIGNED
    return AssignmentState.ASSIGNED


def ensure_assignable(order: OrderCourierState) -> None:
    """Automatic assignment runs once, on an order that has no courier yet."""
    if order.snapshot is not None:
        raise CourierAlreadyAssignedError(
            f"Order {order.order_id} already has courier {order.snapshot.carrier_code}"
        )
    if order.status.is_courier_locked or order.status is OrderStatus.CANCELLED:
        raise OverrideNotAllowedError(
            f"Order {order.order_id} can no longer be assigned a courier "
            f"(status {order.status.value})"
        )


def ensure_override_allowed(order: OrderCourierState) -> None:
    """Raise OverrideNotAllowedError unless the courier may still be replaced."""
    state = assignment_state(order)
    if state is AssignmentState.LOCKED:
        raise OverrideNotAllowedError(
            f"Courier is locked for order {order.order_id} (status {order.status.value})"
        )
    if state is AssignmentState.UNASSIGNED:
        raise OverrideNotAllowedError(
            f"Order {order.order_id} has no courier assigned yet"
        )
    if order.status is OrderStatus.CANCELLED:
        raise OverrideNotAllowedError(f"Order {order.order_id} is cancelled")


def can_override(order: OrderCourierState) -> bool:
    try:
        ensure_override_allowed(order)
    except OverrideNotAllowedError:
        return False
    return True
