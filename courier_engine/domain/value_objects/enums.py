"""Domain enums — pure Python, no external dependencies."""

from __future__ import annotations

from enum import Enum

# Raw checkout payment methods that mean the carrier collects cash
_COD_METHODS = frozenset({"cod", "cod_partial"})


class PaymentMethod(str, Enum):
    PREPAID = "prepaid"
    COD = "cod"

    @classmethod
    def normalize(cls, raw: str | PaymentMethod) -> PaymentMethod:
        """Map a checkout payment method onto prepaid / cod.

        ``cod`` and ``cod_partial`` are cash on delivery; every other method
        (stripe, paypal, ...) has been paid up-front.
        """
        if isinstance(raw, PaymentMethod):
            return raw
        value = (raw or "").strip().lower()
        if not value:
            raise ValueError("Payment method is required")
        return cls.COD if value in _COD_METHODS else cls.PREPAID


class RulePaymentMethod(str, Enum):
    PREPAID = "prepaid"
    COD = "cod"
    BOTH = "both"

    def accepts(self, method: PaymentMethod) -> bool:
        return self is RulePaymentMethod.BOTH or self.value == method.value


class OrderStatus(str, Enum):
    PENDING = "pending"
    CREATED = "created"
    PAYMENT_PENDING = "payment_pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    RETURNED = "returned"
    REFUNDED = "refunded"

    @property
    def rank(self) -> int:
        return _STATUS_RANK[self]

    @property
    def is_courier_locked(self) -> bool:
        """Courier is frozen from "processing" onwards."""
        return self is not OrderStatus.CANCELLED and self.rank >= OrderStatus.PROCESSING.rank

    @property
    def is_terminal(self) -> bool:
        return self in (
            OrderStatus.DELIVERED,
            OrderStatus.CANCELLED,
            OrderStatus.RETURNED,
            OrderStatus.REFUNDED,
        )


_STATUS_RANK: dict[OrderStatus, int] = {
    OrderStatus.PENDING: 0,  # legacy storefront default, same stage as "created"
    OrderStatus.CREATED: 0,
    OrderStatus.PAYMENT_PENDING: 1,
    OrderStatus.CONFIRMED: 2,
    OrderStatus.PROCESSING: 3,
    OrderStatus.SHIPPED: 4,
    OrderStatus.OUT_FOR_DELIVERY: 5,
    OrderStatus.DELIVERED: 6,
    OrderStatus.RETURNED: 7,
    OrderStatus.REFUNDED: 8,
    # Cancellation can happen from any pre-shipment state
    OrderStatus.CANCELLED: 9,
}


class AssignmentState(str, Enum):
    UNASSIGNED = "unassigned"
    ASSIGNED = "assigned"
    REASSIGNED = "reassigned"
    LOCKED = "locked"


class AuditAction(str, Enum):
    ASSIGNED = "COURIER_ASSIGNED"
    REASSIGNED = "COURIER_REASSIGNED"
