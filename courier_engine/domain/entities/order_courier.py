"""OrderCourierState — the slice of an order the courier lifecycle needs."""

from dataclasses import dataclass

from courier_engine.domain.entities.snapshot import CourierSnapshot
from courier_engine.domain.value_objects.enums import OrderStatus, PaymentMethod
from courier_engine.domain.value_objects.order_facts import OrderFacts


@dataclass
class OrderCourierState:
    order_id: str
    tenant_id: str
    zone_id: str
    payment_method: PaymentMethod
    weight_kg: float
    order_value: float
    status: OrderStatus
    shipping_pincode: str | None = None
    snapshot: CourierSnapshot | None = None
    version: int = 0
    override_count: int = 0

    def to_facts(self) -> OrderFacts:
        return OrderFacts(
            tenant_id=self.tenant_id,
            zone_id=self.zone_id,
            weight_kg=self.weight_kg,
            order_value=self.order_value,
            payment_method=self.payment_method,
            pincode=self.shipping_pincode,
        )
