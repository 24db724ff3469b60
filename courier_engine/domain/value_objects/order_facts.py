"""OrderFacts value object — everything the engine knows about an order."""

from __future__ import annotations

from dataclasses import dataclass

from courier_engine.domain.value_objects.enums import PaymentMethod


@dataclass(frozen=True)
class OrderFacts:
    tenant_id: str
    zone_id: str
    weight_kg: float
    order_value: float
    payment_method: PaymentMethod
    pincode: str | None = None

    def __post_init__(self) -> None:
        if self.weight_kg < 0:
            raise ValueError("Order weight must be non-negative")
        if self.order_value < 0:
            raise ValueError("Order value must be non-negative")

    @property
    def is_cod(self) -> bool:
        return self.payment_method is PaymentMethod.COD
