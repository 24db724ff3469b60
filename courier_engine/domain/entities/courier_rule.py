"""CourierRule entity — a tenant-configured policy mapping orders to a carrier."""

from dataclasses import dataclass

from courier_engine.domain.value_objects.bounds import Bounds
from courier_engine.domain.value_objects.enums import RulePaymentMethod


@dataclass
class CourierRule:
    id: str
    tenant_id: str
    zone_id: str
    payment_method: RulePaymentMethod
    carrier_id: str
    weight: Bounds | None = None
    order_value: Bounds | None = None
    priority: int = 999
    is_active: bool = True
    created_seq: int = 0  # creation order, final tie-break
