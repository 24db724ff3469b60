"""EligibilityPolicy — can a single carrier physically serve an order?"""

from __future__ import annotations

from dataclasses import dataclass

from courier_engine.domain.entities.carrier import Carrier
from courier_engine.domain.errors import CourierIneligibleError
from courier_engine.domain.value_objects.order_facts import OrderFacts


@dataclass(frozen=True)
class EligibilityCheck:
    """Result of the policy evaluation."""

    eligible: bool
    reason: str | None = None  # None when eligible


def check_eligibility(carrier: Carrier, order: OrderFacts) -> EligibilityCheck:
    """Pure function: evaluate a carrier against the order facts.

    Business rules, checked in order:
      1. Carrier must be active.
      2. COD orders need a carrier that collects cash.
      3. max_weight_kg == 0 means unlimited, otherwise weight <= max.
      4. The order's zone must be in the carrier's serviceable zones.
      5. A non-empty pincode list narrows rule 4: the order pincode must
         also be listed. It never widens zone eligibility.
    """
    if not carrier.is_active:
        return EligibilityCheck(False, "Courier is inactive")

    if order.is_cod and not carrier.supports_cod:
        return EligibilityCheck(False, "Courier does not support COD")

    if carrier.max_weight_kg > 0 and order.weight_kg > carrier.max_weight_kg:
        return EligibilityCheck(
            False,
            f"Order weight {order.weight_kg:g} kg exceeds courier max weight "
            f"{carrier.max_weight_kg:g} kg",
        )

    if not carrier.services_zone(order.zone_id):
        return EligibilityCheck(False, "Courier does not service this zone")

    if carrier.has_pincode_restriction() and order.pincode not in carrier.serviceable_pincodes:
        return EligibilityCheck(False, "Courier does not service this pincode")

    return EligibilityCheck(True)


def is_eligible(carrier: Carrier, order: OrderFacts) -> bool:
    return check_eligibility(carrier, order).eligible


def ensure_eligible(carrier: Carrier, order: OrderFacts) -> None:
    """Raise CourierIneligibleError when the carrier cannot serve the order."""
    check = check_eligibility(carrier, order)
    if not check.eligible:
        raise CourierIneligibleError(carrier.code, check.reason or "ineligible")
