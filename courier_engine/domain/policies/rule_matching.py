"""RuleMatchingPolicy — filter, rank and walk courier rules for an order."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from courier_engine.domain.entities.carrier import Carrier
from courier_engine.domain.entities.courier_rule import CourierRule
from courier_engine.domain.errors import (
    CourierIneligibleError,
    NoCourierAvailableError,
    NoMatchError,
)
from courier_engine.domain.policies.eligibility import ensure_eligible, is_eligible
from courier_engine.domain.policies.snapshot_builder import (
    DEFAULT_COURIER_REASON,
    describe_rule,
)
from courier_engine.domain.value_objects.order_facts import OrderFacts

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CarrierDecision:
    """Result of the rule matching policy."""

    carrier: Carrier
    rule: CourierRule | None  # None when the default carrier was used
    reason: str
    trace: tuple[str, ...] = field(default=(), compare=False)

    @property
    def fallback_used(self) -> bool:
        return self.rule is None


def rule_matches(rule: CourierRule, order: OrderFacts) -> bool:
    """Pure function: does the rule's filter accept the order?

    Rules are *conjunctive*: tenant, zone, payment method, weight range and
    order-value range must all accept. Ranges are half-open
    (min <= x < max) and an absent range imposes no restriction.
    """
    if not rule.is_active:
        return False
    if rule.tenant_id != order.tenant_id or rule.zone_id != order.zone_id:
        return False
    if not rule.payment_method.accepts(order.payment_method):
        return False
    if rule.weight is not None and not rule.weight.contains(order.weight_kg):
        return False
    if rule.order_value is not None and not rule.order_value.contains(order.order_value):
        return False
    return True


def rank_rules(
    rules: Iterable[CourierRule],
    carriers: Mapping[str, Carrier],
    order: OrderFacts,
) -> list[tuple[CourierRule, Carrier]]:
    """Return matching (rule, carrier) pairs in deterministic preference order.

    Sort key: rule priority ASC, then carrier priority ASC, then rule
    creation order. Rules pointing at an unknown carrier are dropped.
    """
    pairs: list[tuple[CourierRule, Carrier]] = []
    for rule in rules:
        if not rule_matches(rule, order):
            continue
        carrier = carriers.get(rule.carrier_id)
        if carrier is None:
            logger.warning(
                "Rule %s targets unknown carrier %s, skipping", rule.id, rule.carrier_id
            )
            continue
        pairs.append((rule, carrier))

    return sorted(pairs, key=lambda p: (p[0].priority, p[1].priority, p[0].created_seq))


def select_by_rules(
    rules: Iterable[CourierRule],
    carriers: Mapping[str, Carrier],
    order: OrderFacts,
    trace: list[str] | None = None,
) -> CarrierDecision:
    """Walk the ranked rules and return the first pair whose carrier validates.

    Raises:
        NoMatchError: no rule produced an eligible carrier.
    """
    trace = trace if trace is not None else []
    ranked = rank_rules(rules, carriers, order)
    if not ranked:
        raise NoMatchError(f"No rule matches zone {order.zone_id}")

    for rule, carrier in ranked:
        try:
            ensure_eligible(carrier, order)
        except CourierIneligibleError as e:
            trace.append(f"rule {rule.id}: {e.reason}")
            continue
        trace.append(f"rule {rule.id}: selected {carrier.code}")
        return CarrierDecision(
            carrier=carrier,
            rule=rule,
            reason=describe_rule(rule, carrier),
            trace=tuple(trace),
        )

    raise NoMatchError(f"{len(ranked)} rule(s) matched but no carrier was eligible")


def select_default_carrier(
    carriers: Iterable[Carrier],
    order: OrderFacts,
    trace: list[str] | None = None,
) -> CarrierDecision:
    """Pick the lowest-priority-value carrier that can serve the order.

    Raises:
        NoCourierAvailableError: no carrier of the tenant is eligible.
    """
    candidates = [
        c for c in carriers if c.tenant_id == order.tenant_id and is_eligible(c, order)
    ]
    if not candidates:
        raise NoCourierAvailableError(
            f"No courier found for zone {order.zone_id} with payment method "
            f"{order.payment_method.value}, weight {order.weight_kg:g} kg, "
            f"order value ₹{order.order_value:g}"
        )

    # Stable ordering: priority first, then code / id for determinism
    chosen = min(candidates, key=lambda c: (c.priority, c.code, c.id))
    trace = trace if trace is not None else []
    trace.append(f"default: selected {chosen.code}")
    return CarrierDecision(
        carrier=chosen,
        rule=None,
        reason=DEFAULT_COURIER_REASON,
        trace=tuple(trace),
    )


def resolve_carrier(
    rules: Iterable[CourierRule],
    carriers: Mapping[str, Carrier],
    order: OrderFacts,
) -> CarrierDecision:
    """Resolve exactly one carrier for the order.

    1. Rule walk (see select_by_rules).
    2. Default carrier when no rule yields an eligible carrier.

    Identical inputs always produce the identical decision.

    Raises:
        NoCourierAvailableError: neither step produced a carrier.
    """
    trace: list[str] = []
    try:
        return select_by_rules(rules, carriers, order, trace)
    except NoMatchError as e:
        logger.info("Tenant %s: %s, falling back to default courier", order.tenant_id, e)
        trace.append(str(e))
    return select_default_carrier(carriers.values(), order, trace)


def list_available_carriers(carriers: Iterable[Carrier], order: OrderFacts) -> list[Carrier]:
    """Every carrier that could serve the order, best first (for manual pickers)."""
    eligible = [c for c in carriers if c.tenant_id == order.tenant_id and is_eligible(c, order)]
    return sorted(eligible, key=lambda c: (c.priority, c.code, c.id))
