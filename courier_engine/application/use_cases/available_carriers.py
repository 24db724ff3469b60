"""ListAvailableCarriersUseCase — candidates for a manual courier pick."""

from __future__ import annotations

from courier_engine.application.ports.carrier_repo import CarrierRepository
from courier_engine.domain.entities.carrier import Carrier
from courier_engine.domain.policies.rule_matching import list_available_carriers
from courier_engine.domain.value_objects.order_facts import OrderFacts


class ListAvailableCarriersUseCase:
    def __init__(self, carrier_repo: CarrierRepository):
        self._carriers = carrier_repo

    async def execute(self, order: OrderFacts) -> list[Carrier]:
        carriers = await self._carriers.get_by_tenant(order.tenant_id)
        return list_available_carriers(carriers, order)
