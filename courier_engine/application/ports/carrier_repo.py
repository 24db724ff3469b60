"""Port interface for carrier definitions (read-only to the engine)."""

from abc import ABC, abstractmethod

from courier_engine.domain.entities.carrier import Carrier


class CarrierRepository(ABC):
    @abstractmethod
    async def get_by_id(self, tenant_id: str, carrier_id: str) -> Carrier | None:
        ...

    @abstractmethod
    async def get_by_tenant(self, tenant_id: str) -> list[Carrier]:
        """Return every carrier of the tenant, active or not."""
        ...
