"""Port interface for courier rules (read-only to the engine)."""

from abc import ABC, abstractmethod

from courier_engine.domain.entities.courier_rule import CourierRule


class RuleRepository(ABC):
    @abstractmethod
    async def get_active(self, tenant_id: str, zone_id: str) -> list[CourierRule]:
        """Return active rules for (tenant, zone) in creation order."""
        ...
