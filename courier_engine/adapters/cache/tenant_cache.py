"""Read-mostly tenant cache for carrier and rule configuration.

Carrier and rule configuration changes far less often than orders are
created, so reads are served from a process-wide TTL cache. Invalidation on
edits is the administration side's job (``TenantConfigCache.invalidate``).
"""

from __future__ import annotations

import logging

from cachetools import TTLCache

from courier_engine.application.ports.carrier_repo import CarrierRepository
from courier_engine.application.ports.rule_repo import RuleRepository
from courier_engine.config import settings
from courier_engine.domain.entities.carrier import Carrier
from courier_engine.domain.entities.courier_rule import CourierRule

logger = logging.getLogger(__name__)


class TenantConfigCache:
    """Process-wide store shared by the per-request cached repositories."""

    def __init__(self, ttl_seconds: float | None = None, max_tenants: int | None = None):
        ttl = ttl_seconds if ttl_seconds is not None else settings.config_cache_ttl_seconds
        size = max_tenants or settings.config_cache_max_tenants
        self.carriers: TTLCache[str, tuple[Carrier, ...]] = TTLCache(maxsize=size, ttl=ttl)
        # One tenant can have many zones
        self.rules: TTLCache[tuple[str, str], tuple[CourierRule, ...]] = TTLCache(
            maxsize=size * 16, ttl=ttl
        )

    def invalidate(self, tenant_id: str) -> None:
        self.carriers.pop(tenant_id, None)
        for key in [k for k in self.rules.keys() if k[0] == tenant_id]:
            self.rules.pop(key, None)
        logger.info("Courier configuration cache invalidated for tenant %s", tenant_id)

    def clear(self) -> None:
        self.carriers.clear()
        self.rules.clear()


class CachedCarrierRepository(CarrierRepository):
    def __init__(self, inner: CarrierRepository, cache: TenantConfigCache):
        self._inner = inner
        self._cache = cache

    async def get_by_tenant(self, tenant_id: str) -> list[Carrier]:
        cached = self._cache.carriers.get(tenant_id)
        if cached is not None:
            logger.debug("Carrier cache hit for tenant %s", tenant_id)
            return list(cached)
        carriers = await self._inner.get_by_tenant(tenant_id)
        self._cache.carriers[tenant_id] = tuple(carriers)
        return list(carriers)

    async def get_by_id(self, tenant_id: str, carrier_id: str) -> Carrier | None:
        for carrier in await self.get_by_tenant(tenant_id):
            if carrier.id == carrier_id:
                return carrier
        return None


class CachedRuleRepository(RuleRepository):
    def __init__(self, inner: RuleRepository, cache: TenantConfigCache):
        self._inner = inner
        self._cache = cache

    async def get_active(self, tenant_id: str, zone_id: str) -> list[CourierRule]:
        key = (tenant_id, zone_id)
        cached = self._cache.rules.get(key)
        if cached is not None:
            logger.debug("Rule cache hit for tenant %s zone %s", tenant_id, zone_id)
            return list(cached)
        rules = await self._inner.get_active(tenant_id, zone_id)
        self._cache.rules[key] = tuple(rules)
        return list(rules)
