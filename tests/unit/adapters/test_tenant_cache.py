"""Tests for the read-mostly tenant configuration cache."""

from __future__ import annotations

import pytest

from courier_engine.adapters.cache.tenant_cache import (
    CachedCarrierRepository,
    CachedRuleRepository,
    TenantConfigCache,
)
from courier_engine.application.ports.carrier_repo import CarrierRepository
from courier_engine.application.ports.rule_repo import RuleRepository
from courier_engine.domain.entities.carrier import Carrier
from courier_engine.domain.entities.courier_rule import CourierRule
from courier_engine.domain.value_objects.enums import RulePaymentMethod


class CountingCarrierRepo(CarrierRepository):
    def __init__(self, carriers):
        self.carriers = carriers
        self.reads = 0

    async def get_by_id(self, tenant_id, carrier_id):
        raise AssertionError("cached repository should resolve ids from the tenant list")

    async def get_by_tenant(self, tenant_id):
        self.reads += 1
        return [c for c in self.carriers if c.tenant_id == tenant_id]


class CountingRuleRepo(RuleRepository):
    def __init__(self, rules):
        self.rules = rules
        self.reads = 0

    async def get_active(self, tenant_id, zone_id):
        self.reads += 1
        return [r for r in self.rules if r.tenant_id == tenant_id and r.zone_id == zone_id]


def _carrier(cid: str, tenant: str = "t1") -> Carrier:
    return Carrier(id=cid, tenant_id=tenant, name=cid, code=cid, serviceable_zone_ids={"z1"})


def _rule(rid: str, zone: str = "z1", tenant: str = "t1") -> CourierRule:
    return CourierRule(
        id=rid, tenant_id=tenant, zone_id=zone,
        payment_method=RulePaymentMethod.BOTH, carrier_id="c1",
    )


@pytest.mark.asyncio
async def test_carriers_served_from_cache():
    inner = CountingCarrierRepo([_carrier("c1"), _carrier("c2")])
    repo = CachedCarrierRepository(inner, TenantConfigCache(ttl_seconds=60, max_tenants=8))

    first = await repo.get_by_tenant("t1")
    second = await repo.get_by_tenant("t1")
    assert [c.id for c in first] == [c.id for c in second] == ["c1", "c2"]
    assert inner.reads == 1


@pytest.mark.asyncio
async def test_get_by_id_uses_tenant_list():
    inner = CountingCarrierRepo([_carrier("c1"), _carrier("c9", tenant="t2")])
    repo = CachedCarrierRepository(inner, TenantConfigCache(ttl_seconds=60, max_tenants=8))

    assert (await repo.get_by_id("t1", "c1")).id == "c1"
    assert await repo.get_by_id("t1", "c9") is None


@pytest.mark.asyncio
async def test_rules_cached_per_zone():
    inner = CountingRuleRepo([_rule("r1"), _rule("r2", zone="z2")])
    repo = CachedRuleRepository(inner, TenantConfigCache(ttl_seconds=60, max_tenants=8))

    assert [r.id for r in await repo.get_active("t1", "z1")] == ["r1"]
    assert [r.id for r in await repo.get_active("t1", "z2")] == ["r2"]
    await repo.get_active("t1", "z1")
    assert inner.reads == 2


@pytest.mark.asyncio
async def test_invalidate_drops_only_that_tenant():
    cache = TenantConfigCache(ttl_seconds=60, max_tenants=8)
    rules = CountingRuleRepo([_rule("r1"), _rule("r5", tenant="t2")])
    carriers = CountingCarrierRepo([_carrier("c1"), _carrier("c5", tenant="t2")])
    rule_repo = CachedRuleRepository(rules, cache)
    carrier_repo = CachedCarrierRepository(carriers, cache)

    await rule_repo.get_active("t1", "z1")
    await rule_repo.get_active("t2", "z1")
    await carrier_repo.get_by_tenant("t1")

    cache.invalidate("t1")

    await rule_repo.get_active("t1", "z1")
    await rule_repo.get_active("t2", "z1")
    await carrier_repo.get_by_tenant("t1")
    assert rules.reads == 3
    assert carriers.reads == 2


@pytest.mark.asyncio
async def test_zero_ttl_always_reloads():
    inner = CountingCarrierRepo([_carrier("c1")])
    repo = CachedCarrierRepository(inner, TenantConfigCache(ttl_seconds=0, max_tenants=8))
    await repo.get_by_tenant("t1")
    await repo.get_by_tenant("t1")
    assert inner.reads == 2


@pytest.mark.asyncio
async def test_callers_cannot_mutate_cached_list():
    inner = CountingCarrierRepo([_carrier("c1")])
    repo = CachedCarrierRepository(inner, TenantConfigCache(ttl_seconds=60, max_tenants=8))
    carriers = await repo.get_by_tenant("t1")
    carriers.clear()
    assert len(await repo.get_by_tenant("t1")) == 1
