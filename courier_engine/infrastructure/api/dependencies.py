"""FastAPI dependency injection — wires adapters into use cases."""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from courier_engine.adapters.cache.tenant_cache import (
    CachedCarrierRepository,
    CachedRuleRepository,
    TenantConfigCache,
)
from courier_engine.adapters.persistence.database import get_session
from courier_engine.adapters.persistence.repositories import (
    SqlAuditRepository,
    SqlCarrierRepository,
    SqlOrderRepository,
    SqlRuleRepository,
)
from courier_engine.application.services.audit_recorder import AuditRecorder
from courier_engine.application.use_cases.assign_courier import AssignCourierUseCase
from courier_engine.application.use_cases.available_carriers import (
    ListAvailableCarriersUseCase,
)
from courier_engine.application.use_cases.override_courier import OverrideCourierUseCase

# Re-export session dependency
get_db_session = get_session

# Singleton: carrier / rule configuration shared across requests
config_cache = TenantConfigCache()


def get_config_cache() -> TenantConfigCache:
    return config_cache


def get_assign_courier_uc(
    session: AsyncSession = Depends(get_session),
) -> AssignCourierUseCase:
    return AssignCourierUseCase(
        carrier_repo=CachedCarrierRepository(SqlCarrierRepository(session), config_cache),
        rule_repo=CachedRuleRepository(SqlRuleRepository(session), config_cache),
        order_repo=SqlOrderRepository(session),
        audit_recorder=AuditRecorder(SqlAuditRepository(session)),
    )


def get_override_courier_uc(
    session: AsyncSession = Depends(get_session),
) -> OverrideCourierUseCase:
    # Overrides read the carrier uncached: a just-deactivated carrier must not be picked
    return OverrideCourierUseCase(
        order_repo=SqlOrderRepository(session),
        carrier_repo=SqlCarrierRepository(session),
        audit_recorder=AuditRecorder(SqlAuditRepository(session)),
    )


def get_available_carriers_uc(
    session: AsyncSession = Depends(get_session),
) -> ListAvailableCarriersUseCase:
    return ListAvailableCarriersUseCase(
        carrier_repo=CachedCarrierRepository(SqlCarrierRepository(session), config_cache),
    )
