"""Courier assignment endpoints — automatic assignment, override, candidates."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from courier_engine.adapters.cache.tenant_cache import TenantConfigCache
from courier_engine.adapters.persistence.database import get_session
from courier_engine.application.use_cases.assign_courier import (
    AssignCourierUseCase,
    AssignmentRequest,
)
from courier_engine.application.use_cases.available_carriers import (
    ListAvailableCarriersUseCase,
)
from courier_engine.application.use_cases.override_courier import (
    OverrideCourierUseCase,
    OverrideRequest,
)
from courier_engine.domain.errors import (
    CarrierNotFoundError,
    ConcurrencyConflictError,
    CourierAlreadyAssignedError,
    CourierIneligibleError,
    NoCourierAvailableError,
    OrderNotFoundError,
    OverrideNotAllowedError,
    UnknownOrderStatusError,
)
from courier_engine.domain.value_objects.enums import PaymentMethod
from courier_engine.domain.value_objects.order_facts import OrderFacts
from courier_engine.infrastructure.api.dependencies import (
    get_assign_courier_uc,
    get_available_carriers_uc,
    get_config_cache,
    get_override_courier_uc,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["courier"])

# ── Request schemas ─────────────────────────────────────────────────


class AssignCourierBody(BaseModel):
    order_id: str = Field(min_length=1)
    tenant_id: str = Field(min_length=1)
    zone_id: str = Field(min_length=1)
    order_weight_kg: float = Field(ge=0)
    order_value: float = Field(ge=0)
    payment_method: str = Field(min_length=1)
    shipping_pincode: str | None = None


class OverrideCourierBody(BaseModel):
    tenant_id: str = Field(min_length=1)
    carrier_id: str = Field(min_length=1)
    actor_id: str = Field(min_length=1)
    reason: str | None = None


class InvalidateCacheBody(BaseModel):
    tenant_id: str = Field(min_length=1)


# ── Endpoints ───────────────────────────────────────────────────────


@router.post("/assignments")
async def assign_courier(
    body: AssignCourierBody,
    uc: AssignCourierUseCase = Depends(get_assign_courier_uc),
    session: AsyncSession = Depends(get_session),
):
    """Resolve and freeze the courier for a newly created order."""
    try:
        result = await uc.execute(AssignmentRequest(**body.model_dump()))
    except NoCourierAvailableError as e:
        # Blocking: the order-creation pipeline must abort checkout
        raise HTTPException(status_code=422, detail=str(e))
    except (CourierAlreadyAssignedError, OverrideNotAllowedError, UnknownOrderStatusError) as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ConcurrencyConflictError as e:
        await session.rollback()
        raise HTTPException(status_code=409, detail=f"{e} (retry)")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    await session.commit()

    return {
        "status": "ok",
        "order_id": result.order_id,
        "courier_snapshot": result.snapshot.to_dict(),
        "fallback_used": result.fallback_used,
        "snapshot_persisted": result.snapshot_persisted,
        "audit_recorded": result.audit_recorded,
    }


@router.post("/orders/{order_id}/courier")
async def override_courier(
    order_id: str,
    body: OverrideCourierBody,
    uc: OverrideCourierUseCase = Depends(get_override_courier_uc),
    session: AsyncSession = Depends(get_session),
):
    """Manually reassign an order's courier (only before "processing")."""
    request = OverrideRequest(
        order_id=order_id,
        tenant_id=body.tenant_id,
        new_carrier_id=body.carrier_id,
        actor_id=body.actor_id,
        reason=body.reason,
    )
    try:
        result = await uc.execute(request)
    except (OrderNotFoundError, CarrierNotFoundError) as e:
        raise HTTPException(status_code=404, detail=str(e))
    except (OverrideNotAllowedError, UnknownOrderStatusError) as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ConcurrencyConflictError as e:
        await session.rollback()
        raise HTTPException(status_code=409, detail=f"{e} (retry)")
    except CourierIneligibleError as e:
        raise HTTPException(status_code=400, detail=str(e))
    await session.commit()

    return {
        "status": "ok",
        "order_id": result.order_id,
        "previous_snapshot": result.previous.to_dict() if result.previous else None,
        "courier_snapshot": result.snapshot.to_dict(),
        "audit_recorded": result.audit_recorded,
    }


@router.get("/carriers/available")
async def available_carriers(
    tenant_id: str,
    zone_id: str,
    payment_method: str = "prepaid",
    weight_kg: float = Query(default=0.0, ge=0),
    order_value: float = Query(default=0.0, ge=0),
    pincode: str | None = None,
    uc: ListAvailableCarriersUseCase = Depends(get_available_carriers_uc),
):
    """Carriers eligible for an order, best first (for manual reassignment)."""
    try:
        order = OrderFacts(
            tenant_id=tenant_id,
            zone_id=zone_id,
            weight_kg=weight_kg,
            order_value=order_value,
            payment_method=PaymentMethod.normalize(payment_method),
            pincode=pincode,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    carriers = await uc.execute(order)
    return {
        "total": len(carriers),
        "carriers": [
            {
                "id": c.id,
                "name": c.name,
                "code": c.code,
                "priority": c.priority,
                "supports_cod": c.supports_cod,
                "max_weight_kg": c.max_weight_kg,
            }
            for c in carriers
        ],
    }


@router.post("/carriers/cache/invalidate")
async def invalidate_config_cache(
    body: InvalidateCacheBody,
    cache: TenantConfigCache = Depends(get_config_cache),
):
    """Drop cached carrier / rule configuration after an admin edit."""
    cache.invalidate(body.tenant_id)
    return {"status": "ok", "tenant_id": body.tenant_id}
