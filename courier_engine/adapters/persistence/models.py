"""SQLAlchemy ORM models — maps to PostgreSQL tables."""

from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import ARRAY, JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from courier_engine.adapters.persistence.database import Base


class CarrierModel(Base):
    __tablename__ = "carriers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tenant_id: Mapped[str] = mapped_column(String(64), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    code: Mapped[str] = mapped_column(String(50), nullable=False)
    supports_cod: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    max_weight_kg: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    serviceable_zone_ids: Mapped[list[str]] = mapped_column(
        ARRAY(String(64)), nullable=False, default=list
    )
    serviceable_pincodes: Mapped[list[str]] = mapped_column(
        ARRAY(String(12)), nullable=False, default=list
    )
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=999)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )

    rules: Mapped[list["CourierRuleModel"]] = relationship(back_populates="carrier")

    __table_args__ = (
        UniqueConstraint("tenant_id", "code", name="uq_carriers_tenant_code"),
        Index("idx_carriers_tenant", "tenant_id"),
    )


class CourierRuleModel(Base):
    __tablename__ = "courier_rules"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tenant_id: Mapped[str] = mapped_column(String(64), nullable=False)
    zone_id: Mapped[str] = mapped_column(String(64), nullable=False)
    payment_method: Mapped[str] = mapped_column(String(10), nullable=False)
    carrier_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("carriers.id"), nullable=False
    )
    min_weight_kg: Mapped[float | None] = mapped_column(Float, nullable=True)
    max_weight_kg: Mapped[float | None] = mapped_column(Float, nullable=True)
    min_order_value: Mapped[float | None] = mapped_column(Float, nullable=True)
    max_order_value: Mapped[float | None] = mapped_column(Float, nullable=True)
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=999)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    carrier: Mapped["CarrierModel"] = relationship(back_populates="rules")

    __table_args__ = (
        CheckConstraint(
            "payment_method IN ('prepaid', 'cod', 'both')", name="ck_courier_rules_payment"
        ),
        CheckConstraint(
            "max_weight_kg IS NULL OR min_weight_kg IS NULL OR max_weight_kg > min_weight_kg",
            name="ck_courier_rules_weight_range",
        ),
        CheckConstraint(
            "max_order_value IS NULL OR min_order_value IS NULL "
            "OR max_order_value > min_order_value",
            name="ck_courier_rules_value_range",
        ),
        Index("idx_courier_rules_lookup", "tenant_id", "zone_id", "is_active"),
    )


class OrderModel(Base):
    """Courier-relevant columns of the order, owned by the order lifecycle."""

    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    tenant_id: Mapped[str] = mapped_column(String(64), nullable=False)
    zone_id: Mapped[str] = mapped_column(String(64), nullable=False)
    payment_method: Mapped[str] = mapped_column(String(20), nullable=False)
    weight_kg: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    order_value: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    shipping_pincode: Mapped[str | None] = mapped_column(String(12), nullable=True)
    status: Mapped[str] = mapped_column(String(30), nullable=False, default="created")
    courier_snapshot: Mapped[dict | None] = mapped_column(JSONB(none_as_null=True), nullable=True)
    override_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (Index("idx_orders_tenant", "tenant_id"),)


class AssignmentAuditModel(Base):
    __tablename__ = "courier_assignment_audit"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[str] = mapped_column(String(64), nullable=False)
    action: Mapped[str] = mapped_column(String(30), nullable=False)
    previous_snapshot: Mapped[dict | None] = mapped_column(JSONB, nullable=True)
    new_snapshot: Mapped[dict] = mapped_column(JSONB, nullable=False)
    actor: Mapped[str] = mapped_column(String(100), nullable=False)
    override_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    recorded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (Index("idx_courier_audit_order", "order_id"),)
