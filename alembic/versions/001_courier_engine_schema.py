"""Initial schema — carriers, courier rules, orders, assignment audit.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import ARRAY, JSONB

from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Carriers
    op.create_table(
        "carriers",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("tenant_id", sa.String(64), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("code", sa.String(50), nullable=False),
        sa.Column("supports_cod", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("max_weight_kg", sa.Float, nullable=False, server_default="0"),
        sa.Column(
            "serviceable_zone_ids", ARRAY(sa.String(64)), nullable=False, server_default="{}"
        ),
        sa.Column(
            "serviceable_pincodes", ARRAY(sa.String(12)), nullable=False, server_default="{}"
        ),
        sa.Column("priority", sa.Integer, nullable=False, server_default="999"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.UniqueConstraint("tenant_id", "code", name="uq_carriers_tenant_code"),
    )
    op.create_index("idx_carriers_tenant", "carriers", ["tenant_id"])

    # Courier rules
    op.create_table(
        "courier_rules",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("tenant_id", sa.String(64), nullable=False),
        sa.Column("zone_id", sa.String(64), nullable=False),
        sa.Column("payment_method", sa.String(10), nullable=False),
        sa.Column("carrier_id", sa.Integer, sa.ForeignKey("carriers.id"), nullable=False),
        sa.Column("min_weight_kg", sa.Float, nullable=True),
        sa.Column("max_weight_kg", sa.Float, nullable=True),
        sa.Column("min_order_value", sa.Float, nullable=True),
        sa.Column("max_order_value", sa.Float, nullable=True),
        sa.Column("priority", sa.Integer, nullable=False, server_default="999"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.CheckConstraint(
            "payment_method IN ('prepaid', 'cod', 'both')", name="ck_courier_rules_payment"
        ),
        sa.CheckConstraint(
            "max_weight_kg IS NULL OR min_weight_kg IS NULL OR max_weight_kg > min_weight_kg",
            name="ck_courier_rules_weight_range",
        ),
        sa.CheckConstraint(
            "max_order_value IS NULL OR min_order_value IS NULL "
            "OR max_order_value > min_order_value",
            name="ck_courier_rules_value_range",
        ),
    )
    op.create_index(
        "idx_courier_rules_lookup", "courier_rules", ["tenant_id", "zone_id", "is_active"]
    )

    # Orders (courier-relevant columns)
    op.create_table(
        "orders",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("tenant_id", sa.String(64), nullable=False),
        sa.Column("zone_id", sa.String(64), nullable=False),
        sa.Column("payment_method", sa.String(20), nullable=False),
        sa.Column("weight_kg", sa.Float, nullable=False, server_default="0"),
        sa.Column("order_value", sa.Float, nullable=False, server_default="0"),
        sa.Column("shipping_pincode", sa.String(12), nullable=True),
        sa.Column("status", sa.String(30), nullable=False, server_default="created"),
        sa.Column("courier_snapshot", JSONB, nullable=True),
        sa.Column("override_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("version", sa.Integer, nullable=False, server_default="0"),
    )
    op.create_index("idx_orders_tenant", "orders", ["tenant_id"])

    # Assignment audit (append-only)
    op.create_table(
        "courier_assignment_audit",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("order_id", sa.String(64), nullable=False),
        sa.Column("action", sa.String(30), nullable=False),
        sa.Column("previous_snapshot", JSONB, nullable=True),
        sa.Column("new_snapshot", JSONB, nullable=False),
        sa.Column("actor", sa.String(100), nullable=False),
        sa.Column("override_reason", sa.Text, nullable=True),
        sa.Column("recorded_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("idx_courier_audit_order", "courier_assignment_audit", ["order_id"])


def downgrade() -> None:
    op.drop_table("courier_assignment_audit")
    op.drop_table("orders")
    op.drop_table("courier_rules")
    op.drop_table("carriers")
