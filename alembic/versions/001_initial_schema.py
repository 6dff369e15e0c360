"""Initial database schema.

Revision ID: 001_initial
Revises: None
Create Date: 2025-09-29

Creates all initial tables for the CitizenSpace platform:
- Users
- Workspaces and bookings
- Café menu and orders
"""

from typing import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers
revision: str = "001_initial"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create all database tables."""

    # ==================== USERS ====================
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(255), unique=True, nullable=False, index=True),
        sa.Column("full_name", sa.String(200), nullable=False),
        sa.Column("phone", sa.String(20)),
        sa.Column("role", sa.String(20), nullable=False, server_default="user"),
        sa.Column("wallet_address", sa.String(64), unique=True),
        sa.Column("nft_holder", sa.Boolean, server_default=sa.false()),
        sa.Column("nft_token_id", sa.Text),
        sa.Column("is_active", sa.Boolean, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("role IN ('user', 'staff', 'admin')", name="ck_users_role"),
    )

    # ==================== WORKSPACES ====================
    op.create_table(
        "workspaces",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("type", sa.String(30), nullable=False),
        sa.Column("resource_category", sa.String(20), nullable=False),
        sa.Column("description", sa.Text),
        sa.Column("capacity", sa.Integer, nullable=False, server_default="1"),
        sa.Column("base_price_hourly", sa.Integer, nullable=False),
        sa.Column("min_duration", sa.Numeric(4, 2), nullable=False, server_default="1"),
        sa.Column("max_duration", sa.Numeric(4, 2), nullable=False, server_default="12"),
        sa.Column("amenities", postgresql.JSONB, server_default="[]"),
        sa.Column("available", sa.Boolean, server_default=sa.true()),
        sa.Column("floor_location", sa.String(100)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("base_price_hourly >= 0", name="ck_workspaces_price"),
        sa.CheckConstraint("min_duration > 0 AND max_duration >= min_duration", name="ck_workspaces_duration"),
    )

    # ==================== BOOKINGS ====================
    op.create_table(
        "bookings",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("confirmation_code", sa.String(20), unique=True, nullable=False, index=True),
        sa.Column(
            "user_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column(
            "workspace_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("workspaces.id", ondelete="RESTRICT"),
            nullable=False,
            index=True,
        ),
        sa.Column("booking_type", sa.String(20), nullable=False, server_default="hourly-desk"),
        sa.Column("booking_date", sa.Date, nullable=False, index=True),
        sa.Column("start_time", sa.Time, nullable=False),
        sa.Column("end_time", sa.Time, nullable=False),
        sa.Column("duration_hours", sa.Numeric(4, 2), nullable=False),
        sa.Column("attendees", sa.Integer, server_default="1"),
        sa.Column("subtotal", sa.Integer, nullable=False),
        sa.Column("discount_amount", sa.Integer, server_default="0"),
        sa.Column("nft_discount_applied", sa.Boolean, server_default=sa.false()),
        sa.Column("processing_fee", sa.Integer, server_default="0"),
        sa.Column("total_price", sa.Integer, nullable=False),
        sa.Column("status", sa.String(20), server_default="pending", index=True),
        sa.Column("payment_status", sa.String(20), server_default="pending"),
        sa.Column("payment_intent_id", sa.String(255), index=True),
        sa.Column("special_requests", sa.Text),
        sa.Column("check_in_time", sa.DateTime(timezone=True)),
        sa.Column("check_out_time", sa.DateTime(timezone=True)),
        sa.Column("actual_duration_hours", sa.Numeric(5, 2)),
        sa.Column("final_charge", sa.Integer),
        sa.Column("cancelled_at", sa.DateTime(timezone=True)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("duration_hours > 0", name="ck_bookings_duration"),
        sa.CheckConstraint(
            "status IN ('pending', 'confirmed', 'checked_in', 'completed', 'cancelled')",
            name="ck_bookings_status",
        ),
        sa.CheckConstraint(
            "check_out_time IS NULL OR check_in_time IS NOT NULL",
            name="ck_bookings_check_out_after_check_in",
        ),
    )
    # One checked-in booking per user
    op.create_index(
        "ix_bookings_one_active_per_user",
        "bookings",
        ["user_id"],
        unique=True,
        postgresql_where=sa.text("status = 'checked_in'"),
    )

    # ==================== CAFÉ ====================
    op.create_table(
        "menu_items",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text),
        sa.Column("price", sa.Integer, nullable=False),
        sa.Column("category", sa.String(20), nullable=False, index=True),
        sa.Column("dietary_tags", postgresql.ARRAY(sa.Text)),
        sa.Column("orderable", sa.Boolean, server_default=sa.true()),
        sa.Column("featured", sa.Boolean, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("price >= 0", name="ck_menu_items_price"),
    )

    op.create_table(
        "orders",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            index=True,
        ),
        sa.Column("subtotal", sa.Integer, nullable=False),
        sa.Column("discount_amount", sa.Integer, server_default="0"),
        sa.Column("nft_discount_applied", sa.Boolean, server_default=sa.false()),
        sa.Column("total_price", sa.Integer, nullable=False),
        sa.Column("status", sa.String(20), server_default="pending", index=True),
        sa.Column("payment_status", sa.String(20), server_default="pending"),
        sa.Column("payment_intent_id", sa.String(255), index=True),
        sa.Column("special_instructions", sa.Text),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "order_items",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "order_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("orders.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column(
            "menu_item_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("menu_items.id", ondelete="SET NULL"),
        ),
        sa.Column("quantity", sa.Integer, nullable=False),
        sa.Column("unit_price", sa.Integer, nullable=False),
        sa.Column("subtotal", sa.Integer, nullable=False),
        sa.Column("special_instructions", sa.Text),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("quantity > 0", name="ck_order_items_quantity"),
    )


def downgrade() -> None:
    """Drop all database tables in reverse order."""
    op.drop_table("order_items")
    op.drop_table("orders")
    op.drop_table("menu_items")
    op.drop_index("ix_bookings_one_active_per_user", table_name="bookings")
    op.drop_table("bookings")
    op.drop_table("workspaces")
    op.drop_table("users")
