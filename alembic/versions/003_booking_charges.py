"""Booking follow-up charges.

Revision ID: 003_booking_charges
Revises: 002_seed_workspaces
Create Date: 2025-10-14

Extension and overage payments get their own rows so webhooks can
match their payment intents back to the booking.
"""

from typing import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers
revision: str = "003_booking_charges"
down_revision: str = "002_seed_workspaces"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "booking_charges",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "booking_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("bookings.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("kind", sa.String(20), nullable=False),
        sa.Column("amount", sa.Integer, nullable=False),
        sa.Column("payment_intent_id", sa.String(255), index=True),
        sa.Column("payment_status", sa.String(20), server_default="pending"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("kind IN ('extension', 'overage')", name="ck_booking_charges_kind"),
        sa.CheckConstraint("amount > 0", name="ck_booking_charges_amount"),
        sa.CheckConstraint(
            "payment_status IN ('pending', 'paid', 'cancelled')",
            name="ck_booking_charges_payment_status",
        ),
    )


def downgrade() -> None:
    op.drop_table("booking_charges")
