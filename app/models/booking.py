"""Booking database model."""

from __future__ import annotations

import uuid
from datetime import date, datetime, time
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Index, Integer, Numeric, String, Text, Time, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from app.database import Base

if TYPE_CHECKING:
    from app.models.user import User
    from app.models.workspace import Workspace


class Booking(Base):
    """Workspace booking model."""

    __tablename__ = "bookings"
    __table_args__ = (
        # One checked-in booking per user
        Index(
            "ix_bookings_one_active_per_user",
            "user_id",
            unique=True,
            postgresql_where=text("status = 'checked_in'"),
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    confirmation_code: Mapped[str] = mapped_column(
        String(20), unique=True, nullable=False, index=True
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    workspace_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("workspaces.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    booking_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default="hourly-desk"
    )  # hourly-desk, meeting-room, day-pass

    # Schedule (wall-clock, same date)
    booking_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)
    duration_hours: Mapped[Decimal] = mapped_column(Numeric(4, 2), nullable=False)
    attendees: Mapped[int] = mapped_column(Integer, default=1)

    # Estimate fixed at creation (in cents)
    subtotal: Mapped[int] = mapped_column(Integer, nullable=False)  # after any NFT discount
    discount_amount: Mapped[int] = mapped_column(Integer, default=0)
    nft_discount_applied: Mapped[bool] = mapped_column(Boolean, default=False)
    processing_fee: Mapped[int] = mapped_column(Integer, default=0)
    total_price: Mapped[int] = mapped_column(Integer, nullable=False)  # subtotal + processing_fee

    # Status
    status: Mapped[str] = mapped_column(
        String(20), default="pending", index=True
    )  # pending, confirmed, checked_in, completed, cancelled
    payment_status: Mapped[str] = mapped_column(
        String(20), default="pending"
    )  # pending, paid, partially_refunded, refunded
    payment_intent_id: Mapped[str | None] = mapped_column(String(255), index=True)

    special_requests: Mapped[str | None] = mapped_column(Text)

    # Usage, each set exactly once
    check_in_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    check_out_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    actual_duration_hours: Mapped[Decimal | None] = mapped_column(Numeric(5, 2))
    final_charge: Mapped[int | None] = mapped_column(Integer)

    # Timestamps
    cancelled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="bookings")
    workspace: Mapped["Workspace"] = relationship("Workspace", back_populates="bookings")

    @property
    def is_active(self) -> bool:
        """Checked in and not yet checked out."""
        return self.check_in_time is not None and self.check_out_time is None


class BookingCharge(Base):
    """Follow-up payment on a booking beyond its main payment.

    ``extension`` charges cover hours added to a paid booking,
    ``overage`` charges cover time used past the booked end.
    """

    __tablename__ = "booking_charges"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    booking_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True
    )
    kind: Mapped[str] = mapped_column(String(20), nullable=False)  # extension, overage
    amount: Mapped[int] = mapped_column(Integer, nullable=False)  # cents
    payment_intent_id: Mapped[str | None] = mapped_column(String(255), index=True)
    payment_status: Mapped[str] = mapped_column(
        String(20), default="pending"
    )  # pending, paid, cancelled
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
