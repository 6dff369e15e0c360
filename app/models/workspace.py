"""Workspace database model."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, Integer, Numeric, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from app.database import Base

if TYPE_CHECKING:
    from app.models.booking import Booking


class Workspace(Base):
    """Bookable desk or room."""

    __tablename__ = "workspaces"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    type: Mapped[str] = mapped_column(
        String(30), nullable=False
    )  # hot-desk, focus-room, collaborate-room, boardroom, communications-pod
    resource_category: Mapped[str] = mapped_column(String(20), nullable=False)  # desk, meeting-room
    description: Mapped[str | None] = mapped_column(Text)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    # Pricing (in cents)
    base_price_hourly: Mapped[int] = mapped_column(Integer, nullable=False)

    # Booking duration bounds (hours)
    min_duration: Mapped[Decimal] = mapped_column(Numeric(4, 2), nullable=False, default=Decimal("1"))
    max_duration: Mapped[Decimal] = mapped_column(Numeric(4, 2), nullable=False, default=Decimal("12"))

    amenities: Mapped[list | None] = mapped_column(JSONB, default=list)
    available: Mapped[bool] = mapped_column(Boolean, default=True)
    floor_location: Mapped[str | None] = mapped_column(String(100))

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    # Relationships
    bookings: Mapped[list["Booking"]] = relationship("Booking", back_populates="workspace")
