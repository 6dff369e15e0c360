"""Booking-related Pydantic schemas.

Money leaves the API in dollars with two decimal places (serialized as
strings, e.g. "20.88"). Handlers pass the stored integer cents and the
``mode="before"`` validators convert them.
"""

from datetime import date, datetime, time
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.utils.money import cents_field_to_dollars


class BookingCreate(BaseModel):
    """Schema for creating an hourly booking."""

    workspace_id: UUID
    booking_date: date
    start_time: time
    end_time: time
    attendees: int = Field(default=1, ge=1, le=50)
    special_requests: str | None = Field(None, max_length=1000)

    @field_validator("end_time")
    @classmethod
    def validate_end_time(cls, v: time, info) -> time:
        start_time = info.data.get("start_time")
        if start_time and v == start_time:
            raise ValueError("end_time must differ from start_time")
        return v


class BookingCancelRequest(BaseModel):
    """Schema for cancelling a booking."""

    reason: str | None = Field(None, max_length=500)


class BookingExtendRequest(BaseModel):
    """New wall-clock end time for a checked-in booking."""

    new_end_time: time


class BookingResponse(BaseModel):
    """Schema for booking response. Amounts are in dollars."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    confirmation_code: str
    user_id: UUID
    workspace_id: UUID
    booking_type: str

    # Schedule
    booking_date: date
    start_time: time
    end_time: time
    duration_hours: Decimal
    attendees: int

    # Pricing
    subtotal: Decimal
    discount_amount: Decimal
    nft_discount_applied: bool
    processing_fee: Decimal
    total_price: Decimal

    # Status
    status: str
    payment_status: str
    special_requests: str | None = None

    # Usage
    check_in_time: datetime | None = None
    check_out_time: datetime | None = None
    actual_duration_hours: Decimal | None = None
    final_charge: Decimal | None = None

    cancelled_at: datetime | None = None
    created_at: datetime | None = None

    @field_validator(
        "subtotal", "discount_amount", "processing_fee", "total_price", "final_charge", mode="before"
    )
    @classmethod
    def amounts_in_dollars(cls, v):
        return cents_field_to_dollars(v)


class BookingListResponse(BaseModel):
    """Schema for paginated booking list."""

    bookings: list[BookingResponse]
    total: int
    page: int
    page_size: int


class MyBookingsSummary(BaseModel):
    total: int
    upcoming: int
    active: int
    past: int
    cancelled: int


class MyBookingsResponse(BaseModel):
    """A member's bookings grouped by where they are in the lifecycle."""

    upcoming: list[BookingResponse]
    active: list[BookingResponse]
    past: list[BookingResponse]
    cancelled: list[BookingResponse]
    summary: MyBookingsSummary


class BookingCreateResponse(BaseModel):
    """Newly created booking plus what the client needs to pay for it."""

    booking: BookingResponse
    client_secret: str | None = None


class BookingCancelResponse(BaseModel):
    booking: BookingResponse
    refund_amount: Decimal = Decimal("0.00")
    refund_id: str | None = None

    @field_validator("refund_amount", mode="before")
    @classmethod
    def refund_in_dollars(cls, v):
        return cents_field_to_dollars(v)


class BookingExtendResponse(BaseModel):
    """Extended booking and the payment covering the added hours."""

    booking: BookingResponse
    additional_hours: Decimal
    additional_charge: Decimal
    new_total: Decimal
    requires_additional_payment: bool
    payment_intent_id: str | None = None
    client_secret: str | None = None

    @field_validator("additional_charge", "new_total", mode="before")
    @classmethod
    def amounts_in_dollars(cls, v):
        return cents_field_to_dollars(v)


class CheckInResponse(BaseModel):
    booking: BookingResponse
    message: str


class ChargeSummary(BaseModel):
    """Reconciled charges, in dollars."""

    initial_charge: Decimal
    final_charge: Decimal
    refund_amount: Decimal
    overage_charge: Decimal

    @field_validator("initial_charge", "final_charge", "refund_amount", "overage_charge", mode="before")
    @classmethod
    def amounts_in_dollars(cls, v):
        return cents_field_to_dollars(v)


class CheckOutUsage(BaseModel):
    booked_hours: Decimal
    actual_hours: Decimal
    description: str


class CheckOutResponse(BaseModel):
    """Completed booking with its usage, charges and payment follow-up.

    ``payment_intent_id`` and ``amount_due`` name the payment the member
    still has to complete: the re-priced main payment of an unpaid
    booking, or the overage charge of a paid one.
    """

    booking: BookingResponse
    usage: CheckOutUsage
    charges: ChargeSummary
    requires_additional_payment: bool
    requires_refund: bool
    refund_id: str | None = None
    payment_intent_id: str | None = None
    payment_client_secret: str | None = None
    amount_due: Decimal = Decimal("0.00")
    payment_error: str | None = None

    @field_validator("amount_due", mode="before")
    @classmethod
    def amount_due_in_dollars(cls, v):
        return cents_field_to_dollars(v)


class CostEstimateUsage(BaseModel):
    booked_hours: Decimal
    hours_used: Decimal
    hours_remaining: Decimal
    is_overtime: bool


class CostEstimateResponse(BaseModel):
    """Live charge estimate for a checked-in booking."""

    booking_id: UUID
    is_checked_out: bool
    usage: CostEstimateUsage
    charges: ChargeSummary
    description: str
    message: str
