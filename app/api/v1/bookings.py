"""Booking endpoints."""

import logging
from datetime import UTC, date, datetime, time, timedelta
from typing import Annotated
from uuid import UUID
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import (
    get_booking_lifecycle_service,
    get_current_user,
    get_db,
    get_now,
    require_staff,
)
from app.config import settings
from app.core.exceptions import (
    AuthorizationError,
    InvalidBookingStatus,
    NotFoundError,
    PaymentError,
    ValidationError,
)
from app.core.middleware import booking_action_limiter
from app.core.permissions import AuthenticatedUser
from app.domain.booking_state import assert_booking_transition
from app.domain.check_in_policy import booking_interval
from app.domain.pricing import (
    calculate_booking_estimate,
    calculate_duration_hours,
    validate_booking_duration,
)
from app.models.booking import Booking
from app.models.workspace import Workspace
from app.schemas.booking import (
    BookingCancelRequest,
    BookingCancelResponse,
    BookingCreate,
    BookingCreateResponse,
    BookingExtendRequest,
    BookingExtendResponse,
    BookingListResponse,
    BookingResponse,
    ChargeSummary,
    CheckInResponse,
    CheckOutResponse,
    CheckOutUsage,
    CostEstimateResponse,
    CostEstimateUsage,
    MyBookingsResponse,
    MyBookingsSummary,
)
from app.services.booking_lifecycle_service import BookingLifecycleService
from app.services.booking_payment_service import booking_payment_service
from app.services.gateway_service import gateway_service
from app.utils.booking_number import generate_confirmation_code

logger = logging.getLogger(__name__)

router = APIRouter()

BLOCKING_STATUSES = ("pending", "confirmed", "checked_in")


async def check_availability(
    db: AsyncSession,
    workspace_id: UUID,
    booking_date: date,
    start_time: time,
    end_time: time,
    exclude_booking_id: UUID | None = None,
) -> bool:
    """Check that no live booking of the workspace overlaps the requested slot."""
    tz = ZoneInfo(settings.site_timezone)
    requested_start, requested_end = booking_interval(booking_date, start_time, end_time, tz)

    # Bookings from the day before may run past midnight into this one
    query = select(Booking).where(
        Booking.workspace_id == workspace_id,
        Booking.booking_date >= booking_date - timedelta(days=1),
        Booking.booking_date <= booking_date + timedelta(days=1),
        Booking.status.in_(BLOCKING_STATUSES),
    )
    if exclude_booking_id:
        query = query.where(Booking.id != exclude_booking_id)

    result = await db.execute(query)
    for existing in result.scalars().all():
        existing_start, existing_end = booking_interval(
            existing.booking_date, existing.start_time, existing.end_time, tz
        )
        # (StartA < EndB) and (EndA > StartB)
        if requested_start < existing_end and requested_end > existing_start:
            return False
    return True


async def _get_booking_for_user(
    db: AsyncSession, booking_id: UUID, current_user: AuthenticatedUser
) -> Booking:
    result = await db.execute(select(Booking).where(Booking.id == booking_id))
    booking = result.scalar_one_or_none()
    if not booking:
        raise NotFoundError("Booking", str(booking_id))
    if not (current_user.is_staff or current_user.owns(booking.user_id)):
        raise AuthorizationError("You don't have permission to access this booking")
    return booking


@router.post(
    "/",
    response_model=BookingCreateResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(booking_action_limiter)],
)
async def create_booking(
    booking_data: BookingCreate,
    current_user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> BookingCreateResponse:
    """Create a new hourly booking."""
    # Get workspace
    result = await db.execute(select(Workspace).where(Workspace.id == booking_data.workspace_id))
    workspace = result.scalar_one_or_none()
    if not workspace:
        raise NotFoundError("Workspace", str(booking_data.workspace_id))
    if not workspace.available:
        raise ValidationError("Workspace is not available for booking")

    # Check capacity
    if booking_data.attendees > workspace.capacity:
        raise ValidationError(f"Maximum {workspace.capacity} attendees allowed")

    # Check duration bounds
    duration_hours = calculate_duration_hours(booking_data.start_time, booking_data.end_time)
    validate_booking_duration(duration_hours, workspace.min_duration, workspace.max_duration)

    # Check availability
    available = await check_availability(
        db,
        workspace.id,
        booking_data.booking_date,
        booking_data.start_time,
        booking_data.end_time,
    )
    if not available:
        raise ValidationError("Selected time slot is not available")

    # Calculate pricing
    estimate = calculate_booking_estimate(
        hourly_rate=workspace.base_price_hourly,
        duration_hours=duration_hours,
        nft_holder=current_user.nft_holder,
    )

    confirmation_code = await generate_confirmation_code(db)

    booking = Booking(
        confirmation_code=confirmation_code,
        user_id=current_user.id,
        workspace_id=workspace.id,
        booking_type="meeting-room" if workspace.resource_category == "meeting-room" else "hourly-desk",
        booking_date=booking_data.booking_date,
        start_time=booking_data.start_time,
        end_time=booking_data.end_time,
        duration_hours=duration_hours,
        attendees=booking_data.attendees,
        subtotal=estimate.subtotal,
        discount_amount=estimate.discount_amount,
        nft_discount_applied=estimate.nft_discount_applied,
        processing_fee=estimate.processing_fee,
        total_price=estimate.total_price,
        special_requests=booking_data.special_requests,
        status="pending",
        payment_status="pending",
    )
    db.add(booking)
    await db.flush()

    payment = await gateway_service.create_payment(
        amount=booking.total_price,
        reference_id=str(booking.id),
        description=f"{workspace.name} booking {confirmation_code}",
        metadata={"booking_id": str(booking.id), "type": "booking"},
    )
    if not payment.success:
        raise PaymentError(payment.error_message or "Could not create payment")
    booking.payment_intent_id = payment.transaction_id

    await db.flush()
    await db.refresh(booking)
    logger.info(
        f"Booking {confirmation_code} created for {workspace.name}: "
        f"{duration_hours}h, total={booking.total_price}"
    )
    return BookingCreateResponse(
        booking=BookingResponse.model_validate(booking),
        client_secret=payment.client_secret,
    )


@router.get("/", response_model=BookingListResponse)
async def list_bookings(
    staff: Annotated[AuthenticatedUser, Depends(require_staff)],
    db: Annotated[AsyncSession, Depends(get_db)],
    status_filter: str | None = Query(default=None, alias="status"),
    workspace_id: UUID | None = None,
    user_id: UUID | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100),
) -> BookingListResponse:
    """List all bookings with filters (staff only)."""
    query = select(Booking)
    if status_filter:
        query = query.where(Booking.status == status_filter)
    if workspace_id:
        query = query.where(Booking.workspace_id == workspace_id)
    if user_id:
        query = query.where(Booking.user_id == user_id)
    if start_date:
        query = query.where(Booking.booking_date >= start_date)
    if end_date:
        query = query.where(Booking.booking_date <= end_date)

    # Count
    count_result = await db.execute(select(func.count()).select_from(query.subquery()))
    total = count_result.scalar() or 0

    # Pagination
    offset = (page - 1) * page_size
    query = (
        query.order_by(Booking.booking_date.desc(), Booking.start_time.desc())
        .offset(offset)
        .limit(page_size)
    )
    result = await db.execute(query)

    return BookingListResponse(
        bookings=[BookingResponse.model_validate(b) for b in result.scalars().all()],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/mine", response_model=MyBookingsResponse)
async def list_my_bookings(
    current_user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    now: Annotated[datetime, Depends(get_now)],
    status_filter: str | None = Query(default=None, alias="status"),
    booking_type: str | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
) -> MyBookingsResponse:
    """List the caller's bookings grouped into upcoming, active, past and cancelled.

    Upcoming and past are judged against today's date at the site.
    """
    query = select(Booking).where(Booking.user_id == current_user.id)
    if status_filter:
        query = query.where(Booking.status == status_filter)
    if booking_type:
        query = query.where(Booking.booking_type == booking_type)
    if start_date:
        query = query.where(Booking.booking_date >= start_date)
    if end_date:
        query = query.where(Booking.booking_date <= end_date)
    query = query.order_by(Booking.booking_date.desc(), Booking.start_time.desc())

    result = await db.execute(query)
    today = now.astimezone(ZoneInfo(settings.site_timezone)).date()

    groups: dict[str, list[BookingResponse]] = {
        "upcoming": [],
        "active": [],
        "past": [],
        "cancelled": [],
    }
    for booking in result.scalars().all():
        if booking.status == "cancelled":
            group = "cancelled"
        elif booking.status == "checked_in":
            group = "active"
        elif booking.status == "completed" or booking.booking_date < today:
            group = "past"
        else:
            group = "upcoming"
        groups[group].append(BookingResponse.model_validate(booking))

    return MyBookingsResponse(
        **groups,
        summary=MyBookingsSummary(
            total=sum(len(bookings) for bookings in groups.values()),
            **{name: len(bookings) for name, bookings in groups.items()},
        ),
    )


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: UUID,
    current_user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Booking:
    """Get a booking by ID (owner or staff)."""
    return await _get_booking_for_user(db, booking_id, current_user)


@router.post(
    "/{booking_id}/check-in",
    response_model=CheckInResponse,
    dependencies=[Depends(booking_action_limiter)],
)
async def check_in_booking(
    booking_id: UUID,
    current_user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    service: Annotated[BookingLifecycleService, Depends(get_booking_lifecycle_service)],
    now: Annotated[datetime, Depends(get_now)],
) -> CheckInResponse:
    """Check in to a booking."""
    booking = await service.check_in(booking_id, current_user, now)
    return CheckInResponse(
        booking=BookingResponse.model_validate(booking),
        message="Successfully checked in",
    )


@router.post(
    "/{booking_id}/check-out",
    response_model=CheckOutResponse,
    dependencies=[Depends(booking_action_limiter)],
)
async def check_out_booking(
    booking_id: UUID,
    current_user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    service: Annotated[BookingLifecycleService, Depends(get_booking_lifecycle_service)],
    db: Annotated[AsyncSession, Depends(get_db)],
    now: Annotated[datetime, Depends(get_now)],
) -> CheckOutResponse:
    """Check out of a booking, then refund or charge the difference."""
    result = await service.check_out(booking_id, current_user, now)
    booking = result.booking
    pricing = result.pricing

    # The check-out itself is persisted; payment follow-up failures are reported, not raised
    follow_up = await booking_payment_service.settle_check_out(db, booking, pricing.final_charge)

    return CheckOutResponse(
        booking=BookingResponse.model_validate(booking),
        usage=CheckOutUsage(
            booked_hours=result.booked_hours,
            actual_hours=result.actual_hours,
            description=pricing.description,
        ),
        charges=ChargeSummary(
            initial_charge=result.initial_charge,
            final_charge=pricing.final_charge,
            refund_amount=pricing.refund_amount,
            overage_charge=pricing.overage_charge,
        ),
        requires_additional_payment=result.requires_additional_payment,
        requires_refund=result.requires_refund,
        refund_id=follow_up.refund_id,
        payment_intent_id=follow_up.payment_intent_id,
        payment_client_secret=follow_up.client_secret,
        amount_due=follow_up.amount_due,
        payment_error=follow_up.error,
    )


@router.get("/{booking_id}/calculate-cost", response_model=CostEstimateResponse)
async def calculate_current_cost(
    booking_id: UUID,
    current_user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    service: Annotated[BookingLifecycleService, Depends(get_booking_lifecycle_service)],
    now: Annotated[datetime, Depends(get_now)],
) -> CostEstimateResponse:
    """Estimate what check-out would charge right now."""
    estimate = await service.estimate_current_charge(booking_id, current_user, now)
    return CostEstimateResponse(
        booking_id=estimate.booking.id,
        is_checked_out=estimate.is_checked_out,
        usage=CostEstimateUsage(
            booked_hours=estimate.booked_hours,
            hours_used=estimate.hours_used,
            hours_remaining=estimate.hours_remaining,
            is_overtime=estimate.is_overtime,
        ),
        charges=ChargeSummary(
            initial_charge=estimate.initial_charge,
            final_charge=estimate.final_charge,
            refund_amount=estimate.refund_amount,
            overage_charge=estimate.overage_charge,
        ),
        description=estimate.description,
        message=estimate.message,
    )


@router.post(
    "/{booking_id}/extend",
    response_model=BookingExtendResponse,
    dependencies=[Depends(booking_action_limiter)],
)
async def extend_booking(
    booking_id: UUID,
    request: BookingExtendRequest,
    current_user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> BookingExtendResponse:
    """Move the end time of a checked-in booking later and charge for the added hours."""
    booking = await _get_booking_for_user(db, booking_id, current_user)
    if not current_user.owns(booking.user_id):
        raise AuthorizationError("You do not have permission to extend this booking")
    if booking.status != "checked_in" or booking.check_out_time is not None:
        raise InvalidBookingStatus(
            "Only a checked-in booking can be extended", current_status=booking.status
        )

    tz = ZoneInfo(settings.site_timezone)
    _, current_end = booking_interval(booking.booking_date, booking.start_time, booking.end_time, tz)
    _, new_end = booking_interval(booking.booking_date, booking.start_time, request.new_end_time, tz)
    if new_end <= current_end:
        raise ValidationError("New end time must be after the current end time")

    result = await db.execute(select(Workspace).where(Workspace.id == booking.workspace_id))
    workspace = result.scalar_one_or_none()
    if not workspace:
        raise NotFoundError("Workspace", str(booking.workspace_id))

    new_duration = calculate_duration_hours(booking.start_time, request.new_end_time)
    validate_booking_duration(new_duration, workspace.min_duration, workspace.max_duration)

    # Only the added slot has to be free; the booking itself is excluded
    available = await check_availability(
        db,
        workspace.id,
        current_end.date(),
        booking.end_time,
        request.new_end_time,
        exclude_booking_id=booking.id,
    )
    if not available:
        raise ValidationError("Selected time slot is not available")

    # Added hours are priced on their own at the workspace rate
    additional_hours = new_duration - booking.duration_hours
    extension = calculate_booking_estimate(
        hourly_rate=workspace.base_price_hourly,
        duration_hours=additional_hours,
        nft_holder=booking.nft_discount_applied,
    )

    booking.end_time = request.new_end_time
    booking.duration_hours = new_duration
    booking.subtotal += extension.subtotal
    booking.discount_amount += extension.discount_amount
    booking.processing_fee += extension.processing_fee
    booking.total_price += extension.total_price

    follow_up = await booking_payment_service.settle_extension(db, booking, extension.total_price)
    if follow_up.error:
        raise PaymentError(follow_up.error)
    await db.flush()

    logger.info(
        f"Booking {booking.confirmation_code} extended by {additional_hours}h "
        f"to {request.new_end_time}, total={booking.total_price}"
    )
    return BookingExtendResponse(
        booking=BookingResponse.model_validate(booking),
        additional_hours=additional_hours,
        additional_charge=extension.total_price,
        new_total=booking.total_price,
        requires_additional_payment=extension.total_price > 0,
        payment_intent_id=follow_up.payment_intent_id,
        client_secret=follow_up.client_secret,
    )


@router.post("/{booking_id}/cancel", response_model=BookingCancelResponse)
async def cancel_booking(
    booking_id: UUID,
    request: BookingCancelRequest,
    current_user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> BookingCancelResponse:
    """Cancel a booking that has not been checked in."""
    booking = await _get_booking_for_user(db, booking_id, current_user)

    assert_booking_transition(booking.status, "cancelled")

    refund_amount = 0
    refund_id = None
    if booking.payment_status == "paid" and booking.payment_intent_id:
        refund = await gateway_service.process_refund(
            transaction_id=booking.payment_intent_id,
            amount=booking.total_price,
            reason=request.reason or f"Booking {booking.confirmation_code} cancelled",
        )
        if not refund.success:
            raise PaymentError(refund.error_message or "Refund failed")
        refund_amount = booking.total_price
        refund_id = refund.refund_id
        booking.payment_status = "refunded"
    elif booking.payment_intent_id:
        cancelled = await gateway_service.cancel_payment(booking.payment_intent_id)
        if not cancelled.success:
            logger.warning(
                f"Open payment {booking.payment_intent_id} of cancelled booking "
                f"{booking.confirmation_code} could not be withdrawn: {cancelled.error_message}"
            )

    booking.status = "cancelled"
    booking.cancelled_at = datetime.now(UTC)
    await db.flush()

    logger.info(f"Booking {booking.confirmation_code} cancelled, refund={refund_amount}")
    return BookingCancelResponse(
        booking=BookingResponse.model_validate(booking),
        refund_amount=refund_amount,
        refund_id=refund_id,
    )
