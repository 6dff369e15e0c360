"""Webhook endpoints for payment gateways."""

import logging

from fastapi import APIRouter, Header, HTTPException, Request, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import async_session_maker
from app.gateways.base import GatewayType
from app.models.booking import Booking, BookingCharge
from app.models.order import Order
from app.services.gateway_service import gateway_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/stripe", status_code=status.HTTP_200_OK)
async def stripe_webhook(
    request: Request,
    stripe_signature: str | None = Header(None, alias="Stripe-Signature"),
) -> dict:
    """Handle Stripe webhook events."""
    if not settings.stripe_secret_key or not settings.stripe_webhook_secret:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Stripe is not configured",
        )

    if not stripe_signature:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing signature",
        )

    # Get raw body for signature verification
    payload = await request.body()

    event = gateway_service.verify_webhook(payload, stripe_signature, GatewayType.STRIPE)
    if event is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid signature",
        )

    async with async_session_maker() as db:
        await handle_stripe_event(db, event)
        await db.commit()

    return {"received": True}


async def handle_stripe_event(db: AsyncSession, event: dict) -> None:
    """Process Stripe event and update booking/order payment status."""
    event_type = event["type"]
    data = event["data"]["object"]

    if event_type == "payment_intent.succeeded":
        await _handle_payment_succeeded(db, data)
    elif event_type == "payment_intent.payment_failed":
        logger.warning(f"Payment failed for intent {data['id']}")
    else:
        logger.debug(f"Ignoring Stripe event {event_type}")


async def _handle_payment_succeeded(db: AsyncSession, data: dict) -> None:
    """Mark the booking, booking charge or order behind a payment intent as paid."""
    payment_intent_id = data["id"]

    result = await db.execute(select(Booking).where(Booking.payment_intent_id == payment_intent_id))
    booking = result.scalar_one_or_none()
    if booking:
        if booking.status == "cancelled" or booking.payment_status != "pending":
            return
        booking.payment_status = "paid"
        if booking.status == "pending":
            booking.status = "confirmed"
        logger.info(f"Booking {booking.confirmation_code} paid via {payment_intent_id}")
        return

    result = await db.execute(
        select(BookingCharge).where(BookingCharge.payment_intent_id == payment_intent_id)
    )
    charge = result.scalar_one_or_none()
    if charge:
        if charge.payment_status != "pending":
            return
        charge.payment_status = "paid"
        logger.info(f"Booking {charge.booking_id} {charge.kind} charge paid via {payment_intent_id}")
        return

    result = await db.execute(select(Order).where(Order.payment_intent_id == payment_intent_id))
    order = result.scalar_one_or_none()
    if order:
        if order.status == "cancelled" or order.payment_status != "pending":
            return
        order.payment_status = "paid"
        logger.info(f"Order {order.id} paid via {payment_intent_id}")
        return

    logger.warning(f"No booking, charge or order for payment intent {payment_intent_id}")
