"""Café order endpoints."""

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.api.deps import get_current_user, get_db
from app.core.exceptions import AuthorizationError, NotFoundError, PaymentError, ValidationError
from app.core.middleware import order_limiter
from app.core.permissions import AuthenticatedUser
from app.domain.cart import Cart, CartItem
from app.models.order import MenuItem, Order, OrderItem
from app.schemas.order import (
    OrderCalculateRequest,
    OrderCalculateResponse,
    OrderCreate,
    OrderCreateResponse,
    OrderItemRequest,
    OrderLine,
    OrderResponse,
)
from app.services.gateway_service import gateway_service

logger = logging.getLogger(__name__)

router = APIRouter()


async def build_cart(db: AsyncSession, items: list[OrderItemRequest]) -> Cart:
    """Price requested items from the menu.

    Raises:
        NotFoundError: An item is not on the menu
        ValidationError: An item is not currently orderable
    """
    menu_item_ids = {item.menu_item_id for item in items}
    result = await db.execute(select(MenuItem).where(MenuItem.id.in_(menu_item_ids)))
    menu = {menu_item.id: menu_item for menu_item in result.scalars().all()}

    cart = Cart()
    for item in items:
        menu_item = menu.get(item.menu_item_id)
        if not menu_item:
            raise NotFoundError("Menu item", str(item.menu_item_id))
        if not menu_item.orderable:
            raise ValidationError(f"{menu_item.title} is not available right now")
        cart = cart.add_item(
            CartItem(
                item_id=menu_item.id,
                unit_price=menu_item.price,
                quantity=item.quantity,
                name=menu_item.title,
                special_instructions=item.special_instructions,
            )
        )
    return cart


def _order_lines(cart: Cart) -> list[OrderLine]:
    return [
        OrderLine(
            menu_item_id=item.item_id,
            title=item.name or "",
            unit_price=item.unit_price,
            quantity=item.quantity,
            subtotal=item.unit_price * item.quantity,
            special_instructions=item.special_instructions,
        )
        for item in cart.items
    ]


@router.post("/calculate", response_model=OrderCalculateResponse)
async def calculate_order(
    request: OrderCalculateRequest,
    current_user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> OrderCalculateResponse:
    """Calculate cart totals without placing an order."""
    cart = await build_cart(db, request.items)
    totals = cart.totals(current_user.nft_holder)

    return OrderCalculateResponse(
        items=_order_lines(cart),
        item_count=cart.item_count,
        subtotal=totals.subtotal,
        discount_amount=totals.discount,
        total=totals.total,
        nft_discount_applied=totals.nft_discount_applied,
    )


@router.post(
    "/",
    response_model=OrderCreateResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(order_limiter)],
)
async def create_order(
    order_data: OrderCreate,
    current_user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> OrderCreateResponse:
    """Place a café order."""
    cart = await build_cart(db, order_data.items)
    totals = cart.totals(current_user.nft_holder)

    order = Order(
        user_id=current_user.id,
        subtotal=totals.subtotal,
        discount_amount=totals.discount,
        nft_discount_applied=totals.nft_discount_applied,
        total_price=totals.total,
        status="pending",
        payment_status="pending",
        special_instructions=order_data.special_instructions,
        items=[
            OrderItem(
                menu_item_id=item.item_id,
                quantity=item.quantity,
                unit_price=item.unit_price,
                subtotal=item.unit_price * item.quantity,
                special_instructions=item.special_instructions,
            )
            for item in cart.items
        ],
    )
    db.add(order)
    await db.flush()

    payment = await gateway_service.create_payment(
        amount=order.total_price,
        reference_id=str(order.id),
        description=f"Café order {order.id}",
        metadata={"order_id": str(order.id), "type": "order"},
    )
    if not payment.success:
        raise PaymentError(payment.error_message or "Could not create payment")
    order.payment_intent_id = payment.transaction_id
    await db.flush()

    order = await _load_order(db, order.id)
    logger.info(f"Order {order.id} placed: {cart.item_count} items, total={order.total_price}")
    return OrderCreateResponse(
        order=OrderResponse.model_validate(order),
        client_secret=payment.client_secret,
    )


async def _load_order(db: AsyncSession, order_id: UUID) -> Order | None:
    result = await db.execute(
        select(Order)
        .options(selectinload(Order.items))
        .where(Order.id == order_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: UUID,
    current_user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Order:
    """Get an order by ID (owner or staff)."""
    order = await _load_order(db, order_id)
    if not order:
        raise NotFoundError("Order", str(order_id))
    if not (current_user.is_staff or (order.user_id and current_user.owns(order.user_id))):
        raise AuthorizationError("You don't have permission to access this order")
    return order
