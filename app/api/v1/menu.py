"""Café menu endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, get_optional_user
from app.core.exceptions import ValidationError
from app.core.permissions import AuthenticatedUser
from app.domain.pricing import CAFE_NFT_DISCOUNT_RATE, calculate_nft_discount
from app.models.order import MenuItem
from app.schemas.order import MenuItemResponse
from app.utils.money import cents_to_dollars

router = APIRouter()

MENU_CATEGORIES = ("coffee", "tea", "pastries", "meals")


@router.get("/", response_model=list[MenuItemResponse])
async def list_menu_items(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[AuthenticatedUser | None, Depends(get_optional_user)],
    category: str | None = None,
    featured: bool | None = None,
    orderable: bool = True,
) -> list[MenuItemResponse]:
    """List menu items; signed-in NFT holders see their discounted price."""
    if category and category not in MENU_CATEGORIES:
        raise ValidationError(f"Invalid category. Must be one of: {', '.join(MENU_CATEGORIES)}")

    query = select(MenuItem).where(MenuItem.orderable == orderable)
    if category:
        query = query.where(MenuItem.category == category)
    if featured is not None:
        query = query.where(MenuItem.featured == featured)
    query = query.order_by(MenuItem.category, MenuItem.title)

    result = await db.execute(query)
    nft_holder = bool(current_user and current_user.nft_holder)

    items = []
    for menu_item in result.scalars().all():
        discount = calculate_nft_discount(menu_item.price, CAFE_NFT_DISCOUNT_RATE, nft_holder)
        item = MenuItemResponse.model_validate(menu_item)
        items.append(item.model_copy(update={"member_price": cents_to_dollars(menu_item.price - discount)}))
    return items
