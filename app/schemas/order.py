"""Café menu and order Pydantic schemas. Amounts are in dollars."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.utils.money import cents_field_to_dollars


class MenuItemResponse(BaseModel):
    """Menu entry; ``member_price`` is what the caller pays after any loyalty discount."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    description: str | None = None
    price: Decimal
    member_price: Decimal | None = None
    category: str
    dietary_tags: list[str] | None = None
    orderable: bool
    featured: bool

    @field_validator("price", "member_price", mode="before")
    @classmethod
    def amounts_in_dollars(cls, v):
        return cents_field_to_dollars(v)


class OrderItemRequest(BaseModel):
    """A menu item and quantity; prices are always read from the menu."""

    menu_item_id: UUID
    quantity: int = Field(default=1, ge=1, le=99)
    special_instructions: str | None = Field(None, max_length=500)


class OrderCalculateRequest(BaseModel):
    items: list[OrderItemRequest] = Field(..., min_length=1)


class OrderCreate(OrderCalculateRequest):
    special_instructions: str | None = Field(None, max_length=1000)


class OrderLine(BaseModel):
    menu_item_id: UUID
    title: str
    unit_price: Decimal
    quantity: int
    subtotal: Decimal
    special_instructions: str | None = None

    @field_validator("unit_price", "subtotal", mode="before")
    @classmethod
    def amounts_in_dollars(cls, v):
        return cents_field_to_dollars(v)


class OrderCalculateResponse(BaseModel):
    """Cart totals with the loyalty discount applied."""

    items: list[OrderLine]
    item_count: int
    subtotal: Decimal
    discount_amount: Decimal
    total: Decimal
    nft_discount_applied: bool

    @field_validator("subtotal", "discount_amount", "total", mode="before")
    @classmethod
    def amounts_in_dollars(cls, v):
        return cents_field_to_dollars(v)


class OrderItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    menu_item_id: UUID | None = None
    quantity: int
    unit_price: Decimal
    subtotal: Decimal
    special_instructions: str | None = None

    @field_validator("unit_price", "subtotal", mode="before")
    @classmethod
    def amounts_in_dollars(cls, v):
        return cents_field_to_dollars(v)


class OrderResponse(BaseModel):
    """Schema for order response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID | None = None
    subtotal: Decimal
    discount_amount: Decimal
    nft_discount_applied: bool
    total_price: Decimal
    status: str
    payment_status: str
    special_instructions: str | None = None
    items: list[OrderItemResponse] = []
    created_at: datetime | None = None

    @field_validator("subtotal", "discount_amount", "total_price", mode="before")
    @classmethod
    def amounts_in_dollars(cls, v):
        return cents_field_to_dollars(v)


class OrderCreateResponse(BaseModel):
    order: OrderResponse
    client_secret: str | None = None
