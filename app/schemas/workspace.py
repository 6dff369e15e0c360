"""Workspace Pydantic schemas."""

from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

from app.utils.money import cents_field_to_dollars


class WorkspaceResponse(BaseModel):
    """Bookable desk or room. ``base_price_hourly`` is in dollars."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    type: str
    resource_category: str
    description: str | None = None
    capacity: int
    base_price_hourly: Decimal
    min_duration: Decimal
    max_duration: Decimal
    amenities: list | None = None
    available: bool
    floor_location: str | None = None

    @field_validator("base_price_hourly", mode="before")
    @classmethod
    def price_in_dollars(cls, v):
        return cents_field_to_dollars(v)


class WorkspaceListResponse(BaseModel):
    workspaces: list[WorkspaceResponse]
    total: int
    page: int
    page_size: int
