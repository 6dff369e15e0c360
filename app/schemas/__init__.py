"""Pydantic schemas for API validation."""

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
    CostEstimateResponse,
    MyBookingsResponse,
)
from app.schemas.order import (
    MenuItemResponse,
    OrderCalculateRequest,
    OrderCalculateResponse,
    OrderCreate,
    OrderCreateResponse,
    OrderItemRequest,
    OrderResponse,
)
from app.schemas.workspace import WorkspaceListResponse, WorkspaceResponse

__all__ = [
    # Booking
    "BookingCreate",
    "BookingCreateResponse",
    "BookingExtendRequest",
    "BookingExtendResponse",
    "BookingListResponse",
    "BookingResponse",
    "BookingCancelRequest",
    "BookingCancelResponse",
    "ChargeSummary",
    "CheckInResponse",
    "CheckOutResponse",
    "CostEstimateResponse",
    "MyBookingsResponse",
    # Workspace
    "WorkspaceListResponse",
    "WorkspaceResponse",
    # Café
    "MenuItemResponse",
    "OrderItemRequest",
    "OrderCalculateRequest",
    "OrderCalculateResponse",
    "OrderCreate",
    "OrderCreateResponse",
    "OrderResponse",
]
