"""Database models."""

from app.models.booking import Booking, BookingCharge
from app.models.order import MenuItem, Order, OrderItem
from app.models.user import User
from app.models.workspace import Workspace

__all__ = [
    # User
    "User",
    # Workspace
    "Workspace",
    # Booking
    "Booking",
    "BookingCharge",
    # Café
    "MenuItem",
    "Order",
    "OrderItem",
]
