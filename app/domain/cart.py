"""Café cart aggregate.

A cart is an immutable value: every change returns a new cart, and
totals are computed from the items on demand. Persisting a cart between
visits is the client's concern.
"""

from dataclasses import dataclass, field, replace
from uuid import UUID

from app.domain.pricing import CartTotals, compute_cart_totals


@dataclass(frozen=True)
class CartItem:
    """Menu item in a cart, priced in cents."""

    item_id: UUID
    unit_price: int
    quantity: int = 1
    name: str | None = None
    special_instructions: str | None = None


@dataclass(frozen=True)
class Cart:
    items: tuple[CartItem, ...] = field(default_factory=tuple)

    def find(self, item_id: UUID) -> CartItem | None:
        return next((item for item in self.items if item.item_id == item_id), None)

    def add_item(self, item: CartItem) -> "Cart":
        """Add an item, merging quantities if it is already in the cart."""
        if item.quantity <= 0:
            raise ValueError("Quantity must be positive")
        existing = self.find(item.item_id)
        if existing is None:
            return Cart(items=self.items + (item,))
        merged = replace(existing, quantity=existing.quantity + item.quantity)
        return Cart(items=tuple(merged if i.item_id == item.item_id else i for i in self.items))

    def remove_item(self, item_id: UUID) -> "Cart":
        return Cart(items=tuple(i for i in self.items if i.item_id != item_id))

    def update_quantity(self, item_id: UUID, quantity: int) -> "Cart":
        """Set an item's quantity; zero or less removes it."""
        if quantity <= 0:
            return self.remove_item(item_id)
        return Cart(
            items=tuple(
                replace(i, quantity=quantity) if i.item_id == item_id else i for i in self.items
            )
        )

    def update_special_instructions(self, item_id: UUID, instructions: str | None) -> "Cart":
        return Cart(
            items=tuple(
                replace(i, special_instructions=instructions) if i.item_id == item_id else i
                for i in self.items
            )
        )

    def clear(self) -> "Cart":
        return Cart()

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def subtotal(self) -> int:
        return sum(item.unit_price * item.quantity for item in self.items)

    def totals(self, nft_holder: bool) -> CartTotals:
        return compute_cart_totals(self.items, nft_holder)
