"""Café cart aggregate tests."""

import uuid

import pytest

from app.domain.cart import Cart, CartItem

LATTE = uuid.uuid4()
CROISSANT = uuid.uuid4()


def latte(quantity=1):
    return CartItem(item_id=LATTE, unit_price=450, quantity=quantity, name="Latte")


def croissant(quantity=1):
    return CartItem(item_id=CROISSANT, unit_price=400, quantity=quantity, name="Croissant")


class TestCartMutations:
    def test_add_returns_new_cart(self):
        empty = Cart()
        cart = empty.add_item(latte())
        assert empty.items == ()
        assert cart.item_count == 1

    def test_add_existing_item_merges_quantity(self):
        cart = Cart().add_item(latte(2)).add_item(latte(1))
        assert len(cart.items) == 1
        assert cart.find(LATTE).quantity == 3

    def test_add_rejects_non_positive_quantity(self):
        with pytest.raises(ValueError):
            Cart().add_item(latte(0))

    def test_remove_item(self):
        cart = Cart().add_item(latte()).add_item(croissant()).remove_item(LATTE)
        assert cart.find(LATTE) is None
        assert cart.item_count == 1

    def test_update_quantity(self):
        cart = Cart().add_item(latte()).update_quantity(LATTE, 4)
        assert cart.find(LATTE).quantity == 4

    @pytest.mark.parametrize("quantity", [0, -2])
    def test_update_quantity_to_zero_removes(self, quantity):
        cart = Cart().add_item(latte()).update_quantity(LATTE, quantity)
        assert cart.items == ()

    def test_update_special_instructions(self):
        cart = Cart().add_item(latte()).update_special_instructions(LATTE, "oat milk")
        assert cart.find(LATTE).special_instructions == "oat milk"

    def test_clear(self):
        assert Cart().add_item(latte()).add_item(croissant()).clear().items == ()


class TestCartTotals:
    def test_subtotal(self):
        cart = Cart().add_item(latte(2)).add_item(croissant())
        assert cart.subtotal == 1300

    def test_discount_follows_current_items(self):
        cart = Cart().add_item(latte(2)).add_item(croissant())
        assert cart.totals(nft_holder=True).discount == 130

        cart = cart.remove_item(CROISSANT)
        totals = cart.totals(nft_holder=True)
        assert totals.subtotal == 900
        assert totals.discount == 90
        assert totals.total == 810

    def test_non_holder_has_no_discount(self):
        totals = Cart().add_item(latte()).totals(nft_holder=False)
        assert totals.discount == 0
        assert totals.total == 450
