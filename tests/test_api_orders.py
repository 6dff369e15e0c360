"""Café menu and order endpoints."""

import uuid

import pytest

from app.core.permissions import AuthenticatedUser
from app.core.security import create_user_token
from app.models.order import Order
from conftest import act_as, make_menu_item


@pytest.fixture
def menu(session):
    items = {
        "latte": make_menu_item("Latte", 450, featured=True),
        "croissant": make_menu_item("Croissant", 375, category="pastries"),
        "green_tea": make_menu_item("Green Tea", 300, category="tea"),
        "soup": make_menu_item("Soup of the Day", 800, category="meals", orderable=False),
    }
    session.add_all(items.values())
    return items


def line(item, quantity=1, **extra):
    return {"menu_item_id": str(item.id), "quantity": quantity, **extra}


class TestMenu:
    def test_lists_orderable_items(self, client, menu):
        response = client.get("/api/v1/menu/")
        assert response.status_code == 200
        titles = {item["title"] for item in response.json()}
        assert titles == {"Latte", "Croissant", "Green Tea"}

    def test_category_filter(self, client, menu):
        body = client.get("/api/v1/menu/", params={"category": "pastries"}).json()
        assert [item["title"] for item in body] == ["Croissant"]
        assert body[0]["price"] == "3.75"

    def test_featured_filter(self, client, menu):
        body = client.get("/api/v1/menu/", params={"featured": True}).json()
        assert [item["title"] for item in body] == ["Latte"]

    def test_unknown_category(self, client, menu):
        response = client.get("/api/v1/menu/", params={"category": "cocktails"})
        assert response.status_code == 422
        assert response.json() == {
            "detail": "Invalid category. Must be one of: coffee, tea, pastries, meals",
            "code": "validation_error",
        }

    def test_anonymous_sees_list_price(self, client, menu):
        body = client.get("/api/v1/menu/", params={"category": "coffee"}).json()
        assert body[0]["member_price"] == "4.50"

    def test_nft_holder_sees_member_price(self, client, menu):
        token = create_user_token(str(uuid.uuid4()), None, "user", True)
        body = client.get(
            "/api/v1/menu/",
            params={"category": "coffee"},
            headers={"Authorization": f"Bearer {token}"},
        ).json()
        assert body[0]["price"] == "4.50"
        assert body[0]["member_price"] == "4.05"


class TestCalculateOrder:
    def test_totals_in_dollars(self, client, menu):
        request = {"items": [line(menu["latte"], 2), line(menu["croissant"])]}
        response = client.post("/api/v1/orders/calculate", json=request)
        assert response.status_code == 200
        body = response.json()
        assert body["item_count"] == 3
        assert body["subtotal"] == "12.75"
        assert body["discount_amount"] == "0.00"
        assert body["total"] == "12.75"
        assert body["nft_discount_applied"] is False
        assert body["items"][0]["unit_price"] == "4.50"
        assert body["items"][0]["subtotal"] == "9.00"

    def test_nft_holder_discount(self, client, user, menu):
        act_as(AuthenticatedUser(id=user.id, nft_holder=True))
        request = {"items": [line(menu["latte"], 2), line(menu["croissant"])]}
        body = client.post("/api/v1/orders/calculate", json=request).json()
        assert body["discount_amount"] == "1.28"
        assert body["total"] == "11.47"
        assert body["nft_discount_applied"] is True

    def test_unknown_item(self, client, menu):
        request = {"items": [{"menu_item_id": str(uuid.uuid4()), "quantity": 1}]}
        response = client.post("/api/v1/orders/calculate", json=request)
        assert response.status_code == 404
        assert response.json()["code"] == "not_found"

    def test_item_not_orderable(self, client, menu):
        response = client.post("/api/v1/orders/calculate", json={"items": [line(menu["soup"])]})
        assert response.status_code == 422
        assert response.json()["detail"] == "Soup of the Day is not available right now"

    def test_empty_cart_rejected(self, client, menu):
        response = client.post("/api/v1/orders/calculate", json={"items": []})
        assert response.status_code == 422


class TestCreateOrder:
    def test_places_order_with_payment(self, client, user, session, menu):
        request = {
            "items": [line(menu["latte"], 2, special_instructions="oat milk"), line(menu["croissant"])],
            "special_instructions": "Table 4",
        }
        response = client.post("/api/v1/orders/", json=request)
        assert response.status_code == 201

        [order] = session.rows(Order)
        body = response.json()["order"]
        assert body["id"] == str(order.id)
        assert body["user_id"] == str(user.id)
        assert body["total_price"] == "12.75"
        assert body["status"] == "pending"
        assert len(body["items"]) == 2
        assert order.total_price == 1275
        assert order.payment_intent_id == f"manual_{order.id}"
        assert {item.special_instructions for item in order.items} == {"oat milk", None}

    def test_prices_come_from_menu(self, client, session, menu):
        request = {"items": [{**line(menu["latte"]), "unit_price": 1}]}
        client.post("/api/v1/orders/", json=request)
        [order] = session.rows(Order)
        assert order.items[0].unit_price == 450

    def test_unavailable_item_places_nothing(self, client, session, menu):
        request = {"items": [line(menu["latte"]), line(menu["soup"])]}
        response = client.post("/api/v1/orders/", json=request)
        assert response.status_code == 422
        assert session.rows(Order) == []


class TestGetOrder:
    @pytest.fixture
    def order(self, client, menu, session):
        client.post("/api/v1/orders/", json={"items": [line(menu["latte"])]})
        [order] = session.rows(Order)
        return order

    def test_owner(self, client, order):
        response = client.get(f"/api/v1/orders/{order.id}")
        assert response.status_code == 200
        assert response.json()["total_price"] == "4.50"

    def test_staff(self, client, order, staff_user):
        act_as(staff_user)
        assert client.get(f"/api/v1/orders/{order.id}").status_code == 200

    def test_other_member(self, client, order, other_user):
        act_as(other_user)
        response = client.get(f"/api/v1/orders/{order.id}")
        assert response.status_code == 403
        assert response.json()["code"] == "forbidden"

    def test_unknown_order(self, client):
        response = client.get(f"/api/v1/orders/{uuid.uuid4()}")
        assert response.status_code == 404
