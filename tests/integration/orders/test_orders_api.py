"""Integration tests for the order endpoints.

Covers:
- 201 creation with server-computed totals, 400 on invalid payloads.
- PUT item replacement, DELETE, confirm / cancel via PATCH and POST.
- Error mapping: 404 missing, 403 foreign, 422 invalid transition,
  409 delete with payment.
- Nested ``payment`` (null until paid) and GET /orders/{id}/payment/.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.orders.constants import (
    CANCEL_NOT_ALLOWED_MESSAGE,
    CONFIRM_NOT_ALLOWED_MESSAGE,
    DELETE_NOT_ALLOWED_MESSAGE,
    OrderStatus,
)
from modules.orders.models import Order
from modules.payments.models import Payment

pytestmark = pytest.mark.integration

ORDERS_URL = "/api/v1/orders/"
MISSING_ID = "0190c8a0-0000-7000-8000-000000000000"

VALID_PAYLOAD = {
    "items": [
        {"product_name": "Widget", "quantity": 2, "unit_price": "50.00"},
        {"product_name": "Gadget", "quantity": 1, "unit_price": "50.00"},
    ]
}


def _detail_url(order_id, suffix: str = "") -> str:
    return f"{ORDERS_URL}{order_id}/{suffix}"


def _pay(order, status="SUCCESSFUL"):
    return Payment.objects.create(
        order_id=order.id,
        status=status,
        payment_method="credit_card",
        amount=order.total_amount,
        transaction_id="CC_FIXTURE_1" if status == "SUCCESSFUL" else None,
    )


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------


class TestCreateOrderEndpoint:
    def test_create_order_returns_201(self, auth_client, user):
        response = auth_client.post(ORDERS_URL, VALID_PAYLOAD, format="json")

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == OrderStatus.PENDING
        assert Decimal(data["total_amount"]) == Decimal("150.00")
        assert data["owner_id"] == user.id
        assert data["payment"] is None
        assert data["order_number"].startswith("ORD-")
        assert [Decimal(i["subtotal"]) for i in data["items"]] == [
            Decimal("100.00"),
            Decimal("50.00"),
        ]
        assert len(data["status_history"]) == 1

    def test_client_supplied_total_and_status_are_ignored(self, auth_client):
        payload = {**VALID_PAYLOAD, "total_amount": "1.00", "status": "CONFIRMED"}

        response = auth_client.post(ORDERS_URL, payload, format="json")

        assert response.status_code == 201
        assert response.json()["status"] == OrderStatus.PENDING
        assert Decimal(response.json()["total_amount"]) == Decimal("150.00")

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"items": []},
            {"items": [{"product_name": "Widget", "quantity": 0, "unit_price": "1.00"}]},
            {"items": [{"product_name": "Widget", "quantity": 1, "unit_price": "0.00"}]},
            {"items": [{"product_name": "Widget", "quantity": 1, "unit_price": "1.001"}]},
            {"items": [{"product_name": "", "quantity": 1, "unit_price": "1.00"}]},
            {"items": [{"product_name": "x" * 256, "quantity": 1, "unit_price": "1.00"}]},
        ],
    )
    def test_invalid_payload_returns_400(self, auth_client, payload):
        response = auth_client.post(ORDERS_URL, payload, format="json")

        assert response.status_code == 400
        assert Order.objects.count() == 0

    @pytest.mark.parametrize(
        "items, message",
        [
            (
                [{"product_name": "X", "quantity": 1000000, "unit_price": "99999999.99"}],
                "Item subtotal must not exceed 99999999.99",
            ),
            (
                [
                    {"product_name": "X", "quantity": 1, "unit_price": "60000000.00"},
                    {"product_name": "Y", "quantity": 1, "unit_price": "60000000.00"},
                ],
                "Order total must not exceed 99999999.99",
            ),
        ],
    )
    def test_amount_too_large_for_storage_returns_400(
        self, auth_client, items, message
    ):
        response = auth_client.post(ORDERS_URL, {"items": items}, format="json")

        assert response.status_code == 400
        assert any(message in error for error in response.json()["items"])
        assert Order.objects.count() == 0

    def test_quantity_too_large_for_storage_returns_400(self, auth_client):
        payload = {
            "items": [
                {"product_name": "X", "quantity": 2_147_483_648, "unit_price": "0.01"}
            ]
        }

        response = auth_client.post(ORDERS_URL, payload, format="json")

        assert response.status_code == 400
        assert "quantity" in response.json()["items"][0]

    def test_unauthenticated_request_is_rejected(self, api_client):
        response = api_client.post(ORDERS_URL, VALID_PAYLOAD, format="json")
        assert response.status_code == 401


# ---------------------------------------------------------------------------
# Read
# ---------------------------------------------------------------------------


class TestReadOrderEndpoints:
    def test_retrieve_own_order(self, auth_client, make_order):
        order = make_order()

        response = auth_client.get(_detail_url(order.id))

        assert response.status_code == 200
        assert response.json()["id"] == str(order.id)
        assert response.json()["payment"] is None

    def test_retrieve_foreign_order_is_forbidden(self, other_client, make_order):
        response = other_client.get(_detail_url(make_order().id))

        assert response.status_code == 403
        assert "detail" in response.json()

    @pytest.mark.parametrize("order_id", [MISSING_ID, "not-a-uuid"])
    def test_retrieve_missing_order(self, auth_client, order_id):
        response = auth_client.get(_detail_url(order_id))

        assert response.status_code == 404
        assert "detail" in response.json()

    def test_paid_order_embeds_payment(self, auth_client, confirmed_order):
        payment = _pay(confirmed_order)

        data = auth_client.get(_detail_url(confirmed_order.id)).json()

        assert data["payment"]["id"] == str(payment.id)
        assert data["payment"]["status"] == "SUCCESSFUL"
        assert data["payment"]["transaction_id"] == "CC_FIXTURE_1"

    def test_list_only_shows_own_orders(self, auth_client, make_order, other_user):
        mine = make_order()
        make_order(owner=other_user)

        data = auth_client.get(ORDERS_URL).json()

        assert data["count"] == 1
        assert data["results"][0]["id"] == str(mine.id)
        assert data["results"][0]["payment"] is None


# ---------------------------------------------------------------------------
# Replace items / delete
# ---------------------------------------------------------------------------


class TestUpdateOrderEndpoint:
    def test_put_replaces_items(self, auth_client, make_order):
        order = make_order()
        payload = {"items": [{"product_name": "Lamp", "quantity": 3, "unit_price": "9.99"}]}

        response = auth_client.put(_detail_url(order.id), payload, format="json")

        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["total_amount"]) == Decimal("29.97")
        assert [i["product_name"] for i in data["items"]] == ["Lamp"]

    def test_put_on_cancelled_order_returns_422(self, auth_client, make_order):
        order = make_order("CANCELLED")

        response = auth_client.put(_detail_url(order.id), VALID_PAYLOAD, format="json")

        assert response.status_code == 422

    def test_put_on_paid_order_returns_422(self, auth_client, confirmed_order):
        _pay(confirmed_order, "FAILED")

        response = auth_client.put(
            _detail_url(confirmed_order.id), VALID_PAYLOAD, format="json"
        )

        assert response.status_code == 422

    def test_put_with_empty_items_returns_400(self, auth_client, make_order):
        response = auth_client.put(
            _detail_url(make_order().id), {"items": []}, format="json"
        )
        assert response.status_code == 400

    def test_put_with_total_too_large_returns_400(self, auth_client, make_order):
        order = make_order()
        payload = {
            "items": [
                {"product_name": "X", "quantity": 2, "unit_price": "99999999.99"}
            ]
        }

        response = auth_client.put(_detail_url(order.id), payload, format="json")

        assert response.status_code == 400
        assert "items" in response.json()
        order.refresh_from_db()
        assert order.total_amount == Decimal("150.00")

    def test_put_on_foreign_order_returns_403(self, other_client, make_order):
        response = other_client.put(
            _detail_url(make_order().id), VALID_PAYLOAD, format="json"
        )
        assert response.status_code == 403


class TestDeleteOrderEndpoint:
    def test_delete_returns_204(self, auth_client, make_order):
        order = make_order()

        response = auth_client.delete(_detail_url(order.id))

        assert response.status_code == 204
        assert auth_client.get(_detail_url(order.id)).status_code == 404

    def test_delete_paid_order_returns_409(self, auth_client, confirmed_order):
        _pay(confirmed_order)

        response = auth_client.delete(_detail_url(confirmed_order.id))

        assert response.status_code == 409
        assert response.json() == {"detail": DELETE_NOT_ALLOWED_MESSAGE}

    def test_delete_foreign_order_returns_403(self, other_client, make_order):
        order = make_order()

        response = other_client.delete(_detail_url(order.id))

        assert response.status_code == 403
        assert Order.objects.alive().filter(id=order.id).exists()


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------


class TestTransitionEndpoints:
    @pytest.mark.parametrize("method", ["patch", "post"])
    def test_confirm(self, auth_client, make_order, method):
        order = make_order()

        response = getattr(auth_client, method)(_detail_url(order.id, "confirm/"))

        assert response.status_code == 200
        assert response.json()["status"] == OrderStatus.CONFIRMED

    @pytest.mark.parametrize("method", ["patch", "post"])
    def test_cancel(self, auth_client, make_order, method):
        order = make_order("CONFIRMED")

        response = getattr(auth_client, method)(
            _detail_url(order.id, "cancel/"), {"notes": "Out of budget"}, format="json"
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == OrderStatus.CANCELLED
        assert "Out of budget" in [h["notes"] for h in data["status_history"]]

    def test_confirm_twice_returns_422(self, auth_client, confirmed_order):
        response = auth_client.patch(_detail_url(confirmed_order.id, "confirm/"))

        assert response.status_code == 422
        assert response.json() == {"detail": CONFIRM_NOT_ALLOWED_MESSAGE}

    def test_cancel_paid_order_returns_422(self, auth_client, confirmed_order):
        _pay(confirmed_order)

        response = auth_client.patch(_detail_url(confirmed_order.id, "cancel/"))

        assert response.status_code == 422
        assert response.json() == {"detail": CANCEL_NOT_ALLOWED_MESSAGE}
        confirmed_order.refresh_from_db()
        assert confirmed_order.status == OrderStatus.CONFIRMED

    def test_confirm_foreign_order_returns_403(self, other_client, make_order):
        response = other_client.patch(_detail_url(make_order().id, "confirm/"))
        assert response.status_code == 403

    def test_cancel_missing_order_returns_404(self, auth_client):
        response = auth_client.post(_detail_url(MISSING_ID, "cancel/"))
        assert response.status_code == 404


# ---------------------------------------------------------------------------
# Payment of an order
# ---------------------------------------------------------------------------


class TestOrderPaymentEndpoint:
    def test_payment_of_paid_order(self, auth_client, confirmed_order):
        payment = _pay(confirmed_order)

        response = auth_client.get(_detail_url(confirmed_order.id, "payment/"))

        assert response.status_code == 200
        assert response.json()["id"] == str(payment.id)
        assert response.json()["order_id"] == str(confirmed_order.id)

    def test_unpaid_order_returns_404(self, auth_client, confirmed_order):
        response = auth_client.get(_detail_url(confirmed_order.id, "payment/"))

        assert response.status_code == 404
        assert response.json() == {"detail": "No payment found for this order."}

    def test_foreign_order_returns_403(self, other_client, confirmed_order):
        _pay(confirmed_order)

        response = other_client.get(_detail_url(confirmed_order.id, "payment/"))

        assert response.status_code == 403
