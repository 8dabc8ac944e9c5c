from __future__ import annotations

import random
from decimal import Decimal

import pytest
from django.conf import settings
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from modules.orders.dtos import CreateOrderDTO, OrderItemDTO
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.payments.gateways.registry import build_registry
from modules.payments.repositories.django_repository import PaymentDjangoRepository
from modules.payments.services import PaymentService

# Card numbers / PayPal emails with deterministic gateway outcomes
APPROVED_CARD = "4111111111110000"
DECLINED_CARD = "4000000000009999"
APPROVED_PAYPAL = "buyer+success@example.com"
DECLINED_PAYPAL = "buyer+fail@example.com"


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


@pytest.fixture()
def user():
    return get_user_model().objects.create_user("alice", password="alice-pass-123")


@pytest.fixture()
def other_user():
    return get_user_model().objects.create_user("bob", password="bob-pass-123")


@pytest.fixture()
def auth_client(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture()
def other_client(other_user):
    client = APIClient()
    client.force_authenticate(user=other_user)
    return client


# ---------------------------------------------------------------------------
# Services wired with the Django repositories
# ---------------------------------------------------------------------------


@pytest.fixture()
def order_repository():
    return OrderDjangoRepository()


@pytest.fixture()
def payment_repository():
    return PaymentDjangoRepository()


@pytest.fixture()
def gateway_registry():
    """Registry from settings with a seeded RNG and no simulated latency."""
    return build_registry(
        settings.PAYMENT_GATEWAYS,
        settings.PAYMENT_GATEWAY_CONFIG,
        rng=random.Random(1234),
    )


@pytest.fixture()
def order_service(order_repository):
    return OrderService(order_repository=order_repository)


@pytest.fixture()
def payment_service(order_repository, payment_repository, gateway_registry):
    return PaymentService(
        order_repository=order_repository,
        payment_repository=payment_repository,
        registry=gateway_registry,
    )


# ---------------------------------------------------------------------------
# Order factories
# ---------------------------------------------------------------------------


def build_create_dto(owner_id: int, *items) -> CreateOrderDTO:
    """``items`` are ``(product_name, quantity, unit_price)`` tuples."""
    items = items or (("Widget", 2, "50.00"), ("Gadget", 1, "50.00"))
    return CreateOrderDTO(
        owner_id=owner_id,
        items=[
            OrderItemDTO(product_name=name, quantity=qty, unit_price=Decimal(price))
            for name, qty, price in items
        ],
    )


@pytest.fixture()
def make_order(order_service, user):
    """Create an order (default total 150.00) in the requested status."""

    def _make(status: str = "PENDING", owner=None, items=()):
        owner = owner or user
        order = order_service.create_order(build_create_dto(owner.id, *items))
        if status in ("CONFIRMED", "CANCELLED"):
            order = order_service.confirm_order(order.id, owner.id)
        if status == "CANCELLED":
            order = order_service.cancel_order(order.id, owner.id)
        return order

    return _make


@pytest.fixture()
def confirmed_order(make_order):
    return make_order("CONFIRMED")
