"""Integration tests for the ``seed_data`` management command."""

from io import StringIO

import pytest
from django.contrib.auth import get_user_model
from django.core.management import call_command

from modules.orders.models import Order
from modules.payments.models import Payment

pytestmark = pytest.mark.integration


def _seed(**options):
    out = StringIO()
    call_command("seed_data", stdout=out, **options)
    return out.getvalue()


def test_seed_creates_orders_in_every_state():
    output = _seed()

    user = get_user_model().objects.get(username="demo")
    assert user.check_password("demo12345")
    orders = Order.objects.alive().filter(owner=user)
    assert orders.count() == 5
    assert orders.filter(status="PENDING").count() == 1
    assert orders.filter(status="CONFIRMED").count() == 3
    assert orders.filter(status="CANCELLED").count() == 1
    assert sorted(Payment.objects.values_list("status", flat=True)) == [
        "FAILED",
        "SUCCESSFUL",
    ]
    assert "Seed completed" in output


def test_seed_is_skipped_when_demo_orders_exist():
    _seed()

    output = _seed()

    assert "skipping" in output
    assert Order.objects.count() == 5


def test_custom_username():
    _seed(username="qa", password="qa-pass-123")

    assert Order.objects.filter(owner__username="qa").count() == 5
