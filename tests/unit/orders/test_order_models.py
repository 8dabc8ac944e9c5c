"""Unit tests for Order / OrderItem models.

Covers order number generation, subtotal computation, DB constraints,
soft delete and the state machine helpers.
"""

from __future__ import annotations

import re
from decimal import Decimal

import pytest
from django.db import IntegrityError, transaction

from modules.orders.constants import TERMINAL_STATES, VALID_TRANSITIONS, OrderStatus
from modules.orders.models import Order, OrderItem

pytestmark = pytest.mark.unit


@pytest.fixture()
def order(user):
    return Order.objects.create(owner=user)


class TestOrderModel:
    def test_order_number_generated_on_first_save(self, order):
        assert re.fullmatch(r"ORD-\d{8}-[0-9A-F]{6}", order.order_number)

    def test_order_number_is_kept_on_resave(self, order):
        number = order.order_number
        order.save()
        assert order.order_number == number

    def test_defaults(self, order):
        assert order.status == OrderStatus.PENDING
        assert order.total_amount == Decimal("0.00")
        assert order.id.version == 7

    def test_is_owned_by(self, order, user, other_user):
        assert order.is_owned_by(user.id)
        assert order.is_owned_by(str(user.id))
        assert not order.is_owned_by(other_user.id)

    def test_soft_delete_hides_order(self, order):
        deleted, _ = order.delete()

        assert deleted == 1
        assert order.is_deleted
        assert not Order.objects.alive().filter(id=order.id).exists()
        assert Order.objects.filter(id=order.id).exists()

    def test_second_soft_delete_is_noop(self, order):
        order.delete()
        assert order.delete() == (0, {})


class TestOrderItemModel:
    def test_subtotal_computed_on_save(self, order):
        item = OrderItem.objects.create(
            order=order, product_name="Widget", quantity=3, unit_price=Decimal("0.10")
        )
        assert item.subtotal == Decimal("0.30")

    def test_subtotal_recomputed_when_quantity_changes(self, order):
        item = OrderItem.objects.create(
            order=order, product_name="Widget", quantity=1, unit_price=Decimal("5.00")
        )
        item.quantity = 4
        item.save()
        item.refresh_from_db()
        assert item.subtotal == Decimal("20.00")

    def test_quantity_constraint(self, order):
        item = OrderItem(
            order=order, product_name="Widget", quantity=1, unit_price=Decimal("1.00")
        )
        item.save()
        with pytest.raises(IntegrityError), transaction.atomic():
            OrderItem.objects.filter(id=item.id).update(quantity=0)

    def test_unit_price_constraint(self, order):
        item = OrderItem.objects.create(
            order=order, product_name="Widget", quantity=1, unit_price=Decimal("1.00")
        )
        with pytest.raises(IntegrityError), transaction.atomic():
            OrderItem.objects.filter(id=item.id).update(unit_price=Decimal("0.00"))


class TestStateMachineHelpers:
    def test_transition_table(self):
        assert VALID_TRANSITIONS[OrderStatus.PENDING] == {
            OrderStatus.CONFIRMED,
            OrderStatus.CANCELLED,
        }
        assert VALID_TRANSITIONS[OrderStatus.CONFIRMED] == {OrderStatus.CANCELLED}
        assert VALID_TRANSITIONS[OrderStatus.CANCELLED] == set()
        assert TERMINAL_STATES == {OrderStatus.CANCELLED}

    @pytest.mark.parametrize(
        "current, target, allowed",
        [
            (OrderStatus.PENDING, OrderStatus.CONFIRMED, True),
            (OrderStatus.PENDING, OrderStatus.CANCELLED, True),
            (OrderStatus.CONFIRMED, OrderStatus.CANCELLED, True),
            (OrderStatus.CONFIRMED, OrderStatus.PENDING, False),
            (OrderStatus.CONFIRMED, OrderStatus.CONFIRMED, False),
            (OrderStatus.CANCELLED, OrderStatus.PENDING, False),
            (OrderStatus.CANCELLED, OrderStatus.CONFIRMED, False),
        ],
    )
    def test_can_transition_to(self, current, target, allowed):
        order = Order(owner_id=1, status=current)
        assert order.can_transition_to(target) is allowed

    def test_is_terminal(self):
        assert Order(owner_id=1, status=OrderStatus.CANCELLED).is_terminal
        assert not Order(owner_id=1, status=OrderStatus.CONFIRMED).is_terminal
