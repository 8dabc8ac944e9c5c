"""Unit tests for domain events: collection on aggregates and payload round trip."""

from __future__ import annotations

from uuid import uuid4

import pytest

from modules.core.outbox import serialize_event_payload
from modules.orders.events import OrderCreated
from modules.orders.models import Order
from modules.payments.events import PaymentProcessed
from shared.infrastructure.bus import InMemoryEventBus

pytestmark = pytest.mark.unit


def test_order_registers_and_clears_domain_events():
    order = Order(owner_id=1, order_number="ORD-TEST-000001")

    assert order.domain_events == []

    event = OrderCreated(aggregate_id=order.id)
    order.add_domain_event(event)

    assert order.domain_events == [event]
    assert event.event_name == "OrderCreated"

    order.clear_domain_events()
    assert order.domain_events == []


def test_event_is_rebuilt_from_its_outbox_payload():
    event = PaymentProcessed(
        aggregate_id=uuid4(),
        order_id=str(uuid4()),
        status="SUCCESSFUL",
        payment_method="credit_card",
        amount="150.00",
    )

    payload = serialize_event_payload(event)
    rebuilt = PaymentProcessed.from_payload(payload)

    assert payload["event_name"] == "PaymentProcessed"
    assert rebuilt == event


class TestInMemoryEventBus:
    def test_publish_calls_subscribed_handlers_once(self):
        bus = InMemoryEventBus()
        received = []

        class Recorder:
            def handle(self, event):
                received.append(event)

        handler = Recorder()
        bus.subscribe(OrderCreated, handler)
        bus.subscribe(OrderCreated, handler)

        event = OrderCreated(aggregate_id=uuid4())
        bus.publish(event)

        assert received == [event]

    def test_event_class_lookup_by_name(self):
        bus = InMemoryEventBus()
        bus.subscribe(OrderCreated, object())

        assert bus.event_class("OrderCreated") is OrderCreated
        assert bus.event_class("Unknown") is None
