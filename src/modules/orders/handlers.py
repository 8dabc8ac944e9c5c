"""Event handlers for Orders domain events."""

from __future__ import annotations

import structlog

from modules.orders.events import (
    OrderCancelled,
    OrderConfirmed,
    OrderCreated,
    OrderDeleted,
    OrderItemsReplaced,
)
from shared.domain.bus import IEventHandler
from shared.domain.events import DomainEvent

logger = structlog.get_logger(__name__)


class OrderLifecycleLogHandler(IEventHandler[DomainEvent]):
    """Logs every order lifecycle event delivered by the outbox dispatcher."""

    def handle(self, event: DomainEvent) -> None:
        logger.info(
            "order.event_handled",
            event_name=event.event_name,
            event_id=str(event.event_id),
            order_id=str(event.aggregate_id),
        )


ORDER_EVENTS = (
    OrderCreated,
    OrderItemsReplaced,
    OrderConfirmed,
    OrderCancelled,
    OrderDeleted,
)

order_lifecycle_handler = OrderLifecycleLogHandler()
