"""Event handlers for Payments domain events."""

from __future__ import annotations

import structlog

from modules.payments.events import PaymentProcessed
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class PaymentProcessedHandler(IEventHandler[PaymentProcessed]):
    def handle(self, event: PaymentProcessed) -> None:
        logger.info(
            "payment.event_handled",
            payment_id=str(event.aggregate_id),
            order_id=event.order_id,
            status=event.status,
            payment_method=event.payment_method,
        )


payment_processed_handler = PaymentProcessedHandler()
