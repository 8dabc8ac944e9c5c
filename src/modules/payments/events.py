"""Domain events for the Payments bounded context."""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class PaymentProcessed(DomainEvent):
    """Raised once a gateway outcome has been persisted for an order.

    ``aggregate_id`` is the payment id.
    """

    order_id: str = ""
    status: str = ""
    payment_method: str = ""
    amount: str = ""
