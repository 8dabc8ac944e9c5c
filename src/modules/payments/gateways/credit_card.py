"""Simulated credit/debit card gateway.

Deterministic test cards (last four characters of ``card_number``):
``0000`` always succeeds, ``9999`` is always declined.  Any other card
succeeds with probability ``success_rate``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping

from modules.payments.constants import GATEWAY_FAULT_MESSAGE
from modules.payments.dtos import PaymentResult
from modules.payments.gateways.base import PaymentGateway

if TYPE_CHECKING:
    from modules.orders.models import Order

ALWAYS_APPROVED_SUFFIX = "0000"
ALWAYS_DECLINED_SUFFIX = "9999"
INSUFFICIENT_FUNDS_MESSAGE = "Card declined: insufficient funds"


class CreditCardGateway(PaymentGateway):
    name = "credit_card"
    transaction_prefix = "CC"
    default_latency = 0.1
    success_rate = 0.80

    def charge(self, order: Order, payment_data: Mapping[str, Any]) -> PaymentResult:
        self.simulate_latency()

        last_four = str(payment_data.get("card_number") or "")[-4:]
        if last_four == ALWAYS_APPROVED_SUFFIX:
            return PaymentResult.successful(self.generate_transaction_id())
        if last_four == ALWAYS_DECLINED_SUFFIX:
            return PaymentResult.failed(INSUFFICIENT_FUNDS_MESSAGE)

        if self.rng.random() < self.success_rate:
            return PaymentResult.successful(self.generate_transaction_id())
        return PaymentResult.failed(GATEWAY_FAULT_MESSAGE)
