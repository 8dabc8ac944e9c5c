"""Simulated PayPal gateway.

The (case-insensitive) ``paypal_email`` drives deterministic outcomes:
containing ``success`` always succeeds, containing ``fail`` is always
declined.  Anything else succeeds with probability ``success_rate``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping

from modules.payments.dtos import PaymentResult
from modules.payments.gateways.base import PaymentGateway

if TYPE_CHECKING:
    from modules.orders.models import Order

VERIFICATION_REQUIRED_MESSAGE = "PayPal payment declined: account verification required"
NOT_PROCESSED_MESSAGE = "PayPal payment could not be processed. Please try again."


class PayPalGateway(PaymentGateway):
    name = "paypal"
    transaction_prefix = "PP"
    default_latency = 0.15
    success_rate = 0.85

    def charge(self, order: Order, payment_data: Mapping[str, Any]) -> PaymentResult:
        self.simulate_latency()

        email = str(payment_data.get("paypal_email") or "").lower()
        if "success" in email:
            return PaymentResult.successful(self.generate_transaction_id())
        if "fail" in email:
            return PaymentResult.failed(VERIFICATION_REQUIRED_MESSAGE)

        if self.rng.random() < self.success_rate:
            return PaymentResult.successful(self.generate_transaction_id())
        return PaymentResult.failed(NOT_PROCESSED_MESSAGE)
