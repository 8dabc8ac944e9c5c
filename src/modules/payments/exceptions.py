"""Payment domain exceptions.

Raised by the Service Layer and the gateway registry.  The API layer
(Views) catches these and translates them into HTTP responses.  Gateway
declines and faults are never exceptions: they are FAILED results.
"""

from __future__ import annotations


class PaymentNotFound(Exception):
    """The requested payment does not exist."""


class PaymentAccessDenied(Exception):
    """The caller does not own the order the payment belongs to."""


class DuplicatePayment(Exception):
    """The order already has a payment (of any status)."""


class UnsupportedPaymentMethod(Exception):
    """No gateway is registered for the requested payment method."""

    def __init__(self, method: str) -> None:
        self.method = method
        super().__init__(f"Unsupported payment method: {method}")
