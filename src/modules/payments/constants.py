"""Payment domain constants."""

from django.db import models


class PaymentStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    SUCCESSFUL = "SUCCESSFUL", "Successful"
    FAILED = "FAILED", "Failed"


class PaymentMethod(models.TextChoices):
    """Payment methods accepted at the API boundary.

    ``bank_transfer`` is accepted by validation but has no gateway bound to
    it unless one is configured in ``PAYMENT_GATEWAYS``.
    """

    CREDIT_CARD = "credit_card", "Credit card"
    DEBIT_CARD = "debit_card", "Debit card"
    PAYPAL = "paypal", "PayPal"
    BANK_TRANSFER = "bank_transfer", "Bank transfer"


PAYMENT_METHODS: tuple[str, ...] = tuple(PaymentMethod.values)

# Request fields that must be present in ``payment_data`` per method.
METHOD_REQUIRED_FIELDS: dict[str, tuple[str, ...]] = {
    PaymentMethod.CREDIT_CARD: ("card_number",),
    PaymentMethod.DEBIT_CARD: ("card_number",),
    PaymentMethod.PAYPAL: ("paypal_email",),
    PaymentMethod.BANK_TRANSFER: (),
}

ORDER_NOT_CONFIRMED_MESSAGE = "Payments can only be processed for confirmed orders."
DUPLICATE_PAYMENT_MESSAGE = "This order already has a payment."
PAYMENT_NOT_FOUND_FOR_ORDER_MESSAGE = "No payment found for this order."

GATEWAY_TIMEOUT_MESSAGE = "Payment gateway timed out. Please try again."
GATEWAY_UNAVAILABLE_MESSAGE = "Payment gateway is unavailable. Please try again."
GATEWAY_FAULT_MESSAGE = "Payment processing failed. Please try again."
