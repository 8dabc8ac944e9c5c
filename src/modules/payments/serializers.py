"""Payment DRF serializers for API input/output."""

from __future__ import annotations

from rest_framework import serializers

from modules.payments.constants import (
    METHOD_REQUIRED_FIELDS,
    PAYMENT_METHODS,
)
from modules.payments.models import Payment

REQUIRED_FIELD_MESSAGES = {
    "card_number": "Card number is required for credit card and debit card payments.",
    "paypal_email": "PayPal email is required for PayPal payments.",
}

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class CreatePaymentSerializer(serializers.Serializer):
    """Validates the payment request payload.

    Method-specific fields are required according to
    ``METHOD_REQUIRED_FIELDS``.
    """

    order_id = serializers.UUIDField()
    payment_method = serializers.ChoiceField(
        choices=PAYMENT_METHODS,
        error_messages={
            "invalid_choice": (
                f"Payment method must be one of: {', '.join(PAYMENT_METHODS)}."
            )
        },
    )
    card_number = serializers.CharField(
        required=False, allow_null=True, allow_blank=True, max_length=32
    )
    paypal_email = serializers.EmailField(
        required=False,
        allow_null=True,
        error_messages={"invalid": "PayPal email must be a valid email address."},
    )

    def validate(self, attrs: dict) -> dict:
        missing = {
            field: REQUIRED_FIELD_MESSAGES.get(field, "This field is required.")
            for field in METHOD_REQUIRED_FIELDS.get(attrs["payment_method"], ())
            if not attrs.get(field)
        }
        if missing:
            raise serializers.ValidationError(missing)
        return attrs

    def payment_data(self) -> dict:
        """Method-specific fields handed to the gateway."""
        return {
            field: self.validated_data[field]
            for field in ("card_number", "paypal_email")
            if self.validated_data.get(field)
        }


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class PaymentSummarySerializer(serializers.ModelSerializer):
    """Payment as nested inside an order representation."""

    class Meta:
        model = Payment
        fields = [
            "id",
            "status",
            "payment_method",
            "amount",
            "transaction_id",
            "created_at",
        ]
        read_only_fields = fields


class PaymentSerializer(serializers.ModelSerializer):
    """Read serializer for payments.

    ``error_message`` is only set right after processing (FAILED outcome);
    it is ``null`` when the payment is read back later.
    """

    error_message = serializers.CharField(read_only=True, allow_null=True)

    class Meta:
        model = Payment
        fields = [
            "id",
            "order_id",
            "status",
            "payment_method",
            "amount",
            "transaction_id",
            "error_message",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
