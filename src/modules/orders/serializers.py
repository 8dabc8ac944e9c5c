"""Order DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from modules.orders.constants import MAX_ITEM_QUANTITY, PRODUCT_NAME_MAX_LENGTH
from modules.orders.models import Order, OrderItem, OrderStatusHistory
from modules.payments.serializers import PaymentSummarySerializer

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class OrderItemInputSerializer(serializers.Serializer):
    """Validates a single item of an order item set."""

    product_name = serializers.CharField(max_length=PRODUCT_NAME_MAX_LENGTH)
    quantity = serializers.IntegerField(min_value=1, max_value=MAX_ITEM_QUANTITY)
    unit_price = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal("0.01")
    )


class ReplaceOrderItemsSerializer(serializers.Serializer):
    """Validates a full item-set replacement (PUT)."""

    items = OrderItemInputSerializer(many=True, allow_empty=False)


class CreateOrderSerializer(ReplaceOrderItemsSerializer):
    """Validates the order creation request payload.

    The owner is always the authenticated user; ``total_amount`` and
    ``status`` are not accepted.
    """


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class OrderItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderItem
        fields = [
            "id",
            "product_name",
            "quantity",
            "unit_price",
            "subtotal",
        ]
        read_only_fields = fields


class StatusHistorySerializer(serializers.ModelSerializer):
    """Read serializer for order status history records."""

    class Meta:
        model = OrderStatusHistory
        fields = [
            "id",
            "old_status",
            "new_status",
            "user_id",
            "notes",
            "created_at",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Read serializer for orders with nested items, payment and history.

    ``payment`` is ``null`` while the order has no payment.
    """

    items = OrderItemSerializer(many=True, read_only=True)
    status_history = StatusHistorySerializer(many=True, read_only=True)
    payment = PaymentSummarySerializer(read_only=True, allow_null=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "owner_id",
            "status",
            "total_amount",
            "created_at",
            "updated_at",
            "items",
            "payment",
            "status_history",
        ]
        read_only_fields = fields


class OrderListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for the order list."""

    items = OrderItemSerializer(many=True, read_only=True)
    payment = PaymentSummarySerializer(read_only=True, allow_null=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "status",
            "total_amount",
            "created_at",
            "items",
            "payment",
        ]
        read_only_fields = fields
