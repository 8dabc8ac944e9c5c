"""Order domain constants.

Defines status choices and valid status transitions for the order
state machine.
"""

from django.db import models


class OrderStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    CONFIRMED = "CONFIRMED", "Confirmed"
    CANCELLED = "CANCELLED", "Cancelled"


# CONFIRMED -> CANCELLED is additionally guarded: it is only allowed while
# the order has no payment (checked by OrderService.cancel_order).
VALID_TRANSITIONS: dict[str, set[str]] = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.CANCELLED},
    OrderStatus.CANCELLED: set(),
}

TERMINAL_STATES: set[str] = {OrderStatus.CANCELLED}

PRODUCT_NAME_MAX_LENGTH = 255

# Upper bound of the PositiveIntegerField quantity column on every backend.
MAX_ITEM_QUANTITY = 2_147_483_647

ORDER_NUMBER_MAX_RETRIES = 5

CONFIRM_NOT_ALLOWED_MESSAGE = (
    "Order cannot be confirmed because it is already confirmed or cancelled."
)
CANCEL_NOT_ALLOWED_MESSAGE = (
    "Order cannot be cancelled because it is already cancelled "
    "or has associated payments."
)
ITEMS_NOT_MUTABLE_MESSAGE = (
    "Order items cannot be changed because the order is cancelled "
    "or has associated payments."
)
DELETE_NOT_ALLOWED_MESSAGE = "Cannot delete order with associated payments."
