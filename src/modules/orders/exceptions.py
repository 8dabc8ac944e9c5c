"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations


class OrderNotFound(Exception):
    """The requested order does not exist or has been soft-deleted."""


class OrderAccessDenied(Exception):
    """The caller is not the owner of the order.

    Only raised after the order is known to exist.
    """


class InvalidOrderStatus(Exception):
    """The order's status does not allow the requested action."""


class InvalidTransition(InvalidOrderStatus):
    """A confirm/cancel transition was attempted from a state that forbids it.

    Cancellation reports "already cancelled" and "has a payment" with the
    same exception and message.
    """


class OrderHasPayment(Exception):
    """The order cannot be deleted because a payment is attached to it."""
