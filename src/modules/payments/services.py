"""Payment service layer (Use Cases).

``process_payment`` is the orchestrator: it locks the order, checks
ownership, status and payment existence, resolves the gateway through the
registry, calls it and records the outcome, all inside one transaction.

The gateway call happens while the order row is locked, so concurrent
attempts for the same order are serialized; the one-to-one constraint on
``Payment.order`` is the final guard (``DuplicatePayment``).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Union
from uuid import UUID

import structlog
from django.db import transaction

from modules.orders.constants import OrderStatus
from modules.orders.exceptions import (
    InvalidOrderStatus,
    OrderAccessDenied,
    OrderNotFound,
)
from modules.payments.constants import (
    DUPLICATE_PAYMENT_MESSAGE,
    ORDER_NOT_CONFIRMED_MESSAGE,
    PAYMENT_NOT_FOUND_FOR_ORDER_MESSAGE,
)
from modules.payments.events import PaymentProcessed
from modules.payments.exceptions import (
    DuplicatePayment,
    PaymentAccessDenied,
    PaymentNotFound,
)

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.payments.dtos import ProcessPaymentDTO
    from modules.payments.gateways.registry import GatewayRegistry
    from modules.payments.models import Payment
    from modules.payments.repositories.interfaces import IPaymentRepository

logger = structlog.get_logger(__name__)


class PaymentService:
    """Application service for Payment use-cases.

    Receives repositories and the gateway registry via constructor
    injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        payment_repository: IPaymentRepository,
        registry: GatewayRegistry,
    ) -> None:
        self._order_repo = order_repository
        self._payment_repo = payment_repository
        self._registry = registry

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def process_payment(self, dto: ProcessPaymentDTO) -> Payment:
        """Charge a CONFIRMED order and persist the outcome.

        A declined or faulted charge is a normal outcome: the returned
        payment is FAILED and carries the gateway's ``error_message``.

        Raises:
            OrderNotFound, OrderAccessDenied: lookup / ownership.
            InvalidOrderStatus: the order is not CONFIRMED.
            DuplicatePayment: the order already has a payment.
            UnsupportedPaymentMethod: no gateway for ``dto.payment_method``.
        """
        log = logger.bind(
            order_id=str(dto.order_id),
            user_id=dto.user_id,
            payment_method=dto.payment_method,
        )
        log.info("payment.processing_started")

        order = self._order_repo.get_for_update(str(dto.order_id))
        if not order:
            raise OrderNotFound(f"Order {dto.order_id} not found.")
        if not order.is_owned_by(dto.user_id):
            log.warning("payment.access_denied")
            raise OrderAccessDenied("You do not have permission to pay for this order.")

        if order.status != OrderStatus.CONFIRMED:
            log.warning("payment.order_not_confirmed", current_status=order.status)
            raise InvalidOrderStatus(ORDER_NOT_CONFIRMED_MESSAGE)

        if self._payment_repo.exists_for_order(order.id):
            log.warning("payment.duplicate")
            raise DuplicatePayment(DUPLICATE_PAYMENT_MESSAGE)

        gateway = self._registry.resolve(dto.payment_method)
        result = gateway.process(order, dto.payment_data)

        payment = self._payment_repo.create(
            {
                "order_id": order.id,
                "status": result.status,
                "payment_method": dto.payment_method,
                "amount": order.total_amount,
                "transaction_id": result.transaction_id,
            }
        )
        payment.add_domain_event(
            PaymentProcessed(
                aggregate_id=payment.id,
                order_id=str(order.id),
                status=str(result.status),
                payment_method=dto.payment_method,
                amount=str(payment.amount),
            )
        )
        self._payment_repo.save(payment)
        payment.error_message = result.error_message

        log.info(
            "payment.processed",
            payment_id=str(payment.id),
            status=str(payment.status),
            amount=str(payment.amount),
            error_message=result.error_message,
        )
        return payment

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_payment(self, payment_id: Union[UUID, str], user_id: int) -> Payment:
        """Retrieve a payment whose order belongs to *user_id*.

        Raises:
            PaymentNotFound, PaymentAccessDenied.
        """
        payment = self._payment_repo.get_by_id(str(payment_id))
        if not payment:
            raise PaymentNotFound("Payment not found.")
        if not payment.order.is_owned_by(user_id):
            raise PaymentAccessDenied(
                "You do not have permission to access this payment."
            )
        return payment

    def get_payment_for_order(
        self, order_id: Union[UUID, str], user_id: int
    ) -> Payment:
        """Retrieve the payment of an order owned by *user_id*.

        Raises:
            OrderNotFound, OrderAccessDenied, PaymentNotFound.
        """
        order = self._order_repo.get_by_id(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        if not order.is_owned_by(user_id):
            raise OrderAccessDenied(
                "You do not have permission to access this order's payment."
            )

        payment = self._payment_repo.get_by_order_id(order.id)
        if not payment:
            raise PaymentNotFound(PAYMENT_NOT_FOUND_FOR_ORDER_MESSAGE)
        return payment

    def list_payments(self, user_id: int) -> QuerySet:
        """Return the payments of the user's orders, newest first."""
        return self._payment_repo.list({"order__owner_id": user_id})
