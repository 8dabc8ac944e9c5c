"""Order service layer (Use Cases).

Orchestrates order creation, wholesale item replacement, deletion and the
status transition engine (confirm / cancel).  All write operations are
atomic; the service defines the unit-of-work boundary.

Every command locks the order row first, then checks existence
(``OrderNotFound``) before ownership (``OrderAccessDenied``), and only then
evaluates business guards.  Payment existence is always read from the
database, never from a cached relation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union
from uuid import UUID

import structlog
from django.db import transaction

from modules.orders.constants import (
    CANCEL_NOT_ALLOWED_MESSAGE,
    CONFIRM_NOT_ALLOWED_MESSAGE,
    DELETE_NOT_ALLOWED_MESSAGE,
    ITEMS_NOT_MUTABLE_MESSAGE,
    OrderStatus,
)
from modules.orders.events import (
    OrderCancelled,
    OrderConfirmed,
    OrderCreated,
    OrderDeleted,
    OrderItemsReplaced,
)
from modules.orders.exceptions import (
    InvalidOrderStatus,
    InvalidTransition,
    OrderAccessDenied,
    OrderHasPayment,
    OrderNotFound,
)

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.orders.dtos import CreateOrderDTO, ReplaceOrderItemsDTO
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from shared.domain.events import DomainEvent

logger = structlog.get_logger(__name__)

OrderId = Union[UUID, str]


class OrderService:
    """Application service for Order use-cases.

    Receives the repository via constructor injection (DIP).
    """

    def __init__(self, order_repository: IOrderRepository) -> None:
        self._order_repo = order_repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_order(self, dto: CreateOrderDTO) -> Order:
        """Create a PENDING order owned by ``dto.owner_id``.

        Item and field validation already happened in the DTO; subtotals
        and the total are computed by the repository from the persisted
        items.
        """
        log = logger.bind(owner_id=dto.owner_id)
        log.info("order.creation_started", item_count=len(dto.items))

        order = self._order_repo.create(
            {"owner_id": dto.owner_id, "items": _item_rows(dto)}
        )
        order.add_domain_event(OrderCreated(aggregate_id=order.id))
        self._order_repo.save(order)

        self._order_repo.add_history(
            order_id=order.id,
            status=OrderStatus.PENDING,
            notes="Order created",
            user_id=dto.owner_id,
        )

        log.info(
            "order.created",
            order_id=str(order.id),
            total_amount=str(order.total_amount),
        )
        return self._order_repo.get_by_id(str(order.id)) or order

    @transaction.atomic
    def replace_items(
        self, order_id: OrderId, user_id: int, dto: ReplaceOrderItemsDTO
    ) -> Order:
        """Replace the whole item set of a mutable order.

        An order is mutable while it is not cancelled and has no payment.

        Raises:
            OrderNotFound, OrderAccessDenied, InvalidOrderStatus.
        """
        order = self._lock_owned_order(order_id, user_id)
        log = logger.bind(order_id=str(order.id), current_status=order.status)

        if order.status == OrderStatus.CANCELLED or self._order_repo.has_payment(
            order.id
        ):
            log.warning("order.items_not_mutable")
            raise InvalidOrderStatus(ITEMS_NOT_MUTABLE_MESSAGE)

        self._order_repo.replace_items(order, _item_rows(dto))
        order.add_domain_event(OrderItemsReplaced(aggregate_id=order.id))
        self._order_repo.save(order)

        log.info("order.updated", total_amount=str(order.total_amount))
        return self._order_repo.get_by_id(str(order.id)) or order

    @transaction.atomic
    def delete_order(self, order_id: OrderId, user_id: int) -> None:
        """Soft-delete an order that has no payment.

        Raises:
            OrderNotFound, OrderAccessDenied, OrderHasPayment.
        """
        order = self._lock_owned_order(order_id, user_id)
        if self._order_repo.has_payment(order.id):
            logger.warning("order.delete_conflict", order_id=str(order.id))
            raise OrderHasPayment(DELETE_NOT_ALLOWED_MESSAGE)

        order.add_domain_event(OrderDeleted(aggregate_id=order.id))
        self._order_repo.delete(order)
        logger.info("order.deleted", order_id=str(order.id))

    @transaction.atomic
    def confirm_order(self, order_id: OrderId, user_id: int) -> Order:
        """PENDING -> CONFIRMED.

        Raises:
            OrderNotFound, OrderAccessDenied, InvalidTransition.
        """
        order = self._lock_owned_order(order_id, user_id)
        if order.status != OrderStatus.PENDING:
            logger.warning(
                "order.confirm_not_allowed",
                order_id=str(order.id),
                current_status=order.status,
            )
            raise InvalidTransition(CONFIRM_NOT_ALLOWED_MESSAGE)

        return self._transition(
            order,
            OrderStatus.CONFIRMED,
            user_id=user_id,
            event=OrderConfirmed(aggregate_id=order.id),
            notes="Order confirmed",
        )

    @transaction.atomic
    def cancel_order(self, order_id: OrderId, user_id: int, notes: str = "") -> Order:
        """Cancel an order that is not cancelled yet and has no payment.

        Both failure causes are reported with the same message.

        Raises:
            OrderNotFound, OrderAccessDenied, InvalidTransition.
        """
        order = self._lock_owned_order(order_id, user_id)
        if not order.can_transition_to(
            OrderStatus.CANCELLED
        ) or self._order_repo.has_payment(order.id):
            logger.warning(
                "order.cancel_not_allowed",
                order_id=str(order.id),
                current_status=order.status,
            )
            raise InvalidTransition(CANCEL_NOT_ALLOWED_MESSAGE)

        return self._transition(
            order,
            OrderStatus.CANCELLED,
            user_id=user_id,
            event=OrderCancelled(aggregate_id=order.id),
            notes=notes or "Order cancelled",
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: OrderId, user_id: int) -> Order:
        """Retrieve a single order owned by *user_id*.

        Raises:
            OrderNotFound: the order does not exist.
            OrderAccessDenied: the order belongs to another user.
        """
        order = self._order_repo.get_by_id(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        if not order.is_owned_by(user_id):
            raise OrderAccessDenied("You do not have permission to access this order.")
        return order

    def list_orders(
        self, user_id: int, filters: Optional[Dict[str, Any]] = None
    ) -> QuerySet:
        """Return the user's orders, optionally filtered."""
        return self._order_repo.list({**(filters or {}), "owner_id": user_id})

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _lock_owned_order(self, order_id: OrderId, user_id: int) -> Order:
        order = self._order_repo.get_for_update(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        if not order.is_owned_by(user_id):
            logger.warning(
                "order.access_denied", order_id=str(order_id), user_id=user_id
            )
            raise OrderAccessDenied("You do not have permission to modify this order.")
        return order

    def _transition(
        self,
        order: Order,
        new_status: str,
        user_id: int,
        event: DomainEvent,
        notes: str,
    ) -> Order:
        old_status = order.status
        order.status = new_status
        order.add_domain_event(event)
        self._order_repo.save(order)

        self._order_repo.add_history(
            order_id=order.id,
            status=new_status,
            notes=notes,
            old_status=old_status,
            user_id=user_id,
        )

        logger.info(
            "order.status_changed",
            order_id=str(order.id),
            old_status=old_status,
            new_status=new_status,
        )
        return self._order_repo.get_by_id(str(order.id)) or order


def _item_rows(dto: ReplaceOrderItemsDTO) -> List[Dict[str, Any]]:
    return [
        {
            "product_name": item.product_name,
            "quantity": item.quantity,
            "unit_price": item.unit_price,
        }
        for item in dto.items
    ]
