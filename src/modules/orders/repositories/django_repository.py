"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.
All write operations are wrapped in ``transaction.atomic()`` so the Order
aggregate (Order + OrderItems + total) is never observable half-written.

Concurrency control on status changes uses ``select_for_update()``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import QuerySet

from modules.core.outbox import record_domain_events
from modules.orders.models import Order, OrderItem, OrderStatusHistory
from modules.orders.repositories.interfaces import IOrderRepository
from shared.domain import money

logger = structlog.get_logger(__name__)

OUTBOX_TOPIC = "orders"


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Create / replace (aggregate root + children)
    # ------------------------------------------------------------------

    @transaction.atomic
    def create(self, data: Dict[str, Any]) -> Order:
        order = Order(owner_id=data["owner_id"])
        order.save()

        items = data.get("items", [])
        self._write_items(order, items)

        logger.info(
            "order.persisted",
            order_id=str(order.id),
            item_count=len(items),
            total_amount=str(order.total_amount),
        )
        return order

    @transaction.atomic
    def replace_items(self, order: Order, items: List[Dict[str, Any]]) -> Order:
        deleted, _ = OrderItem.objects.filter(order_id=order.id).delete()
        self._write_items(order, items)

        logger.info(
            "order.items_replaced",
            order_id=str(order.id),
            removed_count=deleted,
            item_count=len(items),
            total_amount=str(order.total_amount),
        )
        return order

    def _write_items(self, order: Order, items: List[Dict[str, Any]]) -> None:
        subtotals = []
        for item_data in items:
            item = OrderItem(
                order=order,
                product_name=item_data["product_name"],
                quantity=item_data["quantity"],
                unit_price=item_data["unit_price"],
            )
            item.save()
            subtotals.append(item.subtotal)

        order.total_amount = money.total(subtotals)
        order.save(update_fields=["total_amount"])

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with eager-loaded relations.

        ``select_related`` covers the owner FK and the optional payment
        (single JOIN); items and history are prefetched.  Returns ``None``
        for non-existent, soft-deleted or malformed IDs.
        """
        try:
            return (
                Order.objects.alive()
                .select_related("owner", "payment")
                .prefetch_related("items", "status_history")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve an order with a row-level lock (SELECT FOR UPDATE).

        No outer joins here: the payment relation is nullable and
        PostgreSQL refuses ``FOR UPDATE`` on the nullable side of a join.
        """
        try:
            return Order.objects.alive().select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet:
        queryset = (
            Order.objects.alive()
            .select_related("payment")
            .prefetch_related("items")
        )
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    def has_payment(self, order_id: UUID) -> bool:
        return Order.objects.filter(id=order_id, payment__isnull=False).exists()

    # ------------------------------------------------------------------
    # Save / Delete
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Order) -> Order:
        """Persist an order and move its domain events to the outbox."""
        entity.save()
        event_count = record_domain_events(entity, topic=OUTBOX_TOPIC)
        logger.info("order.saved", order_id=str(entity.id), event_count=event_count)
        return entity

    @transaction.atomic
    def delete(self, order: Order) -> bool:
        deleted, _ = order.delete()
        record_domain_events(order, topic=OUTBOX_TOPIC)
        logger.info("order.soft_deleted", order_id=str(order.id), deleted=deleted)
        return bool(deleted)

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    @transaction.atomic
    def add_history(
        self,
        order_id: UUID,
        status: str,
        notes: str = "",
        old_status: Optional[str] = None,
        user_id: Optional[int] = None,
    ) -> OrderStatusHistory:
        history = OrderStatusHistory(
            order_id=order_id,
            old_status=old_status,
            new_status=status,
            notes=notes,
            user_id=user_id,
        )
        history.save()

        logger.info(
            "order.history_added",
            order_id=str(order_id),
            old_status=old_status,
            new_status=status,
        )
        return history
