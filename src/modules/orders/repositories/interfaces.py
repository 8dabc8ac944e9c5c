"""Order repository interface.

Extends ``IRepository[Order]`` with methods required by the Order
aggregate: atomic creation and wholesale replacement of the item set,
status history tracking, the guarded soft delete, and the durable
"does this order have a payment" check.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional
from uuid import UUID

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.orders.models import Order, OrderStatusHistory


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root.

    The Order aggregate includes OrderItem children and
    OrderStatusHistory records.  Mutations must be atomic.
    """

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> Order:
        """Create an order with its items atomically.

        ``data`` must include ``owner_id`` and ``items`` (list of dicts with
        ``product_name``, ``quantity``, ``unit_price``).  The total is
        computed from the persisted subtotals.
        """

    @abstractmethod
    def replace_items(self, order: Order, items: List[Dict[str, Any]]) -> Order:
        """Delete the current item set, insert *items*, recompute the total.

        All three steps happen in one transaction.
        """

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve a live order with prefetched items, payment and history."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve a live order holding a row-level lock."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet:
        """List live orders with optional filters."""

    @abstractmethod
    def delete(self, order: Order) -> bool:
        """Soft-delete *order*; return ``False`` if it was already deleted."""

    @abstractmethod
    def has_payment(self, order_id: UUID) -> bool:
        """Return ``True`` if a payment row exists for the order (any status)."""

    @abstractmethod
    def add_history(
        self,
        order_id: UUID,
        status: str,
        notes: str = "",
        old_status: Optional[str] = None,
        user_id: Optional[int] = None,
    ) -> OrderStatusHistory:
        """Record a status change in the order's audit trail."""
