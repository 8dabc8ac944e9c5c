"""Payment repository interface.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Optional
from uuid import UUID

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.payments.models import Payment


class IPaymentRepository(IRepository["Payment"]):
    """Repository contract for payments."""

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> Payment:
        """Insert a payment row.

        Raises ``DuplicatePayment`` when the one-payment-per-order
        constraint rejects the insert.
        """

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[Payment]:
        """Retrieve a payment with its order, or ``None``."""

    @abstractmethod
    def get_by_order_id(self, order_id: UUID) -> Optional[Payment]:
        """Retrieve the payment of an order, or ``None``."""

    @abstractmethod
    def exists_for_order(self, order_id: UUID) -> bool:
        """Return ``True`` if the order already has a payment (any status)."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet:
        """List payments with optional filters."""
