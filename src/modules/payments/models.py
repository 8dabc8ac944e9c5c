"""Payment model.

Rules implemented here:
- At most one payment per order, enforced by the one-to-one relation
  (unique constraint at the database level).
- ``amount`` is a snapshot of the order total when the payment was made.
- ``transaction_id`` is the gateway reference, present only for
  successful payments and unique when present.
- FAILED payments are final: there is no retry path for the same order.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from django.db import models

from modules.core.models import BaseModel
from modules.payments.constants import PaymentMethod, PaymentStatus
from shared.domain.events import DomainEventMixin


class Payment(DomainEventMixin, BaseModel):
    """Outcome of a single payment attempt for an order.

    ``error_message`` is transient: the gateway's failure reason is handed
    back to the caller on the returned instance but is never stored.
    """

    order: models.OneToOneField = models.OneToOneField(
        "orders.Order",
        on_delete=models.PROTECT,
        related_name="payment",
    )
    status: models.CharField = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
    )
    payment_method: models.CharField = models.CharField(
        max_length=30,
        choices=PaymentMethod.choices,
    )
    amount: models.DecimalField = models.DecimalField(
        max_digits=10,
        decimal_places=2,
    )
    transaction_id: models.CharField = models.CharField(  # noqa: DJ01
        max_length=100,
        unique=True,
        null=True,
        blank=True,
        default=None,
    )

    error_message: Optional[str] = None

    class Meta:
        db_table = "payments"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="payments_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gte=Decimal("0.00")),
                name="payments_amount_non_negative",
            ),
        ]

    @property
    def is_successful(self) -> bool:
        return self.status == PaymentStatus.SUCCESSFUL

    @property
    def is_failed(self) -> bool:
        return self.status == PaymentStatus.FAILED

    def __str__(self) -> str:
        return f"Payment {self.id} [{self.status}] ({self.payment_method})"
