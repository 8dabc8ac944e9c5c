"""Django ORM implementation of the Payment repository.

The insert runs in a savepoint so that a unique-constraint violation
(a concurrent payment for the same order) can be translated into
``DuplicatePayment`` without breaking the caller's transaction.
"""

from __future__ import annotations

from typing import Any, Dict, Optional
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import QuerySet

from modules.core.outbox import record_domain_events
from modules.payments.constants import DUPLICATE_PAYMENT_MESSAGE
from modules.payments.exceptions import DuplicatePayment
from modules.payments.models import Payment
from modules.payments.repositories.interfaces import IPaymentRepository

logger = structlog.get_logger(__name__)

OUTBOX_TOPIC = "payments"


class PaymentDjangoRepository(IPaymentRepository):
    """Concrete Payment repository backed by Django ORM."""

    def create(self, data: Dict[str, Any]) -> Payment:
        payment = Payment(
            order_id=data["order_id"],
            status=data["status"],
            payment_method=data["payment_method"],
            amount=data["amount"],
            transaction_id=data.get("transaction_id"),
        )
        try:
            with transaction.atomic():
                payment.save(force_insert=True)
        except IntegrityError as exc:
            if not Payment.objects.filter(order_id=data["order_id"]).exists():
                raise
            logger.warning(
                "payment.duplicate_rejected",
                order_id=str(data["order_id"]),
                error=str(exc),
            )
            raise DuplicatePayment(DUPLICATE_PAYMENT_MESSAGE) from exc

        logger.info(
            "payment.persisted",
            payment_id=str(payment.id),
            order_id=str(payment.order_id),
            status=payment.status,
        )
        return payment

    def get_by_id(self, id: str) -> Optional[Payment]:
        try:
            return Payment.objects.select_related("order").filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_by_order_id(self, order_id: UUID) -> Optional[Payment]:
        try:
            return (
                Payment.objects.select_related("order")
                .filter(order_id=order_id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def exists_for_order(self, order_id: UUID) -> bool:
        return Payment.objects.filter(order_id=order_id).exists()

    def list(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet:
        queryset = Payment.objects.select_related("order")
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    @transaction.atomic
    def save(self, entity: Payment) -> Payment:
        """Persist a payment and move its domain events to the outbox."""
        entity.save()
        event_count = record_domain_events(entity, topic=OUTBOX_TOPIC)
        logger.info(
            "payment.saved", payment_id=str(entity.id), event_count=event_count
        )
        return entity
